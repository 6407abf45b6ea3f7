"""Tests for the schedule validation gate."""

from __future__ import annotations

import pytest

from helpers import MONDAY, make_candidates, make_interviewers, make_request
from saturn_scheduler.errors import StructuralIntegrityError
from saturn_scheduler.models import Interviewer, ScheduledInterview
from saturn_scheduler.scheduling.validator import (
    check_schedule,
    count_conflicts,
    find_overlaps,
    validate_schedule,
)


def _entry(candidate, interviewer, start="09:00", end="10:00", score=0.5, date=MONDAY):
    return ScheduledInterview(
        candidate=candidate,
        interviewer=interviewer,
        date=date,
        start_time=start,
        end_time=end,
        matching_score=score,
    )


@pytest.fixture
def people():
    return make_candidates(2), make_interviewers()


def test_valid_schedule_passes(people):
    cands, ivs = people
    req = make_request(cands, ivs)
    entries = [_entry(cands[0], ivs[0]), _entry(cands[1], ivs[0], "10:15", "11:15")]
    assert check_schedule(req, entries) == []
    validate_schedule(req, entries)


def test_overlap_detected(people):
    cands, ivs = people
    entries = [_entry(cands[0], ivs[0]), _entry(cands[1], ivs[0], "09:30", "10:30")]
    assert len(find_overlaps(entries)) == 1
    assert count_conflicts(entries) == 1
    problems = check_schedule(make_request(cands, ivs), entries)
    assert any("double-booked" in p for p in problems)


def test_back_to_back_is_not_an_overlap(people):
    cands, ivs = people
    entries = [_entry(cands[0], ivs[0]), _entry(cands[1], ivs[0], "10:00", "11:00")]
    assert find_overlaps(entries) == []


def test_same_time_different_interviewers_is_fine(people):
    cands, ivs = people
    entries = [_entry(cands[0], ivs[0]), _entry(cands[1], ivs[1])]
    assert count_conflicts(entries) == 0


def test_missing_and_duplicate_candidates(people):
    cands, ivs = people
    entries = [_entry(cands[0], ivs[0]), _entry(cands[0], ivs[1])]
    problems = check_schedule(make_request(cands, ivs), entries)
    assert any("missing" in p for p in problems)
    assert any("2 times" in p for p in problems)


def test_unknown_ids(people):
    cands, ivs = people
    stranger = Interviewer(id="zz", name="Stranger", email="s@x.com")
    extra = make_candidates(3)[2]
    entries = [_entry(cands[0], ivs[0]), _entry(cands[1], stranger), _entry(extra, ivs[1], "12:00", "13:00")]
    problems = check_schedule(make_request(cands, ivs), entries)
    assert any("unknown interviewer id zz" in p for p in problems)
    assert any("unknown candidate id c3" in p for p in problems)


def test_score_out_of_range(people):
    cands, ivs = people
    entries = [_entry(cands[0], ivs[0], score=1.5), _entry(cands[1], ivs[1])]
    with pytest.raises(StructuralIntegrityError) as exc:
        validate_schedule(make_request(cands, ivs), entries)
    assert exc.value.status_code == 500
    assert any("outside [0, 1]" in p for p in exc.value.problems)


def test_wrong_duration_and_bad_times(people):
    cands, ivs = people
    entries = [_entry(cands[0], ivs[0], "09:00", "09:45"), _entry(cands[1], ivs[1], "nine", "ten")]
    problems = check_schedule(make_request(cands, ivs), entries)
    assert any("not 60 minutes" in p for p in problems)
    assert any("unreadable" in p for p in problems)
    assert count_conflicts(entries) == 0
