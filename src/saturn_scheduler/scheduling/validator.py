"""Schedule validation: the gate every generated schedule passes before it
reaches a caller, whichever engine produced it."""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from datetime import datetime, timedelta

from saturn_scheduler.errors import StructuralIntegrityError
from saturn_scheduler.models import ScheduledInterview, ScheduleRequest

log = logging.getLogger(__name__)


def _interval(entry: ScheduledInterview) -> tuple[datetime, datetime]:
    start = datetime.fromisoformat(f"{entry.date}T{entry.start_time}")
    end = datetime.fromisoformat(f"{entry.date}T{entry.end_time}")
    return start, end


def find_overlaps(entries: list[ScheduledInterview]) -> list[tuple[ScheduledInterview, ScheduledInterview]]:
    """Pairs of entries that share an interviewer and overlap in time."""
    by_interviewer: dict[str, list[tuple[datetime, datetime, ScheduledInterview]]] = defaultdict(list)
    for e in entries:
        start, end = _interval(e)
        by_interviewer[e.interviewer.id].append((start, end, e))

    overlaps = []
    for items in by_interviewer.values():
        items.sort(key=lambda t: (t[0], t[1]))
        for i, (_, end_i, e_i) in enumerate(items):
            for start_j, _, e_j in items[i + 1:]:
                if start_j >= end_i:
                    break
                overlaps.append((e_i, e_j))
    return overlaps


def count_conflicts(entries: list[ScheduledInterview]) -> int:
    try:
        return len(find_overlaps(entries))
    except ValueError:
        # unparseable times are reported by validate_schedule
        return 0


def check_schedule(request: ScheduleRequest, entries: list[ScheduledInterview]) -> list[str]:
    """Return every structural problem found (empty list when valid)."""
    problems: list[str] = []

    # (a) each candidate exactly once
    expected = {c.id: c.name for c in request.candidates}
    seen = Counter(e.candidate.id for e in entries)
    for cid, name in expected.items():
        if seen[cid] == 0:
            problems.append(f"candidate {name} ({cid}) is missing")
        elif seen[cid] > 1:
            problems.append(f"candidate {name} ({cid}) is scheduled {seen[cid]} times")
    for cid in seen:
        if cid not in expected:
            problems.append(f"unknown candidate id {cid}")

    # (b) known interviewers, well-formed times, no overlaps
    interviewer_ids = {i.id for i in request.interviewers}
    parseable: list[ScheduledInterview] = []
    for e in entries:
        if e.interviewer.id not in interviewer_ids:
            problems.append(f"unknown interviewer id {e.interviewer.id}")
        try:
            start, end = _interval(e)
        except ValueError:
            problems.append(f"entry for {e.candidate.name} has an unreadable date/time")
            continue
        if end - start != timedelta(minutes=e.duration):
            problems.append(
                f"entry for {e.candidate.name} runs {e.start_time}-{e.end_time}, "
                f"not {e.duration} minutes"
            )
        parseable.append(e)
    for a, b in find_overlaps(parseable):
        problems.append(
            f"interviewer {a.interviewer.name} is double-booked on {a.date} "
            f"({a.candidate.name} {a.start_time}, {b.candidate.name} {b.start_time})"
        )

    # (c) scores in range
    for e in entries:
        if not 0.0 <= e.matching_score <= 1.0:
            problems.append(f"score {e.matching_score} for {e.candidate.name} is outside [0, 1]")

    return problems


def validate_schedule(request: ScheduleRequest, entries: list[ScheduledInterview]) -> None:
    problems = check_schedule(request, entries)
    if problems:
        log.error("Schedule rejected with %d problem(s)", len(problems))
        raise StructuralIntegrityError(problems)
