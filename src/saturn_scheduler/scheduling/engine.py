"""Matching engines. Each turns a ScheduleRequest into a ScheduleResult.

``ConstraintMatchingEngine`` is the deterministic assignment engine used by
default. ``LLMMatchingEngine`` (see ``oracle.py``) sits behind the same
interface so callers never care which one produced a schedule.
"""

from __future__ import annotations

import logging
import math
import time as _time
from datetime import date

from saturn_scheduler.config import Config
from saturn_scheduler.errors import CapacityExceededError, ConfigurationError, MatchingTimeoutError
from saturn_scheduler.models import (
    ScheduledInterview,
    ScheduleMetadata,
    ScheduleRequest,
    ScheduleResult,
)
from saturn_scheduler.scheduling import scoring
from saturn_scheduler.scheduling.analytics import compute_analytics, recommendations
from saturn_scheduler.scheduling.slots import (
    InterviewerCalendar,
    WorkingHours,
    business_days,
    candidate_day_order,
    end_time,
    horizon_start,
    parse_preferred_date,
)

log = logging.getLogger(__name__)


class MatchingEngine:
    """Interface: turn a ScheduleRequest into a ScheduleResult."""

    name = "base"

    def generate(self, request: ScheduleRequest, *, deadline: float | None = None) -> ScheduleResult:
        raise NotImplementedError


def check_deadline(deadline: float | None) -> None:
    if deadline is not None and _time.monotonic() > deadline:
        raise MatchingTimeoutError("Matching did not finish within the allowed time")


class ConstraintMatchingEngine(MatchingEngine):
    name = "Saturn Principle (constraint)"

    def __init__(
        self,
        hours: WorkingHours | None = None,
        horizon_days: int = 14,
        today: date | None = None,
    ) -> None:
        self.hours = hours or WorkingHours()
        self.horizon_days = horizon_days
        self.today = today

    @classmethod
    def from_config(cls, cfg: Config) -> ConstraintMatchingEngine:
        try:
            hours = WorkingHours.parse(
                cfg.work_day_start, cfg.work_day_end, cfg.buffer_minutes, cfg.max_interviews_per_day,
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid working hours: {e}") from None
        return cls(hours=hours, horizon_days=cfg.horizon_days)

    def start_date(self, request: ScheduleRequest) -> date:
        prefs = request.preferences
        return horizon_start(prefs.start_date, prefs.timezone, self.today)

    def generate(self, request: ScheduleRequest, *, deadline: float | None = None) -> ScheduleResult:
        prefs = request.preferences
        candidates = list(request.candidates)
        interviewers = list(request.interviewers)

        slot_grid = self.hours.slot_starts(prefs.duration)
        days = business_days(self.start_date(request), self.horizon_days)
        calendars = [InterviewerCalendar(i.id, slot_grid) for i in interviewers]

        job_tokens = scoring.skill_tokens(request.job_requirements)
        job_words = set(scoring.words(request.job_requirements))
        compat = {
            (ci, ii): scoring.compatibility(c, i, job_tokens, job_words)
            for ci, c in enumerate(candidates)
            for ii, i in enumerate(interviewers)
        }

        fair_share = math.ceil(len(candidates) / len(interviewers))
        order = sorted(
            range(len(candidates)),
            key=lambda ci: (-max(compat[ci, ii].score for ii in range(len(interviewers))), ci),
        )

        placed: dict[int, ScheduledInterview] = {}
        unplaceable = []
        for ci in order:
            check_deadline(deadline)
            candidate = candidates[ci]
            day_order = candidate_day_order(days, parse_preferred_date(candidate.preferred_date))
            ranked = sorted(
                range(len(interviewers)),
                key=lambda ii: (
                    calendars[ii].load >= fair_share,
                    -compat[ci, ii].score,
                    calendars[ii].load,
                    ii,
                ),
            )
            for ii in ranked:
                slot = calendars[ii].earliest_open(day_order)
                if slot is None:
                    continue
                day, start = slot
                calendars[ii].book(day, start)
                interviewer = interviewers[ii]
                c = compat[ci, ii]
                placed[ci] = ScheduledInterview(
                    candidate=candidate,
                    interviewer=interviewer,
                    date=day.isoformat(),
                    start_time=start.strftime("%H:%M"),
                    end_time=end_time(start, prefs.duration).strftime("%H:%M"),
                    duration=prefs.duration,
                    timezone=prefs.timezone,
                    meeting_room=f"Virtual Room {ii + 1}",
                    matching_score=c.score,
                    matching_reason=scoring.rationale(candidate, interviewer, c, len(job_tokens)),
                    skill_gaps=c.skill_gaps,
                    behavioral_question=scoring.behavioral_question(candidate, ci),
                    notes=f"Assigned by {self.name}",
                )
                break
            else:
                unplaceable.append({"id": candidate.id, "name": candidate.name, "email": candidate.email})

        if unplaceable:
            log.warning("%d of %d candidates could not be placed", len(unplaceable), len(candidates))
            raise CapacityExceededError(unplaceable)

        entries = sorted(
            placed.values(),
            key=lambda e: (e.date, e.start_time, e.interviewer.name, e.candidate.name),
        )
        analytics = compute_analytics(entries, interviewers, len(slot_grid))
        log.info(
            "Placed %d candidates across %d interviewers (mean score %.1f)",
            len(entries), len(interviewers), analytics.optimization_score,
        )
        return ScheduleResult(
            metadata=ScheduleMetadata(
                total_candidates=len(candidates),
                total_interviewers=len(interviewers),
                scheduling_algorithm=self.name,
                timezone=prefs.timezone,
                duration=prefs.duration,
            ),
            schedule=entries,
            analytics=analytics,
            recommendations=recommendations(entries, analytics),
        )


def get_engine(cfg: Config) -> MatchingEngine:
    if cfg.matching_backend == "llm":
        from saturn_scheduler.scheduling.oracle import LLMMatchingEngine
        return LLMMatchingEngine(cfg)
    return ConstraintMatchingEngine.from_config(cfg)
