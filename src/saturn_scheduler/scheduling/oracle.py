"""LLM-backed matching engine.

The model proposes the assignment; ids are mapped back onto the request's own
candidate and interviewer snapshots and the analytics are recomputed locally,
so nothing the model claims about workload or conflicts is trusted.
"""

from __future__ import annotations

import json
import logging
import time as _time
from typing import Any

from saturn_scheduler.config import Config
from saturn_scheduler.errors import (
    MatchingTimeoutError,
    StructuralIntegrityError,
    UpstreamServiceError,
)
from saturn_scheduler.llm import chat_json, require_api_key
from saturn_scheduler.models import (
    ScheduledInterview,
    ScheduleMetadata,
    ScheduleRequest,
    ScheduleResult,
)
from saturn_scheduler.prompts import SCHEDULE_SYSTEM
from saturn_scheduler.scheduling.analytics import compute_analytics, recommendations
from saturn_scheduler.scheduling.engine import MatchingEngine, check_deadline
from saturn_scheduler.scheduling.scoring import MAX_SKILL_GAPS
from saturn_scheduler.scheduling.slots import WorkingHours, business_days, horizon_start

log = logging.getLogger(__name__)


def _is_timeout(exc: Exception) -> bool:
    from litellm.exceptions import Timeout

    return isinstance(exc, (Timeout, TimeoutError))


class LLMMatchingEngine(MatchingEngine):
    name = "Saturn Principle (LLM)"

    def __init__(self, cfg: Config) -> None:
        self.cfg = cfg
        self.hours = WorkingHours.parse(
            cfg.work_day_start, cfg.work_day_end, cfg.buffer_minutes, cfg.max_interviews_per_day,
        )

    def build_prompt(self, request: ScheduleRequest) -> str:
        prefs = request.preferences
        start = horizon_start(prefs.start_date, prefs.timezone)
        days = business_days(start, self.cfg.horizon_days)
        payload = {
            "candidates": [c.model_dump() for c in request.candidates],
            "interviewers": [
                {
                    "id": i.id,
                    "name": i.name,
                    "email": i.email,
                    "specialization": i.specialization_label,
                }
                for i in request.interviewers
            ],
            "parameters": {
                "duration_minutes": prefs.duration,
                "timezone": prefs.timezone,
                "working_hours": f"{self.hours.start:%H:%M}-{self.hours.end:%H:%M}",
                "buffer_minutes": self.hours.buffer_minutes,
                "max_interviews_per_interviewer_per_day": self.hours.max_per_day,
                "available_dates": [d.isoformat() for d in days],
            },
        }
        return (
            f"## Job Description\n{request.job_requirements}\n\n"
            f"## Scheduling Input\n{json.dumps(payload, indent=2)}\n\n"
            "Build the interview schedule as JSON."
        )

    def _call(self, request: ScheduleRequest, deadline: float | None) -> dict:
        timeout = self.cfg.matching_timeout_seconds
        if deadline is not None:
            timeout = max(1.0, deadline - _time.monotonic())
        try:
            data = chat_json(
                self.cfg,
                system=SCHEDULE_SYSTEM,
                messages=[{"role": "user", "content": self.build_prompt(request)}],
                temperature=0.2,
                timeout=timeout,
            )
        except Exception as e:
            if _is_timeout(e):
                raise MatchingTimeoutError(f"{self.cfg.llm_provider} did not answer within {timeout:.0f}s") from e
            log.error("Schedule LLM call failed: %s", e)
            raise UpstreamServiceError(f"Failed to generate schedule: {e}") from e

        if isinstance(data, list):
            data = {"schedule": data}
        if not isinstance(data, dict) or not isinstance(data.get("schedule"), list):
            raise UpstreamServiceError("AI response did not contain a schedule array")
        return data

    def _to_entries(self, request: ScheduleRequest, raw: list[Any]) -> list[ScheduledInterview]:
        candidates = {c.id: c for c in request.candidates}
        interviewers = {i.id: i for i in request.interviewers}
        prefs = request.preferences
        problems: list[str] = []
        entries: list[ScheduledInterview] = []

        for n, item in enumerate(raw, 1):
            if not isinstance(item, dict):
                problems.append(f"entry {n} is not an object")
                continue
            candidate = candidates.get(str(item.get("candidate_id", "")))
            interviewer = interviewers.get(str(item.get("interviewer_id", "")))
            if candidate is None:
                problems.append(f"entry {n} names unknown candidate id {item.get('candidate_id')!r}")
            if interviewer is None:
                problems.append(f"entry {n} names unknown interviewer id {item.get('interviewer_id')!r}")
            if candidate is None or interviewer is None:
                continue
            try:
                score = float(item.get("matching_score", 0.0))
            except (TypeError, ValueError):
                problems.append(f"entry {n} has a non-numeric matching score")
                continue
            gaps = item.get("skill_gaps") or []
            entries.append(ScheduledInterview(
                candidate=candidate,
                interviewer=interviewer,
                date=str(item.get("date", "")),
                start_time=str(item.get("start_time", "")),
                end_time=str(item.get("end_time", "")),
                duration=prefs.duration,
                timezone=prefs.timezone,
                meeting_room=str(item.get("meeting_room") or "Virtual Room"),
                matching_score=score,
                matching_reason=str(item.get("matching_reason", "")),
                skill_gaps=[str(g) for g in gaps][:MAX_SKILL_GAPS] if isinstance(gaps, list) else [],
                behavioral_question=str(item.get("behavioral_question", "")),
                notes=f"Assigned by {self.name}",
            ))

        if problems:
            log.error("LLM schedule referenced %d bad entries", len(problems))
            raise StructuralIntegrityError(problems)
        return entries

    def generate(self, request: ScheduleRequest, *, deadline: float | None = None) -> ScheduleResult:
        require_api_key(self.cfg)
        data = self._call(request, deadline)
        check_deadline(deadline)

        entries = self._to_entries(request, data["schedule"])
        entries.sort(key=lambda e: (e.date, e.start_time, e.interviewer.name, e.candidate.name))
        analytics = compute_analytics(
            entries, request.interviewers, self.hours.daily_capacity(request.preferences.duration),
        )
        recs = [str(r) for r in data.get("recommendations") or [] if str(r).strip()]
        log.info("LLM placed %d candidates across %d interviewers", len(entries), len(request.interviewers))
        return ScheduleResult(
            metadata=ScheduleMetadata(
                total_candidates=len(request.candidates),
                total_interviewers=len(request.interviewers),
                scheduling_algorithm=self.name,
                timezone=request.preferences.timezone,
                duration=request.preferences.duration,
            ),
            schedule=entries,
            analytics=analytics,
            recommendations=recs or recommendations(entries, analytics),
        )
