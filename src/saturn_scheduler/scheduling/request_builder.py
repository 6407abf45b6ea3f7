"""Join parsed candidates, resolved interviewers and the job text into the
immutable ``ScheduleRequest`` an engine consumes."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from saturn_scheduler.errors import (
    InvalidRequestError,
    MissingJobDescriptionError,
    NoValidCandidatesError,
    NoValidInterviewersError,
)
from saturn_scheduler.models import Candidate, Interviewer, SchedulePreferences, ScheduleRequest


def require_job_requirements(text: str | None) -> str:
    text = (text or "").strip()
    if not text:
        raise MissingJobDescriptionError("Job description is required")
    return text


def _check_timezone(name: str) -> None:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidRequestError(f"Unknown timezone: {name}") from None


def _check_start_date(value: str | None) -> None:
    if value is None:
        return
    try:
        date.fromisoformat(value)
    except ValueError:
        raise InvalidRequestError(f"start_date must be an ISO date (YYYY-MM-DD), got {value!r}") from None


def build_schedule_request(
    candidates: Sequence[Candidate],
    interviewers: Sequence[Interviewer],
    job_requirements: str,
    preferences: SchedulePreferences | None = None,
) -> ScheduleRequest:
    if not candidates:
        raise NoValidCandidatesError("No valid candidates found in CSV")
    if not interviewers:
        raise NoValidInterviewersError("No valid interviewers selected")
    preferences = preferences or SchedulePreferences()
    _check_timezone(preferences.timezone)
    _check_start_date(preferences.start_date)
    return ScheduleRequest(
        candidates=tuple(candidates),
        interviewers=tuple(interviewers),
        job_requirements=require_job_requirements(job_requirements),
        preferences=preferences,
    )
