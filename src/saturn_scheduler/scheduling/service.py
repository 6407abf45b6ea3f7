"""Schedule generation pipeline.

roster text -> candidates -> interviewers -> ScheduleRequest -> engine ->
validated ScheduleResult. Every stage raises a SchedulerError subclass, so
callers only ever see the error envelope or a schedule that passed the gate.
"""

from __future__ import annotations

import logging
import time

from saturn_scheduler import directory
from saturn_scheduler.config import Config
from saturn_scheduler.errors import InvalidRequestError, NoValidInterviewersError
from saturn_scheduler.models import GenerateScheduleRequest, SchedulePreferences, ScheduleResult
from saturn_scheduler.scheduling.engine import MatchingEngine, get_engine
from saturn_scheduler.scheduling.request_builder import (
    build_schedule_request,
    require_job_requirements,
)
from saturn_scheduler.scheduling.validator import validate_schedule
from saturn_scheduler.tools.csv_parser import parse_candidates

log = logging.getLogger(__name__)


def generate_schedule(
    cfg: Config,
    payload: GenerateScheduleRequest,
    engine: MatchingEngine | None = None,
) -> ScheduleResult:
    if not payload.csv_data.strip() or not payload.interviewer_ids:
        raise InvalidRequestError("CSV data and interviewer IDs are required")
    job_requirements = require_job_requirements(payload.job_description)

    candidates = parse_candidates(payload.csv_data)
    interviewers = directory.resolve_interviewers(payload.interviewer_ids)
    if not interviewers:
        raise NoValidInterviewersError("No valid interviewers found for the given IDs")
    cfg.require_valid()
    preferences = payload.preferences
    if "preferences" not in payload.model_fields_set:
        preferences = SchedulePreferences(duration=cfg.default_duration, timezone=cfg.default_timezone)
    request = build_schedule_request(candidates, interviewers, job_requirements, preferences)
    log.info(
        "Generating schedule: %d candidates, %d interviewers, %d min slots (%s)",
        len(request.candidates), len(request.interviewers),
        request.preferences.duration, request.preferences.timezone,
    )

    engine = engine or get_engine(cfg)
    deadline = time.monotonic() + cfg.matching_timeout_seconds
    started = time.monotonic()
    result = engine.generate(request, deadline=deadline)
    validate_schedule(request, result.schedule)

    log.info(
        "Schedule ready via %s in %.2fs (optimization %.1f)",
        engine.name, time.monotonic() - started, result.analytics.optimization_score,
    )
    return result
