"""Interviewer directory: add/remove/lookup plus a live snapshot feed."""

from __future__ import annotations

import logging
from datetime import datetime

from saturn_scheduler import database as db
from saturn_scheduler.errors import InvalidRequestError
from saturn_scheduler.live import Subscription, hub
from saturn_scheduler.models import Interviewer, InterviewerCreate

log = logging.getLogger(__name__)

INTERVIEWERS_TOPIC = "interviewers"


def add_interviewer(req: InterviewerCreate) -> Interviewer:
    name, email = req.name.strip(), req.email.strip()
    if not name or not email:
        raise InvalidRequestError("Interviewer name and email are required")

    interviewer = Interviewer(name=name, email=email, specialization=req.specialization)
    db.insert_interviewer(_to_row(interviewer))
    log.info("Added interviewer %s (%s)", interviewer.name, interviewer.id)
    _publish()
    return interviewer


def remove_interviewer(interviewer_id: str) -> bool:
    removed = db.delete_interviewer(interviewer_id)
    if removed:
        log.info("Removed interviewer %s", interviewer_id)
        _publish()
    return removed


def get_interviewer(interviewer_id: str) -> Interviewer | None:
    row = db.get_interviewer(interviewer_id)
    return Interviewer(**row) if row else None


def list_interviewers(order: str = "created") -> list[Interviewer]:
    return [Interviewer(**r) for r in db.list_interviewers(order=order)]


def resolve_interviewers(interviewer_ids: list[str]) -> list[Interviewer]:
    """Resolve ids to records in request order; unknown ids are dropped."""
    resolved: list[Interviewer] = []
    seen: set[str] = set()
    for iid in interviewer_ids:
        if iid in seen:
            continue
        seen.add(iid)
        interviewer = get_interviewer(iid)
        if interviewer is None:
            log.warning("Interviewer %s not found, skipping", iid)
            continue
        resolved.append(interviewer)
    log.info("Resolved %d of %d interviewer id(s)", len(resolved), len(seen))
    return resolved


def snapshot(order: str = "created") -> list[dict]:
    return [i.model_dump(mode="json") for i in list_interviewers(order=order)]


def subscribe_interviewers() -> Subscription:
    return hub.subscribe(INTERVIEWERS_TOPIC, snapshot)


def _publish() -> None:
    if hub.has_subscribers(INTERVIEWERS_TOPIC):
        hub.publish(INTERVIEWERS_TOPIC, snapshot())


def _to_row(interviewer: Interviewer) -> dict:
    row = interviewer.model_dump(mode="json")
    row["updated_at"] = row.get("updated_at") or datetime.now().isoformat()
    return row
