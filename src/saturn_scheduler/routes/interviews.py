"""Interview routes: confirm a generated schedule, track status, note threads."""

import json
import logging
import sqlite3
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sse_starlette.sse import EventSourceResponse

from saturn_scheduler import database as db
from saturn_scheduler import notes
from saturn_scheduler.auth import get_current_user
from saturn_scheduler.errors import InvalidRequestError
from saturn_scheduler.models import (
    ConfirmScheduleRequest,
    InterviewStatus,
    InterviewStatusUpdate,
    NoteCreate,
    ScheduledInterview,
)
from saturn_scheduler.scheduling.validator import find_overlaps

log = logging.getLogger(__name__)

router = APIRouter()


def _require_interview(interview_id: str) -> dict:
    interview = db.get_interview(interview_id)
    if not interview:
        raise HTTPException(status_code=404, detail="Interview not found")
    return interview


@router.post("/confirm")
async def confirm_schedule(req: ConfirmScheduleRequest, current_user: dict = Depends(get_current_user)):
    """Persist a generated schedule; every entry is saved as confirmed.

    The batch is checked against itself and against interviews already on
    file before anything is written, then saved in one transaction.
    """
    if not req.schedule:
        raise InvalidRequestError("Schedule is empty")
    ids = [entry.id for entry in req.schedule]
    if len(set(ids)) != len(ids):
        raise InvalidRequestError("Schedule lists the same interview more than once")
    already = [i for i in ids if db.get_interview(i)]
    if already:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{len(already)} interview(s) already confirmed: {', '.join(already)}",
        )

    booked = _booked_interviews({entry.interviewer.id for entry in req.schedule})
    try:
        clashes = [
            (a, b) for a, b in find_overlaps(req.schedule + booked)
            if a.id in ids or b.id in ids
        ]
    except ValueError:
        raise InvalidRequestError("Schedule contains an unreadable date or time") from None
    if clashes:
        a, b = clashes[0]
        raise InvalidRequestError(
            f"{len(clashes)} interviewer conflict(s), e.g. {a.interviewer.name} on {a.date} "
            f"at {a.start_time} and {b.start_time}"
        )

    now = datetime.now().isoformat()
    rows = []
    for entry in req.schedule:
        row = entry.model_dump(mode="json")
        row.update(
            status=InterviewStatus.CONFIRMED.value,
            job_role=req.job_role,
            created_by=current_user["email"],
            created_at=now,
            updated_at=now,
        )
        rows.append(row)
    try:
        db.insert_interviews(rows)
    except sqlite3.IntegrityError:
        # confirmed concurrently by another request
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Interview already confirmed") from None
    log.info("Confirmed %d interview(s) for %s", len(rows), current_user["email"])
    return {"success": True, "count": len(rows), "interview_ids": ids}


def _booked_interviews(interviewer_ids: set[str]) -> list[ScheduledInterview]:
    """Stored, not cancelled interviews of the given interviewers."""
    booked = []
    for interviewer_id in sorted(interviewer_ids):
        for row in db.list_interviews(interviewer_id=interviewer_id):
            if row["status"] != InterviewStatus.CANCELLED.value:
                booked.append(ScheduledInterview.model_validate(row))
    return booked


@router.get("")
async def list_interviews_route(interviewer_id: str | None = Query(None)):
    return db.list_interviews(interviewer_id=interviewer_id)


@router.get("/{interview_id}")
async def get_interview_route(interview_id: str):
    return _require_interview(interview_id)


@router.patch("/{interview_id}/status")
async def update_status(interview_id: str, req: InterviewStatusUpdate):
    _require_interview(interview_id)
    db.update_interview(interview_id, {"status": req.status.value, "updated_at": datetime.now().isoformat()})
    return db.get_interview(interview_id)


# ── Notes ──────────────────────────────────────────────────────────────────

@router.get("/{interview_id}/notes")
async def list_notes_route(interview_id: str):
    _require_interview(interview_id)
    return notes.snapshot(interview_id)


@router.post("/{interview_id}/notes")
async def add_note_route(interview_id: str, req: NoteCreate, current_user: dict = Depends(get_current_user)):
    _require_interview(interview_id)
    note = notes.add_note(interview_id, req.content, current_user)
    return note.model_dump()


@router.get("/{interview_id}/notes/stream")
async def stream_notes(interview_id: str, request: Request):
    _require_interview(interview_id)
    sub = notes.subscribe_notes(interview_id)

    async def event_generator():
        try:
            async for snapshot in sub:
                if await request.is_disconnected():
                    break
                yield {"event": "notes", "data": json.dumps(snapshot)}
        finally:
            sub.close()

    return EventSourceResponse(event_generator())
