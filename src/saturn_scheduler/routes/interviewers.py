"""Interviewer directory routes, including the live SSE feed."""

import json

from fastapi import APIRouter, HTTPException, Query, Request
from sse_starlette.sse import EventSourceResponse

from saturn_scheduler import directory
from saturn_scheduler.models import InterviewerCreate

router = APIRouter()


@router.get("")
async def list_interviewers_route(order: str = Query("created", pattern="^(created|name)$")):
    return directory.snapshot(order=order)


@router.post("")
async def create_interviewer(req: InterviewerCreate):
    interviewer = directory.add_interviewer(req)
    return interviewer.model_dump(mode="json")


@router.get("/stream")
async def stream_interviewers(request: Request):
    """Full directory snapshot on connect, then one per add/remove."""
    sub = directory.subscribe_interviewers()

    async def event_generator():
        try:
            async for snapshot in sub:
                if await request.is_disconnected():
                    break
                yield {"event": "interviewers", "data": json.dumps(snapshot)}
        finally:
            sub.close()

    return EventSourceResponse(event_generator())


@router.get("/{interviewer_id}")
async def get_interviewer_route(interviewer_id: str):
    interviewer = directory.get_interviewer(interviewer_id)
    if not interviewer:
        raise HTTPException(status_code=404, detail="Interviewer not found")
    return interviewer.model_dump(mode="json")


@router.delete("/{interviewer_id}")
async def delete_interviewer_route(interviewer_id: str):
    if not directory.remove_interviewer(interviewer_id):
        raise HTTPException(status_code=404, detail="Interviewer not found")
    return {"status": "ok"}
