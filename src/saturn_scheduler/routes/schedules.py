"""Schedule generation route."""

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from saturn_scheduler.auth import get_current_user
from saturn_scheduler.models import GenerateScheduleRequest
from saturn_scheduler.routes.settings import get_config
from saturn_scheduler.scheduling.service import generate_schedule

router = APIRouter()

@router.post("/generate")
async def generate(req: GenerateScheduleRequest, current_user: dict = Depends(get_current_user)):
    cfg = get_config()
    result = await asyncio.to_thread(generate_schedule, cfg, req)
    return {
        "success": True,
        "schedule": result.model_dump(mode="json"),
        "request_info": {
            "candidate_count": result.metadata.total_candidates,
            "interviewer_count": result.metadata.total_interviewers,
            "processed_at": datetime.now(timezone.utc).isoformat(),
            "user_id": current_user["email"],
        },
    }
