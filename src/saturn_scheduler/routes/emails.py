"""Email routes: offer and rejection drafting."""

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from saturn_scheduler.agents.communication import generate_email
from saturn_scheduler.auth import get_current_user
from saturn_scheduler.models import EmailGenerateRequest
from saturn_scheduler.routes.settings import get_config

router = APIRouter()

@router.post("/generate")
async def generate(req: EmailGenerateRequest, current_user: dict = Depends(get_current_user)):
    email = await asyncio.to_thread(generate_email, get_config(), req)
    return {
        "success": True,
        "email": email.model_dump(mode="json"),
        "metadata": {
            "candidate_name": req.candidate_name.strip(),
            "job_role": req.job_role.strip(),
            "interviewer_name": req.interviewer_name.strip(),
            "email_type": email.type.value,
            "user_id": current_user["email"],
            "generated_at": datetime.now(timezone.utc).isoformat(),
        },
    }
