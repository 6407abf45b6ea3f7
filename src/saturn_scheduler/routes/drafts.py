"""Form draft routes: the in-progress scheduling form for the current user."""

from fastapi import APIRouter, Depends

from saturn_scheduler import drafts
from saturn_scheduler.auth import get_current_user
from saturn_scheduler.models import FormDraftUpdate

router = APIRouter()


@router.get("")
async def get_draft(current_user: dict = Depends(get_current_user)):
    return drafts.load_draft(current_user["id"]).model_dump(mode="json")


@router.put("")
async def put_draft(req: FormDraftUpdate, current_user: dict = Depends(get_current_user)):
    updates = req.model_dump(mode="json", exclude_unset=True)
    return drafts.save_draft(current_user["id"], updates).model_dump(mode="json")


@router.delete("")
async def delete_draft(current_user: dict = Depends(get_current_user)):
    drafts.clear_draft(current_user["id"])
    return {"status": "ok"}
