"""Form draft persistence: the in-progress scheduling form, per user.

Drafts are stored as one JSON document under a fixed storage key. Uploaded
file content is never stored, only its filename. Older payloads are migrated
on load; unreadable ones fall back to an empty draft.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from saturn_scheduler import database as db
from saturn_scheduler.models import DRAFT_SCHEMA_VERSION, FormDraft

log = logging.getLogger(__name__)

DRAFT_STORAGE_KEY = "saturn-scheduler-form-data"

# Keys that would carry file content; they are never persisted.
_FILE_KEYS = ("csvFile", "csv_file", "csv_data", "csvData")

# Version 1 drafts used camelCase keys.
_V1_KEYS = {
    "csvFileName": "csv_file_name",
    "jobDescription": "job_description",
    "selectedInterviewers": "selected_interviewers",
    "scheduleResults": "schedule_results",
    "lastSaved": "last_saved",
}


def migrate(payload: dict[str, Any]) -> dict[str, Any]:
    data = {k: v for k, v in payload.items() if k not in _FILE_KEYS}
    version = data.get("version", 1)
    if version < 2:
        data = {_V1_KEYS.get(k, k): v for k, v in data.items()}
    data["version"] = DRAFT_SCHEMA_VERSION
    return data


def load_draft(user_id: str) -> FormDraft:
    raw = db.get_form_draft(user_id, DRAFT_STORAGE_KEY)
    if raw is None:
        return FormDraft()
    try:
        return FormDraft(**migrate(json.loads(raw)))
    except (json.JSONDecodeError, ValidationError, TypeError, AttributeError) as e:
        log.warning("Discarding unreadable form draft for user %s: %s", user_id, e)
        return FormDraft()


def save_draft(user_id: str, updates: dict[str, Any]) -> FormDraft:
    """Merge ``updates`` into the stored draft and stamp ``last_saved``."""
    current = load_draft(user_id).model_dump(mode="json")
    for key, value in updates.items():
        if key in _FILE_KEYS:
            continue
        # null clears the field back to its empty value
        if value is None and key in FormDraft.model_fields:
            value = FormDraft.model_fields[key].get_default(call_default_factory=True)
        current[key] = value
    current["last_saved"] = datetime.now().isoformat()
    draft = FormDraft(**current)
    db.put_form_draft(user_id, DRAFT_STORAGE_KEY, draft.model_dump_json())
    return draft


def clear_draft(user_id: str) -> None:
    db.delete_form_draft(user_id, DRAFT_STORAGE_KEY)
