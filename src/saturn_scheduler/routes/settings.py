"""Settings routes: provider keys, matching engine knobs, request defaults.

Values saved through ``PUT /api/settings`` live in the SQLite ``settings``
table and take precedence over the environment.
"""

import logging
import os
from dataclasses import asdict, fields

from fastapi import APIRouter

from saturn_scheduler.config import Config, load_config_from_env
from saturn_scheduler.database import get_settings, put_settings
from saturn_scheduler.errors import InvalidRequestError
from saturn_scheduler.models import Settings

log = logging.getLogger(__name__)

router = APIRouter()

# Config is declared under postponed annotations, so field types are strings
_COERCE = {"int": int, "float": float}


def _build_config() -> Config:
    stored = get_settings()
    merged = asdict(load_config_from_env())
    # An unset LLM_MODEL must stay empty so a stored provider picks its own default
    merged["llm_model"] = os.getenv("LLM_MODEL", "")
    for f in fields(Config):
        if f.name not in stored:
            continue
        try:
            merged[f.name] = _COERCE.get(f.type, str)(stored[f.name])
        except ValueError:
            log.warning("Ignoring unreadable stored setting %s=%r", f.name, stored[f.name])
    return Config(**merged)


def get_config() -> Config:
    """Active config for routes and the CLI."""
    return _build_config()


@router.get("/setup-status")
async def setup_status():
    cfg = _build_config()
    has_key = bool(cfg.llm_api_key)
    return {
        "llm_configured": has_key and bool(cfg.llm_model),
        "llm_provider": cfg.llm_provider,
        "llm_model": cfg.llm_model,
        "has_api_key": has_key,
        "matching_backend": cfg.matching_backend,
    }


@router.get("", response_model=Settings)
async def read_settings():
    return Settings(**asdict(_build_config()))


@router.put("")
async def update_settings(s: Settings):
    changes = s.model_dump(exclude_unset=True)
    # checked as a whole so cross-field rules see the values already stored
    problems = Config(**{**asdict(_build_config()), **changes}).problems()
    if problems:
        raise InvalidRequestError("; ".join(problems))
    changed = {k: str(v) for k, v in changes.items()}
    put_settings(changed)
    log.info("Updated settings: %s", ", ".join(sorted(k for k in changed if not k.endswith("_api_key"))))
    return {"status": "ok"}


@router.post("/test-llm")
async def test_llm():
    """One-word round trip against the configured provider."""
    from saturn_scheduler.llm import chat

    cfg = _build_config()
    try:
        reply = chat(cfg, "You are a connectivity check.", [{"role": "user", "content": "Reply with one word."}])
    except Exception as e:
        log.warning("LLM connectivity test failed: %s", e)
        return {"status": "error", "message": str(e)}
    return {"status": "ok", "response": reply.strip()}
