"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from saturn_scheduler.auth import get_current_user
from saturn_scheduler.database import init_db
from saturn_scheduler.errors import register_error_handlers
from saturn_scheduler.live import hub
from saturn_scheduler.routes import auth, drafts, emails, interviewers, interviews, schedules, settings

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    cfg = settings.get_config()
    log.info("Saturn Scheduler ready (matching backend: %s)", cfg.matching_backend)

    yield

    # End any open live streams so their SSE responses finish
    hub.close_all()


app = FastAPI(title="Saturn Scheduler API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

_authenticated = [Depends(get_current_user)]

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(interviewers.router, prefix="/api/interviewers", tags=["interviewers"], dependencies=_authenticated)
app.include_router(schedules.router, prefix="/api/schedules", tags=["schedules"], dependencies=_authenticated)
app.include_router(interviews.router, prefix="/api/interviews", tags=["interviews"], dependencies=_authenticated)
app.include_router(emails.router, prefix="/api/emails", tags=["emails"], dependencies=_authenticated)
app.include_router(drafts.router, prefix="/api/drafts", tags=["drafts"], dependencies=_authenticated)
app.include_router(settings.router, prefix="/api/settings", tags=["settings"], dependencies=_authenticated)


@app.get("/health")
async def health():
    return {"status": "ok"}
