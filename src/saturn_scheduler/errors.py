"""Error taxonomy and the FastAPI handlers that render it.

Every failure that reaches a caller is one of the classes below and is
rendered as ``{"success": false, "error": <category>, "details": <message>}``
with the class's HTTP status.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger(__name__)


class SchedulerError(Exception):
    status_code = 500
    category = "Internal Server Error"

    def __init__(self, details: str = "") -> None:
        super().__init__(details)
        self.details = details or self.category

    def extra(self) -> dict[str, Any]:
        return {}

    def to_envelope(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": self.category,
            "details": self.details,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **self.extra(),
        }


# ── Authentication / configuration ────────────────────────────────────────

class AuthenticationError(SchedulerError):
    status_code = 401
    category = "Unauthorized"


class ConfigurationError(SchedulerError):
    status_code = 500
    category = "Configuration Error"


# ── Validation (always user-actionable) ───────────────────────────────────

class InvalidRequestError(SchedulerError):
    status_code = 400
    category = "Invalid Request"


class CsvFormatError(InvalidRequestError):
    category = "Invalid CSV"


class MissingJobDescriptionError(InvalidRequestError):
    category = "Missing Job Description"


class NoValidCandidatesError(InvalidRequestError):
    category = "No Valid Candidates"


class NoValidInterviewersError(InvalidRequestError):
    category = "No Valid Interviewers"


class CapacityExceededError(InvalidRequestError):
    category = "Capacity Exceeded"

    def __init__(self, unplaceable: list[dict[str, str]]) -> None:
        names = ", ".join(c["name"] for c in unplaceable)
        super().__init__(
            f"{len(unplaceable)} candidate(s) could not be placed within the scheduling horizon: {names}"
        )
        self.unplaceable = unplaceable

    def extra(self) -> dict[str, Any]:
        return {"unplaceable": self.unplaceable}


# ── Upstream / integrity ──────────────────────────────────────────────────

class UpstreamServiceError(SchedulerError):
    status_code = 500
    category = "AI Service Error"


class MatchingTimeoutError(UpstreamServiceError):
    category = "Matching Timed Out"


class StructuralIntegrityError(SchedulerError):
    status_code = 500
    category = "Invalid Schedule"

    def __init__(self, problems: list[str]) -> None:
        super().__init__("Generated schedule failed validation: " + "; ".join(problems))
        self.problems = problems

    def extra(self) -> dict[str, Any]:
        return {"problems": self.problems}


# ── FastAPI handlers ──────────────────────────────────────────────────────

async def scheduler_error_handler(request: Request, exc: SchedulerError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("%s on %s: %s", exc.category, request.url.path, exc.details)
    else:
        log.info("%s on %s: %s", exc.category, request.url.path, exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        problems.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    envelope = InvalidRequestError("; ".join(problems) or "Malformed request body").to_envelope()
    return JSONResponse(status_code=400, content=envelope)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """404, 409 and other HTTP errors raised by routes, in the same envelope."""
    try:
        category = HTTPStatus(exc.status_code).phrase
    except ValueError:
        category = "HTTP Error"
    log.info("%s on %s: %s", category, request.url.path, exc.detail)
    envelope = {
        "success": False,
        "error": category,
        "details": str(exc.detail),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    return JSONResponse(status_code=exc.status_code, content=envelope, headers=exc.headers)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SchedulerError, scheduler_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
