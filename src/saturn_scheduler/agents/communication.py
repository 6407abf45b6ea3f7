"""Communication Agent: post-interview offer and rejection emails."""

from __future__ import annotations

import logging

from saturn_scheduler.config import Config
from saturn_scheduler.errors import InvalidRequestError, UpstreamServiceError
from saturn_scheduler.llm import chat_json, require_api_key
from saturn_scheduler.models import EmailGenerateRequest, EmailType, GeneratedEmail
from saturn_scheduler.prompts import EMAIL_OFFER, EMAIL_REJECTION

log = logging.getLogger(__name__)

_PROMPTS = {
    EmailType.OFFER: EMAIL_OFFER,
    EmailType.REJECTION: EMAIL_REJECTION,
}

_REQUIRED = ("candidate_name", "job_role", "interviewer_name", "email_type")


def generate_email(cfg: Config, req: EmailGenerateRequest) -> GeneratedEmail:
    """Draft an offer or rejection email for an interviewed candidate.

    Raises ``ConfigurationError`` when no provider key is set,
    ``InvalidRequestError`` for missing fields or an unknown email type, and
    ``UpstreamServiceError`` when the model fails or returns no subject/body.
    """
    require_api_key(cfg)

    missing = [f for f in _REQUIRED if not getattr(req, f).strip()]
    if missing:
        raise InvalidRequestError(f"Missing required fields: {', '.join(missing)}")
    try:
        email_type = EmailType(req.email_type.strip().lower())
    except ValueError:
        raise InvalidRequestError(
            f"Invalid email type {req.email_type!r}; must be 'offer' or 'rejection'"
        ) from None

    when = " ".join(p for p in (req.interview_date.strip(), req.interview_time.strip()) if p)
    user_msg = (
        f"Candidate: {req.candidate_name.strip()}\n"
        f"Position: {req.job_role.strip()}\n"
        f"Interviewer: {req.interviewer_name.strip()}\n"
        f"Interview date: {when or 'recently'}\n"
    )

    try:
        data = chat_json(
            cfg,
            system=_PROMPTS[email_type],
            messages=[{"role": "user", "content": user_msg}],
        )
    except Exception as e:
        log.error("Communication agent LLM call failed: %s", e)
        raise UpstreamServiceError(f"Failed to generate email: {e}") from e

    if isinstance(data, list):
        data = data[0] if data else {}
    subject = str(data.get("subject", "")).strip() if isinstance(data, dict) else ""
    body = str(data.get("body", "")).strip() if isinstance(data, dict) else ""
    if not subject or not body:
        raise UpstreamServiceError("AI response was missing the email subject or body")

    log.info("Generated %s email for %s", email_type.value, req.candidate_name.strip())
    return GeneratedEmail(subject=subject, body=body, type=email_type)
