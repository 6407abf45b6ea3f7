"""Interview note threads: append-only, newest first, live."""

from __future__ import annotations

import logging

from saturn_scheduler import database as db
from saturn_scheduler.errors import AuthenticationError, InvalidRequestError
from saturn_scheduler.live import Subscription, hub
from saturn_scheduler.models import Note

log = logging.getLogger(__name__)


def notes_topic(interview_id: str) -> str:
    return f"notes:{interview_id}"


def add_note(interview_id: str, content: str, author: dict | None) -> Note:
    """Append a note to an interview's thread.

    ``author`` is the authenticated user dict; notes are never written
    anonymously. The caller is responsible for checking the interview exists.
    """
    if not author or not author.get("email"):
        raise AuthenticationError("Authentication required to add notes")
    text = content.strip()
    if not text:
        raise InvalidRequestError("Note content is required")

    note = Note(
        interview_id=interview_id,
        content=text,
        author_name=author.get("name") or "Anonymous",
        author_email=author["email"],
    )
    db.insert_note(note.model_dump())
    log.info("Note %s added to interview %s by %s", note.id, interview_id, note.author_email)

    topic = notes_topic(interview_id)
    if hub.has_subscribers(topic):
        hub.publish(topic, snapshot(interview_id))
    return note


def list_notes(interview_id: str) -> list[Note]:
    return [Note(**r) for r in db.list_notes(interview_id)]


def snapshot(interview_id: str) -> list[dict]:
    return [n.model_dump() for n in list_notes(interview_id)]


def subscribe_notes(interview_id: str) -> Subscription:
    return hub.subscribe(notes_topic(interview_id), lambda: snapshot(interview_id))
