"""SQLite persistence layer.

Plain functions over one short-lived connection per call. Interviews keep
JSON snapshots of the candidate and interviewer they were confirmed with, so
later directory edits never rewrite history.
"""

from __future__ import annotations

import json
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

DB_PATH = Path(os.getenv("SATURN_DB_PATH", "saturn_scheduler.db"))

_SCHEMA = """
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT
);

CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL,
    name TEXT,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS interviewers (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    email TEXT NOT NULL,
    specialization TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS interviews (
    id TEXT PRIMARY KEY,
    candidate TEXT NOT NULL,       -- JSON snapshot
    interviewer TEXT NOT NULL,     -- JSON snapshot
    interviewer_id TEXT,
    date TEXT,
    start_time TEXT,
    end_time TEXT,
    duration INTEGER,
    timezone TEXT,
    status TEXT DEFAULT 'scheduled',
    meeting_room TEXT,
    matching_score REAL DEFAULT 0.0,
    matching_reason TEXT,
    skill_gaps TEXT,               -- JSON array
    behavioral_question TEXT,
    notes TEXT,
    job_role TEXT,
    created_by TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_interviews_interviewer ON interviews (interviewer_id);

CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    interview_id TEXT NOT NULL,
    content TEXT NOT NULL,
    author_name TEXT,
    author_email TEXT,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS form_drafts (
    user_id TEXT NOT NULL,
    storage_key TEXT NOT NULL,
    payload TEXT NOT NULL,
    PRIMARY KEY (user_id, storage_key)
);
"""

_INTERVIEW_COLUMNS = (
    "id", "candidate", "interviewer", "interviewer_id", "date", "start_time", "end_time",
    "duration", "timezone", "status", "meeting_room", "matching_score", "matching_reason",
    "skill_gaps", "behavioral_question", "notes", "job_role", "created_by",
    "created_at", "updated_at",
)
_JSON_COLUMNS = ("candidate", "interviewer", "skill_gaps")


@contextmanager
def _session() -> Iterator[sqlite3.Connection]:
    """Connection that commits on success and always closes."""
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def _fetch_one(sql: str, params: tuple = ()) -> dict | None:
    with _session() as conn:
        row = conn.execute(sql, params).fetchone()
    return dict(row) if row else None


def _fetch_all(sql: str, params: tuple = ()) -> list[dict]:
    with _session() as conn:
        return [dict(r) for r in conn.execute(sql, params).fetchall()]


def _write(sql: str, params: tuple = ()) -> int:
    """Run one statement; returns the affected row count."""
    with _session() as conn:
        return conn.execute(sql, params).rowcount


def init_db() -> None:
    with _session() as conn:
        conn.executescript(_SCHEMA)


# ── Settings ───────────────────────────────────────────────────────────────

def get_settings() -> dict[str, str]:
    return {r["key"]: r["value"] for r in _fetch_all("SELECT key, value FROM settings")}


def put_settings(data: dict[str, str]) -> None:
    with _session() as conn:
        conn.executemany("INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)", data.items())


# ── Users ──────────────────────────────────────────────────────────────────

def insert_user(user: dict) -> None:
    """Raises sqlite3.IntegrityError when the email is taken."""
    _write(
        "INSERT INTO users (id, email, password_hash, name, created_at) VALUES (?, ?, ?, ?, ?)",
        (user["id"], user["email"], user["password_hash"], user.get("name", ""), user["created_at"]),
    )


def get_user_by_email(email: str) -> dict | None:
    return _fetch_one("SELECT * FROM users WHERE email = ?", (email,))


def get_user_by_id(user_id: str) -> dict | None:
    return _fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))


# ── Interviewers ───────────────────────────────────────────────────────────

def insert_interviewer(i: dict) -> None:
    _write(
        "INSERT INTO interviewers (id, name, email, specialization, created_at, updated_at)"
        " VALUES (?, ?, ?, ?, ?, ?)",
        (i["id"], i["name"], i["email"], i.get("specialization"), i["created_at"], i["updated_at"]),
    )


def get_interviewer(interviewer_id: str) -> dict | None:
    return _fetch_one("SELECT * FROM interviewers WHERE id = ?", (interviewer_id,))


def list_interviewers(order: str = "created") -> list[dict]:
    if order == "name":
        return _fetch_all("SELECT * FROM interviewers ORDER BY name COLLATE NOCASE ASC")
    return _fetch_all("SELECT * FROM interviewers ORDER BY created_at DESC, rowid DESC")


def delete_interviewer(interviewer_id: str) -> bool:
    return _write("DELETE FROM interviewers WHERE id = ?", (interviewer_id,)) > 0


# ── Interviews ─────────────────────────────────────────────────────────────

def insert_interviews(batch: list[dict]) -> None:
    """Insert every row or none; raises sqlite3.IntegrityError on a reused id."""
    placeholders = ", ".join("?" for _ in _INTERVIEW_COLUMNS)
    sql = f"INSERT INTO interviews ({', '.join(_INTERVIEW_COLUMNS)}) VALUES ({placeholders})"
    with _session() as conn:
        conn.executemany(sql, [_interview_params(iv) for iv in batch])


def _interview_params(iv: dict) -> tuple:
    row = {
        "duration": 60, "timezone": "UTC", "status": "scheduled", "meeting_room": "",
        "matching_score": 0.0, "matching_reason": "", "skill_gaps": [],
        "behavioral_question": "", "notes": "", "job_role": "", "created_by": "",
        **iv,
        "interviewer_id": iv["interviewer"]["id"],
    }
    for col in _JSON_COLUMNS:
        row[col] = json.dumps(row[col])
    return tuple(row[c] for c in _INTERVIEW_COLUMNS)


def get_interview(interview_id: str) -> dict | None:
    row = _fetch_one("SELECT * FROM interviews WHERE id = ?", (interview_id,))
    return _decode_interview(row) if row else None


def list_interviews(interviewer_id: str | None = None) -> list[dict]:
    if interviewer_id:
        rows = _fetch_all(
            "SELECT * FROM interviews WHERE interviewer_id = ? ORDER BY created_at DESC, rowid DESC",
            (interviewer_id,),
        )
    else:
        rows = _fetch_all("SELECT * FROM interviews ORDER BY created_at DESC, rowid DESC")
    return [_decode_interview(r) for r in rows]


def update_interview(interview_id: str, updates: dict) -> bool:
    changes = {k: v for k, v in updates.items() if k in _INTERVIEW_COLUMNS and k != "id"}
    if not changes:
        return False
    for col in _JSON_COLUMNS:
        if col in changes:
            changes[col] = json.dumps(changes[col])
    assignments = ", ".join(f"{k} = ?" for k in changes)
    count = _write(
        f"UPDATE interviews SET {assignments} WHERE id = ?",
        (*changes.values(), interview_id),
    )
    return count > 0


def _decode_interview(row: dict) -> dict:
    for col in _JSON_COLUMNS:
        row[col] = json.loads(row[col] or ("[]" if col == "skill_gaps" else "{}"))
    row.pop("interviewer_id", None)
    return row


# ── Notes ──────────────────────────────────────────────────────────────────

def insert_note(n: dict) -> None:
    _write(
        "INSERT INTO notes (id, interview_id, content, author_name, author_email, created_at)"
        " VALUES (?, ?, ?, ?, ?, ?)",
        (n["id"], n["interview_id"], n["content"],
         n.get("author_name", ""), n.get("author_email", ""), n["created_at"]),
    )


def list_notes(interview_id: str) -> list[dict]:
    """Newest first; rowid breaks ties between notes stamped in the same instant."""
    return _fetch_all(
        "SELECT * FROM notes WHERE interview_id = ? ORDER BY created_at DESC, rowid DESC",
        (interview_id,),
    )


# ── Form drafts ────────────────────────────────────────────────────────────

def get_form_draft(user_id: str, storage_key: str) -> str | None:
    row = _fetch_one(
        "SELECT payload FROM form_drafts WHERE user_id = ? AND storage_key = ?",
        (user_id, storage_key),
    )
    return row["payload"] if row else None


def put_form_draft(user_id: str, storage_key: str, payload: str) -> None:
    _write(
        "INSERT OR REPLACE INTO form_drafts (user_id, storage_key, payload) VALUES (?, ?, ?)",
        (user_id, storage_key, payload),
    )


def delete_form_draft(user_id: str, storage_key: str) -> bool:
    return _write(
        "DELETE FROM form_drafts WHERE user_id = ? AND storage_key = ?",
        (user_id, storage_key),
    ) > 0
