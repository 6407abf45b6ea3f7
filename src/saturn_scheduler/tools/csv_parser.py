"""Candidate roster parsing: delimited text → Candidate records.

Pipeline position:
  uploaded CSV text → THIS TOOL → list[Candidate] → request builder
"""

from __future__ import annotations

import csv
import io
import logging

from saturn_scheduler.errors import CsvFormatError, NoValidCandidatesError
from saturn_scheduler.models import Candidate

log = logging.getLogger(__name__)

HEADER_SYNONYMS: dict[str, str] = {
    "name": "name",
    "full name": "name",
    "candidate name": "name",
    "email": "email",
    "email address": "email",
    "position": "position",
    "role": "position",
    "job title": "position",
    "experience": "experience",
    "years of experience": "experience",
    "skills": "skills",
    "technical skills": "skills",
    "preferred date": "preferred_date",
    "availability": "preferred_date",
    "notes": "notes",
    "comments": "notes",
}


def map_headers(header_row: list[str]) -> list[str | None]:
    """Map raw header cells to field names (None for unrecognised columns)."""
    return [HEADER_SYNONYMS.get(h.strip().lower()) for h in header_row]


def parse_candidates(text: str) -> list[Candidate]:
    """Parse a candidate roster.

    The first non-blank line is the header. A data row becomes a Candidate
    only if both name and email are non-empty after trimming; other rows are
    dropped without failing the parse.
    """
    lines = [line for line in (text or "").strip().splitlines() if line.strip()]
    if len(lines) < 2:
        raise CsvFormatError("CSV must contain at least a header row and one data row")

    rows = list(csv.reader(io.StringIO("\n".join(lines)), skipinitialspace=True))
    fields = map_headers(rows[0])
    if "name" not in fields or "email" not in fields:
        log.warning("CSV header lacks a name or email column: %s", rows[0])

    candidates: list[Candidate] = []
    dropped = 0
    for row in rows[1:]:
        record: dict[str, str] = {}
        for field, value in zip(fields, row):
            if field:
                record[field] = value.strip()
        if record.get("name") and record.get("email"):
            candidates.append(Candidate(**record))
        else:
            dropped += 1

    if dropped:
        log.info("Dropped %d CSV row(s) missing name or email", dropped)
    if not candidates:
        raise NoValidCandidatesError("No valid candidates found in CSV data")
    log.info("Parsed %d candidate(s) from %d data row(s)", len(candidates), len(rows) - 1)
    return candidates
