"""Pydantic models shared between API routes, the engines and the CLI."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _short_id() -> str:
    return uuid.uuid4().hex[:8]


def _now() -> str:
    return datetime.now().isoformat()


# ── User / Auth ───────────────────────────────────────────────────────────

class UserRegister(BaseModel):
    email: str
    password: str
    name: str = ""

class UserLogin(BaseModel):
    email: str
    password: str

class User(BaseModel):
    id: str = Field(default_factory=_short_id)
    email: str
    name: str = ""
    created_at: str = Field(default_factory=_now)


# ── Enums ──────────────────────────────────────────────────────────────────

class Specialization(str, Enum):
    FRONTEND = "frontend"
    BACKEND = "backend"
    FULLSTACK = "fullstack"
    MOBILE = "mobile"
    DEVOPS = "devops"
    DATA = "data"
    AI_ML = "ai-ml"
    SECURITY = "security"
    QA = "qa"
    PRODUCT = "product"
    DESIGN = "design"
    LEADERSHIP = "leadership"


SPECIALIZATION_LABELS = {
    Specialization.FRONTEND: "Frontend Development",
    Specialization.BACKEND: "Backend Development",
    Specialization.FULLSTACK: "Full-Stack Development",
    Specialization.MOBILE: "Mobile Development",
    Specialization.DEVOPS: "DevOps & Infrastructure",
    Specialization.DATA: "Data Science & Analytics",
    Specialization.AI_ML: "AI & Machine Learning",
    Specialization.SECURITY: "Cybersecurity",
    Specialization.QA: "Quality Assurance",
    Specialization.PRODUCT: "Product Management",
    Specialization.DESIGN: "UI/UX Design",
    Specialization.LEADERSHIP: "Technical Leadership",
}


class InterviewStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EmailType(str, Enum):
    OFFER = "offer"
    REJECTION = "rejection"


# ── Candidate ──────────────────────────────────────────────────────────────

class Candidate(BaseModel):
    id: str = Field(default_factory=_short_id)
    name: str
    email: str
    position: str = ""
    experience: str = ""
    skills: str = ""
    preferred_date: str = ""
    notes: str = ""


# ── Interviewer ────────────────────────────────────────────────────────────

class InterviewerCreate(BaseModel):
    name: str
    email: str
    specialization: Specialization | None = None

class Interviewer(BaseModel):
    id: str = Field(default_factory=_short_id)
    name: str
    email: str
    specialization: Specialization | None = None
    created_at: str = Field(default_factory=_now)
    updated_at: str = Field(default_factory=_now)

    @property
    def specialization_label(self) -> str:
        if self.specialization is None:
            return "General"
        return SPECIALIZATION_LABELS[self.specialization]


# ── Schedule request ──────────────────────────────────────────────────────

class SchedulePreferences(BaseModel):
    model_config = ConfigDict(frozen=True)

    duration: int = Field(default=60, ge=15, le=480)
    timezone: str = "UTC"
    start_date: str | None = None     # ISO date; defaults to next business day


class GenerateScheduleRequest(BaseModel):
    """Body of ``POST /api/schedules/generate``."""
    csv_data: str = ""
    interviewer_ids: list[str] = Field(default_factory=list)
    job_description: str = ""
    preferences: SchedulePreferences = Field(default_factory=SchedulePreferences)


class ScheduleRequest(BaseModel):
    """The immutable join handed to a matching engine."""
    model_config = ConfigDict(frozen=True)

    candidates: tuple[Candidate, ...]
    interviewers: tuple[Interviewer, ...]
    job_requirements: str
    preferences: SchedulePreferences = Field(default_factory=SchedulePreferences)


# ── Schedule result ───────────────────────────────────────────────────────

class ScheduledInterview(BaseModel):
    id: str = Field(default_factory=_short_id)
    candidate: Candidate
    interviewer: Interviewer
    date: str                          # YYYY-MM-DD
    start_time: str                    # HH:MM
    end_time: str                      # HH:MM
    duration: int = 60
    timezone: str = "UTC"
    status: InterviewStatus = InterviewStatus.SCHEDULED
    meeting_room: str = ""
    matching_score: float = 0.0
    matching_reason: str = ""
    skill_gaps: list[str] = Field(default_factory=list, max_length=3)
    behavioral_question: str = ""
    notes: str = ""


class ScheduleMetadata(BaseModel):
    total_candidates: int
    total_interviewers: int
    scheduling_algorithm: str
    generated_at: str = Field(default_factory=_now)
    timezone: str = "UTC"
    duration: int = 60


class InterviewerWorkload(BaseModel):
    name: str
    total_interviews: int = 0
    average_per_day: float = 0.0
    utilization_rate: float = 0.0


class ScheduleAnalytics(BaseModel):
    interviewer_workload: dict[str, InterviewerWorkload] = Field(default_factory=dict)
    schedule_efficiency: float = 1.0
    conflict_count: int = 0
    optimization_score: float = 0.0


class ScheduleResult(BaseModel):
    success: bool = True
    metadata: ScheduleMetadata
    schedule: list[ScheduledInterview] = Field(default_factory=list)
    analytics: ScheduleAnalytics = Field(default_factory=ScheduleAnalytics)
    recommendations: list[str] = Field(default_factory=list)


# ── Interviews / notes ────────────────────────────────────────────────────

class ConfirmScheduleRequest(BaseModel):
    schedule: list[ScheduledInterview]
    job_role: str = ""

class InterviewStatusUpdate(BaseModel):
    status: InterviewStatus

class NoteCreate(BaseModel):
    content: str

class Note(BaseModel):
    id: str = Field(default_factory=_short_id)
    interview_id: str
    content: str
    author_name: str = ""
    author_email: str = ""
    created_at: str = Field(default_factory=_now)


# ── Email ──────────────────────────────────────────────────────────────────

class EmailGenerateRequest(BaseModel):
    # Required fields default to "" so that missing ones are reported as a
    # single field-naming 400 instead of a schema error.
    candidate_name: str = ""
    job_role: str = ""
    interviewer_name: str = ""
    email_type: str = ""
    interview_date: str = ""
    interview_time: str = ""

class GeneratedEmail(BaseModel):
    subject: str
    body: str
    type: EmailType
    generated_at: str = Field(default_factory=_now)


# ── Form draft ────────────────────────────────────────────────────────────

DRAFT_SCHEMA_VERSION = 2

class FormDraft(BaseModel):
    model_config = ConfigDict(extra="ignore")

    version: int = DRAFT_SCHEMA_VERSION
    csv_file_name: str = ""
    job_description: str = ""
    selected_interviewers: list[Interviewer] = Field(default_factory=list)
    schedule_results: dict[str, Any] | None = None
    last_saved: str | None = None

class FormDraftUpdate(BaseModel):
    csv_file_name: str | None = None
    job_description: str | None = None
    selected_interviewers: list[Interviewer] | None = None
    schedule_results: dict[str, Any] | None = None


# ── Settings ───────────────────────────────────────────────────────────────

class Settings(BaseModel):
    """Editable settings; value rules live in ``Config.problems``."""
    llm_provider: str = "gemini"
    llm_model: str = ""
    gemini_api_key: str = ""
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    matching_backend: str = "constraint"
    work_day_start: str = "09:00"
    work_day_end: str = "17:00"
    buffer_minutes: int = 15
    max_interviews_per_day: int = 6
    horizon_days: int = 14
    matching_timeout_seconds: float = 30.0
    default_duration: int = 60
    default_timezone: str = "UTC"
