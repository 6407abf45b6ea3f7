"""Configuration management: loads from SQLite settings table + env vars."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from saturn_scheduler.errors import ConfigurationError

# Load .env from the working directory first, then fall back to the project root
load_dotenv(Path.cwd() / ".env")
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

DEFAULT_MODELS = {
    "gemini": "gemini-1.5-flash",
    "anthropic": "claude-sonnet-4-20250514",
    "openai": "gpt-4o",
}

MATCHING_BACKENDS = ("constraint", "llm")
MIN_DURATION, MAX_DURATION = 15, 480
HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


@dataclass
class Config:
    llm_provider: str = "gemini"
    llm_model: str = ""
    gemini_api_key: str = ""
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # Matching engine
    matching_backend: str = "constraint"
    work_day_start: str = "09:00"
    work_day_end: str = "17:00"
    buffer_minutes: int = 15
    max_interviews_per_day: int = 6
    horizon_days: int = 14
    matching_timeout_seconds: float = 30.0

    # Request defaults
    default_duration: int = 60
    default_timezone: str = "UTC"

    def __post_init__(self) -> None:
        if not self.llm_model:
            self.llm_model = DEFAULT_MODELS.get(self.llm_provider, DEFAULT_MODELS["gemini"])

    @property
    def llm_api_key(self) -> str:
        return {
            "gemini": self.gemini_api_key,
            "anthropic": self.anthropic_api_key,
            "openai": self.openai_api_key,
        }.get(self.llm_provider, "")

    def problems(self) -> list[str]:
        """Human-readable reasons this config cannot drive the matcher."""
        found = []
        if self.llm_provider not in DEFAULT_MODELS:
            found.append(f"llm_provider must be one of {', '.join(DEFAULT_MODELS)}")
        if self.matching_backend not in MATCHING_BACKENDS:
            found.append("matching_backend must be 'constraint' or 'llm'")
        times = {}
        for name in ("work_day_start", "work_day_end"):
            value = getattr(self, name)
            if not HHMM.match(value):
                found.append(f"{name} must be HH:MM, got {value!r}")
            else:
                times[name] = value
        if len(times) == 2 and times["work_day_start"] >= times["work_day_end"]:
            found.append("work_day_start must be before work_day_end")
        if self.buffer_minutes < 0:
            found.append("buffer_minutes must be >= 0")
        if self.max_interviews_per_day < 1:
            found.append("max_interviews_per_day must be >= 1")
        if self.horizon_days < 1:
            found.append("horizon_days must be >= 1")
        if self.matching_timeout_seconds <= 0:
            found.append("matching_timeout_seconds must be > 0")
        if not MIN_DURATION <= self.default_duration <= MAX_DURATION:
            found.append(f"default_duration must be between {MIN_DURATION} and {MAX_DURATION}")
        if not _known_timezone(self.default_timezone):
            found.append(f"Unknown default_timezone: {self.default_timezone}")
        return found

    def require_valid(self) -> None:
        found = self.problems()
        if found:
            raise ConfigurationError("; ".join(found))


def _known_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def _env_number(name: str, default: int | float) -> int | float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return type(default)(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


def load_config_from_env() -> Config:
    """Bootstrap config from environment variables (used on first run)."""
    return Config(
        llm_provider=os.getenv("LLM_PROVIDER", "gemini"),
        llm_model=os.getenv("LLM_MODEL", ""),
        gemini_api_key=os.getenv("GEMINI_API_KEY", os.getenv("GOOGLE_GEMINI_API_KEY", "")),
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        matching_backend=os.getenv("MATCHING_BACKEND", "constraint"),
        work_day_start=os.getenv("WORK_DAY_START", "09:00"),
        work_day_end=os.getenv("WORK_DAY_END", "17:00"),
        buffer_minutes=_env_number("BUFFER_MINUTES", 15),
        max_interviews_per_day=_env_number("MAX_INTERVIEWS_PER_DAY", 6),
        horizon_days=_env_number("HORIZON_DAYS", 14),
        matching_timeout_seconds=_env_number("MATCHING_TIMEOUT_SECONDS", 30.0),
        default_duration=_env_number("DEFAULT_DURATION", 60),
        default_timezone=os.getenv("DEFAULT_TIMEZONE", "UTC"),
    )
