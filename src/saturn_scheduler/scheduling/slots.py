"""Interviewer time resources: working hours, slot grid and daily caps.

Every interviewer shares the same slot grid for a given duration: starts at
the beginning of the working day and steps by ``duration + buffer``. A slot
can be booked once, so bookings on one calendar never overlap.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from dateutil.parser import ParserError
from dateutil.parser import parse as date_parse


@dataclass(frozen=True)
class WorkingHours:
    start: time = time(9, 0)
    end: time = time(17, 0)
    buffer_minutes: int = 15
    max_per_day: int = 6

    @classmethod
    def parse(cls, start: str, end: str, buffer_minutes: int, max_per_day: int) -> WorkingHours:
        return cls(
            start=time.fromisoformat(start),
            end=time.fromisoformat(end),
            buffer_minutes=buffer_minutes,
            max_per_day=max_per_day,
        )

    def slot_starts(self, duration: int) -> list[time]:
        """Slot start times for one day, capped at ``max_per_day``."""
        anchor = date(2000, 1, 3)
        cursor = datetime.combine(anchor, self.start)
        day_end = datetime.combine(anchor, self.end)
        step = timedelta(minutes=duration + self.buffer_minutes)
        starts: list[time] = []
        while cursor + timedelta(minutes=duration) <= day_end and len(starts) < self.max_per_day:
            starts.append(cursor.time())
            cursor += step
        return starts

    def daily_capacity(self, duration: int) -> int:
        return len(self.slot_starts(duration))


def next_business_day(today: date) -> date:
    day = today + timedelta(days=1)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


def business_days(start: date, horizon_days: int) -> list[date]:
    """Weekdays in ``[start, start + horizon_days)``."""
    return [
        start + timedelta(days=offset)
        for offset in range(horizon_days)
        if (start + timedelta(days=offset)).weekday() < 5
    ]


def candidate_day_order(days: list[date], preferred: date | None) -> list[date]:
    """Preferred day first, then later days, then earlier ones."""
    if preferred is None or preferred not in days:
        return list(days)
    idx = days.index(preferred)
    return days[idx:] + days[:idx]


def end_time(start: time, duration: int) -> time:
    return (datetime.combine(date(2000, 1, 3), start) + timedelta(minutes=duration)).time()


@dataclass
class InterviewerCalendar:
    interviewer_id: str
    slots: list[time]
    booked: dict[date, set[time]] = field(default_factory=dict)

    @property
    def load(self) -> int:
        return sum(len(v) for v in self.booked.values())

    def load_on(self, day: date) -> int:
        return len(self.booked.get(day, ()))

    def open_slots(self, day: date) -> Iterator[time]:
        taken = self.booked.get(day, set())
        return (s for s in self.slots if s not in taken)

    def earliest_open(self, days: Iterable[date]) -> tuple[date, time] | None:
        for day in days:
            for slot in self.open_slots(day):
                return day, slot
        return None

    def book(self, day: date, start: time) -> None:
        taken = self.booked.setdefault(day, set())
        if start in taken or start not in self.slots:
            raise ValueError(f"Slot {day} {start} unavailable for {self.interviewer_id}")
        taken.add(start)


def parse_preferred_date(text: str) -> date | None:
    """Best-effort read of a free-text preferred date ("Flexible" → None)."""
    text = (text or "").strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return date_parse(text, fuzzy=False).date()
    except (ParserError, ValueError, OverflowError):
        return None


def horizon_start(start_date: str | None, tz: str, today: date | None = None) -> date:
    """First day of the scheduling horizon: ``start_date`` if given, else the
    business day after today in ``tz``."""
    if start_date:
        return date.fromisoformat(start_date)
    return next_business_day(today or datetime.now(ZoneInfo(tz)).date())
