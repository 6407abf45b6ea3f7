"""Builders for candidates, interviewers and requests used across tests."""

from __future__ import annotations

from saturn_scheduler.models import (
    Candidate,
    Interviewer,
    SchedulePreferences,
    ScheduleRequest,
    Specialization,
)

MONDAY = "2025-01-06"

JOB = "Backend engineer. Python, Django, PostgreSQL and Docker experience required."


def make_candidates(n: int = 5, **overrides) -> list[Candidate]:
    skills = ["Python, Django, PostgreSQL", "Python, Flask", "Java, Spring", "Python, Docker", "Go, Kubernetes"]
    return [
        Candidate(
            id=f"c{i + 1}",
            name=f"Candidate {i + 1}",
            email=f"cand{i + 1}@example.com",
            position="Backend Engineer",
            experience=f"{i + 1} years",
            skills=skills[i % len(skills)],
            **overrides,
        )
        for i in range(n)
    ]


def make_interviewers() -> list[Interviewer]:
    return [
        Interviewer(id="i1", name="Ada Backend", email="ada@example.com", specialization=Specialization.BACKEND),
        Interviewer(id="i2", name="Grace DevOps", email="grace@example.com", specialization=Specialization.DEVOPS),
    ]


def make_request(candidates=None, interviewers=None, job=JOB, duration=60, start_date=MONDAY) -> ScheduleRequest:
    return ScheduleRequest(
        candidates=tuple(candidates if candidates is not None else make_candidates()),
        interviewers=tuple(interviewers if interviewers is not None else make_interviewers()),
        job_requirements=job,
        preferences=SchedulePreferences(duration=duration, start_date=start_date),
    )
