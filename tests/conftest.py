"""Shared fixtures: a throwaway SQLite database per test and an API client."""

from __future__ import annotations

import pytest

from saturn_scheduler import database

_ENV_VARS = (
    "LLM_PROVIDER",
    "LLM_MODEL",
    "GEMINI_API_KEY",
    "GOOGLE_GEMINI_API_KEY",
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "MATCHING_BACKEND",
    "MATCHING_TIMEOUT_SECONDS",
)


@pytest.fixture(autouse=True)
def temp_db(tmp_path, monkeypatch):
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    db_path = tmp_path / "test.db"
    monkeypatch.setattr(database, "DB_PATH", db_path)
    database.init_db()
    yield db_path


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from saturn_scheduler.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    resp = client.post(
        "/api/auth/register",
        json={"email": "recruiter@example.com", "password": "s3cret-pass", "name": "Rita Recruiter"},
    )
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}
