"""HTTP-level tests for the FastAPI app."""

from __future__ import annotations

from helpers import JOB, MONDAY
from saturn_scheduler import database as db
from saturn_scheduler.agents import communication

ROSTER = """Full Name,Email Address,Position,Years of Experience,Technical Skills,Preferred Date
Jane Doe,jane@example.com,Backend Engineer,4 years,"Python, Django, PostgreSQL",2025-01-07
Bo Chen,bo@example.com,Backend Engineer,1 year,"Python, Docker",
Ana Ruiz,ana@example.com,Platform Engineer,8 years,"Go, Kubernetes, Docker",Flexible
,missing-name@example.com,Engineer,2 years,Java,
"""


def _add_interviewers(client, headers):
    ids = []
    for name, email, area in [("Ada", "ada@example.com", "backend"), ("Grace", "grace@example.com", "devops")]:
        resp = client.post("/api/interviewers", json={"name": name, "email": email, "specialization": area},
                           headers=headers)
        assert resp.status_code == 200
        ids.append(resp.json()["id"])
    return ids


def _generate(client, headers, **overrides):
    body = {
        "csv_data": ROSTER,
        "interviewer_ids": _add_interviewers(client, headers),
        "job_description": JOB,
        "preferences": {"duration": 60, "timezone": "UTC", "start_date": MONDAY},
    }
    body.update(overrides)
    return client.post("/api/schedules/generate", json=body, headers=headers)


# ---------------------------------------------------------------------------
# Health / auth
# ---------------------------------------------------------------------------

def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_missing_token_is_401_envelope(client):
    resp = client.post("/api/schedules/generate", json={})
    assert resp.status_code == 401
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Unauthorized"
    assert "timestamp" in body


def test_invalid_token(client):
    resp = client.get("/api/interviewers", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["details"] == "Invalid token"


def test_register_login_me(client, auth_headers):
    me = client.get("/api/auth/me", headers=auth_headers).json()
    assert me["email"] == "recruiter@example.com"

    dup = client.post("/api/auth/register", json={"email": "recruiter@example.com", "password": "x"})
    assert dup.status_code == 409

    bad = client.post("/api/auth/login", json={"email": "recruiter@example.com", "password": "wrong"})
    assert bad.status_code == 401
    ok = client.post("/api/auth/login", json={"email": "recruiter@example.com", "password": "s3cret-pass"})
    assert ok.status_code == 200
    assert ok.json()["token"]


# ---------------------------------------------------------------------------
# Interviewers
# ---------------------------------------------------------------------------

def test_interviewer_crud(client, auth_headers):
    ids = _add_interviewers(client, auth_headers)
    listed = client.get("/api/interviewers", headers=auth_headers).json()
    assert [i["name"] for i in listed] == ["Grace", "Ada"]

    assert client.delete(f"/api/interviewers/{ids[0]}", headers=auth_headers).status_code == 200
    assert client.delete(f"/api/interviewers/{ids[0]}", headers=auth_headers).status_code == 404
    assert [i["name"] for i in client.get("/api/interviewers", headers=auth_headers).json()] == ["Grace"]


def test_interviewer_validation(client, auth_headers):
    resp = client.post("/api/interviewers", json={"name": " ", "email": "x@example.com"}, headers=auth_headers)
    assert resp.status_code == 400
    resp = client.post("/api/interviewers", json={"name": "X", "email": "x@example.com", "specialization": "magic"},
                       headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid Request"


# ---------------------------------------------------------------------------
# Schedule generation
# ---------------------------------------------------------------------------

def test_generate_schedule(client, auth_headers):
    resp = _generate(client, auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["request_info"]["candidate_count"] == 3
    assert body["request_info"]["interviewer_count"] == 2
    assert body["request_info"]["user_id"] == "recruiter@example.com"

    schedule = body["schedule"]
    assert len(schedule["schedule"]) == 3
    assert schedule["analytics"]["conflict_count"] == 0
    jane = next(e for e in schedule["schedule"] if e["candidate"]["name"] == "Jane Doe")
    assert jane["date"] == "2025-01-07"
    assert jane["interviewer"]["name"] == "Ada"


def test_generate_requires_csv_and_ids(client, auth_headers):
    resp = client.post("/api/schedules/generate", json={"csv_data": "", "interviewer_ids": []}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json()["details"] == "CSV data and interviewer IDs are required"


def test_generate_requires_job_description(client, auth_headers):
    resp = _generate(client, auth_headers, job_description="   ")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing Job Description"


def test_generate_bad_csv(client, auth_headers):
    resp = _generate(client, auth_headers, csv_data="name,email\n")
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid CSV"

    resp = _generate(client, auth_headers, csv_data="name,email\n,nobody@example.com\n")
    assert resp.status_code == 400
    assert resp.json()["error"] == "No Valid Candidates"


def test_generate_unknown_interviewers(client, auth_headers):
    resp = client.post(
        "/api/schedules/generate",
        json={"csv_data": ROSTER, "interviewer_ids": ["nope"], "job_description": JOB},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "No Valid Interviewers"


def test_generate_bad_preferences(client, auth_headers):
    resp = _generate(client, auth_headers, preferences={"duration": 5})
    assert resp.status_code == 400
    resp = _generate(client, auth_headers, preferences={"timezone": "Nowhere/City"})
    assert resp.status_code == 400
    assert "timezone" in resp.json()["details"]


def test_generate_capacity_exceeded(client, auth_headers):
    client.put("/api/settings", json={"max_interviews_per_day": 1, "horizon_days": 1}, headers=auth_headers)
    resp = _generate(client, auth_headers, interviewer_ids=_add_interviewers(client, auth_headers)[:1])
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Capacity Exceeded"
    assert len(body["unplaceable"]) == 2


def test_llm_backend_without_key_is_config_error(client, auth_headers):
    client.put("/api/settings", json={"matching_backend": "llm"}, headers=auth_headers)
    resp = _generate(client, auth_headers)
    assert resp.status_code == 500
    assert resp.json()["error"] == "Configuration Error"


# ---------------------------------------------------------------------------
# Interviews / notes
# ---------------------------------------------------------------------------

def test_confirm_and_notes(client, auth_headers):
    entries = _generate(client, auth_headers).json()["schedule"]["schedule"]
    resp = client.post("/api/interviews/confirm", json={"schedule": entries, "job_role": "Backend Engineer"},
                       headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["count"] == 3

    interviews = client.get("/api/interviews", headers=auth_headers).json()
    assert len(interviews) == 3
    assert all(iv["status"] == "confirmed" for iv in interviews)
    iid = interviews[0]["id"]

    for text in ("Solid fundamentals", "Ask about testing"):
        assert client.post(f"/api/interviews/{iid}/notes", json={"content": text}, headers=auth_headers).status_code == 200
    thread = client.get(f"/api/interviews/{iid}/notes", headers=auth_headers).json()
    assert [n["content"] for n in thread] == ["Ask about testing", "Solid fundamentals"]
    assert thread[0]["author_email"] == "recruiter@example.com"

    blank = client.post(f"/api/interviews/{iid}/notes", json={"content": "  "}, headers=auth_headers)
    assert blank.status_code == 400
    assert client.post("/api/interviews/nope/notes", json={"content": "x"}, headers=auth_headers).status_code == 404

    patched = client.patch(f"/api/interviews/{iid}/status", json={"status": "completed"}, headers=auth_headers)
    assert patched.json()["status"] == "completed"


def test_confirm_rejects_overlaps(client, auth_headers):
    entries = _generate(client, auth_headers).json()["schedule"]["schedule"]
    clash = dict(entries[1], interviewer=entries[0]["interviewer"], date=entries[0]["date"],
                 start_time=entries[0]["start_time"], end_time=entries[0]["end_time"])
    resp = client.post("/api/interviews/confirm", json={"schedule": [entries[0], clash]}, headers=auth_headers)
    assert resp.status_code == 400
    assert "conflict" in resp.json()["details"]


# ---------------------------------------------------------------------------
# Email / drafts / settings
# ---------------------------------------------------------------------------

def test_generate_email(client, auth_headers, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    monkeypatch.setattr(communication, "chat_json",
                        lambda *a, **k: {"subject": "Job Offer - Backend Engineer", "body": "Congratulations!"})
    resp = client.post("/api/emails/generate", json={
        "candidate_name": "Jane Doe", "job_role": "Backend Engineer",
        "interviewer_name": "Ada", "email_type": "offer",
    }, headers=auth_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["email"]["subject"] == "Job Offer - Backend Engineer"
    assert body["email"]["type"] == "offer"
    assert body["metadata"]["candidate_name"] == "Jane Doe"


def test_generate_email_errors(client, auth_headers, monkeypatch):
    assert client.post("/api/emails/generate", json={}, headers=auth_headers).status_code == 500

    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    missing = client.post("/api/emails/generate", json={"candidate_name": "Jane"}, headers=auth_headers)
    assert missing.status_code == 400
    assert "interviewer_name" in missing.json()["details"]
    bad_type = client.post("/api/emails/generate", json={
        "candidate_name": "Jane", "job_role": "Dev", "interviewer_name": "Ada", "email_type": "hire",
    }, headers=auth_headers)
    assert bad_type.status_code == 400


def test_drafts(client, auth_headers):
    assert client.get("/api/drafts", headers=auth_headers).json()["csv_file_name"] == ""
    saved = client.put("/api/drafts", json={"csv_file_name": "roster.csv", "job_description": "Python"},
                       headers=auth_headers).json()
    assert saved["last_saved"]
    client.put("/api/drafts", json={"job_description": "Go"}, headers=auth_headers)
    draft = client.get("/api/drafts", headers=auth_headers).json()
    assert (draft["csv_file_name"], draft["job_description"]) == ("roster.csv", "Go")

    cleared = client.put("/api/drafts", json={"csv_file_name": None}, headers=auth_headers)
    assert cleared.status_code == 200
    assert cleared.json()["csv_file_name"] == ""

    client.delete("/api/drafts", headers=auth_headers)
    assert client.get("/api/drafts", headers=auth_headers).json()["job_description"] == ""


def test_settings(client, auth_headers):
    status = client.get("/api/settings/setup-status", headers=auth_headers).json()
    assert status["llm_configured"] is False
    assert status["matching_backend"] == "constraint"

    assert client.put("/api/settings", json={"matching_backend": "quantum"}, headers=auth_headers).status_code == 400
    assert client.put("/api/settings", json={"gemini_api_key": "abc", "buffer_minutes": 20},
                      headers=auth_headers).status_code == 200
    settings = client.get("/api/settings", headers=auth_headers).json()
    assert settings["buffer_minutes"] == 20
    assert client.get("/api/settings/setup-status", headers=auth_headers).json()["llm_configured"] is True


def test_settings_reject_unusable_values(client, auth_headers):
    for body in ({"work_day_start": "9am"}, {"default_duration": 5}, {"horizon_days": 0},
                 {"max_interviews_per_day": 0}, {"work_day_end": "08:00"}):
        resp = client.put("/api/settings", json=body, headers=auth_headers)
        assert resp.status_code == 400, body
        assert resp.json()["success"] is False
    assert client.get("/api/settings", headers=auth_headers).json()["work_day_start"] == "09:00"
    assert _generate(client, auth_headers).status_code == 200


def test_settings_keep_falsy_values(client, auth_headers):
    client.put("/api/settings", json={"gemini_api_key": "abc"}, headers=auth_headers)
    assert client.put("/api/settings", json={"buffer_minutes": 0, "gemini_api_key": ""},
                      headers=auth_headers).status_code == 200
    settings = client.get("/api/settings", headers=auth_headers).json()
    assert settings["buffer_minutes"] == 0
    assert settings["gemini_api_key"] == ""


def test_bad_stored_setting_is_configuration_envelope(client, auth_headers):
    db.put_settings({"work_day_start": "9am"})
    resp = _generate(client, auth_headers)
    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json()["error"] == "Configuration Error"
    assert "work_day_start" in resp.json()["details"]


# ---------------------------------------------------------------------------
# Confirming against stored interviews
# ---------------------------------------------------------------------------

def test_confirm_same_schedule_twice_is_conflict(client, auth_headers):
    entries = _generate(client, auth_headers).json()["schedule"]["schedule"]
    assert client.post("/api/interviews/confirm", json={"schedule": entries}, headers=auth_headers).status_code == 200

    again = client.post("/api/interviews/confirm", json={"schedule": entries}, headers=auth_headers)
    assert again.status_code == 409
    body = again.json()
    assert body["success"] is False
    assert body["error"] == "Conflict"
    assert len(client.get("/api/interviews", headers=auth_headers).json()) == 3


def test_confirm_rejects_clash_with_stored_interview(client, auth_headers):
    entries = _generate(client, auth_headers).json()["schedule"]["schedule"]
    client.post("/api/interviews/confirm", json={"schedule": entries[:1]}, headers=auth_headers)

    double_booked = {k: v for k, v in entries[0].items() if k != "id"}
    resp = client.post("/api/interviews/confirm", json={"schedule": [entries[1], double_booked]},
                       headers=auth_headers)
    assert resp.status_code == 400
    assert "conflict" in resp.json()["details"]
    # nothing from the rejected batch was written
    stored = client.get("/api/interviews", headers=auth_headers).json()
    assert [iv["id"] for iv in stored] == [entries[0]["id"]]


def test_cancelled_interview_frees_its_slot(client, auth_headers):
    entries = _generate(client, auth_headers).json()["schedule"]["schedule"]
    client.post("/api/interviews/confirm", json={"schedule": entries[:1]}, headers=auth_headers)
    client.patch(f"/api/interviews/{entries[0]['id']}/status", json={"status": "cancelled"}, headers=auth_headers)

    rebooked = {k: v for k, v in entries[0].items() if k != "id"}
    resp = client.post("/api/interviews/confirm", json={"schedule": [rebooked]}, headers=auth_headers)
    assert resp.status_code == 200


def test_missing_interview_is_404_envelope(client, auth_headers):
    resp = client.get("/api/interviews/nope", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["error"] == "Not Found"
    assert resp.json()["details"] == "Interview not found"
