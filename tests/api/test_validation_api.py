import pytest

SCHEDULE = {"dayOfWeek": "monday", "startTime": "09:00", "endTime": "10:00"}


def test_leave_reason_must_be_text(client, auth_headers, repos, employee):
    resp = client.post(
        "/api/leave",
        headers=auth_headers(employee),
        json={"type": "annual", "startDate": "2026-03-10", "endDate": "2026-03-12", "reason": 5},
    )

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Reason must be a string"}
    assert repos.leave.list_requests() == []


def test_signup_password_must_be_text(client):
    resp = client.post(
        "/api/auth/signup", json={"email": "num@example.com", "password": 12345678, "name": "Num"}
    )

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Password must be a string"}


def test_login_password_must_be_text(client, employee):
    resp = client.post("/api/auth/login", json={"email": "eve@example.com", "password": 12345678})

    assert resp.status_code == 400


def test_schedule_subject_must_be_text(client, auth_headers, admin):
    resp = client.post("/api/schedule", headers=auth_headers(admin), json={**SCHEDULE, "subject": 101})

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "subject must be a string"}


@pytest.mark.parametrize("body", [[1, 2], "text", 7])
def test_body_must_be_a_json_object(client, auth_headers, employee, body):
    resp = client.post("/api/leave", headers=auth_headers(employee), json=body)

    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Request body must be a JSON object"}


def test_login_with_array_body_is_400(client):
    resp = client.post("/api/auth/login", json=["eve@example.com", "secret123"])

    assert resp.status_code == 400
