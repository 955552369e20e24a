from datetime import datetime

from attendance_hub.core.enums import Role

PERIOD = {"periodStart": "2026-03-01", "periodEnd": "2026-03-31"}


def _seed(repos, employee):
    other = repos.users.add(name="Olly Other", email="olly@example.com", role=Role.STUDENT)
    repos.attendance.add(
        user_id=employee.user_id, clock_in=datetime(2026, 3, 2, 9), clock_out=datetime(2026, 3, 2, 17), hours_worked=8
    )
    repos.attendance.add(
        user_id=other.user_id, clock_in=datetime(2026, 3, 3, 9), clock_out=datetime(2026, 3, 3, 17), hours_worked=8
    )


def test_employee_summary_is_scoped_to_own_records(client, auth_headers, repos, employee):
    _seed(repos, employee)

    resp = client.post(
        "/api/reports/attendance-summary", headers=auth_headers(employee), json={**PERIOD, "fileType": "csv"}
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["filename"].endswith(".csv")
    assert body["summary"]["totalUsers"] == 1
    assert body["summary"]["totalRecords"] == 1


def test_generated_report_downloads_with_query_token(client, app, repos, admin, employee):
    from attendance_hub.common.security import issue_token

    _seed(repos, employee)
    with app.app_context():
        token = issue_token(user_id=admin.user_id, email=admin.email, role=admin.role)

    generated = client.post(
        "/api/reports/hours-report",
        headers={"Authorization": f"Bearer {token}"},
        json={**PERIOD, "fileType": "csv"},
    )
    assert generated.status_code == 200
    assert len(generated.get_json()["users"]) == 2
    filename = generated.get_json()["filename"]

    download = client.get(f"/api/reports/download/{filename}?token={token}")

    assert download.status_code == 200
    assert download.mimetype == "text/csv"
    assert "attachment" in download.headers["Content-Disposition"]
    download.close()


def test_download_requires_a_token(client):
    resp = client.get("/api/reports/download/anything.csv")

    assert resp.status_code == 401


def test_download_rejects_suspicious_and_missing_files(client, auth_headers, admin):
    headers = auth_headers(admin)

    assert client.get("/api/reports/download/bad..name.csv", headers=headers).status_code == 400
    assert client.get("/api/reports/download/nested/file.csv", headers=headers).status_code == 400
    assert client.get("/api/reports/download/missing.csv", headers=headers).status_code == 404


def test_report_requires_period(client, auth_headers, employee):
    resp = client.post("/api/reports/attendance-summary", headers=auth_headers(employee), json={"fileType": "pdf"})

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Start date and end date are required"


def test_recent_reports_lists_what_was_generated(client, auth_headers, employee):
    headers = auth_headers(employee)
    client.post("/api/reports/attendance-summary", headers=headers, json={**PERIOD, "fileType": "csv"})

    resp = client.get("/api/reports/recent", headers=headers)

    reports = resp.get_json()["reports"]
    assert [r["type"] for r in reports] == ["attendance_summary"]
    assert reports[0]["generated_by"] == employee.user_id


def test_download_works_with_relative_reports_dir(make_container, repos, admin, employee, tmp_path, monkeypatch):
    from attendance_hub.common.security import issue_token
    from attendance_hub.main import create_app

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=make_container("reports"))
    client = app.test_client()
    _seed(repos, employee)
    with app.app_context():
        token = issue_token(user_id=admin.user_id, email=admin.email, role=admin.role)
    headers = {"Authorization": f"Bearer {token}"}

    generated = client.post("/api/reports/hours-report", headers=headers, json={**PERIOD, "fileType": "csv"})
    filename = generated.get_json()["filename"]
    assert (tmp_path / "reports" / filename).is_file()

    download = client.get(f"/api/reports/download/{filename}", headers=headers)

    assert download.status_code == 200
    assert download.get_data(as_text=True).startswith("User,Total Hours,Present Days,Late Days")
    download.close()
