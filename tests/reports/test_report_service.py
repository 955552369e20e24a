from __future__ import annotations

import csv
from datetime import datetime

import pandas as pd
import pytest

from attendance_hub.core.enums import AttendanceStatus, ReportType, Role
from attendance_hub.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def history(repos, admin, employee):
    other = repos.users.add(name="Olly Other", email="olly@example.com", role=Role.STUDENT)
    add = repos.attendance.add
    add(user_id=employee.user_id, clock_in=datetime(2026, 3, 2, 9), clock_out=datetime(2026, 3, 2, 17), hours_worked=8)
    add(user_id=employee.user_id, clock_in=datetime(2026, 3, 3, 9, 40), clock_out=datetime(2026, 3, 3, 16),
        hours_worked=6.33, status=AttendanceStatus.LATE)
    add(user_id=other.user_id, clock_in=datetime(2026, 3, 3, 8), clock_out=datetime(2026, 3, 3, 18),
        hours_worked=10, status=AttendanceStatus.OVERTIME)
    add(user_id=other.user_id, clock_in=datetime(2026, 2, 20, 9), hours_worked=8)
    return other


def period(**extra):
    data = {"period_start": "2026-03-01", "period_end": "2026-03-31"}
    data.update(extra)
    return data


def test_summary_csv_for_admin(container, repos, admin, history, fixed_now):
    report = container.report_service.attendance_summary(
        current_user_id=admin.user_id, current_role=Role.ADMIN, file_type="csv", now=fixed_now, **period()
    )

    assert report.filename == "attendance_summary_2026-03-04T08-50-00-000000.csv"
    assert report.document.summary == {
        "totalUsers": 2,
        "totalRecords": 3,
        "presentDays": 2,
        "lateDays": 1,
        "absentDays": 0,
        "totalHours": 24.33,
    }
    with open(report.file_path, newline="", encoding="utf-8") as fh:
        rows = list(csv.reader(fh))
    assert rows[0] == ["Date", "User", "Clock In", "Clock Out", "Hours", "Status"]
    assert rows[1] == ["2026-03-03", "Olly Other", "08:00", "18:00", "10", "overtime"]
    assert len(rows) == 4

    meta = repos.reports.items[0]
    assert meta.type == ReportType.ATTENDANCE_SUMMARY
    assert meta.generated_by == admin.user_id


def test_summary_is_scoped_for_non_admins(container, employee, history, fixed_now):
    report = container.report_service.attendance_summary(
        current_user_id=employee.user_id, current_role=Role.EMPLOYEE, file_type="csv", now=fixed_now, **period()
    )

    assert report.document.summary["totalUsers"] == 1
    assert {r["user"] for r in report.document.records} == {"Eve Employee"}


def test_summary_role_filter(container, admin, history, fixed_now):
    report = container.report_service.attendance_summary(
        current_user_id=admin.user_id, current_role=Role.ADMIN, role="student", file_type="csv",
        now=fixed_now, **period()
    )

    assert report.document.summary["totalRecords"] == 1


def test_hours_report_pdf_is_written(container, admin, history, fixed_now):
    report = container.report_service.hours_report(
        current_user_id=admin.user_id, current_role=Role.ADMIN, now=fixed_now, **period()
    )

    assert report.filename.endswith(".pdf")
    assert [u["name"] for u in report.document.users] == ["Eve Employee", "Olly Other"]
    with open(report.file_path, "rb") as fh:
        assert fh.read(5) == b"%PDF-"


def test_xlsx_report(container, admin, history, fixed_now):
    report = container.report_service.hours_report(
        current_user_id=admin.user_id, current_role=Role.ADMIN, file_type="xlsx", now=fixed_now, **period()
    )

    df = pd.read_excel(report.file_path)
    assert list(df.columns) == ["User", "Total Hours", "Present Days", "Late Days"]
    assert len(df) == 2


def test_period_validation(container, admin):
    service = container.report_service
    with pytest.raises(ValidationError, match="Start date and end date are required"):
        service.attendance_summary(current_user_id=admin.user_id, current_role=Role.ADMIN,
                                   period_start=None, period_end="2026-03-01")
    with pytest.raises(ValidationError, match="Invalid fileType"):
        service.attendance_summary(current_user_id=admin.user_id, current_role=Role.ADMIN, file_type="docx", **period())


@pytest.mark.parametrize("name", ["../secret.pdf", "a/b.pdf", "a\\b.pdf", ""])
def test_download_rejects_path_tricks(container, name):
    with pytest.raises(ValidationError, match="Invalid filename"):
        container.report_service.resolve_download(name)


def test_download_resolves_existing_file(container, admin, history, fixed_now):
    service = container.report_service
    report = service.attendance_summary(
        current_user_id=admin.user_id, current_role=Role.ADMIN, file_type="csv", now=fixed_now, **period()
    )

    path, mimetype = service.resolve_download(report.filename)

    assert path.name == report.filename
    assert mimetype == "text/csv"
    with pytest.raises(NotFoundError):
        service.resolve_download("missing.pdf")


def test_recent_reports_scoped(container, admin, employee, history, fixed_now):
    service = container.report_service
    service.hours_report(current_user_id=admin.user_id, current_role=Role.ADMIN, file_type="csv",
                         now=fixed_now, **period())
    service.hours_report(current_user_id=employee.user_id, current_role=Role.EMPLOYEE, file_type="csv",
                         now=fixed_now, **period())

    assert len(service.list_recent(current_user_id=admin.user_id, current_role=Role.ADMIN)) == 2
    mine = service.list_recent(current_user_id=employee.user_id, current_role=Role.EMPLOYEE)
    assert [m.generated_by for m in mine] == [employee.user_id]
