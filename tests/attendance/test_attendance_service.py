from __future__ import annotations

from datetime import datetime

import pytest

from attendance_hub.core.enums import AttendanceStatus, Role
from attendance_hub.core.exceptions import LocationError, ValidationError

OFFICE = {"latitude": -26.1942, "longitude": 28.0578}
FAR_AWAY = {"latitude": -26.0, "longitude": 28.0578}


def test_clock_in_on_time_is_present_and_notifies(container, repos, admin, employee, fixed_now):
    record = container.attendance_service.clock_in(employee.user_id, **OFFICE, now=fixed_now)

    assert record.status == AttendanceStatus.PRESENT
    assert record.location_verified is True
    assert record.clock_in_location == {"latitude": -26.1942, "longitude": 28.0578}
    assert repos.notifications.titles_for(admin.user_id) == ["Clock In"]
    assert repos.notifications.titles_for(employee.user_id) == ["Clock In Successful"]


def test_clock_in_after_threshold_is_late(container, repos, admin, employee):
    record = container.attendance_service.clock_in(employee.user_id, **OFFICE, now=datetime(2026, 3, 4, 9, 20))

    assert record.status == AttendanceStatus.LATE
    assert repos.notifications.titles_for(admin.user_id) == ["Late Arrival"]
    assert repos.notifications.titles_for(employee.user_id) == ["Late Clock In"]


def test_clock_in_uses_work_start_from_settings(container, repos, employee):
    repos.settings.values["work_start_time"] = "08:00"

    record = container.attendance_service.clock_in(employee.user_id, **OFFICE, now=datetime(2026, 3, 4, 8, 30))

    assert record.status == AttendanceStatus.LATE


def test_clock_in_outside_radius_is_rejected(container, employee, fixed_now):
    with pytest.raises(LocationError) as exc:
        container.attendance_service.clock_in(employee.user_id, **FAR_AWAY, now=fixed_now)

    assert exc.value.status_code == 403
    assert "Please be within 5km to clock in." in str(exc.value)
    assert exc.value.payload()["threshold"] == 5000


def test_clock_in_requires_location(container, employee, fixed_now):
    with pytest.raises(ValidationError, match="Location is required"):
        container.attendance_service.clock_in(employee.user_id, latitude=None, longitude=28.0, now=fixed_now)


def test_clock_in_twice_is_rejected(container, employee, fixed_now):
    container.attendance_service.clock_in(employee.user_id, **OFFICE, now=fixed_now)

    with pytest.raises(ValidationError, match="already clocked in today"):
        container.attendance_service.clock_in(employee.user_id, **OFFICE, now=fixed_now)


def test_clock_out_computes_hours_and_overtime(container, employee, fixed_now):
    service = container.attendance_service
    service.clock_in(employee.user_id, **OFFICE, now=fixed_now)

    record = service.clock_out(employee.user_id, **OFFICE, now=datetime(2026, 3, 4, 17, 35))

    assert record.hours_worked == 8.75
    assert record.status == AttendanceStatus.OVERTIME
    assert record.clock_out_location is not None


def test_clock_out_keeps_late_status_without_overtime(container, employee):
    service = container.attendance_service
    service.clock_in(employee.user_id, **OFFICE, now=datetime(2026, 3, 4, 10, 0))

    record = service.clock_out(employee.user_id, **OFFICE, now=datetime(2026, 3, 4, 16, 0))

    assert record.hours_worked == 6.0
    assert record.status == AttendanceStatus.LATE


def test_clock_out_without_clock_in(container, employee, fixed_now):
    with pytest.raises(ValidationError, match="No active clock in found for today"):
        container.attendance_service.clock_out(employee.user_id, **OFFICE, now=fixed_now)


def test_clock_out_twice(container, employee, fixed_now):
    service = container.attendance_service
    service.clock_in(employee.user_id, **OFFICE, now=fixed_now)
    service.clock_out(employee.user_id, **OFFICE, now=datetime(2026, 3, 4, 17, 0))

    with pytest.raises(ValidationError, match="already clocked out today"):
        service.clock_out(employee.user_id, **OFFICE, now=datetime(2026, 3, 4, 17, 5))


def test_clock_out_outside_radius_mentions_clock_out(container, employee, fixed_now):
    container.attendance_service.clock_in(employee.user_id, **OFFICE, now=fixed_now)

    with pytest.raises(LocationError, match="to clock out"):
        container.attendance_service.clock_out(employee.user_id, **FAR_AWAY, now=datetime(2026, 3, 4, 17, 0))


def test_clock_in_succeeds_when_notifications_fail(container, repos, admin, employee, fixed_now):
    repos.notifications.fail = True

    record = container.attendance_service.clock_in(employee.user_id, **OFFICE, now=fixed_now)

    assert record.status == AttendanceStatus.PRESENT


def test_history_is_scoped_for_non_admins(container, repos, admin, employee):
    other = repos.users.add(name="Olly Other", email="olly@example.com")
    repos.attendance.add(user_id=employee.user_id, clock_in=datetime(2026, 3, 2, 9))
    repos.attendance.add(user_id=other.user_id, clock_in=datetime(2026, 3, 3, 9))

    mine = container.attendance_service.get_history(
        current_user_id=employee.user_id, current_role=Role.EMPLOYEE, user_id=other.user_id
    )
    everyone = container.attendance_service.get_history(current_user_id=admin.user_id, current_role=Role.ADMIN)

    assert [r.record.user_id for r in mine] == [employee.user_id]
    assert [r.user_name for r in everyone] == ["Olly Other", "Eve Employee"]


def test_stats_counts_statuses_and_hours(container, repos, employee):
    add = repos.attendance.add
    add(user_id=employee.user_id, clock_in=datetime(2026, 3, 2, 9), hours_worked=8)
    add(user_id=employee.user_id, clock_in=datetime(2026, 3, 3, 9, 30), hours_worked=6, status=AttendanceStatus.LATE)
    add(user_id=employee.user_id, clock_in=datetime(2026, 3, 4, 8), hours_worked=10, status=AttendanceStatus.OVERTIME)

    stats = container.attendance_service.get_stats(current_user_id=employee.user_id, current_role=Role.EMPLOYEE)

    assert stats.present_days == 1
    assert stats.late_days == 1
    assert stats.overtime_days == 1
    assert stats.total_hours == 24
    assert stats.avg_hours_per_day == 8
