from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from attendance_hub.attendance.model import AttendanceRecord, AttendanceReportRow
from attendance_hub.container import wire_container
from attendance_hub.core.enums import AttendanceStatus, LeaveStatus, Role, UserStatus
from attendance_hub.leave.model import LeaveRequest
from attendance_hub.notifications.model import Notification
from attendance_hub.reports.model import ReportMeta
from attendance_hub.schedules.model import ScheduleEntry
from attendance_hub.users.model import User


class FakeUsersRepo:
    def __init__(self):
        self._next_id = 1
        self.users: dict[int, User] = {}

    def add(self, *, name, email, password="secret123", role=Role.EMPLOYEE, status=UserStatus.ACTIVE, descriptor=None):
        uid = self.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            name=name,
            role=role,
            status=status,
            facial_descriptors=descriptor,
        )
        return self.users[uid]

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, *, email, password_hash, name, role, status=UserStatus.ACTIVE, phone=None, department=None,
                    facial_descriptors=None):
        uid = self._next_id
        self._next_id += 1
        self.users[uid] = User(
            user_id=uid,
            email=email,
            name=name,
            password_hash=password_hash,
            role=role,
            status=status,
            phone=phone,
            department=department,
            facial_descriptors=facial_descriptors,
            created_at=datetime(2026, 1, 1, 9, 0),
        )
        return uid

    def update_fields(self, user_id, fields):
        user = self.users.get(int(user_id))
        if not user:
            return False
        self.users[int(user_id)] = replace(user, **fields)
        return True

    def delete_by_id(self, user_id):
        return self.users.pop(int(user_id), None) is not None

    def list_face_candidates(self):
        return [(u.user_id, u.facial_descriptors) for u in self.users.values() if u.is_active and u.facial_descriptors]

    def list_admin_view(self, *, role=None, status=None, search=None):
        rows = []
        for u in self.users.values():
            if role and u.role != role:
                continue
            if status and u.status != status:
                continue
            if search and search.lower() not in (u.name + u.email).lower():
                continue
            row = u.to_public_dict()
            row.update({"attendance_count": 0, "total_hours": 0})
            rows.append(row)
        return rows

    def get_stats(self, user_id):
        return {"total_records": 0, "present_days": 0, "late_days": 0, "total_hours": 0}

    def first_admin_id(self):
        return next((u.user_id for u in self.users.values() if u.role == Role.ADMIN and u.is_active), None)

    def count_active(self):
        return sum(1 for u in self.users.values() if u.is_active)


class FakeAttendanceRepo:
    def __init__(self, users: FakeUsersRepo):
        self._users = users
        self._next_id = 1
        self.records: dict[int, AttendanceRecord] = {}

    def add(self, *, user_id, clock_in, clock_out=None, status=AttendanceStatus.PRESENT, hours_worked=None):
        rid = self._next_id
        self._next_id += 1
        self.records[rid] = AttendanceRecord(
            attendance_id=rid,
            user_id=user_id,
            clock_in=clock_in,
            clock_out=clock_out,
            status=status,
            hours_worked=hours_worked,
        )
        return self.records[rid]

    def _newest_first(self, records):
        return sorted(records, key=lambda r: r.clock_in, reverse=True)

    def _row(self, record):
        user = self._users.get_by_id(record.user_id)
        return AttendanceReportRow(
            record=record,
            user_name=user.name if user else "",
            user_email=user.email if user else "",
            user_role=user.role.value if user else "",
        )

    def get_by_id(self, attendance_id):
        return self.records.get(int(attendance_id))

    def get_open_for_user_on(self, user_id, day):
        found = [r for r in self.records.values() if r.user_id == user_id and r.work_date == day and r.is_open]
        return self._newest_first(found)[0] if found else None

    def get_latest_for_user_on(self, user_id, day):
        found = [r for r in self.records.values() if r.user_id == user_id and r.work_date == day]
        return self._newest_first(found)[0] if found else None

    def create_clock_in(self, *, user_id, clock_in, status, location_verified, location, notes=None):
        record = self.add(user_id=user_id, clock_in=clock_in, status=status)
        self.records[record.attendance_id] = replace(
            record, location_verified=location_verified, clock_in_location=location, notes=notes
        )
        return record.attendance_id

    def update_clock_out(self, *, attendance_id, clock_out, hours_worked, status, location, notes=None):
        self.records[attendance_id] = replace(
            self.records[attendance_id],
            clock_out=clock_out,
            hours_worked=hours_worked,
            status=status,
            clock_out_location=location,
            notes=notes,
        )

    def list_history(self, *, user_id=None, start_date=None, end_date=None, status=None, role=None, limit=100):
        rows = []
        for r in self._newest_first(self.records.values()):
            if user_id is not None and r.user_id != user_id:
                continue
            if start_date and r.work_date < start_date:
                continue
            if end_date and r.work_date > end_date:
                continue
            if status and r.status != status:
                continue
            row = self._row(r)
            if role and row.user_role != role.value:
                continue
            rows.append(row)
        return rows[:limit] if limit else rows

    def list_for_user(self, user_id, *, start_date=None, end_date=None, since=None):
        out = []
        for r in self._newest_first(self.records.values()):
            if r.user_id != user_id:
                continue
            if start_date and r.work_date < start_date:
                continue
            if end_date and r.work_date > end_date:
                continue
            if since and r.clock_in < since:
                continue
            out.append(r)
        return out

    def list_since(self, since):
        return [self._row(r) for r in self._newest_first(self.records.values()) if r.clock_in >= since]

    def hours_by_user(self, *, start_date, end_date, role=None, user_id=None):
        totals: dict[int, dict] = {}
        for row in self.list_history(user_id=user_id, start_date=start_date, end_date=end_date, role=role, limit=None):
            r = row.record
            entry = totals.setdefault(
                r.user_id,
                {"user_id": r.user_id, "name": row.user_name, "role": row.user_role,
                 "present_days": 0, "late_days": 0, "total_hours": 0.0},
            )
            if r.status in (AttendanceStatus.PRESENT, AttendanceStatus.OVERTIME):
                entry["present_days"] += 1
            if r.status == AttendanceStatus.LATE:
                entry["late_days"] += 1
            entry["total_hours"] = round(entry["total_hours"] + float(r.hours_worked or 0), 2)
        return sorted(totals.values(), key=lambda e: e["total_hours"], reverse=True)


class FakeLeaveRepo:
    def __init__(self):
        self._next_id = 1
        self.requests: dict[int, LeaveRequest] = {}

    def create(self, *, user_id, type, start_date, end_date, reason, document_url):
        rid = self._next_id
        self._next_id += 1
        self.requests[rid] = LeaveRequest(
            request_id=rid,
            user_id=user_id,
            type=type,
            start_date=start_date,
            end_date=end_date,
            status=LeaveStatus.PENDING,
            reason=reason,
            document_url=document_url,
            created_at=datetime(2026, 3, 1, 10, 0),
        )
        return rid

    def get_by_id(self, request_id):
        return self.requests.get(int(request_id))

    def list_requests(self, *, user_id=None, status=None, limit=200):
        out = [
            r for r in self.requests.values()
            if (user_id is None or r.user_id == user_id) and (status is None or r.status == status)
        ]
        return sorted(out, key=lambda r: r.request_id, reverse=True)[:limit]

    def decide(self, *, request_id, status, decided_by, decided_at, rejection_reason=None):
        req = self.requests.get(int(request_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        self.requests[int(request_id)] = replace(
            req, status=status, approved_by=decided_by, approved_at=decided_at, rejection_reason=rejection_reason
        )
        return True

    def set_status(self, *, request_id, status):
        req = self.requests.get(int(request_id))
        if not req:
            return False
        self.requests[int(request_id)] = replace(req, status=status)
        return True


class FakeNotificationsRepo:
    def __init__(self):
        self._next_id = 1
        self.items: dict[int, Notification] = {}
        self.fail = False

    def create(self, *, user_id, title, message, type, action_url=None):
        if self.fail:
            raise RuntimeError("database unavailable")
        nid = self._next_id
        self._next_id += 1
        self.items[nid] = Notification(
            notification_id=nid, user_id=user_id, title=title, message=message, type=type, action_url=action_url
        )
        return nid

    def titles_for(self, user_id):
        return [n.title for n in self.items.values() if n.user_id == user_id]

    def list_for_user(self, user_id, *, unread_only=False, limit=50):
        out = [n for n in self.items.values() if n.user_id == user_id and not (unread_only and n.is_read)]
        return sorted(out, key=lambda n: n.notification_id, reverse=True)[:limit]

    def mark_read(self, *, notification_id, user_id):
        n = self.items.get(int(notification_id))
        if not n or n.user_id != user_id:
            return False
        self.items[n.notification_id] = replace(n, is_read=True)
        return True

    def mark_all_read(self, user_id):
        changed = 0
        for n in list(self.items.values()):
            if n.user_id == user_id and not n.is_read:
                self.items[n.notification_id] = replace(n, is_read=True)
                changed += 1
        return changed

    def unread_count(self, user_id):
        return sum(1 for n in self.items.values() if n.user_id == user_id and not n.is_read)


class FakeSettingsRepo:
    def __init__(self, values: Optional[dict] = None):
        self.values: dict = dict(values or {})

    def get_all(self):
        return dict(self.values)

    def upsert_many(self, values):
        self.values.update(values)


class FakeSchedulesRepo:
    def __init__(self):
        self._next_id = 1
        self.entries: dict[int, ScheduleEntry] = {}

    def _insert(self, draft, created_by):
        eid = self._next_id
        self._next_id += 1
        self.entries[eid] = ScheduleEntry(
            entry_id=eid,
            day_of_week=draft.day_of_week,
            start_time=draft.start_time,
            end_time=draft.end_time,
            subject=draft.subject,
            description=draft.description,
            location=draft.location,
            applies_to=draft.applies_to,
            is_active=draft.is_active,
            created_by=created_by,
        )
        return eid

    def list_entries(self, *, active_only=False, audiences=None, day=None):
        out = [
            e for e in self.entries.values()
            if (not active_only or e.is_active)
            and (audiences is None or e.applies_to in audiences)
            and (day is None or e.day_of_week == day)
        ]
        return sorted(out, key=lambda e: e.sort_key())

    def get_by_id(self, entry_id):
        return self.entries.get(int(entry_id))

    def create(self, entry, *, created_by):
        return self._insert(entry, created_by)

    def update_fields(self, entry_id, fields):
        entry = self.entries.get(int(entry_id))
        if not entry:
            return False
        self.entries[int(entry_id)] = replace(entry, **fields)
        return True

    def delete(self, entry_id):
        return self.entries.pop(int(entry_id), None) is not None

    def replace_all(self, entries, *, created_by):
        self.entries.clear()
        for draft in entries:
            self._insert(draft, created_by)


class FakeReportsRepo:
    def __init__(self):
        self._next_id = 1
        self.items: list[ReportMeta] = []

    def create(self, *, generated_by, type, period_start, period_end, file_path, file_type, parameters=None):
        rid = self._next_id
        self._next_id += 1
        self.items.append(
            ReportMeta(
                report_id=rid,
                generated_by=generated_by,
                type=type,
                period_start=period_start,
                period_end=period_end,
                file_path=file_path,
                file_type=file_type,
                parameters=parameters,
            )
        )
        return rid

    def list_recent(self, *, generated_by=None, limit=20):
        out = [m for m in reversed(self.items) if generated_by is None or m.generated_by == generated_by]
        return out[:limit]


class FakeConn:
    def __init__(self, healthy: bool = True):
        self.healthy = healthy

    def ping(self):
        return self.healthy


class Repos:
    def __init__(self):
        self.users = FakeUsersRepo()
        self.attendance = FakeAttendanceRepo(self.users)
        self.leave = FakeLeaveRepo()
        self.notifications = FakeNotificationsRepo()
        self.settings = FakeSettingsRepo()
        self.schedules = FakeSchedulesRepo()
        self.reports = FakeReportsRepo()


@pytest.fixture
def fixed_now():
    # a Wednesday
    return datetime(2026, 3, 4, 8, 50, 0)


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()


@pytest.fixture
def repos():
    return Repos()


@pytest.fixture
def admin(repos):
    return repos.users.add(name="Alice Admin", email="admin@example.com", password="admin123", role=Role.ADMIN)


@pytest.fixture
def employee(repos):
    return repos.users.add(name="Eve Employee", email="eve@example.com", password="secret123")


@pytest.fixture
def make_container(repos):
    def make(reports_dir):
        return wire_container(
            conn=FakeConn(),
            users_repo=repos.users,
            attendance_repo=repos.attendance,
            leave_repo=repos.leave,
            schedules_repo=repos.schedules,
            settings_repo=repos.settings,
            notifications_repo=repos.notifications,
            reports_repo=repos.reports,
            reports_dir=reports_dir,
        )

    return make


@pytest.fixture
def container(make_container, tmp_path):
    return make_container(tmp_path / "reports")


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from attendance_hub.main import create_app

    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    from attendance_hub.common.security import issue_token

    def make(user: User) -> dict:
        with app.app_context():
            token = issue_token(user_id=user.user_id, email=user.email, role=user.role)
        return {"Authorization": f"Bearer {token}"}

    return make
