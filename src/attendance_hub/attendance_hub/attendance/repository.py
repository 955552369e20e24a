from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, Role
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_open_for_user_on(self, user_id: int, day: date) -> Optional[AttendanceRecord]:
        """Latest record of `day` that has no clock-out yet."""
        raise NotImplementedError

    def get_latest_for_user_on(self, user_id: int, day: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        user_id: int,
        clock_in: datetime,
        status: AttendanceStatus,
        location_verified: bool,
        location: Optional[dict],
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_clock_out(
        self,
        *,
        attendance_id: int,
        clock_out: datetime,
        hours_worked: float,
        status: AttendanceStatus,
        location: Optional[dict],
        notes: Optional[str] = None,
    ) -> None:
        raise NotImplementedError

    def list_history(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        role: Optional[Role] = None,
        limit: Optional[int] = 100,
    ) -> Sequence[AttendanceReportRow]:
        """Newest first, joined with the owning user."""
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        since: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest first."""
        raise NotImplementedError

    def list_since(self, since: datetime) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError

    def hours_by_user(
        self,
        *,
        start_date: date,
        end_date: date,
        role: Optional[Role] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[dict]:
        """One row per user: name, role, present_days, late_days, total_hours (descending hours)."""
        raise NotImplementedError
