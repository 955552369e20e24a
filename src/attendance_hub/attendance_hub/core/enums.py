from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization and schedule targeting."""

    ADMIN = "admin"
    EMPLOYEE = "employee"
    STUDENT = "student"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class AttendanceStatus(str, Enum):
    """Status stored on an attendance row."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    OVERTIME = "overtime"


class LeaveStatus(str, Enum):
    """Approval state of a leave request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class LeaveType(str, Enum):
    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    UNPAID = "unpaid"


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class DayOfWeek(str, Enum):
    """Weekday names as stored in weekly_schedule (Monday first)."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def order(self) -> int:
        return list(DayOfWeek).index(self)

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayOfWeek":
        """Map `date.weekday()` (0 = Monday) to a DayOfWeek."""
        return list(cls)[weekday]


class ReportType(str, Enum):
    ATTENDANCE_SUMMARY = "attendance_summary"
    HOURS_REPORT = "hours_report"


class ReportFileType(str, Enum):
    PDF = "pdf"
    CSV = "csv"
    XLSX = "xlsx"
