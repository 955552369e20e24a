from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one clock-in (and optional clock-out)."""

    attendance_id: int
    user_id: int
    clock_in: datetime
    clock_out: Optional[datetime]
    status: AttendanceStatus
    hours_worked: Optional[float] = None
    location_verified: bool = False
    clock_in_location: Optional[dict] = None
    clock_out_location: Optional[dict] = None
    notes: Optional[str] = None

    @property
    def work_date(self) -> date:
        return self.clock_in.date()

    @property
    def is_open(self) -> bool:
        return self.clock_out is None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "user_id": self.user_id,
            "clock_in": isoformat_or_none(self.clock_in),
            "clock_out": isoformat_or_none(self.clock_out),
            "hours_worked": self.hours_worked,
            "status": self.status.value,
            "location_verified": self.location_verified,
            "clock_in_location": self.clock_in_location,
            "clock_out_location": self.clock_out_location,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for history and reports (record joined with its user)."""

    record: AttendanceRecord
    user_name: str
    user_email: str
    user_role: str

    def to_dict(self) -> dict:
        out = self.record.to_dict()
        out.update({"user_name": self.user_name, "user_email": self.user_email, "user_role": self.user_role})
        return out
