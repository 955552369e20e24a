from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: a leave request and its approval state."""

    request_id: int
    user_id: int
    type: LeaveType
    start_date: date
    end_date: date
    status: LeaveStatus
    reason: Optional[str] = None
    document_url: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    # joined columns (list views)
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    approved_by_name: Optional[str] = None

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "user_id": self.user_id,
            "type": self.type.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "days": self.days,
            "reason": self.reason,
            "document_url": self.document_url,
            "status": self.status.value,
            "approved_by": self.approved_by,
            "approved_at": isoformat_or_none(self.approved_at),
            "rejection_reason": self.rejection_reason,
            "created_at": isoformat_or_none(self.created_at),
            "user_name": self.user_name,
            "user_email": self.user_email,
            "approved_by_name": self.approved_by_name,
        }
