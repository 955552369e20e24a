from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    """Repository interface for leave requests."""

    def create(
        self,
        *,
        user_id: int,
        type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
        document_url: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: int,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Apply a decision only while the request is still pending."""
        raise NotImplementedError

    def set_status(self, *, request_id: int, status: LeaveStatus) -> bool:
        raise NotImplementedError
