from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local, require_iso_date
from ..common.validators import optional_enum, optional_text, require_enum
from ..core.enums import LeaveStatus, LeaveType, NotificationType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..logging_config import get_logger
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from .model import LeaveRequest
from .repository import LeaveRepository

logger = get_logger(__name__)


class LeaveService:
    """Leave workflow: pending -> approved | rejected | cancelled."""

    def __init__(
        self,
        leave: LeaveRepository,
        users: UserRepository,
        notifications: Optional[NotificationService] = None,
    ):
        self._leave = leave
        self._users = users
        self._notifications = notifications

    def list_requests(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> Sequence[LeaveRequest]:
        status_filter = optional_enum(LeaveStatus, status, "status")
        target = user_id if current_role == Role.ADMIN else current_user_id
        return self._leave.list_requests(user_id=target, status=status_filter)

    def create_request(
        self,
        *,
        user_id: int,
        type: Any,
        start_date: Any,
        end_date: Any,
        reason: Optional[str] = None,
        document_url: Optional[str] = None,
    ) -> LeaveRequest:
        if not type or not start_date or not end_date:
            raise ValidationError("Type, start date, and end date are required")
        leave_type = require_enum(LeaveType, type, "leave type")
        start = require_iso_date(start_date, "startDate")
        end = require_iso_date(end_date, "endDate")
        if end < start:
            raise ValidationError("End date must be on or after start date")

        request_id = self._leave.create(
            user_id=int(user_id),
            type=leave_type,
            start_date=start,
            end_date=end,
            reason=optional_text(reason, "Reason"),
            document_url=optional_text(document_url, "documentUrl"),
        )
        logger.info("Leave request %s created by user %s (%s %s..%s)", request_id, user_id, leave_type.value, start, end)

        if self._notifications:
            user = self._users.get_by_id(int(user_id))
            who = user.name if user else f"User {user_id}"
            self._notifications.notify_admin(
                "New Leave Request",
                f"{who} submitted a {leave_type.value} leave request from {start.isoformat()} to {end.isoformat()}.",
                NotificationType.INFO,
            )
        return self._load(request_id)

    def approve(self, *, current_user_id: int, current_role: Role, request_id: int, now: datetime | None = None) -> LeaveRequest:
        req = self._decide(
            current_user_id=current_user_id,
            current_role=current_role,
            request_id=request_id,
            status=LeaveStatus.APPROVED,
            now=now,
        )
        if self._notifications:
            self._notifications.notify_user(
                req.user_id,
                "Leave Request Approved",
                f"Your {req.type.value} leave request from {req.start_date.isoformat()} "
                f"to {req.end_date.isoformat()} has been approved.",
                NotificationType.SUCCESS,
            )
        return req

    def reject(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        request_id: int,
        rejection_reason: Optional[str] = None,
        now: datetime | None = None,
    ) -> LeaveRequest:
        reason = optional_text(rejection_reason, "rejectionReason")
        req = self._decide(
            current_user_id=current_user_id,
            current_role=current_role,
            request_id=request_id,
            status=LeaveStatus.REJECTED,
            rejection_reason=reason,
            now=now,
        )
        if self._notifications:
            message = (
                f"Your {req.type.value} leave request from {req.start_date.isoformat()} "
                f"to {req.end_date.isoformat()} has been rejected."
            )
            if reason:
                message += f" Reason: {reason}"
            self._notifications.notify_user(req.user_id, "Leave Request Rejected", message, NotificationType.ERROR)
        return req

    def cancel(self, *, current_user_id: int, current_role: Role, request_id: int) -> LeaveRequest:
        req = self._load(request_id)
        if current_role != Role.ADMIN and req.user_id != int(current_user_id):
            raise AuthorizationError("You can only cancel your own leave requests")
        if req.status == LeaveStatus.CANCELLED:
            raise ValidationError("Leave request is already cancelled")
        if req.status == LeaveStatus.APPROVED:
            raise ValidationError("Cannot cancel an approved leave request")

        self._leave.set_status(request_id=request_id, status=LeaveStatus.CANCELLED)
        logger.info("Leave request %s cancelled by user %s", request_id, current_user_id)
        return self._load(request_id)

    def _decide(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        request_id: int,
        status: LeaveStatus,
        rejection_reason: Optional[str] = None,
        now: datetime | None = None,
    ) -> LeaveRequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        req = self._load(request_id)
        if req.status != LeaveStatus.PENDING:
            raise ValidationError(f"Leave request is already {req.status.value}")

        ok = self._leave.decide(
            request_id=request_id,
            status=status,
            decided_by=int(current_user_id),
            decided_at=now or now_local(),
            rejection_reason=rejection_reason,
        )
        if not ok:
            # another admin decided in between
            current = self._load(request_id)
            raise ValidationError(f"Leave request is already {current.status.value}")

        logger.info("Leave request %s %s by admin %s", request_id, status.value, current_user_id)
        return self._load(request_id)

    def _load(self, request_id: int) -> LeaveRequest:
        req = self._leave.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        return req
