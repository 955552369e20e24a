from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import NOTIFICATION_LIMIT
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError
from ..logging_config import get_logger
from ..users.repository import UserRepository
from .model import Notification
from .repository import NotificationRepository

logger = get_logger(__name__)


class NotificationService:
    """In-app notifications.

    `notify_user` / `notify_admin` are fire-and-forget: a failed insert is logged
    and never breaks the operation that triggered it.
    """

    def __init__(self, notifications: NotificationRepository, users: UserRepository):
        self._notifications = notifications
        self._users = users

    def notify_user(
        self,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        action_url: Optional[str] = None,
    ) -> Optional[int]:
        try:
            return self._notifications.create(
                user_id=int(user_id),
                title=title,
                message=message,
                type=type,
                action_url=action_url,
            )
        except Exception:
            logger.warning("Could not deliver notification %r to user %s", title, user_id, exc_info=True)
            return None

    def notify_admin(
        self,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        action_url: Optional[str] = None,
    ) -> Optional[int]:
        try:
            admin_id = self._users.first_admin_id()
        except Exception:
            logger.warning("Could not look up admin for notification %r", title, exc_info=True)
            return None
        if admin_id is None:
            logger.warning("No admin account to receive notification %r", title)
            return None
        return self.notify_user(admin_id, title, message, type, action_url)

    def list_for_user(self, user_id: int, *, unread_only: bool = False) -> Sequence[Notification]:
        return self._notifications.list_for_user(user_id, unread_only=unread_only, limit=NOTIFICATION_LIMIT)

    def mark_read(self, *, notification_id: int, user_id: int) -> None:
        if not self._notifications.mark_read(notification_id=notification_id, user_id=user_id):
            raise NotFoundError("Notification not found")

    def mark_all_read(self, user_id: int) -> int:
        return self._notifications.mark_all_read(user_id)

    def unread_count(self, user_id: int) -> int:
        return self._notifications.unread_count(user_id)
