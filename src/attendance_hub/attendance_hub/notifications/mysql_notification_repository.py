from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository


def _row_to_notification(row: dict) -> Notification:
    return Notification(
        notification_id=int(row["id"]),
        user_id=int(row["user_id"]),
        title=row["title"],
        message=row["message"],
        type=NotificationType(row["type"]),
        is_read=bool(row.get("is_read")),
        action_url=row.get("action_url"),
        created_at=row.get("created_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType,
        action_url: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, title, message, type, action_url)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (user_id, title, message, type.value, action_url),
            )
            return int(cur.lastrowid)

    def list_for_user(self, user_id: int, *, unread_only: bool = False, limit: int = 50) -> Sequence[Notification]:
        sql = "SELECT * FROM notifications WHERE user_id=%s"
        if unread_only:
            sql += " AND is_read=0"
        sql += " ORDER BY created_at DESC, id DESC LIMIT %s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (user_id, int(limit)))
            return [_row_to_notification(r) for r in fetchall(cur)]

    def mark_read(self, *, notification_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM notifications WHERE id=%s AND user_id=%s", (notification_id, user_id))
            if not fetchone(cur):
                return False
            cur.execute("UPDATE notifications SET is_read=1 WHERE id=%s", (notification_id,))
            return True

    def mark_all_read(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE user_id=%s AND is_read=0", (user_id,))
            return int(cur.rowcount)

    def unread_count(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS cnt FROM notifications WHERE user_id=%s AND is_read=0", (user_id,))
            row = fetchone(cur)
            return int(row["cnt"]) if row else 0
