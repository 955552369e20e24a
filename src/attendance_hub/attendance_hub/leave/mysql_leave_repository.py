from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT lr.*, u.name AS user_name, u.email AS user_email, a.name AS approved_by_name
    FROM leave_requests lr
    JOIN users u ON u.id = lr.user_id
    LEFT JOIN users a ON a.id = lr.approved_by
"""


def _row_to_request(row: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(row["id"]),
        user_id=int(row["user_id"]),
        type=LeaveType(row["type"]),
        start_date=row["start_date"],
        end_date=row["end_date"],
        status=LeaveStatus(row["status"]),
        reason=row.get("reason"),
        document_url=row.get("document_url"),
        approved_by=row.get("approved_by"),
        approved_at=row.get("approved_at"),
        rejection_reason=row.get("rejection_reason"),
        created_at=row.get("created_at"),
        user_name=row.get("user_name"),
        user_email=row.get("user_email"),
        approved_by_name=row.get("approved_by_name"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, type, start_date, end_date, reason, document_url, status)
                VALUES(%s,%s,%s,%s,%s,%s,'pending')
                """,
                (user_id, type.value, start_date, end_date, reason, document_url),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE lr.id=%s", (request_id,))
            row = fetchone(cur)
            return _row_to_request(row) if row else None

    def list_requests(
        self,
        *,
        user_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        sql = _SELECT + " WHERE 1=1"
        params: list = []
        if user_id is not None:
            sql += " AND lr.user_id=%s"
            params.append(user_id)
        if status:
            sql += " AND lr.status=%s"
            params.append(status.value)
        sql += " ORDER BY lr.created_at DESC, lr.id DESC LIMIT %s"
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_request(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: int,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s
                WHERE id=%s AND status='pending'
                """,
                (status.value, decided_by, decided_at, rejection_reason, request_id),
            )
            return cur.rowcount > 0

    def set_status(self, *, request_id: int, status: LeaveStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE leave_requests SET status=%s WHERE id=%s", (status.value, request_id))
            return cur.rowcount > 0
