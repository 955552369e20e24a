from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, to_json
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository


def _row_to_record(row: dict) -> AttendanceRecord:
    hours = row.get("hours_worked")
    return AttendanceRecord(
        attendance_id=int(row["id"]),
        user_id=int(row["user_id"]),
        clock_in=row["clock_in"],
        clock_out=row.get("clock_out"),
        status=AttendanceStatus(row["status"]),
        hours_worked=float(hours) if hours is not None else None,
        location_verified=bool(row.get("location_verified")),
        clock_in_location=from_json(row.get("clock_in_location")),
        clock_out_location=from_json(row.get("clock_out_location")),
        notes=row.get("notes"),
    )


def _row_to_report_row(row: dict) -> AttendanceReportRow:
    return AttendanceReportRow(
        record=_row_to_record(row),
        user_name=row.get("user_name") or "",
        user_email=row.get("user_email") or "",
        user_role=row.get("user_role") or "",
    )


_JOINED_SELECT = """
    SELECT a.*, u.name AS user_name, u.email AS user_email, u.role AS user_role
    FROM attendance a
    JOIN users u ON u.id = a.user_id
    WHERE 1=1
"""


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT * FROM attendance WHERE id=%s", (attendance_id,))
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def get_open_for_user_on(self, user_id: int, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM attendance
                WHERE user_id=%s AND DATE(clock_in)=%s AND clock_out IS NULL
                ORDER BY clock_in DESC
                LIMIT 1
                """,
                (user_id, day),
            )
            row = fetchone(cur)
            return _row_to_record(row) if row else None

    def get_latest_for_user_on(self, user_id: int, day: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT * FROM attendance
                WHERE user_id=%s AND DATE(clock_in)=%s
                ORDER BY clock_in DESC
                LIMIT 1
                """,
                (user_id, day),
            )
            row = fetchone(cur)
            return _row_to_record(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(user_id, clock_in, status, location_verified, clock_in_location, notes)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (user_id, clock_in, status.value, int(location_verified), to_json(location), notes),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET clock_out=%s, hours_worked=%s, status=%s, clock_out_location=%s, notes=%s
                WHERE id=%s
                """,
                (clock_out, hours_worked, status.value, to_json(location), notes, attendance_id),
            )

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
        sql = _JOINED_SELECT
        params: list = []
        if user_id is not None:
            sql += " AND a.user_id=%s"
            params.append(user_id)
        if start_date:
            sql += " AND DATE(a.clock_in) >= %s"
            params.append(start_date)
        if end_date:
            sql += " AND DATE(a.clock_in) <= %s"
            params.append(end_date)
        if status:
            sql += " AND a.status=%s"
            params.append(status.value)
        if role:
            sql += " AND u.role=%s"
            params.append(role.value)
        sql += " ORDER BY a.clock_in DESC"
        if limit:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_report_row(r) for r in fetchall(cur)]

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        since: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        sql = "SELECT * FROM attendance WHERE user_id=%s"
        params: list = [user_id]
        if start_date:
            sql += " AND DATE(clock_in) >= %s"
            params.append(start_date)
        if end_date:
            sql += " AND DATE(clock_in) <= %s"
            params.append(end_date)
        if since:
            sql += " AND clock_in >= %s"
            params.append(since)
        sql += " ORDER BY clock_in DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_since(self, since: datetime) -> Sequence[AttendanceReportRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_JOINED_SELECT + " AND a.clock_in >= %s ORDER BY a.clock_in DESC", (since,))
            return [_row_to_report_row(r) for r in fetchall(cur)]

    def hours_by_user(
        self,
        *,
        start_date: date,
        end_date: date,
        role: Optional[Role] = None,
        user_id: Optional[int] = None,
    ) -> Sequence[dict]:
        sql = """
            SELECT u.id, u.name, u.role,
                   COUNT(CASE WHEN a.status IN ('present', 'overtime') THEN 1 END) AS present_days,
                   COUNT(CASE WHEN a.status = 'late' THEN 1 END) AS late_days,
                   COALESCE(SUM(a.hours_worked), 0) AS total_hours
            FROM users u
            LEFT JOIN attendance a
                   ON a.user_id = u.id AND DATE(a.clock_in) BETWEEN %s AND %s
            WHERE 1=1
        """
        params: list = [start_date, end_date]
        if role:
            sql += " AND u.role=%s"
            params.append(role.value)
        if user_id is not None:
            sql += " AND u.id=%s"
            params.append(user_id)
        sql += " GROUP BY u.id, u.name, u.role ORDER BY total_hours DESC, u.name"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            rows = fetchall(cur)
        return [
            {
                "user_id": int(r["id"]),
                "name": r["name"],
                "role": r["role"],
                "present_days": int(r.get("present_days") or 0),
                "late_days": int(r.get("late_days") or 0),
                "total_hours": round(float(r.get("total_hours") or 0), 2),
            }
            for r in rows
        ]
