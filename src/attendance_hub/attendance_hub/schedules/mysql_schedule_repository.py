from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import DayOfWeek
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import NewScheduleEntry, ScheduleEntry
from .repository import ScheduleRepository

_ORDER_BY = (
    " ORDER BY FIELD(s.day_of_week, 'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday'),"
    " s.start_time"
)

_SELECT = """
    SELECT s.*, u.name AS created_by_name
    FROM weekly_schedule s
    LEFT JOIN users u ON u.id = s.created_by
    WHERE 1=1
"""

_UPDATABLE = {"day_of_week", "start_time", "end_time", "subject", "description", "location", "applies_to", "is_active"}

_INSERT = """
    INSERT INTO weekly_schedule(day_of_week, start_time, end_time, subject, description, location, applies_to, is_active, created_by)
    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
"""


def _row_to_entry(row: dict) -> ScheduleEntry:
    return ScheduleEntry(
        entry_id=int(row["id"]),
        day_of_week=DayOfWeek(row["day_of_week"]),
        start_time=normalize_mysql_time(row["start_time"]),
        end_time=normalize_mysql_time(row["end_time"]),
        subject=row.get("subject"),
        description=row.get("description"),
        location=row.get("location"),
        applies_to=row.get("applies_to") or "all",
        is_active=bool(row.get("is_active", True)),
        created_by=row.get("created_by"),
        created_by_name=row.get("created_by_name"),
    )


def _insert_params(entry: NewScheduleEntry, created_by: int) -> tuple:
    return (
        entry.day_of_week.value,
        entry.start_time,
        entry.end_time,
        entry.subject,
        entry.description,
        entry.location,
        entry.applies_to,
        int(entry.is_active),
        created_by,
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_entries(
        self,
        *,
        active_only: bool = False,
        audiences: Optional[Sequence[str]] = None,
        day: Optional[DayOfWeek] = None,
    ) -> Sequence[ScheduleEntry]:
        sql = _SELECT
        params: list = []
        if active_only:
            sql += " AND s.is_active=1"
        if audiences:
            sql += " AND s.applies_to IN (" + ", ".join(["%s"] * len(audiences)) + ")"
            params.extend(audiences)
        if day:
            sql += " AND s.day_of_week=%s"
            params.append(day.value)
        sql += _ORDER_BY

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_entry(r) for r in fetchall(cur)]

    def get_by_id(self, entry_id: int) -> Optional[ScheduleEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " AND s.id=%s", (entry_id,))
            row = fetchone(cur)
            return _row_to_entry(row) if row else None

    def create(self, entry: NewScheduleEntry, *, created_by: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_INSERT, _insert_params(entry, created_by))
            return int(cur.lastrowid)

    def update_fields(self, entry_id: int, fields: Mapping[str, Any]) -> bool:
        columns = [c for c in fields if c in _UPDATABLE]
        if not columns:
            return False
        params = []
        for c in columns:
            value = fields[c]
            if isinstance(value, DayOfWeek):
                value = value.value
            elif isinstance(value, bool):
                value = int(value)
            params.append(value)
        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE weekly_schedule SET {assignments} WHERE id=%s", tuple(params + [entry_id]))
            return cur.rowcount > 0

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM weekly_schedule WHERE id=%s", (entry_id,))
            return cur.rowcount > 0

    def replace_all(self, entries: Sequence[NewScheduleEntry], *, created_by: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM weekly_schedule")
            if entries:
                cur.executemany(_INSERT, [_insert_params(e, created_by) for e in entries])
