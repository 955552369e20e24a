from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ReportFileType, ReportType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, from_json, to_json
from .model import ReportMeta
from .repository import ReportRepository


def _row_to_meta(row: dict) -> ReportMeta:
    return ReportMeta(
        report_id=int(row["id"]),
        generated_by=int(row["generated_by"]),
        type=ReportType(row["type"]),
        period_start=row["period_start"],
        period_end=row["period_end"],
        file_path=row["file_path"],
        file_type=ReportFileType(row["file_type"]),
        parameters=from_json(row.get("parameters")),
        created_at=row.get("created_at"),
        generated_by_name=row.get("generated_by_name"),
    )


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        generated_by: int,
        type: ReportType,
        period_start: date,
        period_end: date,
        file_path: str,
        file_type: ReportFileType,
        parameters: Optional[dict] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO reports(generated_by, type, period_start, period_end, file_path, file_type, parameters)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (generated_by, type.value, period_start, period_end, file_path, file_type.value, to_json(parameters)),
            )
            return int(cur.lastrowid)

    def list_recent(self, *, generated_by: Optional[int] = None, limit: int = 20) -> Sequence[ReportMeta]:
        sql = """
            SELECT r.*, u.name AS generated_by_name
            FROM reports r
            JOIN users u ON u.id = r.generated_by
            WHERE 1=1
        """
        params: list = []
        if generated_by is not None:
            sql += " AND r.generated_by=%s"
            params.append(generated_by)
        sql += " ORDER BY r.created_at DESC, r.id DESC LIMIT %s"
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_meta(r) for r in fetchall(cur)]
