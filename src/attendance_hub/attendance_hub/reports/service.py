from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_hhmm, now_local, require_iso_date
from ..common.validators import optional_enum
from ..core.constants import RECENT_REPORTS_LIMIT
from ..core.enums import AttendanceStatus, ReportFileType, ReportType, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..logging_config import get_logger
from .model import GeneratedReport, ReportDocument, ReportMeta
from .repository import ReportRepository
from .writers.base import ReportWriter
from .writers.csv_writer import CsvReportWriter
from .writers.pdf_writer import PdfReportWriter
from .writers.xlsx_writer import XlsxReportWriter

logger = get_logger(__name__)


def default_writers() -> dict[ReportFileType, ReportWriter]:
    return {
        ReportFileType.PDF: PdfReportWriter(),
        ReportFileType.CSV: CsvReportWriter(),
        ReportFileType.XLSX: XlsxReportWriter(),
    }


def build_summary(rows: Sequence) -> dict:
    """Aggregate joined attendance rows into the summary block of a report."""
    statuses = [r.record.status for r in rows]
    total_hours = sum(float(r.record.hours_worked or 0) for r in rows)
    return {
        "totalUsers": len({r.record.user_id for r in rows}),
        "totalRecords": len(rows),
        "presentDays": sum(1 for s in statuses if s in (AttendanceStatus.PRESENT, AttendanceStatus.OVERTIME)),
        "lateDays": sum(1 for s in statuses if s == AttendanceStatus.LATE),
        "absentDays": sum(1 for s in statuses if s == AttendanceStatus.ABSENT),
        "totalHours": round(total_hours, 2),
    }


def _record_line(row) -> dict:
    rec = row.record
    return {
        "date": rec.work_date.isoformat(),
        "user": row.user_name,
        "clock_in": format_hhmm(rec.clock_in.time()),
        "clock_out": format_hhmm(rec.clock_out.time()) if rec.clock_out else None,
        "hours": rec.hours_worked,
        "status": rec.status.value,
    }


class ReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        reports: ReportRepository,
        *,
        reports_dir: Path | str,
        writers: Optional[Mapping[ReportFileType, ReportWriter]] = None,
    ):
        self._attendance = attendance
        self._reports = reports
        # absolute, so send_file does not resolve it against the package root
        self._reports_dir = Path(reports_dir).resolve()
        self._writers = dict(writers or default_writers())

    @property
    def reports_dir(self) -> Path:
        return self._reports_dir

    def attendance_summary(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        period_start: Any,
        period_end: Any,
        role: Any = None,
        file_type: Any = None,
        now: datetime | None = None,
    ) -> GeneratedReport:
        start, end = self._period(period_start, period_end)
        role_filter = optional_enum(Role, role, "role")
        fmt = self._file_type(file_type)
        scope_user = None if current_role == Role.ADMIN else int(current_user_id)

        rows = self._attendance.list_history(
            user_id=scope_user, start_date=start, end_date=end, role=role_filter, limit=None
        )
        document = ReportDocument(
            type=ReportType.ATTENDANCE_SUMMARY,
            period_start=start,
            period_end=end,
            summary=build_summary(rows),
            records=[_record_line(r) for r in rows],
        )
        return self._generate(document, fmt, generated_by=current_user_id, role=role_filter, now=now)

    def hours_report(
        self,
        *,
        current_user_id: int,
        current_role: Role,
        period_start: Any,
        period_end: Any,
        role: Any = None,
        file_type: Any = None,
        now: datetime | None = None,
    ) -> GeneratedReport:
        start, end = self._period(period_start, period_end)
        role_filter = optional_enum(Role, role, "role")
        fmt = self._file_type(file_type)
        scope_user = None if current_role == Role.ADMIN else int(current_user_id)

        users = self._attendance.hours_by_user(start_date=start, end_date=end, role=role_filter, user_id=scope_user)
        document = ReportDocument(
            type=ReportType.HOURS_REPORT,
            period_start=start,
            period_end=end,
            users=[dict(u) for u in users],
        )
        return self._generate(document, fmt, generated_by=current_user_id, role=role_filter, now=now)

    def list_recent(self, *, current_user_id: int, current_role: Role) -> Sequence[ReportMeta]:
        generated_by = None if current_role == Role.ADMIN else int(current_user_id)
        return self._reports.list_recent(generated_by=generated_by, limit=RECENT_REPORTS_LIMIT)

    def resolve_download(self, filename: str) -> tuple[Path, str]:
        """Return (path, mimetype) of a generated report file."""
        if not filename or ".." in filename or "/" in filename or "\\" in filename:
            raise ValidationError("Invalid filename")
        path = self._reports_dir / filename
        if not path.is_file():
            raise NotFoundError("Report file not found")
        ext = path.suffix.lstrip(".").lower()
        try:
            writer = self._writers[ReportFileType(ext)]
        except (ValueError, KeyError):
            return path, "application/octet-stream"
        return path, writer.mimetype

    def _generate(
        self,
        document: ReportDocument,
        file_type: ReportFileType,
        *,
        generated_by: int,
        role: Optional[Role],
        now: datetime | None,
    ) -> GeneratedReport:
        stamp = (now or now_local()).strftime("%Y-%m-%dT%H-%M-%S-%f")
        filename = f"{document.type.value}_{stamp}.{file_type.value}"
        self._reports_dir.mkdir(parents=True, exist_ok=True)
        path = self._writers[file_type].write(document, self._reports_dir / filename)

        self._reports.create(
            generated_by=int(generated_by),
            type=document.type,
            period_start=document.period_start,
            period_end=document.period_end,
            file_path=str(path),
            file_type=file_type,
            parameters={"role": role.value if role else None},
        )
        logger.info("Report %s generated by user %s", filename, generated_by)
        return GeneratedReport(filename=filename, file_path=str(path), document=document)

    @staticmethod
    def _period(period_start: Any, period_end: Any) -> tuple[date, date]:
        if not period_start or not period_end:
            raise ValidationError("Start date and end date are required")
        start = require_iso_date(period_start, "periodStart")
        end = require_iso_date(period_end, "periodEnd")
        if end < start:
            raise ValidationError("End date must be on or after start date")
        return start, end

    def _file_type(self, value: Any) -> ReportFileType:
        fmt = optional_enum(ReportFileType, value, "fileType") or ReportFileType.PDF
        if fmt not in self._writers:
            raise ValidationError(f"Unsupported file type: {fmt.value}")
        return fmt
