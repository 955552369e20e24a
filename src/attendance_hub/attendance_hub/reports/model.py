from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import ReportFileType, ReportType

SUMMARY_COLUMNS = ["Date", "User", "Clock In", "Clock Out", "Hours", "Status"]
HOURS_COLUMNS = ["User", "Total Hours", "Present Days", "Late Days"]


@dataclass(frozen=True)
class ReportDocument:
    """Everything a writer needs to render one report file."""

    type: ReportType
    period_start: date
    period_end: date
    summary: dict = field(default_factory=dict)
    records: list[dict] = field(default_factory=list)
    users: list[dict] = field(default_factory=list)

    @property
    def heading(self) -> str:
        return "Summary Report" if self.type == ReportType.ATTENDANCE_SUMMARY else "Hours Report"

    def table(self) -> tuple[list[str], list[list]]:
        """Column headers and rows shared by the CSV and XLSX writers."""
        if self.type == ReportType.ATTENDANCE_SUMMARY:
            rows = [
                [r["date"], r["user"], r["clock_in"], r["clock_out"], r["hours"], r["status"]]
                for r in self.records
            ]
            return SUMMARY_COLUMNS, rows
        rows = [[u["name"], u["total_hours"], u["present_days"], u["late_days"]] for u in self.users]
        return HOURS_COLUMNS, rows


@dataclass(frozen=True)
class ReportMeta:
    report_id: int
    generated_by: int
    type: ReportType
    period_start: date
    period_end: date
    file_path: str
    file_type: ReportFileType
    parameters: Optional[dict] = None
    created_at: Optional[datetime] = None
    generated_by_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.report_id,
            "generated_by": self.generated_by,
            "generated_by_name": self.generated_by_name,
            "type": self.type.value,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "file_path": self.file_path,
            "file_type": self.file_type.value,
            "parameters": self.parameters,
            "created_at": isoformat_or_none(self.created_at),
        }


@dataclass(frozen=True)
class GeneratedReport:
    filename: str
    file_path: str
    document: ReportDocument
