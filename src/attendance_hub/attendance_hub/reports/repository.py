from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ReportFileType, ReportType
from .model import ReportMeta


class ReportRepository(Protocol):
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
        raise NotImplementedError

    def list_recent(self, *, generated_by: Optional[int] = None, limit: int = 20) -> Sequence[ReportMeta]:
        """Newest first; `generated_by=None` returns every user's reports."""
        raise NotImplementedError
