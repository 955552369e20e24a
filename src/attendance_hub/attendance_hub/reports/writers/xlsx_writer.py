from __future__ import annotations

from pathlib import Path

import pandas as pd

from ..model import ReportDocument
from .base import ReportWriter


class XlsxReportWriter(ReportWriter):
    extension = "xlsx"
    mimetype = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

    def write(self, document: ReportDocument, path: Path) -> Path:
        columns, rows = document.table()
        df = pd.DataFrame(rows, columns=columns)
        sheet = "Attendance" if document.records else "Hours"
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=sheet)
        return path
