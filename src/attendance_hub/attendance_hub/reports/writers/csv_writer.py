from __future__ import annotations

import csv
from pathlib import Path

from ..model import ReportDocument
from .base import ReportWriter


class CsvReportWriter(ReportWriter):
    extension = "csv"
    mimetype = "text/csv"

    def write(self, document: ReportDocument, path: Path) -> Path:
        columns, rows = document.table()
        with path.open("w", newline="", encoding="utf-8") as fh:
            writer = csv.DictWriter(fh, fieldnames=columns)
            writer.writeheader()
            for row in rows:
                writer.writerow({col: ("" if value is None else value) for col, value in zip(columns, row)})
        return path
