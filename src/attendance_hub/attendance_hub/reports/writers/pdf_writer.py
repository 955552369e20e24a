from __future__ import annotations

from pathlib import Path

from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from ...core.constants import REPORT_PDF_MAX_RECORDS
from ...core.enums import ReportType
from ..model import ReportDocument
from .base import ReportWriter


def _esc(value) -> str:
    return str(value).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


class PdfReportWriter(ReportWriter):
    extension = "pdf"
    mimetype = "application/pdf"

    def write(self, document: ReportDocument, path: Path) -> Path:
        styles = getSampleStyleSheet()
        centered = ParagraphStyle(name="CenteredHeading", parent=styles["Heading2"], alignment=TA_CENTER)
        body = styles["BodyText"]

        doc = SimpleDocTemplate(str(path), pagesize=A4, leftMargin=50, rightMargin=50, topMargin=50, bottomMargin=50)
        content = [
            Paragraph("Attendance Report", styles["Title"]),
            Spacer(1, 8),
            Paragraph(document.heading, centered),
            Spacer(1, 8),
            Paragraph(f"Period: {document.period_start.isoformat()} to {document.period_end.isoformat()}", body),
            Spacer(1, 8),
        ]

        if document.type == ReportType.ATTENDANCE_SUMMARY:
            s = document.summary
            for label, key in (
                ("Total Users", "totalUsers"),
                ("Total Records", "totalRecords"),
                ("Present Days", "presentDays"),
                ("Late Days", "lateDays"),
                ("Absent Days", "absentDays"),
                ("Total Hours", "totalHours"),
            ):
                content.append(Paragraph(f"{label}: {s.get(key, 0)}", styles["Heading4"]))

            if document.records:
                content.append(Spacer(1, 8))
                content.append(Paragraph("<u>Recent Records:</u>", body))
                for index, r in enumerate(document.records[:REPORT_PDF_MAX_RECORDS], start=1):
                    line = f"{index}. {r['user']} - {r['date']} - {r['hours'] or 0}h - {r['status']}"
                    content.append(Paragraph(_esc(line), body))
        else:
            for index, u in enumerate(document.users, start=1):
                content.append(Paragraph(_esc(f"{index}. {u['name']}: {u['total_hours']} hours"), body))

        doc.build(content)
        return path
