from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.security import current_user, login_required
from ..common.validators import json_object
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    def _generate(build):
        me = current_user()
        data = json_object(request.get_json(silent=True))
        return build(
            current_user_id=me.user_id,
            current_role=me.role,
            period_start=data.get("periodStart"),
            period_end=data.get("periodEnd"),
            role=data.get("role"),
            file_type=data.get("fileType"),
        )

    @app.post("/api/reports/attendance-summary", endpoint="reports_attendance_summary")
    @login_required
    def reports_attendance_summary():
        report = _generate(service.attendance_summary)
        return jsonify(
            {
                "success": True,
                "message": "Report generated successfully",
                "filePath": report.file_path,
                "filename": report.filename,
                "summary": report.document.summary,
            }
        )

    @app.post("/api/reports/hours-report", endpoint="reports_hours_report")
    @login_required
    def reports_hours_report():
        report = _generate(service.hours_report)
        return jsonify(
            {
                "success": True,
                "message": "Report generated successfully",
                "filePath": report.file_path,
                "filename": report.filename,
                "users": report.document.users,
            }
        )

    @app.get("/api/reports/recent", endpoint="reports_recent")
    @login_required
    def reports_recent():
        me = current_user()
        items = service.list_recent(current_user_id=me.user_id, current_role=me.role)
        return jsonify({"reports": [r.to_dict() for r in items]})

    @app.get("/api/reports/download/<path:filename>", endpoint="reports_download")
    @login_required(locations=["headers", "query_string"])
    def reports_download(filename: str):
        path, mimetype = service.resolve_download(filename)
        return send_file(path, mimetype=mimetype, as_attachment=True, download_name=path.name)
