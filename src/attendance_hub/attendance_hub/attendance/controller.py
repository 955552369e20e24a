from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import optional_iso_date
from ..common.security import current_user, login_required
from ..common.validators import json_object, optional_enum, optional_int
from ..container import Container
from ..core.enums import AttendanceStatus


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.post("/api/attendance/clock-in", endpoint="attendance_clock_in")
    @login_required
    def attendance_clock_in():
        data = json_object(request.get_json(silent=True))
        record = service.clock_in(current_user().user_id, latitude=data.get("latitude"), longitude=data.get("longitude"))
        return jsonify({"message": "Clocked in successfully", "attendance": record.to_dict()}), 201

    @app.post("/api/attendance/clock-out", endpoint="attendance_clock_out")
    @login_required
    def attendance_clock_out():
        data = json_object(request.get_json(silent=True))
        record = service.clock_out(current_user().user_id, latitude=data.get("latitude"), longitude=data.get("longitude"))
        return jsonify({"message": "Clocked out successfully", "attendance": record.to_dict()})

    @app.get("/api/attendance/history", endpoint="attendance_history")
    @login_required
    def attendance_history():
        me = current_user()
        rows = service.get_history(
            current_user_id=me.user_id,
            current_role=me.role,
            user_id=optional_int(request.args.get("userId"), "userId"),
            start_date=optional_iso_date(request.args.get("startDate"), "startDate"),
            end_date=optional_iso_date(request.args.get("endDate"), "endDate"),
            status=optional_enum(AttendanceStatus, request.args.get("status"), "status"),
        )
        return jsonify({"attendance": [r.to_dict() for r in rows]})

    @app.get("/api/attendance/today", endpoint="attendance_today")
    @login_required
    def attendance_today():
        record = service.get_today(current_user().user_id)
        return jsonify({"attendance": record.to_dict() if record else None})

    @app.get("/api/attendance/stats", endpoint="attendance_stats")
    @login_required
    def attendance_stats():
        me = current_user()
        stats = service.get_stats(
            current_user_id=me.user_id,
            current_role=me.role,
            user_id=optional_int(request.args.get("userId"), "userId"),
            start_date=optional_iso_date(request.args.get("startDate"), "startDate"),
            end_date=optional_iso_date(request.args.get("endDate"), "endDate"),
        )
        return jsonify({"stats": stats.to_dict()})
