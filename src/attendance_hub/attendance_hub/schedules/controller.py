from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.security import admin_required, current_user, login_required
from ..common.validators import json_object
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.schedule_service

    @app.get("/api/schedule", endpoint="schedule_list")
    @login_required
    def schedule_list():
        entries, grouped = service.get_for_role(current_user().role)
        return jsonify({"schedules": [e.to_dict() for e in entries], "groupedByDay": grouped})

    @app.get("/api/schedule/all", endpoint="schedule_list_all")
    @admin_required
    def schedule_list_all():
        entries = service.list_all(current_role=current_user().role)
        return jsonify({"schedules": [e.to_dict() for e in entries]})

    @app.post("/api/schedule", endpoint="schedule_create")
    @admin_required
    def schedule_create():
        me = current_user()
        data = json_object(request.get_json(silent=True))
        entry = service.create(current_user_id=me.user_id, current_role=me.role, data=data)
        return jsonify({"message": "Schedule created successfully", "schedule": entry.to_dict()}), 201

    # registered before /<int:entry_id> so "bulk" never reaches the id route
    @app.put("/api/schedule/bulk", endpoint="schedule_bulk")
    @admin_required
    def schedule_bulk():
        me = current_user()
        data = json_object(request.get_json(silent=True))
        entries = service.replace_all(current_user_id=me.user_id, current_role=me.role, entries=data.get("schedules"))
        return jsonify({"message": "Schedules updated successfully", "schedules": [e.to_dict() for e in entries]})

    @app.put("/api/schedule/<int:entry_id>", endpoint="schedule_update")
    @admin_required
    def schedule_update(entry_id: int):
        data = json_object(request.get_json(silent=True))
        entry = service.update(current_role=current_user().role, entry_id=entry_id, data=data)
        return jsonify({"message": "Schedule updated successfully", "schedule": entry.to_dict()})

    @app.delete("/api/schedule/<int:entry_id>", endpoint="schedule_delete")
    @admin_required
    def schedule_delete(entry_id: int):
        service.delete(current_role=current_user().role, entry_id=entry_id)
        return jsonify({"message": "Schedule deleted successfully"})
