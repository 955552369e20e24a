from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.security import admin_required, current_user
from ..common.validators import json_object
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.settings_service

    @app.get("/api/settings", endpoint="settings_get")
    @admin_required
    def settings_get():
        return jsonify({"settings": service.get_all(current_role=current_user().role)})

    @app.put("/api/settings/<key>", endpoint="settings_update_one")
    @admin_required
    def settings_update_one(key: str):
        data = json_object(request.get_json(silent=True))
        settings = service.update_one(current_role=current_user().role, key=key, value=data.get("value"))
        return jsonify({"message": "Setting updated successfully", "settings": settings})

    @app.put("/api/settings", endpoint="settings_update_many")
    @admin_required
    def settings_update_many():
        data = json_object(request.get_json(silent=True))
        settings = service.update_many(current_role=current_user().role, values=data.get("settings"))
        return jsonify({"message": "Settings updated successfully", "settings": settings})
