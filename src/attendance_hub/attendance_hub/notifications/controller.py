from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.security import current_user, login_required
from ..common.validators import as_bool
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.notification_service

    @app.get("/api/notifications", endpoint="notifications_list")
    @login_required
    def notifications_list():
        me = current_user()
        unread_only = as_bool(request.args.get("unreadOnly", "false"))
        items = service.list_for_user(me.user_id, unread_only=unread_only)
        return jsonify({"notifications": [n.to_dict() for n in items]})

    @app.put("/api/notifications/<int:notification_id>/read", endpoint="notifications_mark_read")
    @login_required
    def notifications_mark_read(notification_id: int):
        service.mark_read(notification_id=notification_id, user_id=current_user().user_id)
        return jsonify({"success": True, "message": "Notification marked as read"})

    @app.put("/api/notifications/read-all", endpoint="notifications_mark_all_read")
    @login_required
    def notifications_mark_all_read():
        updated = service.mark_all_read(current_user().user_id)
        return jsonify({"success": True, "message": "All notifications marked as read", "updated": updated})

    @app.get("/api/notifications/unread-count", endpoint="notifications_unread_count")
    @login_required
    def notifications_unread_count():
        return jsonify({"count": service.unread_count(current_user().user_id)})
