from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.security import current_user, login_required
from ..common.validators import json_object
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.assistant_service

    @app.post("/api/ai/chat", endpoint="ai_chat")
    @login_required
    def ai_chat():
        me = current_user()
        data = json_object(request.get_json(silent=True))
        reply = service.chat(
            user_id=me.user_id,
            role=me.role,
            message=data.get("message"),
            action_name=data.get("action"),
        )
        return jsonify({"success": True, **reply.to_dict()})

    @app.get("/api/ai/predictions", endpoint="ai_predictions")
    @login_required
    def ai_predictions():
        return jsonify({"success": True, **service.predictions(current_user().user_id)})

    @app.get("/api/ai/anomalies", endpoint="ai_anomalies")
    @login_required
    def ai_anomalies():
        me = current_user()
        return jsonify({"success": True, **service.anomalies(current_user_id=me.user_id, current_role=me.role)})

    @app.get("/api/ai/insights", endpoint="ai_insights")
    @login_required
    def ai_insights():
        result = service.insights(current_user().user_id, period=request.args.get("period", "month"))
        return jsonify({"success": True, **result})

    @app.post("/api/ai/sentiment", endpoint="ai_sentiment")
    @login_required
    def ai_sentiment():
        data = json_object(request.get_json(silent=True))
        return jsonify({"success": True, **service.sentiment(data.get("text"))})

    @app.get("/api/ai/smart-notifications", endpoint="ai_smart_notifications")
    @login_required
    def ai_smart_notifications():
        return jsonify({"success": True, "notifications": service.smart_notifications(current_user().user_id)})

    @app.get("/api/ai/dashboard-stats", endpoint="ai_dashboard_stats")
    @login_required
    def ai_dashboard_stats():
        return jsonify({"success": True, **service.dashboard_stats(current_role=current_user().role)})
