from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.security import current_user, login_required
from ..common.validators import json_object, optional_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.get("/api/leave", endpoint="leave_list")
    @login_required
    def leave_list():
        me = current_user()
        items = service.list_requests(
            current_user_id=me.user_id,
            current_role=me.role,
            user_id=optional_int(request.args.get("userId"), "userId"),
            status=request.args.get("status"),
        )
        return jsonify({"requests": [r.to_dict() for r in items]})

    @app.post("/api/leave", endpoint="leave_create")
    @login_required
    def leave_create():
        data = json_object(request.get_json(silent=True))
        req = service.create_request(
            user_id=current_user().user_id,
            type=data.get("type"),
            start_date=data.get("startDate"),
            end_date=data.get("endDate"),
            reason=data.get("reason"),
            document_url=data.get("documentUrl"),
        )
        return jsonify({"message": "Leave request submitted successfully", "request": req.to_dict()}), 201

    @app.put("/api/leave/<int:request_id>/approve", endpoint="leave_approve")
    @login_required
    def leave_approve(request_id: int):
        me = current_user()
        req = service.approve(current_user_id=me.user_id, current_role=me.role, request_id=request_id)
        return jsonify({"message": "Leave request approved", "request": req.to_dict()})

    @app.put("/api/leave/<int:request_id>/reject", endpoint="leave_reject")
    @login_required
    def leave_reject(request_id: int):
        me = current_user()
        data = json_object(request.get_json(silent=True))
        req = service.reject(
            current_user_id=me.user_id,
            current_role=me.role,
            request_id=request_id,
            rejection_reason=data.get("rejectionReason"),
        )
        return jsonify({"message": "Leave request rejected", "request": req.to_dict()})

    @app.put("/api/leave/<int:request_id>/cancel", endpoint="leave_cancel")
    @login_required
    def leave_cancel(request_id: int):
        me = current_user()
        req = service.cancel(current_user_id=me.user_id, current_role=me.role, request_id=request_id)
        return jsonify({"message": "Leave request cancelled", "request": req.to_dict()})
