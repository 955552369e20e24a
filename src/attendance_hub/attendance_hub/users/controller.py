from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.security import admin_required, current_user, issue_token, login_required
from ..common.validators import json_object
from ..container import Container


def _token_response(user, message: str, **extra):
    token = issue_token(user_id=user.user_id, email=user.email, role=user.role)
    body = {"message": message, "token": token, "user": user.to_public_dict()}
    body.update(extra)
    return body


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    users = container.user_service

    # ---- auth ----

    @app.post("/api/auth/signup", endpoint="auth_signup")
    def auth_signup():
        data = json_object(request.get_json(silent=True))
        user = auth.signup(
            email=data.get("email"),
            password=data.get("password"),
            name=data.get("name"),
            role=data.get("role"),
            phone=data.get("phone"),
            department=data.get("department"),
            facial_descriptors=data.get("facialDescriptors"),
        )
        return jsonify(_token_response(user, "User created successfully")), 201

    @app.post("/api/auth/login", endpoint="auth_login")
    def auth_login():
        data = json_object(request.get_json(silent=True))
        user = auth.login(data.get("email"), data.get("password"))
        return jsonify(_token_response(user, "Login successful"))

    @app.post("/api/auth/login/face", endpoint="auth_face_login")
    @app.post("/api/auth/face-login", endpoint="auth_face_login_legacy")
    def auth_face_login():
        data = json_object(request.get_json(silent=True))
        user, similarity = auth.face_login(data.get("facialDescriptors"))
        return jsonify(_token_response(user, "Face login successful", similarity=round(similarity, 4)))

    @app.get("/api/auth/profile", endpoint="auth_profile")
    @login_required
    def auth_profile():
        user = auth.get_profile(current_user().user_id)
        return jsonify({"user": user.to_public_dict()})

    @app.put("/api/auth/profile", endpoint="auth_update_profile")
    @login_required
    def auth_update_profile():
        data = json_object(request.get_json(silent=True))
        user = auth.update_profile(current_user().user_id, data)
        return jsonify({"message": "Profile updated successfully", "user": user.to_public_dict()})

    # ---- users (admin) ----

    @app.get("/api/users", endpoint="users_list")
    @admin_required
    def users_list():
        rows = users.list_users(
            current_role=current_user().role,
            role=request.args.get("role"),
            status=request.args.get("status"),
            search=request.args.get("search"),
        )
        return jsonify({"users": list(rows)})

    @app.get("/api/users/<int:user_id>", endpoint="users_get")
    @admin_required
    def users_get(user_id: int):
        user = users.get_user(current_role=current_user().role, user_id=user_id)
        return jsonify({"user": user.to_public_dict()})

    @app.post("/api/users", endpoint="users_create")
    @admin_required
    def users_create():
        data = json_object(request.get_json(silent=True))
        user = users.create_user(
            current_role=current_user().role,
            email=data.get("email"),
            password=data.get("password"),
            name=data.get("name"),
            role=data.get("role"),
            status=data.get("status"),
            phone=data.get("phone"),
            department=data.get("department"),
        )
        return jsonify({"message": "User created successfully", "user": user.to_public_dict()}), 201

    @app.put("/api/users/<int:user_id>", endpoint="users_update")
    @admin_required
    def users_update(user_id: int):
        data = json_object(request.get_json(silent=True))
        user = users.update_user(current_role=current_user().role, user_id=user_id, changes=data)
        return jsonify({"message": "User updated successfully", "user": user.to_public_dict()})

    @app.delete("/api/users/<int:user_id>", endpoint="users_delete")
    @admin_required
    def users_delete(user_id: int):
        me = current_user()
        users.delete_user(current_user_id=me.user_id, current_role=me.role, user_id=user_id)
        return jsonify({"message": "User deleted successfully"})

    @app.get("/api/users/<int:user_id>/stats", endpoint="users_stats")
    @admin_required
    def users_stats(user_id: int):
        return jsonify(users.get_user_stats(current_role=current_user().role, user_id=user_id))
