from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from functools import wraps
from typing import Callable, Optional, Sequence

from flask import Flask, jsonify
from flask_jwt_extended import JWTManager, create_access_token, get_jwt, get_jwt_identity, verify_jwt_in_request

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


@dataclass(frozen=True)
class CurrentUser:
    """Identity decoded from the bearer token of the current request."""

    user_id: int
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def init_jwt(app: Flask, *, secret_key: str, expires_days: int) -> JWTManager:
    app.config["JWT_SECRET_KEY"] = secret_key
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(days=expires_days)
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    app.config["JWT_QUERY_STRING_NAME"] = "token"

    jwt = JWTManager(app)

    @jwt.unauthorized_loader
    def _missing_token(_reason: str):
        return jsonify({"error": "Access token required"}), 401

    @jwt.invalid_token_loader
    def _invalid_token(_reason: str):
        return jsonify({"error": "Invalid or expired token"}), 403

    @jwt.expired_token_loader
    def _expired_token(_header: dict, _payload: dict):
        return jsonify({"error": "Invalid or expired token"}), 403

    return jwt


def issue_token(*, user_id: int, email: str, role: Role) -> str:
    return create_access_token(identity=str(user_id), additional_claims={"email": email, "role": role.value})


def current_user() -> CurrentUser:
    claims = get_jwt()
    return CurrentUser(
        user_id=int(get_jwt_identity()),
        email=str(claims.get("email", "")),
        role=Role(claims.get("role", Role.EMPLOYEE.value)),
    )


def login_required(view: Optional[Callable] = None, *, locations: Optional[Sequence[str]] = None):
    """Require a valid bearer token. `locations` widens where the token is read from."""

    def decorator(fn: Callable):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request(locations=list(locations) if locations else None)
            return fn(*args, **kwargs)

        return wrapper

    if view is not None:
        return decorator(view)
    return decorator


def admin_required(view: Callable):
    @wraps(view)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        if not current_user().is_admin:
            raise AuthorizationError("Admin access required")
        return view(*args, **kwargs)

    return wrapper
