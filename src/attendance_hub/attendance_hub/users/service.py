from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Tuple

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_enum, require_email, require_enum, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import NotificationType, Role, UserStatus
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    FaceMatchError,
    NotFoundError,
    ValidationError,
)
from ..faces.matcher import FaceMatcher, parse_descriptor
from ..logging_config import get_logger
from .model import User
from .repository import UserRepository

logger = get_logger(__name__)


def _require_admin(current_role: Role) -> None:
    if current_role != Role.ADMIN:
        raise AuthorizationError("Admin access required")


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class AuthService:
    """Use cases: signup, password login, face login, own profile."""

    def __init__(self, users: UserRepository, notifications=None, *, face_matcher: Optional[FaceMatcher] = None):
        self._users = users
        self._notifications = notifications
        self._matcher = face_matcher or FaceMatcher()

    def signup(
        self,
        *,
        email: str,
        password: str,
        name: str,
        role: Optional[str] = None,
        phone: Optional[str] = None,
        department: Optional[str] = None,
        facial_descriptors: Any = None,
    ) -> User:
        if not email or not password or not name:
            raise ValidationError("Email, password, and name are required")
        email = require_email(email)
        name = require_non_empty(name, "Name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        user_role = optional_enum(Role, role, "role") or Role.EMPLOYEE
        if user_role == Role.ADMIN:
            raise ValidationError("Admin accounts cannot be created through signup")

        descriptor = parse_descriptor(facial_descriptors) if facial_descriptors else None

        if self._users.get_by_email(email):
            raise ValidationError("User with this email already exists")

        user_id = self._users.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            name=name,
            role=user_role,
            phone=_optional_text(phone),
            department=_optional_text(department),
            facial_descriptors=descriptor,
        )
        logger.info("New %s account registered: %s", user_role.value, email)

        if self._notifications:
            self._notifications.notify_admin(
                "New User Registration",
                f"{name} ({email}) has registered as {user_role.value}.",
                NotificationType.INFO,
            )
        return self._load(user_id)

    def login(self, email: str, password: str) -> User:
        if not email or not password:
            raise ValidationError("Email and password are required")
        if not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError("Email and password must be strings")

        user =self._users.get_by_email(str(email).strip().lower())
        if not user:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError("Invalid credentials")

        if not user.is_active:
            raise AuthorizationError("Account is inactive")
        return user

    def face_login(self, facial_descriptors: Any) -> Tuple[User, float]:
        if not facial_descriptors:
            raise ValidationError("Facial descriptors are required")
        probe = parse_descriptor(facial_descriptors)

        outcome = self._matcher.best_match(probe, self._users.list_face_candidates())
        if outcome.match is None:
            logger.info("Face login rejected (best similarity %.3f)", outcome.best_similarity)
            raise FaceMatchError(
                "Face not recognized. Please try again or use email login.",
                best_similarity=outcome.best_similarity,
                threshold=outcome.threshold,
            )

        user = self._users.get_by_id(outcome.match.user_id)
        if not user or not user.is_active:
            raise AuthenticationError("Face not recognized. Please try again or use email login.")
        logger.info("Face login for user %s (similarity %.3f)", user.user_id, outcome.match.similarity)
        return user, outcome.match.similarity

    def get_profile(self, user_id: int) -> User:
        return self._load(user_id)

    def update_profile(self, user_id: int, changes: Mapping[str, Any]) -> User:
        self._load(user_id)

        fields: dict[str, Any] = {}
        if "name" in changes and changes["name"] is not None:
            fields["name"] = require_non_empty(changes["name"], "Name")
        if "phone" in changes:
            fields["phone"] = _optional_text(changes["phone"])
        if "department" in changes:
            fields["department"] = _optional_text(changes["department"])
        if changes.get("facialDescriptors") is not None:
            fields["facial_descriptors"] = parse_descriptor(changes["facialDescriptors"])

        if not fields:
            raise ValidationError("No fields to update")

        self._users.update_fields(user_id, fields)
        return self._load(user_id)

    def _load(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(
        self,
        *,
        current_role: Role,
        role: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[dict]:
        _require_admin(current_role)
        return self._users.list_admin_view(
            role=optional_enum(Role, role, "role"),
            status=optional_enum(UserStatus, status, "status"),
            search=_optional_text(search),
        )

    def get_user(self, *, current_role: Role, user_id: int) -> User:
        _require_admin(current_role)
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_user(
        self,
        *,
        current_role: Role,
        email: str,
        password: str,
        name: str,
        role: Optional[str] = None,
        status: Optional[str] = None,
        phone: Optional[str] = None,
        department: Optional[str] = None,
    ) -> User:
        _require_admin(current_role)
        if not email or not password or not name:
            raise ValidationError("Email, password, and name are required")
        email = require_email(email)
        name = require_non_empty(name, "Name")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("User with this email already exists")

        user_id = self._users.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            name=name,
            role=optional_enum(Role, role, "role") or Role.EMPLOYEE,
            status=optional_enum(UserStatus, status, "status") or UserStatus.ACTIVE,
            phone=_optional_text(phone),
            department=_optional_text(department),
        )
        logger.info("Admin created user %s (%s)", user_id, email)
        return self.get_user(current_role=current_role, user_id=user_id)

    def update_user(self, *, current_role: Role, user_id: int, changes: Mapping[str, Any]) -> User:
        user = self.get_user(current_role=current_role, user_id=user_id)

        fields: dict[str, Any] = {}
        if changes.get("email"):
            email = require_email(changes["email"])
            if email != user.email:
                existing = self._users.get_by_email(email)
                if existing and existing.user_id != user_id:
                    raise ValidationError("Email already in use")
                fields["email"] = email
        if changes.get("name"):
            fields["name"] = require_non_empty(changes["name"], "Name")
        if changes.get("role"):
            fields["role"] = require_enum(Role, changes["role"], "role")
        if changes.get("status"):
            fields["status"] = require_enum(UserStatus, changes["status"], "status")
        if "phone" in changes:
            fields["phone"] = _optional_text(changes["phone"])
        if "department" in changes:
            fields["department"] = _optional_text(changes["department"])
        if changes.get("password"):
            require_min_length(changes["password"], "Password", MIN_PASSWORD_LENGTH)
            fields["password_hash"] = generate_password_hash(changes["password"])

        if not fields:
            raise ValidationError("No fields to update")

        self._users.update_fields(user_id, fields)
        logger.info("User %s updated (%s)", user_id, ", ".join(sorted(fields)))
        return self.get_user(current_role=current_role, user_id=user_id)

    def delete_user(self, *, current_user_id: int, current_role: Role, user_id: int) -> None:
        _require_admin(current_role)
        if int(current_user_id) == int(user_id):
            raise ValidationError("You cannot delete your own account")

        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")
        if not self._users.delete_by_id(user_id):
            raise NotFoundError("User not found")
        logger.info("User %s deleted", user_id)

    def get_user_stats(self, *, current_role: Role, user_id: int) -> dict:
        user = self.get_user(current_role=current_role, user_id=user_id)
        stats = self._users.get_stats(user.user_id)
        return {"user": user.to_public_dict(), "stats": stats}
