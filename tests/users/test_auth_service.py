from __future__ import annotations

import pytest

from attendance_hub.core.enums import Role, UserStatus
from attendance_hub.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    FaceMatchError,
    ValidationError,
)


def face(value: float) -> list:
    return [value] * 128


def test_signup_defaults_to_employee_and_notifies_admin(container, repos, admin):
    user = container.auth_service.signup(email="New@Example.com", password="secret123", name="New Person")

    assert user.email == "new@example.com"
    assert user.role == Role.EMPLOYEE
    assert user.password_hash != "secret123"
    assert repos.notifications.titles_for(admin.user_id) == ["New User Registration"]


def test_signup_rejects_admin_role(container):
    with pytest.raises(ValidationError, match="Admin accounts cannot be created"):
        container.auth_service.signup(email="x@example.com", password="secret123", name="X", role="admin")


def test_signup_validation(container, employee):
    auth = container.auth_service
    with pytest.raises(ValidationError, match="Email, password, and name are required"):
        auth.signup(email="", password="secret123", name="X")
    with pytest.raises(ValidationError, match="at least 6 characters"):
        auth.signup(email="x@example.com", password="123", name="X")
    with pytest.raises(ValidationError, match="User with this email already exists"):
        auth.signup(email=employee.email, password="secret123", name="Dup")
    with pytest.raises(ValidationError, match="exactly 128 values"):
        auth.signup(email="y@example.com", password="secret123", name="Y", facial_descriptors=[0.1, 0.2])


def test_signup_stores_face_descriptor(container):
    user = container.auth_service.signup(
        email="face@example.com", password="secret123", name="Face", role="student", facial_descriptors=face(0.2)
    )

    assert user.role == Role.STUDENT
    assert user.to_public_dict()["has_facial_data"] is True
    assert "facial_descriptors" not in user.to_public_dict()


def test_login(container, employee):
    user = container.auth_service.login("EVE@example.com", "secret123")

    assert user.user_id == employee.user_id


@pytest.mark.parametrize("email, password", [("eve@example.com", "wrong-pass"), ("nobody@example.com", "secret123")])
def test_login_invalid_credentials(container, employee, email, password):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        container.auth_service.login(email, password)


def test_login_inactive_account(container, repos):
    repos.users.add(name="Ina", email="ina@example.com", status=UserStatus.INACTIVE)

    with pytest.raises(AuthorizationError, match="Account is inactive"):
        container.auth_service.login("ina@example.com", "secret123")


def test_face_login_matches_best_user(container, repos):
    repos.users.add(name="Far", email="far@example.com", descriptor=face(0.9))
    near = repos.users.add(name="Near", email="near@example.com", descriptor=face(0.3))
    repos.users.add(name="Broken", email="broken@example.com", descriptor=[0.3] * 12)

    user, score = container.auth_service.face_login(face(0.3))

    assert user.user_id == near.user_id
    assert score == 1.0


def test_face_login_ignores_inactive_users(container, repos):
    repos.users.add(name="Gone", email="gone@example.com", status=UserStatus.INACTIVE, descriptor=face(0.3))

    with pytest.raises(FaceMatchError) as exc:
        container.auth_service.face_login(face(0.3))

    assert exc.value.status_code == 401
    assert exc.value.payload() == {"bestSimilarity": 0.0, "threshold": 0.55}


def test_face_login_requires_descriptor(container):
    with pytest.raises(ValidationError, match="Facial descriptors are required"):
        container.auth_service.face_login(None)


def test_update_profile(container, employee):
    auth = container.auth_service

    user = auth.update_profile(employee.user_id, {"name": "Eve E.", "phone": " 555 "})

    assert user.name == "Eve E."
    assert user.phone == "555"
    with pytest.raises(ValidationError, match="No fields to update"):
        auth.update_profile(employee.user_id, {"email": "ignored@example.com"})


def test_signup_rejects_non_text_password(container, repos):
    with pytest.raises(ValidationError, match="Password must be a string"):
        container.auth_service.signup(email="num@example.com", password=12345678, name="Num")

    assert repos.users.get_by_email("num@example.com") is None


@pytest.mark.parametrize("email, password", [("eve@example.com", 12345678), (["eve@example.com"], "secret123")])
def test_login_rejects_non_text_credentials(container, employee, email, password):
    with pytest.raises(ValidationError, match="Email and password must be strings"):
        container.auth_service.login(email, password)
