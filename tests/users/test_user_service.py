from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash

from attendance_hub.core.enums import Role, UserStatus
from attendance_hub.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def test_admin_only(container, employee):
    with pytest.raises(AuthorizationError):
        container.user_service.list_users(current_role=Role.EMPLOYEE)


def test_list_users_filters(container, admin, employee):
    rows = container.user_service.list_users(current_role=Role.ADMIN, role="employee")

    assert [r["email"] for r in rows] == [employee.email]
    assert rows[0]["attendance_count"] == 0


def test_create_user_hashes_password(container, repos):
    user = container.user_service.create_user(
        current_role=Role.ADMIN, email="stu@example.com", password="secret123", name="Stu", role="student"
    )

    stored = repos.users.get_by_id(user.user_id)
    assert stored.role == Role.STUDENT
    assert check_password_hash(stored.password_hash, "secret123")


def test_update_user(container, repos, admin, employee):
    service = container.user_service

    updated = service.update_user(
        current_role=Role.ADMIN,
        user_id=employee.user_id,
        changes={"status": "inactive", "password": "newpass1"},
    )

    assert updated.status == UserStatus.INACTIVE
    assert check_password_hash(repos.users.get_by_id(employee.user_id).password_hash, "newpass1")
    with pytest.raises(ValidationError, match="Email already in use"):
        service.update_user(current_role=Role.ADMIN, user_id=employee.user_id, changes={"email": admin.email})
    with pytest.raises(ValidationError, match="No fields to update"):
        service.update_user(current_role=Role.ADMIN, user_id=employee.user_id, changes={})
    with pytest.raises(NotFoundError):
        service.update_user(current_role=Role.ADMIN, user_id=404, changes={"name": "X"})


def test_delete_user(container, repos, admin, employee):
    service = container.user_service

    with pytest.raises(ValidationError, match="cannot delete your own account"):
        service.delete_user(current_user_id=admin.user_id, current_role=Role.ADMIN, user_id=admin.user_id)

    service.delete_user(current_user_id=admin.user_id, current_role=Role.ADMIN, user_id=employee.user_id)
    assert repos.users.get_by_id(employee.user_id) is None

    with pytest.raises(NotFoundError):
        service.delete_user(current_user_id=admin.user_id, current_role=Role.ADMIN, user_id=employee.user_id)


def test_create_and_update_user_reject_non_text_password(container, employee):
    service = container.user_service

    with pytest.raises(ValidationError, match="Password must be a string"):
        service.create_user(current_role=Role.ADMIN, email="num@example.com", password=12345678, name="Num")
    with pytest.raises(ValidationError, match="Password must be a string"):
        service.update_user(current_role=Role.ADMIN, user_id=employee.user_id, changes={"password": 12345678})
