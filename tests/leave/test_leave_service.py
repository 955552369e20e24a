from __future__ import annotations

import pytest

from attendance_hub.core.enums import LeaveStatus, Role
from attendance_hub.core.exceptions import AuthorizationError, NotFoundError, ValidationError


def submit(container, user, **overrides):
    data = {"type": "annual", "start_date": "2026-03-10", "end_date": "2026-03-12", "reason": "Trip"}
    data.update(overrides)
    return container.leave_service.create_request(user_id=user.user_id, **data)


def test_create_request_is_pending_and_notifies_admin(container, repos, admin, employee):
    req = submit(container, employee)

    assert req.status == LeaveStatus.PENDING
    assert req.days == 3
    assert repos.notifications.titles_for(admin.user_id) == ["New Leave Request"]


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"type": None}, "Type, start date, and end date are required"),
        ({"type": "holiday"}, "Invalid leave type"),
        ({"end_date": "2026-03-01"}, "End date must be on or after start date"),
        ({"start_date": "10/03/2026"}, "startDate must be a date"),
    ],
)
def test_create_request_validation(container, employee, overrides, message):
    with pytest.raises(ValidationError, match=message):
        submit(container, employee, **overrides)


def test_unpaid_leave_is_accepted(container, employee):
    assert submit(container, employee, type="unpaid").type.value == "unpaid"


def test_approve_notifies_requester(container, repos, admin, employee, fixed_now):
    req = submit(container, employee)

    approved = container.leave_service.approve(
        current_user_id=admin.user_id, current_role=Role.ADMIN, request_id=req.request_id, now=fixed_now
    )

    assert approved.status == LeaveStatus.APPROVED
    assert approved.approved_by == admin.user_id
    assert approved.approved_at == fixed_now
    assert "Leave Request Approved" in repos.notifications.titles_for(employee.user_id)


def test_reject_appends_reason(container, repos, admin, employee):
    req = submit(container, employee)

    rejected = container.leave_service.reject(
        current_user_id=admin.user_id, current_role=Role.ADMIN, request_id=req.request_id, rejection_reason="Busy week"
    )

    assert rejected.status == LeaveStatus.REJECTED
    assert rejected.rejection_reason == "Busy week"
    note = repos.notifications.list_for_user(employee.user_id)[0]
    assert note.message.endswith("Reason: Busy week")


def test_only_admin_can_decide(container, employee):
    req = submit(container, employee)

    with pytest.raises(AuthorizationError):
        container.leave_service.approve(
            current_user_id=employee.user_id, current_role=Role.EMPLOYEE, request_id=req.request_id
        )


def test_deciding_twice_is_rejected(container, admin, employee):
    req = submit(container, employee)
    service = container.leave_service
    service.approve(current_user_id=admin.user_id, current_role=Role.ADMIN, request_id=req.request_id)

    with pytest.raises(ValidationError, match="Leave request is already approved"):
        service.reject(current_user_id=admin.user_id, current_role=Role.ADMIN, request_id=req.request_id)


def test_decide_unknown_request(container, admin):
    with pytest.raises(NotFoundError):
        container.leave_service.approve(current_user_id=admin.user_id, current_role=Role.ADMIN, request_id=99)


def test_cancel_rules(container, repos, admin, employee):
    other = repos.users.add(name="Olly Other", email="olly@example.com")
    service = container.leave_service
    req = submit(container, employee)

    with pytest.raises(AuthorizationError):
        service.cancel(current_user_id=other.user_id, current_role=Role.EMPLOYEE, request_id=req.request_id)

    cancelled = service.cancel(current_user_id=employee.user_id, current_role=Role.EMPLOYEE, request_id=req.request_id)
    assert cancelled.status == LeaveStatus.CANCELLED

    with pytest.raises(ValidationError, match="already cancelled"):
        service.cancel(current_user_id=employee.user_id, current_role=Role.EMPLOYEE, request_id=req.request_id)

    approved = submit(container, employee)
    service.approve(current_user_id=admin.user_id, current_role=Role.ADMIN, request_id=approved.request_id)
    with pytest.raises(ValidationError, match="Cannot cancel an approved leave request"):
        service.cancel(current_user_id=admin.user_id, current_role=Role.ADMIN, request_id=approved.request_id)


def test_list_scopes_non_admins(container, repos, admin, employee):
    other = repos.users.add(name="Olly Other", email="olly@example.com")
    submit(container, employee)
    submit(container, other)

    mine = container.leave_service.list_requests(current_user_id=employee.user_id, current_role=Role.EMPLOYEE)
    pending = container.leave_service.list_requests(
        current_user_id=admin.user_id, current_role=Role.ADMIN, status="pending"
    )

    assert [r.user_id for r in mine] == [employee.user_id]
    assert len(pending) == 2


@pytest.mark.parametrize("field, value", [("reason", 5), ("document_url", ["a"]), ("reason", {"x": 1})])
def test_free_text_fields_must_be_strings(container, repos, employee, field, value):
    with pytest.raises(ValidationError, match="must be a string"):
        submit(container, employee, **{field: value})

    assert repos.leave.list_requests() == []


def test_reject_with_non_text_reason_is_refused(container, repos, admin, employee):
    req = submit(container, employee)

    with pytest.raises(ValidationError, match="rejectionReason must be a string"):
        container.leave_service.reject(
            current_user_id=admin.user_id, current_role=Role.ADMIN, request_id=req.request_id, rejection_reason=42
        )

    assert repos.leave.get_by_id(req.request_id).status == LeaveStatus.PENDING
