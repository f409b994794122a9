from __future__ import annotations

import pytest

from src.inout.inout.core.enums import Role
from src.inout.inout.core.exceptions import AuthorizationError, SchemaError, ValidationError
from src.inout.inout.users.model import user_from_document
from src.inout.inout.users.service import UserService


@pytest.fixture
def service(users_repo, locations_repo):
    return UserService(users_repo, locations_repo)


def test_register_creates_unapproved_employee(service):
    user = service.register(uid="u-9", name="Carol", email="carol@example.com", phone=" ")

    assert user.role == Role.EMPLOYEE
    assert user.approved is False
    assert user.phone is None
    assert service.get("u-9") == user

    with pytest.raises(ValidationError):
        service.register(uid="u-9", name="Carol", email="carol@example.com")


def test_admin_manages_employee(service, admin, employee, site_b):
    service.set_approved(current=admin, uid=employee.uid, approved=False)
    service.assign_employee_id(current=admin, uid=employee.uid, employee_id="EMP777")
    service.assign_location(current=admin, uid=employee.uid, location_id=site_b.location_id)

    updated = service.require(employee.uid)
    assert updated.approved is False
    assert updated.employee_id == "EMP777"
    assert updated.assigned_location_id == site_b.location_id

    service.assign_location(current=admin, uid=employee.uid, location_id=None)
    assert service.require(employee.uid).assigned_location_id is None


def test_assign_location_requires_existing_site(service, admin, employee):
    with pytest.raises(ValidationError, match="Location does not exist"):
        service.assign_location(current=admin, uid=employee.uid, location_id="nowhere")


def test_employee_id_must_be_unique(service, admin, employee):
    other = service.register(uid="u-2", name="Dan", email="dan@example.com")
    with pytest.raises(ValidationError, match="already used"):
        service.assign_employee_id(current=admin, uid=other.uid, employee_id="EMP001")


def test_non_admin_cannot_manage(service, employee, admin):
    with pytest.raises(AuthorizationError):
        service.list_users(current=employee)
    with pytest.raises(AuthorizationError):
        service.set_role(current=employee, uid=employee.uid, role=Role.ADMIN)


def test_admin_cannot_demote_self(service, admin):
    with pytest.raises(ValidationError):
        service.set_role(current=admin, uid=admin.uid, role=Role.EMPLOYEE)


def test_list_users_sorted_by_name(service, admin, employee):
    assert [u.uid for u in service.list_users(current=admin)] == [admin.uid, employee.uid]


def test_unknown_role_in_store_is_a_schema_error():
    with pytest.raises(SchemaError):
        user_from_document("x", {"name": "X", "email": "x@example.com", "role": "superuser"})
