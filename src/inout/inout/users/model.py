from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..common.schema import read_bool, read_str
from ..core.enums import Role
from ..core.exceptions import SchemaError


@dataclass(frozen=True)
class User:
    """Domain entity: a user profile stored under ``users/{uid}``.

    Note: Plain data object (no store access code).
    """

    uid: str
    name: str
    email: str
    phone: Optional[str]
    role: Role
    approved: bool = False
    employee_id: Optional[str] = None
    assigned_location_id: Optional[str] = None
    photo_url: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def user_from_document(uid: str, doc: dict[str, Any]) -> User:
    role_value = read_str(doc, "role", Role.EMPLOYEE.value)
    try:
        role = Role(role_value)
    except ValueError:
        raise SchemaError(f"Unknown role {role_value!r} for user {uid}")

    return User(
        uid=uid,
        name=read_str(doc, "name", ""),
        email=read_str(doc, "email", ""),
        phone=read_str(doc, "phone", None),
        role=role,
        approved=read_bool(doc, "approved", False),
        employee_id=read_str(doc, "employeeId", None),
        assigned_location_id=read_str(doc, "assignedLocationId", None),
        photo_url=read_str(doc, "photoUrl", None),
    )


def user_to_document(user: User) -> dict[str, Any]:
    return {
        "uid": user.uid,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "role": user.role.value,
        "approved": user.approved,
        "employeeId": user.employee_id,
        "assignedLocationId": user.assigned_location_id,
        "photoUrl": user.photo_url,
    }
