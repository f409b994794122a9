from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..locations.repository import LocationRepository
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Use case: manage employee profiles (admin)."""

    def __init__(self, users: UserRepository, locations: LocationRepository):
        self._users = users
        self._locations = locations

    def get(self, uid: str) -> Optional[User]:
        return self._users.get_by_uid(uid)

    def require(self, uid: str) -> User:
        user = self._users.get_by_uid(uid)
        if not user:
            raise ValidationError("User does not exist")
        return user

    def register(self, *, uid: str, name: str, email: str, phone: Optional[str] = None, role: Role = Role.EMPLOYEE) -> User:
        """Create the profile written on sign-up (not approved yet)."""
        uid = require_non_empty(uid, "uid")
        if self._users.get_by_uid(uid):
            raise ValidationError("User already registered")

        user = User(
            uid=uid,
            name=require_non_empty(name, "Name"),
            email=require_non_empty(email, "Email"),
            phone=(phone or "").strip() or None,
            role=role,
            approved=False,
        )
        self._users.save(user)
        return user

    def list_users(self, *, current: User) -> Sequence[User]:
        self._require_admin(current)
        return self._users.list_all()

    def set_approved(self, *, current: User, uid: str, approved: bool = True) -> None:
        self._require_admin(current)
        self.require(uid)
        self._users.update_fields(uid, {"approved": bool(approved)})
        logger.info("User %s approved=%s by %s", uid, approved, current.uid)

    def set_role(self, *, current: User, uid: str, role: Role) -> None:
        self._require_admin(current)
        if uid == current.uid and role != Role.ADMIN:
            raise ValidationError("Cannot remove your own admin role")
        self.require(uid)
        self._users.update_fields(uid, {"role": Role(role).value})

    def assign_employee_id(self, *, current: User, uid: str, employee_id: str) -> None:
        self._require_admin(current)
        employee_id = require_non_empty(employee_id, "Employee ID")
        self.require(uid)

        owner = self._users.find_by_employee_id(employee_id)
        if owner and owner.uid != uid:
            raise ValidationError(f"Employee ID {employee_id} is already used")

        self._users.update_fields(uid, {"employeeId": employee_id})

    def assign_location(self, *, current: User, uid: str, location_id: Optional[str]) -> None:
        """Assign (or clear, with None) the office site an employee checks in at."""
        self._require_admin(current)
        self.require(uid)

        if location_id is not None and not self._locations.get_by_id(location_id):
            raise ValidationError("Location does not exist")

        self._users.update_fields(uid, {"assignedLocationId": location_id})
        logger.info("User %s assigned to location %s", uid, location_id)

    @staticmethod
    def _require_admin(current: User) -> None:
        if not current.is_admin:
            raise AuthorizationError("Admin only")
