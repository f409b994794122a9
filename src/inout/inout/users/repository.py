from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..core.constants import USERS
from ..store.document_store import DocumentStore, SnapshotCallback, Subscription
from .model import User, user_from_document, user_to_document


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_by_uid(self, uid: str) -> Optional[User]:
        raise NotImplementedError

    def save(self, user: User) -> None:
        raise NotImplementedError

    def update_fields(self, uid: str, fields: dict[str, Any]) -> None:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def find_by_employee_id(self, employee_id: str) -> Optional[User]:
        raise NotImplementedError

    def listen(self, uid: str, callback: SnapshotCallback) -> Subscription:
        raise NotImplementedError


class DocumentUserRepository(UserRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_by_uid(self, uid: str) -> Optional[User]:
        doc = self._store.get(USERS, uid)
        return user_from_document(uid, doc) if doc is not None else None

    def save(self, user: User) -> None:
        self._store.set(USERS, user.uid, user_to_document(user))

    def update_fields(self, uid: str, fields: dict[str, Any]) -> None:
        self._store.update(USERS, uid, fields)

    def list_all(self) -> Sequence[User]:
        users = [user_from_document(uid, doc) for uid, doc in self._store.query(USERS)]
        users.sort(key=lambda u: (u.name.lower(), u.uid))
        return users

    def find_by_employee_id(self, employee_id: str) -> Optional[User]:
        rows = self._store.query(USERS, field="employeeId", value=employee_id)
        if not rows:
            return None
        uid, doc = rows[0]
        return user_from_document(uid, doc)

    def listen(self, uid: str, callback: SnapshotCallback) -> Subscription:
        return self._store.listen(USERS, uid, callback)
