from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.constants import ATTENDANCE
from ..store.document_store import ArrayAppend, DocumentStore, SnapshotCallback, Subscription, sort_by
from .model import AttendanceCommit, AttendanceRecord, record_from_document, record_id


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: str, date_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def apply(self, commit: AttendanceCommit) -> None:
        """Single-document write; last writer wins."""

        raise NotImplementedError

    def get_recent_for_employee(self, employee_id: str, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def listen(self, employee_id: str, date_id: str, callback: SnapshotCallback) -> Subscription:
        raise NotImplementedError


class DocumentAttendanceRepository(AttendanceRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    def get_for_employee_and_date(self, employee_id: str, date_id: str) -> Optional[AttendanceRecord]:
        doc = self._store.get(ATTENDANCE, record_id(employee_id, date_id))
        return record_from_document(doc) if doc is not None else None

    def apply(self, commit: AttendanceCommit) -> None:
        if commit.create:
            self._store.set(ATTENDANCE, commit.record_id, dict(commit.fields))
            return

        fields = dict(commit.fields)
        if commit.append_movement is not None:
            fields["movementLog"] = ArrayAppend(commit.append_movement)
        self._store.update(ATTENDANCE, commit.record_id, fields)

    def get_recent_for_employee(self, employee_id: str, limit: int) -> Sequence[AttendanceRecord]:
        rows = sort_by(list(self._store.query(ATTENDANCE, field="employeeId", value=employee_id)), "createdTimestamp", reverse=True)
        return [record_from_document(doc) for _, doc in rows[: int(limit)]]

    def listen(self, employee_id: str, date_id: str, callback: SnapshotCallback) -> Subscription:
        return self._store.listen(ATTENDANCE, record_id(employee_id, date_id), callback)
