from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceAction(str, Enum):
    CHECK_IN = "CHECK_IN"
    TRANSIT = "TRANSIT"
    CHECK_OUT = "CHECK_OUT"


class AttendanceState(str, Enum):
    """Day state derived from today's record and the assigned location.

    Never persisted; recomputed from the record on every read.
    """

    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS_SAME_SITE = "IN_PROGRESS_SAME_SITE"
    IN_PROGRESS_SITE_CHANGED = "IN_PROGRESS_SITE_CHANGED"
    COMPLETED = "COMPLETED"


class BiometricOutcome(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    ERROR = "error"
