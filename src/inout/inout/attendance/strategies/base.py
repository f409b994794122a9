from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceAction
from ...core.exceptions import ActionNotAllowed
from ...geo.geofence import GeofenceCheck, GeoPoint
from ...locations.model import Location
from ...users.model import User
from ..model import AttendanceCommit, AttendanceRecord


@dataclass(frozen=True)
class ActionContext:
    """Everything a verified action needs to describe its mutation."""

    user: User
    location: Location
    record: Optional[AttendanceRecord]
    point: GeoPoint
    check: GeofenceCheck
    now: datetime


class ActionStrategy(ABC):
    """Strategy Pattern: encapsulate how a verified action mutates the record."""

    action: AttendanceAction

    @abstractmethod
    def build_commit(self, ctx: ActionContext) -> AttendanceCommit:
        raise NotImplementedError

    def _require_open(self, ctx: ActionContext) -> AttendanceRecord:
        if ctx.record is None:
            raise ActionNotAllowed("You have not checked in today")
        if ctx.record.is_completed:
            raise ActionNotAllowed("Attendance already completed for today")
        return ctx.record
