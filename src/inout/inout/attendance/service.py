from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import date_id, now_local
from ..common.duration import format_duration, parse_total_hours
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceAction, AttendanceState
from ..core.exceptions import ValidationError
from ..locations.repository import LocationRepository
from ..users.repository import UserRepository
from ..verification.collaborators import (
    BiometricAuthenticator,
    BiometricResult,
    LocationProvider,
    LocationResult,
    ReportedBiometric,
    ReportedLocation,
)
from .model import AttendanceCommit, AttendanceRecord
from .repository import AttendanceRepository
from .session import AttendanceSession, InFlightGuard
from .state_machine import AttendanceStateMachine, DayStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    total_hours: str


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        locations: LocationRepository,
        *,
        state_machine: Optional[AttendanceStateMachine] = None,
        guard: Optional[InFlightGuard] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._users = users
        self._locations = locations
        self._clock = clock
        self._machine = state_machine or AttendanceStateMachine(clock=clock)
        self._guard = guard or InFlightGuard()

    def open_session(self, uid: str, *, on_change: Optional[Callable[[DayStatus], None]] = None) -> AttendanceSession:
        """Start a live session; the caller owns it and must close() it."""
        session = AttendanceSession(
            uid,
            users=self._users,
            locations=self._locations,
            attendance=self._attendance,
            state_machine=self._machine,
            guard=self._guard,
            clock=self._clock,
            on_change=on_change,
        )
        return session.start()

    def get_status(self, uid: str) -> DayStatus:
        with self.open_session(uid) as session:
            return session.status

    def perform(
        self,
        uid: str,
        action: AttendanceAction,
        *,
        biometric: BiometricAuthenticator,
        locator: LocationProvider,
        timeout: Optional[float] = None,
    ) -> AttendanceCommit:
        with self.open_session(uid) as session:
            return session.perform(action, biometric, locator, timeout=timeout)

    def perform_reported(
        self,
        uid: str,
        action: AttendanceAction,
        *,
        biometric: BiometricResult,
        location: LocationResult,
    ) -> AttendanceCommit:
        """Run an action with verification results the client device already produced."""
        return self.perform(uid, action, biometric=ReportedBiometric(biometric), locator=ReportedLocation(location))

    def get_history(self, uid: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[AttendanceRecord]:
        user = self._users.get_by_uid(uid)
        if not user:
            raise ValidationError("User does not exist")
        if not user.employee_id:
            raise ValidationError("Employee ID not assigned yet.")
        return list(self._attendance.get_recent_for_employee(user.employee_id, limit))

    def get_history_ui(self, uid: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        return [self._to_ui(r) for r in self.get_history(uid, limit=limit)]

    def build_report(self, uid: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> ReportData:
        rows = self.get_history_ui(uid, limit=limit)
        total_minutes = sum(parse_total_hours(r["total_hours"]) for r in rows)
        return ReportData(rows=rows, total_hours=format_duration(timedelta(minutes=total_minutes)))

    def _to_ui(self, r: AttendanceRecord) -> dict:
        if r.is_completed:
            label, css = "Completed", "bg-success"
        elif r.date_id == date_id(self._clock()):
            label, css = "In progress", "bg-primary"
        else:
            label, css = "Missing check-out", "bg-warning text-dark"

        return {
            "date": r.date_id,
            "employee_id": r.employee_id,
            "employee_name": r.employee_name,
            "check_in": r.check_in_time or "-",
            "check_out": r.check_out_time or "-",
            "total_hours": r.total_hours or "-",
            "location": r.location_name or "-",
            "movement": " -> ".join(r.movement_log),
            "distance_m": round(r.distance_meters, 1),
            "status": label,
            "css_class": css,
        }


def day_state_label(state: AttendanceState) -> str:
    return {
        AttendanceState.NOT_STARTED: "Not checked in",
        AttendanceState.IN_PROGRESS_SAME_SITE: "Checked in",
        AttendanceState.IN_PROGRESS_SITE_CHANGED: "Site changed",
        AttendanceState.COMPLETED: "Completed",
    }[state]
