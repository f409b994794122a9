"""Check-in / transit / check-out decisions.

The day state is derived from today's record and the user's current
``assignedLocationId``; it is never stored. Everything here is free of I/O so
it can run against records fetched from any store.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, FrozenSet, Optional

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceAction, AttendanceState
from ..core.exceptions import (
    ActionNotAllowed,
    AuthenticationFailed,
    LocationNotAssigned,
    LocationUnavailable,
    OutOfRange,
    ValidationError,
)
from ..geo.geofence import GeoFence
from ..locations.model import Location
from ..users.model import User
from ..verification.collaborators import BiometricResult, LocationResult
from .factory import AttendanceStrategyFactory
from .model import AttendanceCommit, AttendanceRecord
from .strategies.base import ActionContext

logger = logging.getLogger(__name__)

_ALLOWED: dict[AttendanceState, FrozenSet[AttendanceAction]] = {
    AttendanceState.NOT_STARTED: frozenset({AttendanceAction.CHECK_IN}),
    AttendanceState.IN_PROGRESS_SAME_SITE: frozenset({AttendanceAction.CHECK_OUT}),
    AttendanceState.IN_PROGRESS_SITE_CHANGED: frozenset({AttendanceAction.TRANSIT, AttendanceAction.CHECK_OUT}),
    AttendanceState.COMPLETED: frozenset(),
}


def derive_state(record: Optional[AttendanceRecord], assigned_location_id: Optional[str]) -> AttendanceState:
    if record is None:
        return AttendanceState.NOT_STARTED
    if record.is_completed:
        return AttendanceState.COMPLETED
    if record.last_verified_location_id == assigned_location_id:
        return AttendanceState.IN_PROGRESS_SAME_SITE
    return AttendanceState.IN_PROGRESS_SITE_CHANGED


def decide_allowed_actions(record: Optional[AttendanceRecord], assigned_location_id: Optional[str]) -> FrozenSet[AttendanceAction]:
    return _ALLOWED[derive_state(record, assigned_location_id)]


def status_text(record: Optional[AttendanceRecord], state: AttendanceState, location: Optional[Location] = None) -> str:
    if state == AttendanceState.NOT_STARTED:
        return "Status: Not Checked In"
    if state == AttendanceState.COMPLETED:
        return f"Status: Completed for Today ({record.total_hours})"
    if state == AttendanceState.IN_PROGRESS_SITE_CHANGED and location is not None:
        return f"Status: Site changed to {location.name}. Verify presence there or check out"
    return f"Status: Checked In at {record.check_in_time}"


@dataclass(frozen=True)
class DayStatus:
    state: AttendanceState
    allowed_actions: FrozenSet[AttendanceAction]
    text: str
    record: Optional[AttendanceRecord] = None
    location: Optional[Location] = None


def evaluate(user: Optional[User], location: Optional[Location], record: Optional[AttendanceRecord]) -> DayStatus:
    assigned_id = user.assigned_location_id if user else None
    state = derive_state(record, assigned_id)
    return DayStatus(
        state=state,
        allowed_actions=_ALLOWED[state],
        text=status_text(record, state, location),
        record=record,
        location=location,
    )


class AttendanceStateMachine:
    def __init__(
        self,
        *,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock

    def attempt_action(
        self,
        action: AttendanceAction,
        *,
        user: Optional[User],
        location: Optional[Location],
        record: Optional[AttendanceRecord],
        biometric: BiometricResult,
        location_result: LocationResult,
        now: Optional[datetime] = None,
    ) -> AttendanceCommit:
        """Verify an action and describe the record mutation it causes.

        Raises an ``AttendanceError`` subclass when any precondition or
        verification fails; nothing should be written in that case.
        """
        action = AttendanceAction(action)
        self.check_preconditions(action, user=user, location=location, record=record)

        if not biometric.succeeded:
            raise AuthenticationFailed(biometric.message or "Biometric verification failed")

        if not location_result.available:
            raise LocationUnavailable(f"GPS Error: {location_result.error or 'no location fix'}")

        fence = GeoFence.around(location)
        check = fence.check(location_result.point)
        if not check.inside:
            raise OutOfRange(
                f"You are {check.distance_meters:.0f} m from {location.name} "
                f"(allowed {check.radius_meters:.0f} m)",
                distance_meters=check.distance_meters,
                radius_meters=check.radius_meters,
                location_name=location.name,
            )

        ctx = ActionContext(
            user=user,
            location=location,
            record=record,
            point=location_result.point,
            check=check,
            now=now or self._clock(),
        )
        commit = self._factory.for_action(action).build_commit(ctx)
        logger.debug("%s verified for %s at %.1f m from %s", action.value, user.employee_id, check.distance_meters, location.name)
        return commit

    @staticmethod
    def check_preconditions(
        action: AttendanceAction,
        *,
        user: Optional[User],
        location: Optional[Location],
        record: Optional[AttendanceRecord],
    ) -> None:
        if user is None:
            raise ValidationError("User profile not loaded")
        if not user.approved:
            raise ValidationError("Your account is waiting for admin approval")
        if not user.employee_id:
            raise ValidationError("Employee ID not assigned yet")

        allowed = decide_allowed_actions(record, user.assigned_location_id)
        if action not in allowed:
            state = derive_state(record, user.assigned_location_id)
            raise ActionNotAllowed(f"{action.value} is not allowed while {state.value}")

        if not user.assigned_location_id or location is None or location.location_id != user.assigned_location_id:
            raise LocationNotAssigned("No office location assigned to you")
