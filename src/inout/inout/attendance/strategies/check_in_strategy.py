from __future__ import annotations

from ...common.datetime_utils import date_id, display_time, epoch_millis
from ...core.enums import AttendanceAction
from ..model import AttendanceCommit, AttendanceRecord, record_to_document
from .base import ActionContext, ActionStrategy


class CheckInStrategy(ActionStrategy):
    """First verified presence of the day creates the record."""

    action = AttendanceAction.CHECK_IN

    def build_commit(self, ctx: ActionContext) -> AttendanceCommit:
        record = AttendanceRecord(
            employee_id=ctx.user.employee_id,
            employee_name=ctx.user.name,
            date_id=date_id(ctx.now),
            created_timestamp=epoch_millis(ctx.now),
            check_in_time=display_time(ctx.now),
            check_in_lat=ctx.point.lat,
            check_in_lng=ctx.point.lng,
            distance_meters=ctx.check.distance_meters,
            location_name=ctx.location.name,
            last_verified_location_id=ctx.location.location_id,
            movement_log=(ctx.location.name,),
            fingerprint_verified=True,
            location_verified=True,
        )
        return AttendanceCommit(
            action=self.action,
            record_id=record.record_id,
            fields=record_to_document(record),
            create=True,
            distance_meters=ctx.check.distance_meters,
        )
