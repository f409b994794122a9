from __future__ import annotations

from ...common.datetime_utils import display_time
from ...common.duration import duration
from ...core.enums import AttendanceAction
from ..model import AttendanceCommit
from .base import ActionContext, ActionStrategy


class CheckOutStrategy(ActionStrategy):
    action = AttendanceAction.CHECK_OUT

    def build_commit(self, ctx: ActionContext) -> AttendanceCommit:
        record = self._require_open(ctx)
        check_out_time = display_time(ctx.now)
        return AttendanceCommit(
            action=self.action,
            record_id=record.record_id,
            fields={
                "checkOutTime": check_out_time,
                "checkOutLat": ctx.point.lat,
                "checkOutLng": ctx.point.lng,
                "totalHours": duration(record.check_in_time, check_out_time),
            },
            distance_meters=ctx.check.distance_meters,
        )
