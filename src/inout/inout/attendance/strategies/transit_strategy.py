from __future__ import annotations

from ...core.enums import AttendanceAction
from ..model import AttendanceCommit
from .base import ActionContext, ActionStrategy


class TransitStrategy(ActionStrategy):
    """Re-verify presence at a newly assigned site without ending the shift."""

    action = AttendanceAction.TRANSIT

    def build_commit(self, ctx: ActionContext) -> AttendanceCommit:
        record = self._require_open(ctx)
        return AttendanceCommit(
            action=self.action,
            record_id=record.record_id,
            fields={
                "distanceMeters": record.distance_meters + ctx.check.distance_meters,
                "locationName": ctx.location.name,
                "lastVerifiedLocationId": ctx.location.location_id,
            },
            append_movement=ctx.location.name,
            distance_meters=ctx.check.distance_meters,
        )
