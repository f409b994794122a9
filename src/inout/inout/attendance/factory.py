from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import AttendanceAction
from .strategies.base import ActionStrategy
from .strategies.check_in_strategy import CheckInStrategy
from .strategies.check_out_strategy import CheckOutStrategy
from .strategies.transit_strategy import TransitStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the strategy that builds an action's commit."""

    def for_action(self, action: AttendanceAction) -> ActionStrategy:
        action = AttendanceAction(action)
        if action == AttendanceAction.CHECK_IN:
            return CheckInStrategy()
        if action == AttendanceAction.TRANSIT:
            return TransitStrategy()
        return CheckOutStrategy()
