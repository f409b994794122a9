from src.inout.inout.attendance.factory import AttendanceStrategyFactory
from src.inout.inout.attendance.strategies.check_in_strategy import CheckInStrategy
from src.inout.inout.attendance.strategies.check_out_strategy import CheckOutStrategy
from src.inout.inout.attendance.strategies.transit_strategy import TransitStrategy
from src.inout.inout.core.enums import AttendanceAction


def test_factory_picks_strategy_per_action():
    factory = AttendanceStrategyFactory()

    assert isinstance(factory.for_action(AttendanceAction.CHECK_IN), CheckInStrategy)
    assert isinstance(factory.for_action(AttendanceAction.TRANSIT), TransitStrategy)
    assert isinstance(factory.for_action(AttendanceAction.CHECK_OUT), CheckOutStrategy)


def test_factory_accepts_raw_action_values():
    assert isinstance(AttendanceStrategyFactory().for_action("TRANSIT"), TransitStrategy)
