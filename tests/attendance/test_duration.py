from datetime import timedelta

import pytest

from src.inout.inout.common.duration import duration, duration_between, format_duration, parse_total_hours


@pytest.mark.parametrize(
    "check_in, check_out, expected",
    [
        ("09:00 AM", "05:00 PM", "8h 00m"),
        ("11:00 PM", "01:00 AM", "2h 00m"),
        ("09:15 AM", "09:15 AM", "0h 00m"),
        ("12:00 PM", "12:45 PM", "0h 45m"),
        ("08:07 AM", "06:30 PM", "10h 23m"),
    ],
)
def test_duration_formats_elapsed_time(check_in, check_out, expected):
    assert duration(check_in, check_out) == expected


def test_missing_times_count_as_nothing_worked():
    assert duration(None, "05:00 PM") == "0h 00m"
    assert duration("09:00 AM", None) == "0h 00m"


def test_malformed_times_yield_error_marker():
    assert duration("bad", "05:00 PM") == "Error"
    assert duration("9am", "05:00 PM") == "Error"
    assert duration("09:00 AM", "25:00 PM") == "Error"
    assert duration_between("garbage", "05:00 PM") is None


def test_overnight_difference_adds_a_day():
    assert duration_between("10:30 PM", "06:00 AM") == timedelta(hours=7, minutes=30)


def test_total_hours_round_trip_for_reports():
    assert parse_total_hours(format_duration(timedelta(hours=3, minutes=5))) == 185
    assert parse_total_hours("Error") == 0
    assert parse_total_hours(None) == 0
    assert parse_total_hours("-") == 0
