"""Worked-time arithmetic over 12-hour display times."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import DURATION_ERROR, TIME_DISPLAY_FORMAT

logger = logging.getLogger(__name__)

_ONE_DAY = timedelta(days=1)


def duration_between(check_in: Optional[str], check_out: Optional[str]) -> Optional[timedelta]:
    """Elapsed time from check-in to check-out on the same nominal day.

    A negative difference means check-out rolled past midnight, so a day is
    added. Returns None when either value cannot be parsed.
    """
    try:
        start = datetime.strptime(check_in.strip(), TIME_DISPLAY_FORMAT)
        end = datetime.strptime(check_out.strip(), TIME_DISPLAY_FORMAT)
    except (AttributeError, ValueError):
        logger.warning("Cannot compute duration between %r and %r", check_in, check_out)
        return None

    diff = end - start
    if diff < timedelta(0):
        diff += _ONE_DAY
    return diff


def format_duration(value: timedelta) -> str:
    total_minutes = int(value.total_seconds() // 60)
    return f"{total_minutes // 60}h {total_minutes % 60:02d}m"


def duration(check_in: Optional[str], check_out: Optional[str]) -> str:
    """Format worked time as ``"<H>h <MM>m"``.

    Missing values count as nothing worked yet; malformed values yield
    ``"Error"`` instead of raising.
    """
    if check_in is None or check_out is None:
        return format_duration(timedelta(0))

    diff = duration_between(check_in, check_out)
    if diff is None:
        return DURATION_ERROR
    return format_duration(diff)


def parse_total_hours(value: Optional[str]) -> int:
    """Minutes represented by a stored ``totalHours`` string, 0 if unknown."""
    if not value or value == DURATION_ERROR:
        return 0
    try:
        hours_part, minutes_part = value.split()
        return int(hours_part.rstrip("h")) * 60 + int(minutes_part.rstrip("m"))
    except ValueError:
        return 0
