from __future__ import annotations

from datetime import date, datetime

from ..core.constants import DATE_ID_FORMAT, TIME_DISPLAY_FORMAT


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def date_id(value: date | datetime) -> str:
    """Calendar-day key used in attendance record ids (e.g. 2026-01-22)."""
    return value.strftime(DATE_ID_FORMAT)


def display_time(value: datetime) -> str:
    """12-hour display time stored on records (e.g. 09:30 AM)."""
    return value.strftime(TIME_DISPLAY_FORMAT)


def epoch_millis(value: datetime) -> int:
    return int(value.timestamp() * 1000)
