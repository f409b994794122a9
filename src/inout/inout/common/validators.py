from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_latitude(value: float) -> float:
    lat = float(value)
    if not -90.0 <= lat <= 90.0:
        raise ValidationError(f"Latitude out of range: {lat}")
    return lat


def require_longitude(value: float) -> float:
    lng = float(value)
    if not -180.0 <= lng <= 180.0:
        raise ValidationError(f"Longitude out of range: {lng}")
    return lng


def require_positive(value: float, field_name: str) -> float:
    number = float(value)
    if number <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return number
