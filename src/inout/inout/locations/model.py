from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..common.schema import read_float, read_str
from ..common.validators import require_latitude, require_longitude, require_non_empty, require_positive
from ..core.constants import DEFAULT_RADIUS_METERS
from ..core.exceptions import SchemaError, ValidationError


@dataclass(frozen=True)
class Location:
    """Domain entity: an office site with its geofence radius."""

    location_id: str
    name: str
    latitude: float
    longitude: float
    radius_meters: float = DEFAULT_RADIUS_METERS

    def __post_init__(self):
        require_non_empty(self.name, "Location name")
        require_latitude(self.latitude)
        require_longitude(self.longitude)
        require_positive(self.radius_meters, "Radius")


def location_from_document(location_id: str, doc: dict[str, Any]) -> Location:
    try:
        return Location(
            location_id=location_id,
            name=read_str(doc, "name"),
            latitude=read_float(doc, "latitude"),
            longitude=read_float(doc, "longitude"),
            radius_meters=read_float(doc, "radiusMeters", DEFAULT_RADIUS_METERS),
        )
    except ValidationError as e:
        raise SchemaError(f"Invalid location {location_id}: {e}") from e


def location_to_document(location: Location) -> dict[str, Any]:
    return {
        "id": location.location_id,
        "name": location.name,
        "latitude": location.latitude,
        "longitude": location.longitude,
        "radiusMeters": location.radius_meters,
    }
