from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import EARTH_RADIUS_METERS


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class GeofenceCheck:
    distance_meters: float
    radius_meters: float
    inside: bool


# ----------------------------------------Geolocation Logic/Algorithm--------------------------------------------
def distance(lat: float, lng: float, center_lat: float, center_lng: float) -> float:
    """Great-circle distance in metres (haversine)."""
    phi1, phi2 = math.radians(lat), math.radians(center_lat)
    dphi = math.radians(center_lat - lat)
    dlambda = math.radians(center_lng - lng)
    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def is_within_radius(lat: float, lng: float, center_lat: float, center_lng: float, radius_meters: float) -> bool:
    return distance(lat, lng, center_lat, center_lng) <= radius_meters


class GeoFence:
    """Circular allowed area around a registered office location."""

    def __init__(self, center: GeoPoint, radius_meters: float):
        self._center = center
        self._radius = float(radius_meters)

    @classmethod
    def around(cls, location) -> "GeoFence":
        return cls(GeoPoint(location.latitude, location.longitude), location.radius_meters)

    @property
    def center(self) -> GeoPoint:
        return self._center

    @property
    def radius_meters(self) -> float:
        return self._radius

    def check(self, point: GeoPoint) -> GeofenceCheck:
        d = distance(point.lat, point.lng, self._center.lat, self._center.lng)
        return GeofenceCheck(distance_meters=d, radius_meters=self._radius, inside=d <= self._radius)
