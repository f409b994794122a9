from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import AuthorizationError, ValidationError
from ..geo.geofence import GeoPoint
from ..users.model import User
from .model import Location
from .repository import LocationRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeocodedAddress:
    point: GeoPoint
    feature_name: Optional[str]
    address_line: str


class Geocoder(Protocol):
    """Platform geocoding collaborator: address text to coordinates."""

    def lookup(self, address: str) -> Optional[GeocodedAddress]:
        raise NotImplementedError


class LocationService:
    """Use case: admins register and remove office sites."""

    def __init__(self, locations: LocationRepository, *, default_radius_meters: float, geocoder: Optional[Geocoder] = None):
        self._locations = locations
        self._default_radius = float(default_radius_meters)
        self._geocoder = geocoder

    def list_locations(self) -> Sequence[Location]:
        return self._locations.list_all()

    def get(self, location_id: str) -> Optional[Location]:
        return self._locations.get_by_id(location_id)

    def create(
        self,
        *,
        current: User,
        name: str,
        point: Optional[GeoPoint],
        radius_meters: Optional[float] = None,
    ) -> Location:
        """Save a site at captured coordinates.

        ``point`` is None until a GPS capture or address search produced one;
        (0, 0) is a legitimate coordinate and is accepted.
        """
        self._require_admin(current)
        name = require_non_empty(name, "Location name")
        if point is None:
            raise ValidationError("Please find a location first")

        radius = self._default_radius if radius_meters is None else float(radius_meters)
        location = self._locations.create(name=name, latitude=point.lat, longitude=point.lng, radius_meters=radius)
        logger.info("Location %s (%s) created by %s", location.location_id, location.name, current.uid)
        return location

    def search_address(self, address: str) -> GeocodedAddress:
        address = require_non_empty(address, "Address")
        if self._geocoder is None:
            raise ValidationError("Address search is not available")

        result = self._geocoder.lookup(address)
        if result is None:
            raise ValidationError("Address not found. Try adding city name.")
        return result

    def create_from_address(self, *, current: User, address: str, name: Optional[str] = None, radius_meters: Optional[float] = None) -> Location:
        self._require_admin(current)
        found = self.search_address(address)
        return self.create(
            current=current,
            name=(name or "").strip() or found.feature_name or found.address_line,
            point=found.point,
            radius_meters=radius_meters,
        )

    def delete(self, *, current: User, location_id: str) -> None:
        self._require_admin(current)
        if not self._locations.delete(location_id):
            raise ValidationError("Location does not exist")
        logger.info("Location %s deleted by %s", location_id, current.uid)

    @staticmethod
    def _require_admin(current: User) -> None:
        if not current.is_admin:
            raise AuthorizationError("Admin only")
