from __future__ import annotations

from typing import Optional

import pytest

from src.inout.inout.core.exceptions import AuthorizationError, SchemaError, ValidationError
from src.inout.inout.geo.geofence import GeoPoint
from src.inout.inout.locations.model import Location, location_from_document
from src.inout.inout.locations.service import GeocodedAddress, LocationService


class FakeGeocoder:
    def __init__(self, known: dict[str, GeocodedAddress]):
        self.known = known
        self.lookups: list[str] = []

    def lookup(self, address: str) -> Optional[GeocodedAddress]:
        self.lookups.append(address)
        return self.known.get(address)


@pytest.fixture
def geocoder():
    return FakeGeocoder({
        "1 Le Duan, Ho Chi Minh City": GeocodedAddress(GeoPoint(10.7797, 106.6990), "Diamond Plaza", "1 Le Duan, District 1"),
    })


@pytest.fixture
def service(locations_repo, geocoder):
    return LocationService(locations_repo, default_radius_meters=100.0, geocoder=geocoder)


def test_create_at_captured_point(service, admin, locations_repo):
    location = service.create(current=admin, name="HQ", point=GeoPoint(0.0, 0.0), radius_meters=50)

    stored = locations_repo.get_by_id(location.location_id)
    assert stored == Location(location.location_id, "HQ", 0.0, 0.0, 50.0)


def test_create_without_point_is_rejected(service, admin):
    with pytest.raises(ValidationError, match="find a location first"):
        service.create(current=admin, name="HQ", point=None)


def test_create_from_address_uses_feature_name(service, admin):
    location = service.create_from_address(current=admin, address="1 Le Duan, Ho Chi Minh City")

    assert location.name == "Diamond Plaza"
    assert location.radius_meters == 100.0
    assert location.latitude == pytest.approx(10.7797)


def test_unknown_address(service, admin):
    with pytest.raises(ValidationError, match="Address not found"):
        service.create_from_address(current=admin, address="Atlantis")


def test_invalid_coordinates_and_radius(service, admin):
    with pytest.raises(ValidationError):
        service.create(current=admin, name="Bad", point=GeoPoint(91.0, 0.0))
    with pytest.raises(ValidationError):
        service.create(current=admin, name="Bad", point=GeoPoint(0.0, 0.0), radius_meters=0)


def test_delete_and_listing(service, admin, site_a, site_b):
    assert [loc.name for loc in service.list_locations()] == ["Site A", "Site B"]

    service.delete(current=admin, location_id=site_a.location_id)
    assert [loc.name for loc in service.list_locations()] == ["Site B"]

    with pytest.raises(ValidationError):
        service.delete(current=admin, location_id=site_a.location_id)


def test_employee_cannot_manage_locations(service, employee):
    with pytest.raises(AuthorizationError):
        service.create(current=employee, name="HQ", point=GeoPoint(1.0, 1.0))


def test_stored_location_with_bad_latitude_is_schema_error():
    with pytest.raises(SchemaError):
        location_from_document("x", {"name": "X", "latitude": 120.0, "longitude": 0.0})


def test_employee_cannot_trigger_address_lookups(service, geocoder, employee):
    with pytest.raises(AuthorizationError):
        service.create_from_address(current=employee, address="1 Le Duan, Ho Chi Minh City")

    assert geocoder.lookups == []
