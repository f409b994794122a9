from __future__ import annotations

import json
import math
from datetime import datetime

import pytest

from src.inout.inout.attendance.repository import DocumentAttendanceRepository
from src.inout.inout.core.constants import EARTH_RADIUS_METERS
from src.inout.inout.core.enums import Role
from src.inout.inout.geo.geofence import GeoPoint
from src.inout.inout.locations.model import Location
from src.inout.inout.locations.repository import DocumentLocationRepository
from src.inout.inout.store.memory_store import InMemoryDocumentStore
from src.inout.inout.users.model import User
from src.inout.inout.users.repository import DocumentUserRepository


def _north_of(point: GeoPoint, meters: float) -> GeoPoint:
    # Haversine distance along a meridian is exactly R * dphi.
    return GeoPoint(point.lat + math.degrees(meters / EARTH_RADIUS_METERS), point.lng)


def _backend_config(project_id: str = "acme-attendance", app_id: str = "1:123:android:abc") -> str:
    return json.dumps({
        "project_info": {"project_id": project_id, "storage_bucket": f"{project_id}.appspot.com"},
        "client": [
            {
                "client_info": {"mobilesdk_app_id": app_id},
                "api_key": [{"current_key": "AIza-test-key"}],
            }
        ],
    })


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def north_of():
    return _north_of


@pytest.fixture
def make_backend_config():
    return _backend_config


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 3, 2, 9, 0, 0))


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def users_repo(store):
    return DocumentUserRepository(store)


@pytest.fixture
def locations_repo(store):
    return DocumentLocationRepository(store)


@pytest.fixture
def attendance_repo(store):
    return DocumentAttendanceRepository(store)


@pytest.fixture
def site_a(locations_repo) -> Location:
    return locations_repo.create(name="Site A", latitude=10.776889, longitude=106.700806, radius_meters=100.0)


@pytest.fixture
def site_b(locations_repo) -> Location:
    return locations_repo.create(name="Site B", latitude=10.801461, longitude=106.714211, radius_meters=50.0)


@pytest.fixture
def admin(users_repo) -> User:
    user = User(uid="admin-1", name="Alice Admin", email="alice@example.com", phone=None, role=Role.ADMIN, approved=True)
    users_repo.save(user)
    return user


@pytest.fixture
def employee(users_repo, site_a) -> User:
    user = User(
        uid="emp-1",
        name="Bob Worker",
        email="bob@example.com",
        phone="0900000002",
        role=Role.EMPLOYEE,
        approved=True,
        employee_id="EMP001",
        assigned_location_id=site_a.location_id,
    )
    users_repo.save(user)
    return user
