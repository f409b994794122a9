from __future__ import annotations

import pytest

from src.inout.inout.geo.geofence import GeoFence, GeoPoint, distance, is_within_radius

CENTER = GeoPoint(10.776889, 106.700806)


def test_distance_is_zero_at_center():
    assert distance(CENTER.lat, CENTER.lng, CENTER.lat, CENTER.lng) == 0.0


def test_distance_along_meridian_matches_offset(north_of):
    p = north_of(CENTER, 50.0)
    assert distance(p.lat, p.lng, CENTER.lat, CENTER.lng) == pytest.approx(50.0, abs=1e-6)


def test_distance_between_cities_is_reasonable():
    # Ho Chi Minh City to Hanoi is roughly 1,140 km in a straight line.
    d = distance(10.7769, 106.7009, 21.0278, 105.8342)
    assert 1_120_000 < d < 1_160_000


def test_radius_boundary(north_of):
    fence = GeoFence(CENTER, 100.0)

    inside = fence.check(north_of(CENTER, 99.5))
    outside = fence.check(north_of(CENTER, 100.5))

    assert inside.inside is True
    assert outside.inside is False
    assert outside.distance_meters == pytest.approx(100.5, abs=1e-6)
    assert is_within_radius(CENTER.lat, CENTER.lng, CENTER.lat, CENTER.lng, 0.0)
    assert is_within_radius(CENTER.lat, CENTER.lng, CENTER.lat, CENTER.lng, 1e-9)


def test_zero_zero_is_a_real_coordinate():
    fence = GeoFence(GeoPoint(0.0, 0.0), 100.0)
    assert fence.check(GeoPoint(0.0, 0.0)).inside
