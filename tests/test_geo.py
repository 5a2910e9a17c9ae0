import math

import pytest

from foodmatch.models.dto import Coordinate
from foodmatch.utils.geo import distance_km, estimate_travel_time_minutes, haversine, is_valid_coordinate

BANGALORE = {"lat": 12.9716, "lng": 77.5946}
MYSORE = {"lat": 12.2958, "lng": 76.6394}

def test_haversine_known_distance():
    """Bangalore to Mysore is roughly 128 km as the crow flies."""
    assert haversine(12.9716, 77.5946, 12.2958, 76.6394) == pytest.approx(128.0, abs=1.5)

def test_one_degree_of_latitude():
    assert haversine(0.0, 0.0, 1.0, 0.0) == pytest.approx(6371.0 * math.pi / 180)

@pytest.mark.parametrize("a,b", [
    (BANGALORE, MYSORE),
    ({"lat": -33.86, "lng": 151.21}, {"lat": 51.5, "lng": -0.12}),
    ({"lat": 0.0, "lng": 179.9}, {"lat": 0.0, "lng": -179.9}),
])
def test_distance_is_symmetric(a, b):
    assert distance_km(a, b) == pytest.approx(distance_km(b, a))

def test_distance_to_self_is_zero():
    assert distance_km(BANGALORE, BANGALORE) == 0.0
    point = Coordinate(lat=12.9716, lng=77.5946)
    assert distance_km(point, point) == 0.0

def test_distance_accepts_models_and_mappings():
    assert distance_km(Coordinate(**BANGALORE), MYSORE) == pytest.approx(distance_km(BANGALORE, MYSORE))

def test_antipodal_points_do_not_raise():
    assert distance_km({"lat": 0.0, "lng": 0.0}, {"lat": 0.0, "lng": 180.0}) == pytest.approx(math.pi * 6371.0)

@pytest.mark.parametrize("bad", [
    None,
    {"lat": float("nan"), "lng": 77.0},
    {"lat": 12.0, "lng": float("inf")},
    {"lat": 91.0, "lng": 0.0},
    {"lat": "12.9", "lng": 77.5},
    {"lat": 12.9},
])
def test_distance_with_bad_coordinate_is_none(bad):
    assert distance_km(BANGALORE, bad) is None
    assert distance_km(bad, BANGALORE) is None

def test_is_valid_coordinate():
    assert is_valid_coordinate(0, 0)
    assert is_valid_coordinate(-90, 180)
    assert not is_valid_coordinate(True, 10)
    assert not is_valid_coordinate(None, 10)
    assert not is_valid_coordinate(10, -180.5)

def test_travel_time_uses_average_speed():
    # 30 km/h by default: 15 km takes half an hour
    assert estimate_travel_time_minutes(15.0) == pytest.approx(30.0)
    assert estimate_travel_time_minutes(10.0, average_speed_kmh=60.0) == pytest.approx(10.0)

def test_travel_time_zero_and_monotonic():
    assert estimate_travel_time_minutes(0.0) == 0.0
    times = [estimate_travel_time_minutes(d) for d in (0.5, 1.0, 2.5, 40.0)]
    assert times == sorted(times)

@pytest.mark.parametrize("bad", [None, float("nan"), float("inf"), -1.0])
def test_travel_time_rejects_bad_distance(bad):
    assert estimate_travel_time_minutes(bad) is None

def test_travel_time_rejects_bad_speed():
    assert estimate_travel_time_minutes(5.0, average_speed_kmh=0) is None
