# Great-circle distance and travel-time helpers for pickup proximity.

import math
from math import radians, sin, cos, sqrt, asin
from typing import Any, Optional, Tuple

from foodmatch.core.config import settings

# Earth's radius in kilometers
R = 6371.0

def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points
    on the Earth (specified in decimal degrees) using the Haversine formula.

    Args:
        lat1: Latitude of point 1.
        lon1: Longitude of point 1.
        lat2: Latitude of point 2.
        lon2: Longitude of point 2.

    Returns:
        Distance between the two points in kilometers.
    """
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])

    dlon = lon2 - lon1
    dlat = lat2 - lat1

    a = sin(dlat / 2)**2 + cos(lat1) * cos(lat2) * sin(dlon / 2)**2
    # Rounding can push a a hair above 1 for antipodal points
    c = 2 * asin(sqrt(min(1.0, a)))

    return R * c

def is_valid_coordinate(lat: Any, lng: Any) -> bool:
    """True when lat/lng are finite numbers inside the WGS84 ranges."""
    if isinstance(lat, bool) or isinstance(lng, bool):
        return False
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0

def _lat_lng(point: Any) -> Optional[Tuple[float, float]]:
    if point is None:
        return None
    if isinstance(point, dict):
        lat, lng = point.get("lat"), point.get("lng")
    else:
        lat, lng = getattr(point, "lat", None), getattr(point, "lng", None)
    if not is_valid_coordinate(lat, lng):
        return None
    return float(lat), float(lng)

def distance_km(a: Any, b: Any) -> Optional[float]:
    """
    Haversine distance between two coordinates (objects exposing ``lat``/``lng``
    or ``{"lat": ..., "lng": ...}`` mappings).

    Returns None instead of raising when either side is missing or not a
    finite, in-range coordinate, so one bad row cannot abort a ranking pass.
    """
    pa = _lat_lng(a)
    pb = _lat_lng(b)
    if pa is None or pb is None:
        return None
    if pa == pb:
        return 0.0
    return haversine(pa[0], pa[1], pb[0], pb[1])

def estimate_travel_time_minutes(distance_km: Optional[float], average_speed_kmh: Optional[float] = None) -> Optional[float]:
    """Straight-line travel time at a constant average speed (AVERAGE_SPEED_KMH by default)."""
    if distance_km is None or isinstance(distance_km, bool):
        return None
    if not math.isfinite(distance_km) or distance_km < 0:
        return None
    speed = settings.AVERAGE_SPEED_KMH if average_speed_kmh is None else average_speed_kmh
    if not math.isfinite(speed) or speed <= 0:
        return None
    return distance_km / speed * 60.0
