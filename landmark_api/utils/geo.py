"""Great-circle distance helpers."""

import math

from landmark_api.models import BoundingBox

EARTH_RADIUS_KM = 6371.0
MAX_SEARCH_RADIUS_M = 10_000


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance between two coordinates in kilometers (Haversine formula)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def search_radius_m(bounds: BoundingBox, max_radius_m: float = MAX_SEARCH_RADIUS_M) -> float:
    """Radius in meters that covers a viewport from its center.

    Takes the larger of the center-to-north-edge and center-to-east-edge
    distances, capped at ``max_radius_m``.
    """
    center_lat, center_lon = bounds.center
    to_north = haversine_distance(center_lat, center_lon, bounds.north, center_lon)
    to_east = haversine_distance(center_lat, center_lon, center_lat, bounds.east)
    return min(max(to_north, to_east) * 1000, max_radius_m)
