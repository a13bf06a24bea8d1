"""Shared helpers."""

from .geo import EARTH_RADIUS_KM, haversine_distance, search_radius_m

__all__ = ["EARTH_RADIUS_KM", "haversine_distance", "search_radius_m"]
