"""Query orchestration: bounds-keyed landmark cache and geocode fallback chain."""

from .service import LANDMARK_CACHE_TTL_SECONDS, LandmarkQueryService

__all__ = ["LANDMARK_CACHE_TTL_SECONDS", "LandmarkQueryService"]
