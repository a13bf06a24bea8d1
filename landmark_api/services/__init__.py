"""Landmark API Services.

Service layer components:
- Cache: bounds-keyed TTL store (in-memory or Redis) with background sweeper
- Wikipedia: geosearch, landmark details and primary place search
- Nominatim: fallback place search
- Landmark query: cache-aside orchestration and geocode fallback chain
"""

from .cache import (
    CacheStore,
    CacheSweeper,
    InMemoryCacheStore,
    RedisCacheStore,
    build_bounds_key,
    build_geocode_key,
)
from .landmark_query import LandmarkQueryService
from .nominatim import NominatimService
from .wikipedia import WikipediaService

__all__ = [
    # Cache
    "CacheStore",
    "CacheSweeper",
    "InMemoryCacheStore",
    "RedisCacheStore",
    "build_bounds_key",
    "build_geocode_key",
    # Upstreams
    "NominatimService",
    "WikipediaService",
    # Orchestration
    "LandmarkQueryService",
]
