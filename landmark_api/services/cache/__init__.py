"""Cache store, key derivation and background sweeper."""

from .service import (
    CacheEntry,
    CacheStore,
    InMemoryCacheStore,
    RedisCacheStore,
    build_bounds_key,
    build_geocode_key,
)
from .sweeper import CacheSweeper

__all__ = [
    "CacheEntry",
    "CacheStore",
    "CacheSweeper",
    "InMemoryCacheStore",
    "RedisCacheStore",
    "build_bounds_key",
    "build_geocode_key",
]
