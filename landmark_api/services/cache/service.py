"""Cache store implementations.

This module provides the abstract cache store interface plus an in-memory
and a Redis implementation for caching landmark and geocode results.

Entries carry an absolute expiry timestamp (epoch seconds):
- ``get`` evicts and misses once ``now >= expires_at`` (lazy eviction)
- ``put`` rejects an expiry that is not in the future
- ``sweep_expired`` removes every entry with ``expires_at < now``

There is no size-based eviction. Key space is bounded by the 4-decimal
rounding of viewport bounds and by the TTL.
"""

import logging
import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

import redis.asyncio as redis
from pydantic import TypeAdapter

from landmark_api.models import BoundingBox, CachedValue, InvalidExpiry

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

BOUNDS_KEY_PRECISION = 4


def _format_coordinate(value: float) -> str:
    # Negative zero would otherwise split the 0.0000 bucket in two.
    rounded = round(value, BOUNDS_KEY_PRECISION)
    if rounded == 0:
        rounded = 0.0
    return f"{rounded:.{BOUNDS_KEY_PRECISION}f}"


def build_bounds_key(bounds: BoundingBox) -> str:
    """Generate the cache key for a landmark query.

    Each edge is rounded to 4 decimal places (about 11 m) and joined in the
    fixed order north, south, east, west. Viewports that round to the same
    values share a key.

    Example:
        >>> build_bounds_key(BoundingBox(north=51.51, south=51.5, east=-0.08, west=-0.1))
        'landmarks_51.5100_51.5000_-0.0800_-0.1000'
    """
    parts = [
        _format_coordinate(bounds.north),
        _format_coordinate(bounds.south),
        _format_coordinate(bounds.east),
        _format_coordinate(bounds.west),
    ]
    return "landmarks_" + "_".join(parts)


def build_geocode_key(query: str) -> str:
    """Generate the cache key for a geocode query.

    Case and runs of whitespace are ignored.
    """
    return "geocode:" + " ".join(query.casefold().split())


class CacheStore(ABC):
    """Abstract base class for cache stores.

    Values are CachedValue payloads; expiry is an absolute timestamp.
    """

    @abstractmethod
    async def get(self, key: str) -> CachedValue | None:
        """Retrieve a cached value by key.

        Args:
            key: The cache key to look up.

        Returns:
            The cached value if present and not expired, None otherwise.
        """
        pass

    @abstractmethod
    async def put(self, key: str, value: CachedValue, expires_at: float) -> None:
        """Store a value until ``expires_at``, replacing any existing entry.

        Args:
            key: The cache key to store under.
            value: The payload to cache.
            expires_at: Absolute expiry as epoch seconds.

        Raises:
            InvalidExpiry: If ``expires_at`` is not in the future.
        """
        pass

    @abstractmethod
    async def sweep_expired(self) -> int:
        """Remove every entry whose expiry has passed.

        Returns:
            Number of entries removed.
        """
        pass


@dataclass(frozen=True)
class CacheEntry:
    """A stored value and its absolute expiry."""

    key: str
    value: CachedValue
    expires_at: float


class InMemoryCacheStore(CacheStore):
    """Process-local cache store backed by a dict.

    Safe for concurrent coroutines on one event loop: no method awaits while
    holding partial state. Racing puts for the same key are last-writer-wins.
    """

    def __init__(self, clock: Clock = time.time) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._clock = clock

    async def get(self, key: str) -> CachedValue | None:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"[CACHE] Miss for key: {key}")
            return None

        if self._clock() >= entry.expires_at:
            logger.debug(f"[CACHE] Expired key: {key}")
            # Only drop the entry we looked at; a concurrent put may have replaced it.
            if self._entries.get(key) is entry:
                del self._entries[key]
            return None

        logger.debug(f"[CACHE] Hit for key: {key}")
        return entry.value

    async def put(self, key: str, value: CachedValue, expires_at: float) -> None:
        now = self._clock()
        if expires_at <= now:
            raise InvalidExpiry(f"Expiry {expires_at} is not after current time {now}")
        self._entries[key] = CacheEntry(key=key, value=value, expires_at=expires_at)
        logger.debug(f"[CACHE] Stored key: {key} until {expires_at:.0f}")

    async def sweep_expired(self) -> int:
        now = self._clock()
        expired = [key for key, entry in list(self._entries.items()) if entry.expires_at < now]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.info(f"[CACHE] Swept {len(expired)} expired entries")
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries


class RedisCacheStore(CacheStore):
    """Redis-based implementation of the cache store.

    Payloads are serialized as JSON through pydantic. Expiry is handed to
    Redis as an absolute millisecond timestamp (``PXAT``), so Redis evicts
    keys itself and :meth:`sweep_expired` has nothing to do.

    Attributes:
        _client: The Redis async client instance.
        _prefix: Namespace prepended to every key.
    """

    _adapter: TypeAdapter = TypeAdapter(CachedValue)

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        prefix: str = "landmark_api:",
        clock: Clock = time.time,
        client: redis.Redis | None = None,
    ) -> None:
        """Initialize the Redis cache store.

        Args:
            redis_url: Redis connection URL. Defaults to localhost:6379.
            prefix: Namespace for keys written by this store.
            clock: Source of the current epoch time.
            client: Pre-built client, mainly for tests.
        """
        self._redis_url = redis_url
        self._prefix = prefix
        self._clock = clock
        self._client: redis.Redis | None = client

    async def connect(self) -> None:
        """Establish connection to Redis."""
        if self._client is None:
            self._client = redis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
            )

    async def disconnect(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _ensure_connected(self) -> redis.Redis:
        if self._client is None:
            await self.connect()
        return self._client  # type: ignore

    async def get(self, key: str) -> CachedValue | None:
        client = await self._ensure_connected()
        raw = await client.get(self._prefix + key)
        if raw is None:
            return None
        return self._adapter.validate_json(raw)

    async def put(self, key: str, value: CachedValue, expires_at: float) -> None:
        now = self._clock()
        if expires_at <= now:
            raise InvalidExpiry(f"Expiry {expires_at} is not after current time {now}")
        client = await self._ensure_connected()
        serialized = self._adapter.dump_json(value, by_alias=True).decode("utf-8")
        await client.set(self._prefix + key, serialized, pxat=math.ceil(expires_at * 1000))

    async def sweep_expired(self) -> int:
        return 0
