"""Landmark and geocode query orchestration.

Landmark queries are cached by rounded viewport bounds:
1. Validate bounds (fail fast, no upstream calls)
2. Cache hit → return as stored
3. Miss → Wikipedia geosearch, then all detail fetches concurrently.
   A failed detail fetch degrades that landmark only.
4. Store for the landmark TTL and return in upstream order

Geocode queries walk a fallback chain: Wikipedia search, then Nominatim.
A Wikipedia failure is logged and treated like an empty result. Geocode
results are cached only when ``geocode_ttl_seconds`` is positive.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from landmark_api.models import (
    BoundingBox,
    GeocodePayload,
    GeocodeResult,
    InvalidQuery,
    Landmark,
    LandmarkDetails,
    LandmarkListPayload,
    NotFound,
)
from landmark_api.services.cache import CacheStore, build_bounds_key, build_geocode_key
from landmark_api.services.nominatim import NominatimService
from landmark_api.services.wikipedia import WikipediaService
from landmark_api.utils.geo import haversine_distance

logger = logging.getLogger(__name__)

LANDMARK_CACHE_TTL_SECONDS = 15 * 60


class LandmarkQueryService:
    """Resolves landmark and geocode queries against the cache and upstreams.

    Holds no per-request state; the cache store is the only shared state.
    """

    def __init__(
        self,
        store: CacheStore,
        wikipedia: WikipediaService,
        nominatim: NominatimService,
        landmark_ttl_seconds: float = LANDMARK_CACHE_TTL_SECONDS,
        geocode_ttl_seconds: float = 0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if landmark_ttl_seconds <= 0:
            raise ValueError("landmark_ttl_seconds must be positive")
        self._store = store
        self._wikipedia = wikipedia
        self._nominatim = nominatim
        self._landmark_ttl = landmark_ttl_seconds
        self._geocode_ttl = geocode_ttl_seconds
        self._clock = clock

    @property
    def geocode_cache_enabled(self) -> bool:
        return self._geocode_ttl > 0

    async def get_landmarks(
        self,
        bounds: BoundingBox,
        reference: Optional[tuple[float, float]] = None,
    ) -> list[Landmark]:
        """Landmarks inside ``bounds``, in upstream (distance-from-center) order.

        Args:
            bounds: The map viewport.
            reference: Optional ``(lat, lon)``. When given, ``distance_km`` on
                the returned copies is measured from this point instead of
                the query center. The cache is not affected.

        Raises:
            InvalidBounds: If the bounds are out of range or not ordered.
            UpstreamError: If the geosearch call fails.
        """
        bounds.validate_bounds()
        key = build_bounds_key(bounds)

        cached = await self._store.get(key)
        if isinstance(cached, LandmarkListPayload):
            logger.info(f"[QUERY] Cache hit {key}: {len(cached.landmarks)} landmarks")
            landmarks = cached.landmarks
        else:
            landmarks = await self._fetch_landmarks(bounds)
            await self._store.put(
                key,
                LandmarkListPayload(landmarks=landmarks),
                self._clock() + self._landmark_ttl,
            )
            logger.info(f"[QUERY] Cached {key}: {len(landmarks)} landmarks")

        if reference is None:
            return landmarks
        return [_with_distance_from(landmark, reference) for landmark in landmarks]

    async def _fetch_landmarks(self, bounds: BoundingBox) -> list[Landmark]:
        landmarks = await self._wikipedia.search_landmarks(bounds)
        if not landmarks:
            return []

        results = await asyncio.gather(
            *[self._wikipedia.get_landmark_details(lm.pageid) for lm in landmarks],
            return_exceptions=True,
        )

        enriched: list[Landmark] = []
        failures = 0
        for landmark, details in zip(landmarks, results):
            if isinstance(details, LandmarkDetails):
                enriched.append(
                    landmark.model_copy(update={
                        "description": details.extract,
                        "thumbnail_url": details.thumbnail_url,
                    })
                )
            else:
                failures += 1
                logger.warning(
                    f"[QUERY] Details for '{landmark.title}' ({landmark.pageid}) failed: "
                    f"{type(details).__name__}: {details}"
                )
                enriched.append(landmark)

        if failures:
            logger.info(f"[QUERY] {failures}/{len(landmarks)} detail fetches failed")
        return enriched

    async def geocode(self, query: str) -> GeocodeResult:
        """Resolve free text to a location.

        Raises:
            InvalidQuery: If the query is empty or blank.
            NotFound: If no source resolves the query.
            UpstreamError: If the fallback source fails.
        """
        if not query or not query.strip():
            raise InvalidQuery("Search query cannot be empty.")
        query = query.strip()

        key = build_geocode_key(query)
        if self.geocode_cache_enabled:
            cached = await self._store.get(key)
            if isinstance(cached, GeocodePayload):
                logger.info(f"[QUERY] Geocode cache hit for '{query}'")
                return cached.result

        result = await self._resolve(query)

        if self.geocode_cache_enabled:
            await self._store.put(
                key,
                GeocodePayload(result=result),
                self._clock() + self._geocode_ttl,
            )
        return result

    async def _resolve(self, query: str) -> GeocodeResult:
        try:
            matches = await self._wikipedia.search_place(query)
            if matches:
                logger.info(f"[QUERY] Geocoded '{query}' via Wikipedia")
                return matches[0]
        except Exception as e:
            # Fall through to Nominatim
            logger.warning(f"[QUERY] Wikipedia place search failed for '{query}': {type(e).__name__}: {e}")

        result = await self._nominatim.search(query)
        if result is not None:
            logger.info(f"[QUERY] Geocoded '{query}' via Nominatim")
            return result

        raise NotFound(f"Could not find a location for '{query}'")


def _with_distance_from(landmark: Landmark, reference: tuple[float, float]) -> Landmark:
    ref_lat, ref_lon = reference
    distance = haversine_distance(ref_lat, ref_lon, landmark.lat, landmark.lon)
    return landmark.model_copy(update={"distance_km": distance})
