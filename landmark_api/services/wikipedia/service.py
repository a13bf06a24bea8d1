"""Wikipedia API service for landmark search, details and place lookup.

No API key required.

Architecture:
- Shared httpx client with connection pooling
- Semaphore bounding concurrent requests (detail fan-out)
- Bounded timeout; every transport, status or decoding failure is raised
  as UpstreamError. No retries at this layer.

Endpoints used (all on the Action API):
- list=geosearch         landmarks around a point
- prop=extracts|pageimages  intro text + thumbnail for one page
- list=search            free-text page search (primary geocoder)
- prop=coordinates       coordinates of the top search hit
"""

import asyncio
import logging
from typing import Any

import httpx

from landmark_api.models import (
    BoundingBox,
    GeocodeResult,
    Landmark,
    LandmarkDetails,
    UpstreamError,
)
from landmark_api.utils.geo import MAX_SEARCH_RADIUS_M, search_radius_m

logger = logging.getLogger(__name__)


class WikipediaService:
    """Wikipedia Action API client.

    Uses a shared httpx client with connection pooling. The semaphore only
    bounds in-flight requests; detail fetches for a result set are still
    issued together.
    """

    WIKIPEDIA_ACTION_API = "https://en.wikipedia.org/w/api.php"

    GEOSEARCH_LIMIT = 50
    PLACE_SEARCH_LIMIT = 5
    THUMBNAIL_SIZE = 500

    def __init__(
        self,
        api_url: str = WIKIPEDIA_ACTION_API,
        user_agent: str = "LandmarkExplorer/1.0",
        timeout: float = 10.0,
        max_radius_m: float = MAX_SEARCH_RADIUS_M,
        geosearch_limit: int = GEOSEARCH_LIMIT,
        max_concurrency: int = 50,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_url = api_url
        self._timeout = timeout
        self._max_radius_m = max_radius_m
        self._geosearch_limit = geosearch_limit
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self._client = client
        self._max_concurrency = max_concurrency
        self._semaphore = asyncio.Semaphore(max_concurrency)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=self._headers,
                limits=httpx.Limits(max_connections=self._max_concurrency, max_keepalive_connections=10),
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(self, params: dict[str, Any]) -> dict:
        """GET the Action API and return the response's ``query`` block.

        The API reports some failures (maxlag, ratelimited, bad parameters)
        with HTTP 200 and an ``error`` body; those raise UpstreamError too.
        """
        client = self._get_client()
        request_params = {"format": "json", "action": "query", **params}
        try:
            async with self._semaphore:
                response = await client.get(self._api_url, params=request_params)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Wikipedia request timed out: {type(e).__name__}") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamError(f"Wikipedia returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Wikipedia request failed: {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise UpstreamError("Wikipedia returned malformed JSON") from e

        if not isinstance(data, dict):
            raise UpstreamError("Wikipedia returned an unexpected payload")
        if "error" in data:
            error = data["error"]
            code = error.get("code", "unknown") if isinstance(error, dict) else error
            raise UpstreamError(f"Wikipedia API error: {code}")
        query = data.get("query")
        if not isinstance(query, dict):
            raise UpstreamError("Wikipedia response has no query block")
        return query

    async def search_landmarks(self, bounds: BoundingBox) -> list[Landmark]:
        """Find geotagged articles inside a viewport.

        Searches a circle around the viewport center whose radius reaches the
        north and east edges (capped at ``max_radius_m``). Results keep the
        upstream order, which is by distance from the center.
        """
        center_lat, center_lon = bounds.center
        radius = search_radius_m(bounds, self._max_radius_m)
        params = {
            "list": "geosearch",
            "gscoord": f"{center_lat}|{center_lon}",
            # geosearch rejects a zero radius
            "gsradius": max(10, round(radius)),
            "gslimit": self._geosearch_limit,
        }

        query = await self._request(params)
        hits = query.get("geosearch")
        if hits is None:
            raise UpstreamError("Wikipedia response has no geosearch results")
        if not hits:
            return []

        try:
            landmarks = [
                Landmark(
                    pageid=hit["pageid"],
                    title=hit["title"],
                    lat=hit["lat"],
                    lon=hit["lon"],
                    distance_km=hit.get("dist", 0) / 1000,
                )
                for hit in hits
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Malformed geosearch result: {e}") from e

        logger.info(f"[WIKI] Geosearch ({center_lat:.4f}, {center_lon:.4f}) r={radius:.0f}m: {len(landmarks)} landmarks")
        return landmarks

    async def get_landmark_details(self, pageid: int) -> LandmarkDetails:
        """Get the intro extract and thumbnail for a page."""
        params = {
            "pageids": pageid,
            "prop": "extracts|pageimages",
            "exintro": 1,
            "explaintext": 1,
            "piprop": "thumbnail",
            "pithumbsize": self.THUMBNAIL_SIZE,
        }

        query = await self._request(params)
        page = _pages(query).get(str(pageid))
        if not isinstance(page, dict) or page.get("missing") is not None:
            return LandmarkDetails(pageid=pageid)

        return LandmarkDetails(
            pageid=pageid,
            title=page.get("title", ""),
            extract=page.get("extract") or None,
            thumbnail_url=page.get("thumbnail", {}).get("source"),
        )

    async def search_place(self, query: str) -> list[GeocodeResult]:
        """Resolve free text to the coordinates of the best matching article.

        Two round trips: a text search for up to five pages, then a
        coordinates lookup for the top hit. Returns an empty list when nothing
        matches or the top hit is not geotagged.
        """
        query_block = await self._request({
            "list": "search",
            "srsearch": query,
            "srlimit": self.PLACE_SEARCH_LIMIT,
        })
        matches = query_block.get("search") or []
        if not matches:
            logger.info(f"[WIKI] No search match for '{query}'")
            return []

        top = matches[0] if isinstance(matches[0], dict) else {}
        pageid = top.get("pageid")
        if pageid is None:
            return []

        query_block = await self._request({"pageids": pageid, "prop": "coordinates"})
        page = _pages(query_block).get(str(pageid)) or {}
        coordinates = page.get("coordinates") or []
        if not coordinates:
            logger.info(f"[WIKI] Top match for '{query}' has no coordinates")
            return []

        coords = coordinates[0]
        try:
            return [
                GeocodeResult(
                    lat=float(coords["lat"]),
                    lon=float(coords["lon"]),
                    display_name=page.get("title") or top.get("title", query),
                )
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Malformed coordinates result: {e}") from e


def _pages(query: dict) -> dict:
    pages = query.get("pages", {})
    if not isinstance(pages, dict):
        raise UpstreamError("Wikipedia response has a malformed pages block")
    return pages
