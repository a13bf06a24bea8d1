"""OpenStreetMap Nominatim geocoder (secondary place search).

One round trip: ``/search?format=json&limit=1`` returns the best match with
coordinates and a display name. Nominatim's usage policy requires an
identifying User-Agent.
"""

import logging

import httpx

from landmark_api.models import GeocodeResult, UpstreamError

logger = logging.getLogger(__name__)


class NominatimService:
    """Nominatim free-text geocoder."""

    NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"

    def __init__(
        self,
        search_url: str = NOMINATIM_URL,
        user_agent: str = "LandmarkExplorer/1.0",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._search_url = search_url
        self._timeout = timeout
        self._headers = {"User-Agent": user_agent}
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout, headers=self._headers)
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def search(self, query: str) -> GeocodeResult | None:
        """Return the best match for ``query``, or None if there is none."""
        client = self._get_client()
        try:
            response = await client.get(
                self._search_url,
                params={"q": query, "format": "json", "limit": 1},
            )
            response.raise_for_status()
            results = response.json()
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Nominatim request timed out: {type(e).__name__}") from e
        except httpx.HTTPStatusError as e:
            raise UpstreamError(f"Nominatim returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Nominatim request failed: {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise UpstreamError("Nominatim returned malformed JSON") from e

        if not isinstance(results, list):
            raise UpstreamError("Nominatim returned an unexpected payload")
        if not results:
            logger.info(f"[NOMINATIM] No match for '{query}'")
            return None

        location = results[0]
        try:
            return GeocodeResult(
                lat=float(location["lat"]),
                lon=float(location["lon"]),
                display_name=location.get("display_name") or query,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Malformed Nominatim result: {e}") from e
