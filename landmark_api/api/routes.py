"""API routes for the Landmark API.

- GET /landmarks: Wikipedia landmarks inside a map viewport (cached)
- GET /geocode:   free-text location lookup (Wikipedia, then Nominatim)

Routes only parse parameters. Errors raised by the query service are turned
into HTTP responses by the exception handlers in ``landmark_api.main``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from landmark_api.models import (
    BoundingBox,
    GeocodeResult,
    InvalidBounds,
    Landmark,
)
from landmark_api.services.landmark_query import LandmarkQueryService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_query_service(request: Request) -> LandmarkQueryService:
    """Query service built by the application lifespan."""
    return request.app.state.query_service


@router.get("/landmarks", response_model=list[Landmark])
async def get_landmarks(
    north: float = Query(..., description="Northern edge latitude"),
    south: float = Query(..., description="Southern edge latitude"),
    east: float = Query(..., description="Eastern edge longitude"),
    west: float = Query(..., description="Western edge longitude"),
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Reference latitude for distances"),
    lon: Optional[float] = Query(None, ge=-180, le=180, description="Reference longitude for distances"),
    service: LandmarkQueryService = Depends(get_query_service),
) -> list[Landmark]:
    """Get landmarks within the given map bounds.

    When both ``lat`` and ``lon`` are given, ``distanceKm`` is measured from
    that point (e.g. the user's position) instead of the viewport center.
    """
    if (lat is None) != (lon is None):
        raise InvalidBounds("lat and lon must be given together")
    reference = (lat, lon) if lat is not None and lon is not None else None

    bounds = BoundingBox(north=north, south=south, east=east, west=west)
    return await service.get_landmarks(bounds, reference=reference)


@router.get("/geocode", response_model=GeocodeResult)
async def geocode(
    q: str = Query(..., description="Place name or address to look up"),
    service: LandmarkQueryService = Depends(get_query_service),
) -> GeocodeResult:
    """Geocode a free-text location."""
    return await service.geocode(q)
