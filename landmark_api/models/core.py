"""Core data models for the Landmark API.

Pydantic models for bounding boxes, landmarks and geocode results, plus the
tagged union of payloads the cache stores.

Field names are snake_case in Python and camelCase on the wire
(``thumbnailUrl``, ``distanceKm``, ``displayName``).
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidBounds


class BoundingBox(BaseModel):
    """Rectangular lat/lon viewport describing a map's visible area.

    Constructed per request. Range and ordering checks are done by
    :meth:`validate_bounds` so that callers decide when to fail.
    """

    north: float
    south: float
    east: float
    west: float

    def validate_bounds(self) -> None:
        """Raise InvalidBounds unless the box is in range and ordered.

        Antimeridian-crossing boxes (east < west) are rejected.
        """
        if not -90 <= self.north <= 90 or not -90 <= self.south <= 90:
            raise InvalidBounds("Latitude must be between -90 and 90 degrees.")
        if not -180 <= self.east <= 180 or not -180 <= self.west <= 180:
            raise InvalidBounds("Longitude must be between -180 and 180 degrees.")
        if self.north < self.south:
            raise InvalidBounds("North must be greater than or equal to south.")
        if self.east < self.west:
            raise InvalidBounds("East must be greater than or equal to west.")

    @property
    def center(self) -> tuple[float, float]:
        """Center point as ``(lat, lon)``."""
        return (self.north + self.south) / 2, (self.east + self.west) / 2


class Landmark(BaseModel):
    """A geolocated Wikipedia article.

    ``distance_km`` is relative to whatever reference point produced it
    (the query center by default). It is not part of the landmark's identity.
    """

    model_config = ConfigDict(populate_by_name=True)

    pageid: int = Field(..., description="Wikipedia page identifier")
    title: str
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    description: Optional[str] = None
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")
    distance_km: Optional[float] = Field(None, alias="distanceKm")


class LandmarkDetails(BaseModel):
    """Short text extract and thumbnail for one landmark page."""

    model_config = ConfigDict(populate_by_name=True)

    pageid: int
    title: str = ""
    extract: Optional[str] = None
    thumbnail_url: Optional[str] = Field(None, alias="thumbnailUrl")


class GeocodeResult(BaseModel):
    """A resolved location for a free-text query."""

    model_config = ConfigDict(populate_by_name=True)

    lat: float
    lon: float
    display_name: str = Field(..., alias="displayName")


class LandmarkListPayload(BaseModel):
    """Cached result of a landmark query."""

    kind: Literal["landmarks"] = "landmarks"
    landmarks: list[Landmark] = Field(default_factory=list)


class GeocodePayload(BaseModel):
    """Cached result of a geocode query."""

    kind: Literal["geocode"] = "geocode"
    result: GeocodeResult


CachedValue = Annotated[
    Union[LandmarkListPayload, GeocodePayload],
    Field(discriminator="kind"),
]
