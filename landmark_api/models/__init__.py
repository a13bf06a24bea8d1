"""Landmark API data models and error types."""

from .core import (
    BoundingBox,
    CachedValue,
    GeocodePayload,
    GeocodeResult,
    Landmark,
    LandmarkDetails,
    LandmarkListPayload,
)
from .errors import (
    AppError,
    ErrorCode,
    InvalidBounds,
    InvalidExpiry,
    InvalidQuery,
    LandmarkAPIError,
    NotFound,
    UpstreamError,
)

__all__ = [
    # Core
    "BoundingBox",
    "CachedValue",
    "GeocodePayload",
    "GeocodeResult",
    "Landmark",
    "LandmarkDetails",
    "LandmarkListPayload",
    # Errors
    "AppError",
    "ErrorCode",
    "InvalidBounds",
    "InvalidExpiry",
    "InvalidQuery",
    "LandmarkAPIError",
    "NotFound",
    "UpstreamError",
]
