"""Error taxonomy for the Landmark API.

Every error the service raises on purpose derives from LandmarkAPIError,
which carries a machine-readable code, the HTTP status it maps to and a
message suitable for showing to end users. The HTTP layer turns these into
the ``{"success": false, "error": {...}}`` envelope.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """Error codes surfaced to API clients."""

    INVALID_BOUNDS = "INVALID_BOUNDS"
    INVALID_QUERY = "INVALID_QUERY"
    INVALID_EXPIRY = "INVALID_EXPIRY"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    API_ERROR = "API_ERROR"


class AppError(BaseModel):
    """Error body returned to API clients."""

    code: ErrorCode
    message: str = Field(..., description="Technical error message")
    user_message: str = Field(..., description="Message safe to show to end users")


class LandmarkAPIError(Exception):
    """Base class for errors raised by the service layer."""

    code: ErrorCode = ErrorCode.API_ERROR
    status_code: int = 500
    user_message: str = "Something went wrong. Please try again."

    def __init__(self, message: str, user_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if user_message is not None:
            self.user_message = user_message

    def to_app_error(self) -> AppError:
        return AppError(code=self.code, message=self.message, user_message=self.user_message)


class InvalidBounds(LandmarkAPIError):
    """Map bounds out of range or not ordered."""

    code = ErrorCode.INVALID_BOUNDS
    status_code = 400
    user_message = "Invalid map bounds provided."


class InvalidQuery(LandmarkAPIError):
    """Search text missing or blank."""

    code = ErrorCode.INVALID_QUERY
    status_code = 400
    user_message = "Query parameter is required."


class InvalidExpiry(LandmarkAPIError):
    """Cache write with an expiry that is not in the future."""

    code = ErrorCode.INVALID_EXPIRY
    status_code = 400
    user_message = "Expiry time must be a future timestamp."


class UpstreamError(LandmarkAPIError):
    """Network or remote-service failure talking to an upstream API."""

    code = ErrorCode.UPSTREAM_ERROR
    status_code = 500
    user_message = "Failed to fetch data from an upstream service."


class NotFound(LandmarkAPIError):
    """Geocoding exhausted every source without a match."""

    code = ErrorCode.NOT_FOUND
    status_code = 404
    user_message = "Location not found."
