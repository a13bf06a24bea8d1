"""Nominatim geocoding (fallback place search)."""

from .service import NominatimService

__all__ = ["NominatimService"]
