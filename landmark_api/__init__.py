"""Landmark API: cached Wikipedia landmark search and geocoding."""

__version__ = "0.1.0"
