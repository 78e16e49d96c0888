"""Geocoding and location resolution services.

This module provides geocoding functionality for converting place names to
coordinates and vice versa using the Nominatim OpenStreetMap API.

Public API:
    - Nominatim: Async client with ``geocode`` and ``reverse_geocode``
    - summarize_place: Flatten a raw match into name/coordinates/country fields
"""
from travel_guide.services.nominatim.client import Nominatim, summarize_place

__all__ = [
    "Nominatim",
    "summarize_place",
]
