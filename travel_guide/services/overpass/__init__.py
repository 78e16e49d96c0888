"""OpenStreetMap Overpass API integration.

Public API:
    - Overpass: Async client for places, cities, airports, transit stops and neighbourhoods
    - CATEGORY_FILTERS: Place category to Overpass tag filter table
    - category_filter: Resolve a category, defaulting to ``["tourism"]``
"""
from travel_guide.services.overpass.client import CATEGORY_FILTERS, Overpass, category_filter

__all__ = [
    "CATEGORY_FILTERS",
    "Overpass",
    "category_filter",
]
