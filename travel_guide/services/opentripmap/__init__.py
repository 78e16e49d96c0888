"""OpenTripMap points-of-interest integration.

Public API:
    - OpenTripMap: Async client for rated POIs around a coordinate
"""
from travel_guide.services.opentripmap.client import OpenTripMap

__all__ = ["OpenTripMap"]
