"""Open-Meteo weather integration.

Public API:
    - OpenMeteo: Async client exposing ``forecast`` and ``climate``
"""
from travel_guide.services.open_meteo.client import OpenMeteo

__all__ = ["OpenMeteo"]
