"""Open-Meteo forecast and historical climate lookups (no key required)."""
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Optional

from travel_guide.services.http import DAY, HOUR, JsonApiClient

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
ARCHIVE_URL = "https://archive-api.open-meteo.com/v1/archive"
CLIMATE_CACHE_TTL_S = 30 * DAY


class OpenMeteo(JsonApiClient):
    source = "open_meteo"
    default_timeout_s = 10.0

    async def forecast(self, lat: float, lon: float, *, days: int = 7) -> Optional[Dict[str, Any]]:
        """Daily max/min temperature, precipitation and weather codes."""

        data = await self._get_json(
            FORECAST_URL,
            params={
                "latitude": lat,
                "longitude": lon,
                "daily": "temperature_2m_max,temperature_2m_min,precipitation_sum,weathercode",
                "timezone": "auto",
                "forecast_days": days,
            },
            default=None,
            cache_ttl_s=HOUR,
        )
        return data if isinstance(data, dict) and data.get("daily") else None

    async def climate(self, lat: float, lon: float, *, year: Optional[int] = None) -> Optional[Dict[str, Any]]:
        """Daily means for a full calendar year (last year by default)."""

        year = year or dt.date.today().year - 1
        data = await self._get_json(
            ARCHIVE_URL,
            params={
                "latitude": lat,
                "longitude": lon,
                "start_date": f"{year}-01-01",
                "end_date": f"{year}-12-31",
                "daily": "temperature_2m_mean,precipitation_sum,weathercode",
                "timezone": "auto",
            },
            default=None,
            timeout_s=15.0,
            cache_ttl_s=CLIMATE_CACHE_TTL_S,
        )
        return data if isinstance(data, dict) and data.get("daily") else None
