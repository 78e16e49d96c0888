"""Small helpers for using the public Nominatim geocoding service."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from travel_guide.core.resolve import mappings
from travel_guide.services.http import DAY, JsonApiClient

NOMINATIM_URL = "https://nominatim.openstreetmap.org"


class Nominatim(JsonApiClient):
    """Forward and reverse geocoding against OpenStreetMap Nominatim."""

    source = "nominatim"
    default_timeout_s = 10.0

    async def geocode(self, query: str, *, limit: int = 5) -> List[Dict[str, Any]]:
        """Return raw Nominatim matches for ``query`` (best match first)."""

        if not query:
            return []
        data = await self._get_json(
            f"{NOMINATIM_URL}/search",
            params={
                "q": query,
                "format": "json",
                "addressdetails": 1,
                "extratags": 1,
                "limit": limit,
            },
            default=[],
            cache_ttl_s=DAY,
        )
        return list(mappings(data)) if isinstance(data, list) else []

    async def reverse_geocode(self, lat: float, lon: float) -> Optional[Dict[str, Any]]:
        """Return the address record closest to the coordinates, or ``None``."""

        data = await self._get_json(
            f"{NOMINATIM_URL}/reverse",
            params={"lat": lat, "lon": lon, "format": "json", "addressdetails": 1},
            default=None,
            cache_ttl_s=DAY,
        )
        if not isinstance(data, dict) or "error" in data:
            return None
        return data


def summarize_place(match: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a Nominatim match into the fields the research tools use."""

    address = match.get("address")
    if not isinstance(address, dict):
        address = {}
    country_code = address.get("country_code")
    return {
        "name": match.get("name") or str(match.get("display_name") or "").split(",")[0].strip(),
        "displayName": match.get("display_name"),
        "lat": _to_float(match.get("lat")),
        "lon": _to_float(match.get("lon")),
        "country": address.get("country"),
        "countryCode": country_code.upper() if isinstance(country_code, str) else None,
        "city": address.get("city") or address.get("town") or address.get("village"),
        "type": match.get("addresstype") or match.get("type"),
        "importance": match.get("importance"),
    }


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
