"""OpenTripMap points of interest (richer POI tier, needs an API key)."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from travel_guide.core.resolve import dig, mappings
from travel_guide.services.http import DAY, JsonApiClient

logger = logging.getLogger(__name__)

OPENTRIPMAP_URL = "https://api.opentripmap.com/0.1/en/places/radius"

KIND_FILTERS: Dict[str, str] = {
    "tourism": "interesting_places",
    "attractions": "interesting_places",
    "historic": "historic",
    "nature": "natural",
    "religious": "religion",
    "cultural": "cultural",
    "museums": "museums",
    "architecture": "architecture",
}


class OpenTripMap(JsonApiClient):
    source = "opentripmap"
    default_timeout_s = 10.0

    def __init__(self, api_key: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def search_places(
        self,
        lat: float,
        lon: float,
        *,
        radius: int = 20000,
        category: str = "attractions",
        limit: int = 30,
    ) -> List[Dict[str, Any]]:
        """Popular named places around a point; ``[]`` when no key is configured."""

        if not self.available:
            logger.debug("OpenTripMap key not configured, skipping POI lookup")
            return []
        data = await self._get_json(
            OPENTRIPMAP_URL,
            params={
                "radius": radius,
                "lat": lat,
                "lon": lon,
                "kinds": KIND_FILTERS.get((category or "").lower(), KIND_FILTERS["tourism"]),
                "rate": 2,
                "format": "json",
                "limit": limit,
                "apikey": self.api_key,
            },
            default=[],
            cache_ttl_s=DAY,
        )
        if not isinstance(data, list):
            return []

        places = []
        for item in mappings(data):
            name = item.get("name")
            if not isinstance(name, str) or not name.strip():
                continue
            raw_kinds = item.get("kinds")
            kinds = [kind for kind in raw_kinds.split(",") if kind] if isinstance(raw_kinds, str) else []
            places.append(
                {
                    "id": item.get("xid"),
                    "name": name.strip(),
                    "type": kinds[0] if kinds else "place",
                    "kinds": kinds,
                    "lat": dig(item, "point.lat"),
                    "lon": dig(item, "point.lon"),
                    "rate": item.get("rate"),
                    "wikidata": item.get("wikidata"),
                }
            )
        places.sort(key=_rate, reverse=True)
        return places


def _rate(place: Dict[str, Any]) -> float:
    rate = place.get("rate")
    return rate if isinstance(rate, (int, float)) else 0
