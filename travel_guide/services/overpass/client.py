"""OpenStreetMap Overpass queries for places, cities, airports and transit."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from travel_guide.core.resolve import mappings
from travel_guide.services.http import DAY, JsonApiClient

OVERPASS_URL = "https://overpass-api.de/api/interpreter"

CATEGORY_FILTERS: Dict[str, str] = {
    "tourism": '["tourism"]',
    "attractions": '["tourism"~"attraction|museum|gallery|viewpoint|artwork"]',
    "hotels": '["tourism"="hotel"]',
    "restaurants": '["amenity"="restaurant"]',
    "cafes": '["amenity"="cafe"]',
    "bars": '["amenity"="bar"]',
    "shops": '["shop"]',
    "transport": '["public_transport"]',
    "historic": '["historic"]',
    "nature": '["natural"]',
    "religious": '["amenity"="place_of_worship"]',
}
DEFAULT_FILTER = CATEGORY_FILTERS["tourism"]

# The country-wide city query scans a whole admin area and needs a longer budget.
CITY_QUERY_TIMEOUT_S = 65.0


def category_filter(category: Optional[str]) -> str:
    """Map a place category to its Overpass tag filter (``["tourism"]`` if unknown)."""

    return CATEGORY_FILTERS.get((category or "").strip().lower(), DEFAULT_FILTER)


class Overpass(JsonApiClient):
    source = "overpass"
    default_timeout_s = 15.0

    async def query(self, ql: str, *, timeout_s: Optional[float] = None) -> List[Dict[str, Any]]:
        """Run a raw Overpass QL query and return its ``elements`` (``[]`` on failure)."""

        data = await self._fetch_json(
            "POST",
            OVERPASS_URL,
            data={"data": ql},
            default={"elements": []},
            timeout_s=timeout_s,
            cache_ttl_s=DAY,
        )
        elements = data.get("elements") if isinstance(data, dict) else None
        return list(mappings(elements)) if isinstance(elements, list) else []

    async def search_places(
        self,
        lat: float,
        lon: float,
        *,
        radius: int = 5000,
        category: str = "tourism",
    ) -> List[Dict[str, Any]]:
        """Named nodes and ways around a point that match ``category``."""

        tag_filter = category_filter(category)
        ql = f"""
[out:json][timeout:30];
(
  node{tag_filter}(around:{radius},{lat},{lon});
  way{tag_filter}(around:{radius},{lat},{lon});
);
out body center 50;
"""
        places = []
        for element in await self.query(ql):
            tags = _object(element, "tags")
            name = tags.get("name")
            if not name:
                continue
            center = _object(element, "center")
            places.append(
                {
                    "id": element.get("id"),
                    "name": name,
                    "type": tags.get("tourism") or tags.get("amenity") or tags.get("historic") or "place",
                    "lat": element.get("lat", center.get("lat")),
                    "lon": element.get("lon", center.get("lon")),
                    "tags": tags,
                    "description": tags.get("description") or tags.get("description:en"),
                    "website": tags.get("website"),
                    "phone": tags.get("phone"),
                    "openingHours": tags.get("opening_hours"),
                    "wheelchair": tags.get("wheelchair"),
                    "wikipedia": tags.get("wikipedia"),
                }
            )
        return places

    async def search_cities(self, country_code: str, *, limit: int = 20) -> List[Dict[str, Any]]:
        """Cities and towns of a country ordered by population, largest first."""

        if not country_code:
            return []
        ql = f"""
[out:json][timeout:60];
area["ISO3166-1"="{country_code.strip().upper()}"]->.country;
(
  node["place"~"city|town"](area.country);
);
out body 100;
"""
        cities = []
        for element in await self.query(ql, timeout_s=CITY_QUERY_TIMEOUT_S):
            tags = _object(element, "tags")
            name = tags.get("name") or tags.get("name:en")
            population = _parse_population(tags.get("population"))
            if not name or population <= 0:
                continue
            cities.append(
                {
                    "name": name,
                    "population": population,
                    "lat": element.get("lat"),
                    "lon": element.get("lon"),
                    "wikipedia": tags.get("wikipedia"),
                    "wikidata": tags.get("wikidata"),
                }
            )
        cities.sort(key=lambda city: city["population"], reverse=True)
        return cities[:limit]

    async def search_airports(self, lat: float, lon: float, *, radius: int = 100000) -> List[Dict[str, Any]]:
        ql = f"""
[out:json][timeout:30];
(
  node["aeroway"="aerodrome"]["iata"](around:{radius},{lat},{lon});
  way["aeroway"="aerodrome"]["iata"](around:{radius},{lat},{lon});
);
out body center 20;
"""
        airports = []
        for element in await self.query(ql):
            tags = _object(element, "tags")
            if not tags.get("iata"):
                continue
            center = _object(element, "center")
            airports.append(
                {
                    "name": tags.get("name") or tags.get("name:en"),
                    "iata": tags.get("iata"),
                    "icao": tags.get("icao"),
                    "lat": element.get("lat", center.get("lat")),
                    "lon": element.get("lon", center.get("lon")),
                    "type": tags.get("aeroway"),
                    "international": tags.get("aerodrome:type") == "international",
                }
            )
        return airports

    async def search_transit_stops(self, lat: float, lon: float, *, radius: int = 1000) -> List[Dict[str, Any]]:
        ql = f"""
[out:json][timeout:30];
(
  node["public_transport"="station"](around:{radius},{lat},{lon});
  node["railway"="station"](around:{radius},{lat},{lon});
  node["amenity"="bus_station"](around:{radius},{lat},{lon});
);
out body 50;
"""
        stops = []
        for element in await self.query(ql):
            tags = _object(element, "tags")
            if not tags.get("name"):
                continue
            stops.append(
                {
                    "name": tags["name"],
                    "type": tags.get("railway") or tags.get("public_transport") or tags.get("amenity"),
                    "lat": element.get("lat"),
                    "lon": element.get("lon"),
                    "operator": tags.get("operator"),
                    "network": tags.get("network"),
                }
            )
        return stops

    async def search_neighborhoods(self, lat: float, lon: float, *, radius: int = 10000) -> List[Dict[str, Any]]:
        ql = f"""
[out:json][timeout:30];
(
  node["place"~"suburb|neighbourhood|quarter"](around:{radius},{lat},{lon});
);
out body 30;
"""
        neighborhoods = []
        for element in await self.query(ql):
            tags = _object(element, "tags")
            name = tags.get("name") or tags.get("name:en")
            if not name:
                continue
            neighborhoods.append(
                {
                    "name": name,
                    "type": tags.get("place"),
                    "lat": element.get("lat"),
                    "lon": element.get("lon"),
                    "wikipedia": tags.get("wikipedia"),
                    "wikidata": tags.get("wikidata"),
                }
            )
        return neighborhoods


def _parse_population(value: Any) -> int:
    if value is None:
        return 0
    digits = "".join(ch for ch in str(value).split(";")[0] if ch.isdigit())
    return int(digits) if digits else 0


def _object(element: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = element.get(key)
    return value if isinstance(value, dict) else {}
