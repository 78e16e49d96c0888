"""REST Countries lookups for capital, currency, languages and timezones."""
from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote

from travel_guide.core.resolve import as_list, dig, mappings
from travel_guide.services.http import WEEK, JsonApiClient

REST_COUNTRIES_URL = "https://restcountries.com/v3.1"
FIELDS = (
    "name,capital,region,subregion,population,area,languages,currencies,"
    "timezones,borders,flags,latlng,landlocked,cca2,cca3,idd,car"
)


class RestCountries(JsonApiClient):
    source = "restcountries"
    default_timeout_s = 10.0

    async def by_name(self, name: str) -> Optional[Dict[str, Any]]:
        """Resolve a (possibly partial) country name to its facts."""

        if not name:
            return None
        data = await self._get_json(
            f"{REST_COUNTRIES_URL}/name/{quote(name, safe='')}",
            params={"fields": FIELDS},
            default=None,
            cache_ttl_s=WEEK,
        )
        records = list(mappings(data)) if isinstance(data, list) else []
        if not records:
            return None
        lowered = name.strip().lower()
        exact = next(
            (item for item in records if str(dig(item, "name.common", "")).lower() == lowered),
            None,
        )
        return normalize_country(exact or records[0])

    async def by_code(self, code: str) -> Optional[Dict[str, Any]]:
        """Resolve an ISO 3166-1 alpha-2/alpha-3 code to its facts."""

        if not code:
            return None
        data = await self._get_json(
            f"{REST_COUNTRIES_URL}/alpha/{quote(code.strip().upper(), safe='')}",
            params={"fields": FIELDS},
            default=None,
            cache_ttl_s=WEEK,
        )
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict) or not data.get("name"):
            return None
        return normalize_country(data)


def normalize_country(country: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a REST Countries record into the country-info payload."""

    raw_currencies = country.get("currencies")
    currencies = [
        {"code": code, "name": dig(info, "name"), "symbol": dig(info, "symbol")}
        for code, info in (raw_currencies.items() if isinstance(raw_currencies, dict) else [])
    ]
    languages = country.get("languages")
    root = dig(country, "idd.root")
    suffixes = as_list(dig(country, "idd.suffixes"))
    suffix = suffixes[0] if len(suffixes) == 1 and isinstance(suffixes[0], str) else ""
    calling_codes = [root + suffix] if isinstance(root, str) else []
    timezones = as_list(country.get("timezones"))
    return {
        "name": dig(country, "name.common"),
        "officialName": dig(country, "name.official"),
        "capital": dig(country, "capital.0"),
        "region": country.get("region"),
        "subregion": country.get("subregion"),
        "population": country.get("population"),
        "area": country.get("area"),
        "languages": list(languages.values()) if isinstance(languages, dict) else [],
        "currency": currencies[0] if currencies else None,
        "currencies": currencies,
        "timezones": timezones,
        "timezone": timezones[0] if timezones else None,
        "borders": as_list(country.get("borders")),
        "flag": dig(country, "flags.svg") or dig(country, "flags.png"),
        "latlng": country.get("latlng"),
        "landlocked": country.get("landlocked"),
        "cca2": country.get("cca2"),
        "cca3": country.get("cca3"),
        "callingCodes": calling_codes,
        "drivingSide": dig(country, "car.side"),
    }
