"""Travel safety advisories.

Two sources are wrapped here: the numeric risk score published by
travel-advisory.info (0 = safe, 5 = do not travel) and the UK Foreign,
Commonwealth & Development Office content API, used as a textual fallback
when no score is available.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Optional
from urllib.parse import quote

from travel_guide.core.resolve import dig
from travel_guide.services.http import DAY, JsonApiClient
from travel_guide.services.wikipedia import strip_html

TRAVEL_ADVISORY_URL = "https://www.travel-advisory.info/api"
FCDO_URL = "https://www.gov.uk/api/content/foreign-travel-advice/{slug}"

_WHITESPACE = re.compile(r"\s+")


class TravelAdvisory(JsonApiClient):
    source = "travel_advisory"
    default_timeout_s = 10.0

    async def advisory(self, country_code: str) -> Optional[Dict[str, Any]]:
        """Return ``{countryCode, name, score, message, updated, source}``."""

        if not country_code:
            return None
        code = country_code.strip().upper()
        data = await self._get_json(
            TRAVEL_ADVISORY_URL,
            params={"countrycode": code},
            default=None,
            cache_ttl_s=DAY,
        )
        entry = dig(data, f"data.{code}")
        if not isinstance(entry, dict):
            return None
        advisory = entry.get("advisory")
        if not isinstance(advisory, dict):
            return None
        score = advisory.get("score")
        if not isinstance(score, (int, float)):
            return None
        return {
            "countryCode": code,
            "name": entry.get("name"),
            "score": float(score),
            "message": advisory.get("message"),
            "updated": advisory.get("updated"),
            "source": advisory.get("source"),
        }


class ForeignTravelAdvice(JsonApiClient):
    """UK FCDO foreign travel advice pages."""

    source = "fcdo"
    default_timeout_s = 10.0

    async def travel_advice(self, country: str) -> Optional[Dict[str, Any]]:
        if not country:
            return None
        slug = _WHITESPACE.sub("-", country.strip().lower())
        data = await self._get_json(
            FCDO_URL.format(slug=quote(slug, safe="-")),
            default=None,
            cache_ttl_s=DAY,
        )
        if not isinstance(data, dict) or not data.get("title"):
            return None
        details = data.get("details")
        if not isinstance(details, dict):
            details = {}
        parts = [
            {"title": part.get("title"), "body": strip_html(part.get("body"))}
            for part in details.get("parts") or []
            if isinstance(part, dict)
        ]
        return {
            "title": data.get("title"),
            "description": data.get("description"),
            "alertStatus": details.get("alert_status") or [],
            "parts": parts,
            "url": f"https://www.gov.uk{data['base_path']}" if data.get("base_path") else None,
        }
