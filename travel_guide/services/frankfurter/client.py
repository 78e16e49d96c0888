"""Frankfurter exchange rates (ECB reference data)."""
from __future__ import annotations

from typing import Any, Dict, Optional

from travel_guide.services.http import HOUR, JsonApiClient

FRANKFURTER_URL = "https://api.frankfurter.app"


class Frankfurter(JsonApiClient):
    source = "frankfurter"
    default_timeout_s = 10.0

    async def latest_rates(self, base: str = "USD") -> Optional[Dict[str, Any]]:
        """Return ``{amount, base, date, rates}`` for ``base`` or ``None``."""

        data = await self._get_json(
            f"{FRANKFURTER_URL}/latest",
            params={"from": (base or "USD").upper()},
            default=None,
            cache_ttl_s=HOUR,
        )
        if not isinstance(data, dict) or not isinstance(data.get("rates"), dict):
            return None
        return data

    async def rate(self, target: str, *, base: str = "USD") -> Optional[float]:
        """Units of ``target`` per one ``base``; 1.0 for identical currencies."""

        if not target:
            return None
        target = target.upper()
        if target == (base or "USD").upper():
            return 1.0
        data = await self.latest_rates(base)
        value = (data or {}).get("rates", {}).get(target)
        return float(value) if isinstance(value, (int, float)) else None
