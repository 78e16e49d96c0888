"""Unsplash photo search (second image tier, needs an access key)."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from travel_guide.core.resolve import dig, mappings
from travel_guide.services.http import HOUR, JsonApiClient

logger = logging.getLogger(__name__)

UNSPLASH_URL = "https://api.unsplash.com/search/photos"


class Unsplash(JsonApiClient):
    source = "unsplash"
    default_timeout_s = 10.0

    def __init__(self, access_key: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.access_key = access_key

    @property
    def available(self) -> bool:
        return bool(self.access_key)

    async def search_images(self, query: str, *, limit: int = 10) -> List[Dict[str, Any]]:
        if not query or not self.available:
            if query:
                logger.debug("Unsplash access key not configured, skipping image search")
            return []
        data = await self._get_json(
            UNSPLASH_URL,
            params={
                "query": f"{query} travel",
                "per_page": limit,
                "orientation": "landscape",
            },
            headers={"Authorization": f"Client-ID {self.access_key}"},
            default={},
            cache_ttl_s=HOUR,
        )
        images = []
        for item in mappings(dig(data, "results")):
            url = dig(item, "urls.regular")
            if not isinstance(url, str) or not url:
                continue
            images.append(
                {
                    "id": item.get("id"),
                    "url": url,
                    "thumb": dig(item, "urls.thumb"),
                    "alt": item.get("alt_description") or item.get("description") or query,
                    "credit": dig(item, "user.name") or "Unsplash",
                    "creditUrl": dig(item, "user.links.html"),
                }
            )
        return images[:limit]
