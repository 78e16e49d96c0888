"""DuckDuckGo Instant Answer lookups.

The endpoint frequently answers with an empty body or an empty abstract; both
are treated as "nothing found".
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from travel_guide.services.http import HOUR, JsonApiClient

DUCKDUCKGO_URL = "https://api.duckduckgo.com/"


class DuckDuckGo(JsonApiClient):
    source = "duckduckgo"
    default_timeout_s = 5.0

    async def web_search(self, query: str, *, max_topics: int = 5) -> Optional[Dict[str, Any]]:
        if not query:
            return None
        data = await self._get_json(
            DUCKDUCKGO_URL,
            params={"q": query, "format": "json", "no_html": 1, "skip_disambig": 1},
            default=None,
            cache_ttl_s=HOUR,
        )
        if not isinstance(data, dict):
            return None

        topics = []
        for topic in data.get("RelatedTopics") or []:
            # Grouped topics carry a nested "Topics" list and no text of their own.
            if not isinstance(topic, dict) or not topic.get("Text"):
                continue
            topics.append({"text": topic["Text"], "url": topic.get("FirstURL")})
            if len(topics) >= max_topics:
                break

        return {
            "abstract": data.get("Abstract") or None,
            "abstractSource": data.get("AbstractSource") or None,
            "abstractURL": data.get("AbstractURL") or None,
            "image": data.get("Image") or None,
            "heading": data.get("Heading") or None,
            "relatedTopics": topics,
            "type": data.get("Type") or None,
        }
