"""Wikipedia and Wikimedia Commons lookups."""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from travel_guide.core.resolve import as_list, dig, mappings
from travel_guide.services.http import DAY, JsonApiClient

WIKIPEDIA_REST_URL = "https://{lang}.wikipedia.org/api/rest_v1/page/summary/{title}"
WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"
COMMONS_API_URL = "https://commons.wikimedia.org/w/api.php"

_TAG_PATTERN = re.compile(r"<[^>]*>")


def strip_html(value: Any) -> Optional[str]:
    """Remove markup from Commons metadata strings."""

    if not isinstance(value, str) or not value:
        return None
    text = _TAG_PATTERN.sub("", value).strip()
    return text or None


class Wikipedia(JsonApiClient):
    """Encyclopedia summaries, search and intro extracts."""

    source = "wikipedia"
    default_timeout_s = 10.0

    async def summary(self, title: str, *, lang: str = "en") -> Optional[Dict[str, Any]]:
        """Return the REST summary for a page title, or ``None`` if missing."""

        if not title:
            return None
        data = await self._get_json(
            WIKIPEDIA_REST_URL.format(lang=lang, title=quote(title.replace(" ", "_"), safe="")),
            default=None,
            cache_ttl_s=DAY,
        )
        if not isinstance(data, dict) or not data.get("extract"):
            return None
        if data.get("type") == "disambiguation":
            return None
        return {
            "title": data.get("title"),
            "summary": data.get("extract"),
            "description": data.get("description"),
            "thumbnail": dig(data, "thumbnail.source"),
            "originalImage": dig(data, "originalimage.source"),
            "coordinates": data.get("coordinates"),
            "url": dig(data, "content_urls.desktop.page"),
        }

    async def search(self, query: str, *, limit: int = 10) -> List[Dict[str, Any]]:
        """Return ``{title, description, url}`` entries from OpenSearch."""

        if not query:
            return []
        data = await self._get_json(
            WIKIPEDIA_API_URL,
            params={
                "action": "opensearch",
                "search": query,
                "limit": limit,
                "format": "json",
            },
            default=[],
            cache_ttl_s=DAY,
        )
        if not isinstance(data, list) or len(data) < 4:
            return []
        titles, descriptions, urls = (as_list(part) for part in data[1:4])
        results = []
        for index, title in enumerate(titles):
            if not isinstance(title, str):
                continue
            results.append(
                {
                    "title": title,
                    "description": descriptions[index] if index < len(descriptions) else None,
                    "url": urls[index] if index < len(urls) else None,
                }
            )
        return results

    async def content(self, title: str) -> Optional[Dict[str, Any]]:
        """Return the plain-text intro, coordinates and categories of a page."""

        if not title:
            return None
        data = await self._get_json(
            WIKIPEDIA_API_URL,
            params={
                "action": "query",
                "titles": title,
                "prop": "extracts|coordinates|categories",
                "exintro": 1,
                "explaintext": 1,
                "redirects": 1,
                "format": "json",
            },
            default={},
            cache_ttl_s=DAY,
        )
        pages = dig(data, "query.pages")
        page = next(iter(pages.values()), None) if isinstance(pages, dict) else None
        if not isinstance(page, dict) or "missing" in page:
            return None
        return {
            "title": page.get("title"),
            "extract": page.get("extract"),
            "coordinates": dig(page, "coordinates.0"),
            "categories": [
                cat["title"].replace("Category:", "")
                for cat in mappings(page.get("categories"))
                if isinstance(cat.get("title"), str)
            ],
        }


class WikimediaCommons(JsonApiClient):
    """Curated, freely licensed images linked from the encyclopedia."""

    source = "wikimedia_commons"
    default_timeout_s = 10.0

    async def search_images(self, query: str, *, limit: int = 10) -> List[Dict[str, Any]]:
        if not query:
            return []
        data = await self._get_json(
            COMMONS_API_URL,
            params={
                "action": "query",
                "generator": "search",
                "gsrsearch": query,
                "gsrnamespace": 6,
                "gsrlimit": max(limit, 10),
                "prop": "imageinfo",
                "iiprop": "url|extmetadata|size",
                "iiurlwidth": 800,
                "format": "json",
            },
            default={},
            cache_ttl_s=DAY,
        )
        pages = dig(data, "query.pages")
        if not isinstance(pages, dict):
            return []

        ordered = sorted(mappings(list(pages.values())), key=_page_index)
        images: List[Dict[str, Any]] = []
        for page in ordered:
            info = dig(page, "imageinfo.0")
            url = dig(info, "thumburl")
            if not isinstance(url, str) or not url:
                continue
            meta = info.get("extmetadata")
            images.append(
                {
                    "id": page.get("pageid"),
                    "url": url,
                    "fullUrl": info.get("url"),
                    "alt": strip_html(dig(meta, "ImageDescription.value")) or page.get("title"),
                    "credit": strip_html(dig(meta, "Artist.value")) or "Wikimedia Commons",
                    "license": dig(meta, "LicenseShortName.value") or "Unknown",
                }
            )
            if len(images) >= limit:
                break
        return images



def _page_index(page: Dict[str, Any]) -> float:
    index = page.get("index")
    return index if isinstance(index, (int, float)) else 0
