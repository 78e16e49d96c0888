"""Shared plumbing for the public-API adapters.

Every adapter talks to its upstream through :class:`JsonApiClient`, which adds
per-call timeouts, an optional TTL response cache and the "never raise" error
policy: transport errors, non-2xx responses and undecodable bodies are logged
and turned into the caller's neutral default.
"""
from __future__ import annotations

import copy
import json
import logging
import time
from typing import Any, Dict, Hashable, Mapping, Optional, Tuple

import httpx

from travel_guide.core.config import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

HOUR = 3600
DAY = 24 * HOUR
WEEK = 7 * DAY

RATE_LIMIT_STATUSES = {429, 503, 504}


class UpstreamError(Exception):
    """Raised internally when an upstream call cannot produce usable JSON."""

    def __init__(self, source: str, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.status_code = status_code


class ResponseCache:
    """Tiny in-memory TTL cache keyed by request identity.

    Stale or evicted entries only cost an extra upstream call; nothing relies
    on an entry being present.
    """

    def __init__(self, max_entries: int = 512) -> None:
        self.max_entries = max_entries
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: Hashable) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at < time.monotonic():
            self._entries.pop(key, None)
            return None
        return copy.deepcopy(value)

    def set(self, key: Hashable, value: Any, ttl_s: float) -> None:
        if ttl_s <= 0:
            return
        if len(self._entries) >= self.max_entries:
            oldest = min(self._entries, key=lambda k: self._entries[k][0])
            self._entries.pop(oldest, None)
        self._entries[key] = (time.monotonic() + ttl_s, copy.deepcopy(value))


def create_http_client(user_agent: str = DEFAULT_USER_AGENT) -> httpx.AsyncClient:
    """Build the process-wide HTTPX client shared by all adapters."""

    return httpx.AsyncClient(
        headers={"User-Agent": user_agent, "accept": "application/json"},
        follow_redirects=True,
        timeout=httpx.Timeout(15.0, connect=10.0),
    )


def _cache_key(method: str, url: str, params: Optional[Mapping[str, Any]], data: Optional[Mapping[str, Any]]) -> Hashable:
    def freeze(value: Optional[Mapping[str, Any]]) -> Tuple[Tuple[str, str], ...]:
        return tuple(sorted((str(k), str(v)) for k, v in (value or {}).items()))

    return (method.upper(), url, freeze(params), freeze(data))


class JsonApiClient:
    """Base class for thin async wrappers around one upstream JSON API."""

    source = "http"
    default_timeout_s = 10.0

    def __init__(
        self,
        *,
        client: Optional[httpx.AsyncClient] = None,
        cache: Optional[ResponseCache] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or create_http_client()
        self.cache = cache
        self.timeout_s = timeout_s if timeout_s is not None else self.default_timeout_s

    async def aclose(self) -> None:
        """Close the underlying HTTPX client if this adapter created it."""

        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "JsonApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        data: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout_s: Optional[float] = None,
        cache_ttl_s: float = 0,
    ) -> Any:
        """Execute a request and return the decoded JSON body.

        Raises:
            UpstreamError: on timeouts, transport errors, non-2xx status codes
                or bodies that are not valid JSON.
        """

        key = _cache_key(method, url, params, data)
        if self.cache is not None and cache_ttl_s:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for %s %s", method, url)
                return cached

        timeout = timeout_s if timeout_s is not None else self.timeout_s
        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                timeout=timeout,
            )
        except httpx.TimeoutException as exc:
            raise UpstreamError(self.source, f"request timed out after {timeout}s") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(self.source, f"transport error: {exc}") from exc

        if response.status_code in RATE_LIMIT_STATUSES:
            raise UpstreamError(
                self.source,
                f"rate limited or unavailable (HTTP {response.status_code})",
                status_code=response.status_code,
            )
        if response.is_error:
            raise UpstreamError(
                self.source,
                f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        text = response.text
        if not text or not text.strip():
            raise UpstreamError(self.source, "empty response body", status_code=response.status_code)
        try:
            payload = json.loads(text)
        except ValueError as exc:
            raise UpstreamError(self.source, "malformed JSON body", status_code=response.status_code) from exc

        if self.cache is not None and cache_ttl_s:
            self.cache.set(key, payload, cache_ttl_s)
        return payload

    async def _fetch_json(
        self,
        method: str,
        url: str,
        *,
        default: Any,
        **kwargs: Any,
    ) -> Any:
        """Like :meth:`_request_json` but returns ``default`` instead of raising."""

        try:
            return await self._request_json(method, url, **kwargs)
        except UpstreamError as exc:
            if exc.status_code == 404:
                logger.info("%s returned 404 for %s", self.source, url)
            else:
                logger.warning("%s request failed, returning empty result: %s", self.source, exc)
            return copy.deepcopy(default)

    async def _get_json(self, url: str, *, default: Any, **kwargs: Any) -> Any:
        return await self._fetch_json("GET", url, default=default, **kwargs)
