"""Web search via the DuckDuckGo Instant Answer API.

Public API:
    - DuckDuckGo: Async client with ``web_search``
"""
from travel_guide.services.duckduckgo.client import DuckDuckGo

__all__ = ["DuckDuckGo"]
