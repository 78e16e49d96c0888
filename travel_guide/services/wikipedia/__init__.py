"""Wikipedia encyclopedia and Wikimedia Commons integration.

Public API:
    - Wikipedia: Async client for page summaries, OpenSearch and intro extracts
    - WikimediaCommons: Async client for encyclopedia-linked image search
    - strip_html: Utility to clean Commons metadata strings
"""
from travel_guide.services.wikipedia.client import Wikipedia, WikimediaCommons, strip_html

__all__ = [
    "Wikipedia",
    "WikimediaCommons",
    "strip_html",
]
