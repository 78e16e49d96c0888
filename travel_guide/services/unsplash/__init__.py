"""Unsplash image search integration.

Public API:
    - Unsplash: Async client with ``search_images``
"""
from travel_guide.services.unsplash.client import Unsplash

__all__ = ["Unsplash"]
