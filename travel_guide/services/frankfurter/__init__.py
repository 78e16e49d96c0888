"""Currency exchange rates from the Frankfurter API.

Public API:
    - Frankfurter: Async client with ``latest_rates`` and ``rate``
"""
from travel_guide.services.frankfurter.client import Frankfurter

__all__ = ["Frankfurter"]
