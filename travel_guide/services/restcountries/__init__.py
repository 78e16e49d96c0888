"""Country facts from the REST Countries API.

Public API:
    - RestCountries: Async client resolving names or ISO codes
    - normalize_country: Flatten a raw country record
"""
from travel_guide.services.restcountries.client import RestCountries, normalize_country

__all__ = [
    "RestCountries",
    "normalize_country",
]
