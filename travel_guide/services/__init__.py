"""External service integrations for destination research.

This package provides thin async clients for the free public APIs used to
research a destination:

- Nominatim: Forward and reverse geocoding
- Wikipedia / Wikimedia Commons: Summaries, extracts and curated images
- REST Countries: Capital, currency, languages and timezones
- Overpass / OpenTripMap: Cities, attractions, airports, transit and neighbourhoods
- Open-Meteo: Forecast and last year's climate
- Frankfurter: Exchange rates
- travel-advisory.info / UK FCDO: Safety advisories
- DuckDuckGo: Instant-answer web search
- Unsplash: Photo search (optional key)

Every client derives from :class:`JsonApiClient` and never raises on upstream
failure; callers receive an empty list, ``None`` or ``{}`` instead.

Example Usage:
    >>> from travel_guide.services import Nominatim, create_http_client
    >>>
    >>> async with Nominatim(client=create_http_client()) as geocoder:
    ...     matches = await geocoder.geocode("Kyoto")
"""

from travel_guide.services.http import (
    JsonApiClient,
    ResponseCache,
    UpstreamError,
    create_http_client,
)

# Geocoding
from travel_guide.services.nominatim import Nominatim, summarize_place

# Encyclopedia and imagery
from travel_guide.services.wikipedia import Wikipedia, WikimediaCommons, strip_html
from travel_guide.services.unsplash import Unsplash

# Country facts, money, weather
from travel_guide.services.restcountries import RestCountries, normalize_country
from travel_guide.services.frankfurter import Frankfurter
from travel_guide.services.open_meteo import OpenMeteo

# Places
from travel_guide.services.overpass import CATEGORY_FILTERS, Overpass, category_filter
from travel_guide.services.opentripmap import OpenTripMap

# Safety and web search
from travel_guide.services.advisory import ForeignTravelAdvice, TravelAdvisory
from travel_guide.services.duckduckgo import DuckDuckGo

__all__ = [
    # Plumbing
    "JsonApiClient",
    "ResponseCache",
    "UpstreamError",
    "create_http_client",
    # Geocoding
    "Nominatim",
    "summarize_place",
    # Encyclopedia and imagery
    "Wikipedia",
    "WikimediaCommons",
    "strip_html",
    "Unsplash",
    # Country facts, money, weather
    "RestCountries",
    "normalize_country",
    "Frankfurter",
    "OpenMeteo",
    # Places
    "CATEGORY_FILTERS",
    "Overpass",
    "category_filter",
    "OpenTripMap",
    # Safety and web search
    "ForeignTravelAdvice",
    "TravelAdvisory",
    "DuckDuckGo",
]
