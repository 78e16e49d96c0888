"""Tests for the research toolkit and the tool registry."""
from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from travel_guide.core.schemas import ToolResult
from travel_guide.tools.registry import create_tool_registry
from travel_guide.tools.research import ResearchToolkit, best_months, monthly_climate
from travel_guide.tools.schemas import (
    AttractionsInput,
    BudgetInput,
    CountryScopedInput,
    DestinationInput,
    ImageSearchInput,
    TransportationInput,
    WeatherInput,
)


def _adapters() -> dict:
    """Adapters that find nothing; tests override what they need."""

    return {
        "nominatim": SimpleNamespace(geocode=AsyncMock(return_value=[]), reverse_geocode=AsyncMock(return_value=None)),
        "wikipedia": SimpleNamespace(
            summary=AsyncMock(return_value=None),
            search=AsyncMock(return_value=[]),
            content=AsyncMock(return_value=None),
        ),
        "commons": SimpleNamespace(search_images=AsyncMock(return_value=[])),
        "unsplash": SimpleNamespace(search_images=AsyncMock(return_value=[])),
        "countries": SimpleNamespace(by_name=AsyncMock(return_value=None), by_code=AsyncMock(return_value=None)),
        "overpass": SimpleNamespace(
            search_places=AsyncMock(return_value=[]),
            search_cities=AsyncMock(return_value=[]),
            search_airports=AsyncMock(return_value=[]),
            search_transit_stops=AsyncMock(return_value=[]),
            search_neighborhoods=AsyncMock(return_value=[]),
        ),
        "opentripmap": SimpleNamespace(search_places=AsyncMock(return_value=[])),
        "meteo": SimpleNamespace(forecast=AsyncMock(return_value=None), climate=AsyncMock(return_value=None)),
        "rates": SimpleNamespace(rate=AsyncMock(return_value=None)),
        "advisory": SimpleNamespace(advisory=AsyncMock(return_value=None)),
        "fcdo": SimpleNamespace(travel_advice=AsyncMock(return_value=None)),
        "search": SimpleNamespace(web_search=AsyncMock(return_value=None)),
    }


def _toolkit(**overrides: Any) -> ResearchToolkit:
    adapters = _adapters()
    adapters.update(overrides)
    return ResearchToolkit(**adapters)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def test_registry_exposes_every_research_tool():
    registry = create_tool_registry(_toolkit())

    assert len(registry) == 12
    assert "search_destination" in registry
    assert registry.names()[-1] == "search_images"
    entry = next(item for item in registry.catalog() if item["name"] == "get_budget_info")
    assert entry["label"] == "Estimating costs"
    assert entry["adapters"] == ["frankfurter"]
    assert "base_currency" in entry["inputSchema"]["properties"]


async def test_invoke_unknown_tool_fails_without_raising():
    registry = create_tool_registry(_toolkit())

    result = await registry.invoke("book_flight", {})

    assert result == ToolResult.failed("Unknown tool: book_flight")


async def test_invoke_with_invalid_arguments_fails():
    registry = create_tool_registry(_toolkit())

    result = await registry.invoke("search_images", {"query": ""})

    assert not result.success
    assert result.data is None
    assert result.source == "wikimedia_commons"


async def test_invoke_turns_adapter_exceptions_into_failures():
    commons = SimpleNamespace(search_images=AsyncMock(side_effect=RuntimeError("boom")))
    registry = create_tool_registry(_toolkit(commons=commons))

    result = await registry.invoke("search_images", {"query": "Kyoto travel"})

    assert not result.success
    assert "boom" in result.error


async def test_invoke_applies_schema_defaults():
    cities = [{"name": f"City {i}", "population": 1000 - i, "lat": 1.0, "lon": 2.0} for i in range(8)]
    overpass = _adapters()["overpass"]
    overpass.search_cities = AsyncMock(return_value=cities)
    registry = create_tool_registry(_toolkit(overpass=overpass))

    result = await registry.invoke("get_city_info", {"destination": "Japan"})

    assert result.success
    assert result.data["countryCode"] == "JP"
    assert len(result.data["cities"]) == 5
    assert result.data["cities"][0]["coordinates"] == {"lat": 1.0, "lng": 2.0}
    overpass.search_cities.assert_awaited_once_with("JP")


# ---------------------------------------------------------------------------
# Toolkit
# ---------------------------------------------------------------------------


async def test_search_destination_fails_when_nothing_is_found():
    result = await _toolkit().search_destination(DestinationInput(destination="Nowhereland123"))

    assert not result.success
    assert "Nowhereland123" in result.error


async def test_search_destination_combines_geocoding_and_summary():
    nominatim = SimpleNamespace(
        geocode=AsyncMock(
            return_value=[
                {
                    "name": "Japan",
                    "lat": "36.2",
                    "lon": "138.25",
                    "address": {"country": "Japan", "country_code": "jp"},
                }
            ]
        )
    )
    wikipedia = SimpleNamespace(
        summary=AsyncMock(return_value={"title": "Japan", "summary": "Japan is an island country.", "description": "Country in East Asia"}),
        search=AsyncMock(return_value=[]),
    )

    result = await _toolkit(nominatim=nominatim, wikipedia=wikipedia).search_destination(
        DestinationInput(destination="Japan")
    )

    assert result.success
    assert result.data["coordinates"] == {"lat": 36.2, "lng": 138.25}
    assert result.data["countryCode"] == "JP"
    assert result.data["wikipedia"]["summary"] == "Japan is an island country."
    assert result.data["description"] == "Country in East Asia"
    assert "webAbstract" not in result.data


async def test_search_attractions_falls_back_to_overpass():
    overpass = _adapters()["overpass"]
    overpass.search_places = AsyncMock(
        return_value=[{"name": "Castelo de S. Jorge", "type": "attraction", "lat": 38.71, "lon": -9.13}]
    )
    toolkit = _toolkit(overpass=overpass)

    result = await toolkit.search_attractions(AttractionsInput(destination="Lisbon", lat=38.72, lon=-9.14))

    assert result.success
    assert result.source == "overpass"
    assert result.data["attractions"][0]["name"] == "Castelo de S. Jorge"
    assert result.data["attractions"][0]["city"] == "Lisbon"
    toolkit.nominatim.geocode.assert_not_awaited()
    toolkit.opentripmap.search_places.assert_awaited_once()


async def test_search_attractions_fails_when_destination_cannot_be_located():
    result = await _toolkit().search_attractions(AttractionsInput(destination="Nowhereland123"))

    assert not result.success
    assert result.source == "nominatim"


async def test_budget_converts_curated_tiers_to_local_currency():
    rates = SimpleNamespace(rate=AsyncMock(return_value=150.0))

    result = await _toolkit(rates=rates).get_budget_info(
        BudgetInput(destination="Japan", country_code="jp", currency="jpy")
    )

    assert result.success
    assert result.source == "frankfurter"
    assert result.data["currency"] == "JPY"
    assert result.data["daily"]["budget"] == {"min": 9000, "max": 13500}
    assert result.data["weekly"]["budget"]["max"] == 94500
    assert result.data["tippingCustoms"].startswith("Tipping is not customary")
    rates.rate.assert_awaited_once_with("JPY", base="USD")


async def test_budget_without_profile_or_rate_fails():
    result = await _toolkit().get_budget_info(BudgetInput(destination="Nowhereland123"))

    assert not result.success


async def test_safety_merges_profile_and_advisory_score():
    advisory = SimpleNamespace(advisory=AsyncMock(return_value={"score": 1.3, "message": "Low risk"}))
    toolkit = _toolkit(advisory=advisory)

    result = await toolkit.get_safety_info(CountryScopedInput(destination="Japan", country_code="JP"))

    assert result.data["overallRating"] == "very-safe"
    assert result.data["advisoryScore"] == 1.3
    assert result.data["emergencyNumbers"]["police"] == "110"
    toolkit.fcdo.travel_advice.assert_not_awaited()


async def test_safety_uses_fcdo_text_when_no_score():
    fcdo = SimpleNamespace(
        travel_advice=AsyncMock(return_value={"description": "Advice for Chile", "url": "https://www.gov.uk/chile"})
    )

    result = await _toolkit(fcdo=fcdo).get_safety_info(CountryScopedInput(destination="Chile"))

    assert result.success
    assert result.data == {"advisorySummary": "Advice for Chile", "advisoryUrl": "https://www.gov.uk/chile"}


async def test_weather_summarises_forecast():
    meteo = SimpleNamespace(
        forecast=AsyncMock(
            return_value={
                "daily": {
                    "time": ["2024-05-01", "2024-05-02"],
                    "temperature_2m_max": [20.0, 22.0],
                    "temperature_2m_min": [12.0, 14.0],
                    "precipitation_sum": [0.0, 1.5],
                    "weathercode": [0, 0],
                }
            }
        ),
        climate=AsyncMock(return_value=None),
    )

    result = await _toolkit(meteo=meteo).get_weather(WeatherInput(destination="Rome", lat=41.9, lon=12.5))

    assert result.data["description"] == "Next 2 days: 12-22°C, mostly clear sky"
    assert result.data["forecast"][1]["precipitation"] == 1.5
    assert "bestTimeToVisit" not in result.data


async def test_transportation_lists_international_airports_first():
    overpass = _adapters()["overpass"]
    overpass.search_airports = AsyncMock(
        return_value=[
            {"name": "Regional", "iata": "REG", "international": False, "lat": 1.0, "lon": 2.0},
            {"name": "Capital International", "iata": "CAP", "international": True, "lat": 3.0, "lon": 4.0},
        ]
    )
    overpass.search_transit_stops = AsyncMock(return_value=[{"name": "Central", "type": "station"}])

    result = await _toolkit(overpass=overpass).get_transportation(
        TransportationInput(destination="Lisbon", lat=38.7, lon=-9.1, driving_side="right")
    )

    assert result.data["airports"][0]["name"] == "Capital International (CAP)"
    assert result.data["intercityOptions"] == ["Trains", "Domestic flights"]
    assert "right" in result.data["rentals"]
    assert result.data["publicTransit"]["description"].startswith("1 stations")


async def test_images_fall_back_to_unsplash():
    unsplash = SimpleNamespace(
        search_images=AsyncMock(return_value=[{"url": "https://images.unsplash.com/x", "alt": "x", "credit": "Ana"}])
    )

    result = await _toolkit(unsplash=unsplash).search_images(ImageSearchInput(query="Porto travel"))

    assert result.source == "unsplash"
    assert result.data["images"] == [{"url": "https://images.unsplash.com/x", "alt": "x", "credit": "Ana"}]


async def test_local_tips_use_profile_and_web_topics():
    search = SimpleNamespace(
        web_search=AsyncMock(return_value={"relatedTopics": [{"text": "Buy a Suica card", "url": None}]})
    )

    result = await _toolkit(search=search).get_local_tips(CountryScopedInput(destination="Tokyo"))

    assert result.data["tips"] == ["Buy a Suica card"]
    assert result.data["commonMistakes"][0].keys() == {"mistake", "why", "instead"}
    search.web_search.assert_awaited_once_with("Tokyo travel tips")


def test_monthly_climate_and_best_months():
    climate = {
        "daily": {
            "time": ["2023-01-01", "2023-01-02", "2023-02-01"],
            "temperature_2m_mean": [2.0, 4.0, 6.0],
            "precipitation_sum": [1.0, 2.0, 3.0],
        }
    }
    assert monthly_climate(climate) == [
        {"month": "Jan", "avgTemp": 3.0, "precipitation": 3.0},
        {"month": "Feb", "avgTemp": 6.0, "precipitation": 3.0},
    ]

    monthly = [
        {"month": "Jan", "avgTemp": 5.0, "precipitation": 50.0},
        {"month": "Apr", "avgTemp": 18.0, "precipitation": 40.0},
        {"month": "May", "avgTemp": 21.0, "precipitation": 20.0},
        {"month": "Jul", "avgTemp": 30.0, "precipitation": 5.0},
        {"month": "Sep", "avgTemp": 24.0, "precipitation": 60.0},
        {"month": "Oct", "avgTemp": 17.0, "precipitation": 30.0},
    ]
    assert best_months(monthly) == "Apr, May, Oct"
    assert best_months([]) is None


@pytest.mark.parametrize("destination", ["Portugal", "Lisbon"])
async def test_culture_falls_back_to_curated_profile(destination):
    result = await _toolkit().get_culture_info(CountryScopedInput(destination=destination))

    assert result.success
    assert result.source == "reference"
    assert result.data["etiquette"]
    assert "summary" not in result.data


async def test_culture_uses_page_intro_when_no_culture_article():
    wikipedia = _adapters()["wikipedia"]
    wikipedia.content = AsyncMock(return_value={"title": "Chile", "extract": "Chile is a country in South America."})

    result = await _toolkit(wikipedia=wikipedia).get_culture_info(CountryScopedInput(destination="Chile"))

    assert result.source == "wikipedia"
    assert result.data == {"summary": "Chile is a country in South America."}
    wikipedia.summary.assert_awaited_once_with("Culture of Chile")
    wikipedia.content.assert_awaited_once_with("Chile")
