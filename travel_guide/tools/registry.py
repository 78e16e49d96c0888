"""The fixed catalog of research tools.

Every entry pairs a LangChain ``StructuredTool`` (name, description and input
schema) with the user-facing step label and the upstream adapters it touches.
The orchestrator only ever calls :meth:`ToolRegistry.invoke`, which turns any
failure, including an unknown tool name or invalid arguments, into a failed
:class:`ToolResult`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Tuple, Type

from langchain_core.tools import StructuredTool
from pydantic import BaseModel

from travel_guide.core.schemas import ToolResult
from travel_guide.tools.research import ResearchToolkit
from travel_guide.tools.schemas import (
    AttractionsInput,
    BudgetInput,
    CityInfoInput,
    CountryInfoInput,
    CountryScopedInput,
    DestinationInput,
    ImageSearchInput,
    NeighborhoodsInput,
    TransportationInput,
    WeatherInput,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    label: str
    description: str
    args_schema: Type[BaseModel]
    adapters: Tuple[str, ...]
    tool: StructuredTool

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "label": self.label,
            "description": self.description,
            "adapters": list(self.adapters),
            "inputSchema": self.args_schema.model_json_schema(),
        }


class ToolRegistry:
    """Name-indexed, read-only collection of :class:`ToolSpec` entries."""

    def __init__(self, specs: List[ToolSpec]) -> None:
        self._specs: Dict[str, ToolSpec] = {spec.name: spec for spec in specs}

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def names(self) -> List[str]:
        return list(self._specs)

    def catalog(self) -> List[Dict[str, Any]]:
        return [spec.describe() for spec in self._specs.values()]

    async def invoke(self, name: str, args: Mapping[str, Any]) -> ToolResult:
        """Run a tool by name; never raises."""

        spec = self._specs.get(name)
        if spec is None:
            return ToolResult.failed(f"Unknown tool: {name}")
        try:
            result = await spec.tool.ainvoke(dict(args))
        except Exception as exc:
            logger.warning("Tool %s raised %s: %s", name, type(exc).__name__, exc)
            return ToolResult.failed(f"{type(exc).__name__}: {exc}", source=spec.adapters[0] if spec.adapters else None)
        if not isinstance(result, ToolResult):
            return ToolResult.failed(f"Tool {name} returned {type(result).__name__} instead of a ToolResult")
        return result


def _bind(
    method: Callable[[Any], Awaitable[ToolResult]],
    schema: Type[BaseModel],
) -> Callable[..., Awaitable[ToolResult]]:
    # StructuredTool forwards only the keys the caller supplied; re-parse to apply defaults.
    async def _run(**kwargs: Any) -> ToolResult:
        return await method(schema(**kwargs))

    _run.__name__ = method.__name__
    return _run


_CATALOG: Tuple[Tuple[str, str, str, Type[BaseModel], Tuple[str, ...]], ...] = (
    (
        "search_destination",
        "Researching destination",
        "Geocode a destination and fetch its encyclopedia summary. Input: destination.",
        DestinationInput,
        ("nominatim", "wikipedia", "duckduckgo"),
    ),
    (
        "get_country_info",
        "Researching destination",
        "Country facts: capital, currency, languages, timezones, driving side. Input: country, optional country_code.",
        CountryInfoInput,
        ("restcountries",),
    ),
    (
        "get_city_info",
        "Analyzing cities",
        "Largest cities of the destination's country with short summaries. Input: destination, optional country_code, limit.",
        CityInfoInput,
        ("overpass", "wikipedia"),
    ),
    (
        "search_attractions",
        "Discovering attractions",
        "Points of interest around the destination. Input: destination, optional lat/lon, radius, category, limit.",
        AttractionsInput,
        ("opentripmap", "overpass", "nominatim"),
    ),
    (
        "get_neighborhoods",
        "Comparing neighborhoods",
        "Suburbs, quarters and neighbourhoods of a city. Input: city, optional lat/lon, limit.",
        NeighborhoodsInput,
        ("overpass", "nominatim"),
    ),
    (
        "get_budget_info",
        "Estimating costs",
        "Daily and weekly cost tiers with a category breakdown. Input: destination, optional country_code, currency, base_currency.",
        BudgetInput,
        ("frankfurter",),
    ),
    (
        "get_weather",
        "Estimating costs",
        "Seven-day forecast and last year's monthly climate. Input: destination, optional lat/lon.",
        WeatherInput,
        ("open_meteo", "nominatim"),
    ),
    (
        "get_transportation",
        "Mapping transportation",
        "Airports and public transport stations near the destination. Input: destination, optional lat/lon, driving_side.",
        TransportationInput,
        ("overpass", "nominatim"),
    ),
    (
        "get_safety_info",
        "Analyzing safety",
        "Safety rating, advisory, emergency numbers and health advice. Input: destination, optional country_code.",
        CountryScopedInput,
        ("travel_advisory", "fcdo"),
    ),
    (
        "get_culture_info",
        "Understanding culture",
        "Etiquette, dress code, tipping, greetings and taboos. Input: destination, optional country_code.",
        CountryScopedInput,
        ("wikipedia",),
    ),
    (
        "get_local_tips",
        "Gathering insights",
        "Common visitor mistakes, traveller types and web tips. Input: destination, optional country_code.",
        CountryScopedInput,
        ("duckduckgo",),
    ),
    (
        "search_images",
        "Finding visuals",
        "Destination photos from Wikimedia Commons, then Unsplash. Input: query, count.",
        ImageSearchInput,
        ("wikimedia_commons", "unsplash"),
    ),
)


def create_tool_registry(toolkit: ResearchToolkit) -> ToolRegistry:
    """Build the registry with one ``StructuredTool`` per toolkit coroutine."""

    specs = []
    for name, label, description, schema, adapters in _CATALOG:
        tool = StructuredTool.from_function(
            coroutine=_bind(getattr(toolkit, name), schema),
            name=name,
            description=description,
            args_schema=schema,
        )
        specs.append(
            ToolSpec(
                name=name,
                label=label,
                description=description,
                args_schema=schema,
                adapters=adapters,
                tool=tool,
            )
        )
    return ToolRegistry(specs)
