"""Pydantic data models for the travel guide research pipeline.

This module contains the models that cross component boundaries:

- ToolResult: the uniform envelope every research tool returns
- ResearchStep / ToolCallInfo: the user-visible progress model
- ResearchEvent: one line of the streamed research protocol
- TravelGuide and its sections: the fully populated output document

Guide models serialise with camelCase keys (``topCities``, ``mapData``) because
that is the contract the UI consumes; Python code uses snake_case attributes.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from travel_guide.core.types import (
    AttractionType,
    EventType,
    Lat,
    Lng,
    MapLocationType,
    NeighborhoodType,
    Progress,
    SafetyRating,
    StepStatus,
    ToolCallStatus,
)


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Tool envelope
# ---------------------------------------------------------------------------


class ToolResult(BaseModel):
    """Outcome of a single tool invocation.

    A failed result never carries data; callers branch on ``success`` only.
    """

    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    source: Optional[str] = None

    @model_validator(mode="after")
    def _failed_results_carry_no_data(self) -> "ToolResult":
        if not self.success and self.data is not None:
            raise ValueError("A failed ToolResult must not carry data")
        return self

    @classmethod
    def ok(cls, data: Any, *, source: Optional[str] = None) -> "ToolResult":
        return cls(success=True, data=data, source=source)

    @classmethod
    def failed(cls, error: str, *, source: Optional[str] = None) -> "ToolResult":
        return cls(success=False, error=error, source=source)


# ---------------------------------------------------------------------------
# Progress model
# ---------------------------------------------------------------------------


class ToolCallInfo(CamelModel):
    """A tool invocation as shown in the progress UI."""

    tool_name: str
    start_time: int = Field(description="Epoch milliseconds when the call started")
    end_time: Optional[int] = Field(default=None, description="Epoch milliseconds when the call ended")
    status: ToolCallStatus = "running"


class ResearchStep(CamelModel):
    """Coarse, user-visible phase of research."""

    id: str
    name: str
    description: str
    status: StepStatus = "pending"
    tool_calls: List[ToolCallInfo] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Travel guide
# ---------------------------------------------------------------------------


class Coordinates(CamelModel):
    lat: Lat = 0.0
    lng: Lng = 0.0


class PriceRange(CamelModel):
    min: float
    max: float
    currency: str


class MoneyRange(CamelModel):
    min: float
    max: float


class DestinationOverview(CamelModel):
    summary: str
    highlights: List[str]
    best_time_to_visit: str
    climate: str
    language: str
    currency: str
    time_zone: str
    visa_info: str


class CityRanking(CamelModel):
    rank: int
    name: str
    description: str
    why_visit: str
    ideal_duration: str
    highlights: List[str]
    image_url: Optional[str] = None


class Neighborhood(CamelModel):
    name: str
    city: str
    type: NeighborhoodType
    description: str
    price_range: PriceRange
    best_for: List[str]
    nearby_attractions: List[str]


class Attraction(CamelModel):
    name: str
    city: str
    type: AttractionType
    description: str
    why_visit: str
    estimated_time: str
    cost: str
    tips: List[str]
    image_url: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class TierRanges(CamelModel):
    budget: MoneyRange
    mid_range: MoneyRange
    luxury: MoneyRange


class TierLabels(CamelModel):
    budget: str
    mid_range: str
    luxury: str


class BudgetBreakdown(CamelModel):
    accommodation: TierLabels
    food: TierLabels
    transport: TierLabels
    activities: TierLabels


class BudgetEstimate(CamelModel):
    currency: str
    daily: TierRanges
    breakdown: BudgetBreakdown
    weekly_total: TierRanges
    tips: List[str]


class GettingThere(CamelModel):
    main_airports: List[str]
    alternative_options: List[str]


class GettingAround(CamelModel):
    public_transport: str
    taxis: str
    rentals: str
    walking: str
    tips: List[str]


class Intercity(CamelModel):
    options: List[str]
    recommendations: str


class TransportationGuide(CamelModel):
    getting_there: GettingThere
    getting_around: GettingAround
    intercity: Intercity


class EmergencyNumbers(CamelModel):
    police: str
    ambulance: str
    tourist: str


class SafetyInfo(CamelModel):
    overall_rating: SafetyRating
    summary: str
    concerns: List[str]
    tips: List[str]
    emergency_numbers: EmergencyNumbers
    health_advice: List[str]


class CultureGuide(CamelModel):
    summary: str
    etiquette: List[str]
    dress: str
    tipping: str
    greetings: str
    taboos: List[str]
    local_customs: List[str]


class CommonMistake(CamelModel):
    mistake: str
    why: str
    instead: str


class TravelerType(CamelModel):
    type: str
    why: str
    highlights: List[str]


class DestinationImage(CamelModel):
    url: str
    alt: str
    location: str
    credit: Optional[str] = None


class MapLocation(CamelModel):
    name: str
    type: MapLocationType
    coordinates: Coordinates
    description: Optional[str] = None


class TravelGuide(CamelModel):
    """Terminal output of a research run; every section is always present."""

    destination: str
    country: str
    theme: str
    overview: DestinationOverview
    top_cities: List[CityRanking]
    neighborhoods: List[Neighborhood]
    attractions: List[Attraction]
    budget: BudgetEstimate
    transportation: TransportationGuide
    safety: SafetyInfo
    culture: CultureGuide
    mistakes: List[CommonMistake]
    best_for: List[TravelerType]
    images: List[DestinationImage]
    map_data: List[MapLocation]


# ---------------------------------------------------------------------------
# Stream protocol
# ---------------------------------------------------------------------------


class ResearchEvent(BaseModel):
    """One line of the research stream: ``{"type": ..., "data": {...}}``."""

    type: EventType
    data: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def step(cls, step: ResearchStep, step_index: int) -> "ResearchEvent":
        return cls(type="step", data={"step": step.model_dump(by_alias=True), "stepIndex": step_index})

    @classmethod
    def tool_call(cls, call: ToolCallInfo) -> "ResearchEvent":
        return cls(type="tool_call", data={"toolCall": call.model_dump(by_alias=True, exclude_none=True)})

    @classmethod
    def progress(cls, value: Progress) -> "ResearchEvent":
        return cls(type="progress", data={"progress": value})

    @classmethod
    def complete(cls, guide: TravelGuide) -> "ResearchEvent":
        return cls(type="complete", data={"guide": guide.model_dump(mode="json", by_alias=True)})

    @classmethod
    def error(cls, message: str) -> "ResearchEvent":
        return cls(type="error", data={"error": message})

    def to_line(self) -> str:
        """Serialise as one newline-terminated JSON line."""

        return self.model_dump_json() + "\n"
