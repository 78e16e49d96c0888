"""Fold the collected tool outputs into a complete :class:`TravelGuide`.

:func:`synthesize_guide` is a pure function of ``(destination, collected)``.
Every field is read as an ordered cascade: the precise payload path, then any
alternate path older payloads used, then a literal default. Lists are
truncated to fixed caps and never padded.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

from travel_guide.core.reference_data import theme_for_destination
from travel_guide.core.resolve import (
    as_list,
    as_number,
    as_text_list,
    dig,
    first_non_empty,
    first_text,
    first_number,
    mappings,
)
from travel_guide.core.schemas import (
    Attraction,
    BudgetBreakdown,
    BudgetEstimate,
    CityRanking,
    CommonMistake,
    Coordinates,
    CultureGuide,
    DestinationImage,
    DestinationOverview,
    EmergencyNumbers,
    GettingAround,
    GettingThere,
    Intercity,
    MapLocation,
    MoneyRange,
    Neighborhood,
    PriceRange,
    SafetyInfo,
    TierLabels,
    TierRanges,
    TransportationGuide,
    TravelerType,
    TravelGuide,
)
from travel_guide.core.types import SafetyRating

MAX_CITIES = 5
MAX_NEIGHBORHOODS = 5
MAX_ATTRACTIONS = 10
MAX_IMAGES = 12
MAX_MISTAKES = 5
MAX_BEST_FOR = 4

_RATINGS: Mapping[str, SafetyRating] = {
    "very-safe": "very-safe",
    "very safe": "very-safe",
    "low": "safe",
    "safe": "safe",
    "moderate": "moderate",
    "medium": "moderate",
    "caution": "caution",
    "high": "caution",
    "avoid": "avoid",
    "extreme": "avoid",
}

_ATTRACTION_TYPES = {"popular", "hidden-gem", "cultural", "nature", "food", "nightlife"}
_NEIGHBORHOOD_TYPES = {"budget", "mid-range", "luxury", "local"}

# Static USD placeholders used when no cost data was collected.
_DAILY_DEFAULTS = {"budget": (30, 50), "midRange": (80, 150), "luxury": (250, 500)}
_WEEKLY_DEFAULTS = {"budget": (210, 350), "midRange": (560, 1050), "luxury": (1750, 3500)}
_BREAKDOWN_DEFAULTS = {
    "accommodation": ("$15-30/night", "$50-100/night", "$150-300+/night"),
    "food": ("$10-20/day", "$30-50/day", "$80-150/day"),
    "transport": ("$5-15/day", "$20-40/day", "$50-100/day"),
    "activities": ("$5-20/day", "$30-60/day", "$100-200/day"),
}
_DEFAULT_MISTAKES = (
    "Not researching local customs",
    "Only visiting tourist areas",
    "Not trying local food",
)
_DEFAULT_BEST_FOR = (
    {"type": "Culture Enthusiasts", "why": "Rich history and traditions"},
    {"type": "Adventure Seekers", "why": "Diverse landscapes and activities"},
    {"type": "Food Lovers", "why": "Unique local cuisine"},
)


def normalize_rating(value: Any) -> SafetyRating:
    """Map free-text or numeric safety ratings onto the five-value scale.

    Numeric values are advisory scores from 0 (safe) to 5 (do not travel).
    Anything unrecognised is ``"moderate"``.
    """

    score = as_number(value)
    if score is not None:
        if score < 2.5:
            return "safe"
        if score < 3.5:
            return "moderate"
        if score < 4.5:
            return "caution"
        return "avoid"
    if isinstance(value, str):
        return _RATINGS.get(value.strip().lower(), "moderate")
    return "moderate"


def _coordinate(*candidates: Any, bound: float) -> float:
    for candidate in candidates:
        number = as_number(candidate)
        if number is not None and -bound <= number <= bound:
            return number
    return 0.0


def _coordinates_or(value: Any, fallback: Coordinates) -> Coordinates:
    lat = as_number(dig(value, "lat"))
    lng = as_number(first_non_empty(dig(value, "lng"), dig(value, "lon"), default=None))
    if lat is None or lng is None or not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return fallback
    return Coordinates(lat=lat, lng=lng)


def _tier_ranges(source: Any, defaults: Mapping[str, tuple]) -> TierRanges:
    def money(tier: str) -> MoneyRange:
        low, high = defaults[tier]
        return MoneyRange(
            min=first_number(dig(source, f"{tier}.min"), default=low),
            max=first_number(dig(source, f"{tier}.max"), default=high),
        )

    return TierRanges(budget=money("budget"), mid_range=money("midRange"), luxury=money("luxury"))


def _tier_labels(source: Any, defaults: tuple) -> TierLabels:
    return TierLabels(
        budget=first_text(dig(source, "budget"), default=defaults[0]),
        mid_range=first_text(dig(source, "midRange"), default=defaults[1]),
        luxury=first_text(dig(source, "luxury"), default=defaults[2]),
    )


def _build_budget(budget: Mapping[str, Any], currency: str) -> BudgetEstimate:
    breakdown = dig(budget, "breakdown", {})
    return BudgetEstimate(
        currency=currency,
        daily=_tier_ranges(dig(budget, "daily"), _DAILY_DEFAULTS),
        breakdown=BudgetBreakdown(
            **{
                category: _tier_labels(dig(breakdown, category), defaults)
                for category, defaults in _BREAKDOWN_DEFAULTS.items()
            }
        ),
        weekly_total=_tier_ranges(dig(budget, "weekly"), _WEEKLY_DEFAULTS),
        tips=first_non_empty(
            as_text_list(dig(budget, "tips")),
            default=[
                "Research seasonal prices",
                "Book accommodation in advance",
                "Try local street food for savings",
            ],
        ),
    )


def _build_transportation(transport: Mapping[str, Any]) -> TransportationGuide:
    airports = list(mappings(dig(transport, "airports")))
    return TransportationGuide(
        getting_there=GettingThere(
            main_airports=[
                first_text(airport.get("name"), default="International Airport") for airport in airports[:3]
            ],
            alternative_options=first_non_empty(
                as_text_list(dig(transport, "alternativeOptions")),
                default=["Consider nearby airports", "Train connections available"],
            ),
        ),
        getting_around=GettingAround(
            public_transport=first_text(
                dig(transport, "publicTransit.description"),
                default="Public transportation available in major cities",
            ),
            taxis=first_text(dig(transport, "taxis"), default="Taxis and rideshares available"),
            rentals=first_text(dig(transport, "rentals"), default="Car rentals available at airports and cities"),
            walking=first_text(dig(transport, "walking"), default="City centers are often walkable"),
            tips=first_non_empty(
                as_text_list(dig(transport, "gettingAround")),
                default=["Negotiate taxi fares in advance", "Consider local transport apps"],
            ),
        ),
        intercity=Intercity(
            options=first_non_empty(
                as_text_list(dig(transport, "intercityOptions")),
                default=["Domestic flights", "Buses", "Trains"],
            ),
            recommendations=first_text(
                dig(transport, "intercityRecommendations"),
                default="Buses are affordable, flights save time for long distances",
            ),
        ),
    )


def _build_safety(safety: Mapping[str, Any], destination: str) -> SafetyInfo:
    # The curated rating wins over the live advisory score.
    rating = first_non_empty(dig(safety, "overallRating"), dig(safety, "advisoryScore"), default="moderate")
    return SafetyInfo(
        overall_rating=normalize_rating(rating),
        summary=first_text(
            dig(safety, "summary"),
            dig(safety, "advisorySummary"),
            default=f"Exercise normal precautions when visiting {destination}",
        ),
        concerns=first_non_empty(
            as_text_list(dig(safety, "concerns")),
            as_text_list(dig(safety, "areasToAvoid")),
            default=["Check local advisories before travel"],
        ),
        tips=first_non_empty(
            as_text_list(dig(safety, "tips")),
            as_text_list(dig(safety, "commonScams")),
            default=["Be aware of your surroundings", "Keep valuables secure"],
        ),
        emergency_numbers=EmergencyNumbers(
            police=first_text(dig(safety, "emergencyNumbers.police"), default="911 or local equivalent"),
            ambulance=first_text(dig(safety, "emergencyNumbers.ambulance"), default="911 or local equivalent"),
            tourist=first_text(dig(safety, "emergencyNumbers.tourist"), default="Contact your embassy"),
        ),
        health_advice=first_non_empty(
            as_text_list(dig(safety, "healthAdvice")),
            as_text_list(dig(safety, "healthTips")),
            default=["Consult a travel clinic before departure"],
        ),
    )


def _build_culture(culture: Mapping[str, Any], budget: Mapping[str, Any], destination: str) -> CultureGuide:
    return CultureGuide(
        summary=first_text(
            dig(culture, "summary"),
            default=f"{destination} has a rich cultural heritage with unique customs and traditions",
        ),
        etiquette=first_non_empty(
            as_text_list(dig(culture, "etiquette")),
            default=["Respect local customs", "Learn basic local phrases"],
        ),
        dress=first_text(
            dig(culture, "dresscode"),
            dig(culture, "dress"),
            default="Dress modestly, especially at religious sites",
        ),
        tipping=first_text(
            dig(culture, "tipping"),
            dig(budget, "tippingCustoms"),
            default="Tipping customs vary - check locally",
        ),
        greetings=first_text(
            dig(culture, "greetings"),
            default="Greet people respectfully, handshakes are common",
        ),
        taboos=first_non_empty(as_text_list(dig(culture, "taboos")), default=["Research local sensitivities"]),
        local_customs=first_non_empty(
            as_text_list(dig(culture, "localCustoms")),
            as_text_list(dig(culture, "customs")),
            default=["Customs vary by region"],
        ),
    )


def _build_mistakes(tips: Mapping[str, Any]) -> List[CommonMistake]:
    raw = first_non_empty(as_list(dig(tips, "commonMistakes")), default=list(_DEFAULT_MISTAKES))
    mistakes = []
    for index, item in enumerate(raw[:MAX_MISTAKES]):
        if isinstance(item, Mapping):
            mistakes.append(
                CommonMistake(
                    mistake=first_text(item.get("mistake"), default=f"Mistake {index + 1}"),
                    why=first_text(item.get("why"), default="Can detract from your experience"),
                    instead=first_text(item.get("instead"), default="Research and plan accordingly"),
                )
            )
        else:
            mistakes.append(
                CommonMistake(
                    mistake=first_text(str(item), default=f"Mistake {index + 1}"),
                    why="Can detract from your experience",
                    instead="Research and plan accordingly",
                )
            )
    return mistakes


def _build_best_for(tips: Mapping[str, Any]) -> List[TravelerType]:
    raw = first_non_empty(as_list(dig(tips, "bestFor")), default=list(_DEFAULT_BEST_FOR))
    traveler_types = []
    for item in raw[:MAX_BEST_FOR]:
        if isinstance(item, Mapping):
            kind = first_text(item.get("type"), default="Travelers")
            traveler_types.append(
                TravelerType(
                    type=kind,
                    why=first_text(item.get("why"), default=f"Great destination for {kind}"),
                    highlights=first_non_empty(as_text_list(item.get("highlights")), default=["Local experiences"]),
                )
            )
        else:
            traveler_types.append(
                TravelerType(type=str(item), why=f"Great destination for {item}", highlights=["Local experiences"])
            )
    return traveler_types


def synthesize_guide(destination: str, collected: Mapping[str, Any]) -> TravelGuide:
    """Build a fully populated guide from whatever the tools collected."""

    destination = destination.strip()
    search: Dict[str, Any] = collected.get("search_destination") or {}
    country: Dict[str, Any] = collected.get("get_country_info") or {}
    city_data: Dict[str, Any] = collected.get("get_city_info") or {}
    attraction_data: Dict[str, Any] = collected.get("search_attractions") or {}
    neighborhood_data: Dict[str, Any] = collected.get("get_neighborhoods") or {}
    budget: Dict[str, Any] = collected.get("get_budget_info") or {}
    transport: Dict[str, Any] = collected.get("get_transportation") or {}
    safety: Dict[str, Any] = collected.get("get_safety_info") or {}
    culture: Dict[str, Any] = collected.get("get_culture_info") or {}
    weather: Dict[str, Any] = collected.get("get_weather") or {}
    image_data: Dict[str, Any] = collected.get("search_images") or {}
    tips: Dict[str, Any] = collected.get("get_local_tips") or {}

    centre = Coordinates(
        lat=_coordinate(
            dig(search, "coordinates.lat"), dig(city_data, "coordinates.lat"), dig(country, "latlng.0"), bound=90
        ),
        lng=_coordinate(
            dig(search, "coordinates.lng"), dig(city_data, "coordinates.lng"), dig(country, "latlng.1"), bound=180
        ),
    )
    # The country's own currency wins over whatever the budget tool reported.
    currency = first_text(dig(country, "currency.code"), dig(budget, "currency"), default="USD")
    raw_images = list(mappings(dig(image_data, "images")))

    def image_url(index: int) -> Optional[str]:
        return raw_images[index].get("url") if index < len(raw_images) else None

    top_cities = []
    for index, city in enumerate(list(mappings(dig(city_data, "cities")))[:MAX_CITIES]):
        highlights = first_non_empty(
            as_text_list(city.get("highlights")),
            as_text_list([item.get("name") for item in mappings(city.get("attractions"))])[:3],
            default=["Local culture"],
        )
        top_cities.append(
            CityRanking(
                rank=index + 1,
                name=first_text(city.get("name"), default=f"City {index + 1}"),
                description=first_text(
                    city.get("description"),
                    dig(city, "wikipedia.summary"),
                    default=f"A notable city in {destination}",
                ),
                why_visit=first_text(
                    city.get("whyVisit"),
                    ", ".join(as_text_list(city.get("highlights"))),
                    default="Rich culture and attractions",
                ),
                ideal_duration=first_text(city.get("idealDuration"), default="2-3 days"),
                highlights=highlights,
                image_url=first_text(city.get("imageUrl"), image_url(index), default=None),
            )
        )
    first_city = top_cities[0].name if top_cities else destination

    attractions = []
    for index, item in enumerate(list(mappings(dig(attraction_data, "attractions")))[:MAX_ATTRACTIONS]):
        category = item.get("category")
        if isinstance(category, str) and category in _ATTRACTION_TYPES:
            kind = category
        else:
            kind = "popular" if index < 5 else "cultural"
        attractions.append(
            Attraction(
                name=first_text(item.get("name"), default=f"Attraction {index + 1}"),
                city=first_text(item.get("city"), default=first_city),
                type=kind,
                description=first_text(
                    item.get("description"), default=f"A point of interest in {destination}"
                ),
                why_visit=first_text(item.get("whyVisit"), item.get("description"), default="Worth visiting"),
                estimated_time=first_text(item.get("estimatedTime"), default="1-2 hours"),
                cost=first_text(item.get("cost"), default="Varies"),
                tips=first_non_empty(as_text_list(item.get("tips")), default=["Check opening hours before visiting"]),
                image_url=first_text(item.get("image"), image_url(index + 1), default=None),
                coordinates=_coordinates_or(item.get("coordinates"), centre),
            )
        )
    attraction_names = [attraction.name for attraction in attractions]

    neighborhoods = []
    for item in list(mappings(dig(neighborhood_data, "neighborhoods")))[:MAX_NEIGHBORHOODS]:
        kind = item.get("type")
        neighborhoods.append(
            Neighborhood(
                name=first_text(item.get("name"), default="City Center"),
                city=first_text(item.get("city"), default=first_city),
                type=kind if isinstance(kind, str) and kind in _NEIGHBORHOOD_TYPES else "mid-range",
                description=first_text(item.get("description"), item.get("vibe"), default="A local neighborhood"),
                price_range=PriceRange(
                    min=first_number(dig(item, "priceRange.min"), default=50),
                    max=first_number(dig(item, "priceRange.max"), default=150),
                    currency=currency,
                ),
                best_for=first_non_empty(as_text_list(item.get("bestFor")), default=["Travelers"]),
                nearby_attractions=first_non_empty(
                    as_text_list(item.get("nearbyAttractions")),
                    as_text_list(item.get("highlights")),
                    default=[],
                ),
            )
        )

    if not top_cities:
        top_cities = [
            CityRanking(
                rank=1,
                name=destination,
                description=first_text(dig(search, "description"), default="The main destination area"),
                why_visit="Primary destination with key attractions",
                ideal_duration="3-5 days",
                highlights=attraction_names[:3],
            )
        ]
    if not neighborhoods:
        neighborhoods = [
            Neighborhood(
                name="City Center",
                city=destination,
                type="mid-range",
                description="Central and accessible area",
                price_range=PriceRange(min=50, max=150, currency=currency),
                best_for=["First-time visitors"],
                nearby_attractions=attraction_names[:3],
            )
        ]

    images = [
        DestinationImage(
            url=first_text(
                item.get("url"),
                item.get("src"),
                default=f"https://source.unsplash.com/800x600/?{quote(destination)}",
            ),
            alt=first_text(item.get("alt"), item.get("caption"), default=destination),
            location=first_text(item.get("location"), default=destination),
            credit=first_text(item.get("credit"), item.get("author"), default=None),
        )
        for item in raw_images[:MAX_IMAGES]
    ]

    map_data = [MapLocation(name=destination, type="city", coordinates=centre, description="Main destination")]
    map_data.extend(
        MapLocation(
            name=first_text(airport.get("name"), default="Airport"),
            type="airport",
            coordinates=_coordinates_or(airport.get("coordinates"), centre),
        )
        for airport in list(mappings(dig(transport, "airports")))[:2]
    )
    map_data.extend(
        MapLocation(
            name=attraction.name,
            type="attraction",
            coordinates=attraction.coordinates or centre,
            description=attraction.description,
        )
        for attraction in attractions[:5]
    )

    overview = DestinationOverview(
        summary=first_text(
            dig(search, "wikipedia.summary"),
            dig(country, "summary"),
            default=f"Welcome to {destination}. This guide was compiled using real-time data from multiple APIs.",
        ),
        highlights=attraction_names[:5],
        best_time_to_visit=first_text(
            dig(weather, "bestTimeToVisit"), dig(search, "bestTimeToVisit"), default="Spring and Fall"
        ),
        climate=first_text(
            dig(weather, "climate"), dig(weather, "description"), default="Check seasonal weather patterns"
        ),
        language=", ".join(
            first_non_empty(
                as_text_list(dig(country, "languages")),
                as_text_list(dig(culture, "languages")),
                default=["Local language"],
            )
        ),
        currency=currency,
        time_zone=first_text(dig(country, "timezone"), dig(country, "timezones.0"), default="Check local time"),
        visa_info=first_text(
            dig(country, "visaInfo"), default="Check visa requirements for your nationality"
        ),
    )

    return TravelGuide(
        destination=destination,
        country=first_text(dig(country, "name"), dig(search, "country"), default=destination),
        theme=theme_for_destination(destination),
        overview=overview,
        top_cities=top_cities,
        neighborhoods=neighborhoods,
        attractions=attractions,
        budget=_build_budget(budget, currency),
        transportation=_build_transportation(transport),
        safety=_build_safety(safety, destination),
        culture=_build_culture(culture, budget, destination),
        mistakes=_build_mistakes(tips),
        best_for=_build_best_for(tips),
        images=images,
        map_data=map_data,
    )
