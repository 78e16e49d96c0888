"""Research tool implementations.

:class:`ResearchToolkit` owns one instance of every upstream adapter and
exposes one coroutine per research concern. Each coroutine takes its validated
input model and returns a :class:`ToolResult`; a tool that gathers nothing at
all reports ``success=False`` so the orchestrator leaves it out of the
collected data.
"""
from __future__ import annotations

import calendar
import logging
from statistics import mean
from typing import Any, Dict, List, Optional, Tuple

import httpx

from travel_guide.core.config import ApiSettings
from travel_guide.core.reference_data import CountryProfile, get_profile, resolve_country_code
from travel_guide.core.resolve import dig
from travel_guide.core.schemas import ToolResult
from travel_guide.services import (
    DuckDuckGo,
    ForeignTravelAdvice,
    Frankfurter,
    Nominatim,
    OpenMeteo,
    OpenTripMap,
    Overpass,
    ResponseCache,
    RestCountries,
    TravelAdvisory,
    Unsplash,
    WikimediaCommons,
    Wikipedia,
    create_http_client,
    summarize_place,
)
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

# WMO weather interpretation codes, grouped.
_WEATHER_CODES = (
    (0, 0, "clear sky"),
    (1, 3, "partly cloudy"),
    (45, 48, "fog"),
    (51, 57, "drizzle"),
    (61, 67, "rain"),
    (71, 77, "snow"),
    (80, 82, "rain showers"),
    (85, 86, "snow showers"),
    (95, 99, "thunderstorms"),
)

# Monthly mean temperatures considered comfortable for sightseeing (°C).
_COMFORT_RANGE = (15.0, 26.0)


def describe_weather_code(code: Any) -> Optional[str]:
    if not isinstance(code, (int, float)):
        return None
    for low, high, label in _WEATHER_CODES:
        if low <= code <= high:
            return label
    return None


def _compact(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is ``None`` or an empty container."""

    return {key: value for key, value in payload.items() if value not in (None, [], {}, "")}


def _coordinates(lat: Any, lon: Any) -> Optional[Dict[str, float]]:
    if isinstance(lat, (int, float)) and isinstance(lon, (int, float)):
        return {"lat": float(lat), "lng": float(lon)}
    return None


def _wikipedia_title(tag: Optional[str]) -> Optional[str]:
    """Extract the article title from an OSM ``wikipedia=en:Title`` tag."""

    if not tag:
        return None
    lang, _, title = tag.partition(":")
    if not title:
        return lang
    return title if lang == "en" else None


class ResearchToolkit:
    """One coroutine per research concern, backed by the public-API adapters."""

    def __init__(
        self,
        *,
        nominatim: Nominatim,
        wikipedia: Wikipedia,
        commons: WikimediaCommons,
        unsplash: Unsplash,
        countries: RestCountries,
        overpass: Overpass,
        opentripmap: OpenTripMap,
        meteo: OpenMeteo,
        rates: Frankfurter,
        advisory: TravelAdvisory,
        fcdo: ForeignTravelAdvice,
        search: DuckDuckGo,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.nominatim = nominatim
        self.wikipedia = wikipedia
        self.commons = commons
        self.unsplash = unsplash
        self.countries = countries
        self.overpass = overpass
        self.opentripmap = opentripmap
        self.meteo = meteo
        self.rates = rates
        self.advisory = advisory
        self.fcdo = fcdo
        self.search = search
        self._http_client = http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _locate(
        self, query: str, lat: Optional[float], lon: Optional[float]
    ) -> Tuple[Optional[float], Optional[float], Optional[Dict[str, Any]]]:
        """Use the given coordinates, or geocode ``query`` when they are missing."""

        if lat is not None and lon is not None:
            return lat, lon, None
        matches = await self.nominatim.geocode(query, limit=1)
        if not matches:
            return None, None, None
        place = summarize_place(matches[0])
        return place["lat"], place["lon"], place

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    async def search_destination(self, payload: DestinationInput) -> ToolResult:
        """Geocode the destination and attach its encyclopedia summary."""

        destination = payload.destination.strip()
        matches = await self.nominatim.geocode(destination, limit=5)
        location = summarize_place(matches[0]) if matches else None

        wiki = await self.wikipedia.summary(destination)
        if wiki is None:
            hits = await self.wikipedia.search(destination, limit=1)
            if hits:
                wiki = await self.wikipedia.summary(hits[0]["title"])

        web = await self.search.web_search(destination)
        abstract = (web or {}).get("abstract")

        if not location and not wiki and not abstract:
            return ToolResult.failed(f"No information found for '{destination}'", source="nominatim")

        data = _compact(
            {
                "location": location,
                "coordinates": _coordinates(location["lat"], location["lon"]) if location else None,
                "country": (location or {}).get("country"),
                "countryCode": (location or {}).get("countryCode"),
                "wikipedia": _compact(
                    {
                        "title": wiki.get("title"),
                        "summary": wiki.get("summary"),
                        "description": wiki.get("description"),
                        "thumbnail": wiki.get("thumbnail"),
                        "url": wiki.get("url"),
                    }
                )
                if wiki
                else None,
                "description": (wiki or {}).get("description") or abstract,
                "webAbstract": abstract,
            }
        )
        return ToolResult.ok(data, source="nominatim")

    async def get_country_info(self, payload: CountryInfoInput) -> ToolResult:
        info = None
        if payload.country_code:
            info = await self.countries.by_code(payload.country_code)
        if info is None:
            info = await self.countries.by_name(payload.country)
        if info is None:
            return ToolResult.failed(f"No country facts found for '{payload.country}'", source="restcountries")

        profile = get_profile(info.get("cca2"), info.get("name"))
        if profile and profile.visa_info:
            info["visaInfo"] = profile.visa_info
        return ToolResult.ok(info, source="restcountries")

    async def get_city_info(self, payload: CityInfoInput) -> ToolResult:
        """Largest cities of the destination's country, enriched with summaries."""

        code = payload.country_code or resolve_country_code(payload.destination)
        if not code:
            return ToolResult.failed(
                f"Could not resolve a country code for '{payload.destination}'", source="overpass"
            )

        cities = await self.overpass.search_cities(code)
        if not cities:
            return ToolResult.failed(f"No cities found for country {code}", source="overpass")

        enriched: List[Dict[str, Any]] = []
        for city in cities[: payload.limit]:
            title = _wikipedia_title(city.get("wikipedia")) or city["name"]
            wiki = await self.wikipedia.summary(title)
            enriched.append(
                _compact(
                    {
                        "name": city["name"],
                        "population": city["population"],
                        "coordinates": _coordinates(city.get("lat"), city.get("lon")),
                        "description": (wiki or {}).get("summary"),
                        "wikipedia": _compact(
                            {
                                "summary": wiki.get("summary"),
                                "description": wiki.get("description"),
                                "url": wiki.get("url"),
                            }
                        )
                        if wiki
                        else None,
                        "imageUrl": (wiki or {}).get("thumbnail"),
                    }
                )
            )
        return ToolResult.ok({"countryCode": code, "cities": enriched}, source="overpass")

    async def search_attractions(self, payload: AttractionsInput) -> ToolResult:
        """Rated POIs from OpenTripMap, falling back to an Overpass tag query."""

        lat, lon, _ = await self._locate(payload.destination, payload.lat, payload.lon)
        if lat is None or lon is None:
            return ToolResult.failed(f"Could not locate '{payload.destination}'", source="nominatim")

        source = "opentripmap"
        places = await self.opentripmap.search_places(
            lat, lon, radius=payload.radius, category=payload.category, limit=payload.limit * 2
        )
        if not places:
            logger.info("No OpenTripMap results near %s, falling back to Overpass", payload.destination)
            source = "overpass"
            places = await self.overpass.search_places(
                lat, lon, radius=payload.radius, category=payload.category
            )
        if not places:
            return ToolResult.failed(f"No attractions found near '{payload.destination}'", source=source)

        attractions = [
            _compact(
                {
                    "name": place["name"],
                    "category": place.get("type"),
                    "description": place.get("description"),
                    "coordinates": _coordinates(place.get("lat"), place.get("lon")),
                    "city": payload.destination,
                    "website": place.get("website"),
                    "openingHours": place.get("openingHours"),
                }
            )
            for place in places[: payload.limit]
        ]
        return ToolResult.ok({"attractions": attractions, "source": source}, source=source)

    async def get_neighborhoods(self, payload: NeighborhoodsInput) -> ToolResult:
        lat, lon, _ = await self._locate(payload.city, payload.lat, payload.lon)
        if lat is None or lon is None:
            return ToolResult.failed(f"Could not locate '{payload.city}'", source="nominatim")

        address = dig(await self.nominatim.reverse_geocode(lat, lon), "address")
        if not isinstance(address, dict):
            address = {}
        city_name = address.get("city") or address.get("town") or address.get("village") or payload.city

        found = await self.overpass.search_neighborhoods(lat, lon)
        if not found:
            return ToolResult.failed(f"No neighbourhoods found in '{payload.city}'", source="overpass")

        neighborhoods = [
            _compact(
                {
                    "name": item["name"],
                    "city": city_name,
                    "placeType": item.get("type"),
                    "coordinates": _coordinates(item.get("lat"), item.get("lon")),
                    "wikipedia": item.get("wikipedia"),
                }
            )
            for item in found[: payload.limit]
        ]
        return ToolResult.ok({"city": city_name, "neighborhoods": neighborhoods}, source="overpass")

    async def get_budget_info(self, payload: BudgetInput) -> ToolResult:
        """Curated daily cost tiers, converted to the local currency when a rate is known."""

        profile = get_profile(payload.country_code, payload.destination)
        base = payload.base_currency
        rate = await self.rates.rate(payload.currency, base=base) if payload.currency else None
        if profile is None and rate is None:
            return ToolResult.failed(f"No cost data for '{payload.destination}'", source="frankfurter")

        currency = payload.currency if rate is not None else base
        data: Dict[str, Any] = {"currency": currency, "baseCurrency": base, "exchangeRate": rate}
        if profile is not None:
            costs = profile.costs
            factor = rate if rate is not None else 1.0

            def tier(bounds: Tuple[int, int], days: int = 1) -> Dict[str, float]:
                return {"min": round(bounds[0] * days * factor), "max": round(bounds[1] * days * factor)}

            def labels(values: Tuple[str, str, str]) -> Dict[str, str]:
                return {"budget": values[0], "midRange": values[1], "luxury": values[2]}

            data.update(
                {
                    "daily": {
                        "budget": tier(costs.budget),
                        "midRange": tier(costs.mid_range),
                        "luxury": tier(costs.luxury),
                    },
                    "weekly": {
                        "budget": tier(costs.budget, 7),
                        "midRange": tier(costs.mid_range, 7),
                        "luxury": tier(costs.luxury, 7),
                    },
                    "breakdown": {
                        "accommodation": labels(costs.accommodation),
                        "food": labels(costs.food),
                        "transport": labels(costs.transport),
                        "activities": labels(costs.activities),
                    },
                    "tips": list(costs.tips),
                    "tippingCustoms": profile.tipping,
                }
            )
        return ToolResult.ok(_compact(data), source="reference" if rate is None else "frankfurter")

    async def get_weather(self, payload: WeatherInput) -> ToolResult:
        lat, lon, _ = await self._locate(payload.destination, payload.lat, payload.lon)
        if lat is None or lon is None:
            return ToolResult.failed(f"Could not locate '{payload.destination}'", source="nominatim")

        forecast = await self.meteo.forecast(lat, lon)
        climate = await self.meteo.climate(lat, lon)
        if forecast is None and climate is None:
            return ToolResult.failed("No weather data available", source="open_meteo")

        data: Dict[str, Any] = {}
        if forecast is not None:
            days = summarize_forecast(forecast)
            data["forecast"] = days
            data["description"] = describe_forecast(days)
        if climate is not None:
            monthly = monthly_climate(climate)
            data["monthly"] = monthly
            data["climate"] = describe_climate(monthly)
            data["bestTimeToVisit"] = best_months(monthly)
        return ToolResult.ok(_compact(data), source="open_meteo")

    async def get_transportation(self, payload: TransportationInput) -> ToolResult:
        lat, lon, _ = await self._locate(payload.destination, payload.lat, payload.lon)
        if lat is None or lon is None:
            return ToolResult.failed(f"Could not locate '{payload.destination}'", source="nominatim")

        airports = await self.overpass.search_airports(lat, lon)
        stops = await self.overpass.search_transit_stops(lat, lon)
        if not airports and not stops:
            return ToolResult.failed(f"No transport data near '{payload.destination}'", source="overpass")

        # International airports first.
        airports.sort(key=lambda airport: not airport.get("international"))
        data: Dict[str, Any] = {
            "airports": [
                _compact(
                    {
                        "name": f"{airport['name']} ({airport['iata']})" if airport.get("name") else airport["iata"],
                        "iata": airport["iata"],
                        "international": airport.get("international"),
                        "coordinates": _coordinates(airport.get("lat"), airport.get("lon")),
                    }
                )
                for airport in airports
            ],
            "transitStops": [{"name": stop["name"], "type": stop.get("type")} for stop in stops],
        }
        if stops:
            names = ", ".join(stop["name"] for stop in stops[:3])
            data["publicTransit"] = {
                "description": f"{len(stops)} stations and bus terminals near the centre, including {names}"
            }
        if payload.driving_side:
            data["rentals"] = (
                f"Traffic drives on the {payload.driving_side}. "
                "An international driving permit is usually required."
            )

        options = []
        stop_types = {stop.get("type") for stop in stops}
        if "station" in stop_types:
            options.append("Trains")
        if "bus_station" in stop_types:
            options.append("Long-distance buses")
        if len(airports) > 1:
            options.append("Domestic flights")
        if options:
            data["intercityOptions"] = options
        return ToolResult.ok(data, source="overpass")

    async def get_safety_info(self, payload: CountryScopedInput) -> ToolResult:
        """Curated safety profile plus the live advisory score (FCDO text as fallback)."""

        code = payload.country_code or resolve_country_code(payload.destination)
        profile = get_profile(code, payload.destination)
        score = await self.advisory.advisory(code) if code else None
        advice = None
        if score is None:
            advice = await self.fcdo.travel_advice(profile.name if profile else payload.destination)

        if profile is None and score is None and advice is None:
            return ToolResult.failed(f"No safety data for '{payload.destination}'", source="travel_advisory")

        data: Dict[str, Any] = {
            "advisoryScore": (score or {}).get("score"),
            "advisorySummary": (score or {}).get("message") or (advice or {}).get("description"),
            "advisoryUrl": (advice or {}).get("url"),
        }
        if profile is not None:
            data.update(_safety_from_profile(profile))
        return ToolResult.ok(_compact(data), source="travel_advisory" if score else "reference")

    async def get_culture_info(self, payload: CountryScopedInput) -> ToolResult:
        profile = get_profile(payload.country_code, payload.destination)
        subject = profile.name if profile else payload.destination
        wiki = await self.wikipedia.summary(f"Culture of {subject}")
        summary = (wiki or {}).get("summary")
        if summary is None:
            # No dedicated culture article; fall back to the subject's intro.
            page = await self.wikipedia.content(subject)
            summary = (page or {}).get("extract") or None
        if profile is None and summary is None:
            return ToolResult.failed(f"No culture data for '{payload.destination}'", source="wikipedia")

        data: Dict[str, Any] = {"summary": summary}
        if profile is not None:
            data.update(
                {
                    "etiquette": list(profile.etiquette),
                    "dress": profile.dress,
                    "tipping": profile.tipping,
                    "greetings": profile.greetings,
                    "taboos": list(profile.taboos),
                    "customs": list(profile.customs),
                }
            )
        return ToolResult.ok(_compact(data), source="wikipedia" if summary else "reference")

    async def get_local_tips(self, payload: CountryScopedInput) -> ToolResult:
        profile = get_profile(payload.country_code, payload.destination)
        web = await self.search.web_search(f"{payload.destination} travel tips")
        tips = [topic["text"] for topic in (web or {}).get("relatedTopics") or []]

        data: Dict[str, Any] = {"tips": tips}
        if profile is not None:
            data["commonMistakes"] = [
                {"mistake": mistake, "why": why, "instead": instead}
                for mistake, why, instead in profile.common_mistakes
            ]
            data["bestFor"] = [
                {"type": kind, "why": why, "highlights": list(highlights)}
                for kind, why, highlights in profile.best_for
            ]
        data = _compact(data)
        if not data:
            return ToolResult.failed(f"No local tips found for '{payload.destination}'", source="duckduckgo")
        return ToolResult.ok(data, source="reference" if profile else "duckduckgo")

    async def search_images(self, payload: ImageSearchInput) -> ToolResult:
        """Curated Commons images first, Unsplash when Commons has nothing."""

        source = "wikimedia_commons"
        images = await self.commons.search_images(payload.query, limit=payload.count)
        if not images:
            logger.info("No Commons images for %r, falling back to Unsplash", payload.query)
            source = "unsplash"
            images = await self.unsplash.search_images(payload.query, limit=payload.count)
        if not images:
            return ToolResult.failed(f"No images found for '{payload.query}'", source=source)

        return ToolResult.ok(
            {
                "images": [
                    _compact(
                        {
                            "url": image["url"],
                            "alt": image.get("alt"),
                            "credit": image.get("credit"),
                            "license": image.get("license"),
                        }
                    )
                    for image in images
                ],
                "source": source,
            },
            source=source,
        )


def _safety_from_profile(profile: CountryProfile) -> Dict[str, Any]:
    return {
        "overallRating": profile.safety_rating,
        "summary": profile.safety_summary,
        "concerns": list(profile.concerns),
        "tips": list(profile.safety_tips),
        "emergencyNumbers": {
            "police": profile.police,
            "ambulance": profile.ambulance,
            "tourist": profile.tourist,
        },
        "healthAdvice": list(profile.health_advice),
    }


def summarize_forecast(forecast: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Zip Open-Meteo's parallel daily arrays into one record per day."""

    daily = forecast.get("daily") or {}
    dates = daily.get("time") or []
    columns = {
        "maxTemp": daily.get("temperature_2m_max") or [],
        "minTemp": daily.get("temperature_2m_min") or [],
        "precipitation": daily.get("precipitation_sum") or [],
        "weatherCode": daily.get("weathercode") or [],
    }
    days = []
    for index, date in enumerate(dates):
        day: Dict[str, Any] = {"date": date}
        for key, values in columns.items():
            day[key] = values[index] if index < len(values) else None
        day["conditions"] = describe_weather_code(day["weatherCode"])
        days.append(day)
    return days


def describe_forecast(days: List[Dict[str, Any]]) -> Optional[str]:
    lows = [day["minTemp"] for day in days if isinstance(day.get("minTemp"), (int, float))]
    highs = [day["maxTemp"] for day in days if isinstance(day.get("maxTemp"), (int, float))]
    if not lows or not highs:
        return None
    conditions = [day["conditions"] for day in days if day.get("conditions")]
    text = f"Next {len(days)} days: {min(lows):.0f}-{max(highs):.0f}°C"
    if conditions:
        text += f", mostly {max(set(conditions), key=conditions.count)}"
    return text


def monthly_climate(climate: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Average last year's daily means into twelve monthly records."""

    daily = climate.get("daily") or {}
    dates = daily.get("time") or []
    temps = daily.get("temperature_2m_mean") or []
    rain = daily.get("precipitation_sum") or []

    buckets: Dict[int, Dict[str, List[float]]] = {}
    for index, date in enumerate(dates):
        try:
            month = int(str(date)[5:7])
        except ValueError:
            continue
        bucket = buckets.setdefault(month, {"temp": [], "rain": []})
        if index < len(temps) and isinstance(temps[index], (int, float)):
            bucket["temp"].append(temps[index])
        if index < len(rain) and isinstance(rain[index], (int, float)):
            bucket["rain"].append(rain[index])

    monthly = []
    for month in sorted(buckets):
        bucket = buckets[month]
        if not bucket["temp"]:
            continue
        monthly.append(
            {
                "month": calendar.month_abbr[month],
                "avgTemp": round(mean(bucket["temp"]), 1),
                "precipitation": round(sum(bucket["rain"]), 1),
            }
        )
    return monthly


def describe_climate(monthly: List[Dict[str, Any]]) -> Optional[str]:
    if not monthly:
        return None
    coldest = min(monthly, key=lambda item: item["avgTemp"])
    warmest = max(monthly, key=lambda item: item["avgTemp"])
    wettest = max(monthly, key=lambda item: item["precipitation"])
    return (
        f"Average temperatures range from {coldest['avgTemp']:.0f}°C in {coldest['month']} "
        f"to {warmest['avgTemp']:.0f}°C in {warmest['month']}; "
        f"{wettest['month']} is the wettest month"
    )


def best_months(monthly: List[Dict[str, Any]]) -> Optional[str]:
    """Up to three comfortable, driest months in calendar order."""

    if not monthly:
        return None
    low, high = _COMFORT_RANGE
    comfortable = [item for item in monthly if low <= item["avgTemp"] <= high]
    if not comfortable:
        comfortable = sorted(monthly, key=lambda item: abs(item["avgTemp"] - (low + high) / 2))[:3]
    driest = sorted(comfortable, key=lambda item: item["precipitation"])[:3]
    order = [item["month"] for item in monthly]
    return ", ".join(sorted((item["month"] for item in driest), key=order.index))


def create_research_toolkit(
    settings: ApiSettings,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> ResearchToolkit:
    """Wire every adapter onto one shared HTTPX client (and cache, if enabled)."""

    owns_client = client is None
    http_client = client or create_http_client(settings.user_agent)
    cache = ResponseCache() if settings.cache_enabled else None
    shared = {"client": http_client, "cache": cache}
    return ResearchToolkit(
        nominatim=Nominatim(**shared),
        wikipedia=Wikipedia(**shared),
        commons=WikimediaCommons(**shared),
        unsplash=Unsplash(settings.unsplash_access_key, **shared),
        countries=RestCountries(**shared),
        overpass=Overpass(**shared),
        opentripmap=OpenTripMap(settings.opentripmap_api_key, **shared),
        meteo=OpenMeteo(**shared),
        rates=Frankfurter(**shared),
        advisory=TravelAdvisory(**shared),
        fcdo=ForeignTravelAdvice(**shared),
        search=DuckDuckGo(**shared),
        http_client=http_client if owns_client else None,
    )
