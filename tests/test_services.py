"""Tests for the public-API adapters."""
from __future__ import annotations

from typing import Any, Callable, List
from urllib.parse import parse_qs

import httpx
import pytest

from travel_guide.services import (
    DuckDuckGo,
    Frankfurter,
    Nominatim,
    OpenTripMap,
    Overpass,
    ResponseCache,
    RestCountries,
    Unsplash,
    WikimediaCommons,
    Wikipedia,
    category_filter,
    strip_html,
    summarize_place,
)


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _json_handler(payload: Any, calls: List[httpx.Request], status_code: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(status_code, json=payload)

    return handler


async def test_nominatim_geocode_and_summarize():
    calls: List[httpx.Request] = []
    payload = [
        {
            "name": "Tokyo",
            "display_name": "Tokyo, Japan",
            "lat": "35.6895",
            "lon": "139.6917",
            "address": {"country": "Japan", "country_code": "jp", "city": "Tokyo"},
            "addresstype": "city",
        }
    ]
    async with _client(_json_handler(payload, calls)) as client:
        matches = await Nominatim(client=client).geocode("Tokyo", limit=1)

    place = summarize_place(matches[0])
    assert place["lat"] == pytest.approx(35.6895)
    assert place["countryCode"] == "JP"
    assert place["city"] == "Tokyo"
    assert calls[0].url.params["q"] == "Tokyo"
    assert calls[0].url.params["limit"] == "1"


async def test_rate_limited_response_returns_default():
    calls: List[httpx.Request] = []
    async with _client(_json_handler({"error": "slow down"}, calls, status_code=429)) as client:
        matches = await Nominatim(client=client).geocode("Tokyo")

    assert matches == []
    assert len(calls) == 1


async def test_timeout_returns_default():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with _client(handler) as client:
        assert await Wikipedia(client=client).summary("Japan") is None


async def test_malformed_json_returns_default():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>not json</html>")

    async with _client(handler) as client:
        assert await RestCountries(client=client).by_name("Japan") is None


async def test_response_cache_avoids_repeat_requests():
    calls: List[httpx.Request] = []
    payload = {"amount": 1.0, "base": "USD", "date": "2024-01-01", "rates": {"JPY": 150.5, "EUR": 0.9}}
    cache = ResponseCache()
    async with _client(_json_handler(payload, calls)) as client:
        rates = Frankfurter(client=client, cache=cache)
        assert await rates.rate("jpy") == 150.5
        assert await rates.rate("EUR") == 0.9

    assert len(calls) == 1
    assert len(cache) == 1


async def test_rate_for_same_currency_needs_no_request():
    calls: List[httpx.Request] = []
    async with _client(_json_handler({}, calls)) as client:
        assert await Frankfurter(client=client).rate("usd", base="USD") == 1.0

    assert calls == []


def test_response_cache_expires_entries():
    cache = ResponseCache()
    cache.set("key", {"value": 1}, ttl_s=0)

    assert cache.get("key") is None


async def test_wikipedia_summary_skips_disambiguation_pages():
    calls: List[httpx.Request] = []
    payload = {"type": "disambiguation", "title": "Georgia", "extract": "Georgia may refer to:"}
    async with _client(_json_handler(payload, calls)) as client:
        assert await Wikipedia(client=client).summary("Georgia") is None


async def test_wikipedia_summary_flattens_payload():
    calls: List[httpx.Request] = []
    payload = {
        "type": "standard",
        "title": "Japan",
        "extract": "Japan is an island country in East Asia.",
        "description": "Country in East Asia",
        "thumbnail": {"source": "https://upload/thumb.jpg"},
        "content_urls": {"desktop": {"page": "https://en.wikipedia.org/wiki/Japan"}},
    }
    async with _client(_json_handler(payload, calls)) as client:
        summary = await Wikipedia(client=client).summary("Culture of Japan")

    assert summary["summary"].startswith("Japan is")
    assert summary["thumbnail"] == "https://upload/thumb.jpg"
    assert calls[0].url.path.endswith("/page/summary/Culture_of_Japan")


async def test_restcountries_prefers_exact_common_name():
    calls: List[httpx.Request] = []
    payload = [
        {"name": {"common": "British Indian Ocean Territory"}, "cca2": "IO"},
        {
            "name": {"common": "India", "official": "Republic of India"},
            "cca2": "IN",
            "currencies": {"INR": {"name": "Indian rupee", "symbol": "₹"}},
            "languages": {"eng": "English", "hin": "Hindi"},
            "capital": ["New Delhi"],
            "car": {"side": "left"},
        },
    ]
    async with _client(_json_handler(payload, calls)) as client:
        country = await RestCountries(client=client).by_name("india")

    assert country["cca2"] == "IN"
    assert country["currency"]["code"] == "INR"
    assert country["drivingSide"] == "left"
    assert "Hindi" in country["languages"]


def test_category_filter_defaults_to_tourism():
    assert category_filter("restaurants") == '["amenity"="restaurant"]'
    assert category_filter("  HOTELS ") == '["tourism"="hotel"]'
    assert category_filter("unknown") == '["tourism"]'
    assert category_filter(None) == '["tourism"]'


async def test_overpass_search_places_posts_query_and_keeps_named_elements():
    calls: List[httpx.Request] = []
    payload = {
        "elements": [
            {"id": 1, "lat": 41.9, "lon": 12.49, "tags": {"name": "Colosseum", "tourism": "attraction"}},
            {"id": 2, "center": {"lat": 41.89, "lon": 12.48}, "tags": {"name": "Forum", "historic": "ruins"}},
            {"id": 3, "lat": 41.0, "lon": 12.0, "tags": {"tourism": "viewpoint"}},
        ]
    }
    async with _client(_json_handler(payload, calls)) as client:
        places = await Overpass(client=client).search_places(41.9, 12.49, radius=1000, category="historic")

    assert [place["name"] for place in places] == ["Colosseum", "Forum"]
    assert places[1]["lat"] == 41.89
    assert places[1]["type"] == "ruins"
    assert calls[0].method == "POST"
    body = parse_qs(calls[0].content.decode())
    assert '["historic"]' in body["data"][0]
    assert "around:1000,41.9,12.49" in body["data"][0]


async def test_overpass_cities_sorted_by_population():
    calls: List[httpx.Request] = []
    payload = {
        "elements": [
            {"lat": 1, "lon": 1, "tags": {"name": "Small", "population": "1000"}},
            {"lat": 2, "lon": 2, "tags": {"name": "Big", "population": "2 500 000"}},
            {"lat": 3, "lon": 3, "tags": {"name": "Unknown"}},
        ]
    }
    async with _client(_json_handler(payload, calls)) as client:
        cities = await Overpass(client=client).search_cities("pt")

    assert [city["name"] for city in cities] == ["Big", "Small"]
    assert cities[0]["population"] == 2500000
    assert 'area["ISO3166-1"="PT"]' in parse_qs(calls[0].content.decode())["data"][0]


async def test_overpass_failure_returns_no_elements():
    async with _client(lambda request: httpx.Response(504)) as client:
        assert await Overpass(client=client).search_airports(0.0, 0.0) == []


async def test_keyed_adapters_skip_requests_without_a_key():
    calls: List[httpx.Request] = []
    async with _client(_json_handler({}, calls)) as client:
        assert await Unsplash(client=client).search_images("Lisbon") == []
        assert await OpenTripMap(client=client).search_places(38.7, -9.1) == []

    assert calls == []


async def test_unsplash_sends_client_id_and_maps_results():
    calls: List[httpx.Request] = []
    payload = {
        "results": [
            {
                "id": "abc",
                "urls": {"regular": "https://images.unsplash.com/abc", "thumb": "https://t/abc"},
                "alt_description": "tram in lisbon",
                "user": {"name": "Ana", "links": {"html": "https://unsplash.com/@ana"}},
            },
            {"id": "no-url", "urls": {}},
        ]
    }
    async with _client(_json_handler(payload, calls)) as client:
        images = await Unsplash("secret", client=client).search_images("Lisbon", limit=5)

    assert images == [
        {
            "id": "abc",
            "url": "https://images.unsplash.com/abc",
            "thumb": "https://t/abc",
            "alt": "tram in lisbon",
            "credit": "Ana",
            "creditUrl": "https://unsplash.com/@ana",
        }
    ]
    assert calls[0].headers["Authorization"] == "Client-ID secret"
    assert calls[0].url.params["query"] == "Lisbon travel"


async def test_opentripmap_orders_by_rating():
    calls: List[httpx.Request] = []
    payload = [
        {"xid": "1", "name": "Minor", "kinds": "museums,cultural", "rate": 1, "point": {"lat": 1, "lon": 2}},
        {"xid": "2", "name": "Major", "kinds": "historic", "rate": 7, "point": {"lat": 3, "lon": 4}},
        {"xid": "3", "name": "", "kinds": "historic", "rate": 7},
    ]
    async with _client(_json_handler(payload, calls)) as client:
        places = await OpenTripMap("key", client=client).search_places(1.0, 2.0, category="museums")

    assert [place["name"] for place in places] == ["Major", "Minor"]
    assert places[1]["type"] == "museums"
    assert calls[0].url.params["kinds"] == "museums"


async def test_commons_images_strip_markup():
    calls: List[httpx.Request] = []
    payload = {
        "query": {
            "pages": {
                "2": {
                    "index": 2,
                    "title": "File:B.jpg",
                    "imageinfo": [{"thumburl": "https://commons/b.jpg", "extmetadata": {}}],
                },
                "1": {
                    "index": 1,
                    "title": "File:A.jpg",
                    "imageinfo": [
                        {
                            "thumburl": "https://commons/a.jpg",
                            "extmetadata": {
                                "Artist": {"value": "<a href='x'>Jo</a>"},
                                "LicenseShortName": {"value": "CC BY-SA 4.0"},
                            },
                        }
                    ],
                },
            }
        }
    }
    async with _client(_json_handler(payload, calls)) as client:
        images = await WikimediaCommons(client=client).search_images("Kyoto", limit=5)

    assert [image["url"] for image in images] == ["https://commons/a.jpg", "https://commons/b.jpg"]
    assert images[0]["credit"] == "Jo"
    assert images[0]["license"] == "CC BY-SA 4.0"
    assert images[1]["credit"] == "Wikimedia Commons"


def test_strip_html():
    assert strip_html("<b>bold</b> text") == "bold text"
    assert strip_html("<br/>") is None
    assert strip_html(None) is None


async def test_duckduckgo_collects_related_topics():
    calls: List[httpx.Request] = []
    payload = {
        "Abstract": "Porto is a city in Portugal.",
        "AbstractSource": "Wikipedia",
        "Heading": "Porto",
        "RelatedTopics": [
            {"Text": "Ribeira district", "FirstURL": "https://ddg/ribeira"},
            {"Name": "Group", "Topics": []},
        ],
    }
    async with _client(_json_handler(payload, calls)) as client:
        result = await DuckDuckGo(client=client).web_search("Porto")

    assert result["abstract"] == "Porto is a city in Portugal."
    assert result["relatedTopics"] == [{"text": "Ribeira district", "url": "https://ddg/ribeira"}]


async def test_wikipedia_content_reads_intro_extract():
    calls: List[httpx.Request] = []
    payload = {
        "query": {
            "pages": {
                "5407": {
                    "title": "Chile",
                    "extract": "Chile is a country in South America.",
                    "coordinates": [{"lat": -33.45, "lon": -70.67}],
                    "categories": [{"title": "Category:Countries in South America"}],
                }
            }
        }
    }
    async with _client(_json_handler(payload, calls)) as client:
        page = await Wikipedia(client=client).content("Chile")

    assert page["extract"].startswith("Chile is")
    assert page["coordinates"] == {"lat": -33.45, "lon": -70.67}
    assert page["categories"] == ["Countries in South America"]
    assert calls[0].url.params["redirects"] == "1"


async def test_wikipedia_content_missing_page():
    calls: List[httpx.Request] = []
    payload = {"query": {"pages": {"-1": {"title": "Atlantis (country)", "missing": ""}}}}
    async with _client(_json_handler(payload, calls)) as client:
        assert await Wikipedia(client=client).content("Atlantis (country)") is None


@pytest.mark.parametrize(
    "payload",
    [[1, 2], ["x", None], {"error": "Unable to geocode"}],
)
async def test_nominatim_ignores_entries_that_are_not_objects(payload):
    calls: List[httpx.Request] = []
    async with _client(_json_handler(payload, calls)) as client:
        assert await Nominatim(client=client).geocode("Tokyo") == []


def test_summarize_place_tolerates_odd_address():
    place = summarize_place({"display_name": "Somewhere, Earth", "lat": "1.5", "lon": "x", "address": "n/a"})

    assert place["name"] == "Somewhere"
    assert place["lat"] == 1.5
    assert place["lon"] is None
    assert place["countryCode"] is None


async def test_opentripmap_skips_entries_that_are_not_objects():
    calls: List[httpx.Request] = []
    payload = [1, 2, {"name": "Belem Tower", "kinds": "historic", "rate": "7", "point": "x"}]
    async with _client(_json_handler(payload, calls)) as client:
        places = await OpenTripMap("k", client=client).search_places(38.7, -9.1)

    assert [place["name"] for place in places] == ["Belem Tower"]
    assert places[0]["lat"] is None


async def test_restcountries_skips_entries_that_are_not_objects():
    calls: List[httpx.Request] = []
    payload = ["x", {"name": "Chile", "currencies": ["CLP"], "idd": {"root": "+5", "suffixes": ["6"]}}]
    async with _client(_json_handler(payload, calls)) as client:
        country = await RestCountries(client=client).by_name("Chile")

    assert country["name"] is None
    assert country["currencies"] == []
    assert country["callingCodes"] == ["+56"]

    async with _client(_json_handler(["x"], calls)) as client:
        assert await RestCountries(client=client).by_name("Chile") is None


@pytest.mark.parametrize(
    "payload",
    [{"query": {"pages": {"1": 5}}}, {"query": {"pages": [1]}}, {"query": "none"}, [1, 2]],
)
async def test_commons_tolerates_malformed_pages(payload):
    calls: List[httpx.Request] = []
    async with _client(_json_handler(payload, calls)) as client:
        assert await WikimediaCommons(client=client).search_images("Lisbon") == []


async def test_commons_skips_pages_without_image_info():
    calls: List[httpx.Request] = []
    payload = {
        "query": {
            "pages": {
                "1": {"index": "first", "imageinfo": "none"},
                "2": {"index": 2, "imageinfo": [{"thumburl": "https://commons/c.jpg", "extmetadata": {"Artist": 3}}]},
            }
        }
    }
    async with _client(_json_handler(payload, calls)) as client:
        images = await WikimediaCommons(client=client).search_images("Lisbon")

    assert [image["url"] for image in images] == ["https://commons/c.jpg"]
    assert images[0]["credit"] == "Wikimedia Commons"


async def test_wikipedia_content_tolerates_malformed_page():
    calls: List[httpx.Request] = []
    async with _client(_json_handler({"query": {"pages": {"1": 5}}}, calls)) as client:
        assert await Wikipedia(client=client).content("Chile") is None

    payload = {"query": {"pages": {"1": {"title": "Chile", "extract": "Chile.", "categories": [7, {"title": 3}]}}}}
    async with _client(_json_handler(payload, calls)) as client:
        page = await Wikipedia(client=client).content("Chile")

    assert page["categories"] == []
    assert page["coordinates"] is None


async def test_unsplash_skips_entries_that_are_not_objects():
    calls: List[httpx.Request] = []
    payload = {"results": [1, {"urls": "x"}, {"id": "p1", "urls": {"regular": "https://unsplash/p1.jpg"}, "user": 9}]}
    async with _client(_json_handler(payload, calls)) as client:
        images = await Unsplash("key", client=client).search_images("Lisbon")

    assert [image["id"] for image in images] == ["p1"]
    assert images[0]["credit"] == "Unsplash"


async def test_overpass_skips_elements_that_are_not_objects():
    calls: List[httpx.Request] = []
    payload = {"elements": [1, {"tags": "x"}, {"lat": 1.0, "lon": 2.0, "tags": {"name": "Praça do Comércio"}}]}
    async with _client(_json_handler(payload, calls)) as client:
        places = await Overpass(client=client).search_places(38.7, -9.1)

    assert [place["name"] for place in places] == ["Praça do Comércio"]
