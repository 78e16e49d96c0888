"""Tests for the field-resolution helpers and the country reference tables."""
from __future__ import annotations

import pytest

from travel_guide.core.reference_data import (
    COUNTRY_PROFILES,
    get_profile,
    resolve_country_code,
    theme_for_destination,
)
from travel_guide.core.resolve import (
    as_list,
    as_number,
    as_text_list,
    dig,
    first_non_empty,
    first_number,
    first_text,
    is_empty,
    mappings,
)


def test_is_empty_treats_blank_values_as_missing():
    assert is_empty(None)
    assert is_empty("   ")
    assert is_empty([])
    assert is_empty({})
    assert not is_empty(0)
    assert not is_empty(False)
    assert not is_empty("x")


def test_dig_follows_mappings_and_list_indexes():
    payload = {"images": [{"url": "a.jpg"}], "country": {"currency": {"code": "JPY"}}}

    assert dig(payload, "images.0.url") == "a.jpg"
    assert dig(payload, "country.currency.code") == "JPY"
    assert dig(payload, "images.3.url") is None
    assert dig(payload, "images.x") is None
    assert dig(payload, "country.currency.code.more", "fallback") == "fallback"
    assert dig(None, "anything", 7) == 7


def test_first_non_empty_skips_blank_candidates():
    assert first_non_empty(None, "", [], "value", default="d") == "value"
    assert first_non_empty(None, "  ", default="d") == "d"


def test_first_text_ignores_non_strings():
    assert first_text(42, ["list"], " ", "text", default=None) == "text"
    assert first_text({"a": 1}, default="fallback") == "fallback"


def test_number_helpers():
    assert as_number("3.5") == 3.5
    assert as_number(True) is None
    assert as_number("abc") is None
    assert first_number(None, 0, "-1", "12", default=5) == 12.0
    assert first_number("n/a", default=5) == 5


def test_list_helpers():
    assert as_list(None) == []
    assert as_list("one") == ["one"]
    assert as_text_list(["a", " ", 3, " b "]) == ["a", "b"]
    assert list(mappings([{"a": 1}, "x", None, {"b": 2}])) == [{"a": 1}, {"b": 2}]


def test_resolve_country_code_accepts_codes_names_and_cities():
    assert resolve_country_code("JP") == "JP"
    assert resolve_country_code("japan") == "JP"
    assert resolve_country_code(None, "", "Kyoto") == "JP"
    assert resolve_country_code("Nowhereland123") is None


def test_get_profile_returns_curated_data():
    profile = get_profile("Marrakech")

    assert profile is COUNTRY_PROFILES["MA"]
    assert profile.name == "Morocco"
    assert get_profile("Atlantis") is None


def test_theme_for_destination():
    assert theme_for_destination("Japan") == "japan"
    assert theme_for_destination("  Tokyo  ") == "japan"
    assert theme_for_destination("Old town, Lisbon") == "portugal"
    assert theme_for_destination("Tokyo, Japan") == "japan"
    assert theme_for_destination("Nowhereland123") == "default"


@pytest.mark.parametrize("destination", ["New Mexico", "Santa Fe, New Mexico", "Rio Grande", "Nice weather"])
def test_theme_ignores_partial_name_matches(destination):
    assert theme_for_destination(destination) == "default"
