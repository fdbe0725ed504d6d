import os
import sys

import httpx
import pytest
import respx

# Ensure bot-backend/ is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import config
from geocoding import DEFAULT_LOCATION, fallback_location, resolve_location

MOCK_GEOCODING_PARIS = {
    "results": [
        {
            "id": 2988507,
            "name": "Paris",
            "latitude": 48.85341,
            "longitude": 2.3488,
            "country": "France",
            "timezone": "Europe/Paris",
        }
    ],
    "generationtime_ms": 0.7,
}


# ── Tests: live lookup ────────────────────────────────────────────────────────

@respx.mock
async def test_live_geocode_returns_first_hit():
    route = respx.get(config.GEOCODING_URL).mock(
        return_value=httpx.Response(200, json=MOCK_GEOCODING_PARIS)
    )

    location = await resolve_location("paris", live=True)

    assert (location.lat, location.lon, location.label) == (48.85341, 2.3488, "Paris")
    params = dict(route.calls.last.request.url.params)
    assert params["name"] == "paris"
    assert params["count"] == "1"


@respx.mock
async def test_http_error_falls_back_to_city_table():
    respx.get(config.GEOCODING_URL).mock(return_value=httpx.Response(500, json={"error": True}))

    location = await resolve_location("Tokyo Tower", live=True)

    assert (location.lat, location.lon, location.label) == (35.6762, 139.6503, "Tokyo")


@respx.mock
async def test_timeout_falls_back_to_city_table():
    respx.get(config.GEOCODING_URL).mock(side_effect=httpx.TimeoutException("timed out"))

    location = await resolve_location("Greater London", live=True)

    assert location.label == "London"


@respx.mock
async def test_malformed_json_falls_back():
    respx.get(config.GEOCODING_URL).mock(return_value=httpx.Response(200, text="<html>oops</html>"))

    location = await resolve_location("sydney harbour", live=True)

    assert location.label == "Sydney"


@respx.mock
async def test_empty_results_fall_back_to_default():
    respx.get(config.GEOCODING_URL).mock(return_value=httpx.Response(200, json={"generationtime_ms": 0.2}))

    location = await resolve_location("Atlantis", live=True)

    assert location == DEFAULT_LOCATION


@respx.mock
async def test_result_missing_coordinates_falls_back():
    respx.get(config.GEOCODING_URL).mock(
        return_value=httpx.Response(200, json={"results": [{"name": "Mumbai"}]})
    )

    location = await resolve_location("mumbai", live=True)

    assert (location.lat, location.lon) == (19.0760, 72.8777)


# ── Tests: live disabled ──────────────────────────────────────────────────────

@pytest.mark.parametrize("name", ["tokyo", "TOKYO", "Downtown Tokyo, Japan"])
async def test_tokyo_fallback_without_live_lookup(name):
    with respx.mock:  # any outbound request would fail as unmocked
        location = await resolve_location(name, live=False)

    assert (location.lat, location.lon) == (35.6762, 139.6503)
    assert location.label == "Tokyo"


async def test_live_flag_read_from_config(monkeypatch):
    monkeypatch.setattr(config, "LIVE_WEATHER_ENABLED", False)
    with respx.mock:
        location = await resolve_location("paris")

    assert location.label == "Paris"


async def test_blank_name_uses_default_without_request():
    with respx.mock:
        location = await resolve_location("   ", live=True)

    assert location == DEFAULT_LOCATION


def test_fallback_table_first_substring_wins():
    # "new york" is declared before "london"
    assert fallback_location("New York to London").label == "New York"
    assert fallback_location("somewhere else").label == "New York"
