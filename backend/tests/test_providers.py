"""
Tests for the weather, places and flight provider clients (no network)
"""

import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

# Allow importing from backend/oneclick
sys.path.insert(0, str(Path(__file__).parent.parent))

from oneclick.core.errors import UpstreamProviderError
from oneclick.services.flights_provider import FlightSearchProvider
from oneclick.services.places_provider import build_search_query
from oneclick.services.weather_provider import WeatherProvider

_RealAsyncClient = httpx.AsyncClient


def mocked_httpx(handler):
    """Route every httpx.AsyncClient created inside the block through handler."""
    transport = httpx.MockTransport(handler)
    return patch.object(httpx, "AsyncClient", lambda **kwargs: _RealAsyncClient(transport=transport, **kwargs))


def test_weather_provider_maps_forecast_entries():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["q"] == "Kyoto"
        assert request.url.params["units"] == "metric"
        return httpx.Response(
            200,
            json={
                "list": [
                    {
                        "dt_txt": "2025-04-02 09:00:00",
                        "main": {"temp": 14.2},
                        "weather": [{"description": "Light Rain"}],
                        "rain": {"3h": 0.4},
                    },
                    {"dt_txt": "2025-04-02 12:00:00", "main": {"temp": 17.0}, "weather": [{"description": "clear sky"}]},
                ]
            },
        )

    with mocked_httpx(handler):
        samples = asyncio.run(WeatherProvider(api_key="k", base_url="https://weather.test/forecast").get_forecast("Kyoto"))

    assert [s.description for s in samples] == ["light rain", "clear sky"]
    assert samples[0].rain_volume == 0.4
    assert samples[1].rain_volume == 0.0
    assert samples[1].temp == 17.0


def test_weather_provider_surfaces_upstream_errors():
    with mocked_httpx(lambda request: httpx.Response(404, json={"message": "city not found"})):
        with pytest.raises(UpstreamProviderError) as exc_info:
            asyncio.run(WeatherProvider(api_key="k", base_url="https://weather.test/forecast").get_forecast("Atlantis"))

    assert exc_info.value.status_code == 404
    assert "city not found" in exc_info.value.message


def test_weather_provider_requires_key():
    with pytest.raises(UpstreamProviderError):
        asyncio.run(WeatherProvider(api_key=None).get_forecast("Kyoto"))


def test_build_search_query():
    assert build_search_query("", "attraction", "Kyoto") == "attractions in Kyoto"
    assert build_search_query("ramen", "restaurant", "Kyoto") == "ramen restaurants in Kyoto"
    assert build_search_query("onsen", "other", "Kyoto") == "onsen"


def test_flight_search_builds_params_and_normalises_offers():
    client = MagicMock()
    client.get = AsyncMock(
        return_value={
            "data": [
                {
                    "id": "1",
                    "price": {"total": "812.40", "currency": "USD"},
                    "itineraries": [
                        {
                            "duration": "PT13H",
                            "segments": [
                                {
                                    "departure": {"iataCode": "HND", "at": "2025-04-02T10:00:00"},
                                    "arrival": {"iataCode": "JFK", "at": "2025-04-02T09:00:00"},
                                    "carrierCode": "JL",
                                    "number": "5",
                                    "numberOfStops": 0,
                                }
                            ],
                        }
                    ],
                }
            ]
        }
    )

    offers = asyncio.run(FlightSearchProvider(client).search("HND", "JFK", "2025-04-02", non_stop=True))

    path, params = client.get.call_args.args
    assert path == "/v2/shopping/flight-offers"
    assert params["nonStop"] == "true"
    assert "returnDate" not in params
    segment = offers[0]["itineraries"][0]["segments"][0]
    assert segment["carrier_code"] == "JL"
    assert segment["departure"]["iata_code"] == "HND"
    assert offers[0]["price"] == {"total": "812.40", "currency": "USD"}
