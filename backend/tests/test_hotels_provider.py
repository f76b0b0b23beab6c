"""
Tests for hotel offer batching and per-chunk failure classification
"""

import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

# Allow importing from backend/oneclick
sys.path.insert(0, str(Path(__file__).parent.parent))

from oneclick.services.amadeus_client import AmadeusAPIError
from oneclick.services.hotels_provider import HotelSearchProvider, categorize_hotel_errors

LISTING = [
    {"hotelId": hotel_id, "name": f"Hotel {hotel_id}", "geoCode": {"latitude": 35.0, "longitude": 135.7},
     "address": {"cityName": "KYOTO"}}
    for hotel_id in ["H1", "H2", "H3", "H4", "H5"]
]


def fake_amadeus():
    async def get(path, params):
        if path.endswith("/by-city"):
            return {"data": LISTING}
        ids = params["hotelIds"].split(",")
        if "H3" in ids:
            raise AmadeusAPIError(
                "No rooms",
                400,
                [
                    {"code": 3664, "source": {"parameter": "hotelIds=H3"}},
                    {"code": 1257, "source": {"parameter": "hotelIds=H4"}},
                ],
            )
        if "H5" in ids:
            raise asyncio.TimeoutError()
        return {"data": [{"hotel": {"hotelId": h, "name": f"Hotel {h}"}, "offers": [{"id": f"o-{h}"}]} for h in ids]}

    client = MagicMock()
    client.get = AsyncMock(side_effect=get)
    return client


def test_categorize_hotel_errors():
    buckets = categorize_hotel_errors(
        [
            {"code": 1351, "source": {"parameter": "hotelIds=A,B"}},
            {"code": 3289, "source": {"parameter": "hotelIds=C"}},
            {"code": 9999},
        ],
        ["A", "B", "C", "D"],
    )

    assert buckets["fatal"] == ["A", "B"]
    assert buckets["ignorable"] == ["C"]
    assert buckets["temporary"] == ["A", "B", "C", "D"]


def test_search_without_dates_returns_listing():
    client = fake_amadeus()
    provider = HotelSearchProvider(client, batch_size=2, batch_timeout=5)

    data = asyncio.run(provider.search_by_city("KYO"))

    assert data["results"] == LISTING
    assert client.get.await_count == 1


def test_failed_chunks_do_not_fail_search():
    provider = HotelSearchProvider(fake_amadeus(), batch_size=2, batch_timeout=5)

    data = asyncio.run(provider.search_by_city("KYO", check_in_date="2025-04-02", check_out_date="2025-04-04"))

    assert [h["hotel"]["hotelId"] for h in data["results"]] == ["H1", "H2"]
    assert data["results"][0]["hotel"]["city_name"] == "KYOTO"
    assert data["results"][0]["hotel"]["latitude"] == 35.0
    assert data["meta"]["failed_hotels"] == {"fatal": ["H4"], "temporary": ["H5"], "ignorable": ["H3"]}


def test_unexpected_chunk_error_keeps_sibling_offers():
    async def get(path, params):
        if path.endswith("/by-city"):
            return {"data": [{"hotelId": "H1"}, {"hotelId": "H2"}]}
        if params["hotelIds"] == "H2":
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return {"data": [{"hotel": {"hotelId": "H1"}, "offers": [{"id": "o-H1"}]}]}

    client = MagicMock()
    client.get = AsyncMock(side_effect=get)
    provider = HotelSearchProvider(client, batch_size=1, batch_timeout=5)

    data = asyncio.run(provider.search_by_city("PAR", check_in_date="2025-04-02", check_out_date="2025-04-04"))

    assert data["meta"]["count"] == 1
    assert data["results"][0]["hotel"]["hotelId"] == "H1"
    assert data["meta"]["failed_hotels"]["temporary"] == ["H2"]
