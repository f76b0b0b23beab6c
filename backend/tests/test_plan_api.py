"""
End-to-end tests for the plan, weather and system routes

Runs the FastAPI app with an in-memory itinerary store and a fresh session cache.
"""

import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

# Allow importing from backend/oneclick
sys.path.insert(0, str(Path(__file__).parent.parent))

from oneclick.core.security import create_access_token
from oneclick.db.itinerary_store import InMemoryItineraryStore, get_itinerary_store
from oneclick.main import app
from oneclick.models.weather import ForecastSample
from oneclick.services.session_cache import SessionPlanCache, get_session_cache
from oneclick.services.weather_provider import get_weather_provider

USER = "109876543210"


def print_section(title: str) -> None:
    print("\n" + "=" * 80)
    print(f"  {title}")
    print("=" * 80)


@pytest.fixture
def store():
    return InMemoryItineraryStore()


@pytest.fixture
def client(store):
    cache = SessionPlanCache(ttl=3600, max_sessions=100)
    app.dependency_overrides[get_itinerary_store] = lambda: store
    app.dependency_overrides[get_session_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    token = create_access_token(USER, "traveler@example.com", "Traveler")
    return {"Authorization": f"Bearer {token}"}


def test_anonymous_plan_flow(client):
    print_section("Anonymous plan flow")

    assert client.get("/api/plan").json()["data"]["plan"] is None

    response = client.post("/api/plan/places", json={"place_id": "p1", "name": "Fushimi Inari", "category": "attraction"})
    assert response.status_code == 400
    assert response.json()["detail"] == "No active travel plan"

    response = client.post("/api/plan", json={"destination": "Kyoto", "start_date": "2025-04-02", "end_date": "2025-04-06"})
    assert response.status_code == 200
    assert response.json()["data"]["plan"]["destination"] == "Kyoto"

    place = {"place_id": "p1", "name": "Fushimi Inari", "category": "attraction"}
    first = client.post("/api/plan/places", json=place).json()["data"]
    second = client.post("/api/plan/places", json=place).json()["data"]
    print(f"duplicate response: {second}")

    assert first["success"] is True
    assert second["success"] is False
    assert second["duplicate"] is True
    assert len(second["plan"]["attractions"]) == 1


def test_create_requires_destination(client):
    response = client.post("/api/plan", json={"country": "Japan"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Destination is required"


def test_unknown_category_is_rejected(client):
    client.post("/api/plan", json={"destination": "Kyoto"})

    response = client.delete("/api/plan/spaceships/x1")

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid category: spaceships"


def test_add_flight_derives_name_and_keeps_class(client):
    client.post("/api/plan", json={"destination": "New York"})
    flight = {
        "airline": "JL",
        "flight_number": "5",
        "departure_airport": "HND",
        "arrival_airport": "JFK",
        "departure_time": "2025-04-02T10:00:00",
        "class": "ECONOMY",
    }

    data = client.post("/api/plan/flights", json={"flight": flight}).json()["data"]

    assert data["flight"]["name"] == "JL 5"
    assert data["flight"]["class"] == "ECONOMY"
    assert data["flight"]["id"].startswith("flight-")

    again = client.post("/api/plan/flights", json={"flight": {**flight, "id": "offer-9"}}).json()["data"]
    assert again["duplicate"] is True
    assert again["message"] == "This flight is already in your itinerary"


def test_migrate_requires_sign_in(client):
    client.post("/api/plan", json={"destination": "Kyoto"})

    assert client.post("/api/plan/migrate").status_code == 401


def test_signed_in_flow_mirrors_store(client, store, auth_headers):
    print_section("Sign-in, migrate and mirrored edits")

    client.post("/api/plan", json={"destination": "Kyoto"})
    client.post("/api/plan/places", json={"place_id": "p1", "name": "Fushimi Inari", "category": "attractions"})

    migrated = client.post("/api/plan/migrate", headers=auth_headers).json()["data"]
    assert migrated["status"] == "migrated"
    assert migrated["plan"]["user_id"] == USER

    again = client.post("/api/plan/migrate", headers=auth_headers).json()["data"]
    assert again["status"] == "using_existing"
    assert again["plan"]["itinerary_id"] == migrated["plan"]["itinerary_id"]

    client.post("/api/plan/hotels", json={"hotel_id": "h1", "name": "Hotel Kanra"}, headers=auth_headers)
    updated = client.put("/api/plan/hotels/h1", json={"notes": "late check-in"}, headers=auth_headers).json()["data"]
    assert updated["hotel"]["notes"] == "late check-in"

    client.delete("/api/plan/attractions/p1", headers=auth_headers)

    stored = asyncio.run(store.get_by_user(USER))
    assert stored.attractions == []
    assert stored.hotels[0].notes == "late check-in"

    cleared = client.delete("/api/plan", headers=auth_headers).json()["data"]
    assert cleared["plan"] is None
    assert client.get("/api/plan", headers=auth_headers).json()["data"]["plan"] is None


def test_update_unknown_hotel_is_404(client):
    client.post("/api/plan", json={"destination": "Kyoto"})

    response = client.put("/api/plan/hotels/h404", json={"notes": "x"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Hotel not found in itinerary"


def test_invalid_token_is_401(client):
    response = client.get("/api/plan", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_weather_summary_route(client):
    provider = MagicMock()
    provider.get_forecast = AsyncMock(
        return_value=[
            ForecastSample(datetime="2025-04-02 09:00:00", description="light rain", rain_volume=0.8),
            ForecastSample(datetime="2025-04-02 15:00:00", description="clear sky"),
        ]
    )
    app.dependency_overrides[get_weather_provider] = lambda: provider

    response = client.get(
        "/api/weather", params={"city": "Kyoto", "start_date": "2025-04-02", "end_date": "2025-04-03"}
    )

    data = response.json()["data"]
    assert response.status_code == 200
    assert data["rain_days"] == ["2025-04-02"]
    assert data["block_forecast"]["2025-04-02"] == {"morning": "rain", "afternoon": "clear"}
    assert data["missing_dates"] == ["2025-04-03"]
    provider.get_forecast.assert_awaited_once_with("Kyoto")


def test_health_reports_store_backend(client):
    data = client.get("/health").json()["data"]

    assert data["status"] == "healthy"
    assert data["itinerary_store"] == "memory"
