"""
Itinerary models for session drafts and MongoDB persistence
"""

import time
import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from oneclick.core.errors import UnknownCategoryError

# Storage key for each category collection on a PlanRecord
CATEGORY_KEYS: tuple[str, ...] = ("attractions", "restaurants", "hotels", "flights")


def resolve_category_key(category: str | None) -> str:
    """
    Normalize a category token to its plural storage key.

    "attraction", "Attractions" and " attractions " all resolve to "attractions".
    Raises UnknownCategoryError for anything that is not one of CATEGORY_KEYS.
    """
    token = (category or "").strip().lower()
    singular = token[:-1] if token.endswith("s") else token
    key = f"{singular}s"
    if not singular or key not in CATEGORY_KEYS:
        raise UnknownCategoryError(category)
    return key


def singular_category(key: str) -> str:
    return key[:-1] if key.endswith("s") else key


def _generate_flight_id() -> str:
    return f"flight-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


class CityStop(BaseModel):
    name: str = Field(..., description="City name")
    days: int | None = Field(default=None, description="Number of days spent in the city")


class Place(BaseModel):
    """
    Attraction or restaurant saved to a plan.
    """

    id: str = Field(..., description="Provider place id")
    name: str
    address: str | None = None
    notes: str = Field(default="")
    indoor: bool = Field(default=False, description="Whether the place is suitable for rainy days")
    day_index: int | None = Field(default=None, description="0-based trip day, None when unassigned")
    added_at: datetime = Field(default_factory=datetime.utcnow)


class Hotel(BaseModel):
    id: str = Field(..., description="Provider hotel id")
    name: str
    notes: str = Field(default="")
    added_at: datetime = Field(default_factory=datetime.utcnow)


class Flight(BaseModel):
    """
    Flight saved to a plan. The name is always derived from airline + flight number.
    """

    id: str = Field(default_factory=_generate_flight_id)
    name: str = Field(default="", description="'<airline> <flight_number>'")
    airline: str
    flight_number: str | None = None
    departure_time: str | None = Field(default=None, description="ISO timestamp as supplied by the provider")
    arrival_time: str | None = None
    departure_airport: str
    arrival_airport: str
    price: Any | None = None
    duration: str | None = None
    stops: int = Field(default=0)
    travel_class: str | None = Field(default=None, alias="class")
    notes: str = Field(default="")
    added_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def _derive_name(self) -> "Flight":
        self.name = f"{self.airline} {self.flight_number or ''}".strip()
        return self


class PlanRecord(BaseModel):
    """
    A user's travel plan. Starts as a session draft (no user_id / itinerary_id)
    and becomes a stored record once an authenticated user saves or migrates it.
    """

    user_id: str | None = Field(default=None, description="Owner id, only set on stored plans")
    itinerary_id: str | None = Field(default=None, description="Assigned on first persistence")

    destination: str | None = None
    country: str | None = None
    start_date: str | None = Field(default=None, description="YYYY-MM-DD")
    end_date: str | None = Field(default=None, description="YYYY-MM-DD")
    cities: list[CityStop] = Field(default_factory=list, description="Cities in visiting order")

    attractions: list[Place] = Field(default_factory=list)
    restaurants: list[Place] = Field(default_factory=list)
    hotels: list[Hotel] = Field(default_factory=list)
    flights: list[Flight] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "109876543210",
                "itinerary_id": "2f1c9b7e4a0d4c55b1f0e3a6d9c8b7a1",
                "destination": "Kyoto",
                "country": "Japan",
                "start_date": "2025-04-02",
                "end_date": "2025-04-06",
                "cities": [{"name": "Kyoto", "days": 3}, {"name": "Nara", "days": 1}],
                "attractions": [
                    {"id": "ChIJ8cM8zdaoAWARPR27azYdlsA", "name": "Fushimi Inari Taisha", "day_index": 0}
                ],
                "restaurants": [],
                "hotels": [],
                "flights": [],
            }
        }

    @property
    def is_bound(self) -> bool:
        """True when the plan is linked to a stored record."""
        return bool(self.user_id and self.itinerary_id)

    def collection(self, key: str) -> list:
        return getattr(self, resolve_category_key(key))

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()


class PlanFields(BaseModel):
    """
    Metadata supplied when creating or updating a plan.

    Category arrays are import payloads: a non-empty array replaces the
    existing collection, an empty or missing one keeps it.
    """

    destination: str | None = None
    country: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    cities: list[CityStop] = Field(default_factory=list)

    attractions: list[Place] = Field(default_factory=list)
    restaurants: list[Place] = Field(default_factory=list)
    hotels: list[Hotel] = Field(default_factory=list)
    flights: list[Flight] = Field(default_factory=list)
