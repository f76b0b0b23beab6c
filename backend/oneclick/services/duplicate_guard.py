"""
Duplicate detection and entry construction for plan categories
"""

from typing import Any, Iterable

from pydantic import ValidationError

from oneclick.core.errors import PlanValidationError
from oneclick.models.itinerary import Flight, Hotel, Place, resolve_category_key


def departure_day(value: Any) -> str:
    """
    Calendar day of a departure timestamp, taken from its literal date prefix.

    "2025-04-02T23:30:00+09:00" -> "2025-04-02". No time zone conversion is done,
    so mixed-offset timestamps for the same instant can land on different days.
    """
    if value is None:
        return ""
    return str(value).strip()[:10]


def _field(entry: Any, name: str) -> Any:
    if isinstance(entry, dict):
        return entry.get(name)
    return getattr(entry, name, None)


def _same_flight(existing: Any, candidate: Any) -> bool:
    return (
        _field(existing, "airline") == _field(candidate, "airline")
        and _field(existing, "flight_number") == _field(candidate, "flight_number")
        and departure_day(_field(existing, "departure_time"))
        == departure_day(_field(candidate, "departure_time"))
    )


def is_duplicate(collection: Iterable[Any], candidate: Any, category: str) -> bool:
    """
    Whether candidate is already present in collection.

    Entries match on id. Flights additionally match when airline, flight number
    and departure day are all equal, since search providers issue a fresh id per
    query for the same operated flight.
    """
    key = resolve_category_key(category)
    candidate_id = _field(candidate, "id")
    for existing in collection:
        if _field(existing, "id") == candidate_id:
            return True
        if key == "flights" and _same_flight(existing, candidate):
            return True
    return False


def build_entry(category: str, payload: dict[str, Any]) -> Place | Hotel | Flight:
    """
    Build the stored entry for a category from a caller payload.

    Places and hotels need an id and a name. Flights need an airline and both
    airports; their id is generated when absent and their name is derived.
    """
    key = resolve_category_key(category)
    data = {k: v for k, v in payload.items() if v is not None}

    if key == "flights":
        if not data.get("airline") or not data.get("departure_airport") or not data.get("arrival_airport"):
            raise PlanValidationError("Missing required flight details")
        model = Flight
    else:
        if not data.get("id") or not data.get("name"):
            raise PlanValidationError("Missing required fields")
        model = Hotel if key == "hotels" else Place

    # added_at is always stamped at insertion time
    data.pop("added_at", None)
    try:
        return model(**data)
    except ValidationError as e:
        raise PlanValidationError(f"Invalid {key[:-1]} details: {e.errors()[0].get('msg')}") from e
