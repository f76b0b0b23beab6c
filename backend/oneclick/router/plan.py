"""
Plan Router
Session-scoped travel plan, mirrored to the user's stored itinerary once signed in
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from oneclick.core.errors import PlanError
from oneclick.core.security import get_current_identity, get_session_id, require_identity
from oneclick.db.itinerary_store import ItineraryStore, get_itinerary_store
from oneclick.models.common import APIResponse
from oneclick.models.itinerary import PlanFields, PlanRecord
from oneclick.services.itinerary_sync import ItinerarySyncEngine, SyncResult
from oneclick.services.session_cache import SessionPlanCache, get_session_cache

router = APIRouter(prefix="/api/plan", tags=["Plan"])


class AddPlaceRequest(BaseModel):
    place_id: str | None = None
    name: str | None = None
    address: str | None = None
    category: str | None = Field(default=None, description="attraction | restaurant")
    notes: str | None = None
    indoor: bool = False
    day_index: int | None = None


class AddHotelRequest(BaseModel):
    hotel_id: str | None = None
    name: str | None = None
    notes: str | None = None


class UpdateHotelRequest(BaseModel):
    notes: str | None = None


class FlightDetails(BaseModel):
    id: str | None = None
    airline: str | None = None
    flight_number: str | None = None
    departure_time: str | None = None
    arrival_time: str | None = None
    departure_airport: str | None = None
    arrival_airport: str | None = None
    price: float | str | dict | None = None
    duration: str | None = None
    stops: int | None = None
    travel_class: str | None = Field(default=None, alias="class")

    class Config:
        populate_by_name = True


class AddFlightRequest(BaseModel):
    flight: FlightDetails | None = None
    notes: str | None = None


def get_sync_engine(store: ItineraryStore = Depends(get_itinerary_store)) -> ItinerarySyncEngine:
    return ItinerarySyncEngine(store)


def _dump_plan(plan: PlanRecord | None) -> dict | None:
    return plan.model_dump(mode="json", by_alias=True) if plan is not None else None


def _respond(cache: SessionPlanCache, session_id: str, result: SyncResult, **extra) -> APIResponse:
    """
    Store the resulting plan as the session plan and wrap it in the API envelope.
    """
    cache.put(session_id, result.plan)
    for warning in result.warnings:
        print(f"[plan] ⚠️ Store sync skipped ({warning.operation}): {warning.error}")

    data = {"success": result.success, "plan": _dump_plan(result.plan), **extra}
    if result.duplicate:
        data["duplicate"] = True
    if result.message:
        data["message"] = result.message
    return APIResponse(code=0, msg=result.message or "ok", data=data)


@router.get("", response_model=APIResponse)
async def get_plan(
    session_id: str = Depends(get_session_id),
    identity: str | None = Depends(get_current_identity),
    engine: ItinerarySyncEngine = Depends(get_sync_engine),
    cache: SessionPlanCache = Depends(get_session_cache),
):
    """
    Current plan: the stored itinerary for signed-in users, else the session draft.
    """
    result = await engine.fetch_plan(cache.get(session_id), identity)
    if result.plan is not None:
        cache.put(session_id, result.plan)
    return APIResponse(code=0, msg="ok", data={"plan": _dump_plan(result.plan)})


@router.post("", response_model=APIResponse)
async def save_plan(
    body: PlanFields,
    session_id: str = Depends(get_session_id),
    identity: str | None = Depends(get_current_identity),
    engine: ItinerarySyncEngine = Depends(get_sync_engine),
    cache: SessionPlanCache = Depends(get_session_cache),
):
    """
    Create or update the plan metadata. Non-empty category arrays import saved places.
    """
    print(f"[plan] Saving plan destination={body.destination}, signed_in={identity is not None}")
    try:
        result = await engine.create_or_update_plan(cache.get(session_id), body, identity)
    except PlanError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _respond(cache, session_id, result)


@router.delete("", response_model=APIResponse)
async def clear_plan(
    session_id: str = Depends(get_session_id),
    identity: str | None = Depends(get_current_identity),
    engine: ItinerarySyncEngine = Depends(get_sync_engine),
    cache: SessionPlanCache = Depends(get_session_cache),
):
    print("[plan] Clearing plan from session")
    result = await engine.clear_plan(cache.get(session_id), identity)
    return _respond(cache, session_id, result)


@router.post("/places", response_model=APIResponse)
async def add_place(
    body: AddPlaceRequest,
    session_id: str = Depends(get_session_id),
    identity: str | None = Depends(get_current_identity),
    engine: ItinerarySyncEngine = Depends(get_sync_engine),
    cache: SessionPlanCache = Depends(get_session_cache),
):
    """
    Add an attraction or restaurant. Places already in the plan come back as duplicates.
    """
    payload = {
        "id": body.place_id,
        "name": body.name,
        "address": body.address,
        "notes": body.notes or "",
        "indoor": body.indoor,
        "day_index": body.day_index,
    }
    try:
        result = await engine.add_category_item(cache.get(session_id), payload, body.category, identity)
    except PlanError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _respond(cache, session_id, result)


@router.post("/hotels", response_model=APIResponse)
async def add_hotel(
    body: AddHotelRequest,
    session_id: str = Depends(get_session_id),
    identity: str | None = Depends(get_current_identity),
    engine: ItinerarySyncEngine = Depends(get_sync_engine),
    cache: SessionPlanCache = Depends(get_session_cache),
):
    payload = {"id": body.hotel_id, "name": body.name, "notes": body.notes or ""}
    try:
        result = await engine.add_category_item(cache.get(session_id), payload, "hotel", identity)
    except PlanError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _respond(cache, session_id, result)


@router.put("/hotels/{hotel_id}", response_model=APIResponse)
async def update_hotel(
    hotel_id: str,
    body: UpdateHotelRequest,
    session_id: str = Depends(get_session_id),
    identity: str | None = Depends(get_current_identity),
    engine: ItinerarySyncEngine = Depends(get_sync_engine),
    cache: SessionPlanCache = Depends(get_session_cache),
):
    try:
        result = await engine.update_category_item(
            cache.get(session_id), hotel_id, "hotel", notes=body.notes, identity=identity
        )
    except PlanError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _respond(cache, session_id, result, hotel=result.item.model_dump(mode="json"))


@router.post("/flights", response_model=APIResponse)
async def add_flight(
    body: AddFlightRequest,
    session_id: str = Depends(get_session_id),
    identity: str | None = Depends(get_current_identity),
    engine: ItinerarySyncEngine = Depends(get_sync_engine),
    cache: SessionPlanCache = Depends(get_session_cache),
):
    payload = body.flight.model_dump(exclude_none=True) if body.flight else {}
    payload["notes"] = body.notes or ""
    try:
        result = await engine.add_category_item(cache.get(session_id), payload, "flight", identity)
    except PlanError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    extra = {}
    if result.item is not None:
        extra["flight"] = result.item.model_dump(mode="json", by_alias=True)
    return _respond(cache, session_id, result, **extra)


@router.post("/migrate", response_model=APIResponse)
async def migrate_plan(
    session_id: str = Depends(get_session_id),
    identity: str = Depends(require_identity),
    engine: ItinerarySyncEngine = Depends(get_sync_engine),
    cache: SessionPlanCache = Depends(get_session_cache),
):
    """
    Called once right after sign-in: move the anonymous draft into the user's storage.
    """
    try:
        result = await engine.migrate_session_to_store(cache.get(session_id), identity)
    except PlanError as e:
        print(f"[plan] ❌ Error migrating plan: {e}")
        raise HTTPException(status_code=e.status_code, detail="Failed to migrate plan")
    return _respond(cache, session_id, result, status=result.status)


@router.delete("/{category}/{item_id}", response_model=APIResponse)
async def remove_item(
    category: str,
    item_id: str,
    session_id: str = Depends(get_session_id),
    identity: str | None = Depends(get_current_identity),
    engine: ItinerarySyncEngine = Depends(get_sync_engine),
    cache: SessionPlanCache = Depends(get_session_cache),
):
    """
    Remove an entry from any category (attractions, restaurants, hotels, flights).
    """
    print(f"[plan] Deleting {category} with id {item_id}")
    try:
        result = await engine.remove_category_item(cache.get(session_id), item_id, category, identity)
    except PlanError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _respond(cache, session_id, result)
