from fastapi import APIRouter, Depends

from oneclick.db.itinerary_store import ItineraryStore, get_itinerary_store
from oneclick.models.common import APIResponse
from oneclick.services.session_cache import SessionPlanCache, get_session_cache

router = APIRouter(tags=["System"])


@router.get("/", response_model=APIResponse)
def root():
    return APIResponse(
        code=0, msg="ok", data={"msg": "OneClick Planner API. Start a plan with POST /api/plan."}
    )


@router.get("/health", response_model=APIResponse)
def health_check(
    store: ItineraryStore = Depends(get_itinerary_store),
    cache: SessionPlanCache = Depends(get_session_cache),
):
    return APIResponse(
        code=0,
        msg="ok",
        data={
            "status": "healthy",
            "service": "oneclick_planner-server",
            "itinerary_store": store.backend,
            "active_sessions": cache.active_count,
        },
    )
