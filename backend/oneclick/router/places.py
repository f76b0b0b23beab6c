"""
Places Router
Attraction and restaurant search using Google Places API
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from oneclick.core.errors import UpstreamProviderError
from oneclick.models.common import APIResponse
from oneclick.services.places_provider import PlaceSearchProvider, get_place_provider

router = APIRouter(prefix="/api/places", tags=["Places"])


@router.get("", response_model=APIResponse)
async def search_places(
    location: str = Query("", description="City or region to search in"),
    keyword: str = Query("", description="Optional free-text keyword"),
    type: str = Query("attraction", description="attraction | restaurant"),
    provider: PlaceSearchProvider = Depends(get_place_provider),
):
    """
    Search places of a type inside a location's viewport.
    """
    if not location:
        raise HTTPException(status_code=400, detail="Location is required")

    try:
        data = await provider.search(keyword, type, location)
    except UpstreamProviderError as e:
        print(f"[places] ❌ Error fetching places: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return APIResponse(code=0, msg="ok", data=data)


@router.get("/{place_id}", response_model=APIResponse)
async def get_place_details(
    place_id: str,
    provider: PlaceSearchProvider = Depends(get_place_provider),
):
    print(f"[places] Getting details for place ID: {place_id}")
    try:
        result = await provider.details(place_id)
    except UpstreamProviderError as e:
        print(f"[places] ❌ Error fetching place details: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return APIResponse(code=0, msg="ok", data={"result": result})
