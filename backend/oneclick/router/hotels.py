"""
Hotels Router
Hotel list and offers by city through Amadeus
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from oneclick.core.errors import UpstreamProviderError
from oneclick.models.common import APIResponse
from oneclick.services.hotels_provider import HotelSearchProvider, get_hotel_provider

router = APIRouter(prefix="/api/hotels", tags=["Hotels"])


@router.get("/search/city", response_model=APIResponse)
async def search_hotels_by_city(
    city_code: str = Query(..., min_length=3, max_length=3, description="IATA city code"),
    check_in_date: str | None = Query(None),
    check_out_date: str | None = Query(None),
    adults: int = Query(1, ge=1),
    ratings: list[str] | None = Query(None),
    price_range: str | None = Query(None, description="e.g. '100-300'"),
    provider: HotelSearchProvider = Depends(get_hotel_provider),
):
    """
    Hotels in a city. With both dates, offers are attached and unavailable
    hotels are reported under meta.failed_hotels.
    """
    try:
        data = await provider.search_by_city(
            city_code.upper(),
            check_in_date=check_in_date,
            check_out_date=check_out_date,
            adults=adults,
            ratings=ratings,
            price_range=price_range,
        )
    except UpstreamProviderError as e:
        print(f"[hotels] ❌ Error searching hotels by city: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return APIResponse(code=0, msg="ok", data=data)
