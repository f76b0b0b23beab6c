"""
Flights Router
Flight offers and airport lookup through Amadeus
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from oneclick.core.errors import UpstreamProviderError
from oneclick.models.common import APIResponse
from oneclick.services.flights_provider import FlightSearchProvider, get_flight_provider

router = APIRouter(prefix="/api/flights", tags=["Flights"])


@router.get("/search", response_model=APIResponse)
async def search_flights(
    origin: str = Query(..., description="Origin IATA code"),
    destination: str = Query(..., description="Destination IATA code"),
    departure_date: str = Query(..., description="YYYY-MM-DD"),
    return_date: str | None = Query(None),
    adults: int = Query(1, ge=1),
    travel_class: str = Query("ECONOMY"),
    non_stop: bool = Query(False),
    currency: str = Query("USD"),
    max_results: int = Query(20, ge=1, le=250),
    provider: FlightSearchProvider = Depends(get_flight_provider),
):
    try:
        flights = await provider.search(
            origin,
            destination,
            departure_date,
            return_date=return_date,
            adults=adults,
            travel_class=travel_class,
            non_stop=non_stop,
            currency=currency,
            max_results=max_results,
        )
    except UpstreamProviderError as e:
        print(f"[flights] ❌ Error searching flights: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return APIResponse(
        code=0, msg="ok", data={"results": flights, "meta": {"count": len(flights), "currency": currency}}
    )


@router.get("/locations/search", response_model=APIResponse)
async def search_locations(
    keyword: str = Query(..., min_length=1),
    sub_type: str = Query("AIRPORT,CITY"),
    provider: FlightSearchProvider = Depends(get_flight_provider),
):
    try:
        locations = await provider.search_locations(keyword, sub_type)
    except UpstreamProviderError as e:
        print(f"[flights] ❌ Error searching locations: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return APIResponse(code=0, msg="ok", data={"results": locations})
