"""
Flight search provider (Amadeus flight offers + airport/city lookup)
"""

from oneclick.core.errors import UpstreamProviderError
from oneclick.services.amadeus_client import AmadeusClient, get_amadeus_client


def _transform_segment(segment: dict) -> dict:
    departure = segment.get("departure") or {}
    arrival = segment.get("arrival") or {}
    return {
        "departure": {
            "iata_code": departure.get("iataCode"),
            "terminal": departure.get("terminal"),
            "at": departure.get("at"),
        },
        "arrival": {
            "iata_code": arrival.get("iataCode"),
            "terminal": arrival.get("terminal"),
            "at": arrival.get("at"),
        },
        "carrier_code": segment.get("carrierCode"),
        "number": segment.get("number"),
        "aircraft": segment.get("aircraft"),
        "duration": segment.get("duration"),
        "number_of_stops": segment.get("numberOfStops"),
    }


def transform_offer(offer: dict) -> dict:
    price = offer.get("price") or {}
    return {
        "id": offer.get("id"),
        "price": {"total": price.get("total"), "currency": price.get("currency")},
        "itineraries": [
            {
                "duration": itinerary.get("duration"),
                "segments": [_transform_segment(s) for s in itinerary.get("segments") or []],
            }
            for itinerary in offer.get("itineraries") or []
        ],
        "number_of_bookable_seats": offer.get("numberOfBookableSeats"),
        "traveler_pricings": offer.get("travelerPricings"),
    }


class FlightSearchProvider:
    def __init__(self, client: AmadeusClient | None = None):
        self.client = client or get_amadeus_client()

    async def search(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        return_date: str | None = None,
        adults: int = 1,
        travel_class: str | None = "ECONOMY",
        non_stop: bool = False,
        currency: str = "USD",
        max_results: int = 20,
    ) -> list[dict]:
        if not origin or not destination or not departure_date:
            raise UpstreamProviderError(
                "amadeus",
                "origin, destination and departure_date are required",
                400,
            )

        params = {
            "originLocationCode": origin,
            "destinationLocationCode": destination,
            "departureDate": departure_date,
            "adults": adults,
            "currencyCode": currency,
            "max": max_results,
        }
        if return_date:
            params["returnDate"] = return_date
        if travel_class:
            params["travelClass"] = travel_class
        if non_stop:
            params["nonStop"] = "true"

        data = await self.client.get("/v2/shopping/flight-offers", params)
        return [transform_offer(offer) for offer in data.get("data") or []]

    async def search_locations(self, keyword: str, sub_type: str = "AIRPORT,CITY") -> list[dict]:
        print(f"[flights] Searching locations for keyword=\"{keyword}\" subType=\"{sub_type}\"")
        data = await self.client.get(
            "/v1/reference-data/locations", {"keyword": keyword, "subType": sub_type}
        )
        return data.get("data") or []


def get_flight_provider() -> FlightSearchProvider:
    return FlightSearchProvider()
