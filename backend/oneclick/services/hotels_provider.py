"""
Hotel search provider (Amadeus hotel list + offers)

Offers are requested for chunks of hotel ids in parallel. Each chunk fails on its
own: its ids are tallied by error class and the other chunks still complete.
"""

import asyncio

from oneclick.core.config import HOTEL_BATCH_SIZE, HOTEL_BATCH_TIMEOUT_SECONDS
from oneclick.services.amadeus_client import AmadeusAPIError, AmadeusClient, get_amadeus_client

FATAL_ERROR_CODES = {
    1351,  # VERIFY CHAIN/REP CODE
    1257,  # INVALID PROPERTY CODE
    4070,  # UNABLE TO PROCESS
}

IGNORABLE_ERROR_CODES = {
    3664,  # NO ROOMS AVAILABLE
    3289,  # RATE NOT AVAILABLE
    2827,  # HOTEL PROPERTY LOCKED
    10604,  # INVALID OR MISSING DATA
}


def _unique(ids: list[str]) -> list[str]:
    return list(dict.fromkeys(ids))


def categorize_hotel_errors(errors: list[dict], chunk_ids: list[str]) -> dict[str, list[str]]:
    """
    Split Amadeus offer errors into fatal / ignorable / temporary hotel ids.

    The affected ids come from the error's source parameter ("hotelIds=A,B");
    errors without one are charged to the whole chunk.
    """
    buckets: dict[str, list[str]] = {"fatal": [], "ignorable": [], "temporary": []}
    for error in errors:
        parameter = ((error.get("source") or {}).get("parameter") or "").replace("hotelIds=", "")
        hotel_ids = [h for h in parameter.split(",") if h] or chunk_ids
        code = error.get("code")
        if code in FATAL_ERROR_CODES:
            buckets["fatal"].extend(hotel_ids)
        elif code in IGNORABLE_ERROR_CODES:
            buckets["ignorable"].extend(hotel_ids)
        else:
            buckets["temporary"].extend(hotel_ids)
    return {name: _unique(ids) for name, ids in buckets.items()}


class HotelSearchProvider:
    def __init__(
        self,
        client: AmadeusClient | None = None,
        batch_size: int = HOTEL_BATCH_SIZE,
        batch_timeout: float = HOTEL_BATCH_TIMEOUT_SECONDS,
    ):
        self.client = client or get_amadeus_client()
        self.batch_size = max(1, batch_size)
        self.batch_timeout = batch_timeout

    async def _offers_for_chunk(self, chunk_ids: list[str], base_params: dict) -> list[dict]:
        params = {**base_params, "hotelIds": ",".join(chunk_ids)}
        data = await asyncio.wait_for(
            self.client.get("/v3/shopping/hotel-offers", params), timeout=self.batch_timeout
        )
        return data.get("data") or []

    async def search_by_city(
        self,
        city_code: str,
        check_in_date: str | None = None,
        check_out_date: str | None = None,
        adults: int = 1,
        ratings: list[str] | None = None,
        price_range: str | None = None,
        currency: str = "USD",
    ) -> dict:
        print(f"[hotels] Searching hotels in city: {city_code}")
        listing = (
            await self.client.get("/v1/reference-data/locations/hotels/by-city", {"cityCode": city_code})
        ).get("data") or []
        print(f"[hotels] Found {len(listing)} hotels in {city_code}")

        if not (check_in_date and check_out_date):
            return {"results": listing, "meta": {"count": len(listing), "city_code": city_code}}

        base_params = {"adults": adults, "checkInDate": check_in_date, "checkOutDate": check_out_date}
        if price_range:
            base_params["priceRange"] = price_range
            base_params["currency"] = currency
        if ratings:
            base_params["ratings"] = ",".join(ratings)

        hotel_ids = [h["hotelId"] for h in listing if h.get("hotelId")]
        chunks = [hotel_ids[i : i + self.batch_size] for i in range(0, len(hotel_ids), self.batch_size)]
        outcomes = await asyncio.gather(
            *(self._offers_for_chunk(chunk, base_params) for chunk in chunks), return_exceptions=True
        )

        offers: list[dict] = []
        failed: dict[str, list[str]] = {"fatal": [], "temporary": [], "ignorable": []}
        for chunk, outcome in zip(chunks, outcomes):
            if isinstance(outcome, AmadeusAPIError) and outcome.errors:
                categorized = categorize_hotel_errors(outcome.errors, chunk)
                print(f"[hotels] ⚠️ Batch processing errors: {categorized}")
                for name, ids in categorized.items():
                    failed[name].extend(ids)
            elif isinstance(outcome, Exception):
                print(f"[hotels] ⚠️ Batch of {len(chunk)} hotels failed: {outcome!r}")
                failed["temporary"].extend(chunk)
            elif isinstance(outcome, BaseException):
                # Cancellation and interpreter exits still propagate
                raise outcome
            else:
                offers.extend(outcome)

        by_id = {h.get("hotelId"): h for h in listing}
        hotels = []
        for offer in offers:
            hotel = offer.get("hotel") or {}
            listed = by_id.get(hotel.get("hotelId")) or {}
            geo = listed.get("geoCode") or {}
            hotels.append(
                {
                    **offer,
                    "hotel": {
                        **hotel,
                        "address": listed.get("address") or hotel.get("address"),
                        "latitude": geo.get("latitude"),
                        "longitude": geo.get("longitude"),
                        "city_name": (listed.get("address") or {}).get("cityName") or city_code,
                    },
                }
            )

        return {
            "results": hotels,
            "meta": {
                "count": len(hotels),
                "city_code": city_code,
                "failed_hotels": {name: _unique(ids) for name, ids in failed.items()},
            },
        }


def get_hotel_provider() -> HotelSearchProvider:
    return HotelSearchProvider()
