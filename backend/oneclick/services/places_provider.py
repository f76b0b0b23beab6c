"""
Place search provider backed by Google Geocoding + Places API (v1)
"""

import httpx

from oneclick.core.config import GOOGLE_API_KEY, GOOGLE_GEOCODE_URL, GOOGLE_PLACES_URL, HTTP_TIMEOUT_SECONDS
from oneclick.core.errors import UpstreamProviderError

_SEARCH_FIELD_MASK = (
    "places.id,places.displayName,places.formattedAddress,places.rating,"
    "places.priceLevel,places.location,places.types,places.photos"
)
_DETAILS_FIELD_MASK = (
    "id,displayName,formattedAddress,rating,websiteUri,nationalPhoneNumber,"
    "priceLevel,regularOpeningHours,reviews,photos,editorialSummary"
)


def _price_level(value: str | None) -> int | None:
    """'PRICE_LEVEL_MODERATE' style values carry no number; only numeric suffixes are kept."""
    if not value:
        return None
    suffix = value.replace("PRICE_LEVEL_", "")
    return int(suffix) if suffix.isdigit() else None


def build_search_query(keyword: str, place_type: str, location: str) -> str:
    if place_type in ("attraction", "restaurant"):
        noun = f"{place_type}s in {location}"
        return f"{keyword} {noun}" if keyword else noun
    return keyword


def _transform_place(place: dict) -> dict:
    location = place.get("location") or {}
    return {
        "place_id": place.get("id"),
        "name": (place.get("displayName") or {}).get("text") or "Unknown Name",
        "formatted_address": place.get("formattedAddress") or "Address not available",
        "rating": place.get("rating"),
        "price_level": _price_level(place.get("priceLevel")),
        "geometry": {"location": {"lat": location.get("latitude"), "lng": location.get("longitude")}},
        "photos": place.get("photos") or [],
    }


class PlaceSearchProvider:
    name = "places"

    def __init__(self, api_key: str | None = GOOGLE_API_KEY):
        self.api_key = api_key

    def _require_key(self) -> str:
        if not self.api_key:
            raise UpstreamProviderError(self.name, "GOOGLE_API_KEY is not configured")
        return self.api_key

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise UpstreamProviderError(self.name, f"Request failed: {e}") from e

        if response.status_code != 200:
            raise UpstreamProviderError(
                self.name, f"Google API error: {response.text}", response.status_code
            )
        return response.json()

    async def search(self, keyword: str, place_type: str, location: str) -> dict:
        """
        Text search for places, restricted to the geocoded viewport of location.

        Results whose address does not mention the location are dropped.
        """
        api_key = self._require_key()

        geocode = await self._request(
            "GET", GOOGLE_GEOCODE_URL, params={"address": location, "key": api_key}
        )
        if geocode.get("status") != "OK" or not geocode.get("results"):
            raise UpstreamProviderError(self.name, "Location not found", 404)
        viewport = geocode["results"][0]["geometry"]["viewport"]

        query = build_search_query(keyword, place_type, location)
        print(f"[places] Searching for \"{query}\" in location \"{location}\"")

        data = await self._request(
            "POST",
            f"{GOOGLE_PLACES_URL}/places:searchText",
            json={
                "textQuery": query,
                "languageCode": "en",
                "maxResultCount": 20,
                "locationBias": {
                    "rectangle": {
                        "low": {
                            "latitude": viewport["southwest"]["lat"],
                            "longitude": viewport["southwest"]["lng"],
                        },
                        "high": {
                            "latitude": viewport["northeast"]["lat"],
                            "longitude": viewport["northeast"]["lng"],
                        },
                    }
                },
            },
            headers={"X-Goog-Api-Key": api_key, "X-Goog-FieldMask": _SEARCH_FIELD_MASK},
        )

        results = [_transform_place(p) for p in data.get("places") or []]
        needle = location.lower()
        results = [r for r in results if needle in r["formatted_address"].lower()]
        return {"results": results, "query": query}

    async def details(self, place_id: str) -> dict:
        api_key = self._require_key()
        place = await self._request(
            "GET",
            f"{GOOGLE_PLACES_URL}/places/{place_id}",
            headers={"X-Goog-Api-Key": api_key, "X-Goog-FieldMask": _DETAILS_FIELD_MASK},
        )

        result = _transform_place(place)
        result.pop("geometry")
        hours = place.get("regularOpeningHours")
        result.update(
            {
                "formatted_phone_number": place.get("nationalPhoneNumber") or "",
                "website": place.get("websiteUri") or "",
                "opening_hours": {
                    "open_now": hours.get("openNow", False),
                    "weekday_text": hours.get("weekdayDescriptions") or [],
                }
                if hours
                else None,
                "reviews": place.get("reviews") or [],
                "description": (place.get("editorialSummary") or {}).get("text") or "",
            }
        )
        return result


def get_place_provider() -> PlaceSearchProvider:
    return PlaceSearchProvider()
