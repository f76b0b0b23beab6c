"""
Minimal async client for the Amadeus self-service REST APIs
"""

import asyncio
import time

import httpx

from oneclick.core.config import (
    AMADEUS_BASE_URL,
    AMADEUS_CLIENT_ID,
    AMADEUS_CLIENT_SECRET,
    HTTP_TIMEOUT_SECONDS,
)
from oneclick.core.errors import UpstreamProviderError

# Refresh the token a little before Amadeus expires it
_TOKEN_EXPIRY_MARGIN_SECONDS = 30


class AmadeusAPIError(UpstreamProviderError):
    """
    Error response from Amadeus. `errors` keeps the raw error objects
    ({"code", "detail", "source": {"parameter"}}) for callers that classify them.
    """

    def __init__(self, message: str, status_code: int | None = None, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__("amadeus", message, status_code)


def _error_from_response(response: httpx.Response) -> AmadeusAPIError:
    try:
        errors = response.json().get("errors") or []
    except ValueError:
        errors = []
    detail = (errors[0].get("detail") or errors[0].get("title")) if errors else None
    return AmadeusAPIError(detail or response.text or "Amadeus request failed", response.status_code, errors)


class AmadeusClient:
    def __init__(
        self,
        client_id: str | None = AMADEUS_CLIENT_ID,
        client_secret: str | None = AMADEUS_CLIENT_SECRET,
        base_url: str = AMADEUS_BASE_URL,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self._token: str | None = None
        self._token_expires_at = 0.0
        self._token_lock = asyncio.Lock()

    async def _access_token(self, client: httpx.AsyncClient) -> str:
        async with self._token_lock:
            if self._token and time.time() < self._token_expires_at:
                return self._token
            if not self.client_id or not self.client_secret:
                raise AmadeusAPIError("AMADEUS_CLIENT_ID / AMADEUS_CLIENT_SECRET are not configured")

            response = await client.post(
                f"{self.base_url}/v1/security/oauth2/token",
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                },
            )
            if response.status_code != 200:
                raise _error_from_response(response)

            token_data = response.json()
            self._token = token_data["access_token"]
            self._token_expires_at = (
                time.time() + int(token_data.get("expires_in", 0)) - _TOKEN_EXPIRY_MARGIN_SECONDS
            )
            return self._token

    async def get(self, path: str, params: dict | None = None) -> dict:
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as client:
                token = await self._access_token(client)
                response = await client.get(
                    f"{self.base_url}{path}",
                    params=params,
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as e:
            raise AmadeusAPIError(f"Request to {path} failed: {e}") from e

        if response.status_code >= 400:
            raise _error_from_response(response)
        return response.json()


_amadeus_client: AmadeusClient | None = None


def get_amadeus_client() -> AmadeusClient:
    global _amadeus_client

    if _amadeus_client is None:
        _amadeus_client = AmadeusClient()
    return _amadeus_client
