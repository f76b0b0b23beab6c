"""
Weather forecast provider (OpenWeatherMap 5 day / 3 hour forecast)
"""

import httpx

from oneclick.core.config import HTTP_TIMEOUT_SECONDS, WEATHER_API_KEY, WEATHER_API_URL
from oneclick.core.errors import UpstreamProviderError
from oneclick.models.weather import ForecastSample


def _upstream_message(response: httpx.Response) -> str:
    try:
        return str(response.json().get("message") or response.text)
    except ValueError:
        return response.text


class WeatherProvider:
    name = "weather"

    def __init__(self, api_key: str | None = WEATHER_API_KEY, base_url: str = WEATHER_API_URL):
        self.api_key = api_key
        self.base_url = base_url

    async def get_forecast(self, city: str) -> list[ForecastSample]:
        if not self.api_key:
            raise UpstreamProviderError(self.name, "WEATHER_API_KEY is not configured")

        params = {"q": city, "units": "metric", "appid": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as client:
                response = await client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            raise UpstreamProviderError(self.name, f"Failed to fetch weather forecast: {e}") from e

        if response.status_code != 200:
            raise UpstreamProviderError(self.name, _upstream_message(response), response.status_code)

        return [
            ForecastSample(
                datetime=entry.get("dt_txt", ""),
                rain_volume=(entry.get("rain") or {}).get("3h", 0) or 0,
                temp=(entry.get("main") or {}).get("temp"),
                description=((entry.get("weather") or [{}])[0].get("description") or "").lower(),
            )
            for entry in response.json().get("list", [])
        ]


def get_weather_provider() -> WeatherProvider:
    return WeatherProvider()
