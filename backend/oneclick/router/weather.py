"""
Weather Router
Forecast for a city summarized by day and time block
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from oneclick.core.errors import UpstreamProviderError
from oneclick.models.common import APIResponse
from oneclick.services.weather_provider import WeatherProvider, get_weather_provider
from oneclick.services.weather_summary import missing_forecast_dates, summarize_forecast

router = APIRouter(prefix="/api/weather", tags=["Weather"])


@router.get("", response_model=APIResponse)
async def get_weather(
    city: str = Query(..., min_length=1, description="City name, e.g. 'Kyoto'"),
    start_date: str | None = Query(None, description="Trip start YYYY-MM-DD"),
    end_date: str | None = Query(None, description="Trip end YYYY-MM-DD"),
    provider: WeatherProvider = Depends(get_weather_provider),
):
    """
    Forecast samples plus rain days, daily summary and per-block conditions.

    With start_date and end_date, trip dates the provider could not forecast are
    listed in missing_dates.
    """
    try:
        samples = await provider.get_forecast(city)
    except UpstreamProviderError as e:
        print(f"[weather] ❌ Weather API error: {e}")
        raise HTTPException(status_code=e.status_code, detail="Failed to fetch weather forecast")

    summary = summarize_forecast(samples)
    data = summary.model_dump()

    if start_date and end_date:
        try:
            data["missing_dates"] = missing_forecast_dates(summary, start_date, end_date)
        except ValueError:
            raise HTTPException(status_code=400, detail="start_date and end_date must be YYYY-MM-DD")

    return APIResponse(code=0, msg="ok", data=data)
