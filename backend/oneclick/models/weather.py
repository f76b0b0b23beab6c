"""
Weather forecast models
"""

from pydantic import BaseModel, Field


class ForecastSample(BaseModel):
    """
    One 3-hour forecast entry as returned by the weather provider.
    """

    datetime: str = Field(..., description="Local 'YYYY-MM-DD HH:MM:SS'")
    rain_volume: float = Field(default=0.0, description="Rain volume for the last 3 hours, mm")
    temp: float | None = Field(default=None, description="Temperature, Celsius")
    description: str = Field(default="", description="Lower-cased provider description")


class WeatherSummary(BaseModel):
    forecast: list[ForecastSample] = Field(default_factory=list, description="Raw samples, unchanged")
    rain_days: list[str] = Field(default_factory=list)
    daily_weather: dict[str, str] = Field(default_factory=dict, description="date -> condition")
    block_forecast: dict[str, dict[str, str]] = Field(
        default_factory=dict, description="date -> time block -> dominant condition"
    )
    block_rain_volume: dict[str, dict[str, float]] = Field(
        default_factory=dict, description="date -> time block -> summed rain volume, mm"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "forecast": [
                    {"datetime": "2025-04-02 09:00:00", "rain_volume": 0.4, "temp": 14.2, "description": "light rain"}
                ],
                "rain_days": ["2025-04-02"],
                "daily_weather": {"2025-04-02": "rain"},
                "block_forecast": {"2025-04-02": {"morning": "rain"}},
                "block_rain_volume": {"2025-04-02": {"morning": 0.4}},
            }
        }
