"""
Summarize 3-hour forecast samples into per-day and per-time-block conditions
"""

from collections import Counter
from datetime import date, timedelta

from oneclick.models.weather import ForecastSample, WeatherSummary

# [start, end) local hours; samples outside every block (night) are not aggregated
TIME_BLOCKS: dict[str, tuple[int, int]] = {
    "morning": (6, 12),
    "afternoon": (12, 17),
    "evening": (17, 22),
}

# Substring checked -> condition, in priority order
_CONDITION_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("rain", "rain"),
    ("cloud", "cloudy"),
    ("clear", "clear"),
    ("storm", "storm"),
)

_DAY_PRECEDENCE: tuple[str, ...] = ("rain", "storm", "cloudy", "clear")


def classify_condition(description: str) -> str:
    text = (description or "").lower()
    for keyword, condition in _CONDITION_KEYWORDS:
        if keyword in text:
            return condition
    return "other"


def time_block(hour: int) -> str | None:
    for block, (start, end) in TIME_BLOCKS.items():
        if start <= hour < end:
            return block
    return None


def _split_datetime(value: str) -> tuple[str, int] | None:
    try:
        date_str, time_str = value.strip().split(" ", 1)
        return date_str, int(time_str.split(":", 1)[0])
    except (AttributeError, ValueError):
        return None


def summarize_day(blocks: dict[str, str]) -> str:
    values = set(blocks.values())
    for condition in _DAY_PRECEDENCE:
        if condition in values:
            return condition
    return "other"


def summarize_forecast(samples: list[ForecastSample]) -> WeatherSummary:
    """
    Aggregate forecast samples by (date, time block).

    Each block's condition is the most frequent one among its samples, ties
    going to the condition seen first. A day is rain if any block is rain, then
    storm, cloudy, clear, else other. Rain volume is summed per block. Dates
    without samples are simply absent.
    """
    counts: dict[str, dict[str, Counter]] = {}
    rain_volume: dict[str, dict[str, float]] = {}

    for sample in samples:
        parsed = _split_datetime(sample.datetime)
        if parsed is None:
            continue
        date_str, hour = parsed
        block = time_block(hour)
        if block is None:
            continue

        counts.setdefault(date_str, {}).setdefault(block, Counter())[
            classify_condition(sample.description)
        ] += 1
        day_rain = rain_volume.setdefault(date_str, {})
        day_rain[block] = day_rain.get(block, 0.0) + (sample.rain_volume or 0.0)

    block_forecast: dict[str, dict[str, str]] = {}
    for date_str, blocks in counts.items():
        # most_common is stable, so equal counts keep first-seen order
        block_forecast[date_str] = {
            block: counter.most_common(1)[0][0] for block, counter in blocks.items()
        }

    daily_weather = {date_str: summarize_day(blocks) for date_str, blocks in block_forecast.items()}
    rain_days = [date_str for date_str, summary in daily_weather.items() if summary == "rain"]

    return WeatherSummary(
        forecast=list(samples),
        rain_days=rain_days,
        daily_weather=daily_weather,
        block_forecast=block_forecast,
        block_rain_volume=rain_volume,
    )


def missing_forecast_dates(summary: WeatherSummary, start_date: str, end_date: str) -> list[str]:
    """
    Requested trip dates (inclusive, YYYY-MM-DD) that have no forecast samples.

    Providers only forecast about five days ahead, so later trip days are missing.
    """
    start = date.fromisoformat(start_date)
    end = date.fromisoformat(end_date)
    covered = {s.datetime.split(" ", 1)[0] for s in summary.forecast if s.datetime}

    missing = []
    current = start
    while current <= end:
        if current.isoformat() not in covered:
            missing.append(current.isoformat())
        current += timedelta(days=1)
    return missing
