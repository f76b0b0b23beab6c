"""
Tests for forecast aggregation into time blocks and daily summaries
"""

import sys
from pathlib import Path

import pytest

# Allow importing from backend/oneclick
sys.path.insert(0, str(Path(__file__).parent.parent))

from oneclick.models.weather import ForecastSample
from oneclick.services.weather_summary import (
    classify_condition,
    missing_forecast_dates,
    summarize_day,
    summarize_forecast,
    time_block,
)


def sample(dt: str, description: str, rain: float = 0.0) -> ForecastSample:
    return ForecastSample(datetime=dt, description=description, rain_volume=rain, temp=15.0)


@pytest.mark.parametrize(
    "description, expected",
    [
        ("light rain", "rain"),
        ("thunderstorm with rain", "rain"),
        ("broken clouds", "cloudy"),
        ("clear sky", "clear"),
        ("thunderstorm", "storm"),
        ("mist", "other"),
        ("", "other"),
    ],
)
def test_classify_condition_priority(description, expected):
    assert classify_condition(description) == expected


@pytest.mark.parametrize(
    "hour, block",
    [(5, None), (6, "morning"), (11, "morning"), (12, "afternoon"), (16, "afternoon"), (17, "evening"), (21, "evening"), (22, None)],
)
def test_time_block_boundaries(hour, block):
    assert time_block(hour) == block


def test_block_dominant_is_most_frequent_not_highest_priority():
    summary = summarize_forecast(
        [
            sample("2025-04-02 07:00:00", "light rain", rain=0.6),
            sample("2025-04-02 09:00:00", "clear sky"),
            sample("2025-04-02 11:00:00", "clear sky"),
        ]
    )

    assert summary.block_forecast["2025-04-02"]["morning"] == "clear"
    assert summary.daily_weather["2025-04-02"] == "clear"
    assert summary.rain_days == []


def test_block_tie_goes_to_first_seen_condition():
    summary = summarize_forecast(
        [
            sample("2025-04-02 12:00:00", "few clouds"),
            sample("2025-04-02 15:00:00", "clear sky"),
        ]
    )
    assert summary.block_forecast["2025-04-02"]["afternoon"] == "cloudy"

    reversed_summary = summarize_forecast(
        [
            sample("2025-04-02 12:00:00", "clear sky"),
            sample("2025-04-02 15:00:00", "few clouds"),
        ]
    )
    assert reversed_summary.block_forecast["2025-04-02"]["afternoon"] == "clear"


def test_day_summary_precedence():
    assert summarize_day({"morning": "clear", "afternoon": "storm", "evening": "cloudy"}) == "storm"
    assert summarize_day({"morning": "rain", "afternoon": "storm"}) == "rain"
    assert summarize_day({"morning": "clear", "evening": "cloudy"}) == "cloudy"
    assert summarize_day({"evening": "other"}) == "other"


def test_rain_days_and_night_samples():
    samples = [
        sample("2025-04-02 00:00:00", "heavy rain", rain=4.0),  # night, not aggregated
        sample("2025-04-02 09:00:00", "clear sky"),
        sample("2025-04-03 18:00:00", "moderate rain", rain=2.5),
        sample("2025-04-03 21:00:00", "overcast clouds"),
        sample("2025-04-03 12:00:00", "clear sky"),
    ]
    summary = summarize_forecast(samples)

    assert summary.forecast == samples
    assert summary.daily_weather == {"2025-04-02": "clear", "2025-04-03": "rain"}
    assert summary.rain_days == ["2025-04-03"]
    assert summary.block_forecast["2025-04-03"] == {"evening": "rain", "afternoon": "clear"}


def test_unparseable_samples_are_passed_through_only():
    samples = [sample("not a date", "rain"), sample("2025-04-02 09:00:00", "clear sky")]
    summary = summarize_forecast(samples)

    assert len(summary.forecast) == 2
    assert list(summary.block_forecast) == ["2025-04-02"]


def test_missing_forecast_dates_beyond_provider_range():
    summary = summarize_forecast(
        [
            sample("2025-04-02 09:00:00", "clear sky"),
            sample("2025-04-03 00:00:00", "clear sky"),
        ]
    )

    assert missing_forecast_dates(summary, "2025-04-01", "2025-04-05") == [
        "2025-04-01",
        "2025-04-04",
        "2025-04-05",
    ]


def test_rain_volume_summed_per_block():
    summary = summarize_forecast(
        [
            sample("2025-04-02 06:00:00", "light rain", rain=0.5),
            sample("2025-04-02 09:00:00", "moderate rain", rain=1.25),
            sample("2025-04-02 12:00:00", "clear sky"),
            sample("2025-04-02 03:00:00", "heavy rain", rain=6.0),  # night, not aggregated
        ]
    )

    assert summary.block_rain_volume == {"2025-04-02": {"morning": 1.75, "afternoon": 0.0}}
