"""
Models package for API payloads and database documents
"""

from oneclick.models.itinerary import Flight, Hotel, Place, PlanFields, PlanRecord
from oneclick.models.user import User
from oneclick.models.weather import ForecastSample, WeatherSummary

__all__ = ["PlanRecord", "PlanFields", "Place", "Hotel", "Flight", "User", "ForecastSample", "WeatherSummary"]
