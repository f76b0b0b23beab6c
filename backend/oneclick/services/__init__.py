"""
services package

Plan sync engine, weather aggregation and third-party provider clients.
Import modules directly, e.g.:

    from oneclick.services.itinerary_sync import ItinerarySyncEngine
"""

__all__: list[str] = []
