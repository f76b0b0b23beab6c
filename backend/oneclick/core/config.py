"""
Environment configuration

Values come from the process environment, then from .env files found from the
working directory upward. Already-set variables always win.
"""

import os
import re

from dotenv import find_dotenv, load_dotenv


def _load_env_files() -> None:
    """
    Load `.env`, then either the file named by ENV_FILE or `.env.<environment>`
    where the environment comes from ENVIRONMENT (dev/prod/stg aliases accepted).
    """
    base = find_dotenv(".env", usecwd=True)
    if base:
        load_dotenv(base, override=False)

    explicit = os.environ.get("ENV_FILE")
    if explicit:
        path = explicit if os.path.isabs(explicit) else find_dotenv(explicit, usecwd=True)
        if path:
            load_dotenv(path, override=False)
        return

    environment = (os.environ.get("ENVIRONMENT") or "").strip().lower()
    if not environment:
        return
    resolved = {"dev": "development", "prod": "production", "stg": "staging"}.get(environment, environment)
    path = find_dotenv(f".env.{resolved}", usecwd=True)
    if path:
        load_dotenv(path, override=False)


_load_env_files()


def _get_int_env(var_name: str, default_value: int) -> int:
    """Integer setting; tolerates stray whitespace/semicolons, else falls back to the default."""
    text = os.environ.get(var_name, "").strip().rstrip(";")
    if not text:
        return default_value
    match = re.search(r"[-+]?\d+", text)
    return int(match.group(0)) if match else default_value


# === Server Configuration ===
SERVER_HOST = os.environ.get("SERVER_HOST", "0.0.0.0")
SERVER_PORT = _get_int_env("SERVER_PORT", 3000)


# === CORS Configuration ===
def _get_cors_origins() -> list[str]:
    """Comma-separated CORS_ORIGINS, or ["*"] when unset."""
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


CORS_ORIGINS = _get_cors_origins()

# === Database Configuration ===
# Without MONGODB_URI the app keeps itineraries in process memory (development only)
MONGODB_URI = os.environ.get("MONGODB_URI")
DATABASE_NAME = os.environ.get("DATABASE_NAME", "oneclick_planner")
ITINERARIES_COLLECTION = os.environ.get("ITINERARIES_COLLECTION", "itineraries")

# === Session Configuration ===
SESSION_COOKIE_NAME = os.environ.get("SESSION_COOKIE_NAME", "oneclick_session")
SESSION_TTL_SECONDS = _get_int_env("SESSION_TTL_SECONDS", 24 * 60 * 60)
SESSION_MAX_SESSIONS = _get_int_env("SESSION_MAX_SESSIONS", 1000)

# === Google OAuth Configuration ===
GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID")
GOOGLE_CLIENT_SECRET = os.environ.get("GOOGLE_CLIENT_SECRET")
GOOGLE_REDIRECT_URI = os.environ.get("GOOGLE_REDIRECT_URI")
# Google OAuth URLs (rarely change, but configurable if needed)
GOOGLE_TOKEN_URL = os.environ.get("GOOGLE_TOKEN_URL", "https://oauth2.googleapis.com/token")
GOOGLE_USERINFO_URL = os.environ.get(
    "GOOGLE_USERINFO_URL", "https://www.googleapis.com/oauth2/v2/userinfo"
)

# === JWT Configuration ===
JWT_SECRET = os.environ.get("JWT_SECRET", "your-secret-key-change-this-in-production")
JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
JWT_EXPIRATION_HOURS = _get_int_env("JWT_EXPIRATION_HOURS", 24)

# === Travel Data Providers ===
# Google Places (search + details) and Geocoding
GOOGLE_API_KEY = os.environ.get("GOOGLE_API_KEY")
GOOGLE_GEOCODE_URL = os.environ.get(
    "GOOGLE_GEOCODE_URL", "https://maps.googleapis.com/maps/api/geocode/json"
)
GOOGLE_PLACES_URL = os.environ.get("GOOGLE_PLACES_URL", "https://places.googleapis.com/v1")

# OpenWeatherMap 5 day / 3 hour forecast
WEATHER_API_KEY = os.environ.get("WEATHER_API_KEY")
WEATHER_API_URL = os.environ.get(
    "WEATHER_API_URL", "https://api.openweathermap.org/data/2.5/forecast"
)

# Amadeus self-service APIs (flights + hotels)
AMADEUS_CLIENT_ID = os.environ.get("AMADEUS_CLIENT_ID")
AMADEUS_CLIENT_SECRET = os.environ.get("AMADEUS_CLIENT_SECRET")
AMADEUS_BASE_URL = os.environ.get("AMADEUS_BASE_URL", "https://test.api.amadeus.com")
HOTEL_BATCH_SIZE = _get_int_env("HOTEL_BATCH_SIZE", 10)
HOTEL_BATCH_TIMEOUT_SECONDS = _get_int_env("HOTEL_BATCH_TIMEOUT_SECONDS", 15)

# Timeout applied to every outbound provider call
HTTP_TIMEOUT_SECONDS = _get_int_env("HTTP_TIMEOUT_SECONDS", 20)

# === Application Settings ===
APP_NAME = "OneClick Planner API"
APP_VERSION = "1.0.0"
