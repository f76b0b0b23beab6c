"""
MongoDB connection, collections and indexes
"""

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING
from pymongo.server_api import ServerApi

from oneclick.core.config import DATABASE_NAME, ITINERARIES_COLLECTION, MONGODB_URI

# Lazily created on first use; reset by close_database_connection
_client = None
_database = None


def is_database_configured() -> bool:
    return bool(MONGODB_URI)


def get_database():
    """
    Shared database handle. The motor client is created on first call.
    """
    global _client, _database

    if _database is None:
        if not MONGODB_URI:
            raise ValueError("MONGODB_URI environment variable is not set")
        _client = AsyncIOMotorClient(MONGODB_URI, server_api=ServerApi("1"))
        _database = _client[DATABASE_NAME]
        print(f"✅ Connected to MongoDB database: {DATABASE_NAME}")

    return _database


def get_users_collection():
    return get_database().users


def get_itineraries_collection():
    return get_database()[ITINERARIES_COLLECTION]


async def init_indexes():
    """
    Unique user and itinerary ids, plus the (user_id, updated_at) index that
    serves "latest itinerary of a user".
    """
    try:
        users = get_users_collection()
        await users.create_index("google_id", unique=True)
        await users.create_index("email")

        itineraries = get_itineraries_collection()
        await itineraries.create_index("itinerary_id", unique=True)
        await itineraries.create_index([("user_id", ASCENDING), ("updated_at", DESCENDING)], name="user_latest")

        print("✅ Database indexes created successfully")
    except Exception as e:
        print(f"⚠️  Index creation warning: {e}")


async def test_connection() -> bool:
    try:
        await get_database().command("ping")
        print("✅ MongoDB connection successful!")
        return True
    except Exception as e:
        print(f"❌ MongoDB connection failed: {e}")
        return False


async def close_database_connection():
    global _client, _database

    if _client:
        _client.close()
        _client = None
        _database = None
        print("🔌 Closed MongoDB connection")
