# bloodbridge/core/db.py
from functools import lru_cache

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from bloodbridge.core.config import settings

USERS = "users"
DONATION_REQUESTS = "donationRequests"
BLOGS = "blogs"
FUNDINGS = "fundings"

@lru_cache
def get_client() -> AsyncIOMotorClient:
    # Cached to play nicely with uvicorn --reload
    return AsyncIOMotorClient(settings.mongo_uri, tz_aware=True, uuidRepresentation="standard")

def get_db() -> AsyncIOMotorDatabase:
    return get_client()[settings.mongo_db]
