# bloodbridge/core/indexes.py
from pymongo import ASCENDING, DESCENDING

from bloodbridge.core.db import BLOGS, DONATION_REQUESTS, FUNDINGS, USERS

async def ensure_indexes(db):
    # Users: one account per email
    await db[USERS].create_index("email", unique=True, name="email_unique")
    # Listings are always newest first
    await db[DONATION_REQUESTS].create_index([("createdAt", DESCENDING)], name="createdAt_-1")
    await db[DONATION_REQUESTS].create_index([("requesterEmail", ASCENDING)], name="requesterEmail_1")
    await db[BLOGS].create_index([("status", ASCENDING), ("createdAt", DESCENDING)], name="status_1_createdAt_-1")
    await db[FUNDINGS].create_index([("createdAt", DESCENDING)], name="createdAt_-1")
