# bloodbridge/repos/mongo.py
import logging
import re
from typing import Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from bloodbridge.core.db import BLOGS, DONATION_REQUESTS, FUNDINGS, USERS
from bloodbridge.repos.errors import DuplicateEmail
from bloodbridge.utils.ids import delete_result, insert_result, serialize, update_result

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]

class MongoRepo:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.users = db[USERS]
        self.requests = db[DONATION_REQUESTS]
        self.blogs = db[BLOGS]
        self.fundings = db[FUNDINGS]

    async def ping(self) -> bool:
        try:
            await self.db.command("ping")
            return True
        except PyMongoError:
            logger.warning("MongoDB ping failed", exc_info=True)
            return False

    def close(self) -> None:
        self.db.client.close()

    # Users
    async def find_user_by_email(self, email: str, ignore_case: bool = False) -> Optional[dict]:
        if ignore_case:
            query = {"email": {"$regex": f"^{re.escape(email)}$", "$options": "i"}}
        else:
            query = {"email": email}
        return serialize(await self.users.find_one(query))

    async def create_user(self, doc: Dict) -> dict:
        doc = dict(doc)
        try:
            res = await self.users.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateEmail(doc.get("email"))
        doc["_id"] = res.inserted_id
        return serialize(doc)

    async def list_users(self) -> List[dict]:
        return [serialize(u) async for u in self.users.find()]

    async def update_user_by_email(self, email: str, fields: Dict) -> dict:
        res = await self.users.update_one({"email": email}, {"$set": fields})
        return update_result(res.matched_count, res.modified_count)

    async def update_user_by_id(self, user_id: ObjectId, fields: Dict) -> dict:
        res = await self.users.update_one({"_id": user_id}, {"$set": fields})
        return update_result(res.matched_count, res.modified_count)

    async def count_users(self) -> int:
        return await self.users.count_documents({})

    # Donation requests
    async def insert_request(self, doc: Dict) -> dict:
        res = await self.requests.insert_one(dict(doc))
        return insert_result(res.inserted_id)

    async def list_requests(self, requester_email: Optional[str] = None) -> List[dict]:
        query = {"requesterEmail": requester_email} if requester_email else {}
        cur = self.requests.find(query).sort(NEWEST_FIRST)
        return [serialize(r) async for r in cur]

    async def get_request(self, request_id: ObjectId) -> Optional[dict]:
        return serialize(await self.requests.find_one({"_id": request_id}))

    async def update_request(self, request_id: ObjectId, fields: Dict) -> dict:
        res = await self.requests.update_one({"_id": request_id}, {"$set": fields})
        return update_result(res.matched_count, res.modified_count)

    async def delete_request(self, request_id: ObjectId) -> dict:
        res = await self.requests.delete_one({"_id": request_id})
        return delete_result(res.deleted_count)

    async def count_requests(self) -> int:
        return await self.requests.count_documents({})

    # Blogs
    async def insert_blog(self, doc: Dict) -> dict:
        res = await self.blogs.insert_one(dict(doc))
        return insert_result(res.inserted_id)

    async def list_blogs(self, status: Optional[str] = None) -> List[dict]:
        query = {"status": status} if status else {}
        cur = self.blogs.find(query).sort(NEWEST_FIRST)
        return [serialize(b) async for b in cur]

    async def get_blog(self, blog_id: ObjectId) -> Optional[dict]:
        return serialize(await self.blogs.find_one({"_id": blog_id}))

    async def update_blog(self, blog_id: ObjectId, fields: Dict) -> dict:
        res = await self.blogs.update_one({"_id": blog_id}, {"$set": fields})
        return update_result(res.matched_count, res.modified_count)

    async def delete_blog(self, blog_id: ObjectId) -> dict:
        res = await self.blogs.delete_one({"_id": blog_id})
        return delete_result(res.deleted_count)

    # Fundings
    async def insert_funding(self, doc: Dict) -> dict:
        res = await self.fundings.insert_one(dict(doc))
        return insert_result(res.inserted_id)

    async def count_fundings(self) -> int:
        return await self.fundings.count_documents({})

    async def list_fundings(self, skip: int, limit: int) -> List[dict]:
        cur = self.fundings.find().sort(NEWEST_FIRST).skip(skip).limit(limit)
        return [serialize(f) async for f in cur]

    async def total_funding(self) -> float:
        pipeline = [{"$group": {"_id": None, "total": {"$sum": "$amount"}}}]
        rows = await self.fundings.aggregate(pipeline).to_list(length=1)
        return rows[0]["total"] if rows else 0
