# bloodbridge/repos/inmemory.py
import copy
import itertools
from datetime import datetime, timezone
from typing import Dict, List, Optional

from bson import ObjectId

from bloodbridge.repos.errors import DuplicateEmail
from bloodbridge.utils.ids import delete_result, insert_result, serialize, update_result

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

class _Collection:
    """Just enough of a Mongo collection: $set updates, newest-first scans."""

    def __init__(self):
        self.docs: Dict[ObjectId, dict] = {}
        self._seq = itertools.count()
        self._order: Dict[ObjectId, int] = {}

    def insert(self, doc: dict) -> ObjectId:
        doc = copy.deepcopy(doc)
        oid = doc.setdefault("_id", ObjectId())
        self.docs[oid] = doc
        self._order[oid] = next(self._seq)
        return oid

    def get(self, oid: ObjectId) -> Optional[dict]:
        doc = self.docs.get(oid)
        return serialize(copy.deepcopy(doc)) if doc else None

    def find(self, pred=None) -> List[dict]:
        return [serialize(copy.deepcopy(d)) for d in self.docs.values() if pred is None or pred(d)]

    def newest_first(self, pred=None) -> List[dict]:
        def key(d):
            created = d.get("createdAt") or _EPOCH
            return (created, self._order[d["_id"]])
        docs = sorted((d for d in self.docs.values() if pred is None or pred(d)), key=key, reverse=True)
        return [serialize(copy.deepcopy(d)) for d in docs]

    def set_fields(self, oid: ObjectId, fields: dict) -> dict:
        doc = self.docs.get(oid)
        if doc is None:
            return update_result(0, 0)
        changed = any(k not in doc or doc[k] != v for k, v in fields.items())
        doc.update(copy.deepcopy(fields))
        return update_result(1, 1 if changed else 0)

    def delete(self, oid: ObjectId) -> dict:
        if self.docs.pop(oid, None) is None:
            return delete_result(0)
        self._order.pop(oid, None)
        return delete_result(1)

class InMemoryRepo:
    def __init__(self):
        self.users = _Collection()
        self.requests = _Collection()
        self.blogs = _Collection()
        self.fundings = _Collection()

    async def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass

    # Users
    def _user_oid_by_email(self, email: str, ignore_case: bool = False) -> Optional[ObjectId]:
        want = email.lower() if ignore_case else email
        for oid, u in self.users.docs.items():
            have = u.get("email") or ""
            if (have.lower() if ignore_case else have) == want:
                return oid
        return None

    async def find_user_by_email(self, email: str, ignore_case: bool = False) -> Optional[dict]:
        oid = self._user_oid_by_email(email, ignore_case)
        return self.users.get(oid) if oid else None

    async def create_user(self, doc: Dict) -> dict:
        if self._user_oid_by_email(doc["email"]) is not None:
            raise DuplicateEmail(doc["email"])
        oid = self.users.insert(doc)
        return self.users.get(oid)

    async def list_users(self) -> List[dict]:
        return self.users.find()

    async def update_user_by_email(self, email: str, fields: Dict) -> dict:
        oid = self._user_oid_by_email(email)
        if oid is None:
            return update_result(0, 0)
        return self.users.set_fields(oid, fields)

    async def update_user_by_id(self, user_id: ObjectId, fields: Dict) -> dict:
        return self.users.set_fields(user_id, fields)

    async def count_users(self) -> int:
        return len(self.users.docs)

    # Donation requests
    async def insert_request(self, doc: Dict) -> dict:
        return insert_result(self.requests.insert(doc))

    async def list_requests(self, requester_email: Optional[str] = None) -> List[dict]:
        if not requester_email:
            return self.requests.newest_first()
        return self.requests.newest_first(lambda r: r.get("requesterEmail") == requester_email)

    async def get_request(self, request_id: ObjectId) -> Optional[dict]:
        return self.requests.get(request_id)

    async def update_request(self, request_id: ObjectId, fields: Dict) -> dict:
        return self.requests.set_fields(request_id, fields)

    async def delete_request(self, request_id: ObjectId) -> dict:
        return self.requests.delete(request_id)

    async def count_requests(self) -> int:
        return len(self.requests.docs)

    # Blogs
    async def insert_blog(self, doc: Dict) -> dict:
        return insert_result(self.blogs.insert(doc))

    async def list_blogs(self, status: Optional[str] = None) -> List[dict]:
        if not status:
            return self.blogs.newest_first()
        return self.blogs.newest_first(lambda b: b.get("status") == status)

    async def get_blog(self, blog_id: ObjectId) -> Optional[dict]:
        return self.blogs.get(blog_id)

    async def update_blog(self, blog_id: ObjectId, fields: Dict) -> dict:
        return self.blogs.set_fields(blog_id, fields)

    async def delete_blog(self, blog_id: ObjectId) -> dict:
        return self.blogs.delete(blog_id)

    # Fundings
    async def insert_funding(self, doc: Dict) -> dict:
        return insert_result(self.fundings.insert(doc))

    async def count_fundings(self) -> int:
        return len(self.fundings.docs)

    async def list_fundings(self, skip: int, limit: int) -> List[dict]:
        return self.fundings.newest_first()[skip:skip + limit]

    async def total_funding(self) -> float:
        # $sum skips non-numeric values
        return sum(
            f["amount"] for f in self.fundings.docs.values()
            if isinstance(f.get("amount"), (int, float)) and not isinstance(f.get("amount"), bool)
        )
