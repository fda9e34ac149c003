# bloodbridge/utils/ids.py
from typing import Optional

from bson import ObjectId
from fastapi import HTTPException

def parse_object_id(value: str, what: str = "ID") -> ObjectId:
    """Turn a path parameter into an ObjectId or fail with 400."""
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=400, detail=f"Invalid {what}")
    return ObjectId(value)

def serialize(doc: Optional[dict]) -> Optional[dict]:
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc

# Write results in the shape the Mongo drivers report them

def insert_result(inserted_id) -> dict:
    return {"acknowledged": True, "insertedId": str(inserted_id)}

def update_result(matched: int, modified: int) -> dict:
    return {
        "acknowledged": True,
        "matchedCount": matched,
        "modifiedCount": modified,
        "upsertedCount": 0,
        "upsertedId": None,
    }

def delete_result(deleted: int) -> dict:
    return {"acknowledged": True, "deletedCount": deleted}
