# bloodbridge/routers/donation_requests.py
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from bloodbridge.core.policy import authorize
from bloodbridge.deps import get_repo
from bloodbridge.schemas import (
    DonationRequestCreate,
    DonationRequestPatch,
    DonationRequestReplace,
    DonationStatusUpdate,
)
from bloodbridge.utils.ids import parse_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/donation-requests", tags=["donation-requests"], dependencies=[Depends(authorize)])

REQUEST_ID = "donation request ID"

@router.post("")
async def create_request(body: DonationRequestCreate, repo=Depends(get_repo)):
    doc = body.model_dump(exclude={"status", "createdAt"}, exclude_unset=True)
    doc["status"] = "pending"
    doc["createdAt"] = datetime.now(timezone.utc)
    res = await repo.insert_request(doc)
    logger.info("Donation request %s created by %s", res["insertedId"], doc.get("requesterEmail"))
    return res

@router.get("")
async def list_requests(email: Optional[str] = Query(default=None), repo=Depends(get_repo)):
    return await repo.list_requests(requester_email=email)

@router.get("/user/{email}")
async def list_user_requests(email: str, repo=Depends(get_repo)):
    return await repo.list_requests(requester_email=email)

@router.get("/{request_id}")
async def get_request(request_id: str, repo=Depends(get_repo)):
    doc = await repo.get_request(parse_object_id(request_id, REQUEST_ID))
    if not doc:
        raise HTTPException(status_code=404, detail="Donation request not found")
    return doc

@router.patch("/status/{request_id}")
async def update_status(request_id: str, body: DonationStatusUpdate, repo=Depends(get_repo)):
    _id = parse_object_id(request_id, REQUEST_ID)
    res = await repo.update_request(_id, {"status": body.status})
    # unknown id and "already in that status" look the same here
    if res["modifiedCount"] == 0:
        raise HTTPException(status_code=404, detail="Request not found or already updated.")
    return {"success": True, "message": "Status updated successfully."}

@router.patch("/{request_id}")
async def patch_request(request_id: str, body: DonationRequestPatch, repo=Depends(get_repo)):
    _id = parse_object_id(request_id, REQUEST_ID)
    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    res = await repo.update_request(_id, updates)
    if res["matchedCount"] == 0:
        raise HTTPException(status_code=404, detail="Donation request not found")
    return res

@router.put("/{request_id}")
async def replace_request(request_id: str, body: DonationRequestReplace, repo=Depends(get_repo)):
    _id = parse_object_id(request_id, REQUEST_ID)
    # every editable field is rewritten; status only when supplied
    updates = body.model_dump(exclude={"status"})
    if body.status is not None:
        updates["status"] = body.status
    res = await repo.update_request(_id, updates)
    if res["matchedCount"] == 0:
        raise HTTPException(status_code=404, detail="Donation request not found")
    return res

@router.delete("/{request_id}")
async def delete_request(request_id: str, repo=Depends(get_repo)):
    res = await repo.delete_request(parse_object_id(request_id, REQUEST_ID))
    if res["deletedCount"] == 0:
        raise HTTPException(status_code=404, detail="Donation request not found")
    return {"message": "Donation request deleted", "result": res}
