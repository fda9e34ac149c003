# bloodbridge/routers/users.py
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from bloodbridge.core.config import settings
from bloodbridge.core.policy import authorize
from bloodbridge.deps import get_repo
from bloodbridge.repos.errors import DuplicateEmail
from bloodbridge.schemas import (
    UserAdminUpdate,
    UserCreate,
    UserProfileUpdate,
    UserRoleUpdate,
    UserStatusUpdate,
)
from bloodbridge.utils.ids import parse_object_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(authorize)])

def _now() -> datetime:
    return datetime.now(timezone.utc)

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, repo=Depends(get_repo)):
    if await repo.find_user_by_email(body.email):
        raise HTTPException(status_code=409, detail="User already exists")

    now = _now()
    doc = {
        "uid": body.uid,
        "email": body.email,
        "name": body.name or "",
        "avatar": body.avatar or settings.default_avatar,
        "bloodGroup": body.bloodGroup or "",
        "district": body.district or "",
        "upazila": body.upazila or "",
        "role": "donor",
        "status": "active",
        "createdAt": now,
        "updatedAt": now,
    }
    try:
        user = await repo.create_user(doc)
    except DuplicateEmail:
        # lost a race with a concurrent sign-up
        raise HTTPException(status_code=409, detail="User already exists")
    logger.info("Registered user %s", user["email"])
    return {"success": True, "message": "User created", "user": user}

@router.get("")
async def list_users(repo=Depends(get_repo)):
    return {"success": True, "data": await repo.list_users()}

@router.get("/role/{email}")
async def get_role(email: str, repo=Depends(get_repo)):
    # unknown users get role null with 200, not 404
    user = await repo.find_user_by_email(email, ignore_case=True)
    return {"success": True, "role": (user or {}).get("role") or None}

async def _user_or_404(email: str, repo) -> dict:
    user = await repo.find_user_by_email(email)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.get("/email/{email}")
async def get_user_by_email(email: str, repo=Depends(get_repo)):
    return await _user_or_404(email, repo)

@router.get("/profile/{email}")
async def get_profile(email: str, repo=Depends(get_repo)):
    return await _user_or_404(email, repo)

@router.get("/{email}")
async def get_user(email: str, repo=Depends(get_repo)):
    return await _user_or_404(email, repo)

@router.patch("/profile/{email}")
async def update_profile(email: str, body: UserProfileUpdate, repo=Depends(get_repo)):
    updates = body.model_dump(exclude_unset=True)
    updates["updatedAt"] = _now()
    res = await repo.update_user_by_email(email, updates)
    if res["matchedCount"] == 0:
        raise HTTPException(status_code=404, detail="User not found")
    return {"success": True, "message": "Profile updated"}

# ---------- Admin user management ----------
@router.patch("/status/{user_id}")
async def update_status(user_id: str, body: UserStatusUpdate, repo=Depends(get_repo)):
    res = await repo.update_user_by_id(parse_object_id(user_id, "user ID"), {"status": body.status})
    return {"success": res["modifiedCount"] > 0}

@router.patch("/role/{user_id}")
async def update_role(user_id: str, body: UserRoleUpdate, repo=Depends(get_repo)):
    res = await repo.update_user_by_id(parse_object_id(user_id, "user ID"), {"role": body.role})
    return {"success": res["modifiedCount"] > 0}

@router.patch("/{user_id}")
async def update_user(user_id: str, body: UserAdminUpdate, repo=Depends(get_repo)):
    _id = parse_object_id(user_id, "user ID")
    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    return await repo.update_user_by_id(_id, updates)
