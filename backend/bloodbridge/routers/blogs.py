# bloodbridge/routers/blogs.py
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from bloodbridge.core.policy import authorize
from bloodbridge.deps import get_repo
from bloodbridge.schemas import BLOG_STATUSES, BlogCreate, BlogStatusUpdate
from bloodbridge.utils.ids import parse_object_id

router = APIRouter(prefix="/blogs", tags=["blogs"], dependencies=[Depends(authorize)])

@router.post("", status_code=status.HTTP_201_CREATED)
async def create_blog(body: BlogCreate, repo=Depends(get_repo)):
    doc = body.model_dump(exclude={"status"}, exclude_unset=True)
    doc["status"] = "draft"
    doc["createdAt"] = datetime.now(timezone.utc)
    return await repo.insert_blog(doc)

@router.get("")
async def list_blogs(status_q: Optional[str] = Query(default=None, alias="status"), repo=Depends(get_repo)):
    # anything outside the enum means "no filter"
    wanted = status_q if status_q in BLOG_STATUSES else None
    return await repo.list_blogs(status=wanted)

@router.get("/{blog_id}")
async def get_blog(blog_id: str, repo=Depends(get_repo)):
    blog = await repo.get_blog(parse_object_id(blog_id, "blog ID format"))
    if not blog:
        raise HTTPException(status_code=404, detail="Blog post not found")
    return blog

@router.patch("/status/{blog_id}")
async def update_blog_status(blog_id: str, body: BlogStatusUpdate, repo=Depends(get_repo)):
    return await repo.update_blog(parse_object_id(blog_id, "blog ID format"), {"status": body.status})

@router.delete("/{blog_id}")
async def delete_blog(blog_id: str, repo=Depends(get_repo)):
    return await repo.delete_blog(parse_object_id(blog_id, "blog ID format"))
