from fastapi import APIRouter, Depends

from ..core.policy import authorize
from ..deps import get_repo
from ..schemas import AdminStats
from ..services.stats import compute_overview

router = APIRouter(tags=["stats"], dependencies=[Depends(authorize)])

@router.get("/admin-stats", response_model=AdminStats)
async def admin_stats(repo=Depends(get_repo)):
    return await compute_overview(repo)
