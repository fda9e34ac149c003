# bloodbridge/routers/fundings.py
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from bloodbridge.core.policy import authorize
from bloodbridge.core.security import Identity
from bloodbridge.deps import get_gateway, get_repo
from bloodbridge.schemas import FundingIn, FundingPage, FundingTotal, PaymentIntentIn, PaymentIntentOut
from bloodbridge.services.payments import PaymentError
from bloodbridge.services.units import to_minor_units

logger = logging.getLogger(__name__)

router = APIRouter(tags=["fundings"], dependencies=[Depends(authorize)])

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

def _positive_int(raw: Optional[str], default: int) -> int:
    # "abc", "0" and missing all fall back to the default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default

@router.post("/create-payment-intent", response_model=PaymentIntentOut)
async def create_payment_intent(body: PaymentIntentIn, gateway=Depends(get_gateway)):
    try:
        secret = await gateway.create_payment_intent(to_minor_units(body.amount))
    except PaymentError:
        logger.exception("Stripe payment intent error")
        raise HTTPException(status_code=500, detail="Failed to create payment intent")
    return {"clientSecret": secret}

@router.post("/fundings")
async def record_funding(body: FundingIn, identity: Identity = Depends(authorize), repo=Depends(get_repo)):
    doc = {
        "name": body.name,
        "email": identity.email,
        "amount": body.amount,
        "createdAt": datetime.now(timezone.utc),
    }
    result = await repo.insert_funding(doc)
    logger.info("Recorded funding of %s from %s", body.amount, identity.email)
    return {"success": True, "result": result}

@router.get("/fundings", response_model=FundingPage)
async def list_fundings(
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    repo=Depends(get_repo),
):
    page_n = _positive_int(page, DEFAULT_PAGE)
    limit_n = _positive_int(limit, DEFAULT_LIMIT)
    skip = (page_n - 1) * limit_n
    return {
        "total": await repo.count_fundings(),
        "page": page_n,
        "limit": limit_n,
        "funds": await repo.list_fundings(skip, limit_n),
    }

@router.get("/fundings/total", response_model=FundingTotal)
async def funding_total(repo=Depends(get_repo)):
    return {"total": await repo.total_funding()}
