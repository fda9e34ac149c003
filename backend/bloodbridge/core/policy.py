# bloodbridge/core/policy.py
import logging
from typing import Dict, Literal, Optional, Tuple

from fastapi import Depends, Header, HTTPException, Request

from bloodbridge.core.config import settings
from bloodbridge.core.security import Identity, authenticate
from bloodbridge.deps import get_repo, get_verifier

logger = logging.getLogger(__name__)

Capability = Literal["public", "authenticated", "admin"]

PUBLIC: Capability = "public"
AUTHENTICATED: Capability = "authenticated"
ADMIN: Capability = "admin"

# (method, route template) -> what the caller must prove. Unlisted routes are public.
ROUTE_POLICY: Dict[Tuple[str, str], Capability] = {
    ("GET", "/users"): AUTHENTICATED,
    ("PATCH", "/users/profile/{email}"): AUTHENTICATED,

    ("GET", "/donation-requests"): AUTHENTICATED,
    ("PATCH", "/donation-requests/status/{request_id}"): AUTHENTICATED,

    ("GET", "/admin-stats"): ADMIN,

    ("POST", "/blogs"): ADMIN,
    ("PATCH", "/blogs/status/{blog_id}"): ADMIN,
    ("DELETE", "/blogs/{blog_id}"): ADMIN,

    ("POST", "/create-payment-intent"): AUTHENTICATED,
    ("POST", "/fundings"): AUTHENTICATED,
    ("GET", "/fundings"): AUTHENTICATED,
    ("GET", "/fundings/total"): AUTHENTICATED,
}

# Applied on top of ROUTE_POLICY when STRICT_AUTH is on
STRICT_POLICY: Dict[Tuple[str, str], Capability] = {
    ("PATCH", "/users/{user_id}"): ADMIN,
    ("PATCH", "/users/status/{user_id}"): ADMIN,
    ("PATCH", "/users/role/{user_id}"): ADMIN,

    ("POST", "/donation-requests"): AUTHENTICATED,
    ("PATCH", "/donation-requests/{request_id}"): AUTHENTICATED,
    ("PUT", "/donation-requests/{request_id}"): AUTHENTICATED,
    ("DELETE", "/donation-requests/{request_id}"): AUTHENTICATED,
}

def required_capability(method: str, path: str, strict: bool = False) -> Capability:
    key = (method.upper(), path)
    if strict and key in STRICT_POLICY:
        return STRICT_POLICY[key]
    return ROUTE_POLICY.get(key, PUBLIC)

async def ensure_admin(identity: Identity, repo) -> None:
    if not identity.email:
        raise HTTPException(status_code=403, detail="No email found in token")
    user = await repo.find_user_by_email(identity.email)
    if not user or user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Access denied: Admins only")

async def authorize(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    repo=Depends(get_repo),
    verifier=Depends(get_verifier),
) -> Optional[Identity]:
    route = request.scope.get("route")
    path = getattr(route, "path", request.url.path)
    capability = required_capability(request.method, path, settings.strict_auth)
    if capability == PUBLIC:
        return None

    identity = await authenticate(authorization, verifier)
    request.state.identity = identity
    if capability == ADMIN:
        await ensure_admin(identity, repo)
    return identity
