# bloodbridge/core/security.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import firebase_admin
import jwt
from fastapi import HTTPException
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from firebase_admin.exceptions import FirebaseError
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from bloodbridge.core.config import settings

logger = logging.getLogger(__name__)

class Identity(BaseModel):
    uid: str
    email: Optional[str] = None
    claims: Dict[str, Any] = Field(default_factory=dict)

class InvalidToken(Exception):
    pass

def bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized: No token provided")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized: No token provided")
    return token

class FirebaseVerifier:
    """Checks Firebase ID tokens with the Admin SDK."""

    def __init__(self, credentials_path: str):
        if not firebase_admin._apps:
            firebase_admin.initialize_app(credentials.Certificate(credentials_path))
            logger.info("Firebase Admin SDK initialized")
        self._app = firebase_admin.get_app()

    async def verify(self, token: str) -> Identity:
        try:
            decoded = await run_in_threadpool(firebase_auth.verify_id_token, token, self._app)
        except (ValueError, FirebaseError) as ex:
            raise InvalidToken(str(ex)) from ex
        return Identity(uid=decoded["uid"], email=decoded.get("email"), claims=decoded)

class JWTVerifier:
    """HS256 tokens signed with JWT_SECRET; for local runs and tests."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    async def verify(self, token: str) -> Identity:
        try:
            data = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.InvalidTokenError as ex:
            raise InvalidToken(str(ex)) from ex
        uid = data.get("sub") or data.get("uid")
        if not uid:
            raise InvalidToken("token has no subject")
        return Identity(uid=uid, email=data.get("email"), claims=data)

def create_token(payload: Dict[str, Any], minutes: int = 60) -> str:
    payload = dict(payload)
    payload["exp"] = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)

def build_verifier(cfg=settings):
    if cfg.auth_provider == "jwt":
        return JWTVerifier(cfg.jwt_secret, cfg.jwt_alg)
    return FirebaseVerifier(cfg.firebase_credentials)

async def authenticate(authorization: Optional[str], verifier) -> Identity:
    token = bearer_token(authorization)
    try:
        return await verifier.verify(token)
    except InvalidToken as ex:
        logger.info("Rejected bearer token: %s", ex)
        raise HTTPException(status_code=401, detail="Unauthorized: Invalid token")
