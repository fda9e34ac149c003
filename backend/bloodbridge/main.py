# bloodbridge/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from bloodbridge.core.config import settings
from bloodbridge.core.logging import configure_logging
from bloodbridge.core.security import build_verifier
from bloodbridge.deps import get_repo
from bloodbridge.middleware.access_log import AccessLogMiddleware
from bloodbridge.routers import blogs, donation_requests, fundings, stats, users
from bloodbridge.services.payments import StripeGateway

logger = logging.getLogger(__name__)

async def build_repo(cfg=settings):
    if cfg.store_backend == "memory":
        from bloodbridge.repos.inmemory import InMemoryRepo
        return InMemoryRepo()

    from bloodbridge.core.db import get_db
    from bloodbridge.core.indexes import ensure_indexes
    from bloodbridge.repos.mongo import MongoRepo

    db = get_db()
    await ensure_indexes(db)
    return MongoRepo(db)

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    app.state.repo = await build_repo(settings)
    app.state.verifier = build_verifier(settings)
    app.state.gateway = StripeGateway(settings.stripe_secret_key, settings.payment_currency)
    logger.info(
        "%s started (store=%s, auth=%s, strict_auth=%s)",
        settings.app_name, settings.store_backend, settings.auth_provider, settings.strict_auth,
    )
    yield
    app.state.repo.close()
    logger.info("%s stopped", settings.app_name)

app = FastAPI(lifespan=lifespan, title=settings.app_name)

app.add_middleware(AccessLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------- Error mapping ----------------
@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    # malformed bodies are plain 400s for this API
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

@app.exception_handler(PyMongoError)
async def store_error(request: Request, exc: PyMongoError):
    logger.error("Store error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

# ---------------- Include routers ----------------
app.include_router(users.router)               # /users
app.include_router(donation_requests.router)   # /donation-requests
app.include_router(stats.router)               # /admin-stats
app.include_router(blogs.router)               # /blogs
app.include_router(fundings.router)            # /create-payment-intent, /fundings

# Liveness
@app.get("/")
def root():
    return {"success": True, "message": "BloodBridge server is running"}

@app.get("/health")
async def health(repo=Depends(get_repo)):
    connected = await repo.ping()
    return {"status": "healthy", "database": "connected" if connected else "disconnected"}
