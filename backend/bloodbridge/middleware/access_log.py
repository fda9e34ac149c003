import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("bloodbridge.access")

class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        identity = getattr(request.state, "identity", None)
        logger.info(
            "%s %s -> %s (%dms) uid=%s",
            request.method,
            request.url.path,
            response.status_code,
            int((time.perf_counter() - start) * 1000),
            identity.uid if identity else "-",
        )
        return response
