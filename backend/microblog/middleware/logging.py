"""
Microblog Backend: Access Logging Middleware
===============================================

What:  One DEBUG line per HTTP request with method, path, status and duration.
Why:   Diagnostic trace for latency and routing problems, enabled with
       LOG_LEVEL=DEBUG.
How:   Times the downstream call and logs to the `microblog.access` logger.
When:  Inside RequestIDMiddleware, so the request ID is already set.

Relationship to outcome logging:
    The posts routes write the per-request outcome entry ("Created post ...",
    "Failed to update post ...") on `microblog.posts` at INFO/ERROR. The
    access line stays at DEBUG so a default INFO deployment records exactly
    one entry per request outcome.

What we log vs what we DON'T log:
    Log: method, path, status, duration, client IP, request ID
    Don't log: request bodies (the outcome entry already carries the post)
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from microblog.middleware.request_id import request_id_var

logger = logging.getLogger("microblog.access")

# Paths polled by probes or browsers; tracing them only adds noise
_SKIPPED_PATHS = ("/health", "/api-docs")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs a timing line for each request that is not a health or docs request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(_SKIPPED_PATHS):
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            response.status_code,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
