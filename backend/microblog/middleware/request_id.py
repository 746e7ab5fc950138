"""
Microblog Backend: Request ID Middleware
===========================================

What:  Assigns a correlation ID to each incoming request and echoes it back.
Why:   Every log entry and error body from one request carries the same ID,
       so a client-reported failure can be matched to the server log.
How:   Reads X-Request-ID or generates a short UUID, stores it in a
       ContextVar and request.state, and sets the response header.
When:  Outermost middleware (runs before all other processing).
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# What: Coroutine-local storage for the current request ID
# Why ContextVar: concurrent requests share one thread under asyncio
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Use the client's X-Request-ID header if present
        2. Otherwise generate the first 8 characters of a UUID4
        3. Store in the ContextVar and in request.state
        4. Add to the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid

        return response
