"""
Microblog Backend: Health Check Route
========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Pings MongoDB; the service is healthy only if the store answers.
Who:   Called by container health checks and load balancers.

Status levels:
    - healthy:   MongoDB answered the ping (HTTP 200)
    - unhealthy: MongoDB unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response, status
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from microblog import __version__
from microblog.database import get_mongo_client, ping
from microblog.schemas.post import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Process start, for uptime reporting
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
    description="Returns the health of the service and its MongoDB connection.",
)
async def health_check(
    response: Response,
    client: AsyncMongoClient = Depends(get_mongo_client),
) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await ping(client)
    except PyMongoError as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
