"""
Bookmark Saver Backend — Health Check Route
============================================

What:  Liveness endpoint for monitoring and load balancer probes.
How:   Always answers 200 with status "ok" while the process serves requests,
       and reports store reachability separately in `database`.
Who:   Called by Docker health checks and the browser client.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from bookmark_saver import __version__
from bookmark_saver.schemas.bookmark import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    """
    Report liveness plus a lightweight store ping.

    A store outage does not change the status code: the process is alive and
    can still answer, which is what the probe asks.
    """
    store = getattr(request.app.state, "store", None)
    database = "disconnected"
    if store is not None and await store.ping():
        database = "connected"

    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        database=database,
    )
