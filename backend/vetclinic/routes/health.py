"""
VetClinic Backend — Health Check Routes
=========================================

What:  Liveness text at `/` and a dependency-aware health check at `/health`.
Who:   Docker health checks, load balancers, uptime monitors.

Status levels:
    - healthy:   document store answers a ping (HTTP 200)
    - unhealthy: document store unreachable (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Depends, Response
from fastapi.responses import PlainTextResponse

from vetclinic import __version__
from vetclinic.dependencies import get_store
from vetclinic.schemas.common import HealthResponse
from vetclinic.store.base import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/",
    response_class=PlainTextResponse,
    summary="Liveness",
    include_in_schema=False,
)
async def root() -> str:
    return "Server on"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Document store unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(
    response: Response,
    store: DocumentStore = Depends(get_store),
) -> HealthResponse:
    """Ping the document store and report the aggregate status."""
    connected = await store.ping()
    if not connected:
        logger.warning("Health check: document store unreachable")
        response.status_code = 503

    return HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
