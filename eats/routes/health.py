"""
Eats Server: Health Check Route
==================================

What:  Liveness endpoint for load balancers and container health checks.
How:   Always answers 200 with a static payload; it does not touch the
       database, so a database outage never takes the process out of rotation.
"""

import logging

from fastapi import APIRouter

from eats.schemas.place import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service liveness check",
)
async def health_check() -> HealthResponse:
    logger.debug("health_check")
    return HealthResponse(result="Server is up and running")
