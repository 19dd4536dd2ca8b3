"""
Arboriza Backend - Health Check Route
======================================

What:  Liveness probe for the process supervisor / load balancer.
How:   Always answers 200 {"status": "healthy"}. It deliberately does not
       touch the store: a database outage must not get the process restarted.
"""

from fastapi import APIRouter

from arboriza import __version__
from arboriza.schemas.common import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=__version__)
