"""
Health resource: liveness and readiness probes.

Endpoints:
    GET /health         Runs every dependency check
    GET /health/ready   503 unless all checks are healthy
    GET /health/live    Always 200 while the process is running

The :class:`HealthMonitor` comes from the service container via the bridge.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from restbridge.api.deps import Inject
from restbridge.api.resources import register_resource
from restbridge.core.health import HealthMonitor, HealthResponse, LivenessResponse

router = APIRouter(prefix="/health", tags=["health"])

Monitor = Annotated[HealthMonitor, Inject(HealthMonitor)]


@router.get("", response_model=HealthResponse)
async def health(monitor: Monitor) -> JSONResponse:
    """Primary health: runs all dependency checks."""
    body = await monitor.report()
    code = 503 if body.status == "unhealthy" else 200
    return JSONResponse(content=body.model_dump(), status_code=code)


@router.get("/ready", response_model=HealthResponse)
async def readiness(monitor: Monitor) -> JSONResponse:
    """Readiness probe: 503 if any dependency is not healthy."""
    body = await monitor.report()
    code = 503 if body.status != "healthy" else 200
    return JSONResponse(content=body.model_dump(), status_code=code)


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness probe: always 200 if the process is running."""
    return LivenessResponse()


register_resource(router)
