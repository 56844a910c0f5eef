"""
Liveness and readiness probes.

- GET /health        Process is up; reports polar cache counters
- GET /health/ready  Config is complete and a known boat can be fetched from ORC

Liveness never touches the network. Readiness does, and answers 503
when ORC is unreachable.
"""

import logging
from typing import Any

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from ... import __version__
from ..dependencies import OrcClientDep, PolarCacheDep, SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """
    Health check response.

    `details` carries the mock flag and cache counters.
    """
    status: str
    version: str
    details: dict[str, Any] = {}


class ReadinessCheck(BaseModel):
    """Individual readiness check result."""
    name: str
    status: str  # "ok" or "error"
    error: str | None = None
    details: dict[str, Any] = {}


class ReadinessResponse(BaseModel):
    """Readiness check response with details."""
    status: str  # "ready" or "not_ready"
    version: str
    checks: list[ReadinessCheck]


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns 200 if the service is running. Does not call ORC.",
)
async def health_check(settings: SettingsDep, cache: PolarCacheDep) -> HealthResponse:
    """
    Liveness: answers as long as the process can serve requests.

    Fast and local only: reports the cache counters but never touches
    the network.
    """
    stats = cache.stats()
    return HealthResponse(
        status="ok",
        version=__version__,
        details={
            "service": "ORC",
            "mock_mode": settings.orc_mock_mode,
            "cache": {
                "size": stats.size,
                "maxSize": stats.max_size,
                "hitRate": stats.hit_rate,
                "totalHits": stats.hits,
                "totalMisses": stats.misses,
            },
        }
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Returns 200 if the service can handle traffic. Fetches a known boat from ORC.",
    responses={
        503: {
            "description": "Service not ready",
            "model": ReadinessResponse,
        }
    },
)
async def readiness_check(
    response: Response,
    settings: SettingsDep,
    client: OrcClientDep,
) -> ReadinessResponse:
    """
    Readiness: can this instance answer optimal-angle requests?

    Checks configuration and ORC connectivity. Returns 503 if any check
    fails, which tells load balancers not to route traffic here.
    """
    checks: list[ReadinessCheck] = []

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        checks.append(ReadinessCheck(
            name="configuration",
            status="error",
            error=f"Missing required fields: {', '.join(missing_fields)}"
        ))
    else:
        checks.append(ReadinessCheck(name="configuration", status="ok"))

    connectivity = await client.check_connectivity(settings.orc_connectivity_ref_no)
    if connectivity.get("success"):
        checks.append(ReadinessCheck(name="orc", status="ok", details=connectivity))
    else:
        checks.append(ReadinessCheck(
            name="orc",
            status="error",
            error=connectivity.get("error", "unknown error"),
        ))

    all_ok = all(c.status == "ok" for c in checks)
    if not all_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        logger.warning(
            "Readiness check failed",
            extra={
                "checks": [
                    {"name": c.name, "status": c.status, "error": c.error}
                    for c in checks
                ]
            }
        )

    return ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        version=__version__,
        checks=checks,
    )
