"""
ORC optimal angle endpoints.

- GET  /optimal      Optimal upwind/downwind angles and reaching targets
- GET  /cache/stats  Polar cache counters
- POST /cache/clear  Drop every cached polar

Core errors are translated to status codes here and nowhere else:
bad input is the caller's problem (400), missing or unusable polar data
means the boat cannot be served (404), and an unreachable ORC is an
upstream failure (502).
"""

import logging
from datetime import datetime, timezone
from typing import Annotated, Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import BaseModel, Field

from ...core.polar.errors import InsufficientPolarData, InvalidRequest, MalformedPayload
from ...core.polar.models import (
    AngleSource,
    BoatIdentity,
    DirectionResult,
    OptimalReport,
    OptimalRequest,
)
from ...infrastructure.orc.client import OrcClientError
from ..dependencies import PolarServiceDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class BoatIdOut(BaseModel):
    """Identity fields echoed back from the request."""
    refNo: Optional[str] = None
    sailNo: Optional[str] = None
    yachtName: Optional[str] = None
    countryId: Optional[str] = None


class DirectionOut(BaseModel):
    """Optimal angle for one direction."""
    twa_deg: float = Field(description="True wind angle, degrees")
    vmg_kt: float = Field(description="Velocity made good, knots")
    target_bs_kt: float = Field(description="Target boat speed, knots")
    estimated: bool = Field(description="True if estimated from the angle-speed table")


class ReachingOut(BaseModel):
    """Target boat speed at a fixed reaching angle."""
    twa_deg: float
    target_bs_kt: float
    vmg_kt: float = Field(description="speed * cos(angle), negative past 90 degrees")


class SourceOut(BaseModel):
    """Where the polar data came from."""
    cached: bool
    fetchedAt: datetime
    endpoint: str
    notes: Optional[str] = Field(default=None, description="Fallbacks used, ';'-separated")


class OptimalResponse(BaseModel):
    """Optimal angles and targets for one boat at one wind speed."""
    boatId: BoatIdOut
    tws: float
    upwind: Optional[DirectionOut] = None
    downwind: Optional[DirectionOut] = None
    reaching: dict[str, ReachingOut] = Field(default_factory=dict)
    source: SourceOut


class CacheStatsOut(BaseModel):
    size: int
    maxSize: int
    hitRate: float
    totalHits: int
    totalMisses: int


class CacheStatsResponse(BaseModel):
    cache: CacheStatsOut
    timestamp: datetime


class CacheClearResponse(BaseModel):
    message: str
    timestamp: datetime


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _parse_tws(raw: Optional[str]) -> float:
    """Parse the tws query value; anything unusable is a 400, never a 422."""
    raw = _clean(raw)
    if raw is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="tws parameter is required",
        )
    try:
        return float(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="tws must be a positive number",
        )


def _direction_out(result: Optional[DirectionResult]) -> Optional[DirectionOut]:
    if result is None:
        return None
    return DirectionOut(
        twa_deg=result.angle,
        vmg_kt=result.vmg,
        target_bs_kt=result.target_speed,
        estimated=result.source is AngleSource.ESTIMATED,
    )


def to_response(report: OptimalReport) -> OptimalResponse:
    """Map the service's report onto the wire format."""
    result = report.result
    return OptimalResponse(
        boatId=BoatIdOut(**report.request.identity.as_dict()),
        tws=report.request.wind_speed,
        upwind=_direction_out(result.upwind),
        downwind=_direction_out(result.downwind),
        reaching={
            label: ReachingOut(
                twa_deg=entry.angle,
                target_bs_kt=entry.target_speed,
                vmg_kt=entry.vmg,
            )
            for label, entry in result.reaching.items()
        },
        source=SourceOut(
            cached=report.source.cached,
            fetchedAt=report.source.fetched_at,
            endpoint=report.source.endpoint,
            notes="; ".join(result.notes) if result.notes else None,
        ),
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/optimal",
    response_model=OptimalResponse,
    summary="Optimal sailing angles",
    description="Optimal upwind/downwind angles, VMG and reaching targets for a boat at a true wind speed",
)
async def get_optimal(
    service: PolarServiceDep,
    tws: Annotated[Optional[str], Query(description="True wind speed, knots (2-50)")] = None,
    ref_no: Annotated[Optional[str], Query(alias="refNo")] = None,
    sail_no: Annotated[Optional[str], Query(alias="sailNo")] = None,
    yacht_name: Annotated[Optional[str], Query(alias="yachtName")] = None,
    country_id: Annotated[Optional[str], Query(alias="countryId")] = None,
) -> OptimalResponse:
    """
    Compute optimal angles for a boat.

    At least one of refNo, sailNo or yachtName is required; yachtName on
    its own also needs countryId.
    """
    wind_speed = _parse_tws(tws)

    request = OptimalRequest(
        wind_speed=wind_speed,
        identity=BoatIdentity(
            ref_no=_clean(ref_no),
            sail_no=_clean(sail_no),
            yacht_name=_clean(yacht_name),
            country_id=_clean(country_id),
        ),
    )

    try:
        report = await service.get_optimal(request)
    except InvalidRequest as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (MalformedPayload, InsufficientPolarData) as e:
        logger.warning(
            "Polar data unavailable",
            extra={"boat": request.identity.as_dict(), "error": str(e)}
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Could not find usable ORC data for the given boat",
        )
    except OrcClientError as e:
        logger.error("ORC API error", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not fetch data from the ORC API",
        )

    return to_response(report)


@router.get(
    "/cache/stats",
    response_model=CacheStatsResponse,
    summary="Polar cache statistics",
)
async def cache_stats(service: PolarServiceDep) -> CacheStatsResponse:
    stats = service.cache_stats()
    return CacheStatsResponse(
        cache=CacheStatsOut(
            size=stats.size,
            maxSize=stats.max_size,
            hitRate=stats.hit_rate,
            totalHits=stats.hits,
            totalMisses=stats.misses,
        ),
        timestamp=datetime.now(timezone.utc),
    )


@router.post(
    "/cache/clear",
    response_model=CacheClearResponse,
    summary="Clear the polar cache",
)
async def clear_cache(service: PolarServiceDep) -> CacheClearResponse:
    service.clear_cache()
    return CacheClearResponse(
        message="ORC cache cleared",
        timestamp=datetime.now(timezone.utc),
    )
