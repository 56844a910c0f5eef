"""
Polar performance logic.

Normalizes ORC performance tables, finds optimal upwind/downwind angles,
builds reaching targets and caches built models.
"""

from .builder import build_polar_model
from .cache import CacheStats, PolarCache, derive_cache_key
from .errors import (
    AxisMismatch,
    InsufficientPolarData,
    InvalidRequest,
    MalformedPayload,
    PolarError,
)
from .interpolation import interpolate
from .models import (
    REACHING_ANGLES,
    AngleSource,
    BoatIdentity,
    CacheEntry,
    Direction,
    DirectionResult,
    OptimalReport,
    OptimalRequest,
    OptimalResult,
    PolarModel,
    ReachingEntry,
    SourceInfo,
)
from .reaching import build_reaching_table
from .service import FetchedPayload, PolarDataClient, PolarService
from .solver import compute_optimal, solve_direction
from .units import SpeedUnit, normalize_speed_series

__all__ = [
    "build_polar_model",
    "CacheStats",
    "PolarCache",
    "derive_cache_key",
    "AxisMismatch",
    "InsufficientPolarData",
    "InvalidRequest",
    "MalformedPayload",
    "PolarError",
    "interpolate",
    "REACHING_ANGLES",
    "AngleSource",
    "BoatIdentity",
    "CacheEntry",
    "Direction",
    "DirectionResult",
    "OptimalReport",
    "OptimalRequest",
    "OptimalResult",
    "PolarModel",
    "ReachingEntry",
    "SourceInfo",
    "build_reaching_table",
    "FetchedPayload",
    "PolarDataClient",
    "PolarService",
    "compute_optimal",
    "solve_direction",
    "SpeedUnit",
    "normalize_speed_series",
]
