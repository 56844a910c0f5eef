"""
Domain models for polar performance calculations.

These models describe a boat's normalized performance table and the answers
we compute from it. They have no dependencies on FastAPI, httpx or the
shape of the ORC JSON. The builder translates the upstream payload into
these types, and everything downstream works only with them.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence

from .errors import InvalidRequest, MalformedPayload


# Wind steps ORC publishes when a payload omits its own axis
DEFAULT_WIND_STEPS: tuple[float, ...] = (6.0, 8.0, 10.0, 12.0, 14.0, 16.0, 20.0)

# Angles at which target speeds are reported directly
REACHING_ANGLES: tuple[int, ...] = (52, 60, 75, 90, 110, 120, 135, 150)

MIN_WIND_SPEED = 2.0
MAX_WIND_SPEED = 50.0


class Direction(Enum):
    """Which side of the wind we are optimizing for."""
    UPWIND = "upwind"
    DOWNWIND = "downwind"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class AngleSource(Enum):
    """How an optimal angle was obtained."""
    DIRECT = "direct"
    ESTIMATED = "estimated"


@dataclass(frozen=True)
class PolarModel:
    """
    Normalized performance table for one boat.

    Every series runs parallel to `wind_steps`. A series whose length does
    not match the axis is kept as-is but treated as absent by `aligned()`,
    so a partial upstream payload degrades instead of failing.
    """
    wind_steps: tuple[float, ...]
    upwind_angles: Optional[tuple[float, ...]] = None
    upwind_vmg: Optional[tuple[float, ...]] = None
    downwind_angles: Optional[tuple[float, ...]] = None
    downwind_vmg: Optional[tuple[float, ...]] = None
    angle_speeds: Mapping[float, tuple[float, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.wind_steps:
            raise MalformedPayload("Wind-step axis is empty")
        for low, high in zip(self.wind_steps, self.wind_steps[1:]):
            if not high > low:
                raise MalformedPayload("Wind-step axis must be strictly increasing")
        # Models are shared through the cache; take a read-only copy of the table
        object.__setattr__(
            self,
            "angle_speeds",
            MappingProxyType({a: tuple(s) for a, s in self.angle_speeds.items()}),
        )

    def aligned(self, series: Optional[Sequence[float]]) -> Optional[Sequence[float]]:
        """Return the series if it matches the wind axis, otherwise None."""
        if series is None or len(series) != len(self.wind_steps):
            return None
        return series

    def direct_series(
        self,
        direction: Direction,
    ) -> tuple[Optional[Sequence[float]], Optional[Sequence[float]]]:
        """Direct (angles, vmg) pair for a direction, each None when unusable."""
        if direction is Direction.UPWIND:
            return self.aligned(self.upwind_angles), self.aligned(self.upwind_vmg)
        return self.aligned(self.downwind_angles), self.aligned(self.downwind_vmg)

    def speeds_at_angle(self, angle: float) -> Optional[Sequence[float]]:
        return self.aligned(self.angle_speeds.get(angle))

    @property
    def has_speed_data(self) -> bool:
        """True when at least one series can feed the solver."""
        if self.aligned(self.upwind_vmg) or self.aligned(self.downwind_vmg):
            return True
        return any(self.aligned(s) for s in self.angle_speeds.values())


@dataclass(frozen=True)
class DirectionResult:
    """Optimal angle, VMG and target boat speed for one direction."""
    angle: float
    vmg: float
    target_speed: float
    source: AngleSource = AngleSource.DIRECT


@dataclass(frozen=True)
class ReachingEntry:
    """Target boat speed at a fixed reaching angle."""
    angle: float
    target_speed: float
    vmg: float


@dataclass
class OptimalResult:
    """
    Everything computed for one wind speed.

    A direction is None when it could not be determined. `notes` records
    every fallback, in the order it happened, so callers can tell estimated
    numbers from numbers read straight off the table.
    """
    upwind: Optional[DirectionResult] = None
    downwind: Optional[DirectionResult] = None
    reaching: dict[str, ReachingEntry] = field(default_factory=dict)
    notes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BoatIdentity:
    """The identifying fields a caller can give for a boat."""
    ref_no: Optional[str] = None
    sail_no: Optional[str] = None
    yacht_name: Optional[str] = None
    country_id: Optional[str] = None

    def validate(self) -> None:
        if not (self.ref_no or self.sail_no or self.yacht_name):
            raise InvalidRequest(
                "At least one identifier is required: refNo, sailNo or yachtName"
            )
        if self.yacht_name and not (self.ref_no or self.sail_no or self.country_id):
            raise InvalidRequest("countryId is required when yachtName is used alone")

    def as_dict(self) -> dict[str, Optional[str]]:
        return {
            "refNo": self.ref_no,
            "sailNo": self.sail_no,
            "yachtName": self.yacht_name,
            "countryId": self.country_id,
        }


@dataclass(frozen=True)
class OptimalRequest:
    """A request for optimal angles at one true wind speed."""
    wind_speed: float
    identity: BoatIdentity

    def validate(self) -> None:
        if not math.isfinite(self.wind_speed) or self.wind_speed <= 0:
            raise InvalidRequest("tws must be a positive number")
        if not MIN_WIND_SPEED <= self.wind_speed <= MAX_WIND_SPEED:
            raise InvalidRequest(
                f"tws must be between {MIN_WIND_SPEED:g} and {MAX_WIND_SPEED:g} knots"
            )
        self.identity.validate()


@dataclass(frozen=True)
class CacheEntry:
    """A built model together with the payload it came from."""
    model: PolarModel
    raw_payload: Any
    fetched_at: datetime


@dataclass(frozen=True)
class SourceInfo:
    """Where the polar data behind an answer came from."""
    cached: bool
    fetched_at: datetime
    endpoint: str


@dataclass(frozen=True)
class OptimalReport:
    """The service's answer: the computed result plus its provenance."""
    request: OptimalRequest
    result: OptimalResult
    source: SourceInfo
