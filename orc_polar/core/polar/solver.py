"""
Optimal upwind and downwind angles.

For each direction we try, in order:

1. Direct: ORC's own best angle and VMG series, interpolated at the wind.
2. Estimated: scan the angle-speed table in a plausible angle range and
   pick the angle with the best VMG, refining between neighbouring angles
   at fixed fractions. No derivatives, just sampling. The error is bounded
   by how well a straight line fits the speed curve between two angles.
3. Unavailable: neither of the above produced a positive VMG.

Target boat speed is always derived back from the winning VMG and angle,
so the reported speed and VMG agree even for estimated angles.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from .errors import InsufficientPolarData
from .interpolation import interpolate, interpolate_or_none, lerp
from .models import AngleSource, Direction, DirectionResult, OptimalResult, PolarModel
from .reaching import build_reaching_table

logger = logging.getLogger(__name__)


# Plausible angle ranges (degrees, inclusive) for the estimated path
ANGLE_RANGES: dict[Direction, tuple[float, float]] = {
    Direction.UPWIND: (35.0, 75.0),
    Direction.DOWNWIND: (135.0, 179.0),
}

REFINEMENT_FRACTIONS: tuple[float, ...] = (0.25, 0.5, 0.75)


def upwind_vmg(angle: float, speed: float) -> float:
    return speed * math.cos(math.radians(angle))


def downwind_vmg(angle: float, speed: float) -> float:
    return speed * math.cos(math.radians(180.0 - angle))


def project_vmg(direction: Direction, angle: float, speed: float) -> float:
    """Component of boat speed along the true-wind axis for a direction."""
    if direction is Direction.UPWIND:
        return upwind_vmg(angle, speed)
    return downwind_vmg(angle, speed)


def target_speed(direction: Direction, angle: float, vmg: float) -> Optional[float]:
    """Inverse projection: boat speed that yields `vmg` at `angle`."""
    projection = project_vmg(direction, angle, 1.0)
    if projection <= 1e-9:
        return None
    return vmg / projection


def _usable(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


@dataclass(frozen=True)
class Candidate:
    """An angle, its boat speed and the resulting VMG."""
    angle: float
    speed: float
    vmg: float


def direct_optimum(
    model: PolarModel,
    wind: float,
    direction: Direction,
) -> Optional[Candidate]:
    """Read the optimum from the direct angle/VMG series, if present."""
    angles, vmgs = model.direct_series(direction)
    angle = interpolate_or_none(angles, model.wind_steps, wind)
    vmg = interpolate_or_none(vmgs, model.wind_steps, wind)
    if angle is None or not math.isfinite(angle) or not _usable(vmg):
        return None
    speed = target_speed(direction, angle, vmg)
    if speed is None:
        return None
    return Candidate(angle=angle, speed=speed, vmg=vmg)


def scan_angles(
    model: PolarModel,
    wind: float,
    direction: Direction,
) -> list[Optional[Candidate]]:
    """
    Every table angle inside the direction's range, in ascending order.

    An angle whose series is misaligned or whose speed is not positive
    stays in the list as None, so it still separates its neighbours.
    """
    low, high = ANGLE_RANGES[direction]
    scanned: list[Optional[Candidate]] = []
    for angle in sorted(a for a in model.angle_speeds if low <= a <= high):
        series = model.speeds_at_angle(angle)
        speed = interpolate(series, model.wind_steps, wind) if series is not None else None
        if not _usable(speed):
            scanned.append(None)
            continue
        scanned.append(
            Candidate(angle=angle, speed=speed, vmg=project_vmg(direction, angle, speed))
        )
    return scanned


def sample_candidates(
    model: PolarModel,
    wind: float,
    direction: Direction,
) -> list[Candidate]:
    """Angles from the table inside the direction's range, with a usable speed."""
    return [c for c in scan_angles(model, wind, direction) if c is not None]


def estimate_optimum(
    model: PolarModel,
    wind: float,
    direction: Direction,
) -> Optional[Candidate]:
    """
    Best-VMG angle from the angle-speed table, refined between neighbours.

    Refinement only runs between two adjacent table angles that both have
    a usable speed; a gap around an unusable angle is never bridged.
    """
    scanned = scan_angles(model, wind, direction)
    best: Optional[Candidate] = None

    for current, following in zip(scanned, scanned[1:] + [None]):
        if current is None:
            continue
        if best is None or current.vmg > best.vmg:
            best = current
        if following is None:
            continue
        for t in REFINEMENT_FRACTIONS:
            angle = lerp(current.angle, following.angle, t)
            speed = lerp(current.speed, following.speed, t)
            vmg = project_vmg(direction, angle, speed)
            if vmg > best.vmg:
                best = Candidate(angle=angle, speed=speed, vmg=vmg)

    if best is None or not _usable(best.vmg):
        return None
    return best


def solve_direction(
    model: PolarModel,
    wind: float,
    direction: Direction,
    notes: Optional[list[str]] = None,
) -> Optional[DirectionResult]:
    """
    Optimal angle for one direction, or None if it cannot be determined.

    Appends a note to `notes` when the estimated path was used or when the
    direction turned out unavailable.
    """
    notes = notes if notes is not None else []

    best = direct_optimum(model, wind, direction)
    source = AngleSource.DIRECT

    if best is None:
        best = estimate_optimum(model, wind, direction)
        source = AngleSource.ESTIMATED
        if best is not None:
            notes.append(f"{direction.label} angle/VMG estimated from angle-speed table")

    if best is None:
        notes.append(f"{direction.label} data unavailable")
        return None

    speed = target_speed(direction, best.angle, best.vmg)
    if speed is None:
        notes.append(f"{direction.label} data unavailable")
        return None

    return DirectionResult(
        angle=round(best.angle, 1),
        vmg=round(best.vmg, 2),
        target_speed=round(speed, 2),
        source=source,
    )


def compute_optimal(model: PolarModel, wind: float) -> OptimalResult:
    """
    Upwind, downwind and reaching targets at one true wind speed.

    A single unavailable direction degrades to None with a note. If both
    are unavailable there is nothing useful to say, and we raise
    InsufficientPolarData.
    """
    notes: list[str] = []

    upwind = solve_direction(model, wind, Direction.UPWIND, notes)
    downwind = solve_direction(model, wind, Direction.DOWNWIND, notes)

    if upwind is None and downwind is None:
        raise InsufficientPolarData(
            "Insufficient data to compute optimal angles/VMG"
        )

    result = OptimalResult(
        upwind=upwind,
        downwind=downwind,
        reaching=build_reaching_table(model, wind),
        notes=notes,
    )

    logger.debug(
        "Computed optimal angles",
        extra={
            "tws": wind,
            "upwind": upwind.angle if upwind else None,
            "downwind": downwind.angle if downwind else None,
            "reaching": sorted(result.reaching),
        }
    )

    return result
