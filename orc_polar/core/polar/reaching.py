"""
Target speeds at the fixed reaching angles.

Each angle is independent: a missing or unusable series just leaves that
angle out of the table.

VMG here is always `speed * cos(angle)`, the upwind projection, even past
90 degrees where it turns negative. Consumers of the reaching table have
always read it that way, so it stays.
"""

import math
from typing import Iterable

from .interpolation import interpolate
from .models import REACHING_ANGLES, PolarModel, ReachingEntry


def build_reaching_table(
    model: PolarModel,
    wind: float,
    angles: Iterable[int] = REACHING_ANGLES,
) -> dict[str, ReachingEntry]:
    """Map of angle label ("52", "60", ...) to target speed and VMG."""
    table: dict[str, ReachingEntry] = {}

    for angle in angles:
        series = model.speeds_at_angle(float(angle))
        if series is None:
            continue

        speed = interpolate(series, model.wind_steps, wind)
        if not math.isfinite(speed) or speed <= 0:
            continue

        vmg = speed * math.cos(math.radians(angle))
        table[str(angle)] = ReachingEntry(
            angle=float(angle),
            target_speed=round(speed, 2),
            vmg=round(vmg, 2),
        )

    return table
