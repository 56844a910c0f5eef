"""
Speed unit normalization.

ORC publishes allowances as seconds per nautical mile, but some payloads
(and hand-made test tables) already carry knots. Without a tag we guess
from the magnitude: realistic boat speeds stay far below 100 knots while
realistic allowances stay far above 100 s/NM.
"""

from enum import Enum
from statistics import fmean
from typing import Optional, Sequence

SECONDS_PER_HOUR = 3600.0

# Mean above which a series is read as seconds per nautical mile
DURATION_MEAN_THRESHOLD = 100.0


class SpeedUnit(Enum):
    SECONDS_PER_NM = "sec_per_nm"
    KNOTS = "knots"


def seconds_per_nm_to_knots(values: Sequence[float]) -> list[float]:
    """Convert s/NM to knots. Non-positive durations become 0."""
    return [round(SECONDS_PER_HOUR / s, 2) if s > 0 else 0.0 for s in values]


def detect_unit(values: Sequence[float]) -> SpeedUnit:
    """Guess whether a series is a duration or a speed."""
    if values and fmean(values) > DURATION_MEAN_THRESHOLD:
        return SpeedUnit.SECONDS_PER_NM
    return SpeedUnit.KNOTS


def normalize_speed_series(
    values: Sequence[float],
    unit: Optional[SpeedUnit] = None,
) -> list[float]:
    """
    Return the series in knots, rounded to 2 decimals, with non-positive
    entries clamped to 0.

    An explicit `unit` wins over the magnitude heuristic.
    """
    if not values:
        return []
    if unit is None:
        unit = detect_unit(values)
    if unit is SpeedUnit.SECONDS_PER_NM:
        return seconds_per_nm_to_knots(values)
    return [round(v, 2) if v > 0 else 0.0 for v in values]
