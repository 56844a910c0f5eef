"""
Interpolation along the wind-step axis.

Tables have a handful of wind steps, so a linear scan is plenty.
Outside the axis the value is held flat: we never extrapolate a slope
beyond the wind range the boat was rated for.
"""

from typing import Optional, Sequence

from .errors import AxisMismatch


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b at fraction t."""
    return a + (b - a) * t


def interpolate(
    series: Sequence[float],
    wind_steps: Sequence[float],
    query_wind: float,
) -> float:
    """
    Value of `series` at `query_wind`.

    Raises AxisMismatch if the series and axis lengths differ.
    """
    if len(series) != len(wind_steps) or not wind_steps:
        raise AxisMismatch(
            f"Series of length {len(series)} does not match "
            f"wind axis of length {len(wind_steps)}"
        )

    if query_wind <= wind_steps[0]:
        return series[0]
    if query_wind >= wind_steps[-1]:
        return series[-1]

    for i in range(len(wind_steps) - 1):
        low, high = wind_steps[i], wind_steps[i + 1]
        if low <= query_wind <= high:
            if query_wind == low:
                return series[i]
            if query_wind == high:
                return series[i + 1]
            t = (query_wind - low) / (high - low)
            return lerp(series[i], series[i + 1], t)

    # Only reachable when the axis is not increasing
    raise AxisMismatch("Wind axis is not increasing")


def interpolate_or_none(
    series: Optional[Sequence[float]],
    wind_steps: Sequence[float],
    query_wind: float,
) -> Optional[float]:
    """Like interpolate(), but absent or misaligned series give None."""
    if series is None or len(series) != len(wind_steps):
        return None
    return interpolate(series, wind_steps, query_wind)
