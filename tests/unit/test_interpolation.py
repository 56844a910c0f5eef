"""
Unit tests for interpolation along the wind-step axis.
"""

import pytest

from orc_polar.core.polar.errors import AxisMismatch
from orc_polar.core.polar.interpolation import interpolate, interpolate_or_none, lerp


WIND_STEPS = [6.0, 8.0, 10.0, 12.0, 14.0, 16.0, 20.0]
SERIES = [4.31, 5.17, 5.83, 6.27, 6.52, 6.66, 6.79]


class TestBoundaryClamp:
    """Outside the axis the value is held flat."""

    @pytest.mark.parametrize("wind", [0.0, 2.0, 5.99, 6.0])
    def test_at_or_below_first_step_returns_first_value(self, wind):
        assert interpolate(SERIES, WIND_STEPS, wind) == SERIES[0]

    @pytest.mark.parametrize("wind", [20.0, 25.0, 50.0])
    def test_at_or_above_last_step_returns_last_value(self, wind):
        assert interpolate(SERIES, WIND_STEPS, wind) == SERIES[-1]

    def test_single_step_axis_is_constant(self):
        """With one step, every query returns that step's value."""
        assert interpolate([4.2], [10.0], 3.0) == 4.2
        assert interpolate([4.2], [10.0], 15.0) == 4.2


class TestInteriorInterpolation:
    """Tests inside the axis range."""

    @pytest.mark.parametrize("index", range(1, len(WIND_STEPS) - 1))
    def test_interior_step_returns_exact_value(self, index):
        """Querying a step exactly must not drift through interpolation arithmetic."""
        assert interpolate(SERIES, WIND_STEPS, WIND_STEPS[index]) == SERIES[index]

    def test_midpoint(self):
        """Halfway between two steps gives the average."""
        assert interpolate([5.0, 6.0], [10.0, 16.0], 13.0) == pytest.approx(5.5)

    def test_uneven_spacing(self):
        """The 16-20 knot interval is twice as wide as the others."""
        value = interpolate(SERIES, WIND_STEPS, 17.0)
        assert value == pytest.approx(6.66 + (6.79 - 6.66) * 0.25)


class TestAxisMismatch:
    """Series must be aligned with the axis."""

    def test_length_mismatch_raises(self):
        with pytest.raises(AxisMismatch, match="does not match"):
            interpolate([1.0, 2.0], WIND_STEPS, 10.0)

    def test_or_none_treats_mismatch_as_absent(self):
        assert interpolate_or_none([1.0, 2.0], WIND_STEPS, 10.0) is None

    def test_or_none_treats_missing_series_as_absent(self):
        assert interpolate_or_none(None, WIND_STEPS, 10.0) is None

    def test_or_none_interpolates_aligned_series(self):
        assert interpolate_or_none(SERIES, WIND_STEPS, 12.0) == 6.27


def test_lerp():
    assert lerp(40.0, 50.0, 0.25) == 42.5
