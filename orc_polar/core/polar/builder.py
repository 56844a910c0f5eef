"""
Build a PolarModel from an ORC payload.

This is the only place that knows how ORC names its series. Everything
after this works with the normalized model.
"""

import logging
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from .errors import MalformedPayload
from .models import DEFAULT_WIND_STEPS, PolarModel
from .payload import Allowances, OrcPayload
from .units import SpeedUnit, normalize_speed_series

logger = logging.getLogger(__name__)


def _aligned(series: Optional[Sequence[float]], length: int) -> Optional[tuple[float, ...]]:
    if series is None or len(series) != length:
        return None
    return tuple(series)


def _aligned_speeds(
    series: Optional[Sequence[float]],
    length: int,
    unit: Optional[SpeedUnit],
) -> Optional[tuple[float, ...]]:
    if series is None or len(series) != length:
        return None
    return tuple(normalize_speed_series(series, unit))


def parse_payload(raw: Union[Mapping[str, Any], OrcPayload]) -> OrcPayload:
    """Validate raw JSON into the typed payload schema."""
    if isinstance(raw, OrcPayload):
        return raw
    if not isinstance(raw, Mapping):
        raise MalformedPayload("ORC payload must be a JSON object")
    try:
        return OrcPayload.model_validate(raw)
    except ValidationError as e:
        raise MalformedPayload(f"ORC payload does not match the expected shape: {e}") from e


def build_from_allowances(allowances: Allowances) -> PolarModel:
    """Normalize one Allowances block into a PolarModel."""
    if allowances.wind_speeds is None:
        wind_steps = DEFAULT_WIND_STEPS
    else:
        wind_steps = tuple(allowances.wind_speeds)
        if not wind_steps:
            raise MalformedPayload("WindSpeeds is present but empty")

    n = len(wind_steps)
    unit = allowances.speed_unit

    angle_speeds: dict[float, tuple[float, ...]] = {}
    for angle, series in allowances.reaching_channels().items():
        speeds = _aligned_speeds(series, n, unit)
        if speeds is not None:
            angle_speeds[angle] = speeds

    model = PolarModel(
        wind_steps=wind_steps,
        upwind_angles=_aligned(allowances.beat_angle, n),
        upwind_vmg=_aligned_speeds(allowances.beat, n, unit),
        downwind_angles=_aligned(allowances.gybe_angle, n),
        downwind_vmg=_aligned_speeds(allowances.run, n, unit),
        angle_speeds=angle_speeds,
    )

    if not model.has_speed_data:
        raise MalformedPayload("No usable speed series in ORC payload")

    logger.info(
        "Parsed polar data",
        extra={
            "wind_steps": n,
            "upwind_direct": model.upwind_vmg is not None,
            "downwind_direct": model.downwind_vmg is not None,
            "angle_speeds": sorted(angle_speeds),
        }
    )

    return model


def build_polar_model(raw: Union[Mapping[str, Any], OrcPayload]) -> PolarModel:
    """
    Turn an ORC DownBoatRMS payload into a normalized PolarModel.

    Uses the first rating record. Raises MalformedPayload when the record,
    its allowances, the wind axis or every speed series is unusable.
    """
    payload = parse_payload(raw)

    record = payload.first_record
    if record is None:
        raise MalformedPayload("No RMS data found in ORC response")
    if record.allowances is None:
        raise MalformedPayload("No Allowances data found in ORC response")

    return build_from_allowances(record.allowances)
