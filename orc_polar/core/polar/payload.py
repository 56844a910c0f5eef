"""
Typed schema for the ORC DownBoatRMS JSON payload.

The upstream document is large and loosely shaped. Rather than probing it
with ad hoc lookups, we validate the parts we care about into pydantic
models and ignore the rest. Series fields are lenient: anything that is not
a list of numbers becomes None, so one broken channel does not sink the
whole boat. The wind axis is strict because every other series hangs off it.
"""

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .units import SpeedUnit


# Named reaching channels, e.g. "R52" -> 52.0
REACHING_CHANNEL_PATTERN = re.compile(r"^R(\d+(?:\.\d+)?)$")

_SERIES = TypeAdapter(list[float])


def _unwrap(value: Any) -> Any:
    """Some producers wrap a series as {"values": [...]} or {"data": [...]}."""
    if isinstance(value, dict):
        return value.get("values", value.get("data"))
    return value


def coerce_series(value: Any) -> Optional[list[float]]:
    """Return a list of floats, or None when the value is not a numeric series."""
    value = _unwrap(value)
    if not isinstance(value, list) or not value:
        return None
    if any(isinstance(v, bool) for v in value):
        return None
    try:
        return _SERIES.validate_python(value)
    except ValidationError:
        return None


class Allowances(BaseModel):
    """
    Per-course allowances of one rating record.

    Times are seconds per nautical mile per wind step; angles are degrees.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    wind_speeds: Optional[list[float]] = Field(default=None, alias="WindSpeeds")
    beat_angle: Optional[list[float]] = Field(default=None, alias="BeatAngle")
    beat: Optional[list[float]] = Field(default=None, alias="Beat")
    gybe_angle: Optional[list[float]] = Field(default=None, alias="GybeAngle")
    run: Optional[list[float]] = Field(default=None, alias="Run")
    r52: Optional[list[float]] = Field(default=None, alias="R52")
    r60: Optional[list[float]] = Field(default=None, alias="R60")
    r75: Optional[list[float]] = Field(default=None, alias="R75")
    r90: Optional[list[float]] = Field(default=None, alias="R90")
    r110: Optional[list[float]] = Field(default=None, alias="R110")
    r120: Optional[list[float]] = Field(default=None, alias="R120")
    r135: Optional[list[float]] = Field(default=None, alias="R135")
    r150: Optional[list[float]] = Field(default=None, alias="R150")
    speed_unit: Optional[SpeedUnit] = Field(default=None, alias="SpeedUnit")

    @field_validator("wind_speeds", mode="before")
    @classmethod
    def _wind_axis(cls, value: Any) -> Any:
        return _unwrap(value)

    @field_validator(
        "beat_angle", "beat", "gybe_angle", "run",
        "r52", "r60", "r75", "r90", "r110", "r120", "r135", "r150",
        mode="before",
    )
    @classmethod
    def _lenient_series(cls, value: Any) -> Optional[list[float]]:
        return coerce_series(value)

    @field_validator("speed_unit", mode="before")
    @classmethod
    def _lenient_unit(cls, value: Any) -> Any:
        if isinstance(value, SpeedUnit):
            return value
        valid = {unit.value for unit in SpeedUnit}
        return value if isinstance(value, str) and value in valid else None

    def reaching_channels(self) -> dict[float, list[float]]:
        """
        All R<angle> channels present, keyed by numeric angle.

        Covers the named fields plus any extra R-prefixed channel the
        producer included.
        """
        channels: dict[float, list[float]] = {}
        for name, info in type(self).model_fields.items():
            match = REACHING_CHANNEL_PATTERN.match(info.alias or "")
            series = getattr(self, name)
            if match and series:
                channels[float(match.group(1))] = series

        for key, value in (self.model_extra or {}).items():
            match = REACHING_CHANNEL_PATTERN.match(key)
            if not match:
                continue
            series = coerce_series(value)
            if series:
                channels.setdefault(float(match.group(1)), series)

        return channels


class RmsRecord(BaseModel):
    """One boat's rating record. We only need its allowances and identity."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    ref_no: Optional[str] = Field(default=None, alias="RefNo")
    sail_no: Optional[str] = Field(default=None, alias="SailNo")
    yacht_name: Optional[str] = Field(default=None, alias="YachtName")
    allowances: Optional[Allowances] = Field(default=None, alias="Allowances")

    @field_validator("ref_no", "sail_no", "yacht_name", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)


class OrcPayload(BaseModel):
    """Top level of a DownBoatRMS response."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    rms: list[RmsRecord] = Field(default_factory=list)

    @property
    def first_record(self) -> Optional[RmsRecord]:
        return self.rms[0] if self.rms else None
