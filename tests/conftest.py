"""
Shared fixtures for the polar test suite.

Everything here is built from plain data: no network, no app startup.
"""

import copy

import pytest

from orc_polar.core.polar.builder import build_polar_model
from orc_polar.core.polar.models import PolarModel
from orc_polar.infrastructure.orc.sample_payload import SAMPLE_ORC_PAYLOAD


@pytest.fixture
def sample_payload() -> dict:
    """A fresh copy of the canned ORC payload, safe to mutate."""
    return copy.deepcopy(SAMPLE_ORC_PAYLOAD)


@pytest.fixture
def sample_allowances(sample_payload) -> dict:
    """The Allowances block of the canned payload."""
    return sample_payload["rms"][0]["Allowances"]


@pytest.fixture
def sample_model(sample_payload) -> PolarModel:
    """The canned payload, built into a model."""
    return build_polar_model(sample_payload)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()
