"""
ORC DownBoatRMS API client.

Implements the PolarDataClient protocol from core.polar.service.
"""

from .client import (
    MockOrcClient,
    OrcClient,
    OrcClientConfig,
    OrcClientError,
    create_orc_client,
)

__all__ = [
    "MockOrcClient",
    "OrcClient",
    "OrcClientConfig",
    "OrcClientError",
    "create_orc_client",
]
