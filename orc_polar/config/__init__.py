"""
Application configuration using Pydantic settings.

Configuration comes from environment variables with sensible defaults.
ORC_MOCK_MODE runs the service without reaching ORC.
"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
