"""
Service configuration.

Every field maps to an environment variable of the same name (case
insensitive), optionally read from a .env file. Bad values fail at
startup rather than on the first ORC request.

ORC_MOCK_MODE serves a canned ORC payload, so the API runs offline.
"""

from datetime import timedelta
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """ORC upstream, cache, logging and CORS settings."""

    # API Configuration
    api_title: str = "ORC Polar Optimal API"
    api_version: str = "v1"

    # ORC upstream
    orc_base_url: str = Field(
        default="https://data.orc.org/public/WPub.dll",
        description="ORC public data endpoint serving DownBoatRMS"
    )
    orc_timeout_seconds: float = Field(
        default=30.0,
        description="Per-attempt timeout for ORC requests"
    )
    orc_max_retries: int = Field(
        default=3,
        description="Retries after the first attempt. ORC is slow and occasionally flaky."
    )
    orc_retry_base_delay_seconds: float = Field(
        default=1.0,
        description="Backoff base; attempt n waits base * 2**n seconds"
    )
    orc_user_agent: str = Field(
        default="ORC-Service/1.0",
        description="User-Agent sent to ORC"
    )
    orc_connectivity_ref_no: str = Field(
        default="034200028W9",
        description="Reference number of a known boat, used by the readiness check"
    )
    orc_mock_mode: bool = Field(
        default=False,
        description="Serve a canned ORC payload instead of calling ORC. Enables local dev offline."
    )

    # Polar cache
    cache_max_entries: int = Field(
        default=100,
        description="Maximum number of boats kept in the polar cache"
    )
    cache_ttl_hours: float = Field(
        default=24,
        description="How long a fetched polar stays valid"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(hours=self.cache_ttl_hours)

    def validate_required_fields(self) -> list[str]:
        """Names of settings that are missing or unusable; empty when all is well."""
        missing = []

        if not self.orc_mock_mode and not self.orc_base_url:
            missing.append("ORC_BASE_URL")

        if self.cache_max_entries < 1:
            missing.append("CACHE_MAX_ENTRIES (must be positive)")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings, read from the environment once."""
    return Settings()
