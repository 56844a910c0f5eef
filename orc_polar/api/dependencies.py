"""
FastAPI dependency injection.

Dependencies provide instances of services, clients, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden in tests
- Configuration is centralized

The polar cache and the ORC client live on `app.state`. They are created
once in the application lifespan (see main.py), so every request shares
them without a module-level global.
"""

import logging
from typing import Annotated

from fastapi import Depends, Request

from ..config.settings import Settings, get_settings
from ..core.polar.cache import PolarCache
from ..core.polar.service import PolarDataClient, PolarService
from ..infrastructure.orc.client import create_orc_client

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shared Resources
# ---------------------------------------------------------------------------

def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with, else the process-wide ones."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_polar_cache(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> PolarCache:
    """The application's polar cache, created at startup."""
    cache = getattr(request.app.state, "polar_cache", None)
    if cache is None:
        cache = PolarCache(
            max_entries=settings.cache_max_entries,
            ttl=settings.cache_ttl,
        )
        request.app.state.polar_cache = cache
        logger.info("Created polar cache outside lifespan")
    return cache


def get_orc_client(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> PolarDataClient:
    """
    The ORC client for this application.

    Kept on app.state so the mock client's canned data and call counter
    persist across requests.
    """
    client = getattr(request.app.state, "orc_client", None)
    if client is None:
        client = create_orc_client(settings)
        request.app.state.orc_client = client
        logger.debug("Created ORC client", extra={"mock": settings.orc_mock_mode})
    return client


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_polar_service(
    client: Annotated[PolarDataClient, Depends(get_orc_client)],
    cache: Annotated[PolarCache, Depends(get_polar_cache)],
) -> PolarService:
    """
    Provide a PolarService for the request.

    The service itself is stateless; all state is in the shared cache.
    """
    return PolarService(client=client, cache=cache)


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
PolarCacheDep = Annotated[PolarCache, Depends(get_polar_cache)]
OrcClientDep = Annotated[PolarDataClient, Depends(get_orc_client)]
PolarServiceDep = Annotated[PolarService, Depends(get_polar_service)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
