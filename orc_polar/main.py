"""
ASGI entry point for the ORC polar service.

create_app() builds a fully wired app from a Settings object; tests call
it with their own settings and get an app with its own polar cache.

Run locally with:
    uvicorn orc_polar.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.routes import health, optimal
from .config.settings import Settings, get_settings
from .core.polar.cache import PolarCache
from .infrastructure.orc.client import create_orc_client

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Creates the polar cache and ORC client on startup and stores them on
    app.state, where the dependencies pick them up. Anything already set
    (tests do this) is left alone.
    """
    settings: Settings = app.state.settings

    logging.getLogger().setLevel(settings.log_level.upper())
    logger.info(
        "ORC polar API starting",
        extra={
            "version": __version__,
            "mock_mode": settings.orc_mock_mode,
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    if getattr(app.state, "polar_cache", None) is None:
        app.state.polar_cache = PolarCache(
            max_entries=settings.cache_max_entries,
            ttl=settings.cache_ttl,
        )
    if getattr(app.state, "orc_client", None) is None:
        app.state.orc_client = create_orc_client(settings)

    yield

    logger.info(
        "ORC polar API shutting down",
        extra={"cache": app.state.polar_cache.stats()}
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Optimal sailing angles and target boat speeds from ORC performance data.

        ## Workflow

        1. **Optimal angles**: `GET /api/v1/orc/optimal?tws=12&refNo=...`
           - Identify the boat by refNo, sailNo + countryId, or yachtName + countryId
           - Receive upwind/downwind angle, VMG, target speed and reaching targets

        2. **Cache**: `GET /api/v1/orc/cache/stats`, `POST /api/v1/orc/cache/clear`
           - Built polars are cached per boat for 24 hours
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        optimal.router,
        prefix="/api/v1/orc",
        tags=["ORC"],
    )

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint - point at the docs."""
        return {
            "message": settings.api_title,
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        Keeps stack traces server-side and returns a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error. Please contact support if this persists."
            }
        )

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn/gunicorn will import
app = create_app()


# For debugging/development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "orc_polar.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
