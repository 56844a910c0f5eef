"""
Polar optimal service.

Ties the pieces together for one request: validate, look in the cache,
fetch and build on a miss, then solve. It knows nothing about HTTP or
about how the payload is fetched; the client is anything that satisfies
PolarDataClient.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol

from .builder import build_polar_model
from .cache import CacheStats, PolarCache, derive_cache_key
from .models import BoatIdentity, CacheEntry, OptimalReport, OptimalRequest, SourceInfo
from .solver import compute_optimal

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FetchedPayload:
    """Raw upstream JSON and the endpoint it came from."""
    payload: Any
    endpoint: str


class PolarDataClient(Protocol):
    """
    Interface for whatever fetches raw polar payloads.

    The real implementation talks to ORC over HTTP with retries; tests and
    mock mode return canned JSON. Retrying is the client's job, never the
    service's.
    """

    async def fetch_polar(self, identity: BoatIdentity) -> FetchedPayload:
        """Fetch the raw performance payload for a boat."""
        ...

    async def check_connectivity(self, ref_no: str) -> dict[str, Any]:
        """Try a known boat; report success and latency."""
        ...


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class PolarService:
    """
    Computes optimal angles and target speeds for a boat.

    Only built models are cached. Results depend on the requested wind
    speed and are computed fresh every time.
    """

    def __init__(self, client: PolarDataClient, cache: PolarCache) -> None:
        self._client = client
        self._cache = cache

    async def load_entry(self, identity: BoatIdentity) -> tuple[CacheEntry, SourceInfo]:
        """Cached entry for a boat, fetching and building it on a miss."""
        key = derive_cache_key(identity)

        if key is not None:
            cached = self._cache.get(key)
            if cached is not None:
                logger.info("Polar data served from cache", extra={"key": key})
                return cached, SourceInfo(
                    cached=True,
                    fetched_at=cached.fetched_at,
                    endpoint="cache",
                )

        logger.info("Fetching polar data", extra={"boat": identity.as_dict()})
        fetched = await self._client.fetch_polar(identity)
        model = build_polar_model(fetched.payload)

        entry = CacheEntry(
            model=model,
            raw_payload=fetched.payload,
            fetched_at=datetime.now(timezone.utc),
        )

        if key is not None:
            self._cache.set(key, entry)
            logger.info("Polar data cached", extra={"key": key})

        return entry, SourceInfo(
            cached=False,
            fetched_at=entry.fetched_at,
            endpoint=fetched.endpoint,
        )

    async def get_optimal(self, request: OptimalRequest) -> OptimalReport:
        """
        Optimal upwind/downwind angles and reaching targets for a request.

        Raises InvalidRequest, MalformedPayload or InsufficientPolarData
        from the core, and whatever the client raises on fetch failure.
        """
        request.validate()

        entry, source = await self.load_entry(request.identity)
        result = compute_optimal(entry.model, request.wind_speed)

        logger.info(
            "Optimal computation finished",
            extra={
                "tws": request.wind_speed,
                "upwind": result.upwind.angle if result.upwind else None,
                "downwind": result.downwind.angle if result.downwind else None,
                "reaching_angles": len(result.reaching),
                "cached": source.cached,
            }
        )

        return OptimalReport(request=request, result=result, source=source)

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("Polar cache cleared")
