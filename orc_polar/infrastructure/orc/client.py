"""
ORC DownBoatRMS API client.

This module provides a thin wrapper around httpx that:
1. Implements our PolarDataClient protocol
2. Handles API-specific details (query parameters, JSON decoding)
3. Retries transient failures with exponential backoff
4. Enables easy mocking for tests

The client fetches raw JSON and nothing more. Turning it into a polar
model is the core's job.
"""

import asyncio
import copy
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import urlencode

import httpx

from ...config.settings import Settings
from ...core.polar.models import BoatIdentity
from ...core.polar.service import FetchedPayload
from .sample_payload import SAMPLE_ORC_PAYLOAD

logger = logging.getLogger(__name__)


class OrcClientError(Exception):
    """Raised when the ORC API cannot be reached or returns garbage."""
    pass


@dataclass
class OrcClientConfig:
    """
    Configuration for the ORC client.

    Validated at construction so a bad deployment fails at startup,
    not on the first request.
    """
    base_url: str = "https://data.orc.org/public/WPub.dll"
    timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_base_delay_seconds: float = 1.0
    user_agent: str = "ORC-Service/1.0"

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ValueError("base_url is required")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        if self.retry_base_delay_seconds < 0:
            raise ValueError("retry_base_delay_seconds cannot be negative")


def build_query_params(identity: BoatIdentity) -> dict[str, str]:
    """
    DownBoatRMS query parameters for a boat.

    RefNo identifies a certificate uniquely, so when we have it we send
    nothing else.
    """
    params = {"action": "DownBoatRMS", "ext": "json"}
    if identity.ref_no:
        params["RefNo"] = identity.ref_no
        return params
    if identity.sail_no:
        params["SailNo"] = identity.sail_no
    if identity.yacht_name:
        params["YachtName"] = identity.yacht_name
    if identity.country_id:
        params["CountryId"] = identity.country_id
    return params


class OrcClient:
    """
    Implementation of PolarDataClient backed by the ORC public API.

    `transport` and `sleep` exist for tests: an httpx.MockTransport and a
    no-op sleep make retry behaviour checkable without a network or a clock.
    """

    def __init__(
        self,
        config: OrcClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._transport = transport
        self._sleep = sleep

    def build_url(self, identity: BoatIdentity) -> str:
        return f"{self._config.base_url}?{urlencode(build_query_params(identity))}"

    async def fetch_polar(self, identity: BoatIdentity) -> FetchedPayload:
        """
        Fetch the DownBoatRMS JSON for a boat.

        Transport errors, timeouts and non-2xx statuses are retried. A body
        that is not a JSON object is not: retrying would return the same thing.
        """
        url = self.build_url(identity)
        logger.info("Fetching ORC data", extra={"url": url})

        response = await self._get_with_retry(url)

        try:
            data = response.json()
        except ValueError as e:
            raise OrcClientError(f"ORC API returned invalid JSON: {e}")

        if not data or not isinstance(data, dict):
            raise OrcClientError("ORC API returned empty or invalid JSON")

        return FetchedPayload(payload=data, endpoint=url)

    async def check_connectivity(self, ref_no: str) -> dict[str, Any]:
        """Fetch a known boat and report whether it worked and how long it took."""
        started = time.perf_counter()
        try:
            await self.fetch_polar(BoatIdentity(ref_no=ref_no))
        except OrcClientError as e:
            return {"success": False, "error": str(e)}
        return {
            "success": True,
            "response_time_ms": round((time.perf_counter() - started) * 1000),
        }

    async def _get_with_retry(self, url: str) -> httpx.Response:
        attempts = self._config.max_retries + 1
        last_error: Optional[Exception] = None

        async with httpx.AsyncClient(
            timeout=self._config.timeout_seconds,
            headers={
                "Accept": "application/json",
                "User-Agent": self._config.user_agent,
            },
            transport=self._transport,
        ) as client:
            for attempt in range(attempts):
                try:
                    response = await client.get(url)
                    response.raise_for_status()
                    return response
                except httpx.HTTPStatusError as e:
                    last_error = e
                    reason = f"ORC API HTTP {e.response.status_code}"
                except httpx.TransportError as e:
                    last_error = e
                    reason = f"ORC API transport error: {e!r}"

                if attempt + 1 == attempts:
                    break

                delay = self._config.retry_base_delay_seconds * (2 ** attempt)
                logger.warning(
                    "ORC request failed, retrying",
                    extra={"attempt": attempt + 1, "delay_seconds": delay, "reason": reason}
                )
                await self._sleep(delay)

        logger.error(
            "ORC request failed after retries",
            extra={"url": url, "attempts": attempts, "error": str(last_error)}
        )
        raise OrcClientError(f"{reason} (after {attempts} attempts)")


# ---------------------------------------------------------------------------
# Mock Client for Local Development
# ---------------------------------------------------------------------------

class MockOrcClient:
    """
    In-memory stand-in for the ORC API.

    Returns the same canned payload for any boat. Counts calls so tests
    can tell a cache hit from a fetch.
    """

    def __init__(self, payload: Optional[dict[str, Any]] = None) -> None:
        self._payload = payload if payload is not None else SAMPLE_ORC_PAYLOAD
        self.calls = 0
        logger.info("Initialized mock ORC client (canned payload)")

    async def fetch_polar(self, identity: BoatIdentity) -> FetchedPayload:
        self.calls += 1
        query = urlencode(build_query_params(identity))
        return FetchedPayload(
            payload=copy.deepcopy(self._payload),
            endpoint=f"mock://orc/WPub.dll?{query}",
        )

    async def check_connectivity(self, ref_no: str) -> dict[str, Any]:
        return {"success": True, "response_time_ms": 0, "mock": True}


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_orc_client(settings: Settings) -> "OrcClient | MockOrcClient":
    """Real client, or the mock when ORC_MOCK_MODE is set."""
    if settings.orc_mock_mode:
        return MockOrcClient()

    config = OrcClientConfig(
        base_url=settings.orc_base_url,
        timeout_seconds=settings.orc_timeout_seconds,
        max_retries=settings.orc_max_retries,
        retry_base_delay_seconds=settings.orc_retry_base_delay_seconds,
        user_agent=settings.orc_user_agent,
    )
    return OrcClient(config)
