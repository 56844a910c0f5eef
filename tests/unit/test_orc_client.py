"""
Unit tests for the ORC HTTP client.

Requests go to an httpx.MockTransport, and sleeps are recorded instead
of awaited, so retry timing is checked without a network or a clock.
"""

import httpx
import pytest

from orc_polar.config.settings import Settings
from orc_polar.core.polar.models import BoatIdentity
from orc_polar.infrastructure.orc.client import (
    MockOrcClient,
    OrcClient,
    OrcClientConfig,
    OrcClientError,
    build_query_params,
    create_orc_client,
)
from orc_polar.infrastructure.orc.sample_payload import SAMPLE_ORC_PAYLOAD, SAMPLE_REF_NO


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def scripted_transport(responses):
    """
    MockTransport that replays `responses` in order.

    Each item is an httpx.Response or an exception to raise. Requests are
    appended to `transport.requests`.
    """
    queue = list(responses)
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    return transport


def make_client(responses, max_retries: int = 2):
    transport = scripted_transport(responses)
    sleep = SleepRecorder()
    client = OrcClient(
        OrcClientConfig(
            base_url="https://orc.test/WPub.dll",
            max_retries=max_retries,
            retry_base_delay_seconds=1.0,
        ),
        transport=transport,
        sleep=sleep,
    )
    return client, transport, sleep


BOAT = BoatIdentity(ref_no=SAMPLE_REF_NO)


class TestQueryParams:

    def test_ref_no_is_sent_alone(self):
        params = build_query_params(BoatIdentity(ref_no="R1", sail_no="S1", country_id="GBR"))
        assert params == {"action": "DownBoatRMS", "ext": "json", "RefNo": "R1"}

    def test_other_identifiers(self):
        params = build_query_params(
            BoatIdentity(sail_no="GBR-1234", yacht_name="Jolly", country_id="GBR")
        )
        assert params == {
            "action": "DownBoatRMS",
            "ext": "json",
            "SailNo": "GBR-1234",
            "YachtName": "Jolly",
            "CountryId": "GBR",
        }


class TestFetchPolar:

    @pytest.mark.asyncio
    async def test_success(self):
        client, transport, sleep = make_client([httpx.Response(200, json=SAMPLE_ORC_PAYLOAD)])

        fetched = await client.fetch_polar(BOAT)

        assert fetched.payload == SAMPLE_ORC_PAYLOAD
        assert "action=DownBoatRMS" in fetched.endpoint
        assert f"RefNo={SAMPLE_REF_NO}" in fetched.endpoint
        assert transport.requests[0].headers["Accept"] == "application/json"
        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_retries_server_errors_with_backoff(self):
        client, transport, sleep = make_client([
            httpx.Response(503),
            httpx.Response(502),
            httpx.Response(200, json=SAMPLE_ORC_PAYLOAD),
        ])

        fetched = await client.fetch_polar(BOAT)

        assert fetched.payload == SAMPLE_ORC_PAYLOAD
        assert len(transport.requests) == 3
        assert sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        client, transport, sleep = make_client([httpx.Response(500)] * 3)

        with pytest.raises(OrcClientError, match=r"HTTP 500 \(after 3 attempts\)"):
            await client.fetch_polar(BOAT)

        assert len(transport.requests) == 3
        assert sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_transport_errors_are_retried(self):
        client, transport, sleep = make_client([
            httpx.ConnectError("refused"),
            httpx.Response(200, json=SAMPLE_ORC_PAYLOAD),
        ])

        await client.fetch_polar(BOAT)

        assert len(transport.requests) == 2
        assert sleep.delays == [1.0]

    @pytest.mark.asyncio
    async def test_zero_retries_means_one_attempt(self):
        client, transport, sleep = make_client([httpx.ReadTimeout("slow")], max_retries=0)

        with pytest.raises(OrcClientError, match="after 1 attempts"):
            await client.fetch_polar(BOAT)

        assert sleep.delays == []

    @pytest.mark.asyncio
    async def test_invalid_json_is_not_retried(self):
        client, transport, sleep = make_client([httpx.Response(200, text="<html>oops</html>")])

        with pytest.raises(OrcClientError, match="invalid JSON"):
            await client.fetch_polar(BOAT)

        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [[], [1, 2], {}])
    async def test_non_object_body_is_rejected(self, body):
        client, _, _ = make_client([httpx.Response(200, json=body)])

        with pytest.raises(OrcClientError, match="empty or invalid JSON"):
            await client.fetch_polar(BOAT)


class TestConnectivity:

    @pytest.mark.asyncio
    async def test_reports_success(self):
        client, _, _ = make_client([httpx.Response(200, json=SAMPLE_ORC_PAYLOAD)])

        status = await client.check_connectivity(SAMPLE_REF_NO)

        assert status["success"] is True
        assert status["response_time_ms"] >= 0

    @pytest.mark.asyncio
    async def test_reports_failure(self):
        client, _, _ = make_client([httpx.Response(500)], max_retries=0)

        status = await client.check_connectivity(SAMPLE_REF_NO)

        assert status["success"] is False
        assert "HTTP 500" in status["error"]


class TestConfig:

    @pytest.mark.parametrize("kwargs", [
        {"base_url": ""},
        {"timeout_seconds": 0},
        {"max_retries": -1},
        {"retry_base_delay_seconds": -0.5},
    ])
    def test_invalid_config_fails_fast(self, kwargs):
        with pytest.raises(ValueError):
            OrcClientConfig(**kwargs)

    def test_factory_honours_mock_mode(self):
        assert isinstance(create_orc_client(Settings(orc_mock_mode=True)), MockOrcClient)
        assert isinstance(create_orc_client(Settings(orc_mock_mode=False)), OrcClient)


class TestMockClient:

    @pytest.mark.asyncio
    async def test_returns_independent_copies(self):
        client = MockOrcClient()

        first = await client.fetch_polar(BOAT)
        first.payload["rms"].clear()
        second = await client.fetch_polar(BOAT)

        assert second.payload == SAMPLE_ORC_PAYLOAD
        assert client.calls == 2
