"""
Integration tests: full dispatch runs through HttpxTransport.

The destination is an in-memory httpx.MockTransport server, so the whole
stack (generator, pool, attempt loop, httpx client, collectors) runs
without network access.
"""

import asyncio
import json

import httpx
import pytest

from post_dispatch.dispatch.collector import RecordingResultCollector
from post_dispatch.dispatch.dispatcher import dispatch_async
from post_dispatch.models.enums import ErrorKind, ResultStatus
from post_dispatch.models.outcome_models import FailedExhausted
from post_dispatch.transport.httpx_client import HttpxTransport


URL = "http://testserver/posts"


class FakeServer:
    """Async handler that counts concurrent requests and follows a plan."""

    def __init__(self, plan=None, latency: float = 0.01):
        self.plan = list(plan or [])
        self.latency = latency
        self.received: list[dict] = []
        self.in_flight = 0
        self.peak_in_flight = 0
        self.concurrency_samples: list[int] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        self.concurrency_samples.append(self.in_flight)
        try:
            await asyncio.sleep(self.latency)
            self.received.append(json.loads(request.content))
            step = self.plan.pop(0) if self.plan else 201
            if isinstance(step, Exception):
                raise step
            return httpx.Response(step, json={"id": len(self.received)})
        finally:
            self.in_flight -= 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_five_requests_two_slots_end_to_end(payload, recording_sleep):
    server = FakeServer()
    collector = RecordingResultCollector()

    async with HttpxTransport(transport=httpx.MockTransport(server)) as transport:
        report = await dispatch_async(
            URL,
            payload,
            request_count=5,
            concurrency_limit=2,
            max_attempts=1,
            collector=collector,
            transport=transport,
            sleep=recording_sleep,
            metrics_enabled=False,
        )

    assert report.succeeded == 5
    assert sorted(collector.results) == [0, 1, 2, 3, 4]
    assert server.peak_in_flight == 2
    assert len(server.received) == 5
    assert all(body == {"title": "POST Request", "body": "This is a POST request"} for body in server.received)
    # never more than two at once, so five requests need at least three rounds
    assert max(server.concurrency_samples) <= 2
    assert len(server.concurrency_samples) == 5


@pytest.mark.integration
@pytest.mark.asyncio
async def test_transient_overload_recovers(payload, recording_sleep):
    server = FakeServer(plan=[503, 429])

    async with HttpxTransport(transport=httpx.MockTransport(server)) as transport:
        report = await dispatch_async(
            URL,
            payload,
            request_count=1,
            concurrency_limit=1,
            max_attempts=3,
            transport=transport,
            sleep=recording_sleep,
            metrics_enabled=False,
        )

    assert report.results[0].status == ResultStatus.SUCCEEDED
    assert report.results[0].attempts == 3
    assert recording_sleep.delays == [1.0, 2.0]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unreachable_destination_exhausts(payload, recording_sleep):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with HttpxTransport(transport=httpx.MockTransport(refuse)) as transport:
        report = await dispatch_async(
            URL,
            payload,
            request_count=3,
            concurrency_limit=2,
            max_attempts=4,
            transport=transport,
            sleep=recording_sleep,
            metrics_enabled=False,
        )

    assert report.failed == 3
    assert report.total_attempts == 12
    for result in report.results:
        assert isinstance(result, FailedExhausted)
        assert result.cause == ErrorKind.CONNECTION_FAILURE


@pytest.mark.integration
@pytest.mark.asyncio
async def test_real_backoff_sleep_is_linear(payload):
    server = FakeServer(plan=[503, 503], latency=0)
    loop = asyncio.get_running_loop()
    start = loop.time()

    async with HttpxTransport(transport=httpx.MockTransport(server)) as transport:
        report = await dispatch_async(
            URL,
            payload,
            request_count=1,
            max_attempts=3,
            base_delay_ms=20,
            transport=transport,
            metrics_enabled=False,
        )

    elapsed = loop.time() - start
    assert report.succeeded == 1
    # 20 ms before attempt 2, 40 ms before attempt 3
    assert elapsed >= 0.06


@pytest.mark.integration
@pytest.mark.asyncio
async def test_metrics_recorded(payload, recording_sleep):
    from prometheus_client import REGISTRY

    def value(name, labels):
        return REGISTRY.get_sample_value(name, labels) or 0.0

    before_ok = value("dispatch_requests_total", {"result": "succeeded"})
    before_retry = value("dispatch_retries_total", {"reason": "503"})
    server = FakeServer(plan=[503], latency=0)

    async with HttpxTransport(transport=httpx.MockTransport(server)) as transport:
        await dispatch_async(
            URL,
            payload,
            request_count=2,
            concurrency_limit=1,
            max_attempts=2,
            transport=transport,
            sleep=recording_sleep,
            metrics_enabled=True,
        )

    assert value("dispatch_requests_total", {"result": "succeeded"}) - before_ok == 2
    assert value("dispatch_retries_total", {"reason": "503"}) - before_retry == 1
    assert value("dispatch_in_flight", {}) == 0
