"""Shared test fixtures and configuration for all tests.

Provides settings, payloads, and an in-memory scripted transport that
stands in for the network.
"""

import asyncio
from collections import defaultdict
from typing import Callable, Sequence, Union

import pytest

from post_dispatch.config import Settings
from post_dispatch.models.request_models import PostPayload, RequestDescriptor
from post_dispatch.transport.base_client import BaseTransport, TransportResponse
from post_dispatch.transport.exceptions import ConnectionFailureError

# A step is either a status code or an exception to raise
Step = Union[int, Exception]


class ScriptedTransport(BaseTransport):
    """
    In-memory transport that replays a script of responses.

    `script` maps a request index to the steps returned by successive
    attempts; the last step repeats once the script runs out. Indices with
    no script get `default`. Tracks calls and concurrent sends.
    """

    def __init__(
        self,
        script: dict[int, Sequence[Step]] | None = None,
        default: Sequence[Step] = (200,),
        latency: float = 0.0,
        body: Callable[[int], str] = lambda index: f'{{"id": {index}}}',
    ):
        super().__init__(timeout=1.0)
        self.script = script or {}
        self.default = default
        self.latency = latency
        self.body = body
        self.calls: dict[int, int] = defaultdict(int)
        self.call_log: list[tuple[int, int]] = []
        self.in_flight = 0
        self.peak_in_flight = 0
        self.closed = False

    async def send(self, request: RequestDescriptor) -> TransportResponse:
        attempt = self.calls[request.index]
        self.calls[request.index] += 1
        self.call_log.append((request.index, attempt))

        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.latency)
        finally:
            self.in_flight -= 1

        steps = self.script.get(request.index, self.default)
        step = steps[min(attempt, len(steps) - 1)]
        if isinstance(step, Exception):
            raise step
        return TransportResponse(status_code=step, body=self.body(request.index))

    async def close(self) -> None:
        self.closed = True

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())


class RecordingSleep:
    """Backoff sleep that records requested delays and returns at once."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        await asyncio.sleep(0)


def connection_failure(message: str = "connection refused") -> ConnectionFailureError:
    return ConnectionFailureError(message, details={"error_type": "ConnectError"})


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing."""
    return Settings(
        ENVIRONMENT="development",
        LOG_LEVEL="DEBUG",
        TARGET_URL="http://localhost:8080/posts",
        CONCURRENCY_LIMIT=2,
        MAX_ATTEMPTS=3,
        REQUEST_COUNT=5,
        RETRY_BASE_DELAY_MS=1000,
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def payload() -> PostPayload:
    return PostPayload(title="POST Request", body="This is a POST request")


@pytest.fixture
def descriptor(payload: PostPayload) -> RequestDescriptor:
    return RequestDescriptor(index=0, url="http://localhost:8080/posts", body=payload.encode())


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_transport() -> type[ScriptedTransport]:
    """Factory for scripted transports: make_transport(script={0: [503, 200]})."""
    return ScriptedTransport


@pytest.fixture
def refused() -> Callable[..., ConnectionFailureError]:
    """Factory for connection failures to put in a transport script."""
    return connection_failure
