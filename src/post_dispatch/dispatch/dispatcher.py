"""
Dispatch entry points.

`dispatch` is the blocking call: it builds the run configuration, sends the
whole batch through a ConcurrencyPool and returns once every request has a
terminal result. `dispatch_async` is the same for callers already running an
event loop.

Usage:
    report = dispatch(
        "https://example.com/posts",
        PostPayload(title="t", body="b"),
        request_count=5,
        concurrency_limit=2,
        max_attempts=3,
    )
"""

import asyncio
import time
from typing import Iterable, Optional

import httpx
import structlog
from pydantic import ValidationError as PydanticValidationError

from post_dispatch.config import settings
from post_dispatch.dispatch.collector import CompositeResultCollector, RecordingResultCollector, ResultCollector
from post_dispatch.dispatch.exceptions import ConfigurationError
from post_dispatch.dispatch.generator import RequestGenerator
from post_dispatch.dispatch.pool import ConcurrencyPool
from post_dispatch.models.outcome_models import DispatchReport
from post_dispatch.models.pool_config import DEFAULT_BASE_DELAY_MS, DEFAULT_RETRYABLE_STATUS_CODES, PoolConfig
from post_dispatch.models.request_models import PostPayload
from post_dispatch.retry.loop import SleepFunc
from post_dispatch.retry.policy import RetryPolicy
from post_dispatch.transport.base_client import BaseTransport
from post_dispatch.transport.httpx_client import HttpxTransport

logger = structlog.get_logger(__name__)


def validate_url(url: str) -> str:
    """Reject destinations that are not absolute http(s) URLs."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"Invalid destination URL: {url}", details={"error": str(e)}) from e

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigurationError(
            f"Destination URL must be absolute http(s): {url}",
            details={"scheme": parsed.scheme},
        )
    return url


def build_pool_config(
    request_count: int,
    concurrency_limit: int,
    max_attempts: int,
    retryable_status_codes: Iterable[int],
    base_delay_ms: int,
) -> PoolConfig:
    """Validate run parameters into a PoolConfig."""
    try:
        return PoolConfig(
            request_count=request_count,
            concurrency_limit=concurrency_limit,
            max_attempts=max_attempts,
            retryable_status_codes=frozenset(retryable_status_codes),
            base_delay_ms=base_delay_ms,
        )
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid dispatch configuration: {e.error_count()} error(s)",
            details={"errors": e.errors(include_url=False)},
        ) from e


async def dispatch_async(
    url: str,
    body_template: PostPayload,
    request_count: int = 5,
    concurrency_limit: int = 10,
    max_attempts: int = 5,
    retryable_status_codes: Iterable[int] = DEFAULT_RETRYABLE_STATUS_CODES,
    *,
    collector: Optional[ResultCollector] = None,
    transport: Optional[BaseTransport] = None,
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
    timeout: Optional[float] = None,
    sleep: SleepFunc = asyncio.sleep,
    metrics_enabled: Optional[bool] = None,
) -> DispatchReport:
    """
    Send `request_count` identical POSTs to `url` and wait for all of them.

    Args:
        url: Destination URL
        body_template: Title/body sent with every request
        request_count: Requests in the batch
        concurrency_limit: Max requests in flight at once
        max_attempts: Total attempts per request, first one included
        retryable_status_codes: Statuses retried with backoff
        collector: Optional sink receiving each result as it completes
        transport: Transport to use; an HttpxTransport is created (and
            closed) when omitted
        base_delay_ms: Linear backoff unit
        timeout: Per-request timeout for the default transport
        sleep: Backoff sleep (injectable for tests)
        metrics_enabled: Record Prometheus metrics (default from settings)

    Returns:
        DispatchReport with one result per index

    Raises:
        ConfigurationError: Invalid parameters; nothing was sent
    """
    validate_url(url)
    config = build_pool_config(
        request_count, concurrency_limit, max_attempts, retryable_status_codes, base_delay_ms
    )
    if metrics_enabled is None:
        metrics_enabled = settings.PROMETHEUS_ENABLED

    policy = RetryPolicy.from_config(config)
    requests = RequestGenerator(url, body_template, config.request_count)

    recorder = RecordingResultCollector()
    sink: ResultCollector = recorder if collector is None else CompositeResultCollector(recorder, collector)

    owns_transport = transport is None
    if transport is None:
        transport = HttpxTransport(
            timeout=timeout if timeout is not None else settings.REQUEST_TIMEOUT,
            max_connections=config.concurrency_limit,
        )

    if config.max_attempts > 1:
        logger.warning(
            "POST retries enabled without an idempotency key; "
            "a write processed before a connection failure will be duplicated",
            max_attempts=config.max_attempts,
        )

    logger.info(
        "Starting dispatch",
        url=url,
        request_count=config.request_count,
        concurrency_limit=config.concurrency_limit,
        max_attempts=config.max_attempts,
        retryable_status_codes=sorted(config.retryable_status_codes),
    )

    pool = ConcurrencyPool(
        requests,
        transport,
        policy,
        config.concurrency_limit,
        sink,
        sleep=sleep,
        metrics_enabled=metrics_enabled,
    )

    start_time = time.monotonic()
    try:
        await pool.run()
    finally:
        if owns_transport:
            await transport.close()

    report = DispatchReport(
        results=recorder.ordered(),
        elapsed_ms=int((time.monotonic() - start_time) * 1000),
        peak_in_flight=pool.peak_in_flight,
    )

    logger.info(
        "Dispatch completed",
        succeeded=report.succeeded,
        failed=report.failed,
        total_attempts=report.total_attempts,
        elapsed_ms=report.elapsed_ms,
        peak_in_flight=report.peak_in_flight,
    )
    return report


def dispatch(
    url: str,
    body_template: PostPayload,
    request_count: int = 5,
    concurrency_limit: int = 10,
    max_attempts: int = 5,
    retryable_status_codes: Iterable[int] = DEFAULT_RETRYABLE_STATUS_CODES,
    **kwargs,
) -> DispatchReport:
    """Blocking form of dispatch_async; must not be called from a running event loop."""
    return asyncio.run(
        dispatch_async(
            url,
            body_template,
            request_count,
            concurrency_limit,
            max_attempts,
            retryable_status_codes,
            **kwargs,
        )
    )
