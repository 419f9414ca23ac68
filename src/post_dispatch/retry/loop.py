"""
Per-request attempt loop.

State machine:

    Pending -> InFlight -> Success                      (terminal)
                        -> Permanent                    (terminal)
                        -> Retryable -> Pending         (after backoff)
                                     -> Exhausted       (terminal)

Each transition into InFlight performs exactly one transport call. The loop
never raises for request outcomes: transport failures become
ConnectionFailure outcomes and every path ends in a FinalResult.
"""

import asyncio
import time
from enum import Enum
from typing import Awaitable, Callable

import structlog

from post_dispatch.models.outcome_models import (
    ConnectionFailure,
    FailedExhausted,
    FailedPermanently,
    FinalResult,
    Outcome,
    ServerError,
    Succeeded,
    Success,
)
from post_dispatch.models.request_models import RequestDescriptor
from post_dispatch.monitoring import metrics
from post_dispatch.retry.metadata import AttemptRecord
from post_dispatch.retry.policy import RetryPolicy
from post_dispatch.transport.base_client import BaseTransport
from post_dispatch.transport.exceptions import TransportError

logger = structlog.get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[object]]


class AttemptState(str, Enum):
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    RETRYABLE = "retryable"
    SUCCESS = "success"
    PERMANENT = "permanent"
    EXHAUSTED = "exhausted"


TERMINAL_STATES = frozenset({AttemptState.SUCCESS, AttemptState.PERMANENT, AttemptState.EXHAUSTED})


def classify_status(status_code: int, body: str) -> Outcome:
    """Map a received status line onto an Outcome."""
    if status_code < 400:
        return Success(status_code=status_code, body=body)
    return ServerError(status_code=status_code, body=body)


class AttemptLoop:
    """
    Drives one request to a terminal result.

    Attributes:
        request: Descriptor being sent
        state: Current AttemptState
        attempts: Network calls made so far
    """

    def __init__(
        self,
        request: RequestDescriptor,
        transport: BaseTransport,
        policy: RetryPolicy,
        sleep: SleepFunc = asyncio.sleep,
        metrics_enabled: bool = False,
    ):
        """
        Initialize attempt loop.

        Args:
            request: Descriptor to send
            transport: Shared transport, used read-only
            policy: Shared retry policy
            sleep: Awaitable sleep taking seconds (injectable for tests)
            metrics_enabled: Record Prometheus metrics
        """
        self.request = request
        self.transport = transport
        self.policy = policy
        self._sleep = sleep
        self._metrics_enabled = metrics_enabled
        self.state = AttemptState.PENDING
        self.attempts = 0

    async def _attempt(self) -> AttemptRecord:
        """Perform one network call and classify it."""
        self.state = AttemptState.IN_FLIGHT
        attempt_number = self.attempts
        start_time = time.monotonic()

        try:
            response = await self.transport.send(self.request)
            outcome = classify_status(response.status_code, response.body)
        except TransportError as e:
            outcome = ConnectionFailure(
                error=e.message,
                error_type=e.details.get("error_type", type(e).__name__),
            )

        self.attempts += 1
        record = AttemptRecord(
            request_index=self.request.index,
            attempt_number=attempt_number,
            outcome=outcome,
            latency_ms=int((time.monotonic() - start_time) * 1000),
        )

        if self._metrics_enabled:
            metrics.attempts_total.labels(outcome=outcome.kind).inc()
            metrics.attempt_latency_seconds.labels(outcome=outcome.kind).observe(
                record.latency_ms / 1000.0
            )

        logger.debug(
            "Attempt finished",
            index=record.request_index,
            attempt=record.attempt_number,
            outcome=outcome.kind,
            status_code=getattr(outcome, "status_code", None),
            latency_ms=record.latency_ms,
        )
        return record

    async def run(self) -> FinalResult:
        """Attempt, decide and wait until a terminal result is reached."""
        while True:
            record = await self._attempt()
            outcome = record.outcome

            if isinstance(outcome, Success):
                self.state = AttemptState.SUCCESS
                return Succeeded(
                    index=self.request.index,
                    attempts=self.attempts,
                    status_code=outcome.status_code,
                    body=outcome.body,
                )

            decision = self.policy.decide(self.attempts, outcome)

            if decision.retry:
                self.state = AttemptState.RETRYABLE
                logger.info(
                    "Retrying request",
                    index=self.request.index,
                    attempt=record.attempt_number,
                    next_attempt=self.attempts,
                    reason=decision.reason,
                    delay_ms=decision.delay_ms,
                )
                if self._metrics_enabled:
                    metrics.retries_total.labels(reason=decision.reason).inc()

                await self._sleep(decision.delay_ms / 1000.0)
                self.state = AttemptState.PENDING
                continue

            if self.policy.is_transient(outcome):
                self.state = AttemptState.EXHAUSTED
                logger.warning(
                    "Retries exhausted",
                    index=self.request.index,
                    attempts=self.attempts,
                    max_attempts=self.policy.max_attempts,
                    last_outcome=outcome.kind,
                )
                return FailedExhausted(
                    index=self.request.index,
                    attempts=self.attempts,
                    last_outcome=outcome,
                )

            if isinstance(outcome, ServerError):
                self.state = AttemptState.PERMANENT
                return FailedPermanently(
                    index=self.request.index,
                    attempts=self.attempts,
                    status_code=outcome.status_code,
                    body=outcome.body,
                )

            raise TypeError(f"Non-transient outcome of unexpected kind: {outcome.kind}")
