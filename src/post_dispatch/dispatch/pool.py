"""
Bounded-concurrency scheduler.

The pool runs up to `concurrency_limit` worker coroutines that pull
descriptors from one shared iterator. A worker holds its slot for the whole
life of an AttemptLoop, backoff waits included, and pulls the next
descriptor as soon as that loop is terminal. This gives a sliding window:
a slow request never holds back admission of the others.

Completion order is not request order. Sinks are called once per index in
the order requests actually finish. An exception escaping one AttemptLoop
is logged and turned into a FailedPermanently for that index only.
"""

import asyncio
import operator
from typing import Iterable, Iterator

import structlog

from post_dispatch.dispatch.collector import ResultCollector
from post_dispatch.dispatch.exceptions import DuplicateResultError
from post_dispatch.models.enums import ErrorKind
from post_dispatch.models.outcome_models import FailedPermanently, FinalResult, Succeeded
from post_dispatch.models.request_models import RequestDescriptor
from post_dispatch.monitoring import metrics
from post_dispatch.retry.loop import AttemptLoop, SleepFunc
from post_dispatch.retry.policy import RetryPolicy
from post_dispatch.transport.base_client import BaseTransport

logger = structlog.get_logger(__name__)


class ConcurrencyPool:
    """
    Sliding-window scheduler over AttemptLoops.

    Attributes:
        concurrency_limit: Max requests holding a slot at once
        in_flight: Requests currently holding a slot
        peak_in_flight: Highest in_flight value observed during the run
        results: Terminal results received so far, by index
    """

    def __init__(
        self,
        requests: Iterable[RequestDescriptor],
        transport: BaseTransport,
        policy: RetryPolicy,
        concurrency_limit: int,
        collector: ResultCollector,
        sleep: SleepFunc = asyncio.sleep,
        metrics_enabled: bool = False,
    ):
        """
        Initialize pool.

        Args:
            requests: Descriptors to send, pulled lazily
            transport: Transport shared by all loops
            policy: Retry policy shared by all loops
            concurrency_limit: Slot count (>= 1)
            collector: Receives on_success / on_failure per index
            sleep: Backoff sleep passed to every loop
            metrics_enabled: Record Prometheus metrics
        """
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be >= 1, got {concurrency_limit}")

        self._requests: Iterator[RequestDescriptor] = iter(requests)
        self.transport = transport
        self.policy = policy
        self.concurrency_limit = concurrency_limit
        self.collector = collector
        self._sleep = sleep
        self._metrics_enabled = metrics_enabled

        self.in_flight = 0
        self.peak_in_flight = 0
        self.results: dict[int, FinalResult] = {}

    def _acquire_slot(self) -> None:
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        if self._metrics_enabled:
            metrics.in_flight.inc()

    def _release_slot(self) -> None:
        self.in_flight -= 1
        if self._metrics_enabled:
            metrics.in_flight.dec()

    def _deliver(self, result: FinalResult) -> None:
        """Record a terminal result and forward it to the collector."""
        index = result.index
        if index in self.results:
            raise DuplicateResultError(index)
        self.results[index] = result

        if self._metrics_enabled:
            metrics.requests_total.labels(result=result.status).inc()

        try:
            if isinstance(result, Succeeded):
                self.collector.on_success(result, index)
            else:
                self.collector.on_failure(result, index)
        except Exception:
            # Collector faults must not stop the batch
            logger.exception("Result collector failed", index=index, status=result.status)

    async def _worker(self, worker_id: int) -> None:
        # All workers share one iterator; next() never awaits, so each
        # descriptor is handed to exactly one worker.
        for request in self._requests:
            loop = AttemptLoop(
                request,
                self.transport,
                self.policy,
                sleep=self._sleep,
                metrics_enabled=self._metrics_enabled,
            )
            self._acquire_slot()
            try:
                result = await loop.run()
            except Exception as e:
                logger.exception(
                    "Attempt loop failed",
                    index=request.index,
                    attempts=loop.attempts,
                    error_type=type(e).__name__,
                )
                result = FailedPermanently(
                    index=request.index,
                    attempts=max(loop.attempts, 1),
                    error=f"{type(e).__name__}: {e}",
                    error_kind=ErrorKind.UNEXPECTED_ERROR,
                )
            finally:
                self._release_slot()
            self._deliver(result)

        logger.debug("Worker drained", worker_id=worker_id)

    async def run(self) -> list[FinalResult]:
        """
        Send every request and wait until all are terminal.

        Returns:
            Terminal results ordered by request index
        """
        worker_count = min(
            self.concurrency_limit,
            operator.length_hint(self._requests, self.concurrency_limit),
        )
        worker_count = max(worker_count, 1)

        logger.debug(
            "Starting pool",
            concurrency_limit=self.concurrency_limit,
            workers=worker_count,
        )

        await asyncio.gather(*(self._worker(n) for n in range(worker_count)))

        return [self.results[index] for index in sorted(self.results)]
