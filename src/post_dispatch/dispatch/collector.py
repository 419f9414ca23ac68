"""
Result collectors.

A collector receives every terminal result exactly once, tagged with its
request index, in completion order. Collectors are called from the event
loop and must not block.
"""

from typing import Protocol

import structlog

from post_dispatch.dispatch.exceptions import DuplicateResultError
from post_dispatch.models.outcome_models import FailedResult, FinalResult, Succeeded

logger = structlog.get_logger(__name__)


class ResultCollector(Protocol):
    """Sink for terminal results."""

    def on_success(self, result: Succeeded, index: int) -> None:
        ...

    def on_failure(self, result: FailedResult, index: int) -> None:
        ...


class LoggingResultCollector:
    """Writes one log line per finished request."""

    def __init__(self, logger_name: str = "post_dispatch.results"):
        self._logger = structlog.get_logger(logger_name)

    def on_success(self, result: Succeeded, index: int) -> None:
        self._logger.info(
            f"Request successful: {result.body}",
            index=index,
            status_code=result.status_code,
            attempts=result.attempts,
        )

    def on_failure(self, result: FailedResult, index: int) -> None:
        self._logger.warning(
            f"Request #{index} with error: {result.describe()}",
            index=index,
            status=result.status,
            error_kind=result.error_kind.value,
            attempts=result.attempts,
        )


class RecordingResultCollector:
    """
    Keeps results in memory, keyed by index.

    Rejects a second result for the same index with DuplicateResultError.
    """

    def __init__(self) -> None:
        self.results: dict[int, FinalResult] = {}
        self.completion_order: list[int] = []

    def _record(self, result: FinalResult, index: int) -> None:
        if index in self.results:
            raise DuplicateResultError(index)
        self.results[index] = result
        self.completion_order.append(index)

    def on_success(self, result: Succeeded, index: int) -> None:
        self._record(result, index)

    def on_failure(self, result: FailedResult, index: int) -> None:
        self._record(result, index)

    def ordered(self) -> list[FinalResult]:
        """Results sorted by request index."""
        return [self.results[index] for index in sorted(self.results)]


class CompositeResultCollector:
    """Fans every result out to several collectors, in order."""

    def __init__(self, *collectors: ResultCollector):
        self.collectors = collectors

    def on_success(self, result: Succeeded, index: int) -> None:
        for collector in self.collectors:
            collector.on_success(result, index)

    def on_failure(self, result: FailedResult, index: int) -> None:
        for collector in self.collectors:
            collector.on_failure(result, index)
