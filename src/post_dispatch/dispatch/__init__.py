"""
Batch dispatch: request generation, bounded scheduling and result delivery.

Components:
- RequestGenerator: Lazy, single-pass descriptor sequence
- ConcurrencyPool: Sliding-window scheduler over AttemptLoops
- ResultCollector: Sink protocol plus logging/recording/composite sinks
- dispatch / dispatch_async: Run a whole batch and join it
"""

from post_dispatch.dispatch.collector import (
    CompositeResultCollector,
    LoggingResultCollector,
    RecordingResultCollector,
    ResultCollector,
)
from post_dispatch.dispatch.dispatcher import build_pool_config, dispatch, dispatch_async, validate_url
from post_dispatch.dispatch.exceptions import ConfigurationError, DispatchError, DuplicateResultError
from post_dispatch.dispatch.generator import RequestGenerator
from post_dispatch.dispatch.pool import ConcurrencyPool

__all__ = [
    "CompositeResultCollector",
    "LoggingResultCollector",
    "RecordingResultCollector",
    "ResultCollector",
    "build_pool_config",
    "dispatch",
    "dispatch_async",
    "validate_url",
    "ConfigurationError",
    "DispatchError",
    "DuplicateResultError",
    "RequestGenerator",
    "ConcurrencyPool",
]
