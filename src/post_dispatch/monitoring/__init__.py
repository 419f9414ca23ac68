"""Monitoring and metrics instrumentation for the POST dispatcher.

Exports Prometheus metrics for operational monitoring and alerting.
"""

from post_dispatch.monitoring.metrics import (
    attempt_latency_seconds,
    attempts_total,
    in_flight,
    requests_total,
    retries_total,
)

__all__ = [
    "requests_total",
    "attempts_total",
    "retries_total",
    "in_flight",
    "attempt_latency_seconds",
]
