"""Prometheus metrics for the POST dispatcher.

Alert rules worth configuring:
- dispatch_requests_total{result!="succeeded"} (destination rejecting writes)
- dispatch_retries_total (rising retry rate means the destination is saturated)
"""

from prometheus_client import Counter, Gauge, Histogram

# === Request Metrics ===

requests_total = Counter(
    "dispatch_requests_total",
    "Total requests by terminal result",
    ["result"],
)
"""
Terminal results counter.

Labels:
- result: succeeded, failed_permanently, failed_exhausted
"""

attempts_total = Counter(
    "dispatch_attempts_total",
    "Total attempts by outcome",
    ["outcome"],
)
"""
Attempt counter, one increment per network call.

Labels:
- outcome: success, connection_failure, server_error
"""

# === Retry Metrics ===

retries_total = Counter(
    "dispatch_retries_total",
    "Total retries scheduled by reason",
    ["reason"],
)
"""
Retries counter.

Labels:
- reason: connection_failure, or the retried status code (e.g. "503")
"""

# === Concurrency Metrics ===

in_flight = Gauge(
    "dispatch_in_flight",
    "Requests currently holding a pool slot",
)

attempt_latency_seconds = Histogram(
    "dispatch_attempt_latency_seconds",
    "Latency of a single attempt",
    ["outcome"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)
