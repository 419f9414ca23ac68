"""
Bounded-concurrency POST dispatcher.

Sends a batch of identical POST requests to one endpoint with:
- A sliding window of at most N requests in flight
- Automatic retry of connection failures and transient statuses (429/503/504)
- Linear backoff between attempts
- Per-request results delivered to pluggable collectors

Architecture: RequestGenerator -> ConcurrencyPool -> AttemptLoop (RetryPolicy + LinearBackoff) -> ResultCollector
"""

from post_dispatch.dispatch.dispatcher import dispatch, dispatch_async

__version__ = "0.1.0"

__all__ = ["dispatch", "dispatch_async", "__version__"]
