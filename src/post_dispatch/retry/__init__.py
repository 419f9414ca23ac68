"""
Retry decision, backoff and per-request attempt loop.

Main Components:
    - RetryPolicy: Pure decision function (retry or terminal, and the delay)
    - LinearBackoff: delay_ms(n) = base_delay_ms * n
    - AttemptLoop: Per-request state machine driving attempts to a FinalResult
    - AttemptRecord: Ephemeral record of one attempt

Usage:
    >>> from post_dispatch.retry import AttemptLoop, RetryPolicy
    >>> policy = RetryPolicy(max_attempts=5)
    >>> result = await AttemptLoop(request, transport, policy).run()
"""

from post_dispatch.retry.backoff import LinearBackoff
from post_dispatch.retry.loop import AttemptLoop, AttemptState, classify_status
from post_dispatch.retry.metadata import AttemptRecord
from post_dispatch.retry.policy import RetryDecision, RetryPolicy

__all__ = [
    "AttemptLoop",
    "AttemptRecord",
    "AttemptState",
    "LinearBackoff",
    "RetryDecision",
    "RetryPolicy",
    "classify_status",
]
