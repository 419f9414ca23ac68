"""
Retry decision policy.

RetryPolicy answers one question after every attempt: send again, and after
how long? It holds only immutable configuration, so one instance is shared
by every AttemptLoop of a run.

Decision rules, in order:
    1. attempts_so_far >= max_attempts: stop (exhausted)
    2. ConnectionFailure: retry
    3. ServerError with a retryable status (429/503/504 by default): retry
    4. Anything else: stop

Retrying a POST is not idempotent. A connection failure that happened after
the destination processed the write will cause a duplicate when the request
is sent again. No deduplication key is sent; callers that cannot tolerate
duplicates should run with max_attempts=1.
"""

from dataclasses import dataclass, field

from post_dispatch.models.outcome_models import ConnectionFailure, Outcome, ServerError
from post_dispatch.models.pool_config import DEFAULT_RETRYABLE_STATUS_CODES, PoolConfig
from post_dispatch.retry.backoff import LinearBackoff


@dataclass(frozen=True)
class RetryDecision:
    """
    Result of consulting the policy.

    Attributes:
        retry: Whether another attempt should be made
        delay_ms: Wait before that attempt (0 when not retrying)
        reason: Short label for logs and metrics
    """

    retry: bool
    delay_ms: int = 0
    reason: str = ""


@dataclass(frozen=True)
class RetryPolicy:
    """
    Pure retry decision function over immutable configuration.

    Attributes:
        max_attempts: Total attempts allowed per request, first one included
        retryable_status_codes: Statuses presumed transient
        backoff: Delay scheduler for retries
    """

    max_attempts: int = 5
    retryable_status_codes: frozenset[int] = DEFAULT_RETRYABLE_STATUS_CODES
    backoff: LinearBackoff = field(default_factory=LinearBackoff)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    @classmethod
    def from_config(cls, config: PoolConfig) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            retryable_status_codes=frozenset(config.retryable_status_codes),
            backoff=LinearBackoff(config.base_delay_ms),
        )

    def is_transient(self, outcome: Outcome) -> bool:
        """Whether the outcome is worth resending, ignoring the attempt budget."""
        if isinstance(outcome, ConnectionFailure):
            return True
        if isinstance(outcome, ServerError):
            return outcome.status_code in self.retryable_status_codes
        return False

    def decide(self, attempts_so_far: int, outcome: Outcome) -> RetryDecision:
        """
        Decide whether to retry after an attempt.

        Args:
            attempts_so_far: Attempts already made, the one just finished included
            outcome: Outcome of the attempt just finished

        Returns:
            RetryDecision; when retrying, delay_ms is the backoff for
            retry number `attempts_so_far`
        """
        if attempts_so_far >= self.max_attempts:
            return RetryDecision(retry=False, reason="exhausted")

        if not self.is_transient(outcome):
            return RetryDecision(retry=False, reason="not_retryable")

        if isinstance(outcome, ServerError):
            reason = str(outcome.status_code)
        else:
            reason = "connection_failure"

        return RetryDecision(
            retry=True,
            delay_ms=self.backoff.delay_ms(attempts_so_far),
            reason=reason,
        )
