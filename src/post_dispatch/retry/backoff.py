"""
Backoff delay computation.

The delay law is linear: retry N waits N * base_delay_ms. There is no
jitter and no cap, so a request allowed many attempts can wait a long time
before its last one. Swapping in exponential growth or jitter means adding
another scheduler with the same `delay_ms` signature.
"""

from dataclasses import dataclass

from post_dispatch.models.pool_config import DEFAULT_BASE_DELAY_MS


@dataclass(frozen=True)
class LinearBackoff:
    """
    Linear backoff scheduler.

    Attributes:
        base_delay_ms: Delay before the first retry; retry N waits N times this
    """

    base_delay_ms: int = DEFAULT_BASE_DELAY_MS

    def __post_init__(self) -> None:
        if self.base_delay_ms < 0:
            raise ValueError("base_delay_ms must be >= 0")

    def delay_ms(self, retry_number: int) -> int:
        """
        Delay before the given retry.

        Args:
            retry_number: 1 for the first retry, 2 for the second, ...

        Returns:
            Delay in milliseconds
        """
        if retry_number < 1:
            raise ValueError(f"retry_number must be >= 1, got {retry_number}")
        return self.base_delay_ms * retry_number
