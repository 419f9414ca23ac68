"""
Per-attempt record.

An AttemptRecord is created for every network call and consumed right away
by the AttemptLoop for logging and metrics. It is never stored.
"""

from dataclasses import dataclass

from post_dispatch.models.outcome_models import Outcome


@dataclass(frozen=True)
class AttemptRecord:
    """
    One attempt of one request.

    Attributes:
        request_index: Index of the request in the batch
        attempt_number: 0-based, strictly increasing per request
        outcome: What the attempt produced
        latency_ms: Wall time of the network call
    """

    request_index: int
    attempt_number: int
    outcome: Outcome
    latency_ms: int = 0

    def __post_init__(self) -> None:
        """Validate record invariants."""
        if self.request_index < 0:
            raise ValueError("request_index must be >= 0")

        if self.attempt_number < 0:
            raise ValueError("attempt_number must be >= 0")

        if self.latency_ms < 0:
            raise ValueError("latency_ms must be >= 0")
