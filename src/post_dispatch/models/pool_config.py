"""
Run-scoped dispatch configuration.

PoolConfig is built once per dispatch run and never changes afterwards.
It is separate from Settings: Settings supplies defaults, PoolConfig is the
validated set of values a single run actually uses.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 503, 504})
DEFAULT_BASE_DELAY_MS = 1000


class PoolConfig(BaseModel):
    """Validated, immutable parameters of one dispatch run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    concurrency_limit: int = Field(default=10, ge=1, description="Max requests in flight")
    max_attempts: int = Field(default=5, ge=1, description="Total attempts per request")
    retryable_status_codes: frozenset[int] = Field(default=DEFAULT_RETRYABLE_STATUS_CODES)
    request_count: int = Field(default=5, ge=1, description="Requests in the batch")
    base_delay_ms: int = Field(default=DEFAULT_BASE_DELAY_MS, ge=0, description="Linear backoff unit")

    @field_validator("retryable_status_codes")
    @classmethod
    def validate_status_codes(cls, codes: frozenset[int]) -> frozenset[int]:
        """Only error statuses can be retried."""
        invalid = sorted(code for code in codes if not 400 <= code <= 599)
        if invalid:
            raise ValueError(f"retryable status codes must be within 400-599, got {invalid}")
        return codes
