"""
Attempt outcomes and terminal results.

Outcome is what a single attempt produced. FinalResult is what a request
ended with after the AttemptLoop stopped retrying. Outcomes are tagged on
`kind` and results on `status`, so both validate as discriminated unions.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

from post_dispatch.models.enums import ErrorKind, ResultStatus


# === Attempt outcomes ===


class Success(BaseModel):
    """A response with a status code below 400."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    status_code: int = Field(..., ge=100, lt=400)
    body: str = ""


class ConnectionFailure(BaseModel):
    """No response was received (DNS, TCP, TLS, timeout before a status line)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["connection_failure"] = "connection_failure"
    error: str = Field(..., description="Human-readable transport error")
    error_type: str = Field(default="ConnectionFailure", description="Transport exception class name")


class ServerError(BaseModel):
    """A response with a status code of 400 or above."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["server_error"] = "server_error"
    status_code: int = Field(..., ge=400, le=999)
    body: str = ""


Outcome = Annotated[Union[Success, ConnectionFailure, ServerError], Field(discriminator="kind")]


# === Terminal results ===


class Succeeded(BaseModel):
    """Terminal success."""

    model_config = ConfigDict(frozen=True)

    status: Literal["succeeded"] = "succeeded"
    index: int = Field(..., ge=0)
    attempts: int = Field(..., ge=1)
    status_code: int
    body: str = ""

    def describe(self) -> str:
        return f"HTTP {self.status_code}"


class FailedPermanently(BaseModel):
    """
    Terminal failure that resending cannot fix.

    Usually a non-retryable status. When the attempt loop itself raised,
    `status_code` is None and `error` names the exception.
    """

    model_config = ConfigDict(frozen=True)

    status: Literal["failed_permanently"] = "failed_permanently"
    index: int = Field(..., ge=0)
    attempts: int = Field(..., ge=1)
    status_code: int | None = None
    body: str = ""
    error: str | None = None
    error_kind: ErrorKind = ErrorKind.SERVER_PERMANENT

    def describe(self) -> str:
        if self.status_code is None:
            return self.error or self.error_kind.value
        return f"HTTP {self.status_code}"


class FailedExhausted(BaseModel):
    """
    Terminal failure after max_attempts on an otherwise retryable outcome.

    Kept distinct from FailedPermanently so callers can tell "the server
    refused" from "we gave up".
    """

    model_config = ConfigDict(frozen=True)

    status: Literal["failed_exhausted"] = "failed_exhausted"
    index: int = Field(..., ge=0)
    attempts: int = Field(..., ge=1)
    last_outcome: Annotated[Union[ConnectionFailure, ServerError], Field(discriminator="kind")]
    error_kind: ErrorKind = ErrorKind.EXHAUSTED_RETRIES

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cause(self) -> ErrorKind:
        """What kept failing: a connection error or a transient status."""
        if isinstance(self.last_outcome, ConnectionFailure):
            return ErrorKind.CONNECTION_FAILURE
        return ErrorKind.SERVER_TRANSIENT

    @property
    def status_code(self) -> int | None:
        if isinstance(self.last_outcome, ServerError):
            return self.last_outcome.status_code
        return None

    def describe(self) -> str:
        if isinstance(self.last_outcome, ServerError):
            detail = f"HTTP {self.last_outcome.status_code}"
        else:
            detail = f"{self.last_outcome.error_type}: {self.last_outcome.error}"
        return f"{detail} (gave up after {self.attempts} attempts)"


FinalResult = Annotated[
    Union[Succeeded, FailedPermanently, FailedExhausted],
    Field(discriminator="status"),
]
FailedResult = Union[FailedPermanently, FailedExhausted]


class DispatchReport(BaseModel):
    """
    Joined result of one dispatch run.

    `results` holds exactly one entry per request, ordered by index.
    """

    model_config = ConfigDict(frozen=True)

    results: list[FinalResult] = Field(default_factory=list)
    elapsed_ms: int = Field(default=0, ge=0)
    peak_in_flight: int = Field(default=0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.status == ResultStatus.SUCCEEDED)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failed(self) -> int:
        return len(self.results) - self.succeeded

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_attempts(self) -> int:
        return sum(r.attempts for r in self.results)
