"""
Pydantic data models for the POST dispatcher.

Includes:
- Request models (PostPayload, RequestDescriptor)
- Outcome models (Success, ConnectionFailure, ServerError)
- Result models (Succeeded, FailedPermanently, FailedExhausted, DispatchReport)
- PoolConfig (validated run parameters)
- Enums (ResultStatus, ErrorKind)
"""

from post_dispatch.models.enums import ErrorKind, ResultStatus
from post_dispatch.models.outcome_models import (
    ConnectionFailure,
    DispatchReport,
    FailedExhausted,
    FailedPermanently,
    FailedResult,
    FinalResult,
    Outcome,
    ServerError,
    Succeeded,
    Success,
)
from post_dispatch.models.pool_config import (
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_RETRYABLE_STATUS_CODES,
    PoolConfig,
)
from post_dispatch.models.request_models import PostPayload, RequestDescriptor

__all__ = [
    "ErrorKind",
    "ResultStatus",
    "ConnectionFailure",
    "DispatchReport",
    "FailedExhausted",
    "FailedPermanently",
    "FailedResult",
    "FinalResult",
    "Outcome",
    "ServerError",
    "Succeeded",
    "Success",
    "DEFAULT_BASE_DELAY_MS",
    "DEFAULT_RETRYABLE_STATUS_CODES",
    "PoolConfig",
    "PostPayload",
    "RequestDescriptor",
]
