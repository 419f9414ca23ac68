"""
Enumerations for dispatch data models.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class ResultStatus(str, Enum):
    """Terminal state of a request."""

    SUCCEEDED = "succeeded"
    FAILED_PERMANENTLY = "failed_permanently"
    FAILED_EXHAUSTED = "failed_exhausted"


class ErrorKind(str, Enum):
    """
    Failure taxonomy reported on failed results.

    - CONNECTION_FAILURE: no response (DNS, TCP, TLS, timeout)
    - SERVER_TRANSIENT: retryable status (429/503/504 by default)
    - SERVER_PERMANENT: any other status >= 400, never retried
    - EXHAUSTED_RETRIES: attempts ran out while the outcome was still retryable
    - UNEXPECTED_ERROR: the attempt loop itself raised; the request is abandoned
    """

    CONNECTION_FAILURE = "connection_failure"
    SERVER_TRANSIENT = "server_transient"
    SERVER_PERMANENT = "server_permanent"
    EXHAUSTED_RETRIES = "exhausted_retries"
    UNEXPECTED_ERROR = "unexpected_error"
