"""
Dispatch-level exceptions.

Request outcomes never surface as exceptions: they are delivered as
results. These exceptions cover invalid input to a run and broken
invariants inside it.
"""


class DispatchError(Exception):
    """Base exception for dispatch errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(DispatchError):
    """
    Raised before any request is sent when run parameters are invalid.

    Examples: non-positive concurrency, retryable status outside 400-599,
    a destination URL that is not http(s).
    """
    pass


class DuplicateResultError(DispatchError):
    """Raised when a second terminal result arrives for the same index."""

    def __init__(self, index: int):
        super().__init__(
            f"Result for request #{index} was already reported",
            details={"index": index},
        )
        self.index = index
