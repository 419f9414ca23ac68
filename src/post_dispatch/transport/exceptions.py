"""
Custom exceptions for the transport layer.

The transport raises only for connection-level failures. Any response that
carries a status line, error statuses included, is returned as a value so
the AttemptLoop can classify it.
"""


class TransportError(Exception):
    """
    Base exception for all transport errors.

    All transport-specific exceptions inherit from this to allow catching
    any transport failure with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConnectionFailureError(TransportError):
    """
    Raised when no response was received from the destination.

    Includes DNS failures, refused connections, TLS errors, timeouts and
    protocol errors. Always presumed transient by the RetryPolicy.
    """
    pass


class RequestTimeoutError(ConnectionFailureError):
    """
    Raised when the request exceeded the configured timeout.

    Separate from generic connection errors so logs and metrics can tell
    a slow server from an unreachable one.
    """
    pass
