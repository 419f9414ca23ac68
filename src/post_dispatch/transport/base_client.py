"""
Abstract base transport for outbound requests.

Defines the single capability the dispatch core needs: send one request and
obtain either a status code with a body, or a connection-level failure.
This abstraction keeps TLS, pooling and DNS out of the core and lets tests
substitute an in-memory transport.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

import structlog

from post_dispatch.models.request_models import RequestDescriptor


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Status line and body of a received response."""

    status_code: int
    body: str = ""


class BaseTransport(ABC):
    """
    Abstract base class for request transports.

    Responsibilities:
    - Send exactly one request per `send` call
    - Return every received response, whatever its status
    - Raise ConnectionFailureError when no response arrives

    Does NOT handle:
    - Retry decisions (that's RetryPolicy's job)
    - Backoff waits (that's AttemptLoop's job)
    - Concurrency limits (that's ConcurrencyPool's job)

    Implementations must be safe to share between concurrent AttemptLoops:
    `send` must not mutate shared client configuration.
    """

    def __init__(self, timeout: float = 30.0, **kwargs):
        """
        Initialize base transport.

        Args:
            timeout: Request timeout in seconds
            **kwargs: Additional implementation-specific config
        """
        self.timeout = timeout
        self.extra_config = kwargs

        logger.debug(
            "Initialized transport",
            transport_class=self.__class__.__name__,
            timeout=timeout,
        )

    @abstractmethod
    async def send(self, request: RequestDescriptor) -> TransportResponse:
        """
        Send one request.

        Args:
            request: Descriptor of the request to send

        Returns:
            TransportResponse for any received status line (2xx-5xx alike)

        Raises:
            ConnectionFailureError: No response was received
        """
        pass

    async def close(self) -> None:
        """
        Release connections held by the transport.

        Default implementation does nothing. Subclasses should override if
        they hold persistent connections.
        """
        logger.debug("Closing transport", transport_class=self.__class__.__name__)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(timeout={self.timeout}s)"
