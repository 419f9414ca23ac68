"""
httpx implementation of the request transport.

Uses one persistent httpx.AsyncClient for connection pooling. Connection
limits are sized to the dispatch concurrency so the pool never queues
requests the scheduler has already admitted.
"""

import time
from typing import Optional

import httpx
import structlog

from post_dispatch.transport.base_client import BaseTransport, TransportResponse
from post_dispatch.transport.exceptions import ConnectionFailureError, RequestTimeoutError
from post_dispatch.models.request_models import RequestDescriptor


logger = structlog.get_logger(__name__)


class HttpxTransport(BaseTransport):
    """
    Transport backed by httpx.AsyncClient.

    Features:
    - Connection pooling via a lazily created, persistent AsyncClient
    - httpx.TransportError (connect, read, write, pool, protocol) mapped to
      ConnectionFailureError; timeouts mapped to RequestTimeoutError
    - Redirects are not followed: a 3xx is reported as-is
    - Optional custom httpx transport (httpx.MockTransport in tests)
    """

    def __init__(
        self,
        timeout: float = 30.0,
        max_connections: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs
    ):
        """
        Initialize httpx transport.

        Args:
            timeout: Request timeout in seconds
            max_connections: Upper bound of pooled connections
            transport: Optional underlying httpx transport
            **kwargs: Additional config
        """
        super().__init__(timeout, **kwargs)

        self._client: Optional[httpx.AsyncClient] = None
        self._connection_limits = httpx.Limits(
            max_keepalive_connections=max_connections,
            max_connections=max_connections,
            keepalive_expiry=30.0,
        )
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                follow_redirects=False,
                transport=self._transport,
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    async def send(self, request: RequestDescriptor) -> TransportResponse:
        """Send one POST and return its status and body."""
        client = self._get_client()
        start_time = time.monotonic()

        try:
            response = await client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body,
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"Request timeout after {self.timeout}s",
                details={"index": request.index, "error_type": type(e).__name__},
            ) from e
        except httpx.TransportError as e:
            raise ConnectionFailureError(
                f"Network error: {e}" if str(e) else f"Network error: {type(e).__name__}",
                details={"index": request.index, "error_type": type(e).__name__},
            ) from e
        except httpx.RequestError as e:
            # Response arrived but could not be read (e.g. a corrupt encoded body)
            raise ConnectionFailureError(
                f"Unreadable response: {e}" if str(e) else f"Unreadable response: {type(e).__name__}",
                details={"index": request.index, "error_type": type(e).__name__},
            ) from e

        latency_ms = int((time.monotonic() - start_time) * 1000)
        logger.debug(
            "Response received",
            index=request.index,
            status_code=response.status_code,
            latency_ms=latency_ms,
        )
        return TransportResponse(status_code=response.status_code, body=response.text)

    async def close(self) -> None:
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed httpx client connection")
