"""
Transport abstraction and implementations.

Components:
- BaseTransport: Abstract base class for transports
- HttpxTransport: Implementation on httpx.AsyncClient
- TransportResponse: Received status and body
- exceptions: Transport-specific exceptions
"""

from post_dispatch.transport.base_client import BaseTransport, TransportResponse
from post_dispatch.transport.httpx_client import HttpxTransport
from post_dispatch.transport.exceptions import (
    ConnectionFailureError,
    RequestTimeoutError,
    TransportError,
)

__all__ = [
    "BaseTransport",
    "TransportResponse",
    "HttpxTransport",
    "ConnectionFailureError",
    "RequestTimeoutError",
    "TransportError",
]
