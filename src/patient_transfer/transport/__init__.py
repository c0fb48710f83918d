"""Transport module.

This module provides the HTTP transport used to send transfer requests.
"""

from patient_transfer.transport.http_client import (
    ConnectionPool,
    ConnectionPoolConfig,
    HTTPTransferTransport,
)

__all__ = [
    "ConnectionPool",
    "ConnectionPoolConfig",
    "HTTPTransferTransport",
]
