"""HTTP transport for transfer requests.

This module provides a pooled ``requests`` session with retry logic and the
``HTTPTransferTransport`` used by the transfer dialog. The blocking HTTP call
runs in a worker thread so the dialog's event loop is never blocked.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from threading import Lock
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from patient_transfer.config.schema import Config
from patient_transfer.logging_audit import log_transaction
from patient_transfer.models.transfer import TransferRequest, TransferResponse
from patient_transfer.utils.exceptions import TransportError, ValidationError

logger = logging.getLogger(__name__)

# Default connection pool settings
DEFAULT_MAX_CONNECTIONS = 4
DEFAULT_POOL_BLOCK = True
DEFAULT_RETRY_COUNT = 3
DEFAULT_BACKOFF_FACTOR = 0.3

# Response fields checked, in order, for a server-provided error message
SERVER_MESSAGE_FIELDS = ("detail", "message", "error")


@dataclass
class ConnectionPoolConfig:
    """Configuration for HTTP connection pooling.

    Attributes:
        max_connections: Maximum number of connections in the pool (>= 1)
        pool_block: Whether to block when pool is exhausted
        retry_count: Number of retries for failed requests
        backoff_factor: Factor for exponential backoff between retries

    Example:
        >>> config = ConnectionPoolConfig(max_connections=2, retry_count=0)
        >>> pool = ConnectionPool(config)
    """

    max_connections: int = DEFAULT_MAX_CONNECTIONS
    pool_block: bool = DEFAULT_POOL_BLOCK
    retry_count: int = DEFAULT_RETRY_COUNT
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_connections < 1:
            raise ValueError(
                f"max_connections must be >= 1, got {self.max_connections}"
            )
        if self.retry_count < 0:
            raise ValueError(
                f"retry_count must be >= 0, got {self.retry_count}"
            )
        if self.backoff_factor < 0:
            raise ValueError(
                f"backoff_factor must be >= 0, got {self.backoff_factor}"
            )


class ConnectionPool:
    """Lazily created, reusable HTTP session with retry logic.

    Thread-safe; the session is created on first use.

    Example:
        >>> with ConnectionPool() as pool:
        ...     session = pool.get_session()
    """

    def __init__(self, config: Optional[ConnectionPoolConfig] = None) -> None:
        self.config = config or ConnectionPoolConfig()
        self._session: Optional[requests.Session] = None
        self._lock = Lock()

    def get_session(self) -> requests.Session:
        """Get or create the configured HTTP session."""
        with self._lock:
            if self._session is None:
                self._session = self._create_session()
            return self._session

    def _create_session(self) -> requests.Session:
        retry_strategy = Retry(
            total=self.config.retry_count,
            backoff_factor=self.config.backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "POST", "PUT", "DELETE", "OPTIONS"],
            raise_on_status=False,
        )

        adapter = HTTPAdapter(
            pool_connections=self.config.max_connections,
            pool_maxsize=self.config.max_connections,
            pool_block=self.config.pool_block,
            max_retries=retry_strategy,
        )

        session = requests.Session()
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        logger.debug(
            "Created HTTP session with pool_maxsize=%d, retry_count=%d",
            self.config.max_connections,
            self.config.retry_count,
        )
        return session

    def close(self) -> None:
        """Close the session and release resources."""
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None
                logger.debug("ConnectionPool session closed")

    def __enter__(self) -> "ConnectionPool":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class HTTPTransferTransport:
    """Sends transfer requests as JSON over HTTP(S).

    Attributes:
        endpoint_url: Transfer endpoint URL
        timeout: (connect, read) timeout in seconds
        verify_tls: Whether TLS certificates are verified
        pool: Connection pool providing the session

    Example:
        >>> transport = HTTPTransferTransport(load_config())
        >>> response = asyncio.run(transport.transfer(
        ...     TransferRequest(phone_number="+910000000001", year_of_birth="1990")
        ... ))
    """

    def __init__(
        self,
        config: Config,
        endpoint_url: Optional[str] = None,
        pool: Optional[ConnectionPool] = None,
    ) -> None:
        self.endpoint_url = endpoint_url or config.endpoints.transfer_url
        self.timeout = (config.transport.timeout_connect, config.transport.timeout_read)
        self.verify_tls = config.transport.verify_tls
        self.pool = pool or ConnectionPool(
            ConnectionPoolConfig(
                retry_count=config.transport.max_retries,
                backoff_factor=config.transport.backoff_factor,
            )
        )

        if self.endpoint_url.startswith("http://"):
            logger.warning(
                "SECURITY WARNING: Using HTTP transport (not HTTPS) for the transfer "
                "endpoint. This is only acceptable for local development."
            )
        if not self.verify_tls:
            logger.warning(
                "TLS certificate verification is DISABLED. "
                "This should only be used for development with self-signed certificates."
            )

    async def transfer(self, request: TransferRequest) -> TransferResponse:
        """Submit a transfer request without blocking the event loop.

        Raises:
            TransportError: On network failure, HTTP error status or malformed response
        """
        return await asyncio.to_thread(self.post_transfer, request)

    def post_transfer(self, request: TransferRequest) -> TransferResponse:
        """Submit a transfer request (blocking).

        Args:
            request: Transfer payload

        Returns:
            Parsed TransferResponse

        Raises:
            TransportError: On network failure, HTTP error status or malformed response
        """
        body = request.to_dict()
        request_text = json.dumps(body)
        logger.info(f"Submitting transfer request to {self.endpoint_url}")

        try:
            response = self.pool.get_session().post(
                self.endpoint_url,
                json=body,
                timeout=self.timeout,
                verify=self.verify_tls,
            )
        except requests.Timeout as e:
            raise TransportError(
                f"Transfer request timed out after {self.timeout[1]}s"
            ) from e
        except requests.ConnectionError as e:
            raise TransportError(
                f"Cannot reach transfer endpoint {self.endpoint_url}"
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"Transfer request failed: {e}") from e

        if response.status_code >= 400:
            log_transaction("TRANSFER", request_text, response.text, status="failure")
            message = _server_message(response)
            logger.error(
                "Transfer endpoint returned HTTP %d: %s",
                response.status_code,
                message or "no message",
            )
            raise TransportError(message, status_code=response.status_code)

        try:
            parsed = TransferResponse.from_dict(response.json())
        except ValueError as e:
            log_transaction("TRANSFER", request_text, response.text, status="failure")
            raise TransportError("Transfer endpoint returned a non-JSON response") from e
        except ValidationError as e:
            log_transaction("TRANSFER", request_text, response.text, status="failure")
            raise TransportError(str(e)) from e

        log_transaction("TRANSFER", request_text, response.text, status="success")
        logger.info("Transfer accepted: %d record(s) produced", len(parsed.results))
        return parsed

    def close(self) -> None:
        self.pool.close()


def _server_message(response: requests.Response) -> Optional[str]:
    """Extract an error message from a JSON error body, if any."""
    try:
        data: Any = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    for key in SERVER_MESSAGE_FIELDS:
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    return None
