"""Configuration schema models using pydantic.

This module defines the configuration structure and validation rules using pydantic.
All configuration values are validated according to the schema defined here.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class EndpointsConfig(BaseModel):
    """Configuration for endpoint URLs.

    Attributes:
        transfer_url: Endpoint receiving transfer requests
    """

    transfer_url: str = Field(..., description="Transfer endpoint URL")

    @field_validator("transfer_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL is valid HTTP/HTTPS.

        Raises:
            ValueError: If URL does not start with http:// or https://
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid URL: {v}. Must start with http:// or https://"
            )
        return v


class TransportConfig(BaseModel):
    """Configuration for HTTP/HTTPS transport.

    Attributes:
        verify_tls: Whether to verify TLS certificates
        timeout_connect: Connection timeout in seconds
        timeout_read: Read timeout in seconds
        max_retries: Maximum retry attempts for failed requests
        backoff_factor: Exponential backoff factor for retries
    """

    verify_tls: bool = True
    timeout_connect: int = Field(
        default=10,
        ge=1,
        description="Connection timeout in seconds"
    )
    timeout_read: int = Field(
        default=30,
        ge=1,
        description="Read timeout in seconds"
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Maximum retry attempts"
    )
    backoff_factor: float = Field(
        default=1.0,
        ge=0.0,
        description="Exponential backoff factor"
    )


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_pii: Whether to redact PII from logs
    """

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_file: Path = Field(
        default=Path("logs/patient-transfer.log"),
        description="Log file path"
    )
    redact_pii: bool = Field(
        default=False,
        description="Redact PII from logs"
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level, normalizing to uppercase.

        Raises:
            ValueError: If log level is not valid
        """
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        return v_upper


class DialogConfig(BaseModel):
    """Transfer dialog defaults.

    Attributes:
        facility_id: Facility used to build the post-transfer navigation path
    """

    facility_id: Optional[str] = Field(
        default=None,
        description="Facility identifier for navigation after a transfer"
    )


class Config(BaseModel):
    """Root configuration model.

    Attributes:
        endpoints: Endpoint URLs configuration
        transport: HTTP/HTTPS transport configuration
        logging: Logging configuration
        dialog: Transfer dialog defaults

    Example:
        >>> config = Config(
        ...     endpoints=EndpointsConfig(transfer_url="http://localhost:8080/patient/transfer")
        ... )
        >>> config.transport.max_retries
        3
    """

    endpoints: EndpointsConfig
    transport: TransportConfig = TransportConfig()
    logging: LoggingConfig = LoggingConfig()
    dialog: DialogConfig = DialogConfig()
