"""Configuration management for the mock transfer server."""

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_FILE = Path("mocks/config.json")
ENV_PREFIX = "MOCK_SERVER_"


class TransferBehavior(BaseModel):
    """Transfer endpoint behavior configuration.

    Attributes:
        response_delay_ms: Response delay in milliseconds (0-5000)
        failure_rate: Probability of returning an error response (0.0-1.0)
        custom_fault_message: Error message returned on simulated failure
        known_phone_numbers: Phone numbers that produce a record; None means all
    """

    response_delay_ms: int = Field(
        default=0,
        ge=0,
        le=5000,
        description="Response delay in milliseconds",
    )
    failure_rate: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Probability of returning an error response (0.0-1.0)",
    )
    custom_fault_message: Optional[str] = Field(
        default=None,
        description="Error message returned on simulated failure",
    )
    known_phone_numbers: Optional[list[str]] = Field(
        default=None,
        description="Phone numbers that produce a record (None: all)",
    )


class MockServerConfig(BaseModel):
    """Mock server configuration model.

    Configuration precedence:
    1. Environment variables (MOCK_SERVER_* prefix)
    2. JSON config file
    3. Default values
    """

    host: str = Field(default="127.0.0.1", description="Server host address")
    http_port: int = Field(default=8080, description="HTTP server port")
    log_level: str = Field(default="INFO", description="Logging level")
    log_path: str = Field(default="mocks/logs/mock-server.log", description="Log file path")
    transfer_endpoint: str = Field(default="/patient/transfer", description="Transfer endpoint path")
    transfer_behavior: TransferBehavior = Field(
        default_factory=TransferBehavior,
        description="Transfer endpoint behavior configuration",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(valid_levels)}"
            )
        return v_upper

    @field_validator("http_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port number is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"Invalid port {v}. Must be between 1 and 65535.")
        return v

    @field_validator("transfer_endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"Invalid endpoint path '{v}'. Must start with '/'.")
        return v


def load_config(config_file: Path | None = None) -> MockServerConfig:
    """Load mock server configuration from file and environment variables.

    Args:
        config_file: Path to configuration JSON file. Defaults to mocks/config.json

    Returns:
        MockServerConfig instance with merged configuration

    Raises:
        FileNotFoundError: If config file specified but not found
        ValueError: If configuration is invalid
    """
    if config_file is None:
        config_file = DEFAULT_CONFIG_FILE

    config_data: dict = {}
    if config_file.exists():
        try:
            with open(config_file, encoding="utf-8") as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(
                f"Failed to parse configuration file '{config_file}': {e}. "
                f"Ensure the file contains valid JSON."
            ) from e
    elif config_file != DEFAULT_CONFIG_FILE:
        # Only raise if non-default config file was explicitly specified
        raise FileNotFoundError(
            f"Configuration file not found: '{config_file}'. "
            f"Ensure the file exists or check the path."
        )

    for key in ("host", "http_port", "log_level", "log_path", "transfer_endpoint"):
        env_key = f"{ENV_PREFIX}{key.upper()}"
        if env_key in os.environ:
            value: object = os.environ[env_key]
            if key == "http_port":
                try:
                    value = int(os.environ[env_key])
                except ValueError as e:
                    raise ValueError(
                        f"Invalid value for {env_key}: '{os.environ[env_key]}'. Must be an integer."
                    ) from e
            config_data[key] = value

    try:
        return MockServerConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}") from e
