"""Configuration manager for loading and managing configuration.

This module provides the main configuration loading functionality, including
support for JSON configuration files, environment variable overrides, and
configuration validation.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from patient_transfer.config.defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from patient_transfer.config.schema import Config, LoggingConfig, TransportConfig
from patient_transfer.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variable prefix for all configuration overrides
ENV_PREFIX = "PATIENT_TRANSFER_"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. CLI arguments (handled by caller)
    2. Environment variables (PATIENT_TRANSFER_* prefix)
    3. Configuration file (JSON)
    4. Default values

    Args:
        config_path: Path to configuration file. If None, uses ./config/config.json

    Returns:
        Validated Config instance

    Raises:
        ConfigurationError: If configuration is invalid or malformed

    Example:
        >>> config = load_config(Path("custom/config.json"))
        >>> transfer_url = config.endpoints.transfer_url
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_PATH)

    config_dict = _load_config_file(config_path)
    config_dict = _apply_env_overrides(config_dict)

    try:
        return Config(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed:\n{e}\n\n"
            f"Fix: Check your configuration file at {config_path} and ensure all "
            f"values match the expected format."
        ) from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration file or return defaults.

    Raises:
        ConfigurationError: If JSON is malformed or the file is unreadable
    """
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_dict = json.load(f)
            logger.info(f"Loaded configuration from {config_path}")
            return config_dict
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {config_path}\n"
                f"Error: {e}\n"
                f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read config file: {config_path}\n"
                f"Error: {e}\n"
                f"Fix: Check file permissions and path"
            ) from e

    logger.info(
        f"Config file not found: {config_path}. Using default configuration."
    )
    # Deep copy so callers cannot mutate the defaults
    return json.loads(json.dumps(DEFAULT_CONFIG))


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides with PATIENT_TRANSFER_ prefix.

    For example: PATIENT_TRANSFER_TRANSFER_URL, PATIENT_TRANSFER_LOG_LEVEL,
    PATIENT_TRANSFER_FACILITY_ID.

    Raises:
        ConfigurationError: If a numeric override is not a number
    """
    if transfer_url := os.getenv(f"{ENV_PREFIX}TRANSFER_URL"):
        config_dict.setdefault("endpoints", {})["transfer_url"] = transfer_url
        logger.debug("Override: transfer_url from environment")

    if verify_tls := os.getenv(f"{ENV_PREFIX}VERIFY_TLS"):
        config_dict.setdefault("transport", {})["verify_tls"] = _parse_bool(verify_tls)
        logger.debug("Override: verify_tls from environment")

    numeric_overrides = [
        ("TIMEOUT_CONNECT", "timeout_connect", int),
        ("TIMEOUT_READ", "timeout_read", int),
        ("MAX_RETRIES", "max_retries", int),
        ("BACKOFF_FACTOR", "backoff_factor", float),
    ]
    for env_suffix, key, cast in numeric_overrides:
        if raw := os.getenv(f"{ENV_PREFIX}{env_suffix}"):
            try:
                config_dict.setdefault("transport", {})[key] = cast(raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for {ENV_PREFIX}{env_suffix}: '{raw}'. "
                    f"Fix: Use a numeric value."
                ) from e
            logger.debug(f"Override: {key} from environment")

    if log_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config_dict.setdefault("logging", {})["level"] = log_level
        logger.debug("Override: log_level from environment")

    if log_file := os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config_dict.setdefault("logging", {})["log_file"] = log_file
        logger.debug("Override: log_file from environment")

    if redact_pii := os.getenv(f"{ENV_PREFIX}REDACT_PII"):
        config_dict.setdefault("logging", {})["redact_pii"] = _parse_bool(redact_pii)
        logger.debug("Override: redact_pii from environment")

    if facility_id := os.getenv(f"{ENV_PREFIX}FACILITY_ID"):
        config_dict.setdefault("dialog", {})["facility_id"] = facility_id
        logger.debug("Override: facility_id from environment")

    return config_dict


def _parse_bool(value: str) -> bool:
    """Parse boolean value from string (case-insensitive)."""
    return value.lower() in ("true", "1", "yes", "on")


def get_transport_config(config: Config) -> TransportConfig:
    """Get transport configuration."""
    return config.transport


def get_logging_config(config: Config) -> LoggingConfig:
    """Get logging configuration."""
    return config.logging
