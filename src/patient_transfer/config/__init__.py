"""Config module.

This module provides configuration management functionality.
"""

from patient_transfer.config.manager import (
    get_logging_config,
    get_transport_config,
    load_config,
)
from patient_transfer.config.schema import (
    Config,
    DialogConfig,
    EndpointsConfig,
    LoggingConfig,
    TransportConfig,
)

__all__ = [
    # Main configuration loading
    "load_config",
    # Helper functions
    "get_transport_config",
    "get_logging_config",
    # Configuration models
    "Config",
    "DialogConfig",
    "EndpointsConfig",
    "LoggingConfig",
    "TransportConfig",
]
