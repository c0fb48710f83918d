"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# Fallback when no configuration file is present
DEFAULT_CONFIG: dict[str, Any] = {
    "endpoints": {
        # Default to the local mock endpoint
        "transfer_url": "http://localhost:8080/patient/transfer",
    },
    "transport": {
        "verify_tls": True,
        "timeout_connect": 10,
        "timeout_read": 30,
        "max_retries": 3,
        "backoff_factor": 1.0,
    },
    "logging": {
        "level": "INFO",
        "log_file": "logs/patient-transfer.log",
        # Do not redact PII by default (user must opt-in for privacy)
        "redact_pii": False,
    },
    "dialog": {
        "facility_id": None,
    },
}

# Default configuration file path
DEFAULT_CONFIG_PATH = "config/config.json"
