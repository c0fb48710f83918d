"""Audit trail functionality for Patient Transfer.

This module provides structured audit logging for tracking transfer
submissions and their outcomes.
"""

import time
import uuid
from typing import Any, Dict

from .logger import get_logger

logger = get_logger(__name__)

# Key fields logged first, in this order
_FIELD_ORDER = [
    "status",
    "patient_id",
    "facility_id",
    "record_count",
    "duration",
    "error_message",
    "correlation_id",
]


def log_audit_event(event_type: str, details: Dict[str, Any]) -> None:
    """Log an audit trail event.

    Creates a structured audit log entry. Events are logged at INFO level,
    or ERROR level when ``details["status"] == "failure"``.

    Args:
        event_type: Type of operation (e.g., "TRANSFER_SUBMITTED",
                   "TRANSFER_COMPLETED", "TRANSFER_FAILED")
        details: Dictionary with event details. Common fields include:
                - status: "pending", "success" or "failure"
                - patient_id: Selected candidate id
                - record_count: Number of produced records
                - error_message: Error details (if status is failure)
                - correlation_id: Optional correlation ID for tracking related events

    Example:
        >>> log_audit_event("TRANSFER_COMPLETED", {
        ...     "status": "success",
        ...     "patient_id": "p1",
        ...     "record_count": 1,
        ... })
    """
    details = dict(details)
    details.setdefault("timestamp", time.time())
    details.setdefault("correlation_id", str(uuid.uuid4()))

    message_parts = [f"AUDIT [{event_type}]"]

    for field in _FIELD_ORDER:
        if field in details:
            value = details[field]
            if field == "duration" and isinstance(value, (int, float)):
                message_parts.append(f"{field}={value:.2f}s")
            else:
                message_parts.append(f"{field}={value}")

    for key, value in details.items():
        if key not in _FIELD_ORDER and key != "timestamp":
            message_parts.append(f"{key}={value}")

    audit_message = " | ".join(message_parts)

    if details.get("status") == "failure":
        logger.error(audit_message)
    else:
        logger.info(audit_message)


def log_transaction(
    transaction_type: str,
    request: str,
    response: str,
    status: str = "success",
) -> None:
    """Log a complete HTTP exchange with request and response bodies.

    The summary line is logged at INFO level, the bodies at DEBUG level.

    Args:
        transaction_type: Type of transaction (e.g., "TRANSFER")
        request: Request body
        response: Response body
        status: Transaction status ("success" or "failure")

    Example:
        >>> log_transaction("TRANSFER", '{"phone_number": "..."}', '{"results": []}')
    """
    correlation_id = str(uuid.uuid4())

    logger.info(
        f"TRANSACTION [{transaction_type}] | "
        f"status={status} | "
        f"correlation_id={correlation_id} | "
        f"request_size={len(request)} bytes | "
        f"response_size={len(response)} bytes"
    )

    logger.debug(
        f"TRANSACTION REQUEST [{transaction_type}] | "
        f"correlation_id={correlation_id}\n"
        f"{request}"
    )

    logger.debug(
        f"TRANSACTION RESPONSE [{transaction_type}] | "
        f"correlation_id={correlation_id}\n"
        f"{response}"
    )
