"""Custom exception classes for Patient Transfer.

All exceptions inherit from PatientTransferError to allow catching all custom exceptions.
"""

from typing import Optional

# Notification text used when a failed transfer carries no message
DEFAULT_TRANSFER_ERROR_MESSAGE = "Failed to transfer patient"


class PatientTransferError(Exception):
    """Base exception for all Patient Transfer custom exceptions."""

    pass


class ValidationError(PatientTransferError):
    """Raised when data validation fails outside the dialog form.

    Examples:
        - Invalid transfer response payload
        - Invalid transfer request passed to a transport
    """

    pass


class FormStateError(PatientTransferError):
    """Raised when a form state transition is given an inconsistent mapping.

    Examples:
        - Replacement values missing the year_of_birth key
        - Replacement errors carrying an unknown field
    """

    pass


class TransportError(PatientTransferError):
    """Raised when the transfer request cannot be completed.

    Examples:
        - Connection timeout
        - HTTP error responses
        - Network unreachable

    Attributes:
        message: Message suitable for the operator (server provided when available)
        status_code: HTTP status code if a response was received
    """

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message or "")
        self.message = message
        self.status_code = status_code


class ConfigurationError(PatientTransferError):
    """Raised when configuration loading or validation fails.

    Examples:
        - Missing required configuration
        - Invalid configuration file format
        - Configuration value out of range
    """

    pass


class CandidateLoadError(PatientTransferError):
    """Raised when the candidate list cannot be loaded.

    Examples:
        - Candidate CSV file unreadable
        - Missing required columns
        - Duplicate candidate ids
    """

    pass


def extract_error_message(
    error: BaseException,
    fallback: str = DEFAULT_TRANSFER_ERROR_MESSAGE,
) -> str:
    """Pick the operator-facing message for a failed transfer.

    Prefers an explicit ``message`` attribute, then the exception text,
    then the fallback.

    Args:
        error: Exception raised by the transport
        fallback: Message used when the error carries none

    Returns:
        Non-empty message string

    Example:
        >>> extract_error_message(TransportError("network down"))
        'network down'
        >>> extract_error_message(TransportError())
        'Failed to transfer patient'
    """
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    if isinstance(error, TransportError):
        return fallback
    return str(error) or fallback
