"""Custom log formatters for Patient Transfer.

This module provides specialized formatters for logging, including PII redaction.
"""

import logging
import re
from typing import List, Tuple


class PIIRedactingFormatter(logging.Formatter):
    """Formatter that redacts Personally Identifiable Information (PII) from log messages.

    Covers the identity data that flows through a transfer: phone numbers,
    years of birth and patient names.

    Attributes:
        redact_pii: Whether to enable PII redaction
        patterns: List of (regex_pattern, replacement_text) tuples for redaction

    Example:
        >>> formatter = PIIRedactingFormatter(redact_pii=True)
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
    """

    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: str | None = None,
        redact_pii: bool = False,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_pii = redact_pii

        self.patterns: List[Tuple[re.Pattern[str], str]] = [
            # phone_number="+910000000001" style pairs (JSON or key=value)
            (re.compile(r'("?phone_number"?\s*[:=]\s*)"?[^",}\s]+"?'),
             r'\1[PHONE-REDACTED]'),

            # Bare international / dashed phone numbers: +910000000001, 555-555-1234
            (re.compile(r'\+\d{8,15}\b|\b\d{3}-\d{3}-\d{4}\b'), '[PHONE-REDACTED]'),

            # year_of_birth=1990, "year_of_birth": "1990"
            (re.compile(r'("?year_of_birth"?\s*[:=]\s*)"?\d{1,4}"?'),
             r'\1[YOB-REDACTED]'),

            # name="Asha Rao", name=Asha
            (re.compile(r'name=["\']?([^"\'|,]+)["\']?'), 'name=[NAME-REDACTED]'),

            # "Patient Asha (F) transferred", "Patient: Asha Rao"
            (re.compile(r'(Patient):?\s+[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*(?:\s+\([^)]*\))?'),
             r'\1 [NAME-REDACTED]'),
        ]

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional PII redaction."""
        original = super().format(record)

        if self.redact_pii:
            for pattern, replacement in self.patterns:
                original = pattern.sub(replacement, original)

        return original
