"""Candidates module.

This module provides loading of the candidate list offered in the transfer dialog.
"""

from patient_transfer.candidates.loader import REQUIRED_COLUMNS, load_candidates

__all__ = [
    "REQUIRED_COLUMNS",
    "load_candidates",
]
