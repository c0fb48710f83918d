"""Models module.

This module provides data models and dataclasses for the application.
"""

from patient_transfer.models.candidate import (
    Candidate,
    CandidateOption,
    build_candidate_options,
    find_candidate,
)
from patient_transfer.models.transfer import (
    OutcomeStatus,
    ProducedRecord,
    SubmissionOutcome,
    TransferRequest,
    TransferResponse,
)

__all__ = [
    "Candidate",
    "CandidateOption",
    "build_candidate_options",
    "find_candidate",
    "OutcomeStatus",
    "ProducedRecord",
    "SubmissionOutcome",
    "TransferRequest",
    "TransferResponse",
]
