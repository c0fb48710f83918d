"""Candidate patient data model.

This module defines the Candidate dataclass offered in the transfer dialog and
the CandidateOption derived from it for display.
"""

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass
class Candidate:
    """Patient record eligible for selection in the transfer dialog.

    Attributes:
        id: Unique patient identifier
        name: Patient display name
        gender: Administrative gender as shown to the operator
        phone_number: Contact phone number used to match the transfer
    """

    id: str
    name: str
    gender: str
    phone_number: str


@dataclass(frozen=True)
class CandidateOption:
    """Display entry for the patient picker.

    Attributes:
        id: Candidate identifier
        label: Text shown to the operator, "name (gender)"
    """

    id: str
    label: str


def build_candidate_options(candidates: Iterable[Candidate]) -> list[CandidateOption]:
    """Derive picker options from candidates, preserving order.

    Args:
        candidates: Candidate records

    Returns:
        List of CandidateOption with label "name (gender)"

    Example:
        >>> build_candidate_options([Candidate("p1", "Asha", "F", "+910000000001")])
        [CandidateOption(id='p1', label='Asha (F)')]
    """
    return [
        CandidateOption(id=candidate.id, label=f"{candidate.name} ({candidate.gender})")
        for candidate in candidates
    ]


def find_candidate(candidates: Iterable[Candidate], candidate_id: str) -> Optional[Candidate]:
    """Return the candidate with the given id, or None."""
    return next((c for c in candidates if c.id == candidate_id), None)
