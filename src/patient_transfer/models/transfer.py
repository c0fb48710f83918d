"""Transfer request and response data models.

This module defines the payload sent to the transfer endpoint, the parsed
response, and the outcome consumed by the submission orchestrator.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from patient_transfer.utils.exceptions import ValidationError


@dataclass(frozen=True)
class TransferRequest:
    """Outbound transfer payload.

    Matches a candidate by phone number and confirms identity via birth year.

    Attributes:
        phone_number: Candidate's phone number
        year_of_birth: Year of birth as entered, coerced to a string
    """

    phone_number: str
    year_of_birth: str

    def to_dict(self) -> Dict[str, str]:
        """Serialize to the JSON body sent over the wire."""
        return {
            "phone_number": self.phone_number,
            "year_of_birth": self.year_of_birth,
        }


@dataclass
class ProducedRecord:
    """Record created by a successful transfer.

    Attributes:
        id: Identifier of the destination record (navigation target)
        extra: Any other fields returned alongside the id
    """

    id: str
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TransferResponse:
    """Parsed transfer response.

    Attributes:
        results: Produced records, possibly empty
    """

    results: List[ProducedRecord] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransferResponse":
        """Build a response from a decoded JSON body.

        Args:
            data: Mapping with a "results" list of objects carrying "id"

        Returns:
            TransferResponse instance

        Raises:
            ValidationError: If the payload does not have the expected shape

        Example:
            >>> TransferResponse.from_dict({"results": [{"id": "e1"}]}).results[0].id
            'e1'
        """
        if not isinstance(data, dict):
            raise ValidationError(
                f"Invalid transfer response: expected an object, got {type(data).__name__}"
            )
        raw_results = data.get("results", [])
        if not isinstance(raw_results, list):
            raise ValidationError(
                "Invalid transfer response: 'results' must be a list"
            )

        results: List[ProducedRecord] = []
        for index, item in enumerate(raw_results):
            if not isinstance(item, dict) or item.get("id") in (None, ""):
                raise ValidationError(
                    f"Invalid transfer response: result {index} has no 'id'"
                )
            extra = {k: v for k, v in item.items() if k != "id"}
            results.append(ProducedRecord(id=str(item["id"]), extra=extra))
        return cls(results=results)


class OutcomeStatus(Enum):
    """Submission outcome status."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


@dataclass
class SubmissionOutcome:
    """Result of one transfer dispatch, consumed once by the orchestrator.

    Attributes:
        status: SUCCESS or FAILURE
        results: Produced records (success only)
        message: Failure message, None when the transport gave none
    """

    status: OutcomeStatus
    results: List[ProducedRecord] = field(default_factory=list)
    message: Optional[str] = None

    @classmethod
    def success(cls, response: TransferResponse) -> "SubmissionOutcome":
        return cls(status=OutcomeStatus.SUCCESS, results=list(response.results))

    @classmethod
    def failure(cls, message: Optional[str] = None) -> "SubmissionOutcome":
        return cls(status=OutcomeStatus.FAILURE, message=message)

    @property
    def is_success(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS
