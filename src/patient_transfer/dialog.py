"""Transfer dialog controller.

Drives one dialog session: field change and blur handling on top of the form
store, whole-form validation, and the transfer submission lifecycle:

    Idle -> Validating -> Idle (invalid, errors shown)
                       -> Submitting -> Idle (success or failure)

The controller holds no lock. At most one transfer is in flight by convention:
the host must disable its submit action while ``is_loading`` is True (see
``on_loading_change``).
"""

import logging
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional

from patient_transfer.collaborators import Navigator, NotificationSink, TransferTransport
from patient_transfer.form.fields import (
    PATIENT,
    YEAR_OF_BIRTH,
    YEAR_OF_BIRTH_MAX_LENGTH,
    initial_values,
)
from patient_transfer.form.state import FormState, FormStore
from patient_transfer.form.validator import (
    YearBounds,
    validate_form,
    validate_year_of_birth_on_blur,
)
from patient_transfer.logging_audit import log_audit_event
from patient_transfer.models.candidate import (
    Candidate,
    CandidateOption,
    build_candidate_options,
    find_candidate,
)
from patient_transfer.models.transfer import (
    SubmissionOutcome,
    TransferRequest,
    TransferResponse,
)
from patient_transfer.utils.exceptions import (
    DEFAULT_TRANSFER_ERROR_MESSAGE,
    extract_error_message,
)

logger = logging.getLogger(__name__)

ENCOUNTER_PATH_TEMPLATE = "/facility/{facility_id}/patient/{record_id}/encounter"
SUCCESS_MESSAGE_TEMPLATE = "Patient {name} transferred successfully"


class DialogPhase(Enum):
    """Submission lifecycle phase."""

    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    SUBMITTING = "SUBMITTING"


def build_encounter_path(facility_id: str, record_id: str) -> str:
    """Navigation target for a produced record.

    Example:
        >>> build_encounter_path("f1", "e1")
        '/facility/f1/patient/e1/encounter'
    """
    return ENCOUNTER_PATH_TEMPLATE.format(facility_id=facility_id, record_id=record_id)


class TransferPatientDialog:
    """Form-state and submission controller for one transfer dialog session.

    Attributes:
        candidates: Candidates the operator may pick from
        options: Display options derived from candidates ("name (gender)")
        facility_id: Scoping identifier used to build the navigation target
        bounds: Year-of-birth bounds, fixed at construction
        store: Form state store for this session

    Example:
        >>> dialog = TransferPatientDialog(
        ...     candidates, transport, notifier, navigator,
        ...     facility_id="f1", on_accepted=close, on_cancelled=close,
        ... )
        >>> dialog.handle_change("patient", "p1")
        >>> dialog.handle_change("year_of_birth", "1990")
        >>> asyncio.run(dialog.submit())
    """

    def __init__(
        self,
        candidates: Iterable[Candidate],
        transport: TransferTransport,
        notifier: NotificationSink,
        navigator: Navigator,
        *,
        facility_id: str,
        on_accepted: Callable[[], None],
        on_cancelled: Callable[[], None],
        on_loading_change: Optional[Callable[[bool], None]] = None,
        bounds: Optional[YearBounds] = None,
    ) -> None:
        self.candidates = list(candidates)
        self.options = build_candidate_options(self.candidates)
        self.transport = transport
        self.notifier = notifier
        self.navigator = navigator
        self.facility_id = facility_id
        self.on_accepted = on_accepted
        self.on_cancelled = on_cancelled
        self.on_loading_change = on_loading_change
        self.bounds = bounds or YearBounds.for_today()
        self.store = FormStore()

        self._loading = False
        self._phase = DialogPhase.IDLE
        self._generation = 0
        self._closed = False

        logger.debug(
            "Transfer dialog opened: facility_id=%s, candidates=%d, max_year=%d",
            facility_id,
            len(self.candidates),
            self.bounds.max_year,
        )

    @property
    def state(self) -> FormState:
        return self.store.state

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def phase(self) -> DialogPhase:
        return self._phase

    @property
    def is_closed(self) -> bool:
        return self._closed

    def handle_change(self, name: str, value: Any) -> None:
        """Apply a field change event.

        year_of_birth entries longer than the allowed length are dropped;
        the stored value is left unchanged.

        Raises:
            FormStateError: If ``name`` is not a registered field
        """
        if name == YEAR_OF_BIRTH and len(str(value)) > YEAR_OF_BIRTH_MAX_LENGTH:
            logger.debug("Dropped year_of_birth entry longer than %d characters",
                         YEAR_OF_BIRTH_MAX_LENGTH)
            return
        self.store.set_values({**self.store.values, name: value})

    def handle_blur(self, name: str) -> None:
        """Run live validation for a field that lost focus."""
        if name != YEAR_OF_BIRTH:
            return
        message = validate_year_of_birth_on_blur(self.store.values[YEAR_OF_BIRTH], self.bounds)
        if message is None:
            return
        self.store.set_errors({**self.store.errors, name: message})

    def validate_form(self) -> bool:
        """Validate every field and commit the recomputed errors.

        Returns:
            True if no field has an error
        """
        is_valid, errors = validate_form(self.store.values, self.bounds)
        self.store.set_errors(errors)
        return is_valid

    async def submit(self) -> None:
        """Validate and, if valid, dispatch the transfer request.

        Transport failures are reported through the notification sink and
        never re-raised. Loading is set before dispatch and cleared after the
        outcome has been handled.
        """
        if self._closed:
            logger.warning("Submit ignored: transfer dialog is closed")
            return

        self._phase = DialogPhase.VALIDATING
        if not self.validate_form():
            logger.info("Transfer form invalid, request not sent")
            self._phase = DialogPhase.IDLE
            return

        values = self.store.values
        selected_id = values[PATIENT]
        candidate = find_candidate(self.candidates, selected_id)
        if candidate is None:
            logger.warning("Selected patient %s is not in the candidate list", selected_id)
            self._phase = DialogPhase.IDLE
            return

        request = TransferRequest(
            phone_number=candidate.phone_number,
            year_of_birth=str(values[YEAR_OF_BIRTH]),
        )
        generation = self._generation

        self._phase = DialogPhase.SUBMITTING
        self._set_loading(True)
        log_audit_event("TRANSFER_SUBMITTED", {
            "status": "pending",
            "patient_id": selected_id,
            "facility_id": self.facility_id,
        })

        try:
            try:
                response = await self.transport.transfer(request)
                if isinstance(response, Mapping):
                    response = TransferResponse.from_dict(response)
                outcome = SubmissionOutcome.success(response)
            except Exception as e:
                logger.error("Transfer request failed: %s", e)
                outcome = SubmissionOutcome.failure(extract_error_message(e))

            if generation != self._generation:
                logger.debug("Ignoring transfer outcome for a closed dialog session")
                return

            if outcome.is_success:
                self._handle_success(outcome, selected_id)
            else:
                self._handle_failure(outcome, selected_id)
        finally:
            self._set_loading(False)
            self._phase = DialogPhase.IDLE

    def cancel(self) -> None:
        """End the session at the operator's request."""
        self.close()
        self.on_cancelled()

    def close(self) -> None:
        """Tear down the session; outcomes still in flight are ignored."""
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        logger.debug("Transfer dialog closed")

    def _handle_success(self, outcome: SubmissionOutcome, selected_id: str) -> None:
        self.store.set_values(initial_values())
        self.on_accepted()

        log_audit_event("TRANSFER_COMPLETED", {
            "status": "success",
            "patient_id": selected_id,
            "record_count": len(outcome.results),
        })

        if not outcome.results:
            return

        name = self._option_label(selected_id)
        self.notifier.notify_success(SUCCESS_MESSAGE_TEMPLATE.format(name=name))
        self.navigator.go_to(build_encounter_path(self.facility_id, outcome.results[0].id))

    def _handle_failure(self, outcome: SubmissionOutcome, selected_id: str) -> None:
        message = outcome.message or DEFAULT_TRANSFER_ERROR_MESSAGE
        log_audit_event("TRANSFER_FAILED", {
            "status": "failure",
            "patient_id": selected_id,
            "error_message": message,
        })
        self.notifier.notify_error(message)

    def _option_label(self, candidate_id: str) -> str:
        option: Optional[CandidateOption] = next(
            (o for o in self.options if o.id == candidate_id), None
        )
        return option.label if option else ""

    def _set_loading(self, loading: bool) -> None:
        self._loading = loading
        if self.on_loading_change is not None:
            self.on_loading_change(loading)
