"""Unit tests for the transfer dialog controller."""

import asyncio
import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from patient_transfer.dialog import (
    DialogPhase,
    TransferPatientDialog,
    build_encounter_path,
)
from patient_transfer.form.fields import PATIENT, YEAR_OF_BIRTH, initial_values
from patient_transfer.form.validator import PATIENT_REQUIRED_MESSAGE, YearBounds
from patient_transfer.models.transfer import (
    ProducedRecord,
    TransferRequest,
    TransferResponse,
)
from patient_transfer.utils.exceptions import FormStateError, TransportError


@pytest.fixture
def harness(candidates):
    """Build a dialog wired to mock collaborators."""
    transport = Mock()
    transport.transfer = AsyncMock(
        return_value=TransferResponse(results=[ProducedRecord(id="e1")])
    )
    loading_events: list[bool] = []
    h = SimpleNamespace(
        transport=transport,
        notifier=Mock(),
        navigator=Mock(),
        on_accepted=Mock(),
        on_cancelled=Mock(),
        loading_events=loading_events,
    )
    h.dialog = TransferPatientDialog(
        candidates,
        h.transport,
        h.notifier,
        h.navigator,
        facility_id="fac-1",
        on_accepted=h.on_accepted,
        on_cancelled=h.on_cancelled,
        on_loading_change=loading_events.append,
        bounds=YearBounds(max_year=2026),
    )
    return h


def fill(dialog, patient="p1", year="1990"):
    dialog.handle_change(PATIENT, patient)
    dialog.handle_change(YEAR_OF_BIRTH, year)


class TestEncounterPath:
    def test_build_encounter_path(self):
        assert build_encounter_path("f1", "e1") == "/facility/f1/patient/e1/encounter"


class TestFieldEvents:
    """Test change and blur handling."""

    def test_change_updates_single_field(self, harness):
        """Test a change writes one field and keeps the other."""
        harness.dialog.handle_change(PATIENT, "p1")

        assert harness.dialog.state.values == {PATIENT: "p1", YEAR_OF_BIRTH: None}

    def test_fifth_year_digit_is_dropped(self, harness):
        """Test a year entry longer than four characters leaves the value unchanged."""
        # Arrange
        harness.dialog.handle_change(YEAR_OF_BIRTH, "1990")

        # Act
        harness.dialog.handle_change(YEAR_OF_BIRTH, "19901")
        harness.dialog.handle_change(YEAR_OF_BIRTH, "19901")

        # Assert
        assert harness.dialog.state.values[YEAR_OF_BIRTH] == "1990"

    def test_numeric_year_change_accepted(self, harness):
        harness.dialog.handle_change(YEAR_OF_BIRTH, 1990)

        assert harness.dialog.state.values[YEAR_OF_BIRTH] == 1990

    def test_unknown_field_rejected(self, harness):
        with pytest.raises(FormStateError):
            harness.dialog.handle_change("email", "x")

    def test_blur_on_unset_year_records_nothing(self, harness):
        harness.dialog.handle_blur(YEAR_OF_BIRTH)

        assert harness.dialog.state.errors[YEAR_OF_BIRTH] == ""

    def test_blur_sets_and_clears_bound_error(self, harness):
        """Test blur reports an out-of-range year and clears it once fixed."""
        # Arrange
        harness.dialog.handle_change(YEAR_OF_BIRTH, "1800")

        # Act
        harness.dialog.handle_blur(YEAR_OF_BIRTH)
        first = harness.dialog.state.errors[YEAR_OF_BIRTH]
        harness.dialog.handle_change(YEAR_OF_BIRTH, "1990")
        harness.dialog.handle_blur(YEAR_OF_BIRTH)

        # Assert
        assert first == "Cannot be smaller than 1900"
        assert harness.dialog.state.errors[YEAR_OF_BIRTH] == ""

    def test_blur_on_patient_is_ignored(self, harness):
        harness.dialog.handle_blur(PATIENT)

        assert harness.dialog.state.errors[PATIENT] == ""

    def test_options_are_labelled(self, harness):
        labels = [option.label for option in harness.dialog.options]

        assert labels == ["Asha (F)", "Ravi (M)"]


class TestSubmitSuccess:
    """Test the success path of a submission."""

    def test_success_with_results(self, harness):
        """Test a produced record notifies, navigates and resets the form."""
        # Arrange
        fill(harness.dialog)

        # Act
        asyncio.run(harness.dialog.submit())

        # Assert
        harness.transport.transfer.assert_awaited_once_with(
            TransferRequest(phone_number="+910000000001", year_of_birth="1990")
        )
        assert harness.loading_events == [True, False]
        harness.on_accepted.assert_called_once_with()
        harness.notifier.notify_success.assert_called_once_with(
            "Patient Asha (F) transferred successfully"
        )
        harness.navigator.go_to.assert_called_once_with("/facility/fac-1/patient/e1/encounter")
        assert harness.dialog.state.values == initial_values()
        assert harness.dialog.is_loading is False
        assert harness.dialog.phase is DialogPhase.IDLE

    def test_navigates_to_first_record(self, harness):
        harness.transport.transfer.return_value = TransferResponse(
            results=[ProducedRecord(id="e1"), ProducedRecord(id="e2")]
        )
        fill(harness.dialog)

        asyncio.run(harness.dialog.submit())

        harness.navigator.go_to.assert_called_once_with("/facility/fac-1/patient/e1/encounter")

    def test_success_with_empty_results(self, harness):
        """Test an empty result set accepts and resets without notifying."""
        harness.transport.transfer.return_value = TransferResponse(results=[])
        fill(harness.dialog)

        asyncio.run(harness.dialog.submit())

        harness.on_accepted.assert_called_once_with()
        harness.notifier.notify_success.assert_not_called()
        harness.navigator.go_to.assert_not_called()
        assert harness.dialog.state.values == initial_values()
        assert harness.loading_events == [True, False]

    def test_mapping_response_is_accepted(self, harness):
        """Test a transport returning the decoded JSON body succeeds."""
        harness.transport.transfer.return_value = {"results": [{"id": "e1"}]}
        fill(harness.dialog)

        asyncio.run(harness.dialog.submit())

        harness.on_accepted.assert_called_once_with()
        harness.notifier.notify_success.assert_called_once_with(
            "Patient Asha (F) transferred successfully"
        )
        harness.navigator.go_to.assert_called_once_with("/facility/fac-1/patient/e1/encounter")
        assert harness.loading_events == [True, False]

    def test_host_closing_on_accept_still_sees_loading_cleared(self, harness):
        """Test loading returns to False when on_accepted closes the dialog."""
        harness.on_accepted.side_effect = harness.dialog.close
        fill(harness.dialog)

        asyncio.run(harness.dialog.submit())

        assert harness.dialog.is_closed is True
        assert harness.loading_events == [True, False]
        harness.navigator.go_to.assert_called_once()

    def test_numeric_year_sent_as_string(self, harness):
        fill(harness.dialog, year=1990)

        asyncio.run(harness.dialog.submit())

        request = harness.transport.transfer.await_args.args[0]
        assert request.year_of_birth == "1990"

    def test_loading_is_set_while_request_in_flight(self, harness):
        """Test loading and phase while the transport is awaited."""
        seen = {}

        async def observe(request):
            seen["loading"] = harness.dialog.is_loading
            seen["phase"] = harness.dialog.phase
            return TransferResponse(results=[])

        harness.transport.transfer.side_effect = observe
        fill(harness.dialog)

        asyncio.run(harness.dialog.submit())

        assert seen == {"loading": True, "phase": DialogPhase.SUBMITTING}
        assert harness.dialog.is_loading is False

    def test_audit_events_logged(self, harness, caplog):
        caplog.set_level(logging.INFO)
        fill(harness.dialog)

        asyncio.run(harness.dialog.submit())

        assert "AUDIT [TRANSFER_SUBMITTED]" in caplog.text
        assert "AUDIT [TRANSFER_COMPLETED]" in caplog.text


class TestSubmitFailure:
    """Test the failure path of a submission."""

    def test_transport_error_message_is_shown(self, harness):
        """Test a failure notifies the transport's message and keeps the form."""
        # Arrange
        harness.transport.transfer.side_effect = TransportError("network down")
        fill(harness.dialog)

        # Act
        asyncio.run(harness.dialog.submit())

        # Assert
        harness.notifier.notify_error.assert_called_once_with("network down")
        harness.notifier.notify_success.assert_not_called()
        harness.on_accepted.assert_not_called()
        assert harness.dialog.state.values == {PATIENT: "p1", YEAR_OF_BIRTH: "1990"}
        assert harness.dialog.state.errors == {PATIENT: "", YEAR_OF_BIRTH: ""}
        assert harness.dialog.is_loading is False
        assert harness.loading_events == [True, False]

    def test_transport_error_without_message_uses_default(self, harness):
        harness.transport.transfer.side_effect = TransportError(status_code=500)
        fill(harness.dialog)

        asyncio.run(harness.dialog.submit())

        harness.notifier.notify_error.assert_called_once_with("Failed to transfer patient")

    def test_unexpected_exception_is_reported(self, harness):
        harness.transport.transfer.side_effect = RuntimeError("boom")
        fill(harness.dialog)

        asyncio.run(harness.dialog.submit())

        harness.notifier.notify_error.assert_called_once_with("boom")
        assert harness.dialog.is_loading is False

    def test_malformed_mapping_response_is_reported(self, harness):
        """Test a success payload without record ids becomes a failure notification."""
        harness.transport.transfer.return_value = {"results": [{"name": "x"}]}
        fill(harness.dialog)

        asyncio.run(harness.dialog.submit())

        harness.notifier.notify_error.assert_called_once_with(
            "Invalid transfer response: result 0 has no 'id'"
        )
        harness.on_accepted.assert_not_called()
        assert harness.dialog.state.values == {PATIENT: "p1", YEAR_OF_BIRTH: "1990"}
        assert harness.loading_events == [True, False]

    def test_failure_audit_logged_at_error(self, harness, caplog):
        caplog.set_level(logging.INFO)
        harness.transport.transfer.side_effect = TransportError("network down")
        fill(harness.dialog)

        asyncio.run(harness.dialog.submit())

        failed = [r for r in caplog.records if "TRANSFER_FAILED" in r.getMessage()]
        assert failed and failed[0].levelno == logging.ERROR


class TestSubmitNotSent:
    """Test submissions that never reach the transport."""

    def test_unset_patient_blocks_dispatch(self, harness):
        """Test an unselected patient shows an error and sends nothing."""
        harness.dialog.handle_change(YEAR_OF_BIRTH, "1990")

        asyncio.run(harness.dialog.submit())

        harness.transport.transfer.assert_not_awaited()
        assert harness.dialog.state.errors[PATIENT] == PATIENT_REQUIRED_MESSAGE
        assert harness.loading_events == []
        assert harness.dialog.phase is DialogPhase.IDLE

    @pytest.mark.parametrize(
        "year,message",
        [("2027", "Cannot be greater than 2026"), ("1899", "Cannot be smaller than 1900")],
    )
    def test_out_of_range_year_blocks_dispatch(self, harness, year, message):
        fill(harness.dialog, year=year)

        asyncio.run(harness.dialog.submit())

        harness.transport.transfer.assert_not_awaited()
        assert harness.dialog.state.errors[YEAR_OF_BIRTH] == message

    def test_unknown_candidate_is_a_no_op(self, harness):
        """Test a selection missing from the candidate list sends nothing."""
        fill(harness.dialog, patient="ghost")

        asyncio.run(harness.dialog.submit())

        harness.transport.transfer.assert_not_awaited()
        harness.notifier.notify_error.assert_not_called()
        assert harness.loading_events == []
        assert harness.dialog.is_loading is False


class TestSessionLifecycle:
    """Test cancel, close and outcomes arriving after close."""

    def test_cancel_closes_and_notifies_host(self, harness):
        harness.dialog.cancel()

        harness.on_cancelled.assert_called_once_with()
        assert harness.dialog.is_closed is True

    def test_close_is_idempotent(self, harness):
        harness.dialog.close()
        harness.dialog.close()

        assert harness.dialog.is_closed is True

    def test_submit_after_close_is_ignored(self, harness):
        fill(harness.dialog)
        harness.dialog.close()

        asyncio.run(harness.dialog.submit())

        harness.transport.transfer.assert_not_awaited()

    def test_outcome_after_close_has_no_effect(self, harness):
        """Test a result arriving after close triggers no side effects."""
        # Arrange
        async def close_then_succeed(request):
            harness.dialog.close()
            return TransferResponse(results=[ProducedRecord(id="e1")])

        harness.transport.transfer.side_effect = close_then_succeed
        fill(harness.dialog)

        # Act
        asyncio.run(harness.dialog.submit())

        # Assert
        harness.on_accepted.assert_not_called()
        harness.notifier.notify_success.assert_not_called()
        harness.navigator.go_to.assert_not_called()
        assert harness.dialog.state.values == {PATIENT: "p1", YEAR_OF_BIRTH: "1990"}
        assert harness.dialog.is_loading is False
        assert harness.loading_events == [True, False]

    def test_failure_after_close_is_not_reported(self, harness):
        async def close_then_fail(request):
            harness.dialog.close()
            raise TransportError("network down")

        harness.transport.transfer.side_effect = close_then_fail
        fill(harness.dialog)

        asyncio.run(harness.dialog.submit())

        harness.notifier.notify_error.assert_not_called()
