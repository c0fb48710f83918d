"""Transfer Dialog Example.

This example drives a transfer dialog session programmatically: loading
candidates from CSV, entering field values, submitting against the configured
transfer endpoint, and reacting to the outcome.

Start the mock endpoint first:

    patient-transfer mock serve --port 8080
"""

import asyncio
from pathlib import Path

from patient_transfer.candidates import load_candidates
from patient_transfer.config import load_config
from patient_transfer.dialog import TransferPatientDialog
from patient_transfer.logging_audit import configure_logging
from patient_transfer.transport.http_client import HTTPTransferTransport


class PrintNotifier:
    def notify_success(self, message):
        print(f"[success] {message}")

    def notify_error(self, message):
        print(f"[error] {message}")


class PrintNavigator:
    def go_to(self, path):
        print(f"[navigate] {path}")


def open_dialog(transport):
    candidates = load_candidates(Path("examples/candidates.csv"))
    return TransferPatientDialog(
        candidates,
        transport,
        PrintNotifier(),
        PrintNavigator(),
        facility_id="f1",
        on_accepted=lambda: print("[host] dialog accepted, closing"),
        on_cancelled=lambda: print("[host] dialog cancelled"),
        on_loading_change=lambda loading: print(f"[host] loading={loading}"),
    )


# Example 1: Successful transfer
def example_successful_transfer(transport):
    """Select a candidate, enter a valid year and submit."""
    print("=" * 80)
    print("EXAMPLE 1: Successful Transfer")
    print("=" * 80)

    dialog = open_dialog(transport)
    for option in dialog.options:
        print(f"  {option.id}: {option.label}")

    dialog.handle_change("patient", "p1")
    dialog.handle_change("year_of_birth", "1990")
    asyncio.run(dialog.submit())

    print(f"\nForm after submit: {dialog.state.values}")
    dialog.close()


# Example 2: Validation errors
def example_validation_errors(transport):
    """Show live and submit-time validation messages."""
    print("\n")
    print("=" * 80)
    print("EXAMPLE 2: Validation Errors")
    print("=" * 80)

    dialog = open_dialog(transport)

    # A fifth digit is ignored
    dialog.handle_change("year_of_birth", "1899")
    dialog.handle_change("year_of_birth", "18999")
    dialog.handle_blur("year_of_birth")
    print(f"After blur: {dialog.state.errors}")

    # Nothing is sent while the form is invalid
    asyncio.run(dialog.submit())
    print(f"After submit: {dialog.state.errors}")
    dialog.cancel()


if __name__ == "__main__":
    config = load_config()
    configure_logging(level="WARNING", log_file=config.logging.log_file)

    transport = HTTPTransferTransport(config)
    try:
        example_successful_transfer(transport)
        example_validation_errors(transport)
    finally:
        transport.close()
