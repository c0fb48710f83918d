"""CLI command running a transfer dialog session in the console.

The console stands in for the dialog host: it feeds prompted values through the
dialog's change and blur handlers, submits, and renders notifications and the
navigation target.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import click

from patient_transfer.candidates import load_candidates
from patient_transfer.dialog import TransferPatientDialog
from patient_transfer.form.fields import PATIENT, YEAR_OF_BIRTH
from patient_transfer.models.candidate import CandidateOption
from patient_transfer.transport.http_client import HTTPTransferTransport
from patient_transfer.utils.exceptions import CandidateLoadError

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """Notification sink printing to the terminal."""

    def notify_success(self, message: str) -> None:
        click.echo(click.style("✓", fg="green", bold=True) + f" {message}")

    def notify_error(self, message: str) -> None:
        click.echo(click.style("✗", fg="red", bold=True) + f" {message}", err=True)


class ConsoleNavigator:
    """Navigator printing the target path; remembers the last one."""

    def __init__(self) -> None:
        self.last_path: Optional[str] = None

    def go_to(self, path: str) -> None:
        self.last_path = path
        click.echo(f"Navigate to: {path}")


def _print_options(options: list[CandidateOption]) -> None:
    click.echo("\nCandidates:")
    for option in options:
        click.echo(f"  {option.id}: {option.label}")
    click.echo("")


@click.command("transfer")
@click.argument("candidates_csv", type=click.Path(exists=True, path_type=Path))
@click.option("--facility-id", default=None, help="Facility used for navigation (overrides config)")
@click.option("--patient", "patient_id", default=None, help="Candidate id to transfer")
@click.option("--year-of-birth", default=None, help="Candidate's year of birth")
@click.option("--transfer-url", default=None, help="Transfer endpoint URL (overrides config)")
@click.pass_context
def transfer(
    ctx: click.Context,
    candidates_csv: Path,
    facility_id: Optional[str],
    patient_id: Optional[str],
    year_of_birth: Optional[str],
    transfer_url: Optional[str],
) -> None:
    """Transfer a patient picked from CANDIDATES_CSV.

    CANDIDATES_CSV must have the columns id, name, gender, phone_number.
    Missing values are prompted for.

    Example:

        patient-transfer transfer candidates.csv --facility-id f1 --patient p1 --year-of-birth 1990
    """
    config = ctx.obj["config"]

    try:
        candidates = load_candidates(candidates_csv)
    except CandidateLoadError as e:
        click.echo(f"Error loading candidates: {e}", err=True)
        raise click.exceptions.Exit(1)

    if not candidates:
        click.echo("No candidates to transfer.", err=True)
        raise click.exceptions.Exit(1)

    facility_id = facility_id or config.dialog.facility_id
    if not facility_id:
        facility_id = click.prompt("Facility ID")

    session = {"accepted": False}
    transport = HTTPTransferTransport(config, endpoint_url=transfer_url)
    navigator = ConsoleNavigator()
    dialog = TransferPatientDialog(
        candidates,
        transport,
        ConsoleNotifier(),
        navigator,
        facility_id=facility_id,
        on_accepted=lambda: session.update(accepted=True),
        on_cancelled=lambda: None,
    )

    option_ids = [option.id for option in dialog.options]
    if patient_id is None:
        _print_options(dialog.options)
        patient_id = click.prompt("Patient", type=click.Choice(option_ids))
    elif patient_id not in option_ids:
        raise click.BadParameter(
            f"'{patient_id}' is not in the candidate list", param_hint="--patient"
        )
    dialog.handle_change(PATIENT, patient_id)

    if year_of_birth is None:
        year_of_birth = click.prompt("Year of birth")
    dialog.handle_change(YEAR_OF_BIRTH, year_of_birth)
    if dialog.state.values[YEAR_OF_BIRTH] != year_of_birth:
        click.echo("Year of birth is limited to 4 characters; entry ignored.", err=True)
    dialog.handle_blur(YEAR_OF_BIRTH)

    try:
        asyncio.run(dialog.submit())
    finally:
        dialog.close()
        transport.close()

    for field, message in dialog.state.errors.items():
        if message:
            click.echo(f"  {field}: {message}", err=True)

    if not session["accepted"]:
        raise click.exceptions.Exit(1)

    if navigator.last_path is None:
        click.echo("Transfer accepted; no encounter was produced.")
