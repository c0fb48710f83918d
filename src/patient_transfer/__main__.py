"""Entry point for running patient_transfer as a module.

This allows the package to be executed as:
    python -m patient_transfer
"""

from patient_transfer.cli.main import cli

if __name__ == "__main__":
    cli()
