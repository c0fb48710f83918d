"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across the test suites.
"""

from pathlib import Path

import pytest

from patient_transfer.config.schema import Config, EndpointsConfig, TransportConfig
from patient_transfer.models.candidate import Candidate


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.

    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture
def candidates() -> list[Candidate]:
    """
    Return a short candidate list.

    Returns:
        list[Candidate]: Two candidates, "p1" (Asha) first.
    """
    return [
        Candidate(id="p1", name="Asha", gender="F", phone_number="+910000000001"),
        Candidate(id="p2", name="Ravi", gender="M", phone_number="+910000000002"),
    ]


@pytest.fixture
def candidates_csv(tmp_path: Path) -> Path:
    """
    Write a valid candidate CSV file.

    Args:
        tmp_path: Pytest's temporary directory fixture.

    Returns:
        Path: Path to the CSV file.
    """
    csv_file = tmp_path / "candidates.csv"
    csv_file.write_text(
        "id,name,gender,phone_number\n"
        "p1,Asha,F,+910000000001\n"
        "p2,Ravi,M,+910000000002\n",
        encoding="utf-8",
    )
    return csv_file


@pytest.fixture
def sample_config() -> Config:
    """
    Return a configuration pointing at the local mock endpoint.

    Returns:
        Config: Configuration with retries disabled.
    """
    return Config(
        endpoints=EndpointsConfig(transfer_url="http://localhost:8080/patient/transfer"),
        transport=TransportConfig(timeout_connect=5, timeout_read=15, max_retries=0),
    )
