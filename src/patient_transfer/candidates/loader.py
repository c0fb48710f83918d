"""CSV loader for transfer candidates.

This module reads the candidate list offered in the transfer dialog from a CSV
file with the columns ``id, name, gender, phone_number``.
"""

import logging
from pathlib import Path

import pandas as pd

from patient_transfer.models.candidate import Candidate
from patient_transfer.utils.exceptions import CandidateLoadError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["id", "name", "gender", "phone_number"]


def load_candidates(file_path: Path) -> list[Candidate]:
    """Load transfer candidates from a CSV file.

    All values are read as strings so identifiers and phone numbers keep
    leading zeros and "+" prefixes.

    Args:
        file_path: Path to CSV file

    Returns:
        Candidates in file order

    Raises:
        FileNotFoundError: If the CSV file does not exist
        CandidateLoadError: If columns are missing, ids are blank or duplicated

    Example:
        >>> candidates = load_candidates(Path("candidates.csv"))
        >>> candidates[0].name
        'Asha'
    """
    logger.info(f"Loading candidates from {file_path}")

    if not file_path.exists():
        raise FileNotFoundError(f"Candidate file not found: {file_path}")

    try:
        df = pd.read_csv(file_path, encoding="utf-8", dtype=str, keep_default_na=False)
    except Exception as e:
        raise CandidateLoadError(
            f"Failed to read candidate file {file_path}. Ensure file is valid CSV "
            f"with UTF-8 encoding. Error: {e}"
        ) from e

    missing_columns = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing_columns:
        raise CandidateLoadError(
            f"Missing required columns: {', '.join(missing_columns)}. "
            f"Required columns are: {', '.join(REQUIRED_COLUMNS)}"
        )

    unknown_columns = [col for col in df.columns if col not in REQUIRED_COLUMNS]
    if unknown_columns:
        logger.warning(
            f"Candidate file contains unknown columns that will be ignored: "
            f"{', '.join(unknown_columns)}"
        )

    df = df[REQUIRED_COLUMNS].copy()
    for column in REQUIRED_COLUMNS:
        df[column] = df[column].str.strip()

    errors: list[str] = []

    # Row numbers are 1-indexed and count the header line
    blank_ids = [index + 2 for index in df.index[df["id"] == ""]]
    if blank_ids:
        errors.append(f"Blank id in rows: {', '.join(map(str, blank_ids))}")

    duplicated = df.loc[df["id"].duplicated(keep=False) & (df["id"] != ""), "id"]
    if not duplicated.empty:
        errors.append(f"Duplicate ids: {', '.join(sorted(set(duplicated)))}")

    if errors:
        raise CandidateLoadError(
            "Candidate file validation failed:\n  - " + "\n  - ".join(errors)
        )

    candidates = [
        Candidate(
            id=row["id"],
            name=row["name"],
            gender=row["gender"],
            phone_number=row["phone_number"],
        )
        for row in df.to_dict(orient="records")
    ]
    logger.info(f"Loaded {len(candidates)} candidate(s)")
    return candidates
