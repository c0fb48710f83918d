"""Field registry for the transfer dialog form.

Defines the closed set of form fields and their initial values. The initial
errors are derived from the same key set so values and errors never disagree
on which fields exist.
"""

from typing import Any, Dict, Optional

PATIENT = "patient"
YEAR_OF_BIRTH = "year_of_birth"

# year_of_birth is capped at this many characters at the point of entry
YEAR_OF_BIRTH_MAX_LENGTH = 4

FormValues = Dict[str, Optional[Any]]
FormErrors = Dict[str, str]

INITIAL_VALUES: FormValues = {
    PATIENT: "",
    YEAR_OF_BIRTH: None,
}

FIELD_NAMES = tuple(INITIAL_VALUES)


def initial_values() -> FormValues:
    """Return a fresh copy of the initial form values."""
    return dict(INITIAL_VALUES)


def initial_errors() -> FormErrors:
    """Return a fresh, all-empty errors mapping keyed like the values."""
    return {name: "" for name in FIELD_NAMES}
