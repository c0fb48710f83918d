"""Form module.

This module provides the field registry, form state store and validation rules
for the transfer dialog.
"""

from patient_transfer.form.fields import (
    FIELD_NAMES,
    PATIENT,
    YEAR_OF_BIRTH,
    initial_errors,
    initial_values,
)
from patient_transfer.form.state import FormState, FormStore
from patient_transfer.form.validator import (
    YearBounds,
    validate_form,
    validate_year_of_birth_on_blur,
)

__all__ = [
    "FIELD_NAMES",
    "PATIENT",
    "YEAR_OF_BIRTH",
    "initial_errors",
    "initial_values",
    "FormState",
    "FormStore",
    "YearBounds",
    "validate_form",
    "validate_year_of_birth_on_blur",
]
