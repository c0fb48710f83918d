"""Validation rules for the transfer dialog form.

Two validation surfaces share the same year bounds:

- live validation, run when year_of_birth loses focus; the whole value must
  be numeric
- whole-form validation, run on submit; only the leading integer counts

Whole-form validation of year_of_birth is an ordered override chain: every rule
whose predicate holds overwrites the field's message, so the last true rule wins.
The functions here are pure; committing errors to the form store is the
caller's job.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, List, Mapping, NamedTuple, Optional, Tuple

from patient_transfer.form.fields import (
    PATIENT,
    YEAR_OF_BIRTH,
    FormErrors,
    initial_errors,
)

# Minimum reasonable birth year for validation
MIN_BIRTH_YEAR = 1900

PATIENT_REQUIRED_MESSAGE = "Please select the suspect/patient"
FIELD_REQUIRED_MESSAGE = "This field is required"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_DECIMAL = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


@dataclass(frozen=True)
class YearBounds:
    """Accepted year-of-birth range.

    Attributes:
        max_year: Upper bound, the current calendar year at construction
        min_year: Lower bound
    """

    max_year: int
    min_year: int = MIN_BIRTH_YEAR

    @classmethod
    def for_today(cls, today: Optional[date] = None) -> "YearBounds":
        """Bounds with max_year taken once from today's date."""
        return cls(max_year=(today or date.today()).year)

    @property
    def greater_message(self) -> str:
        return f"Cannot be greater than {self.max_year}"

    @property
    def smaller_message(self) -> str:
        return f"Cannot be smaller than {self.min_year}"


class Rule(NamedTuple):
    """Predicate and the message it sets when true."""

    predicate: Callable[[Any], bool]
    message: str


def is_unset(value: Any) -> bool:
    """True for None, empty strings and other falsy values."""
    return not value


def parse_year(value: Any) -> Optional[int]:
    """Parse the leading integer of a year value.

    Unset values parse as 0. Values without a leading integer return None,
    which never satisfies a bound comparison.

    Example:
        >>> parse_year("1990"), parse_year(None), parse_year("abc")
        (1990, 0, None)
    """
    text = "0" if is_unset(value) else str(value)
    match = _LEADING_INT.match(text)
    if match is None:
        return None
    return int(match.group(1))


def parse_number(value: Any) -> Optional[float]:
    """Parse the whole value as a number, as live validation does.

    Blank text parses as 0. Anything that is not entirely numeric returns None,
    which never satisfies a bound comparison.

    Example:
        >>> parse_number("1990.5"), parse_number(" "), parse_number("12ab")
        (1990.5, 0.0, None)
    """
    text = "" if value is None else str(value).strip()
    if not text:
        return 0.0
    if not _DECIMAL.match(text):
        return None
    return float(text)


def _above(bound: int, parse: Callable[[Any], Any] = parse_year) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        year = parse(value)
        return year is not None and year > bound

    return predicate


def _below(bound: int, parse: Callable[[Any], Any] = parse_year) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        year = parse(value)
        return year is not None and year < bound

    return predicate


def year_of_birth_rules(bounds: YearBounds) -> List[Rule]:
    """Ordered submit-time rules for year_of_birth (last true rule wins)."""
    return [
        Rule(is_unset, FIELD_REQUIRED_MESSAGE),
        Rule(_above(bounds.max_year), bounds.greater_message),
        Rule(_below(bounds.min_year), bounds.smaller_message),
    ]


def apply_rules(value: Any, rules: List[Rule]) -> str:
    """Run every rule in order; each true predicate overwrites the message."""
    message = ""
    for rule in rules:
        if rule.predicate(value):
            message = rule.message
    return message


def validate_year_of_birth_on_blur(value: Any, bounds: YearBounds) -> Optional[str]:
    """Live validation for year_of_birth.

    Args:
        value: Current year_of_birth value
        bounds: Accepted year range

    Returns:
        None when the field is unset (required check is left to submit),
        otherwise the bound message or "" to clear a previous error.
    """
    if is_unset(value):
        return None
    if _above(bounds.max_year, parse_number)(value):
        return bounds.greater_message
    if _below(bounds.min_year, parse_number)(value):
        return bounds.smaller_message
    return ""


def validate_form(values: Mapping[str, Any], bounds: YearBounds) -> Tuple[bool, FormErrors]:
    """Whole-form validation run on submit.

    Args:
        values: Current form values
        bounds: Accepted year range

    Returns:
        Tuple of (is_valid, errors) where errors carries every field and
        is_valid is True iff every message is empty.

    Example:
        >>> validate_form({"patient": "p1", "year_of_birth": "1990"}, YearBounds(2026))
        (True, {'patient': '', 'year_of_birth': ''})
    """
    errors = initial_errors()

    if is_unset(values.get(PATIENT)):
        errors[PATIENT] = PATIENT_REQUIRED_MESSAGE

    errors[YEAR_OF_BIRTH] = apply_rules(
        values.get(YEAR_OF_BIRTH), year_of_birth_rules(bounds)
    )

    is_valid = not any(errors.values())
    return is_valid, errors
