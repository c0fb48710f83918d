"""Form state store for the transfer dialog.

Holds the current field values and per-field errors. The store exposes exactly
two transitions, each replacing a whole mapping; updating a single field means
copying the current mapping, merging the change, then replacing.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Mapping

from patient_transfer.form.fields import (
    FIELD_NAMES,
    FormErrors,
    FormValues,
    initial_errors,
    initial_values,
)
from patient_transfer.utils.exceptions import FormStateError

logger = logging.getLogger(__name__)


@dataclass
class FormState:
    """Snapshot of the form: values and errors.

    Attributes:
        values: Current field values (patient, year_of_birth)
        errors: Current per-field messages, "" meaning no error
    """

    values: FormValues = field(default_factory=initial_values)
    errors: FormErrors = field(default_factory=initial_errors)


StateListener = Callable[[FormState], None]


class FormStore:
    """Reducer-style store with replace-values and replace-errors transitions.

    Observers subscribed with ``subscribe`` are called with a snapshot after
    every transition.

    Example:
        >>> store = FormStore()
        >>> store.set_values({**store.values, "patient": "p1"})
        >>> store.values["patient"]
        'p1'
    """

    def __init__(self) -> None:
        self._state = FormState()
        self._listeners: List[StateListener] = []

    @property
    def values(self) -> FormValues:
        """Copy of the current values."""
        return dict(self._state.values)

    @property
    def errors(self) -> FormErrors:
        """Copy of the current errors."""
        return dict(self._state.errors)

    @property
    def state(self) -> FormState:
        """Snapshot of the whole state."""
        return FormState(values=self.values, errors=self.errors)

    def set_values(self, new_values: Mapping) -> None:
        """Replace the entire values mapping.

        Args:
            new_values: Mapping carrying exactly the registered field names

        Raises:
            FormStateError: If keys do not match the field registry
        """
        _check_keys(new_values, "values")
        self._state = FormState(values=dict(new_values), errors=self._state.errors)
        logger.debug("Form values replaced")
        self._notify()

    def set_errors(self, new_errors: Mapping) -> None:
        """Replace the entire errors mapping.

        Args:
            new_errors: Mapping carrying exactly the registered field names

        Raises:
            FormStateError: If keys do not match the field registry
        """
        _check_keys(new_errors, "errors")
        self._state = FormState(values=self._state.values, errors=dict(new_errors))
        logger.debug("Form errors replaced")
        self._notify()

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register an observer; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.state
        for listener in list(self._listeners):
            listener(snapshot)


def _check_keys(mapping: Mapping, kind: str) -> None:
    keys = set(mapping)
    expected = set(FIELD_NAMES)
    if keys != expected:
        missing = sorted(expected - keys)
        unknown = sorted(keys - expected)
        raise FormStateError(
            f"Form {kind} must carry exactly {', '.join(FIELD_NAMES)} "
            f"(missing: {missing or 'none'}, unknown: {unknown or 'none'})"
        )
