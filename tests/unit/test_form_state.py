"""Unit tests for the field registry and form state store."""

import pytest

from patient_transfer.form.fields import (
    FIELD_NAMES,
    INITIAL_VALUES,
    PATIENT,
    YEAR_OF_BIRTH,
    initial_errors,
    initial_values,
)
from patient_transfer.form.state import FormState, FormStore
from patient_transfer.utils.exceptions import FormStateError


class TestFieldRegistry:
    """Test the fixed field set and its initial values."""

    def test_initial_values(self):
        """Test both fields start empty."""
        assert initial_values() == {PATIENT: "", YEAR_OF_BIRTH: None}

    def test_initial_errors_mirror_values(self):
        """Test errors carry the same keys as values, all empty."""
        errors = initial_errors()

        assert set(errors) == set(INITIAL_VALUES)
        assert all(message == "" for message in errors.values())

    def test_initial_values_returns_fresh_copy(self):
        """Test mutating a returned mapping does not change the registry."""
        values = initial_values()
        values[PATIENT] = "p1"

        assert initial_values()[PATIENT] == ""

    def test_field_names(self):
        assert FIELD_NAMES == (PATIENT, YEAR_OF_BIRTH)


class TestFormStore:
    """Test the replace-values and replace-errors transitions."""

    def test_new_store_is_empty(self):
        """Test a new store holds the initial state."""
        store = FormStore()

        assert store.values == initial_values()
        assert store.errors == initial_errors()

    def test_set_values_replaces_whole_mapping(self):
        """Test set_values stores the supplied mapping and keeps errors."""
        # Arrange
        store = FormStore()
        store.set_errors({PATIENT: "x", YEAR_OF_BIRTH: ""})

        # Act
        store.set_values({PATIENT: "p1", YEAR_OF_BIRTH: "1990"})

        # Assert
        assert store.values == {PATIENT: "p1", YEAR_OF_BIRTH: "1990"}
        assert store.errors == {PATIENT: "x", YEAR_OF_BIRTH: ""}

    def test_set_errors_replaces_whole_mapping(self):
        """Test set_errors stores the supplied mapping and keeps values."""
        store = FormStore()
        store.set_values({PATIENT: "p1", YEAR_OF_BIRTH: None})

        store.set_errors({PATIENT: "", YEAR_OF_BIRTH: "Cannot be smaller than 1900"})

        assert store.errors[YEAR_OF_BIRTH] == "Cannot be smaller than 1900"
        assert store.values[PATIENT] == "p1"

    def test_set_values_rejects_missing_key(self):
        """Test a partial mapping is rejected and state is unchanged."""
        store = FormStore()

        with pytest.raises(FormStateError) as exc_info:
            store.set_values({PATIENT: "p1"})

        assert "year_of_birth" in str(exc_info.value)
        assert store.values == initial_values()

    def test_set_errors_rejects_unknown_key(self):
        """Test a mapping with an extra key is rejected."""
        store = FormStore()

        with pytest.raises(FormStateError):
            store.set_errors({PATIENT: "", YEAR_OF_BIRTH: "", "email": ""})

    def test_values_are_copies(self):
        """Test callers cannot mutate the store through a read."""
        store = FormStore()

        values = store.values
        values[PATIENT] = "p1"

        assert store.values[PATIENT] == ""

    def test_stored_mapping_is_copied_on_write(self):
        """Test later mutation of the supplied mapping does not leak in."""
        store = FormStore()
        new_values = {PATIENT: "p1", YEAR_OF_BIRTH: "1990"}

        store.set_values(new_values)
        new_values[PATIENT] = "p2"

        assert store.values[PATIENT] == "p1"

    def test_subscribers_notified_on_each_transition(self):
        """Test observers receive a snapshot after every transition."""
        # Arrange
        store = FormStore()
        snapshots: list[FormState] = []
        store.subscribe(snapshots.append)

        # Act
        store.set_values({PATIENT: "p1", YEAR_OF_BIRTH: None})
        store.set_errors({PATIENT: "", YEAR_OF_BIRTH: "required"})

        # Assert
        assert len(snapshots) == 2
        assert snapshots[0].values[PATIENT] == "p1"
        assert snapshots[1].errors[YEAR_OF_BIRTH] == "required"

    def test_unsubscribe_stops_notifications(self):
        """Test the returned callable removes the observer."""
        store = FormStore()
        snapshots: list[FormState] = []
        unsubscribe = store.subscribe(snapshots.append)

        unsubscribe()
        store.set_values({PATIENT: "p1", YEAR_OF_BIRTH: None})

        assert snapshots == []

    def test_rejected_transition_does_not_notify(self):
        """Test observers are not called when a transition is rejected."""
        store = FormStore()
        snapshots: list[FormState] = []
        store.subscribe(snapshots.append)

        with pytest.raises(FormStateError):
            store.set_values({})

        assert snapshots == []
