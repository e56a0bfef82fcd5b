"""Tests for the exception hierarchy."""

import pytest

from dialogknobs_controls.exceptions import (
    ConfigurationError,
    ContractViolationError,
    DialogControlError,
    HandlerStateMismatchError,
    InitiativeStateMismatchError,
    MissingPreviousValueError,
    UnhandledActError,
    UnknownElicitationModeError,
)


class TestDialogControlError:
    """Tests for the root error."""

    def test_context(self) -> None:
        """Test that the context dict is kept and aliased as details."""
        error = DialogControlError("boom", context={"control_id": "x"})

        assert str(error) == "boom"
        assert error.context == {"control_id": "x"}
        assert error.details is error.context

    def test_details_take_precedence(self) -> None:
        """Test that details win over context when both are given."""
        error = DialogControlError("boom", context={"a": 1}, details={"b": 2})
        assert error.context == {"b": 2}

    def test_empty_context(self) -> None:
        """Test that the context defaults to an empty dict."""
        assert DialogControlError("boom").context == {}


class TestContractViolations:
    """Tests for contract violation subclasses."""

    @pytest.mark.parametrize(
        "error",
        [
            HandlerStateMismatchError("x", "YesIntent"),
            InitiativeStateMismatchError("x"),
            MissingPreviousValueError("x"),
            UnhandledActError("x", object()),
            UnknownElicitationModeError("x", "Delete"),
        ],
    )
    def test_hierarchy(self, error) -> None:
        """Test that contract violations are separate from configuration errors."""
        assert isinstance(error, ContractViolationError)
        assert isinstance(error, DialogControlError)
        assert not isinstance(error, ConfigurationError)
        assert error.context["control_id"] == "x"

    def test_handler_mismatch_message(self) -> None:
        """Test the message and context of a handler mismatch."""
        error = HandlerStateMismatchError("toppings", "YesIntent")

        assert "YesIntent can not be handled by control 'toppings'" in str(error)
        assert error.context["intent"] == "YesIntent"

    def test_unknown_mode_message(self) -> None:
        """Test the message of an unknown elicitation mode."""
        error = UnknownElicitationModeError("toppings", "Delete")
        assert "Unknown elicitation mode: Delete" in str(error)
