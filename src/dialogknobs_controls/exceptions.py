"""Exception hierarchy for dialogknobs controls.

Two kinds of failure exist in a control's turn:

- Expected, recoverable conditions (a guard that does not match, a value that
  fails validation). These are *data*: ``Unmatched`` and ``ValidationFailure``
  results. They never surface as exceptions.
- Contract violations: the caller and the control fell out of sync (``handle``
  without a successful ``can_handle``, an act the renderer does not know, ...).
  These are bugs and are raised as subclasses of ``ContractViolationError``.
  The library never catches them.

Example:
    ```python
    from dialogknobs_controls.exceptions import (
        ContractViolationError,
        DialogControlError,
    )

    try:
        await control.handle(control_input, result)
    except ContractViolationError as e:
        logger.error("Control out of sync: %s (%s)", e, e.context)
        raise
    ```
"""

from typing import Any, Dict


class DialogControlError(Exception):
    """Base exception for all dialogknobs control errors.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (control id, act kind, ...)
        details: Alternative to context (both are supported)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        # Details takes precedence if both are provided
        self.context = details or context or {}
        self.details = self.context


class ConfigurationError(DialogControlError):
    """Raised when control configuration is invalid or missing.

    Common scenarios include:
    - Empty slot type
    - Non-positive page size
    - Unknown keys in a configuration mapping or file
    - A choice source that yields ``None``

    Example:
        ```python
        raise ConfigurationError(
            "page_size must be a positive integer",
            context={"page_size": 0},
        )
        ```
    """

    pass


class ContractViolationError(DialogControlError):
    """Raised when a control is driven in a way its protocol forbids.

    Contract violations indicate a desynchronization between the caller and
    the control, not bad user input. They must not be caught and masked.
    """

    pass


class HandlerStateMismatchError(ContractViolationError):
    """Raised when ``handle`` is called without a committed handler.

    ``can_handle`` must return ``True`` for the same turn before ``handle``
    is invoked.
    """

    def __init__(self, control_id: str, intent_name: str | None = None):
        self.control_id = control_id
        self.intent_name = intent_name
        super().__init__(
            f"{intent_name or '<no intent>'} can not be handled by control "
            f"'{control_id}': handle() called but no guard matched. "
            f"Are can_handle() and handle() out of sync?",
            context={"control_id": control_id, "intent": intent_name},
        )


class InitiativeStateMismatchError(ContractViolationError):
    """Raised when ``take_initiative`` is called without a chosen initiative.

    ``can_take_initiative`` must return ``True`` first; it records which
    initiative to take.
    """

    def __init__(self, control_id: str):
        self.control_id = control_id
        super().__init__(
            f"Control '{control_id}': take_initiative() called but no initiative "
            f"was selected. can_take_initiative() must be called first.",
            context={"control_id": control_id},
        )


class MissingPreviousValueError(ContractViolationError):
    """Raised when a ValueChanged act is emitted with no previous value stored."""

    def __init__(self, control_id: str):
        self.control_id = control_id
        super().__init__(
            "ValueChangedAct should only be used if there is an actual previous value",
            context={"control_id": control_id},
        )


class UnhandledActError(ContractViolationError):
    """Raised when a renderer receives an act outside the closed act set."""

    def __init__(self, control_id: str, act: Any):
        self.control_id = control_id
        self.act = act
        super().__init__(
            f"Control '{control_id}' has no rendering for act "
            f"{type(act).__name__}",
            context={"control_id": control_id, "act_type": type(act).__name__},
        )


class UnknownElicitationModeError(ContractViolationError):
    """Raised when elicitation is requested for a mode other than Set/Change."""

    def __init__(self, control_id: str, mode: Any):
        self.control_id = control_id
        self.mode = mode
        super().__init__(
            f"Unhandled. Unknown elicitation mode: {mode}",
            context={"control_id": control_id, "mode": str(mode)},
        )


__all__ = [
    "DialogControlError",
    "ConfigurationError",
    "ContractViolationError",
    "HandlerStateMismatchError",
    "InitiativeStateMismatchError",
    "MissingPreviousValueError",
    "UnhandledActError",
    "UnknownElicitationModeError",
]
