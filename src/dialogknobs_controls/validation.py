"""Validation pipeline for collected values.

Validators are plain functions ``(state, control_input) -> True |
ValidationFailure`` (sync or async). The pipeline runs them in configuration
order and returns the first failure; later validators are not invoked.

Example:
    ```python
    def at_most_two(state, control_input):
        if len(state.value_ids()) > 2:
            return ValidationFailure(
                failed_value=state.value_ids()[-1],
                reason_code="too_many",
                rendered_reason="you can only pick two",
            )
        return True

    pipeline = ValidationPipeline([require_catalog_match(), at_most_two])
    result = await pipeline.validate(state, control_input)
    ```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Sequence, Union

from .callbacks import invoke_callback

if TYPE_CHECKING:
    from .input import ControlInput
    from .state import TurnState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationFailure:
    """Describes why the current values are invalid.

    Attributes:
        failed_value: The value that failed validation
        reason_code: Machine-readable reason
        rendered_reason: Prompt fragment explaining the failure
    """

    failed_value: str
    reason_code: str | None = None
    rendered_reason: str | None = None


ValidationResult = Union[bool, ValidationFailure]
Validator = Callable[..., Any]


def as_validator_list(validation: Validator | Sequence[Validator] | None) -> list[Validator]:
    """Normalize a single validator, a sequence, or ``None`` to a list."""
    if validation is None:
        return []
    if callable(validation):
        return [validation]
    return list(validation)


class ValidationPipeline:
    """Ordered, short-circuiting list of validators."""

    def __init__(self, validators: Validator | Sequence[Validator] | None = None):
        self._validators = as_validator_list(validators)

    @property
    def validators(self) -> list[Validator]:
        return list(self._validators)

    def __len__(self) -> int:
        return len(self._validators)

    async def validate(
        self, state: TurnState, control_input: ControlInput
    ) -> ValidationResult:
        """Run validators in order.

        Returns:
            ``True`` if every validator passes (vacuously for an empty
            pipeline), otherwise the first ``ValidationFailure``.
        """
        for validator in self._validators:
            result = await invoke_callback(validator, state, control_input)
            if result is not True:
                logger.debug(
                    "Validation failed in %s: %s",
                    getattr(validator, "__name__", repr(validator)),
                    result,
                )
                return result
        return True


# -- Built-in validators ------------------------------------------------------


def require_catalog_match(
    rendered_reason: str | None = None,
) -> Validator:
    """Reject values that did not resolve to a known catalog entry."""

    def _validate(state: TurnState, control_input: ControlInput) -> ValidationResult:
        for entry in state.values or []:
            if not entry.matched_known_catalog:
                return ValidationFailure(
                    failed_value=entry.id,
                    reason_code="not_in_catalog",
                    rendered_reason=rendered_reason,
                )
        return True

    _validate.__name__ = "require_catalog_match"
    return _validate


def max_values(limit: int, rendered_reason: str | None = None) -> Validator:
    """Reject more than ``limit`` collected values."""

    def _validate(state: TurnState, control_input: ControlInput) -> ValidationResult:
        ids = state.value_ids()
        if len(ids) > limit:
            return ValidationFailure(
                failed_value=ids[limit],
                reason_code="too_many_values",
                rendered_reason=rendered_reason,
            )
        return True

    _validate.__name__ = "max_values"
    return _validate


def no_duplicates(rendered_reason: str | None = None) -> Validator:
    """Reject a value collected more than once."""

    def _validate(state: TurnState, control_input: ControlInput) -> ValidationResult:
        seen: set[str] = set()
        for value_id in state.value_ids():
            if value_id in seen:
                return ValidationFailure(
                    failed_value=value_id,
                    reason_code="duplicate_value",
                    rendered_reason=rendered_reason,
                )
            seen.add(value_id)
        return True

    _validate.__name__ = "no_duplicates"
    return _validate
