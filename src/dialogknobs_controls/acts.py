"""Semantic acts produced by controls.

An act is a tagged outcome of a turn. The set of acts is closed:

- Content acts describe what happened to the value: ``ValueSetAct``,
  ``ValueChangedAct``, ``ValueConfirmedAct``, ``ValueDisconfirmedAct``,
  ``InvalidValueAct``, ``UnusableInputValueAct``.
- Initiative acts are questions the control asks: ``ConfirmValueAct``,
  ``RequestValueByListAct``, ``RequestChangedValueByListAct``.

Renderers match on these classes exhaustively; see ``rendering.ActRenderer``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class SystemAct:
    """Common base for all acts.

    Attributes:
        control_id: Id of the control that produced the act
    """

    control_id: str

    @property
    def kind(self) -> str:
        """The act's tag, equal to its class name."""
        return type(self).__name__

    def to_template_context(self) -> dict[str, Any]:
        """Payload fields as a flat dict for prompt templates."""
        context = dataclasses.asdict(self)
        context["kind"] = self.kind
        return context


# -- Content acts -------------------------------------------------------------


@dataclass(frozen=True)
class ValueSetAct(SystemAct):
    value_ids: tuple[str, ...] = ()
    rendered_value: str = ""


@dataclass(frozen=True)
class ValueChangedAct(SystemAct):
    previous_value: str = ""
    rendered_previous_value: str = ""
    value: str = ""
    rendered_value: str = ""


@dataclass(frozen=True)
class ValueConfirmedAct(SystemAct):
    value_ids: tuple[str, ...] = ()
    rendered_value: str = ""


@dataclass(frozen=True)
class ValueDisconfirmedAct(SystemAct):
    value_ids: tuple[str, ...] = ()
    rendered_value: str = ""


@dataclass(frozen=True)
class InvalidValueAct(SystemAct):
    """The current values failed validation.

    Attributes:
        value: The value that failed
        rendered_value: Rendering of all current values
        reason_code: Machine-readable reason from the validator
        rendered_reason: Prompt fragment from the validator
    """

    value: str = ""
    rendered_value: str = ""
    reason_code: str | None = None
    rendered_reason: str | None = None


@dataclass(frozen=True)
class UnusableInputValueAct(SystemAct):
    """A recognized value could not be used (e.g. it was empty)."""

    value: str = ""
    reason_code: str | None = None


# -- Initiative acts ----------------------------------------------------------


@dataclass(frozen=True)
class ConfirmValueAct(SystemAct):
    """Ask the user to confirm the listed (unconfirmed) values."""

    value_ids: tuple[str, ...] = ()
    rendered_value: str = ""


@dataclass(frozen=True)
class RequestValueByListAct(SystemAct):
    """Ask for a value, offering the active page of choices."""

    choices_from_active_page: tuple[str, ...] = ()
    all_choices: tuple[str, ...] = ()
    rendered_choices_from_active_page: tuple[str, ...] = ()
    rendered_all_choices: tuple[str, ...] = ()


@dataclass(frozen=True)
class RequestChangedValueByListAct(SystemAct):
    """Ask for a replacement value, offering the active page of choices."""

    current_value: str = ""
    rendered_value: str = ""
    choices_from_active_page: tuple[str, ...] = ()
    all_choices: tuple[str, ...] = ()
    rendered_choices_from_active_page: tuple[str, ...] = ()
    rendered_all_choices: tuple[str, ...] = ()


ContentAct = Union[
    ValueSetAct,
    ValueChangedAct,
    ValueConfirmedAct,
    ValueDisconfirmedAct,
    InvalidValueAct,
    UnusableInputValueAct,
]
InitiativeAct = Union[
    ConfirmValueAct,
    RequestValueByListAct,
    RequestChangedValueByListAct,
]
SemanticAct = Union[ContentAct, InitiativeAct]

INITIATIVE_ACT_TYPES: tuple[type, ...] = (
    ConfirmValueAct,
    RequestValueByListAct,
    RequestChangedValueByListAct,
)
CONTENT_ACT_TYPES: tuple[type, ...] = (
    ValueSetAct,
    ValueChangedAct,
    ValueConfirmedAct,
    ValueDisconfirmedAct,
    InvalidValueAct,
    UnusableInputValueAct,
)


def is_initiative_act(act: Any) -> bool:
    return isinstance(act, INITIATIVE_ACT_TYPES)
