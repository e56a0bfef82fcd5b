"""Builders shared by control tests."""

from typing import Any

from dialogknobs_controls.input import ControlInput, ParsedIntent
from dialogknobs_controls.list_control import MultiValueListControl
from dialogknobs_controls.strings import Action

SLOT_TYPE = "Topping"
CHOICES = ["a", "b", "c", "d", "e"]


def make_control(**overrides: Any) -> MultiValueListControl:
    """Build a list control over ``CHOICES`` with optional config overrides."""
    config: dict[str, Any] = {
        "id": "toppings",
        "slot_type": SLOT_TYPE,
        "list_item_ids": list(CHOICES),
        "page_size": 3,
        "required": True,
        "confirmation_required": True,
    }
    config.update(overrides)
    return MultiValueListControl(config)


def values_input(
    *values: Any, action: str | None = Action.ADD, **kwargs: Any
) -> ControlInput:
    """Input carrying a multi-value intent for ``SLOT_TYPE``."""
    return ControlInput(
        intent=ParsedIntent.multi_value(SLOT_TYPE, list(values), action=action, **kwargs)
    )


def yes_input() -> ControlInput:
    return ControlInput(intent=ParsedIntent.yes())


def no_input() -> ControlInput:
    return ControlInput(intent=ParsedIntent.no())
