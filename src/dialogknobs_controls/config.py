"""Configuration for multi-value list controls.

Configuration is built once per control by merging a partial mapping over a
static defaults table. The result is a tree of frozen dataclasses; nothing
is shared or mutated between control instances.

Merge rules:
- Nested mappings (``prompts``, ``interaction_model.actions``, ...) merge
  key by key.
- Every other value, lists included, *replaces* the default. Supplying
  ``targets: [color]`` drops ``builtin_choice`` and ``builtin_it``; copy the
  defaults and amend to extend them.
- Unknown keys are rejected.

Example config file::

    id: toppings
    slot_type: Topping
    list_item_ids: [cheese, ham, olives, peppers, onions]
    page_size: 3
    confirmation_required: true
    validation:
      - "myapp.validators:at_most_three"
    prompts:
      confirm_value: "So that's {{ rendered_value }}, right?"
    interaction_model:
      targets: [builtin_it, topping]
      actions:
        add: [builtin_add, builtin_select, include]
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping

import yaml

from .exceptions import ConfigurationError
from .formatting import default_value_renderer
from .function_resolver import resolve_callable, resolve_callables
from .guards import CustomHandler
from .pagination import DEFAULT_PAGE_SIZE
from .strings import Action, Target

logger = logging.getLogger(__name__)

# Prompt templates are Jinja2 strings rendered with the act payload. The
# ``natural_join`` filter formats lists ("a, b and c").
_SUGGESTIONS = (
    "{% if rendered_choices_from_active_page %} Some suggestions are "
    "{{ rendered_choices_from_active_page | natural_join('or') }}.{% endif %}"
)

DEFAULTS: Mapping[str, Any] = MappingProxyType({
    "id": None,
    "slot_type": None,
    "list_item_ids": [],
    "page_size": DEFAULT_PAGE_SIZE,
    "required": True,
    "confirmation_required": True,
    "validation": [],
    "custom_handlers": [],
    "value_renderer": default_value_renderer,
    "interaction_model": {
        "targets": [Target.CHOICE, Target.IT],
        "actions": {
            "set_all": [Action.SET],
            "change": [Action.CHANGE],
            "remove": [Action.REMOVE, Action.DELETE, Action.IGNORE],
            "add": [Action.SELECT, Action.ADD],
        },
        "filtered_slot_type": None,
    },
    "prompts": {
        "value_set": "OK, {{ rendered_value }}.",
        "value_changed": "OK, I changed it to {{ rendered_value }}.",
        "value_confirmed": "Great.",
        "value_disconfirmed": "My mistake.",
        "invalid_value": (
            "{% if rendered_reason %}Sorry, {{ value }} is not a valid choice "
            "because {{ rendered_reason }}.{% else %}Sorry, that's not a valid "
            "choice.{% endif %}"
        ),
        "unusable_input_value": "Sorry, I can't use that value.",
        "request_value": "What would you like?" + _SUGGESTIONS,
        "request_changed_value": "What should I change it to?" + _SUGGESTIONS,
        "confirm_value": "Was that {{ rendered_value }}?",
    },
    "reprompts": {
        "value_set": "OK, {{ rendered_value }}.",
        "value_changed": "OK, I changed it to {{ rendered_value }}.",
        "value_confirmed": "Great.",
        "value_disconfirmed": "My mistake.",
        "invalid_value": (
            "{% if rendered_reason %}Sorry, {{ value }} is not a valid choice "
            "because {{ rendered_reason }}.{% else %}Sorry, that's not a valid "
            "choice.{% endif %}"
        ),
        "unusable_input_value": "Sorry, I can't use that value.",
        "request_value": "What would you like?" + _SUGGESTIONS,
        "request_changed_value": "What should I change it to?" + _SUGGESTIONS,
        "confirm_value": "Was that {{ rendered_value }}?",
    },
    "visual": {
        "enabled": True,
        "request_value": {"document": None, "data_source": None},
        "request_changed_value": {"document": None, "data_source": None},
    },
})

# Keys whose values may be "module:function" references in config files.
_CALLABLE_KEYS = ("list_item_ids", "required", "confirmation_required", "value_renderer")


@dataclass(frozen=True)
class ActionVocabulary:
    """Action slot-value IDs associated with each capability."""

    set_all: tuple[str, ...]
    change: tuple[str, ...]
    remove: tuple[str, ...]
    add: tuple[str, ...]

    def all_ids(self) -> tuple[str, ...]:
        return self.set_all + self.change + self.remove + self.add


@dataclass(frozen=True)
class InteractionModelProps:
    """How the control relates to the interaction model.

    Attributes:
        targets: Target slot-value IDs this control responds to
        actions: Action vocabulary per capability
        filtered_slot_type: Copy of the slot type with values that collide
            with yes/no removed; used in risky utterance shapes
    """

    targets: tuple[str, ...]
    actions: ActionVocabulary
    filtered_slot_type: str | None = None


@dataclass(frozen=True)
class PromptTemplates:
    """One prompt (or reprompt) template per act kind.

    Each entry is a Jinja2 template string, a list of variants, or a
    function ``(act, control_input) -> str``.
    """

    value_set: Any
    value_changed: Any
    value_confirmed: Any
    value_disconfirmed: Any
    invalid_value: Any
    unusable_input_value: Any
    request_value: Any
    request_changed_value: Any
    confirm_value: Any


@dataclass(frozen=True)
class VisualTemplate:
    """Document and data source for one visual request.

    ``None`` selects the built-in text-list layout.
    """

    document: Any = None
    data_source: Any = None


@dataclass(frozen=True)
class VisualProps:
    enabled: bool | Callable[..., Any]
    request_value: VisualTemplate
    request_changed_value: VisualTemplate


@dataclass(frozen=True)
class ListControlConfig:
    """Fully-populated, immutable configuration of a list control.

    Attributes:
        id: Unique identifier of the control instance
        slot_type: Catalog type of the values collected
        list_item_ids: Choice ids, or function(control_input) returning them
        page_size: Maximum number of choices offered per turn
        required: Whether the control elicits a value (bool or predicate)
        confirmation_required: Whether values need explicit confirmation
            (bool or predicate)
        validation: Validators, run in order
        prompts: Prompt templates per act kind
        reprompts: Reprompt templates per act kind
        interaction_model: Vocabulary and grammar relationship
        visual: Visual output settings
        custom_handlers: Custom guard/handler pairs evaluated first
        value_renderer: Function(value_ids, control_input) -> str
    """

    id: str
    slot_type: str
    list_item_ids: Any
    page_size: int
    required: Any
    confirmation_required: Any
    validation: tuple[Callable[..., Any], ...]
    prompts: PromptTemplates
    reprompts: PromptTemplates
    interaction_model: InteractionModelProps
    visual: VisualProps
    custom_handlers: tuple[CustomHandler, ...] = field(default_factory=tuple)
    value_renderer: Callable[..., str] = default_value_renderer

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ListControlConfig:
        return build_config(data)


def _merge(defaults: Mapping[str, Any], overrides: Mapping[str, Any], path: str = "") -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for key, default in defaults.items():
        if isinstance(default, Mapping):
            merged[key] = _merge(default, {}, f"{path}{key}.")
        else:
            merged[key] = copy.copy(default) if isinstance(default, list) else default
    for key, value in overrides.items():
        dotted = f"{path}{key}"
        if key not in defaults:
            raise ConfigurationError(
                f"Unknown configuration key '{dotted}'",
                context={"key": dotted, "allowed": sorted(defaults.keys())},
            )
        default = defaults[key]
        if isinstance(default, Mapping):
            if not isinstance(value, Mapping):
                raise ConfigurationError(
                    f"'{dotted}' must be a mapping",
                    context={"key": dotted, "value": repr(value)},
                )
            merged[key] = _merge(default, value, f"{dotted}.")
        else:
            merged[key] = value
    return merged


def _as_tuple(values: Any, key: str) -> tuple[str, ...]:
    if isinstance(values, str) or not isinstance(values, (list, tuple)):
        raise ConfigurationError(
            f"'{key}' must be a list of strings",
            context={"key": key, "value": repr(values)},
        )
    return tuple(values)


def _validation_list(validation: Any) -> tuple[Callable[..., Any], ...]:
    if validation is None:
        return ()
    if callable(validation) or isinstance(validation, str):
        return (resolve_callable(validation),)
    return tuple(resolve_callables(validation))


def build_config(
    overrides: Mapping[str, Any] | None = None,
    defaults: Mapping[str, Any] = DEFAULTS,
) -> ListControlConfig:
    """Merge a partial configuration over the defaults table.

    Args:
        overrides: Partial configuration; ``id`` and ``slot_type`` are
            required
        defaults: Defaults table (a nested mapping shaped like ``DEFAULTS``)

    Returns:
        Fully-populated immutable configuration

    Raises:
        ConfigurationError: On unknown keys or invalid values
    """
    merged = _merge(defaults, overrides or {})

    control_id = merged["id"]
    slot_type = merged["slot_type"]
    if not control_id or not isinstance(control_id, str):
        raise ConfigurationError("Control 'id' must be a non-empty string")
    if not slot_type or not isinstance(slot_type, str):
        raise ConfigurationError(
            "'slot_type' must be a non-empty string",
            context={"control_id": control_id},
        )

    page_size = merged["page_size"]
    if isinstance(page_size, bool) or not isinstance(page_size, int) or page_size < 1:
        raise ConfigurationError(
            "page_size must be a positive integer",
            context={"control_id": control_id, "page_size": page_size},
        )

    for key in _CALLABLE_KEYS:
        merged[key] = resolve_callable(merged[key])

    list_item_ids = merged["list_item_ids"]
    if not callable(list_item_ids):
        list_item_ids = _as_tuple(list_item_ids, "list_item_ids")

    im = merged["interaction_model"]
    actions = im["actions"]
    interaction_model = InteractionModelProps(
        targets=_as_tuple(im["targets"], "interaction_model.targets"),
        actions=ActionVocabulary(
            set_all=_as_tuple(actions["set_all"], "interaction_model.actions.set_all"),
            change=_as_tuple(actions["change"], "interaction_model.actions.change"),
            remove=_as_tuple(actions["remove"], "interaction_model.actions.remove"),
            add=_as_tuple(actions["add"], "interaction_model.actions.add"),
        ),
        filtered_slot_type=im["filtered_slot_type"] or slot_type,
    )

    visual = merged["visual"]
    visual_props = VisualProps(
        enabled=resolve_callable(visual["enabled"]),
        request_value=VisualTemplate(**visual["request_value"]),
        request_changed_value=VisualTemplate(**visual["request_changed_value"]),
    )

    config = ListControlConfig(
        id=control_id,
        slot_type=slot_type,
        list_item_ids=list_item_ids,
        page_size=page_size,
        required=merged["required"],
        confirmation_required=merged["confirmation_required"],
        validation=_validation_list(merged["validation"]),
        prompts=PromptTemplates(**merged["prompts"]),
        reprompts=PromptTemplates(**merged["reprompts"]),
        interaction_model=interaction_model,
        visual=visual_props,
        custom_handlers=tuple(
            CustomHandler.from_config(h) for h in merged["custom_handlers"] or []
        ),
        value_renderer=merged["value_renderer"],
    )
    logger.debug(
        "Built config for control '%s' (slot_type=%s, page_size=%d, validators=%d)",
        config.id,
        config.slot_type,
        config.page_size,
        len(config.validation),
    )
    return config


def load_config(
    config_path: str | Path,
    overrides: Mapping[str, Any] | None = None,
) -> ListControlConfig:
    """Load a YAML configuration file.

    Args:
        config_path: Path to the YAML file
        overrides: Optional mapping applied on top of the file contents
            (top-level keys replace the file's values)

    Returns:
        Fully-populated immutable configuration

    Raises:
        ConfigurationError: If the file is missing, is not a mapping, or
            contains invalid configuration
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(
            f"Control config not found: {path}",
            context={"path": str(path)},
        )

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Control config must be a mapping, got {type(data).__name__}",
            context={"path": str(path)},
        )

    if overrides:
        data = {**data, **overrides}

    logger.debug("Loaded control config from %s", path)
    return build_config(data)
