"""Interaction-model contributions.

Controls declare which intents and vocabulary values they expect the
grammar to contain. The ``InteractionModelGenerator`` here only collects
those declarations; turning them into an actual model is left to external
tooling, which can consume ``to_dict()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Protocol, runtime_checkable

from .input import GENERAL_CONTROL_INTENT, NO_INTENT, YES_INTENT, multi_value_intent_name

logger = logging.getLogger(__name__)


class SharedSlotType:
    """Slot types shared by all controls."""

    TARGET = "target"
    ACTION = "action"
    FEEDBACK = "feedback"


@dataclass(frozen=True)
class SlotValue:
    """A slot value id and the synonyms that should resolve to it."""

    id: str
    synonyms: tuple[str, ...] = ()


@dataclass(frozen=True)
class ControlIntentSpec:
    """An intent a control expects to exist.

    Attributes:
        name: Intent name
        slot_type: Value slot type, for value-carrying intents
        filtered_slot_type: Slot type used in utterance shapes that would
            collide with yes/no
    """

    name: str
    slot_type: str | None = None
    filtered_slot_type: str | None = None

    @classmethod
    def general(cls) -> ControlIntentSpec:
        return cls(name=GENERAL_CONTROL_INTENT)

    @classmethod
    def multi_value(
        cls, slot_type: str, filtered_slot_type: str | None = None
    ) -> ControlIntentSpec:
        return cls(
            name=multi_value_intent_name(slot_type),
            slot_type=slot_type,
            filtered_slot_type=filtered_slot_type or slot_type,
        )


class InteractionModelGenerator:
    """Collects intents and slot values contributed by controls.

    Registration is idempotent: repeated intents are kept once, in first-seen
    order, and synonyms for a repeated slot value are merged.
    """

    def __init__(self) -> None:
        self._intents: dict[str, ControlIntentSpec] = {}
        self._slot_values: dict[str, dict[str, SlotValue]] = {}

    def add_control_intent(self, intent: ControlIntentSpec) -> InteractionModelGenerator:
        existing = self._intents.get(intent.name)
        if existing is not None and existing != intent:
            logger.warning(
                "Intent '%s' registered twice with different definitions; keeping first",
                intent.name,
            )
        self._intents.setdefault(intent.name, intent)
        return self

    def add_yes_and_no_intents(self) -> InteractionModelGenerator:
        self.add_control_intent(ControlIntentSpec(name=YES_INTENT))
        self.add_control_intent(ControlIntentSpec(name=NO_INTENT))
        return self

    def add_values_to_slot_type(
        self, slot_type: str, values: Iterable[SlotValue | str]
    ) -> InteractionModelGenerator:
        existing = self._slot_values.setdefault(slot_type, {})
        for value in values:
            if isinstance(value, str):
                value = SlotValue(value)
            current = existing.get(value.id)
            if current is None:
                existing[value.id] = value
            else:
                merged = current.synonyms + tuple(
                    s for s in value.synonyms if s not in current.synonyms
                )
                existing[value.id] = SlotValue(value.id, merged)
        return self

    @property
    def intents(self) -> list[ControlIntentSpec]:
        return list(self._intents.values())

    def slot_values(self, slot_type: str) -> list[SlotValue]:
        return list(self._slot_values.get(slot_type, {}).values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "intents": [
                {
                    "name": spec.name,
                    "slot_type": spec.slot_type,
                    "filtered_slot_type": spec.filtered_slot_type,
                }
                for spec in self._intents.values()
            ],
            "slot_types": {
                name: [
                    {"id": v.id, "synonyms": list(v.synonyms)} for v in values.values()
                ]
                for name, values in self._slot_values.items()
            },
        }


@runtime_checkable
class InteractionModelContributor(Protocol):
    """A control that contributes to the interaction model."""

    def update_interaction_model(self, generator: InteractionModelGenerator) -> None:
        ...

    def get_target_ids(self) -> list[str]:
        ...
