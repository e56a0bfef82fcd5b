"""Parsed-input boundary for controls.

Controls never see raw utterances. An external NLU layer produces a
``ParsedIntent`` and the calling layer wraps it in a ``ControlInput`` together
with facts about the output surface.

The module also provides the small boolean predicates that guards compose.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

from .strings import Feedback

if TYPE_CHECKING:
    from .state import LastInitiative

GENERAL_CONTROL_INTENT = "GeneralControlIntent"
YES_INTENT = "YesIntent"
NO_INTENT = "NoIntent"
VISUAL_INTERFACE = "Visual"


def multi_value_intent_name(slot_type: str) -> str:
    """Name of the multi-value intent generated for a slot type."""
    return f"{slot_type}_MultiValueControlIntent"


@dataclass(frozen=True)
class ResolvedValue:
    """A single recognized value from a multi-value slot.

    Attributes:
        slot_value: Catalog id when resolution matched, else the raw text
        is_entity_resolution_match: Whether the text resolved to a catalog id
    """

    slot_value: str
    is_entity_resolution_match: bool = True


@dataclass(frozen=True)
class ParsedIntent:
    """Structured intent produced by the external NLU layer.

    Attributes:
        name: Intent name
        action: Action slot-value ID, if any
        target: Target slot-value ID, if any
        feedback: Feedback slot-value ID (affirm/disaffirm), if any
        values: Resolved values of the multi-value slot, if any
        value_type: Slot type the values were recognized against
    """

    name: str
    action: str | None = None
    target: str | None = None
    feedback: str | None = None
    values: tuple[ResolvedValue, ...] | None = None
    value_type: str | None = None

    @classmethod
    def multi_value(
        cls,
        slot_type: str,
        values: Sequence[str | ResolvedValue],
        action: str | None = None,
        target: str | None = None,
        feedback: str | None = None,
    ) -> ParsedIntent:
        """Build a multi-value intent; plain strings are catalog matches."""
        resolved = tuple(
            v if isinstance(v, ResolvedValue) else ResolvedValue(v) for v in values
        )
        return cls(
            name=multi_value_intent_name(slot_type),
            action=action,
            target=target,
            feedback=feedback,
            values=resolved,
            value_type=slot_type,
        )

    @classmethod
    def yes(cls) -> ParsedIntent:
        return cls(name=YES_INTENT)

    @classmethod
    def no(cls) -> ParsedIntent:
        return cls(name=NO_INTENT)


@dataclass
class ControlInput:
    """Everything a control may inspect about the current turn.

    Attributes:
        intent: The parsed intent, or ``None`` when no user turn was offered
            (e.g. the session start, where only initiative is wanted)
        supported_interfaces: Output-surface capabilities of the device
        context: Free-form request data for user callbacks (predicates,
            choice sources, validators)
        turn_number: Sequence number of the turn within the session
    """

    intent: ParsedIntent | None = None
    supported_interfaces: frozenset[str] = frozenset()
    context: dict[str, Any] = field(default_factory=dict)
    turn_number: int = 0

    @property
    def supports_visual(self) -> bool:
        return VISUAL_INTERFACE in self.supported_interfaces

    @property
    def intent_name(self) -> str | None:
        return self.intent.name if self.intent is not None else None


# -- Guard predicates ---------------------------------------------------------


def is_intent(control_input: ControlInput, intent_name: str) -> bool:
    return control_input.intent_name == intent_name


def target_is_match_or_undefined(target: str | None, targets: Sequence[str]) -> bool:
    return target is None or target in targets


def value_type_match(value_type: str | None, slot_type: str) -> bool:
    return value_type is None or value_type == slot_type


def values_defined(values: Sequence[ResolvedValue] | None) -> bool:
    return values is not None and len(values) > 0


def feedback_is_match_or_undefined(
    feedback: str | None, allowed: Sequence[str]
) -> bool:
    return feedback is None or feedback in allowed


def action_is_match(action: str | None, actions: Sequence[str]) -> bool:
    return action is not None and action in actions


def _is_bare_feedback(
    control_input: ControlInput, intent_name: str, feedback: str
) -> bool:
    intent = control_input.intent
    if intent is None:
        return False
    if intent.name == intent_name:
        return True
    return (
        intent.name == GENERAL_CONTROL_INTENT
        and intent.feedback == feedback
        and intent.action is None
        and intent.target is None
    )


def is_bare_yes(control_input: ControlInput) -> bool:
    """True for a yes intent or a general intent carrying only affirm feedback."""
    return _is_bare_feedback(control_input, YES_INTENT, Feedback.AFFIRM)


def is_bare_no(control_input: ControlInput) -> bool:
    """True for a no intent or a general intent carrying only disaffirm feedback."""
    return _is_bare_feedback(control_input, NO_INTENT, Feedback.DISAFFIRM)


def last_initiative_match(
    last_initiative: LastInitiative | None, act_kind: str
) -> bool:
    return last_initiative is not None and last_initiative.act_kind == act_kind
