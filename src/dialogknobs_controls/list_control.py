"""Multi-value list control.

This module implements a control that collects several values for one slot
type by offering a list of choices, then validates and confirms them across
turns.

Capabilities:
- Request values, offering a page of choices
- Add, set, change and remove values
- Validate the values
- Confirm the values with a yes/no question
- Show all choices on devices with a screen

Guards are evaluated in a fixed order and the first match wins:

1. Custom handlers from configuration (a warning is logged if a built-in
   guard would also have matched)
2. Add values ("add cheese and ham")
3. Confirmation affirmed (bare "yes" after a confirmation question)
4. Confirmation disaffirmed (bare "no" after a confirmation question)
5. Set values ("set it to cheese and ham"), replacing all values
6. Change values ("change it to olives")
7. Remove values ("remove ham")

After a successful ``handle`` that did not already ask a question, the
control takes initiative in priority order: confirm unconfirmed values,
then repair invalid values, then elicit a value.

Example:
    ```python
    control = MultiValueListControl({
        "id": "toppings",
        "slot_type": "Topping",
        "list_item_ids": ["cheese", "ham", "olives", "peppers"],
    })

    result = ControlResultBuilder()
    if await control.can_handle(control_input):
        await control.handle(control_input, result)
    elif await control.can_take_initiative(control_input):
        await control.take_initiative(control_input, result)
    ```
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping, Sequence

from .acts import (
    ConfirmValueAct,
    InvalidValueAct,
    RequestChangedValueByListAct,
    RequestValueByListAct,
    SemanticAct,
    UnusableInputValueAct,
    ValueChangedAct,
    ValueConfirmedAct,
    ValueDisconfirmedAct,
    ValueSetAct,
)
from .callbacks import evaluate_flag, evaluate_prop, invoke_callback
from .config import ListControlConfig, build_config
from .control import Control
from .exceptions import (
    ConfigurationError,
    HandlerStateMismatchError,
    InitiativeStateMismatchError,
    MissingPreviousValueError,
    UnknownElicitationModeError,
)
from .guards import (
    GuardResult,
    Matched,
    Unmatched,
    evaluate_custom_handlers,
    first_failed_check,
    log_if_both_matched,
)
from .input import (
    ControlInput,
    action_is_match,
    feedback_is_match_or_undefined,
    is_bare_no,
    is_bare_yes,
    last_initiative_match,
    multi_value_intent_name,
    target_is_match_or_undefined,
    value_type_match,
    values_defined,
)
from .interaction_model import (
    ControlIntentSpec,
    InteractionModelGenerator,
    SharedSlotType,
    SlotValue,
)
from .pagination import PaginationTracker
from .rendering import ActRenderer
from .response import ControlResponseBuilder
from .results import ControlResultBuilder
from .state import LastInitiative, TurnState, ValueEntry
from .strings import (
    CHOICE_TARGET_SYNONYMS,
    SELECT_ACTION_SYNONYMS,
    Action,
    ElicitationMode,
    Feedback,
    Target,
)
from .validation import ValidationFailure, ValidationPipeline, ValidationResult

logger = logging.getLogger(__name__)

Initiative = Callable[[ControlInput, ControlResultBuilder], Awaitable[None]]


class MultiValueListControl(Control):
    """Collects several values from a list of choices.

    Args:
        config: A ``ListControlConfig`` or a partial configuration mapping
            merged over the defaults (see ``config.build_config``)
        state: Turn state restored from the session, if any

    Attributes:
        _config: Immutable configuration
        _state: Turn state, persisted between turns by the caller
        _committed: Handler selected by the last ``can_handle``
        _initiative: Initiative selected by the last ``can_take_initiative``
    """

    def __init__(
        self,
        config: ListControlConfig | Mapping[str, Any],
        state: TurnState | None = None,
    ):
        if not isinstance(config, ListControlConfig):
            config = build_config(config)
        super().__init__(config.id)
        self._config = config
        self._state = state if state is not None else TurnState()
        self._validation = ValidationPipeline(config.validation)
        self._renderer = ActRenderer(config)
        self._committed: Matched | None = None
        self._initiative: Initiative | None = None

    @property
    def config(self) -> ListControlConfig:
        return self._config

    @property
    def state(self) -> TurnState:
        return self._state

    @state.setter
    def state(self, state: TurnState) -> None:
        self._state = state

    @property
    def pagination(self) -> PaginationTracker:
        return PaginationTracker(self._state, self._config.page_size)

    # -- Dispatch -------------------------------------------------------------

    async def can_handle(self, control_input: ControlInput) -> bool:
        self._committed = None
        custom = await evaluate_custom_handlers(self._config.custom_handlers, control_input)
        builtin = self._evaluate_builtin_guards(control_input)
        log_if_both_matched(custom, builtin)

        winner = custom if isinstance(custom, Matched) else builtin
        if isinstance(winner, Matched):
            self._committed = winner
            logger.debug("Control '%s' can handle via '%s'", self.id, winner.name)
            return True
        logger.debug(
            "Control '%s' cannot handle %s", self.id, control_input.intent_name
        )
        return False

    async def handle(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        if self._committed is None:
            logger.error(
                "Control '%s': handle called but no guard matched. "
                "Are can_handle/handle out of sync?",
                self.id,
            )
            raise HandlerStateMismatchError(self.id, control_input.intent_name)

        committed, self._committed = self._committed, None
        logger.debug("Control '%s' handling with '%s'", self.id, committed.name)
        await invoke_callback(committed.handler, control_input, result)

        if not result.has_initiative_act() and await self.can_take_initiative(control_input):
            await self.take_initiative(control_input, result)

    def _evaluate_builtin_guards(self, control_input: ControlInput) -> GuardResult:
        guards = (
            self._guard_add_with_value,
            self._guard_confirmation_affirmed,
            self._guard_confirmation_disaffirmed,
            self._guard_set_with_value,
            self._guard_change_with_value,
            self._guard_remove_with_value,
        )
        outcome: GuardResult = Unmatched("builtin", "no built-in guard")
        for guard in guards:
            outcome = guard(control_input)
            if isinstance(outcome, Matched):
                return outcome
            logger.debug("Guard '%s' unmatched: %s", outcome.guard, outcome.reason)
        return outcome

    def _value_intent_mismatch(
        self, control_input: ControlInput, actions: Sequence[str]
    ) -> str | None:
        intent = control_input.intent
        if intent is None or intent.name != multi_value_intent_name(self._config.slot_type):
            return "not the multi-value intent for this slot type"
        return first_failed_check(
            (
                "target not registered",
                target_is_match_or_undefined(
                    intent.target, self._config.interaction_model.targets
                ),
            ),
            ("value type mismatch", value_type_match(intent.value_type, self._config.slot_type)),
            ("no values", values_defined(intent.values)),
            (
                "unexpected feedback",
                feedback_is_match_or_undefined(
                    intent.feedback, (Feedback.AFFIRM, Feedback.DISAFFIRM)
                ),
            ),
            ("action not in vocabulary", action_is_match(intent.action, actions)),
        )

    def _guard_add_with_value(self, control_input: ControlInput) -> GuardResult:
        reason = self._value_intent_mismatch(
            control_input, self._config.interaction_model.actions.add
        )
        if reason is not None:
            return Unmatched("add_with_value", reason)
        return Matched(self._handle_add_with_value, "add_with_value")

    def _guard_confirmation_affirmed(self, control_input: ControlInput) -> GuardResult:
        reason = first_failed_check(
            ("not a bare yes", is_bare_yes(control_input)),
            (
                "no confirmation pending",
                last_initiative_match(self._state.last_initiative, ConfirmValueAct.__name__),
            ),
        )
        if reason is not None:
            return Unmatched("confirmation_affirmed", reason)
        return Matched(self._handle_confirmation_affirmed, "confirmation_affirmed")

    def _guard_confirmation_disaffirmed(self, control_input: ControlInput) -> GuardResult:
        reason = first_failed_check(
            ("not a bare no", is_bare_no(control_input)),
            (
                "no confirmation pending",
                last_initiative_match(self._state.last_initiative, ConfirmValueAct.__name__),
            ),
        )
        if reason is not None:
            return Unmatched("confirmation_disaffirmed", reason)
        return Matched(self._handle_confirmation_disaffirmed, "confirmation_disaffirmed")

    def _guard_set_with_value(self, control_input: ControlInput) -> GuardResult:
        reason = self._value_intent_mismatch(
            control_input, self._config.interaction_model.actions.set_all
        )
        if reason is not None:
            return Unmatched("set_with_value", reason)
        return Matched(self._handle_set_with_value, "set_with_value")

    def _guard_change_with_value(self, control_input: ControlInput) -> GuardResult:
        reason = self._value_intent_mismatch(
            control_input, self._config.interaction_model.actions.change
        ) or first_failed_check(("nothing to change", self._state.has_values))
        if reason is not None:
            return Unmatched("change_with_value", reason)
        return Matched(self._handle_change_with_value, "change_with_value")

    def _guard_remove_with_value(self, control_input: ControlInput) -> GuardResult:
        reason = self._value_intent_mismatch(
            control_input, self._config.interaction_model.actions.remove
        ) or first_failed_check(("nothing to remove", self._state.has_values))
        if reason is not None:
            return Unmatched("remove_with_value", reason)
        return Matched(self._handle_remove_with_value, "remove_with_value")

    # -- Handlers -------------------------------------------------------------

    def _entries_from_input(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> list[ValueEntry]:
        """Build entries from the intent's values; empty values are unusable."""
        entries = []
        for resolved in control_input.intent.values or ():
            if not resolved.slot_value or not resolved.slot_value.strip():
                result.add_act(
                    UnusableInputValueAct(
                        self.id, value=resolved.slot_value or "", reason_code="empty_value"
                    )
                )
                continue
            entries.append(
                ValueEntry(
                    id=resolved.slot_value,
                    confirmed=False,
                    matched_known_catalog=resolved.is_entity_resolution_match,
                )
            )
        return entries

    async def _handle_add_with_value(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        entries = self._entries_from_input(control_input, result)
        if not entries:
            return
        self._abandon_change()
        for entry in entries:
            self.add_value(entry)

        if await self._is_confirmation_required(control_input):
            await self._confirm_value(control_input, result)
        else:
            await self.validate_and_add_acts(control_input, result, ElicitationMode.SET)

    async def _handle_confirmation_affirmed(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        targets = set(self._state.last_initiative.value_ids)
        confirmed = []
        for entry in self._state.values or []:
            if entry.id in targets:
                entry.confirmed = True
                confirmed.append(entry.id)
        self._state.last_initiative = None
        result.add_act(
            ValueConfirmedAct(
                self.id,
                value_ids=tuple(confirmed),
                rendered_value=await self._render_values(confirmed, control_input),
            )
        )

    async def _handle_confirmation_disaffirmed(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        removed = self._state.discard_unconfirmed(self._state.last_initiative.value_ids)
        self._state.last_initiative = None
        self._abandon_change()
        result.add_act(
            ValueDisconfirmedAct(
                self.id,
                value_ids=tuple(removed),
                rendered_value=await self._render_values(removed, control_input),
            )
        )

    async def _handle_set_with_value(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        entries = self._entries_from_input(control_input, result)
        if not entries:
            return
        self._abandon_change()
        self._state.values = entries
        await self.validate_and_add_acts(control_input, result, ElicitationMode.SET)

    async def _handle_change_with_value(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        entries = self._entries_from_input(control_input, result)
        if not entries:
            return
        # An unfinished change keeps its first snapshot.
        if self._state.previous_values is None:
            self._state.previous_values = self._state.value_ids()
        self._state.values = entries
        await self.validate_and_add_acts(control_input, result, ElicitationMode.CHANGE)

    def _abandon_change(self) -> None:
        """Drop the snapshot of a change that another edit superseded."""
        self._state.previous_values = None
        if self._state.elicitation_mode is ElicitationMode.CHANGE:
            self._state.elicitation_mode = None

    async def _handle_remove_with_value(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        requested = [v.slot_value for v in control_input.intent.values or () if v.slot_value]
        removed = self._state.remove_values(requested)
        if removed:
            self._abandon_change()
        for value_id in requested:
            if value_id not in removed:
                result.add_act(
                    UnusableInputValueAct(self.id, value=value_id, reason_code="not_selected")
                )
        if removed and self._state.has_values:
            ids = self._state.value_ids()
            result.add_act(
                ValueSetAct(
                    self.id,
                    value_ids=tuple(ids),
                    rendered_value=await self._render_values(ids, control_input),
                )
            )

    # -- Initiative -----------------------------------------------------------

    async def can_take_initiative(self, control_input: ControlInput) -> bool:
        self._initiative = await self._select_initiative(control_input)
        return self._initiative is not None

    async def take_initiative(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        if self._initiative is None:
            logger.error(
                "Control '%s': take_initiative called but no initiative was selected",
                self.id,
            )
            raise InitiativeStateMismatchError(self.id)
        initiative, self._initiative = self._initiative, None
        await initiative(control_input, result)

    async def _select_initiative(self, control_input: ControlInput) -> Initiative | None:
        # Priority order: confirm > fix invalid > elicit.
        if await self._wants_to_confirm_value(control_input):
            logger.debug("Control '%s' wants to confirm", self.id)
            return self._confirm_value
        if await self._wants_to_fix_invalid_value(control_input):
            logger.debug("Control '%s' wants to fix an invalid value", self.id)
            return self._fix_invalid_value
        if await self._wants_to_elicit_value(control_input):
            logger.debug("Control '%s' wants to elicit a value", self.id)
            return self._elicit_value
        return None

    async def _wants_to_confirm_value(self, control_input: ControlInput) -> bool:
        return (
            self._state.has_values
            and bool(self._state.unconfirmed_ids())
            and await self._is_confirmation_required(control_input)
        )

    async def _wants_to_fix_invalid_value(self, control_input: ControlInput) -> bool:
        if self._state.values is None:
            return False
        return await self.validate(control_input) is not True

    async def _wants_to_elicit_value(self, control_input: ControlInput) -> bool:
        return not self._state.has_values and await evaluate_flag(
            self._config.required, control_input
        )

    async def _confirm_value(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        ids = self._state.unconfirmed_ids()
        act = ConfirmValueAct(
            self.id,
            value_ids=tuple(ids),
            rendered_value=await self._render_values(ids, control_input),
        )
        self._add_initiative_act(act, result, ids)

    async def _fix_invalid_value(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        await self.validate_and_add_acts(control_input, result, ElicitationMode.CHANGE)

    async def _elicit_value(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        await self.ask_elicitation_question(control_input, result, ElicitationMode.SET)

    def _add_initiative_act(
        self, act: SemanticAct, result: ControlResultBuilder, value_ids: list[str]
    ) -> None:
        self._state.active_initiative_act_kind = act.kind
        self._state.last_initiative = LastInitiative(act.kind, list(value_ids))
        result.add_act(act)

    # -- Validation and elicitation -------------------------------------------

    async def validate(self, control_input: ControlInput) -> ValidationResult:
        """Run the validation pipeline and record validity on each entry."""
        outcome = await self._validation.validate(self._state, control_input)
        for entry in self._state.values or []:
            if isinstance(outcome, ValidationFailure):
                entry.is_valid = entry.id != outcome.failed_value
            else:
                entry.is_valid = True
        return outcome

    def _coerce_mode(self, mode: ElicitationMode | str) -> ElicitationMode:
        try:
            return ElicitationMode(mode)
        except ValueError:
            logger.error("Control '%s': unknown elicitation mode %r", self.id, mode)
            raise UnknownElicitationModeError(self.id, mode) from None

    async def validate_and_add_acts(
        self,
        control_input: ControlInput,
        result: ControlResultBuilder,
        mode: ElicitationMode | str,
    ) -> None:
        """Validate the values and report the outcome.

        Valid values produce ``ValueSetAct`` (mode Set) or ``ValueChangedAct``
        (mode Change). Invalid values produce ``InvalidValueAct`` followed by
        a fresh request for a value in the same mode.

        Raises:
            MissingPreviousValueError: Mode Change succeeded but no previous
                value was stored
            UnknownElicitationModeError: ``mode`` is not Set or Change
        """
        mode = self._coerce_mode(mode)
        outcome = await self.validate(control_input)
        ids = self._state.value_ids()
        rendered = await self._render_values(ids, control_input)

        if isinstance(outcome, ValidationFailure):
            result.add_act(
                InvalidValueAct(
                    self.id,
                    value=outcome.failed_value,
                    rendered_value=rendered,
                    reason_code=outcome.reason_code,
                    rendered_reason=outcome.rendered_reason,
                )
            )
            await self.ask_elicitation_question(control_input, result, mode)
            return

        if mode is ElicitationMode.CHANGE:
            previous = self._state.previous_values
            if previous is None:
                logger.error(
                    "Control '%s': ValueChangedAct requires a previous value", self.id
                )
                raise MissingPreviousValueError(self.id)
            result.add_act(
                ValueChangedAct(
                    self.id,
                    previous_value=", ".join(previous),
                    rendered_previous_value=await self._render_values(previous, control_input),
                    value=", ".join(ids),
                    rendered_value=rendered,
                )
            )
            self._state.previous_values = None
        else:
            result.add_act(ValueSetAct(self.id, value_ids=tuple(ids), rendered_value=rendered))

    async def ask_elicitation_question(
        self,
        control_input: ControlInput,
        result: ControlResultBuilder,
        mode: ElicitationMode | str,
    ) -> None:
        """Ask for a value (Set) or a replacement value (Change)."""
        mode = self._coerce_mode(mode)
        self._state.elicitation_mode = mode
        all_choices = await self._get_choices_list(control_input)
        active_page = self.pagination.active_page(all_choices)
        rendered_active = [await self._render_values([c], control_input) for c in active_page]
        rendered_all = [await self._render_values([c], control_input) for c in all_choices]
        ids = self._state.value_ids()

        if mode is ElicitationMode.SET:
            act: SemanticAct = RequestValueByListAct(
                self.id,
                choices_from_active_page=tuple(active_page),
                all_choices=tuple(all_choices),
                rendered_choices_from_active_page=tuple(rendered_active),
                rendered_all_choices=tuple(rendered_all),
            )
        else:
            act = RequestChangedValueByListAct(
                self.id,
                current_value=", ".join(ids),
                rendered_value=await self._render_values(ids, control_input),
                choices_from_active_page=tuple(active_page),
                all_choices=tuple(all_choices),
                rendered_choices_from_active_page=tuple(rendered_active),
                rendered_all_choices=tuple(rendered_all),
            )
        self._add_initiative_act(act, result, ids)

    async def _get_choices_list(self, control_input: ControlInput) -> list[str]:
        choices = await evaluate_prop(self._config.list_item_ids, control_input)
        if choices is None:
            raise ConfigurationError(
                f"Control '{self.id}': list_item_ids produced None",
                context={"control_id": self.id},
            )
        return list(choices)

    async def _is_confirmation_required(self, control_input: ControlInput) -> bool:
        return await evaluate_flag(self._config.confirmation_required, control_input)

    async def _render_values(
        self, value_ids: Sequence[str], control_input: ControlInput
    ) -> str:
        return await invoke_callback(self._config.value_renderer, list(value_ids), control_input)

    # -- Direct state manipulation --------------------------------------------

    def add_value(self, entry: ValueEntry) -> None:
        """Append a value entry."""
        self._state.add_value(entry)

    def set_value(self, value_ids: str | Sequence[str], matched: bool = True) -> None:
        """Replace all values with unconfirmed entries for ``value_ids``."""
        if isinstance(value_ids, str):
            value_ids = [value_ids]
        self._state.values = [
            ValueEntry(id=value_id, matched_known_catalog=matched) for value_id in value_ids
        ] or None

    def clear(self) -> None:
        """Reset to an empty state; the page cursor is carried over."""
        self._state = TurnState(page_index=self._state.page_index)
        self._committed = None
        self._initiative = None

    def stringify_state_for_diagram(self) -> str:
        return self._state.stringify_for_diagram()

    # -- Rendering ------------------------------------------------------------

    async def render_act(
        self,
        act: SemanticAct,
        control_input: ControlInput,
        builder: ControlResponseBuilder,
    ) -> None:
        await self._renderer.render(act, control_input, builder)

    # -- Interaction model ----------------------------------------------------

    def update_interaction_model(self, generator: InteractionModelGenerator) -> None:
        im = self._config.interaction_model
        generator.add_control_intent(ControlIntentSpec.general())
        generator.add_control_intent(
            ControlIntentSpec.multi_value(self._config.slot_type, im.filtered_slot_type)
        )
        generator.add_yes_and_no_intents()

        generator.add_values_to_slot_type(
            SharedSlotType.TARGET,
            [
                SlotValue(t, CHOICE_TARGET_SYNONYMS) if t == Target.CHOICE else SlotValue(t)
                for t in im.targets
            ],
        )
        generator.add_values_to_slot_type(
            SharedSlotType.ACTION,
            [
                SlotValue(a, SELECT_ACTION_SYNONYMS) if a == Action.SELECT else SlotValue(a)
                for a in im.actions.all_ids()
            ],
        )
        generator.add_values_to_slot_type(
            SharedSlotType.FEEDBACK, [Feedback.AFFIRM, Feedback.DISAFFIRM]
        )

    def get_target_ids(self) -> list[str]:
        return list(self._config.interaction_model.targets)
