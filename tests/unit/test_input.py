"""Tests for the parsed-input boundary and guard predicates."""

from dialogknobs_controls.input import (
    GENERAL_CONTROL_INTENT,
    ControlInput,
    ParsedIntent,
    ResolvedValue,
    action_is_match,
    feedback_is_match_or_undefined,
    is_bare_no,
    is_bare_yes,
    is_intent,
    last_initiative_match,
    multi_value_intent_name,
    target_is_match_or_undefined,
    value_type_match,
    values_defined,
)
from dialogknobs_controls.state import LastInitiative
from dialogknobs_controls.strings import Action, Feedback, Target


class TestParsedIntent:
    """Tests for ParsedIntent construction helpers."""

    def test_multi_value_intent_name(self) -> None:
        """Test the multi-value intent naming scheme."""
        assert multi_value_intent_name("Topping") == "Topping_MultiValueControlIntent"

    def test_multi_value_wraps_strings(self) -> None:
        """Test plain strings become catalog-matched resolved values."""
        intent = ParsedIntent.multi_value(
            "Topping", ["ham", ResolvedValue("purple", False)], action=Action.ADD
        )

        assert intent.name == "Topping_MultiValueControlIntent"
        assert intent.value_type == "Topping"
        assert intent.values == (
            ResolvedValue("ham", True),
            ResolvedValue("purple", False),
        )

    def test_control_input_properties(self) -> None:
        """Test the intent name and visual support shortcuts."""
        control_input = ControlInput(
            intent=ParsedIntent.yes(), supported_interfaces=frozenset({"Visual"})
        )

        assert control_input.supports_visual is True
        assert control_input.intent_name == "YesIntent"
        assert ControlInput().intent_name is None
        assert ControlInput().supports_visual is False


class TestPredicates:
    """Tests for the guard predicates."""

    def test_is_intent(self) -> None:
        """Test matching the intent by name."""
        assert is_intent(ControlInput(intent=ParsedIntent.no()), "NoIntent")
        assert not is_intent(ControlInput(), "NoIntent")

    def test_target(self) -> None:
        """Test that a missing target matches any vocabulary."""
        targets = (Target.CHOICE, Target.IT)
        assert target_is_match_or_undefined(None, targets)
        assert target_is_match_or_undefined(Target.IT, targets)
        assert not target_is_match_or_undefined("color", targets)

    def test_value_type(self) -> None:
        """Test that a missing value type matches any slot type."""
        assert value_type_match(None, "Topping")
        assert value_type_match("Topping", "Topping")
        assert not value_type_match("Color", "Topping")

    def test_values_defined(self) -> None:
        """Test that empty or missing values are not defined."""
        assert values_defined((ResolvedValue("a"),))
        assert not values_defined(())
        assert not values_defined(None)

    def test_feedback(self) -> None:
        """Test that a missing feedback matches any allowed feedback."""
        allowed = (Feedback.AFFIRM, Feedback.DISAFFIRM)
        assert feedback_is_match_or_undefined(None, allowed)
        assert feedback_is_match_or_undefined(Feedback.AFFIRM, allowed)
        assert not feedback_is_match_or_undefined("builtin_maybe", allowed)

    def test_action_is_required(self) -> None:
        """Test that a missing action never matches a vocabulary."""
        assert action_is_match(Action.ADD, (Action.SELECT, Action.ADD))
        assert not action_is_match(None, (Action.SELECT, Action.ADD))
        assert not action_is_match(Action.SET, (Action.SELECT, Action.ADD))

    def test_bare_yes_and_no(self) -> None:
        """Test recognizing plain YesIntent and NoIntent."""
        assert is_bare_yes(ControlInput(intent=ParsedIntent.yes()))
        assert is_bare_no(ControlInput(intent=ParsedIntent.no()))
        assert not is_bare_yes(ControlInput(intent=ParsedIntent.no()))
        assert not is_bare_yes(ControlInput())

    def test_general_intent_feedback_is_bare(self) -> None:
        """Test a general intent with only feedback counts as bare yes/no."""
        affirm = ControlInput(
            intent=ParsedIntent(name=GENERAL_CONTROL_INTENT, feedback=Feedback.AFFIRM)
        )
        affirm_with_action = ControlInput(
            intent=ParsedIntent(
                name=GENERAL_CONTROL_INTENT, feedback=Feedback.AFFIRM, action=Action.SET
            )
        )

        assert is_bare_yes(affirm)
        assert not is_bare_no(affirm)
        assert not is_bare_yes(affirm_with_action)

    def test_last_initiative_match(self) -> None:
        """Test matching the recorded initiative by act kind."""
        last = LastInitiative("ConfirmValueAct", ["a"])
        assert last_initiative_match(last, "ConfirmValueAct")
        assert not last_initiative_match(last, "RequestValueByListAct")
        assert not last_initiative_match(None, "ConfirmValueAct")
