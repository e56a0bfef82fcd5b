"""Tests for act rendering into prompts and visual directives."""

from dataclasses import dataclass

import pytest

from dialogknobs_controls.acts import (
    CONTENT_ACT_TYPES,
    INITIATIVE_ACT_TYPES,
    ConfirmValueAct,
    InvalidValueAct,
    RequestChangedValueByListAct,
    RequestValueByListAct,
    SystemAct,
    ValueChangedAct,
    ValueSetAct,
)
from dialogknobs_controls.config import build_config
from dialogknobs_controls.exceptions import ContractViolationError, UnhandledActError
from dialogknobs_controls.input import ControlInput
from dialogknobs_controls.rendering import (
    ActRenderer,
    default_list_data_source,
    evaluate_prompt,
    render_template,
)
from dialogknobs_controls.response import ControlResponseBuilder

VISUAL_INPUT = ControlInput(supported_interfaces=frozenset({"Visual"}))


def _renderer(**overrides) -> ActRenderer:
    return ActRenderer(build_config({"id": "toppings", "slot_type": "Topping", **overrides}))


def _request_act() -> RequestValueByListAct:
    return RequestValueByListAct(
        "toppings",
        choices_from_active_page=("a", "b", "c"),
        all_choices=("a", "b", "c", "d"),
        rendered_choices_from_active_page=("A", "B", "C"),
        rendered_all_choices=("A", "B", "C", "D"),
    )


@dataclass(frozen=True)
class StrayAct(SystemAct):
    """An act outside the closed set."""


class TestEvaluatePrompt:
    """Tests for evaluate_prompt."""

    @pytest.mark.asyncio
    async def test_template_uses_act_payload(self) -> None:
        """Test that act fields and kind are available to templates."""
        act = ValueSetAct("toppings", value_ids=("a",), rendered_value="ham")

        text = await evaluate_prompt("OK, {{ rendered_value }} ({{ kind }}).", act, ControlInput())

        assert text == "OK, ham (ValueSetAct)."

    @pytest.mark.asyncio
    async def test_variants(self) -> None:
        """Test that one of several prompt variants is chosen."""
        act = ValueSetAct("toppings", rendered_value="ham")

        text = await evaluate_prompt(["Got {{ rendered_value }}.", "Noted {{ rendered_value }}."], act, ControlInput())

        assert text in ("Got ham.", "Noted ham.")

    @pytest.mark.asyncio
    async def test_callable_sync_and_async(self) -> None:
        """Test that sync and async prompt functions are both accepted."""
        act = ValueSetAct("toppings", rendered_value="ham")

        def sync_prompt(act, control_input):
            return f"Sync {act.rendered_value}"

        async def async_prompt(act, control_input):
            return "Async {{ rendered_value }}"

        assert await evaluate_prompt(sync_prompt, act, ControlInput()) == "Sync ham"
        assert await evaluate_prompt(async_prompt, act, ControlInput()) == "Async ham"

    @pytest.mark.asyncio
    async def test_none_and_empty(self) -> None:
        """Test that a missing prompt renders as an empty string."""
        act = ValueSetAct("toppings")
        assert await evaluate_prompt(None, act, ControlInput()) == ""
        assert await evaluate_prompt([], act, ControlInput()) == ""

    def test_natural_join_filter(self) -> None:
        """Test the natural_join template filter."""
        text = render_template("{{ items | natural_join('or') }}", {"items": ["a", "b", "c"]})
        assert text == "a, b or c"


class TestActRenderer:
    """Tests for ActRenderer dispatch."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("act_type", CONTENT_ACT_TYPES + INITIATIVE_ACT_TYPES)
    async def test_every_act_kind_renders(self, act_type) -> None:
        """Test that each act in the closed set produces a prompt."""
        builder = ControlResponseBuilder()

        await _renderer().render(act_type("toppings"), ControlInput(), builder)

        assert builder.prompt_fragments
        assert builder.reprompt_fragments

    @pytest.mark.asyncio
    async def test_unknown_act_raises(self) -> None:
        """Test that an act outside the closed set is a contract violation."""
        with pytest.raises(UnhandledActError) as exc_info:
            await _renderer().render(StrayAct("toppings"), ControlInput(), ControlResponseBuilder())

        assert isinstance(exc_info.value, ContractViolationError)
        assert exc_info.value.context["act_type"] == "StrayAct"

    @pytest.mark.asyncio
    async def test_default_prompts(self) -> None:
        """Test the default request and confirm prompts."""
        builder = ControlResponseBuilder()
        renderer = _renderer()

        await renderer.render(_request_act(), ControlInput(), builder)
        await renderer.render(
            ConfirmValueAct("toppings", value_ids=("a", "b"), rendered_value="a and b"),
            ControlInput(),
            builder,
        )

        assert builder.prompt_fragments == [
            "What would you like? Some suggestions are A, B or C.",
            "Was that a and b?",
        ]

    @pytest.mark.asyncio
    async def test_invalid_value_reason(self) -> None:
        """Test that the rendered reason is spoken with an invalid value."""
        builder = ControlResponseBuilder()
        act = InvalidValueAct(
            "toppings", value="z", rendered_value="z", rendered_reason="we're out of it"
        )

        await _renderer().render(act, ControlInput(), builder)

        assert builder.prompt_fragments == [
            "Sorry, z is not a valid choice because we're out of it."
        ]

    @pytest.mark.asyncio
    async def test_configured_prompt(self) -> None:
        """Test that a configured prompt replaces the default."""
        builder = ControlResponseBuilder()
        renderer = _renderer(prompts={"value_changed": "Swapped {{ previous_value }} for {{ value }}."})
        act = ValueChangedAct("toppings", previous_value="a", value="b")

        await renderer.render(act, ControlInput(), builder)

        assert builder.prompt_fragments == ["Swapped a for b."]


class TestVisualDirective:
    """Tests for visual directives on request acts."""

    @pytest.mark.asyncio
    async def test_no_visual_without_screen(self) -> None:
        """Test that no directive is added without visual support."""
        builder = ControlResponseBuilder()
        await _renderer().render(_request_act(), ControlInput(), builder)

        assert builder.visual_directive is None

    @pytest.mark.asyncio
    async def test_default_visual(self) -> None:
        """Test the default list data source and active page markers."""
        builder = ControlResponseBuilder()
        await _renderer().render(_request_act(), VISUAL_INPUT, builder)

        directive = builder.visual_directive
        assert directive is not None
        assert directive.token == "Token"
        items = directive.data_source["general"]["items"]
        assert [item["id"] for item in items] == ["a", "b", "c", "d"]
        assert [item["onActivePage"] for item in items] == [True, True, True, False]

    @pytest.mark.asyncio
    async def test_visual_disabled_by_predicate(self) -> None:
        """Test that the enabled predicate can suppress the directive."""
        builder = ControlResponseBuilder()
        renderer = _renderer(visual={"enabled": lambda control_input: False})

        await renderer.render(_request_act(), VISUAL_INPUT, builder)

        assert builder.visual_directive is None

    @pytest.mark.asyncio
    async def test_custom_document_and_data_source(self) -> None:
        """Test a configured document and data source function."""
        builder = ControlResponseBuilder()
        renderer = _renderer(
            visual={
                "request_changed_value": {
                    "document": {"type": "Custom"},
                    "data_source": lambda act, control_input: {"current": act.current_value},
                }
            }
        )
        act = RequestChangedValueByListAct("toppings", current_value="a")

        await renderer.render(act, VISUAL_INPUT, builder)

        assert builder.visual_directive.document == {"type": "Custom"}
        assert builder.visual_directive.data_source == {"current": "a"}

    @pytest.mark.asyncio
    async def test_content_acts_have_no_visual(self) -> None:
        """Test that content acts never add a directive."""
        builder = ControlResponseBuilder()
        await _renderer().render(ValueSetAct("toppings"), VISUAL_INPUT, builder)

        assert builder.visual_directive is None

    def test_change_title(self) -> None:
        """Test the list title used when asking for a changed value."""
        act = RequestChangedValueByListAct("toppings", all_choices=("a",), rendered_all_choices=("A",))

        data = default_list_data_source(act, VISUAL_INPUT)

        assert data["general"]["headerTitle"] == "Change your selection"
        assert data["general"]["items"] == [
            {"id": "a", "primaryText": "A", "onActivePage": False}
        ]
