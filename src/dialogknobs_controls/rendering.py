"""Rendering of semantic acts into prompt fragments and visual directives.

Prompt templates are Jinja2 strings rendered with the act payload as
context, e.g. ``"Was that {{ rendered_value }}?"``. A template may also be
a list of variants (one is picked at random) or a function
``(act, control_input) -> str | list[str]``, sync or async.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any

import jinja2

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
from .callbacks import evaluate_flag, invoke_callback
from .exceptions import UnhandledActError
from .formatting import natural_join

if TYPE_CHECKING:
    from .config import ListControlConfig, VisualTemplate
    from .input import ControlInput
    from .response import ControlResponseBuilder

logger = logging.getLogger(__name__)

VISUAL_TOKEN = "Token"

_env = jinja2.Environment(undefined=jinja2.Undefined)
_env.filters["natural_join"] = natural_join


def render_template(template_str: str, context: dict[str, Any]) -> str:
    """Render a Jinja2 template string with ``context``."""
    return _env.from_string(template_str).render(**context)


async def evaluate_prompt(
    template: Any, act: SemanticAct, control_input: ControlInput
) -> str:
    """Turn a prompt template into text for ``act``.

    Args:
        template: Jinja2 string, list of variants, function, or ``None``
        act: The act being rendered; its payload is the template context
        control_input: Current input, passed to template functions

    Returns:
        Rendered prompt text (empty for ``None``)
    """
    if callable(template):
        template = await invoke_callback(template, act, control_input)
    if template is None:
        return ""
    if isinstance(template, (list, tuple)):
        if not template:
            return ""
        template = random.choice(template)
    return render_template(str(template), act.to_template_context())


def default_list_document(act: Any, control_input: ControlInput) -> dict[str, Any]:
    """Built-in text-list layout bound to the ``payload`` data source."""
    return {
        "type": "TextListDocument",
        "version": "1.0",
        "mainTemplate": {
            "parameters": ["payload"],
            "items": [
                {
                    "type": "TextList",
                    "headerTitle": "${payload.general.headerTitle}",
                    "listItems": "${payload.general.items}",
                }
            ],
        },
    }


def default_list_data_source(act: Any, control_input: ControlInput) -> dict[str, Any]:
    """All choices, flagging those on the active page."""
    active = set(act.choices_from_active_page)
    title = (
        "Change your selection"
        if isinstance(act, RequestChangedValueByListAct)
        else "Make a selection"
    )
    return {
        "general": {
            "headerTitle": title,
            "controlId": act.control_id,
            "items": [
                {
                    "id": choice_id,
                    "primaryText": rendered,
                    "onActivePage": choice_id in active,
                }
                for choice_id, rendered in zip(act.all_choices, act.rendered_all_choices)
            ],
        }
    }


class ActRenderer:
    """Renders the closed set of list-control acts.

    Args:
        config: Configuration holding prompt, reprompt and visual settings
    """

    def __init__(self, config: ListControlConfig):
        self._config = config

    async def render(
        self,
        act: SemanticAct,
        control_input: ControlInput,
        builder: ControlResponseBuilder,
    ) -> None:
        """Add the fragments for ``act`` to ``builder``.

        Raises:
            UnhandledActError: If ``act`` is not one of the known act classes
        """
        prompts = self._config.prompts
        reprompts = self._config.reprompts
        visual = self._config.visual

        match act:
            case RequestValueByListAct():
                await self._add_fragments(
                    act, control_input, builder, prompts.request_value, reprompts.request_value
                )
                await self._add_visual(act, control_input, builder, visual.request_value)
            case RequestChangedValueByListAct():
                await self._add_fragments(
                    act,
                    control_input,
                    builder,
                    prompts.request_changed_value,
                    reprompts.request_changed_value,
                )
                await self._add_visual(
                    act, control_input, builder, visual.request_changed_value
                )
            case UnusableInputValueAct():
                await self._add_fragments(
                    act,
                    control_input,
                    builder,
                    prompts.unusable_input_value,
                    reprompts.unusable_input_value,
                )
            case InvalidValueAct():
                await self._add_fragments(
                    act, control_input, builder, prompts.invalid_value, reprompts.invalid_value
                )
            case ValueSetAct():
                await self._add_fragments(
                    act, control_input, builder, prompts.value_set, reprompts.value_set
                )
            case ValueChangedAct():
                await self._add_fragments(
                    act, control_input, builder, prompts.value_changed, reprompts.value_changed
                )
            case ConfirmValueAct():
                await self._add_fragments(
                    act, control_input, builder, prompts.confirm_value, reprompts.confirm_value
                )
            case ValueConfirmedAct():
                await self._add_fragments(
                    act,
                    control_input,
                    builder,
                    prompts.value_confirmed,
                    reprompts.value_confirmed,
                )
            case ValueDisconfirmedAct():
                await self._add_fragments(
                    act,
                    control_input,
                    builder,
                    prompts.value_disconfirmed,
                    reprompts.value_disconfirmed,
                )
            case _:
                logger.error("No rendering for act %s", type(act).__name__)
                raise UnhandledActError(self._config.id, act)

    async def _add_fragments(
        self,
        act: SemanticAct,
        control_input: ControlInput,
        builder: ControlResponseBuilder,
        prompt: Any,
        reprompt: Any,
    ) -> None:
        prompt_text = await evaluate_prompt(prompt, act, control_input)
        reprompt_text = await evaluate_prompt(reprompt, act, control_input)
        logger.debug("Rendered %s: prompt=%r", act.kind, prompt_text)
        builder.add_prompt_fragment(prompt_text)
        builder.add_reprompt_fragment(reprompt_text)

    async def _add_visual(
        self,
        act: RequestValueByListAct | RequestChangedValueByListAct,
        control_input: ControlInput,
        builder: ControlResponseBuilder,
        template: VisualTemplate,
    ) -> None:
        if not control_input.supports_visual:
            return
        if not await evaluate_flag(self._config.visual.enabled, control_input):
            return
        document = template.document or default_list_document
        data_source = template.data_source or default_list_data_source
        if callable(document):
            document = await invoke_callback(document, act, control_input)
        if callable(data_source):
            data_source = await invoke_callback(data_source, act, control_input)
        builder.add_visual_directive(VISUAL_TOKEN, document, data_source)
