"""Single-turn pipeline: guard, handle, initiative, render.

Stages run strictly in sequence and each one is awaited before the next
begins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .acts import SemanticAct, is_initiative_act
from .control import Control
from .input import ControlInput
from .response import ControlResponseBuilder, ResponseFragments
from .results import ControlResultBuilder

logger = logging.getLogger(__name__)


@dataclass
class TurnOutcome:
    """What one turn produced.

    Attributes:
        handled: Whether the control handled the input (as opposed to only
            taking initiative, or doing nothing)
        acts: Acts in the order they were produced
        response: Rendered prompt, reprompt and visual directive
    """

    handled: bool
    acts: list[SemanticAct] = field(default_factory=list)
    response: ResponseFragments = field(
        default_factory=lambda: ResponseFragments(prompt="", reprompt="")
    )

    @property
    def initiative_act(self) -> SemanticAct | None:
        return next((act for act in self.acts if is_initiative_act(act)), None)


class TurnRunner:
    """Drives a control through one turn at a time.

    Example:
        ```python
        runner = TurnRunner(control)
        outcome = await runner.run(ControlInput(intent=ParsedIntent.yes()))
        print(outcome.response.prompt)
        ```
    """

    def __init__(self, control: Control):
        self.control = control

    async def run(self, control_input: ControlInput) -> TurnOutcome:
        result = ControlResultBuilder()

        handled = await self.control.can_handle(control_input)
        if handled:
            await self.control.handle(control_input, result)
        elif await self.control.can_take_initiative(control_input):
            await self.control.take_initiative(control_input, result)

        builder = ControlResponseBuilder()
        for act in result.acts:
            await self.control.render_act(act, control_input, builder)

        logger.debug(
            "Turn %d for control '%s': handled=%s, acts=%s",
            control_input.turn_number,
            self.control.id,
            handled,
            [act.kind for act in result.acts],
        )
        return TurnOutcome(handled=handled, acts=result.acts, response=builder.build())
