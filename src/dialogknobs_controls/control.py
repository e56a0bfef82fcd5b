"""Base class for dialog controls."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .acts import SemanticAct
    from .input import ControlInput
    from .response import ControlResponseBuilder
    from .results import ControlResultBuilder


class Control(ABC):
    """Abstract base class for controls.

    A control owns one piece of conversational state and runs one turn at a
    time through a fixed protocol:

    1. ``can_handle(input)`` decides whether the control handles the turn.
    2. ``handle(input, result)`` runs the selected handler. It must only be
       called after ``can_handle`` returned ``True`` for the same input.
    3. ``can_take_initiative(input)`` / ``take_initiative(input, result)``
       let the control ask a question when it was not given a turn to
       handle (or when handling did not already ask one).
    4. ``render_act(act, input, builder)`` turns each produced act into
       prompt fragments.

    Examples:
        - MultiValueListControl: collect several values from a list
    """

    def __init__(self, control_id: str):
        self.id = control_id

    @abstractmethod
    async def can_handle(self, control_input: ControlInput) -> bool:
        """Decide whether this control handles the turn."""
        pass

    @abstractmethod
    async def handle(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        """Handle the turn selected by ``can_handle``."""
        pass

    @abstractmethod
    async def can_take_initiative(self, control_input: ControlInput) -> bool:
        """Decide whether the control wants to ask something."""
        pass

    @abstractmethod
    async def take_initiative(
        self, control_input: ControlInput, result: ControlResultBuilder
    ) -> None:
        """Emit the initiative act selected by ``can_take_initiative``."""
        pass

    @abstractmethod
    async def render_act(
        self,
        act: SemanticAct,
        control_input: ControlInput,
        builder: ControlResponseBuilder,
    ) -> None:
        """Render one of this control's acts."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Reset the control's state."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"
