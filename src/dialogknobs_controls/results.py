"""Collector for the acts a control produces during one turn."""

from __future__ import annotations

import logging

from .acts import SemanticAct, is_initiative_act

logger = logging.getLogger(__name__)


class ControlResultBuilder:
    """Ordered list of acts produced during a turn.

    At most one initiative act is expected per turn; ``has_initiative_act``
    tells the engine whether initiative was already taken.
    """

    def __init__(self) -> None:
        self._acts: list[SemanticAct] = []

    def add_act(self, act: SemanticAct) -> ControlResultBuilder:
        if is_initiative_act(act) and self.has_initiative_act():
            logger.warning(
                "Second initiative act %s added in one turn (already have %s)",
                act.kind,
                self.initiative_act.kind if self.initiative_act else None,
            )
        self._acts.append(act)
        return self

    @property
    def acts(self) -> list[SemanticAct]:
        return list(self._acts)

    @property
    def content_acts(self) -> list[SemanticAct]:
        return [act for act in self._acts if not is_initiative_act(act)]

    @property
    def initiative_act(self) -> SemanticAct | None:
        for act in self._acts:
            if is_initiative_act(act):
                return act
        return None

    def has_initiative_act(self) -> bool:
        return self.initiative_act is not None

    def __len__(self) -> int:
        return len(self._acts)
