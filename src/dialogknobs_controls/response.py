"""Output boundary: prompt, reprompt, and an optional visual directive."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisualDirective:
    """Request to render a visual document on a screen device.

    Attributes:
        token: Identifier for the rendered document
        document: Layout document
        data_source: Data bound into the document
    """

    token: str
    document: dict[str, Any]
    data_source: dict[str, Any]


@dataclass(frozen=True)
class ResponseFragments:
    """Assembled output handed to the external response assembler."""

    prompt: str
    reprompt: str
    visual_directive: VisualDirective | None = None


class ControlResponseBuilder:
    """Accumulates prompt fragments in order."""

    def __init__(self) -> None:
        self._prompt_fragments: list[str] = []
        self._reprompt_fragments: list[str] = []
        self._visual_directive: VisualDirective | None = None

    def add_prompt_fragment(self, fragment: str) -> ControlResponseBuilder:
        if fragment:
            self._prompt_fragments.append(fragment)
        return self

    def add_reprompt_fragment(self, fragment: str) -> ControlResponseBuilder:
        if fragment:
            self._reprompt_fragments.append(fragment)
        return self

    def add_visual_directive(
        self,
        token: str,
        document: dict[str, Any],
        data_source: dict[str, Any],
    ) -> ControlResponseBuilder:
        if self._visual_directive is not None:
            logger.warning(
                "Replacing visual directive '%s' with '%s'; only one is rendered per turn",
                self._visual_directive.token,
                token,
            )
        self._visual_directive = VisualDirective(token, document, data_source)
        return self

    @property
    def prompt_fragments(self) -> list[str]:
        return list(self._prompt_fragments)

    @property
    def reprompt_fragments(self) -> list[str]:
        return list(self._reprompt_fragments)

    @property
    def visual_directive(self) -> VisualDirective | None:
        return self._visual_directive

    def build(self) -> ResponseFragments:
        return ResponseFragments(
            prompt=" ".join(self._prompt_fragments),
            reprompt=" ".join(self._reprompt_fragments),
            visual_directive=self._visual_directive,
        )
