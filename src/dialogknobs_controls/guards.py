"""Guard results and custom handler plumbing for the dispatch engine.

A guard inspects the incoming turn and either selects the handler that will
run (``Matched``) or declines (``Unmatched``). Deciding *whether* and *which*
happens in one pass, so the two can never disagree. Declining is ordinary
data, never an exception.

Example:
    ```python
    async def guard(control_input):
        reason = first_failed_check(
            ("is yes", is_bare_yes(control_input)),
            ("confirm pending", state.last_initiative is not None),
        )
        if reason is not None:
            return Unmatched("confirmation_affirmed", reason)
        return Matched(handle_affirmed, "confirmation_affirmed")
    ```
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Sequence, Union

from .callbacks import invoke_callback
from .function_resolver import resolve_function

if TYPE_CHECKING:
    from .input import ControlInput
    from .results import ControlResultBuilder

logger = logging.getLogger(__name__)

# Handler(control_input, result_builder) -> None or awaitable
Handler = Callable[["ControlInput", "ControlResultBuilder"], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class Matched:
    """The guard matched and committed to ``handler``."""

    handler: Handler
    name: str

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Unmatched:
    """The guard declined.

    Attributes:
        guard: Name of the guard that declined
        reason: First precondition that failed
    """

    guard: str
    reason: str

    def __bool__(self) -> bool:
        return False


GuardResult = Union[Matched, Unmatched]


def first_failed_check(*checks: tuple[str, bool]) -> str | None:
    """Return the label of the first false check, or ``None`` if all pass."""
    for label, passed in checks:
        if not passed:
            return label
    return None


@dataclass(frozen=True)
class CustomHandler:
    """A pluggable guard/handler pair evaluated before the built-in guards.

    Attributes:
        can_handle: Function(control_input) -> bool or awaitable
        handle: Function(control_input, result_builder) -> None or awaitable
        name: Label used in logs
    """

    can_handle: Callable[..., Any]
    handle: Callable[..., Any]
    name: str = "custom"

    @classmethod
    def from_config(cls, config: CustomHandler | dict[str, Any]) -> CustomHandler:
        """Build from a mapping whose callables may be ``"module:function"`` strings.

        Example config:
            ```yaml
            custom_handlers:
              - name: help
                can_handle: "myapp.handlers:is_help"
                handle: "myapp.handlers:handle_help"
            ```
        """
        if isinstance(config, CustomHandler):
            return config
        can_handle = config["can_handle"]
        handle = config["handle"]
        return cls(
            can_handle=resolve_function(can_handle) if isinstance(can_handle, str) else can_handle,
            handle=resolve_function(handle) if isinstance(handle, str) else handle,
            name=config.get("name", "custom"),
        )


async def evaluate_custom_handlers(
    handlers: Sequence[CustomHandler], control_input: ControlInput
) -> GuardResult:
    """Return the first custom handler whose ``can_handle`` is true."""
    for custom in handlers:
        if await invoke_callback(custom.can_handle, control_input):
            return Matched(custom.handle, custom.name)
    return Unmatched("custom", "no custom handler matched")


def log_if_both_matched(custom: GuardResult, builtin: GuardResult) -> None:
    """Warn when a custom handler and a built-in guard both claim a turn.

    The custom handler wins because it is evaluated first. The warning is
    advisory only.
    """
    if isinstance(custom, Matched) and isinstance(builtin, Matched):
        logger.warning(
            "Custom handler '%s' and built-in guard '%s' both matched; "
            "using custom handler",
            custom.name,
            builtin.name,
        )
