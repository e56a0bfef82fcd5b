"""Helpers for invoking user callbacks that may be sync or async."""

import asyncio
from typing import Any, Callable


async def invoke_callback(callback: Callable[..., Any], *args: Any) -> Any:
    """Invoke a callback, awaiting the result if it is a coroutine.

    Args:
        callback: The callback to invoke
        *args: Arguments to pass to the callback

    Returns:
        The callback's (awaited) return value
    """
    result = callback(*args)
    if asyncio.iscoroutine(result):
        return await result
    return result


async def evaluate_prop(prop: Any, *args: Any) -> Any:
    """Evaluate a literal-or-callable configuration property.

    Callables are invoked with ``args`` (and awaited when async); anything
    else is returned unchanged.
    """
    if callable(prop):
        return await invoke_callback(prop, *args)
    return prop


async def evaluate_flag(prop: bool | Callable[..., Any], *args: Any) -> bool:
    """Evaluate a boolean-or-predicate configuration property."""
    return bool(await evaluate_prop(prop, *args))
