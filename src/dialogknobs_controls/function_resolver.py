"""Resolve ``"module.path:function"`` references to callables.

Configuration files cannot hold Python functions, so validators, choice
sources, predicates and custom handlers are referenced by import path.
"""

import importlib
import logging
from typing import Any, Callable, Sequence

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _split_reference(func_ref: str) -> tuple[str, str]:
    if ":" in func_ref:
        module_path, _, func_name = func_ref.partition(":")
    elif "." in func_ref:
        module_path, _, func_name = func_ref.rpartition(".")
    else:
        raise ConfigurationError(
            f"Invalid function reference: '{func_ref}'. "
            f"Expected 'module.path:function_name' or 'module.path.function_name'",
            context={"reference": func_ref},
        )
    if not module_path or not func_name:
        raise ConfigurationError(
            f"Invalid function reference: '{func_ref}'. "
            f"Both module path and function name are required",
            context={"reference": func_ref},
        )
    return module_path, func_name


def resolve_function(func_ref: str) -> Callable[..., Any]:
    """Resolve a function reference string to a callable.

    Args:
        func_ref: ``"module.path:function_name"`` (preferred) or
            ``"module.path.function_name"``

    Returns:
        The resolved callable

    Raises:
        ConfigurationError: If the reference is malformed, the module cannot
            be imported, or the attribute is missing or not callable

    Example:
        ```python
        validator = resolve_function("myapp.validators:only_two_toppings")
        ```
    """
    if not func_ref or not func_ref.strip():
        raise ConfigurationError("Empty function reference")

    func_ref = func_ref.strip()
    module_path, func_name = _split_reference(func_ref)

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise ConfigurationError(
            f"Cannot import module '{module_path}' from reference '{func_ref}': {e}",
            context={"reference": func_ref, "module": module_path},
        ) from e

    func = getattr(module, func_name, None)
    if func is None:
        raise ConfigurationError(
            f"Function '{func_name}' not found in module '{module_path}'",
            context={"reference": func_ref, "module": module_path},
        )
    if not callable(func):
        raise ConfigurationError(
            f"'{func_name}' in module '{module_path}' is not callable "
            f"(got {type(func).__name__})",
            context={"reference": func_ref},
        )

    logger.debug("Resolved function reference '%s'", func_ref)
    return func


def resolve_callable(ref: Any) -> Any:
    """Resolve a string reference; pass callables and literals through."""
    if isinstance(ref, str):
        return resolve_function(ref)
    return ref


def resolve_callables(refs: Sequence[Any]) -> list[Callable[..., Any]]:
    """Resolve each entry of a list of references or callables."""
    resolved = []
    for ref in refs:
        func = resolve_callable(ref)
        if not callable(func):
            raise ConfigurationError(
                f"Expected a callable or function reference, got {type(ref).__name__}",
                context={"value": repr(ref)},
            )
        resolved.append(func)
    return resolved
