"""Default value formatting for prompts."""

from typing import Any, Sequence


def natural_join(items: Sequence[str], conjunction: str = "and") -> str:
    """Join items as a spoken list: ``"a, b and c"``."""
    items = [str(item) for item in items]
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    return f"{', '.join(items[:-1])} {conjunction} {items[-1]}"


def default_value_renderer(value_ids: Sequence[str], control_input: Any = None) -> str:
    """Render value ids joined with commas and a final "and"."""
    return natural_join(value_ids)
