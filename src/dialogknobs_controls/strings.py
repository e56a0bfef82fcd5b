"""Built-in vocabulary IDs shared by controls and the interaction model.

The ``builtin_*`` IDs are associated with default interaction-model data.
Any other ID requires a full definition of its synonyms in the grammar.
"""

from enum import Enum


class Action:
    """Action slot-value IDs."""

    SET = "builtin_set"
    CHANGE = "builtin_change"
    SELECT = "builtin_select"
    ADD = "builtin_add"
    REMOVE = "builtin_remove"
    DELETE = "builtin_delete"
    IGNORE = "builtin_ignore"


class Target:
    """Target slot-value IDs."""

    IT = "builtin_it"
    CHOICE = "builtin_choice"


class Feedback:
    """Feedback slot-value IDs."""

    AFFIRM = "builtin_affirm"
    DISAFFIRM = "builtin_disaffirm"


class ElicitationMode(str, Enum):
    """Which question is currently outstanding."""

    SET = "Set"
    CHANGE = "Change"


# Synonyms contributed to the shared slot types by list controls.
CHOICE_TARGET_SYNONYMS: tuple[str, ...] = ("choice", "option", "selection", "item")
SELECT_ACTION_SYNONYMS: tuple[str, ...] = ("select", "choose", "pick", "add")
