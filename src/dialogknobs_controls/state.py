"""Turn state persisted by a control between conversation turns.

A ``TurnState`` is owned by exactly one control instance. The calling layer
persists it between turns with ``to_dict()`` / ``from_dict()``; only the
owning control mutates it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .strings import ElicitationMode


@dataclass
class ValueEntry:
    """A single collected value.

    Attributes:
        id: Catalog id (or free-form text when ``matched_known_catalog`` is
            false). Never empty.
        confirmed: Whether the user explicitly confirmed this value
        is_valid: Validation outcome, ``None`` until validated
        matched_known_catalog: Whether recognition resolved the utterance to
            a known catalog entry rather than arbitrary text
    """

    id: str
    confirmed: bool = False
    is_valid: bool | None = None
    matched_known_catalog: bool = True

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ValueEntry.id must be a non-empty string")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "confirmed": self.confirmed,
            "is_valid": self.is_valid,
            "matched_known_catalog": self.matched_known_catalog,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValueEntry:
        return cls(
            id=data["id"],
            confirmed=data.get("confirmed", False),
            is_valid=data.get("is_valid"),
            matched_known_catalog=data.get("matched_known_catalog", True),
        )


@dataclass
class LastInitiative:
    """The most recent initiative act and the values it referred to.

    Used to interpret a bare "yes"/"no" on the following turn.
    """

    act_kind: str
    target_value_ids: list[str] | str

    @property
    def value_ids(self) -> list[str]:
        """Referenced ids, normalized to a list."""
        if isinstance(self.target_value_ids, str):
            return [self.target_value_ids]
        return list(self.target_value_ids)

    def to_dict(self) -> dict[str, Any]:
        return {
            "act_kind": self.act_kind,
            "target_value_ids": self.target_value_ids,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LastInitiative:
        return cls(
            act_kind=data["act_kind"],
            target_value_ids=data.get("target_value_ids", []),
        )


@dataclass
class TurnState:
    """State tracked by a multi-value list control.

    Attributes:
        values: Collected values; ``None`` means no value yet
        previous_values: Snapshot of ids taken while a change is in flight
        elicitation_mode: Which question is currently outstanding
        page_index: Cursor into the choice list. Persists across turns and
            is only reset explicitly.
        last_initiative: Most recent initiative act (for yes/no replies)
        active_initiative_act_kind: Kind of the most recently emitted
            initiative act
    """

    values: list[ValueEntry] | None = None
    previous_values: list[str] | None = None
    elicitation_mode: ElicitationMode | None = None
    page_index: int = 0
    last_initiative: LastInitiative | None = None
    active_initiative_act_kind: str | None = None

    @property
    def has_values(self) -> bool:
        return bool(self.values)

    def value_ids(self) -> list[str]:
        return [entry.id for entry in self.values or []]

    def unconfirmed_ids(self) -> list[str]:
        return [entry.id for entry in self.values or [] if not entry.confirmed]

    def find(self, value_id: str) -> ValueEntry | None:
        for entry in self.values or []:
            if entry.id == value_id:
                return entry
        return None

    def add_value(self, entry: ValueEntry) -> None:
        if self.values is None:
            self.values = [entry]
        else:
            self.values.append(entry)

    def remove_values(self, value_ids: list[str]) -> list[str]:
        """Remove entries by id; returns the ids actually removed.

        Removing the last entry restores the "no value" sentinel.
        """
        if self.values is None:
            return []
        targets = set(value_ids)
        removed = [entry.id for entry in self.values if entry.id in targets]
        self.values = [entry for entry in self.values if entry.id not in targets]
        if not self.values:
            self.values = None
        return removed

    def discard_unconfirmed(self, value_ids: list[str]) -> list[str]:
        """Remove the unconfirmed entries among ``value_ids``.

        Confirmed entries with the same id are kept.
        """
        if self.values is None:
            return []
        targets = set(value_ids)
        removed = [e.id for e in self.values if e.id in targets and not e.confirmed]
        self.values = [
            e for e in self.values if not (e.id in targets and not e.confirmed)
        ]
        if not self.values:
            self.values = None
        return removed

    def stringify_for_diagram(self) -> str:
        text = ", ".join(self.value_ids()) if self.values else "<none>"
        if self.elicitation_mode is not None:
            text += f"[eliciting, {self.elicitation_mode.value}]"
        return text

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-safe dictionary for session persistence."""
        return {
            "values": (
                [entry.to_dict() for entry in self.values]
                if self.values is not None
                else None
            ),
            "previous_values": self.previous_values,
            "elicitation_mode": (
                self.elicitation_mode.value
                if self.elicitation_mode is not None
                else None
            ),
            "page_index": self.page_index,
            "last_initiative": (
                self.last_initiative.to_dict()
                if self.last_initiative is not None
                else None
            ),
            "active_initiative_act_kind": self.active_initiative_act_kind,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> TurnState:
        """Restore state from ``to_dict()`` output; ``None`` gives empty state."""
        if not data:
            return cls()
        raw_values = data.get("values")
        raw_mode = data.get("elicitation_mode")
        raw_initiative = data.get("last_initiative")
        return cls(
            values=(
                [ValueEntry.from_dict(v) for v in raw_values]
                if raw_values is not None
                else None
            ),
            previous_values=data.get("previous_values"),
            elicitation_mode=(
                ElicitationMode(raw_mode) if raw_mode is not None else None
            ),
            page_index=data.get("page_index", 0),
            last_initiative=(
                LastInitiative.from_dict(raw_initiative)
                if raw_initiative is not None
                else None
            ),
            active_initiative_act_kind=data.get("active_initiative_act_kind"),
        )


__all__ = ["ValueEntry", "LastInitiative", "TurnState"]
