"""Pagination over a control's choice list."""

from __future__ import annotations

from typing import Sequence, TypeVar

from .state import TurnState

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 3


class PaginationTracker:
    """Cursor over a choice list that produces bounded windows.

    The cursor lives in ``TurnState.page_index`` so it survives between
    turns. The tracker never advances on its own.

    Args:
        state: Turn state holding the cursor
        page_size: Maximum number of choices per page
    """

    def __init__(self, state: TurnState, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self._state = state
        self._page_size = page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def page_index(self) -> int:
        if self._state.page_index is None:
            self._state.page_index = 0
        return self._state.page_index

    def active_page(self, all_choices: Sequence[T]) -> list[T]:
        """Choices on the current page; an out-of-range page is empty."""
        start = self.page_index * self._page_size
        return list(all_choices[start:start + self._page_size])

    def reset(self) -> None:
        self._state.page_index = 0
