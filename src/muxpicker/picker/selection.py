"""Selection cursor that survives filtering and list refreshes.

The cursor remembers *which item* is highlighted (its index into the full,
unfiltered item set) rather than where it was drawn. Every time the filtered
results change shape, :meth:`SelectionCursor.reconcile` re-validates that
index against the new results.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Protocol


class Direction(str, Enum):
    """Cursor movements, all clamped at the ends of the list."""

    UP = "up"
    DOWN = "down"
    FIRST = "first"
    LAST = "last"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"


class HasItemIndex(Protocol):
    @property
    def item_index(self) -> int: ...


class SelectionCursor:
    """Highlighted item, tracked by full-set index."""

    def __init__(self) -> None:
        self.item_index: int | None = None
        # Filtered position the item occupied when last validated.
        self._position: int | None = None

    @property
    def position(self) -> int | None:
        """Filtered position of the selected item, or None for no selection."""
        return self._position

    def clear(self) -> None:
        self.item_index = None
        self._position = None

    def select_position(self, position: int, results: Sequence[HasItemIndex]) -> None:
        """Select the result at ``position``, clamped into range."""
        if not results:
            self.clear()
            return
        position = max(0, min(position, len(results) - 1))
        self._position = position
        self.item_index = results[position].item_index

    def move(
        self,
        direction: Direction,
        results: Sequence[HasItemIndex],
        page_size: int = 1,
    ) -> None:
        """Shift the cursor; no-op for empty results."""
        if not results:
            self.clear()
            return
        current = self._position if self._position is not None else 0
        step = max(1, page_size)
        if direction is Direction.UP:
            target = current - 1
        elif direction is Direction.DOWN:
            target = current + 1
        elif direction is Direction.PAGE_UP:
            target = current - step
        elif direction is Direction.PAGE_DOWN:
            target = current + step
        elif direction is Direction.FIRST:
            target = 0
        else:
            target = len(results) - 1
        self.select_position(target, results)

    def reconcile(self, results: Sequence[HasItemIndex]) -> None:
        """Re-validate the cursor after the filtered results changed.

        Keeps the selected item if it is still listed, otherwise falls back to
        whatever now sits at the old position (clamped to the last result).
        """
        if not results:
            self.clear()
            return
        if self.item_index is not None:
            for position, result in enumerate(results):
                if result.item_index == self.item_index:
                    self._position = position
                    return
        fallback = self._position if self._position is not None else 0
        self.select_position(fallback, results)

    def remap(self, index_map: dict[int, int]) -> None:
        """Follow the selected item into a replaced item set.

        ``index_map`` maps old full-set indexes to new ones; a selected item
        missing from the map is dropped but its position is kept so that
        :meth:`reconcile` can pick its neighbour.
        """
        if self.item_index is None:
            return
        self.item_index = index_map.get(self.item_index)
