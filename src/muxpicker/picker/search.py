"""Searchable, selectable list shared by every picker screen."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from .fuzzy import fuzzy_match
from .render import ViewportWindow, compute_window
from .selection import Direction, SelectionCursor

T = TypeVar("T")


@dataclass(frozen=True)
class MatchResult(Generic[T]):
    """One filtered entry: the item, where it lives in the full set, and why it matched."""

    item_index: int
    item: T
    score: int
    positions: tuple[int, ...] = ()


class SearchableList(Generic[T]):
    """Full item set + query + selection, kept mutually consistent.

    Results are rebuilt on every change of items or query and the selection
    cursor is reconciled right after, so ``results`` and ``selected_position``
    always agree with each other.
    """

    def __init__(
        self,
        items: Iterable[T] = (),
        key: Callable[[T], str] = str,
        identity: Callable[[T], str] | None = None,
    ) -> None:
        self._key = key
        # Follows the selection across set_items; defaults to the match key.
        self._identity = identity or key
        self._items: tuple[T, ...] = tuple(items)
        self._query = ""
        self._results: tuple[MatchResult[T], ...] = ()
        self.cursor = SelectionCursor()
        self.scroll_offset = 0
        self._refilter()

    @property
    def items(self) -> tuple[T, ...]:
        return self._items

    @property
    def query(self) -> str:
        return self._query

    @property
    def results(self) -> tuple[MatchResult[T], ...]:
        return self._results

    def key_of(self, item: T) -> str:
        return self._key(item)

    def set_items(self, items: Iterable[T]) -> None:
        """Replace the full item set, following the selected item by identity."""
        new_items = tuple(items)
        new_index_by_key: dict[str, int] = {}
        for index, item in enumerate(new_items):
            new_index_by_key.setdefault(self._identity(item), index)
        index_map = {
            old_index: new_index_by_key[self._identity(old_item)]
            for old_index, old_item in enumerate(self._items)
            if self._identity(old_item) in new_index_by_key
        }
        self.cursor.remap(index_map)
        self._items = new_items
        self._refilter()

    def set_query(self, text: str) -> None:
        if text == self._query:
            return
        self._query = text
        self._refilter()

    def _refilter(self) -> None:
        if not self._query:
            self._results = tuple(
                MatchResult(index, item, 0) for index, item in enumerate(self._items)
            )
        else:
            matched: list[MatchResult[T]] = []
            for index, item in enumerate(self._items):
                found = fuzzy_match(self._query, self._key(item))
                if found is None:
                    continue
                matched.append(MatchResult(index, item, found.score, found.positions))
            matched.sort(key=lambda r: (-r.score, self._key(r.item), r.item_index))
            self._results = tuple(matched)
        self.cursor.reconcile(self._results)

    @property
    def selected_position(self) -> int | None:
        return self.cursor.position

    @property
    def selected_result(self) -> MatchResult[T] | None:
        position = self.cursor.position
        if position is None:
            return None
        return self._results[position]

    @property
    def selected_item(self) -> T | None:
        result = self.selected_result
        return result.item if result is not None else None

    def move(self, direction: Direction, page_size: int = 1) -> None:
        self.cursor.move(direction, self._results, page_size)

    def select_position(self, position: int) -> None:
        self.cursor.select_position(position, self._results)

    def select_identity(self, identity: str) -> bool:
        """Select the result whose item has ``identity``; False if it is filtered out."""
        for position, result in enumerate(self._results):
            if self._identity(result.item) == identity:
                self.select_position(position)
                return True
        return False

    def window(self, rows: int) -> ViewportWindow:
        """Visible slice for ``rows`` lines, scrolled from the last offset."""
        return compute_window(
            self.cursor.position, len(self._results), rows, self.scroll_offset
        )

    def scroll_into_view(self, rows: int) -> None:
        self.scroll_offset = self.window(rows).offset
