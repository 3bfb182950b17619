"""Tests for SelectionCursor."""

from dataclasses import dataclass

import pytest

from muxpicker.picker.selection import Direction, SelectionCursor


@dataclass(frozen=True)
class Row:
    item_index: int


def rows(*indexes):
    return [Row(i) for i in indexes]


@pytest.fixture
def cursor():
    return SelectionCursor()


class TestMove:
    """Tests for cursor movement."""

    def test_down_and_up(self, cursor):
        """Should step through the results."""
        results = rows(0, 1, 2)
        cursor.select_position(0, results)

        cursor.move(Direction.DOWN, results)
        assert cursor.position == 1

        cursor.move(Direction.UP, results)
        assert cursor.position == 0

    def test_no_wrap_at_ends(self, cursor):
        """Should clamp at both ends instead of wrapping."""
        results = rows(0, 1, 2)
        cursor.select_position(0, results)

        cursor.move(Direction.UP, results)
        assert cursor.position == 0

        cursor.move(Direction.LAST, results)
        cursor.move(Direction.DOWN, results)
        assert cursor.position == 2

    def test_first_and_last(self, cursor):
        """Should jump to either end."""
        results = rows(5, 6, 7, 8)

        cursor.move(Direction.LAST, results)
        assert cursor.item_index == 8

        cursor.move(Direction.FIRST, results)
        assert cursor.item_index == 5

    def test_move_on_empty(self, cursor):
        """Should leave no selection when there are no results."""
        cursor.move(Direction.DOWN, [])

        assert cursor.position is None
        assert cursor.item_index is None

    def test_select_position_clamped(self, cursor):
        """Should clamp positions past either end."""
        results = rows(0, 1)

        cursor.select_position(10, results)
        assert cursor.position == 1

        cursor.select_position(-3, results)
        assert cursor.position == 0


class TestReconcile:
    """Tests for re-validating the cursor."""

    def test_keeps_item_at_new_position(self, cursor):
        """Should follow the item when it moved."""
        cursor.select_position(1, rows(0, 1, 2))

        cursor.reconcile(rows(2, 1))

        assert cursor.item_index == 1
        assert cursor.position == 1

    def test_falls_back_to_old_position(self, cursor):
        """Should pick what now sits at the old position."""
        cursor.select_position(1, rows(0, 1, 2))

        cursor.reconcile(rows(0, 2))

        assert cursor.position == 1
        assert cursor.item_index == 2

    def test_clamps_fallback(self, cursor):
        """Should clamp to the last result."""
        cursor.select_position(2, rows(0, 1, 2))

        cursor.reconcile(rows(0))

        assert cursor.position == 0
        assert cursor.item_index == 0

    def test_empty_results(self, cursor):
        """Should clear the selection."""
        cursor.select_position(0, rows(0))

        cursor.reconcile([])

        assert cursor.position is None

    def test_first_result_when_unset(self, cursor):
        """Should select the first result when nothing was selected."""
        cursor.reconcile(rows(4, 5))

        assert cursor.item_index == 4


class TestRemap:
    """Tests for following an item into a new item set."""

    def test_remaps_index(self, cursor):
        """Should translate the item index."""
        cursor.select_position(0, rows(3))

        cursor.remap({3: 0})

        assert cursor.item_index == 0

    def test_dropped_item(self, cursor):
        """Should forget the item but keep its position."""
        cursor.select_position(1, rows(0, 1))

        cursor.remap({0: 0})

        assert cursor.item_index is None
        assert cursor.position == 1
