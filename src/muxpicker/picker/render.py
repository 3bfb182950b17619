"""Viewport pagination and cell-level line rendering.

Everything here is a pure function of its arguments: nothing in this module
touches list or selection state. Output is a grid of :class:`Cell` objects
that the TUI widget turns into styled terminal segments.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from wcwidth import wcwidth

if TYPE_CHECKING:
    from .search import MatchResult

ELLIPSIS = "…"
SELECTED_GUTTER = "> "
PLAIN_GUTTER = "  "


@dataclass(frozen=True)
class ViewportWindow:
    offset: int
    size: int

    @property
    def positions(self) -> range:
        return range(self.offset, self.offset + self.size)

    def contains(self, position: int) -> bool:
        return self.offset <= position < self.offset + self.size


def compute_window(
    selected_position: int | None,
    total_results: int,
    viewport_rows: int,
    previous_offset: int = 0,
) -> ViewportWindow:
    """Visible slice of the results that keeps the selection on screen.

    Scrolls from ``previous_offset`` only as far as needed to bring the
    selected position back into view. The window never reaches past either
    end of the results, and a viewport under one row gets an empty window.
    """
    if viewport_rows < 1 or total_results < 1:
        return ViewportWindow(0, 0)
    size = min(viewport_rows, total_results)
    offset = max(0, min(previous_offset, total_results - size))
    if selected_position is not None:
        selected = max(0, min(selected_position, total_results - 1))
        if selected < offset:
            offset = selected
        elif selected >= offset + size:
            offset = selected - size + 1
    return ViewportWindow(offset, size)


@dataclass(frozen=True)
class Cell:
    """One terminal column. Wide glyphs are followed by a cell with ``char == ""``."""

    char: str = " "
    fg: str | None = None
    bg: str | None = None
    bold: bool = False
    dim: bool = False
    underline: bool = False
    reverse: bool = False


BLANK = Cell()


@dataclass(frozen=True)
class Theme:
    """Colour names understood by rich."""

    match_fg: str = "dark_orange"
    current_fg: str = "green"
    selected_bg: str = "grey27"
    muted_fg: str = "grey58"
    accent_fg: str = "cyan"
    error_fg: str = "red"
    title_fg: str = "magenta"


DEFAULT_THEME = Theme()


def char_width(ch: str) -> int:
    """Terminal columns taken by ``ch``; control characters count as -1."""
    return wcwidth(ch)


def display_width(text: str) -> int:
    return sum(max(0, char_width(ch)) for ch in text)


def _glyphs(text: str, style: Cell) -> list[tuple[str, int, Cell]]:
    out: list[tuple[str, int, Cell]] = []
    for ch in text:
        width = char_width(ch)
        if width < 0:
            ch, width = "?", 1
        out.append((ch, width, style))
    return out


def _fit(glyphs: list[tuple[str, int, Cell]], width: int, marker: Cell) -> list[tuple[str, int, Cell]]:
    if sum(w for _, w, _ in glyphs) <= width:
        return glyphs
    room = width - display_width(ELLIPSIS)
    kept: list[tuple[str, int, Cell]] = []
    used = 0
    for glyph in glyphs:
        if used + glyph[1] > room:
            break
        kept.append(glyph)
        used += glyph[1]
    kept.append((ELLIPSIS, display_width(ELLIPSIS), marker))
    return kept


def _to_cells(glyphs: Iterable[tuple[str, int, Cell]]) -> list[Cell]:
    cells: list[Cell] = []
    for ch, width, style in glyphs:
        if width == 0:
            if cells and cells[-1].char:
                cells[-1] = replace(cells[-1], char=cells[-1].char + ch)
            elif len(cells) >= 2:
                cells[-2] = replace(cells[-2], char=cells[-2].char + ch)
            continue
        cells.append(replace(style, char=ch))
        if width == 2:
            cells.append(replace(style, char=""))
    return cells


def text_cells(text: str, width: int, style: Cell = BLANK, pad: bool = False) -> list[Cell]:
    """Plain styled text fitted to ``width`` columns."""
    if width < 1:
        return []
    cells = _to_cells(_fit(_glyphs(text, style), width, style))
    if pad:
        cells.extend([replace(style, char=" ")] * (width - len(cells)))
    return cells


def render_line(
    item: str,
    match_positions: Sequence[int],
    width: int,
    is_selected: bool = False,
    is_current: bool = False,
    *,
    prefix: str = "",
    suffix: str = "",
    dimmed: bool = False,
    theme: Theme = DEFAULT_THEME,
) -> list[Cell]:
    """Render one list entry as exactly ``width`` cells.

    Characters of ``item`` at ``match_positions`` get the match colour, the
    current item is drawn bold in the current colour and the selected item
    gets a gutter marker plus a background that spans the whole row. The two
    flags compose: an item can be both. ``prefix`` (tree indentation) and
    ``suffix`` (auxiliary fields) are drawn muted around the name. Content
    wider than ``width`` is cut and ends with an ellipsis.
    """
    if width < 1:
        return []

    base = Cell(fg=theme.muted_fg, dim=True) if dimmed else Cell()
    if is_current:
        base = replace(base, fg=theme.current_fg, bold=True)
    match = replace(base, fg=theme.match_fg, bold=True, underline=True)
    muted = Cell(fg=theme.muted_fg)
    gutter = replace(base, fg=theme.accent_fg, bold=True)
    if is_selected:
        base, match, muted, gutter = (
            replace(style, bg=theme.selected_bg) for style in (base, match, muted, gutter)
        )

    highlighted = set(match_positions)
    glyphs = _glyphs(SELECTED_GUTTER if is_selected else PLAIN_GUTTER, gutter)
    if prefix:
        glyphs.extend(_glyphs(prefix, muted))
    for index, ch in enumerate(item):
        glyphs.extend(_glyphs(ch, match if index in highlighted else base))
    if suffix:
        glyphs.extend(_glyphs(" " + suffix, muted))

    cells = _to_cells(_fit(glyphs, width, muted))
    fill = Cell(bg=theme.selected_bg) if is_selected else BLANK
    cells.extend([fill] * (width - len(cells)))
    return cells


@dataclass(frozen=True)
class DisplayItem:
    """How a list entry should look; produced per item kind by each screen."""

    text: str
    suffix: str = ""
    prefix: str = ""
    is_current: bool = False
    dimmed: bool = False


def render_list(
    results: Sequence[MatchResult[Any]],
    selected_position: int | None,
    rows: int,
    width: int,
    to_display: Callable[[Any], DisplayItem],
    previous_offset: int = 0,
    empty_text: str = "No matches",
    theme: Theme = DEFAULT_THEME,
) -> list[list[Cell]]:
    """Paginated lines for any kind of filtered list.

    ``to_display`` maps an item to its :class:`DisplayItem`; the rest of the
    layout (window, highlight, truncation) is shared by every screen.
    """
    if rows < 1 or width < 1:
        return []
    if not results:
        return [text_cells(PLAIN_GUTTER + empty_text, width, Cell(fg=theme.muted_fg), pad=True)]

    window = compute_window(selected_position, len(results), rows, previous_offset)
    lines: list[list[Cell]] = []
    for position in window.positions:
        result = results[position]
        display = to_display(result.item)
        lines.append(
            render_line(
                display.text,
                result.positions,
                width,
                is_selected=position == selected_position,
                is_current=display.is_current,
                prefix=display.prefix,
                suffix=display.suffix,
                dimmed=display.dimmed,
                theme=theme,
            )
        )
    return lines


class Canvas:
    """Bounded grid of cells; anything drawn outside the bounds is dropped."""

    def __init__(self, rows: int, cols: int) -> None:
        self.rows = max(0, rows)
        self.cols = max(0, cols)
        self._grid: list[list[Cell]] = [[BLANK] * self.cols for _ in range(self.rows)]

    def put(self, row: int, col: int, cells: Sequence[Cell]) -> None:
        if not 0 <= row < self.rows:
            return
        line = self._grid[row]
        for offset, cell in enumerate(cells):
            x = col + offset
            if x < 0:
                continue
            if x >= self.cols:
                break
            if cell.char and x + 1 >= self.cols and offset + 1 < len(cells) and cells[offset + 1].char == "":
                # Wide glyph whose right half would fall off the grid.
                cell = replace(cell, char=" ")
            line[x] = cell

    def put_text(self, row: int, col: int, text: str, style: Cell = BLANK) -> None:
        self.put(row, col, text_cells(text, self.cols - max(col, 0), style))

    def put_lines(self, row: int, col: int, lines: Iterable[Sequence[Cell]]) -> None:
        for offset, cells in enumerate(lines):
            self.put(row + offset, col, cells)

    def row(self, y: int) -> list[Cell]:
        return list(self._grid[y])

    def lines(self) -> list[str]:
        """Plain text of every row, for logging and tests."""
        return ["".join(cell.char for cell in line) for line in self._grid]
