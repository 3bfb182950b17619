"""Screen controller: the picker's state machine.

The controller owns every piece of picker state. The TUI feeds it one event
at a time through :meth:`ScreenController.handle` and asks for a fresh grid
with :meth:`ScreenController.render`; rendering never changes state.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any

from ..config import MAX_SESSION_NAME_BYTES, PickerOptions
from ..logging_config import get_logger
from ..session.models import DeadSession, LayoutInfo, SessionInfo, Snapshot
from .duration import format_age
from .editor import LineEditor
from .events import (
    Event,
    HostRequests,
    KeyPressed,
    ModeChanged,
    MouseClicked,
    MouseScrolled,
    Resized,
    SnapshotReceived,
)
from .render import (
    BLANK,
    DEFAULT_THEME,
    Canvas,
    Cell,
    DisplayItem,
    Theme,
    display_width,
    render_line,
    render_list,
    text_cells,
)
from .screens import (
    TAB_ORDER,
    NewSessionScreen,
    NewSessionStage,
    ResurrectScreen,
    RowKind,
    Screen,
    ScreenKind,
    SessionListScreen,
    SessionNotFoundScreen,
    SessionRow,
    WelcomeScreen,
)
from .search import SearchableList
from .selection import Direction

logger = get_logger(__name__)

# Grid layout, in rows from the top / bottom of the viewport
TABS_ROW = 0
PROMPT_ROW = 2
DETAIL_ROW = 3
LIST_TOP = 4
FOOTER_ROWS = 2

NAVIGATION_KEYS = {
    "up": Direction.UP,
    "ctrl+p": Direction.UP,
    "down": Direction.DOWN,
    "ctrl+n": Direction.DOWN,
    "ctrl+k": Direction.UP,
    "ctrl+j": Direction.DOWN,
    "pageup": Direction.PAGE_UP,
    "pagedown": Direction.PAGE_DOWN,
    "home": Direction.FIRST,
    "end": Direction.LAST,
}

EXPAND_KEYS = ("right", "ctrl+l", "ctrl+full_stop")
SHRINK_KEYS = ("left", "ctrl+h", "ctrl+comma")

TAB_TITLES = {
    ScreenKind.SESSION_LIST: "Sessions",
    ScreenKind.NEW_SESSION: "New session",
    ScreenKind.RESURRECT: "Resurrect",
}

CONTROLS = {
    ScreenKind.WELCOME: "s sessions · n new session · r resurrect · Esc quit",
    ScreenKind.SESSION_LIST: (
        "Enter switch · →/← expand/shrink · Ctrl+t expand all · Del kill · "
        "Ctrl+d kill others · Ctrl+x detach others · Ctrl+r rename · "
        "Ctrl+o resurrect · Tab next · Esc back"
    ),
    ScreenKind.NEW_SESSION: "Enter confirm · Tab next · Esc back",
    ScreenKind.RESURRECT: "Enter resurrect · Del delete · Ctrl+d delete all · Tab next · Esc back",
    ScreenKind.SESSION_NOT_FOUND: "Press any key to continue",
}

BANNER = (
    "┌┬┐┬ ┬─┐ ┬┌─┐┬┌─┐┬┌─┌─┐┬─┐",
    "││││ │┌┴┬┘├─┘││  ├┴┐├┤ ├┬┘",
    "┴ ┴└─┘┴ └─┴  ┴└─┘┴ ┴└─┘┴└─",
)


def validate_session_name(name: str) -> str | None:
    """Error message for a name tmux cannot use, or None."""
    if len(name.encode("utf-8")) >= MAX_SESSION_NAME_BYTES:
        return f"Session name must be shorter than {MAX_SESSION_NAME_BYTES} bytes"
    if "/" in name:
        return "Session name cannot contain '/'"
    if "." in name or ":" in name:
        return "Session name cannot contain '.' or ':'"
    return None


def session_display(session: SessionInfo) -> DisplayItem:
    suffix = f"[{session.window_count} window(s)]"
    if session.is_current:
        suffix += " (current)"
    elif session.attached_clients:
        suffix += " (attached)"
    return DisplayItem(
        session.name,
        suffix=suffix,
        is_current=session.is_current,
        dimmed=session.is_forbidden,
    )


def _marker(expanded: bool) -> str:
    return "▾ " if expanded else "▸ "


def session_row_display(row: SessionRow, expanded: bool = False) -> DisplayItem:
    if row.kind is RowKind.SESSION:
        display = session_display(row.session)
        if row.session.windows:
            display = replace(display, prefix=_marker(expanded))
        return display
    if row.kind is RowKind.WINDOW:
        prefix = "  " + (_marker(expanded) if row.window.panes else "  ")
        suffix = f"window {row.window.index}"
        if row.window.is_active:
            suffix += " (active)"
        return DisplayItem(row.name, prefix=prefix, suffix=suffix)
    suffix = f"pane {row.pane.index}"
    if row.pane.is_active:
        suffix += " (active)"
    return DisplayItem(row.name, prefix="      ", suffix=suffix)


def layout_display(layout: LayoutInfo) -> DisplayItem:
    return DisplayItem(layout.name, suffix=str(layout.path))


class ScreenController:
    """Routes events to the active screen and draws it."""

    def __init__(
        self,
        host: HostRequests,
        options: PickerOptions | None = None,
        snapshot: Snapshot | None = None,
        clock: Callable[[], datetime] = datetime.now,
        theme: Theme = DEFAULT_THEME,
    ) -> None:
        self.host = host
        self.options = options or PickerOptions()
        self.snapshot = snapshot or Snapshot()
        self.clock = clock
        self.theme = theme
        self.rows = 24
        self.cols = 80
        self.error: str | None = None
        self.start_kind = (
            ScreenKind.WELCOME if self.options.welcome_screen else ScreenKind.SESSION_LIST
        )
        self._history: list[ScreenKind] = []
        current = self.snapshot.current_session
        self._attached_name: str | None = current.name if current else None
        self.screen: Screen = self._build(self.start_kind)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    @property
    def kind(self) -> ScreenKind:
        return self.screen.kind

    def _build(self, kind: ScreenKind, missing_name: str = "") -> Screen:
        if kind is ScreenKind.SESSION_LIST:
            return SessionListScreen.from_snapshot(
                self.snapshot, hide_current=self.options.welcome_screen
            )
        if kind is ScreenKind.NEW_SESSION:
            return NewSessionScreen.from_snapshot(self.snapshot)
        if kind is ScreenKind.RESURRECT:
            return ResurrectScreen.from_snapshot(self.snapshot)
        if kind is ScreenKind.SESSION_NOT_FOUND:
            return SessionNotFoundScreen(missing_name)
        return WelcomeScreen()

    def go_to(self, kind: ScreenKind, remember: bool = True, missing_name: str = "") -> None:
        """Replace the active screen with a fresh ``kind`` screen.

        With ``remember`` the screen being left is pushed on the Escape
        history; returning to a screen already on the history unwinds it
        instead, so the history never holds a cycle.
        """
        if remember and kind is not self.kind:
            if kind in self._history:
                del self._history[self._history.index(kind) :]
            else:
                self._history.append(self.kind)
        logger.debug(f"Screen {self.kind.value} -> {kind.value}")
        self.screen = self._build(kind, missing_name)

    def go_back(self) -> None:
        """Escape: previous screen, else Welcome, else leave the picker."""
        if self._history:
            self.go_to(self._history.pop(), remember=False)
        elif self.kind is not ScreenKind.WELCOME and self.kind is not self.start_kind:
            self.go_to(ScreenKind.WELCOME, remember=False)
        else:
            self.quit()

    def cycle(self, step: int) -> None:
        """Tab / Shift+Tab between the list screens."""
        if self.kind in TAB_ORDER:
            index = (TAB_ORDER.index(self.kind) + step) % len(TAB_ORDER)
        else:
            index = 0 if step > 0 else len(TAB_ORDER) - 1
        self.go_to(TAB_ORDER[index])

    def quit(self) -> None:
        logger.info("Leaving picker")
        self.host.quit()

    def show_error(self, message: str) -> None:
        logger.debug(f"Error shown: {message}")
        self.error = message

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------

    def handle(self, event: Event) -> bool:
        """Process one event to completion. Returns whether to redraw."""
        if isinstance(event, SnapshotReceived):
            self._apply_snapshot(event.snapshot)
            should_render = True
        elif isinstance(event, ModeChanged):
            should_render = True
        elif isinstance(event, Resized):
            self.rows, self.cols = max(0, event.rows), max(0, event.cols)
            should_render = True
        elif isinstance(event, KeyPressed):
            should_render = self._handle_key(event)
        elif isinstance(event, MouseClicked):
            should_render = self._handle_click(event)
        elif isinstance(event, MouseScrolled):
            should_render = self._handle_scroll(event)
        else:
            should_render = False
        self._sync_scroll()
        return should_render

    def _apply_snapshot(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot
        attached = self._attached_name
        current = snapshot.current_session
        if current is not None:
            self._attached_name = current.name
        if (
            isinstance(self.screen, SessionListScreen)
            and attached is not None
            and not snapshot.has_session(attached)
        ):
            logger.warning(f"Attached session '{attached}' disappeared")
            self._attached_name = None
            self.go_to(ScreenKind.SESSION_NOT_FOUND, missing_name=attached)
            return
        self.screen.apply_snapshot(snapshot)

    def list_rows(self, rows: int | None = None) -> int:
        rows = self.rows if rows is None else rows
        return max(0, rows - LIST_TOP - FOOTER_ROWS)

    def _active_list(self) -> SearchableList[Any] | None:
        screen = self.screen
        if isinstance(screen, SessionListScreen):
            return screen.sessions
        if isinstance(screen, ResurrectScreen):
            return screen.dead
        if isinstance(screen, NewSessionScreen) and screen.stage is NewSessionStage.SEARCHING_LAYOUT:
            return screen.layouts
        return None

    def _sync_scroll(self) -> None:
        engine = self._active_list()
        if engine is not None:
            engine.scroll_into_view(self.list_rows())

    def _navigate(self, engine: SearchableList[Any], key: str) -> bool:
        direction = NAVIGATION_KEYS.get(key)
        if direction is None:
            return False
        engine.move(direction, page_size=self.list_rows())
        return True

    def _handle_key(self, event: KeyPressed) -> bool:
        if self.error is not None:
            self.error = None
            return True
        screen = self.screen
        if isinstance(screen, SessionNotFoundScreen):
            self._history.clear()
            self.go_to(ScreenKind.WELCOME, remember=False)
            return True
        if isinstance(screen, WelcomeScreen):
            return self._welcome_key(event)
        if event.key == "tab":
            self.cycle(1)
            return True
        if event.key == "shift+tab":
            self.cycle(-1)
            return True
        if isinstance(screen, SessionListScreen):
            return self._session_list_key(screen, event)
        if isinstance(screen, NewSessionScreen):
            return self._new_session_key(screen, event)
        return self._resurrect_key(screen, event)

    def _welcome_key(self, event: KeyPressed) -> bool:
        if event.key in ("s", "enter"):
            self.go_to(ScreenKind.SESSION_LIST)
        elif event.key == "n":
            self.go_to(ScreenKind.NEW_SESSION)
        elif event.key == "r":
            self.go_to(ScreenKind.RESURRECT)
        elif event.key in ("escape", "q", "ctrl+c"):
            self.quit()
            return False
        else:
            return False
        return True

    def _edit_query(self, editor: LineEditor, event: KeyPressed, apply: Callable[[], None]) -> bool:
        before = editor.text
        if not editor.handle_key(event.key, event.character):
            return False
        if editor.text != before:
            apply()
        return True

    def _clear_or_quit(self, editor: LineEditor, apply: Callable[[], None]) -> None:
        if editor.text:
            editor.clear()
            apply()
        else:
            self.quit()

    # Session list -------------------------------------------------------

    def _session_list_key(self, screen: SessionListScreen, event: KeyPressed) -> bool:
        key = event.key
        if screen.confirm_kill_all:
            if key == "y":
                others = self._other_session_names()
                logger.info(f"Killing {len(others)} other session(s)")
                for name in others:
                    self.host.kill_session(name)
                screen.confirm_kill_all = False
            elif key in ("n", "escape", "ctrl+c"):
                screen.confirm_kill_all = False
            return True
        if screen.renaming is not None:
            return self._rename_key(screen, screen.renaming, event)

        if key == "enter":
            self.activate_selected()
        elif key == "escape":
            self.go_back()
        elif key == "ctrl+c":
            self._clear_or_quit(screen.query, screen.set_query)
        elif key == "delete":
            selected = screen.sessions.selected_item
            if selected is None:
                self.show_error("Must select session before killing it.")
            else:
                logger.info(f"Killing session '{selected.session.name}'")
                self.host.kill_session(selected.session.name)
        elif key == "ctrl+d":
            if self._other_session_names():
                screen.confirm_kill_all = True
            else:
                self.show_error("No other sessions to kill. Quit to kill the current one.")
        elif key == "ctrl+r":
            screen.renaming = LineEditor()
        elif key == "ctrl+o":
            self.go_to(ScreenKind.RESURRECT)
        elif key == "ctrl+t":
            screen.toggle_expansion()
        elif key in EXPAND_KEYS:
            screen.expand()
        elif key in SHRINK_KEYS:
            screen.shrink()
        elif key == "ctrl+x":
            logger.info("Detaching other clients")
            self.host.detach_other_clients()
        elif key == "ctrl+k" and screen.query.text:
            return self._edit_query(screen.query, event, screen.set_query)
        elif self._navigate(screen.sessions, key):
            pass
        else:
            return self._edit_query(screen.query, event, screen.set_query)
        return True

    def _other_session_names(self) -> list[str]:
        return [s.name for s in self.snapshot.sessions if not s.is_current and not s.is_forbidden]

    def _rename_key(self, screen: SessionListScreen, editor: LineEditor, event: KeyPressed) -> bool:
        key = event.key
        if key in ("escape", "ctrl+c") or (key == "backspace" and not editor.text):
            screen.renaming = None
        elif key == "enter":
            self._submit_rename(screen, editor.text)
        else:
            return editor.handle_key(key, event.character)
        return True

    def _submit_rename(self, screen: SessionListScreen, new_name: str) -> None:
        if not new_name:
            self.show_error("New name must not be empty.")
            return
        screen.renaming = None
        if new_name == self._attached_name:
            return
        if self.snapshot.has_session(new_name):
            self.show_error("A session by this name already exists.")
        elif self.snapshot.has_dead_session(new_name):
            self.show_error("A resurrectable session by this name already exists.")
        elif (problem := validate_session_name(new_name)) is not None:
            self.show_error(problem)
        else:
            logger.info(f"Renaming current session to '{new_name}'")
            self._attached_name = new_name
            self.host.rename_session(new_name)

    def activate_selected(self) -> None:
        """Enter on the session list: switch to the highlighted session, window or pane."""
        screen = self.screen
        if not isinstance(screen, SessionListScreen):
            return
        selected = screen.sessions.selected_item
        if selected is None:
            return
        name = selected.session.name
        if not self.snapshot.has_session(name):
            self.go_to(ScreenKind.SESSION_NOT_FOUND, missing_name=name)
            return
        if selected.kind is RowKind.SESSION:
            if selected.session.is_current:
                self.show_error("Already attached to this session.")
                return
            logger.info(f"Switching to session '{name}'")
            self.host.switch_session(name)
        else:
            window_index = selected.window.index
            pane_id = selected.pane.pane_id if selected.pane is not None else None
            logger.info(f"Switching to session '{name}' window {window_index} pane {pane_id}")
            self.host.switch_session(name, window_index=window_index, pane_id=pane_id)
        self.quit()

    # New session --------------------------------------------------------

    def _new_session_key(self, screen: NewSessionScreen, event: KeyPressed) -> bool:
        key = event.key
        if screen.stage is NewSessionStage.ENTERING_NAME:
            if key == "enter":
                self._confirm_name(screen)
            elif key == "escape":
                self.go_back()
            elif key == "ctrl+c":
                self._clear_or_quit(screen.name, lambda: None)
            else:
                return screen.name.handle_key(key, event.character)
            return True

        if key == "enter":
            selected = screen.layouts.selected_item
            self._create(screen.name.text, selected.path if selected else None)
        elif key == "escape" or (key == "backspace" and not screen.layout_query.text):
            screen.back_to_name()
        elif key == "ctrl+c":
            self._clear_or_quit(screen.layout_query, lambda: screen.layouts.set_query(""))
        elif self._navigate(screen.layouts, key):
            pass
        else:
            return self._edit_query(
                screen.layout_query,
                event,
                lambda: screen.layouts.set_query(screen.layout_query.text),
            )
        return True

    def _confirm_name(self, screen: NewSessionScreen) -> None:
        name = screen.name.text
        problem = validate_session_name(name)
        if problem is not None:
            self.show_error(problem)
            return
        if any(s.is_forbidden and s.name == name for s in self.snapshot.sessions):
            self.show_error("This session exists and cannot be attached to.")
            return
        if name and self.snapshot.has_session(name):
            logger.info(f"Session '{name}' already exists, switching to it")
            self.host.switch_session(name)
            self.quit()
            return
        if screen.layouts.items:
            screen.stage = NewSessionStage.SEARCHING_LAYOUT
        else:
            self._create(name, None)

    def _create(self, name: str, layout: Path | None) -> None:
        logger.info(f"Creating session '{name or '(auto)'}' with layout {layout}")
        self.host.create_session(name or None, layout)
        self.quit()

    # Resurrect ----------------------------------------------------------

    def _resurrect_key(self, screen: ResurrectScreen, event: KeyPressed) -> bool:
        key = event.key
        if screen.confirm_delete_all:
            if key == "y":
                logger.info(f"Deleting {len(screen.dead.items)} dead session(s)")
                for dead in screen.dead.items:
                    self.host.delete_dead_session(dead.name)
                screen.confirm_delete_all = False
            elif key in ("n", "escape", "ctrl+c"):
                screen.confirm_delete_all = False
            return True

        def apply() -> None:
            screen.dead.set_query(screen.query.text)

        if key == "enter":
            self._resurrect_selected(screen)
        elif key == "escape":
            self.go_back()
        elif key == "ctrl+c":
            self._clear_or_quit(screen.query, apply)
        elif key == "delete":
            selected = screen.dead.selected_item
            if selected is None:
                self.show_error("Must select session before deleting it.")
            else:
                logger.info(f"Deleting dead session '{selected.name}'")
                self.host.delete_dead_session(selected.name)
        elif key == "ctrl+d":
            if screen.dead.items:
                screen.confirm_delete_all = True
            else:
                self.show_error("No dead sessions to delete.")
        elif self._navigate(screen.dead, key):
            pass
        else:
            return self._edit_query(screen.query, event, apply)
        return True

    def _resurrect_selected(self, screen: ResurrectScreen) -> None:
        selected = screen.dead.selected_item
        if selected is None:
            return
        if self.snapshot.has_session(selected.name):
            self.show_error("A session by this name is already running.")
            return
        logger.info(f"Resurrecting session '{selected.name}'")
        self.host.resurrect_session(selected.name)
        self.quit()

    # Mouse --------------------------------------------------------------

    def _dialog_open(self) -> bool:
        """Whether a prompt or y/n question hides the list."""
        screen = self.screen
        if isinstance(screen, SessionListScreen):
            return screen.renaming is not None or screen.confirm_kill_all
        if isinstance(screen, ResurrectScreen):
            return screen.confirm_delete_all
        return False

    def _handle_click(self, event: MouseClicked) -> bool:
        if isinstance(self.screen, SessionNotFoundScreen):
            return self._handle_key(KeyPressed("enter"))
        if self.error is not None:
            self.error = None
            return True
        if self._dialog_open():
            return False
        if event.row == TABS_ROW and self.kind in TAB_ORDER:
            target = self._tab_at(event.column)
            if target is not None and target is not self.kind:
                self.go_to(target)
                return True
            return False
        engine = self._active_list()
        if engine is None:
            return False
        window = engine.window(self.list_rows())
        position = window.offset + (event.row - LIST_TOP)
        if not 0 <= event.row - LIST_TOP < window.size:
            return False
        if position == engine.selected_position:
            return self._handle_key(KeyPressed("enter"))
        engine.select_position(position)
        return True

    def _handle_scroll(self, event: MouseScrolled) -> bool:
        engine = self._active_list()
        if engine is None or event.delta == 0 or self._dialog_open():
            return False
        direction = Direction.DOWN if event.delta > 0 else Direction.UP
        for _ in range(abs(event.delta)):
            engine.move(direction)
        return True

    def _tab_spans(self) -> list[tuple[int, int, ScreenKind]]:
        spans = []
        col = 1
        for kind in TAB_ORDER:
            label = f" {TAB_TITLES[kind]} "
            spans.append((col, col + len(label), kind))
            col += len(label) + 1
        return spans

    def _tab_at(self, column: int) -> ScreenKind | None:
        for start, end, kind in self._tab_spans():
            if start <= column < end:
                return kind
        return None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, rows: int | None = None, cols: int | None = None) -> Canvas:
        """Draw the active screen into a fresh grid of ``rows`` x ``cols``."""
        rows = self.rows if rows is None else rows
        cols = self.cols if cols is None else cols
        canvas = Canvas(rows, cols)
        if canvas.rows == 0 or canvas.cols == 0:
            return canvas

        screen = self.screen
        if isinstance(screen, WelcomeScreen):
            self._draw_welcome(canvas)
        elif isinstance(screen, SessionNotFoundScreen):
            self._draw_centered(
                canvas,
                [
                    (f"Session '{screen.session_name}' no longer exists.", Cell(fg=self.theme.error_fg, bold=True)),
                    ("", BLANK),
                    ("Press any key to return to the welcome screen", Cell(fg=self.theme.muted_fg)),
                ],
            )
        else:
            self._draw_tabs(canvas)
            if isinstance(screen, SessionListScreen):
                self._draw_session_list(canvas, screen)
            elif isinstance(screen, NewSessionScreen):
                self._draw_new_session(canvas, screen)
            else:
                self._draw_resurrect(canvas, screen)

        footer = canvas.rows - 1
        if footer > 0:
            if self.error is not None:
                canvas.put_text(footer, 1, f"Error: {self.error}", Cell(fg=self.theme.error_fg, bold=True))
            else:
                canvas.put_text(footer, 1, CONTROLS[self.kind], Cell(fg=self.theme.muted_fg))
        return canvas

    def _draw_tabs(self, canvas: Canvas) -> None:
        for start, _end, kind in self._tab_spans():
            label = f" {TAB_TITLES[kind]} "
            if kind is self.kind:
                style = Cell(fg=self.theme.title_fg, bold=True, reverse=True)
            else:
                style = Cell(fg=self.theme.muted_fg)
            canvas.put_text(TABS_ROW, start, label, style)

    def _draw_prompt(self, canvas: Canvas, row: int, label: str, editor: LineEditor, placeholder: str = "") -> None:
        label_style = Cell(fg=self.theme.accent_fg, bold=True)
        cells = text_cells(label, canvas.cols, label_style)
        text = editor.text
        for index, ch in enumerate(text):
            cells.extend(text_cells(ch, 2, Cell(reverse=index == editor.cursor)))
        if editor.cursor >= len(text):
            cells.append(Cell(reverse=True))
        if not text and placeholder:
            cells.extend(text_cells(" " + placeholder, canvas.cols, Cell(fg=self.theme.muted_fg)))
        canvas.put(row, 1, cells)

    def _draw_list(
        self,
        canvas: Canvas,
        engine: SearchableList[Any],
        to_display: Callable[[Any], DisplayItem],
        empty_text: str,
    ) -> int:
        lines = render_list(
            engine.results,
            engine.selected_position,
            self.list_rows(canvas.rows),
            canvas.cols - 1,
            to_display,
            previous_offset=engine.scroll_offset,
            empty_text=empty_text,
            theme=self.theme,
        )
        canvas.put_lines(LIST_TOP, 1, lines)
        return len(lines)

    def _draw_confirmation(self, canvas: Canvas, message: str) -> None:
        self._draw_centered(
            canvas,
            [
                (message, Cell(fg=self.theme.error_fg, bold=True)),
                ("", BLANK),
                ("Are you sure? (y/n)", Cell(bold=True)),
            ],
        )

    def _draw_session_list(self, canvas: Canvas, screen: SessionListScreen) -> None:
        if screen.confirm_kill_all:
            count = len(self._other_session_names())
            self._draw_confirmation(canvas, f"This will kill {count} active session(s)")
            return
        if screen.renaming is not None:
            self._draw_prompt(canvas, PROMPT_ROW, "Rename session: ", screen.renaming)
            canvas.put_text(
                DETAIL_ROW, 1, f"Current name: {self._attached_name or '-'}", Cell(fg=self.theme.muted_fg)
            )
            return

        self._draw_prompt(canvas, PROMPT_ROW, "Search: ", screen.query)
        used = self._draw_list(
            canvas,
            screen.sessions,
            lambda row: session_row_display(row, screen.is_expanded(row)),
            "No matching sessions",
        )
        remaining = self.list_rows(canvas.rows) - used
        forbidden = screen.forbidden.results
        if forbidden and remaining >= 2:
            row = LIST_TOP + used
            canvas.put_text(row, 1, "Unavailable sessions", Cell(fg=self.theme.muted_fg, underline=True))
            for offset, result in enumerate(forbidden[: remaining - 1]):
                display = session_display(result.item)
                canvas.put(
                    row + 1 + offset,
                    1,
                    render_line(
                        display.text,
                        result.positions,
                        canvas.cols - 1,
                        suffix=display.suffix,
                        dimmed=True,
                        theme=self.theme,
                    ),
                )

    def _draw_new_session(self, canvas: Canvas, screen: NewSessionScreen) -> None:
        if screen.stage is NewSessionStage.ENTERING_NAME:
            self._draw_prompt(
                canvas, PROMPT_ROW, "Session name: ", screen.name, placeholder="(empty for an automatic name)"
            )
            if screen.layouts.items:
                hint = f"Enter to pick one of {len(screen.layouts.items)} layout(s)"
            else:
                hint = "Enter to create the session"
            canvas.put_text(DETAIL_ROW, 1, hint, Cell(fg=self.theme.muted_fg))
            return

        self._draw_prompt(canvas, PROMPT_ROW, "Layout: ", screen.layout_query)
        name = screen.name.text or "(automatic name)"
        canvas.put_text(DETAIL_ROW, 1, f"New session: {name}", Cell(fg=self.theme.muted_fg))
        self._draw_list(canvas, screen.layouts, layout_display, "No matching layouts, Enter creates without one")

    def _draw_resurrect(self, canvas: Canvas, screen: ResurrectScreen) -> None:
        if screen.confirm_delete_all:
            count = len(screen.dead.items)
            self._draw_confirmation(canvas, f"This will delete {count} resurrectable session(s)")
            return
        self._draw_prompt(canvas, PROMPT_ROW, "Search: ", screen.query)
        now = self.clock()

        def dead_display(dead: DeadSession) -> DisplayItem:
            return DisplayItem(dead.name, suffix=f"died {format_age(dead.died_at, now)}")

        empty = "No resurrectable sessions" if not screen.dead.items else "No matching sessions"
        self._draw_list(canvas, screen.dead, dead_display, empty)

    def _draw_welcome(self, canvas: Canvas) -> None:
        live = len(self.snapshot.sessions)
        dead = len(self.snapshot.dead_sessions)
        lines: list[tuple[str, Cell]] = [
            (line, Cell(fg=self.theme.title_fg, bold=True)) for line in BANNER
        ]
        lines += [
            ("", BLANK),
            (f"{live} running · {dead} resurrectable", Cell(fg=self.theme.muted_fg)),
            ("", BLANK),
            ("s  browse sessions", BLANK),
            ("n  new session", BLANK),
            ("r  resurrect a session", BLANK),
        ]
        self._draw_centered(canvas, lines)

    def _draw_centered(self, canvas: Canvas, lines: list[tuple[str, Cell]]) -> None:
        top = max(0, (canvas.rows - FOOTER_ROWS - len(lines)) // 2)
        width = max((display_width(text) for text, _ in lines), default=0)
        left = max(0, (canvas.cols - width) // 2)
        for offset, (text, style) in enumerate(lines):
            if top + offset >= canvas.rows - 1:
                break
            canvas.put(top + offset, left, text_cells(text, canvas.cols - left, style))
