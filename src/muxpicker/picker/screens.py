"""Picker screens.

Each screen is one arm of a closed union; the controller holds exactly one
of them and replaces it whole on every transition, so no query, cursor or
dialog state leaks from one screen into the next.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

from ..session.models import DeadSession, LayoutInfo, PaneInfo, SessionInfo, Snapshot, WindowInfo
from .editor import LineEditor
from .search import SearchableList


class ScreenKind(str, Enum):
    WELCOME = "welcome"
    SESSION_LIST = "session_list"
    NEW_SESSION = "new_session"
    RESURRECT = "resurrect"
    SESSION_NOT_FOUND = "session_not_found"


# Order of the Tab key cycle
TAB_ORDER = (ScreenKind.SESSION_LIST, ScreenKind.NEW_SESSION, ScreenKind.RESURRECT)


class NewSessionStage(str, Enum):
    ENTERING_NAME = "entering_name"
    SEARCHING_LAYOUT = "searching_layout"


def _by_name(item: SessionRow | SessionInfo | LayoutInfo | DeadSession) -> str:
    return item.name


@dataclass
class WelcomeScreen:
    kind: ClassVar[ScreenKind] = ScreenKind.WELCOME

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        pass


class RowKind(str, Enum):
    SESSION = "session"
    WINDOW = "window"
    PANE = "pane"


@dataclass(frozen=True)
class SessionRow:
    """One row of the session tree: a session, one of its windows, or a pane of that window."""

    session: SessionInfo
    window: WindowInfo | None = None
    pane: PaneInfo | None = None

    @property
    def kind(self) -> RowKind:
        if self.pane is not None:
            return RowKind.PANE
        if self.window is not None:
            return RowKind.WINDOW
        return RowKind.SESSION

    @property
    def name(self) -> str:
        """What the query matches against."""
        if self.pane is not None:
            return self.pane.command or self.pane.pane_id
        if self.window is not None:
            return self.window.name or str(self.window.index)
        return self.session.name

    @property
    def identity(self) -> str:
        # NUL cannot appear in a tmux name, so the parts never run together.
        parts = [self.session.name]
        if self.window is not None:
            parts.append(str(self.window.index))
        if self.pane is not None:
            parts.append(self.pane.pane_id)
        return "\0".join(parts)

    @property
    def parent(self) -> SessionRow | None:
        if self.pane is not None:
            return SessionRow(self.session, self.window)
        if self.window is not None:
            return SessionRow(self.session)
        return None


def _row_identity(row: SessionRow) -> str:
    return row.identity


@dataclass
class SessionListScreen:
    kind: ClassVar[ScreenKind] = ScreenKind.SESSION_LIST

    sessions: SearchableList[SessionRow]
    # Shown after the results but never selectable.
    forbidden: SearchableList[SessionInfo]
    query: LineEditor = field(default_factory=LineEditor)
    renaming: LineEditor | None = None
    confirm_kill_all: bool = False
    hide_current: bool = False
    expanded_sessions: set[str] = field(default_factory=set)
    expanded_windows: set[tuple[str, int]] = field(default_factory=set)
    visible: tuple[SessionInfo, ...] = ()

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, hide_current: bool = False) -> SessionListScreen:
        screen = cls(
            sessions=SearchableList(key=_by_name, identity=_row_identity),
            forbidden=SearchableList(key=_by_name),
            hide_current=hide_current,
        )
        screen.apply_snapshot(snapshot)
        return screen

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        self.visible = tuple(
            s
            for s in snapshot.sessions
            if not s.is_forbidden and not (self.hide_current and s.is_current)
        )
        self.refresh_rows()
        self.forbidden.set_items(s for s in snapshot.sessions if s.is_forbidden)

    def rows(self) -> Iterator[SessionRow]:
        """Sessions in snapshot order, each followed by whatever of it is expanded."""
        for session in self.visible:
            yield SessionRow(session)
            if session.name not in self.expanded_sessions:
                continue
            for window in session.windows:
                yield SessionRow(session, window)
                if (session.name, window.index) in self.expanded_windows:
                    for pane in window.panes:
                        yield SessionRow(session, window, pane)

    def refresh_rows(self) -> None:
        self.sessions.set_items(self.rows())

    def is_expanded(self, row: SessionRow) -> bool:
        if row.kind is RowKind.SESSION:
            return row.session.name in self.expanded_sessions
        if row.kind is RowKind.WINDOW:
            return (row.session.name, row.window.index) in self.expanded_windows
        return False

    def expand(self) -> None:
        """Show the children of the selected session or window."""
        row = self.sessions.selected_item
        if row is None or row.kind is RowKind.PANE:
            return
        if row.kind is RowKind.SESSION:
            self.expanded_sessions.add(row.session.name)
        else:
            self.expanded_windows.add((row.session.name, row.window.index))
        self.refresh_rows()

    def shrink(self) -> None:
        """Collapse the selected row, or its parent when it is a child row."""
        row = self.sessions.selected_item
        if row is None:
            return
        target = row
        if not self.is_expanded(row):
            target = row.parent
            if target is None:
                return
        if target.kind is RowKind.SESSION:
            self.expanded_sessions.discard(target.session.name)
        else:
            self.expanded_windows.discard((target.session.name, target.window.index))
        self.refresh_rows()
        self.sessions.select_identity(target.identity)

    def toggle_expansion(self) -> None:
        """Expand every session, or collapse everything when all are expanded."""
        names = {s.name for s in self.visible}
        selected = self.sessions.selected_item
        if names and names <= self.expanded_sessions:
            self.expanded_sessions.clear()
            self.expanded_windows.clear()
        else:
            self.expanded_sessions |= names
        self.refresh_rows()
        if selected is not None:
            self.sessions.select_identity(SessionRow(selected.session).identity)

    def set_query(self) -> None:
        self.sessions.set_query(self.query.text)
        self.forbidden.set_query(self.query.text)


@dataclass
class NewSessionScreen:
    kind: ClassVar[ScreenKind] = ScreenKind.NEW_SESSION

    layouts: SearchableList[LayoutInfo]
    name: LineEditor = field(default_factory=LineEditor)
    layout_query: LineEditor = field(default_factory=LineEditor)
    stage: NewSessionStage = NewSessionStage.ENTERING_NAME

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> NewSessionScreen:
        return cls(layouts=SearchableList(snapshot.layouts, key=_by_name))

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        self.layouts.set_items(snapshot.layouts)

    def back_to_name(self) -> None:
        self.stage = NewSessionStage.ENTERING_NAME
        self.layout_query.clear()
        self.layouts.set_query("")


@dataclass
class ResurrectScreen:
    kind: ClassVar[ScreenKind] = ScreenKind.RESURRECT

    dead: SearchableList[DeadSession]
    query: LineEditor = field(default_factory=LineEditor)
    confirm_delete_all: bool = False

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> ResurrectScreen:
        return cls(dead=SearchableList(snapshot.dead_sessions, key=_by_name))

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        self.dead.set_items(snapshot.dead_sessions)


@dataclass
class SessionNotFoundScreen:
    kind: ClassVar[ScreenKind] = ScreenKind.SESSION_NOT_FOUND

    session_name: str

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        pass


Screen = Union[
    WelcomeScreen,
    SessionListScreen,
    NewSessionScreen,
    ResurrectScreen,
    SessionNotFoundScreen,
]
