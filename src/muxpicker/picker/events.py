"""Inbound events and outbound host requests of the picker core."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Union

from ..session.models import Snapshot


@dataclass(frozen=True)
class KeyPressed:
    """A key, named the way Textual names keys ("enter", "ctrl+n", "a")."""

    key: str
    character: str | None = None


@dataclass(frozen=True)
class MouseClicked:
    row: int
    column: int


@dataclass(frozen=True)
class MouseScrolled:
    """Wheel movement; negative ``delta`` scrolls up."""

    delta: int
    row: int = 0
    column: int = 0


@dataclass(frozen=True)
class SnapshotReceived:
    snapshot: Snapshot


@dataclass(frozen=True)
class ModeChanged:
    pass


@dataclass(frozen=True)
class Resized:
    rows: int
    cols: int


Event = Union[KeyPressed, MouseClicked, MouseScrolled, SnapshotReceived, ModeChanged, Resized]


class HostRequests(Protocol):
    """Fire-and-forget requests the picker sends to the session host."""

    def switch_session(
        self, name: str, window_index: int | None = None, pane_id: str | None = None
    ) -> None: ...

    def detach_other_clients(self) -> None: ...
    def kill_session(self, name: str) -> None: ...

    def create_session(self, name: str | None, layout: Path | None = None) -> None: ...

    def rename_session(self, new_name: str) -> None: ...

    def delete_dead_session(self, name: str) -> None: ...

    def resurrect_session(self, name: str) -> None: ...

    def quit(self) -> None: ...
