"""Session snapshot models."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class PaneInfo(BaseModel):
    """A pane inside a session window."""

    model_config = ConfigDict(frozen=True)

    pane_id: str
    index: int = 0
    command: str = ""
    is_active: bool = False


class WindowInfo(BaseModel):
    """A window of a live session, with its panes."""

    model_config = ConfigDict(frozen=True)

    index: int
    name: str = ""
    is_active: bool = False
    panes: tuple[PaneInfo, ...] = ()


class SessionInfo(BaseModel):
    """A live tmux session as seen in the latest snapshot."""

    model_config = ConfigDict(frozen=True)

    name: str
    is_current: bool = False
    is_forbidden: bool = False
    window_count: int = 0
    attached_clients: int = 0
    windows: tuple[WindowInfo, ...] = ()


class LayoutInfo(BaseModel):
    """A layout file that can seed a new session."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: Path


class DeadSession(BaseModel):
    """A session that has ended but can be recreated."""

    model_config = ConfigDict(frozen=True)

    name: str
    died_at: datetime
    working_dir: Path | None = None


class SessionRecord(BaseModel):
    """On-disk record of a session, written while it is alive."""

    name: str
    working_dir: Path | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    last_seen: datetime = Field(default_factory=datetime.now)
    died_at: datetime | None = None

    @property
    def is_dead(self) -> bool:
        return self.died_at is not None

    def to_dead_session(self) -> DeadSession:
        """Snapshot view of a dead record."""
        return DeadSession(
            name=self.name,
            died_at=self.died_at or self.last_seen,
            working_dir=self.working_dir,
        )


class Snapshot(BaseModel):
    """Full replacement of everything the picker lists."""

    model_config = ConfigDict(frozen=True)

    sessions: tuple[SessionInfo, ...] = ()
    layouts: tuple[LayoutInfo, ...] = ()
    dead_sessions: tuple[DeadSession, ...] = ()

    @property
    def current_session(self) -> SessionInfo | None:
        for session in self.sessions:
            if session.is_current:
                return session
        return None

    def has_session(self, name: str) -> bool:
        return any(session.name == name for session in self.sessions)

    def has_dead_session(self, name: str) -> bool:
        return any(dead.name == name for dead in self.dead_sessions)


def record_filename(name: str) -> str:
    """File name for a session record; session names may hold any character."""
    return f"{name.encode('utf-8').hex()}.json"
