"""Session host: snapshots for the picker and the requests it sends back."""

import json
import shlex
from collections.abc import Callable
from datetime import datetime
from fnmatch import fnmatchcase
from pathlib import Path

from ..config import LAYOUT_SUFFIXES, RECORDS_DIR, PickerOptions, ensure_dirs
from ..logging_config import SessionError, TmuxError, get_logger
from ..tmux.controller import TmuxController
from .models import (
    LayoutInfo,
    SessionInfo,
    SessionRecord,
    Snapshot,
    WindowInfo,
    record_filename,
)

logger = get_logger(__name__)


class SessionManager:
    """Builds snapshots of tmux state and carries out picker requests.

    Every live session is recorded on disk. A recorded session that is no
    longer running is reported as dead and can be resurrected in its last
    working directory.
    """

    def __init__(
        self,
        tmux: TmuxController | None = None,
        options: PickerOptions | None = None,
        on_quit: Callable[[], None] | None = None,
    ):
        ensure_dirs()
        self.tmux = tmux or TmuxController()
        self.options = options or PickerOptions()
        self.on_quit = on_quit
        self.quit_requested = False
        self._records: dict[str, SessionRecord] = {}
        self._load_records()

    def _load_records(self) -> None:
        """Load persisted session records from disk."""
        for path in RECORDS_DIR.glob("*.json"):
            try:
                data = json.loads(path.read_text())
                record = SessionRecord.model_validate(data)
                self._records[record.name] = record
                logger.debug(f"Loaded record for '{record.name}' from {path}")
            except json.JSONDecodeError as e:
                logger.error(f"Invalid JSON in record file {path}: {e}")
            except Exception as e:
                logger.error(f"Failed to load record from {path}: {e}")

    def _save_record(self, record: SessionRecord) -> None:
        """Persist a session record to disk."""
        path = RECORDS_DIR / record_filename(record.name)
        try:
            path.write_text(record.model_dump_json(indent=2))
            logger.debug(f"Saved record for '{record.name}' to {path}")
        except Exception as e:
            logger.error(f"Failed to save record for '{record.name}': {e}")
            raise SessionError(f"Failed to save session record: {e}") from e

    def _delete_record_file(self, name: str) -> None:
        """Remove a session record from disk."""
        path = RECORDS_DIR / record_filename(name)
        if path.exists():
            try:
                path.unlink()
                logger.debug(f"Deleted record file {path}")
            except Exception as e:
                logger.error(f"Failed to delete record file {path}: {e}")

    def is_forbidden(self, name: str) -> bool:
        return any(fnmatchcase(name, pattern) for pattern in self.options.forbidden_patterns)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self, now: datetime | None = None) -> Snapshot:
        """Current sessions, layouts and dead sessions, as one replacement set."""
        now = now or datetime.now()
        current = self.tmux.current_session_name()
        sessions = [
            SessionInfo(
                name=name,
                is_current=name == current,
                is_forbidden=self.is_forbidden(name),
                window_count=windows,
                attached_clients=attached,
                windows=tuple(
                    WindowInfo.model_validate(window)
                    for window in self.tmux.window_details(name)
                ),
            )
            for name, windows, attached in self.tmux.session_details()
        ]
        self._track(sessions, now)
        dead = sorted(
            (record for record in self._records.values() if record.is_dead),
            key=lambda record: (record.died_at, record.name),
            reverse=True,
        )
        return Snapshot(
            sessions=tuple(sessions),
            layouts=tuple(self.list_layouts()),
            dead_sessions=tuple(record.to_dead_session() for record in dead),
        )

    def _track(self, sessions: list[SessionInfo], now: datetime) -> None:
        """Record new sessions and mark vanished ones as dead."""
        live = {session.name for session in sessions}
        for name in live:
            record = self._records.get(name)
            if record is None:
                cwd = self.tmux.get_pane_cwd(name)
                record = SessionRecord(
                    name=name,
                    working_dir=Path(cwd) if cwd else None,
                    created_at=now,
                    last_seen=now,
                )
                self._records[name] = record
                self._persist(record)
                logger.info(f"Recording new session '{name}'")
            elif record.is_dead:
                record.died_at = None
                record.last_seen = now
                self._persist(record)
                logger.info(f"Session '{name}' is running again")
            else:
                record.last_seen = now

        for record in self._records.values():
            if record.name not in live and not record.is_dead:
                record.died_at = now
                self._persist(record)
                logger.info(f"Session '{record.name}' ended")

    def _persist(self, record: SessionRecord) -> None:
        try:
            self._save_record(record)
        except SessionError:
            # Already logged; the in-memory record still drives the snapshot.
            pass

    def list_layouts(self) -> list[LayoutInfo]:
        """Layout files in the layouts directory, sorted by name."""
        layouts_dir = self.options.layouts_dir
        if not layouts_dir.is_dir():
            return []
        try:
            paths = sorted(
                path
                for path in layouts_dir.iterdir()
                if path.is_file() and path.suffix in LAYOUT_SUFFIXES
            )
        except OSError as e:
            logger.error(f"Failed to list layouts in {layouts_dir}: {e}")
            return []
        return [LayoutInfo(name=path.stem, path=path) for path in paths]

    # ------------------------------------------------------------------
    # Requests from the picker
    # ------------------------------------------------------------------

    def switch_session(
        self, name: str, window_index: int | None = None, pane_id: str | None = None
    ) -> None:
        if not self.tmux.switch_client(name, window_index=window_index, pane_id=pane_id):
            logger.warning(f"Could not switch to session '{name}'")

    def detach_other_clients(self) -> None:
        if not self.tmux.detach_other_clients():
            logger.warning("Could not detach other clients")

    def kill_session(self, name: str) -> None:
        if not self.tmux.kill_session(name):
            logger.warning(f"Could not kill session '{name}'")

    def create_session(self, name: str | None, layout: Path | None = None) -> None:
        command = f"sh {shlex.quote(str(layout))}" if layout else None
        try:
            created = self.tmux.create_session(name, command)
        except TmuxError as e:
            logger.error(f"Create session request failed: {e}")
            return
        self.tmux.switch_client(created)

    def rename_session(self, new_name: str) -> None:
        current = self.tmux.current_session_name()
        if current is None:
            logger.warning("Cannot rename: not running inside a tmux session")
            return
        if not self.tmux.rename_session(current, new_name):
            return
        record = self._records.pop(current, None)
        if record is not None:
            self._delete_record_file(current)
            record.name = new_name
            self._records[new_name] = record
            self._persist(record)

    def delete_dead_session(self, name: str) -> None:
        record = self._records.get(name)
        if record is None or not record.is_dead:
            logger.warning(f"Cannot delete: no dead session '{name}'")
            return
        del self._records[name]
        self._delete_record_file(name)
        logger.info(f"Deleted dead session '{name}'")

    def resurrect_session(self, name: str) -> None:
        record = self._records.get(name)
        if record is None or not record.is_dead:
            logger.warning(f"Cannot resurrect: no dead session '{name}'")
            return
        working_dir = str(record.working_dir) if record.working_dir else None
        try:
            self.tmux.create_session(name, working_dir=working_dir)
        except TmuxError as e:
            logger.error(f"Resurrect request failed: {e}")
            return
        record.died_at = None
        record.last_seen = datetime.now()
        self._persist(record)
        logger.info(f"Resurrected session '{name}' in {working_dir}")
        self.tmux.switch_client(name)

    def quit(self) -> None:
        self.quit_requested = True
        if self.on_quit is not None:
            self.on_quit()
