"""Tmux session controller using libtmux."""

import os
from typing import Any

import libtmux

from ..logging_config import TmuxError, get_logger

logger = get_logger(__name__)


def _flag(value: str | None) -> bool:
    return value == "1"


def _number(value: str | None) -> int:
    try:
        return int(value or 0)
    except ValueError:
        return 0


class TmuxController:
    """Controls the tmux server the picker runs in."""

    def __init__(self):
        self._server: libtmux.Server | None = None

    @property
    def server(self) -> libtmux.Server:
        """Get or create the tmux server connection."""
        if self._server is None:
            try:
                self._server = libtmux.Server()
            except Exception as e:
                logger.error(f"Failed to connect to tmux server: {e}")
                raise TmuxError(f"Cannot connect to tmux server: {e}") from e
        return self._server

    def _find_session(self, name: str) -> libtmux.Session | None:
        return self.server.sessions.get(session_name=name, default=None)

    def create_session(
        self,
        name: str | None,
        command: str | None = None,
        working_dir: str | None = None,
    ) -> str:
        """Create a detached tmux session, optionally running a command.

        Returns:
            The name tmux gave the session (tmux picks one when ``name`` is None).
        """
        try:
            session = self.server.new_session(
                session_name=name,
                start_directory=working_dir,
                attach=False,
            )

            if command:
                pane = session.active_window.active_pane
                if pane:
                    pane.send_keys(command)
        except Exception as e:
            logger.error(f"Failed to create tmux session '{name}': {e}")
            raise TmuxError(f"Failed to create session '{name}': {e}") from e

        created = session.session_name or name or ""
        logger.info(f"Created tmux session '{created}' in {working_dir}")
        return created

    def kill_session(self, name: str) -> bool:
        """Kill a tmux session by name."""
        try:
            session = self._find_session(name)
            if session:
                session.kill()
                logger.info(f"Killed tmux session '{name}'")
                return True
            return False
        except Exception as e:
            logger.warning(f"Error killing session '{name}': {e}")
            return False

    def rename_session(self, old_name: str, new_name: str) -> bool:
        """Rename a tmux session."""
        try:
            session = self._find_session(old_name)
            if session:
                session.rename_session(new_name)
                logger.info(f"Renamed tmux session '{old_name}' to '{new_name}'")
                return True
            logger.warning(f"Session '{old_name}' not found for rename_session")
            return False
        except Exception as e:
            logger.error(f"Error renaming session '{old_name}': {e}")
            return False

    def switch_client(
        self,
        name: str,
        window_index: int | None = None,
        pane_id: str | None = None,
    ) -> bool:
        """Point the client running the picker at a session.

        With ``window_index`` or ``pane_id`` that window or pane is focused
        first, so the client lands on it.
        """
        try:
            session = self._find_session(name)
            if not session:
                logger.warning(f"Session '{name}' not found for switch_client")
                return False
            if pane_id is not None:
                pane = session.panes.get(pane_id=pane_id, default=None)
                if pane:
                    pane.window.select()
                    pane.select()
            elif window_index is not None:
                window = session.windows.get(window_index=str(window_index), default=None)
                if window:
                    window.select()
            session.switch_client()
            logger.info(f"Switched client to '{name}'")
            return True
        except Exception as e:
            logger.warning(f"switch-client to '{name}' failed: {e}")
            return False

    def detach_other_clients(self) -> bool:
        """Detach every client except the one running the picker."""
        try:
            result = self.server.cmd("detach-client", "-a")
        except Exception as e:
            logger.error(f"Error detaching other clients: {e}")
            return False
        if result.stderr:
            logger.warning(f"detach-client failed: {' '.join(result.stderr)}")
            return False
        logger.info("Detached other clients")
        return True

    def current_session_name(self) -> str | None:
        """Name of the session the picker's own pane belongs to.

        Uses $TMUX_PANE, so this is None when the picker runs outside tmux.
        """
        pane_id = os.environ.get("TMUX_PANE")
        if not pane_id:
            return None
        try:
            pane = self.server.panes.get(pane_id=pane_id, default=None)
        except Exception as e:
            logger.error(f"Error resolving current session for pane {pane_id}: {e}")
            return None
        if pane is None:
            return None
        return pane.session_name or None

    def session_details(self) -> list[tuple[str, int, int]]:
        """List live sessions as (name, window count, attached clients).

        An empty list when no tmux server is running.
        """
        try:
            sessions = self.server.sessions
        except Exception as e:
            logger.error(f"Error listing tmux sessions: {e}")
            return []
        return [
            (s.session_name, _number(s.session_windows), _number(s.session_attached))
            for s in sessions
            if s.session_name
        ]

    def window_details(self, session_name: str) -> list[dict[str, Any]]:
        """Windows of a session with their panes, keyed like the snapshot models."""
        try:
            session = self._find_session(session_name)
            if not session:
                return []
            return [
                {
                    "index": _number(window.window_index),
                    "name": window.window_name or "",
                    "is_active": _flag(window.window_active),
                    "panes": [
                        {
                            "pane_id": pane.pane_id,
                            "index": _number(pane.pane_index),
                            "command": pane.pane_current_command or "",
                            "is_active": _flag(pane.pane_active),
                        }
                        for pane in window.panes
                    ],
                }
                for window in session.windows
            ]
        except Exception as e:
            logger.error(f"Error listing windows of '{session_name}': {e}")
            return []

    def get_pane_cwd(self, session_name: str) -> str | None:
        """Get the current working directory of a tmux pane.

        Uses tmux's pane_current_path format variable.

        Returns:
            The pane's current working directory, or None if unavailable.
        """
        try:
            session = self._find_session(session_name)
            if session:
                pane = session.active_window.active_pane
                if pane:
                    cwd = pane.pane_current_path
                    if cwd:
                        logger.debug(f"Pane CWD for '{session_name}': {cwd}")
                        return cwd
                return None
            logger.warning(f"Session '{session_name}' not found for get_pane_cwd")
            return None
        except Exception as e:
            logger.error(f"Error getting pane CWD for '{session_name}': {e}")
            return None
