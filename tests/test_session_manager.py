"""Tests for SessionManager."""

import json
import shlex
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from muxpicker.config import PickerOptions
from muxpicker.logging_config import TmuxError
from muxpicker.session.manager import SessionManager
from muxpicker.session.models import SessionRecord, record_filename

T0 = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def records_dir(tmp_path):
    """Create a temporary records directory."""
    path = tmp_path / "sessions"
    path.mkdir()
    return path


@pytest.fixture
def layouts_dir(tmp_path):
    path = tmp_path / "layouts"
    path.mkdir()
    return path


@pytest.fixture
def mock_tmux():
    """Create a mock TmuxController."""
    mock = MagicMock()
    mock.create_session.side_effect = lambda name, command=None, working_dir=None: name or "0"
    mock.kill_session.return_value = True
    mock.rename_session.return_value = True
    mock.switch_client.return_value = True
    mock.current_session_name.return_value = "main"
    mock.session_details.return_value = [("main", 2, 1), ("work", 1, 0)]
    mock.get_pane_cwd.return_value = "/home/user/project"
    mock.window_details.return_value = []
    mock.detach_other_clients.return_value = True
    return mock


@pytest.fixture
def options(layouts_dir):
    return PickerOptions(forbidden_patterns=["secret-*"], layouts_dir=layouts_dir)


@pytest.fixture
def manager(records_dir, mock_tmux, options):
    """Create a SessionManager with mocked dependencies."""
    with patch("muxpicker.session.manager.RECORDS_DIR", records_dir):
        with patch("muxpicker.session.manager.ensure_dirs"):
            yield SessionManager(tmux=mock_tmux, options=options)


def write_record(records_dir, record):
    (records_dir / record_filename(record.name)).write_text(record.model_dump_json())


class TestSnapshot:
    """Tests for building snapshots."""

    def test_lists_live_sessions(self, manager):
        """Should report every live session with its counts."""
        snapshot = manager.snapshot(now=T0)

        assert [s.name for s in snapshot.sessions] == ["main", "work"]
        assert snapshot.sessions[0].window_count == 2
        assert snapshot.sessions[0].attached_clients == 1

    def test_marks_current_session(self, manager):
        """Should flag the session the picker runs in."""
        snapshot = manager.snapshot(now=T0)

        assert snapshot.current_session.name == "main"
        assert not snapshot.sessions[1].is_current

    def test_outside_tmux_has_no_current(self, manager, mock_tmux):
        """Should have no current session outside tmux."""
        mock_tmux.current_session_name.return_value = None

        assert manager.snapshot(now=T0).current_session is None

    def test_marks_forbidden_sessions(self, manager, mock_tmux):
        """Should flag sessions matching a forbidden pattern."""
        mock_tmux.session_details.return_value = [("main", 1, 1), ("secret-keys", 1, 0)]

        snapshot = manager.snapshot(now=T0)

        assert [s.is_forbidden for s in snapshot.sessions] == [False, True]

    def test_includes_windows_and_panes(self, manager, mock_tmux):
        """Should carry each session's windows and panes."""
        mock_tmux.window_details.side_effect = lambda name: (
            [
                {
                    "index": 1,
                    "name": "editor",
                    "is_active": True,
                    "panes": [{"pane_id": "%4", "index": 0, "command": "vim", "is_active": True}],
                }
            ]
            if name == "main"
            else []
        )

        snapshot = manager.snapshot(now=T0)

        window = snapshot.sessions[0].windows[0]
        assert (window.index, window.name, window.is_active) == (1, "editor", True)
        assert window.panes[0].pane_id == "%4"
        assert window.panes[0].command == "vim"
        assert snapshot.sessions[1].windows == ()

    def test_tmux_failure_gives_empty_sessions(self, manager, mock_tmux):
        """Should still produce a snapshot when tmux lists nothing."""
        mock_tmux.session_details.return_value = []
        mock_tmux.current_session_name.return_value = None

        snapshot = manager.snapshot(now=T0)

        assert snapshot.sessions == ()
        assert snapshot.dead_sessions == ()


class TestSessionRecords:
    """Tests for recording live and dead sessions."""

    def test_records_new_sessions(self, manager, records_dir):
        """Should write a record file for every new live session."""
        manager.snapshot(now=T0)

        path = records_dir / record_filename("work")
        assert path.exists()
        data = json.loads(path.read_text())
        assert data["name"] == "work"
        assert data["working_dir"] == "/home/user/project"
        assert data["died_at"] is None

    def test_vanished_session_becomes_dead(self, manager, mock_tmux):
        """Should report a recorded session that stopped running."""
        manager.snapshot(now=T0)
        mock_tmux.session_details.return_value = [("main", 2, 1)]

        later = T0 + timedelta(minutes=5)
        snapshot = manager.snapshot(now=later)

        assert [d.name for d in snapshot.dead_sessions] == ["work"]
        assert snapshot.dead_sessions[0].died_at == later
        assert snapshot.dead_sessions[0].working_dir == Path("/home/user/project")

    def test_died_at_is_first_time_missing(self, manager, mock_tmux):
        """Should keep the time a session was first seen missing."""
        manager.snapshot(now=T0)
        mock_tmux.session_details.return_value = [("main", 2, 1)]
        manager.snapshot(now=T0 + timedelta(minutes=1))

        snapshot = manager.snapshot(now=T0 + timedelta(hours=1))

        assert snapshot.dead_sessions[0].died_at == T0 + timedelta(minutes=1)

    def test_revived_session_is_not_dead(self, manager, mock_tmux):
        """Should drop a session from the dead list when it runs again."""
        manager.snapshot(now=T0)
        mock_tmux.session_details.return_value = [("main", 2, 1)]
        manager.snapshot(now=T0 + timedelta(minutes=1))
        mock_tmux.session_details.return_value = [("main", 2, 1), ("work", 1, 0)]

        snapshot = manager.snapshot(now=T0 + timedelta(minutes=2))

        assert snapshot.dead_sessions == ()

    def test_dead_sessions_newest_first(self, records_dir, mock_tmux, options):
        """Should order dead sessions by time of death, newest first."""
        write_record(records_dir, SessionRecord(name="old", died_at=T0))
        write_record(records_dir, SessionRecord(name="new", died_at=T0 + timedelta(days=1)))

        with patch("muxpicker.session.manager.RECORDS_DIR", records_dir):
            with patch("muxpicker.session.manager.ensure_dirs"):
                manager = SessionManager(tmux=mock_tmux, options=options)
                snapshot = manager.snapshot(now=T0 + timedelta(days=2))

        assert [d.name for d in snapshot.dead_sessions] == ["new", "old"]

    def test_live_record_found_dead_on_load(self, records_dir, mock_tmux, options):
        """Should report a record whose session ended while the picker was closed."""
        write_record(records_dir, SessionRecord(name="gone", created_at=T0, last_seen=T0))
        later = T0 + timedelta(hours=3)

        with patch("muxpicker.session.manager.RECORDS_DIR", records_dir):
            with patch("muxpicker.session.manager.ensure_dirs"):
                manager = SessionManager(tmux=mock_tmux, options=options)
                snapshot = manager.snapshot(now=later)

        assert [d.name for d in snapshot.dead_sessions] == ["gone"]
        assert snapshot.dead_sessions[0].died_at == later

    def test_corrupt_record_is_skipped(self, records_dir, mock_tmux, options):
        """Should skip record files that are not valid JSON."""
        (records_dir / "bad.json").write_text("not valid json")
        write_record(records_dir, SessionRecord(name="ok", died_at=T0))

        with patch("muxpicker.session.manager.RECORDS_DIR", records_dir):
            with patch("muxpicker.session.manager.ensure_dirs"):
                manager = SessionManager(tmux=mock_tmux, options=options)
                snapshot = manager.snapshot(now=T0)

        assert [d.name for d in snapshot.dead_sessions] == ["ok"]

    def test_odd_names_round_trip(self, records_dir, mock_tmux, options):
        """Should store names with path separators and spaces."""
        mock_tmux.session_details.return_value = [("a b/c", 1, 0)]

        with patch("muxpicker.session.manager.RECORDS_DIR", records_dir):
            with patch("muxpicker.session.manager.ensure_dirs"):
                SessionManager(tmux=mock_tmux, options=options).snapshot(now=T0)
                reloaded = SessionManager(tmux=mock_tmux, options=options)

        assert "a b/c" in reloaded._records


class TestLayouts:
    """Tests for layout discovery."""

    def test_lists_layout_files(self, manager, layouts_dir):
        """Should list layout files sorted by name."""
        (layouts_dir / "web.sh").write_text("tmux split-window")
        (layouts_dir / "api.tmux").write_text("tmux new-window")
        (layouts_dir / "notes.txt").write_text("ignored")

        layouts = manager.list_layouts()

        assert [layout.name for layout in layouts] == ["api", "web"]
        assert layouts[0].path == layouts_dir / "api.tmux"

    def test_missing_directory(self, records_dir, mock_tmux, tmp_path):
        """Should return no layouts when the directory does not exist."""
        options = PickerOptions(layouts_dir=tmp_path / "nope")
        with patch("muxpicker.session.manager.RECORDS_DIR", records_dir):
            with patch("muxpicker.session.manager.ensure_dirs"):
                manager = SessionManager(tmux=mock_tmux, options=options)

        assert manager.list_layouts() == []

    def test_layouts_in_snapshot(self, manager, layouts_dir):
        """Should include layouts in every snapshot."""
        (layouts_dir / "web.sh").write_text("")

        snapshot = manager.snapshot(now=T0)

        assert [layout.name for layout in snapshot.layouts] == ["web"]


class TestRequests:
    """Tests for requests sent back by the picker."""

    def test_switch_session(self, manager, mock_tmux):
        """Should switch the client."""
        manager.switch_session("work")

        mock_tmux.switch_client.assert_called_once_with("work", window_index=None, pane_id=None)

    def test_switch_session_with_focus(self, manager, mock_tmux):
        """Should pass the window and pane to focus on."""
        manager.switch_session("work", window_index=2, pane_id="%7")

        mock_tmux.switch_client.assert_called_once_with("work", window_index=2, pane_id="%7")

    def test_detach_other_clients(self, manager, mock_tmux):
        """Should ask tmux to detach the other clients."""
        manager.detach_other_clients()

        mock_tmux.detach_other_clients.assert_called_once_with()

    def test_kill_session(self, manager, mock_tmux):
        """Should kill the tmux session."""
        manager.kill_session("work")

        mock_tmux.kill_session.assert_called_once_with("work")

    def test_create_session_plain(self, manager, mock_tmux):
        """Should create a session and switch to it."""
        manager.create_session("dev")

        mock_tmux.create_session.assert_called_once_with("dev", None)
        mock_tmux.switch_client.assert_called_once_with("dev")

    def test_create_session_with_layout(self, manager, mock_tmux, layouts_dir):
        """Should run the layout file in the new session."""
        layout = layouts_dir / "web.sh"

        manager.create_session("dev", layout)

        mock_tmux.create_session.assert_called_once_with("dev", f"sh {shlex.quote(str(layout))}")

    def test_create_session_automatic_name(self, manager, mock_tmux):
        """Should switch to the name tmux chose."""
        manager.create_session(None)

        mock_tmux.switch_client.assert_called_once_with("0")

    def test_create_session_failure(self, manager, mock_tmux):
        """Should log and swallow tmux failures."""
        mock_tmux.create_session.side_effect = TmuxError("Failed to create session")

        manager.create_session("dev")

        mock_tmux.switch_client.assert_not_called()

    def test_rename_moves_record(self, manager, mock_tmux, records_dir):
        """Should rename the current session and its record."""
        manager.snapshot(now=T0)

        manager.rename_session("renamed")

        mock_tmux.rename_session.assert_called_once_with("main", "renamed")
        assert not (records_dir / record_filename("main")).exists()
        assert (records_dir / record_filename("renamed")).exists()

    def test_rename_outside_tmux(self, manager, mock_tmux):
        """Should do nothing without a current session."""
        mock_tmux.current_session_name.return_value = None

        manager.rename_session("renamed")

        mock_tmux.rename_session.assert_not_called()

    def test_rename_rejected_keeps_record(self, manager, mock_tmux, records_dir):
        """Should keep the old record when tmux refuses the rename."""
        manager.snapshot(now=T0)
        mock_tmux.rename_session.return_value = False

        manager.rename_session("renamed")

        assert (records_dir / record_filename("main")).exists()

    def test_delete_dead_session(self, manager, mock_tmux, records_dir):
        """Should remove a dead session's record."""
        manager.snapshot(now=T0)
        mock_tmux.session_details.return_value = [("main", 2, 1)]
        manager.snapshot(now=T0)

        manager.delete_dead_session("work")

        assert not (records_dir / record_filename("work")).exists()
        assert manager.snapshot(now=T0).dead_sessions == ()

    def test_delete_live_session_refused(self, manager, records_dir):
        """Should not delete the record of a running session."""
        manager.snapshot(now=T0)

        manager.delete_dead_session("work")

        assert (records_dir / record_filename("work")).exists()

    def test_resurrect_session(self, manager, mock_tmux):
        """Should recreate the session in its last directory and switch to it."""
        manager.snapshot(now=T0)
        mock_tmux.session_details.return_value = [("main", 2, 1)]
        manager.snapshot(now=T0)

        manager.resurrect_session("work")

        mock_tmux.create_session.assert_called_once_with(
            "work", working_dir="/home/user/project"
        )
        mock_tmux.switch_client.assert_called_once_with("work")
        assert not manager._records["work"].is_dead

    def test_resurrect_unknown(self, manager, mock_tmux):
        """Should ignore names without a dead record."""
        manager.resurrect_session("nothing")

        mock_tmux.create_session.assert_not_called()

    def test_resurrect_failure_stays_dead(self, manager, mock_tmux):
        """Should keep the record dead when tmux fails."""
        manager.snapshot(now=T0)
        mock_tmux.session_details.return_value = [("main", 2, 1)]
        manager.snapshot(now=T0)
        mock_tmux.create_session.side_effect = TmuxError("Failed to create session")

        manager.resurrect_session("work")

        assert manager._records["work"].is_dead
        mock_tmux.switch_client.assert_not_called()

    def test_quit(self, manager):
        """Should flag the quit and call back."""
        on_quit = MagicMock()
        manager.on_quit = on_quit

        manager.quit()

        assert manager.quit_requested is True
        on_quit.assert_called_once_with()
