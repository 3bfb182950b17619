"""Main Textual application for muxpicker."""

from textual.app import App, ComposeResult
from textual.binding import Binding

from ..config import PickerOptions
from ..logging_config import MuxpickerError, get_logger
from ..picker.controller import ScreenController
from ..picker.events import ModeChanged, SnapshotReceived
from ..session.manager import SessionManager
from .widgets.picker_view import PickerView

logger = get_logger(__name__)

# Delay before re-polling tmux after a request went out
REQUEST_SETTLE_SECONDS = 0.1


class MuxpickerApp(App):
    """Main muxpicker application."""

    TITLE = "muxpicker"
    CSS = """
    Screen {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=False),
    ]

    def __init__(
        self,
        options: PickerOptions | None = None,
        manager: SessionManager | None = None,
    ) -> None:
        super().__init__()
        self.options = options or PickerOptions()
        self.manager = manager or SessionManager(options=self.options)
        self.manager.on_quit = self.exit
        self.controller = ScreenController(self.manager, self.options)

    def compose(self) -> ComposeResult:
        yield PickerView(self.controller, id="picker")

    def on_mount(self) -> None:
        """Take a first snapshot and keep polling tmux."""
        self.query_one(PickerView).focus()
        self.theme_changed_signal.subscribe(self, self._on_theme_changed)
        self._poll_sessions()
        self.set_interval(self.options.poll_interval, self._poll_sessions)

    def _poll_sessions(self) -> None:
        """Push a fresh snapshot into the picker."""
        try:
            snapshot = self.manager.snapshot()
        except MuxpickerError as e:
            logger.error(f"Failed to refresh sessions: {e}")
            self.notify(f"Error: {e}", severity="error")
            return
        self.query_one(PickerView).feed(SnapshotReceived(snapshot))

    def on_picker_view_input_handled(self, message: PickerView.InputHandled) -> None:
        # Show the effect of a kill, rename or delete without waiting for the next poll
        self.set_timer(REQUEST_SETTLE_SECONDS, self._poll_sessions)

    def _on_theme_changed(self, theme) -> None:
        self.query_one(PickerView).feed(ModeChanged())
