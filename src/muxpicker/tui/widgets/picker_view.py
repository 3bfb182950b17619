"""Widget that shows the picker's cell grid and feeds it input."""

from functools import lru_cache

from rich.segment import Segment
from rich.style import Style
from textual import events
from textual.message import Message
from textual.strip import Strip
from textual.widget import Widget

from ...picker.controller import ScreenController
from ...picker.events import Event, KeyPressed, MouseClicked, MouseScrolled, Resized
from ...picker.render import Canvas, Cell


@lru_cache(maxsize=256)
def _rich_style(
    fg: str | None,
    bg: str | None,
    bold: bool,
    dim: bool,
    underline: bool,
    reverse: bool,
) -> Style:
    return Style(
        color=fg,
        bgcolor=bg,
        bold=bold or None,
        dim=dim or None,
        underline=underline or None,
        reverse=reverse or None,
    )


def cell_style(cell: Cell) -> Style:
    return _rich_style(cell.fg, cell.bg, cell.bold, cell.dim, cell.underline, cell.reverse)


def cells_to_segments(cells: list[Cell]) -> list[Segment]:
    """Merge runs of equally styled cells; wide-glyph continuations are skipped."""
    segments: list[Segment] = []
    run: list[str] = []
    run_style: Style | None = None
    for cell in cells:
        if not cell.char:
            continue
        style = cell_style(cell)
        if run and style != run_style:
            segments.append(Segment("".join(run), run_style))
            run = []
        run.append(cell.char)
        run_style = style
    if run:
        segments.append(Segment("".join(run), run_style))
    return segments


class PickerView(Widget, can_focus=True):
    """Full-screen view of the picker."""

    class InputHandled(Message):
        """Posted after a key or click was handed to the controller."""

    DEFAULT_CSS = """
    PickerView {
        width: 1fr;
        height: 1fr;
    }
    """

    def __init__(self, controller: ScreenController, **kwargs) -> None:
        super().__init__(**kwargs)
        self.controller = controller
        self._canvas: Canvas | None = None

    def feed(self, event: Event) -> None:
        """Hand one event to the controller and redraw if it asks for it."""
        if self.controller.handle(event):
            self.redraw()

    def redraw(self) -> None:
        self._canvas = None
        self.refresh()

    def _current_canvas(self) -> Canvas:
        width, height = self.size.width, self.size.height
        canvas = self._canvas
        if canvas is None or canvas.rows != height or canvas.cols != width:
            canvas = self.controller.render(height, width)
            self._canvas = canvas
        return canvas

    def render_line(self, y: int) -> Strip:
        canvas = self._current_canvas()
        if y >= canvas.rows:
            return Strip.blank(self.size.width)
        return Strip(cells_to_segments(canvas.row(y)), canvas.cols)

    def on_resize(self, event: events.Resize) -> None:
        self.feed(Resized(event.size.height, event.size.width))

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()
        self.feed(KeyPressed(event.key, event.character))
        self.post_message(self.InputHandled())

    def on_click(self, event: events.Click) -> None:
        self.feed(MouseClicked(row=event.y, column=event.x))
        self.post_message(self.InputHandled())

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        self.feed(MouseScrolled(1, row=event.y, column=event.x))

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        self.feed(MouseScrolled(-1, row=event.y, column=event.x))
