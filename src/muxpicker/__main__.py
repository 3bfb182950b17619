"""Entry point for muxpicker."""

import argparse
from pathlib import Path

from .config import LAYOUTS_DIR, POLL_INTERVAL_SECONDS, PickerOptions
from .tui import MuxpickerApp


def parse_options(argv: list[str] | None = None) -> PickerOptions:
    """Build picker options from command line arguments."""
    parser = argparse.ArgumentParser(
        prog="muxpicker",
        description="Browse, create and resurrect tmux sessions",
    )
    parser.add_argument(
        "--welcome",
        action="store_true",
        help="Start on the welcome screen and hide the current session",
    )
    parser.add_argument(
        "--forbid",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Glob of session names that are listed but cannot be switched to (repeatable)",
    )
    parser.add_argument(
        "--layouts",
        type=Path,
        default=LAYOUTS_DIR,
        metavar="DIR",
        help=f"Directory of layout scripts (default: {LAYOUTS_DIR})",
    )
    parser.add_argument(
        "--poll",
        type=float,
        default=POLL_INTERVAL_SECONDS,
        metavar="SECONDS",
        help=f"Session refresh interval (default: {POLL_INTERVAL_SECONDS})",
    )
    args = parser.parse_args(argv)
    return PickerOptions(
        welcome_screen=args.welcome,
        forbidden_patterns=args.forbid,
        layouts_dir=args.layouts.expanduser(),
        poll_interval=args.poll,
    )


def main() -> None:
    """Run the muxpicker TUI."""
    app = MuxpickerApp(parse_options())
    app.run()


if __name__ == "__main__":
    main()
