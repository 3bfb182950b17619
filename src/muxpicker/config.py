"""Configuration constants, paths and runtime options."""

from pathlib import Path

from pydantic import BaseModel, Field

# Base directory for all muxpicker data
DATA_DIR = Path.home() / ".muxpicker"
RECORDS_DIR = DATA_DIR / "sessions"
LAYOUTS_DIR = Path.home() / ".config" / "muxpicker" / "layouts"

# Layout files picked up from the layouts directory
LAYOUT_SUFFIXES = (".sh", ".tmux")

# tmux sockets are unix domain sockets; longer names break the socket path
MAX_SESSION_NAME_BYTES = 108

# How often the host is polled for a fresh session snapshot
POLL_INTERVAL_SECONDS = 1.0


class PickerOptions(BaseModel):
    """Options chosen on the command line."""

    welcome_screen: bool = False
    forbidden_patterns: list[str] = Field(default_factory=list)
    layouts_dir: Path = LAYOUTS_DIR
    poll_interval: float = Field(default=POLL_INTERVAL_SECONDS, gt=0)


def ensure_dirs() -> None:
    """Create required directories if they don't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    RECORDS_DIR.mkdir(parents=True, exist_ok=True)
