"""Session snapshots and host requests."""

from .manager import SessionManager
from .models import (
    DeadSession,
    LayoutInfo,
    PaneInfo,
    SessionInfo,
    SessionRecord,
    Snapshot,
    WindowInfo,
)

__all__ = [
    "SessionManager",
    "SessionInfo",
    "WindowInfo",
    "PaneInfo",
    "LayoutInfo",
    "DeadSession",
    "SessionRecord",
    "Snapshot",
]
