"""tmux access."""

from .controller import TmuxController

__all__ = ["TmuxController"]
