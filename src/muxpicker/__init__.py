"""Fuzzy tmux session picker."""

__version__ = "0.1.0"
