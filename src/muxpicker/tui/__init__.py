"""Textual front end."""

from .app import MuxpickerApp

__all__ = ["MuxpickerApp"]
