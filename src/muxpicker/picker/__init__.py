"""Picker core: search, selection, rendering and the screen state machine."""
