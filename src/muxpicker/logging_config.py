"""Logging configuration for muxpicker.

Provides a configured logger that writes to muxpicker.log under DATA_DIR.
Nothing goes to stderr while the picker owns the terminal.
"""

import logging

from .config import DATA_DIR

# Log file location
LOG_DIR = DATA_DIR
LOG_FILE = LOG_DIR / "muxpicker.log"


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Configured logger that writes to the log file
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)

        # Ensure log directory exists
        LOG_DIR.mkdir(parents=True, exist_ok=True)

        # File handler - captures everything for debugging
        file_handler = logging.FileHandler(LOG_FILE)
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)
        logger.propagate = False

    return logger


class MuxpickerError(Exception):
    """Base exception for muxpicker errors."""

    pass


class TmuxError(MuxpickerError):
    """Error related to tmux operations."""

    pass


class SessionError(MuxpickerError):
    """Error related to session records and requests."""

    pass
