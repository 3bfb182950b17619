"""Tests for logging configuration."""

import logging

from muxpicker import config, logging_config
from muxpicker.logging_config import MuxpickerError, TmuxError, get_logger


def test_log_file_in_data_dir():
    """Should keep the log next to the session records."""
    assert logging_config.LOG_FILE.parent == config.DATA_DIR
    assert logging_config.LOG_FILE.name == "muxpicker.log"


def test_logger_writes_to_file():
    """Should log to the file only."""
    logger = get_logger("muxpicker.tests.logfile")

    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.FileHandler)
    assert logger.propagate is False


def test_errors_share_base():
    """Should derive tmux errors from the package error."""
    assert issubclass(TmuxError, MuxpickerError)
