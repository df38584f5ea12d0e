"""Logging configuration and utilities."""
from __future__ import annotations

import logging
import os


class _LoggingState:
    """
    Module-level logging state container.

    Tracks whether the root logger has been configured.
    """

    configured: bool = False

    def reset(self) -> None:
        """Reset state for testing."""
        self.configured = False


_state = _LoggingState()


class ColorFormatter(logging.Formatter):
    """
    Adds terminal colours to level names.
    Behaves like a plain Formatter but swaps record.levelname while formatting.
    """

    RESET = "\033[0m"
    COLORS = {
        "DEBUG": "\033[36m",  # cyan
        "INFO": "\033[32m",  # green
        "WARNING": "\033[33m",  # yellow
        "ERROR": "\033[31m",  # red
        "CRITICAL": "\033[35m",  # magenta
    }

    def format(self, record: logging.LogRecord) -> str:
        original_levelname = record.levelname
        color = self.COLORS.get(original_levelname, "")
        if color:
            record.levelname = f"{color}{original_levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname


def _resolve_level(default_level: int) -> int:
    level_name = os.getenv("LOG_LEVEL", "").upper()
    if not level_name:
        return default_level
    level = getattr(logging, level_name, default_level)
    if not isinstance(level, int):
        return default_level
    # DEBUG is only honoured outside production
    if os.getenv("ENV", "dev").lower() in {"prod", "production"}:
        level = max(level, logging.INFO)
    return level


def setup_logging(default_level: int = logging.INFO) -> None:
    """
    Configure the single root logger for the whole package.
    Called once; every other logger reuses its format and handlers.
    """
    root_logger = logging.getLogger()
    # pytest may strip handlers between tests; reconfigure then
    if _state.configured and root_logger.handlers:
        return

    level = _resolve_level(default_level)
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    formatter = ColorFormatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    _state.configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    setup_logging()
    return logging.getLogger(name)
