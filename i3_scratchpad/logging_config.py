"""Logging configuration for i3-scratchpad.

Logging is off unless asked for: I3_SCRATCHPAD_LOGS_LEVEL enables a log
file, --verbose mirrors records to stderr. Components never reach for a
global logger; they receive one through their constructor and fall back to
null_logger() when none is given.
"""

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional


LOGGER_NAME = "i3_scratchpad"

DEFAULT_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEBUG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"

# WARN is the spelling used by the environment variable
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        """Format log record with colors."""
        original = record.levelname
        if original in self.COLORS:
            record.levelname = f"{self.COLORS[original]}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def null_logger() -> logging.Logger:
    """Logger that discards everything.

    Default for components constructed without a logger, so tests and
    library callers never write to a shared sink by accident.
    """
    logger = logging.getLogger(f"{LOGGER_NAME}.null")
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    logger.propagate = False
    logger.setLevel(logging.CRITICAL + 1)
    return logger


def setup_logging(
    level: Optional[str] = None,
    log_path: Optional[Path] = None,
    verbose: bool = False,
) -> logging.Logger:
    """Configure the i3_scratchpad logger.

    Args:
        level: DEBUG, INFO, WARN or ERROR for the log file; None disables it
        log_path: Log file path, used only when level is set
        verbose: Also log INFO and above (DEBUG with level=DEBUG) to stderr

    Returns:
        Configured logger instance

    Examples:
        >>> logger = setup_logging("INFO", Path("/tmp/i3-scratchpad.log"))
        >>> logger.info("Moved window 94")
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Remove existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    file_level = LEVELS.get(level.upper()) if level else None

    if file_level is None and not verbose:
        logger.addHandler(logging.NullHandler())
        logger.setLevel(logging.CRITICAL + 1)
        return logger

    levels = []

    if file_level is not None and log_path is not None:
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(
            logging.Formatter(DEBUG_FORMAT if file_level == logging.DEBUG else FILE_FORMAT)
        )
        logger.addHandler(file_handler)
        levels.append(file_level)

    if verbose:
        stream_level = logging.DEBUG if file_level == logging.DEBUG else logging.INFO
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(stream_level)

        # Use colored formatter if terminal supports it
        if sys.stderr.isatty():
            handler.setFormatter(ColoredFormatter(DEFAULT_FORMAT))
        else:
            handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        logger.addHandler(handler)
        levels.append(stream_level)

    logger.setLevel(min(levels) if levels else logging.CRITICAL + 1)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger below the i3_scratchpad namespace.

    Args:
        name: Child name, e.g. "querier"

    Returns:
        Logger instance
    """
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


@contextmanager
def log_timing(operation: str, logger: logging.Logger):
    """Context manager for logging operation timing.

    Args:
        operation: Operation description
        logger: Logger instance

    Examples:
        >>> with log_timing("show", logger):
        ...     orchestrator.show("firefox", [])
        DEBUG: show completed in 15.32ms
    """
    start = time.perf_counter()
    logger.debug(f"Starting: {operation}")

    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(f"{operation} completed in {elapsed_ms:.2f}ms")
