"""
Logging configuration for soundcloud-client.

The library itself only obtains loggers through get_logger() and never
configures handlers; applications (and the bundled CLI) call
setup_logging() once at startup.

Outputs:
    - Console: colored, compact, tqdm-compatible (progress bars stay intact)
    - Log file (optional): every record with timestamp and logger name

Usage:
    from soundcloud_client.core.logger import setup_logging, get_logger

    setup_logging("DEBUG")            # Call once at startup
    logger = get_logger(__name__)     # Get logger for each module

    logger.info("Resolving URL")
"""

import logging
import sys
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Root of every logger created by this package
PACKAGE_LOGGER = "soundcloud_client"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that prefixes each message with a colored level name.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        return f"{color}{record.levelname}{Colors.RESET}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes through tqdm.write().

    Plain stderr writes corrupt an active tqdm bar (the CLI shows one while
    downloading); tqdm.write() prints the message above the bar instead.

    Attributes:
        stream: The output stream, or None for the current sys.stderr.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


def setup_logging(level: str | int = "INFO", log_file: Path | None = None) -> None:
    """
    Configure logging for the package.

    Args:
        level: Console level name ("DEBUG", "INFO", ...) or numeric level.
        log_file: Optional path of a file receiving every record at DEBUG
                  level. Parent directories are created.

    Behavior:
        1. Set the package logger level to DEBUG and remove old handlers
        2. Add a TqdmLoggingHandler with ColoredConsoleFormatter at `level`
        3. If log_file is given, add a UTF-8 FileHandler at DEBUG

    Thread Safety:
        Not thread-safe. Call once from the main thread.
    """
    if isinstance(level, str):
        numeric_level = logging.getLevelName(level.upper())
        if not isinstance(numeric_level, int):
            raise ValueError(f"Unknown log level: {level}")
        level = numeric_level

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(logging.DEBUG)
    package_logger.propagate = False

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredConsoleFormatter())
    package_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
        package_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.
              This creates a hierarchy like 'soundcloud_client.api.client'.

    Returns:
        logging.Logger: A logger configured by setup_logging(), or silent
        (no handlers) if setup_logging() was never called.
    """
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Flush, close and detach every handler installed by setup_logging()."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in package_logger.handlers[:]:
        handler.flush()
        handler.close()
        package_logger.removeHandler(handler)
