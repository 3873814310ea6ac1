"""Logging configuration for junctools.

Junction records are written to standard output by default, so every
handler configured here writes to standard error or a file.

Example:
    >>> from junctools.utils.logging import setup_logging, get_logger
    >>> setup_logging(verbosity=2)
    >>> logger = get_logger(__name__)
    >>> logger.info("Processing started")
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

# =============================================================================
# Constants
# =============================================================================

# Default log format
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Rich console format (when using rich handler)
RICH_FORMAT = "%(message)s"

# Log levels by verbosity
VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


# =============================================================================
# Setup Functions
# =============================================================================


def setup_logging(
    verbosity: int = 1,
    log_file: Path | str | None = None,
    use_rich: bool = True,
) -> logging.Logger:
    """Configure logging for junctools.

    Args:
        verbosity: Verbosity level (0=warning, 1=info, 2=debug).
        log_file: Optional file to log to.
        use_rich: Use rich for console output.

    Returns:
        The configured ``junctools`` package logger.
    """
    level = VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)

    logger = logging.getLogger("junctools")
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    if use_rich:
        console_handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=False,
            show_path=False,
        )
        console_handler.setFormatter(logging.Formatter(RICH_FORMAT))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))

    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        file_handler.setLevel(logging.DEBUG)  # Always log debug to file
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module.

    Args:
        name: Module name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


# =============================================================================
# Progress Logging
# =============================================================================


class ProgressLogger:
    """Periodic progress messages for a stream of unknown length.

    Example:
        >>> progress = ProgressLogger(logger, interval=1_000_000)
        >>> for read in reads:
        ...     process(read)
        ...     progress.update()
        >>> progress.finish()
    """

    def __init__(
        self,
        logger: logging.Logger,
        interval: int = 1_000_000,
        description: str = "Processed",
        unit: str = "alignments",
    ) -> None:
        self.logger = logger
        self.interval = interval
        self.description = description
        self.unit = unit
        self.count = 0

    def update(self, n: int = 1) -> None:
        """Advance the counter, logging each time an interval is crossed."""
        before = self.count // self.interval
        self.count += n
        if self.count // self.interval > before:
            self.logger.info(f"{self.description} {self.count:,} {self.unit}")

    def finish(self) -> None:
        """Log the final count."""
        self.logger.info(f"{self.description} {self.count:,} {self.unit} (done)")


# =============================================================================
# Timing Utilities
# =============================================================================


class Timer:
    """Context manager for timing operations.

    Example:
        >>> with Timer("Junction extraction", logger):
        ...     extractor.run()
        # Logs: "Junction extraction completed in 1.23s"
    """

    def __init__(self, description: str, logger: logging.Logger) -> None:
        self.description = description
        self.logger = logger
        self.start_time: float = 0
        self.elapsed: float = 0

    def __enter__(self) -> Timer:
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.elapsed = time.perf_counter() - self.start_time
        self.logger.info(f"{self.description} completed in {self.elapsed:.2f}s")
