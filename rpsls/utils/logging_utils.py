"""
Logging Utilities

Logging setup for the sign detector. Handlers are attached to the
``rpsls`` package logger, so an application embedding the detector
keeps control of its own root logger.

Usage:
    from rpsls.utils.logging_utils import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__)
    logger.info("Processing started")
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence
from datetime import datetime

PACKAGE_LOGGER = 'rpsls'

# MediaPipe and its absl backend log model loading at INFO on every start
NOISY_LOGGERS = ('absl', 'mediapipe')

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    quiet_loggers: Sequence[str] = NOISY_LOGGERS
) -> logging.Logger:
    """
    Set up logging for the detector.

    Safe to call more than once: handlers from an earlier call are
    closed and replaced.

    Args:
        level: Logging level (e.g., logging.INFO, logging.DEBUG)
        log_file: Optional file path for logging output
        format_string: Custom format string
        quiet_loggers: Third-party loggers capped at WARNING

    Returns:
        The package logger
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return package_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the package namespace.

    Names outside the package (scripts, ``__main__``) are nested under
    ``rpsls`` so that ``setup_logging`` reaches them too.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


class ProgressLogger:
    """Logs frame-rate and progress during long video runs."""

    def __init__(
        self,
        name: str,
        total: Optional[int] = None,
        log_interval: int = 100
    ):
        """
        Args:
            name: Logger name
            total: Total number of frames (None for open-ended streams)
            log_interval: How often to log progress
        """
        self.logger = get_logger(name)
        self.total = total
        self.log_interval = log_interval
        self.current = 0
        self.start_time = None

    def start(self):
        self.start_time = datetime.now()
        if self.total:
            self.logger.info(f"Starting processing of {self.total} frames")
        else:
            self.logger.info("Starting processing")

    def update(self, n: int = 1):
        self.current += n

        if self.current % self.log_interval != 0 and self.current != self.total:
            return

        elapsed = (datetime.now() - self.start_time).total_seconds()
        rate = self.current / elapsed if elapsed > 0 else 0

        if self.total:
            self.logger.info(
                f"Progress: {self.current}/{self.total} "
                f"({100 * self.current / self.total:.1f}%) - {rate:.1f} fps"
            )
        else:
            self.logger.info(f"Progress: {self.current} frames - {rate:.1f} fps")

    def finish(self):
        elapsed = (datetime.now() - self.start_time).total_seconds()
        rate = self.current / elapsed if elapsed > 0 else 0
        self.logger.info(
            f"Completed {self.current} frames in {elapsed:.1f}s ({rate:.1f} fps)"
        )
