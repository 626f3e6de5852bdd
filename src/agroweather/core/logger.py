"""
Logging for the agroweather pipeline.

The application logger writes INFO to the console and DEBUG to a log file.
Provider fetches run in worker threads, so file records carry the thread
name, and per-site messages are prefixed with the site id.
"""

import logging
import os
import time
from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .config import Config

ROOT_LOGGER_NAME = "agroweather"
DEFAULT_LOG_FILE = "logs/agroweather.log"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(levelname)s - %(threadName)s - %(filename)s:%(lineno)d - %(message)s"

AnyLogger = Union[logging.Logger, logging.LoggerAdapter]


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=DATE_FORMAT))
    return handler


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    log_file: Optional[str] = None,
    log_level: str = "INFO"
) -> logging.Logger:
    """
    Configure the application logger.

    Calling it again replaces (and closes) the previous handlers.

    Args:
        name: Logger name
        log_file: Log file path; defaults to $LOG_FILE, then logs/agroweather.log
        log_level: Threshold of the logger itself

    Returns:
        Configured logger instance
    """
    log_path = Path(log_file or os.getenv("LOG_FILE", DEFAULT_LOG_FILE))
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_handler(logging.StreamHandler(), logging.INFO, CONSOLE_FORMAT))
    logger.addHandler(_handler(
        logging.FileHandler(log_path, mode="a", encoding="utf-8"), logging.DEBUG, FILE_FORMAT
    ))
    logger.propagate = False

    return logger


def setup_logger_from_config(config: "Config") -> logging.Logger:
    """Configure the application logger from the ``logging`` config section."""
    return setup_logger(log_file=config.log_file, log_level=config.log_level)


class _SiteLoggerAdapter(logging.LoggerAdapter):

    def process(self, msg, kwargs):
        return f"[{self.extra['site_id']}] {msg}", kwargs


def get_site_logger(logger: AnyLogger, site_id: str) -> logging.LoggerAdapter:
    """Wrap a logger so every message is prefixed with the site id."""
    return _SiteLoggerAdapter(logger, {"site_id": site_id})


class LoggerContext:
    """Time an operation, logging its start and its completion or failure."""

    def __init__(self, logger: AnyLogger, operation: str, level: int = logging.INFO):
        """
        Args:
            logger: Logger (or LoggerAdapter) instance
            operation: Name of the operation being logged
            level: Level of the start/completion messages; failures log at ERROR
        """
        self.logger = logger
        self.operation = operation
        self.level = level
        self.elapsed: Optional[float] = None
        self._started = 0.0

    def __enter__(self):
        self._started = time.monotonic()
        self.logger.log(self.level, f"Starting {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed = time.monotonic() - self._started

        if exc_type is None:
            self.logger.log(self.level, f"Completed {self.operation} in {self.elapsed:.2f}s")
        else:
            self.logger.error(
                f"Failed {self.operation} after {self.elapsed:.2f}s: {exc_val}",
                exc_info=True
            )
        return False
