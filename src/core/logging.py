"""
QueryLens Logging Configuration

Two streams:
- the application log (console, optionally a rotating file)
- the analytics log, one line per analyzed result set, in its own
  rotating file
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from src.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ANALYTICS_LOG_FORMAT = "%(asctime)s - %(message)s"
ANALYTICS_LOGGER_NAME = "analytics"

# HTTP server/client libraries that log every request at INFO
NOISY_LOGGERS = ("uvicorn.access", "uvicorn.error", "httpx", "httpcore", "asyncio")


def create_rotating_file_handler(
    log_path: str,
    max_bytes: int = None,
    backup_count: int = None,
    level: int = logging.DEBUG,
    fmt: str = LOG_FORMAT,
) -> RotatingFileHandler:
    """
    Create a rotating file handler with size limits.

    Args:
        log_path: Path to the log file (parent directories are created)
        max_bytes: Maximum size per log file (default from settings)
        backup_count: Number of backup files to keep (default from settings)
        level: Logging level for this handler
        fmt: Record format

    Returns:
        Configured RotatingFileHandler
    """
    Path(log_path).parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes or settings.log_max_bytes,
        backupCount=backup_count or settings.log_backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    handler.setLevel(level)
    return handler


def setup_logging(log_level: str | None = None) -> None:
    """
    Configure the application log.

    Args:
        log_level: Override log level from settings
    """
    level = getattr(logging, log_level or settings.log_level)

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.StreamHandler(sys.stdout)])

    if settings.log_to_file:
        logging.getLogger().addHandler(create_rotating_file_handler(settings.log_file_path, level=level))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(
        f"QueryLens logging initialized at {logging.getLevelName(level)} level "
        f"(file: {settings.log_file_path if settings.log_to_file else 'off'})"
    )


def setup_analytics_logging(log_path: str | None = None) -> logging.Logger:
    """
    Attach the rotating analytics file to the analytics logger.

    Args:
        log_path: Analytics log file (default from settings)

    Returns:
        The analytics logger
    """
    logger = logging.getLogger(ANALYTICS_LOGGER_NAME)
    logger.setLevel(logging.INFO)

    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        logger.addHandler(
            create_rotating_file_handler(
                log_path or settings.analytics_log_file_path, level=logging.INFO, fmt=ANALYTICS_LOG_FORMAT
            )
        )

    return logger


def get_analytics_logger() -> logging.Logger:
    """Analytics logger; the file handler is attached on first use when file logging is on."""
    logger = logging.getLogger(ANALYTICS_LOGGER_NAME)

    if not logger.handlers and settings.log_to_file:
        setup_analytics_logging()

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
