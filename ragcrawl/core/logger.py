"""Structured logging with rotation for the ragcrawl pipeline.

This module configures the ``ragcrawl`` logger hierarchy with console and
rotating file handlers. Modules log through ``logging.getLogger(__name__)`` and
inherit these handlers. Logs are human-readable with timestamp, level, module,
and message.

Examples:
    >>> from ragcrawl.core.logger import configure_logging
    >>> logger = configure_logging("DEBUG")
    >>> logger.info("Crawl started")
    2026-01-14 23:45:00,123 | INFO | ragcrawl | Crawl started
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

DEFAULT_LOG_FILE = Path(".cache/ragcrawl.log")

# Rotating file handler limits (100MB max file size, 5 backup files)
MAX_LOG_SIZE_BYTES = 100 * 1024 * 1024
BACKUP_COUNT = 5

ROOT_LOGGER_NAME = "ragcrawl"


def configure_logging(
    log_level: str = "INFO",
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure the package logger with console and rotating file handlers.

    The logger includes:
    - Console handler at the requested level, writes to stderr
    - Rotating file handler: DEBUG level, 100MB max size, 5 backups
    - Human-readable format: timestamp | level | module | message

    Args:
        log_level: Logging level as string (DEBUG, INFO, WARNING, ERROR,
            CRITICAL). Defaults to INFO.
        log_file: Optional path to log file. If None, defaults to
            .cache/ragcrawl.log. Parent directories are created automatically.

    Returns:
        The configured ``ragcrawl`` logger. Calling again reconfigures it.

    Raises:
        ValueError: If log_level is not a valid logging level name.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {log_level}")

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers to allow reconfiguration
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is None:
        log_file = DEFAULT_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_SIZE_BYTES,
        backupCount=BACKUP_COUNT,
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    return logger
