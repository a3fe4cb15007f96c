"""Unit tests for logger module."""

import logging
from collections.abc import Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from ragcrawl.core.logger import LOG_FORMAT, configure_logging


@pytest.fixture(autouse=True)
def reset_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("ragcrawl")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


class TestLoggerCreation:
    """Test logger creation and handler setup."""

    def test_creates_console_and_rotating_file_handlers(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "ragcrawl.log"

        logger = configure_logging("WARNING", log_file)

        file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        console_handlers = [
            h for h in logger.handlers if not isinstance(h, RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert len(console_handlers) == 1
        assert console_handlers[0].level == logging.WARNING
        # 100MB = 104857600 bytes
        assert file_handlers[0].maxBytes == 104857600
        assert file_handlers[0].backupCount == 5
        assert log_file.parent.exists()

    def test_reconfiguring_replaces_handlers(self, tmp_path: Path) -> None:
        configure_logging("INFO", tmp_path / "a.log")
        logger = configure_logging("DEBUG", tmp_path / "b.log")

        assert len(logger.handlers) == 2

    def test_invalid_level_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging("VERBOSE", tmp_path / "x.log")


class TestLoggerFormatting:
    def test_module_loggers_write_to_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "ragcrawl.log"
        configure_logging("INFO", log_file)

        logging.getLogger("ragcrawl.crawler.crawler").debug("fetched page")
        for handler in logging.getLogger("ragcrawl").handlers:
            handler.flush()

        line = log_file.read_text().strip()
        assert "| DEBUG | ragcrawl.crawler.crawler | fetched page" in line
        assert LOG_FORMAT.startswith("%(asctime)s")
