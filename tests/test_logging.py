"""Tests for logging configuration."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from line_timestamps.logging import get_logger, setup_logging


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    """Provide the package logger with no handlers, restoring it afterwards."""
    logger = logging.getLogger("line_timestamps")
    saved_handlers = logger.handlers[:]
    saved_level = logger.level
    logger.handlers.clear()
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)


class TestGetLogger:
    """Tests for get_logger function."""

    def test_prefixes_component_name(self) -> None:
        """Component loggers should live under the package logger."""
        assert get_logger("store").name == "line_timestamps.store"


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_writes_component_log_file(self, package_logger: logging.Logger, tmp_path: Path) -> None:
        """Messages from any component should reach <log_dir>/<name>.log."""
        logger = setup_logging("watcher", log_dir=tmp_path / "logs", console=False)
        get_logger("store").info("Saved timestamp store: path=%s", "x.json")
        for handler in package_logger.handlers:
            handler.flush()

        assert logger.name == "line_timestamps.watcher"
        content = (tmp_path / "logs" / "watcher.log").read_text()
        assert "[INFO] line_timestamps.store: Saved timestamp store: path=x.json" in content

    def test_console_handler_is_optional(self, package_logger: logging.Logger, tmp_path: Path) -> None:
        """console=False should only attach the file handler."""
        setup_logging("cli", log_dir=tmp_path, console=False)
        assert [type(h) for h in package_logger.handlers] == [logging.FileHandler]

    def test_does_not_duplicate_handlers(self, package_logger: logging.Logger, tmp_path: Path) -> None:
        """Calling setup twice should keep a single set of handlers."""
        setup_logging("watcher", log_dir=tmp_path)
        setup_logging("watcher", log_dir=tmp_path)
        assert len(package_logger.handlers) == 2

    def test_sets_level(self, package_logger: logging.Logger, tmp_path: Path) -> None:
        """The requested level should apply to the package logger."""
        setup_logging("watcher", log_dir=tmp_path, level=logging.DEBUG, console=False)
        assert package_logger.level == logging.DEBUG
