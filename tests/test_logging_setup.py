"""Tests for logging configuration."""

import logging

import pytest
from rich.logging import RichHandler

from scribe.logging_setup import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def test_console_and_file_handlers(tmp_path):
    log_file = tmp_path / "logs" / "scribe.log"

    setup_logging("WARNING", log_file)

    handlers = logging.getLogger().handlers
    rich_handler = next(h for h in handlers if isinstance(h, RichHandler))
    file_handler = next(h for h in handlers if isinstance(h, logging.FileHandler))
    assert rich_handler.level == logging.WARNING
    assert file_handler.level == logging.DEBUG

    logging.getLogger("scribe.test").debug("recorder PID 42")
    file_handler.flush()
    assert "recorder PID 42" in log_file.read_text()


def test_repeated_setup_replaces_handlers(tmp_path):
    setup_logging("INFO", tmp_path / "a.log")
    setup_logging("INFO", tmp_path / "b.log")

    file_handlers = [
        h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)
    ]
    assert len(file_handlers) == 1


def test_without_log_file():
    setup_logging("ERROR")

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert handlers[0].level == logging.ERROR
