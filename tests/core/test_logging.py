"""Tests for logging setup."""

import logging

from prefkit.core.config import LoggingConfig
from prefkit.core.logging import setup_logging, setup_logging_from_config


def test_console_only_by_default():
    logger = setup_logging()
    assert logger.name == "prefkit"
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.WARNING


def test_file_handler(tmp_path):
    logger = setup_logging(log_dir=tmp_path / "logs")
    logger.debug("hello")
    for handler in logger.handlers:
        handler.flush()

    files = list((tmp_path / "logs").glob("prefkit_*.log"))
    assert len(files) == 1
    assert "hello" in files[0].read_text(encoding="utf-8")
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []


def test_repeated_setup_does_not_stack_handlers():
    setup_logging()
    logger = setup_logging()
    assert len(logger.handlers) == 1


def test_from_config_levels():
    logger = setup_logging_from_config(LoggingConfig(level="info"))
    assert logger.handlers[0].level == logging.INFO

    logger = setup_logging_from_config(LoggingConfig(level="nonsense"))
    assert logger.handlers[0].level == logging.WARNING

    logger = setup_logging_from_config(LoggingConfig(), verbose=True)
    assert logger.handlers[0].level == logging.DEBUG
