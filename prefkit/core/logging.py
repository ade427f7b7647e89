"""
Logging setup — console output plus an optional dated log file.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from prefkit.core.config import LoggingConfig


def setup_logging(
    log_dir: Path | None = None,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> logging.Logger:
    """
    Setup prefkit logging.

    Args:
        log_dir: Directory for log files. None disables the file handler.
        console_level: Minimum level for console output
        file_level: Minimum level for file output

    Returns:
        The configured "prefkit" logger
    """
    logger = logging.getLogger("prefkit")
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    logger.handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = log_dir.expanduser()
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"prefkit_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)
        logger.info(f"Logging initialized. File: {log_file}")

    return logger


def setup_logging_from_config(config: LoggingConfig, verbose: bool = False) -> logging.Logger:
    """Setup logging from a LoggingConfig; verbose forces DEBUG on the console."""
    level = logging.DEBUG if verbose else logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    log_dir = Path(config.log_dir) if config.file_enabled else None
    return setup_logging(log_dir=log_dir, console_level=level)
