"""
================================================================================
Logging Setup
================================================================================

Centralized Loguru configuration for test runs driving generated page
objects. Call ``init_logger()`` once, early (the pytest plugin does it).

Author: Automation Team
License: MIT
================================================================================
"""

import sys
from pathlib import Path

from loguru import logger

from .config_loader import ConfigLoader


DEFAULT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | "
    "{extra[panel]: <16} | {message}"
)

_logger_initialized: bool = False


def init_logger(level: str = None, format_str: str = None, config: ConfigLoader = None) -> None:
    """
    Initializes the global Loguru logger with consistent configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_str: Custom log format string. Defaults to config value.
        config: ConfigLoader to read settings from
    """
    global _logger_initialized

    if _logger_initialized:
        return

    config = config or ConfigLoader()

    log_level = level or config.get("logging.level", "INFO")
    log_format = format_str or config.get("logging.format", DEFAULT_FORMAT)

    # records outside a generated page object have no "panel" extra
    logger.configure(extra={"panel": "-"})

    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    log_file = config.get("logging.file", None)
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=log_level.upper(),
            format=log_format.replace("{level: <8}", "{level}"),
            rotation=config.get("logging.rotation", "10 MB"),
            retention=config.get("logging.retention", "7 days"),
            compression="zip",
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized at level {log_level}")


def reset_logger() -> None:
    """Allow init_logger to run again (tests)."""
    global _logger_initialized
    _logger_initialized = False


__all__ = [
    "init_logger",
    "reset_logger",
    "DEFAULT_FORMAT",
]
