"""
Logging Configuration
Sets up the dashboard logger. Modules log under the "pilot" namespace
(e.g. "pilot.storage") so Gradio's own loggers are left alone.
"""
import logging
import sys
from typing import Optional

LOGGER_NAME = "pilot"


def resolve_level(name: str) -> int:
    """Map a level name such as "DEBUG" to its logging constant, INFO if unknown."""
    level = logging.getLevelName((name or "").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the 'pilot' logger shared by storage and the logic modules.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to append logs to.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized.")
