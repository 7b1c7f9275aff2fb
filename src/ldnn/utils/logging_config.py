"""
Logging configuration for LDNN.

All library modules obtain their logger through :func:`get_logger` so that
records end up under the ``ldnn`` hierarchy. Nothing is configured on import;
applications (or the CLI) call :func:`setup_logging` once.
"""

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "ldnn"

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the ``ldnn`` hierarchy.

    Args:
        name: Typically ``__name__`` of the calling module

    Returns:
        logging.Logger for ``name`` (prefixed with ``ldnn.`` if needed)
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(
    level: Union[int, str] = logging.INFO, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the ``ldnn`` root logger.

    Existing handlers are replaced so repeated calls (e.g. in notebooks)
    don't duplicate output.

    Args:
        level: Logging level, as int or name ("DEBUG", "INFO", ...)
        log_file: Optional path; log lines are appended there as well

    Returns:
        The configured ``ldnn`` logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized at level %s", logging.getLevelName(level))
    return logger
