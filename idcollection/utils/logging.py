"""
Logging utilities for idcollection.

Only the package logger (``idcollection``) owns a handler. Module loggers
obtained through :func:`get_logger` are its children and hand their
records up to it, so a query never prints the same line twice.
"""

import logging
import sys
from typing import Optional, Union

from ..core.exceptions import InvalidArgumentError


# Default format
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "idcollection"

# Module-level logger cache
_loggers: dict = {}


def resolve_level(level: Union[str, int]) -> int:
    """
    Turn a level name ("debug", "INFO") or number into a logging level.

    Raises:
        InvalidArgumentError: If the name is not a known level
    """
    if isinstance(level, int) and not isinstance(level, bool):
        return level

    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise InvalidArgumentError(f"Unknown log level: {level!r}")
    return value


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: Optional[Union[str, int]] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Set up and configure a logger.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            defaults to the configured ``log_level``
        format_string: Custom format string
        log_file: Optional file path for logging

    Returns:
        Configured logger
    """
    if level is None:
        from ..config import get_config
        level = get_config().log_level

    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    # Remove existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _loggers[name] = logger

    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Get a logger by name.

    Names below ``idcollection.`` return a child of the package logger
    (configured on first use) without a handler of their own. Any other
    name gets a fully configured logger.

    Args:
        name: Logger name, usually ``__name__``

    Returns:
        Logger instance
    """
    if name in _loggers:
        return _loggers[name]

    if not name.startswith(PACKAGE_LOGGER + "."):
        return setup_logger(name)

    get_logger(PACKAGE_LOGGER)
    logger = logging.getLogger(name)
    _loggers[name] = logger
    return logger


def set_level(level: Union[str, int], name: str = PACKAGE_LOGGER) -> None:
    """Change the level of a logger, by default the package logger."""
    get_logger(name).setLevel(resolve_level(level))


class LogContext:
    """
    Context manager for temporary log level changes.

    Example:
        >>> with LogContext("idcollection", "DEBUG"):
        ...     books.query({"filter": {"year": {"$gt": 1900}}})
    """

    def __init__(self, logger: Union[logging.Logger, str], level: Union[str, int]):
        if isinstance(logger, str):
            logger = get_logger(logger)
        self.logger = logger
        self.new_level = resolve_level(level)
        self.old_level = logger.level

    def __enter__(self):
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, *args):
        self.logger.setLevel(self.old_level)
