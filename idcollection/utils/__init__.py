"""
Utility functions for idcollection.
"""

from .validation import (
    validate_key,
    validate_field_name,
    validate_int,
)
from .logging import setup_logger, get_logger, set_level, LogContext

__all__ = [
    "validate_key",
    "validate_field_name",
    "validate_int",
    "setup_logger",
    "get_logger",
    "set_level",
    "LogContext",
]
