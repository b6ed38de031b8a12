"""
Input validation utilities.
"""

from typing import Any, Type

from ..core.exceptions import (
    CollectionError,
    InvalidArgumentError,
    InvalidKeyError,
)


def validate_key(key: Any) -> str:
    """
    Validate an explicit collection key.

    Integers are accepted and stored in their string form, so positional
    slots and explicit numeric keys share one key space.

    Args:
        key: The key to validate

    Returns:
        The key as a string

    Raises:
        InvalidKeyError: If the key is not a string or integer
    """
    if isinstance(key, bool):
        raise InvalidKeyError(key)

    if isinstance(key, int):
        return str(key)

    if not isinstance(key, str):
        raise InvalidKeyError(key)

    return key


def validate_field_name(field: Any) -> str:
    """
    Validate an attribute name used for grouping.

    Raises:
        InvalidArgumentError: If the field is not a non-empty string
    """
    if not isinstance(field, str):
        raise InvalidArgumentError(
            "Cannot group by non-string values. Did you mean to call group()?"
        )

    if not field:
        raise InvalidArgumentError("Field name cannot be empty")

    return field


def validate_int(
    name: str,
    value: Any,
    minimum: int = 0,
    error: Type[CollectionError] = InvalidArgumentError,
) -> int:
    """
    Validate an integer argument.

    Args:
        name: Argument name for error messages
        value: The value to validate
        minimum: Smallest allowed value
        error: Exception class to raise

    Returns:
        The validated integer
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise error(f"{name} must be an integer, got {type(value).__name__}")

    if value < minimum:
        raise error(f"{name} must be at least {minimum}, got {value}")

    return value
