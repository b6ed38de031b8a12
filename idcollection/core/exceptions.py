"""
Custom exceptions for idcollection.
"""

from typing import Any, Optional


class CollectionError(Exception):
    """Base exception for idcollection."""
    pass


class InvalidArgumentError(CollectionError):
    """An argument has an unsupported shape or type."""
    pass


class PaginationError(InvalidArgumentError):
    """Invalid pagination limit or page."""
    pass


class InvalidGroupValueError(CollectionError):
    """A member has no usable value to group by."""

    def __init__(self, key: str, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"Invalid grouping value for key: {key}")


class InvalidKeyError(CollectionError):
    """A collection key cannot be derived from the given value."""

    def __init__(self, value: Any, message: Optional[str] = None):
        self.value = value
        super().__init__(
            message
            or f"Cannot derive a collection key from {type(value).__name__}: {value!r}"
        )


class QueryError(CollectionError):
    """Error related to query descriptors."""
    pass


class InvalidFilterError(QueryError):
    """Malformed filter or sort clause."""
    pass


class SerializationError(CollectionError):
    """Error during serialization/deserialization."""
    pass
