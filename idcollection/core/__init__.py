"""
Core components for idcollection.
"""

from .exceptions import (
    CollectionError,
    InvalidArgumentError,
    PaginationError,
    InvalidGroupValueError,
    InvalidKeyError,
    QueryError,
    InvalidFilterError,
    SerializationError,
)
from .identity import Identified, Unwrappable, is_identified, resolve_key
from .attributes import get_attribute, unwrap
from .record import Field, Record
from .store import KeyedStore
from .collection import Collection

__all__ = [
    # Members
    "Identified",
    "Unwrappable",
    "is_identified",
    "resolve_key",
    "get_attribute",
    "unwrap",
    "Field",
    "Record",
    # Containers
    "KeyedStore",
    "Collection",
    # Exceptions
    "CollectionError",
    "InvalidArgumentError",
    "PaginationError",
    "InvalidGroupValueError",
    "InvalidKeyError",
    "QueryError",
    "InvalidFilterError",
    "SerializationError",
]
