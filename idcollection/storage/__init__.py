"""
Byte serialization for collections.

Example:
    >>> from idcollection.storage import serialize_collection, load_collection
    >>>
    >>> data = serialize_collection(books, format="json")
    >>> restored = load_collection(data, Record.from_dict, format="json")
"""

from .serialization import (
    FORMATS,
    serialize_members,
    deserialize_members,
    serialize_collection,
    load_collection,
)

__all__ = [
    "FORMATS",
    "serialize_members",
    "deserialize_members",
    "serialize_collection",
    "load_collection",
]
