"""
Serialization utilities for idcollection.

Provides byte encodings of a collection's ``to_dict()`` output:
- msgpack (compact, default)
- JSON (UTF-8, human readable)

Only the ordered ``{key: value}`` data is encoded; rebuilding members from
it is up to the caller (see :func:`load_collection`).
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Optional

import msgpack

from ..core.collection import Collection
from ..core.exceptions import SerializationError
from ..utils.logging import get_logger

logger = get_logger(__name__)

FORMATS = ("msgpack", "json")


def _check_format(format: str) -> str:
    format = format.lower()
    if format not in FORMATS:
        raise SerializationError(
            f"Unsupported format: {format}. Supported: {', '.join(FORMATS)}"
        )
    return format


def serialize_members(members: Dict[str, Any], format: str = "msgpack") -> bytes:
    """
    Serialize an ordered key -> value mapping.

    Args:
        members: Mapping produced by ``Collection.to_dict()``
        format: "msgpack" or "json"

    Returns:
        Encoded bytes

    Raises:
        SerializationError: If a value cannot be encoded
    """
    format = _check_format(format)

    try:
        if format == "msgpack":
            return msgpack.packb(members, use_bin_type=True)
        return json.dumps(members).encode("utf-8")
    except (TypeError, ValueError, OverflowError) as e:
        raise SerializationError(f"Cannot serialize members as {format}: {e}") from e


def deserialize_members(data: bytes, format: str = "msgpack") -> Dict[str, Any]:
    """
    Deserialize bytes produced by :func:`serialize_members`.

    Raises:
        SerializationError: If the data cannot be decoded or is not a mapping
    """
    format = _check_format(format)

    if not data:
        return {}

    try:
        if format == "msgpack":
            result = msgpack.unpackb(data, raw=False)
        else:
            result = json.loads(data.decode("utf-8"))
    except (ValueError, TypeError, UnicodeDecodeError, msgpack.ExtraData) as e:
        raise SerializationError(f"Cannot deserialize {format} data: {e}") from e

    if not isinstance(result, dict):
        raise SerializationError(
            f"Expected a mapping of members, got {type(result).__name__}"
        )

    return result


def serialize_collection(
    collection: Collection,
    map_fn: Optional[Callable[[Any], Any]] = None,
    format: str = "msgpack",
) -> bytes:
    """
    Serialize a collection.

    Args:
        collection: Collection to encode
        map_fn: Optional per-member mapping passed to ``to_dict()``
        format: "msgpack" or "json"

    Returns:
        Encoded bytes
    """
    data = serialize_members(collection.to_dict(map_fn), format)
    logger.debug(f"Serialized {len(collection)} members as {format} ({len(data)} bytes)")
    return data


def load_collection(
    data: bytes,
    member_factory: Optional[Callable[[Any], Any]] = None,
    format: str = "msgpack",
    parent: Any = None,
) -> Collection:
    """
    Rebuild a collection from serialized bytes.

    Keys are kept as stored. ``member_factory`` turns each decoded value
    back into a member, e.g. ``Record.from_dict``.

    Example:
        >>> data = serialize_collection(books)
        >>> load_collection(data, Record.from_dict) == books
        True
    """
    members = deserialize_members(data, format)
    if member_factory is not None:
        members = {key: member_factory(value) for key, value in members.items()}
    return Collection(members, parent=parent)
