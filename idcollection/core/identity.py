"""
Identity resolution for collection members.

A member is *identified* when it exposes a callable ``id()``; its key is
``str(member.id())``. Plain strings are already keys. Everything else
has no key and is stored positionally by the collection.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from .exceptions import InvalidKeyError


@runtime_checkable
class Identified(Protocol):
    """Member that supplies its own collection key."""

    def id(self) -> Any:
        ...


@runtime_checkable
class Unwrappable(Protocol):
    """Boxed scalar that holds a raw underlying value."""

    def unwrap(self) -> Any:
        ...


def is_identified(value: Any) -> bool:
    """Check whether ``value`` exposes a callable ``id()``."""
    if isinstance(value, type):
        return False
    return callable(getattr(value, "id", None))


def resolve_key(value: Any) -> str:
    """
    Resolve the collection key of a value.

    Args:
        value: A key string or an identified member

    Returns:
        The key

    Raises:
        InvalidKeyError: If no key can be derived (collections included,
            they hold many keys and callers expand them)
    """
    # imported here to avoid a cycle with store.py
    from .store import KeyedStore

    if isinstance(value, KeyedStore):
        raise InvalidKeyError(value, "A collection has no single key")

    if is_identified(value):
        return str(value.id())

    if isinstance(value, str):
        return value

    raise InvalidKeyError(value)
