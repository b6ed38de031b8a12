"""
Ordered keyed storage.

``KeyedStore`` is the plain associative container the identity-aware
:class:`~idcollection.core.collection.Collection` builds on: an
insertion-ordered mapping from string keys to members with slicing,
filtering, sorting and declarative queries. Methods that return a
collection never modify the receiver; ``set``/``unset``/``append``/
``prepend`` mutate in place and return ``self``.
"""

from __future__ import annotations

import json
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
)

from ..query.executor import QueryExecutor, filter_items, sort_items
from ..query.parser import QueryParser, parse_sort
from ..utils.validation import validate_key, validate_int
from .attributes import get_attribute
from .exceptions import InvalidKeyError

_MISSING = object()


class KeyedStore:
    """
    Insertion-ordered mapping from string keys to members.

    Example:
        >>> store = KeyedStore({"a": 1, "b": 2})
        >>> store.append(3).keys()
        ['a', 'b', '0']
        >>> store.slice(1).values()
        [2, 3]
    """

    def __init__(self, data: Optional[Dict[Any, Any]] = None):
        """
        Initialize a store.

        Args:
            data: Initial key -> member mapping (keys are validated)
        """
        self._data: Dict[str, Any] = {}
        self._next_index = 0

        if data:
            for key, value in data.items():
                self.set(key, value)

    # =========================================================================
    # BASIC ACCESS
    # =========================================================================

    def __len__(self) -> int:
        """Number of members."""
        return len(self._data)

    def __iter__(self) -> Iterator[Any]:
        """Iterate over members in insertion order."""
        return iter(list(self._data.values()))

    def __contains__(self, key: Any) -> bool:
        """Check if a key exists."""
        return isinstance(key, str) and key in self._data

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyedStore):
            return NotImplemented
        return list(self._data.items()) == list(other._data.items())

    __hash__ = None

    def count(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        return not self._data

    def is_not_empty(self) -> bool:
        return bool(self._data)

    def keys(self) -> List[str]:
        """All keys in insertion order."""
        return list(self._data.keys())

    def values(self) -> List[Any]:
        """All members in insertion order."""
        return list(self._data.values())

    def items(self) -> List[Tuple[str, Any]]:
        """All (key, member) pairs in insertion order."""
        return list(self._data.items())

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def find(self, key: str) -> Any:
        """Get a member by key (None when absent)."""
        return self._data.get(key)

    def first(self) -> Any:
        return next(iter(self._data.values()), None)

    def last(self) -> Any:
        if not self._data:
            return None
        return next(reversed(self._data.values()))

    def nth(self, n: int) -> Any:
        """Get the member at position ``n`` (None when out of range)."""
        values = self.values()
        try:
            return values[n]
        except IndexError:
            return None

    # =========================================================================
    # MUTATION (in place, returns self)
    # =========================================================================

    def set(self, key: Any, value: Any) -> KeyedStore:
        """
        Set a member at an explicit key.

        An existing key keeps its position; the value is replaced.
        """
        key = validate_key(key)
        self._data[key] = value
        if key.isascii() and key.isdigit():
            self._next_index = max(self._next_index, int(key) + 1)
        return self

    def unset(self, key: str) -> KeyedStore:
        """Remove a key if present."""
        self._data.pop(key, None)
        return self

    def next_key(self) -> str:
        """Next free positional key."""
        return str(self._next_index)

    def append(self, *args: Any) -> KeyedStore:
        """
        Append a member.

        ``append(member)`` stores it at the next positional key;
        ``append(key, member)`` stores it at ``key``.
        """
        if len(args) == 1:
            return self.set(self.next_key(), args[0])
        if len(args) == 2:
            return self.set(args[0], args[1])
        raise TypeError(f"append() takes 1 or 2 arguments ({len(args)} given)")

    def prepend(self, *args: Any) -> KeyedStore:
        """
        Prepend a member.

        Same argument shapes as :meth:`append`; the new entry goes before
        all existing entries, which keep their relative order.
        """
        if len(args) == 1:
            key, value = self.next_key(), args[0]
        elif len(args) == 2:
            key, value = validate_key(args[0]), args[1]
        else:
            raise TypeError(f"prepend() takes 1 or 2 arguments ({len(args)} given)")

        rest = [(k, v) for k, v in self._data.items() if k != key]
        self._data = {}
        self.set(key, value)
        for k, v in rest:
            self._data[k] = v
        return self

    def remove(self, key: str) -> KeyedStore:
        return self.unset(key)

    # =========================================================================
    # DERIVED COLLECTIONS (new instances)
    # =========================================================================

    def clone(self) -> KeyedStore:
        """
        Shallow copy of the store.

        The copy has the same class and carries the same instance state
        (parent, pagination, ...); members are shared, not copied.
        """
        new = self.__class__.__new__(self.__class__)
        new.__dict__.update(self.__dict__)
        new._data = dict(self._data)
        return new

    def replace_items(self, items: Iterable[Tuple[str, Any]]) -> KeyedStore:
        """Clone holding exactly ``items`` (keys kept as given)."""
        new = self.clone()
        new._data = dict(items)
        return new

    def slice(self, offset: int = 0, limit: Optional[int] = None) -> KeyedStore:
        """
        Clone holding the members in ``[offset, offset + limit)``.

        Args:
            offset: Number of members to skip
            limit: Maximum number of members (None = all remaining)
        """
        offset = validate_int("offset", offset)
        if offset == 0 and limit is None:
            return self.clone()

        items = self.items()[offset:]
        if limit is not None:
            limit = validate_int("limit", limit)
            items = items[:limit]
        return self.replace_items(items)

    def offset(self, offset: int) -> KeyedStore:
        return self.slice(offset)

    def limit(self, limit: int) -> KeyedStore:
        return self.slice(0, limit)

    def not_(self, *keys: str) -> KeyedStore:
        """Clone without the given keys."""
        new = self.clone()
        for key in keys:
            if not isinstance(key, str):
                raise InvalidKeyError(key)
            new._data.pop(key, None)
        return new

    def filter(self, fn: Callable[[Any], Any]) -> KeyedStore:
        """Clone holding the members for which ``fn(member)`` is truthy."""
        return self.replace_items((k, v) for k, v in self._data.items() if fn(v))

    def filter_by(self, *args: Any) -> KeyedStore:
        """
        Filter members by a condition.

        Accepted shapes: ``filter_by(predicate)``, ``filter_by(filter)``,
        ``filter_by({"field": value})``, ``filter_by(field, value)`` and
        ``filter_by(field, operator, value)``.
        """
        condition = QueryParser().parse_condition(*args)
        return self.replace_items(filter_items(self.items(), condition))

    def sort_by(self, *args: Any) -> KeyedStore:
        """
        Sort members by one or more attributes.

        Example:
            >>> store.sort_by("year", "desc", "title")
            >>> store.sort_by("year desc, title")
        """
        if args and all(isinstance(arg, str) for arg in args):
            spec = " ".join(args)
        else:
            spec = list(args)
        return self.replace_items(sort_items(self.items(), parse_sort(spec)))

    def pluck(self, field: str, unique: bool = False) -> List[Any]:
        """Collect one attribute from every member."""
        values = [get_attribute(member, field) for member in self._data.values()]
        if not unique:
            return values
        seen: List[Any] = []
        for value in values:
            if value not in seen:
                seen.append(value)
        return seen

    def query(self, query: Optional[Dict[str, Any]] = None) -> KeyedStore:
        """
        Run filter, sort, not, offset and limit from a query descriptor.

        Args:
            query: Query descriptor (see :class:`~idcollection.query.QueryParser`)

        Returns:
            New collection with the result
        """
        return QueryExecutor(self).execute(query)

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_dict(self, map_fn: Optional[Callable[[Any], Any]] = None) -> Dict[str, Any]:
        """Ordered ``{key: value}`` mapping, optionally mapped per member."""
        if map_fn is None:
            return dict(self._data)
        return {key: map_fn(value) for key, value in self._data.items()}

    def to_list(self, map_fn: Optional[Callable[[Any], Any]] = None) -> List[Any]:
        return list(self.to_dict(map_fn).values())

    def to_json(self, map_fn: Optional[Callable[[Any], Any]] = None, **kwargs: Any) -> str:
        """JSON string of :meth:`to_dict`."""
        return json.dumps(self.to_dict(map_fn), **kwargs)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(count={len(self)}, keys={self.keys()[:5]})"
