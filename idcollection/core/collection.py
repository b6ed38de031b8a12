"""
Identity-aware collection.

A Collection is a :class:`KeyedStore` that derives keys from its members:
members exposing ``id()`` are stored under ``str(member.id())``, anything
else gets the next positional key. On top of the store it adds grouping,
text search, pagination and the combined query pipeline.
"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Union,
)

from ..config import get_config
from ..pagination import Pagination
from ..search import Search
from ..utils.logging import get_logger
from ..utils.validation import validate_field_name
from .exceptions import (
    InvalidArgumentError,
    InvalidFilterError,
    InvalidGroupValueError,
    InvalidKeyError,
)
from .identity import is_identified, resolve_key
from .attributes import get_attribute
from .store import KeyedStore

logger = get_logger(__name__)


class Collection(KeyedStore):
    """
    Ordered collection of identified or anonymous members.

    Example:
        >>> books = Collection([
        ...     Record("dune", {"title": "Dune", "genre": "SciFi"}),
        ...     Record("emma", {"title": "Emma", "genre": "Classic"}),
        ... ])
        >>> books.has("dune")
        True
        >>> books.group_by("genre").keys()
        ['scifi', 'classic']
        >>> books.query({"filter": {"genre": "Classic"}, "sort": "title"}).keys()
        ['emma']
    """

    # name -> callable(collection, *args), see register_method()
    _methods: Dict[str, Callable[..., Any]] = {}

    def __init__(
        self,
        members: Union[Iterable[Any], Mapping[Any, Any]] = (),
        parent: Any = None,
    ):
        """
        Initialize a collection.

        Args:
            members: Members to add, or a key -> member mapping whose keys
                are kept as given
            parent: Owning object (referenced, never copied)
        """
        self._parent = parent
        self.pagination = None

        if isinstance(members, Mapping):
            super().__init__(members)
        else:
            super().__init__()
            for member in members:
                self.add(member)

    @property
    def parent(self) -> Any:
        """Owning object of the collection (None when detached)."""
        return self._parent

    # =========================================================================
    # MUTATION (in place, returns self)
    # =========================================================================

    def add(self, value: Any) -> Collection:
        """
        Add a member, a key-derived entry, or a whole collection.

        - a collection of the same kind: its entries are merged as they
          are stored there, later entries win on key collisions
        - an identified member: stored under ``str(value.id())``
        - anything else: appended at the next positional key

        Returns:
            self
        """
        if isinstance(value, type(self)):
            self._data.update(value._data)
            self._next_index = max(self._next_index, value._next_index)
            logger.debug(f"Merged {len(value)} members into collection ({len(self)} total)")
        elif is_identified(value):
            self.set(resolve_key(value), value)
        else:
            super().append(value)

        return self

    def append(self, *args: Any) -> Collection:
        """
        Append a member at the end.

        ``append(member)`` uses the member's own key when it is identified
        and the next positional key otherwise; ``append(key, member)``
        stores it under ``key``. An existing key keeps its position.
        """
        if len(args) == 1 and is_identified(args[0]):
            return super().append(resolve_key(args[0]), args[0])
        return super().append(*args)

    def prepend(self, *args: Any) -> Collection:
        """
        Insert a member in front of all others.

        Same argument shapes as :meth:`append`. An existing key is moved to
        the front with its new value.
        """
        if len(args) == 1 and is_identified(args[0]):
            return super().prepend(resolve_key(args[0]), args[0])
        return super().prepend(*args)

    def remove(self, key: Any) -> Collection:
        """
        Remove a member by key or by member.

        Raises:
            InvalidKeyError: If no key can be derived from ``key``
        """
        return self.unset(resolve_key(key))

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def has(self, key: Any) -> bool:
        """
        Check whether a key or member is present.

        Raises:
            InvalidKeyError: If no key can be derived from ``key``
        """
        return resolve_key(key) in self._data

    def __contains__(self, key: Any) -> bool:
        try:
            return self.has(key)
        except InvalidKeyError:
            return False

    def index_of(self, key: Any) -> int:
        """
        Position of a key or member, or -1 when it is not present.

        Raises:
            InvalidKeyError: If no key can be derived from ``key``
        """
        key = resolve_key(key)
        try:
            return self.keys().index(key)
        except ValueError:
            return -1

    def not_(self, *items: Any) -> Collection:
        """
        Copy of the collection without the given entries.

        Items may be keys, identified members or collections (whose keys
        are all excluded). The receiver is left untouched.

        Example:
            >>> books.not_("dune", emma).count()
            0
        """
        result = self.clone()
        for key in self._exclusion_keys(items):
            result._data.pop(key, None)
        return result

    def _exclusion_keys(self, items: Iterable[Any]) -> List[str]:
        keys: List[str] = []
        for item in items:
            if isinstance(item, KeyedStore):
                keys.extend(item.keys())
            else:
                keys.append(resolve_key(item))
        return keys

    # =========================================================================
    # GROUPING
    # =========================================================================

    def group_by(self, field: str, case_insensitive: Optional[bool] = None) -> Collection:
        """
        Group members by the value of one attribute.

        Args:
            field: Attribute name or dotted path
            case_insensitive: Fold group keys to lower case (default from
                settings, on out of the box)

        Returns:
            Collection of group key -> sub-collection, groups in first-seen
            order, members keeping their keys and relative order

        Raises:
            InvalidArgumentError: If ``field`` is not a string
            InvalidGroupValueError: If a member has an empty value
        """
        field = validate_field_name(field)
        if case_insensitive is None:
            case_insensitive = get_config().group_case_insensitive

        return self._group(lambda member: get_attribute(member, field), case_insensitive)

    def group(self, fn: Callable[[Any], Any]) -> Collection:
        """
        Group members by the key returned from ``fn(member)``.

        Raises:
            InvalidArgumentError: If ``fn`` is not callable
            InvalidGroupValueError: If ``fn`` returns an empty value
        """
        if not callable(fn):
            raise InvalidArgumentError(
                f"group() expects a callable, got {type(fn).__name__}"
            )
        return self._group(fn, case_insensitive=False)

    def _group(self, key_fn: Callable[[Any], Any], case_insensitive: bool) -> Collection:
        groups: Dict[str, Collection] = {}

        for key, member in self._data.items():
            value = key_fn(member)
            if not value:
                raise InvalidGroupValueError(key)

            group_key = str(value)
            if case_insensitive:
                group_key = group_key.lower()

            if group_key not in groups:
                groups[group_key] = type(self)(parent=self.parent)
            groups[group_key].set(key, member)

        return Collection(groups, parent=self.parent)

    # =========================================================================
    # QUERY PIPELINE
    # =========================================================================

    def query(self, query: Optional[Dict[str, Any]] = None) -> Collection:
        """
        Run a full query descriptor.

        ``filter``, ``sort``, ``not``, ``offset`` and ``limit`` run first
        (in that order), then ``search`` and finally ``paginate``.

        Example:
            >>> books.query({
            ...     "filter": {"year": {"$gte": 1900}},
            ...     "search": "dune",
            ...     "paginate": {"limit": 10, "page": 1},
            ... })
        """
        if query is not None and not isinstance(query, Mapping):
            raise InvalidFilterError(
                f"Query descriptor must be a dictionary, got {type(query).__name__}"
            )

        query = dict(query or {})
        paginate = query.pop("paginate", None)
        search = query.pop("search", None)

        result = super().query(query)

        if search:
            if isinstance(search, Mapping):
                result = result.search(search.get("query"), search.get("options"))
            else:
                result = result.search(search)

        if paginate:
            if isinstance(paginate, Mapping):
                result = result.paginate(paginate)
            elif isinstance(paginate, (list, tuple)):
                result = result.paginate(*paginate)
            elif isinstance(paginate, int) and not isinstance(paginate, bool):
                result = result.paginate(paginate)
            else:
                raise InvalidArgumentError(
                    f"Invalid paginate clause: {paginate!r}"
                )

        return result

    def search(self, query: Optional[str] = None, options: Optional[Dict[str, Any]] = None) -> Collection:
        """
        Full-text search, best matches first.

        Args:
            query: Search text (empty returns an unfiltered copy)
            options: ``fields``, ``score``, ``min_length``, ``words``
        """
        return Search.collection(self, query, options)

    def paginate(self, *args: Any) -> Collection:
        """
        Slice out one page and remember the page window.

        Accepts ``()``, ``(limit)``, ``(limit, page)``, ``(params)`` or
        ``(limit, params)``. The :class:`Pagination` is stored on the
        receiver and on the returned page as ``pagination``.

        Raises:
            PaginationError: On invalid limit/page or a page out of range
        """
        self.pagination = Pagination.for_collection(self, *args)
        logger.debug(
            f"Paginating {self.pagination.total} members: page "
            f"{self.pagination.page}/{self.pagination.last_page}"
        )
        return self.slice(self.pagination.offset, self.pagination.limit)

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_dict(self, map_fn: Optional[Callable[[Any], Any]] = None) -> Dict[str, Any]:
        """
        Ordered ``{key: value}`` representation.

        Without ``map_fn`` members with their own ``to_dict()`` (records,
        nested collections) are converted through it, dicts are copied and
        everything else is returned as is.
        """
        return super().to_dict(map_fn or _member_to_dict)

    # =========================================================================
    # EXTENSION METHODS
    # =========================================================================

    @classmethod
    def register_method(cls, name: str, fn: Callable[..., Any]) -> None:
        """
        Register an extension method.

        The method is available on ``cls`` and its subclasses and is
        called as ``fn(collection, *args, **kwargs)``.

        Example:
            >>> Collection.register_method("titles", lambda c: c.pluck("title"))
            >>> books.titles()
            ['Dune', 'Emma']
        """
        if not isinstance(name, str) or not name or name.startswith("_"):
            raise InvalidArgumentError(f"Invalid method name: {name!r}")
        if not callable(fn):
            raise InvalidArgumentError(f"Method '{name}' must be callable")

        # per-class table, lookups walk the MRO
        if "_methods" not in cls.__dict__:
            cls._methods = {}
        cls._methods[name] = fn

    @classmethod
    def has_method(cls, name: str) -> bool:
        for klass in cls.__mro__:
            if name in klass.__dict__.get("_methods", {}):
                return True
        return False

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        for klass in type(self).__mro__:
            fn = klass.__dict__.get("_methods", {}).get(name)
            if fn is not None:
                return lambda *args, **kwargs: fn(self, *args, **kwargs)

        raise AttributeError(
            f"'{type(self).__name__}' object has no attribute '{name}'"
        )


def _member_to_dict(member: Any) -> Any:
    if callable(getattr(member, "to_dict", None)) and not isinstance(member, type):
        return member.to_dict()
    if isinstance(member, dict):
        return dict(member)
    return member
