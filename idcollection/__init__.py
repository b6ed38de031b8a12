"""
idcollection - identity-aware ordered collections with declarative queries.

Example:
    >>> from idcollection import Collection, Record
    >>>
    >>> # Members with an id() are keyed by it
    >>> books = Collection([
    ...     Record("dune", {"title": "Dune", "genre": "SciFi", "year": 1965}),
    ...     Record("emma", {"title": "Emma", "genre": "Classic", "year": 1815}),
    ... ])
    >>>
    >>> # Group, query, search and paginate
    >>> books.group_by("genre").keys()
    ['scifi', 'classic']
    >>> books.query({"filter": {"year": {"$gt": 1900}}, "search": "dune"}).keys()
    ['dune']
    >>> page = books.paginate(1, 2)
    >>> page.pagination.has_prev_page
    True
"""

from .core import (
    # Main classes
    Collection,
    KeyedStore,
    Record,
    Field,
    # Identity
    Identified,
    Unwrappable,
    is_identified,
    resolve_key,
    get_attribute,
    unwrap,
    # Exceptions
    CollectionError,
    InvalidArgumentError,
    PaginationError,
    InvalidGroupValueError,
    InvalidKeyError,
    QueryError,
    InvalidFilterError,
    SerializationError,
)

from .query import (
    Filter,
    FieldFilter,
    FilterBuilder,
    FilterOperator,
    AndFilter,
    OrFilter,
    NotFilter,
    CallableFilter,
    QueryParser,
    ParsedQuery,
    SortSpec,
    QueryPlanner,
    QueryPlan,
    QueryExecutor,
)

from .pagination import Pagination
from .search import Search
from .config import Settings, get_config, set_config, load_config

__version__ = "0.1.0"
__author__ = "idcollection Team"

__all__ = [
    # Main classes
    "Collection",
    "KeyedStore",
    "Record",
    "Field",
    "Pagination",
    "Search",
    # Identity
    "Identified",
    "Unwrappable",
    "is_identified",
    "resolve_key",
    "get_attribute",
    "unwrap",
    # Config
    "Settings",
    "get_config",
    "set_config",
    "load_config",
    # Exceptions
    "CollectionError",
    "InvalidArgumentError",
    "PaginationError",
    "InvalidGroupValueError",
    "InvalidKeyError",
    "QueryError",
    "InvalidFilterError",
    "SerializationError",
    # Query
    "Filter",
    "FieldFilter",
    "FilterBuilder",
    "FilterOperator",
    "AndFilter",
    "OrFilter",
    "NotFilter",
    "CallableFilter",
    "QueryParser",
    "ParsedQuery",
    "SortSpec",
    "QueryPlanner",
    "QueryPlan",
    "QueryExecutor",
]
