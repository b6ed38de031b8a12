"""
Query processing module for idcollection.

This module provides:
- Query descriptor parsing
- Query planning with a fixed stage order
- Query execution
- Member filtering

Example:
    >>> from idcollection.query import QueryExecutor, FilterBuilder
    >>>
    >>> # Build a filter
    >>> filter = (
    ...     FilterBuilder()
    ...     .field("status").equals("published")
    ...     .field("year").gte(2010)
    ...     .build()
    ... )
    >>>
    >>> # Execute query
    >>> executor = QueryExecutor(collection)
    >>> result = executor.execute({"filter": filter, "sort": "year desc", "limit": 10})
"""

from .filters import (
    Filter,
    FilterBuilder,
    FilterOperator,
    AndFilter,
    OrFilter,
    NotFilter,
    FieldFilter,
    CallableFilter,
    filter_from_dict,
)

from .parser import (
    QueryParser,
    ParsedQuery,
    SortSpec,
    parse_query,
    parse_filter,
    parse_sort,
)

from .planner import (
    QueryPlanner,
    QueryPlan,
    PlanNode,
    PlanType,
    STAGE_ORDER,
)

from .executor import (
    QueryExecutor,
    ExecutionStats,
    filter_items,
    sort_items,
)

__all__ = [
    # Filters
    "Filter",
    "FilterBuilder",
    "FilterOperator",
    "AndFilter",
    "OrFilter",
    "NotFilter",
    "FieldFilter",
    "CallableFilter",
    "filter_from_dict",
    # Parser
    "QueryParser",
    "ParsedQuery",
    "SortSpec",
    "parse_query",
    "parse_filter",
    "parse_sort",
    # Planner
    "QueryPlanner",
    "QueryPlan",
    "PlanNode",
    "PlanType",
    "STAGE_ORDER",
    # Executor
    "QueryExecutor",
    "ExecutionStats",
    "filter_items",
    "sort_items",
]
