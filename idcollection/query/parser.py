"""
Query descriptor parsing.

Parses query descriptors (plain dictionaries) into structured query
objects understood by the planner and executor.

Supports:
- Filter dictionaries with ``$``-operators and ``$and``/``$or``/``$not``
- Condition lists of ``(field, operator, value)`` tuples
- Query string filters (``"status:published year:>2010"``)
- Predicates and prebuilt :class:`Filter` objects
- Sort strings (``"title asc, year desc"``), lists and dictionaries
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import re
import json

from ..core.exceptions import InvalidFilterError
from .filters import (
    Filter,
    FieldFilter,
    FilterOperator,
    AndFilter,
    OrFilter,
    NotFilter,
    CallableFilter,
    filter_from_dict,
)


@dataclass
class SortSpec:
    """A single sort key."""

    field: str
    descending: bool = False

    @property
    def direction(self) -> str:
        return "desc" if self.descending else "asc"

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "direction": self.direction}


@dataclass
class ParsedQuery:
    """
    Parsed query representation.

    Holds the stages the base evaluator runs. Search and pagination are
    handled by the collection on top of the evaluated result.
    """

    # Filtering
    filter: Optional[Filter] = None

    # Sorting
    sort: List[SortSpec] = field(default_factory=list)

    # Exclusion (keys, members or collections)
    exclude: List[Any] = field(default_factory=list)

    # Window
    offset: int = 0
    limit: Optional[int] = None

    # Raw query for debugging
    raw_query: Optional[Dict[str, Any]] = None

    def is_empty(self) -> bool:
        return (
            self.filter is None
            and not self.sort
            and not self.exclude
            and not self.offset
            and self.limit is None
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result: Dict[str, Any] = {"offset": self.offset}

        if self.filter is not None:
            result["filter"] = self.filter.to_dict()

        if self.sort:
            result["sort"] = [s.to_dict() for s in self.sort]

        if self.exclude:
            result["not"] = [repr(e) for e in self.exclude]

        if self.limit is not None:
            result["limit"] = self.limit

        return result


class QueryParser:
    """
    Parser for collection query descriptors.

    Example:
        >>> parser = QueryParser()
        >>> query = parser.parse({
        ...     "filter": {"status": "published", "year": {"$gte": 2010}},
        ...     "sort": "year desc",
        ...     "limit": 10,
        ... })
    """

    # Query string operators
    OPERATORS = {
        ":": FilterOperator.EQ,
        ":=": FilterOperator.EQ,
        ":!": FilterOperator.NE,
        ":!=": FilterOperator.NE,
        ":>": FilterOperator.GT,
        ":>=": FilterOperator.GTE,
        ":<": FilterOperator.LT,
        ":<=": FilterOperator.LTE,
        ":~": FilterOperator.CONTAINS,
        ":^": FilterOperator.STARTSWITH,
        ":$": FilterOperator.ENDSWITH,
        ":*": FilterOperator.REGEX,
    }

    # Descriptor keys and their aliases
    FILTER_KEYS = ("filter", "filter_by", "where")
    SORT_KEYS = ("sort", "sort_by", "order_by")
    EXCLUDE_KEYS = ("not", "exclude")
    OFFSET_KEYS = ("offset", "skip")

    def parse(self, query: Optional[Dict[str, Any]]) -> ParsedQuery:
        """
        Parse a query descriptor.

        Args:
            query: Query dictionary (None = empty query)

        Returns:
            ParsedQuery object

        Raises:
            InvalidFilterError: If a clause cannot be parsed
        """
        if query is None:
            return ParsedQuery()

        if not isinstance(query, dict):
            raise InvalidFilterError(
                f"Query descriptor must be a dictionary, got {type(query).__name__}"
            )

        parsed = ParsedQuery(raw_query=query)

        # Filter
        for key in self.FILTER_KEYS:
            if key in query:
                parsed.filter = self.parse_filter(query[key])
                break

        # Sorting
        for key in self.SORT_KEYS:
            if key in query:
                parsed.sort = self.parse_sort(query[key])
                break

        # Exclusion
        for key in self.EXCLUDE_KEYS:
            if key in query:
                parsed.exclude = self._parse_exclude(query[key])
                break

        # Window
        for key in self.OFFSET_KEYS:
            if key in query and query[key] is not None:
                parsed.offset = self._parse_int(key, query[key])
                break
        if query.get("limit") is not None:
            parsed.limit = self._parse_int("limit", query["limit"])

        return parsed

    def parse_filter(self, filter_spec: Any) -> Optional[Filter]:
        """Parse a filter specification."""

        if filter_spec is None:
            return None

        if isinstance(filter_spec, Filter):
            return filter_spec

        if isinstance(filter_spec, str):
            return self._parse_string(filter_spec)

        if isinstance(filter_spec, tuple):
            return self.parse_condition(*filter_spec)

        if isinstance(filter_spec, list):
            # List of conditions (AND)
            filters = [self.parse_filter(f) for f in filter_spec if f]
            filters = [f for f in filters if f is not None]
            if not filters:
                return None
            if len(filters) == 1:
                return filters[0]
            return AndFilter(filters)

        if isinstance(filter_spec, dict):
            return self._parse_filter_dict(filter_spec)

        if callable(filter_spec):
            return CallableFilter(filter_spec)

        raise InvalidFilterError(
            f"Unsupported filter specification: {type(filter_spec).__name__}"
        )

    def _parse_filter_dict(self, filter_spec: Dict[str, Any]) -> Optional[Filter]:
        # Check for logical operators
        if "$and" in filter_spec:
            filters = [self.parse_filter(f) for f in filter_spec["$and"]]
            filters = [f for f in filters if f is not None]
            if not filters:
                return None
            return AndFilter(filters)

        if "$or" in filter_spec:
            filters = [self.parse_filter(f) for f in filter_spec["$or"]]
            filters = [f for f in filters if f is not None]
            if not filters:
                return None
            return OrFilter(filters)

        if "$not" in filter_spec:
            inner = self.parse_filter(filter_spec["$not"])
            if inner:
                return NotFilter(inner)
            return None

        # Check for "type" key (serialized filter)
        if "type" in filter_spec and "operator" in filter_spec:
            return filter_from_dict(filter_spec)

        # Parse as field conditions
        conditions = []

        for field_name, value in filter_spec.items():
            if field_name.startswith("$"):
                raise InvalidFilterError(f"Unknown logical operator: {field_name}")

            if isinstance(value, dict):
                # Complex condition with operators
                for op, op_value in value.items():
                    conditions.append(
                        FieldFilter(field_name, self.parse_operator(op), op_value)
                    )
            else:
                # Simple equality
                conditions.append(FieldFilter(field_name, FilterOperator.EQ, value))

        if not conditions:
            return None
        if len(conditions) == 1:
            return conditions[0]
        return AndFilter(conditions)

    def parse_condition(self, *args: Any) -> Filter:
        """
        Parse a positional condition.

        Accepted shapes: ``(predicate,)``, ``(filter,)``, ``(field, value)``
        for equality and ``(field, operator, value)``.
        """
        if len(args) == 1:
            return self.parse_filter(args[0])

        if len(args) == 2:
            field_name, value = args
            self._check_field(field_name)
            return FieldFilter(field_name, FilterOperator.EQ, value)

        if len(args) == 3:
            field_name, op, value = args
            self._check_field(field_name)
            return FieldFilter(field_name, self.parse_operator(op), value)

        raise InvalidFilterError(f"Invalid filter condition: {args!r}")

    def parse_operator(self, op: Union[str, FilterOperator]) -> FilterOperator:
        """Parse an operator name or symbol."""
        if isinstance(op, FilterOperator):
            return op

        if not isinstance(op, str):
            raise InvalidFilterError(f"Invalid filter operator: {op!r}")

        key = op.strip().lower()
        if key not in ("$", "$="):
            key = key.lstrip("$")

        op_map = {
            "eq": FilterOperator.EQ,
            "equals": FilterOperator.EQ,
            "=": FilterOperator.EQ,
            "==": FilterOperator.EQ,
            "ne": FilterOperator.NE,
            "neq": FilterOperator.NE,
            "not_equals": FilterOperator.NE,
            "!=": FilterOperator.NE,
            "gt": FilterOperator.GT,
            ">": FilterOperator.GT,
            "gte": FilterOperator.GTE,
            "ge": FilterOperator.GTE,
            ">=": FilterOperator.GTE,
            "lt": FilterOperator.LT,
            "<": FilterOperator.LT,
            "lte": FilterOperator.LTE,
            "le": FilterOperator.LTE,
            "<=": FilterOperator.LTE,
            "in": FilterOperator.IN,
            "nin": FilterOperator.NIN,
            "not_in": FilterOperator.NIN,
            "not in": FilterOperator.NIN,
            "contains": FilterOperator.CONTAINS,
            "*=": FilterOperator.CONTAINS,
            "icontains": FilterOperator.ICONTAINS,
            "startswith": FilterOperator.STARTSWITH,
            "starts_with": FilterOperator.STARTSWITH,
            "^=": FilterOperator.STARTSWITH,
            "endswith": FilterOperator.ENDSWITH,
            "ends_with": FilterOperator.ENDSWITH,
            "$=": FilterOperator.ENDSWITH,
            "regex": FilterOperator.REGEX,
            "match": FilterOperator.REGEX,
            "*": FilterOperator.REGEX,
            "exists": FilterOperator.EXISTS,
            "is_null": FilterOperator.IS_NULL,
            "is_not_null": FilterOperator.IS_NOT_NULL,
            "between": FilterOperator.BETWEEN,
            "..": FilterOperator.BETWEEN,
            "contains_any": FilterOperator.CONTAINS_ANY,
            "contains_all": FilterOperator.CONTAINS_ALL,
        }

        operator = op_map.get(key)
        if operator is None:
            raise InvalidFilterError(f"Unknown filter operator: {op!r}")
        return operator

    def parse_sort(self, sort_spec: Any) -> List[SortSpec]:
        """
        Parse a sort specification.

        Accepts ``"field"``, ``"field desc"``, ``"a asc, b desc"``, a list of
        strings, ``(field, direction)`` tuples or :class:`SortSpec` objects,
        and dictionaries mapping field to direction.
        """
        if sort_spec is None:
            return []

        if isinstance(sort_spec, SortSpec):
            return [sort_spec]

        if isinstance(sort_spec, str):
            specs = []
            for part in sort_spec.split(","):
                tokens = part.split()
                if not tokens:
                    continue
                specs.extend(self._sort_tokens(tokens))
            return specs

        if isinstance(sort_spec, dict):
            if "field" in sort_spec:
                return [self._make_sort(sort_spec["field"], sort_spec.get("direction", "asc"))]
            return [self._make_sort(f, d) for f, d in sort_spec.items()]

        if isinstance(sort_spec, tuple) and len(sort_spec) == 2 and isinstance(sort_spec[1], str) \
                and sort_spec[1].lower() in ("asc", "desc"):
            return [self._make_sort(sort_spec[0], sort_spec[1])]

        if isinstance(sort_spec, (list, tuple)):
            specs = []
            for item in sort_spec:
                specs.extend(self.parse_sort(item))
            return specs

        raise InvalidFilterError(
            f"Unsupported sort specification: {type(sort_spec).__name__}"
        )

    def _sort_tokens(self, tokens: List[str]) -> List[SortSpec]:
        # "title desc year" -> title desc, year asc
        specs: List[SortSpec] = []
        for token in tokens:
            if token.lower() in ("asc", "desc"):
                if not specs:
                    raise InvalidFilterError(f"Sort direction without a field: {token!r}")
                specs[-1].descending = token.lower() == "desc"
            else:
                specs.append(SortSpec(token))
        return specs

    def _make_sort(self, field_name: Any, direction: Any) -> SortSpec:
        self._check_field(field_name)
        if isinstance(direction, bool):
            return SortSpec(field_name, descending=direction)
        direction = str(direction).lower()
        if direction not in ("asc", "desc"):
            raise InvalidFilterError(f"Invalid sort direction: {direction!r}")
        return SortSpec(field_name, descending=direction == "desc")

    def _parse_exclude(self, value: Any) -> List[Any]:
        if value is None:
            return []
        if isinstance(value, (list, tuple, set)):
            return list(value)
        return [value]

    def _parse_int(self, name: str, value: Any) -> int:
        if isinstance(value, bool):
            raise InvalidFilterError(f"'{name}' must be an integer, got bool")
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise InvalidFilterError(f"'{name}' must be an integer, got {value!r}")
        if number < 0:
            raise InvalidFilterError(f"'{name}' must be >= 0, got {number}")
        return number

    def _check_field(self, field_name: Any) -> None:
        if not isinstance(field_name, str) or not field_name:
            raise InvalidFilterError(f"Field name must be a non-empty string, got {field_name!r}")

    def _parse_string(self, query_string: str) -> Optional[Filter]:
        """
        Parse a query string filter.

        Format: "field:value field2:>10 field3:~pattern"
        """
        query_string = query_string.strip()

        if not query_string:
            return None

        # Try parsing as JSON first
        if query_string.startswith("{"):
            try:
                return self.parse_filter(json.loads(query_string))
            except json.JSONDecodeError:
                pass

        conditions = []

        # Pattern: field[:op]value or field[:op]"value with spaces"
        pattern = r'(\w+(?:\.\w+)*)(:[<>=!~^$*]?=?)("[^"]*"|\'[^\']*\'|\S+)'

        for match in re.finditer(pattern, query_string):
            field_name = match.group(1)
            operator_str = match.group(2)
            value_str = match.group(3)

            # Remove quotes from value
            if value_str.startswith('"') and value_str.endswith('"'):
                value_str = value_str[1:-1]
            elif value_str.startswith("'") and value_str.endswith("'"):
                value_str = value_str[1:-1]

            operator = self.OPERATORS.get(operator_str, FilterOperator.EQ)
            value = self._parse_value(value_str)

            conditions.append(FieldFilter(field_name, operator, value))

        if not conditions:
            raise InvalidFilterError(f"Cannot parse filter string: {query_string!r}")
        if len(conditions) == 1:
            return conditions[0]
        return AndFilter(conditions)

    def _parse_value(self, value_str: str) -> Any:
        """Parse a value string into appropriate type."""
        # Boolean
        if value_str.lower() == "true":
            return True
        if value_str.lower() == "false":
            return False

        # Null
        if value_str.lower() in ("null", "none", "nil"):
            return None

        # Number
        try:
            if "." in value_str:
                return float(value_str)
            else:
                return int(value_str)
        except ValueError:
            pass

        # List (comma-separated)
        if "," in value_str:
            return [self._parse_value(v.strip()) for v in value_str.split(",")]

        # String
        return value_str


# Convenience functions
def parse_query(query: Optional[Dict[str, Any]]) -> ParsedQuery:
    """
    Parse a query descriptor.

    Args:
        query: Query dictionary

    Returns:
        ParsedQuery object
    """
    return QueryParser().parse(query)


def parse_filter(filter_spec: Any) -> Optional[Filter]:
    """
    Parse a filter specification.

    Args:
        filter_spec: Filter dictionary, string, list, tuple or callable

    Returns:
        Filter object or None
    """
    return QueryParser().parse_filter(filter_spec)


def parse_sort(sort_spec: Any) -> List[SortSpec]:
    """Parse a sort specification into sort keys."""
    return QueryParser().parse_sort(sort_spec)
