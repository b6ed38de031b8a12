"""
Filter expressions for collection queries.

Supports:
- Comparison operators (eq, ne, gt, gte, lt, lte)
- String operators (contains, startswith, endswith, regex)
- Array operators (in, nin, contains_any, contains_all)
- Logical operators (and, or, not)
- Nested field access (field.subfield)
- Plain predicates (any callable taking a member)

Member values are read through :func:`get_attribute`, so boxed values
compare like their raw values.

Example:
    >>> # Simple filter
    >>> filter = FieldFilter("status", FilterOperator.EQ, "published")
    >>>
    >>> # Using builder
    >>> filter = (
    ...     FilterBuilder()
    ...     .field("year").gte(2010).lte(2020)
    ...     .field("status").in_(["draft", "published"])
    ...     .build()
    ... )
    >>>
    >>> # Complex filter with OR
    >>> filter = OrFilter([
    ...     FieldFilter("status", FilterOperator.EQ, "listed"),
    ...     FieldFilter("year", FilterOperator.LT, 2000),
    ... ])
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import re

from ..core.attributes import get_attribute
from ..core.exceptions import InvalidFilterError


class FilterOperator(str, Enum):
    """Filter comparison operators."""

    # Equality
    EQ = "eq"           # equals
    NE = "ne"           # not equals

    # Numeric comparison
    GT = "gt"           # greater than
    GTE = "gte"         # greater than or equal
    LT = "lt"           # less than
    LTE = "lte"         # less than or equal

    # Range
    BETWEEN = "between" # between two values

    # String operations
    CONTAINS = "contains"       # string contains / sequence holds
    STARTSWITH = "startswith"   # string starts with
    ENDSWITH = "endswith"       # string ends with
    REGEX = "regex"             # regex match
    ICONTAINS = "icontains"     # case-insensitive contains

    # Array operations
    IN = "in"                   # value in list
    NIN = "nin"                 # value not in list
    CONTAINS_ANY = "contains_any"   # array contains any of values
    CONTAINS_ALL = "contains_all"   # array contains all of values

    # Existence
    EXISTS = "exists"           # field exists
    IS_NULL = "is_null"         # field is null
    IS_NOT_NULL = "is_not_null" # field is not null


class Filter(ABC):
    """Abstract base class for all filters."""

    @abstractmethod
    def evaluate(self, member: Any) -> bool:
        """
        Evaluate the filter against a collection member.

        Args:
            member: The member to check

        Returns:
            True if the member matches the filter
        """
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert filter to dictionary representation."""
        pass

    def __call__(self, member: Any) -> bool:
        return self.evaluate(member)

    def __and__(self, other: "Filter") -> "AndFilter":
        """Combine filters with AND."""
        return AndFilter([self, other])

    def __or__(self, other: "Filter") -> "OrFilter":
        """Combine filters with OR."""
        return OrFilter([self, other])

    def __invert__(self) -> "NotFilter":
        """Negate filter with NOT."""
        return NotFilter(self)


class FieldFilter(Filter):
    """
    Filter on a single member attribute.

    Supports nested field access using dot notation:
        FieldFilter("author.age", FilterOperator.GTE, 18)
    """

    def __init__(
        self,
        field: str,
        operator: FilterOperator,
        value: Any,
    ):
        self.field = field
        self.operator = operator
        self.value = value
        self._pattern = None

        if operator == FilterOperator.REGEX and isinstance(value, str):
            try:
                self._pattern = re.compile(value)
            except re.error as e:
                raise InvalidFilterError(
                    f"Invalid regex for field '{field}': {value!r} ({e})"
                ) from e

    def evaluate(self, member: Any) -> bool:
        """Evaluate the filter."""
        field_value = get_attribute(member, self.field)

        try:
            return self._compare(field_value, self.operator, self.value)
        except (TypeError, ValueError):
            return False

    def _compare(
        self,
        field_value: Any,
        op: FilterOperator,
        compare_value: Any,
    ) -> bool:
        """Compare field value using operator."""

        # Equality
        if op == FilterOperator.EQ:
            return field_value == compare_value

        if op == FilterOperator.NE:
            return field_value != compare_value

        # Numeric comparison
        if op == FilterOperator.GT:
            return field_value is not None and field_value > compare_value

        if op == FilterOperator.GTE:
            return field_value is not None and field_value >= compare_value

        if op == FilterOperator.LT:
            return field_value is not None and field_value < compare_value

        if op == FilterOperator.LTE:
            return field_value is not None and field_value <= compare_value

        # Range
        if op == FilterOperator.BETWEEN:
            if field_value is None or not isinstance(compare_value, (list, tuple)):
                return False
            low, high = compare_value[0], compare_value[1]
            return low <= field_value <= high

        # String operations
        if op == FilterOperator.CONTAINS:
            if isinstance(field_value, (list, tuple, set)):
                return compare_value in field_value
            return (
                isinstance(field_value, str) and
                isinstance(compare_value, str) and
                compare_value in field_value
            )

        if op == FilterOperator.ICONTAINS:
            return (
                isinstance(field_value, str) and
                isinstance(compare_value, str) and
                compare_value.lower() in field_value.lower()
            )

        if op == FilterOperator.STARTSWITH:
            return (
                isinstance(field_value, str) and
                isinstance(compare_value, str) and
                field_value.startswith(compare_value)
            )

        if op == FilterOperator.ENDSWITH:
            return (
                isinstance(field_value, str) and
                isinstance(compare_value, str) and
                field_value.endswith(compare_value)
            )

        if op == FilterOperator.REGEX:
            return (
                isinstance(field_value, str) and
                self._pattern is not None and
                self._pattern.search(field_value) is not None
            )

        # Array operations
        if op == FilterOperator.IN:
            return field_value in compare_value

        if op == FilterOperator.NIN:
            return field_value not in compare_value

        if op == FilterOperator.CONTAINS_ANY:
            if not isinstance(field_value, (list, tuple, set)):
                return False
            return any(v in field_value for v in compare_value)

        if op == FilterOperator.CONTAINS_ALL:
            if not isinstance(field_value, (list, tuple, set)):
                return False
            return all(v in field_value for v in compare_value)

        # Existence
        if op == FilterOperator.EXISTS:
            exists = field_value is not None
            return exists == bool(compare_value)

        if op == FilterOperator.IS_NULL:
            return field_value is None

        if op == FilterOperator.IS_NOT_NULL:
            return field_value is not None

        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "field",
            "field": self.field,
            "operator": self.operator.value,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldFilter":
        try:
            operator = FilterOperator(data["operator"])
        except ValueError:
            raise InvalidFilterError(f"Unknown filter operator: {data['operator']!r}")
        return cls(
            field=data["field"],
            operator=operator,
            value=data.get("value"),
        )

    def __repr__(self) -> str:
        return f"FieldFilter({self.field} {self.operator.value} {self.value!r})"


class CallableFilter(Filter):
    """Filter backed by a predicate ``(member) -> bool``."""

    def __init__(self, fn: Callable[[Any], Any]):
        self.fn = fn

    def evaluate(self, member: Any) -> bool:
        return bool(self.fn(member))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "callable",
            "name": getattr(self.fn, "__name__", repr(self.fn)),
        }

    def __repr__(self) -> str:
        return f"CallableFilter({getattr(self.fn, '__name__', self.fn)!r})"


class AndFilter(Filter):
    """Logical AND of multiple filters."""

    def __init__(self, filters: List[Filter]):
        self.filters = filters

    def evaluate(self, member: Any) -> bool:
        return all(f.evaluate(member) for f in self.filters)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "and",
            "filters": [f.to_dict() for f in self.filters],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AndFilter":
        filters = [filter_from_dict(f) for f in data["filters"]]
        return cls(filters)

    def __repr__(self) -> str:
        return f"AndFilter({self.filters})"


class OrFilter(Filter):
    """Logical OR of multiple filters."""

    def __init__(self, filters: List[Filter]):
        self.filters = filters

    def evaluate(self, member: Any) -> bool:
        return any(f.evaluate(member) for f in self.filters)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "or",
            "filters": [f.to_dict() for f in self.filters],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrFilter":
        filters = [filter_from_dict(f) for f in data["filters"]]
        return cls(filters)

    def __repr__(self) -> str:
        return f"OrFilter({self.filters})"


class NotFilter(Filter):
    """Logical NOT of a filter."""

    def __init__(self, filter: Filter):
        self.filter = filter

    def evaluate(self, member: Any) -> bool:
        return not self.filter.evaluate(member)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "not",
            "filter": self.filter.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NotFilter":
        filter = filter_from_dict(data["filter"])
        return cls(filter)

    def __repr__(self) -> str:
        return f"NotFilter({self.filter})"


def filter_from_dict(data: Dict[str, Any]) -> Filter:
    """Create a filter from dictionary representation."""
    filter_type = data.get("type", "field")

    if filter_type == "field":
        return FieldFilter.from_dict(data)
    elif filter_type == "and":
        return AndFilter.from_dict(data)
    elif filter_type == "or":
        return OrFilter.from_dict(data)
    elif filter_type == "not":
        return NotFilter.from_dict(data)
    else:
        raise InvalidFilterError(f"Unknown filter type: {filter_type}")


class FieldFilterBuilder:
    """Builder for field filters with fluent API."""

    def __init__(self, parent: "FilterBuilder", field: str):
        self._parent = parent
        self._field = field

    def _add(self, operator: FilterOperator, value: Any) -> "FieldFilterBuilder":
        self._parent._add_condition(self._field, operator, value)
        return self

    def equals(self, value: Any) -> "FieldFilterBuilder":
        """Field equals value."""
        return self._add(FilterOperator.EQ, value)

    def eq(self, value: Any) -> "FieldFilterBuilder":
        """Alias for equals."""
        return self.equals(value)

    def ne(self, value: Any) -> "FieldFilterBuilder":
        return self._add(FilterOperator.NE, value)

    def gt(self, value: Any) -> "FieldFilterBuilder":
        return self._add(FilterOperator.GT, value)

    def gte(self, value: Any) -> "FieldFilterBuilder":
        return self._add(FilterOperator.GTE, value)

    def lt(self, value: Any) -> "FieldFilterBuilder":
        return self._add(FilterOperator.LT, value)

    def lte(self, value: Any) -> "FieldFilterBuilder":
        return self._add(FilterOperator.LTE, value)

    def between(self, low: Any, high: Any) -> "FieldFilterBuilder":
        """Field between low and high (inclusive)."""
        return self._add(FilterOperator.BETWEEN, [low, high])

    def in_(self, values: List[Any]) -> "FieldFilterBuilder":
        """Field value in list."""
        return self._add(FilterOperator.IN, values)

    def not_in(self, values: List[Any]) -> "FieldFilterBuilder":
        """Field value not in list."""
        return self._add(FilterOperator.NIN, values)

    def contains(self, value: Any) -> "FieldFilterBuilder":
        return self._add(FilterOperator.CONTAINS, value)

    def icontains(self, value: str) -> "FieldFilterBuilder":
        """Case-insensitive contains."""
        return self._add(FilterOperator.ICONTAINS, value)

    def startswith(self, value: str) -> "FieldFilterBuilder":
        return self._add(FilterOperator.STARTSWITH, value)

    def endswith(self, value: str) -> "FieldFilterBuilder":
        return self._add(FilterOperator.ENDSWITH, value)

    def regex(self, pattern: str) -> "FieldFilterBuilder":
        return self._add(FilterOperator.REGEX, pattern)

    def contains_any(self, values: List[Any]) -> "FieldFilterBuilder":
        return self._add(FilterOperator.CONTAINS_ANY, values)

    def contains_all(self, values: List[Any]) -> "FieldFilterBuilder":
        return self._add(FilterOperator.CONTAINS_ALL, values)

    def exists(self, exists: bool = True) -> "FieldFilterBuilder":
        return self._add(FilterOperator.EXISTS, exists)

    def is_null(self) -> "FieldFilterBuilder":
        return self._add(FilterOperator.IS_NULL, True)

    def is_not_null(self) -> "FieldFilterBuilder":
        return self._add(FilterOperator.IS_NOT_NULL, True)

    # hand control back to the parent builder
    def field(self, name: str) -> "FieldFilterBuilder":
        return self._parent.field(name)

    def or_(self) -> "FilterBuilder":
        return self._parent.or_()

    def and_(self) -> "FilterBuilder":
        return self._parent.and_()

    def build(self) -> Optional[Filter]:
        return self._parent.build()


class FilterBuilder:
    """
    Fluent builder for creating filters.

    Example:
        >>> filter = (
        ...     FilterBuilder()
        ...     .field("status").equals("published")
        ...     .field("year").gte(2010).lte(2020)
        ...     .field("tags").contains_any(["news", "blog"])
        ...     .build()
        ... )
    """

    def __init__(self):
        self._conditions: List[FieldFilter] = []
        self._logic = "and"  # "and" or "or"

    def field(self, name: str) -> FieldFilterBuilder:
        """Start building a condition for a field."""
        return FieldFilterBuilder(self, name)

    def _add_condition(
        self,
        field: str,
        operator: FilterOperator,
        value: Any,
    ) -> None:
        """Add a condition (internal)."""
        self._conditions.append(FieldFilter(field, operator, value))

    def or_(self) -> "FilterBuilder":
        """Switch to OR logic for all conditions."""
        self._logic = "or"
        return self

    def and_(self) -> "FilterBuilder":
        """Switch to AND logic (default)."""
        self._logic = "and"
        return self

    def build(self) -> Optional[Filter]:
        """Build the final filter."""
        if not self._conditions:
            return None

        if len(self._conditions) == 1:
            return self._conditions[0]

        if self._logic == "and":
            return AndFilter(self._conditions)
        else:
            return OrFilter(self._conditions)
