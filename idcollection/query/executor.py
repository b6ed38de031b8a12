"""
Query execution for collections.

Runs query plans against a collection and returns a new collection;
the source is never modified.

Features:
- Plan-based execution
- Stable multi-key sorting
- Execution statistics
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
import time

from ..core.attributes import get_attribute
from ..core.exceptions import InvalidFilterError
from ..utils.logging import get_logger
from .filters import Filter
from .parser import ParsedQuery, SortSpec, parse_query
from .planner import PlanNode, PlanType, QueryPlan, QueryPlanner

logger = get_logger(__name__)

Item = Tuple[str, Any]


@dataclass
class ExecutionStats:
    """
    Statistics from query execution.
    """

    total_time_ms: float = 0.0
    rows_scanned: int = 0
    rows_returned: int = 0

    # Per-stage row counts, in execution order
    stages: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_time_ms": self.total_time_ms,
            "rows_scanned": self.rows_scanned,
            "rows_returned": self.rows_returned,
            "stages": self.stages,
        }


def filter_items(items: Iterable[Item], filter: Filter) -> List[Item]:
    """Keep the (key, member) pairs whose member matches ``filter``."""
    return [(key, member) for key, member in items if filter.evaluate(member)]


def _sort_value(member: Any, spec: SortSpec) -> Any:
    return get_attribute(member, spec.field)


def sort_items(items: Iterable[Item], keys: List[SortSpec]) -> List[Item]:
    """
    Sort (key, member) pairs by one or more attributes.

    The sort is stable: members with equal values keep their relative
    order. ``None`` values go last in both directions.

    Raises:
        InvalidFilterError: If the values of a sort field are not comparable
    """
    result = list(items)

    # least significant key first, relying on sort stability
    for spec in reversed(keys):
        if spec.descending:
            sort_key = lambda item, s=spec: (
                (_sort_value(item[1], s) is not None, _sort_value(item[1], s))
            )
        else:
            sort_key = lambda item, s=spec: (
                (_sort_value(item[1], s) is None, _sort_value(item[1], s))
            )

        try:
            result.sort(key=sort_key, reverse=spec.descending)
        except TypeError as e:
            raise InvalidFilterError(
                f"Cannot sort by '{spec.field}': values are not comparable ({e})"
            )

    return result


class QueryExecutor:
    """
    Executes queries against a collection.

    Example:
        >>> executor = QueryExecutor(collection)
        >>>
        >>> # Execute a query descriptor
        >>> result = executor.execute({"filter": {"status": "draft"}, "sort": "title"})
        >>>
        >>> # Inspect what happened
        >>> executor.last_stats.rows_returned
    """

    def __init__(self, collection):
        """
        Initialize executor with a collection.

        Args:
            collection: KeyedStore (or Collection) instance
        """
        self.collection = collection
        self.planner = QueryPlanner()
        self.last_plan: Optional[QueryPlan] = None
        self.last_stats: Optional[ExecutionStats] = None

    def execute(self, query: Union[ParsedQuery, Dict[str, Any], None]):
        """
        Execute a query.

        Args:
            query: Parsed query or query descriptor

        Returns:
            New collection holding the result
        """
        if not isinstance(query, ParsedQuery):
            query = parse_query(query)

        plan = self.planner.plan(query)
        return self.execute_plan(plan)

    def execute_plan(self, plan: QueryPlan):
        """
        Execute a query plan.

        Args:
            plan: Plan produced by :class:`QueryPlanner`

        Returns:
            New collection holding the result
        """
        start_time = time.time()
        stats = ExecutionStats(rows_scanned=len(self.collection))

        result = self.collection.clone()

        for node in plan.nodes:
            node_start = time.time()
            node.input_rows = len(result)

            result = self._execute_node(node, result)

            node.output_rows = len(result)
            node.execution_time_ms = (time.time() - node_start) * 1000
            stats.stages.append({
                "type": node.type.value,
                "input_rows": node.input_rows,
                "output_rows": node.output_rows,
            })

        stats.rows_returned = len(result)
        stats.total_time_ms = (time.time() - start_time) * 1000

        self.last_plan = plan
        self.last_stats = stats

        logger.debug(
            f"Executed query plan {[t.value for t in plan.stage_types]}: "
            f"{stats.rows_scanned} -> {stats.rows_returned} members"
        )

        return result

    def _execute_node(self, node: PlanNode, result):
        if node.type == PlanType.FILTER:
            return result.replace_items(filter_items(result.items(), node.params["filter"]))

        if node.type == PlanType.SORT:
            return result.replace_items(sort_items(result.items(), node.params["keys"]))

        if node.type == PlanType.EXCLUDE:
            return result.not_(*node.params["items"])

        if node.type == PlanType.OFFSET:
            return result.slice(node.params["offset"])

        if node.type == PlanType.LIMIT:
            return result.slice(0, node.params["limit"])

        raise InvalidFilterError(f"Unsupported plan stage: {node.type}")
