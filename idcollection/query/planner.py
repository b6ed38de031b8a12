"""
Query planning for collection queries.

Turns a parsed query into the ordered list of stages the executor runs.
The stage order is fixed: filter, sort, exclude, offset, limit. Every
stage is optional and only planned when the query asks for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List
import time

from .parser import ParsedQuery


class PlanType(str, Enum):
    """Types of plan nodes."""

    FILTER = "filter"       # Keep matching members
    SORT = "sort"           # Reorder members
    EXCLUDE = "exclude"     # Drop listed keys/members
    OFFSET = "offset"       # Skip leading members
    LIMIT = "limit"         # Cap the member count


# Evaluation order of the base query stages
STAGE_ORDER = (
    PlanType.FILTER,
    PlanType.SORT,
    PlanType.EXCLUDE,
    PlanType.OFFSET,
    PlanType.LIMIT,
)


@dataclass
class PlanNode:
    """
    A single stage of the query execution plan.
    """

    type: PlanType

    # Node-specific parameters
    params: Dict[str, Any] = field(default_factory=dict)

    # Execution stats (filled after execution)
    input_rows: int = 0
    output_rows: int = 0
    execution_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "type": self.type.value,
            "params": {k: _describe(v) for k, v in self.params.items()},
            "input_rows": self.input_rows,
            "output_rows": self.output_rows,
        }

    def explain(self) -> str:
        """Generate explain output."""
        lines = [self.type.value]
        for key, value in self.params.items():
            lines.append(f"  {key}: {_describe(value)}")
        return "\n".join(lines)


@dataclass
class QueryPlan:
    """
    Complete query execution plan.
    """

    # Stages in execution order
    nodes: List[PlanNode]

    # Original query
    query: ParsedQuery

    # Planning stats
    planning_time_ms: float = 0.0

    @property
    def stage_types(self) -> List[PlanType]:
        return [node.type for node in self.nodes]

    def explain(self) -> str:
        """Generate explain output."""
        lines = [
            "Query Plan",
            "=" * 40,
            f"Stages: {len(self.nodes)}",
            f"Planning Time: {self.planning_time_ms:.2f}ms",
            "",
            "Stages:",
            "-" * 40,
        ]
        if not self.nodes:
            lines.append("(identity)")
        for i, node in enumerate(self.nodes, start=1):
            lines.append(f"{i}. {node.explain()}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "planning_time_ms": self.planning_time_ms,
        }


class QueryPlanner:
    """
    Query planner for collection queries.

    Example:
        >>> planner = QueryPlanner()
        >>> plan = planner.plan(parse_query({"filter": {"status": "draft"}, "limit": 5}))
        >>> print(plan.explain())
    """

    def plan(self, query: ParsedQuery) -> QueryPlan:
        """
        Create an execution plan for a query.

        Args:
            query: Parsed query

        Returns:
            QueryPlan object
        """
        start_time = time.time()

        nodes = []
        for stage in STAGE_ORDER:
            node = self._plan_stage(stage, query)
            if node is not None:
                nodes.append(node)

        planning_time = (time.time() - start_time) * 1000

        return QueryPlan(
            nodes=nodes,
            query=query,
            planning_time_ms=planning_time,
        )

    def _plan_stage(self, stage: PlanType, query: ParsedQuery):
        if stage == PlanType.FILTER and query.filter is not None:
            return PlanNode(type=stage, params={"filter": query.filter})

        if stage == PlanType.SORT and query.sort:
            return PlanNode(type=stage, params={"keys": list(query.sort)})

        if stage == PlanType.EXCLUDE and query.exclude:
            return PlanNode(type=stage, params={"items": list(query.exclude)})

        if stage == PlanType.OFFSET and query.offset:
            return PlanNode(type=stage, params={"offset": query.offset})

        if stage == PlanType.LIMIT and query.limit is not None:
            return PlanNode(type=stage, params={"limit": query.limit})

        return None


def _describe(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [_describe(v) for v in value]
    return value
