"""Basic statistics over the execution log reported by the runtime.

The monitor view reads these numbers; the server also uses them to refresh
an orchestrator's health counters whenever new events arrive.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime

from flowcore.models.execution import EventStatus, NodeExecutionEvent


@dataclass
class NodeActivity:
    """Per-node event counts."""

    node_id: str
    node_label: str
    success_count: int = 0
    warning_count: int = 0
    error_count: int = 0

    @property
    def total(self) -> int:
        return self.success_count + self.warning_count + self.error_count


@dataclass
class ExecutionSummary:
    """Summary of an execution log.

    ``execution_health`` is the share of events that did not fail, as a
    percentage. An empty log counts as fully healthy.
    """

    total: int = 0
    success_count: int = 0
    warning_count: int = 0
    error_count: int = 0
    execution_health: float = 100.0
    last_execution: str | None = None
    by_node: list[NodeActivity] = field(default_factory=list)


def _parse_timestamp(ts: str) -> datetime:
    """Parse ISO8601 timestamp."""
    # fromisoformat rejects the Z suffix on older interpreters
    ts = ts.replace("Z", "+00:00")
    return datetime.fromisoformat(ts)


def _latest(timestamps: list[str]) -> str | None:
    try:
        return max(timestamps, key=_parse_timestamp, default=None)
    except (TypeError, ValueError):
        # mixed naive/aware or non-ISO strings; fall back to string order
        return max(timestamps, default=None)


def summarize_executions(events: list[NodeExecutionEvent]) -> ExecutionSummary:
    """Count events by status and by node.

    Args:
        events: Events from one or more executions, in any order.

    Returns:
        ExecutionSummary with counts, health percentage and the most recent
        event timestamp.
    """
    if not events:
        return ExecutionSummary()

    counts = Counter(event.status for event in events)
    nodes: dict[str, NodeActivity] = {}
    for event in events:
        activity = nodes.get(event.node_id)
        if activity is None:
            activity = NodeActivity(node_id=event.node_id, node_label=event.node_label)
            nodes[event.node_id] = activity
        elif not activity.node_label and event.node_label:
            activity.node_label = event.node_label

        if event.status == EventStatus.success:
            activity.success_count += 1
        elif event.status == EventStatus.warning:
            activity.warning_count += 1
        else:
            activity.error_count += 1

    total = len(events)
    error_count = counts[EventStatus.error]
    health = round((total - error_count) / total * 100, 1)

    return ExecutionSummary(
        total=total,
        success_count=counts[EventStatus.success],
        warning_count=counts[EventStatus.warning],
        error_count=error_count,
        execution_health=health,
        last_execution=_latest([event.timestamp for event in events]),
        by_node=sorted(nodes.values(), key=lambda a: (-a.error_count, a.node_id)),
    )
