"""Analysis utilities for execution logs and saved flows."""

from flowcore.analysis.execution_summary import (
    ExecutionSummary,
    NodeActivity,
    summarize_executions,
)
from flowcore.analysis.inspect_flow import (
    format_report,
    inspect_graph,
    load_flow,
)

__all__ = [
    # execution_summary exports
    "ExecutionSummary",
    "NodeActivity",
    "summarize_executions",
    # inspect_flow exports
    "format_report",
    "inspect_graph",
    "load_flow",
]
