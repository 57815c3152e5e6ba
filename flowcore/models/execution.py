"""Execution log records.

The core never produces these; the external runtime reports them and the
monitor view only reads them.
"""

from enum import Enum

from flowcore.models.nodes import FlowModel


class EventStatus(str, Enum):
    success = "success"
    warning = "warning"
    error = "error"


class ExecutionStatus(str, Enum):
    pending = "pending"
    running = "running"
    completed = "completed"
    failed = "failed"


class NodeExecutionEvent(FlowModel):
    """What happened at one node during one execution."""

    id: str
    execution_id: str | None = None
    node_id: str
    node_label: str = ""
    timestamp: str
    status: EventStatus
    message: str = ""
    latency: str | None = None  # e.g. "124ms", as reported by the runtime


class ExecutionRecord(FlowModel):
    """A triggered run of a published orchestrator version."""

    execution_id: str
    orchestrator_id: str
    version: int
    status: ExecutionStatus = ExecutionStatus.pending
    started_at: str
    finished_at: str | None = None
