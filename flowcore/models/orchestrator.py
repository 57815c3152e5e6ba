"""Orchestrator records and their published snapshots."""

from enum import Enum

from flowcore.models.action_chain import ActionChain
from flowcore.models.graph import Edge, WorkflowGraph
from flowcore.models.nodes import FlowModel, Node


class OrchestratorStatus(str, Enum):
    """Lifecycle of an orchestrator."""

    draft = "draft"
    published = "published"
    archived = "archived"


class Orchestrator(WorkflowGraph):
    """A named workflow graph plus its lifecycle state and health counters.

    Created as a draft, edited through the graph primitives, published into
    immutable versions. The core never deletes one.
    """

    id: str
    name: str
    description: str = ""
    status: OrchestratorStatus = OrchestratorStatus.draft

    execution_health: float = 100.0  # percentage
    error_count: int = 0
    last_execution: str | None = None

    published_version: int | None = None
    created_at: str | None = None
    updated_at: str | None = None


class OrchestratorVersion(FlowModel):
    """An immutable snapshot taken at publish time.

    The chain, not the UI graph, is what the execution runtime consumes.
    """

    model_config = {"frozen": True}

    orchestrator_id: str
    version: int  # 1-based, monotonic per orchestrator
    nodes: list[Node]
    edges: list[Edge]
    chain: ActionChain
    published_at: str | None = None
    created_at: str

    def graph(self) -> WorkflowGraph:
        return WorkflowGraph(nodes=list(self.nodes), edges=list(self.edges))
