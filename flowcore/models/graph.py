"""The editable workflow graph: typed nodes plus directed edges.

Mutation primitives keep one invariant: no edge may reference a node that
is not in the graph. Graphs loaded from storage are not trusted to hold it;
validation reports dangling edges on those.
"""

from typing import Any

from pydantic import field_validator

from flowcore.models.nodes import (
    FlowModel,
    Node,
    NodeData,
    NodeKind,
    Position,
    build_node,
    merge_data,
    normalize_node_payload,
)
from flowcore.utils.identifiers import edge_id_for, generate_node_id


class GraphError(KeyError):
    """Raised when a graph primitive is given an unknown node or edge."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class Edge(FlowModel):
    """A directed connection, optionally leaving through a branch handle."""

    id: str
    source: str
    target: str
    source_handle: str | None = None
    label: str | None = None  # presentation, derived from the handle


class WorkflowGraph(FlowModel):
    """Ordered node and edge collections.

    Order matters: the chain mapper picks the first outgoing edge in
    iteration order.
    """

    nodes: list[Node] = []
    edges: list[Edge] = []

    @field_validator("nodes", mode="before")
    @classmethod
    def normalize_nodes(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [normalize_node_payload(item) for item in value]
        return value

    # --- lookups ---

    def get_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> Edge | None:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None

    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    def outgoing(self, node_id: str) -> list[Edge]:
        """Edges leaving ``node_id``, in iteration order."""
        return [edge for edge in self.edges if edge.source == node_id]

    def incoming(self, node_id: str) -> list[Edge]:
        return [edge for edge in self.edges if edge.target == node_id]

    def _require_node(self, node_id: str) -> Node:
        node = self.get_node(node_id)
        if node is None:
            raise GraphError(f"Node not found: {node_id}")
        return node

    # --- mutations ---

    def add_node(
        self,
        kind: NodeKind | str,
        data: NodeData | dict | None = None,
        position: Position | dict | None = None,
        node_id: str | None = None,
    ) -> str:
        """Append a node and return its id."""
        node_id = node_id or generate_node_id()
        if self.get_node(node_id) is not None:
            raise ValueError(f"Node id already in use: {node_id}")
        self.nodes.append(build_node(node_id, kind, data, position))
        return node_id

    def update_node_data(self, node_id: str, patch: dict[str, Any]) -> None:
        """Merge ``patch`` into a node's payload. The node id never changes."""
        node = self._require_node(node_id)
        updated = node.model_copy(update={"data": merge_data(node.data, patch)})
        self.nodes = [updated if n.id == node_id else n for n in self.nodes]

    def remove_node(self, node_id: str) -> None:
        """Remove a node together with every edge touching it."""
        self._require_node(node_id)
        nodes = [n for n in self.nodes if n.id != node_id]
        edges = [e for e in self.edges if e.source != node_id and e.target != node_id]
        self.nodes, self.edges = nodes, edges

    def add_edge(
        self,
        source: str,
        target: str,
        source_handle: str | None = None,
        edge_id: str | None = None,
    ) -> str:
        """Connect two existing nodes and return the edge id.

        Connecting the same source, target and handle twice returns the
        existing edge.
        """
        from flowcore.compiler.branches import branch_label

        source_node = self._require_node(source)
        self._require_node(target)
        for edge in self.edges:
            if (edge.source, edge.target, edge.source_handle) == (source, target, source_handle):
                return edge.id

        edge_id = edge_id or edge_id_for(source, target, source_handle)
        if self.get_edge(edge_id) is not None:
            raise ValueError(f"Edge id already in use: {edge_id}")
        self.edges.append(
            Edge(
                id=edge_id,
                source=source,
                target=target,
                source_handle=source_handle,
                label=branch_label(source_node, source_handle),
            )
        )
        return edge_id

    def remove_edge(self, edge_id: str) -> None:
        if self.get_edge(edge_id) is None:
            raise GraphError(f"Edge not found: {edge_id}")
        self.edges = [e for e in self.edges if e.id != edge_id]

    def snapshot(self) -> "WorkflowGraph":
        """A plain graph copy (drops any subclass fields)."""
        return WorkflowGraph(
            nodes=[n.model_copy(deep=True) for n in self.nodes],
            edges=[e.model_copy() for e in self.edges],
        )
