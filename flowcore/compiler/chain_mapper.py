"""Translate between the editable graph and the persisted action chain.

``to_chain`` is lossy. Each action keeps one ``next_action``, the target of
the first edge (in edge iteration order) leaving that node. Every other
outgoing edge is dropped. This hits every conditional with more than one
wired branch. The dropped edges are logged, and ``discarded_edges`` lists
them so callers can surface the loss.

For graphs where no node has more than one outgoing edge,
``to_graph(to_chain(g))`` gives back the same node ids, payloads, single
edges (source, target, handle) and entry point.
"""

import logging
from typing import Any

from flowcore.models.action_chain import ActionChain, ChainAction, ChainUi
from flowcore.models.graph import Edge, WorkflowGraph
from flowcore.models.nodes import START_KINDS, Node, build_node
from flowcore.models.orchestrator import Orchestrator, OrchestratorStatus
from flowcore.utils.identifiers import edge_id_for

logger = logging.getLogger(__name__)

UNTITLED_NAME = "Untitled Orchestrator"


def _chosen_edges(graph: WorkflowGraph) -> dict[str, Edge]:
    """First outgoing edge per source node, in edge iteration order."""
    chosen: dict[str, Edge] = {}
    for edge in graph.edges:
        chosen.setdefault(edge.source, edge)
    return chosen


def find_entry_point(graph: WorkflowGraph) -> str | None:
    """First trigger or start-flow node, else the first node, else ``None``."""
    for node in graph.nodes:
        if node.kind in START_KINDS:
            return node.id
    return graph.nodes[0].id if graph.nodes else None


def discarded_edges(graph: WorkflowGraph) -> list[Edge]:
    """Edges ``to_chain`` cannot represent: ``outgoing(n) - {chosen}`` for every node."""
    node_ids = graph.node_ids()
    chosen = _chosen_edges(graph)
    return [
        edge
        for edge in graph.edges
        if edge.source in node_ids and chosen[edge.source] is not edge
    ]


def _node_to_action(node: Node, next_edge: Edge | None) -> ChainAction:
    return ChainAction(
        type=node.kind,
        args=node.data.model_dump(mode="json", by_alias=True),
        next_action=next_edge.target if next_edge else None,
        next_handle=next_edge.source_handle if next_edge else None,
        ui=ChainUi(position=node.position.model_copy()),
    )


def to_chain(graph: WorkflowGraph, name: str = "") -> ActionChain:
    """Serialize a graph into the single-pointer action chain."""
    chosen = _chosen_edges(graph)
    actions = {node.id: _node_to_action(node, chosen.get(node.id)) for node in graph.nodes}

    dropped = discarded_edges(graph)
    if dropped:
        logger.warning(
            "action chain keeps one next action per node; dropped %d edge(s): %s",
            len(dropped),
            ", ".join(f"{e.id} ({e.source} -> {e.target})" for e in dropped),
        )

    return ActionChain(
        name=name,
        first_action=find_entry_point(graph),
        actions=actions,
    )


def to_graph(chain: ActionChain) -> WorkflowGraph:
    """Rebuild a graph from a chain: one node per action, one edge per ``next_action``."""
    nodes: list[Node] = []
    edges: list[Edge] = []
    for key, action in chain.actions.items():
        nodes.append(build_node(key, action.type, action.args, action.ui.position))
        if not action.next_action:
            continue
        if action.next_action not in chain.actions:
            logger.warning(
                "action %s points at unknown next action %s; edge skipped",
                key,
                action.next_action,
            )
            continue
        edges.append(
            Edge(
                id=edge_id_for(key, action.next_action),
                source=key,
                target=action.next_action,
                source_handle=action.next_handle,
            )
        )

    graph = WorkflowGraph(nodes=nodes, edges=edges)
    entry = find_entry_point(graph)
    if chain.first_action and chain.first_action != entry:
        # the graph has no entry field; it is always derived from node kinds
        logger.warning(
            "chain starts at %s but the rebuilt graph enters at %s",
            chain.first_action,
            entry,
        )
    return graph


# ---------------------------------------------------------------------------
# Backend document bridge
# ---------------------------------------------------------------------------


def orchestrator_to_chain(orchestrator: Orchestrator, workspace_id: str | None = None) -> ActionChain:
    """Backend document for an orchestrator."""
    chain = to_chain(orchestrator, name=orchestrator.name)
    return chain.model_copy(update={"id": orchestrator.id, "workspace_id": workspace_id})


def orchestrator_from_chain(payload: Any) -> Orchestrator:
    """Orchestrator from a backend chain document (or a list holding one).

    Status and health are not part of the chain document; the result is a
    draft with a clean health record.
    """
    document = payload[0] if isinstance(payload, list) and payload else payload
    if not document:
        raise ValueError("Invalid backend data")
    chain = document if isinstance(document, ActionChain) else ActionChain.model_validate(document)
    graph = to_graph(chain)
    return Orchestrator(
        id=chain.id or "",
        name=chain.name or UNTITLED_NAME,
        status=OrchestratorStatus.draft,
        nodes=graph.nodes,
        edges=graph.edges,
        execution_health=100.0,
        error_count=0,
    )
