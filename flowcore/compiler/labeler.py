"""Structural display ids ("A1", "A2", "B1", ...) for graph nodes.

The graph is walked as a forest from its roots. Every root opens a new
branch letter; within a branch each claimed node takes the next number.
At a fan-out the first unclaimed child (lowest y) continues the parent's
letter and every other unclaimed child opens a fresh letter. A node is
claimed once, by whichever walk reaches it first, which also guarantees
termination on cyclic graphs.

Ordering is total so the output is deterministic:

* roots by (x, y, id);
* children of one node by (y, x, id);
* each root's walk drains completely before the next root starts.

Display ids are derived data. Callers re-run ``apply_display_ids`` after
every topology change and must never treat the ids as identities.
"""

from collections import deque
from dataclasses import dataclass, field

from flowcore.models.graph import WorkflowGraph
from flowcore.models.nodes import Node


@dataclass
class LabelingResult:
    """A relabeled copy of a graph and the ids whose label changed."""

    graph: WorkflowGraph
    changed: list[str] = field(default_factory=list)


def branch_letter(index: int) -> str:
    """0 -> "A", 25 -> "Z", 26 -> "AA", 27 -> "AB"."""
    if index < 0:
        raise ValueError("branch index must be non-negative")
    letters = ""
    index += 1
    while index:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def _root_key(node: Node) -> tuple:
    return (node.position.x, node.position.y, node.id)


def _child_key(node: Node) -> tuple:
    return (node.position.y, node.position.x, node.id)


def find_roots(graph: WorkflowGraph) -> list[Node]:
    """In-degree-0 nodes in root order, or the leftmost node if there are none."""
    if not graph.nodes:
        return []
    ids = graph.node_ids()
    has_incoming = {
        edge.target for edge in graph.edges if edge.source in ids and edge.target in ids
    }
    roots = [node for node in graph.nodes if node.id not in has_incoming]
    if not roots:
        return [min(graph.nodes, key=_root_key)]
    return sorted(roots, key=_root_key)


def compute_display_ids(graph: WorkflowGraph) -> dict[str, str | None]:
    """Map every node id to its display id (``None`` when unreachable)."""
    by_id = {node.id: node for node in graph.nodes}
    children: dict[str, list[Node]] = {node.id: [] for node in graph.nodes}
    for edge in graph.edges:
        if edge.source not in by_id or edge.target not in by_id:
            continue
        target = by_id[edge.target]
        if target not in children[edge.source]:
            children[edge.source].append(target)
    for kids in children.values():
        kids.sort(key=_child_key)

    labels: dict[str, str | None] = {node.id: None for node in graph.nodes}
    counters: list[int] = []  # next sequence number per letter index

    def claim(node: Node, letter_index: int) -> None:
        counters[letter_index] += 1
        labels[node.id] = f"{branch_letter(letter_index)}{counters[letter_index]}"

    def open_branch() -> int:
        counters.append(0)
        return len(counters) - 1

    for root in find_roots(graph):
        if labels[root.id] is not None:
            continue
        queue: deque[tuple[Node, int]] = deque()
        letter_index = open_branch()
        claim(root, letter_index)
        queue.append((root, letter_index))

        while queue:
            node, letter_index = queue.popleft()
            continued = False
            for child in children[node.id]:
                if labels[child.id] is not None:
                    continue
                if not continued:
                    child_letter = letter_index
                    continued = True
                else:
                    child_letter = open_branch()
                claim(child, child_letter)
                queue.append((child, child_letter))

    return labels


def apply_display_ids(graph: WorkflowGraph) -> LabelingResult:
    """Return a copy of ``graph`` carrying fresh display ids.

    Nodes whose display id is unchanged are reused as-is, so consumers
    comparing node identity see no change for them. The input graph is not
    modified.
    """
    labels = compute_display_ids(graph)
    nodes = []
    changed: list[str] = []
    for node in graph.nodes:
        label = labels[node.id]
        if node.display_id == label:
            nodes.append(node)
            continue
        nodes.append(node.model_copy(update={"display_id": label}))
        changed.append(node.id)
    relabeled = graph.model_copy(update={"nodes": nodes, "edges": list(graph.edges)})
    return LabelingResult(graph=relabeled, changed=changed)
