"""Checks that decide whether a graph is well-formed and executable.

Validation is advisory while editing: it runs after every mutation and
returns human-readable problems without raising. Publishing is where the
list becomes blocking (see ``flowcore.lifecycle``).
"""

from collections import Counter
from collections.abc import Callable, Iterable

from pydantic import BaseModel

from flowcore.compiler.branches import (
    FALLBACK_HANDLE,
    MAX_RULES,
    accepts_handle,
    duplicate_rule_ids,
)
from flowcore.models.graph import Edge, WorkflowGraph
from flowcore.models.nodes import (
    INTERNAL_AUDIENCES,
    KNOWN_AUDIENCES,
    Node,
    NodeKind,
)
from flowcore.models.reference import ReferenceCatalog


class ValidationIssue(BaseModel):
    """One problem found in a graph."""

    code: str  # e.g. "empty_graph", "dangling_branch"
    message: str
    node_id: str | None = None
    edge_id: str | None = None

    def __str__(self) -> str:
        return self.message


def _describe(node: Node) -> str:
    """'Contract Type?' (cond_contract), or just the id when unlabeled."""
    if node.data.label:
        return f"'{node.data.label}' ({node.id})"
    return node.id


# --- per-kind rules ---


def _check_start_flow(node: Node, catalog: ReferenceCatalog | None) -> list[ValidationIssue]:
    journey_id = node.data.journey_id.strip()
    if not journey_id:
        return [ValidationIssue(
            code="missing_target_flow",
            message=f"Start flow node {_describe(node)} must select a target flow",
            node_id=node.id,
        )]
    if catalog is not None and not catalog.has_journey(journey_id):
        return [ValidationIssue(
            code="unknown_target_flow",
            message=f"Start flow node {_describe(node)} targets unknown flow '{journey_id}'",
            node_id=node.id,
        )]
    return []


def _check_conditional(node: Node, catalog: ReferenceCatalog | None) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if not node.data.switch_field.strip():
        issues.append(ValidationIssue(
            code="missing_switch_field",
            message=f"Conditional node {_describe(node)} must name the field it branches on",
            node_id=node.id,
        ))
    if len(node.data.rules) > MAX_RULES:
        issues.append(ValidationIssue(
            code="too_many_rules",
            message=(
                f"Conditional node {_describe(node)} has {len(node.data.rules)} rules; "
                f"at most {MAX_RULES} are allowed"
            ),
            node_id=node.id,
        ))
    for rule_id in duplicate_rule_ids(node.data):
        issues.append(ValidationIssue(
            code="duplicate_rule_id",
            message=f"Conditional node {_describe(node)} has more than one rule with id '{rule_id}'",
            node_id=node.id,
        ))
    if any(rule.id == FALLBACK_HANDLE for rule in node.data.rules):
        issues.append(ValidationIssue(
            code="reserved_rule_id",
            message=(
                f"Conditional node {_describe(node)} uses the reserved "
                f"fallback handle '{FALLBACK_HANDLE}' as a rule id"
            ),
            node_id=node.id,
        ))
    return issues


def _check_notification(node: Node, catalog: ReferenceCatalog | None) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    unknown = [a for a in node.data.audience if a not in KNOWN_AUDIENCES]
    if unknown:
        issues.append(ValidationIssue(
            code="unknown_audience",
            message=f"Notification node {_describe(node)} has unrecognized audience: {', '.join(unknown)}",
            node_id=node.id,
        ))
    if not any(a in INTERNAL_AUDIENCES for a in node.data.audience):
        issues.append(ValidationIssue(
            code="no_internal_audience",
            message=(
                f"Notification node {_describe(node)} must target at least one internal "
                f"audience ({', '.join(sorted(INTERNAL_AUDIENCES))})"
            ),
            node_id=node.id,
        ))
    return issues


def _check_trigger_workflow(node: Node, catalog: ReferenceCatalog | None) -> list[ValidationIssue]:
    if node.data.workflow_id.strip():
        return []
    return [ValidationIssue(
        code="missing_workflow",
        message=f"Trigger workflow node {_describe(node)} must select a workflow",
        node_id=node.id,
    )]


def _check_delay(node: Node, catalog: ReferenceCatalog | None) -> list[ValidationIssue]:
    if node.data.delay_value > 0:
        return []
    return [ValidationIssue(
        code="invalid_delay",
        message=f"Delay node {_describe(node)} must wait a positive amount of time",
        node_id=node.id,
    )]


def _check_tag_mutation(node: Node, catalog: ReferenceCatalog | None) -> list[ValidationIssue]:
    if node.data.add_tag.strip() or node.data.remove_tag.strip():
        return []
    return [ValidationIssue(
        code="empty_tag_mutation",
        message=f"Tag node {_describe(node)} must add or remove a tag",
        node_id=node.id,
    )]


NodeCheck = Callable[[Node, ReferenceCatalog | None], list[ValidationIssue]]

NODE_CHECKS: dict[NodeKind, NodeCheck] = {
    NodeKind.start_flow: _check_start_flow,
    NodeKind.conditional: _check_conditional,
    NodeKind.notification: _check_notification,
    NodeKind.trigger_workflow: _check_trigger_workflow,
    NodeKind.delay: _check_delay,
    NodeKind.tag_mutation: _check_tag_mutation,
}


def _check_node(node: Node, catalog: ReferenceCatalog | None) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if node.data.delay_value < 0:
        issues.append(ValidationIssue(
            code="invalid_delay",
            message=f"Node {_describe(node)} has a negative delay",
            node_id=node.id,
        ))
    check = NODE_CHECKS.get(NodeKind(node.kind))
    if check is not None:
        issues.extend(check(node, catalog))
    return issues


# --- graph rules ---


def _repeated(ids: Iterable[str]) -> list[str]:
    return [value for value, count in Counter(ids).items() if count > 1]


def _check_unique_ids(graph: WorkflowGraph) -> list[ValidationIssue]:
    """Ids the chain and the labeler key on must not repeat."""
    issues = [
        ValidationIssue(
            code="duplicate_node_id",
            message=f"More than one node uses the id '{node_id}'",
            node_id=node_id,
        )
        for node_id in _repeated(node.id for node in graph.nodes)
    ]
    issues.extend(
        ValidationIssue(
            code="duplicate_edge_id",
            message=f"More than one edge uses the id '{edge_id}'",
            edge_id=edge_id,
        )
        for edge_id in _repeated(edge.id for edge in graph.edges)
    )
    return issues


# --- edge rules ---


def _check_edge(edge: Edge, by_id: dict[str, Node]) -> list[ValidationIssue]:
    missing = [end for end in (edge.source, edge.target) if end not in by_id]
    if missing:
        return [ValidationIssue(
            code="missing_endpoint",
            message=f"Edge {edge.id} references missing node(s): {', '.join(missing)}",
            edge_id=edge.id,
        )]

    source = by_id[edge.source]
    if accepts_handle(source, edge.source_handle):
        return []
    if edge.source_handle is None:
        # only multi-outcome sources require a handle
        message = f"Edge {edge.id} leaves {_describe(source)} without choosing a branch"
    else:
        message = (
            f"Edge {edge.id} from {_describe(source)} references unknown branch "
            f"'{edge.source_handle}' (dangling branch)"
        )
    return [ValidationIssue(
        code="dangling_branch",
        message=message,
        node_id=source.id,
        edge_id=edge.id,
    )]


# --- entry points ---


def find_issues(
    graph: WorkflowGraph,
    catalog: ReferenceCatalog | None = None,
) -> list[ValidationIssue]:
    """Every problem in ``graph``: graph-level first, then nodes, then edges."""
    if not graph.nodes:
        return [ValidationIssue(
            code="empty_graph",
            message="Workflow must contain at least one node",
        )]

    issues = _check_unique_ids(graph)
    for node in graph.nodes:
        issues.extend(_check_node(node, catalog))

    by_id = {node.id: node for node in graph.nodes}
    for edge in graph.edges:
        issues.extend(_check_edge(edge, by_id))
    return issues


def validate(graph: WorkflowGraph, catalog: ReferenceCatalog | None = None) -> list[str]:
    """Human-readable problems in ``graph``; empty when it is executable."""
    return [issue.message for issue in find_issues(graph, catalog)]


def can_publish(graph: WorkflowGraph, catalog: ReferenceCatalog | None = None) -> bool:
    return not find_issues(graph, catalog)
