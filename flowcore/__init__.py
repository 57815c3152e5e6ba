"""PeopleOps flow core - graph model, compiler and lifecycle for workflow orchestrators."""

from flowcore.models.nodes import (
    Node,
    NodeKind,
    Position,
    Rule,
    RuleOperator,
    build_node,
)
from flowcore.models.graph import (
    Edge,
    GraphError,
    WorkflowGraph,
)
from flowcore.models.action_chain import (
    ActionChain,
    ChainAction,
)
from flowcore.models.orchestrator import (
    Orchestrator,
    OrchestratorStatus,
    OrchestratorVersion,
)
from flowcore.models.reference import (
    ExternalJourney,
    ReferenceCatalog,
)
from flowcore.compiler import (
    apply_display_ids,
    list_branches,
    to_chain,
    to_graph,
    validate,
)
from flowcore.lifecycle import (
    LifecycleError,
    PublishError,
    TriggerError,
    publish,
)

__all__ = [
    # Nodes
    "Node",
    "NodeKind",
    "Position",
    "Rule",
    "RuleOperator",
    "build_node",
    # Graph
    "Edge",
    "GraphError",
    "WorkflowGraph",
    # Action chain
    "ActionChain",
    "ChainAction",
    # Orchestrators
    "Orchestrator",
    "OrchestratorStatus",
    "OrchestratorVersion",
    # Reference data
    "ExternalJourney",
    "ReferenceCatalog",
    # Compiler
    "apply_display_ids",
    "list_branches",
    "to_chain",
    "to_graph",
    "validate",
    # Lifecycle
    "LifecycleError",
    "PublishError",
    "TriggerError",
    "publish",
]
