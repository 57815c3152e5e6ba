"""Core data models for the flow core."""

from flowcore.models.action_chain import ActionChain, ChainAction, ChainUi
from flowcore.models.execution import (
    EventStatus,
    ExecutionRecord,
    ExecutionStatus,
    NodeExecutionEvent,
)
from flowcore.models.graph import Edge, GraphError, WorkflowGraph
from flowcore.models.nodes import (
    INTERNAL_AUDIENCES,
    KNOWN_AUDIENCES,
    START_KINDS,
    CommunicationChannel,
    ConditionalData,
    DelayUnit,
    Node,
    NodeData,
    NodeKind,
    Position,
    Rule,
    RuleOperator,
    build_node,
)
from flowcore.models.orchestrator import (
    Orchestrator,
    OrchestratorStatus,
    OrchestratorVersion,
)
from flowcore.models.reference import ExternalJourney, ReferenceCatalog

__all__ = [
    # Graph
    "Edge",
    "GraphError",
    "WorkflowGraph",
    # Nodes
    "INTERNAL_AUDIENCES",
    "KNOWN_AUDIENCES",
    "START_KINDS",
    "CommunicationChannel",
    "ConditionalData",
    "DelayUnit",
    "Node",
    "NodeData",
    "NodeKind",
    "Position",
    "Rule",
    "RuleOperator",
    "build_node",
    # Action chain
    "ActionChain",
    "ChainAction",
    "ChainUi",
    # Orchestrators
    "Orchestrator",
    "OrchestratorStatus",
    "OrchestratorVersion",
    # Execution log
    "EventStatus",
    "ExecutionRecord",
    "ExecutionStatus",
    "NodeExecutionEvent",
    # Reference data
    "ExternalJourney",
    "ReferenceCatalog",
]
