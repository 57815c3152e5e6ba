"""Utility functions for the flow core."""

from flowcore.utils.identifiers import (
    edge_id_for,
    generate_event_id,
    generate_execution_id,
    generate_node_id,
    generate_orchestrator_id,
    generate_rule_id,
    utc_timestamp,
)

__all__ = [
    "edge_id_for",
    "generate_event_id",
    "generate_execution_id",
    "generate_node_id",
    "generate_orchestrator_id",
    "generate_rule_id",
    "utc_timestamp",
]
