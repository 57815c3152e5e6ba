"""ID generation and timestamp utilities."""

import uuid
from datetime import datetime, timezone


def generate_orchestrator_id() -> str:
    """Generate a unique orchestrator ID (UUID4)."""
    return str(uuid.uuid4())


def generate_execution_id() -> str:
    """Generate a unique execution ID (UUID4)."""
    return str(uuid.uuid4())


def generate_event_id() -> str:
    """Generate a unique execution event ID (UUID4)."""
    return str(uuid.uuid4())


def generate_node_id() -> str:
    """Generate a canvas node ID, e.g. ``node-3f2a9c1b``."""
    return f"node-{uuid.uuid4().hex[:8]}"


def generate_rule_id() -> str:
    """Generate a conditional rule ID (doubles as its branch handle)."""
    return f"rule-{uuid.uuid4().hex[:8]}"


def edge_id_for(source: str, target: str, source_handle: str | None = None) -> str:
    """Build the conventional edge ID for a connection."""
    if source_handle:
        return f"e-{source}-{source_handle}-{target}"
    return f"e-{source}-{target}"


def utc_timestamp() -> str:
    """Generate an ISO8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()
