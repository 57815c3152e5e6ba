"""database initialization helpers."""

from flowserver.execution_db import init_db as init_execution_db
from flowserver.orchestrator_db import init_db as init_orchestrator_db


def init_all() -> None:
    """initialize all sqlite tables."""
    init_orchestrator_db()
    init_execution_db()
