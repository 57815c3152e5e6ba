"""Adapters for loading and saving orchestrators."""

from flowcore.adapters.stores import (
    HttpStore,
    MemoryStore,
    OrchestratorStore,
    StoreError,
)

__all__ = [
    "OrchestratorStore",
    "MemoryStore",
    "HttpStore",
    "StoreError",
]
