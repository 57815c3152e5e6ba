"""Orchestrator stores: where the editor loads drafts from and saves them to."""

import os
from typing import Protocol

import httpx

from flowcore.models.orchestrator import Orchestrator

DEFAULT_API_URL = os.getenv("FLOW_API_URL", "http://localhost:8000")


class StoreError(Exception):
    """Raised when a store cannot load or save an orchestrator."""


class OrchestratorStore(Protocol):
    """Load/save contract for orchestrators."""

    def load(self, orchestrator_id: str) -> Orchestrator | None:
        """Return the stored orchestrator, or None if there is none."""
        ...

    def save(self, orchestrator: Orchestrator) -> Orchestrator:
        """Persist the orchestrator and return what the store now holds."""
        ...


class MemoryStore:
    """Keeps orchestrators in a dict. Hands out copies, never the stored object."""

    def __init__(self) -> None:
        self.orchestrators: dict[str, Orchestrator] = {}

    def load(self, orchestrator_id: str) -> Orchestrator | None:
        orchestrator = self.orchestrators.get(orchestrator_id)
        return orchestrator.model_copy(deep=True) if orchestrator else None

    def save(self, orchestrator: Orchestrator) -> Orchestrator:
        self.orchestrators[orchestrator.id] = orchestrator.model_copy(deep=True)
        return orchestrator.model_copy(deep=True)

    def clear(self) -> None:
        self.orchestrators.clear()


class HttpStore:
    """Talks to the flowserver orchestrator API."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self.transport)

    def _url(self, orchestrator_id: str) -> str:
        return f"{self.base_url}/api/orchestrators/{orchestrator_id}"

    def load(self, orchestrator_id: str) -> Orchestrator | None:
        try:
            with self._client() as client:
                response = client.get(self._url(orchestrator_id))
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                return Orchestrator.model_validate(response.json())
        except httpx.RequestError as e:
            raise StoreError(
                f"Failed to connect to server at {self.base_url}: {e}"
            ) from e
        except httpx.HTTPStatusError as e:
            raise StoreError(
                f"Failed to load orchestrator {orchestrator_id}: {e.response.status_code}"
            ) from e

    def save(self, orchestrator: Orchestrator) -> Orchestrator:
        """PUT the draft graph. The server refuses (409) anything not in draft."""
        payload = {
            "name": orchestrator.name,
            "description": orchestrator.description,
            "nodes": [n.model_dump(mode="json", by_alias=True) for n in orchestrator.nodes],
            "edges": [e.model_dump(mode="json", by_alias=True) for e in orchestrator.edges],
        }
        try:
            with self._client() as client:
                response = client.put(self._url(orchestrator.id), json=payload)
                if response.status_code == 404:
                    raise StoreError(f"Orchestrator not found: {orchestrator.id}")
                if response.status_code == 409:
                    raise StoreError(response.json().get("detail", "Orchestrator is not editable"))
                response.raise_for_status()
                return Orchestrator.model_validate(response.json())
        except httpx.RequestError as e:
            raise StoreError(
                f"Failed to connect to server at {self.base_url}: {e}"
            ) from e
        except httpx.HTTPStatusError as e:
            raise StoreError(
                f"Failed to save orchestrator {orchestrator.id}: {e.response.status_code}"
            ) from e
