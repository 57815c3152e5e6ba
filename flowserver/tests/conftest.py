"""Server test setup: a throwaway SQLite file per test."""

import os
import tempfile
from pathlib import Path

import pytest

# must be set before flowserver modules read their configuration
_DB_DIR = Path(tempfile.mkdtemp(prefix="flowserver-tests-"))
os.environ["FLOW_DB_PATH"] = str(_DB_DIR / "flows.db")
os.environ.pop("JOURNEY_CATALOG_PATH", None)

from fastapi.testclient import TestClient  # noqa: E402

from flowserver.app import app  # noqa: E402
from flowserver.orchestrator_db import FLOW_DB_PATH  # noqa: E402


@pytest.fixture
def client():
    FLOW_DB_PATH.unlink(missing_ok=True)
    with TestClient(app) as test_client:
        yield test_client
    FLOW_DB_PATH.unlink(missing_ok=True)


@pytest.fixture
def graph_payload() -> dict:
    """trigger -> conditional with two wired rules, in canvas wire format."""
    return {
        "name": "Department routing",
        "description": "Routes new hires by department.",
        "nodes": [
            {"id": "trig", "type": "trigger", "position": {"x": 0, "y": 0}, "data": {"label": "Offer Accepted"}},
            {
                "id": "cond",
                "type": "decision",
                "position": {"x": 300, "y": 0},
                "data": {
                    "label": "Department?",
                    "switchField": "department",
                    "rules": [
                        {"id": "tech", "label": "Tech", "value": "tech"},
                        {"id": "biz", "label": "Business", "value": "biz"},
                    ],
                },
            },
            {"id": "reg", "type": "registerEmployee", "position": {"x": 600, "y": 0}, "data": {"label": "Register"}},
            {"id": "crm", "type": "systemUpdate", "position": {"x": 600, "y": 200}, "data": {"label": "CRM Seat"}},
        ],
        "edges": [
            {"id": "e1", "source": "trig", "target": "cond"},
            {"id": "e2", "source": "cond", "target": "reg", "sourceHandle": "tech"},
            {"id": "e3", "source": "cond", "target": "crm", "sourceHandle": "biz"},
        ],
    }


@pytest.fixture
def draft(client, graph_payload) -> dict:
    """A valid draft orchestrator, as returned by the API."""
    response = client.post("/api/orchestrators", json=graph_payload)
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def published(client, draft) -> dict:
    response = client.post(f"/api/orchestrators/{draft['id']}/publish")
    assert response.status_code == 200
    return response.json()["orchestrator"]
