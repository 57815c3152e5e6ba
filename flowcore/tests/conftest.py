"""Shared graphs for the flow core tests."""

import json
from pathlib import Path

import pytest

from flowcore.models.graph import WorkflowGraph
from flowcore.models.orchestrator import Orchestrator

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def make_branching_graph() -> WorkflowGraph:
    """trigger -> conditional -(tech)-> register, -(biz)-> system update."""
    graph = WorkflowGraph()
    graph.add_node("trigger", {"label": "Offer Accepted"}, {"x": 0, "y": 0}, node_id="trig")
    graph.add_node(
        "conditional",
        {
            "label": "Department?",
            "switchField": "department",
            "rules": [
                {"id": "tech", "label": "Tech", "value": "tech"},
                {"id": "biz", "label": "Business", "value": "biz"},
            ],
        },
        {"x": 300, "y": 0},
        node_id="cond",
    )
    graph.add_node("register_employee", {"label": "Register"}, {"x": 600, "y": 0}, node_id="reg")
    graph.add_node("system_update", {"label": "CRM Seat"}, {"x": 600, "y": 200}, node_id="crm")
    graph.add_edge("trig", "cond")
    graph.add_edge("cond", "reg", "tech")
    graph.add_edge("cond", "crm", "biz")
    return graph


@pytest.fixture
def branching_graph() -> WorkflowGraph:
    return make_branching_graph()


@pytest.fixture
def onboarding_flow() -> Orchestrator:
    with open(FIXTURES_DIR / "onboarding_flow.json") as f:
        return Orchestrator.model_validate(json.load(f))


@pytest.fixture
def onboarding_chain_payload() -> list:
    with open(FIXTURES_DIR / "onboarding_chain.json") as f:
        return json.load(f)
