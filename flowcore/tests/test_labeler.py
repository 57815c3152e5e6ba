"""Tests for structural display ids."""

import random

import pytest

from flowcore.compiler.labeler import (
    apply_display_ids,
    branch_letter,
    compute_display_ids,
    find_roots,
)
from flowcore.models.graph import WorkflowGraph


def _graph(nodes: list[tuple[str, float, float]], edges: list[tuple[str, str]]) -> WorkflowGraph:
    graph = WorkflowGraph()
    for node_id, x, y in nodes:
        graph.add_node("system_update", {"label": node_id}, {"x": x, "y": y}, node_id=node_id)
    for source, target in edges:
        graph.add_edge(source, target)
    return graph


class TestBranchLetter:
    """Spreadsheet-style letters."""

    @pytest.mark.parametrize(
        "index, letter",
        [(0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (27, "AB"), (51, "AZ"), (52, "BA")],
    )
    def test_letters(self, index, letter):
        assert branch_letter(index) == letter

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            branch_letter(-1)


class TestDisplayIds:
    """Forest walk with branch-letter partitioning."""

    def test_fan_out_continues_lowest_child(self, branching_graph):
        labels = compute_display_ids(branching_graph)
        assert labels == {"trig": "A1", "cond": "A2", "reg": "A3", "crm": "B1"}

    def test_each_extra_child_opens_a_new_letter(self):
        graph = _graph(
            [("root", 0, 0), ("low", 200, 300), ("mid", 200, 100), ("top", 200, -100)],
            [("root", "low"), ("root", "mid"), ("root", "top")],
        )
        assert compute_display_ids(graph) == {
            "root": "A1",
            "top": "A2",
            "mid": "B1",
            "low": "C1",
        }

    def test_roots_ordered_by_x_and_drained_in_turn(self):
        graph = _graph(
            [("r2", 0, 300), ("c", 200, 300), ("r1", 0, 0), ("a", 200, 0), ("b", 400, 0)],
            [("r1", "a"), ("a", "b"), ("r2", "c")],
        )
        assert compute_display_ids(graph) == {
            "r1": "A1",
            "a": "A2",
            "b": "A3",
            "r2": "B1",
            "c": "B2",
        }

    def test_shared_node_claimed_by_first_arrival(self):
        graph = _graph(
            [("r1", 0, 0), ("r2", 0, 200), ("join", 300, 100)],
            [("r1", "join"), ("r2", "join")],
        )
        labels = compute_display_ids(graph)
        assert labels["join"] == "A2"
        assert labels["r2"] == "B1"

    def test_converging_branches_keep_first_label(self, onboarding_flow):
        labels = compute_display_ids(onboarding_flow)
        assert labels == {
            "trigger_ats": "A1",
            "register_eva": "A2",
            "cond_contract": "A3",
            "setup_benefits": "A4",
            "validate_pj": "B1",
            "university_doc": "C1",
            "prov_access": "A5",
            "delay_day1": "A6",
            "notify_welcome": "A7",
        }

    def test_cycle_without_roots_starts_at_leftmost(self):
        graph = _graph([("y", 200, 0), ("x", 100, 0)], [("x", "y"), ("y", "x")])
        assert [node.id for node in find_roots(graph)] == ["x"]
        assert compute_display_ids(graph) == {"x": "A1", "y": "A2"}

    def test_unreachable_cycle_gets_no_label(self):
        graph = _graph(
            [("r", 0, 0), ("p", 100, 0), ("q", 200, 0)],
            [("p", "q"), ("q", "p")],
        )
        assert compute_display_ids(graph) == {"r": "A1", "p": None, "q": None}

    def test_empty_graph(self):
        assert compute_display_ids(WorkflowGraph()) == {}

    def test_independent_of_node_and_edge_order(self, onboarding_flow):
        expected = compute_display_ids(onboarding_flow)
        rng = random.Random(7)
        for _ in range(5):
            nodes = list(onboarding_flow.nodes)
            edges = list(onboarding_flow.edges)
            rng.shuffle(nodes)
            rng.shuffle(edges)
            shuffled = WorkflowGraph(nodes=nodes, edges=edges)
            assert compute_display_ids(shuffled) == expected


class TestApplyDisplayIds:
    """Relabeling copies the graph and reports what changed."""

    def test_labels_written_and_input_untouched(self, branching_graph):
        result = apply_display_ids(branching_graph)
        assert [n.display_id for n in result.graph.nodes] == ["A1", "A2", "A3", "B1"]
        assert all(n.display_id is None for n in branching_graph.nodes)
        assert result.changed == ["trig", "cond", "reg", "crm"]

    def test_unchanged_nodes_are_reused(self, branching_graph):
        first = apply_display_ids(branching_graph).graph
        second = apply_display_ids(first)
        assert second.changed == []
        for before, after in zip(first.nodes, second.graph.nodes):
            assert before is after

    def test_relabel_after_topology_change(self, branching_graph):
        labeled = apply_display_ids(branching_graph).graph
        labeled.remove_node("reg")
        result = apply_display_ids(labeled)
        assert result.changed == ["crm"]
        assert result.graph.get_node("crm").display_id == "A3"

    def test_keeps_subclass(self, onboarding_flow):
        result = apply_display_ids(onboarding_flow)
        assert type(result.graph) is type(onboarding_flow)
        assert result.graph.name == onboarding_flow.name
