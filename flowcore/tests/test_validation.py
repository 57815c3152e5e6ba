"""Tests for graph validation rules."""

from flowcore.compiler.branches import MAX_RULES, remove_rule
from flowcore.compiler.validation import can_publish, find_issues, validate
from flowcore.models.graph import WorkflowGraph
from flowcore.models.reference import ExternalJourney, ReferenceCatalog

CATALOG = ReferenceCatalog(journeys=(
    ExternalJourney(id="pre-clt", name="CLT Pre-boarding", steps=12, estimated_days=5),
))


def _codes(graph: WorkflowGraph, catalog: ReferenceCatalog | None = None) -> list[str]:
    return [issue.code for issue in find_issues(graph, catalog)]


def _single(kind: str, data: dict | None = None) -> WorkflowGraph:
    graph = WorkflowGraph()
    graph.add_node(kind, data, node_id="n1")
    return graph


class TestGraphLevel:
    """Whole-graph checks."""

    def test_empty_graph(self):
        assert validate(WorkflowGraph()) == ["Workflow must contain at least one node"]
        assert not can_publish(WorkflowGraph())

    def test_branching_example_is_clean(self, branching_graph):
        assert validate(branching_graph) == []
        assert can_publish(branching_graph)

    def test_onboarding_flow_is_clean(self, onboarding_flow):
        assert validate(onboarding_flow) == []

    def test_validate_matches_issue_messages(self):
        graph = _single("start_flow")
        assert validate(graph) == [issue.message for issue in find_issues(graph)]

    def test_validation_leaves_graph_untouched(self, branching_graph):
        branching_graph.update_node_data("cond", {"switchField": ""})
        before = branching_graph.model_dump()
        assert validate(branching_graph, CATALOG)
        assert branching_graph.model_dump() == before

    def test_repeated_node_and_edge_ids(self):
        graph = WorkflowGraph.model_validate({
            "nodes": [
                {"id": "a", "type": "trigger"},
                {"id": "a", "type": "delay"},
                {"id": "b", "type": "delay"},
            ],
            "edges": [
                {"id": "e1", "source": "a", "target": "b"},
                {"id": "e1", "source": "b", "target": "a"},
            ],
        })
        issues = find_issues(graph)
        assert [i.code for i in issues] == ["duplicate_node_id", "duplicate_edge_id"]
        assert issues[0].node_id == "a"
        assert issues[1].edge_id == "e1"
        assert not can_publish(graph)


class TestStartFlow:
    """start_flow must name a target flow."""

    def test_missing_then_fixed(self):
        graph = _single("start_flow", {"label": "Pre-boarding Hub"})
        errors = validate(graph)
        assert len(errors) == 1
        assert "'Pre-boarding Hub' (n1)" in errors[0]
        assert "target flow" in errors[0]

        graph.update_node_data("n1", {"journeyId": "pre-clt"})
        assert validate(graph) == []

    def test_unknown_journey_only_with_catalog(self):
        graph = _single("start_flow", {"journeyId": "pre-ghost"})
        assert validate(graph) == []
        assert _codes(graph, CATALOG) == ["unknown_target_flow"]

    def test_known_journey(self):
        assert validate(_single("start_flow", {"journeyId": "pre-clt"}), CATALOG) == []


class TestConditional:
    """Conditional payload and branch checks."""

    def test_missing_switch_field(self):
        assert _codes(_single("conditional")) == ["missing_switch_field"]

    def test_duplicate_rule_ids(self):
        graph = _single("conditional", {
            "switchField": "team",
            "rules": [{"id": "a"}, {"id": "a"}],
        })
        assert _codes(graph) == ["duplicate_rule_id"]

    def test_rule_limit_applies_to_loaded_payloads(self):
        graph = _single("conditional", {
            "switchField": "team",
            "rules": [{"id": f"r{i}"} for i in range(MAX_RULES + 1)],
        })
        issues = find_issues(graph)
        assert [i.code for i in issues] == ["too_many_rules"]
        assert f"at most {MAX_RULES}" in issues[0].message

        graph.update_node_data("n1", {"rules": [{"id": f"r{i}"} for i in range(MAX_RULES)]})
        assert validate(graph) == []

    def test_reserved_rule_id(self):
        graph = _single("conditional", {"switchField": "team", "rules": [{"id": "else-handle"}]})
        assert _codes(graph) == ["reserved_rule_id"]

    def test_rule_deletion_leaves_dangling_branch(self, branching_graph):
        node = branching_graph.get_node("cond")
        remaining = remove_rule(node.data, "biz").rules
        branching_graph.update_node_data(
            "cond",
            {"rules": [rule.model_dump(by_alias=True) for rule in remaining]},
        )

        issues = find_issues(branching_graph)
        assert len(issues) == 1
        assert issues[0].code == "dangling_branch"
        assert issues[0].edge_id == "e-cond-biz-crm"
        assert "dangling branch" in issues[0].message

        branching_graph.remove_edge("e-cond-biz-crm")
        assert validate(branching_graph) == []

    def test_edge_without_handle_from_conditional(self, branching_graph):
        branching_graph.add_node("delay", node_id="wait")
        branching_graph.add_edge("cond", "wait")
        issues = find_issues(branching_graph)
        assert [i.code for i in issues] == ["dangling_branch"]
        assert "without choosing a branch" in issues[0].message

    def test_fallback_handle_is_always_valid(self, branching_graph):
        branching_graph.add_node("delay", node_id="wait")
        branching_graph.add_edge("cond", "wait", "else-handle")
        assert validate(branching_graph) == []


class TestOtherKinds:
    """Per-kind payload checks."""

    def test_notification_needs_internal_audience(self):
        assert _codes(_single("notification")) == ["no_internal_audience"]
        assert _codes(_single("notification", {"audience": ["candidate"]})) == ["no_internal_audience"]
        assert _codes(_single("notification", {"audience": ["candidate", "leader"]})) == []

    def test_notification_unknown_audience(self):
        graph = _single("notification", {"audience": ["employee", "aliens"]})
        issues = find_issues(graph)
        assert [i.code for i in issues] == ["unknown_audience"]
        assert "aliens" in issues[0].message

    def test_trigger_workflow_needs_workflow(self):
        assert _codes(_single("trigger_workflow")) == ["missing_workflow"]
        assert _codes(_single("trigger_workflow", {"workflowId": "o-offboarding-v1"})) == []

    def test_delay_must_be_positive(self):
        assert _codes(_single("delay", {"delayValue": 0})) == ["invalid_delay"]

    def test_negative_step_delay(self):
        assert _codes(_single("register_employee", {"delayValue": -1})) == ["invalid_delay"]

    def test_tag_mutation_needs_a_tag(self):
        assert _codes(_single("tag_mutation")) == ["empty_tag_mutation"]
        assert _codes(_single("tag_mutation", {"removeTag": "Pre-Hire"})) == []


class TestLoadedGraphs:
    """Graphs from storage are not trusted to be consistent."""

    def test_edge_to_missing_node(self):
        graph = WorkflowGraph.model_validate({
            "nodes": [{"id": "a", "type": "trigger"}],
            "edges": [{"id": "e1", "source": "a", "target": "gone"}],
        })
        issues = find_issues(graph)
        assert [i.code for i in issues] == ["missing_endpoint"]
        assert issues[0].edge_id == "e1"

    def test_unknown_handle_on_approval(self):
        graph = WorkflowGraph.model_validate({
            "nodes": [
                {"id": "a", "type": "humanInTheLoop", "data": {"label": "Review"}},
                {"id": "b", "type": "delay"},
            ],
            "edges": [{"id": "e1", "source": "a", "target": "b", "sourceHandle": "maybe"}],
        })
        assert _codes(graph) == ["dangling_branch"]
