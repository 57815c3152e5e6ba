"""Tests for execution log statistics."""

from flowcore.analysis.execution_summary import summarize_executions
from flowcore.models.execution import EventStatus, NodeExecutionEvent


def _event(event_id: str, node_id: str, status: str, timestamp: str, label: str = "") -> NodeExecutionEvent:
    return NodeExecutionEvent(
        id=event_id,
        execution_id="exec-1",
        node_id=node_id,
        node_label=label,
        timestamp=timestamp,
        status=EventStatus(status),
    )


class TestSummarizeExecutions:
    """Counts, health and per-node activity."""

    def test_empty_log_is_healthy(self):
        summary = summarize_executions([])
        assert summary.total == 0
        assert summary.execution_health == 100.0
        assert summary.last_execution is None
        assert summary.by_node == []

    def test_counts_and_health(self):
        events = [
            _event("ex-1", "trig-1", "success", "2026-03-02T10:25:01+00:00", "ATS Recruitment"),
            _event("ex-2", "fs-1", "success", "2026-03-02T10:25:05+00:00", "Pre-boarding Hub"),
            _event("ex-3", "dec-1", "warning", "2026-03-02T10:26:12+00:00", "Segment"),
            _event("ex-4", "tag-1", "error", "2026-03-02T10:28:45+00:00", "Context Bridge"),
            _event("ex-5", "trig-1", "success", "2026-03-02T10:30:15+00:00"),
        ]
        summary = summarize_executions(events)

        assert summary.total == 5
        assert summary.success_count == 3
        assert summary.warning_count == 1
        assert summary.error_count == 1
        assert summary.execution_health == 80.0
        assert summary.last_execution == "2026-03-02T10:30:15+00:00"

        assert summary.by_node[0].node_id == "tag-1"
        trigger = next(a for a in summary.by_node if a.node_id == "trig-1")
        assert trigger.success_count == 2
        assert trigger.total == 2
        assert trigger.node_label == "ATS Recruitment"

    def test_last_execution_ignores_input_order(self):
        events = [
            _event("b", "n", "success", "2026-03-02T12:00:00Z"),
            _event("a", "n", "success", "2026-03-02T09:00:00Z"),
        ]
        assert summarize_executions(events).last_execution == "2026-03-02T12:00:00Z"

    def test_health_rounded(self):
        events = [
            _event("1", "n", "success", "2026-03-02T10:00:00+00:00"),
            _event("2", "n", "warning", "2026-03-02T10:00:01+00:00"),
            _event("3", "n", "error", "2026-03-02T10:00:02+00:00"),
        ]
        assert summarize_executions(events).execution_health == 66.7
