#!/usr/bin/env python3
"""CLI script to inspect a saved orchestrator, graph or action chain.

Usage:
    flow-inspect <flow.json>

    # JSON output
    flow-inspect <flow.json> --json

    # print the action chain the graph compiles to
    flow-inspect <flow.json> --chain
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from flowcore.compiler.chain_mapper import discarded_edges, orchestrator_from_chain, to_chain
from flowcore.compiler.labeler import apply_display_ids
from flowcore.compiler.validation import find_issues
from flowcore.models.graph import WorkflowGraph
from flowcore.models.orchestrator import Orchestrator


def load_flow(path: Path) -> WorkflowGraph:
    """Load a flow document.

    Accepts an orchestrator record, a bare ``{"nodes", "edges"}`` graph, or a
    backend action-chain document (anything with an ``actions`` map).
    """
    with open(path) as f:
        data: Any = json.load(f)

    document = data[0] if isinstance(data, list) and data else data
    if isinstance(document, dict) and "actions" in document:
        return orchestrator_from_chain(document)
    if isinstance(document, dict) and "id" in document and "name" in document:
        return Orchestrator.model_validate(document)
    return WorkflowGraph.model_validate(document)


def inspect_graph(graph: WorkflowGraph) -> dict:
    """Labels, validation issues and chain losses for one graph."""
    labeled = apply_display_ids(graph).graph
    return {
        "name": getattr(graph, "name", None),
        "node_count": len(labeled.nodes),
        "edge_count": len(labeled.edges),
        "labels": {node.id: node.display_id for node in labeled.nodes},
        "issues": [issue.model_dump() for issue in find_issues(labeled)],
        "discarded_edges": [edge.id for edge in discarded_edges(labeled)],
    }


def format_report(report: dict) -> str:
    """Format an inspection report for human-readable output."""
    lines = []
    lines.append("=" * 60)
    lines.append(f"FLOW: {report['name'] or '(unnamed graph)'}")
    lines.append("=" * 60)
    lines.append(f"Nodes: {report['node_count']}")
    lines.append(f"Edges: {report['edge_count']}")
    lines.append("")

    lines.append("-" * 40)
    lines.append("DISPLAY IDS")
    lines.append("-" * 40)
    for node_id, label in report["labels"].items():
        lines.append(f"  {label or '--':>5}  {node_id}")
    if not report["labels"]:
        lines.append("  (no nodes)")
    lines.append("")

    if report["discarded_edges"]:
        lines.append("-" * 40)
        lines.append("EDGES LOST IN ACTION CHAIN")
        lines.append("-" * 40)
        for edge_id in report["discarded_edges"]:
            lines.append(f"  • {edge_id}")
        lines.append("")

    lines.append("-" * 40)
    if report["issues"]:
        lines.append(f"VALIDATION ({len(report['issues'])} issue(s))")
        lines.append("-" * 40)
        for issue in report["issues"]:
            lines.append(f"  [{issue['code']}] {issue['message']}")
    else:
        lines.append("✓ Ready to publish")
        lines.append("-" * 40)
    lines.append("")

    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Inspect a flow file: display ids, validation and chain losses."
    )
    parser.add_argument(
        "flow_file",
        type=Path,
        help="path to an orchestrator, graph or action-chain JSON file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="output the report as JSON instead of human-readable format",
    )
    parser.add_argument(
        "--chain",
        action="store_true",
        help="print the compiled action chain instead of the report",
    )

    args = parser.parse_args(argv)

    if not args.flow_file.exists():
        print(f"Error: flow file not found: {args.flow_file}", file=sys.stderr)
        return 1

    try:
        graph = load_flow(args.flow_file)
    except (json.JSONDecodeError, ValidationError, ValueError) as exc:
        print(f"Error: could not read flow file: {exc}", file=sys.stderr)
        return 1

    if args.chain:
        chain = to_chain(graph, name=getattr(graph, "name", ""))
        print(chain.model_dump_json(by_alias=True, indent=2))
        return 0

    report = inspect_graph(graph)
    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print(format_report(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
