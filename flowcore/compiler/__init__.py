"""Graph compiler: branch listing, labeling, chain mapping and validation."""

from flowcore.compiler.branches import (
    FALLBACK_HANDLE,
    MAX_RULES,
    Branch,
    RuleError,
    add_rule,
    branches_for,
    list_branches,
    move_rule,
    remove_rule,
    update_rule,
)
from flowcore.compiler.chain_mapper import (
    discarded_edges,
    find_entry_point,
    orchestrator_from_chain,
    orchestrator_to_chain,
    to_chain,
    to_graph,
)
from flowcore.compiler.labeler import (
    LabelingResult,
    apply_display_ids,
    branch_letter,
    compute_display_ids,
)
from flowcore.compiler.validation import (
    ValidationIssue,
    can_publish,
    find_issues,
    validate,
)

__all__ = [
    # branches
    "FALLBACK_HANDLE",
    "MAX_RULES",
    "Branch",
    "RuleError",
    "add_rule",
    "branches_for",
    "list_branches",
    "move_rule",
    "remove_rule",
    "update_rule",
    # labeler
    "LabelingResult",
    "apply_display_ids",
    "branch_letter",
    "compute_display_ids",
    # chain mapper
    "discarded_edges",
    "find_entry_point",
    "orchestrator_from_chain",
    "orchestrator_to_chain",
    "to_chain",
    "to_graph",
    # validation
    "ValidationIssue",
    "can_publish",
    "find_issues",
    "validate",
]
