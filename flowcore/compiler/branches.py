"""Outbound branches of a node.

This module answers "which branches exist, and in what order" for every
node kind. It never evaluates a rule against live data; that belongs to the
execution runtime.

A conditional node exposes one branch per configured rule, in configured
order, followed by the fallback branch, which always exists and always comes
last.
"""

from dataclasses import dataclass
from typing import Any

from flowcore.models.nodes import ConditionalData, NodeKind, Rule

FALLBACK_HANDLE = "else-handle"
FALLBACK_LABEL = "Default"

APPROVED_HANDLE = "approved"
REJECTED_HANDLE = "rejected"

# single outcome of a linear step
SUCCESS_HANDLE = "success"

MAX_RULES = 10

# kinds whose outgoing edges must name a branch handle
MULTI_OUTCOME_KINDS = frozenset({NodeKind.conditional, NodeKind.human_approval})


class RuleError(ValueError):
    """Raised when a rule mutation would break ordering or handle uniqueness."""


@dataclass(frozen=True)
class Branch:
    handle: str
    label: str


def list_branches(data: ConditionalData) -> list[Branch]:
    """Ordered branches of a conditional: its rules, then the fallback.

    Never empty and never repeats a handle. A rule that reuses an earlier
    handle or the reserved fallback handle contributes no branch; validation
    reports it.
    """
    seen = {FALLBACK_HANDLE}
    branches: list[Branch] = []
    for index, rule in enumerate(data.rules):
        if rule.id in seen:
            continue
        seen.add(rule.id)
        branches.append(Branch(handle=rule.id, label=rule.label or f"Rule {index + 1}"))
    branches.append(Branch(handle=FALLBACK_HANDLE, label=FALLBACK_LABEL))
    return branches


def branches_for(node: Any) -> list[Branch]:
    """Ordered outbound branches of any node."""
    if node.kind == NodeKind.conditional:
        return list_branches(node.data)
    if node.kind == NodeKind.human_approval:
        return [
            Branch(handle=APPROVED_HANDLE, label="Approved"),
            Branch(handle=REJECTED_HANDLE, label="Rejected"),
        ]
    return [Branch(handle=SUCCESS_HANDLE, label="Next")]


def accepts_handle(node: Any, handle: str | None) -> bool:
    """Whether an edge leaving ``node`` through ``handle`` maps to a branch."""
    if handle is None:
        return node.kind not in MULTI_OUTCOME_KINDS
    return any(branch.handle == handle for branch in branches_for(node))


def branch_label(node: Any, handle: str | None) -> str | None:
    """Edge label for a handle; linear steps get none."""
    if handle is None or node.kind not in MULTI_OUTCOME_KINDS:
        return None
    for branch in branches_for(node):
        if branch.handle == handle:
            return branch.label
    return None


def duplicate_rule_ids(data: ConditionalData) -> list[str]:
    """Rule ids that appear more than once, in first-seen order."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for rule in data.rules:
        if rule.id in seen and rule.id not in duplicates:
            duplicates.append(rule.id)
        seen.add(rule.id)
    return duplicates


# ---------------------------------------------------------------------------
# Rule mutations. Each returns a new payload and leaves the input untouched.
# ---------------------------------------------------------------------------


def _index_of(data: ConditionalData, rule_id: str) -> int:
    for index, rule in enumerate(data.rules):
        if rule.id == rule_id:
            return index
    raise RuleError(f"Rule not found: {rule_id}")


def _check_handle_free(data: ConditionalData, handle: str, ignore_index: int | None = None) -> None:
    if handle == FALLBACK_HANDLE:
        raise RuleError(f"'{FALLBACK_HANDLE}' is reserved for the fallback branch")
    for index, rule in enumerate(data.rules):
        if index != ignore_index and rule.id == handle:
            raise RuleError(f"Rule id already in use: {handle}")


def add_rule(data: ConditionalData, rule: Rule) -> ConditionalData:
    """Append a rule as the last configured branch."""
    if len(data.rules) >= MAX_RULES:
        raise RuleError(f"A conditional supports at most {MAX_RULES} rules")
    _check_handle_free(data, rule.id)
    return data.model_copy(update={"rules": [*data.rules, rule]})


def update_rule(data: ConditionalData, rule_id: str, patch: dict[str, Any]) -> ConditionalData:
    """Change fields of one rule in place, keeping its position."""
    index = _index_of(data, rule_id)
    current = data.rules[index]
    fields = Rule.model_fields
    merged = current.model_dump(by_alias=True)
    for key, value in patch.items():
        if key in fields:
            key = fields[key].alias or key
        merged[key] = value
    updated = Rule.model_validate(merged)
    if updated.id != current.id:
        _check_handle_free(data, updated.id, ignore_index=index)
    rules = list(data.rules)
    rules[index] = updated
    return data.model_copy(update={"rules": rules})


def remove_rule(data: ConditionalData, rule_id: str) -> ConditionalData:
    index = _index_of(data, rule_id)
    rules = [rule for i, rule in enumerate(data.rules) if i != index]
    return data.model_copy(update={"rules": rules})


def move_rule(data: ConditionalData, rule_id: str, new_index: int) -> ConditionalData:
    """Reorder a rule; ``new_index`` is clamped to the rule list."""
    index = _index_of(data, rule_id)
    rules = list(data.rules)
    rule = rules.pop(index)
    new_index = max(0, min(new_index, len(rules)))
    rules.insert(new_index, rule)
    return data.model_copy(update={"rules": rules})
