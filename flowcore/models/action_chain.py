"""Persisted "action chain" form of a workflow.

Each action has a single ``next_action`` pointer. Multi-outcome nodes keep
their extra branches inside ``args`` (a conditional's rules), not as extra
pointers, so converting a graph to a chain can drop edges.
"""

from typing import Any

from pydantic import Field, field_validator

from flowcore.models.nodes import KIND_ALIASES, FlowModel, NodeKind, Position


class ChainUi(FlowModel):
    position: Position = Field(default_factory=Position)


class ChainAction(FlowModel):
    """One step of the chain, keyed by node id in ``ActionChain.actions``."""

    type: NodeKind
    args: dict[str, Any] = {}
    next_action: str | None = None
    next_handle: str | None = None  # handle of the edge that became next_action
    fallback: Any = None
    delay_day: int | None = None
    ui: ChainUi = Field(default_factory=ChainUi)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return KIND_ALIASES.get(value, value)
        return value


class ActionChain(FlowModel):
    """The backend document: an entry point plus actions keyed by node id."""

    id: str | None = Field(default=None, alias="_id")
    workspace_id: str | None = None
    name: str = ""
    first_action: str | None = None
    actions: dict[str, ChainAction] = {}
