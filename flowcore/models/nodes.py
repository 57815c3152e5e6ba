"""Node models for the workflow graph.

A node is a tagged union over ``kind``: one class per node kind, each with
its own payload model. Validation and mapping match on the kind instead of
probing a free-form ``data`` dict for optional keys.

Wire names are camelCase (``delayValue``, ``switchField``, ``displayId``)
because that is what the canvas sends; Python attributes stay snake_case.
"""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel

from flowcore.utils.identifiers import generate_rule_id


class FlowModel(BaseModel):
    """Base model: snake_case attributes, camelCase on the wire."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class NodeKind(str, Enum):
    """Kinds of steps an orchestrator can contain."""

    trigger = "trigger"
    start_flow = "start_flow"
    conditional = "conditional"
    human_approval = "human_approval"
    notification = "notification"
    tag_mutation = "tag_mutation"
    delay = "delay"
    register_employee = "register_employee"
    system_update = "system_update"
    csv_upload = "csv_upload"
    trigger_workflow = "trigger_workflow"

    @classmethod
    def parse(cls, value: str) -> "NodeKind":
        """Resolve a kind tag, accepting the canvas' legacy names."""
        tag = KIND_ALIASES.get(value, value)
        try:
            return cls(tag)
        except ValueError:
            raise ValueError(f"Unknown node kind: {value}") from None


# tags used by earlier canvas builds
KIND_ALIASES = {
    "startFlow": "start_flow",
    "journey": "start_flow",
    "decision": "conditional",
    "humanInTheLoop": "human_approval",
    "setTag": "tag_mutation",
    "tagManager": "tag_mutation",
    "registerEmployee": "register_employee",
    "systemUpdate": "system_update",
    "csvUpload": "csv_upload",
    "triggerWorkflow": "trigger_workflow",
}

# kinds that can serve as the entry point of an action chain
START_KINDS = frozenset({NodeKind.trigger, NodeKind.start_flow})


class DelayUnit(str, Enum):
    minutes = "minutes"
    hours = "hours"
    days = "days"


class CommunicationChannel(str, Enum):
    """Channel-agnostic delivery channels for notifications."""

    email = "email"
    slack = "slack"
    teams = "teams"
    whatsapp = "whatsapp"
    sms = "sms"
    telegram = "telegram"


# recipient classes reachable without external-only channels
INTERNAL_AUDIENCES = frozenset({"employee", "leader", "people_ops"})
EXTERNAL_AUDIENCES = frozenset({"candidate", "vendor"})
KNOWN_AUDIENCES = INTERNAL_AUDIENCES | EXTERNAL_AUDIENCES


class RuleOperator(str, Enum):
    equals = "equals"
    not_equals = "not_equals"
    gt = "gt"
    lt = "lt"
    gte = "gte"
    lte = "lte"
    contains = "contains"


class Position(FlowModel):
    """Canvas coordinates. Only the labeler's tie-break reads these."""

    x: float = 0
    y: float = 0


class Rule(FlowModel):
    """One conditional branch: ``id`` is also the edge handle."""

    model_config = {"coerce_numbers_to_str": True}

    id: str = Field(default_factory=generate_rule_id)
    label: str = ""
    field: str = ""
    operator: RuleOperator = RuleOperator.equals
    value: str = ""


# ---------------------------------------------------------------------------
# Payloads
# ---------------------------------------------------------------------------


class NodeData(FlowModel):
    """Fields every node payload carries.

    Unknown keys are kept so canvas-only extras survive persistence.
    """

    model_config = {"extra": "allow"}

    label: str = ""
    delay_value: int = 0  # "advanced settings" delay before the step runs
    delay_unit: DelayUnit = DelayUnit.minutes


class TriggerData(NodeData):
    method: str = "POST"
    endpoint: str = ""
    auth_type: str | None = None
    integration_id: str | None = None
    integration_active: bool = False


class StartFlowData(NodeData):
    journey_id: str = ""  # target flow in the reference catalog


class ConditionalData(NodeData):
    switch_field: str = ""
    rules: list[Rule] = []

    @model_validator(mode="before")
    @classmethod
    def migrate_cases(cls, data: Any) -> Any:
        """Turn the legacy ``cases`` mapping into ordered equals-rules."""
        if not isinstance(data, dict):
            return data
        cases = data.get("cases")
        if not cases or data.get("rules"):
            return data
        data = dict(data)
        data.pop("cases")
        switch_field = data.get("switchField", data.get("switch_field", ""))
        data["rules"] = [
            {
                "id": str(value),
                "label": str(label),
                "field": switch_field,
                "operator": RuleOperator.equals.value,
                "value": str(value),
            }
            for value, label in cases.items()
        ]
        return data


class HumanApprovalData(NodeData):
    assignee: str = ""
    description: str = ""
    timeout: int = 24  # hours


class NotificationData(NodeData):
    channel: CommunicationChannel = CommunicationChannel.email
    audience: list[str] = []
    recipients: str = ""  # free-form addresses shown on the canvas
    message: str = ""
    template_id: str | None = None

    @field_validator("audience", mode="before")
    @classmethod
    def split_audience(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value


class TagMutationData(NodeData):
    add_tag: str = ""
    remove_tag: str = ""


class DelayData(NodeData):
    delay_value: int = 1
    delay_unit: DelayUnit = DelayUnit.days


class RegisterEmployeeData(NodeData):
    system: str = ""


class SystemUpdateData(NodeData):
    system: str = ""
    action: str = ""
    payload: str = ""


class CsvUploadData(NodeData):
    template_id: str | None = None
    file_name: str | None = None


class TriggerWorkflowData(NodeData):
    workflow_id: str = ""


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


class BaseNode(FlowModel):
    """Fields shared by every node kind."""

    id: str
    position: Position = Field(default_factory=Position)
    display_id: str | None = None  # derived by the labeler, never an identity


class TriggerNode(BaseNode):
    kind: Literal["trigger"] = "trigger"
    data: TriggerData = Field(default_factory=TriggerData)


class StartFlowNode(BaseNode):
    kind: Literal["start_flow"] = "start_flow"
    data: StartFlowData = Field(default_factory=StartFlowData)


class ConditionalNode(BaseNode):
    kind: Literal["conditional"] = "conditional"
    data: ConditionalData = Field(default_factory=ConditionalData)


class HumanApprovalNode(BaseNode):
    kind: Literal["human_approval"] = "human_approval"
    data: HumanApprovalData = Field(default_factory=HumanApprovalData)


class NotificationNode(BaseNode):
    kind: Literal["notification"] = "notification"
    data: NotificationData = Field(default_factory=NotificationData)


class TagMutationNode(BaseNode):
    kind: Literal["tag_mutation"] = "tag_mutation"
    data: TagMutationData = Field(default_factory=TagMutationData)


class DelayNode(BaseNode):
    kind: Literal["delay"] = "delay"
    data: DelayData = Field(default_factory=DelayData)


class RegisterEmployeeNode(BaseNode):
    kind: Literal["register_employee"] = "register_employee"
    data: RegisterEmployeeData = Field(default_factory=RegisterEmployeeData)


class SystemUpdateNode(BaseNode):
    kind: Literal["system_update"] = "system_update"
    data: SystemUpdateData = Field(default_factory=SystemUpdateData)


class CsvUploadNode(BaseNode):
    kind: Literal["csv_upload"] = "csv_upload"
    data: CsvUploadData = Field(default_factory=CsvUploadData)


class TriggerWorkflowNode(BaseNode):
    kind: Literal["trigger_workflow"] = "trigger_workflow"
    data: TriggerWorkflowData = Field(default_factory=TriggerWorkflowData)


Node = Annotated[
    Union[
        TriggerNode,
        StartFlowNode,
        ConditionalNode,
        HumanApprovalNode,
        NotificationNode,
        TagMutationNode,
        DelayNode,
        RegisterEmployeeNode,
        SystemUpdateNode,
        CsvUploadNode,
        TriggerWorkflowNode,
    ],
    Field(discriminator="kind"),
]

NODE_ADAPTER: TypeAdapter[Node] = TypeAdapter(Node)


def normalize_node_payload(raw: Any) -> Any:
    """Bring a stored or canvas node dict into the shape ``Node`` expects.

    Accepts the kind under ``type`` and legacy kind tags, and drops a
    ``displayId`` stored inside ``data``.
    """
    if not isinstance(raw, dict):
        return raw
    payload = dict(raw)
    kind = payload.pop("kind", None)
    node_type = payload.pop("type", None)
    tag = kind if kind is not None else node_type
    if isinstance(tag, str):
        payload["kind"] = KIND_ALIASES.get(tag, tag)
    elif tag is not None:
        payload["kind"] = tag
    data = payload.get("data")
    if isinstance(data, dict) and "displayId" in data:
        payload["data"] = {k: v for k, v in data.items() if k != "displayId"}
    return payload


def build_node(
    node_id: str,
    kind: NodeKind | str,
    data: NodeData | dict | None = None,
    position: Position | dict | None = None,
) -> Node:
    """Construct a node of the given kind from loose inputs."""
    node_kind = NodeKind.parse(kind)
    if isinstance(data, NodeData):
        data = data.model_dump(by_alias=True)
    if isinstance(position, Position):
        position = position.model_dump()
    return NODE_ADAPTER.validate_python(
        {
            "id": node_id,
            "kind": node_kind.value,
            "data": data or {},
            "position": position or {},
        }
    )


def merge_data(data: NodeData, patch: dict[str, Any]) -> NodeData:
    """Return a copy of ``data`` with ``patch`` applied and re-validated.

    Patch keys may use either the attribute name or the wire alias.
    """
    merged = data.model_dump(by_alias=True)
    fields = type(data).model_fields
    for key, value in patch.items():
        if key in fields:
            key = fields[key].alias or key
        merged[key] = value
    return type(data).model_validate(merged)
