"""Static corpus records: service nodes, typed edges and life events."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from servicegraph.eligibility.rules.schemas import Rule


class ServiceType(StrEnum):
    benefit = "benefit"
    entitlement = "entitlement"
    obligation = "obligation"
    registration = "registration"
    application = "application"
    legal_process = "legal_process"
    document = "document"
    grant = "grant"


class EdgeType(StrEnum):
    requires = "REQUIRES"
    enables = "ENABLES"


class Nation(StrEnum):
    england = "england"
    scotland = "scotland"
    wales = "wales"
    northern_ireland = "northern-ireland"


class EligibilityFactor(StrEnum):
    age = "age"
    income = "income"
    employment = "employment"
    disability = "disability"
    terminal_illness = "terminal_illness"
    ni_record = "ni_record"
    caring = "caring"
    residency = "residency"
    geography = "geography"
    family = "family"
    relationship_status = "relationship_status"
    asset = "asset"
    property = "property"
    bereavement = "bereavement"
    immigration = "immigration"
    citizenship = "citizenship"
    dependency = "dependency"


class Criterion(BaseModel):
    model_config = ConfigDict(frozen=True)

    factor: EligibilityFactor
    description: str


class EligibilityInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: str
    universal: bool = False
    means_tested: bool = False
    criteria: list[Criterion] = []
    key_questions: list[str] = []
    auto_qualifiers: list[str] = []
    exclusions: list[str] = []
    evidence_required: list[str] = []
    rules: list[Rule] | None = None


class ServiceNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    dept: str
    dept_key: str
    deadline: str | None = None
    desc: str = ""
    govuk_url: str = ""
    service_type: ServiceType
    proactive: bool = False
    gated: bool = False
    nations: list[Nation] | None = None
    eligibility: EligibilityInfo


class Edge(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_id: str = Field(alias="from")
    to_id: str = Field(alias="to")
    type: EdgeType


class LifeEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    desc: str = ""
    icon: str = ""
    entry_nodes: list[str] = Field(min_length=1)


class Corpus(BaseModel):
    """Everything the planner and the eligibility engine read. Never mutated."""

    model_config = ConfigDict(frozen=True)

    nodes: dict[str, ServiceNode]
    edges: list[Edge] = []
    life_events: list[LifeEvent] = []

    def get_node(self, node_id: str) -> ServiceNode | None:
        return self.nodes.get(node_id)
