from pydantic import BaseModel, Field

from servicegraph.corpus.schemas import EdgeType, Nation, ServiceNode, ServiceType


class JourneyRequest(BaseModel):
    life_event_ids: list[str] = Field(min_length=1)


class JourneyService(BaseModel):
    """Lean view of a service inside a journey.

    Full eligibility detail (key questions, qualifiers, evidence) is served
    by the single-service lookup instead.
    """

    id: str
    name: str
    dept: str
    dept_key: str
    deadline: str | None
    desc: str
    govuk_url: str
    service_type: ServiceType
    proactive: bool
    gated: bool
    eligibility_summary: str
    universal: bool
    means_tested: bool
    nations: list[Nation] | None = None
    triggered_by: list[str]
    requires: list[str]
    enables: list[str]


class JourneyPhase(BaseModel):
    phase: int
    label: str
    services: list[JourneyService]


class JourneySummary(BaseModel):
    total_services: int
    total_departments: int
    services_with_deadlines: int
    total_phases: int
    selected_life_events: list[str]


class JourneyResult(BaseModel):
    summary: JourneySummary
    phases: list[JourneyPhase]

    def service_ids(self) -> list[str]:
        return [svc.id for phase in self.phases for svc in phase.services]


class LifeEventSummary(BaseModel):
    id: str
    name: str
    description: str
    entry_node_count: int


class LifeEventRef(BaseModel):
    id: str
    name: str


class GraphLink(BaseModel):
    service_id: str
    name: str
    type: EdgeType


class ServiceWithContext(ServiceNode):
    prerequisites: list[GraphLink]
    unlocks: list[GraphLink]
    triggered_by_events: list[LifeEventRef]


class ServiceListing(ServiceNode):
    triggered_by_events: list[str]
