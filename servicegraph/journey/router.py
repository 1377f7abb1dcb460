from fastapi import APIRouter

from servicegraph.corpus.schemas import LifeEvent
from servicegraph.dependencies import PlannerDep
from servicegraph.exceptions import NotFoundError, UnknownLifeEventError
from servicegraph.journey.schemas import (
    JourneyRequest,
    JourneyResult,
    LifeEventSummary,
    ServiceListing,
    ServiceWithContext,
)

router = APIRouter()


@router.get("/life-events", response_model=list[LifeEventSummary])
async def list_life_events(planner: PlannerDep) -> list[LifeEventSummary]:
    return planner.list_life_events()


@router.get("/life-events/full", response_model=list[LifeEvent])
async def list_life_events_full(planner: PlannerDep) -> list[LifeEvent]:
    """All life events with their entry service ids."""
    return planner.life_events()


@router.post("/journeys", response_model=JourneyResult)
async def plan_journey(request: JourneyRequest, planner: PlannerDep) -> JourneyResult:
    unknown = planner.unknown_events(request.life_event_ids)
    if unknown:
        raise UnknownLifeEventError(unknown)
    return planner.build_journey(request.life_event_ids)


@router.get("/services", response_model=list[ServiceListing])
async def list_services(planner: PlannerDep) -> list[ServiceListing]:
    return planner.all_services()


@router.get("/services/{service_id}", response_model=ServiceWithContext)
async def get_service(service_id: str, planner: PlannerDep) -> ServiceWithContext:
    service = planner.get_service_with_context(service_id)
    if service is None:
        raise NotFoundError("Service", service_id)
    return service
