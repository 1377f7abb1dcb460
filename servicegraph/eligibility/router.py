from fastapi import APIRouter

from servicegraph.dependencies import EligibilityServiceDep
from servicegraph.eligibility.schemas import (
    EligibilityCheckRequest,
    EligibilityCheckResponse,
    ServiceEligibilityResult,
    UserContext,
)

router = APIRouter()


@router.post("/check", response_model=EligibilityCheckResponse)
async def check_eligibility(
    request: EligibilityCheckRequest,
    service: EligibilityServiceDep,
) -> EligibilityCheckResponse:
    """Screen every service in a journey; call again as facts are added."""
    return await service.check(request.life_event_ids, request.user_context)


@router.post("/services/{service_id}", response_model=ServiceEligibilityResult)
async def check_service_eligibility(
    service_id: str,
    user_context: UserContext,
    service: EligibilityServiceDep,
) -> ServiceEligibilityResult:
    return service.evaluate_service(service_id, user_context)
