from collections.abc import Sequence
from datetime import date

import structlog

from servicegraph.eligibility.aggregator import evaluate_service_eligibility
from servicegraph.eligibility.graph import build_eligibility_graph
from servicegraph.eligibility.schemas import (
    EligibilityCheckResponse,
    ServiceEligibilityResult,
    UserContext,
)
from servicegraph.exceptions import NotFoundError, UnknownLifeEventError
from servicegraph.journey.service import JourneyPlanner

logger = structlog.get_logger()


class EligibilityService:
    def __init__(self, planner: JourneyPlanner) -> None:
        self._planner = planner
        self._graph = build_eligibility_graph(planner)

    async def check(
        self,
        life_event_ids: Sequence[str],
        ctx: UserContext,
        today: date | None = None,
    ) -> EligibilityCheckResponse:
        """Run every service in the journey for these life events against the facts."""
        unknown = self._planner.unknown_events(life_event_ids)
        if unknown:
            raise UnknownLifeEventError(unknown)

        state = {"life_event_ids": list(life_event_ids), "user_context": ctx}
        if today is not None:
            state["today"] = today
        result = await self._graph.ainvoke(state)

        logger.info(
            "eligibility_checked",
            life_events=list(life_event_ids),
            services=result["response"].summary.total_services,
        )
        return result["response"]

    def evaluate_service(
        self,
        service_id: str,
        ctx: UserContext,
        today: date | None = None,
    ) -> ServiceEligibilityResult:
        node = self._planner.get_service(service_id)
        if node is None:
            raise NotFoundError("Service", service_id)
        result = evaluate_service_eligibility(node, ctx, today)
        logger.info("service_eligibility_evaluated", service_id=service_id, verdict=result.verdict)
        return result
