"""Eligibility check pipeline.

Sequential graph over a journey:
  plan_journey -> evaluate_eligibility -> summarize_results -> END

All nodes are deterministic; they wrap the pure planner and aggregator.
"""

from datetime import date
from typing import TypedDict

import structlog
from langgraph.graph import END, START, StateGraph

from servicegraph.eligibility.aggregator import evaluate_journey, summarize
from servicegraph.eligibility.schemas import (
    EligibilityCheckResponse,
    ServiceEligibilityResult,
    UserContext,
)
from servicegraph.journey.schemas import JourneyResult
from servicegraph.journey.service import JourneyPlanner

logger = structlog.get_logger()


class EligibilityCheckState(TypedDict, total=False):
    life_event_ids: list[str]
    user_context: UserContext
    today: date
    journey: JourneyResult
    results: list[ServiceEligibilityResult]
    response: EligibilityCheckResponse


def build_eligibility_graph(planner: JourneyPlanner):
    """Compile the check pipeline bound to one planner (and so one corpus)."""

    async def plan_journey(state: EligibilityCheckState) -> dict:
        journey = planner.build_journey(state.get("life_event_ids", []))
        return {"journey": journey}

    async def evaluate_eligibility(state: EligibilityCheckState) -> dict:
        results = evaluate_journey(
            state["journey"],
            state.get("user_context") or UserContext(),
            planner.corpus.nodes,
            state.get("today"),
        )
        logger.info("evaluate_eligibility", services_evaluated=len(results))
        return {"results": results}

    async def summarize_results(state: EligibilityCheckState) -> dict:
        response = summarize(state.get("results", []))
        logger.info(
            "summarize_results",
            eligible=response.summary.eligible,
            not_eligible=response.summary.not_eligible,
            needs_more_info=response.summary.needs_more_info,
            overdue=response.summary.overdue_deadlines,
        )
        return {"response": response}

    workflow = StateGraph(EligibilityCheckState)

    workflow.add_node("plan_journey", plan_journey)
    workflow.add_node("evaluate_eligibility", evaluate_eligibility)
    workflow.add_node("summarize_results", summarize_results)

    workflow.add_edge(START, "plan_journey")
    workflow.add_edge("plan_journey", "evaluate_eligibility")
    workflow.add_edge("evaluate_eligibility", "summarize_results")
    workflow.add_edge("summarize_results", END)

    return workflow.compile()
