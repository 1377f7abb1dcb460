from typing import Annotated

from fastapi import Depends

from servicegraph.corpus.loader import get_corpus
from servicegraph.eligibility.service import EligibilityService
from servicegraph.graph.index import GraphIndex
from servicegraph.journey.service import JourneyPlanner

_planner: JourneyPlanner | None = None
_eligibility_service: EligibilityService | None = None


def get_planner() -> JourneyPlanner:
    global _planner, _eligibility_service
    corpus = get_corpus()
    # rebuilt only when a different corpus has been loaded
    if _planner is None or _planner.corpus is not corpus:
        _planner = JourneyPlanner(corpus, GraphIndex.from_corpus(corpus))
        _eligibility_service = EligibilityService(_planner)
    return _planner


def get_eligibility_service() -> EligibilityService:
    get_planner()
    return _eligibility_service


PlannerDep = Annotated[JourneyPlanner, Depends(get_planner)]
EligibilityServiceDep = Annotated[EligibilityService, Depends(get_eligibility_service)]
