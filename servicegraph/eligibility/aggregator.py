"""Service-level eligibility: folds per-rule verdicts into one verdict per service.

Designed for progressive disclosure: evaluate with whatever is known, ask
the pending questions, evaluate again with the enriched context.
"""

from collections.abc import Mapping, Sequence
from datetime import date

from servicegraph.corpus.schemas import ServiceNode
from servicegraph.eligibility.rules.evaluator import evaluate_rule
from servicegraph.eligibility.rules.primitives import days_since, trigger_date_for
from servicegraph.eligibility.rules.schemas import DeadlineRule, Rule, RuleVerdict
from servicegraph.eligibility.schemas import (
    DeadlineStatus,
    EligibilityCheckResponse,
    EligibilityCheckSummary,
    EligibilityVerdict,
    ServiceEligibilityBrief,
    ServiceEligibilityResult,
    UserContext,
)
from servicegraph.journey.schemas import JourneyResult


def evaluate_service_eligibility(
    node: ServiceNode,
    ctx: UserContext,
    today: date | None = None,
) -> ServiceEligibilityResult:
    today = today or date.today()
    base = {
        "service_id": node.id,
        "service_name": node.name,
        "service_type": node.service_type,
    }

    # devolved service and the user lives in another nation; an empty list admits none
    if node.nations is not None and ctx.nation and ctx.nation not in node.nations:
        return ServiceEligibilityResult(**base, verdict=EligibilityVerdict.not_eligible)

    rules = node.eligibility.rules
    if not rules:
        if node.eligibility.universal:
            return ServiceEligibilityResult(**base, verdict=EligibilityVerdict.eligible)
        return ServiceEligibilityResult(
            **base,
            verdict=EligibilityVerdict.needs_more_info,
            pending_questions=list(node.eligibility.key_questions),
        )

    details = [evaluate_rule(rule, ctx, today) for rule in rules]
    verdicts = {d.verdict for d in details}

    if RuleVerdict.failed in verdicts:
        verdict = EligibilityVerdict.not_eligible
    elif RuleVerdict.unknown in verdicts:
        verdict = EligibilityVerdict.needs_more_info
    else:
        verdict = EligibilityVerdict.eligible

    pending = list(
        dict.fromkeys(
            d.missing_question
            for d in details
            if d.verdict is RuleVerdict.unknown and d.missing_question
        )
    )

    return ServiceEligibilityResult(
        **base,
        verdict=verdict,
        details=details,
        pending_questions=pending,
        deadline_status=deadline_status(rules, ctx, today),
    )


def deadline_status(rules: Sequence[Rule], ctx: UserContext, today: date) -> DeadlineStatus | None:
    """Claim-window status from the first top-level deadline rule, if any."""
    rule = next((r for r in rules if isinstance(r, DeadlineRule)), None)
    if rule is None:
        return None
    elapsed = days_since(trigger_date_for(ctx, rule.trigger_event), today)
    if elapsed is None:
        return DeadlineStatus.unknown_trigger_date
    return DeadlineStatus.ok if elapsed <= rule.max_days else DeadlineStatus.overdue


def evaluate_journey(
    journey: JourneyResult,
    ctx: UserContext,
    nodes: Mapping[str, ServiceNode],
    today: date | None = None,
) -> list[ServiceEligibilityResult]:
    """Evaluate every service of a journey, in phase order."""
    today = today or date.today()
    return [
        evaluate_service_eligibility(nodes[svc.id], ctx, today)
        for phase in journey.phases
        for svc in phase.services
        if svc.id in nodes
    ]


def summarize(results: Sequence[ServiceEligibilityResult]) -> EligibilityCheckResponse:
    """Counts per verdict plus a lean per-service list without rule detail."""
    summary = EligibilityCheckSummary(
        total_services=len(results),
        eligible=sum(1 for r in results if r.verdict is EligibilityVerdict.eligible),
        not_eligible=sum(1 for r in results if r.verdict is EligibilityVerdict.not_eligible),
        needs_more_info=sum(
            1 for r in results if r.verdict is EligibilityVerdict.needs_more_info
        ),
        overdue_deadlines=sum(
            1 for r in results if r.deadline_status is DeadlineStatus.overdue
        ),
    )
    services = [
        ServiceEligibilityBrief(
            service_id=r.service_id,
            service_name=r.service_name,
            service_type=r.service_type,
            verdict=r.verdict,
            pending_questions=r.pending_questions,
            deadline_status=r.deadline_status,
        )
        for r in results
    ]
    return EligibilityCheckResponse(summary=summary, services=services)
