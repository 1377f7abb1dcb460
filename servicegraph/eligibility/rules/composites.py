"""Composite rules under three-valued logic.

``all``: fail dominates, then unknown, else pass.
``any``: pass dominates; all fail gives fail; anything else is unknown.
``not``: swaps pass and fail; unknown stays unknown.

An unknown composite is summarised by its own label; the sub-rules that
caused it are not surfaced individually.
"""

from datetime import date

from servicegraph.eligibility.rules.registry import registry
from servicegraph.eligibility.rules.schemas import CompositeRule, RuleResult, RuleVerdict
from servicegraph.eligibility.schemas import UserContext


def _children(rule: CompositeRule, ctx: UserContext, today: date) -> list[RuleVerdict]:
    return [registry.evaluate(child, ctx, today).verdict for child in rule.rules]


def _result(rule: CompositeRule, verdict: RuleVerdict) -> RuleResult:
    if verdict is RuleVerdict.unknown:
        return RuleResult(rule=rule, verdict=verdict, missing_question=rule.label)
    return RuleResult(rule=rule, verdict=verdict)


def combine_all(verdicts: list[RuleVerdict]) -> RuleVerdict:
    if RuleVerdict.failed in verdicts:
        return RuleVerdict.failed
    if RuleVerdict.unknown in verdicts:
        return RuleVerdict.unknown
    return RuleVerdict.passed


def combine_any(verdicts: list[RuleVerdict]) -> RuleVerdict:
    if RuleVerdict.passed in verdicts:
        return RuleVerdict.passed
    if all(v is RuleVerdict.failed for v in verdicts):
        return RuleVerdict.failed
    return RuleVerdict.unknown


def negate(verdict: RuleVerdict) -> RuleVerdict:
    if verdict is RuleVerdict.passed:
        return RuleVerdict.failed
    if verdict is RuleVerdict.failed:
        return RuleVerdict.passed
    return RuleVerdict.unknown


@registry.register("all")
def evaluate_all(rule: CompositeRule, ctx: UserContext, today: date) -> RuleResult:
    return _result(rule, combine_all(_children(rule, ctx, today)))


@registry.register("any")
def evaluate_any(rule: CompositeRule, ctx: UserContext, today: date) -> RuleResult:
    return _result(rule, combine_any(_children(rule, ctx, today)))


@registry.register("not")
def evaluate_not(rule: CompositeRule, ctx: UserContext, today: date) -> RuleResult:
    inner = registry.evaluate(rule.rules[0], ctx, today)
    return _result(rule, negate(inner.verdict))
