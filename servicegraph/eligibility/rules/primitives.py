"""Leaf rule evaluators: comparison, boolean, enum, dependency, deadline.

A fact that is absent (or null anywhere along its dotted path) yields
``unknown`` with the rule's label as the follow-up question.
"""

import operator
from collections.abc import Mapping
from datetime import date, datetime

from pydantic import BaseModel

from servicegraph.eligibility.rules.registry import registry
from servicegraph.eligibility.rules.schemas import (
    BooleanRule,
    ComparisonRule,
    DeadlineRule,
    DependencyCondition,
    DependencyRule,
    EnumRule,
    Rule,
    RuleResult,
    RuleVerdict,
)
from servicegraph.eligibility.schemas import UserContext

_COMPARATORS = {
    ">=": operator.ge,
    ">": operator.gt,
    "<=": operator.le,
    "<": operator.lt,
    "==": operator.eq,
    "!=": operator.ne,
}


def get_field(ctx: UserContext, path: str) -> object:
    """Resolve a dotted path such as ``custom_facts.household_size``."""
    value: object = ctx
    for key in path.split("."):
        if value is None:
            return None
        if isinstance(value, BaseModel):
            # declared fields only, never methods or pydantic internals
            if key not in type(value).model_fields:
                return None
            value = getattr(value, key)
        elif isinstance(value, Mapping):
            value = value.get(key)
        else:
            return None
    return value


def parse_trigger_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value).date()
    except (TypeError, ValueError):
        return None


def days_since(value: str | None, today: date) -> int | None:
    trigger = parse_trigger_date(value)
    if trigger is None:
        return None
    return (today - trigger).days


def trigger_date_for(ctx: UserContext, trigger_event: str) -> str | None:
    return (ctx.trigger_dates or {}).get(trigger_event)


def _verdict(ok: bool) -> RuleVerdict:
    return RuleVerdict.passed if ok else RuleVerdict.failed


def _unknown(rule: Rule, field: str | None, question: str | None = None) -> RuleResult:
    return RuleResult(
        rule=rule,
        verdict=RuleVerdict.unknown,
        missing_field=field,
        missing_question=question or rule.label,
    )


@registry.register("comparison")
def evaluate_comparison(rule: ComparisonRule, ctx: UserContext, today: date) -> RuleResult:
    value = get_field(ctx, rule.field)
    # bool is an int subclass; a yes/no fact is not a quantity
    if value is None or isinstance(value, bool) or not isinstance(value, int | float):
        return _unknown(rule, rule.field)
    return RuleResult(rule=rule, verdict=_verdict(_COMPARATORS[rule.operator](value, rule.value)))


@registry.register("boolean")
def evaluate_boolean(rule: BooleanRule, ctx: UserContext, today: date) -> RuleResult:
    value = get_field(ctx, rule.field)
    if value is None:
        return _unknown(rule, rule.field)
    return RuleResult(rule=rule, verdict=_verdict(value is rule.expected))


@registry.register("enum")
def evaluate_enum(rule: EnumRule, ctx: UserContext, today: date) -> RuleResult:
    value = get_field(ctx, rule.field)
    if value is None:
        return _unknown(rule, rule.field)
    return RuleResult(rule=rule, verdict=_verdict(value in rule.one_of))


@registry.register("dependency")
def evaluate_dependency(rule: DependencyRule, ctx: UserContext, today: date) -> RuleResult:
    if rule.condition is DependencyCondition.receiving:
        services = ctx.services_receiving or []
    else:
        services = ctx.services_completed or []
    if rule.service_id in services:
        return RuleResult(rule=rule, verdict=RuleVerdict.passed)
    # the list may be incomplete, so absence never proves a fail
    return _unknown(rule, None)


@registry.register("deadline")
def evaluate_deadline(rule: DeadlineRule, ctx: UserContext, today: date) -> RuleResult:
    elapsed = days_since(trigger_date_for(ctx, rule.trigger_event), today)
    if elapsed is None:
        return _unknown(
            rule,
            f"trigger_dates.{rule.trigger_event}",
            f"What is the {rule.trigger_label}?",
        )
    return RuleResult(rule=rule, verdict=_verdict(elapsed <= rule.max_days))
