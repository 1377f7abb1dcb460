"""Evaluator registry for the eligibility rule engine."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from servicegraph.eligibility.rules.schemas import Rule, RuleResult
from servicegraph.eligibility.schemas import UserContext

EvaluateFn = Callable[[Rule, UserContext, date], RuleResult]


@dataclass(frozen=True)
class EvaluatorDefinition:
    rule_type: str
    evaluate_fn: EvaluateFn


class EvaluatorRegistry:
    """Maps each rule ``type`` discriminator to the function that evaluates it."""

    def __init__(self) -> None:
        self._evaluators: dict[str, EvaluatorDefinition] = {}

    def register(self, *rule_types: str) -> Callable[[EvaluateFn], EvaluateFn]:
        """Decorator to register an evaluator for one or more rule types."""

        def decorator(fn: EvaluateFn) -> EvaluateFn:
            for rule_type in rule_types:
                self._evaluators[rule_type] = EvaluatorDefinition(
                    rule_type=rule_type,
                    evaluate_fn=fn,
                )
            return fn

        return decorator

    def rule_types(self) -> list[str]:
        return list(self._evaluators)

    def evaluate(self, rule: Rule, ctx: UserContext, today: date) -> RuleResult:
        definition = self._evaluators.get(rule.type)
        if definition is None:
            raise KeyError(
                f"No evaluator registered for rule type '{rule.type}'; "
                f"known types: {', '.join(self.rule_types())}"
            )
        return definition.evaluate_fn(rule, ctx, today)


registry = EvaluatorRegistry()
