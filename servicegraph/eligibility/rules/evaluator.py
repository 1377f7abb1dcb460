from datetime import date

# imported for their @registry.register side effects
from servicegraph.eligibility.rules import composites, primitives  # noqa: F401
from servicegraph.eligibility.rules.registry import registry
from servicegraph.eligibility.rules.schemas import Rule, RuleResult
from servicegraph.eligibility.schemas import UserContext


def evaluate_rule(rule: Rule, ctx: UserContext, today: date | None = None) -> RuleResult:
    """Evaluate one rule (recursively for composites) against the known facts.

    ``today`` anchors deadline arithmetic and defaults to the current date.
    """
    return registry.evaluate(rule, ctx, today or date.today())
