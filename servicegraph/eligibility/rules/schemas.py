"""Structured eligibility rules.

Rules form a closed tagged union discriminated by ``type``. Every variant
carries a ``label`` which doubles as the question to ask when the rule
cannot be evaluated from the facts supplied.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RuleVerdict(StrEnum):
    passed = "pass"
    failed = "fail"
    unknown = "unknown"


class DependencyCondition(StrEnum):
    receiving = "receiving"
    completed = "completed"


class _RuleBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str


class ComparisonRule(_RuleBase):
    """Numeric comparison, e.g. ``age >= 18``."""

    type: Literal["comparison"] = "comparison"
    field: str
    operator: Literal[">=", ">", "<=", "<", "==", "!="]
    value: float


class BooleanRule(_RuleBase):
    type: Literal["boolean"] = "boolean"
    field: str
    expected: bool


class EnumRule(_RuleBase):
    type: Literal["enum"] = "enum"
    field: str
    one_of: list[str | int | float] = Field(min_length=1)


class DependencyRule(_RuleBase):
    """The user receives, or has completed, another service in the graph."""

    type: Literal["dependency"] = "dependency"
    service_id: str
    condition: DependencyCondition


class DeadlineRule(_RuleBase):
    """Days since ``trigger_dates[trigger_event]`` must not exceed ``max_days``."""

    type: Literal["deadline"] = "deadline"
    trigger_event: str
    trigger_label: str
    max_days: int = Field(ge=0)


class CompositeRule(_RuleBase):
    type: Literal["all", "any", "not"]
    rules: list[Rule] = Field(min_length=1)

    @model_validator(mode="after")
    def _not_takes_one_rule(self) -> CompositeRule:
        if self.type == "not" and len(self.rules) != 1:
            raise ValueError("a 'not' rule wraps exactly one sub-rule")
        return self


Rule = Annotated[
    ComparisonRule | BooleanRule | EnumRule | DependencyRule | DeadlineRule | CompositeRule,
    Field(discriminator="type"),
]

CompositeRule.model_rebuild()


class RuleResult(BaseModel):
    rule: Rule
    verdict: RuleVerdict
    missing_field: str | None = None
    missing_question: str | None = None
