from datetime import date, timedelta

import pytest
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from servicegraph.eligibility.rules.composites import combine_all, combine_any, negate
from servicegraph.eligibility.rules.evaluator import evaluate_rule
from servicegraph.eligibility.rules.primitives import get_field
from servicegraph.eligibility.rules.registry import registry
from servicegraph.eligibility.rules.schemas import CompositeRule, Rule, RuleVerdict
from servicegraph.eligibility.schemas import UserContext

TODAY = date(2025, 6, 1)

P, F, U = RuleVerdict.passed, RuleVerdict.failed, RuleVerdict.unknown

rule_adapter = TypeAdapter(Rule)


def rule(**data):
    return rule_adapter.validate_python({"label": "question?", **data})


def verdict(data, ctx=None, today=TODAY):
    return evaluate_rule(rule(**data), ctx or UserContext(), today).verdict


AGE_18 = {"type": "comparison", "field": "age", "operator": ">=", "value": 18}


def test_every_rule_type_has_an_evaluator():
    assert set(registry.rule_types()) == {
        "comparison",
        "boolean",
        "enum",
        "dependency",
        "deadline",
        "all",
        "any",
        "not",
    }


@pytest.mark.parametrize(
    ("operator", "value", "expected"),
    [
        (">=", 30, P),
        (">", 30, F),
        ("<=", 30, P),
        ("<", 31, P),
        ("==", 30, P),
        ("!=", 30, F),
    ],
)
def test_comparison_operators(operator, value, expected):
    data = {"type": "comparison", "field": "age", "operator": operator, "value": value}
    assert verdict(data, UserContext(age=30)) is expected


def test_missing_fact_is_unknown_with_label_as_question():
    result = evaluate_rule(rule(**AGE_18, label="Are you 18 or over?"), UserContext(), TODAY)

    assert result.verdict is U
    assert result.missing_field == "age"
    assert result.missing_question == "Are you 18 or over?"


def test_comparison_against_non_numeric_fact_is_unknown():
    data = {"type": "comparison", "field": "custom_facts.x", "operator": ">", "value": 1}

    assert verdict(data, UserContext(custom_facts={"x": "lots"})) is U
    assert verdict(data, UserContext(custom_facts={"x": True})) is U
    assert verdict(data, UserContext(custom_facts={"x": 2})) is P


def test_nested_path_resolution():
    data = {"type": "boolean", "field": "custom_facts.owns_car", "expected": True}

    assert verdict(data, UserContext(custom_facts={"owns_car": True})) is P
    assert verdict(data, UserContext(custom_facts={"owns_car": False})) is F
    assert verdict(data, UserContext(custom_facts={})) is U
    assert verdict(data, UserContext()) is U


def test_get_field_stops_at_scalars():
    ctx = UserContext(age=40, custom_facts={"size": 3})

    assert get_field(ctx, "custom_facts.size") == 3
    assert get_field(ctx, "age.years") is None
    assert get_field(ctx, "not_a_field") is None


def test_get_field_ignores_model_attributes_that_are_not_fields():
    ctx = UserContext(age=40, custom_facts={"size": 3})

    assert get_field(ctx, "copy") is None
    assert get_field(ctx, "model_fields") is None
    assert get_field(ctx, "custom_facts.size.real") is None
    assert verdict({"type": "boolean", "field": "copy", "expected": False}, ctx) is U
    assert verdict({"type": "comparison", "field": "model_config", "operator": ">", "value": 0}, ctx) is U


def test_boolean_and_enum():
    single = {"type": "enum", "field": "relationship_status", "one_of": ["single", "widowed"]}
    assert verdict(single, UserContext(relationship_status="widowed")) is P
    assert verdict(single, UserContext(relationship_status="married")) is F
    assert verdict(single, UserContext()) is U

    pregnant = {"type": "boolean", "field": "is_pregnant", "expected": False}
    assert verdict(pregnant, UserContext(is_pregnant=False)) is P
    assert verdict(pregnant, UserContext(is_pregnant=True)) is F


@pytest.mark.parametrize("receiving", [None, [], ["dwp-pension-credit"]])
def test_dependency_never_fails(receiving):
    data = {"type": "dependency", "service_id": "dwp-universal-credit", "condition": "receiving"}
    result = evaluate_rule(rule(**data), UserContext(services_receiving=receiving), TODAY)

    assert result.verdict is U
    assert result.missing_field is None
    assert result.missing_question == "question?"


def test_dependency_passes_on_matching_list_only():
    receiving = {"type": "dependency", "service_id": "gro-register-death", "condition": "receiving"}
    completed = {"type": "dependency", "service_id": "gro-register-death", "condition": "completed"}
    ctx = UserContext(services_completed=["gro-register-death"])

    assert verdict(completed, ctx) is P
    assert verdict(receiving, ctx) is U


def test_deadline_window():
    data = {
        "type": "deadline",
        "trigger_event": "death",
        "trigger_label": "date of death",
        "max_days": 42,
    }

    def on(days_ago):
        return UserContext(trigger_dates={"death": (TODAY - timedelta(days=days_ago)).isoformat()})

    assert verdict(data, on(0)) is P
    assert verdict(data, on(42)) is P
    assert verdict(data, on(43)) is F

    missing = evaluate_rule(rule(**data), UserContext(), TODAY)
    assert missing.verdict is U
    assert missing.missing_field == "trigger_dates.death"
    assert missing.missing_question == "What is the date of death?"

    garbled = UserContext(trigger_dates={"death": "last tuesday"})
    assert verdict(data, garbled) is U


ALL_TABLE = [
    (P, P, P), (P, F, F), (P, U, U),
    (F, P, F), (F, F, F), (F, U, F),
    (U, P, U), (U, F, F), (U, U, U),
]  # fmt: skip

ANY_TABLE = [
    (P, P, P), (P, F, P), (P, U, P),
    (F, P, P), (F, F, F), (F, U, U),
    (U, P, P), (U, F, U), (U, U, U),
]  # fmt: skip


@pytest.mark.parametrize(("left", "right", "expected"), ALL_TABLE)
def test_all_truth_table(left, right, expected):
    assert combine_all([left, right]) is expected


@pytest.mark.parametrize(("left", "right", "expected"), ANY_TABLE)
def test_any_truth_table(left, right, expected):
    assert combine_any([left, right]) is expected


def test_not_keeps_unknown_fixed():
    assert negate(P) is F
    assert negate(F) is P
    assert negate(U) is U


# facts that drive a leaf rule to each verdict: age >= 18
LEAF_FACTS = {P: 30, F: 10, U: None}


@pytest.mark.parametrize(("left", "right", "expected"), ALL_TABLE)
def test_all_rule_through_evaluator(left, right, expected):
    data = {
        "type": "all",
        "rules": [
            {**AGE_18, "label": "left"},
            {**AGE_18, "field": "custom_facts.other", "label": "right"},
        ],
    }
    custom = {} if LEAF_FACTS[right] is None else {"other": LEAF_FACTS[right]}
    ctx = UserContext(age=LEAF_FACTS[left], custom_facts=custom)

    assert verdict(data, ctx) is expected


def test_composite_unknown_is_summarised_by_its_own_label():
    data = {
        "type": "any",
        "label": "Are you pregnant, or do you have a child under 4?",
        "rules": [
            {"type": "boolean", "field": "is_pregnant", "expected": True, "label": "pregnant?"},
            {
                "type": "comparison",
                "field": "youngest_child_age",
                "operator": "<",
                "value": 4,
                "label": "child age?",
            },
        ],
    }
    result = evaluate_rule(rule_adapter.validate_python(data), UserContext(is_pregnant=False), TODAY)

    assert result.verdict is U
    assert result.missing_question == "Are you pregnant, or do you have a child under 4?"
    assert result.missing_field is None


def test_not_rule_through_evaluator():
    data = {
        "type": "not",
        "rules": [{"type": "boolean", "field": "is_in_full_time_education", "expected": True, "label": "q"}],
    }

    assert verdict(data, UserContext(is_in_full_time_education=True)) is F
    assert verdict(data, UserContext(is_in_full_time_education=False)) is P
    assert verdict(data, UserContext()) is U


def test_not_requires_exactly_one_sub_rule():
    two = [AGE_18 | {"label": "a"}, AGE_18 | {"label": "b"}]

    with pytest.raises(PydanticValidationError):
        rule(type="not", rules=two)
    with pytest.raises(PydanticValidationError):
        rule(type="all", rules=[])

    assert isinstance(rule(type="all", rules=two), CompositeRule)


def test_unregistered_rule_type_is_a_key_error():
    class Stray:
        type = "stray"

    with pytest.raises(KeyError, match="known types: .*comparison"):
        registry.evaluate(Stray(), UserContext(), TODAY)


def test_today_defaults_to_current_date():
    assert evaluate_rule(rule(**AGE_18), UserContext(age=20)).verdict is P
