from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

from servicegraph.corpus.schemas import Nation, ServiceType
from servicegraph.eligibility.rules.schemas import RuleResult


class EligibilityVerdict(StrEnum):
    eligible = "eligible"
    not_eligible = "not_eligible"
    needs_more_info = "needs_more_info"


class DeadlineStatus(StrEnum):
    ok = "ok"
    overdue = "overdue"
    unknown_trigger_date = "unknown_trigger_date"


class UserContext(BaseModel):
    """Facts known about a person. Every field is optional.

    A missing field is how a rule ends up ``unknown``; the caller keeps this
    object between turns and fills it in as questions are answered.
    """

    # Demographics
    age: float | None = None
    nation: Nation | None = None
    is_uk_resident: bool | None = None
    citizenship: str | None = None
    immigration_status: str | None = None

    # Employment & income
    employment_status: (
        Literal["employed", "self-employed", "unemployed", "director", "retired", "student"]
        | None
    ) = None
    annual_income: float | None = None
    weekly_income: float | None = None
    weekly_earnings: float | None = None
    savings: float | None = None
    ni_qualifying_years: float | None = None
    has_recent_ni_contributions: bool | None = None

    # Family
    is_pregnant: bool | None = None
    has_children: bool | None = None
    youngest_child_age: float | None = None
    number_of_children: int | None = None
    is_single_parent: bool | None = None
    relationship_status: (
        Literal[
            "single",
            "married",
            "civil_partnership",
            "cohabiting",
            "separated",
            "divorced",
            "widowed",
        ]
        | None
    ) = None

    # Health & disability
    has_disability: bool | None = None
    has_terminal_illness: bool | None = None
    has_long_term_health_condition: bool | None = None
    receives_pip: bool | None = None
    pip_daily_living_rate: Literal["standard", "enhanced"] | None = None
    pip_mobility_rate: Literal["standard", "enhanced"] | None = None

    # Caring
    is_carer: bool | None = None
    caring_hours_per_week: float | None = None
    cared_for_receives_qualifying_benefit: bool | None = None
    is_in_full_time_education: bool | None = None

    # Property & assets
    is_homeowner: bool | None = None
    is_first_time_buyer: bool | None = None
    property_value: float | None = None
    estate_value: float | None = None
    has_mortgage: bool | None = None

    # Bereavement
    has_experienced_bereavement: bool | None = None
    death_registered: bool | None = None
    estate_has_sole_assets: bool | None = None
    assets_held_jointly: bool | None = None

    # Services the user already interacts with
    services_receiving: list[str] | None = None
    services_completed: list[str] | None = None

    # ISO dates keyed by trigger event, e.g. {"birth_date": "2025-02-01"}
    trigger_dates: dict[str, str] | None = None

    custom_facts: dict[str, str | float | bool] | None = None


class ServiceEligibilityResult(BaseModel):
    service_id: str
    service_name: str
    service_type: ServiceType
    verdict: EligibilityVerdict
    details: list[RuleResult] = []
    pending_questions: list[str] = []
    deadline_status: DeadlineStatus | None = None


class EligibilityCheckRequest(BaseModel):
    life_event_ids: list[str] = Field(min_length=1)
    user_context: UserContext = Field(default_factory=UserContext)


class EligibilityCheckSummary(BaseModel):
    total_services: int
    eligible: int
    not_eligible: int
    needs_more_info: int
    overdue_deadlines: int


class ServiceEligibilityBrief(BaseModel):
    """Verdict without rule detail, used when checking a whole journey."""

    service_id: str
    service_name: str
    service_type: ServiceType
    verdict: EligibilityVerdict
    pending_questions: list[str]
    deadline_status: DeadlineStatus | None = None


class EligibilityCheckResponse(BaseModel):
    summary: EligibilityCheckSummary
    services: list[ServiceEligibilityBrief]
