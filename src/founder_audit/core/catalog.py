"""Founder Bottleneck Audit catalogue.

Fixed enumerations shared by the wizard, the scoring engine, and the
reporting aggregators. Identifiers here are persisted inside audit
records, so they must never be renamed.

Sections:
    decision categories    - the ten decision domains counted per week
    delay tax              - 30-day cost buckets for delayed decisions
    bottleneck patterns    - the five self-identified dysfunction archetypes
    session lifecycle      - wizard steps and session statuses
    segmentation           - respondent company attributes and their labels
"""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class CategoryDefinition:
    """A decision domain presented on the decisions step.

    Attributes:
        category_id: Stable identifier stored with every audit.
        name: Display name, also the grouping key in cohort reports.
        operational: True when the domain counts towards operational load.
    """

    category_id: str
    name: str
    operational: bool


@dataclass(frozen=True)
class DelayTaxDefinition:
    """A named 30-day delay-tax bucket."""

    item_id: str
    name: str


@dataclass(frozen=True)
class PatternDefinition:
    """A bottleneck archetype the respondent may self-identify with."""

    pattern_id: str
    name: str
    description: str


# ---------------------------------------------------------------------------
# Decision categories
# ---------------------------------------------------------------------------

DECISION_CATEGORIES: list[CategoryDefinition] = [
    CategoryDefinition("hiring", "Hiring / People decisions", operational=True),
    CategoryDefinition("team", "Team conflicts / Performance issues", operational=True),
    CategoryDefinition("product", "Product / Feature prioritization", operational=False),
    CategoryDefinition("technical", "Technical / Architecture", operational=False),
    CategoryDefinition("customer", "Customer issues / Escalations", operational=True),
    CategoryDefinition("spending", "Spending / Budget approvals", operational=True),
    CategoryDefinition("sales", "Sales / Deal approvals", operational=False),
    CategoryDefinition("pricing", "Pricing / Packaging", operational=False),
    CategoryDefinition("operations", "Operations / Process questions", operational=True),
    CategoryDefinition("marketing", "Marketing / Content approvals", operational=True),
]

OPERATIONAL_CATEGORY_IDS: frozenset[str] = frozenset(
    c.category_id for c in DECISION_CATEGORIES if c.operational
)

# ---------------------------------------------------------------------------
# Delay tax
# ---------------------------------------------------------------------------

DELAY_TAX_ITEMS: list[DelayTaxDefinition] = [
    DelayTaxDefinition("late-launches", "Product/feature launches that shipped late"),
    DelayTaxDefinition("stalled-deals", "Deals that stalled waiting for your approval"),
    DelayTaxDefinition("churned-customers", "Customers who churned while waiting for resolution"),
]

# ---------------------------------------------------------------------------
# Bottleneck patterns
# ---------------------------------------------------------------------------

BOTTLENECK_PATTERNS: list[PatternDefinition] = [
    PatternDefinition(
        pattern_id="approval-addict",
        name="The Approval Addict",
        description=(
            "You require sign-off on things your team should own. You tell yourself "
            "it's \"quality control\" but really it's control."
        ),
    ),
    PatternDefinition(
        pattern_id="only-i-know",
        name="The \"Only I Know\" Problem",
        description=(
            "Only you understand the full picture, so only you can decide. "
            "You haven't built systems to share context."
        ),
    ),
    PatternDefinition(
        pattern_id="heroic-firefighter",
        name="The Heroic Firefighter",
        description=(
            "You swoop in to solve problems your team could handle. "
            "It feels good. It's killing your scale."
        ),
    ),
    PatternDefinition(
        pattern_id="perfectionist-blocker",
        name="The Perfectionist Blocker",
        description=(
            "You delay decisions waiting for perfect information. "
            "80% clarity is enough, you wait for 95%."
        ),
    ),
    PatternDefinition(
        pattern_id="meeting-magnet",
        name="The Meeting Magnet",
        description=(
            "You're in every meeting \"just in case.\" "
            "Your calendar is a graveyard of low-value time."
        ),
    ),
]

# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------

SessionStep = Literal[
    "intro", "email", "segmentation", "decisions", "cost", "patterns", "completed"
]
SessionStatus = Literal["in-progress", "completed", "abandoned"]

FIRST_STEP: str = "intro"
COMPLETED_STEP: str = "completed"
UNKNOWN_STEP: str = "unknown"

STATUS_IN_PROGRESS: SessionStatus = "in-progress"
STATUS_COMPLETED: SessionStatus = "completed"
# Declared for compatibility; no transition sets it.
STATUS_ABANDONED: SessionStatus = "abandoned"
SESSION_STATUSES: list[SessionStatus] = [STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_ABANDONED]

# ---------------------------------------------------------------------------
# Scoring constants
# ---------------------------------------------------------------------------

DecisionLoadLevel = Literal["healthy", "elevated", "critical", "danger"]
OverallStatus = Literal["optimized", "scaling-risk", "critical"]

WORK_HOURS_PER_YEAR: int = 2000  # 50 weeks x 40 hours
WORK_WEEKS_PER_YEAR: int = 50
DELAY_TAX_PERIODS_PER_YEAR: int = 12  # delay tax is reported for a 30-day window

# (inclusive upper bound, level); the final level catches everything above.
DECISION_LOAD_THRESHOLDS: list[tuple[int, DecisionLoadLevel]] = [
    (15, "healthy"),
    (30, "elevated"),
    (50, "critical"),
]
DECISION_LOAD_CEILING_LEVEL: DecisionLoadLevel = "danger"

OPTIMIZED_MAX_DECISIONS_EXCLUSIVE: int = 20
OPTIMIZED_MAX_PATTERNS: int = 1
CRITICAL_MIN_DECISIONS: int = 35
CRITICAL_MIN_PATTERNS: int = 4

# ---------------------------------------------------------------------------
# Segmentation
# ---------------------------------------------------------------------------

SegmentationField = Literal["founder_role", "revenue_range", "team_size", "industry_vertical"]

SEGMENTATION_FIELDS: list[SegmentationField] = [
    "founder_role",
    "revenue_range",
    "team_size",
    "industry_vertical",
]

SEGMENTATION_LABELS: dict[SegmentationField, dict[str, str]] = {
    "founder_role": {
        "solo-founder": "Solo Founder",
        "co-founder": "Co-Founder",
        "ceo": "CEO",
    },
    "revenue_range": {
        "pre-revenue": "Pre-revenue",
        "0-100k": "$0 - $100K",
        "100k-500k": "$100K - $500K",
        "500k-1m": "$500K - $1M",
        "1m-5m": "$1M - $5M",
        "5m-10m": "$5M - $10M",
        "10m+": "$10M+",
    },
    "team_size": {
        "1-5": "1 - 5",
        "6-10": "6 - 10",
        "11-25": "11 - 25",
        "26-50": "26 - 50",
        "51-100": "51 - 100",
        "100+": "100+",
    },
    "industry_vertical": {
        "saas": "SaaS",
        "ecommerce": "E-commerce",
        "fintech": "Fintech",
        "healthcare": "Healthcare",
        "marketplace": "Marketplace",
        "consumer": "Consumer",
        "enterprise": "Enterprise",
        "media": "Media / Content",
        "hardware": "Hardware",
        "other": "Other",
    },
}


def format_segmentation_value(field: SegmentationField, value: str | None) -> str:
    """Return the display label for a stored segmentation code.

    Args:
        field: Segmentation field name (e.g. 'revenue_range').
        value: Stored code, possibly empty.

    Returns:
        The label for known codes, the raw value for unknown ones, or '-'
        when no value was recorded.
    """
    if not value:
        return "-"
    return SEGMENTATION_LABELS.get(field, {}).get(value, value)
