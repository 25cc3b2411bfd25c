"""Cross-audit cohort analytics for the admin reporting surface.

Every aggregate here is order-insensitive over the input collection, except
where ties are broken by first appearance (Python's sort is stable, and dict
insertion order records first appearance).

Functions:
    calculate_cohort_analytics - overview, patterns, categories, delay tax,
                                 operational/strategic split, segmentation
    calculate_business_metrics - email capture, return visitors, repeat-audit
                                 improvement
    build_founder_profiles     - one profile per respondent email
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from founder_audit.core.arithmetic import percentage, safe_mean
from founder_audit.core.catalog import (
    OPERATIONAL_CATEGORY_IDS,
    SEGMENTATION_FIELDS,
    format_segmentation_value,
)
from founder_audit.core.funnel import count_reached_email
from founder_audit.core.records import AuditRecord, Number, Segmentation, SessionRecord
from founder_audit.observability import get_logger

logger = get_logger(__name__)

TOP_PATTERN_LIMIT: int = 5


@dataclass(frozen=True)
class NamedCount:
    """A label and how often it occurred."""

    name: str
    count: int


@dataclass(frozen=True)
class NamedValue:
    """A label and an accumulated value."""

    name: str
    value: Number


@dataclass(frozen=True)
class CohortOverview:
    """Headline averages across all audits."""

    total_audits: int
    avg_bottleneck_cost: float
    avg_decision_load: float
    avg_compensation: float


@dataclass(frozen=True)
class CategoryAggregate:
    """Summed decision counts for one decision category name."""

    name: str
    total: Number = 0
    delegate: Number = 0
    only_you: int = 0
    not_sure: int = 0


@dataclass(frozen=True)
class OperationalSplit:
    """Share of decisions falling in operational vs strategic categories."""

    operational_pct: int
    strategic_pct: int
    total_operational: Number
    total_strategic: Number


@dataclass(frozen=True)
class SegmentCount:
    """A stored segmentation code, its display label, and its frequency."""

    name: str
    label: str
    count: int


@dataclass(frozen=True)
class SegmentationBreakdown:
    """Per-value counts for each segmentation field, most common first."""

    founder_role: list[SegmentCount] = field(default_factory=list)
    revenue_range: list[SegmentCount] = field(default_factory=list)
    team_size: list[SegmentCount] = field(default_factory=list)
    industry_vertical: list[SegmentCount] = field(default_factory=list)


@dataclass(frozen=True)
class CohortAnalytics:
    """Aggregate snapshot across a set of audits."""

    overview: CohortOverview
    patterns: list[NamedCount]
    categories: list[CategoryAggregate]
    delay_tax: list[NamedValue]
    operational_vs_strategic: OperationalSplit
    segmentation: SegmentationBreakdown


@dataclass(frozen=True)
class AuditSnapshot:
    """The headline numbers of one audit, used in repeat-audit comparisons."""

    total_decisions: Number
    total_bottleneck_cost: float


@dataclass(frozen=True)
class PerformanceDelta:
    """Change between a respondent's first and second audit."""

    email: str
    first_audit: AuditSnapshot
    second_audit: AuditSnapshot
    delta: AuditSnapshot


@dataclass(frozen=True)
class BusinessMetrics:
    """Lead-capture and retention metrics."""

    email_capture_rate: int
    return_visitor_count: int
    return_visitor_emails: list[str]
    performance_improvement: list[PerformanceDelta]


@dataclass(frozen=True)
class FounderProfile:
    """Everything known about one respondent, keyed by email."""

    email: str
    name: str
    total_audits: int
    last_active: datetime | None
    latest_status: str
    segmentation: Segmentation | None


# ---------------------------------------------------------------------------
# Cohort analytics
# ---------------------------------------------------------------------------


def _ranked(counts: dict[str, int]) -> list[NamedCount]:
    ranked = [NamedCount(name=name, count=count) for name, count in counts.items()]
    return sorted(ranked, key=lambda item: item.count, reverse=True)


def _overview(audits: Sequence[AuditRecord]) -> CohortOverview:
    total = len(audits)
    return CohortOverview(
        total_audits=total,
        avg_bottleneck_cost=safe_mean(sum(a.results.total_bottleneck_cost for a in audits), total),
        avg_decision_load=safe_mean(sum(a.results.total_decisions for a in audits), total),
        avg_compensation=safe_mean(sum(a.audit_data.annual_compensation for a in audits), total),
    )


def _pattern_frequency(audits: Sequence[AuditRecord]) -> list[NamedCount]:
    counts: dict[str, int] = {}
    for audit in audits:
        for pattern in audit.audit_data.patterns:
            if pattern.checked:
                counts[pattern.name] = counts.get(pattern.name, 0) + 1
    return _ranked(counts)[:TOP_PATTERN_LIMIT]


def _category_breakdown(audits: Sequence[AuditRecord]) -> list[CategoryAggregate]:
    # Grouped by display name, not id.
    totals: dict[str, dict[str, Number]] = {}
    for audit in audits:
        for category in audit.audit_data.decision_categories:
            bucket = totals.setdefault(
                category.name,
                {"total": 0, "delegate": 0, "only_you": 0, "not_sure": 0},
            )
            bucket["total"] += category.decisions
            bucket["delegate"] += category.could_delegate
            bucket["only_you"] += category.only_you
            bucket["not_sure"] += category.not_sure
    return [CategoryAggregate(name=name, **stats) for name, stats in totals.items()]  # type: ignore[arg-type]


def _delay_tax_breakdown(audits: Sequence[AuditRecord]) -> list[NamedValue]:
    totals: dict[str, Number] = {}
    for audit in audits:
        for item in audit.audit_data.delay_tax:
            totals[item.name] = totals.get(item.name, 0) + item.amount
    breakdown = [NamedValue(name=name, value=value) for name, value in totals.items()]
    return sorted(breakdown, key=lambda item: item.value, reverse=True)


def _operational_split(audits: Sequence[AuditRecord]) -> OperationalSplit:
    operational: Number = 0
    strategic: Number = 0
    for audit in audits:
        for category in audit.audit_data.decision_categories:
            if category.id in OPERATIONAL_CATEGORY_IDS:
                operational += category.decisions
            else:
                strategic += category.decisions
    combined = operational + strategic
    return OperationalSplit(
        operational_pct=percentage(operational, combined),
        strategic_pct=percentage(strategic, combined),
        total_operational=operational,
        total_strategic=strategic,
    )


def _segmentation_breakdown(audits: Sequence[AuditRecord]) -> SegmentationBreakdown:
    counts: dict[str, dict[str, int]] = {name: {} for name in SEGMENTATION_FIELDS}
    for audit in audits:
        if audit.segmentation is None:
            continue
        for name in SEGMENTATION_FIELDS:
            value = getattr(audit.segmentation, name)
            if value:
                counts[name][value] = counts[name].get(value, 0) + 1
    return SegmentationBreakdown(
        **{
            name: [
                SegmentCount(
                    name=item.name,
                    label=format_segmentation_value(name, item.name),
                    count=item.count,
                )
                for item in _ranked(counts[name])
            ]
            for name in SEGMENTATION_FIELDS
        }
    )


def calculate_cohort_analytics(audits: Sequence[AuditRecord]) -> CohortAnalytics | None:
    """Compute the aggregate snapshot shown on the admin dashboard.

    Args:
        audits: Normalized audit records, in any order.

    Returns:
        CohortAnalytics, or None when there are no audits.
    """
    if not audits:
        return None

    analytics = CohortAnalytics(
        overview=_overview(audits),
        patterns=_pattern_frequency(audits),
        categories=_category_breakdown(audits),
        delay_tax=_delay_tax_breakdown(audits),
        operational_vs_strategic=_operational_split(audits),
        segmentation=_segmentation_breakdown(audits),
    )
    logger.debug(
        "Cohort analytics computed",
        audit_count=len(audits),
        pattern_count=len(analytics.patterns),
        category_count=len(analytics.categories),
    )
    return analytics


# ---------------------------------------------------------------------------
# Business metrics
# ---------------------------------------------------------------------------


def normalize_email(email: str) -> str:
    """Lower-case and trim an email for grouping."""
    return email.strip().lower()


def _created_key(audit: AuditRecord) -> tuple[bool, float]:
    # Audits without a timestamp sort first.
    if audit.created_at is None:
        return (False, 0.0)
    return (True, audit.created_at.timestamp())


def _group_by_email(audits: Sequence[AuditRecord]) -> dict[str, list[AuditRecord]]:
    grouped: dict[str, list[AuditRecord]] = {}
    for audit in audits:
        email = normalize_email(audit.user_email)
        if email:
            grouped.setdefault(email, []).append(audit)
    return grouped


def _snapshot(audit: AuditRecord) -> AuditSnapshot:
    return AuditSnapshot(
        total_decisions=audit.results.total_decisions,
        total_bottleneck_cost=audit.results.total_bottleneck_cost,
    )


def calculate_business_metrics(
    sessions: Sequence[SessionRecord],
    audits: Sequence[AuditRecord],
) -> BusinessMetrics:
    """Compute email capture, return visitors, and repeat-audit improvement.

    Args:
        sessions: Normalized session records.
        audits: Normalized audit records.

    Returns:
        BusinessMetrics. Respondents with a single audit contribute nothing
        to the return-visitor or improvement lists.
    """
    grouped = _group_by_email(audits)
    return_visitors = [email for email, group in grouped.items() if len(group) > 1]

    improvements: list[PerformanceDelta] = []
    for email in return_visitors:
        first, second = sorted(grouped[email], key=_created_key)[:2]
        before, after = _snapshot(first), _snapshot(second)
        improvements.append(
            PerformanceDelta(
                email=email,
                first_audit=before,
                second_audit=after,
                delta=AuditSnapshot(
                    total_decisions=after.total_decisions - before.total_decisions,
                    total_bottleneck_cost=after.total_bottleneck_cost - before.total_bottleneck_cost,
                ),
            )
        )

    return BusinessMetrics(
        email_capture_rate=percentage(len(audits), count_reached_email(sessions)),
        return_visitor_count=len(return_visitors),
        return_visitor_emails=return_visitors,
        performance_improvement=improvements,
    )


# ---------------------------------------------------------------------------
# Founder profiles
# ---------------------------------------------------------------------------


def build_founder_profiles(
    audits: Sequence[AuditRecord],
    search: str | None = None,
) -> list[FounderProfile]:
    """Collapse audits into one profile per respondent.

    The latest audit (by created_at) supplies the name, status, and
    segmentation shown for the respondent.

    Args:
        audits: Normalized audit records.
        search: Optional case-insensitive filter matched against name or email.

    Returns:
        Profiles ordered by most recent activity first.
    """
    profiles: list[FounderProfile] = []
    for email, group in _group_by_email(audits).items():
        latest = max(group, key=_created_key)
        profiles.append(
            FounderProfile(
                email=email,
                name=latest.user_name,
                total_audits=len(group),
                last_active=latest.created_at,
                latest_status=latest.results.overall_status or "Unknown",
                segmentation=latest.segmentation,
            )
        )

    if search:
        needle = search.strip().lower()
        profiles = [p for p in profiles if needle in p.name.lower() or needle in p.email]

    return sorted(
        profiles,
        key=lambda p: (p.last_active is not None, p.last_active.timestamp() if p.last_active else 0.0),
        reverse=True,
    )
