"""Pydantic response schemas for the admin analytics endpoints.

Each schema mirrors a frozen dataclass produced by the reporting engine and
is populated from it via ``from_attributes``.
"""

from datetime import datetime

from founder_audit.api.schemas.audit import CamelModel, SegmentationSchema


class NamedCountSchema(CamelModel):
    name: str
    count: int


class NamedValueSchema(CamelModel):
    name: str
    value: int | float


class CohortOverviewSchema(CamelModel):
    total_audits: int
    avg_bottleneck_cost: float
    avg_decision_load: float
    avg_compensation: float


class CategoryAggregateSchema(CamelModel):
    name: str
    total: int | float
    delegate: int | float
    only_you: int
    not_sure: int


class OperationalSplitSchema(CamelModel):
    operational_pct: int
    strategic_pct: int
    total_operational: int | float
    total_strategic: int | float


class SegmentCountSchema(CamelModel):
    name: str
    label: str
    count: int


class SegmentationBreakdownSchema(CamelModel):
    founder_role: list[SegmentCountSchema]
    revenue_range: list[SegmentCountSchema]
    team_size: list[SegmentCountSchema]
    industry_vertical: list[SegmentCountSchema]


class CohortAnalyticsResponse(CamelModel):
    """Aggregate snapshot across all audits."""

    overview: CohortOverviewSchema
    patterns: list[NamedCountSchema]
    categories: list[CategoryAggregateSchema]
    delay_tax: list[NamedValueSchema]
    operational_vs_strategic: OperationalSplitSchema
    segmentation: SegmentationBreakdownSchema


class DropOffPointSchema(CamelModel):
    name: str
    value: int


class SessionAnalyticsResponse(CamelModel):
    """Completion metrics over all tracked sessions."""

    completion_rate: int
    avg_completion_time: str
    avg_completion_ms: float
    drop_off_data: list[DropOffPointSchema]
    total_sessions: int


class FunnelStepSchema(CamelModel):
    name: str
    count: int
    conversion: int


class FunnelAnalyticsResponse(CamelModel):
    """Start to completion funnel."""

    steps: list[FunnelStepSchema]
    start_count: int
    reached_email_count: int
    completed_count: int
    email_capture_rate: int
    start_to_complete_rate: int
    largest_drop_step: str
    largest_drop: int


class AuditSnapshotSchema(CamelModel):
    total_decisions: int | float
    total_bottleneck_cost: float


class PerformanceDeltaSchema(CamelModel):
    email: str
    first_audit: AuditSnapshotSchema
    second_audit: AuditSnapshotSchema
    delta: AuditSnapshotSchema


class BusinessMetricsResponse(CamelModel):
    """Lead capture and retention metrics."""

    email_capture_rate: int
    return_visitor_count: int
    return_visitor_emails: list[str]
    performance_improvement: list[PerformanceDeltaSchema]


class TrendPointSchema(CamelModel):
    period: str
    sessions: int
    completed: int
    completion_rate: int
    audits: int
    avg_bottleneck_cost: int


class TrendsResponse(CamelModel):
    """Per-period rollups, oldest first."""

    trends: list[TrendPointSchema]
    period: str


class FounderProfileSchema(CamelModel):
    email: str
    name: str
    total_audits: int
    last_active: datetime | None = None
    latest_status: str
    segmentation: SegmentationSchema | None = None


class FounderListResponse(CamelModel):
    """Respondent profiles, most recently active first."""

    founders: list[FounderProfileSchema]
    total: int
