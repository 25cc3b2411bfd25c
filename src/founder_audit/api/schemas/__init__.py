"""API schema package for the Founder Bottleneck Audit service."""

from founder_audit.api.schemas.analytics import (
    BusinessMetricsResponse,
    CohortAnalyticsResponse,
    FounderListResponse,
    FunnelAnalyticsResponse,
    SessionAnalyticsResponse,
    TrendsResponse,
)
from founder_audit.api.schemas.audit import (
    AuditResponse,
    CompleteSessionRequest,
    SessionResponse,
    StartSessionRequest,
    SubmitAuditRequest,
    SuccessResponse,
    UpdateSessionRequest,
)

__all__ = [
    "AuditResponse",
    "BusinessMetricsResponse",
    "CohortAnalyticsResponse",
    "CompleteSessionRequest",
    "FounderListResponse",
    "FunnelAnalyticsResponse",
    "SessionAnalyticsResponse",
    "SessionResponse",
    "StartSessionRequest",
    "SubmitAuditRequest",
    "SuccessResponse",
    "TrendsResponse",
    "UpdateSessionRequest",
]
