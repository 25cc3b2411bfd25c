"""FastAPI router for the admin analytics surface.

Every endpoint recomputes its report from a full scan of stored audits and
sessions. Cohort and session reports return ``null`` when there is no data.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from founder_audit.api.dependencies import get_reporting_service, get_settings
from founder_audit.api.schemas.analytics import (
    BusinessMetricsResponse,
    CohortAnalyticsResponse,
    FounderListResponse,
    FounderProfileSchema,
    FunnelAnalyticsResponse,
    SessionAnalyticsResponse,
    TrendPointSchema,
    TrendsResponse,
)
from founder_audit.core.services import ReportingService
from founder_audit.core.trends import TrendPeriod
from founder_audit.settings import Settings

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/analytics", tags=["Audit Analytics"])


@router.get(
    "/cohort",
    response_model=CohortAnalyticsResponse | None,
    summary="Aggregate statistics across all audits",
)
async def cohort_analytics(
    service: ReportingService = Depends(get_reporting_service),
) -> CohortAnalyticsResponse | None:
    """Averages, pattern frequency, category and delay-tax breakdowns,
    operational vs strategic split, and segmentation distributions."""
    analytics = await service.cohort()
    if analytics is None:
        return None
    return CohortAnalyticsResponse.model_validate(analytics)


@router.get(
    "/sessions",
    response_model=SessionAnalyticsResponse | None,
    summary="Completion rate, completion time, and drop-off points",
)
async def session_analytics(
    service: ReportingService = Depends(get_reporting_service),
) -> SessionAnalyticsResponse | None:
    """Session completion metrics, or null when no sessions exist."""
    analytics = await service.session_analytics()
    if analytics is None:
        return None
    return SessionAnalyticsResponse.model_validate(analytics)


@router.get(
    "/funnel",
    response_model=FunnelAnalyticsResponse,
    summary="Start to completion funnel",
)
async def funnel_analytics(
    service: ReportingService = Depends(get_reporting_service),
) -> FunnelAnalyticsResponse:
    """Stage counts, conversions, and the largest single-step drop."""
    return FunnelAnalyticsResponse.model_validate(await service.funnel())


@router.get(
    "/business",
    response_model=BusinessMetricsResponse,
    summary="Email capture, return visitors, and repeat-audit improvement",
)
async def business_metrics(
    service: ReportingService = Depends(get_reporting_service),
) -> BusinessMetricsResponse:
    """Lead capture and retention metrics."""
    return BusinessMetricsResponse.model_validate(await service.business_metrics())


@router.get(
    "/trends",
    response_model=TrendsResponse,
    summary="Weekly or monthly session and audit trends",
)
async def trends(
    period: TrendPeriod | None = Query(
        default=None,
        description="Bucket granularity: week | month. Defaults to the configured period.",
    ),
    service: ReportingService = Depends(get_reporting_service),
    settings: Settings = Depends(get_settings),
) -> TrendsResponse:
    """Per-period session counts, completion rate, audits, and average cost."""
    selected = period or settings.trend_default_period
    try:
        points = await service.trends(selected)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    logger.info("Trends computed", period=selected, period_count=len(points))
    return TrendsResponse(
        trends=[TrendPointSchema.model_validate(point) for point in points],
        period=selected,
    )


@router.get(
    "/founders",
    response_model=FounderListResponse,
    summary="One profile per respondent",
)
async def founders(
    search: str | None = Query(default=None, max_length=255, description="Filter by name or email"),
    service: ReportingService = Depends(get_reporting_service),
) -> FounderListResponse:
    """Respondent profiles, most recently active first."""
    profiles = await service.founders(search=search)
    return FounderListResponse(
        founders=[FounderProfileSchema.model_validate(profile) for profile in profiles],
        total=len(profiles),
    )
