"""Service layer for the admin reporting surface.

Loads the full audit and session collections through the repositories,
normalizes them once, and hands them to the pure aggregators. No paging:
every report is computed over a full scan.
"""

from datetime import tzinfo

from founder_audit.core.cohort import (
    BusinessMetrics,
    CohortAnalytics,
    FounderProfile,
    build_founder_profiles,
    calculate_business_metrics,
    calculate_cohort_analytics,
)
from founder_audit.core.funnel import (
    FunnelAnalytics,
    SessionAnalytics,
    calculate_funnel,
    calculate_session_analytics,
)
from founder_audit.core.interfaces import IAuditRepository, IAuditSessionRepository
from founder_audit.core.records import (
    AuditRecord,
    SessionRecord,
    normalize_audit,
    normalize_session,
)
from founder_audit.core.trends import TrendPeriod, TrendPoint, calculate_trends
from founder_audit.observability import get_logger

logger = get_logger(__name__)


class ReportingService:
    """Computes admin analytics over stored audits and sessions."""

    def __init__(
        self,
        audit_repository: IAuditRepository,
        session_repository: IAuditSessionRepository,
        reporting_tz: tzinfo | None = None,
    ) -> None:
        """Initialise the service with repository dependencies.

        Args:
            audit_repository: Repository for audit records.
            session_repository: Repository for session records.
            reporting_tz: Zone used to place timestamps into trend periods.
        """
        self._audit_repo = audit_repository
        self._session_repo = session_repository
        self._reporting_tz = reporting_tz

    async def _load_audits(self) -> list[AuditRecord]:
        rows = await self._audit_repo.list_audits()
        return [normalize_audit(row.as_mapping()) for row in rows]

    async def _load_sessions(self) -> list[SessionRecord]:
        rows = await self._session_repo.list_sessions()
        return [normalize_session(row.as_mapping()) for row in rows]

    async def cohort(self) -> CohortAnalytics | None:
        """Return cohort analytics, or None when no audits exist."""
        audits = await self._load_audits()
        logger.info("Cohort report requested", audit_count=len(audits))
        return calculate_cohort_analytics(audits)

    async def session_analytics(self) -> SessionAnalytics | None:
        """Return session completion analytics, or None when no sessions exist."""
        sessions = await self._load_sessions()
        logger.info("Session report requested", session_count=len(sessions))
        return calculate_session_analytics(sessions)

    async def funnel(self) -> FunnelAnalytics:
        """Return the three-stage funnel."""
        sessions = await self._load_sessions()
        audits = await self._load_audits()
        return calculate_funnel(sessions, audits)

    async def business_metrics(self) -> BusinessMetrics:
        """Return lead-capture and retention metrics."""
        sessions = await self._load_sessions()
        audits = await self._load_audits()
        return calculate_business_metrics(sessions, audits)

    async def trends(self, period: TrendPeriod) -> list[TrendPoint]:
        """Return per-period rollups.

        Args:
            period: 'week' or 'month'.

        Raises:
            ValueError: If period is not supported.
        """
        sessions = await self._load_sessions()
        audits = await self._load_audits()
        return calculate_trends(sessions, audits, period=period, tz=self._reporting_tz)

    async def founders(self, search: str | None = None) -> list[FounderProfile]:
        """Return one profile per respondent, most recently active first."""
        audits = await self._load_audits()
        return build_founder_profiles(audits, search=search)
