"""Dependency factories wiring repositories into services per request."""

from functools import lru_cache
from zoneinfo import ZoneInfo

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from founder_audit.adapters.repositories import AuditRepository, AuditSessionRepository
from founder_audit.core.services import AuditService, ReportingService, SessionService
from founder_audit.database import get_db_session
from founder_audit.settings import Settings


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


def get_audit_service(
    session: AsyncSession = Depends(get_db_session),
) -> AuditService:
    """Build AuditService with an injected repository.

    Args:
        session: Async SQLAlchemy session from the database pool.

    Returns:
        Configured AuditService instance.
    """
    return AuditService(audit_repository=AuditRepository(session))


def get_session_service(
    session: AsyncSession = Depends(get_db_session),
) -> SessionService:
    """Build SessionService with an injected repository."""
    return SessionService(session_repository=AuditSessionRepository(session))


def get_reporting_service(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ReportingService:
    """Build ReportingService with injected repositories and reporting zone."""
    return ReportingService(
        audit_repository=AuditRepository(session),
        session_repository=AuditSessionRepository(session),
        reporting_tz=ZoneInfo(settings.reporting_timezone),
    )
