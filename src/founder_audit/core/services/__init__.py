"""Service layer package for the Founder Bottleneck Audit."""

from founder_audit.core.services.audit_service import AuditService
from founder_audit.core.services.reporting_service import ReportingService
from founder_audit.core.services.session_service import SessionService

__all__ = [
    "AuditService",
    "ReportingService",
    "SessionService",
]
