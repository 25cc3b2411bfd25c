"""Repository sub-package for the Founder Bottleneck Audit service."""

from founder_audit.adapters.repositories.audit_repository import (
    AuditRepository,
    AuditSessionRepository,
)

__all__ = [
    "AuditRepository",
    "AuditSessionRepository",
]
