"""ORM models package for the Founder Bottleneck Audit service."""

from founder_audit.core.models.audit import Audit, AuditBase, AuditSession

__all__ = [
    "AuditBase",
    "Audit",
    "AuditSession",
]
