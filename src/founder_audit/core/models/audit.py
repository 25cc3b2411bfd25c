"""SQLAlchemy ORM models for the Founder Bottleneck Audit.

Tables:
    fba_audits          - one row per submitted audit (answers + results)
    fba_audit_sessions  - one row per wizard visit, updated as it advances

Wizard answers, results, and segmentation are stored as JSON documents
with snake_case keys; ``as_mapping()`` hands them to the normalizers in
``core.records``.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, String, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from founder_audit.core.catalog import STATUS_IN_PROGRESS

_JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class AuditBase(DeclarativeBase):
    """Base class for audit ORM models."""


class Audit(AuditBase):
    """A completed Founder Bottleneck Audit submission.

    Created once when the respondent saves their results; never updated.

    Table: fba_audits
    """

    __tablename__ = "fba_audits"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Primary key UUID",
    )
    session_id: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        index=True,
        comment="Wizard session that produced this audit, when the client sent it",
    )
    user_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Respondent name from the email step",
    )
    user_email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Respondent email used for lead capture",
    )
    segmentation: Mapped[dict[str, Any] | None] = mapped_column(
        _JSONDocument,
        nullable=True,
        comment="{founder_role, revenue_range, team_size, industry_vertical}",
    )
    audit_data: Mapped[dict[str, Any]] = mapped_column(
        _JSONDocument,
        nullable=False,
        comment="Raw wizard answers: categories, compensation, delay tax, patterns",
    )
    results: Mapped[dict[str, Any]] = mapped_column(
        _JSONDocument,
        nullable=False,
        comment="Scoring output derived from audit_data",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
        comment="Submission timestamp",
    )

    def as_mapping(self) -> dict[str, Any]:
        """Return the row as a plain mapping for normalization."""
        return {
            "id": self.id,
            "session_id": self.session_id,
            "user_name": self.user_name,
            "user_email": self.user_email,
            "segmentation": self.segmentation,
            "audit_data": self.audit_data,
            "results": self.results,
            "created_at": self.created_at,
        }


class AuditSession(AuditBase):
    """One respondent's visit to the audit wizard.

    Created when the wizard opens, its last_step advanced as the respondent
    moves on, and marked completed on the final step.

    Table: fba_audit_sessions
    """

    __tablename__ = "fba_audit_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Primary key UUID",
    )
    session_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
        comment="Opaque client-generated session identifier",
    )
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        comment="When the wizard was opened",
    )
    end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Set only when the session completes",
    )
    last_step: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="intro | email | segmentation | decisions | cost | patterns | completed",
    )
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=STATUS_IN_PROGRESS,
        comment="in-progress | completed | abandoned",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        comment="Row creation timestamp",
    )

    def as_mapping(self) -> dict[str, Any]:
        """Return the row as a plain mapping for normalization."""
        return {
            "session_id": self.session_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "last_step": self.last_step,
            "status": self.status,
            "created_at": self.created_at,
        }
