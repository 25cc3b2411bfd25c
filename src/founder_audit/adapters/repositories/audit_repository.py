"""Repositories for the Founder Bottleneck Audit data layer.

Implements the persistence operations for Audit and AuditSession using
SQLAlchemy 2.0 async ORM. All operations use parameterised queries.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from founder_audit.core.errors import SessionAlreadyExistsError
from founder_audit.core.models.audit import Audit, AuditSession
from founder_audit.observability import get_logger

logger = get_logger(__name__)


class AuditRepository:
    """Repository for Audit persistence.

    Audits are insert-only; there is no update or delete path.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialise with an async database session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def create_audit(
        self,
        user_name: str,
        user_email: str,
        audit_data: dict[str, Any],
        results: dict[str, Any],
        segmentation: dict[str, Any] | None,
        session_id: str | None,
    ) -> Audit:
        """Persist one scored audit.

        Args:
            user_name: Respondent name.
            user_email: Respondent email.
            audit_data: Wizard answers as a JSON-compatible dict.
            results: Scoring output as a JSON-compatible dict.
            segmentation: Optional segmentation dict.
            session_id: Optional wizard session identifier.

        Returns:
            The persisted Audit with server defaults loaded.
        """
        record = Audit(
            user_name=user_name,
            user_email=user_email,
            audit_data=audit_data,
            results=results,
            segmentation=segmentation,
            session_id=session_id,
        )
        self._session.add(record)
        await self._session.flush()
        await self._session.refresh(record)

        logger.debug("Audit persisted", audit_id=str(record.id), session_id=session_id)
        return record

    async def list_audits(self) -> list[Audit]:
        """Retrieve every audit ordered by created_at descending."""
        result = await self._session.execute(select(Audit).order_by(Audit.created_at.desc()))
        return list(result.scalars().all())


class AuditSessionRepository:
    """Repository for AuditSession persistence."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialise with an async database session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def create_session(
        self,
        session_id: str,
        last_step: str,
        status: str,
        start_time: datetime,
    ) -> AuditSession:
        """Persist a new wizard session.

        Args:
            session_id: Client-generated session identifier.
            last_step: Initial wizard step.
            status: Initial status.
            start_time: When the wizard was opened.

        Returns:
            The persisted AuditSession.

        Raises:
            SessionAlreadyExistsError: If another request stored the same
                session_id first. The unit of work must then be rolled back.
        """
        record = AuditSession(
            session_id=session_id,
            last_step=last_step,
            status=status,
            start_time=start_time,
        )
        self._session.add(record)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise SessionAlreadyExistsError(f"Session {session_id} has already been started.") from exc
        await self._session.refresh(record)
        return record

    async def get_session(self, session_id: str) -> AuditSession | None:
        """Retrieve a session by its client identifier."""
        result = await self._session.execute(
            select(AuditSession).where(AuditSession.session_id == session_id)
        )
        return result.scalar_one_or_none()

    async def update_session(self, session_id: str, **fields: Any) -> AuditSession | None:
        """Apply field updates to a session.

        Args:
            session_id: Client-generated session identifier.
            **fields: Column values to set.

        Returns:
            The updated AuditSession, or None if no session matches.
        """
        record = await self.get_session(session_id)
        if record is None:
            return None
        for name, value in fields.items():
            setattr(record, name, value)
        await self._session.flush()
        await self._session.refresh(record)
        return record

    async def list_sessions(self) -> list[AuditSession]:
        """Retrieve every session ordered by created_at descending."""
        result = await self._session.execute(
            select(AuditSession).order_by(AuditSession.created_at.desc())
        )
        return list(result.scalars().all())
