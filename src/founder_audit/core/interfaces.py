"""Abstract interfaces (Protocol classes) for the Founder Bottleneck Audit service.

Services depend on these interfaces, not concrete implementations, so they
can be tested with in-memory or mock repositories. Concrete implementations
live in ``adapters/repositories/audit_repository.py``.

Records returned by repositories are ORM-like objects exposing
``as_mapping()``; services normalize them before any scoring or reporting.
"""

from datetime import datetime
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class IAuditRepository(Protocol):
    """Repository interface for audit persistence."""

    async def create_audit(
        self,
        user_name: str,
        user_email: str,
        audit_data: dict[str, Any],
        results: dict[str, Any],
        segmentation: dict[str, Any] | None,
        session_id: str | None,
    ) -> Any:
        """Persist one scored audit.

        Args:
            user_name: Respondent name.
            user_email: Respondent email.
            audit_data: Normalized wizard answers as a JSON-compatible dict.
            results: Scoring output as a JSON-compatible dict.
            segmentation: Optional segmentation dict.
            session_id: Optional wizard session identifier.

        Returns:
            The persisted audit record.
        """
        ...

    async def list_audits(self) -> list[Any]:
        """Retrieve every audit, newest first.

        Returns:
            List of audit records.
        """
        ...


@runtime_checkable
class IAuditSessionRepository(Protocol):
    """Repository interface for wizard session persistence."""

    async def create_session(
        self,
        session_id: str,
        last_step: str,
        status: str,
        start_time: datetime,
    ) -> Any:
        """Persist a new session.

        Args:
            session_id: Client-generated session identifier.
            last_step: Initial wizard step.
            status: Initial status.
            start_time: When the wizard was opened.

        Returns:
            The persisted session record.

        Raises:
            SessionAlreadyExistsError: If the session_id is already stored.
        """
        ...

    async def get_session(self, session_id: str) -> Any | None:
        """Retrieve a session by its client identifier.

        Returns:
            Session record or None if unknown.
        """
        ...

    async def update_session(self, session_id: str, **fields: Any) -> Any | None:
        """Apply field updates to a session.

        Args:
            session_id: Client-generated session identifier.
            **fields: Column values to set (last_step, status, end_time).

        Returns:
            The updated session record, or None if the session is unknown.
        """
        ...

    async def list_sessions(self) -> list[Any]:
        """Retrieve every session, newest first.

        Returns:
            List of session records.
        """
        ...
