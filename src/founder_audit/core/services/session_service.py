"""Service layer for wizard session tracking.

Lifecycle:
    start     - last_step 'intro', status 'in-progress'
    update    - last_step advanced by the wizard
    complete  - status and last_step 'completed', end_time set

No transition ever sets 'abandoned'.
"""

from datetime import datetime, timezone

from founder_audit.core.catalog import (
    COMPLETED_STEP,
    FIRST_STEP,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
)
from founder_audit.core.errors import SessionAlreadyExistsError, SessionNotFoundError
from founder_audit.core.interfaces import IAuditSessionRepository
from founder_audit.core.records import SessionRecord, normalize_session
from founder_audit.observability import get_logger

logger = get_logger(__name__)


class SessionService:
    """Tracks respondents' progress through the audit wizard."""

    def __init__(self, session_repository: IAuditSessionRepository) -> None:
        """Initialise the service with its repository.

        Args:
            session_repository: Repository for session records.
        """
        self._session_repo = session_repository

    async def start_session(self, session_id: str) -> SessionRecord:
        """Begin tracking a new wizard visit.

        Args:
            session_id: Client-generated session identifier.

        Returns:
            The new session as a normalized record.

        Raises:
            SessionAlreadyExistsError: If the id is already tracked.
        """
        if await self._session_repo.get_session(session_id) is not None:
            raise SessionAlreadyExistsError(f"Session {session_id} has already been started.")

        record = await self._session_repo.create_session(
            session_id=session_id,
            last_step=FIRST_STEP,
            status=STATUS_IN_PROGRESS,
            start_time=datetime.now(tz=timezone.utc),
        )
        logger.info("Session started", session_id=session_id)
        return normalize_session(record.as_mapping())

    async def update_step(self, session_id: str, step: str) -> SessionRecord:
        """Record the wizard step the respondent has reached.

        Args:
            session_id: Client-generated session identifier.
            step: Wizard step name.

        Returns:
            The updated session as a normalized record.

        Raises:
            SessionNotFoundError: If the session was never started.
        """
        record = await self._session_repo.update_session(session_id, last_step=step)
        if record is None:
            raise SessionNotFoundError(f"Session {session_id} not found.")
        logger.debug("Session step updated", session_id=session_id, step=step)
        return normalize_session(record.as_mapping())

    async def complete_session(self, session_id: str) -> SessionRecord:
        """Mark a session as completed and stamp its end time.

        Args:
            session_id: Client-generated session identifier.

        Returns:
            The completed session as a normalized record.

        Raises:
            SessionNotFoundError: If the session was never started.
        """
        record = await self._session_repo.update_session(
            session_id,
            status=STATUS_COMPLETED,
            last_step=COMPLETED_STEP,
            end_time=datetime.now(tz=timezone.utc),
        )
        if record is None:
            raise SessionNotFoundError(f"Session {session_id} not found.")
        logger.info("Session completed", session_id=session_id)
        return normalize_session(record.as_mapping())

    async def list_sessions(self) -> list[SessionRecord]:
        """Retrieve every session, newest first, as normalized records."""
        rows = await self._session_repo.list_sessions()
        return [normalize_session(row.as_mapping()) for row in rows]
