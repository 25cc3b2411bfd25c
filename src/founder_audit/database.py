"""Async SQLAlchemy engine and session management."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from founder_audit.core.models import AuditBase
from founder_audit.observability import get_logger
from founder_audit.settings import Settings

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_database(settings: Settings) -> AsyncEngine:
    """Create the engine and session factory used by ``get_db_session``.

    Args:
        settings: Service settings carrying the database URL.

    Returns:
        The configured async engine.
    """
    global _engine, _session_factory  # noqa: PLW0603
    _engine = create_async_engine(settings.database_url, echo=settings.database_echo)
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)
    logger.info("Database initialised", dialect=_engine.dialect.name)
    return _engine


async def create_tables() -> None:
    """Create the audit tables if they do not exist."""
    if _engine is None:
        raise RuntimeError("Database not initialised. Call init_database() first.")
    async with _engine.begin() as connection:
        await connection.run_sync(AuditBase.metadata.create_all)


async def dispose_database() -> None:
    """Close all pooled connections."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session that commits on success and rolls back on error.

    Raises:
        RuntimeError: If the database has not been initialised.
    """
    if _session_factory is None:
        raise RuntimeError("Database not initialised. Call init_database() first.")
    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
