"""Test fixtures for founder-bottleneck-audit.

Provides record factories shared by the unit tests and an async HTTP client
whose service dependencies are backed by mock repositories.
"""

import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from founder_audit.api.dependencies import (
    get_audit_service,
    get_reporting_service,
    get_session_service,
)
from founder_audit.api.routes.audit import beacon_throttle, submit_throttle
from founder_audit.core.catalog import BOTTLENECK_PATTERNS, DECISION_CATEGORIES, DELAY_TAX_ITEMS
from founder_audit.core.records import (
    AuditRecord,
    SessionRecord,
    normalize_audit,
    normalize_session,
)
from founder_audit.core.scoring import score_audit
from founder_audit.core.services import AuditService, ReportingService, SessionService
from founder_audit.main import app


# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------


def _build_audit_data(
    decisions: dict[str, int] | None = None,
    could_delegate: dict[str, int] | None = None,
    not_sure: dict[str, bool | int] | None = None,
    annual_compensation: float = 400000,
    average_minutes_per_decision: float = 20,
    delay_tax: dict[str, float] | None = None,
    checked_patterns: list[str] | None = None,
) -> dict[str, Any]:
    """Build a snake_case audit_data mapping covering the full catalogue.

    Args:
        decisions: Decisions per category id; unlisted categories get 0.
        could_delegate: Delegatable decisions per category id.
        not_sure: Not-sure flag or count per category id.
        annual_compensation: Founder compensation.
        average_minutes_per_decision: Minutes per decision.
        delay_tax: 30-day amounts per delay-tax item id.
        checked_patterns: Pattern ids to mark as checked.

    Returns:
        Mapping accepted by ``normalize_audit_data``.
    """
    decisions = decisions or {}
    could_delegate = could_delegate or {}
    not_sure = not_sure or {}
    delay_tax = delay_tax or {}
    checked = set(checked_patterns or [])
    return {
        "decision_categories": [
            {
                "id": c.category_id,
                "name": c.name,
                "decisions": decisions.get(c.category_id, 0),
                "could_delegate": could_delegate.get(c.category_id, 0),
                "not_sure": not_sure.get(c.category_id, False),
            }
            for c in DECISION_CATEGORIES
        ],
        "annual_compensation": annual_compensation,
        "average_minutes_per_decision": average_minutes_per_decision,
        "delay_tax": [
            {"id": d.item_id, "name": d.name, "amount": delay_tax.get(d.item_id, 0)}
            for d in DELAY_TAX_ITEMS
        ],
        "patterns": [
            {"id": p.pattern_id, "name": p.name, "checked": p.pattern_id in checked}
            for p in BOTTLENECK_PATTERNS
        ],
    }


@pytest.fixture()
def make_audit_data() -> Callable[..., dict[str, Any]]:
    """Factory producing raw snake_case audit_data mappings."""
    return _build_audit_data


@pytest.fixture()
def make_audit() -> Callable[..., AuditRecord]:
    """Factory producing scored, normalized AuditRecords."""

    def _make(
        user_email: str = "founder@example.com",
        user_name: str = "Ada Founder",
        created_at: datetime | None = None,
        segmentation: dict[str, Any] | None = None,
        **audit_data_kwargs: Any,
    ) -> AuditRecord:
        raw_data = _build_audit_data(**audit_data_kwargs)
        record = normalize_audit(
            {
                "audit_data": raw_data,
                "user_name": user_name,
                "user_email": user_email,
                "segmentation": segmentation,
                "created_at": created_at or datetime(2025, 1, 8, 12, 0, tzinfo=timezone.utc),
            }
        )
        results = score_audit(record.audit_data)
        return normalize_audit(
            {
                "audit_data": raw_data,
                "results": results.to_dict(),
                "user_name": user_name,
                "user_email": user_email,
                "segmentation": segmentation,
                "created_at": record.created_at,
            }
        )

    return _make


@pytest.fixture()
def make_session() -> Callable[..., SessionRecord]:
    """Factory producing normalized SessionRecords."""

    def _make(
        status: str = "in-progress",
        last_step: str | None = "intro",
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        session_id: str | None = None,
        created_at: datetime | None = None,
    ) -> SessionRecord:
        return normalize_session(
            {
                "session_id": session_id or str(uuid.uuid4()),
                "status": status,
                "last_step": last_step,
                "start_time": start_time,
                "end_time": end_time,
                "created_at": created_at,
            }
        )

    return _make


def _make_row(mapping: dict[str, Any]) -> MagicMock:
    row = MagicMock()
    row.id = mapping.get("id", uuid.uuid4())
    row.as_mapping.return_value = mapping
    return row


@pytest.fixture()
def make_row() -> Callable[[dict[str, Any]], MagicMock]:
    """Factory producing ORM-like rows whose as_mapping() returns the given dict."""
    return _make_row


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_audit_repo() -> AsyncMock:
    """Mock audit repository."""
    return AsyncMock()


@pytest.fixture()
def mock_session_repo() -> AsyncMock:
    """Mock session repository."""
    return AsyncMock()


@pytest_asyncio.fixture()
async def client(
    mock_audit_repo: AsyncMock,
    mock_session_repo: AsyncMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Async test client with services backed by mock repositories."""
    app.dependency_overrides[get_audit_service] = lambda: AuditService(mock_audit_repo)
    app.dependency_overrides[get_session_service] = lambda: SessionService(mock_session_repo)
    app.dependency_overrides[get_reporting_service] = lambda: ReportingService(
        mock_audit_repo, mock_session_repo, reporting_tz=timezone.utc
    )
    submit_throttle.reset()
    beacon_throttle.reset()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
