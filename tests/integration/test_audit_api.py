"""Integration tests for the Founder Bottleneck Audit API.

Uses httpx.AsyncClient against the FastAPI app. Services run for real;
only the repositories are mocked (see the ``client`` fixture).
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest
import structlog
from httpx import AsyncClient

from founder_audit.core.catalog import DECISION_CATEGORIES
from founder_audit.core.errors import SessionAlreadyExistsError


def _audit_payload(**overrides) -> dict:
    """Build a camelCase submission as the wizard sends it."""
    payload = {
        "userName": "Ada Founder",
        "userEmail": "ada@example.com",
        "sessionId": "sess-1",
        "segmentation": {"founderRole": "ceo", "revenueRange": "1m-5m"},
        "auditData": {
            "decisionCategories": [
                {"id": c.category_id, "name": c.name, "decisions": 4, "couldDelegate": 2, "notSure": True}
                for c in DECISION_CATEGORIES
            ],
            "annualCompensation": 400000,
            "averageMinutesPerDecision": 20,
            "delayTax": [{"id": "late-launches", "name": "Late launches", "amount": 3000}],
            "patterns": [
                {"id": "meeting-magnet", "name": "The Meeting Magnet", "checked": True},
                {"id": "approval-addict", "name": "The Approval Addict", "checked": False},
            ],
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def stored_audits(mock_audit_repo: AsyncMock, make_row) -> list:
    """Have create_audit echo rows back and remember them for list_audits."""
    rows: list = []

    async def _create(**kwargs):
        row = make_row(
            {
                **kwargs,
                "id": uuid.uuid4(),
                "created_at": datetime(2025, 1, 8, 12, tzinfo=timezone.utc) + timedelta(days=len(rows)),
            }
        )
        rows.append(row)
        return row

    async def _list():
        return list(reversed(rows))

    mock_audit_repo.create_audit.side_effect = _create
    mock_audit_repo.list_audits.side_effect = _list
    return rows


@pytest.fixture()
def stored_sessions(mock_session_repo: AsyncMock, make_row) -> dict:
    """In-memory session store behind the mocked session repository."""
    sessions: dict[str, dict] = {}

    async def _get(session_id):
        mapping = sessions.get(session_id)
        return make_row(mapping) if mapping else None

    async def _create(**kwargs):
        sessions[kwargs["session_id"]] = {**kwargs, "created_at": kwargs["start_time"]}
        return make_row(sessions[kwargs["session_id"]])

    async def _update(session_id, **fields):
        if session_id not in sessions:
            return None
        sessions[session_id].update(fields)
        return make_row(sessions[session_id])

    async def _list():
        return [make_row(mapping) for mapping in sessions.values()]

    mock_session_repo.get_session.side_effect = _get
    mock_session_repo.create_session.side_effect = _create
    mock_session_repo.update_session.side_effect = _update
    mock_session_repo.list_sessions.side_effect = _list
    return sessions


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@pytest.mark.asyncio()
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# ---------------------------------------------------------------------------
# Audits
# ---------------------------------------------------------------------------


class TestSubmitAudit:
    @pytest.mark.asyncio()
    async def test_submit_scores_server_side(self, client: AsyncClient, stored_audits: list) -> None:
        response = await client.post("/api/v1/audits", json=_audit_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["userEmail"] == "ada@example.com"
        assert body["sessionId"] == "sess-1"
        assert body["results"]["totalDecisions"] == 40
        assert body["results"]["decisionLoadLevel"] == "critical"
        assert body["results"]["hourlyRate"] == pytest.approx(200.0)
        assert body["results"]["delayTaxAnnual"] == 36000
        assert body["results"]["patternsChecked"] == 1
        assert body["results"]["overallStatus"] == "critical"
        assert body["auditData"]["decisionCategories"][0]["notSure"] == 1
        assert body["segmentation"]["revenueRange"] == "1m-5m"

    @pytest.mark.asyncio()
    async def test_client_results_ignored(self, client: AsyncClient, stored_audits: list) -> None:
        forged = {
            "totalDecisions": 1,
            "decisionLoadLevel": "healthy",
            "hourlyRate": 0,
            "hoursPerWeek": 0,
            "annualCost": 0,
            "delayTaxAnnual": 0,
            "totalBottleneckCost": 0,
            "patternsChecked": 0,
            "overallStatus": "optimized",
        }
        response = await client.post("/api/v1/audits", json=_audit_payload(results=forged))
        assert response.status_code == 201
        assert response.json()["results"]["overallStatus"] == "critical"

    @pytest.mark.asyncio()
    async def test_invalid_email_rejected(self, client: AsyncClient, stored_audits: list) -> None:
        response = await client.post("/api/v1/audits", json=_audit_payload(userEmail="not-an-email"))
        assert response.status_code == 422

    @pytest.mark.asyncio()
    async def test_submissions_are_rate_limited(self, client: AsyncClient, stored_audits: list) -> None:
        statuses = [
            (await client.post("/api/v1/audits", json=_audit_payload())).status_code for _ in range(11)
        ]
        assert statuses[:10] == [201] * 10
        assert statuses[10] == 429

    @pytest.mark.asyncio()
    async def test_list_audits_newest_first(self, client: AsyncClient, stored_audits: list) -> None:
        await client.post("/api/v1/audits", json=_audit_payload(userEmail="first@example.com"))
        await client.post("/api/v1/audits", json=_audit_payload(userEmail="second@example.com"))

        response = await client.get("/api/v1/audits")
        assert response.status_code == 200
        assert [a["userEmail"] for a in response.json()] == ["second@example.com", "first@example.com"]


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


class TestSessions:
    @pytest.mark.asyncio()
    async def test_full_lifecycle(self, client: AsyncClient, stored_sessions: dict) -> None:
        started = await client.post("/api/v1/sessions/start", json={"sessionId": "sess-1"})
        assert started.status_code == 201
        assert started.json()["lastStep"] == "intro"
        assert started.json()["status"] == "in-progress"

        updated = await client.post("/api/v1/sessions/update", json={"sessionId": "sess-1", "step": "cost"})
        assert updated.json() == {"success": True}
        assert stored_sessions["sess-1"]["last_step"] == "cost"

        completed = await client.post("/api/v1/sessions/complete", json={"sessionId": "sess-1"})
        assert completed.status_code == 200
        assert stored_sessions["sess-1"]["status"] == "completed"
        assert stored_sessions["sess-1"]["end_time"] is not None

        listed = await client.get("/api/v1/sessions")
        assert [s["lastStep"] for s in listed.json()] == ["completed"]

    @pytest.mark.asyncio()
    async def test_duplicate_start_conflicts(self, client: AsyncClient, stored_sessions: dict) -> None:
        await client.post("/api/v1/sessions/start", json={"sessionId": "sess-1"})
        response = await client.post("/api/v1/sessions/start", json={"sessionId": "sess-1"})
        assert response.status_code == 409

    @pytest.mark.asyncio()
    async def test_start_losing_insert_race_conflicts(
        self, client: AsyncClient, mock_session_repo: AsyncMock
    ) -> None:
        mock_session_repo.get_session.return_value = None
        mock_session_repo.create_session.side_effect = SessionAlreadyExistsError("taken")
        response = await client.post("/api/v1/sessions/start", json={"sessionId": "sess-1"})
        assert response.status_code == 409

    @pytest.mark.asyncio()
    async def test_session_id_bound_to_log_context(
        self, client: AsyncClient, mock_session_repo: AsyncMock, make_row
    ) -> None:
        seen: list[dict] = []

        async def _update(session_id, **fields):
            seen.append(structlog.contextvars.get_contextvars())
            return make_row({"session_id": session_id, **fields})

        mock_session_repo.update_session.side_effect = _update
        response = await client.post("/api/v1/sessions/update", json={"sessionId": "sess-9", "step": "cost"})

        assert response.status_code == 200
        assert seen[0]["session_id"] == "sess-9"
        assert "session_id" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio()
    async def test_update_unknown_session_not_found(self, client: AsyncClient, stored_sessions: dict) -> None:
        response = await client.post("/api/v1/sessions/update", json={"sessionId": "ghost", "step": "email"})
        assert response.status_code == 404

    @pytest.mark.asyncio()
    async def test_complete_unknown_session_not_found(self, client: AsyncClient, stored_sessions: dict) -> None:
        response = await client.post("/api/v1/sessions/complete", json={"sessionId": "ghost"})
        assert response.status_code == 404

    @pytest.mark.asyncio()
    async def test_unknown_step_rejected(self, client: AsyncClient, stored_sessions: dict) -> None:
        response = await client.post("/api/v1/sessions/update", json={"sessionId": "sess-1", "step": "payment"})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


class TestAnalytics:
    @pytest.mark.asyncio()
    async def test_empty_reports(
        self, client: AsyncClient, stored_audits: list, stored_sessions: dict
    ) -> None:
        assert (await client.get("/api/v1/analytics/cohort")).json() is None
        assert (await client.get("/api/v1/analytics/sessions")).json() is None

        funnel = (await client.get("/api/v1/analytics/funnel")).json()
        assert funnel["startToCompleteRate"] == 0
        assert funnel["largestDropStep"] == ""

        trends = (await client.get("/api/v1/analytics/trends")).json()
        assert trends == {"trends": [], "period": "week"}

    @pytest.mark.asyncio()
    async def test_reports_after_activity(
        self, client: AsyncClient, stored_audits: list, stored_sessions: dict
    ) -> None:
        await client.post("/api/v1/sessions/start", json={"sessionId": "sess-1"})
        await client.post("/api/v1/sessions/start", json={"sessionId": "sess-2"})
        await client.post("/api/v1/sessions/update", json={"sessionId": "sess-1", "step": "email"})
        await client.post("/api/v1/sessions/complete", json={"sessionId": "sess-1"})
        await client.post("/api/v1/audits", json=_audit_payload())
        await client.post("/api/v1/audits", json=_audit_payload(userEmail="ADA@example.com"))

        cohort = (await client.get("/api/v1/analytics/cohort")).json()
        assert cohort["overview"]["totalAudits"] == 2
        assert cohort["patterns"] == [{"name": "The Meeting Magnet", "count": 2}]
        assert cohort["operationalVsStrategic"]["operationalPct"] == 60
        assert cohort["segmentation"]["founderRole"] == [{"name": "ceo", "label": "CEO", "count": 2}]

        sessions = (await client.get("/api/v1/analytics/sessions")).json()
        assert sessions["totalSessions"] == 2
        assert sessions["completionRate"] == 50
        assert sessions["dropOffData"] == [{"name": "intro", "value": 1}]

        funnel = (await client.get("/api/v1/analytics/funnel")).json()
        assert [s["count"] for s in funnel["steps"]] == [2, 1, 2]
        assert funnel["emailCaptureRate"] == 200

        business = (await client.get("/api/v1/analytics/business")).json()
        assert business["returnVisitorCount"] == 1
        assert business["returnVisitorEmails"] == ["ada@example.com"]

        founders = (await client.get("/api/v1/analytics/founders", params={"search": "ada"})).json()
        assert founders["total"] == 1
        assert founders["founders"][0]["totalAudits"] == 2

        monthly = (await client.get("/api/v1/analytics/trends", params={"period": "month"})).json()
        assert monthly["period"] == "month"
        assert sum(point["audits"] for point in monthly["trends"]) == 2

    @pytest.mark.asyncio()
    async def test_invalid_trend_period(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/analytics/trends", params={"period": "quarter"})
        assert response.status_code == 422
