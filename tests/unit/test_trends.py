"""Unit tests for weekly and monthly trend bucketing."""

from datetime import datetime, timedelta, timezone

import pytest

from founder_audit.core.trends import calculate_trends, period_key

_UTC = timezone.utc
_EASTERN = timezone(timedelta(hours=-5))


class TestPeriodKey:
    """Verify week (Sunday start) and month keys."""

    @pytest.mark.parametrize(
        ("moment", "expected"),
        [
            (datetime(2025, 1, 5, 10, tzinfo=_UTC), "2025-01-05"),  # Sunday
            (datetime(2025, 1, 8, 10, tzinfo=_UTC), "2025-01-05"),  # Wednesday
            (datetime(2025, 1, 11, 23, 59, tzinfo=_UTC), "2025-01-05"),  # Saturday
            (datetime(2025, 1, 12, 0, 0, tzinfo=_UTC), "2025-01-12"),
            (datetime(2025, 1, 1, 8, tzinfo=_UTC), "2024-12-29"),  # crosses the year
        ],
    )
    def test_week_key_is_preceding_sunday(self, moment: datetime, expected: str) -> None:
        assert period_key(moment, "week") == expected

    def test_month_key(self) -> None:
        assert period_key(datetime(2025, 3, 31, 22, tzinfo=_UTC), "month") == "2025-03"

    def test_reporting_zone_shifts_calendar_date(self) -> None:
        moment = datetime(2025, 2, 1, 2, 0, tzinfo=_UTC)
        assert period_key(moment, "month") == "2025-02"
        assert period_key(moment, "month", tz=_EASTERN) == "2025-01"

    def test_unknown_period_raises(self) -> None:
        with pytest.raises(ValueError):
            period_key(datetime(2025, 1, 1, tzinfo=_UTC), "day")


class TestCalculateTrends:
    """Verify per-period rollups over sessions and audits."""

    def test_union_of_periods_sorted(self, make_session, make_audit) -> None:
        sessions = [
            make_session(start_time=datetime(2025, 1, 8, tzinfo=_UTC)),
            make_session(status="completed", start_time=datetime(2025, 1, 9, tzinfo=_UTC)),
            make_session(start_time=datetime(2025, 1, 20, tzinfo=_UTC)),
        ]
        audits = [make_audit(created_at=datetime(2024, 12, 30, tzinfo=_UTC))]

        trends = calculate_trends(sessions, audits, period="week")
        assert [t.period for t in trends] == ["2024-12-29", "2025-01-05", "2025-01-19"]

        audit_only, busy, quiet = trends
        assert (audit_only.sessions, audit_only.completion_rate, audit_only.audits) == (0, 0, 1)
        assert (busy.sessions, busy.completed, busy.completion_rate, busy.audits) == (2, 1, 50, 0)
        assert busy.avg_bottleneck_cost == 0
        assert quiet.sessions == 1

    def test_monthly_average_cost_rounds_half_up(self, make_audit) -> None:
        # No decisions, so the only cost is 0.375 * 12 = 4.5 of delay tax.
        free = make_audit(created_at=datetime(2025, 1, 3, tzinfo=_UTC), delay_tax={"late-launches": 0.375})
        same = make_audit(created_at=datetime(2025, 1, 20, tzinfo=_UTC), delay_tax={"late-launches": 0.375})
        (point,) = calculate_trends([], [free, same], period="month")
        assert point.period == "2025-01"
        assert point.audits == 2
        assert point.avg_bottleneck_cost == 5

    def test_session_falls_back_to_created_at(self, make_session) -> None:
        session = make_session(start_time=None, created_at=datetime(2025, 4, 2, tzinfo=_UTC))
        (point,) = calculate_trends([session], [], period="month")
        assert point.period == "2025-04"

    @pytest.mark.parametrize("start_time", [datetime(2025, 2, 1, 2, 0), "2025-02-01T02:00:00"])
    def test_stored_naive_timestamps_are_utc(self, make_session, start_time) -> None:
        session = make_session(start_time=start_time)
        (point,) = calculate_trends([session], [], period="month", tz=_EASTERN)
        assert point.period == "2025-01"

    def test_records_without_timestamps_skipped(self, make_session) -> None:
        assert calculate_trends([make_session()], [], period="week") == []

    def test_idempotent(self, make_session, make_audit) -> None:
        sessions = [make_session(start_time=datetime(2025, 5, 1, tzinfo=_UTC))]
        audits = [make_audit(created_at=datetime(2025, 5, 2, tzinfo=_UTC))]
        assert calculate_trends(sessions, audits, "month") == calculate_trends(sessions, audits, "month")

    def test_invalid_period_raises(self) -> None:
        with pytest.raises(ValueError):
            calculate_trends([], [], period="quarter")
