"""Weekly and monthly trend buckets over sessions and audits.

Period keys are zero-padded strings, so lexicographic order is also
chronological:
    month - 'YYYY-MM' of the record's local calendar date
    week  - 'YYYY-MM-DD' of the Sunday that starts the record's week

Sessions are bucketed by start_time (falling back to created_at); audits by
created_at. Records without a usable timestamp are left out.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Literal

from founder_audit.core.arithmetic import percentage, round_half_up, safe_mean
from founder_audit.core.catalog import STATUS_COMPLETED
from founder_audit.core.records import AuditRecord, Number, SessionRecord
from founder_audit.observability import get_logger

logger = get_logger(__name__)

TrendPeriod = Literal["week", "month"]
TREND_PERIODS: tuple[str, ...] = ("week", "month")


@dataclass(frozen=True)
class TrendPoint:
    """Rollup of one calendar period."""

    period: str
    sessions: int
    completed: int
    completion_rate: int
    audits: int
    avg_bottleneck_cost: int


def _local_date(moment: datetime, tz: tzinfo | None) -> date:
    if tz is not None and moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return moment.date()


def period_key(moment: datetime, period: TrendPeriod, tz: tzinfo | None = None) -> str:
    """Return the bucket key for a timestamp.

    Args:
        moment: Record timestamp.
        period: 'week' or 'month'.
        tz: Zone in which to read the calendar date of aware timestamps.
            Naive timestamps are read as-is.

    Returns:
        'YYYY-MM' for months, or the ISO date of the week's Sunday.

    Raises:
        ValueError: If period is not a supported granularity.
    """
    day = _local_date(moment, tz)
    if period == "month":
        return f"{day.year:04d}-{day.month:02d}"
    if period == "week":
        days_since_sunday = (day.weekday() + 1) % 7
        return (day - timedelta(days=days_since_sunday)).isoformat()
    raise ValueError(f"Unsupported trend period {period!r}; expected one of {TREND_PERIODS}")


def calculate_trends(
    sessions: Sequence[SessionRecord],
    audits: Sequence[AuditRecord],
    period: TrendPeriod = "week",
    tz: tzinfo | None = None,
) -> list[TrendPoint]:
    """Bucket sessions and audits into periods and roll each period up.

    Args:
        sessions: Normalized session records.
        audits: Normalized audit records.
        period: 'week' or 'month'.
        tz: Reporting time zone for aware timestamps.

    Returns:
        One TrendPoint per period present in either input, oldest first.

    Raises:
        ValueError: If period is not a supported granularity.
    """
    if period not in TREND_PERIODS:
        raise ValueError(f"Unsupported trend period {period!r}; expected one of {TREND_PERIODS}")

    session_counts: dict[str, list[int]] = {}
    for session in sessions:
        moment = session.start_time or session.created_at
        if moment is None:
            continue
        bucket = session_counts.setdefault(period_key(moment, period, tz), [0, 0])
        bucket[0] += 1
        if session.status == STATUS_COMPLETED:
            bucket[1] += 1

    audit_costs: dict[str, list[Number]] = {}
    for audit in audits:
        if audit.created_at is None:
            continue
        key = period_key(audit.created_at, period, tz)
        audit_costs.setdefault(key, []).append(audit.results.total_bottleneck_cost)

    points: list[TrendPoint] = []
    for key in sorted(set(session_counts) | set(audit_costs)):
        started, completed = session_counts.get(key, [0, 0])
        costs = audit_costs.get(key, [])
        points.append(
            TrendPoint(
                period=key,
                sessions=started,
                completed=completed,
                completion_rate=percentage(completed, started),
                audits=len(costs),
                avg_bottleneck_cost=round_half_up(safe_mean(sum(costs), len(costs))),
            )
        )

    logger.debug("Trends computed", period=period, period_count=len(points))
    return points
