"""Session completion, drop-off, and funnel conversion analytics.

Sessions and audits are not joined by id: an audit's existence is the proof
of completion used by the funnel, and sessions are counted on their own.
Nothing here assumes the stage counts are monotonic.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from founder_audit.core.arithmetic import percentage, safe_mean
from founder_audit.core.catalog import (
    COMPLETED_STEP,
    FIRST_STEP,
    STATUS_COMPLETED,
    UNKNOWN_STEP,
)
from founder_audit.core.records import AuditRecord, SessionRecord
from founder_audit.observability import get_logger

logger = get_logger(__name__)

STAGE_STARTED: str = "Start Audit"
STAGE_REACHED_EMAIL: str = "Reached Email"
STAGE_COMPLETED: str = "Completed"


@dataclass(frozen=True)
class DropOffPoint:
    """Number of unfinished sessions whose last step was ``name``."""

    name: str
    value: int


@dataclass(frozen=True)
class SessionAnalytics:
    """Completion metrics over a set of sessions."""

    completion_rate: int
    avg_completion_time: str
    avg_completion_ms: float
    drop_off_data: list[DropOffPoint]
    total_sessions: int


@dataclass(frozen=True)
class FunnelStep:
    """One funnel stage and its conversion from the first stage."""

    name: str
    count: int
    conversion: int


@dataclass(frozen=True)
class FunnelAnalytics:
    """Three-stage conversion from wizard start to stored audit."""

    steps: list[FunnelStep]
    start_count: int
    reached_email_count: int
    completed_count: int
    email_capture_rate: int
    start_to_complete_rate: int
    largest_drop_step: str
    largest_drop: int


def format_duration(milliseconds: float) -> str:
    """Format a duration as '{minutes}m {seconds}s', flooring both parts."""
    minutes = int(milliseconds // 60000)
    seconds = int((milliseconds % 60000) // 1000)
    return f"{minutes}m {seconds}s"


def count_reached_email(sessions: Sequence[SessionRecord]) -> int:
    """Count sessions that advanced past the intro screen.

    A missing last_step counts as advanced, since it is not 'intro'.
    """
    return sum(1 for s in sessions if (s.last_step or "") != FIRST_STEP)


def _completion_times_ms(sessions: Sequence[SessionRecord]) -> list[float]:
    times: list[float] = []
    for session in sessions:
        if session.status != STATUS_COMPLETED:
            continue
        if session.start_time is None or session.end_time is None:
            logger.debug(
                "Completed session without timestamps skipped",
                session_id=session.session_id,
            )
            continue
        elapsed = session.end_time.timestamp() - session.start_time.timestamp()
        times.append(elapsed * 1000)
    return times


def _drop_off(sessions: Sequence[SessionRecord]) -> list[DropOffPoint]:
    counts: dict[str, int] = {}
    for session in sessions:
        if session.status == STATUS_COMPLETED or session.last_step == COMPLETED_STEP:
            continue
        step = session.last_step or UNKNOWN_STEP
        counts[step] = counts.get(step, 0) + 1
    points = [DropOffPoint(name=name, value=value) for name, value in counts.items()]
    return sorted(points, key=lambda point: point.value, reverse=True)


def calculate_session_analytics(sessions: Sequence[SessionRecord]) -> SessionAnalytics | None:
    """Compute completion rate, average completion time, and drop-off points.

    Args:
        sessions: Normalized session records.

    Returns:
        SessionAnalytics, or None when there are no sessions. The average
        completion time is '0m 0s' when no session has completed.
    """
    if not sessions:
        return None

    total = len(sessions)
    completed = sum(1 for s in sessions if s.status == STATUS_COMPLETED)
    times = _completion_times_ms(sessions)
    avg_ms = safe_mean(sum(times), len(times))

    return SessionAnalytics(
        completion_rate=percentage(completed, total),
        avg_completion_time=format_duration(avg_ms),
        avg_completion_ms=avg_ms,
        drop_off_data=_drop_off(sessions),
        total_sessions=total,
    )


def calculate_funnel(
    sessions: Sequence[SessionRecord],
    audits: Sequence[AuditRecord],
) -> FunnelAnalytics:
    """Compute the start -> reached email -> completed funnel.

    Two completion rates are reported and must not be conflated:
        email_capture_rate     - completed / reached email (step conversion)
        start_to_complete_rate - completed / started (cumulative conversion)

    The largest drop is the biggest positive count decrease between
    consecutive stages, attributed to the earlier stage. The first maximum
    wins on ties; with no positive drop the step is '' and the drop is 0.

    Args:
        sessions: Normalized session records.
        audits: Normalized audit records; each counts as one completion.

    Returns:
        FunnelAnalytics. Never raises on empty or inconsistent inputs.
    """
    start_count = len(sessions)
    reached_email_count = count_reached_email(sessions)
    completed_count = len(audits)
    start_to_complete_rate = percentage(completed_count, start_count)

    steps = [
        FunnelStep(name=STAGE_STARTED, count=start_count, conversion=100),
        FunnelStep(
            name=STAGE_REACHED_EMAIL,
            count=reached_email_count,
            conversion=percentage(reached_email_count, start_count),
        ),
        FunnelStep(name=STAGE_COMPLETED, count=completed_count, conversion=start_to_complete_rate),
    ]

    largest_drop_step = ""
    largest_drop = 0
    for current, following in zip(steps, steps[1:]):
        drop = current.count - following.count
        if drop > largest_drop:
            largest_drop = drop
            largest_drop_step = current.name

    return FunnelAnalytics(
        steps=steps,
        start_count=start_count,
        reached_email_count=reached_email_count,
        completed_count=completed_count,
        email_capture_rate=percentage(completed_count, reached_email_count),
        start_to_complete_rate=start_to_complete_rate,
        largest_drop_step=largest_drop_step,
        largest_drop=largest_drop,
    )
