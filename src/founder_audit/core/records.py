"""Typed records for the Founder Bottleneck Audit engine.

Stored audits and sessions arrive as loosely-typed mappings (JSON columns,
API payloads, historical exports). The ``normalize_*`` functions in this
module are the only place where missing or malformed fields are coerced to
neutral defaults. Scoring and the reporting aggregators only ever see the
frozen dataclasses defined here.

Coercion rules:
    numbers      - int/float kept; numeric strings parsed; bool, None, NaN,
                   infinities and anything else become 0
    not_sure     - integer count; True -> 1, False/absent -> 0
    collections  - absent or non-list values become empty tuples
    timestamps   - datetime kept; ISO-8601 strings parsed; otherwise None;
                   naive values are read as UTC
"""

import math
import uuid
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any

from founder_audit.core.catalog import (
    SEGMENTATION_FIELDS,
    SESSION_STATUSES,
    STATUS_IN_PROGRESS,
    DecisionLoadLevel,
    OverallStatus,
    SessionStatus,
)

Number = int | float


@dataclass(frozen=True)
class DecisionCategory:
    """Decisions the respondent made in one domain during the observation week.

    Attributes:
        id: Category identifier from the catalogue (e.g. 'hiring').
        name: Display name, used as the grouping key in cohort reports.
        decisions: Number of decisions made.
        could_delegate: Number of those a team member could have made.
        not_sure: Count of decisions the respondent was unsure about.
        only_you: Count of decisions only the respondent could make.
    """

    id: str
    name: str
    decisions: Number = 0
    could_delegate: Number = 0
    not_sure: int = 0
    only_you: int = 0


@dataclass(frozen=True)
class DelayTaxItem:
    """A 30-day delay-tax amount for one cost bucket."""

    id: str
    name: str
    amount: Number = 0


@dataclass(frozen=True)
class BottleneckPattern:
    """A bottleneck archetype and whether the respondent checked it."""

    id: str
    name: str
    checked: bool = False
    description: str = ""


@dataclass(frozen=True)
class AuditData:
    """Raw answers collected by the wizard for one respondent."""

    decision_categories: tuple[DecisionCategory, ...] = ()
    annual_compensation: Number = 0
    average_minutes_per_decision: Number = 0
    delay_tax: tuple[DelayTaxItem, ...] = ()
    patterns: tuple[BottleneckPattern, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dict with list collections."""
        return {
            "decision_categories": [asdict(c) for c in self.decision_categories],
            "annual_compensation": self.annual_compensation,
            "average_minutes_per_decision": self.average_minutes_per_decision,
            "delay_tax": [asdict(d) for d in self.delay_tax],
            "patterns": [asdict(p) for p in self.patterns],
        }


@dataclass(frozen=True)
class AuditResults:
    """Derived scoring output for one audit. Never mutated once computed."""

    total_decisions: Number
    decision_load_level: DecisionLoadLevel
    hourly_rate: float
    hours_per_week: float
    annual_cost: float
    delay_tax_annual: Number
    total_bottleneck_cost: float
    patterns_checked: int
    overall_status: OverallStatus

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-compatible dict."""
        return asdict(self)


@dataclass(frozen=True)
class Segmentation:
    """Categorical company attributes supplied by the respondent."""

    founder_role: str | None = None
    revenue_range: str | None = None
    team_size: str | None = None
    industry_vertical: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Serialise to a JSON-compatible dict."""
        return asdict(self)


@dataclass(frozen=True)
class AuditRecord:
    """A persisted audit submission."""

    audit_data: AuditData
    results: AuditResults
    user_name: str = ""
    user_email: str = ""
    segmentation: Segmentation | None = None
    created_at: datetime | None = None
    session_id: str | None = None
    id: uuid.UUID | None = None


@dataclass(frozen=True)
class SessionRecord:
    """A persisted wizard visit."""

    session_id: str
    status: SessionStatus = STATUS_IN_PROGRESS
    last_step: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def coerce_number(value: Any) -> Number:
    """Coerce a loosely-typed numeric field to a finite int or float.

    Args:
        value: Raw field value.

    Returns:
        The numeric value, or 0 when the value is missing or unusable.
    """
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if isinstance(value, float):
        return value if math.isfinite(value) else 0
    return 0


def coerce_count(value: Any) -> int:
    """Coerce a flag-or-count field to a non-negative integer count.

    Booleans map to 1/0 so that both historical ``not_sure`` shapes (a flag
    and a count) share one representation.
    """
    if isinstance(value, bool):
        return 1 if value else 0
    number = coerce_number(value)
    return max(int(number), 0)


def coerce_datetime(value: Any) -> datetime | None:
    """Parse a stored timestamp.

    Args:
        value: A datetime, an ISO-8601 string (a trailing 'Z' is accepted), or
            anything else.

    Returns:
        An aware datetime, or None when the value is absent or unparseable.
        Naive values are taken to be UTC, which is how SQLite hands back
        ``DateTime(timezone=True)`` columns.
    """
    if isinstance(value, str) and value:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    return None


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_items(value: Any) -> list[Mapping[str, Any]]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_decision_category(raw: Mapping[str, Any]) -> DecisionCategory:
    """Build a DecisionCategory from a stored mapping."""
    return DecisionCategory(
        id=_coerce_text(raw.get("id")),
        name=_coerce_text(raw.get("name")),
        decisions=coerce_number(raw.get("decisions")),
        could_delegate=coerce_number(raw.get("could_delegate")),
        not_sure=coerce_count(raw.get("not_sure")),
        only_you=coerce_count(raw.get("only_you")),
    )


def normalize_audit_data(raw: Any) -> AuditData:
    """Build AuditData from a stored ``audit_data`` mapping.

    Args:
        raw: Mapping with snake_case keys, or any other value (treated as empty).

    Returns:
        Fully populated AuditData with neutral defaults for missing fields.
    """
    data = _as_mapping(raw)
    return AuditData(
        decision_categories=tuple(
            normalize_decision_category(item)
            for item in _as_items(data.get("decision_categories"))
        ),
        annual_compensation=coerce_number(data.get("annual_compensation")),
        average_minutes_per_decision=coerce_number(data.get("average_minutes_per_decision")),
        delay_tax=tuple(
            DelayTaxItem(
                id=_coerce_text(item.get("id")),
                name=_coerce_text(item.get("name")),
                amount=coerce_number(item.get("amount")),
            )
            for item in _as_items(data.get("delay_tax"))
        ),
        patterns=tuple(
            BottleneckPattern(
                id=_coerce_text(item.get("id")),
                name=_coerce_text(item.get("name")),
                checked=bool(item.get("checked")),
                description=_coerce_text(item.get("description")),
            )
            for item in _as_items(data.get("patterns"))
        ),
    )


def normalize_results(raw: Any) -> AuditResults:
    """Build AuditResults from a stored ``results`` mapping."""
    data = _as_mapping(raw)
    return AuditResults(
        total_decisions=coerce_number(data.get("total_decisions")),
        decision_load_level=_coerce_text(data.get("decision_load_level")),
        hourly_rate=coerce_number(data.get("hourly_rate")),
        hours_per_week=coerce_number(data.get("hours_per_week")),
        annual_cost=coerce_number(data.get("annual_cost")),
        delay_tax_annual=coerce_number(data.get("delay_tax_annual")),
        total_bottleneck_cost=coerce_number(data.get("total_bottleneck_cost")),
        patterns_checked=coerce_count(data.get("patterns_checked")),
        overall_status=_coerce_text(data.get("overall_status")),
    )


def normalize_segmentation(raw: Any) -> Segmentation | None:
    """Build Segmentation from a stored mapping.

    Returns:
        None when no segmentation mapping was stored. Empty-string fields
        become None.
    """
    if not isinstance(raw, Mapping):
        return None
    return Segmentation(**{name: _optional_text(raw.get(name)) for name in SEGMENTATION_FIELDS})


def normalize_audit(raw: Mapping[str, Any]) -> AuditRecord:
    """Build an AuditRecord from a stored audit mapping.

    Args:
        raw: Mapping with keys audit_data, results, user_name, user_email,
            segmentation, created_at, session_id and id. Every key is optional.

    Returns:
        Normalized AuditRecord.
    """
    raw_id = raw.get("id")
    return AuditRecord(
        audit_data=normalize_audit_data(raw.get("audit_data")),
        results=normalize_results(raw.get("results")),
        user_name=_coerce_text(raw.get("user_name")),
        user_email=_coerce_text(raw.get("user_email")),
        segmentation=normalize_segmentation(raw.get("segmentation")),
        created_at=coerce_datetime(raw.get("created_at")),
        session_id=_optional_text(raw.get("session_id")),
        id=raw_id if isinstance(raw_id, uuid.UUID) else None,
    )


def normalize_session(raw: Mapping[str, Any]) -> SessionRecord:
    """Build a SessionRecord from a stored session mapping.

    Unknown statuses fall back to in-progress; an empty last_step becomes None
    and is reported as 'unknown' by the drop-off analysis.
    """
    status = _coerce_text(raw.get("status"))
    return SessionRecord(
        session_id=_coerce_text(raw.get("session_id")),
        status=status if status in SESSION_STATUSES else STATUS_IN_PROGRESS,
        last_step=_optional_text(raw.get("last_step")),
        start_time=coerce_datetime(raw.get("start_time")),
        end_time=coerce_datetime(raw.get("end_time")),
        created_at=coerce_datetime(raw.get("created_at")),
    )
