"""Pydantic request/response schemas for the Founder Bottleneck Audit API.

All API inputs and outputs are strictly typed Pydantic v2 models. Field
names are snake_case in Python and camelCase on the wire, matching the
wizard and dashboard payloads; either form is accepted on input.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from founder_audit.core.catalog import SessionStatus, SessionStep


class CamelModel(BaseModel):
    """Base schema: camelCase aliases, attribute-based validation."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------------------
# Audit payloads
# ---------------------------------------------------------------------------


class DecisionCategorySchema(CamelModel):
    """Decisions made in one domain during the observation week.

    Attributes:
        id: Category identifier (hiring, team, product, ...).
        name: Display name.
        decisions: Decisions made.
        could_delegate: Decisions a team member could have made.
        not_sure: Flag (older wizard) or count of unsure decisions.
        only_you: Decisions only the founder could make.
    """

    id: str
    name: str = ""
    decisions: int | float = 0
    could_delegate: int | float = 0
    not_sure: bool | int = 0
    only_you: int = 0


class DelayTaxItemSchema(CamelModel):
    """A 30-day delay-tax amount."""

    id: str
    name: str = ""
    amount: int | float = 0


class BottleneckPatternSchema(CamelModel):
    """A bottleneck archetype and whether it was checked."""

    id: str
    name: str = ""
    description: str = ""
    checked: bool = False


class AuditDataSchema(CamelModel):
    """Raw wizard answers."""

    decision_categories: list[DecisionCategorySchema] = Field(default_factory=list)
    annual_compensation: int | float = 0
    average_minutes_per_decision: int | float = 0
    delay_tax: list[DelayTaxItemSchema] = Field(default_factory=list)
    patterns: list[BottleneckPatternSchema] = Field(default_factory=list)


class SegmentationSchema(CamelModel):
    """Respondent company attributes."""

    founder_role: str | None = None
    revenue_range: str | None = None
    team_size: str | None = None
    industry_vertical: str | None = None


class AuditResultsSchema(CamelModel):
    """Derived scoring output."""

    total_decisions: int | float
    decision_load_level: str
    hourly_rate: float
    hours_per_week: float
    annual_cost: float
    delay_tax_annual: int | float
    total_bottleneck_cost: float
    patterns_checked: int
    overall_status: str


class SubmitAuditRequest(CamelModel):
    """Request body for saving a completed audit.

    Attributes:
        user_name: Respondent name.
        user_email: Respondent email.
        audit_data: Wizard answers.
        segmentation: Optional company attributes.
        session_id: Optional wizard session identifier.
        results: Results as computed by the wizard; recomputed server-side.
    """

    user_name: str = Field(..., min_length=1, max_length=255)
    user_email: EmailStr
    audit_data: AuditDataSchema
    segmentation: SegmentationSchema | None = None
    session_id: str | None = Field(default=None, max_length=64)
    results: AuditResultsSchema | None = None


class AuditResponse(CamelModel):
    """A stored audit."""

    id: uuid.UUID | None = None
    session_id: str | None = None
    user_name: str
    user_email: str
    segmentation: SegmentationSchema | None = None
    audit_data: AuditDataSchema
    results: AuditResultsSchema
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Session payloads
# ---------------------------------------------------------------------------


class StartSessionRequest(CamelModel):
    """Request body to begin tracking a wizard visit."""

    session_id: str = Field(..., min_length=1, max_length=64)


class UpdateSessionRequest(CamelModel):
    """Request body to record the step a respondent reached."""

    session_id: str = Field(..., min_length=1, max_length=64)
    step: SessionStep


class CompleteSessionRequest(CamelModel):
    """Request body to mark a wizard visit completed."""

    session_id: str = Field(..., min_length=1, max_length=64)


class SessionResponse(CamelModel):
    """A tracked wizard visit."""

    session_id: str
    status: SessionStatus
    last_step: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    created_at: datetime | None = None


class SuccessResponse(CamelModel):
    """Acknowledgement for beacon-style updates."""

    success: bool = True
