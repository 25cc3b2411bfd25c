"""FastAPI router for audit submission and wizard session tracking.

All routes are thin: they parse inputs, delegate to the services, and
serialise responses. No business logic lives here.

Auth: None. These endpoints are called anonymously by the public wizard,
so the write endpoints are throttled per client IP.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from founder_audit.api.dependencies import (
    get_audit_service,
    get_session_service,
    get_settings,
)
from founder_audit.api.rate_limit import ClientThrottle, throttle_dependency
from founder_audit.api.schemas.audit import (
    AuditResponse,
    CompleteSessionRequest,
    SessionResponse,
    StartSessionRequest,
    SubmitAuditRequest,
    SuccessResponse,
    UpdateSessionRequest,
)
from founder_audit.core.errors import SessionAlreadyExistsError, SessionNotFoundError
from founder_audit.core.services import AuditService, SessionService

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Founder Bottleneck Audit"])

_settings = get_settings()
submit_throttle = ClientThrottle(
    rate_per_minute=_settings.audit_submit_rate_per_minute,
    max_clients=_settings.throttle_max_clients,
)
beacon_throttle = ClientThrottle(
    rate_per_minute=_settings.session_beacon_rate_per_minute,
    max_clients=_settings.throttle_max_clients,
)


# ---------------------------------------------------------------------------
# Audits
# ---------------------------------------------------------------------------


@router.post(
    "/audits",
    response_model=AuditResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a completed audit",
    dependencies=[Depends(throttle_dependency(submit_throttle))],
)
async def submit_audit(
    body: SubmitAuditRequest,
    service: AuditService = Depends(get_audit_service),
) -> AuditResponse:
    """Score and store a completed Founder Bottleneck Audit.

    Results are recomputed from the submitted answers; any results the
    wizard sent are only used to detect scoring drift.
    """
    with structlog.contextvars.bound_contextvars(session_id=body.session_id):
        record = await service.submit_audit(
            user_name=body.user_name,
            user_email=str(body.user_email),
            audit_data=body.audit_data.model_dump(),
            segmentation=body.segmentation.model_dump() if body.segmentation else None,
            session_id=body.session_id,
            client_results=body.results.model_dump() if body.results else None,
        )
    return AuditResponse.model_validate(record)


@router.get(
    "/audits",
    response_model=list[AuditResponse],
    summary="List all audits, newest first",
)
async def list_audits(
    service: AuditService = Depends(get_audit_service),
) -> list[AuditResponse]:
    """Return every stored audit."""
    records = await service.list_audits()
    logger.info("Audits listed", audit_count=len(records))
    return [AuditResponse.model_validate(record) for record in records]


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


@router.post(
    "/sessions/start",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start tracking a wizard session",
    dependencies=[Depends(throttle_dependency(beacon_throttle))],
)
async def start_session(
    body: StartSessionRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """Create a session at the intro step."""
    with structlog.contextvars.bound_contextvars(session_id=body.session_id):
        try:
            record = await service.start_session(body.session_id)
        except SessionAlreadyExistsError as exc:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return SessionResponse.model_validate(record)


@router.post(
    "/sessions/update",
    response_model=SuccessResponse,
    summary="Record the wizard step a session reached",
    dependencies=[Depends(throttle_dependency(beacon_throttle))],
)
async def update_session(
    body: UpdateSessionRequest,
    service: SessionService = Depends(get_session_service),
) -> SuccessResponse:
    """Advance a session's last step."""
    with structlog.contextvars.bound_contextvars(session_id=body.session_id):
        try:
            await service.update_step(body.session_id, body.step)
        except SessionNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return SuccessResponse()


@router.post(
    "/sessions/complete",
    response_model=SuccessResponse,
    summary="Mark a wizard session completed",
    dependencies=[Depends(throttle_dependency(beacon_throttle))],
)
async def complete_session(
    body: CompleteSessionRequest,
    service: SessionService = Depends(get_session_service),
) -> SuccessResponse:
    """Complete a session and stamp its end time."""
    with structlog.contextvars.bound_contextvars(session_id=body.session_id):
        try:
            await service.complete_session(body.session_id)
        except SessionNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return SuccessResponse()


@router.get(
    "/sessions",
    response_model=list[SessionResponse],
    summary="List all sessions, newest first",
)
async def list_sessions(
    service: SessionService = Depends(get_session_service),
) -> list[SessionResponse]:
    """Return every tracked session."""
    records = await service.list_sessions()
    return [SessionResponse.model_validate(record) for record in records]
