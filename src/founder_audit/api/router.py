"""Top-level API router for the Founder Bottleneck Audit service."""

from fastapi import APIRouter

from founder_audit.api.routes.analytics import router as analytics_router
from founder_audit.api.routes.audit import router as audit_router

router = APIRouter()
router.include_router(audit_router)
router.include_router(analytics_router)
