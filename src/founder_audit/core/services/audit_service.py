"""Service layer for Founder Bottleneck Audit submissions.

Implements the submission flow:
    1. normalize the wizard answers into AuditData
    2. score them with AuditScorer (results are always derived server-side)
    3. persist answers and results through the audit repository

All database access goes through repository interfaces. No SQLAlchemy or
FastAPI imports belong here.
"""

import math
from collections.abc import Mapping
from typing import Any

from founder_audit.core.interfaces import IAuditRepository
from founder_audit.core.records import (
    AuditRecord,
    AuditResults,
    normalize_audit,
    normalize_audit_data,
    normalize_results,
    normalize_segmentation,
)
from founder_audit.core.scoring import AuditScorer
from founder_audit.observability import get_logger

logger = get_logger(__name__)

_SCORER: AuditScorer = AuditScorer()


def results_match(expected: AuditResults, supplied: AuditResults) -> bool:
    """Compare two result sets, allowing float noise in the cost figures."""
    for name, value in expected.to_dict().items():
        other = getattr(supplied, name)
        if isinstance(value, str):
            if value != other:
                return False
        elif not math.isclose(value, other, rel_tol=1e-9, abs_tol=1e-6):
            return False
    return True


class AuditService:
    """Scores and stores audit submissions.

    Depends on a repository injected at construction time. Contains no
    framework-specific code.
    """

    def __init__(self, audit_repository: IAuditRepository) -> None:
        """Initialise the service with its repository.

        Args:
            audit_repository: Repository for audit records.
        """
        self._audit_repo = audit_repository

    async def submit_audit(
        self,
        user_name: str,
        user_email: str,
        audit_data: Mapping[str, Any],
        segmentation: Mapping[str, Any] | None = None,
        session_id: str | None = None,
        client_results: Mapping[str, Any] | None = None,
    ) -> AuditRecord:
        """Score and persist one completed audit.

        Results supplied by the client are never stored; they are compared
        with the server-side score and a mismatch is logged.

        Args:
            user_name: Respondent name.
            user_email: Respondent email.
            audit_data: Wizard answers with snake_case keys.
            segmentation: Optional segmentation answers.
            session_id: Optional wizard session identifier.
            client_results: Results as computed by the wizard, if sent.

        Returns:
            The stored audit as a normalized record.
        """
        data = normalize_audit_data(audit_data)
        results = _SCORER.score(data)

        if client_results is not None and not results_match(
            results, normalize_results(client_results)
        ):
            logger.warning(
                "Client results disagree with server scoring; storing server results",
                user_email=user_email,
                session_id=session_id,
                client_total=client_results.get("total_bottleneck_cost"),
                server_total=results.total_bottleneck_cost,
            )

        normalized_segmentation = normalize_segmentation(segmentation)
        record = await self._audit_repo.create_audit(
            user_name=user_name,
            user_email=user_email,
            audit_data=data.to_dict(),
            results=results.to_dict(),
            segmentation=(
                normalized_segmentation.to_dict() if normalized_segmentation is not None else None
            ),
            session_id=session_id,
        )

        logger.info(
            "Audit stored",
            audit_id=str(record.id),
            session_id=session_id,
            total_decisions=results.total_decisions,
            overall_status=results.overall_status,
            total_bottleneck_cost=results.total_bottleneck_cost,
        )
        return normalize_audit(record.as_mapping())

    async def list_audits(self) -> list[AuditRecord]:
        """Retrieve every stored audit, newest first, as normalized records."""
        rows = await self._audit_repo.list_audits()
        return [normalize_audit(row.as_mapping()) for row in rows]
