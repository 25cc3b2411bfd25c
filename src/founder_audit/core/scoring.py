"""Founder Bottleneck Audit scoring algorithm.

Turns one respondent's raw answers into cost figures and severity bands:

    hourly_rate           = annual_compensation / 2000
    decisions_for_cost    = total could_delegate, or total decisions when
                            no delegation data was entered
    hours_per_week        = decisions_for_cost * average_minutes / 60
    annual_cost           = hours_per_week * 50 * hourly_rate
    delay_tax_annual      = sum(30-day delay tax amounts) * 12
    total_bottleneck_cost = annual_cost + delay_tax_annual

Values are kept as unrounded floats; rounding is a display concern.

This module is intentionally independent of the database layer so that
the scoring logic can be unit-tested without any infrastructure. It never
raises on data: degenerate inputs produce degenerate (but finite) numbers.
"""

from collections.abc import Iterable

from founder_audit.core.catalog import (
    CRITICAL_MIN_DECISIONS,
    CRITICAL_MIN_PATTERNS,
    DECISION_LOAD_CEILING_LEVEL,
    DECISION_LOAD_THRESHOLDS,
    DELAY_TAX_PERIODS_PER_YEAR,
    OPTIMIZED_MAX_DECISIONS_EXCLUSIVE,
    OPTIMIZED_MAX_PATTERNS,
    WORK_HOURS_PER_YEAR,
    WORK_WEEKS_PER_YEAR,
    DecisionLoadLevel,
    OverallStatus,
)
from founder_audit.core.records import (
    AuditData,
    AuditResults,
    BottleneckPattern,
    DecisionCategory,
    Number,
)
from founder_audit.observability import get_logger

logger = get_logger(__name__)


class AuditScorer:
    """Scoring engine for the Founder Bottleneck Audit.

    Stateless; a single instance can be shared across requests.
    """

    def total_decisions(self, categories: Iterable[DecisionCategory]) -> Number:
        """Sum decisions across all categories."""
        return sum(c.decisions for c in categories)

    def total_could_delegate(self, categories: Iterable[DecisionCategory]) -> Number:
        """Sum delegatable decisions across all categories."""
        return sum(c.could_delegate for c in categories)

    def total_not_sure(self, categories: Iterable[DecisionCategory]) -> int:
        """Count categories flagged as not sure."""
        return sum(1 for c in categories if c.not_sure)

    def decisions_for_cost(self, categories: Iterable[DecisionCategory]) -> Number:
        """Return the decision count that drives the time cost.

        Delegatable decisions supersede the raw total whenever any were
        entered; otherwise every decision is costed.

        Args:
            categories: Normalized decision categories.

        Returns:
            Total could_delegate if positive, else total decisions.
        """
        categories = list(categories)
        could_delegate = self.total_could_delegate(categories)
        if could_delegate > 0:
            return could_delegate
        return self.total_decisions(categories)

    def count_patterns_checked(self, patterns: Iterable[BottleneckPattern]) -> int:
        """Count patterns the respondent self-identified with."""
        return sum(1 for p in patterns if p.checked)

    def classify_decision_load(self, total_decisions: Number) -> DecisionLoadLevel:
        """Map a weekly decision count to a load level.

        Thresholds (inclusive upper bounds):
            <= 15 -> healthy
            <= 30 -> elevated
            <= 50 -> critical
            > 50  -> danger

        Args:
            total_decisions: Total decisions across all categories.

        Returns:
            One of healthy, elevated, critical, danger.
        """
        for ceiling, level in DECISION_LOAD_THRESHOLDS:
            if total_decisions <= ceiling:
                return level
        return DECISION_LOAD_CEILING_LEVEL

    def classify_overall_status(
        self, total_decisions: Number, patterns_checked: int
    ) -> OverallStatus:
        """Map decision load and pattern count to an overall status.

        optimized:    fewer than 20 decisions AND at most 1 pattern
        critical:     35 or more decisions OR 4 or more patterns
        scaling-risk: everything in between

        Args:
            total_decisions: Total decisions across all categories.
            patterns_checked: Number of checked bottleneck patterns.

        Returns:
            One of optimized, scaling-risk, critical.
        """
        if (
            total_decisions < OPTIMIZED_MAX_DECISIONS_EXCLUSIVE
            and patterns_checked <= OPTIMIZED_MAX_PATTERNS
        ):
            return "optimized"
        if total_decisions >= CRITICAL_MIN_DECISIONS or patterns_checked >= CRITICAL_MIN_PATTERNS:
            return "critical"
        return "scaling-risk"

    def score(self, audit_data: AuditData) -> AuditResults:
        """Run the full scoring pipeline for one audit.

        Args:
            audit_data: Normalized wizard answers.

        Returns:
            AuditResults with unrounded cost figures.
        """
        categories = audit_data.decision_categories
        total_decisions = self.total_decisions(categories)
        hourly_rate = audit_data.annual_compensation / WORK_HOURS_PER_YEAR

        hours_per_week = (
            self.decisions_for_cost(categories) * audit_data.average_minutes_per_decision / 60
        )
        annual_cost = hours_per_week * WORK_WEEKS_PER_YEAR * hourly_rate

        delay_tax_annual = (
            sum(item.amount for item in audit_data.delay_tax) * DELAY_TAX_PERIODS_PER_YEAR
        )
        patterns_checked = self.count_patterns_checked(audit_data.patterns)

        results = AuditResults(
            total_decisions=total_decisions,
            decision_load_level=self.classify_decision_load(total_decisions),
            hourly_rate=hourly_rate,
            hours_per_week=hours_per_week,
            annual_cost=annual_cost,
            delay_tax_annual=delay_tax_annual,
            total_bottleneck_cost=annual_cost + delay_tax_annual,
            patterns_checked=patterns_checked,
            overall_status=self.classify_overall_status(total_decisions, patterns_checked),
        )

        logger.debug(
            "Audit scored",
            total_decisions=total_decisions,
            not_sure_categories=self.total_not_sure(categories),
            patterns_checked=patterns_checked,
            total_bottleneck_cost=results.total_bottleneck_cost,
            overall_status=results.overall_status,
        )
        return results


_SCORER = AuditScorer()


def score_audit(audit_data: AuditData) -> AuditResults:
    """Score one audit with the shared scorer."""
    return _SCORER.score(audit_data)
