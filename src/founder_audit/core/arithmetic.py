"""Rounding and ratio helpers shared by the reporting aggregators.

Report percentages round half up (2.5 -> 3), matching what the dashboard
has always displayed, rather than Python's round-half-to-even.
"""

import math

from founder_audit.core.records import Number


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 rounding towards +infinity."""
    return math.floor(value + 0.5)


def safe_mean(total: Number, count: int) -> float:
    """Return total / count, or 0.0 when count is zero."""
    if count == 0:
        return 0.0
    return total / count


def percentage(part: Number, whole: Number) -> int:
    """Return part as a rounded percentage of whole, or 0 when whole is zero."""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)
