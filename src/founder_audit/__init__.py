"""Founder Bottleneck Audit service.

Self-assessment funnel backend: scores each founder's decision-bottleneck
audit, tracks wizard sessions, and reports cohort, funnel, and trend
analytics to the admin dashboard.
"""

__version__ = "0.1.0"
