"""Derived views package."""

from bizboard.queries.summary import (
    DashboardSummary,
    RecentChanges,
    appointment_days,
    newest_first,
    summarize,
)

__all__ = [
    "DashboardSummary",
    "RecentChanges",
    "appointment_days",
    "newest_first",
    "summarize",
]
