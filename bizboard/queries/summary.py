"""
Derived Ledger Views

DESIGN DECISION: Screens never compute totals or orderings themselves.
Everything here is a read-only view derived from the ledger on demand.
The ledger keeps insertion order; display order is decided here.
"""

from collections import deque
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Iterable, TypeVar

from pydantic import BaseModel, Field

from bizboard.ledger import LedgerChange, LedgerStore


R = TypeVar("R")


class DashboardSummary(BaseModel):
    """The three headline numbers on the dashboard."""

    total_revenue: Decimal = Field(..., description="All-time revenue")
    total_expenses: Decimal = Field(..., description="All-time expenses")
    profit: Decimal = Field(..., description="Revenue minus expenses")

    @property
    def is_profitable(self) -> bool:
        return self.profit >= 0

    def chart_rows(self) -> list[dict]:
        """Rows for the revenue vs expenses bar chart."""
        return [
            {"series": "Revenue", "amount": float(self.total_revenue)},
            {"series": "Expenses", "amount": float(self.total_expenses)},
        ]


def summarize(store: LedgerStore) -> DashboardSummary:
    revenue = store.total_revenue()
    expenses = store.total_expenses()
    return DashboardSummary(
        total_revenue=revenue,
        total_expenses=expenses,
        profit=revenue - expenses,
    )


def _sort_key(value: datetime) -> datetime:
    # Naive dates are taken as UTC so they compare with aware ones
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def newest_first(records: Iterable[R]) -> list[R]:
    """
    Display order: latest date first; equal dates keep insertion order.

    Records may mix naive and aware dates. Aware dates are compared
    in UTC, naive dates as they are.
    """
    return sorted(records, key=lambda r: _sort_key(r.date), reverse=True)


def appointment_days(store: LedgerStore) -> set[date]:
    """Calendar days holding at least one appointment."""
    return {appt.date.date() for appt in store.appointments}


class RecentChanges:
    """
    Ledger subscriber remembering the latest changes.

    Subscribe an instance with ``store.subscribe(recent)``; the
    dashboard reads ``recent.items()``.
    """

    def __init__(self, limit: int = 10):
        self._changes: deque[LedgerChange] = deque(maxlen=limit)

    def __call__(self, change: LedgerChange) -> None:
        self._changes.append(change)

    def __len__(self) -> int:
        return len(self._changes)

    def items(self) -> list[LedgerChange]:
        """Newest first."""
        return list(reversed(self._changes))
