"""Sample records loaded at startup so the dashboard is not empty."""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional

from bizboard.ledger import LedgerStore


SAMPLE_REVENUE = [
    ("Website Development Project", Decimal("2500"), date(2024, 5, 10)),
    ("Logo Design", Decimal("800"), date(2024, 5, 15)),
    ("Consulting Services", Decimal("1200"), date(2024, 6, 2)),
]

SAMPLE_EXPENSES = [
    ("Software Subscription", Decimal("49.99"), "Software", date(2024, 5, 1)),
    ("Lunch with client", Decimal("75.50"), "Business Development", date(2024, 5, 20)),
    ("Office Supplies", Decimal("120"), "Office Expenses", date(2024, 6, 5)),
]


def seed_sample_data(store: LedgerStore, today: Optional[datetime] = None) -> None:
    """
    Add the sample records through the store's normal add operations.

    Appointments are relative to ``today`` (default: now): one today,
    one two days later.
    """
    today = today or datetime.now()
    if not isinstance(today, datetime):
        today = datetime.combine(today, time())

    for description, amount, day in SAMPLE_REVENUE:
        store.add_revenue(description, amount, day)

    for description, amount, category, day in SAMPLE_EXPENSES:
        store.add_expense(description, amount, category, day)

    store.add_appointment("Meeting with John Doe", today)
    store.add_appointment("Project Kickoff", today + timedelta(days=2))
