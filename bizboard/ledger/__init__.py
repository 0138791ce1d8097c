"""Ledger package."""

from bizboard.ledger.errors import LedgerError, ValidationError
from bizboard.ledger.store import (
    LedgerChange,
    LedgerRecord,
    LedgerStore,
    Subscriber,
)

__all__ = [
    "LedgerChange",
    "LedgerError",
    "LedgerRecord",
    "LedgerStore",
    "Subscriber",
    "ValidationError",
]
