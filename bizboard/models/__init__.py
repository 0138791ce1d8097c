"""
Data Models Package

This package contains all Pydantic models used in BizBoard.
All data flowing through the ledger must conform to these schemas.
"""

from bizboard.models.records import (
    Appointment,
    ExpenseEntry,
    NewAppointment,
    NewExpense,
    NewRevenue,
    RecordKind,
    RevenueEntry,
    ValidationIssue,
)
from bizboard.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "Appointment",
    "ExpenseEntry",
    "NewAppointment",
    "NewExpense",
    "NewRevenue",
    "RecordKind",
    "RevenueEntry",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
