"""
Ledger Record Models for BizBoard

These models define the strict schemas for every record the ledger holds.
They are designed to:
1. Reject invalid input before the ledger is touched
2. Provide clear validation error messages for inline display
3. Stay immutable once built

DESIGN DECISION: Each record has two shapes.
The New* models are what a screen submits (no identifier yet).
The *Entry / Appointment models are what the ledger stores, with the
identifier the ledger assigned. Only the ledger builds the second shape.
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RecordKind(str, Enum):
    """The three collections held by the ledger."""
    REVENUE = "revenue"
    EXPENSE = "expense"
    APPOINTMENT = "appointment"


# =============================================================================
# INPUT MODELS - validated before an identifier exists
# =============================================================================

class _DatedInput(BaseModel):
    """Shared config and date handling for every record."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    date: datetime = Field(
        ...,
        description="When the record happened (time of day optional)"
    )

    @field_validator('date', mode='before')
    @classmethod
    def accept_calendar_date(cls, v: Any) -> Any:
        """A bare date means midnight of that day."""
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time())
        return v


class NewRevenue(_DatedInput):
    """Revenue as submitted by the Revenue screen."""

    description: str = Field(
        ...,
        min_length=1,
        description="What the revenue was for"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount received, in the configured currency"
    )


class NewExpense(_DatedInput):
    """
    Expense as submitted by the Expenses screen.

    The category is free text. It may come from the categorization
    service, but the ledger never checks it against a fixed list.
    """

    description: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent, in the configured currency"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Free-form expense category"
    )


class NewAppointment(_DatedInput):
    """Appointment as submitted by the Calendar screen."""

    title: str = Field(
        ...,
        min_length=1,
        description="What the appointment is"
    )


# =============================================================================
# STORED MODELS - carry the identifier assigned by the ledger
# =============================================================================

class RevenueEntry(NewRevenue):
    """A revenue record held by the ledger."""

    id: str = Field(..., min_length=1, description="Ledger-assigned identifier")


class ExpenseEntry(NewExpense):
    """An expense record held by the ledger."""

    id: str = Field(..., min_length=1, description="Ledger-assigned identifier")


class Appointment(NewAppointment):
    """An appointment held by the ledger."""

    id: str = Field(..., min_length=1, description="Ledger-assigned identifier")


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single failed field constraint."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'string_too_short', 'greater_than')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )

    @classmethod
    def from_error(cls, error: dict) -> "ValidationIssue":
        """Build from one entry of pydantic's ``ValidationError.errors()``."""
        loc = ".".join(str(part) for part in error.get("loc", ())) or "record"
        return cls(
            field=loc,
            issue_type=error.get("type", "invalid"),
            message=error.get("msg", "Invalid value"),
        )
