"""
Ledger Store

DESIGN DECISION: One object owns the revenue, expense and appointment
collections. Every screen receives the same instance and goes through it:
- it is the only way to add a record
- it is the only place totals are computed
- it tells subscribers about every change, so screens never poll

Add operations run in a fixed order:
1. Validate the input (raise ValidationError, nothing touched)
2. Assign the next identifier for that collection
3. Append
4. Notify subscribers
All four happen before the call returns.

Identifiers come from a per-collection counter and are never reused,
so two records added in the same instant still get distinct ids.
Mutation is serialised by one re-entrant lock; the Streamlit server
runs sessions on separate threads against one cached store.
"""

import itertools
import threading
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Callable, NamedTuple, Optional, Union

import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from bizboard.audit import AuditLogger
from bizboard.ledger.errors import ValidationError
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


LedgerRecord = Union[RevenueEntry, ExpenseEntry, Appointment]


class LedgerChange(NamedTuple):
    """What subscribers receive after a successful add."""
    kind: RecordKind
    record: LedgerRecord


Subscriber = Callable[[LedgerChange], None]


def _calendar_day(value: Union[date, datetime], tz: Optional[tzinfo]) -> date:
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


class LedgerStore:
    """
    In-memory, append-only ledger of revenue, expenses and appointments.

    Records are immutable and never removed. Collections keep insertion
    order; display order is for the caller to derive.
    """

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        """
        Initialize an empty ledger.

        Args:
            audit_logger: Receives an audit event for every add and
                         every rejected input. If None, only the
                         module logger is used.
        """
        self._lock = threading.RLock()
        self._revenue: list[RevenueEntry] = []
        self._expenses: list[ExpenseEntry] = []
        self._appointments: list[Appointment] = []
        self._id_counters = {kind: itertools.count(1) for kind in RecordKind}
        self._subscribers: list[Subscriber] = []
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger(__name__)

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def revenue(self) -> tuple[RevenueEntry, ...]:
        with self._lock:
            return tuple(self._revenue)

    @property
    def expenses(self) -> tuple[ExpenseEntry, ...]:
        with self._lock:
            return tuple(self._expenses)

    @property
    def appointments(self) -> tuple[Appointment, ...]:
        with self._lock:
            return tuple(self._appointments)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_revenue(
        self,
        description: str,
        amount: Union[Decimal, int, float, str],
        date: Union[datetime, date, str],
    ) -> RevenueEntry:
        """
        Add a revenue entry.

        Raises:
            ValidationError: empty description, amount <= 0 or bad date
        """
        draft = self._validate(
            RecordKind.REVENUE,
            NewRevenue,
            description=description,
            amount=amount,
            date=date,
        )
        return self._admit(RecordKind.REVENUE, draft, RevenueEntry, self._revenue)

    def add_expense(
        self,
        description: str,
        amount: Union[Decimal, int, float, str],
        category: str,
        date: Union[datetime, date, str],
    ) -> ExpenseEntry:
        """
        Add an expense entry.

        The category is stored as given; it is not checked against
        any list of known categories.

        Raises:
            ValidationError: empty description or category, amount <= 0
                             or bad date
        """
        draft = self._validate(
            RecordKind.EXPENSE,
            NewExpense,
            description=description,
            amount=amount,
            category=category,
            date=date,
        )
        return self._admit(RecordKind.EXPENSE, draft, ExpenseEntry, self._expenses)

    def add_appointment(
        self,
        title: str,
        date: Union[datetime, date, str],
    ) -> Appointment:
        """
        Add an appointment.

        Raises:
            ValidationError: empty title or bad date
        """
        draft = self._validate(
            RecordKind.APPOINTMENT,
            NewAppointment,
            title=title,
            date=date,
        )
        return self._admit(
            RecordKind.APPOINTMENT, draft, Appointment, self._appointments,
        )

    def _validate(self, kind: RecordKind, model: type[BaseModel], **fields) -> BaseModel:
        try:
            return model(**fields)
        except PydanticValidationError as e:
            issues = [ValidationIssue.from_error(err) for err in e.errors()]
            self._logger.info(
                "ledger_input_rejected",
                kind=kind.value,
                fields=[i.field for i in issues],
            )
            if self._audit_logger:
                self._audit_logger.log_validation_failed(
                    kind.value, [i.model_dump() for i in issues],
                )
            raise ValidationError(kind, issues) from e

    def _admit(self, kind: RecordKind, draft: BaseModel, entry: type, collection: list):
        with self._lock:
            record_id = str(next(self._id_counters[kind]))
            record = entry(id=record_id, **draft.model_dump())
            collection.append(record)
            self._notify(LedgerChange(kind, record))

        self._logger.debug("ledger_record_added", kind=kind.value, record_id=record_id)
        if self._audit_logger:
            self._audit_logger.log_record_added(
                kind.value, record_id, getattr(record, "description", None) or record.title,
            )
        return record

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Call ``callback`` with a LedgerChange after every successful add.

        Returns a function that removes the subscription. Calling it
        more than once is harmless.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, change: LedgerChange) -> None:
        # Snapshot: a callback may unsubscribe itself
        for callback in list(self._subscribers):
            try:
                callback(change)
            except Exception as e:
                # Record stays; remaining subscribers still run
                name = getattr(callback, "__qualname__", repr(callback))
                self._logger.exception(
                    "ledger_subscriber_failed",
                    subscriber=name,
                    kind=change.kind.value,
                    record_id=change.record.id,
                )
                if self._audit_logger:
                    self._audit_logger.log_subscriber_failed(
                        change.kind.value, change.record.id, name, str(e),
                    )

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def total_revenue(self) -> Decimal:
        """Sum of all revenue amounts; 0 when there is none."""
        with self._lock:
            return sum((r.amount for r in self._revenue), Decimal("0"))

    def total_expenses(self) -> Decimal:
        """Sum of all expense amounts; 0 when there is none."""
        with self._lock:
            return sum((e.amount for e in self._expenses), Decimal("0"))

    def profit(self) -> Decimal:
        """Revenue minus expenses. Negative when expenses are higher."""
        with self._lock:
            return self.total_revenue() - self.total_expenses()

    def appointments_on(
        self,
        day: Union[date, datetime, str],
        tz: Optional[tzinfo] = None,
    ) -> tuple[Appointment, ...]:
        """
        Appointments that fall on the same calendar day as ``day``.

        Only year, month and day are compared. The comparison timezone
        is ``tz``, or ``day``'s own timezone when it is an aware datetime.
        Aware values are converted into that zone first; naive values
        are taken as they are. Results keep insertion order.

        Raises:
            ValidationError: ``day`` is a string that is not an ISO date
        """
        if isinstance(day, str):
            try:
                day = datetime.fromisoformat(day)
            except ValueError as e:
                raise ValidationError(RecordKind.APPOINTMENT, [ValidationIssue(
                    field="day",
                    issue_type="datetime_from_date_parsing",
                    message=f"Not an ISO date: {day!r}",
                )]) from e
        if tz is None and isinstance(day, datetime):
            tz = day.tzinfo
        target = _calendar_day(day, tz)

        with self._lock:
            return tuple(
                appt for appt in self._appointments
                if _calendar_day(appt.date, tz) == target
            )
