"""Tests for the ledger store."""

import threading
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from bizboard.ledger import LedgerChange, LedgerStore, ValidationError
from bizboard.models import AuditEventType, RecordKind


@pytest.fixture
def store():
    return LedgerStore()


class TestAddOperations:
    """Tests for add_revenue / add_expense / add_appointment."""

    def test_add_revenue_returns_stored_record(self, store):
        entry = store.add_revenue("Logo Design", Decimal("800"), date(2024, 5, 15))

        assert entry.id == "1"
        assert entry.description == "Logo Design"
        assert entry.amount == Decimal("800")
        assert store.revenue == (entry,)

    def test_each_add_grows_collection_by_one(self, store):
        store.add_revenue("A", 1, date(2024, 5, 1))
        store.add_expense("B", 2, "Travel", date(2024, 5, 1))
        store.add_appointment("C", date(2024, 5, 1))

        assert len(store.revenue) == 1
        assert len(store.expenses) == 1
        assert len(store.appointments) == 1

    def test_identifiers_are_unique(self, store):
        """Records added back to back never share an id."""
        ids = {store.add_expense(f"Item {i}", 1, "Misc", date(2024, 5, 1)).id for i in range(200)}
        assert len(ids) == 200

    def test_identifiers_are_per_collection_counters(self, store):
        assert store.add_revenue("A", 1, date(2024, 5, 1)).id == "1"
        assert store.add_revenue("B", 1, date(2024, 5, 1)).id == "2"
        assert store.add_appointment("C", date(2024, 5, 1)).id == "1"

    def test_expense_category_stored_as_given(self, store):
        entry = store.add_expense("Taxi", Decimal("20"), "Ground Transport", date(2024, 5, 1))
        assert entry.category == "Ground Transport"

    def test_added_records_keep_insertion_order(self, store):
        late = store.add_revenue("Late", 1, date(2024, 6, 1))
        early = store.add_revenue("Early", 1, date(2024, 1, 1))
        assert store.revenue == (late, early)

    def test_snapshot_not_affected_by_later_adds(self, store):
        store.add_revenue("A", 1, date(2024, 5, 1))
        snapshot = store.revenue
        store.add_revenue("B", 1, date(2024, 5, 1))
        assert len(snapshot) == 1


class TestValidation:
    """Invalid input is rejected before the store changes."""

    @pytest.mark.parametrize("amount", [0, -1, Decimal("-0.01"), Decimal("0")])
    def test_revenue_non_positive_amount(self, store, amount):
        with pytest.raises(ValidationError) as exc_info:
            store.add_revenue("Refund", amount, date(2024, 5, 1))

        assert exc_info.value.kind == RecordKind.REVENUE
        assert "amount" in exc_info.value.messages_by_field()
        assert store.revenue == ()

    @pytest.mark.parametrize("amount", [0, -150])
    def test_expense_non_positive_amount(self, store, amount):
        with pytest.raises(ValidationError):
            store.add_expense("Refund", amount, "Misc", date(2024, 5, 1))
        assert store.expenses == ()

    def test_blank_description(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.add_revenue("   ", 10, date(2024, 5, 1))
        assert "description" in exc_info.value.messages_by_field()

    def test_blank_category(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.add_expense("Taxi", 10, "", date(2024, 5, 1))
        assert "category" in exc_info.value.messages_by_field()

    def test_blank_title(self, store):
        with pytest.raises(ValidationError):
            store.add_appointment("", date(2024, 5, 1))
        assert store.appointments == ()

    def test_malformed_date(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.add_appointment("Kickoff", "31/31/2024")
        assert "date" in exc_info.value.messages_by_field()

    def test_multiple_issues_reported(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.add_expense("", -5, "", date(2024, 5, 1))
        fields = {issue.field for issue in exc_info.value.issues}
        assert fields == {"description", "amount", "category"}

    def test_error_message_names_record_kind(self, store):
        with pytest.raises(ValidationError, match="Invalid expense"):
            store.add_expense("Taxi", 0, "Travel", date(2024, 5, 1))

    def test_rejected_input_does_not_consume_identifier(self, store):
        with pytest.raises(ValidationError):
            store.add_revenue("Bad", 0, date(2024, 5, 1))
        assert store.add_revenue("Good", 1, date(2024, 5, 1)).id == "1"

    def test_long_free_text_accepted(self, store):
        revenue = store.add_revenue("x" * 250, 10, date(2024, 5, 1))
        expense = store.add_expense("Taxi", 10, "c" * 150, date(2024, 5, 1))
        appt = store.add_appointment("t" * 300, date(2024, 5, 1))

        assert len(revenue.description) == 250
        assert len(expense.category) == 150
        assert len(appt.title) == 300
        assert len(store.revenue) == 1


class TestAggregates:
    """Tests for totals and profit."""

    def test_totals_of_empty_ledger_are_zero(self, store):
        assert store.total_revenue() == 0
        assert store.total_expenses() == 0
        assert store.profit() == 0

    def test_total_revenue(self, store):
        for amount in (2500, 800, 1200):
            store.add_revenue("Work", amount, date(2024, 5, 1))
        assert store.total_revenue() == Decimal("4500")

    def test_total_expenses_keeps_cents(self, store):
        store.add_expense("Software", Decimal("49.99"), "Software", date(2024, 5, 1))
        store.add_expense("Lunch", Decimal("75.50"), "Meals", date(2024, 5, 2))
        assert store.total_expenses() == Decimal("125.49")

    def test_profit_can_be_negative(self, store):
        store.add_revenue("Small job", 100, date(2024, 5, 1))
        store.add_expense("Big bill", 150, "Rent", date(2024, 5, 1))
        assert store.profit() == Decimal("-50")

    def test_profit_is_revenue_minus_expenses(self, store):
        store.add_revenue("A", Decimal("1000.10"), date(2024, 5, 1))
        store.add_expense("B", Decimal("250.05"), "Misc", date(2024, 5, 1))
        assert store.profit() == store.total_revenue() - store.total_expenses()

    def test_repeated_reads_are_stable(self, store):
        store.add_revenue("A", 10, date(2024, 5, 1))
        assert store.total_revenue() == store.total_revenue() == Decimal("10")


class TestAppointmentsOn:
    """Tests for calendar-day lookup."""

    def test_late_evening_matches_same_day(self, store):
        appt = store.add_appointment("Late call", "2024-05-10T23:00")

        assert store.appointments_on("2024-05-10") == (appt,)
        assert store.appointments_on("2024-05-11") == ()

    def test_date_and_datetime_queries(self, store):
        appt = store.add_appointment("Standup", datetime(2024, 5, 10, 9, 15))

        assert store.appointments_on(date(2024, 5, 10)) == (appt,)
        assert store.appointments_on(datetime(2024, 5, 10, 18, 0)) == (appt,)

    def test_insertion_order_kept(self, store):
        second = store.add_appointment("Afternoon", datetime(2024, 5, 10, 15, 0))
        first = store.add_appointment("Morning", datetime(2024, 5, 10, 8, 0))
        store.add_appointment("Other day", datetime(2024, 5, 11, 8, 0))

        assert store.appointments_on(date(2024, 5, 10)) == (second, first)

    def test_aware_record_converted_to_comparison_zone(self, store):
        plus_two = timezone(timedelta(hours=2))
        appt = store.add_appointment("Call", datetime(2024, 5, 10, 23, 0, tzinfo=timezone.utc))

        assert store.appointments_on(date(2024, 5, 11), tz=plus_two) == (appt,)
        assert store.appointments_on(date(2024, 5, 10), tz=plus_two) == ()
        assert store.appointments_on(date(2024, 5, 10), tz=timezone.utc) == (appt,)

    def test_aware_query_uses_its_own_zone(self, store):
        plus_two = timezone(timedelta(hours=2))
        appt = store.add_appointment("Call", datetime(2024, 5, 10, 23, 0, tzinfo=timezone.utc))

        assert store.appointments_on(datetime(2024, 5, 11, 12, 0, tzinfo=plus_two)) == (appt,)

    def test_repeated_lookup_is_stable(self, store):
        store.add_appointment("Standup", datetime(2024, 5, 10, 9, 15))
        assert store.appointments_on("2024-05-10") == store.appointments_on("2024-05-10")

    def test_malformed_query_string(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.appointments_on("10/05/2024")
        assert "day" in exc_info.value.messages_by_field()


class TestSubscriptions:
    """Tests for change notification."""

    def test_subscriber_receives_change(self, store):
        changes = []
        store.subscribe(changes.append)

        entry = store.add_revenue("Logo Design", 800, date(2024, 5, 15))

        assert changes == [LedgerChange(RecordKind.REVENUE, entry)]

    def test_subscriber_sees_updated_collection(self, store):
        seen = []
        store.subscribe(lambda change: seen.append(len(store.expenses)))

        store.add_expense("Taxi", 20, "Travel", date(2024, 5, 1))

        assert seen == [1]

    def test_unsubscribe_stops_notifications(self, store):
        changes = []
        unsubscribe = store.subscribe(changes.append)
        store.add_appointment("A", date(2024, 5, 1))

        unsubscribe()
        unsubscribe()
        store.add_appointment("B", date(2024, 5, 2))

        assert len(changes) == 1

    def test_rejected_input_does_not_notify(self, store):
        changes = []
        store.subscribe(changes.append)

        with pytest.raises(ValidationError):
            store.add_revenue("Bad", -1, date(2024, 5, 1))

        assert changes == []

    def test_failing_subscriber_is_isolated(self, store):
        def broken(change):
            raise RuntimeError("view crashed")

        changes = []
        store.subscribe(broken)
        store.subscribe(changes.append)

        entry = store.add_revenue("Logo Design", 800, date(2024, 5, 15))

        assert store.revenue == (entry,)
        assert len(changes) == 1

    def test_subscriber_may_unsubscribe_itself(self, store):
        calls = []

        def once(change):
            calls.append(change)
            unsubscribe()

        unsubscribe = store.subscribe(once)
        store.add_revenue("A", 1, date(2024, 5, 1))
        store.add_revenue("B", 1, date(2024, 5, 1))

        assert len(calls) == 1


class TestAuditTrail:
    """The store reports adds and rejections to the audit logger."""

    def test_add_is_audited(self, audit):
        store = LedgerStore(audit_logger=audit)

        store.add_expense("Taxi", 20, "Travel", date(2024, 5, 1))

        assert [e.event_type for e in audit.events] == [AuditEventType.EXPENSE_ADDED]
        assert audit.events[0].entity_id == "1"

    def test_rejection_is_audited(self, audit):
        store = LedgerStore(audit_logger=audit)

        with pytest.raises(ValidationError):
            store.add_revenue("", 10, date(2024, 5, 1))

        assert audit.events[0].event_type == AuditEventType.VALIDATION_FAILED
        assert audit.events[0].details["issues"][0]["field"] == "description"

    def test_subscriber_failure_is_audited(self, audit):
        store = LedgerStore(audit_logger=audit)

        def broken(change):
            raise RuntimeError("view crashed")

        store.subscribe(broken)
        store.add_revenue("A", 1, date(2024, 5, 1))

        types = [e.event_type for e in audit.events]
        assert AuditEventType.SUBSCRIBER_FAILED in types
        assert AuditEventType.REVENUE_ADDED in types


class TestConcurrentWriters:
    """The store stays consistent when sessions add from several threads."""

    def test_no_lost_updates_or_duplicate_ids(self, store):
        def worker(n):
            for i in range(50):
                store.add_revenue(f"Job {n}-{i}", 1, date(2024, 5, 1))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        ids = [r.id for r in store.revenue]
        assert len(ids) == 400
        assert len(set(ids)) == 400
        assert store.total_revenue() == Decimal("400")
