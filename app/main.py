"""
Streamlit Frontend for BizBoard

The dashboard a small-business owner opens every day.

DESIGN PRINCIPLES:
1. Every screen reads from and adds to the one shared ledger
2. Invalid input is explained next to the form, never saved
3. The AI category is a suggestion the user can overwrite
4. A failing AI service is a notice, not an error page

Screen-local state (pending suggestion, form messages) lives in
st.session_state; the ledger only ever holds records.
"""

import asyncio
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation

import plotly.graph_objects as go
import streamlit as st

from bizboard.audit import configure_logging
from bizboard.categorization import ExpenseCategorizer
from bizboard.config import get_settings
from bizboard.formatting import format_currency
from bizboard.ledger import LedgerStore, ValidationError
from bizboard.orchestrator import AppComponents, create_app_components
from bizboard.queries import (
    RecentChanges,
    appointment_days,
    newest_first,
    summarize,
)


# Page configuration
st.set_page_config(
    page_title="BizBoard",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .metric-box {
        padding: 20px;
        border-radius: 10px;
        background-color: #f8f9fa;
        border-left: 5px solid #004085;
        margin: 10px 0;
    }
    .metric-label {
        font-size: 0.9em;
        color: #6c757d;
    }
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
        color: #2c3e50;
    }
    .profit-positive { color: #28a745; }
    .profit-negative { color: #dc3545; }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create the process-wide components (cached)."""
    configure_logging(get_settings().app.log_level)
    return create_app_components()


def to_decimal(value) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


def format_day(value: datetime) -> str:
    return value.strftime("%B %d, %Y")


def show_messages(key: str):
    """Render and clear messages a callback left for this screen."""
    for level, text in st.session_state.pop(key, []):
        if level == "error":
            st.error(text)
        elif level == "warning":
            st.warning(text)
        else:
            st.success(text)


def report_validation(key: str, error: ValidationError):
    st.session_state[key] = [
        ("error", f"{field.capitalize()}: {message}")
        for field, message in error.messages_by_field().items()
    ]


def main():
    """Main application entry point."""
    store, recent_changes, categorizer, _ = get_components()

    st.sidebar.title("📊 BizBoard")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📈 Dashboard", "📅 Calendar", "💵 Revenue", "🧾 Expenses", "⚙️ Settings"],
        index=0,
    )

    if page == "📈 Dashboard":
        render_dashboard_page(store, recent_changes)
    elif page == "📅 Calendar":
        render_calendar_page(store)
    elif page == "💵 Revenue":
        render_revenue_page(store)
    elif page == "🧾 Expenses":
        render_expenses_page(store, categorizer)
    elif page == "⚙️ Settings":
        render_settings_page(categorizer)


# =============================================================================
# DASHBOARD
# =============================================================================

def render_dashboard_page(store: LedgerStore, recent_changes: RecentChanges):
    """Render totals, the overview chart and recent activity."""
    st.title("📈 Dashboard")
    summary = summarize(store)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.markdown(f"""
        <div class="metric-box">
            <div class="metric-label">Total Revenue</div>
            <div class="big-number">{format_currency(summary.total_revenue)}</div>
            <div class="metric-label">All-time revenue</div>
        </div>
        """, unsafe_allow_html=True)
    with col2:
        st.markdown(f"""
        <div class="metric-box">
            <div class="metric-label">Total Expenses</div>
            <div class="big-number">{format_currency(summary.total_expenses)}</div>
            <div class="metric-label">All-time expenses</div>
        </div>
        """, unsafe_allow_html=True)
    with col3:
        profit_class = "profit-positive" if summary.is_profitable else "profit-negative"
        st.markdown(f"""
        <div class="metric-box">
            <div class="metric-label">Profit</div>
            <div class="big-number {profit_class}">{format_currency(summary.profit)}</div>
            <div class="metric-label">Total revenue minus expenses</div>
        </div>
        """, unsafe_allow_html=True)

    st.subheader("Overview")
    rows = summary.chart_rows()
    figure = go.Figure(
        go.Bar(
            x=[row["series"] for row in rows],
            y=[row["amount"] for row in rows],
            marker_color=["#2a9d8f", "#e76f51"],
            text=[format_currency(row["amount"]) for row in rows],
            textposition="auto",
        )
    )
    figure.update_layout(
        height=300,
        margin=dict(l=10, r=10, t=10, b=10),
        yaxis_tickprefix=get_settings().app.currency_symbol,
    )
    st.plotly_chart(figure, use_container_width=True)

    st.subheader("Recent Activity")
    changes = recent_changes.items()
    if not changes:
        st.info("Nothing added yet this session.")
    for change in changes:
        record = change.record
        label = getattr(record, "description", None) or record.title
        amount = getattr(record, "amount", None)
        suffix = f" - {format_currency(amount)}" if amount is not None else ""
        st.markdown(f"- **{change.kind.value.capitalize()}**: {label}{suffix}")


# =============================================================================
# CALENDAR
# =============================================================================

def _submit_appointment(store: LedgerStore, day: date):
    try:
        appt = store.add_appointment(
            title=st.session_state.get("appointment_title", ""),
            date=datetime.combine(day, st.session_state.get("appointment_time") or time()),
        )
    except ValidationError as e:
        report_validation("calendar_messages", e)
        return
    st.session_state.calendar_messages = [
        ("success", f'Successfully scheduled "{appt.title}".'),
    ]
    st.session_state.appointment_title = ""


def render_calendar_page(store: LedgerStore):
    """Render the calendar page."""
    st.title("📅 Calendar")

    col1, col2 = st.columns([3, 4])

    with col1:
        day = st.date_input("Day", value=date.today(), key="calendar_day")
        busy_days = sorted(appointment_days(store))
        if busy_days:
            st.caption(
                "Days with appointments: "
                + ", ".join(d.strftime("%b %d") for d in busy_days)
            )

        with st.expander("➕ Add Appointment"):
            st.markdown(f"Schedule a new appointment for {format_day(datetime.combine(day, time()))}.")
            st.text_input("Title", key="appointment_title")
            st.time_input("Time", value=time(9, 0), key="appointment_time")
            st.button(
                "Schedule",
                type="primary",
                on_click=_submit_appointment,
                args=(store, day),
            )
            show_messages("calendar_messages")

    with col2:
        daily = store.appointments_on(day)
        st.subheader(f"Appointments for {format_day(datetime.combine(day, time()))}")
        st.caption(f"You have {len(daily)} appointment(s) on this day.")
        if not daily:
            st.info("No appointments scheduled for this day.")
        for appt in daily:
            st.markdown(f"🗓️ **{appt.title}** · {appt.date.strftime('%H:%M')}")


# =============================================================================
# REVENUE
# =============================================================================

def _submit_revenue(store: LedgerStore):
    try:
        entry = store.add_revenue(
            description=st.session_state.get("revenue_description", ""),
            amount=to_decimal(st.session_state.get("revenue_amount", 0)),
            date=st.session_state.get("revenue_date") or date.today(),
        )
    except ValidationError as e:
        report_validation("revenue_messages", e)
        return
    st.session_state.revenue_messages = [
        ("success", f'Successfully added "{entry.description}".'),
    ]
    st.session_state.revenue_description = ""
    st.session_state.revenue_amount = 0.0


def render_revenue_page(store: LedgerStore):
    """Render the revenue page."""
    st.title("💵 Revenue")

    with st.expander("➕ Add Revenue"):
        st.text_input("Description", key="revenue_description")
        st.number_input(
            f"Amount ({get_settings().app.currency_code})",
            min_value=0.0,
            step=0.01,
            format="%.2f",
            key="revenue_amount",
        )
        st.date_input("Date", value=date.today(), key="revenue_date")
        st.button("Add Revenue", type="primary", on_click=_submit_revenue, args=(store,))
        show_messages("revenue_messages")

    rows = [
        {
            "Description": r.description,
            "Date": format_day(r.date),
            "Amount": format_currency(r.amount),
        }
        for r in newest_first(store.revenue)
    ]
    if rows:
        st.dataframe(rows, use_container_width=True, hide_index=True)
    else:
        st.info("No revenue yet.")


# =============================================================================
# EXPENSES
# =============================================================================

def _suggest_category(categorizer: ExpenseCategorizer):
    description = st.session_state.get("expense_description", "")
    if not description.strip():
        st.session_state.expense_messages = [
            ("error", "Please enter a description to categorize."),
        ]
        return

    st.session_state.categorizing = True
    try:
        suggestion = run_async(categorizer.suggest(description))
    finally:
        st.session_state.categorizing = False

    st.session_state.expense_category = suggestion.category
    if suggestion.used_fallback:
        st.session_state.expense_messages = [("warning", suggestion.notice)]
    else:
        st.session_state.expense_messages = [
            ("success", "We've suggested a category for your expense."),
        ]


def _submit_expense(store: LedgerStore):
    try:
        entry = store.add_expense(
            description=st.session_state.get("expense_description", ""),
            amount=to_decimal(st.session_state.get("expense_amount", 0)),
            category=st.session_state.get("expense_category", ""),
            date=st.session_state.get("expense_date") or date.today(),
        )
    except ValidationError as e:
        report_validation("expense_messages", e)
        return
    st.session_state.expense_messages = [
        ("success", f'Successfully added "{entry.description}".'),
    ]
    st.session_state.expense_description = ""
    st.session_state.expense_amount = 0.0
    st.session_state.expense_category = ""


def render_expenses_page(store: LedgerStore, categorizer: ExpenseCategorizer):
    """Render the expenses page."""
    st.title("🧾 Expenses")

    with st.expander("➕ Add Expense"):
        st.text_input("Description", key="expense_description")
        st.number_input(
            f"Amount ({get_settings().app.currency_code})",
            min_value=0.0,
            step=0.01,
            format="%.2f",
            key="expense_amount",
        )

        col1, col2 = st.columns([3, 1])
        with col1:
            st.text_input("Category", key="expense_category")
        with col2:
            st.button(
                "✨ Suggest",
                on_click=_suggest_category,
                args=(categorizer,),
                disabled=st.session_state.get("categorizing", False),
                help="Suggest a category from the description",
            )

        st.date_input("Date", value=date.today(), key="expense_date")
        st.button("Add Expense", type="primary", on_click=_submit_expense, args=(store,))
        show_messages("expense_messages")

    rows = [
        {
            "Description": e.description,
            "Category": e.category,
            "Date": format_day(e.date),
            "Amount": format_currency(e.amount),
        }
        for e in newest_first(store.expenses)
    ]
    if rows:
        st.dataframe(rows, use_container_width=True, hide_index=True)
    else:
        st.info("No expenses yet.")


# =============================================================================
# SETTINGS
# =============================================================================

def render_settings_page(categorizer: ExpenseCategorizer):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    from bizboard.config import validate_all_settings

    status = validate_all_settings()

    services = [
        ("Gemini (Expense Categorization)", "gemini"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    if not categorizer.is_available:
        st.warning(
            f"Category suggestions will use '{categorizer.fallback_category}' "
            "until a Gemini API key is configured."
        )

    app_settings = get_settings().app
    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        f"- Currency: **{app_settings.currency_code}** "
        f"(example: {format_currency(Decimal('1234.5'))})\n"
        f"- Environment: **{app_settings.app_environment}**"
    )
    st.markdown(
        "To configure the application, create a `.env` file with your API keys. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
