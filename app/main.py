"""
Streamlit Frontend for DebtFlow

This is the interface users interact with daily to keep track of
what they owe.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Explicit confirmation before anything is deleted
3. Clear error messages in simple language
4. Visual feedback for all operations
5. The advisor is optional and never blocks the page

Every page reads the full collection fresh from storage and derives
what it shows (status, totals, progress) on the spot.
"""

import asyncio
from datetime import date, datetime

import streamlit as st

from debtflow.config import get_settings, validate_all_settings
from debtflow.models.debt import Debt, DebtStatus
from debtflow.orchestrator import AdviceFlow, DebtFlow, create_app_components
from debtflow.schedule import calculate_debt_status, predict_next_due_date, suggest_installment_value
from debtflow.services.storage import StorageError
from debtflow.utils import format_currency, format_date, format_datetime, format_percentage
from debtflow.validation import MAX_INSTALLMENTS


# Page configuration
st.set_page_config(
    page_title="DebtFlow",
    page_icon="💸",
    layout="centered",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .status-on_time {
        color: #1e40af;
        background-color: #dbeafe;
        border-radius: 8px;
        padding: 2px 8px;
    }
    .status-late {
        color: #991b1b;
        background-color: #fee2e2;
        border-radius: 8px;
        padding: 2px 8px;
    }
    .status-paid_off {
        color: #166534;
        background-color: #dcfce7;
        border-radius: 8px;
        padding: 2px 8px;
    }
    .error-box {
        padding: 16px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)

PAGES = ["📊 Dashboard", "➕ New Debt", "📄 Debt Details", "⚙️ Settings"]


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components(use_storage=True)


def status_badge(status: DebtStatus) -> str:
    return f'<span class="status-{status.value}">{status.label}</span>'


def go_to(page: str, debt_id=None):
    st.session_state.page = page
    if debt_id is not None:
        st.session_state.selected_debt_id = str(debt_id)
    st.rerun()


def main():
    """Main application entry point."""
    debt_flow, advice_flow, _ = get_components()

    if "page" not in st.session_state:
        st.session_state.page = PAGES[0]

    st.sidebar.title("💸 DebtFlow")
    st.sidebar.markdown("---")
    page = st.sidebar.radio(
        "Navigate to:",
        PAGES,
        index=PAGES.index(st.session_state.page),
    )
    st.session_state.page = page

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Register a debt and its installments
        2. Tick installments as you pay them
        3. Keep an eye on overdue alerts
        """
    )

    try:
        if page == "📊 Dashboard":
            render_dashboard_page(debt_flow, advice_flow)
        elif page == "➕ New Debt":
            render_form_page(debt_flow)
        elif page == "📄 Debt Details":
            render_detail_page(debt_flow)
        elif page == "⚙️ Settings":
            render_settings_page(debt_flow)
    except StorageError as e:
        st.markdown(f"""
        <div class="error-box">
            <h4>❌ Could not read or write your data</h4>
            <p>{e}</p>
        </div>
        """, unsafe_allow_html=True)


def render_dashboard_page(debt_flow: DebtFlow, advice_flow: AdviceFlow):
    """Render the dashboard page."""
    st.title("📊 Dashboard")

    if "advice_text" not in st.session_state:
        st.session_state.advice_text = None
    if "advice_loading" not in st.session_state:
        st.session_state.advice_loading = False

    view = debt_flow.dashboard()
    summary = view.summary

    col1, col2, col3 = st.columns(3)
    col1.metric("Total debt", format_currency(summary.total_debt))
    col2.metric("Paid", format_currency(summary.total_paid))
    col3.metric("Remaining", format_currency(summary.total_remaining))

    # Overdue alert
    if view.has_overdue:
        limit = get_settings().app.overdue_alert_limit
        lines = [
            f"- {item.debt_description} - {format_currency(item.value)} "
            f"(due {format_date(item.due_date)})"
            for item in view.overdue[:limit]
        ]
        if len(view.overdue) > limit:
            lines.append(f"- and {len(view.overdue) - limit} more...")
        st.error(
            f"**⚠️ {len(view.overdue)} overdue installment(s) - "
            f"{format_currency(view.overdue_total)}**\n\n" + "\n".join(lines)
        )

    if summary.debts_count == 0:
        st.info("📋 No debts yet. Use 'New Debt' to register your first one.")
        if st.button("➕ Register a debt", type="primary"):
            go_to("➕ New Debt")
        return

    # Progress + advice
    col1, col2 = st.columns([1, 2])
    with col1:
        st.markdown("### Progress")
        st.progress(view.progress.percentage / 100)
        st.markdown(
            f"**{format_percentage(view.progress.percentage)}** paid  \n"
            f"{view.progress.paid_installments} paid · "
            f"{view.progress.remaining_installments} remaining"
        )

    with col2:
        st.markdown("### 🤖 Priority advice")
        loading = st.session_state.advice_loading
        if st.button(
            "Analyzing..." if loading else "Generate analysis",
            disabled=loading,
        ):
            # Rerun first so the button is drawn disabled while the request runs
            st.session_state.advice_loading = True
            st.rerun()

        if loading:
            with st.spinner("Asking the advisor..."):
                try:
                    advice = run_async(advice_flow.request_advice())
                    if advice is not None:
                        st.session_state.advice_text = advice.advice
                finally:
                    st.session_state.advice_loading = False
            st.rerun()

        if st.session_state.advice_text:
            st.info(st.session_state.advice_text)
        else:
            st.caption('Click "Generate analysis" for tips on which debt to prioritize.')

    st.markdown("---")
    st.markdown("### My debts")

    for overview in view.debts:
        with st.container(border=True):
            col1, col2 = st.columns([3, 1])
            with col1:
                st.markdown(
                    f"**{overview.description}** {status_badge(overview.status)}",
                    unsafe_allow_html=True,
                )
                next_due = (
                    format_date(overview.next_due_date)
                    if overview.next_due_date else "Completed"
                )
                st.markdown(
                    f"Total: {format_currency(overview.total_value)} · "
                    f"Installment: {format_currency(overview.installment_value)}  \n"
                    f"Paid: {overview.paid_count}/{overview.total_installments} · "
                    f"Next due: {next_due}"
                )
                st.progress(overview.progress_percent / 100)
            with col2:
                if st.button("Open", key=f"open_{overview.debt_id}"):
                    go_to("📄 Debt Details", overview.debt_id)


def render_form_page(debt_flow: DebtFlow, existing: Debt = None):
    """Render the create/edit debt form."""
    editing = existing is not None
    if not editing:
        st.title("➕ New Debt")

    key = f"edit_{existing.id}" if editing else "new"

    description = st.text_input(
        "Description *",
        value=existing.description if editing else "",
        placeholder="e.g. Credit card, Personal loan...",
        key=f"{key}_description",
    )

    col1, col2 = st.columns(2)
    with col1:
        total_value = st.number_input(
            "Total value *",
            min_value=0.01,
            step=0.01,
            format="%.2f",
            value=float(existing.total_value) if editing else None,
            key=f"{key}_total",
        )
        total_installments = st.number_input(
            "Number of installments *",
            min_value=1,
            max_value=MAX_INSTALLMENTS,
            step=1,
            value=existing.total_installments if editing else 1,
            key=f"{key}_count",
        )
        start_date = st.date_input(
            "First due date *",
            value=existing.start_date if editing else date.today(),
            key=f"{key}_start",
        )

    with col2:
        down_payment = st.number_input(
            "Down payment",
            min_value=0.0,
            step=0.01,
            format="%.2f",
            value=float(existing.down_payment) if editing else 0.0,
            key=f"{key}_down",
        )
        suggested = suggest_installment_value(
            total_value or 0, down_payment or 0, int(total_installments)
        )
        custom_value = st.checkbox(
            "Set installment value manually",
            value=editing,
            key=f"{key}_custom",
        )
        if custom_value:
            installment_value = st.number_input(
                "Installment value",
                min_value=0.0,
                step=0.01,
                format="%.2f",
                value=float(existing.installment_value) if editing else float(suggested),
                help=f"Suggested: {format_currency(suggested)}",
                key=f"{key}_value",
            )
        else:
            # None lets the validator fill in the suggestion
            installment_value = None
            st.markdown(f"Installment value: **{format_currency(suggested)}**")
        paid_count = st.number_input(
            "Installments already paid",
            min_value=0,
            max_value=int(total_installments),
            step=1,
            value=existing.paid_count if editing else 0,
            key=f"{key}_paid",
        )

    next_due = predict_next_due_date(start_date, int(paid_count))
    st.caption(f"Next due date: **{format_date(next_due)}**")

    if editing:
        st.warning(
            "Changing the number of installments, the installment value or the "
            "first due date rebuilds the whole schedule. All payments and reminders "
            "are discarded and only 'Installments already paid' is kept."
        )

    if st.button("💾 Save", type="primary", key=f"{key}_save"):
        debt, result = debt_flow.submit_debt_form(
            {
                "description": description,
                "total_value": total_value,
                "down_payment": down_payment,
                "installment_value": installment_value,
                "total_installments": int(total_installments),
                "start_date": start_date,
                "paid_count": int(paid_count),
            },
            existing=existing,
        )

        for issue in result.issues:
            text = issue.message + (f" - {issue.suggested_fix}" if issue.suggested_fix else "")
            if issue.severity == "error":
                st.error(text)
            else:
                st.warning(text)

        if debt is not None:
            st.session_state.editing = False
            go_to("📄 Debt Details", debt.id)


def render_detail_page(debt_flow: DebtFlow):
    """Render the debt detail page."""
    st.title("📄 Debt Details")

    debts = debt_flow.list_debts()
    if not debts:
        st.info("No debts registered yet.")
        return

    ids = [str(debt.id) for debt in debts]
    selected = st.session_state.get("selected_debt_id")
    index = ids.index(selected) if selected in ids else 0
    chosen = st.selectbox(
        "Debt",
        options=debts,
        index=index,
        format_func=lambda d: d.description,
    )
    st.session_state.selected_debt_id = str(chosen.id)

    debt = debt_flow.get_debt(chosen.id)
    if debt is None:
        go_to("📊 Dashboard")

    if st.session_state.get("editing"):
        st.subheader("✏️ Edit debt")
        render_form_page(debt_flow, existing=debt)
        if st.button("Cancel editing"):
            st.session_state.editing = False
            st.rerun()
        return

    status = calculate_debt_status(debt)
    st.markdown(f"## {debt.description} {status_badge(status)}", unsafe_allow_html=True)

    col1, col2, col3 = st.columns(3)
    col1.metric("Total", format_currency(debt.total_value))
    col2.metric("Installment", format_currency(debt.installment_value))
    col3.metric("Paid", f"{debt.paid_count}/{debt.total_installments}")
    if debt.down_payment > 0:
        st.markdown(f"Down payment: **{format_currency(debt.down_payment)}**")

    # Next installment + reminder
    next_inst = debt.next_installment
    if next_inst:
        with st.container(border=True):
            st.markdown(
                f"**Next installment:** #{next_inst.number} - "
                f"{format_currency(next_inst.value)} on {format_date(next_inst.due_date)}"
            )
            if next_inst.reminder:
                st.caption(f"🔔 Reminder set for {format_datetime(next_inst.reminder)}")

            with st.expander("🔔 Set reminder" if not next_inst.reminder else "🔔 Change reminder"):
                default_time = datetime.strptime(
                    get_settings().app.default_reminder_time, "%H:%M"
                ).time()
                reminder_date = st.date_input("Date", value=next_inst.due_date, key="reminder_date")
                reminder_time = st.time_input("Time", value=default_time, key="reminder_time")
                st.caption("This opens Google Calendar so you can save the event.")
                if st.button("Create reminder"):
                    outcome = debt_flow.set_next_installment_reminder(
                        debt.id, reminder_date, reminder_time
                    )
                    if outcome is None:
                        st.error("This installment no longer exists.")
                    else:
                        _, url = outcome
                        st.success("Reminder saved.")
                        st.link_button("📅 Open in Google Calendar", url)

    # Installments
    st.markdown("### Installments")
    for inst in debt.installments:
        label = (
            f"#{inst.number} · {format_date(inst.due_date)} · {format_currency(inst.value)}"
        )
        if inst.is_paid and inst.paid_date:
            label += f" · paid {format_date(inst.paid_date)}"
        checked = st.checkbox(label, value=inst.is_paid, key=f"inst_{inst.id}")
        if checked != inst.is_paid:
            if debt_flow.toggle_installment(debt.id, inst.id, checked) is None:
                st.error("This installment no longer exists.")
            st.rerun()

    st.markdown("---")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("✏️ Edit"):
            st.session_state.editing = True
            st.rerun()
    with col2:
        confirm = st.checkbox("I want to delete this debt", key=f"confirm_delete_{debt.id}")
        if st.button("🗑️ Delete", disabled=not confirm):
            debt_flow.delete_debt(debt.id)
            st.session_state.selected_debt_id = None
            go_to("📊 Dashboard")


def render_settings_page(debt_flow: DebtFlow):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()
    services = [
        ("Gemini (priority advice)", "gemini"),
        ("Local storage", "storage"),
    ]
    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.warning(f"⚠️ {name} - {error}")

    st.markdown("---")
    st.markdown("### App data")
    st.markdown("Manage your local data.")

    confirm = st.checkbox(
        "I understand this erases ALL registered debts and cannot be undone"
    )
    if st.button("🗑️ Erase all data", disabled=not confirm):
        debt_flow.clear_all_data()
        for key in list(st.session_state.keys()):
            del st.session_state[key]
        st.rerun()

    st.markdown("---")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
