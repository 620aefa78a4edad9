"""
Streamlit Frontend for SpendMate

The personal expense tracker people open every day to log what they
spent and see where the money went.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Nothing is saved without an explicit "Save" action
3. Clear error messages in simple language
4. The tracker works fully without the AI features

Pages:
- Dashboard: totals, budget progress, charts, AI insights, export
- Expenses: search, filter, sort, select, bulk actions, edit
- Add Expense: manual form, optionally pre-filled from a receipt photo
- Settings: theme, connection status, recent activity
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

import streamlit as st

from spendmate.audit import get_audit_logger
from spendmate.config import get_settings, validate_all_settings
from spendmate.models import (
    ALL_CATEGORIES,
    ExpenseCategory,
    ExpenseForm,
    ExpenseRecord,
    FilterState,
    SortOrder,
    Theme,
)
from spendmate.orchestrator import (
    ExpenseEntryFlow,
    InsightFlow,
    ReportFlow,
    create_app_components,
)
from spendmate.queries import (
    apply_filters,
    budget_usage,
    category_budget_usage,
    compute_stats,
    toggle_select_all,
)
from spendmate.store import ExpenseStore
from spendmate.validation import MAX_MERCHANT_LENGTH, MAX_NOTES_LENGTH


# Page configuration
st.set_page_config(
    page_title="SpendMate",
    page_icon="💸",
    layout="wide",
    initial_sidebar_state="expanded",
)

LIGHT_CSS = """
<style>
    .stButton>button {
        width: 100%;
    }
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
    }
    .over-budget {
        color: #dc3545;
        font-weight: bold;
    }
</style>
"""

DARK_CSS = """
<style>
    .stApp, [data-testid="stSidebar"] {
        background-color: #0f172a;
        color: #e2e8f0;
    }
    .stApp h1, .stApp h2, .stApp h3, .stApp p, .stApp label {
        color: #e2e8f0;
    }
</style>
"""

SORT_LABELS = {
    SortOrder.NEWEST: "Newest first",
    SortOrder.OLDEST: "Oldest first",
    SortOrder.HIGHEST: "Highest amount",
    SortOrder.LOWEST: "Lowest amount",
}


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
    return create_app_components()


def money(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def init_session_state():
    defaults = {
        "page": "📊 Dashboard",
        "form": ExpenseForm(),
        "form_version": 0,
        "editing_id": None,
        "insights": None,
        "scan_message": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def start_editing(record: Optional[ExpenseRecord] = None):
    """Open the entry form, pre-filled when editing an existing expense."""
    st.session_state.form = ExpenseForm.from_record(record) if record else ExpenseForm()
    st.session_state.editing_id = record.id if record else None
    st.session_state.form_version += 1
    st.session_state.scan_message = None
    st.session_state.page = "➕ Add Expense"


def main():
    """Main application entry point."""
    init_session_state()

    store, entry_flow, insight_flow, report_flow = get_components()

    st.markdown(LIGHT_CSS, unsafe_allow_html=True)
    if store.theme == Theme.DARK:
        st.markdown(DARK_CSS, unsafe_allow_html=True)

    # Sidebar navigation
    st.sidebar.title("💸 SpendMate")
    st.sidebar.markdown("---")

    pages = ["📊 Dashboard", "📋 Expenses", "➕ Add Expense", "⚙️ Settings"]
    page = st.sidebar.radio(
        "Navigate to:",
        pages,
        index=pages.index(st.session_state.page),
    )
    st.session_state.page = page

    st.sidebar.markdown("---")
    st.sidebar.metric("Total spent", money(compute_stats(store.expenses).total))

    # Route to appropriate page
    if page == "📊 Dashboard":
        render_dashboard_page(store, insight_flow, report_flow)
    elif page == "📋 Expenses":
        render_expenses_page(store, entry_flow, report_flow)
    elif page == "➕ Add Expense":
        render_entry_page(entry_flow)
    elif page == "⚙️ Settings":
        render_settings_page(store)


def render_dashboard_page(store: ExpenseStore, insight_flow: InsightFlow, report_flow: ReportFlow):
    """Render the dashboard page."""
    st.title("📊 Dashboard")

    expenses = store.expenses
    stats = compute_stats(expenses)
    overall = budget_usage(stats.total, store.budget)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Spent", money(stats.total))
    col2.metric("Expenses", stats.count)
    col3.metric("Average", money(stats.average))
    col4.metric("Top Category", stats.highest_category)

    # Overall budget
    st.markdown("### Monthly Budget")
    budget_col, edit_col = st.columns([3, 1])
    with budget_col:
        st.progress(int(overall.percentage or 0))
        if overall.is_over_budget:
            st.markdown(
                f'<p class="over-budget">Over budget: {money(stats.total)} of {money(store.budget)}</p>',
                unsafe_allow_html=True,
            )
        else:
            st.caption(f"{money(stats.total)} of {money(store.budget)} ({overall.percentage:.0f}%)")
    with edit_col:
        new_budget = st.number_input(
            "Budget",
            min_value=0.01,
            value=float(store.budget),
            step=50.0,
            format="%.2f",
        )
        if st.button("Update budget"):
            store.set_budget(Decimal(str(new_budget)))
            st.rerun()

    # Category budgets
    with st.expander("Category budgets"):
        usage = category_budget_usage(stats, store.category_budgets)
        for category, cat_usage in usage.items():
            name_col, bar_col, limit_col = st.columns([1, 3, 1])
            name_col.markdown(f"**{category.value}**")
            with bar_col:
                if cat_usage.has_limit:
                    st.progress(int(cat_usage.percentage))
                    label = f"{money(cat_usage.spent)} of {money(cat_usage.limit)}"
                    if cat_usage.is_over_budget:
                        label += " - over budget"
                    st.caption(label)
                else:
                    st.caption(f"{money(cat_usage.spent)} spent, no limit set")
            with limit_col:
                current = store.category_budgets.get(category)
                st.number_input(
                    f"{category.value} limit",
                    min_value=0.0,
                    value=float(current) if current else 0.0,
                    step=10.0,
                    format="%.2f",
                    key=f"cat_budget_{category.value}",
                    label_visibility="collapsed",
                )
        if st.button("Save category budgets"):
            for category in ExpenseCategory:
                value = st.session_state.get(f"cat_budget_{category.value}", 0.0)
                current = store.category_budgets.get(category)
                if Decimal(str(value)) != (current or Decimal("0")):
                    store.set_category_budget(category, Decimal(str(value)))
            st.success("Category budgets saved.")
            st.rerun()

    # Charts
    if stats.count:
        chart_col1, chart_col2 = st.columns(2)
        with chart_col1:
            st.markdown("### By Category")
            st.bar_chart(
                {
                    "Category": [entry.category.value for entry in stats.category_totals],
                    "Amount": [float(entry.total) for entry in stats.category_totals],
                },
                x="Category",
                y="Amount",
            )
        with chart_col2:
            st.markdown("### By Month")
            st.bar_chart(
                {
                    "Month": list(stats.month_totals.keys()),
                    "Amount": [float(total) for total in stats.month_totals.values()],
                },
                x="Month",
                y="Amount",
            )
    else:
        st.info("No expenses yet. Use 'Add Expense' to log your first one.")

    # AI insights
    st.markdown("### 🤖 AI Insights")
    if st.button("Generate insights", disabled=not insight_flow.is_available):
        with st.spinner("Analyzing your spending..."):
            st.session_state.insights = run_async(insight_flow.generate())
    if not insight_flow.is_available:
        st.caption("Set GEMINI_API_KEY to enable AI insights.")
    if st.session_state.insights:
        st.info(st.session_state.insights)

    # Export
    st.markdown("### Export")
    filename, csv_text = report_flow.export_csv(expenses)
    export_col1, export_col2 = st.columns(2)
    export_col1.download_button(
        "⬇️ Download CSV",
        data=csv_text,
        file_name=filename,
        mime="text/csv",
        disabled=not expenses,
        on_click=report_flow.record_download,
        args=("csv", len(expenses)),
    )
    export_col2.download_button(
        "🖨️ Printable report",
        data=report_flow.print_view(expenses),
        file_name=filename.replace(".csv", ".html"),
        mime="text/html",
        disabled=not expenses,
        on_click=report_flow.record_download,
        args=("html", len(expenses)),
    )


def render_expenses_page(store: ExpenseStore, entry_flow: ExpenseEntryFlow, report_flow: ReportFlow):
    """Render the expense list page."""
    st.title("📋 Expenses")

    # Filters
    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        search = st.text_input("Search", placeholder="Merchant or notes")
    with col2:
        category = st.selectbox(
            "Category",
            [ALL_CATEGORIES] + [cat.value for cat in ExpenseCategory],
        )
    with col3:
        sort_order = st.selectbox(
            "Sort",
            list(SORT_LABELS.keys()),
            format_func=lambda order: SORT_LABELS[order],
        )

    date_col1, date_col2 = st.columns(2)
    start_date = date_col1.date_input("From", value=None)
    end_date = date_col2.date_input("To", value=None)

    filters = FilterState(
        search=search,
        category=category,
        start_date=start_date,
        end_date=end_date,
        sort_order=sort_order,
    )
    visible = apply_filters(store.expenses, filters)

    st.caption(f"Showing {len(visible)} of {len(store)} expenses")

    if not visible:
        st.info("No expenses match your filters.")
        return

    selected = {e.id for e in visible if st.session_state.get(f"select_{e.id}")}

    # Toolbar (rendered above the rows so it can set their checkboxes)
    tool_col1, tool_col2, tool_col3, tool_col4 = st.columns([1, 1, 1, 1])
    if tool_col1.button("Select all / none"):
        new_selection = toggle_select_all(selected, visible)
        for record in visible:
            st.session_state[f"select_{record.id}"] = record.id in new_selection
        selected = new_selection

    if tool_col2.button(f"🗑️ Delete selected ({len(selected)})", disabled=not selected):
        removed = entry_flow.bulk_delete(selected)
        for expense_id in selected:
            st.session_state.pop(f"select_{expense_id}", None)
        st.success(f"Deleted {removed} expenses.")
        st.rerun()

    new_category = tool_col3.selectbox(
        "Move to",
        list(ExpenseCategory),
        format_func=lambda cat: cat.value,
        label_visibility="collapsed",
    )
    if tool_col4.button("Change category", disabled=not selected):
        changed = entry_flow.bulk_update_category(selected, new_category)
        st.success(f"Moved {changed} expenses to {new_category.value}.")
        st.rerun()

    st.markdown("---")

    for record in visible:
        render_expense_row(record, entry_flow)

    st.markdown("---")
    filename, csv_text = report_flow.export_csv(visible)
    st.download_button(
        "⬇️ Download these as CSV",
        data=csv_text,
        file_name=filename,
        mime="text/csv",
        on_click=report_flow.record_download,
        args=("csv", len(visible)),
    )


def render_expense_row(record: ExpenseRecord, entry_flow: ExpenseEntryFlow):
    """Render one expense with its select, edit and delete controls."""
    select_col, info_col, amount_col, edit_col, delete_col = st.columns([0.5, 4, 1.5, 1, 1])

    select_col.checkbox("Select", key=f"select_{record.id}", label_visibility="collapsed")

    with info_col:
        title = f"**{record.merchant}**"
        if record.is_recurring:
            title += " 🔁"
        st.markdown(title)
        caption = f"{record.date.isoformat()} · {record.category.value}"
        if record.notes:
            caption += f" · {record.notes}"
        st.caption(caption)

    amount_col.markdown(f"**{money(record.amount)}**")

    if edit_col.button("✏️", key=f"edit_{record.id}", help="Edit"):
        start_editing(record)
        st.rerun()

    if delete_col.button("🗑️", key=f"delete_{record.id}", help="Delete"):
        entry_flow.delete_expense(record.id)
        st.session_state.pop(f"select_{record.id}", None)
        st.rerun()


def render_entry_page(entry_flow: ExpenseEntryFlow):
    """Render the add / edit expense page."""
    editing_id: Optional[UUID] = st.session_state.editing_id

    st.title("✏️ Edit Expense" if editing_id else "➕ Add Expense")

    # Optional receipt scan
    if not editing_id:
        with st.expander("📷 Scan a receipt", expanded=False):
            settings = get_settings().app
            uploaded_file = st.file_uploader(
                "Receipt photo",
                type=settings.supported_formats_list,
                help="A clear photo of the whole receipt works best",
            )
            scan_clicked = st.button(
                "🔍 Scan receipt",
                disabled=not (uploaded_file and entry_flow.can_scan),
            )
            if not entry_flow.can_scan:
                st.caption("Set GEMINI_API_KEY to enable receipt scanning.")

            if scan_clicked and uploaded_file:
                with st.spinner("Reading your receipt..."):
                    form, message = run_async(
                        entry_flow.scan_receipt(
                            image_bytes=uploaded_file.getvalue(),
                            filename=uploaded_file.name,
                            mime_type=uploaded_file.type,
                        )
                    )
                st.session_state.scan_message = (form is not None, message)
                if form is not None:
                    st.session_state.form = form
                    st.session_state.form_version += 1
                st.rerun()

    if st.session_state.scan_message:
        ok, message = st.session_state.scan_message
        if ok:
            st.success(message)
        else:
            st.warning(message)

    form_data: ExpenseForm = st.session_state.form
    categories = list(ExpenseCategory)

    with st.form(key=f"expense_form_{st.session_state.form_version}"):
        merchant = st.text_input("Merchant *", value=form_data.merchant, max_chars=MAX_MERCHANT_LENGTH)
        col1, col2 = st.columns(2)
        with col1:
            amount = st.number_input(
                "Amount *",
                min_value=0.0,
                value=float(form_data.amount) if form_data.amount is not None else None,
                step=0.01,
                format="%.2f",
            )
        with col2:
            expense_date = st.date_input("Date *", value=form_data.date or date.today())
        category = st.selectbox(
            "Category",
            categories,
            index=categories.index(form_data.category),
            format_func=lambda cat: cat.value,
        )
        notes = st.text_area("Notes", value=form_data.notes, max_chars=MAX_NOTES_LENGTH)
        is_recurring = st.checkbox("Recurring expense", value=form_data.is_recurring)

        save_col, cancel_col = st.columns(2)
        submitted = save_col.form_submit_button("💾 Save", type="primary")
        cancelled = cancel_col.form_submit_button("Cancel")

    if cancelled:
        start_editing(None)
        st.rerun()

    if submitted:
        form = ExpenseForm(
            merchant=merchant,
            amount=Decimal(str(amount)) if amount is not None else None,
            date=expense_date,
            category=category,
            notes=notes,
            is_recurring=is_recurring,
        )
        record, result, message = entry_flow.save_expense(form, editing_id=editing_id)
        if record is None:
            st.session_state.form = form
            st.error(message)
            for issue in result.issues:
                st.caption(f"• {issue.message}")
        else:
            start_editing(None)
            st.session_state.page = "📋 Expenses" if editing_id else "➕ Add Expense"
            st.toast(message)
            st.rerun()


def render_settings_page(store: ExpenseStore):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Appearance")
    dark = st.toggle("Dark mode", value=store.theme == Theme.DARK)
    if dark != (store.theme == Theme.DARK):
        store.toggle_theme()
        st.rerun()

    st.markdown("### Connection Status")

    status = validate_all_settings()
    if status.get("gemini", False):
        st.success("✅ Gemini (AI) - Connected")
    else:
        error = status.get("gemini_error", "Not configured")
        st.error(f"❌ Gemini (AI) - {error}")

    st.caption(f"Data file: `{get_settings().storage.data_file}`")

    st.markdown("### Recent Activity")
    events = get_audit_logger().recent_events(limit=15)
    if not events:
        st.caption("Nothing yet.")
    for event in events:
        st.caption(f"{event.timestamp:%Y-%m-%d %H:%M:%S} · {event.description}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To enable the AI features, create a `.env` file with your Gemini API key. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
