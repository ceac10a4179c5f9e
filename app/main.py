"""
Streamlit Frontend for Expense Manager

Screens:
1. Home: balance, income and expense totals, search and category
   filter, the transaction list with edit/delete, CSV download,
   theme and reminder toggles
2. Add / Edit: the transaction form
3. Statistics: expenses per category
4. Settings: configuration check

The UI only talks to the flows built by create_app_components().
Nothing here reads or writes storage directly.
"""

import logging
from collections import deque

import streamlit as st

from src.config import get_settings, validate_all_settings
from src.export import escape_markdown, export_filename, format_currency, to_csv
from src.models.transaction import (
    ALL_CATEGORIES,
    Category,
    TransactionDraft,
    TransactionType,
    categories_for,
)
from src.orchestrator import AppComponents, create_app_components
from src.reminders import ReminderNotification
from src.store import Theme


# Page configuration
st.set_page_config(
    page_title="Expense Manager",
    page_icon="💸",
    layout="centered",
    initial_sidebar_state="expanded",
)

LIGHT_CSS = """
<style>
    .stButton>button {
        width: 100%;
    }
    .income { color: #16a34a; font-weight: 600; }
    .expense { color: #dc2626; font-weight: 600; }
</style>
"""

DARK_CSS = """
<style>
    .stApp {
        background-color: #111827;
        color: #f3f4f6;
    }
    .stButton>button {
        width: 100%;
    }
    .income { color: #4ade80; font-weight: 600; }
    .expense { color: #f87171; font-weight: 600; }
</style>
"""

# Reminders fire on a timer thread; the page drains this on each rerun.
PENDING_REMINDERS: deque = deque(maxlen=10)


def queue_reminder(notification: ReminderNotification) -> None:
    PENDING_REMINDERS.append(notification)


@st.cache_resource
def get_components() -> AppComponents:
    """Get or create application components (cached)."""
    logging.basicConfig(level=get_settings().app.effective_log_level)
    components = create_app_components(notifier=queue_reminder)
    components.start()
    return components


def main():
    """Main application entry point."""
    components = get_components()
    settings_flow = components.settings_flow

    st.markdown(
        DARK_CSS if settings_flow.theme == Theme.DARK else LIGHT_CSS,
        unsafe_allow_html=True,
    )

    while PENDING_REMINDERS:
        reminder = PENDING_REMINDERS.popleft()
        st.toast(f"**{reminder.title}**\n\n{reminder.body}", icon="📝")

    if "page" not in st.session_state:
        st.session_state.page = "🏠 Home"
    if "editing_id" not in st.session_state:
        st.session_state.editing_id = None
    # The radio owns "page" once drawn; later changes go through pending_page
    if st.session_state.get("pending_page"):
        st.session_state.page = st.session_state.pop("pending_page")

    st.sidebar.title("💸 Expense Manager")
    st.sidebar.markdown("---")
    st.sidebar.radio(
        "Navigate to:",
        ["🏠 Home", "➕ Add", "📊 Statistics", "⚙️ Settings"],
        key="page",
    )

    page = st.session_state.page
    if page != "➕ Add":
        st.session_state.editing_id = None

    if page == "🏠 Home":
        render_home_page(components)
    elif page == "➕ Add":
        render_form_page(components)
    elif page == "📊 Statistics":
        render_statistics_page(components)
    elif page == "⚙️ Settings":
        render_settings_page()


def go_to_form(transaction_id=None):
    st.session_state.editing_id = transaction_id
    st.session_state.page = "➕ Add"


def render_home_page(components: AppComponents):
    """Render the home screen."""
    report_flow = components.report_flow
    settings_flow = components.settings_flow
    transaction_flow = components.transaction_flow

    header, theme_col, bell_col = st.columns([6, 1, 1])
    with header:
        st.title("Expense Manager")
    with theme_col:
        icon = "☀️" if settings_flow.theme == Theme.DARK else "🌙"
        if st.button(icon, help="Toggle theme"):
            settings_flow.toggle_theme()
            st.rerun()
    with bell_col:
        if not settings_flow.reminders_supported:
            st.button("🔕", disabled=True, help="Reminders are not available.")
        else:
            enabled = settings_flow.reminder_enabled
            tooltip = (
                "Disable daily expense reminders"
                if enabled
                else "Enable daily expense reminders"
            )
            if st.button("🔔" if enabled else "🔕", help=tooltip):
                settings_flow.toggle_reminder()
                st.rerun()

    if not (components.store.in_sync and components.preferences.in_sync):
        st.warning("Your latest changes could not be saved to disk. They are kept for this session.")

    summary = report_flow.summary()
    st.metric("Balance", format_currency(summary.balance))
    income_col, expense_col = st.columns(2)
    income_col.metric("Income", format_currency(summary.income))
    expense_col.metric("Expense", format_currency(summary.expense))

    search_col, filter_col = st.columns([2, 1])
    with search_col:
        search_term = st.text_input("Search", placeholder="Search transactions...")
    with filter_col:
        category = st.selectbox(
            "Category",
            options=[ALL_CATEGORIES] + list(Category),
            format_func=lambda c: "All Categories" if c == ALL_CATEGORIES else c.value,
        )

    download_col, save_col = st.columns(2)
    with download_col:
        st.download_button(
            "⬇️ Export CSV",
            data=to_csv(report_flow.transactions),
            file_name=export_filename(),
            mime="text/csv",
            disabled=not report_flow.transactions,
        )
    with save_col:
        if st.button(
            "💾 Save to exports folder",
            disabled=not report_flow.transactions,
            help=f"Write the CSV into {report_flow.export_dir}",
        ):
            try:
                path = report_flow.save_csv()
                st.success(f"Saved {path}")
            except OSError as e:
                st.error(f"Could not save the export: {e}")

    st.markdown("---")
    results = report_flow.search(search_term, category)
    if not results:
        st.info("No transactions found.")
        return

    for transaction in results:
        sign = "+" if transaction.is_income else "-"
        css = "income" if transaction.is_income else "expense"
        info_col, edit_col, delete_col = st.columns([6, 1, 1])
        with info_col:
            st.markdown(
                f"**{escape_markdown(transaction.note)}**  \n"
                f"{transaction.category.value} · {transaction.date.isoformat()}  \n"
                f"<span class='{css}'>{sign}{format_currency(transaction.amount)}</span>",
                unsafe_allow_html=True,
            )
        with edit_col:
            st.button(
                "✏️",
                key=f"edit-{transaction.id}",
                help="Edit",
                on_click=go_to_form,
                args=(transaction.id,),
            )
        with delete_col:
            if st.button("🗑️", key=f"delete-{transaction.id}", help="Delete"):
                transaction_flow.delete(transaction.id)
                st.rerun()


def render_form_page(components: AppComponents):
    """Render the add/edit transaction form."""
    transaction_flow = components.transaction_flow
    editing_id = st.session_state.editing_id
    draft = transaction_flow.draft_for(editing_id)
    is_edit = editing_id is not None and transaction_flow.get(editing_id) is not None

    st.title("Edit Transaction" if is_edit else "Add Transaction")

    transaction_type = st.radio(
        "Type",
        options=[TransactionType.EXPENSE, TransactionType.INCOME],
        index=0 if draft.type == TransactionType.EXPENSE else 1,
        format_func=lambda t: t.value.title(),
        horizontal=True,
    )

    with st.form("transaction_form"):
        amount = st.text_input("Amount", value=draft.amount, placeholder="0.00")

        available = list(categories_for(transaction_type))
        default_idx = available.index(draft.category) if draft.category in available else 0
        category = st.selectbox(
            "Category",
            options=available,
            index=default_idx,
            format_func=lambda c: c.value,
        )
        note = st.text_input("Note", value=draft.note, placeholder="e.g., Coffee with friends")
        when = st.date_input("Date", value=draft.date)

        submitted = st.form_submit_button(
            "Update Transaction" if is_edit else "Add Transaction",
            type="primary",
        )

    if not submitted:
        return

    validation, transaction = transaction_flow.submit(
        TransactionDraft(
            amount=amount,
            category=category,
            type=transaction_type,
            note=note,
            date=when,
        ),
        existing_id=editing_id if is_edit else None,
    )

    if transaction is None:
        st.error(validation.first_error)
        return

    st.session_state.editing_id = None
    st.session_state.pending_page = "🏠 Home"
    st.rerun()


def render_statistics_page(components: AppComponents):
    """Render expenses per category."""
    st.title("📊 Statistics")

    breakdown = components.report_flow.breakdown()
    if not breakdown:
        st.info("No expense data to display.")
        return

    total_expense = sum(item.total for item in breakdown)
    st.metric("Total Expenses", format_currency(total_expense))

    for item in breakdown:
        st.progress(
            item.share,
            text=f"{item.category.value}: {format_currency(item.total)} ({item.share:.0%})",
        )


def render_settings_page():
    """Render the configuration check."""
    st.title("⚙️ Settings")

    results = validate_all_settings()
    for section in ("storage", "reminder", "app"):
        if results.get(section):
            st.success(f"{section.title()} settings OK")
        else:
            st.error(f"{section.title()} settings invalid: {results.get(section + '_error')}")

    settings = get_settings()
    if results.get("storage"):
        st.caption(f"Data directory: {settings.storage.data_dir.resolve()}")
    if results.get("reminder"):
        st.caption(f"Daily reminder hour: {settings.reminder.hour}:00")


if __name__ == "__main__":
    main()
