"""
Streamlit Frontend for Spendy

The month screen, the new-entry form and category management.

DESIGN PRINCIPLES:
1. Every screen reads a freshly computed month view
2. Refused input shows a blocking notice and changes nothing
3. Destructive actions ask for confirmation first
4. Persistence happens behind the store; the UI never saves directly
"""

import asyncio

import streamlit as st

from spendy.config import validate_all_settings
from spendy.ledger import DeletionState, ResolutionError, format_currency
from spendy.models.transaction import MONTH_NAMES, Theme, TransactionType
from spendy.orchestrator import WalletStore, create_store
from spendy.validation import ValidationError


# Page configuration
st.set_page_config(
    page_title="Spendy",
    page_icon="💰",
    layout="centered",
    initial_sidebar_state="expanded",
)

THEME_CSS = {
    Theme.LIGHT: "",
    Theme.DARK: """
<style>
    .stApp { background-color: #121212; color: #e0e0e0; }
</style>
""",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()
        asyncio.set_event_loop(None)


@st.cache_resource
def get_store() -> WalletStore:
    """Create the store and wait for the initial load (cached)."""
    store = create_store()
    run_async(store.load())
    return store


def show_validation_error(store: WalletStore, error: ValidationError) -> None:
    st.error(store.validator.get_user_friendly_summary(error.result))


def main():
    """Main application entry point."""
    store = get_store()

    if store.load_error and not st.session_state.get("load_error_seen"):
        st.error(f"Error: {store.load_error} Starting with defaults.")
        if st.button("OK"):
            st.session_state.load_error_seen = True
            st.rerun()
        st.stop()

    st.markdown(THEME_CSS[store.theme], unsafe_allow_html=True)

    # Sidebar navigation
    st.sidebar.title("💰 My Wallet")
    theme_icon = "☀️" if store.theme == Theme.LIGHT else "🌙"
    if st.sidebar.button(f"{theme_icon} Toggle theme"):
        store.toggle_theme()
        st.rerun()
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📅 Month", "➕ Add Entry", "🏷️ Categories", "⚙️ Settings"],
        index=0,
    )

    if page == "📅 Month":
        render_month_page(store)
    elif page == "➕ Add Entry":
        render_add_page(store)
    elif page == "🏷️ Categories":
        render_categories_page(store)
    elif page == "⚙️ Settings":
        render_settings_page(store)


def render_month_selector(store: WalletStore) -> None:
    col1, col2, col3 = st.columns([1, 4, 1])
    with col1:
        if st.button("◀", key="prev_month"):
            store.change_month(-1)
            st.rerun()
    with col2:
        st.markdown(f"### {store.current_month.label()}")
    with col3:
        if st.button("▶", key="next_month"):
            store.change_month(1)
            st.rerun()

    with st.expander("Jump to month"):
        year = st.number_input(
            "Year",
            min_value=1,
            max_value=9999,
            value=store.current_month.year,
            step=1,
        )
        month_name = st.selectbox(
            "Month",
            options=MONTH_NAMES,
            index=store.current_month.month - 1,
        )
        if st.button("Go"):
            store.select_month(int(year), MONTH_NAMES.index(month_name) + 1)
            st.rerun()


def render_month_page(store: WalletStore):
    """Render the month summary and transaction list."""
    render_month_selector(store)
    view = store.month_view()

    col1, col2, col3 = st.columns(3)
    col1.metric("Income", format_currency(view.totals.income))
    col2.metric("Expense", format_currency(view.totals.expense))
    col3.metric("Balance", format_currency(view.totals.balance))

    st.markdown("---")

    if view.is_empty:
        st.info("No transactions this month.")
        return

    by_category = st.toggle("Group by category", value=False)

    if by_category:
        for group in view.groups:
            sign = "+" if group.type == TransactionType.INCOME else "-"
            with st.expander(
                f"{group.category} ({group.type.value}) · {sign} {format_currency(group.total)}"
            ):
                for transaction in group.transactions:
                    render_transaction_row(store, transaction, key_prefix="group")
        return

    for transaction in view.transactions:
        render_transaction_row(store, transaction, key_prefix="list")


def render_transaction_row(store: WalletStore, transaction, key_prefix: str) -> None:
    is_income = transaction.type == TransactionType.INCOME
    icon = "💰" if is_income else "💸"
    sign = "+" if is_income else "-"

    col1, col2, col3 = st.columns([4, 2, 1])
    with col1:
        st.markdown(f"{icon} **{transaction.category}**")
        if transaction.note:
            st.caption(transaction.note)
    with col2:
        st.markdown(f"{sign} {format_currency(transaction.amount)}")
        st.caption(transaction.display_date)
    with col3:
        pending = st.session_state.get("confirm_delete_id")
        if pending == transaction.id:
            if st.button("Delete", key=f"{key_prefix}_yes_{transaction.id}", type="primary"):
                store.remove_transaction(transaction.id)
                st.session_state.confirm_delete_id = None
                st.rerun()
            if st.button("Cancel", key=f"{key_prefix}_no_{transaction.id}"):
                st.session_state.confirm_delete_id = None
                st.rerun()
        elif st.button("🗑️", key=f"{key_prefix}_del_{transaction.id}"):
            st.session_state.confirm_delete_id = transaction.id
            st.rerun()


def render_add_page(store: WalletStore):
    """Render the new transaction form."""
    st.title("➕ Add Transaction")
    st.markdown(f"Filed under **{store.current_month.label()}**")

    if not store.can_add_entries:
        st.warning("You cannot add entries to a future month.")
        return

    t_type = st.radio(
        "Type",
        options=list(TransactionType),
        index=list(TransactionType).index(store.selection.type),
        format_func=lambda x: x.value,
        horizontal=True,
    )
    if t_type != store.selection.type:
        store.select_type(t_type)
        st.rerun()

    amount = st.text_input("Amount", placeholder="0.00")

    categories = list(store.categories_for(t_type))
    selected = store.selection.category
    category = st.selectbox(
        "Category",
        options=[""] + categories,
        index=categories.index(selected) + 1 if selected in categories else 0,
        format_func=lambda x: "Select a category" if x == "" else x,
    )

    with st.expander("New category"):
        new_name = st.text_input("New Category Name")
        if st.button("Add category"):
            try:
                store.add_category(t_type, new_name)
                st.rerun()
            except ValidationError as e:
                show_validation_error(store, e)

    note = st.text_input("Note (optional)")

    if st.button("Save Transaction", type="primary"):
        try:
            transaction = store.add_transaction(t_type, amount, category, note)
            st.success(
                f"Added {transaction.type.value.lower()} of "
                f"{format_currency(transaction.amount)}"
            )
        except ValidationError as e:
            show_validation_error(store, e)


def render_categories_page(store: WalletStore):
    """Render category management, including safe deletion."""
    st.title("🏷️ Categories")

    request = st.session_state.get("deletion_request")
    if request is not None and request.is_open:
        render_deletion_dialog(store, request)
        return

    for t_type in TransactionType:
        st.subheader(t_type.value)
        for name in store.categories_for(t_type):
            col1, col2 = st.columns([5, 1])
            col1.markdown(name)
            if col2.button("🗑️", key=f"delcat_{t_type.value}_{name}"):
                try:
                    st.session_state.deletion_request = store.begin_category_deletion(t_type, name)
                except ResolutionError as e:
                    st.error(str(e))
                st.rerun()

        new_name = st.text_input(f"New {t_type.value} category", key=f"newcat_{t_type.value}")
        if st.button("Add", key=f"addcat_{t_type.value}"):
            try:
                store.add_category(t_type, new_name)
                st.rerun()
            except ValidationError as e:
                show_validation_error(store, e)


def render_deletion_dialog(store: WalletStore, request) -> None:
    st.markdown(f"### Delete '{request.category}'?")

    try:
        if request.state == DeletionState.SIMPLE_CONFIRM:
            st.markdown("No transactions use this category.")
            col1, col2 = st.columns(2)
            if col1.button("Delete", type="primary"):
                store.confirm_category_deletion(request)
                st.rerun()
            if col2.button("Cancel"):
                store.cancel_category_deletion(request)
                st.rerun()
            return

        st.warning(
            f"{request.dependent_count} transaction(s) use this category. "
            "Delete them too, or move them to another category."
        )
        target = st.selectbox(
            "Move transactions to",
            options=[""] + request.reassign_targets,
            format_func=lambda x: "Choose a category" if x == "" else x,
        )
        col1, col2, col3 = st.columns(3)
        if col1.button("Move & delete", type="primary"):
            store.reassign_category(request, target)
            st.rerun()
        if col2.button("Delete all"):
            store.delete_category_with_transactions(request)
            st.rerun()
        if col3.button("Cancel"):
            store.cancel_category_deletion(request)
            st.rerun()
    except ValidationError as e:
        show_validation_error(store, e)
    except ResolutionError as e:
        st.error(str(e))
        st.session_state.deletion_request = None


def render_settings_page(store: WalletStore):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")
    status = validate_all_settings()
    for key in ("ledger", "storage"):
        if status.get(key, False):
            st.success(f"✅ {key.title()} settings - OK")
        else:
            st.error(f"❌ {key.title()} settings - {status.get(f'{key}_error')}")

    st.markdown("---")
    st.markdown("### Recent Activity")
    for event in store.audit_logger.recent_events(limit=20):
        st.caption(
            f"{event.timestamp:%Y-%m-%d %H:%M:%S} · {event.severity.value} · {event.description}"
        )

    st.markdown("---")
    st.markdown(
        "To configure the application, create a `.env` file with `SPENDY_` "
        "variables (e.g. `SPENDY_DATA_DIR`, `SPENDY_STORAGE_BACKEND`)."
    )


if __name__ == "__main__":
    main()
