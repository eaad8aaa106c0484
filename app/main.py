"""
Streamlit Frontend for PigCoin

A thin rendering layer over FinanceStore. Every page receives the store
explicitly and only calls its operations; no figures are computed here.

Run with:
    streamlit run app/main.py
"""

import asyncio
from decimal import Decimal

import streamlit as st

from pigcoin.config import get_settings
from pigcoin.events import configure_logging
from pigcoin.models.finance import Goal, GoalType, TransactionType
from pigcoin.reports import Period, breakdown_by_name, goal_overview, period_report
from pigcoin.store import FinanceStore, create_store
from pigcoin.validation import InvalidInputError


st.set_page_config(
    page_title="PigCoin",
    page_icon="🐷",
    layout="wide",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def money(value: Decimal) -> str:
    return f"$ {value:,.2f}"


@st.cache_resource
def get_store() -> FinanceStore:
    """Create and load the application store once per server process."""
    configure_logging()
    store = create_store()
    run_async(store.load())
    return store


def main():
    """Main application entry point."""
    store = get_store()

    st.sidebar.title("🐷 PigCoin")
    st.sidebar.markdown("---")
    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Home", "🎯 Goals", "📈 Statistics"],
        index=0,
    )
    st.sidebar.markdown("---")
    st.sidebar.caption(f"Data folder: {get_settings().data_dir}")

    if store.last_save_error:
        st.sidebar.warning(f"Last save failed: {store.last_save_error}")

    if page == "🏠 Home":
        render_home_page(store)
    elif page == "🎯 Goals":
        render_goals_page(store)
    elif page == "📈 Statistics":
        render_statistics_page(store)


def render_home_page(store: FinanceStore):
    """Balance, new transaction form and transaction list."""
    st.title("🏠 Home")
    st.metric("Balance", money(store.total_balance()))

    with st.form("add_transaction", clear_on_submit=True):
        col1, col2, col3 = st.columns([3, 2, 2])
        with col1:
            name = st.text_input("Description")
        with col2:
            value = st.text_input("Value", placeholder="0,00")
        with col3:
            kind = st.selectbox(
                "Type",
                options=list(TransactionType),
                format_func=lambda t: t.value.title(),
            )
        if st.form_submit_button("Add", type="primary"):
            try:
                run_async(store.add_transaction(name, value, kind))
                st.rerun()
            except InvalidInputError as e:
                st.error(str(e))

    st.markdown("---")
    if not store.transactions:
        st.info("No transactions yet. Add your first one above.")
        return

    for transaction in store.transactions:
        col1, col2, col3 = st.columns([4, 2, 1])
        sign = "+" if transaction.type == TransactionType.INCOME else "-"
        col1.write(f"**{transaction.name}** · {transaction.date:%d/%m/%Y %H:%M}")
        col2.write(f"{sign} {money(transaction.value)}")
        if col3.button("🗑️", key=f"del_tx_{transaction.id}"):
            run_async(store.remove_transaction(transaction.id))
            st.rerun()


def render_goal_card(store: FinanceStore, goal: Goal):
    """One goal with its installment grid and actions."""
    with st.expander(
        f"{goal.name} · {money(goal.current_value)} / {money(goal.total_value)}",
        expanded=not goal.is_completed,
    ):
        st.progress(goal.progress_percent / 100)
        if goal.is_completed:
            st.success("🎉 Goal reached! Keep saving! 🐷")

        if goal.type.has_schedule:
            st.caption(f"{goal.paid_count}/{len(goal.installments)} installments paid")
            columns = st.columns(6)
            for index, installment in enumerate(goal.installments):
                column = columns[index % len(columns)]
                checked = column.checkbox(
                    money(installment.value),
                    value=installment.paid,
                    key=f"inst_{goal.id}_{installment.number}",
                )
                if checked != installment.paid:
                    progress = run_async(
                        store.toggle_installment(goal.id, installment.number)
                    )
                    if progress and progress.completed:
                        st.balloons()
                    st.rerun()

        col1, col2 = st.columns([3, 1])
        amount = col1.text_input("Amount", key=f"amount_{goal.id}")
        if col2.button("Deposit", key=f"deposit_{goal.id}"):
            try:
                progress = run_async(store.add_progress(goal.id, amount))
                if progress and progress.completed:
                    st.balloons()
                st.rerun()
            except InvalidInputError as e:
                st.error(str(e))

        if goal.type == GoalType.JAR and col2.button("Withdraw", key=f"withdraw_{goal.id}"):
            try:
                run_async(store.update_goal_amount(goal.id, f"-{amount.strip()}"))
                st.rerun()
            except InvalidInputError as e:
                st.error(str(e))

        if st.button("Delete goal", key=f"del_goal_{goal.id}"):
            run_async(store.delete_goal(goal.id))
            st.rerun()


def render_goals_page(store: FinanceStore):
    """Goal creation and the list of goals."""
    st.title("🎯 Goals")
    overview = goal_overview(store.goals)
    col1, col2, col3 = st.columns(3)
    col1.metric("Saved", money(overview.total_current))
    col2.metric("Target", money(overview.total_target))
    col3.metric("Completed", f"{overview.completed_count}/{overview.goal_count}")

    with st.form("create_goal", clear_on_submit=True):
        name = st.text_input("Goal name")
        total = st.text_input("Target value", placeholder="0,00")
        kind = st.radio(
            "Challenge type",
            options=list(GoalType),
            format_func=lambda t: t.value.title(),
            horizontal=True,
        )
        installment = st.text_input("Installment value (fixed goals only)")
        if st.form_submit_button("Create goal", type="primary"):
            try:
                run_async(
                    store.create_goal(
                        name,
                        total,
                        kind,
                        installment if installment.strip() else None,
                    )
                )
                st.rerun()
            except InvalidInputError as e:
                st.error(str(e))

    st.markdown("---")
    if not store.goals:
        st.info("No goals yet. Create a savings challenge above.")
        return
    for goal in store.goals:
        render_goal_card(store, goal)


def render_statistics_page(store: FinanceStore):
    """Period totals, expense series and top names."""
    st.title("📈 Statistics")
    period = st.radio(
        "Period",
        options=list(Period),
        index=1,
        format_func=lambda p: p.value,
        horizontal=True,
    )
    report = period_report(store.transactions, period)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Expenses", money(report.total_expense))
    col2.metric("Income", money(report.total_income))
    col3.metric("Daily average", money(report.daily_average))
    col4.metric("Savings rate", f"{report.savings_rate:.1f}%")

    st.bar_chart(
        [
            {"label": label, "Expenses": float(value)}
            for label, value in zip(report.labels, report.data_points)
        ],
        x="label",
        y="Expenses",
    )

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Top expenses")
        for item in breakdown_by_name(store.transactions, TransactionType.EXPENSE):
            st.write(f"{item.name}: {money(item.value)}")
    with col2:
        st.subheader("Top income")
        for item in breakdown_by_name(store.transactions, TransactionType.INCOME):
            st.write(f"{item.name}: {money(item.value)}")


if __name__ == "__main__":
    main()
