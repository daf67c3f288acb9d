import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import calendar
from datetime import date
from uuid import uuid4

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from finance_analytics.config import SEED_PATH, configure_logging
from finance_analytics.distribution import top_slices
from finance_analytics.domain import Category, Kind, Transaction, ValidationError
from finance_analytics.functional import category_name, ensure_valid, validate_category
from finance_analytics.services import AnalyticsService, open_session
from finance_analytics.store import InMemoryStore

st.set_page_config(page_title="Finance Tracker", layout="wide")

if "service" not in st.session_state:
    configure_logging()
    # each browser session gets its own store and event bus
    service = open_session(SEED_PATH)
    st.session_state.store = service.store
    st.session_state.user_id = service.user_id
    st.session_state.service = service

store: InMemoryStore = st.session_state.store
user_id: str = st.session_state.user_id
service: AnalyticsService = st.session_state.service

snap = service.snapshot
categories = store.list_categories(user_id)
transactions = store.list_transactions(user_id)


def money(value: float) -> str:
    return f"{value:,.2f}"


def pct(value: float) -> str:
    return f"{value:+.1f}%"


def month_label(year: int, month: int) -> str:
    return f"{calendar.month_abbr[month]} {str(year)[2:]}"


def tx_to_df(tx_list):
    rows = [
        {
            "Date": t.date.isoformat(),
            "Type": t.kind.value,
            "Category": category_name(categories, t.category_id),
            "Description": t.description,
            "Amount": t.amount if t.kind == Kind.INCOME else -t.amount,
            "id": t.id,
        }
        for t in tx_list
    ]
    return pd.DataFrame(rows, columns=["Date", "Type", "Category", "Description", "Amount", "id"])


st.sidebar.markdown(f"### 👤 {user_id}")

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Dashboard", "📊 Analytics", "🧾 Transactions", "🗂 Categories"]
)

if menu == "🏠 Dashboard":
    totals = snap.totals
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Balance", money(totals.balance))
    with k2:
        st.metric("Income", money(totals.income))
    with k3:
        st.metric("Expense", money(totals.expense))
    with k4:
        st.metric("Transactions", len(transactions))

    left, right = st.columns(2)
    with left:
        st.subheader("🕒 Recent Transactions")
        recent = tx_to_df(snap.recent_transactions)
        if recent.empty:
            st.info("No transactions yet.")
        else:
            st.table(recent.drop(columns=["id"]))
    with right:
        st.subheader("🗂 Spending by Category")
        shown = top_slices(snap.category_distribution)
        if not shown:
            st.info("No spending yet.")
        for s in shown:
            st.markdown(f"**{s.name}** · {money(s.amount)}")
            st.progress(min(int(round(s.percentage)), 100))

elif menu == "📊 Analytics":
    st.title("📊 Analytics")
    totals = snap.totals
    top = snap.top_category
    change = snap.period_comparison.change

    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Savings rate", f"{totals.savings_rate:.1f}%", delta=money(totals.balance))
    with k2:
        st.metric("Daily average spend", money(snap.daily_average), delta=pct(change.expense), delta_color="inverse")
    with k3:
        st.metric("Top category", top.name if top else "-", delta=f"{top.percentage:.0f}% of total" if top else None, delta_color="off")

    tab_trend, tab_cats, tab_cmp = st.tabs(["Trend", "Categories", "Comparison"])

    with tab_trend:
        labels = [month_label(b.year, b.month) for b in snap.monthly_trend]
        fig_trend = go.Figure()
        fig_trend.add_trace(go.Bar(x=labels, y=[b.income for b in snap.monthly_trend], name="Income", marker_color="#10B981"))
        fig_trend.add_trace(go.Bar(x=labels, y=[b.expense for b in snap.monthly_trend], name="Expense", marker_color="#EF4444"))
        fig_trend.add_trace(go.Scatter(x=labels, y=[b.balance for b in snap.monthly_trend], mode="lines+markers", name="Balance"))
        fig_trend.update_layout(barmode="group", template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig_trend, use_container_width=True)

    with tab_cats:
        shown = top_slices(snap.category_distribution)
        if shown:
            fig_pie = go.Figure(go.Pie(
                labels=[s.name for s in shown],
                values=[s.amount for s in shown],
                marker=dict(colors=[s.chart_color for s in shown]),
                hole=0.5,
                sort=False,
            ))
            fig_pie.update_layout(template="plotly_dark", height=360)
            st.plotly_chart(fig_pie, use_container_width=True)

            df_dist = pd.DataFrame(
                [{"Category": s.name, "Amount": s.amount, "Share %": round(s.percentage, 1)} for s in snap.category_distribution]
            )
            st.dataframe(df_dist, use_container_width=True)
        else:
            st.info("No categorized expenses yet.")

    with tab_cmp:
        cmp = snap.period_comparison
        df_cmp = pd.DataFrame(
            {
                "Current month": [cmp.current.income, cmp.current.expense, cmp.current.balance],
                "Previous month": [cmp.previous.income, cmp.previous.expense, cmp.previous.balance],
                "Change %": [round(cmp.change.income, 1), round(cmp.change.expense, 1), round(cmp.change.balance, 1)],
            },
            index=["Income", "Expense", "Balance"],
        )
        st.table(df_cmp)

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")

    with st.form("new_tx", clear_on_submit=True):
        c1, c2, c3 = st.columns(3)
        with c1:
            kind = st.selectbox("Type", [k.value for k in Kind])
            amount = st.number_input("Amount", min_value=0.0, step=1.0)
        with c2:
            options = ["-"] + [c.name for c in categories]
            cat_choice = st.selectbox("Category", options)
            tx_date = st.date_input("Date", value=date.today())
        with c3:
            description = st.text_input("Description")
        if st.form_submit_button("Add transaction") and amount > 0:
            cat_id = next((c.id for c in categories if c.name == cat_choice), None)
            store.add_transaction(user_id, Transaction(
                id=str(uuid4()),
                category_id=cat_id,
                kind=Kind(kind),
                amount=float(amount),
                date=tx_date,
                description=description,
            ))
            st.success("Transaction added.")
            st.rerun()

    df = tx_to_df(transactions)
    if df.empty:
        st.info("No transactions to display.")
    else:
        st.dataframe(df.drop(columns=["id"]), use_container_width=True)
        st.download_button("⬇ Download CSV", df.to_csv(index=False), file_name="transactions.csv")

        to_delete = st.selectbox(
            "Delete transaction",
            options=df["id"].tolist(),
            format_func=lambda tid: " | ".join(str(v) for v in df.loc[df["id"] == tid, ["Date", "Description", "Amount"]].iloc[0]),
        )
        if st.button("Delete"):
            store.delete_transaction(user_id, to_delete)
            st.rerun()

elif menu == "🗂 Categories":
    st.title("🗂 Categories")
    summary = snap.budget_summary

    k1, k2, k3 = st.columns(3)
    with k1:
        st.metric("Total spent", money(summary.total_spent))
    with k2:
        st.metric("Total budget", money(summary.total_budget))
    with k3:
        st.metric("Remaining", money(summary.remaining), delta=f"{summary.remaining_percentage:.1f}%")
    st.progress(min(int(summary.percentage_used), 100))

    with st.form("new_cat", clear_on_submit=True):
        c1, c2, c3 = st.columns(3)
        with c1:
            name = st.text_input("Name")
        with c2:
            color = st.color_picker("Color", value="#3B82F6")
        with c3:
            budget = st.number_input("Monthly budget", min_value=0.0, step=10.0)
        if st.form_submit_button("Add category") and name:
            try:
                cat = ensure_valid(validate_category(Category(id=str(uuid4()), name=name, color=color.upper(), budget=float(budget))))
            except ValidationError as e:
                st.error(str(e))
            else:
                store.add_category(user_id, cat)
                st.rerun()

    for usage in snap.budget_usage:
        with st.container(border=True):
            st.markdown(f"<span style='color:{usage.color}'>●</span> **{usage.name}** · {usage.transaction_count} transactions", unsafe_allow_html=True)
            if usage.budget > 0:
                st.caption(f"{money(usage.spent)} of {money(usage.budget)} ({usage.percentage:.0f}%)")
                st.progress(min(int(usage.percentage), 100))
                if usage.over_budget:
                    st.warning(f"Over budget by {money(usage.spent - usage.budget)}")
            else:
                st.caption(f"Spent {money(usage.spent)} · no budget set")
            if st.button("Delete", key=f"del_{usage.category_id}"):
                store.delete_category(user_id, usage.category_id)
                st.rerun()

    if snap.budget_usage:
        df_budget = pd.DataFrame([{"Category": u.name, "Spent": u.spent, "Budget": u.budget} for u in snap.budget_usage])
        fig = px.bar(df_budget, x="Category", y=["Spent", "Budget"], barmode="group", title="Spent vs Budget", template="plotly_dark")
        st.plotly_chart(fig, use_container_width=True)
