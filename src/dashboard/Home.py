# src/dashboard/Home.py
"""Home page - Journal landing with today's summary."""
from datetime import date

import streamlit as st

from src.dashboard.state import DashboardState
from src.trades import TradeFilter, TradeStatus

st.set_page_config(
    page_title="Trade Journal",
    page_icon="📒",
    layout="wide",
)

st.title("📒 Trade Journal")

state = DashboardState.get_instance()
journal = state.journal

today = state.run(journal.get_daily_summary(state.user_id, date.today()))
open_trades = state.run(
    journal.trades.list_trades(state.user_id, filters=TradeFilter(status=TradeStatus.OPEN))
)

col1, col2, col3, col4 = st.columns(4)

with col1:
    st.metric(label="Open Positions", value=str(open_trades.count))

with col2:
    st.metric(label="Trades Closed Today", value=str(today.total_trades))

with col3:
    st.metric(
        label="P&L Today",
        value=f"${today.total_pnl:,.2f}",
        delta=f"{today.win_rate:.0%} win rate" if today.total_trades else None,
    )

with col4:
    unread = state.unread_count
    st.metric(label="Alerts", value=str(unread), delta="unread" if unread > 0 else None)

st.divider()

st.subheader("Quick Links")

col1, col2, col3, col4, col5 = st.columns(5)

with col1:
    st.page_link("pages/1_Trades.py", label="Trades", icon="💹")
    st.caption("Log, filter and export trades")

with col2:
    st.page_link("pages/2_Analytics.py", label="Analytics", icon="📊")
    st.caption("Metrics, equity and breakdowns")

with col3:
    st.page_link("pages/3_Charts.py", label="Charts", icon="🕯️")
    st.caption("Candles, overlays and patterns")

with col4:
    st.page_link("pages/4_Journal.py", label="Journal", icon="📝")
    st.caption("Entries, mood and lessons")

with col5:
    st.page_link("pages/5_Alerts.py", label="Alerts", icon="🔔")
    st.caption("Notification center")

st.divider()

st.subheader("Recent Alerts")

if state.alerts:
    for alert in state.alerts[:3]:
        st.info(f"{alert.icon} **{alert.title}** - {alert.message}")
else:
    st.info("No recent alerts", icon="✅")
