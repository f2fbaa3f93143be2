# src/dashboard/pages/5_Alerts.py
"""Alerts page - Alert center with history."""
import streamlit as st

from src.dashboard.models import AlertLevel, AlertType
from src.dashboard.state import DashboardState

st.set_page_config(page_title="Alerts | Trade Journal", page_icon="🔔", layout="wide")

st.title("🔔 Alert Center")

state = DashboardState.get_instance()

FILTERS = {
    "All": None,
    "Trades": {AlertType.TRADE_LOGGED, AlertType.TRADE_CLOSED, AlertType.TRADE_DELETED},
    "Imports": {AlertType.IMPORT_COMPLETED, AlertType.PRICES_LOADED},
    "Errors": {AlertType.SYSTEM_ERROR},
}

col1, col2, col3 = st.columns([1, 1, 2])

with col1:
    if st.button("✅ Mark all read"):
        state.mark_all_read()
        st.rerun()

with col2:
    if st.button("🗑️ Clear alerts"):
        state.clear_alerts()
        st.rerun()

with col3:
    filter_type = st.selectbox("Filter by type", options=list(FILTERS), index=0)

st.divider()

col1, col2, col3, col4 = st.columns(4)

with col1:
    st.metric("Total", len(state.alerts))

with col2:
    st.metric("Unread", state.unread_count)

with col3:
    errors = sum(1 for a in state.alerts if a.level == AlertLevel.ERROR)
    st.metric("Errors", errors)

with col4:
    warnings = sum(1 for a in state.alerts if a.level == AlertLevel.WARNING)
    st.metric("Warnings", warnings)

st.divider()

st.subheader("📋 History")

alerts = state.alerts
if FILTERS[filter_type] is not None:
    alerts = [a for a in alerts if a.alert_type in FILTERS[filter_type]]

if alerts:
    for alert in alerts:
        if alert.level == AlertLevel.ERROR:
            container = st.error
        elif alert.level == AlertLevel.WARNING:
            container = st.warning
        else:
            container = st.info

        time_str = alert.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        read_marker = "" if alert.read else "🆕 "
        symbol_str = f"[{alert.symbol}] " if alert.symbol else ""
        trade_str = f" (trade {alert.trade_id})" if alert.trade_id else ""
        container(f"{read_marker}{alert.icon} **{alert.title}**{trade_str}\n\n{symbol_str}{alert.message}\n\n_{time_str}_")
else:
    st.info("No alerts to show", icon="✅")
