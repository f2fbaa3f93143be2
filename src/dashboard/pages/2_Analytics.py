# src/dashboard/pages/2_Analytics.py
"""Analytics page - Performance metrics and charts."""
from datetime import date

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from src.dashboard.state import DashboardState

st.set_page_config(page_title="Analytics | Trade Journal", page_icon="📊", layout="wide")

st.title("📊 Performance Analytics")

state = DashboardState.get_instance()
template = "plotly_dark" if state.settings.dashboard.theme == "dark" else "plotly_white"

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

col1, col2 = st.columns([1, 3])

with col1:
    period = st.selectbox("Period", options=["Week", "Month", "Quarter", "Year", "Custom"], index=1)

with col2:
    if period == "Custom":
        col_start, col_end = st.columns(2)
        with col_start:
            start_date = st.date_input("From", value=date.today().replace(day=1))
        with col_end:
            end_date = st.date_input("To", value=date.today())
        period_days = max(1, (end_date - start_date).days + 1)
    else:
        end_date = date.today()
        period_days = {"Week": 7, "Month": 30, "Quarter": 90, "Year": 365}[period]

dashboard = state.run(state.journal.get_dashboard(state.user_id, end_date, period_days))
metrics = dashboard["metrics"]
patterns = dashboard["patterns"]

st.caption(f"{dashboard['start_date']:%Y-%m-%d} to {dashboard['end_date']:%Y-%m-%d}")

st.divider()

st.subheader("📈 Key Metrics")

col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric("Win Rate", f"{metrics.win_rate:.0%}", delta=f"{metrics.total_trades} trades")
with col2:
    st.metric("Profit Factor", f"{metrics.profit_factor:.2f}")
with col3:
    st.metric("Expectancy", f"{metrics.expectancy:.2f}R", delta=f"${metrics.expectancy_dollars:,.2f}/trade")
with col4:
    st.metric("Total P&L", f"${metrics.total_pnl_dollars:,.2f}", delta=f"fees ${metrics.total_fees:,.2f}")

col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric("Avg Win", f"${metrics.avg_win_dollars:,.2f}")
with col2:
    st.metric("Avg Loss", f"${metrics.avg_loss_dollars:,.2f}")
with col3:
    st.metric("Max Drawdown", f"${metrics.max_drawdown_dollars:,.2f}", delta=f"-{metrics.max_drawdown_percent:.1f}%")
with col4:
    st.metric("Sharpe", f"{metrics.sharpe_ratio:.2f}")

st.divider()

st.subheader("📉 Charts")

tab1, tab2, tab3 = st.tabs(["Equity Curve", "P&L Heatmap", "Win Rate Breakdown"])

with tab1:
    points = dashboard["equity_curve"]
    if points:
        fig = go.Figure()
        fig.add_trace(
            go.Scatter(
                x=[p.timestamp for p in points],
                y=[p.equity for p in points],
                mode="lines+markers",
                name="Equity",
                line=dict(color="green"),
                customdata=[p.trade_id for p in points],
                hovertemplate="%{x}<br>$%{y:,.2f}<br>%{customdata}<extra></extra>",
            )
        )
        fig.update_layout(title="Equity Curve", template=template)
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No closed trades in this period")

with tab2:
    heatmap: pd.DataFrame = dashboard["heatmap"]
    fig = go.Figure(
        data=go.Heatmap(
            z=heatmap.values,
            x=[f"{h:02d}:00" for h in heatmap.columns],
            y=list(heatmap.index),
            colorscale="RdYlGn",
            zmid=0,
        )
    )
    fig.update_layout(title="P&L by Weekday and Entry Hour", template=template)
    st.plotly_chart(fig, use_container_width=True)

with tab3:
    by = st.radio("Group by", options=list(dashboard["breakdowns"]), horizontal=True)
    rows = dashboard["breakdowns"][by]
    if rows:
        colors = ["green" if r.total_pnl >= 0 else "red" for r in rows]
        fig = go.Figure(data=[go.Bar(x=[r.key for r in rows], y=[r.total_pnl for r in rows], marker_color=colors)])
        fig.update_layout(title=f"P&L by {by}", template=template)
        st.plotly_chart(fig, use_container_width=True)
        st.dataframe(
            pd.DataFrame(
                [
                    {
                        by.title(): r.key,
                        "Trades": r.trades,
                        "Wins": r.wins,
                        "Losses": r.losses,
                        "Win Rate": f"{r.win_rate:.0%}",
                        "Total P&L": r.total_pnl,
                        "Avg P&L": r.avg_pnl,
                    }
                    for r in rows
                ]
            ),
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("Nothing to break down yet")

st.divider()

st.subheader("🔍 Patterns")

if metrics.total_trades == 0:
    st.info("Close some trades to see patterns")
else:
    col1, col2 = st.columns(2)

    with col1:
        st.markdown("**Strengths:**")
        st.success(f"⏰ Best hour: {patterns.best_hour:02d}:00")
        st.success(f"📅 Best day: {DAY_NAMES[patterns.best_day_of_week]}")
        for symbol, pnl in patterns.best_symbols[:3]:
            st.success(f"📊 {symbol}: ${pnl:,.2f} avg")
        if metrics.best_trade is not None:
            st.success(f"🏆 Best trade: {metrics.best_trade.id} (${metrics.best_trade.profit_loss:,.2f})")

    with col2:
        st.markdown("**To improve:**")
        st.warning(f"⏰ Worst hour: {patterns.worst_hour:02d}:00")
        for symbol, pnl in patterns.worst_symbols[:3]:
            st.warning(f"📊 {symbol}: ${pnl:,.2f} avg")
        for setup, pnl in patterns.worst_setups[:3]:
            st.warning(f"🧩 {setup}: ${pnl:,.2f} avg")
        st.warning(
            f"⌛ Winners held {patterns.avg_winner_duration_minutes:.0f} min, "
            f"losers {patterns.avg_loser_duration_minutes:.0f} min"
        )
