# src/dashboard/pages/1_Trades.py
"""Trades page - Log, browse, import and export trades."""
import math
from datetime import date, datetime

import pandas as pd
import streamlit as st

from src.dashboard.models import AlertLevel, AlertType
from src.dashboard.state import DashboardState
from src.journal import ImportRateLimitError
from src.trades import (
    CsvImportError,
    Direction,
    ScreenshotType,
    TradeFilter,
    TradeInput,
    TradeStatus,
    export_filename,
)

st.set_page_config(page_title="Trades | Trade Journal", page_icon="💹", layout="wide")

st.title("💹 Trades")

state = DashboardState.get_instance()
journal = state.journal
user_id = state.user_id

with st.expander("➕ Log a trade"):
    with st.form("new_trade", clear_on_submit=True):
        col1, col2, col3 = st.columns(3)
        with col1:
            symbol = st.text_input("Symbol")
            direction = st.selectbox("Direction", options=[d.value for d in Direction])
            setup = st.text_input("Setup")
        with col2:
            entry_price = st.number_input("Entry price", min_value=0.0, step=0.01, format="%.2f")
            quantity = st.number_input("Quantity", min_value=0.0, step=1.0)
            stop_loss = st.number_input("Stop loss (0 = none)", min_value=0.0, step=0.01, format="%.2f")
        with col3:
            entry_day = st.date_input("Entry date", value=date.today())
            entry_time = st.time_input("Entry time")
            fees = st.number_input("Fees", min_value=0.0, step=0.01, format="%.2f")
        tags = st.text_input("Tags (comma separated)")
        notes = st.text_area("Notes")

        if st.form_submit_button("Save trade", type="primary"):
            trade_input = TradeInput(
                symbol=symbol,
                direction=Direction(direction),
                entry_price=entry_price,
                entry_date=datetime.combine(entry_day, entry_time),
                quantity=quantity,
                fees=fees,
                setup=setup or None,
                tags=[t.strip() for t in tags.split(",") if t.strip()] or None,
                notes=notes or None,
                stop_loss=stop_loss or None,
            )
            try:
                trade = state.run(journal.log_trade(user_id, trade_input))
            except ValueError as e:
                st.error(f"Could not save trade: {e}")
            else:
                if trade is None:
                    st.warning("Journaling is disabled in the settings")
                else:
                    state.add_alert(
                        AlertType.TRADE_LOGGED,
                        AlertLevel.INFO,
                        "Trade logged",
                        f"{trade.direction.value.upper()} {trade.quantity:g} {trade.symbol} @ ${trade.entry_price:,.2f}",
                        trade.symbol,
                        trade.id,
                    )
                    st.success(f"Saved {trade.id}")

st.divider()

st.subheader("🔎 Filters")

col1, col2, col3, col4 = st.columns(4)
with col1:
    filter_symbol = st.text_input("Symbol contains")
with col2:
    filter_status = st.selectbox("Status", options=["All"] + [s.value for s in TradeStatus])
with col3:
    filter_direction = st.selectbox("Direction ", options=["All"] + [d.value for d in Direction])
with col4:
    sort_field = st.selectbox(
        "Sort by",
        options=["entry_date", "exit_date", "symbol", "profit_loss", "profit_loss_percent"],
    )

col1, col2, col3 = st.columns(3)
with col1:
    start_date = st.date_input("From", value=None)
with col2:
    end_date = st.date_input("To", value=None)
with col3:
    sort_direction = st.radio("Order", options=["desc", "asc"], horizontal=True)

filters = TradeFilter(
    symbol=filter_symbol or None,
    status=TradeStatus(filter_status) if filter_status != "All" else None,
    direction=Direction(filter_direction) if filter_direction != "All" else None,
    start_date=start_date,
    end_date=end_date,
)

page_size = state.settings.dashboard.page_size
first_page = state.run(
    journal.trades.list_trades(user_id, page=1, page_size=page_size, filters=filters)
)
page_count = max(1, math.ceil(first_page.count / page_size))
page = st.number_input("Page", min_value=1, max_value=page_count, value=1)

result = state.run(
    journal.trades.list_trades(
        user_id,
        page=int(page),
        page_size=page_size,
        sort_field=sort_field,
        sort_direction=sort_direction,
        filters=filters,
    )
)

st.caption(f"{result.count} trade(s), page {page} of {page_count}")

if result.trades:
    rows = [
        {
            "ID": t.id,
            "Symbol": t.symbol,
            "Direction": t.direction.value,
            "Entry": t.entry_price,
            "Exit": t.exit_price,
            "Qty": t.quantity,
            "P&L": t.profit_loss,
            "P&L %": t.profit_loss_percent,
            "Entry date": t.entry_date,
            "Status": t.status.value,
            "Setup": t.setup,
        }
        for t in result.trades
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
else:
    st.info("No trades match the filters", icon="📭")

st.divider()

st.subheader("✅ Close or delete")

open_trades = state.run(journal.trades.find(user_id, TradeFilter(status=TradeStatus.OPEN)))

col1, col2 = st.columns(2)

with col1:
    if open_trades:
        with st.form("close_trade"):
            trade_id = st.selectbox("Open trade", options=[t.id for t in open_trades])
            exit_price = st.number_input("Exit price", min_value=0.0, step=0.01, format="%.2f")
            exit_day = st.date_input("Exit date", value=date.today())
            exit_time = st.time_input("Exit time")
            if st.form_submit_button("Close trade"):
                try:
                    closed = state.run(
                        journal.close_trade(
                            user_id, trade_id, exit_price, datetime.combine(exit_day, exit_time)
                        )
                    )
                except ValueError as e:
                    st.error(f"Could not close trade: {e}")
                else:
                    if closed is not None:
                        state.add_alert(
                            AlertType.TRADE_CLOSED,
                            AlertLevel.INFO,
                            "Trade closed",
                            f"{closed.id} P&L ${closed.profit_loss:,.2f}",
                            closed.symbol,
                            closed.id,
                        )
                        st.rerun()
    else:
        st.info("No open trades")

with col2:
    all_trades = state.run(journal.trades.all_for_user(user_id))
    if all_trades:
        delete_id = st.selectbox("Trade to delete", options=[t.id for t in all_trades])
        if st.button("🗑️ Delete trade"):
            deleted = state.run(journal.delete_trade(user_id, delete_id))
            if deleted is None:
                st.warning("Journaling is disabled in the settings")
            elif deleted:
                state.add_alert(
                    AlertType.TRADE_DELETED, AlertLevel.WARNING, "Trade deleted", delete_id, trade_id=delete_id
                )
            st.rerun()

        st.markdown("**Screenshots**")
        shot_trade = st.selectbox("Trade", options=[t.id for t in all_trades], key="shot_trade")
        shot_type = st.selectbox("Type", options=[s.value for s in ScreenshotType])
        upload = st.file_uploader("Chart screenshot", type=["png", "jpg", "jpeg", "gif", "webp"])
        if upload is not None and st.button("Attach screenshot"):
            try:
                shot = state.run(
                    journal.add_screenshot(
                        user_id, shot_trade, upload.name, upload.getvalue(), ScreenshotType(shot_type)
                    )
                )
            except ValueError as e:
                st.error(str(e))
            else:
                if shot is None:
                    st.warning("Journaling is disabled in the settings")
                else:
                    st.success("Screenshot attached")

        for shot in state.run(journal.screenshots.list_for_trade(user_id, shot_trade)):
            st.image(shot.path, caption=f"{shot.screenshot_type.value} - {shot.created_at:%Y-%m-%d %H:%M}")

st.divider()

st.subheader("⇅ Import / Export")

col1, col2 = st.columns(2)

with col1:
    csv_file = st.file_uploader("Import CSV", type=["csv"])
    if csv_file is not None and st.button("Import trades"):
        try:
            imported = state.run(journal.import_csv(user_id, csv_file.getvalue().decode("utf-8")))
        except ImportRateLimitError as e:
            st.warning(str(e))
        except (CsvImportError, ValueError) as e:
            state.add_alert(AlertType.SYSTEM_ERROR, AlertLevel.ERROR, "Import failed", str(e))
            st.error(str(e))
        else:
            if imported is None:
                st.warning("Journaling is disabled in the settings")
            else:
                state.add_alert(
                    AlertType.IMPORT_COMPLETED,
                    AlertLevel.INFO,
                    "Import completed",
                    f"{len(imported)} trade(s) imported",
                )
                st.success(f"Imported {len(imported)} trade(s)")

with col2:
    st.download_button(
        "⬇️ Export filtered trades",
        data=state.run(journal.export_csv(user_id, filters)),
        file_name=export_filename(date.today()),
        mime="text/csv",
    )
