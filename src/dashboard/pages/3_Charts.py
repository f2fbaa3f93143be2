# src/dashboard/pages/3_Charts.py
"""Charts page - Candles with overlays, saved chart setups, pattern matching and position sizing."""
from datetime import datetime, timezone

import plotly.graph_objects as go
import streamlit as st

from src.dashboard.models import AlertLevel, AlertType
from src.dashboard.state import DashboardState
from src.market import (
    ChartPattern,
    ChartPreference,
    ChartType,
    IndicatorTemplate,
    IndicatorType,
    PatternBar,
    PriceCsvError,
    Timeframe,
    default_settings,
    downsample,
    import_price_csv,
    source_timeframe_for,
)
from src.market.indicator_templates import SETTING_KEYS
from src.risk import SizingMethod

st.set_page_config(page_title="Charts | Trade Journal", page_icon="🕯️", layout="wide")

st.title("🕯️ Charts")

state = DashboardState.get_instance()
market = state.settings.market_data
template = "plotly_dark" if state.settings.dashboard.theme == "dark" else "plotly_white"

with st.expander("⬆️ Load price data"):
    col1, col2, col3 = st.columns(3)
    with col1:
        upload_symbol = st.text_input("Symbol").strip().upper()
    with col2:
        upload_timeframe = st.selectbox("Timeframe", options=[tf.value for tf in Timeframe], key="upload_tf")
    with col3:
        price_file = st.file_uploader("OHLCV CSV", type=["csv"])
    if price_file is not None and upload_symbol and st.button("Load bars"):
        try:
            bars = import_price_csv(
                price_file.getvalue().decode("utf-8"), upload_symbol, Timeframe(upload_timeframe)
            )
            saved = state.run(state.prices.save(bars))
        except (PriceCsvError, ValueError) as e:
            state.add_alert(AlertType.SYSTEM_ERROR, AlertLevel.ERROR, "Price load failed", str(e), upload_symbol)
            st.error(str(e))
        else:
            state.add_alert(
                AlertType.PRICES_LOADED,
                AlertLevel.INFO,
                "Prices loaded",
                f"{saved} {upload_timeframe} bar(s)",
                upload_symbol,
            )
            st.success(f"Saved {saved} bar(s)")

symbols = state.run(state.prices.available_symbols())
if not symbols:
    st.info("No price data yet. Load a CSV of candles above.", icon="📭")
    st.stop()

OVERLAYS = [IndicatorType.SMA, IndicatorType.EMA, IndicatorType.BOLLINGER, IndicatorType.VWAP]


def indicator_label(indicator_type: IndicatorType) -> str:
    return "Bollinger" if indicator_type == IndicatorType.BOLLINGER else indicator_type.value.upper()


def pick_settings(indicator_type: IndicatorType) -> dict:
    """Default settings, or those of the template picked in the sidebar."""
    templates = state.run(state.templates.by_type(indicator_type, state.user_id))
    settings = default_settings(indicator_type, market)
    if not templates:
        return settings
    labels = {"Default": None} | {f"{t.name} {t.settings}": t for t in templates}
    chosen = labels[st.sidebar.selectbox(f"{indicator_label(indicator_type)} template", options=list(labels))]
    return settings | chosen.settings if chosen else settings


col1, col2, col3, col4 = st.columns(4)
with col1:
    symbol = st.selectbox("Symbol", options=symbols)

preference = state.run(state.preferences.get_default(state.user_id, symbol))
default_tf = preference.timeframe if preference else state.settings.dashboard.default_timeframe

with col2:
    timeframe = Timeframe(
        st.selectbox(
            "Display timeframe",
            options=[tf.value for tf in Timeframe],
            index=list(Timeframe).index(default_tf),
        )
    )
with col3:
    overlays = st.multiselect(
        "Overlays",
        options=OVERLAYS,
        default=[i for i in preference.indicators if i in OVERLAYS] if preference else [IndicatorType.SMA],
        format_func=indicator_label,
    )
with col4:
    chart_type = ChartType(
        st.selectbox(
            "Chart type",
            options=[c.value for c in ChartType],
            index=list(ChartType).index(preference.chart_type) if preference else 0,
        )
    )

if st.button("💾 Save as default for this symbol"):
    state.run(
        state.preferences.save(
            ChartPreference(
                id=preference.id if preference and preference.symbol == symbol else "",
                user_id=state.user_id,
                name=f"{symbol} default",
                timeframe=timeframe,
                symbol=symbol,
                chart_type=chart_type,
                indicators=overlays,
            )
        )
    )
    st.success(f"Saved chart setup for {symbol}")

available = state.run(state.prices.available_timeframes(symbol))
source = source_timeframe_for(available, timeframe)
if source is None:
    st.warning(
        f"{symbol} has no data that can be shown as {timeframe.value}. "
        f"Stored: {', '.join(tf.value for tf in available)}"
    )
    st.stop()

bars = state.run(state.prices.get(symbol, source))
if source != timeframe:
    bars = downsample(bars, source, timeframe)
    st.caption(f"Built from {source.value} candles")
bars = bars[-state.settings.dashboard.chart_bars:]

times = [datetime.fromtimestamp(b.time, tz=timezone.utc) for b in bars]
closes = [b.close for b in bars]
ohlc = dict(
    x=times,
    open=[b.open for b in bars],
    high=[b.high for b in bars],
    low=[b.low for b in bars],
    close=closes,
    name=symbol,
)

fig = go.Figure()
if chart_type == ChartType.CANDLESTICK:
    fig.add_trace(go.Candlestick(**ohlc))
elif chart_type == ChartType.BAR:
    fig.add_trace(go.Ohlc(**ohlc))
else:
    fill = "tozeroy" if chart_type == ChartType.AREA else None
    fig.add_trace(go.Scatter(x=times, y=closes, mode="lines", fill=fill, name=symbol))

st.sidebar.subheader("Indicator templates")

if IndicatorType.SMA in overlays:
    period = pick_settings(IndicatorType.SMA)["period"]
    sma = state.indicators.sma(closes, period)
    fig.add_trace(go.Scatter(x=times[len(times) - len(sma):], y=sma, mode="lines", name=f"SMA {period}"))

if IndicatorType.EMA in overlays:
    period = pick_settings(IndicatorType.EMA)["period"]
    ema = state.indicators.ema(closes, period)
    fig.add_trace(go.Scatter(x=times[len(times) - len(ema):], y=ema, mode="lines", name=f"EMA {period}"))

if IndicatorType.BOLLINGER in overlays:
    bb = pick_settings(IndicatorType.BOLLINGER)
    bands = state.indicators.bollinger_bands(closes, bb["period"], bb["deviation"])
    band_times = times[len(times) - len(bands.middle):]
    for name, values in (("Upper", bands.upper), ("Middle", bands.middle), ("Lower", bands.lower)):
        fig.add_trace(
            go.Scatter(x=band_times, y=values, mode="lines", name=f"BB {name}", line=dict(dash="dot", width=1))
        )

if IndicatorType.VWAP in overlays:
    fig.add_trace(go.Scatter(x=times, y=state.indicators.vwap(bars), mode="lines", name="VWAP"))

fig.update_layout(
    title=f"{symbol} {timeframe.value}",
    template=template,
    xaxis_rangeslider_visible=False,
    height=600,
)
st.plotly_chart(fig, use_container_width=True)

rsi_period = pick_settings(IndicatorType.RSI)["period"]
macd_settings = pick_settings(IndicatorType.MACD)

col1, col2 = st.columns(2)
with col1:
    st.metric(f"RSI ({rsi_period})", f"{state.indicators.rsi(closes, rsi_period):.1f}")
with col2:
    histogram, trend = state.indicators.macd(closes, **macd_settings)
    st.metric("MACD histogram", f"{histogram:.3f}", delta=trend)

with st.expander("🧰 Manage indicator templates"):
    with st.form("new_template"):
        col1, col2, col3 = st.columns(3)
        with col1:
            template_name = st.text_input("Template name")
            template_type = IndicatorType(
                st.selectbox("Indicator", options=[i.value for i in IndicatorType], format_func=str.upper)
            )
        with col2:
            period = st.number_input("Period / fast", min_value=1, value=20, step=1)
            slow = st.number_input("Slow (MACD)", min_value=2, value=26, step=1)
        with col3:
            deviation = st.number_input("Deviation (Bollinger)", min_value=0.1, value=2.0, step=0.1)
            signal = st.number_input("Signal (MACD)", min_value=1, value=9, step=1)
        is_public = st.checkbox("Share with everyone")
        if st.form_submit_button("Save template"):
            values = {"period": int(period), "deviation": float(deviation)}
            if template_type == IndicatorType.MACD:
                values = {"fast": int(period), "slow": int(slow), "signal": int(signal)}
            keys = SETTING_KEYS[template_type]
            try:
                state.run(
                    state.templates.save(
                        IndicatorTemplate(
                            id="",
                            user_id=state.user_id,
                            name=template_name,
                            indicator_type=template_type,
                            settings={k: v for k, v in values.items() if k in keys},
                            is_public=is_public,
                        )
                    )
                )
            except ValueError as e:
                st.error(str(e))
            else:
                st.success(f"Saved template {template_name}")

    own_templates = [t for t in state.run(state.templates.list_templates(state.user_id)) if t.user_id == state.user_id]
    if own_templates:
        template_labels = {f"{t.name} ({t.indicator_type.value}) #{t.id[:8]}": t.id for t in own_templates}
        to_remove = st.selectbox("Your templates", options=list(template_labels))
        if st.button("🗑️ Delete template"):
            state.run(state.templates.delete(template_labels[to_remove], state.user_id))
            st.rerun()

st.divider()

st.subheader("🧩 Pattern Matching")

col1, col2 = st.columns(2)

with col1:
    matches = state.run(state.patterns.rank_matches(closes))
    if matches:
        for pattern, score in matches[:5]:
            st.progress(score / 100, text=f"{pattern.name} ({pattern.symbol} {pattern.timeframe.value}): {score}%")
    else:
        st.info("No saved patterns")

with col2:
    with st.form("save_pattern"):
        pattern_name = st.text_input("Pattern name")
        lookback = st.slider("Bars to capture", min_value=5, max_value=max(6, len(closes)), value=min(30, max(5, len(closes))))
        description = st.text_area("Description")
        if st.form_submit_button("Save current shape"):
            if not pattern_name:
                st.error("Name the pattern first")
            else:
                state.run(
                    state.patterns.save(
                        ChartPattern(
                            id="",
                            name=pattern_name,
                            symbol=symbol,
                            timeframe=timeframe,
                            bars=[PatternBar.from_price_bar(b) for b in bars[-lookback:]],
                            description=description or None,
                            created_by=state.user_id,
                        )
                    )
                )
                st.success(f"Saved pattern {pattern_name}")

    own_patterns = [p for p, _ in matches if p.created_by == state.user_id and not p.is_system]
    if own_patterns:
        labels = {f"{p.name} ({p.symbol} {p.timeframe.value}) #{p.id[:8]}": p.id for p in own_patterns}
        to_delete = st.selectbox("Your patterns", options=list(labels))
        if st.button("🗑️ Delete pattern"):
            state.run(state.patterns.delete(labels[to_delete], state.user_id))
            st.rerun()

st.divider()

st.subheader("📐 Position Size")

risk = state.settings.risk
col1, col2, col3, col4 = st.columns(4)
with col1:
    entry = st.number_input("Entry", min_value=0.01, value=closes[-1] if closes else 1.0, format="%.2f")
with col2:
    stop = st.number_input("Stop", min_value=0.01, value=round(entry * 0.98, 2), format="%.2f")
with col3:
    target = st.number_input(
        "Target",
        min_value=0.01,
        value=max(0.01, round(state.sizer.target_for_ratio(entry, stop), 2)),
        format="%.2f",
    )
with col4:
    method = SizingMethod(st.selectbox("Method", options=[m.value for m in SizingMethod]))

account_size = st.number_input("Account size", min_value=1.0, value=risk.account_size, step=100.0)
if method == SizingMethod.PERCENT:
    risk_value = st.slider("Risk %", min_value=0.25, max_value=10.0, value=risk.risk_percent, step=0.25)
    size = state.sizer.calculate(entry, stop, target, account_size=account_size, method=method, risk_percent=risk_value)
else:
    risk_value = st.number_input("Risk $", min_value=1.0, value=risk.fixed_risk_amount)
    size = state.sizer.calculate(entry, stop, target, account_size=account_size, method=method, fixed_risk=risk_value)

col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric("Shares", f"{size.shares:,}")
with col2:
    st.metric("Risk", f"${size.risk_amount:,.2f}")
with col3:
    st.metric("Reward", f"${size.reward_amount:,.2f}")
with col4:
    st.metric("R:R", f"{size.risk_reward_ratio:.2f}")
