# src/analytics/breakdowns.py
"""Equity curve, heatmap and win-rate breakdowns for dashboards."""
import pandas as pd

from src.analytics.metrics_calculator import closed_trades
from src.analytics.models import BreakdownKey, BreakdownRow, EquityPoint
from src.trades.models import Trade

WEEKDAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def equity_curve(trades: list[Trade], starting_balance: float = 0.0) -> list[EquityPoint]:
    """Running account equity after each closed trade, in exit order."""
    points: list[EquityPoint] = []
    equity = starting_balance

    for trade in closed_trades(trades):
        equity += trade.profit_loss
        points.append(
            EquityPoint(
                timestamp=trade.exit_date or trade.entry_date,
                trade_id=trade.id,
                pnl=trade.profit_loss,
                equity=equity,
            )
        )

    return points


def trades_frame(trades: list[Trade]) -> pd.DataFrame:
    """Closed trades as a DataFrame with one row per trade."""
    rows = [
        {
            "id": t.id,
            "symbol": t.symbol,
            "direction": t.direction.value,
            "setup": t.setup,
            "tags": t.tags or [],
            "entry_date": t.entry_date,
            "exit_date": t.exit_date,
            "weekday": t.entry_date.weekday(),
            "hour": t.entry_date.hour,
            "pnl": t.profit_loss,
        }
        for t in closed_trades(trades)
    ]
    return pd.DataFrame(
        rows,
        columns=[
            "id", "symbol", "direction", "setup", "tags",
            "entry_date", "exit_date", "weekday", "hour", "pnl",
        ],
    )


def pnl_heatmap(trades: list[Trade]) -> pd.DataFrame:
    """Summed P&L by weekday (rows, Mon..Sun) and entry hour (columns, 0..23).

    Cells with no trades are 0.0.
    """
    frame = trades_frame(trades)
    grid = pd.DataFrame(0.0, index=range(7), columns=range(24))

    if not frame.empty:
        pivot = frame.pivot_table(
            index="weekday", columns="hour", values="pnl", aggfunc="sum", fill_value=0.0
        )
        grid = pivot.reindex(index=range(7), columns=range(24), fill_value=0.0).astype(float)

    grid.index = WEEKDAY_NAMES
    grid.index.name = "weekday"
    grid.columns.name = "hour"
    return grid


def win_rate_breakdown(trades: list[Trade], by: BreakdownKey) -> list[BreakdownRow]:
    """Group closed trades and report win rate and P&L per group.

    Args:
        trades: Trades to analyze.
        by: Grouping key. With "tag" a trade counts once for each of its tags;
            with "setup" trades without a setup are grouped as "(none)".

    Returns:
        One row per group, sorted by total P&L descending.

    Raises:
        ValueError: If ``by`` is not a known grouping key.
    """
    frame = trades_frame(trades)
    if by not in ("setup", "symbol", "direction", "tag", "weekday", "hour"):
        raise ValueError(f"Unknown breakdown key: {by}")
    if frame.empty:
        return []

    if by == "tag":
        frame = frame.explode("tags").dropna(subset=["tags"])
        column = "tags"
    elif by == "setup":
        frame = frame.assign(setup=frame["setup"].fillna("(none)"))
        column = "setup"
    elif by == "weekday":
        frame = frame.assign(weekday=frame["weekday"].map(lambda d: WEEKDAY_NAMES[d]))
        column = "weekday"
    elif by == "hour":
        frame = frame.assign(hour=frame["hour"].map(lambda h: f"{h:02d}:00"))
        column = "hour"
    else:
        column = by

    rows: list[BreakdownRow] = []
    for key, group in frame.groupby(column, sort=False):
        count = len(group)
        wins = int((group["pnl"] > 0).sum())
        losses = int((group["pnl"] < 0).sum())
        total = float(group["pnl"].sum())
        rows.append(
            BreakdownRow(
                key=str(key),
                trades=count,
                wins=wins,
                losses=losses,
                win_rate=wins / count,
                total_pnl=total,
                avg_pnl=total / count,
            )
        )

    return sorted(rows, key=lambda r: r.total_pnl, reverse=True)
