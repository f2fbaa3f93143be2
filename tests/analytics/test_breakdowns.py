# tests/analytics/test_breakdowns.py
"""Tests for equity curve, heatmap and win-rate breakdowns."""
from datetime import datetime

import pytest

from src.analytics.breakdowns import (
    WEEKDAY_NAMES,
    equity_curve,
    pnl_heatmap,
    trades_frame,
    win_rate_breakdown,
)
from src.trades.models import Direction, Trade, TradeStatus


def make_trade(
    trade_id: str,
    pnl: float | None,
    entry_date: datetime = datetime(2026, 1, 12, 9, 30),
    exit_date: datetime | None = datetime(2026, 1, 12, 15, 0),
    symbol: str = "NVDA",
    direction: Direction = Direction.LONG,
    setup: str | None = None,
    tags: list[str] | None = None,
) -> Trade:
    """Create a trade; a pnl of None makes it open."""
    closed = pnl is not None
    return Trade(
        id=trade_id,
        user_id="user-1",
        symbol=symbol,
        direction=direction,
        entry_price=100.0,
        entry_date=entry_date,
        quantity=10,
        exit_price=100.0 + pnl / 10 if closed else None,
        exit_date=exit_date if closed else None,
        fees=0.0,
        status=TradeStatus.CLOSED if closed else TradeStatus.OPEN,
        profit_loss=pnl,
        profit_loss_percent=pnl / 10 if closed else None,
        setup=setup,
        tags=tags,
    )


class TestEquityCurve:
    """Tests for equity_curve."""

    def test_running_equity_in_exit_order(self) -> None:
        trades = [
            make_trade("b", -30.0, exit_date=datetime(2026, 1, 13, 15, 0)),
            make_trade("a", 100.0, exit_date=datetime(2026, 1, 12, 15, 0)),
            make_trade("open", None),
        ]

        points = equity_curve(trades, starting_balance=1000.0)

        assert [p.trade_id for p in points] == ["a", "b"]
        assert [p.equity for p in points] == [1100.0, 1070.0]
        assert points[1].pnl == -30.0
        assert points[1].timestamp == datetime(2026, 1, 13, 15, 0)

    def test_empty(self) -> None:
        assert equity_curve([]) == []


class TestPnlHeatmap:
    """Tests for pnl_heatmap."""

    def test_grid_shape_without_trades(self) -> None:
        grid = pnl_heatmap([])

        assert grid.shape == (7, 24)
        assert list(grid.index) == WEEKDAY_NAMES
        assert float(grid.to_numpy().sum()) == 0.0

    def test_sums_by_weekday_and_hour(self) -> None:
        trades = [
            make_trade("1", 50.0, entry_date=datetime(2026, 1, 12, 9, 30)),   # Monday
            make_trade("2", -20.0, entry_date=datetime(2026, 1, 12, 9, 50)),  # Monday
            make_trade("3", 70.0, entry_date=datetime(2026, 1, 16, 14, 5)),   # Friday
        ]

        grid = pnl_heatmap(trades)

        assert grid.loc["Mon", 9] == 30.0
        assert grid.loc["Fri", 14] == 70.0
        assert grid.loc["Tue", 9] == 0.0


class TestWinRateBreakdown:
    """Tests for win_rate_breakdown."""

    def test_by_symbol_sorted_by_total_pnl(self) -> None:
        trades = [
            make_trade("1", 50.0, symbol="NVDA"),
            make_trade("2", -20.0, symbol="NVDA"),
            make_trade("3", 100.0, symbol="AAPL"),
            make_trade("4", -40.0, symbol="TSLA"),
        ]

        rows = win_rate_breakdown(trades, "symbol")

        assert [r.key for r in rows] == ["AAPL", "NVDA", "TSLA"]
        nvda = rows[1]
        assert nvda.trades == 2
        assert nvda.wins == 1
        assert nvda.losses == 1
        assert nvda.win_rate == 0.5
        assert nvda.total_pnl == 30.0
        assert nvda.avg_pnl == 15.0

    def test_by_tag_counts_each_tag(self) -> None:
        trades = [
            make_trade("1", 50.0, tags=["gap", "news"]),
            make_trade("2", -10.0, tags=["gap"]),
            make_trade("3", 5.0),
        ]

        rows = {r.key: r for r in win_rate_breakdown(trades, "tag")}

        assert set(rows) == {"gap", "news"}
        assert rows["gap"].trades == 2
        assert rows["news"].total_pnl == 50.0

    def test_by_setup_groups_missing_setup(self) -> None:
        trades = [
            make_trade("1", 50.0, setup="breakout"),
            make_trade("2", -10.0),
        ]

        keys = [r.key for r in win_rate_breakdown(trades, "setup")]

        assert keys == ["breakout", "(none)"]

    def test_by_weekday_and_hour_labels(self) -> None:
        trades = [make_trade("1", 50.0, entry_date=datetime(2026, 1, 14, 10, 0))]

        assert win_rate_breakdown(trades, "weekday")[0].key == "Wed"
        assert win_rate_breakdown(trades, "hour")[0].key == "10:00"

    def test_by_direction(self) -> None:
        trades = [
            make_trade("1", 50.0, direction=Direction.SHORT),
            make_trade("2", 10.0),
        ]

        assert [r.key for r in win_rate_breakdown(trades, "direction")] == ["short", "long"]

    def test_unknown_key(self) -> None:
        with pytest.raises(ValueError, match="Unknown breakdown key"):
            win_rate_breakdown([], "month")

    def test_empty_and_open_only(self) -> None:
        assert win_rate_breakdown([], "symbol") == []
        assert win_rate_breakdown([make_trade("1", None)], "symbol") == []
        assert trades_frame([make_trade("1", None)]).empty
