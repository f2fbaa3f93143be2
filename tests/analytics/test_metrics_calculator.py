# tests/analytics/test_metrics_calculator.py
"""Tests for MetricsCalculator."""
from datetime import datetime, timedelta

import pytest

from src.analytics.metrics_calculator import MetricsCalculator
from src.analytics.models import TradingMetrics
from src.trades.models import Direction, Trade, TradeStatus


def make_closed_trade(
    trade_id: str,
    symbol: str,
    pnl_dollars: float,
    pnl_percent: float = 0.0,
    exit_date: datetime | None = None,
    entry_price: float = 100.0,
    stop_loss: float | None = 98.0,
    fees: float = 0.0,
) -> Trade:
    """Create a closed trade of 100 shares for testing."""
    return Trade(
        id=trade_id,
        user_id="user-1",
        symbol=symbol,
        direction=Direction.LONG,
        entry_price=entry_price,
        entry_date=datetime(2026, 1, 17, 9, 30, 0),
        quantity=100,
        exit_price=entry_price + (pnl_dollars / 100),
        exit_date=exit_date or datetime(2026, 1, 17, 10, 30, 0),
        fees=fees,
        status=TradeStatus.CLOSED,
        profit_loss=pnl_dollars,
        profit_loss_percent=pnl_percent,
        stop_loss=stop_loss,
    )


def make_open_trade(trade_id: str, symbol: str) -> Trade:
    """Create an open trade for testing."""
    return Trade(
        id=trade_id,
        user_id="user-1",
        symbol=symbol,
        direction=Direction.LONG,
        entry_price=100.0,
        entry_date=datetime(2026, 1, 17, 9, 30, 0),
        quantity=100,
        exit_price=None,
        exit_date=None,
        fees=0.0,
        status=TradeStatus.OPEN,
        profit_loss=None,
        profit_loss_percent=None,
        stop_loss=98.0,
    )


class TestMetricsCalculator:
    """Tests for MetricsCalculator."""

    def test_calculate_empty_trades(self) -> None:
        """calculate should return zeroed metrics for an empty list."""
        calculator = MetricsCalculator()

        result = calculator.calculate(trades=[], period_days=30)

        assert isinstance(result, TradingMetrics)
        assert result.period_days == 30
        assert result.total_trades == 0
        assert result.win_rate == 0.0
        assert result.profit_factor == 0.0
        assert result.expectancy == 0.0
        assert result.max_drawdown_dollars == 0.0
        assert result.sharpe_ratio == 0.0
        assert result.best_trade is None
        assert result.worst_trade is None

    def test_calculate_ignores_open_trades(self) -> None:
        """Open trades should not count toward any metric."""
        calculator = MetricsCalculator()
        trades = [
            make_closed_trade("1", "NVDA", 100.0),
            make_open_trade("2", "AAPL"),
        ]

        result = calculator.calculate(trades=trades)

        assert result.total_trades == 1
        assert result.total_pnl_dollars == 100.0

    def test_calculate_win_rate(self) -> None:
        """calculate should compute win rate as winners / total."""
        calculator = MetricsCalculator()
        trades = [
            make_closed_trade("1", "NVDA", 200.0),
            make_closed_trade("2", "AAPL", 100.0),
            make_closed_trade("3", "TSLA", 50.0),
            make_closed_trade("4", "MSFT", -100.0),
        ]

        result = calculator.calculate(trades=trades)

        assert result.total_trades == 4
        assert result.winning_trades == 3
        assert result.losing_trades == 1
        assert result.win_rate == 0.75

    def test_break_even_trade_is_neither_winner_nor_loser(self) -> None:
        calculator = MetricsCalculator()
        trades = [
            make_closed_trade("1", "NVDA", 100.0),
            make_closed_trade("2", "AAPL", 0.0),
        ]

        result = calculator.calculate(trades=trades)

        assert result.total_trades == 2
        assert result.winning_trades == 1
        assert result.losing_trades == 0
        assert result.win_rate == 0.5

    def test_calculate_profit_factor(self) -> None:
        """calculate should compute profit factor as gross profit / gross loss."""
        calculator = MetricsCalculator()
        trades = [
            make_closed_trade("1", "NVDA", 200.0),
            make_closed_trade("2", "AAPL", 100.0),
            make_closed_trade("3", "TSLA", -150.0),
        ]

        result = calculator.calculate(trades=trades)

        assert result.profit_factor == 2.0
        assert result.avg_win_dollars == 150.0
        assert result.avg_loss_dollars == 150.0

    def test_profit_factor_without_losses(self) -> None:
        """Profit factor is 0.0 when there are no losing trades."""
        calculator = MetricsCalculator()

        result = calculator.calculate(trades=[make_closed_trade("1", "NVDA", 200.0)])

        assert result.profit_factor == 0.0

    def test_calculate_expectancy(self) -> None:
        """calculate should compute expectancy in R from stop distances."""
        calculator = MetricsCalculator()
        # Entry 100, stop 98: 1R = 2 dollars per share
        trades = [
            make_closed_trade("1", "NVDA", 400.0),   # +2R
            make_closed_trade("2", "AAPL", 200.0),   # +1R
            make_closed_trade("3", "TSLA", -200.0),  # -1R
            make_closed_trade("4", "MSFT", -200.0),  # -1R
        ]

        result = calculator.calculate(trades=trades)

        assert result.avg_win_r == 1.5
        assert result.avg_loss_r == 1.0
        # 0.5 * 1.5 - 0.5 * 1.0
        assert result.expectancy == pytest.approx(0.25)
        assert result.expectancy_dollars == 50.0

    def test_expectancy_without_stops(self) -> None:
        """Trades without a stop loss have an R multiple of zero."""
        calculator = MetricsCalculator()
        trades = [
            make_closed_trade("1", "NVDA", 400.0, stop_loss=None),
            make_closed_trade("2", "AAPL", -200.0, stop_loss=None),
        ]

        result = calculator.calculate(trades=trades)

        assert result.expectancy == 0.0
        assert result.expectancy_dollars == 100.0

    def test_calculate_max_drawdown(self) -> None:
        """Max drawdown is the largest peak-to-trough drop in exit order."""
        calculator = MetricsCalculator()
        start = datetime(2026, 1, 17, 10, 0, 0)
        # Cumulative: 100, 50, -50, 150 -> peak 100, trough -50
        trades = [
            make_closed_trade("4", "MSFT", 200.0, exit_date=start + timedelta(hours=3)),
            make_closed_trade("1", "NVDA", 100.0, exit_date=start),
            make_closed_trade("3", "TSLA", -100.0, exit_date=start + timedelta(hours=2)),
            make_closed_trade("2", "AAPL", -50.0, exit_date=start + timedelta(hours=1)),
        ]

        result = calculator.calculate(trades=trades)

        assert result.max_drawdown_dollars == 150.0
        assert result.total_pnl_dollars == 150.0

    def test_drawdown_from_first_loss(self) -> None:
        """A losing first trade is a drawdown from the zero starting point."""
        calculator = MetricsCalculator()

        result = calculator.calculate(trades=[make_closed_trade("1", "NVDA", -80.0)])

        assert result.max_drawdown_dollars == 80.0

    def test_sharpe_ratio_needs_two_trades(self) -> None:
        calculator = MetricsCalculator()

        result = calculator.calculate(trades=[make_closed_trade("1", "NVDA", 100.0, 1.0)])

        assert result.sharpe_ratio == 0.0

    def test_sharpe_ratio_zero_for_constant_returns(self) -> None:
        calculator = MetricsCalculator()
        trades = [
            make_closed_trade("1", "NVDA", 100.0, 1.0),
            make_closed_trade("2", "AAPL", 100.0, 1.0),
        ]

        result = calculator.calculate(trades=trades)

        assert result.sharpe_ratio == 0.0

    def test_sharpe_ratio_annualized(self) -> None:
        """Sharpe uses the sample deviation of percent returns over 252 days."""
        calculator = MetricsCalculator()
        trades = [
            make_closed_trade("1", "NVDA", 300.0, 3.0),
            make_closed_trade("2", "AAPL", -100.0, -1.0),
        ]

        result = calculator.calculate(trades=trades)

        # mean 1.0, sample std sqrt(8)
        assert result.sharpe_ratio == pytest.approx(1.0 / 8 ** 0.5 * 252 ** 0.5)

    def test_best_and_worst_trade_and_fees(self) -> None:
        calculator = MetricsCalculator()
        trades = [
            make_closed_trade("1", "NVDA", 300.0, fees=1.0),
            make_closed_trade("2", "AAPL", -100.0, fees=2.5),
            make_closed_trade("3", "TSLA", 50.0),
        ]

        result = calculator.calculate(trades=trades)

        assert result.best_trade.id == "1"
        assert result.worst_trade.id == "2"
        assert result.total_fees == 3.5
