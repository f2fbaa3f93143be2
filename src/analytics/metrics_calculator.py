# src/analytics/metrics_calculator.py
"""Calculator for trading performance metrics."""
import math

from src.analytics.models import TradingMetrics
from src.trades.models import Trade
from src.trades.pnl import calculate_r_multiple


def closed_trades(trades: list[Trade]) -> list[Trade]:
    """Trades that are closed and carry a P&L, ordered by exit time."""
    closed = [t for t in trades if t.is_closed and t.profit_loss is not None]
    return sorted(closed, key=lambda t: t.exit_date or t.entry_date)


def r_multiple(trade: Trade) -> float:
    """R multiple of a trade, 0.0 when the trade has no stop."""
    return calculate_r_multiple(
        trade.direction, trade.entry_price, trade.exit_price, trade.stop_loss
    )


class MetricsCalculator:
    """Calculates trading performance metrics from closed trades."""

    def calculate(
        self,
        trades: list[Trade],
        period_days: int = 30,
    ) -> TradingMetrics:
        """Calculate trading metrics from a list of trades.

        Open and cancelled trades are ignored. Break-even trades count toward
        the total but are neither winners nor losers.

        Args:
            trades: Trades to analyze.
            period_days: Number of days the metrics cover.

        Returns:
            TradingMetrics with all calculated values.
        """
        closed = closed_trades(trades)

        if not closed:
            return self._empty_metrics(period_days)

        winners = [t for t in closed if t.profit_loss > 0]
        losers = [t for t in closed if t.profit_loss < 0]

        total_trades = len(closed)
        winning_trades = len(winners)
        losing_trades = len(losers)

        win_rate = winning_trades / total_trades

        gross_profit = sum(t.profit_loss for t in winners)
        gross_loss = abs(sum(t.profit_loss for t in losers))
        profit_factor = gross_profit / gross_loss if gross_loss > 0 else 0.0

        avg_win_dollars = gross_profit / winning_trades if winning_trades > 0 else 0.0
        avg_loss_dollars = gross_loss / losing_trades if losing_trades > 0 else 0.0

        avg_win_r = sum(r_multiple(t) for t in winners) / winning_trades if winning_trades > 0 else 0.0
        avg_loss_r = abs(sum(r_multiple(t) for t in losers)) / losing_trades if losing_trades > 0 else 0.0

        loss_rate = losing_trades / total_trades
        expectancy = (win_rate * avg_win_r) - (loss_rate * avg_loss_r)

        total_pnl_dollars = sum(t.profit_loss for t in closed)
        total_pnl_percent = sum(t.profit_loss_percent or 0.0 for t in closed)

        return TradingMetrics(
            period_days=period_days,
            total_trades=total_trades,
            winning_trades=winning_trades,
            losing_trades=losing_trades,
            win_rate=win_rate,
            profit_factor=profit_factor,
            expectancy=expectancy,
            expectancy_dollars=total_pnl_dollars / total_trades,
            avg_win_dollars=avg_win_dollars,
            avg_loss_dollars=avg_loss_dollars,
            avg_win_r=avg_win_r,
            avg_loss_r=avg_loss_r,
            total_pnl_dollars=total_pnl_dollars,
            total_pnl_percent=total_pnl_percent,
            total_fees=sum(t.fees for t in closed),
            max_drawdown_dollars=self._calculate_max_drawdown(
                [t.profit_loss for t in closed]
            ),
            max_drawdown_percent=self._calculate_max_drawdown(
                [t.profit_loss_percent or 0.0 for t in closed]
            ),
            sharpe_ratio=self._calculate_sharpe_ratio(closed),
            best_trade=max(closed, key=lambda t: t.profit_loss),
            worst_trade=min(closed, key=lambda t: t.profit_loss),
        )

    def _empty_metrics(self, period_days: int) -> TradingMetrics:
        """Return metrics with zero values for an empty trade list."""
        return TradingMetrics(
            period_days=period_days,
            total_trades=0,
            winning_trades=0,
            losing_trades=0,
            win_rate=0.0,
            profit_factor=0.0,
            expectancy=0.0,
            expectancy_dollars=0.0,
            avg_win_dollars=0.0,
            avg_loss_dollars=0.0,
            avg_win_r=0.0,
            avg_loss_r=0.0,
            total_pnl_dollars=0.0,
            total_pnl_percent=0.0,
            total_fees=0.0,
            max_drawdown_dollars=0.0,
            max_drawdown_percent=0.0,
            sharpe_ratio=0.0,
            best_trade=None,
            worst_trade=None,
        )

    def _calculate_max_drawdown(self, pnls: list[float]) -> float:
        """Calculate the largest peak-to-trough drop of a cumulative P&L series.

        Args:
            pnls: Per-trade results in exit order.

        Returns:
            Maximum drawdown in the same units as the input.
        """
        cumulative_pnl = 0.0
        peak = 0.0
        max_drawdown = 0.0

        for pnl in pnls:
            cumulative_pnl += pnl
            if cumulative_pnl > peak:
                peak = cumulative_pnl
            drawdown = peak - cumulative_pnl
            if drawdown > max_drawdown:
                max_drawdown = drawdown

        return max_drawdown

    def _calculate_sharpe_ratio(self, trades: list[Trade]) -> float:
        """Calculate Sharpe ratio from per-trade percent returns.

        Args:
            trades: Closed trades.

        Returns:
            Annualized Sharpe ratio.
        """
        if len(trades) < 2:
            return 0.0

        returns = [t.profit_loss_percent or 0.0 for t in trades]
        avg_return = sum(returns) / len(returns)

        variance = sum((r - avg_return) ** 2 for r in returns) / (len(returns) - 1)
        std_dev = math.sqrt(variance)

        if std_dev == 0:
            return 0.0

        annualization_factor = math.sqrt(252)
        return (avg_return / std_dev) * annualization_factor
