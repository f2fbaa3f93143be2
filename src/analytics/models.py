# src/analytics/models.py
"""Data models for trade analytics."""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal

from src.trades.models import Trade


BreakdownKey = Literal["setup", "symbol", "direction", "tag", "weekday", "hour"]


@dataclass
class TradingMetrics:
    """Calculated trading performance metrics."""

    period_days: int
    total_trades: int
    winning_trades: int
    losing_trades: int

    win_rate: float
    profit_factor: float
    expectancy: float
    expectancy_dollars: float

    avg_win_dollars: float
    avg_loss_dollars: float
    avg_win_r: float
    avg_loss_r: float

    total_pnl_dollars: float
    total_pnl_percent: float
    total_fees: float
    max_drawdown_dollars: float
    max_drawdown_percent: float
    sharpe_ratio: float

    best_trade: Trade | None
    worst_trade: Trade | None


@dataclass
class PatternAnalysis:
    """Analysis of trading patterns."""

    best_hour: int
    worst_hour: int
    best_day_of_week: int

    best_symbols: list[tuple[str, float]]
    worst_symbols: list[tuple[str, float]]

    best_setups: list[tuple[str, float]]
    worst_setups: list[tuple[str, float]]

    avg_winner_duration_minutes: float
    avg_loser_duration_minutes: float


@dataclass
class EquityPoint:
    """Account equity after a closed trade."""

    timestamp: datetime
    trade_id: str
    pnl: float
    equity: float


@dataclass
class BreakdownRow:
    """Win-rate statistics for one group of trades."""

    key: str
    trades: int
    wins: int
    losses: int
    win_rate: float
    total_pnl: float
    avg_pnl: float


@dataclass
class DailySummary:
    """Summary of trading activity on one day."""

    date: date
    total_trades: int
    winning_trades: int
    losing_trades: int
    total_pnl: float
    win_rate: float
