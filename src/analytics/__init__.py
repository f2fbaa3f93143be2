# src/analytics/__init__.py
"""Analytics module: performance metrics, patterns and dashboard breakdowns."""

from .breakdowns import equity_curve, pnl_heatmap, win_rate_breakdown
from .metrics_calculator import MetricsCalculator
from .models import BreakdownRow, DailySummary, EquityPoint, PatternAnalysis, TradingMetrics
from .pattern_analyzer import PatternAnalyzer

__all__ = [
    "BreakdownRow",
    "DailySummary",
    "EquityPoint",
    "MetricsCalculator",
    "PatternAnalysis",
    "PatternAnalyzer",
    "TradingMetrics",
    "equity_curve",
    "pnl_heatmap",
    "win_rate_breakdown",
]
