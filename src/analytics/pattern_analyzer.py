# src/analytics/pattern_analyzer.py
"""Best and worst entry times, symbols and setups from closed trades."""
import pandas as pd

from src.analytics.breakdowns import trades_frame
from src.analytics.models import PatternAnalysis
from src.trades.models import Trade

RANKING_SIZE = 5


def _ranked(average_pnl: pd.Series) -> tuple[list[tuple[str, float]], list[tuple[str, float]]]:
    """Top and bottom groups by average P&L, at most RANKING_SIZE each."""
    best = average_pnl.sort_values(ascending=False, kind="stable").head(RANKING_SIZE)
    worst = average_pnl.sort_values(kind="stable").head(RANKING_SIZE)
    return (
        [(str(key), float(value)) for key, value in best.items()],
        [(str(key), float(value)) for key, value in worst.items()],
    )


def _mean_or_zero(values: pd.Series) -> float:
    values = values.dropna()
    return float(values.mean()) if not values.empty else 0.0


class PatternAnalyzer:
    """Groups closed trades and ranks the groups by average P&L.

    Ties on hour or weekday go to the earliest one.
    """

    def analyze(self, trades: list[Trade]) -> PatternAnalysis:
        """Analyze trading patterns from a list of trades.

        Args:
            trades: Trades to analyze; open and cancelled trades are ignored.

        Returns:
            PatternAnalysis with identified patterns. Hours and the weekday
            are -1 when there are no closed trades.
        """
        frame = trades_frame(trades)
        if frame.empty:
            return PatternAnalysis(
                best_hour=-1,
                worst_hour=-1,
                best_day_of_week=-1,
                best_symbols=[],
                worst_symbols=[],
                best_setups=[],
                worst_setups=[],
                avg_winner_duration_minutes=0.0,
                avg_loser_duration_minutes=0.0,
            )

        by_hour = frame.groupby("hour")["pnl"].mean()
        by_weekday = frame.groupby("weekday")["pnl"].mean()
        best_symbols, worst_symbols = _ranked(frame.groupby("symbol")["pnl"].mean())

        with_setup = frame[frame["setup"].fillna("") != ""]
        best_setups, worst_setups = _ranked(with_setup.groupby("setup")["pnl"].mean())

        minutes = (
            pd.to_datetime(frame["exit_date"]) - pd.to_datetime(frame["entry_date"])
        ).dt.total_seconds() / 60.0

        return PatternAnalysis(
            best_hour=int(by_hour.idxmax()),
            worst_hour=int(by_hour.idxmin()),
            best_day_of_week=int(by_weekday.idxmax()),
            best_symbols=best_symbols,
            worst_symbols=worst_symbols,
            best_setups=best_setups,
            worst_setups=worst_setups,
            avg_winner_duration_minutes=_mean_or_zero(minutes[frame["pnl"] > 0]),
            avg_loser_duration_minutes=_mean_or_zero(minutes[frame["pnl"] < 0]),
        )
