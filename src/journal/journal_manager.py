# src/journal/journal_manager.py
"""Manager for orchestrating all journal components."""
import logging
from datetime import date, datetime, time, timedelta

from src.analytics import (
    DailySummary,
    MetricsCalculator,
    PatternAnalyzer,
    equity_curve,
    pnl_heatmap,
    win_rate_breakdown,
)
from src.journal.entry_store import JournalEntryStore
from src.journal.media_store import MediaStore
from src.journal.models import JournalEntry, JournalEntryInput
from src.journal.settings import JournalSettings
from src.risk.rate_limiter import RateLimiter
from src.trades import (
    ScreenshotStore,
    ScreenshotType,
    Trade,
    TradeFilter,
    TradeInput,
    TradeScreenshot,
    TradeSettings,
    TradeStore,
    export_trades_csv,
    import_trades_csv,
)

logger = logging.getLogger(__name__)


class ImportRateLimitError(RuntimeError):
    """Raised when a user imports trades more often than allowed."""


class JournalManager:
    """Orchestrates all journal components for trade logging and analysis.

    Coordinates the trade store, journal entries, media, the analytics
    calculators and the import rate limiter to provide a unified interface
    for trade journaling and performance analysis.
    """

    def __init__(
        self,
        settings: JournalSettings,
        trade_settings: TradeSettings | None = None,
    ) -> None:
        """Initialize the journal manager with all components.

        Args:
            settings: Journal configuration settings.
            trade_settings: Trade book settings; defaults to TradeSettings().
        """
        self._settings = settings
        trade_settings = trade_settings or TradeSettings()

        self.trades = TradeStore(trade_settings)
        self.screenshots = ScreenshotStore(trade_settings)
        self.entries = JournalEntryStore(settings)
        self.media = MediaStore(settings)

        self._metrics_calculator = MetricsCalculator()
        self._pattern_analyzer = PatternAnalyzer()
        self._import_limiter = RateLimiter(
            limit=settings.import_rate_limit,
            duration=settings.import_rate_window,
        )

    async def log_trade(self, user_id: str, trade_input: TradeInput) -> Trade | None:
        """Add a trade to the user's book.

        Returns:
            The stored trade, or None if journaling is disabled.
        """
        if not self._settings.enabled:
            return None

        return await self.trades.create(user_id, trade_input)

    async def close_trade(
        self,
        user_id: str,
        trade_id: str,
        exit_price: float,
        exit_date: datetime,
        fees: float | None = None,
    ) -> Trade | None:
        """Record a trade's exit; P&L and status are recomputed.

        Args:
            user_id: Owner of the trade.
            trade_id: The trade ID to update.
            exit_price: The exit price.
            exit_date: When the position was closed.
            fees: Total fees, if they changed on exit.

        Returns:
            The closed trade, or None if disabled or not found.
        """
        if not self._settings.enabled:
            return None

        changes: dict = {"exit_price": exit_price, "exit_date": exit_date}
        if fees is not None:
            changes["fees"] = fees
        return await self.trades.update(user_id, trade_id, changes)

    async def delete_trade(self, user_id: str, trade_id: str) -> bool | None:
        """Delete a trade with its screenshots and unlink its journal entries.

        Returns:
            Whether a trade was deleted, or None if journaling is disabled.
        """
        if not self._settings.enabled:
            return None

        deleted = await self.trades.delete(user_id, trade_id)
        if not deleted:
            return False

        await self.screenshots.delete_for_trade(user_id, trade_id)
        for entry in await self.entries.for_trade(user_id, trade_id):
            await self.entries.update(user_id, entry.id, {"trade_id": None})
        return True

    async def add_journal_entry(
        self, user_id: str, entry_input: JournalEntryInput
    ) -> JournalEntry | None:
        """Write a journal entry, optionally linked to one of the user's trades.

        Raises:
            ValueError: If the linked trade does not exist.
        """
        if not self._settings.enabled:
            return None

        if entry_input.trade_id and await self.trades.get(user_id, entry_input.trade_id) is None:
            raise ValueError(f"Trade {entry_input.trade_id} not found")

        return await self.entries.create(user_id, entry_input)

    async def add_screenshot(
        self,
        user_id: str,
        trade_id: str,
        file_name: str,
        data: bytes,
        screenshot_type: ScreenshotType = ScreenshotType.OTHER,
    ) -> TradeScreenshot | None:
        """Attach a chart screenshot to one of the user's trades.

        Returns:
            The stored screenshot, or None if journaling is disabled.

        Raises:
            ValueError: If the trade does not exist or the file is rejected.
        """
        if not self._settings.enabled:
            return None

        if await self.trades.get(user_id, trade_id) is None:
            raise ValueError(f"Trade {trade_id} not found")
        return await self.screenshots.add(user_id, trade_id, file_name, data, screenshot_type)

    async def import_csv(self, user_id: str, text: str) -> list[Trade] | None:
        """Import trades from CSV text into the user's book.

        Returns:
            The imported trades, or None if journaling is disabled.

        Raises:
            ImportRateLimitError: If the user has hit the import rate limit.
            CsvImportError: If the CSV cannot be parsed.
            ValueError: If a parsed trade is invalid; nothing is stored.
        """
        if not self._settings.enabled:
            return None

        result = self._import_limiter.check(user_id)
        if not result.success:
            raise ImportRateLimitError(
                f"Too many imports; try again after {datetime.fromtimestamp(result.reset):%H:%M:%S}"
            )

        trade_inputs = import_trades_csv(text)
        if not trade_inputs:
            return []

        trades = await self.trades.create_many(user_id, trade_inputs)
        logger.info(f"Imported {len(trades)} trades for user {user_id}")
        return trades

    async def export_csv(self, user_id: str, filters: TradeFilter | None = None) -> str:
        """Export the user's trades as CSV, newest entry first."""
        trades = await self.trades.find(user_id, filters)
        return export_trades_csv(trades)

    async def trades_closed_between(
        self, user_id: str, start_date: date, end_date: date
    ) -> list[Trade]:
        """Closed trades whose exit falls within [start_date, end_date]."""
        start = datetime.combine(start_date, time.min)
        end = datetime.combine(end_date, time.max)
        return [
            t for t in await self.trades.all_for_user(user_id)
            if t.is_closed and t.exit_date is not None and start <= t.exit_date <= end
        ]

    async def get_daily_summary(self, user_id: str, query_date: date) -> DailySummary:
        """Get a summary of trades closed on a specific date.

        Args:
            user_id: Owner of the trades.
            query_date: The date to summarize.

        Returns:
            DailySummary with counts, total P&L and win rate.
        """
        closed = await self.trades_closed_between(user_id, query_date, query_date)

        winning_trades = [t for t in closed if t.profit_loss > 0]
        losing_trades = [t for t in closed if t.profit_loss < 0]

        total_trades = len(closed)
        win_rate = len(winning_trades) / total_trades if total_trades > 0 else 0.0

        return DailySummary(
            date=query_date,
            total_trades=total_trades,
            winning_trades=len(winning_trades),
            losing_trades=len(losing_trades),
            total_pnl=sum(t.profit_loss for t in closed),
            win_rate=win_rate,
        )

    async def get_weekly_report(self, user_id: str, end_date: date) -> dict:
        """Get a weekly performance report.

        Args:
            user_id: Owner of the trades.
            end_date: The end date of the week to report on.

        Returns:
            Dict with start_date, end_date, metrics (TradingMetrics),
            and patterns (PatternAnalysis).
        """
        start_date = end_date - timedelta(days=6)

        trades = await self.trades_closed_between(user_id, start_date, end_date)

        metrics = self._metrics_calculator.calculate(trades, period_days=7)
        patterns = self._pattern_analyzer.analyze(trades)

        return {
            "start_date": start_date,
            "end_date": end_date,
            "metrics": metrics,
            "patterns": patterns,
        }

    async def get_dashboard(
        self,
        user_id: str,
        end_date: date | None = None,
        period_days: int | None = None,
    ) -> dict:
        """Gather everything the analytics dashboard shows for a period.

        Returns:
            Dict with start_date, end_date, metrics, patterns, equity_curve,
            heatmap (DataFrame) and breakdowns keyed by grouping.
        """
        end_date = end_date or date.today()
        period_days = period_days or self._settings.default_period_days
        start_date = end_date - timedelta(days=period_days - 1)

        trades = await self.trades_closed_between(user_id, start_date, end_date)

        return {
            "start_date": start_date,
            "end_date": end_date,
            "metrics": self._metrics_calculator.calculate(trades, period_days=period_days),
            "patterns": self._pattern_analyzer.analyze(trades),
            "equity_curve": equity_curve(trades, self._settings.starting_balance),
            "heatmap": pnl_heatmap(trades),
            "breakdowns": {
                key: win_rate_breakdown(trades, key)
                for key in ("setup", "symbol", "direction", "tag")
            },
        }
