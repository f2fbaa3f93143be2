# tests/journal/test_journal_manager.py
"""Tests for JournalManager."""
from datetime import date, datetime
from pathlib import Path

import pytest

from src.journal.journal_manager import ImportRateLimitError, JournalManager
from src.journal.models import JournalEntryInput
from src.journal.settings import JournalSettings
from src.trades.csv_io import CsvImportError
from src.trades.models import Direction, TradeFilter, TradeInput, TradeStatus
from src.trades.settings import TradeSettings

CSV_HEADER = "symbol,direction,entry_price,quantity,entry_date,exit_price,exit_date,setup\n"


def make_input(
    symbol: str = "NVDA",
    entry_date: datetime | None = None,
    exit_price: float | None = None,
    exit_date: datetime | None = None,
    **kwargs,
) -> TradeInput:
    """Create a TradeInput for testing."""
    return TradeInput(
        symbol=symbol,
        direction=Direction.LONG,
        entry_price=100.0,
        entry_date=entry_date or datetime(2026, 1, 12, 9, 30),
        quantity=10,
        exit_price=exit_price,
        exit_date=exit_date,
        **kwargs,
    )


class TestJournalManager:
    """Tests for JournalManager."""

    @pytest.fixture
    def journal_settings(self, tmp_path: Path) -> JournalSettings:
        return JournalSettings(
            data_dir=str(tmp_path / "journal"),
            media_dir=str(tmp_path / "media"),
            import_rate_limit=2,
            starting_balance=1000.0,
        )

    @pytest.fixture
    def trade_settings(self, tmp_path: Path) -> TradeSettings:
        return TradeSettings(
            data_dir=str(tmp_path / "trades"),
            screenshot_dir=str(tmp_path / "shots"),
        )

    @pytest.fixture
    def manager(self, journal_settings: JournalSettings, trade_settings: TradeSettings) -> JournalManager:
        return JournalManager(journal_settings, trade_settings)

    async def test_log_and_close_trade(self, manager: JournalManager) -> None:
        """close_trade should set the exit and recompute P&L."""
        trade = await manager.log_trade("user-1", make_input(stop_loss=98.0))

        closed = await manager.close_trade("user-1", trade.id, 104.0, datetime(2026, 1, 12, 11, 0), fees=2.0)

        assert closed.status == TradeStatus.CLOSED
        assert closed.profit_loss == 38.0
        assert closed.fees == 2.0

    async def test_close_missing_trade(self, manager: JournalManager) -> None:
        assert await manager.close_trade("user-1", "missing", 1.0, datetime(2026, 1, 12)) is None

    async def test_disabled_journal_ignores_writes(
        self, journal_settings: JournalSettings, trade_settings: TradeSettings
    ) -> None:
        journal_settings.enabled = False
        manager = JournalManager(journal_settings, trade_settings)

        assert await manager.log_trade("user-1", make_input()) is None
        assert await manager.add_journal_entry("user-1", JournalEntryInput(title="x")) is None
        assert await manager.import_csv("user-1", CSV_HEADER + "AAPL,long,150,10,2026-01-05 10:00,,,\n") is None
        assert await manager.trades.all_for_user("user-1") == []

    async def test_disabled_journal_leaves_existing_trades_alone(
        self, journal_settings: JournalSettings, trade_settings: TradeSettings
    ) -> None:
        trade = await JournalManager(journal_settings, trade_settings).log_trade("user-1", make_input())
        journal_settings.enabled = False
        manager = JournalManager(journal_settings, trade_settings)

        assert await manager.delete_trade("user-1", trade.id) is None
        assert await manager.add_screenshot("user-1", trade.id, "chart.png", b"png") is None
        assert await manager.trades.get("user-1", trade.id) == trade
        assert await manager.screenshots.list_for_trade("user-1", trade.id) == []

    async def test_journal_entry_must_link_existing_trade(self, manager: JournalManager) -> None:
        with pytest.raises(ValueError, match="not found"):
            await manager.add_journal_entry("user-1", JournalEntryInput(title="x", trade_id="nope"))

        trade = await manager.log_trade("user-1", make_input())
        entry = await manager.add_journal_entry("user-1", JournalEntryInput(title="Plan", trade_id=trade.id))

        assert entry.trade_id == trade.id

    async def test_delete_trade_cleans_up(self, manager: JournalManager) -> None:
        """Deleting a trade removes screenshots and unlinks journal entries."""
        trade = await manager.log_trade("user-1", make_input())
        await manager.add_screenshot("user-1", trade.id, "chart.png", b"png")
        entry = await manager.add_journal_entry("user-1", JournalEntryInput(title="Plan", trade_id=trade.id))

        assert await manager.delete_trade("user-1", trade.id) is True

        assert await manager.screenshots.list_for_trade("user-1", trade.id) == []
        assert (await manager.entries.get("user-1", entry.id)).trade_id is None
        assert await manager.delete_trade("user-1", trade.id) is False

    async def test_screenshot_needs_existing_trade(self, manager: JournalManager) -> None:
        with pytest.raises(ValueError, match="not found"):
            await manager.add_screenshot("user-1", "missing", "chart.png", b"png")

    async def test_import_csv(self, manager: JournalManager) -> None:
        text = CSV_HEADER + (
            "NVDA,long,100,10,2026-01-12 09:30,110,2026-01-12 15:00,breakout\n"
            "AAPL,short,200,5,2026-01-13 10:00,,,\n"
        )

        trades = await manager.import_csv("user-1", text)

        assert [t.id for t in trades] == ["2026-01-12-NVDA-001", "2026-01-13-AAPL-001"]
        assert trades[0].profit_loss == 100.0
        assert trades[1].status == TradeStatus.OPEN

    async def test_import_csv_errors_store_nothing(self, manager: JournalManager) -> None:
        with pytest.raises(CsvImportError):
            await manager.import_csv("user-1", CSV_HEADER + "NVDA,up,100,10,2026-01-12,,,\n")

        assert await manager.trades.all_for_user("user-1") == []

    async def test_import_csv_is_rate_limited_per_user(self, manager: JournalManager) -> None:
        """The third import inside the window is refused; other users are unaffected."""
        await manager.import_csv("user-1", CSV_HEADER)
        await manager.import_csv("user-1", CSV_HEADER)

        with pytest.raises(ImportRateLimitError):
            await manager.import_csv("user-1", CSV_HEADER)

        assert await manager.import_csv("user-2", CSV_HEADER) == []

    async def test_export_csv_respects_filters(self, manager: JournalManager) -> None:
        await manager.log_trade("user-1", make_input(symbol="NVDA"))
        await manager.log_trade("user-1", make_input(symbol="AAPL", entry_date=datetime(2026, 1, 13, 9, 30)))

        everything = (await manager.export_csv("user-1")).splitlines()
        filtered = (await manager.export_csv("user-1", TradeFilter(symbol="NVDA"))).splitlines()

        assert len(everything) == 3
        assert everything[1].startswith("AAPL")
        assert len(filtered) == 2
        assert filtered[1].startswith("NVDA")

    async def test_daily_summary(self, manager: JournalManager) -> None:
        """Only trades closed on the date are summarized."""
        day = datetime(2026, 1, 12, 15, 0)
        await manager.log_trade("user-1", make_input(exit_price=110.0, exit_date=day))
        await manager.log_trade("user-1", make_input(exit_price=95.0, exit_date=day))
        await manager.log_trade("user-1", make_input(exit_price=120.0, exit_date=datetime(2026, 1, 13, 15, 0)))
        await manager.log_trade("user-1", make_input())

        summary = await manager.get_daily_summary("user-1", date(2026, 1, 12))

        assert summary.total_trades == 2
        assert summary.winning_trades == 1
        assert summary.losing_trades == 1
        assert summary.total_pnl == 50.0
        assert summary.win_rate == 0.5

    async def test_daily_summary_empty(self, manager: JournalManager) -> None:
        summary = await manager.get_daily_summary("user-1", date(2026, 1, 12))

        assert summary.total_trades == 0
        assert summary.win_rate == 0.0

    async def test_weekly_report(self, manager: JournalManager) -> None:
        """The week covers end_date and the six days before it."""
        await manager.log_trade("user-1", make_input(exit_price=110.0, exit_date=datetime(2026, 1, 12, 15, 0)))
        await manager.log_trade(
            "user-1",
            make_input(entry_date=datetime(2026, 1, 1, 9, 30), exit_price=90.0, exit_date=datetime(2026, 1, 2, 15, 0)),
        )

        report = await manager.get_weekly_report("user-1", date(2026, 1, 16))

        assert report["start_date"] == date(2026, 1, 10)
        assert report["end_date"] == date(2026, 1, 16)
        assert report["metrics"].total_trades == 1
        assert report["metrics"].period_days == 7
        assert report["patterns"].best_hour == 9

    async def test_dashboard(self, manager: JournalManager) -> None:
        await manager.log_trade(
            "user-1", make_input(exit_price=110.0, exit_date=datetime(2026, 1, 12, 15, 0), setup="breakout", tags=["a"])
        )
        await manager.log_trade(
            "user-1", make_input(symbol="AAPL", exit_price=95.0, exit_date=datetime(2026, 1, 13, 15, 0))
        )

        dashboard = await manager.get_dashboard("user-1", end_date=date(2026, 1, 31), period_days=30)

        assert dashboard["start_date"] == date(2026, 1, 2)
        assert dashboard["metrics"].total_trades == 2
        assert [p.equity for p in dashboard["equity_curve"]] == [1100.0, 1050.0]
        assert dashboard["heatmap"].loc["Mon", 9] == 50.0
        assert set(dashboard["breakdowns"]) == {"setup", "symbol", "direction", "tag"}
        assert dashboard["breakdowns"]["symbol"][0].key == "NVDA"
