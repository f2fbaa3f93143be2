# src/trades/__init__.py
"""Trades module: the trade book, P&L and CSV import/export."""

from .csv_io import CsvImportError, export_filename, export_trades_csv, import_trades_csv
from .models import (
    Direction,
    ImportSource,
    ScreenshotType,
    Trade,
    TradeFilter,
    TradeInput,
    TradePage,
    TradeScreenshot,
    TradeStatus,
)
from .pnl import calculate_profit_loss, calculate_profit_loss_percent, calculate_r_multiple
from .screenshot_store import ScreenshotStore
from .settings import TradeSettings
from .trade_store import TradeStore

__all__ = [
    "CsvImportError",
    "Direction",
    "ImportSource",
    "ScreenshotStore",
    "ScreenshotType",
    "Trade",
    "TradeFilter",
    "TradeInput",
    "TradePage",
    "TradeScreenshot",
    "TradeSettings",
    "TradeStatus",
    "TradeStore",
    "calculate_profit_loss",
    "calculate_profit_loss_percent",
    "calculate_r_multiple",
    "export_filename",
    "export_trades_csv",
    "import_trades_csv",
]
