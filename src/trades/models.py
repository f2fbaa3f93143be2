# src/trades/models.py
"""Data models for trades."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal


class Direction(str, Enum):
    """Trade direction."""

    LONG = "long"
    SHORT = "short"


class TradeStatus(str, Enum):
    """Lifecycle status of a trade."""

    OPEN = "open"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class ImportSource(str, Enum):
    """Where a trade record came from."""

    MANUAL = "manual"
    CSV = "csv"
    ROBINHOOD = "robinhood"
    INTERACTIVE_BROKERS = "interactive_brokers"
    TD_AMERITRADE = "td_ameritrade"


class ScreenshotType(str, Enum):
    """Kind of chart screenshot attached to a trade."""

    ENTRY = "entry"
    EXIT = "exit"
    ANALYSIS = "analysis"
    OTHER = "other"


TradeSortField = Literal["entry_date", "exit_date", "symbol", "profit_loss", "profit_loss_percent"]
SortDirection = Literal["asc", "desc"]


@dataclass
class Trade:
    """A single trade in a user's book."""

    id: str
    user_id: str
    symbol: str
    direction: Direction

    # Entry details
    entry_price: float
    entry_date: datetime
    quantity: float

    # Exit details
    exit_price: float | None
    exit_date: datetime | None

    fees: float
    status: TradeStatus

    # Results
    profit_loss: float | None
    profit_loss_percent: float | None

    # Context
    setup: str | None = None
    tags: list[str] | None = None
    notes: str | None = None
    stop_loss: float | None = None
    import_source: ImportSource = ImportSource.MANUAL

    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def is_open(self) -> bool:
        """Check if the trade is still open."""
        return self.status == TradeStatus.OPEN

    @property
    def is_closed(self) -> bool:
        """Check if the trade has been closed with an exit price."""
        return self.status == TradeStatus.CLOSED and self.exit_price is not None


@dataclass
class TradeInput:
    """User-editable fields of a trade."""

    symbol: str
    direction: Direction
    entry_price: float
    entry_date: datetime
    quantity: float
    exit_price: float | None = None
    exit_date: datetime | None = None
    fees: float = 0.0
    status: TradeStatus | None = None
    setup: str | None = None
    tags: list[str] | None = None
    notes: str | None = None
    stop_loss: float | None = None
    import_source: ImportSource = ImportSource.MANUAL


@dataclass
class TradeFilter:
    """Filters applied when listing trades."""

    symbol: str | None = None
    direction: Direction | None = None
    status: TradeStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    setup: str | None = None
    tags: list[str] | None = None


@dataclass
class TradePage:
    """One page of trades plus the total number of matches."""

    trades: list[Trade]
    count: int


@dataclass
class TradeScreenshot:
    """A screenshot file attached to a trade."""

    id: str
    trade_id: str
    path: str
    screenshot_type: ScreenshotType
    created_at: datetime
