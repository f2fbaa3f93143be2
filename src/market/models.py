# src/market/models.py
"""Data models for price data and chart patterns."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Timeframe(str, Enum):
    """Candle interval granularity."""

    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1D"
    W1 = "1W"

    @property
    def minutes(self) -> int:
        """Length of one candle in minutes."""
        return TIMEFRAME_MINUTES[self]


TIMEFRAME_MINUTES: dict[Timeframe, int] = {
    Timeframe.M1: 1,
    Timeframe.M5: 5,
    Timeframe.M15: 15,
    Timeframe.H1: 60,
    Timeframe.H4: 240,
    Timeframe.D1: 1440,
    Timeframe.W1: 10080,
}


@dataclass
class PriceBar:
    """One OHLCV candle. ``time`` is the candle open as epoch seconds."""

    symbol: str
    timeframe: Timeframe
    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @property
    def key(self) -> tuple[str, Timeframe, int]:
        """Identity of the bar for upserts."""
        return (self.symbol, self.timeframe, self.time)


@dataclass
class BollingerBands:
    """Upper, middle and lower band values, aligned with each other."""

    upper: list[float]
    middle: list[float]
    lower: list[float]


@dataclass
class PatternBar:
    """One OHLCV candle captured in a chart pattern."""

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @classmethod
    def from_price_bar(cls, bar: PriceBar) -> "PatternBar":
        return cls(bar.time, bar.open, bar.high, bar.low, bar.close, bar.volume)


@dataclass
class ChartPattern:
    """A saved price shape that charts can be compared against."""

    id: str
    name: str
    symbol: str
    timeframe: Timeframe
    bars: list[PatternBar]
    description: str | None = None
    thumbnail_path: str | None = None
    created_by: str | None = None
    is_system: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @property
    def closes(self) -> list[float]:
        """Close of each captured bar, used for similarity scoring."""
        return [bar.close for bar in self.bars]


class IndicatorType(str, Enum):
    """Indicators the charts can draw or report."""

    SMA = "sma"
    EMA = "ema"
    BOLLINGER = "bollinger"
    VWAP = "vwap"
    RSI = "rsi"
    MACD = "macd"


class ChartType(str, Enum):
    """How price bars are drawn."""

    CANDLESTICK = "candlestick"
    BAR = "bar"
    LINE = "line"
    AREA = "area"


@dataclass
class IndicatorTemplate:
    """Named indicator settings a user can reuse, e.g. a 50-period SMA."""

    id: str
    user_id: str
    name: str
    indicator_type: IndicatorType
    settings: dict[str, float] = field(default_factory=dict)
    is_public: bool = False
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)


@dataclass
class ChartPreference:
    """A user's saved chart setup. ``symbol`` None applies to every symbol."""

    id: str
    user_id: str
    name: str
    timeframe: Timeframe
    symbol: str | None = None
    chart_type: ChartType = ChartType.CANDLESTICK
    indicators: list[IndicatorType] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
