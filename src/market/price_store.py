# src/market/price_store.py
"""Price data store with a query cache and update subscriptions."""
import logging
import time
from collections import defaultdict
from pathlib import Path
from typing import Callable

from src.market.models import PriceBar, Timeframe
from src.market.settings import MarketDataSettings
from src.storage import JsonRecordFile, storage_key

logger = logging.getLogger(__name__)

CacheKey = tuple[str, Timeframe, int | None, int | None]
PriceCallback = Callable[[PriceBar], None]


class PriceDataStore:
    """Stores OHLCV bars in one JSON file per symbol and timeframe.

    Query results are cached for ``cache_ttl_seconds``. Saving bars
    invalidates every cached query for the affected symbol/timeframe and
    notifies subscribers of each saved bar.
    """

    def __init__(
        self,
        settings: MarketDataSettings,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings
        self._data_dir = Path(settings.data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._clock = clock
        self._files: dict[tuple[str, Timeframe], JsonRecordFile] = {}
        self._cache: dict[CacheKey, tuple[float, list[PriceBar]]] = {}
        self._subscribers: dict[tuple[str, Timeframe], list[PriceCallback]] = defaultdict(list)

    def _file_for(self, symbol: str, timeframe: Timeframe) -> JsonRecordFile:
        key = (symbol, timeframe)
        if key not in self._files:
            name = f"{storage_key(symbol)}__{timeframe.value}.json"
            self._files[key] = JsonRecordFile(self._data_dir / name)
        return self._files[key]

    def _bar_to_dict(self, bar: PriceBar) -> dict:
        return {
            "symbol": bar.symbol,
            "timeframe": bar.timeframe.value,
            "time": bar.time,
            "open": bar.open,
            "high": bar.high,
            "low": bar.low,
            "close": bar.close,
            "volume": bar.volume,
        }

    def _dict_to_bar(self, data: dict) -> PriceBar:
        return PriceBar(
            symbol=data["symbol"],
            timeframe=Timeframe(data["timeframe"]),
            time=data["time"],
            open=data["open"],
            high=data["high"],
            low=data["low"],
            close=data["close"],
            volume=data.get("volume", 0.0),
        )

    async def get(
        self,
        symbol: str,
        timeframe: Timeframe,
        start: int | None = None,
        end: int | None = None,
        use_cache: bool = True,
    ) -> list[PriceBar]:
        """Get bars for a symbol and timeframe in time order.

        Args:
            symbol: Ticker symbol.
            timeframe: Candle timeframe.
            start: Earliest bar time (epoch seconds, inclusive).
            end: Latest bar time (epoch seconds, inclusive).
            use_cache: Serve from and populate the query cache.

        Returns:
            Matching bars sorted by time.
        """
        cache_key = (symbol, timeframe, start, end)
        now = self._clock()

        if use_cache and cache_key in self._cache:
            cached_at, bars = self._cache[cache_key]
            if now - cached_at < self._settings.cache_ttl_seconds:
                return list(bars)

        records = await self._file_for(symbol, timeframe).read()
        bars = sorted(
            (self._dict_to_bar(r) for r in records if r["symbol"] == symbol),
            key=lambda b: b.time,
        )
        if start is not None:
            bars = [b for b in bars if b.time >= start]
        if end is not None:
            bars = [b for b in bars if b.time <= end]

        self._cache[cache_key] = (now, bars)
        return list(bars)

    async def save(self, bars: list[PriceBar]) -> int:
        """Insert or replace bars keyed on (symbol, timeframe, time).

        Returns:
            Number of bars written.
        """
        grouped: dict[tuple[str, Timeframe], list[PriceBar]] = defaultdict(list)
        for bar in bars:
            if bar.high < bar.low:
                raise ValueError(f"Bar at {bar.time} for {bar.symbol} has high below low")
            grouped[(bar.symbol, bar.timeframe)].append(bar)

        for (symbol, timeframe), group in grouped.items():
            record_file = self._file_for(symbol, timeframe)
            async with record_file.lock:
                records = await record_file.read()
                others = [r for r in records if r["symbol"] != symbol]
                existing = {r["time"]: r for r in records if r["symbol"] == symbol}
                for bar in group:
                    existing[bar.time] = self._bar_to_dict(bar)
                await record_file.write(others + [existing[t] for t in sorted(existing)])

            self._invalidate(symbol, timeframe)
            self._notify(symbol, timeframe, group)

        logger.info(f"Saved {len(bars)} bar(s) across {len(grouped)} series")
        return len(bars)

    def _invalidate(self, symbol: str, timeframe: Timeframe) -> None:
        """Drop cached queries for one symbol/timeframe."""
        stale = [key for key in self._cache if key[0] == symbol and key[1] == timeframe]
        for key in stale:
            del self._cache[key]

    def _notify(self, symbol: str, timeframe: Timeframe, bars: list[PriceBar]) -> None:
        for callback in list(self._subscribers.get((symbol, timeframe), [])):
            for bar in bars:
                try:
                    callback(bar)
                except Exception as e:
                    logger.error(f"Price subscriber failed for {symbol} {timeframe.value}: {e}")

    def subscribe(
        self, symbol: str, timeframe: Timeframe, callback: PriceCallback
    ) -> Callable[[], None]:
        """Call ``callback`` with every bar saved for a symbol/timeframe.

        Returns:
            A function that removes the subscription.
        """
        key = (symbol, timeframe)
        self._subscribers[key].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers.get(key, []):
                self._subscribers[key].remove(callback)

        return unsubscribe

    async def available_symbols(self) -> list[str]:
        """Symbols that have stored bars, sorted."""
        symbols = {symbol for symbol, _ in await self._series()}
        return sorted(symbols)

    async def available_timeframes(self, symbol: str) -> list[Timeframe]:
        """Timeframes stored for a symbol, shortest first."""
        timeframes = {tf for s, tf in await self._series() if s == symbol}
        return sorted(timeframes, key=lambda tf: tf.minutes)

    async def _series(self) -> list[tuple[str, Timeframe]]:
        """(symbol, timeframe) of every non-empty series on disk."""
        series: list[tuple[str, Timeframe]] = []
        for path in sorted(self._data_dir.glob("*__*.json")):
            records = await JsonRecordFile(path).read()
            if records:
                series.append((records[0]["symbol"], Timeframe(records[0]["timeframe"])))
        return series
