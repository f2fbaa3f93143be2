# src/market/price_csv.py
"""Load OHLCV candles from CSV files."""
import io
import logging

import pandas as pd

from src.market.models import PriceBar, Timeframe

logger = logging.getLogger(__name__)

PRICE_COLUMNS = ["time", "open", "high", "low", "close"]


class PriceCsvError(ValueError):
    """Raised when a price CSV cannot be parsed."""


def import_price_csv(text: str, symbol: str, timeframe: Timeframe) -> list[PriceBar]:
    """Parse candles from CSV text with columns time, open, high, low, close
    and an optional volume.

    ``time`` may be epoch seconds or any timestamp pandas understands;
    timezone-aware timestamps are converted to UTC.

    Returns:
        Bars sorted by time.

    Raises:
        PriceCsvError: If the file is empty, a column is missing or a value
            is not numeric, or a row has no time.
    """
    try:
        frame = pd.read_csv(io.StringIO(text), skipinitialspace=True)
    except pd.errors.EmptyDataError:
        raise PriceCsvError("CSV file is empty") from None

    frame.columns = [str(c).strip().lower() for c in frame.columns]
    missing = [col for col in PRICE_COLUMNS if col not in frame.columns]
    if missing:
        raise PriceCsvError(f"Missing required columns: {', '.join(missing)}")

    frame = frame.dropna(subset=PRICE_COLUMNS, how="all")
    if frame.empty:
        return []

    if "volume" not in frame.columns:
        frame["volume"] = 0.0

    try:
        prices = frame[["open", "high", "low", "close", "volume"]].astype(float)
    except ValueError as e:
        raise PriceCsvError(f"Non-numeric price value: {e}") from None
    if prices[["open", "high", "low", "close"]].isna().any().any():
        raise PriceCsvError("Every row needs open, high, low and close")

    times = _parse_times(frame["time"])

    bars = [
        PriceBar(
            symbol=symbol,
            timeframe=timeframe,
            time=int(t),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=0.0 if pd.isna(row.volume) else float(row.volume),
        )
        for t, row in zip(times, prices.itertuples(index=False))
    ]
    bars.sort(key=lambda b: b.time)

    logger.info(f"Parsed {len(bars)} {timeframe.value} bar(s) for {symbol}")
    return bars


def _parse_times(column: pd.Series) -> list[int]:
    """Epoch seconds from a column of epoch numbers or timestamp strings."""
    if column.isna().any() or (column.astype(str).str.strip() == "").any():
        raise PriceCsvError("Every row needs a time")

    numeric = pd.to_numeric(column, errors="coerce")
    if numeric.notna().all():
        return [int(v) for v in numeric]

    try:
        stamps = pd.to_datetime(column, utc=True)
    except (ValueError, TypeError) as e:
        raise PriceCsvError(f"Unparseable time value: {e}") from None
    if stamps.isna().any():
        raise PriceCsvError("Every row needs a time")
    return [int(ts.timestamp()) for ts in stamps]
