# src/market/indicators.py
"""IndicatorEngine for chart overlay indicators."""

import pandas as pd
import pandas_ta as ta

from src.market.models import BollingerBands, PriceBar


class IndicatorEngine:
    """Calculates chart overlay series from closing prices.

    Overlay methods return one value per bar from the first bar where the
    indicator is defined, so callers align them to the end of the price
    series.
    """

    def sma(self, closes: list[float], period: int) -> list[float]:
        """
        Calculate a simple moving average.

        Args:
            closes: Closing prices in time order.
            period: Number of bars averaged.

        Returns:
            len(closes) - period + 1 averages, the first covering
            closes[0:period]. Empty if there are fewer closes than period.
        """
        if period < 1:
            raise ValueError(f"period must be >= 1, got {period}")
        if len(closes) < period:
            return []

        sma_series = ta.sma(pd.Series(closes, dtype=float), length=period)
        if sma_series is None:
            return []

        return [float(v) for v in sma_series.iloc[period - 1:]]

    def ema(self, closes: list[float], period: int) -> list[float]:
        """
        Calculate an exponential moving average.

        The average is seeded with the first close and updated with
        multiplier 2 / (period + 1), giving one value per close.

        Args:
            closes: Closing prices in time order.
            period: EMA period.

        Returns:
            One EMA value per close, or empty if period >= len(closes).
        """
        if period < 1:
            raise ValueError(f"period must be >= 1, got {period}")
        if not closes or period >= len(closes):
            return []

        ema_series = pd.Series(closes, dtype=float).ewm(span=period, adjust=False).mean()
        return [float(v) for v in ema_series]

    def bollinger_bands(
        self, closes: list[float], period: int = 20, deviation: float = 2.0
    ) -> BollingerBands:
        """
        Calculate Bollinger Bands.

        The middle band is the SMA; upper and lower bands sit ``deviation``
        population standard deviations away from it.

        Args:
            closes: Closing prices in time order.
            period: Window length.
            deviation: Band width in standard deviations.

        Returns:
            BollingerBands aligned like sma(), or empty bands if
            period >= len(closes).
        """
        if period < 1:
            raise ValueError(f"period must be >= 1, got {period}")
        if not closes or period >= len(closes):
            return BollingerBands(upper=[], middle=[], lower=[])

        window = pd.Series(closes, dtype=float).rolling(window=period)
        middle = window.mean().iloc[period - 1:]
        std_dev = window.std(ddof=0).iloc[period - 1:]

        return BollingerBands(
            upper=[float(v) for v in middle + std_dev * deviation],
            middle=[float(v) for v in middle],
            lower=[float(v) for v in middle - std_dev * deviation],
        )

    def vwap(self, bars: list[PriceBar]) -> list[float]:
        """
        Calculate the running volume-weighted average price.

        Uses the typical price (high + low + close) / 3. Before any volume
        has traded the typical price itself is returned.
        """
        if not bars:
            return []

        frame = pd.DataFrame(
            {
                "typical": [(b.high + b.low + b.close) / 3 for b in bars],
                "volume": [b.volume or 0.0 for b in bars],
            }
        )
        cumulative_volume = frame["volume"].cumsum()
        cumulative_value = (frame["typical"] * frame["volume"]).cumsum()
        vwap_series = (cumulative_value / cumulative_volume).where(
            cumulative_volume > 0, frame["typical"]
        )
        return [float(v) for v in vwap_series]

    def rsi(self, closes: list[float], period: int = 14) -> float:
        """
        Calculate RSI (Relative Strength Index).

        Args:
            closes: Closing prices in time order.
            period: RSI period (default 14)

        Returns:
            Current RSI value (0-100), or 50.0 if insufficient data
        """
        # RSI needs at least period+1 values to calculate properly
        if len(closes) < period + 1:
            return 50.0

        rsi_series = ta.rsi(pd.Series(closes, dtype=float), length=period)

        if rsi_series is None or len(rsi_series) == 0:
            return 50.0

        last_rsi = rsi_series.iloc[-1]

        # Flat prices give NaN
        if pd.isna(last_rsi):
            return 50.0

        return max(0.0, min(100.0, float(last_rsi)))

    def macd(
        self,
        closes: list[float],
        fast: int = 12,
        slow: int = 26,
        signal: int = 9,
    ) -> tuple[float, str]:
        """
        Calculate the MACD histogram and its trend.

        Args:
            closes: Closing prices in time order.
            fast: Fast EMA period (default 12)
            slow: Slow EMA period (default 26)
            signal: Signal line period (default 9)

        Returns:
            Tuple of (histogram_value, trend_direction)
            trend_direction is "rising", "falling", or "flat"
        """
        if len(closes) < slow + signal:
            return (0.0, "flat")

        macd_df = ta.macd(pd.Series(closes, dtype=float), fast=fast, slow=slow, signal=signal)
        if macd_df is None or len(macd_df) == 0:
            return (0.0, "flat")

        histogram_col = f"MACDh_{fast}_{slow}_{signal}"
        if histogram_col not in macd_df.columns:
            return (0.0, "flat")

        histogram = macd_df[histogram_col].dropna()
        if histogram.empty:
            return (0.0, "flat")

        histogram_value = float(histogram.iloc[-1])
        last_3_values = histogram.iloc[-3:].tolist()

        if len(last_3_values) < 2:
            trend = "flat"
        elif all(b > a for a, b in zip(last_3_values, last_3_values[1:])):
            trend = "rising"
        elif all(b < a for a, b in zip(last_3_values, last_3_values[1:])):
            trend = "falling"
        else:
            trend = "flat"

        return (histogram_value, trend)
