# src/market/downsampling.py
"""Aggregate candles into a larger timeframe."""
import logging

from src.market.models import PriceBar, Timeframe

logger = logging.getLogger(__name__)


def downsample(
    bars: list[PriceBar],
    from_timeframe: Timeframe,
    to_timeframe: Timeframe,
) -> list[PriceBar]:
    """Merge consecutive bars into bars of a larger timeframe.

    Bars are taken in chunks of ``to / from`` minutes. Each output bar opens
    at the first bar's open and time, closes at the last bar's close, and
    carries the chunk's highest high, lowest low and summed volume. A short
    final chunk still produces a bar.

    Args:
        bars: Bars in time order, all of ``from_timeframe``.
        from_timeframe: Timeframe of the input.
        to_timeframe: Target timeframe.

    Returns:
        The aggregated bars, or the input unchanged if the target is not
        larger than the source.
    """
    if not bars:
        return []

    from_minutes = from_timeframe.minutes
    to_minutes = to_timeframe.minutes

    if from_minutes >= to_minutes:
        logger.error(
            f"Cannot downsample {from_timeframe.value} to {to_timeframe.value}: "
            "target must be a larger timeframe"
        )
        return bars

    ratio = to_minutes // from_minutes
    result: list[PriceBar] = []

    for start in range(0, len(bars), ratio):
        chunk = bars[start:start + ratio]
        first, last = chunk[0], chunk[-1]
        result.append(
            PriceBar(
                symbol=first.symbol,
                timeframe=to_timeframe,
                time=first.time,
                open=first.open,
                high=max(b.high for b in chunk),
                low=min(b.low for b in chunk),
                close=last.close,
                volume=sum(b.volume or 0.0 for b in chunk),
            )
        )

    return result


def source_timeframe_for(
    available: list[Timeframe], target: Timeframe
) -> Timeframe | None:
    """Pick the stored timeframe to build ``target`` candles from.

    Returns ``target`` itself when it is stored, otherwise the largest
    stored timeframe that divides it evenly, or None if there is none.
    """
    if target in available:
        return target

    candidates = [
        tf for tf in available
        if tf.minutes < target.minutes and target.minutes % tf.minutes == 0
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda tf: tf.minutes)
