# src/market/pattern_similarity.py
"""Score how closely a price series matches a saved pattern."""
import math

import numpy as np


def normalize(closes: list[float]) -> np.ndarray:
    """Scale a series to the 0-1 range. A flat series maps to all zeros."""
    values = np.asarray(closes, dtype=float)
    low, high = values.min(), values.max()
    price_range = high - low
    if price_range == 0:
        return np.zeros_like(values)
    return (values - low) / price_range


def calculate_pattern_similarity(
    chart_closes: list[float], pattern_closes: list[float]
) -> int:
    """Similarity score from 0 to 100 between a chart and a pattern.

    Both series are min-max normalised and the most recent
    min(len(chart), len(pattern)) points are compared. The score is
    100 - 100 * mean squared error, floored at 0 and rounded half up.

    Returns:
        Integer score, 0 if either series is empty.
    """
    if not chart_closes or not pattern_closes:
        return 0

    chart = normalize(chart_closes)
    pattern = normalize(pattern_closes)

    sample_size = min(len(chart), len(pattern))
    diff = chart[-sample_size:] - pattern[-sample_size:]
    mse = float(np.mean(diff ** 2))

    # Halves round up
    return int(math.floor(max(0.0, 100.0 - mse * 100.0) + 0.5))
