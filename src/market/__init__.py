# src/market/__init__.py
"""Market module: price bars, timeframes, indicators, chart patterns and chart setups."""

from .chart_patterns import ChartPatternStore
from .chart_preferences import ChartPreferenceStore
from .downsampling import downsample, source_timeframe_for
from .indicator_templates import IndicatorTemplateStore, default_settings
from .indicators import IndicatorEngine
from .models import (
    TIMEFRAME_MINUTES,
    BollingerBands,
    ChartPattern,
    ChartPreference,
    ChartType,
    IndicatorTemplate,
    IndicatorType,
    PatternBar,
    PriceBar,
    Timeframe,
)
from .pattern_similarity import calculate_pattern_similarity
from .price_csv import PriceCsvError, import_price_csv
from .price_store import PriceDataStore
from .settings import MarketDataSettings

__all__ = [
    "BollingerBands",
    "ChartPattern",
    "ChartPatternStore",
    "ChartPreference",
    "ChartPreferenceStore",
    "ChartType",
    "IndicatorEngine",
    "IndicatorTemplate",
    "IndicatorTemplateStore",
    "IndicatorType",
    "MarketDataSettings",
    "PatternBar",
    "PriceBar",
    "PriceCsvError",
    "PriceDataStore",
    "TIMEFRAME_MINUTES",
    "Timeframe",
    "calculate_pattern_similarity",
    "default_settings",
    "downsample",
    "import_price_csv",
    "source_timeframe_for",
]
