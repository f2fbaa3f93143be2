# src/market/settings.py
"""Settings for price data, chart patterns and chart setups."""
from pydantic import BaseModel, Field


class MarketDataSettings(BaseModel):
    """Configuration for the market data store.

    Attributes:
        data_dir: Directory holding one JSON file per symbol and timeframe.
        patterns_file: JSON file of saved chart patterns.
        templates_file: JSON file of saved indicator templates.
        preferences_dir: Directory holding one chart preference file per user.
        cache_ttl_seconds: How long a price query stays cached.
        sma_period: Default simple moving average period.
        ema_period: Default exponential moving average period.
        bollinger_period: Default Bollinger Band period.
        bollinger_deviation: Default Bollinger Band width in std-devs.
    """

    data_dir: str = "data/prices"
    patterns_file: str = "data/patterns/chart_patterns.json"
    templates_file: str = "data/charts/indicator_templates.json"
    preferences_dir: str = "data/charts/preferences"
    cache_ttl_seconds: float = Field(default=300.0, ge=0)

    sma_period: int = Field(default=20, ge=1)
    ema_period: int = Field(default=20, ge=1)
    bollinger_period: int = Field(default=20, ge=2)
    bollinger_deviation: float = Field(default=2.0, gt=0)
