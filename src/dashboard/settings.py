# src/dashboard/settings.py
"""Settings for the Streamlit dashboard."""
from typing import Literal

from pydantic import BaseModel, Field

from src.market.models import Timeframe


class DashboardSettings(BaseModel):
    """Configuration for the dashboard."""

    page_size: int = Field(default=10, gt=0, le=100)
    max_alerts_displayed: int = Field(default=50, gt=0)
    chart_bars: int = Field(default=200, ge=10, le=5000)
    default_timeframe: Timeframe = Timeframe.H1
    theme: Literal["light", "dark"] = "dark"
