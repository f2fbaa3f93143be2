# tests/dashboard/test_settings.py
"""Tests for dashboard settings."""
import pytest
from pydantic import ValidationError

from src.dashboard.settings import DashboardSettings
from src.market.models import Timeframe


class TestDashboardSettings:
    """Tests for DashboardSettings."""

    def test_defaults(self) -> None:
        settings = DashboardSettings()

        assert settings.page_size == 10
        assert settings.max_alerts_displayed == 50
        assert settings.chart_bars == 200
        assert settings.default_timeframe == Timeframe.H1
        assert settings.theme == "dark"

    def test_timeframe_from_string(self) -> None:
        assert DashboardSettings(default_timeframe="15m").default_timeframe == Timeframe.M15

    def test_page_size_bounds(self) -> None:
        with pytest.raises(ValidationError):
            DashboardSettings(page_size=0)
        with pytest.raises(ValidationError):
            DashboardSettings(page_size=101)

    def test_unknown_theme(self) -> None:
        with pytest.raises(ValidationError):
            DashboardSettings(theme="blue")
