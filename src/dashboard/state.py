# src/dashboard/state.py
"""Dashboard state management."""
import asyncio
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, ClassVar, Coroutine, TypeVar

from src.config.settings import Settings
from src.dashboard.models import AlertEvent, AlertLevel, AlertType
from src.journal import JournalManager
from src.market import (
    ChartPatternStore,
    ChartPreferenceStore,
    IndicatorEngine,
    IndicatorTemplateStore,
    PriceDataStore,
)
from src.risk import PositionSizer

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONFIG_PATH = Path(os.environ.get("JOURNAL_CONFIG", "config/settings.yaml"))


class DashboardState:
    """Singleton state manager for the dashboard.

    Owns the journal manager, market data stores and the position sizer so
    every page shares them across Streamlit reruns, and keeps the alert
    history.
    """

    _instance: ClassVar["DashboardState | None"] = None

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize dashboard state.

        Args:
            settings: Application settings. Loaded from config/settings.yaml
                when present, otherwise defaults.
        """
        if settings is None:
            settings = Settings.from_yaml(CONFIG_PATH) if CONFIG_PATH.exists() else Settings()

        self.settings = settings
        self.user_id = settings.user.user_id

        self.journal = JournalManager(settings.journal, settings.trades)
        self.prices = PriceDataStore(settings.market_data)
        self.patterns = ChartPatternStore(settings.market_data)
        self.templates = IndicatorTemplateStore(settings.market_data)
        self.preferences = ChartPreferenceStore(settings.market_data)
        self.indicators = IndicatorEngine()
        self.sizer = PositionSizer(settings.risk)

        self._loop = asyncio.new_event_loop()
        self._alerts: list[AlertEvent] = []
        self._max_alerts: int = settings.dashboard.max_alerts_displayed

    @classmethod
    def get_instance(cls) -> "DashboardState":
        """Get or create the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance (for testing)."""
        if cls._instance is not None:
            cls._instance._loop.close()
        cls._instance = None

    def run(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run a store coroutine to completion from a page script."""
        return self._loop.run_until_complete(coro)

    @property
    def alerts(self) -> list[AlertEvent]:
        """Get all alerts, most recent first."""
        return self._alerts

    @property
    def unread_count(self) -> int:
        """Count of unread alerts."""
        return sum(1 for alert in self._alerts if not alert.read)

    def add_alert(
        self,
        alert_type: AlertType,
        level: AlertLevel,
        title: str,
        message: str,
        symbol: str | None = None,
        trade_id: str | None = None,
    ) -> None:
        """Add a new alert to history, newest first."""
        alert = AlertEvent(
            timestamp=datetime.now(),
            alert_type=alert_type,
            level=level,
            title=title,
            message=message,
            symbol=symbol,
            trade_id=trade_id,
        )
        self._alerts.insert(0, alert)

        if level == AlertLevel.ERROR:
            logger.error(f"{title}: {message}")

        # Trim to max alerts
        if len(self._alerts) > self._max_alerts:
            self._alerts = self._alerts[: self._max_alerts]

    def clear_alerts(self) -> None:
        """Clear all alerts."""
        self._alerts = []

    def mark_all_read(self) -> None:
        """Mark all alerts as read."""
        for alert in self._alerts:
            alert.read = True
