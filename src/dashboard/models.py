# src/dashboard/models.py
"""Data models for the dashboard."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class AlertType(Enum):
    """Types of alerts."""

    TRADE_LOGGED = "trade_logged"
    TRADE_CLOSED = "trade_closed"
    TRADE_DELETED = "trade_deleted"
    IMPORT_COMPLETED = "import_completed"
    PRICES_LOADED = "prices_loaded"
    SYSTEM_ERROR = "system_error"


class AlertLevel(Enum):
    """Severity levels for alerts."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


ALERT_ICONS: dict[AlertType, str] = {
    AlertType.TRADE_LOGGED: "📝",
    AlertType.TRADE_CLOSED: "🏁",
    AlertType.TRADE_DELETED: "🗑️",
    AlertType.IMPORT_COMPLETED: "📥",
    AlertType.PRICES_LOADED: "📈",
    AlertType.SYSTEM_ERROR: "⚠️",
}


@dataclass
class AlertEvent:
    """A notice shown in the dashboard's alert center.

    ``trade_id`` links the alert to the trade it is about, if any.
    """

    timestamp: datetime
    alert_type: AlertType
    level: AlertLevel
    title: str
    message: str
    symbol: str | None = None
    trade_id: str | None = None
    read: bool = field(default=False)

    @property
    def icon(self) -> str:
        return ALERT_ICONS.get(self.alert_type, "🔔")
