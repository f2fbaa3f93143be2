# tests/dashboard/test_models.py
"""Tests for dashboard models."""
from datetime import datetime

from src.dashboard.models import AlertEvent, AlertLevel, AlertType


class TestAlertEvent:
    """Tests for AlertEvent model."""

    def test_create_alert_event(self) -> None:
        """Should create an alert event with all fields."""
        event = AlertEvent(
            timestamp=datetime(2026, 1, 17, 9, 30, 0),
            alert_type=AlertType.TRADE_LOGGED,
            level=AlertLevel.INFO,
            title="Trade Logged",
            message="LONG 100 NVDA @ $140.00",
            symbol="NVDA",
        )

        assert event.alert_type == AlertType.TRADE_LOGGED
        assert event.level == AlertLevel.INFO
        assert event.symbol == "NVDA"
        assert event.trade_id is None
        assert not event.read

    def test_alert_types(self) -> None:
        """Should have all expected alert types."""
        assert AlertType.TRADE_LOGGED.value == "trade_logged"
        assert AlertType.TRADE_CLOSED.value == "trade_closed"
        assert AlertType.TRADE_DELETED.value == "trade_deleted"
        assert AlertType.PRICES_LOADED.value == "prices_loaded"
        assert AlertType.IMPORT_COMPLETED.value == "import_completed"
        assert AlertType.SYSTEM_ERROR.value == "system_error"

    def test_alert_levels(self) -> None:
        """Should have all expected alert levels."""
        assert AlertLevel.INFO.value == "info"
        assert AlertLevel.WARNING.value == "warning"
        assert AlertLevel.ERROR.value == "error"

    def test_every_alert_type_has_an_icon(self) -> None:
        """Each alert type should map to its own icon."""
        for alert_type in AlertType:
            event = AlertEvent(
                timestamp=datetime(2026, 1, 17, 9, 30, 0),
                alert_type=alert_type,
                level=AlertLevel.INFO,
                title="t",
                message="m",
            )
            assert event.icon != "🔔"
