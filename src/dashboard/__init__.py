# src/dashboard/__init__.py
"""Streamlit dashboard for the trade journal."""

from src.dashboard.models import AlertEvent, AlertLevel, AlertType
from src.dashboard.settings import DashboardSettings

__all__ = [
    "AlertEvent",
    "AlertLevel",
    "AlertType",
    "DashboardSettings",
]
