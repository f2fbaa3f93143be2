# src/risk/settings.py
"""Settings for the position size calculator."""
from pydantic import BaseModel, Field

from src.risk.models import SizingMethod


class RiskSettings(BaseModel):
    """Defaults for the position size calculator."""

    account_size: float = Field(default=10000.0, gt=0)
    sizing_method: SizingMethod = SizingMethod.PERCENT
    risk_percent: float = Field(default=2.0, gt=0, le=100)
    fixed_risk_amount: float = Field(default=200.0, gt=0)
    default_risk_reward: float = Field(default=2.0, gt=0, le=20)
