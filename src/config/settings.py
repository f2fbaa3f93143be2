# src/config/settings.py
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.dashboard.settings import DashboardSettings
from src.journal.settings import JournalSettings
from src.market.settings import MarketDataSettings
from src.risk.settings import RiskSettings
from src.trades.settings import TradeSettings


class SystemConfig(BaseModel):
    name: str = "Trade Journal"
    version: str = "1.0.0"


class UserConfig(BaseSettings):
    """The local account the journal runs as, read from JOURNAL_* env vars."""

    model_config = SettingsConfigDict(env_prefix="JOURNAL_")

    user_id: str = Field(default="local", min_length=1)
    display_name: str = "Trader"


class Settings(BaseModel):
    system: SystemConfig = Field(default_factory=SystemConfig)
    trades: TradeSettings = Field(default_factory=TradeSettings)
    journal: JournalSettings = Field(default_factory=JournalSettings)
    market_data: MarketDataSettings = Field(default_factory=MarketDataSettings)
    risk: RiskSettings = Field(default_factory=RiskSettings)
    dashboard: DashboardSettings = Field(default_factory=DashboardSettings)
    user: UserConfig = Field(default_factory=UserConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file with env var overrides."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        # The user section always comes from the environment
        data.pop("user", None)
        user = UserConfig()

        return cls(**data, user=user)

    def data_dirs(self) -> list[Path]:
        """Every directory the stores write to."""
        return [
            Path(self.trades.data_dir),
            Path(self.trades.screenshot_dir),
            Path(self.journal.data_dir),
            Path(self.journal.media_dir),
            Path(self.market_data.data_dir),
            Path(self.market_data.patterns_file).parent,
            Path(self.market_data.templates_file).parent,
            Path(self.market_data.preferences_dir),
        ]
