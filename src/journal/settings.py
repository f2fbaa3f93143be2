# src/journal/settings.py
"""Settings for the journal module."""
from pydantic import BaseModel, Field, field_validator


class JournalSettings(BaseModel):
    """Configuration settings for the trading journal.

    Attributes:
        enabled: Whether journaling is enabled.
        data_dir: Directory to store journal entry JSON files.
        media_dir: Directory to store uploaded media.
        max_upload_mb: Largest media upload accepted.
        default_period_days: Default period for metrics calculation.
        starting_balance: Account balance the equity curve starts from.
        import_rate_limit: CSV imports allowed per user per window.
        import_rate_window: Window for the import limit, e.g. "5m".
    """

    enabled: bool = True
    data_dir: str = "data/journal"
    media_dir: str = "data/media/journal"

    max_upload_mb: float = Field(default=10.0, gt=0, le=100)

    default_period_days: int = Field(default=30, ge=1, le=365)
    starting_balance: float = Field(default=10000.0, ge=0)

    import_rate_limit: int = Field(default=10, ge=1)
    import_rate_window: str = "5m"

    @field_validator("import_rate_window")
    @classmethod
    def validate_window(cls, v: str) -> str:
        """Windows are a positive integer followed by s, m, h or d."""
        if len(v) < 2 or not v[:-1].isdigit() or int(v[:-1]) <= 0 or v[-1] not in "smhd":
            raise ValueError(f"Invalid rate window: {v}. Use forms like '30s', '5m', '1h'")
        return v
