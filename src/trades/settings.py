# src/trades/settings.py
"""Settings for the trades module."""
from pydantic import BaseModel, Field, model_validator


class TradeSettings(BaseModel):
    """Configuration settings for the trade book.

    Attributes:
        data_dir: Directory holding one JSON file of trades per user.
        screenshot_dir: Directory for trade screenshot files.
        default_page_size: Page size used when callers do not pass one.
        max_page_size: Upper bound on requested page sizes.
    """

    data_dir: str = "data/trades"
    screenshot_dir: str = "data/media/screenshots"

    default_page_size: int = Field(default=10, ge=1)
    max_page_size: int = Field(default=100, ge=1, le=1000)

    @model_validator(mode="after")
    def check_page_sizes(self) -> "TradeSettings":
        """default_page_size may not exceed max_page_size."""
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size cannot exceed max_page_size")
        return self
