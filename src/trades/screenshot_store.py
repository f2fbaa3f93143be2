# src/trades/screenshot_store.py
"""Storage for chart screenshots attached to trades."""
import logging
import uuid
from datetime import datetime
from pathlib import Path

import aiofiles

from src.storage import JsonRecordFile, sanitize_file_name, storage_key
from src.trades.models import ScreenshotType, TradeScreenshot
from src.trades.settings import TradeSettings

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


class ScreenshotStore:
    """Saves screenshot files under {screenshot_dir}/{storage_key(user_id)}/ with an index file."""

    def __init__(self, settings: TradeSettings) -> None:
        self._root = Path(settings.screenshot_dir)
        self._root.mkdir(parents=True, exist_ok=True)
        self._indexes: dict[str, JsonRecordFile] = {}

    def _index_for(self, user_id: str) -> JsonRecordFile:
        if user_id not in self._indexes:
            user_dir = self._root / storage_key(user_id)
            self._indexes[user_id] = JsonRecordFile(user_dir / "index.json")
        return self._indexes[user_id]

    def _to_record(self, user_id: str, screenshot: TradeScreenshot) -> dict:
        return {
            "id": screenshot.id,
            "user_id": user_id,
            "trade_id": screenshot.trade_id,
            "path": screenshot.path,
            "screenshot_type": screenshot.screenshot_type.value,
            "created_at": screenshot.created_at.isoformat(),
        }

    def _from_record(self, data: dict) -> TradeScreenshot:
        return TradeScreenshot(
            id=data["id"],
            trade_id=data["trade_id"],
            path=data["path"],
            screenshot_type=ScreenshotType(data["screenshot_type"]),
            created_at=datetime.fromisoformat(data["created_at"]),
        )

    async def add(
        self,
        user_id: str,
        trade_id: str,
        file_name: str,
        data: bytes,
        screenshot_type: ScreenshotType = ScreenshotType.OTHER,
    ) -> TradeScreenshot:
        """Store a screenshot for a trade.

        Raises:
            ValueError: If the file is empty or not an image.
        """
        safe_name = sanitize_file_name(file_name)
        if Path(safe_name).suffix.lower() not in ALLOWED_EXTENSIONS:
            raise ValueError(f"Unsupported screenshot type: {file_name}")
        if not data:
            raise ValueError("Screenshot file is empty")

        index = self._index_for(user_id)
        screenshot_id = str(uuid.uuid4())
        path = index.path.parent / f"{screenshot_id}_{safe_name}"

        async with aiofiles.open(path, "wb") as f:
            await f.write(data)

        screenshot = TradeScreenshot(
            id=screenshot_id,
            trade_id=trade_id,
            path=str(path),
            screenshot_type=screenshot_type,
            created_at=datetime.now(),
        )

        async with index.lock:
            records = await index.read()
            records.append(self._to_record(user_id, screenshot))
            await index.write(records)

        logger.info(f"Added {screenshot_type.value} screenshot to trade {trade_id}")
        return screenshot

    async def list_for_trade(self, user_id: str, trade_id: str) -> list[TradeScreenshot]:
        records = await self._index_for(user_id).read()
        return [
            self._from_record(r)
            for r in records
            if r["trade_id"] == trade_id and r["user_id"] == user_id
        ]

    async def delete(self, user_id: str, screenshot_id: str) -> bool:
        """Delete a screenshot record and its file."""
        index = self._index_for(user_id)
        async with index.lock:
            records = await index.read()
            match = next(
                (r for r in records if r["id"] == screenshot_id and r["user_id"] == user_id),
                None,
            )
            if match is None:
                return False
            records.remove(match)
            await index.write(records)

        Path(match["path"]).unlink(missing_ok=True)
        return True

    async def delete_for_trade(self, user_id: str, trade_id: str) -> int:
        """Delete every screenshot attached to a trade; returns how many went."""
        screenshots = await self.list_for_trade(user_id, trade_id)
        for screenshot in screenshots:
            await self.delete(user_id, screenshot.id)
        return len(screenshots)
