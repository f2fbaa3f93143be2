# src/market/chart_patterns.py
"""Saved chart patterns and matching against live prices."""
import logging
import uuid
from dataclasses import asdict, replace
from datetime import datetime
from pathlib import Path

from src.market.models import ChartPattern, PatternBar, Timeframe
from src.market.pattern_similarity import calculate_pattern_similarity
from src.market.settings import MarketDataSettings
from src.storage import JsonRecordFile

logger = logging.getLogger(__name__)


class ChartPatternStore:
    """Keeps chart patterns in a single JSON file shared by all users.

    System patterns are visible to everyone and cannot be deleted.
    """

    def __init__(self, settings: MarketDataSettings) -> None:
        self._file = JsonRecordFile(Path(settings.patterns_file))

    def _to_record(self, pattern: ChartPattern) -> dict:
        return {
            "id": pattern.id,
            "name": pattern.name,
            "symbol": pattern.symbol,
            "timeframe": pattern.timeframe.value,
            "bars": [asdict(bar) for bar in pattern.bars],
            "description": pattern.description,
            "thumbnail_path": pattern.thumbnail_path,
            "created_by": pattern.created_by,
            "is_system": pattern.is_system,
            "metadata": pattern.metadata,
            "created_at": pattern.created_at.isoformat(),
            "updated_at": pattern.updated_at.isoformat(),
        }

    def _from_record(self, data: dict) -> ChartPattern:
        return ChartPattern(
            id=data["id"],
            name=data["name"],
            symbol=data["symbol"],
            timeframe=Timeframe(data["timeframe"]),
            bars=[PatternBar(**bar) for bar in data["bars"]],
            description=data.get("description"),
            thumbnail_path=data.get("thumbnail_path"),
            created_by=data.get("created_by"),
            is_system=data.get("is_system", False),
            metadata=data.get("metadata") or {},
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )

    async def save(self, pattern: ChartPattern) -> ChartPattern:
        """Insert a pattern, or replace the one with the same ID.

        A blank ID gets a fresh UUID. ``updated_at`` is always refreshed.

        Raises:
            ValueError: If the pattern has no bars or a bar has high below low.
        """
        if not pattern.bars:
            raise ValueError("A chart pattern needs at least one bar")
        for bar in pattern.bars:
            if bar.high < bar.low:
                raise ValueError(f"Pattern bar at {bar.time} has high below low")

        pattern = replace(
            pattern,
            id=pattern.id or str(uuid.uuid4()),
            updated_at=datetime.now(),
        )

        async with self._file.lock:
            records = await self._file.read()
            for index, record in enumerate(records):
                if record["id"] == pattern.id:
                    pattern = replace(
                        pattern, created_at=datetime.fromisoformat(record["created_at"])
                    )
                    records[index] = self._to_record(pattern)
                    break
            else:
                records.append(self._to_record(pattern))
            await self._file.write(records)

        return pattern

    async def list_patterns(
        self, symbol: str | None = None, timeframe: Timeframe | None = None
    ) -> list[ChartPattern]:
        patterns = [self._from_record(r) for r in await self._file.read()]
        if symbol:
            patterns = [p for p in patterns if p.symbol == symbol]
        if timeframe:
            patterns = [p for p in patterns if p.timeframe == timeframe]
        return patterns

    async def get(self, pattern_id: str) -> ChartPattern | None:
        for pattern in await self.list_patterns():
            if pattern.id == pattern_id:
                return pattern
        return None

    async def delete(self, pattern_id: str, user_id: str) -> bool:
        """Delete a pattern the user created. System patterns are never deleted."""
        async with self._file.lock:
            records = await self._file.read()
            remaining = [
                r for r in records
                if not (
                    r["id"] == pattern_id
                    and r.get("created_by") == user_id
                    and not r.get("is_system", False)
                )
            ]
            if len(remaining) == len(records):
                logger.warning(f"Pattern {pattern_id} not deletable by user {user_id}")
                return False
            await self._file.write(remaining)
        return True

    async def rank_matches(
        self,
        closes: list[float],
        symbol: str | None = None,
        timeframe: Timeframe | None = None,
    ) -> list[tuple[ChartPattern, int]]:
        """Score every stored pattern against a price series, best match first."""
        patterns = await self.list_patterns(symbol=symbol, timeframe=timeframe)
        scored = [(p, calculate_pattern_similarity(closes, p.closes)) for p in patterns]
        return sorted(scored, key=lambda item: item[1], reverse=True)
