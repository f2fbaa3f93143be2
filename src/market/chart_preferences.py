# src/market/chart_preferences.py
"""Per-user saved chart setups."""
import logging
import uuid
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from src.market.models import ChartPreference, ChartType, IndicatorType, Timeframe
from src.market.settings import MarketDataSettings
from src.storage import JsonRecordFile, storage_key

logger = logging.getLogger(__name__)


class ChartPreferenceStore:
    """Stores chart preferences in per-user JSON files: {preferences_dir}/{storage_key(user_id)}.json"""

    def __init__(self, settings: MarketDataSettings) -> None:
        self._dir = Path(settings.preferences_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._files: dict[str, JsonRecordFile] = {}

    def _file_for(self, user_id: str) -> JsonRecordFile:
        if user_id not in self._files:
            self._files[user_id] = JsonRecordFile(self._dir / f"{storage_key(user_id)}.json")
        return self._files[user_id]

    def _to_record(self, preference: ChartPreference) -> dict:
        return {
            "id": preference.id,
            "user_id": preference.user_id,
            "name": preference.name,
            "timeframe": preference.timeframe.value,
            "symbol": preference.symbol,
            "chart_type": preference.chart_type.value,
            "indicators": [i.value for i in preference.indicators],
            "created_at": preference.created_at.isoformat(),
            "updated_at": preference.updated_at.isoformat(),
        }

    def _from_record(self, data: dict) -> ChartPreference:
        return ChartPreference(
            id=data["id"],
            user_id=data["user_id"],
            name=data["name"],
            timeframe=Timeframe(data["timeframe"]),
            symbol=data.get("symbol"),
            chart_type=ChartType(data.get("chart_type", ChartType.CANDLESTICK.value)),
            indicators=[IndicatorType(i) for i in data.get("indicators", [])],
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )

    async def save(self, preference: ChartPreference) -> ChartPreference:
        """Insert a preference, or replace the one with the same ID.

        Raises:
            ValueError: If the name is blank.
        """
        if not preference.name or not preference.name.strip():
            raise ValueError("A chart preference needs a name")

        preference = replace(
            preference,
            id=preference.id or str(uuid.uuid4()),
            name=preference.name.strip(),
            indicators=list(dict.fromkeys(preference.indicators)),
            updated_at=datetime.now(),
        )

        record_file = self._file_for(preference.user_id)
        async with record_file.lock:
            records = await record_file.read()
            for index, record in enumerate(records):
                if record["id"] == preference.id and record["user_id"] == preference.user_id:
                    preference = replace(
                        preference, created_at=datetime.fromisoformat(record["created_at"])
                    )
                    records[index] = self._to_record(preference)
                    break
            else:
                records.append(self._to_record(preference))
            await record_file.write(records)

        return preference

    async def list_for_user(self, user_id: str) -> list[ChartPreference]:
        """The user's preferences, most recently updated first."""
        records = await self._file_for(user_id).read()
        preferences = [self._from_record(r) for r in records if r["user_id"] == user_id]
        # Later records win ties on updated_at
        ordered = sorted(
            enumerate(preferences), key=lambda item: (item[1].updated_at, item[0]), reverse=True
        )
        return [preference for _, preference in ordered]

    async def get(self, user_id: str, preference_id: str) -> ChartPreference | None:
        for preference in await self.list_for_user(user_id):
            if preference.id == preference_id:
                return preference
        return None

    async def get_default(
        self,
        user_id: str,
        symbol: str | None = None,
        timeframe: Timeframe | None = None,
    ) -> ChartPreference | None:
        """The newest preference for a symbol, falling back to one saved for all symbols.

        Args:
            user_id: Owner of the preferences.
            symbol: Chart symbol; None looks only at all-symbol preferences.
            timeframe: Only consider preferences for this timeframe.
        """
        preferences = await self.list_for_user(user_id)
        if timeframe is not None:
            preferences = [p for p in preferences if p.timeframe == timeframe]

        for wanted in dict.fromkeys((symbol, None)):
            for preference in preferences:
                if preference.symbol == wanted:
                    return preference
        return None

    async def delete(self, user_id: str, preference_id: str) -> bool:
        record_file = self._file_for(user_id)
        async with record_file.lock:
            records = await record_file.read()
            remaining = [
                r for r in records
                if not (r["id"] == preference_id and r["user_id"] == user_id)
            ]
            if len(remaining) == len(records):
                return False
            await record_file.write(remaining)

        logger.info(f"Deleted chart preference {preference_id} for user {user_id}")
        return True
