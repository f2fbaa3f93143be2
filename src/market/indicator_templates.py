# src/market/indicator_templates.py
"""Reusable indicator settings saved by users."""
import logging
import uuid
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from src.market.models import IndicatorTemplate, IndicatorType
from src.market.settings import MarketDataSettings
from src.storage import JsonRecordFile

logger = logging.getLogger(__name__)

# Settings each indicator accepts; the int-valued ones are bar counts.
SETTING_KEYS: dict[IndicatorType, set[str]] = {
    IndicatorType.SMA: {"period"},
    IndicatorType.EMA: {"period"},
    IndicatorType.BOLLINGER: {"period", "deviation"},
    IndicatorType.VWAP: set(),
    IndicatorType.RSI: {"period"},
    IndicatorType.MACD: {"fast", "slow", "signal"},
}
_FLOAT_KEYS = {"deviation"}


def default_settings(indicator_type: IndicatorType, market: MarketDataSettings) -> dict[str, float]:
    """Settings used when no template is picked for an indicator."""
    defaults: dict[IndicatorType, dict[str, float]] = {
        IndicatorType.SMA: {"period": market.sma_period},
        IndicatorType.EMA: {"period": market.ema_period},
        IndicatorType.BOLLINGER: {
            "period": market.bollinger_period,
            "deviation": market.bollinger_deviation,
        },
        IndicatorType.VWAP: {},
        IndicatorType.RSI: {"period": 14},
        IndicatorType.MACD: {"fast": 12, "slow": 26, "signal": 9},
    }
    return dict(defaults[indicator_type])


def validate_settings(indicator_type: IndicatorType, settings: dict) -> dict[str, float]:
    """Check template settings and coerce bar counts to int.

    Raises:
        ValueError: On unknown keys, non-positive values, or a MACD whose
            fast period is not shorter than its slow one.
    """
    allowed = SETTING_KEYS[indicator_type]
    unknown = set(settings) - allowed
    if unknown:
        raise ValueError(
            f"Unknown {indicator_type.value} settings: {sorted(unknown)}; allowed: {sorted(allowed)}"
        )

    cleaned: dict[str, float] = {}
    for key, value in settings.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"{indicator_type.value} {key} must be a positive number, got {value!r}")
        if key in _FLOAT_KEYS:
            cleaned[key] = float(value)
        elif float(value) != int(value):
            raise ValueError(f"{indicator_type.value} {key} must be a whole number of bars, got {value}")
        else:
            cleaned[key] = int(value)

    if indicator_type == IndicatorType.MACD:
        fast, slow = cleaned.get("fast", 12), cleaned.get("slow", 26)
        if fast >= slow:
            raise ValueError(f"MACD fast period {fast} must be below slow period {slow}")

    return cleaned


class IndicatorTemplateStore:
    """Keeps indicator templates in one JSON file.

    A user sees their own templates plus every public one. Only the
    owner may replace or delete a template.
    """

    def __init__(self, settings: MarketDataSettings) -> None:
        self._file = JsonRecordFile(Path(settings.templates_file))

    def _to_record(self, template: IndicatorTemplate) -> dict:
        return {
            "id": template.id,
            "user_id": template.user_id,
            "name": template.name,
            "indicator_type": template.indicator_type.value,
            "settings": template.settings,
            "is_public": template.is_public,
            "created_at": template.created_at.isoformat(),
            "updated_at": template.updated_at.isoformat(),
        }

    def _from_record(self, data: dict) -> IndicatorTemplate:
        return IndicatorTemplate(
            id=data["id"],
            user_id=data["user_id"],
            name=data["name"],
            indicator_type=IndicatorType(data["indicator_type"]),
            settings=data.get("settings") or {},
            is_public=data.get("is_public", False),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )

    async def save(self, template: IndicatorTemplate) -> IndicatorTemplate:
        """Insert a template, or replace the owner's template with the same ID.

        Raises:
            ValueError: If the name is blank, the settings are invalid, or
                the ID belongs to another user's template.
        """
        if not template.name or not template.name.strip():
            raise ValueError("An indicator template needs a name")

        template = replace(
            template,
            id=template.id or str(uuid.uuid4()),
            name=template.name.strip(),
            settings=validate_settings(template.indicator_type, template.settings),
            updated_at=datetime.now(),
        )

        async with self._file.lock:
            records = await self._file.read()
            for index, record in enumerate(records):
                if record["id"] != template.id:
                    continue
                if record["user_id"] != template.user_id:
                    raise ValueError(f"Template {template.id} belongs to another user")
                template = replace(
                    template, created_at=datetime.fromisoformat(record["created_at"])
                )
                records[index] = self._to_record(template)
                break
            else:
                records.append(self._to_record(template))
            await self._file.write(records)

        logger.info(f"Saved {template.indicator_type.value} template {template.name} for {template.user_id}")
        return template

    async def list_templates(self, user_id: str | None = None) -> list[IndicatorTemplate]:
        """The user's templates and all public ones; public only without a user."""
        templates = [self._from_record(r) for r in await self._file.read()]
        visible = [t for t in templates if t.is_public or (user_id and t.user_id == user_id)]
        return sorted(visible, key=lambda t: t.name.lower())

    async def by_type(
        self, indicator_type: IndicatorType, user_id: str | None = None
    ) -> list[IndicatorTemplate]:
        """Visible templates for one indicator."""
        return [
            t for t in await self.list_templates(user_id)
            if t.indicator_type == indicator_type
        ]

    async def get(self, template_id: str) -> IndicatorTemplate | None:
        for record in await self._file.read():
            if record["id"] == template_id:
                return self._from_record(record)
        return None

    async def delete(self, template_id: str, user_id: str) -> bool:
        """Delete one of the user's own templates."""
        async with self._file.lock:
            records = await self._file.read()
            remaining = [
                r for r in records
                if not (r["id"] == template_id and r["user_id"] == user_id)
            ]
            if len(remaining) == len(records):
                logger.warning(f"Template {template_id} not deletable by user {user_id}")
                return False
            await self._file.write(remaining)
        return True
