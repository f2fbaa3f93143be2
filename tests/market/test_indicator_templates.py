# tests/market/test_indicator_templates.py
"""Tests for IndicatorTemplateStore and template settings."""
from pathlib import Path

import pytest

from src.market.indicator_templates import (
    IndicatorTemplateStore,
    default_settings,
    validate_settings,
)
from src.market.models import IndicatorTemplate, IndicatorType
from src.market.settings import MarketDataSettings


def make_template(
    name: str = "Slow SMA",
    indicator_type: IndicatorType = IndicatorType.SMA,
    settings: dict | None = None,
    user_id: str = "user-1",
    is_public: bool = False,
    template_id: str = "",
) -> IndicatorTemplate:
    """Create an indicator template for testing."""
    return IndicatorTemplate(
        id=template_id,
        user_id=user_id,
        name=name,
        indicator_type=indicator_type,
        settings=settings if settings is not None else {"period": 50},
        is_public=is_public,
    )


class TestTemplateSettings:
    """Tests for default_settings and validate_settings."""

    def test_defaults_follow_market_settings(self) -> None:
        market = MarketDataSettings(sma_period=10, bollinger_period=30, bollinger_deviation=2.5)

        assert default_settings(IndicatorType.SMA, market) == {"period": 10}
        assert default_settings(IndicatorType.BOLLINGER, market) == {"period": 30, "deviation": 2.5}
        assert default_settings(IndicatorType.MACD, market) == {"fast": 12, "slow": 26, "signal": 9}
        assert default_settings(IndicatorType.VWAP, market) == {}

    def test_bar_counts_become_int(self) -> None:
        assert validate_settings(IndicatorType.SMA, {"period": 50.0}) == {"period": 50}
        assert validate_settings(IndicatorType.BOLLINGER, {"period": 20, "deviation": 2}) == {
            "period": 20,
            "deviation": 2.0,
        }

    @pytest.mark.parametrize(
        "indicator_type, settings",
        [
            (IndicatorType.SMA, {"length": 5}),
            (IndicatorType.VWAP, {"period": 5}),
            (IndicatorType.EMA, {"period": 0}),
            (IndicatorType.RSI, {"period": 14.5}),
            (IndicatorType.RSI, {"period": True}),
            (IndicatorType.EMA, {"period": "20"}),
            (IndicatorType.MACD, {"fast": 26, "slow": 12}),
        ],
    )
    def test_rejects_bad_settings(self, indicator_type: IndicatorType, settings: dict) -> None:
        with pytest.raises(ValueError):
            validate_settings(indicator_type, settings)


class TestIndicatorTemplateStore:
    """Tests for IndicatorTemplateStore."""

    @pytest.fixture
    def store(self, tmp_path: Path) -> IndicatorTemplateStore:
        return IndicatorTemplateStore(
            MarketDataSettings(templates_file=str(tmp_path / "charts" / "templates.json"))
        )

    async def test_save_assigns_id(self, store: IndicatorTemplateStore) -> None:
        saved = await store.save(make_template(name="  Slow SMA "))

        assert saved.id
        assert saved.name == "Slow SMA"
        assert (await store.get(saved.id)).settings == {"period": 50}

    async def test_save_replaces_and_keeps_created_at(self, store: IndicatorTemplateStore) -> None:
        saved = await store.save(make_template())

        updated = await store.save(make_template(settings={"period": 100}, template_id=saved.id))

        assert updated.created_at == saved.created_at
        templates = await store.list_templates("user-1")
        assert [t.settings for t in templates] == [{"period": 100}]

    async def test_cannot_replace_another_users_template(self, store: IndicatorTemplateStore) -> None:
        saved = await store.save(make_template(is_public=True))

        with pytest.raises(ValueError, match="another user"):
            await store.save(make_template(user_id="user-2", template_id=saved.id))

        assert (await store.get(saved.id)).user_id == "user-1"

    async def test_save_validates(self, store: IndicatorTemplateStore) -> None:
        with pytest.raises(ValueError, match="name"):
            await store.save(make_template(name=" "))
        with pytest.raises(ValueError):
            await store.save(make_template(settings={"period": -1}))

        assert await store.list_templates("user-1") == []

    async def test_visibility(self, store: IndicatorTemplateStore) -> None:
        """Users see their own templates and public ones; anonymous callers see public only."""
        await store.save(make_template(name="Mine"))
        await store.save(make_template(name="Shared", user_id="user-2", is_public=True))
        await store.save(make_template(name="Hidden", user_id="user-2"))

        assert [t.name for t in await store.list_templates("user-1")] == ["Mine", "Shared"]
        assert [t.name for t in await store.list_templates()] == ["Shared"]

    async def test_by_type(self, store: IndicatorTemplateStore) -> None:
        await store.save(make_template(name="Fast EMA", indicator_type=IndicatorType.EMA, settings={"period": 9}))
        await store.save(make_template(name="Wide bands", indicator_type=IndicatorType.BOLLINGER,
                                       settings={"period": 20, "deviation": 3}))

        ema = await store.by_type(IndicatorType.EMA, "user-1")

        assert [t.name for t in ema] == ["Fast EMA"]
        assert await store.by_type(IndicatorType.EMA, "user-2") == []

    async def test_delete_only_own(self, store: IndicatorTemplateStore) -> None:
        saved = await store.save(make_template(is_public=True))

        assert await store.delete(saved.id, "user-2") is False
        assert await store.delete(saved.id, "user-1") is True
        assert await store.get(saved.id) is None
