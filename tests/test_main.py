# tests/test_main.py
"""Tests for main.py helper functions."""
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

from src.market.models import Timeframe


def write_config(tmp_path: Path) -> Path:
    """Write a settings.yaml that keeps every store under tmp_path."""
    config_file = tmp_path / "settings.yaml"
    config_file.write_text(
        "trades:\n"
        f"  data_dir: \"{tmp_path / 'trades'}\"\n"
        f"  screenshot_dir: \"{tmp_path / 'shots'}\"\n"
        "journal:\n"
        f"  data_dir: \"{tmp_path / 'journal'}\"\n"
        f"  media_dir: \"{tmp_path / 'media'}\"\n"
        "market_data:\n"
        f"  data_dir: \"{tmp_path / 'prices'}\"\n"
        f"  patterns_file: \"{tmp_path / 'patterns' / 'patterns.json'}\"\n"
        f"  templates_file: \"{tmp_path / 'charts' / 'templates.json'}\"\n"
        f"  preferences_dir: \"{tmp_path / 'charts' / 'preferences'}\"\n"
    )
    return config_file


@pytest.fixture
def settings(tmp_path):
    from main import load_and_validate_config

    with patch("main.load_dotenv"):
        return load_and_validate_config(write_config(tmp_path))


def test_create_data_dirs(tmp_path, monkeypatch):
    """Test data directory creation."""
    from main import create_data_dirs
    from src.config.settings import Settings

    # Change to temp directory to avoid creating dirs in actual project
    monkeypatch.chdir(tmp_path)
    create_data_dirs(Settings())

    assert (tmp_path / "data" / "trades").exists()
    assert (tmp_path / "data" / "journal").exists()
    assert (tmp_path / "data" / "prices").exists()
    assert (tmp_path / "data" / "patterns").exists()
    assert (tmp_path / "data" / "charts" / "preferences").exists()


def test_load_and_validate_config_success(settings, tmp_path):
    """Test successful config loading creates the store directories."""
    assert settings.trades.data_dir == str(tmp_path / "trades")
    assert (tmp_path / "media").is_dir()


def test_load_and_validate_config_missing_yaml(tmp_path):
    """Test config loading fails with missing YAML."""
    from main import load_and_validate_config

    with patch("main.load_dotenv"):
        with pytest.raises(SystemExit):
            load_and_validate_config(tmp_path / "missing.yaml")


def test_load_and_validate_config_invalid_yaml(tmp_path):
    """Test config loading fails when validation fails."""
    from main import load_and_validate_config

    config_file = tmp_path / "settings.yaml"
    config_file.write_text("risk:\n  account_size: -5\n")

    with patch("main.load_dotenv"):
        with pytest.raises(SystemExit):
            load_and_validate_config(config_file)


def test_build_parser():
    """Test subcommands and their options."""
    from main import build_parser

    parser = build_parser()

    args = parser.parse_args(["import-prices", "bars.csv", "--symbol", "nvda", "--timeframe", "15m"])
    assert args.command == "import-prices"
    assert args.path == Path("bars.csv")
    assert args.timeframe == Timeframe.M15

    args = parser.parse_args(["--config", "other.yaml", "report", "--date", "2026-01-16", "--weekly"])
    assert args.config == Path("other.yaml")
    assert args.date == date(2026, 1, 16)
    assert args.weekly is True

    with pytest.raises(SystemExit):
        parser.parse_args([])


async def test_import_then_export_csv(settings, tmp_path):
    """Test trades imported from CSV come back out of the export."""
    from main import run_export_csv, run_import_csv

    source = tmp_path / "trades.csv"
    source.write_text(
        "symbol,direction,entry_price,quantity,entry_date,exit_price,exit_date\n"
        "NVDA,long,100,10,2026-01-12 09:30,110,2026-01-12 15:00\n"
    )

    assert await run_import_csv(settings, source) == 1

    output = await run_export_csv(settings, tmp_path / "out.csv")
    lines = output.read_text().splitlines()

    assert len(lines) == 2
    assert lines[1].startswith("NVDA")


async def test_import_csv_with_journaling_disabled(settings, tmp_path):
    """Test a disabled journal imports nothing and reports zero trades."""
    from main import run_import_csv

    settings.journal.enabled = False
    source = tmp_path / "trades.csv"
    source.write_text(
        "symbol,direction,entry_price,quantity,entry_date\n"
        "NVDA,long,100,10,2026-01-12 09:30\n"
    )

    assert await run_import_csv(settings, source) == 0
    assert list((tmp_path / "trades").glob("*.json")) == []


async def test_import_prices(settings, tmp_path):
    """Test candles are saved under the upper-cased symbol."""
    from main import run_import_prices
    from src.market.price_store import PriceDataStore

    source = tmp_path / "bars.csv"
    source.write_text("time,open,high,low,close\n0,1,2,0.5,1.5\n60,1.5,2,1,1.8\n")

    assert await run_import_prices(settings, source, "nvda", Timeframe.M1) == 2

    bars = await PriceDataStore(settings.market_data).get("NVDA", Timeframe.M1)
    assert [b.close for b in bars] == [1.5, 1.8]


async def test_run_report(settings):
    """Test daily and weekly reports on an empty book."""
    from main import run_report

    daily = await run_report(settings, date(2026, 1, 16), weekly=False)
    weekly = await run_report(settings, date(2026, 1, 16), weekly=True)

    assert daily["summary"].total_trades == 0
    assert weekly["start_date"] == date(2026, 1, 10)


def test_main_exits_on_bad_csv(tmp_path):
    """Test an invalid CSV ends the command with exit code 1."""
    from main import main

    config_file = write_config(tmp_path)
    source = tmp_path / "bad.csv"
    source.write_text("symbol,direction\nNVDA,long\n")

    with patch("main.load_dotenv"):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(config_file), "import-csv", str(source)])

    assert exc_info.value.code == 1


def test_main_runs_dashboard(tmp_path):
    """Test the dashboard command launches streamlit with the config path."""
    from main import main

    config_file = write_config(tmp_path)

    with patch("main.load_dotenv"):
        with patch("main.subprocess.call", return_value=0) as mock_call:
            with pytest.raises(SystemExit) as exc_info:
                main(["--config", str(config_file), "dashboard"])

    assert exc_info.value.code == 0
    command = mock_call.call_args.args[0]
    assert command[1:4] == ["-m", "streamlit", "run"]
    env = mock_call.call_args.kwargs["env"]
    assert env["JOURNAL_CONFIG"] == str(config_file.resolve())
