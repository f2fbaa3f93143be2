# main.py
"""Main entry point for the trade journal."""
import argparse
import asyncio
import logging
import os
import subprocess
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

from src.config.settings import Settings
from src.journal import ImportRateLimitError, JournalManager
from src.market import PriceCsvError, PriceDataStore, Timeframe, import_price_csv
from src.trades import CsvImportError, export_filename


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/settings.yaml")
DASHBOARD_SCRIPT = Path(__file__).parent / "src" / "dashboard" / "Home.py"


def create_data_dirs(settings: Settings) -> None:
    """Create required data directories if they don't exist."""
    for dir_path in settings.data_dirs():
        dir_path.mkdir(parents=True, exist_ok=True)

    logger.info("Data directories verified")


def load_and_validate_config(config_path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Load and validate configuration.

    Returns:
        Settings object loaded from YAML.

    Raises:
        SystemExit: If the config file is missing or fails validation.
    """
    # Load environment variables
    load_dotenv()
    logger.info("✓ Loaded environment variables")

    if not config_path.exists():
        logger.error(f"{config_path} not found")
        sys.exit(1)

    try:
        settings = Settings.from_yaml(config_path)
        logger.info(f"✓ Settings loaded from {config_path}")
    except Exception as e:
        logger.error(f"Failed to parse {config_path}: {e}")
        sys.exit(1)

    create_data_dirs(settings)

    return settings


def print_startup_banner(settings: Settings) -> None:
    """Print startup banner."""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.system.name}")
    logger.info(f"Version: {settings.system.version}")
    logger.info(f"User: {settings.user.user_id}")
    logger.info("=" * 60)


async def run_import_csv(settings: Settings, path: Path) -> int:
    """Import a CSV of trades into the configured user's book."""
    journal = JournalManager(settings.journal, settings.trades)
    text = path.read_text(encoding="utf-8")
    trades = await journal.import_csv(settings.user.user_id, text)
    if trades is None:
        logger.warning("Journaling is disabled; nothing imported")
        return 0
    logger.info(f"✓ Imported {len(trades)} trade(s) from {path}")
    return len(trades)


async def run_export_csv(settings: Settings, output: Path | None) -> Path:
    """Write every trade of the configured user to a CSV file."""
    journal = JournalManager(settings.journal, settings.trades)
    output = output or Path(export_filename(date.today()))
    output.write_text(await journal.export_csv(settings.user.user_id), encoding="utf-8")
    logger.info(f"✓ Exported trades to {output}")
    return output


async def run_import_prices(
    settings: Settings, path: Path, symbol: str, timeframe: Timeframe
) -> int:
    """Load a CSV of candles into the price store."""
    bars = import_price_csv(path.read_text(encoding="utf-8"), symbol.upper(), timeframe)
    saved = await PriceDataStore(settings.market_data).save(bars)
    logger.info(f"✓ Saved {saved} {timeframe.value} bar(s) for {symbol.upper()}")
    return saved


async def run_report(settings: Settings, report_date: date, weekly: bool) -> dict:
    """Log a daily summary or weekly performance report."""
    journal = JournalManager(settings.journal, settings.trades)
    user_id = settings.user.user_id

    if not weekly:
        summary = await journal.get_daily_summary(user_id, report_date)
        logger.info(f"Daily summary for {summary.date}")
        logger.info(f"  Trades: {summary.total_trades} ({summary.winning_trades}W / {summary.losing_trades}L)")
        logger.info(f"  P&L: ${summary.total_pnl:,.2f}")
        logger.info(f"  Win rate: {summary.win_rate:.1%}")
        return {"summary": summary}

    report = await journal.get_weekly_report(user_id, report_date)
    metrics = report["metrics"]
    patterns = report["patterns"]
    logger.info(f"Weekly report {report['start_date']} to {report['end_date']}")
    logger.info(f"  Trades: {metrics.total_trades} ({metrics.winning_trades}W / {metrics.losing_trades}L)")
    logger.info(f"  Win rate: {metrics.win_rate:.1%}")
    logger.info(f"  Profit factor: {metrics.profit_factor:.2f}")
    logger.info(f"  Expectancy: {metrics.expectancy:.2f}R (${metrics.expectancy_dollars:,.2f})")
    logger.info(f"  Total P&L: ${metrics.total_pnl_dollars:,.2f}")
    logger.info(f"  Max drawdown: ${metrics.max_drawdown_dollars:,.2f}")
    if metrics.total_trades:
        logger.info(f"  Best hour: {patterns.best_hour:02d}:00, worst hour: {patterns.worst_hour:02d}:00")
    return report


def run_dashboard(config_path: Path) -> int:
    """Launch the Streamlit dashboard."""
    env = dict(os.environ)
    root = str(Path(__file__).parent.resolve())
    env["PYTHONPATH"] = os.pathsep.join(p for p in (root, env.get("PYTHONPATH")) if p)
    env["JOURNAL_CONFIG"] = str(config_path.resolve())

    logger.info(f"Starting dashboard with {config_path}")
    return subprocess.call(
        [sys.executable, "-m", "streamlit", "run", str(DASHBOARD_SCRIPT)],
        env=env,
    )


def build_parser() -> argparse.ArgumentParser:
    """Command line interface."""
    parser = argparse.ArgumentParser(description="Trade journal")
    parser.add_argument(
        "--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to settings.yaml"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import-csv", help="Import trades from a CSV file")
    import_parser.add_argument("path", type=Path)

    export_parser = subparsers.add_parser("export-csv", help="Export trades to a CSV file")
    export_parser.add_argument("--output", type=Path, default=None)

    prices_parser = subparsers.add_parser("import-prices", help="Load OHLCV candles from a CSV file")
    prices_parser.add_argument("path", type=Path)
    prices_parser.add_argument("--symbol", required=True)
    prices_parser.add_argument(
        "--timeframe", type=Timeframe, choices=list(Timeframe), default=Timeframe.D1
    )

    report_parser = subparsers.add_parser("report", help="Log a daily or weekly report")
    report_parser.add_argument("--date", type=date.fromisoformat, default=date.today())
    report_parser.add_argument("--weekly", action="store_true")

    subparsers.add_parser("dashboard", help="Run the Streamlit dashboard")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and run the requested command."""
    args = build_parser().parse_args(argv)
    settings = load_and_validate_config(args.config)
    print_startup_banner(settings)

    try:
        if args.command == "import-csv":
            asyncio.run(run_import_csv(settings, args.path))
        elif args.command == "export-csv":
            asyncio.run(run_export_csv(settings, args.output))
        elif args.command == "import-prices":
            asyncio.run(run_import_prices(settings, args.path, args.symbol, args.timeframe))
        elif args.command == "report":
            asyncio.run(run_report(settings, args.date, args.weekly))
        elif args.command == "dashboard":
            sys.exit(run_dashboard(args.config))
    except ImportRateLimitError as e:
        logger.error(str(e))
        sys.exit(1)
    except (CsvImportError, PriceCsvError) as e:
        logger.error(f"Invalid CSV: {e}")
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
