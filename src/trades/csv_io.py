# src/trades/csv_io.py
"""CSV import and export for trades."""
import io
import logging
from datetime import date, datetime

import pandas as pd

from src.trades.models import Direction, ImportSource, Trade, TradeInput, TradeStatus

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["symbol", "direction", "entry_price", "quantity", "entry_date"]

EXPORT_HEADERS = [
    "Symbol",
    "Direction",
    "Entry Price",
    "Exit Price",
    "Quantity",
    "P&L",
    "Date",
    "Status",
]


class CsvImportError(ValueError):
    """Raised when a CSV file cannot be turned into trades."""


def _parse_float(value: str, column: str, row_number: int) -> float:
    try:
        return float(value)
    except ValueError:
        raise CsvImportError(
            f"Row {row_number}: invalid number {value!r} in column {column}"
        ) from None


def _parse_datetime(value: str, column: str, row_number: int) -> datetime:
    """Parse a date/time cell, normalising timezone-aware values to naive UTC."""
    try:
        timestamp = pd.Timestamp(value)
    except (ValueError, TypeError):
        raise CsvImportError(
            f"Row {row_number}: invalid date {value!r} in column {column}"
        ) from None

    if pd.isna(timestamp):
        raise CsvImportError(f"Row {row_number}: missing date in column {column}")
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert("UTC").tz_localize(None)
    return timestamp.to_pydatetime()


def _parse_row(row: dict[str, str], row_number: int) -> TradeInput:
    """Convert one CSV row to a TradeInput."""
    direction_value = row["direction"].lower()
    try:
        direction = Direction(direction_value)
    except ValueError:
        raise CsvImportError(
            f"Row {row_number}: direction must be 'long' or 'short', got {row['direction']!r}"
        ) from None

    exit_price = (
        _parse_float(row["exit_price"], "exit_price", row_number)
        if row.get("exit_price")
        else None
    )
    exit_date = (
        _parse_datetime(row["exit_date"], "exit_date", row_number)
        if row.get("exit_date")
        else None
    )
    fees = _parse_float(row["fees"], "fees", row_number) if row.get("fees") else 0.0
    stop_loss = (
        _parse_float(row["stop_loss"], "stop_loss", row_number)
        if row.get("stop_loss")
        else None
    )
    tags = [t.strip() for t in row.get("tags", "").split(";") if t.strip()]

    return TradeInput(
        symbol=row["symbol"].upper(),
        direction=direction,
        entry_price=_parse_float(row["entry_price"], "entry_price", row_number),
        entry_date=_parse_datetime(row["entry_date"], "entry_date", row_number),
        quantity=_parse_float(row["quantity"], "quantity", row_number),
        exit_price=exit_price,
        exit_date=exit_date,
        fees=fees,
        status=TradeStatus.CLOSED if exit_price is not None else TradeStatus.OPEN,
        setup=row.get("setup") or None,
        tags=tags or None,
        notes=row.get("notes") or None,
        stop_loss=stop_loss,
        import_source=ImportSource.CSV,
    )


def import_trades_csv(text: str) -> list[TradeInput]:
    """Parse trades from CSV text.

    The header must contain the columns in REQUIRED_COLUMNS. Optional columns
    are exit_price, exit_date, fees, setup, tags (';'-separated), notes and
    stop_loss. Blank rows are skipped. Errors name the file line of the
    offending row.

    Args:
        text: Full CSV file contents.

    Returns:
        One TradeInput per data row.

    Raises:
        CsvImportError: If the file is empty, a required column is missing,
            or a cell cannot be parsed.
    """
    body = text.lstrip("\r\n")
    header_line = text[: len(text) - len(body)].count("\n") + 1

    # Blank lines are kept as empty rows so positions map back to file lines
    try:
        frame = pd.read_csv(
            io.StringIO(body),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            skipinitialspace=True,
        )
    except pd.errors.EmptyDataError:
        raise CsvImportError("CSV file is empty") from None

    frame.columns = [str(c).strip() for c in frame.columns]

    missing = [col for col in REQUIRED_COLUMNS if col not in frame.columns]
    if missing:
        raise CsvImportError(f"Missing required columns: {', '.join(missing)}")

    trades: list[TradeInput] = []
    for position, record in enumerate(frame.to_dict(orient="records")):
        row = {
            key: "" if pd.isna(value) else str(value).strip()
            for key, value in record.items()
        }
        if not any(row.values()):
            continue
        trades.append(_parse_row(row, row_number=header_line + position + 1))

    logger.info(f"Parsed {len(trades)} trade(s) from CSV")
    return trades


def export_trades_csv(trades: list[Trade]) -> str:
    """Render trades as CSV text with the export header row."""
    rows = [
        [
            trade.symbol,
            trade.direction.value,
            trade.entry_price,
            trade.exit_price,
            trade.quantity,
            trade.profit_loss,
            trade.entry_date.date().isoformat(),
            trade.status.value,
        ]
        for trade in trades
    ]
    frame = pd.DataFrame(rows, columns=EXPORT_HEADERS)
    return frame.to_csv(index=False, lineterminator="\n")


def export_filename(today: date) -> str:
    """Name of the export file for a given day."""
    return f"trades_export_{today.isoformat()}.csv"
