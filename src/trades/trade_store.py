# src/trades/trade_store.py
"""Trade store persisting each user's trade book to a JSON file."""
import logging
from dataclasses import fields, replace
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

from src.storage import JsonRecordFile, storage_key
from src.trades.models import (
    Direction,
    ImportSource,
    SortDirection,
    Trade,
    TradeFilter,
    TradeInput,
    TradePage,
    TradeSortField,
    TradeStatus,
)
from src.trades.pnl import calculate_profit_loss, calculate_profit_loss_percent
from src.trades.settings import TradeSettings

logger = logging.getLogger(__name__)

_INPUT_FIELDS = {f.name for f in fields(TradeInput)}
_DERIVED_FIELDS = {"id", "user_id", "profit_loss", "profit_loss_percent", "created_at", "updated_at"}


def derive_status(requested: TradeStatus | None, exit_price: float | None) -> TradeStatus:
    """Work out a trade's status from its exit price.

    A cancelled trade stays cancelled; otherwise the trade is closed once
    it has an exit price.
    """
    if requested == TradeStatus.CANCELLED:
        return TradeStatus.CANCELLED
    return TradeStatus.CLOSED if exit_price is not None else TradeStatus.OPEN


def validate_trade_input(trade_input: TradeInput) -> None:
    """Raise ValueError if a trade input is not internally consistent."""
    if not trade_input.symbol or not trade_input.symbol.strip():
        raise ValueError("symbol is required")
    if trade_input.entry_price <= 0:
        raise ValueError(f"entry_price must be positive, got {trade_input.entry_price}")
    if trade_input.quantity <= 0:
        raise ValueError(f"quantity must be positive, got {trade_input.quantity}")
    if trade_input.fees < 0:
        raise ValueError(f"fees cannot be negative, got {trade_input.fees}")
    if trade_input.exit_price is not None and trade_input.exit_price <= 0:
        raise ValueError(f"exit_price must be positive, got {trade_input.exit_price}")
    if (
        trade_input.exit_date is not None
        and trade_input.exit_date < trade_input.entry_date
    ):
        raise ValueError("exit_date cannot be before entry_date")


def _as_datetime(value: date | datetime | None, end_of_day: bool = False) -> datetime | None:
    """Promote a plain date filter bound to a datetime."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.combine(value, time.max if end_of_day else time.min)


class TradeStore:
    """Persists trades in per-user JSON files.

    Stores trades in files with format: {data_dir}/{storage_key(user_id)}.json
    Trade IDs follow format: YYYY-MM-DD-SYMBOL-NNN
    """

    def __init__(self, settings: TradeSettings) -> None:
        """Initialize the trade store.

        Args:
            settings: Trade configuration settings.
        """
        self._settings = settings
        self._data_dir = Path(settings.data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._files: dict[str, JsonRecordFile] = {}

    def _file_for(self, user_id: str) -> JsonRecordFile:
        """Get the record file for a user, creating the handle on first use."""
        if user_id not in self._files:
            path = self._data_dir / f"{storage_key(user_id)}.json"
            self._files[user_id] = JsonRecordFile(path)
        return self._files[user_id]

    def _generate_trade_id(
        self, entry_date: datetime, symbol: str, existing_ids: set[str]
    ) -> str:
        """Generate the next free trade ID in format YYYY-MM-DD-SYMBOL-NNN."""
        prefix = f"{entry_date.date().isoformat()}-{symbol}-"
        sequences = [
            int(trade_id[len(prefix):])
            for trade_id in existing_ids
            if trade_id.startswith(prefix) and trade_id[len(prefix):].isdigit()
        ]
        sequence = max(sequences, default=0) + 1
        return f"{prefix}{sequence:03d}"

    def _trade_to_dict(self, trade: Trade) -> dict:
        """Convert a Trade to a dictionary for JSON storage."""
        return {
            "id": trade.id,
            "user_id": trade.user_id,
            "symbol": trade.symbol,
            "direction": trade.direction.value,
            "entry_price": trade.entry_price,
            "entry_date": trade.entry_date.isoformat(),
            "quantity": trade.quantity,
            "exit_price": trade.exit_price,
            "exit_date": trade.exit_date.isoformat() if trade.exit_date else None,
            "fees": trade.fees,
            "status": trade.status.value,
            "profit_loss": trade.profit_loss,
            "profit_loss_percent": trade.profit_loss_percent,
            "setup": trade.setup,
            "tags": trade.tags,
            "notes": trade.notes,
            "stop_loss": trade.stop_loss,
            "import_source": trade.import_source.value,
            "created_at": trade.created_at.isoformat(),
            "updated_at": trade.updated_at.isoformat(),
        }

    def _dict_to_trade(self, data: dict) -> Trade:
        """Convert a dictionary from JSON to a Trade."""
        return Trade(
            id=data["id"],
            user_id=data["user_id"],
            symbol=data["symbol"],
            direction=Direction(data["direction"]),
            entry_price=data["entry_price"],
            entry_date=datetime.fromisoformat(data["entry_date"]),
            quantity=data["quantity"],
            exit_price=data["exit_price"],
            exit_date=(
                datetime.fromisoformat(data["exit_date"])
                if data["exit_date"]
                else None
            ),
            fees=data["fees"],
            status=TradeStatus(data["status"]),
            profit_loss=data["profit_loss"],
            profit_loss_percent=data["profit_loss_percent"],
            setup=data.get("setup"),
            tags=data.get("tags"),
            notes=data.get("notes"),
            stop_loss=data.get("stop_loss"),
            import_source=ImportSource(data.get("import_source", "manual")),
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )

    def _build_trade(
        self,
        user_id: str,
        trade_id: str,
        trade_input: TradeInput,
        created_at: datetime,
    ) -> Trade:
        """Build a Trade from input, deriving status and P&L."""
        validate_trade_input(trade_input)

        status = derive_status(trade_input.status, trade_input.exit_price)
        return Trade(
            id=trade_id,
            user_id=user_id,
            symbol=trade_input.symbol.strip().upper(),
            direction=trade_input.direction,
            entry_price=trade_input.entry_price,
            entry_date=trade_input.entry_date,
            quantity=trade_input.quantity,
            exit_price=trade_input.exit_price,
            exit_date=trade_input.exit_date,
            fees=trade_input.fees,
            status=status,
            profit_loss=calculate_profit_loss(
                trade_input.direction,
                trade_input.entry_price,
                trade_input.exit_price,
                trade_input.quantity,
                trade_input.fees,
            ),
            profit_loss_percent=calculate_profit_loss_percent(
                trade_input.direction,
                trade_input.entry_price,
                trade_input.exit_price,
            ),
            setup=trade_input.setup or None,
            tags=trade_input.tags or None,
            notes=trade_input.notes,
            stop_loss=trade_input.stop_loss,
            import_source=trade_input.import_source,
            created_at=created_at,
            updated_at=datetime.now(),
        )

    async def create(self, user_id: str, trade_input: TradeInput) -> Trade:
        """Add a trade to a user's book.

        Args:
            user_id: Owner of the trade.
            trade_input: The trade details.

        Returns:
            The stored trade with ID, status and P&L filled in.

        Raises:
            ValueError: If the input is invalid.
        """
        trades = await self.create_many(user_id, [trade_input])
        return trades[0]

    async def create_many(
        self, user_id: str, trade_inputs: list[TradeInput]
    ) -> list[Trade]:
        """Add several trades in a single write.

        Either every input is stored or, if any is invalid, none are.
        """
        record_file = self._file_for(user_id)
        async with record_file.lock:
            records = await record_file.read()
            existing_ids = {r["id"] for r in records}

            created: list[Trade] = []
            for trade_input in trade_inputs:
                symbol = trade_input.symbol.strip().upper()
                trade_id = self._generate_trade_id(
                    trade_input.entry_date, symbol, existing_ids
                )
                trade = self._build_trade(user_id, trade_id, trade_input, datetime.now())
                existing_ids.add(trade_id)
                created.append(trade)

            records.extend(self._trade_to_dict(t) for t in created)
            await record_file.write(records)

        logger.info(f"Stored {len(created)} trade(s) for user {user_id}")
        return created

    async def all_for_user(self, user_id: str) -> list[Trade]:
        """Get every trade in a user's book, in insertion order."""
        records = await self._file_for(user_id).read()
        return [self._dict_to_trade(r) for r in records if r["user_id"] == user_id]

    async def get(self, user_id: str, trade_id: str) -> Trade | None:
        """Get a trade by ID.

        Returns:
            The trade, or None if the user has no trade with that ID.
        """
        for trade in await self.all_for_user(user_id):
            if trade.id == trade_id and trade.user_id == user_id:
                return trade
        return None

    async def list_trades(
        self,
        user_id: str,
        page: int = 1,
        page_size: int | None = None,
        sort_field: TradeSortField = "entry_date",
        sort_direction: SortDirection = "desc",
        filters: TradeFilter | None = None,
    ) -> TradePage:
        """List a page of a user's trades.

        Args:
            user_id: Owner of the trades.
            page: 1-based page number.
            page_size: Trades per page, defaulting to the configured size.
            sort_field: Field to sort on. Trades missing the field sort last.
            sort_direction: "asc" or "desc".
            filters: Optional filters.

        Returns:
            TradePage with the page of trades and the filtered total.

        Raises:
            ValueError: If page or page_size is out of range.
        """
        page_size = page_size or self._settings.default_page_size
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if not 1 <= page_size <= self._settings.max_page_size:
            raise ValueError(
                f"page_size must be between 1 and {self._settings.max_page_size}, got {page_size}"
            )

        trades = await self.find(user_id, filters, sort_field, sort_direction)

        start = (page - 1) * page_size
        return TradePage(trades=trades[start:start + page_size], count=len(trades))

    async def find(
        self,
        user_id: str,
        filters: TradeFilter | None = None,
        sort_field: TradeSortField = "entry_date",
        sort_direction: SortDirection = "desc",
    ) -> list[Trade]:
        """Get every trade matching the filters, sorted, without paging."""
        trades = await self.all_for_user(user_id)
        if filters:
            trades = [t for t in trades if self._matches(t, filters)]
        return self._sort(trades, sort_field, sort_direction)

    def _matches(self, trade: Trade, filters: TradeFilter) -> bool:
        """Check a trade against every filter that is set."""
        if filters.symbol and filters.symbol.lower() not in trade.symbol.lower():
            return False
        if filters.direction and trade.direction != filters.direction:
            return False
        if filters.status and trade.status != filters.status:
            return False

        start_date = _as_datetime(filters.start_date)
        if start_date and trade.entry_date < start_date:
            return False
        end_date = _as_datetime(filters.end_date, end_of_day=True)
        if end_date and trade.entry_date > end_date:
            return False

        if filters.setup and trade.setup != filters.setup:
            return False
        if filters.tags and not set(filters.tags).issubset(trade.tags or []):
            return False
        return True

    def _sort(
        self,
        trades: list[Trade],
        sort_field: TradeSortField,
        sort_direction: SortDirection,
    ) -> list[Trade]:
        """Sort trades, keeping trades without a value for the field last."""
        present = [t for t in trades if getattr(t, sort_field) is not None]
        missing = [t for t in trades if getattr(t, sort_field) is None]
        present.sort(
            key=lambda t: getattr(t, sort_field),
            reverse=sort_direction == "desc",
        )
        return present + missing

    async def update(
        self, user_id: str, trade_id: str, changes: dict[str, Any]
    ) -> Trade | None:
        """Apply changes to a trade and recompute status and P&L.

        Derived fields (ID, owner, P&L, timestamps) in ``changes`` are ignored.

        Returns:
            The updated trade, or None if it was not found.

        Raises:
            ValueError: If the result would be an invalid trade.
        """
        ignored = set(changes) & _DERIVED_FIELDS
        if ignored:
            logger.debug(f"Ignoring derived fields on update: {sorted(ignored)}")

        unknown = set(changes) - _INPUT_FIELDS - _DERIVED_FIELDS
        if unknown:
            raise ValueError(f"Unknown trade fields: {sorted(unknown)}")

        record_file = self._file_for(user_id)
        async with record_file.lock:
            records = await record_file.read()

            for index, record in enumerate(records):
                if record["id"] != trade_id or record["user_id"] != user_id:
                    continue

                current = self._dict_to_trade(record)
                current_input = TradeInput(
                    **{name: getattr(current, name) for name in _INPUT_FIELDS}
                )
                updated_input = replace(
                    current_input,
                    **self._coerce_changes(
                        {k: v for k, v in changes.items() if k in _INPUT_FIELDS}
                    ),
                )
                updated = self._build_trade(
                    user_id, trade_id, updated_input, current.created_at
                )
                records[index] = self._trade_to_dict(updated)
                await record_file.write(records)
                return updated

        logger.warning(f"Trade {trade_id} not found for user {user_id}")
        return None

    def _coerce_changes(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Convert raw JSON-style values to model types."""
        coerced = dict(changes)
        if isinstance(coerced.get("direction"), str):
            coerced["direction"] = Direction(coerced["direction"])
        if isinstance(coerced.get("status"), str):
            coerced["status"] = TradeStatus(coerced["status"])
        if isinstance(coerced.get("import_source"), str):
            coerced["import_source"] = ImportSource(coerced["import_source"])
        for key in ("entry_date", "exit_date"):
            if isinstance(coerced.get(key), str):
                coerced[key] = datetime.fromisoformat(coerced[key])
        return coerced

    async def delete(self, user_id: str, trade_id: str) -> bool:
        """Delete a trade.

        Returns:
            True if a trade was removed, False if it was not found.
        """
        record_file = self._file_for(user_id)
        async with record_file.lock:
            records = await record_file.read()
            remaining = [
                r for r in records
                if not (r["id"] == trade_id and r["user_id"] == user_id)
            ]
            if len(remaining) == len(records):
                return False
            await record_file.write(remaining)

        logger.info(f"Deleted trade {trade_id} for user {user_id}")
        return True
