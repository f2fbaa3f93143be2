# src/journal/entry_store.py
"""Persistence for journal entries."""
import logging
import uuid
from dataclasses import fields, replace
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

from src.journal.models import (
    JournalEntry,
    JournalEntryFilter,
    JournalEntryInput,
    JournalEntryPage,
    JournalSortField,
    Mood,
)
from src.journal.settings import JournalSettings
from src.storage import JsonRecordFile, storage_key
from src.trades.models import SortDirection

logger = logging.getLogger(__name__)

_INPUT_FIELDS = {f.name for f in fields(JournalEntryInput)}


def _normalize_tags(tags: list[str] | None) -> list[str] | None:
    """Strip tags, drop blanks, and store an empty list as None."""
    if not tags:
        return None
    cleaned = [t.strip() for t in tags if t and t.strip()]
    return cleaned or None


def _validate(entry_input: JournalEntryInput) -> None:
    if not entry_input.title or not entry_input.title.strip():
        raise ValueError("title is required")
    score = entry_input.confidence_score
    if score is not None and not 1 <= score <= 10:
        raise ValueError(f"confidence_score must be between 1 and 10, got {score}")


class JournalEntryStore:
    """Stores journal entries in per-user JSON files: {data_dir}/{storage_key(user_id)}.json"""

    def __init__(self, settings: JournalSettings) -> None:
        self._data_dir = Path(settings.data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._files: dict[str, JsonRecordFile] = {}

    def _file_for(self, user_id: str) -> JsonRecordFile:
        if user_id not in self._files:
            path = self._data_dir / f"{storage_key(user_id)}.json"
            self._files[user_id] = JsonRecordFile(path)
        return self._files[user_id]

    def _entry_to_dict(self, entry: JournalEntry) -> dict:
        return {
            "id": entry.id,
            "user_id": entry.user_id,
            "trade_id": entry.trade_id,
            "title": entry.title,
            "content": entry.content,
            "mood": entry.mood.value,
            "lessons_learned": entry.lessons_learned,
            "confidence_score": entry.confidence_score,
            "tags": entry.tags,
            "created_at": entry.created_at.isoformat(),
            "updated_at": entry.updated_at.isoformat(),
        }

    def _dict_to_entry(self, data: dict) -> JournalEntry:
        return JournalEntry(
            id=data["id"],
            user_id=data["user_id"],
            trade_id=data["trade_id"],
            title=data["title"],
            content=data["content"],
            mood=Mood(data["mood"]),
            lessons_learned=data["lessons_learned"],
            confidence_score=data["confidence_score"],
            tags=data["tags"],
            created_at=datetime.fromisoformat(data["created_at"]),
            updated_at=datetime.fromisoformat(data["updated_at"]),
        )

    async def create(self, user_id: str, entry_input: JournalEntryInput) -> JournalEntry:
        """Create a journal entry.

        Raises:
            ValueError: If the title is blank or confidence_score is out of range.
        """
        _validate(entry_input)

        now = datetime.now()
        entry = JournalEntry(
            id=str(uuid.uuid4()),
            user_id=user_id,
            trade_id=entry_input.trade_id,
            title=entry_input.title.strip(),
            content=entry_input.content,
            mood=entry_input.mood,
            lessons_learned=entry_input.lessons_learned,
            confidence_score=entry_input.confidence_score,
            tags=_normalize_tags(entry_input.tags),
            created_at=now,
            updated_at=now,
        )

        record_file = self._file_for(user_id)
        async with record_file.lock:
            records = await record_file.read()
            records.append(self._entry_to_dict(entry))
            await record_file.write(records)

        return entry

    async def all_for_user(self, user_id: str) -> list[JournalEntry]:
        records = await self._file_for(user_id).read()
        return [self._dict_to_entry(r) for r in records if r["user_id"] == user_id]

    async def get(self, user_id: str, entry_id: str) -> JournalEntry | None:
        for entry in await self.all_for_user(user_id):
            if entry.id == entry_id and entry.user_id == user_id:
                return entry
        return None

    async def for_trade(self, user_id: str, trade_id: str) -> list[JournalEntry]:
        """Journal entries linked to a trade, oldest first."""
        entries = [e for e in await self.all_for_user(user_id) if e.trade_id == trade_id]
        return sorted(entries, key=lambda e: e.created_at)

    async def list_entries(
        self,
        user_id: str,
        page: int = 1,
        page_size: int = 10,
        sort_field: JournalSortField = "created_at",
        sort_direction: SortDirection = "desc",
        filters: JournalEntryFilter | None = None,
    ) -> JournalEntryPage:
        """List a page of a user's journal entries.

        Raises:
            ValueError: If page or page_size is below 1.
        """
        if page < 1 or page_size < 1:
            raise ValueError(f"page and page_size must be >= 1, got {page}, {page_size}")

        entries = await self.all_for_user(user_id)
        if filters:
            entries = [e for e in entries if self._matches(e, filters)]

        if sort_field == "title":
            entries.sort(key=lambda e: e.title.lower(), reverse=sort_direction == "desc")
        else:
            entries.sort(key=lambda e: getattr(e, sort_field), reverse=sort_direction == "desc")

        start = (page - 1) * page_size
        return JournalEntryPage(entries=entries[start:start + page_size], count=len(entries))

    def _matches(self, entry: JournalEntry, filters: JournalEntryFilter) -> bool:
        if filters.title and filters.title.lower() not in entry.title.lower():
            return False
        if filters.trade_id and entry.trade_id != filters.trade_id:
            return False
        if filters.mood and entry.mood != filters.mood:
            return False
        if filters.tags and not set(filters.tags).issubset(entry.tags or []):
            return False

        start_date = filters.start_date
        if isinstance(start_date, date) and not isinstance(start_date, datetime):
            start_date = datetime.combine(start_date, time.min)
        if start_date and entry.created_at < start_date:
            return False

        end_date = filters.end_date
        if isinstance(end_date, date) and not isinstance(end_date, datetime):
            end_date = datetime.combine(end_date, time.max)
        if end_date and entry.created_at > end_date:
            return False
        return True

    async def update(
        self, user_id: str, entry_id: str, changes: dict[str, Any]
    ) -> JournalEntry | None:
        """Apply changes to an entry.

        Returns:
            The updated entry, or None if it was not found.

        Raises:
            ValueError: On unknown fields or invalid values.
        """
        unknown = set(changes) - _INPUT_FIELDS
        if unknown:
            raise ValueError(f"Unknown journal entry fields: {sorted(unknown)}")

        changes = dict(changes)
        if isinstance(changes.get("mood"), str):
            changes["mood"] = Mood(changes["mood"])

        record_file = self._file_for(user_id)
        async with record_file.lock:
            records = await record_file.read()
            for index, record in enumerate(records):
                if record["id"] != entry_id or record["user_id"] != user_id:
                    continue

                current = self._dict_to_entry(record)
                updated_input = replace(
                    JournalEntryInput(**{name: getattr(current, name) for name in _INPUT_FIELDS}),
                    **changes,
                )
                _validate(updated_input)

                updated = replace(
                    current,
                    trade_id=updated_input.trade_id,
                    title=updated_input.title.strip(),
                    content=updated_input.content,
                    mood=updated_input.mood,
                    lessons_learned=updated_input.lessons_learned,
                    confidence_score=updated_input.confidence_score,
                    tags=_normalize_tags(updated_input.tags),
                    updated_at=datetime.now(),
                )
                records[index] = self._entry_to_dict(updated)
                await record_file.write(records)
                return updated

        logger.warning(f"Journal entry {entry_id} not found for user {user_id}")
        return None

    async def delete(self, user_id: str, entry_id: str) -> bool:
        record_file = self._file_for(user_id)
        async with record_file.lock:
            records = await record_file.read()
            remaining = [
                r for r in records
                if not (r["id"] == entry_id and r["user_id"] == user_id)
            ]
            if len(remaining) == len(records):
                return False
            await record_file.write(remaining)
        return True
