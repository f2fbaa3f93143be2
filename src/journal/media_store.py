# src/journal/media_store.py
"""Storage for media uploaded to journal entries."""
import logging
import uuid
from datetime import datetime
from pathlib import Path

import aiofiles

from src.journal.models import JournalMedia, MediaType
from src.journal.settings import JournalSettings
from src.storage import JsonRecordFile, sanitize_file_name, storage_key

logger = logging.getLogger(__name__)


class MediaStore:
    """Writes uploads to {media_dir}/{storage_key(user_id)}/ and indexes them per user."""

    def __init__(self, settings: JournalSettings) -> None:
        self._root = Path(settings.media_dir)
        self._root.mkdir(parents=True, exist_ok=True)
        self._max_bytes = int(settings.max_upload_mb * 1024 * 1024)
        self._indexes: dict[str, JsonRecordFile] = {}

    def _index_for(self, user_id: str) -> JsonRecordFile:
        if user_id not in self._indexes:
            user_dir = self._root / storage_key(user_id)
            self._indexes[user_id] = JsonRecordFile(user_dir / "index.json")
        return self._indexes[user_id]

    def _to_record(self, user_id: str, media: JournalMedia) -> dict:
        return {
            "id": media.id,
            "user_id": user_id,
            "journal_entry_id": media.journal_entry_id,
            "path": media.path,
            "media_type": media.media_type.value,
            "file_name": media.file_name,
            "file_size": media.file_size,
            "created_at": media.created_at.isoformat(),
        }

    def _from_record(self, data: dict) -> JournalMedia:
        return JournalMedia(
            id=data["id"],
            journal_entry_id=data["journal_entry_id"],
            path=data["path"],
            media_type=MediaType(data["media_type"]),
            file_name=data["file_name"],
            file_size=data["file_size"],
            created_at=datetime.fromisoformat(data["created_at"]),
        )

    async def upload(
        self,
        user_id: str,
        journal_entry_id: str,
        file_name: str,
        data: bytes,
        media_type: MediaType,
    ) -> JournalMedia:
        """Save an uploaded file and record it against a journal entry.

        Args:
            user_id: Owner of the entry.
            journal_entry_id: Entry the file belongs to.
            file_name: Original file name; sanitised before use.
            data: File contents.
            media_type: Kind of media.

        Returns:
            The stored media record.

        Raises:
            ValueError: If the file is empty or larger than max_upload_mb.
        """
        if not data:
            raise ValueError("Uploaded file is empty")
        if len(data) > self._max_bytes:
            raise ValueError(
                f"File {file_name} is {len(data)} bytes, limit is {self._max_bytes}"
            )

        index = self._index_for(user_id)
        safe_name = sanitize_file_name(file_name)
        media_id = str(uuid.uuid4())
        path = index.path.parent / f"{media_id}_{safe_name}"

        async with aiofiles.open(path, "wb") as f:
            await f.write(data)

        media = JournalMedia(
            id=media_id,
            journal_entry_id=journal_entry_id,
            path=str(path),
            media_type=media_type,
            file_name=safe_name,
            file_size=len(data),
            created_at=datetime.now(),
        )

        async with index.lock:
            records = await index.read()
            records.append(self._to_record(user_id, media))
            await index.write(records)

        logger.info(f"Uploaded {media_type.value} {safe_name} to journal entry {journal_entry_id}")
        return media

    async def list_for_entry(self, user_id: str, journal_entry_id: str) -> list[JournalMedia]:
        records = await self._index_for(user_id).read()
        return [
            self._from_record(r)
            for r in records
            if r["journal_entry_id"] == journal_entry_id and r["user_id"] == user_id
        ]

    async def read_bytes(self, media: JournalMedia) -> bytes:
        async with aiofiles.open(media.path, "rb") as f:
            return await f.read()

    async def delete(self, user_id: str, media_id: str) -> bool:
        """Remove a media record and its file."""
        index = self._index_for(user_id)
        async with index.lock:
            records = await index.read()
            match = next(
                (r for r in records if r["id"] == media_id and r["user_id"] == user_id),
                None,
            )
            if match is None:
                return False
            records.remove(match)
            await index.write(records)

        Path(match["path"]).unlink(missing_ok=True)
        return True
