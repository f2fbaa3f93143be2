# tests/journal/test_media_store.py
"""Tests for MediaStore."""
from pathlib import Path

import pytest

from src.journal.media_store import MediaStore
from src.journal.models import MediaType
from src.journal.settings import JournalSettings
from src.storage import storage_key


class TestMediaStore:
    """Tests for MediaStore."""

    @pytest.fixture
    def store(self, tmp_path: Path) -> MediaStore:
        return MediaStore(JournalSettings(media_dir=str(tmp_path / "media"), max_upload_mb=0.001))

    async def test_upload_and_read_back(self, store: MediaStore, tmp_path: Path) -> None:
        media = await store.upload("user-1", "entry-1", "my notes.pdf", b"%PDF-1.4", MediaType.DOCUMENT)

        assert media.file_name == "my_notes.pdf"
        assert media.file_size == 8
        assert Path(media.path).parent == tmp_path / "media" / storage_key("user-1")
        assert await store.read_bytes(media) == b"%PDF-1.4"

    async def test_list_for_entry(self, store: MediaStore) -> None:
        await store.upload("user-1", "entry-1", "a.png", b"a", MediaType.IMAGE)
        await store.upload("user-1", "entry-2", "b.png", b"b", MediaType.IMAGE)

        media = await store.list_for_entry("user-1", "entry-1")

        assert [m.file_name for m in media] == ["a.png"]

    async def test_rejects_empty_upload(self, store: MediaStore) -> None:
        with pytest.raises(ValueError, match="empty"):
            await store.upload("user-1", "entry-1", "a.png", b"", MediaType.IMAGE)

    async def test_rejects_oversized_upload(self, store: MediaStore) -> None:
        """0.001 MB is 1048 bytes."""
        with pytest.raises(ValueError, match="limit"):
            await store.upload("user-1", "entry-1", "big.mp4", b"x" * 2000, MediaType.VIDEO)

    async def test_delete_removes_file_and_record(self, store: MediaStore) -> None:
        media = await store.upload("user-1", "entry-1", "a.mp3", b"ID3", MediaType.AUDIO)

        assert await store.delete("user-1", media.id) is True
        assert not Path(media.path).exists()
        assert await store.list_for_entry("user-1", "entry-1") == []
        assert await store.delete("user-1", media.id) is False

    async def test_similar_user_ids_do_not_share_uploads(self, store: MediaStore) -> None:
        media = await store.upload("alice@example.com", "entry-1", "a.png", b"a", MediaType.IMAGE)

        assert await store.list_for_entry("alice_example.com", "entry-1") == []
        assert await store.delete("alice_example.com", media.id) is False
        assert Path(media.path).exists()
