# src/journal/__init__.py
"""Journal module: written entries, media, and the journal manager."""

from .entry_store import JournalEntryStore
from .journal_manager import ImportRateLimitError, JournalManager
from .media_store import MediaStore
from .models import (
    JournalEntry,
    JournalEntryFilter,
    JournalEntryInput,
    JournalEntryPage,
    JournalMedia,
    MediaType,
    Mood,
)
from .settings import JournalSettings

__all__ = [
    "ImportRateLimitError",
    "JournalEntry",
    "JournalEntryFilter",
    "JournalEntryInput",
    "JournalEntryPage",
    "JournalEntryStore",
    "JournalManager",
    "JournalMedia",
    "JournalSettings",
    "MediaStore",
    "MediaType",
    "Mood",
]
