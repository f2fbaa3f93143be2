# src/journal/models.py
"""Data models for the trading journal."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Literal


class Mood(str, Enum):
    """How the trader felt when writing the entry."""

    CONFIDENT = "confident"
    ANXIOUS = "anxious"
    FRUSTRATED = "frustrated"
    CALM = "calm"
    EXCITED = "excited"
    NEUTRAL = "neutral"


class MediaType(str, Enum):
    """Kind of file attached to a journal entry."""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"


JournalSortField = Literal["created_at", "updated_at", "title"]


@dataclass
class JournalEntry:
    """A written reflection, optionally linked to a trade."""

    id: str
    user_id: str
    trade_id: str | None

    title: str
    content: str
    mood: Mood

    lessons_learned: str | None
    confidence_score: int | None
    tags: list[str] | None

    created_at: datetime
    updated_at: datetime


@dataclass
class JournalEntryInput:
    """User-editable fields of a journal entry."""

    title: str
    content: str = ""
    mood: Mood = Mood.NEUTRAL
    trade_id: str | None = None
    lessons_learned: str | None = None
    confidence_score: int | None = None
    tags: list[str] | None = None


@dataclass
class JournalEntryFilter:
    """Filters applied when listing journal entries."""

    title: str | None = None
    trade_id: str | None = None
    mood: Mood | None = None
    tags: list[str] | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


@dataclass
class JournalEntryPage:
    """One page of journal entries plus the total number of matches."""

    entries: list[JournalEntry]
    count: int


@dataclass
class JournalMedia:
    """A file uploaded to a journal entry."""

    id: str
    journal_entry_id: str
    path: str
    media_type: MediaType
    file_name: str
    file_size: int
    created_at: datetime
