# src/storage/json_file.py
"""Async JSON record files shared by the stores."""
import asyncio
import hashlib
import json
import logging
import re
from pathlib import Path
from typing import ClassVar

import aiofiles

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_KEY_PREFIX_LENGTH = 40


def sanitize_file_name(name: str) -> str:
    """Reduce a user-supplied name to a safe single path component."""
    base = Path(name).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned or "file"


def storage_key(value: str) -> str:
    """Map an identifier to a unique, filesystem-safe path component.

    The readable prefix only helps someone browsing the data directory.
    The SHA-256 suffix keeps distinct values apart, so
    ``alice@example.com`` and ``alice_example.com`` never share a file.
    """
    readable = _UNSAFE_CHARS.sub("_", value).strip("._")[:_KEY_PREFIX_LENGTH]
    digest = hashlib.sha256(value.encode("utf-8")).hexdigest()
    return f"{readable or 'key'}-{digest}"


class JsonRecordFile:
    """A JSON file holding a list of record dicts.

    Reads and writes go through aiofiles. Callers that read, modify and
    write back must hold ``lock`` for the whole sequence. Every handle on
    the same path shares one lock.
    """

    _locks: ClassVar[dict[Path, asyncio.Lock]] = {}

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self.lock = self._locks.setdefault(path.resolve(), asyncio.Lock())

    @property
    def path(self) -> Path:
        return self._path

    async def read(self) -> list[dict]:
        """Read all records, or an empty list if the file does not exist."""
        if not self._path.exists():
            return []

        async with aiofiles.open(self._path, "r") as f:
            content = await f.read()

        if not content.strip():
            return []

        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt record file {self._path}: {e}")
            raise

    async def write(self, records: list[dict]) -> None:
        """Replace the file contents with ``records``."""
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        async with aiofiles.open(tmp_path, "w") as f:
            await f.write(json.dumps(records, indent=2, default=str))
        tmp_path.replace(self._path)
