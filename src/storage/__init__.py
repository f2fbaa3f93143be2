# src/storage/__init__.py
"""File-backed persistence helpers."""

from .json_file import JsonRecordFile, sanitize_file_name, storage_key

__all__ = ["JsonRecordFile", "sanitize_file_name", "storage_key"]
