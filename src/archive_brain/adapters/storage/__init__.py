"""Durable storage adapters."""

from archive_brain.adapters.storage.json_file_storage import JsonFileStorage

__all__ = ["JsonFileStorage"]
