"""File-backed key-value storage."""

import re
from pathlib import Path
from typing import Optional

from archive_brain.core.interfaces import KeyValueStorage


class JsonFileStorage(KeyValueStorage):
    """Store each key as ``<storage_dir>/<key>.json``."""

    def __init__(self, storage_dir: Path) -> None:
        self.storage_dir = storage_dir

    def _get_path(self, key: str) -> Path:
        # Keys become filenames
        safe_key = re.sub(r"[^\w.-]", "_", key)
        return self.storage_dir / f"{safe_key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._get_path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._get_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)
