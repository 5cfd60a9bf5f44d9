"""Test fixtures for archive brain."""

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator
from unittest.mock import patch

import pytest

from archive_brain.adapters.storage import JsonFileStorage
from archive_brain.core import ArticleStore, Summarizer


class StubSummarizer(Summarizer):
    """Summarizer that records calls and never touches the network."""

    def __init__(self, summary: str = "Stub summary.", file_text: str = "Extracted text.") -> None:
        self.summary = summary
        self.file_text = file_text
        self.texts: list[str] = []
        self.files: list[tuple[bytes, str]] = []

    async def summarize(self, text: str) -> str:
        self.texts.append(text)
        return self.summary

    async def extract_or_summarize_file(self, file_bytes: bytes, mime_type: str) -> str:
        self.files.append((file_bytes, mime_type))
        return f"{self.file_text} ({mime_type})"


@pytest.fixture
def stub_summarizer() -> StubSummarizer:
    return StubSummarizer()


@pytest.fixture
def clock() -> Iterator[list[datetime]]:
    """Make store timestamps advance one minute per call."""
    start = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
    issued: list[datetime] = []

    def tick() -> datetime:
        issued.append(start + timedelta(minutes=len(issued)))
        return issued[-1]

    with patch("archive_brain.core.article_store.utc_now", side_effect=tick):
        yield issued


@pytest.fixture
def storage(tmp_path: Path) -> JsonFileStorage:
    return JsonFileStorage(tmp_path / "data")


@pytest.fixture
def empty_store(storage: JsonFileStorage, clock: list[datetime]) -> ArticleStore:
    """Store loaded with an empty collection instead of the seed."""
    store = ArticleStore(storage, seed_factory=list)
    store.load()
    return store

