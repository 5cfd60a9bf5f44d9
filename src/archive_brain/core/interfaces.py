"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorage(ABC):
    """Interface for durable string storage addressed by key."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value.

        Raises:
            OSError: if the value could not be written.
        """
        pass


class Summarizer(ABC):
    """Interface for the generative-AI text service.

    Implementations never raise: every failure resolves to a fallback string.
    """

    @abstractmethod
    async def summarize(self, text: str) -> str:
        """Summarize text in a few sentences."""
        pass

    @abstractmethod
    async def extract_or_summarize_file(self, file_bytes: bytes, mime_type: str) -> str:
        """Extract text from an image, or summarize a document."""
        pass
