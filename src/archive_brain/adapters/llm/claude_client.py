"""Claude API client for summarization and text extraction."""

import asyncio
import base64
from typing import Any, Union

import httpx

from archive_brain.config import Settings
from archive_brain.core import Summarizer

MessageContent = Union[str, list[dict[str, Any]]]


class ClaudeSummarizer(Summarizer):
    """Claude API client implementation.

    Public methods always resolve to a string; remote failures turn into the
    configured fallback messages.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.api_key = settings.anthropic_api_key
        self.model = settings.claude.model
        self.max_tokens = settings.claude.max_tokens
        self.temperature = settings.claude.temperature
        self.timeout = settings.claude.timeout
        self.base_url = "https://api.anthropic.com/v1"
        self.max_retries = settings.claude.max_retries
        self.initial_retry_delay = settings.claude.initial_retry_delay
        self.request_delay = settings.claude.request_delay
        self.prompts = settings.prompts
        self.messages = settings.messages
        self._last_request_time = 0.0

    async def summarize(self, text: str) -> str:
        """Summarize text in 3-5 sentences."""
        if not text or not text.strip():
            return self.messages.nothing_to_summarize

        try:
            prompt = self.prompts.summary.format(text=text)
            return await self._call_api(prompt)
        except Exception as e:
            print(f"⚠️  Error summarizing text with Claude API: {type(e).__name__}: {e}")
            return self.messages.summary_failed

    async def extract_or_summarize_file(self, file_bytes: bytes, mime_type: str) -> str:
        """Extract text from an image, or summarize any other document."""
        is_image = mime_type.startswith("image/")
        prompt = self.prompts.image_extraction if is_image else self.prompts.document_summary

        try:
            content = [
                self._file_block(file_bytes, mime_type, is_image),
                {"type": "text", "text": prompt},
            ]
            return await self._call_api(content)
        except Exception as e:
            print(f"⚠️  Error processing file with Claude API: {type(e).__name__}: {e}")
            if is_image:
                return self.messages.image_extraction_failed
            return self.messages.document_summary_failed

    def _file_block(self, file_bytes: bytes, mime_type: str, is_image: bool) -> dict[str, Any]:
        """Build an inline base64 content block for the file."""
        if not file_bytes:
            raise ValueError("File is empty")

        return {
            "type": "image" if is_image else "document",
            "source": {
                "type": "base64",
                "media_type": mime_type,
                "data": base64.b64encode(file_bytes).decode("ascii"),
            },
        }

    async def _call_api(self, content: MessageContent) -> str:
        """Send one user message and return the reply text.

        Retries rate limits, server errors and network failures; any other
        HTTP error is raised at once.
        """
        if not self.api_key:
            raise RuntimeError("ANTHROPIC_API_KEY is not set")

        await self._respect_request_delay()
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": content}],
        }

        for attempt in range(self.max_retries):
            is_last = attempt == self.max_retries - 1
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(
                        f"{self.base_url}/messages", headers=self._headers(), json=payload
                    )
            except httpx.RequestError as e:
                if is_last:
                    raise
                delay = self._backoff(attempt)
                print(f"⚠️  Network error ({type(e).__name__}), retrying after {delay:.1f}s")
                await asyncio.sleep(delay)
                continue
            finally:
                self._last_request_time = asyncio.get_event_loop().time()

            if response.status_code == 200:
                return self._extract_text(response.json())

            if response.status_code == 429:
                delay = self._get_retry_delay(response, attempt)
                print(f"⏳ Rate limited, retrying after {delay:.1f}s ({attempt + 1}/{self.max_retries})")
            elif response.status_code >= 500:
                delay = self._backoff(attempt)
                print(f"⚠️  Claude returned {response.status_code}, retrying after {delay:.1f}s")
            else:
                response.raise_for_status()
                raise RuntimeError(f"Unexpected status {response.status_code}")

            if not is_last:
                await asyncio.sleep(delay)

        raise RuntimeError(f"Claude API still failing after {self.max_retries} attempts")

    async def _respect_request_delay(self) -> None:
        elapsed = asyncio.get_event_loop().time() - self._last_request_time
        if elapsed < self.request_delay:
            await asyncio.sleep(self.request_delay - elapsed)

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": "2023-06-01",
            "content-type": "application/json",
        }

    def _backoff(self, attempt: int) -> float:
        return self.initial_retry_delay * (2 ** attempt)

    def _extract_text(self, data: dict[str, Any]) -> str:
        """Join the text blocks of a Messages API response."""
        blocks = data.get("content")
        if not isinstance(blocks, list):
            raise ValueError("Response has no content blocks")

        texts = [b["text"] for b in blocks if isinstance(b, dict) and b.get("type", "text") == "text" and "text" in b]
        if not texts:
            raise ValueError("Response has no text content")
        return "".join(texts)

    def _get_retry_delay(self, response: httpx.Response, attempt: int) -> float:
        """Honor a numeric retry-after header, else back off exponentially."""
        try:
            return float(response.headers["retry-after"])
        except (KeyError, ValueError):
            return self._backoff(attempt)
