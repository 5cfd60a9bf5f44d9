"""Tests for Claude summarizer."""

import base64
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from archive_brain.adapters.llm import ClaudeSummarizer
from archive_brain.config import Settings


@pytest.fixture
def mock_settings() -> Settings:
    """Create mock settings."""
    settings = Settings(anthropic_api_key="test-key")
    # Set values directly in claude config object
    settings.claude.max_retries = 3
    settings.claude.initial_retry_delay = 0.01  # Faster for tests
    settings.claude.request_delay = 0.05
    return settings


def make_response(status_code: int, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.headers = {}
    response.json.return_value = {"content": [{"type": "text", "text": text}]}
    if status_code >= 400:
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            f"HTTP {status_code}", request=MagicMock(), response=response
        )
    return response


def mock_http_client(mock_client_class: MagicMock, *responses: object) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.__aenter__.return_value = mock_client
    if len(responses) == 1:
        mock_client.post.return_value = responses[0]
    else:
        mock_client.post.side_effect = list(responses)
    mock_client_class.return_value = mock_client
    return mock_client


@pytest.mark.asyncio
async def test_summarize_success(mock_settings: Settings) -> None:
    """Test successful summary request."""
    client = ClaudeSummarizer(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = mock_http_client(mock_client_class, make_response(200, "Short summary."))

        result = await client.summarize("A long article about React hooks.")

        assert result == "Short summary."
        payload = mock_client.post.call_args.kwargs["json"]
        prompt = payload["messages"][0]["content"]
        assert "3 to 5 sentences" in prompt
        assert "A long article about React hooks." in prompt
        assert payload["model"] == mock_settings.claude.model
        headers = mock_client.post.call_args.kwargs["headers"]
        assert headers["x-api-key"] == "test-key"


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   \n\t "])
async def test_summarize_empty_input_skips_api(mock_settings: Settings, text: str) -> None:
    """Test blank input returns the fixed message without a request."""
    client = ClaudeSummarizer(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        result = await client.summarize(text)

        assert result == mock_settings.messages.nothing_to_summarize
        mock_client_class.assert_not_called()


@pytest.mark.asyncio
async def test_summarize_network_failure_returns_fallback(mock_settings: Settings) -> None:
    """Test network errors degrade to the error string after retries."""
    client = ClaudeSummarizer(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = mock_http_client(mock_client_class, make_response(200))
        mock_client.post.side_effect = httpx.ConnectError("connection refused")

        result = await client.summarize("Some text")

        assert result == mock_settings.messages.summary_failed
        assert mock_client.post.call_count == mock_settings.claude.max_retries


@pytest.mark.asyncio
async def test_summarize_client_error_returns_fallback(mock_settings: Settings) -> None:
    """Test 4xx responses are not retried and degrade to the error string."""
    client = ClaudeSummarizer(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = mock_http_client(mock_client_class, make_response(400))

        result = await client.summarize("Some text")

        assert result == mock_settings.messages.summary_failed
        assert mock_client.post.call_count == 1


@pytest.mark.asyncio
async def test_summarize_malformed_response_returns_fallback(mock_settings: Settings) -> None:
    client = ClaudeSummarizer(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        response = make_response(200)
        response.json.return_value = {"unexpected": True}
        mock_http_client(mock_client_class, response)

        result = await client.summarize("Some text")

        assert result == mock_settings.messages.summary_failed


@pytest.mark.asyncio
async def test_summarize_without_api_key_returns_fallback() -> None:
    client = ClaudeSummarizer(Settings(anthropic_api_key=""))

    with patch("httpx.AsyncClient") as mock_client_class:
        result = await client.summarize("Some text")

        assert result == client.messages.summary_failed
        mock_client_class.assert_not_called()


@pytest.mark.asyncio
async def test_retry_on_429(mock_settings: Settings) -> None:
    """Test retry logic on 429 error."""
    client = ClaudeSummarizer(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = mock_http_client(
            mock_client_class,
            make_response(429),
            make_response(200, "After retry"),
        )

        result = await client.summarize("Some text")

        assert result == "After retry"
        assert mock_client.post.call_count == 2


@pytest.mark.asyncio
async def test_retry_on_server_error(mock_settings: Settings) -> None:
    client = ClaudeSummarizer(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = mock_http_client(
            mock_client_class,
            make_response(503),
            make_response(529),
            make_response(200, "Recovered"),
        )

        result = await client.summarize("Some text")

        assert result == "Recovered"
        assert mock_client.post.call_count == 3


@pytest.mark.asyncio
async def test_image_requests_text_extraction(mock_settings: Settings) -> None:
    """Test images are sent inline with the extraction instruction."""
    client = ClaudeSummarizer(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = mock_http_client(mock_client_class, make_response(200, "Text in image"))

        result = await client.extract_or_summarize_file(b"\x89PNG data", "image/png")

        assert result == "Text in image"
        content = mock_client.post.call_args.kwargs["json"]["messages"][0]["content"]
        assert content[0]["type"] == "image"
        assert content[0]["source"]["media_type"] == "image/png"
        assert base64.b64decode(content[0]["source"]["data"]) == b"\x89PNG data"
        assert content[1]["text"] == mock_settings.prompts.image_extraction


@pytest.mark.asyncio
async def test_pdf_requests_summary(mock_settings: Settings) -> None:
    client = ClaudeSummarizer(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = mock_http_client(mock_client_class, make_response(200, "PDF summary"))

        result = await client.extract_or_summarize_file(b"%PDF-1.4", "application/pdf")

        assert result == "PDF summary"
        content = mock_client.post.call_args.kwargs["json"]["messages"][0]["content"]
        assert content[0]["type"] == "document"
        assert content[1]["text"] == mock_settings.prompts.document_summary


@pytest.mark.asyncio
async def test_file_failures_use_type_specific_fallbacks(mock_settings: Settings) -> None:
    client = ClaudeSummarizer(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_client = mock_http_client(mock_client_class, make_response(200))
        mock_client.post.side_effect = httpx.ReadTimeout("timed out")

        image_result = await client.extract_or_summarize_file(b"img", "image/jpeg")
        pdf_result = await client.extract_or_summarize_file(b"pdf", "application/pdf")

        assert image_result == mock_settings.messages.image_extraction_failed
        assert pdf_result == mock_settings.messages.document_summary_failed


@pytest.mark.asyncio
async def test_empty_file_returns_fallback_without_request(mock_settings: Settings) -> None:
    client = ClaudeSummarizer(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        result = await client.extract_or_summarize_file(b"", "image/png")

        assert result == mock_settings.messages.image_extraction_failed
        mock_client_class.assert_not_called()


@pytest.mark.asyncio
async def test_rate_limiting(mock_settings: Settings) -> None:
    """Test that requests are rate limited."""
    client = ClaudeSummarizer(mock_settings)

    with patch("httpx.AsyncClient") as mock_client_class:
        mock_http_client(mock_client_class, make_response(200, "test response"))

        import time
        start = time.time()

        # Make two quick requests
        await client._call_api("test")
        await client._call_api("test")

        elapsed = time.time() - start

        # Should take at least request_delay seconds due to rate limiting
        assert elapsed >= mock_settings.claude.request_delay
