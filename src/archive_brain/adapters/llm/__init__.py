"""LLM adapters."""

from archive_brain.adapters.llm.claude_client import ClaudeSummarizer

__all__ = ["ClaudeSummarizer"]
