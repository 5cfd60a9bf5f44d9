"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass
class ClaudeConfig:
    """Claude API settings."""
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 1024
    temperature: float = 0.3
    max_retries: int = 3
    initial_retry_delay: float = 2.0
    request_delay: float = 0.5
    timeout: float = 60.0


@dataclass
class PathsConfig:
    """Path settings."""
    data_dir: Path = Path.home() / ".archive-brain"


@dataclass
class StorageConfig:
    """Durable storage settings."""
    articles_key: str = "archive-brain-articles"


@dataclass
class AttachmentsConfig:
    """Attachment gate settings."""
    max_size_bytes: int = 5 * 1024 * 1024
    allowed_mime_types: list[str] = field(default_factory=lambda: [
        "image/png",
        "image/jpeg",
        "application/pdf",
    ])


@dataclass
class PromptsConfig:
    """Instructions sent to the LLM."""
    summary: str = (
        "Summarize the following text in 3 to 5 sentences, keeping only the core "
        "content. The summary must include the key terms of the original. "
        "Write in a formal register.\n\n[Text to summarize]:\n\"{text}\""
    )
    image_extraction: str = (
        "Extract all text from this image. Respond with the extracted text only, "
        "without any additional explanation."
    )
    document_summary: str = "Summarize the key content of this document."


@dataclass
class MessagesConfig:
    """Fixed user-facing strings."""
    nothing_to_summarize: str = "There is no text to summarize."
    summary_failed: str = "An error occurred during AI summarization. Please try again later."
    image_extraction_failed: str = "An error occurred while extracting text from the image."
    document_summary_failed: str = "An error occurred while summarizing the PDF."
    body_summary_header: str = "-- AI summary --"


@dataclass
class Settings:
    """Application settings."""

    # API key (from environment only)
    anthropic_api_key: str = ""

    # Config sections
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    attachments: AttachmentsConfig = field(default_factory=AttachmentsConfig)
    prompts: PromptsConfig = field(default_factory=PromptsConfig)
    messages: MessagesConfig = field(default_factory=MessagesConfig)

    @property
    def data_dir(self) -> Path:
        return self.paths.data_dir

    @property
    def articles_key(self) -> str:
        return self.storage.articles_key


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)

    settings = Settings(
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
    )

    if "claude" in config:
        for key, value in config["claude"].items():
            setattr(settings.claude, key, value)

    if "paths" in config:
        for key, value in config["paths"].items():
            setattr(settings.paths, key, Path(value).expanduser())

    if "storage" in config:
        settings.storage = StorageConfig(**config["storage"])

    if "attachments" in config:
        settings.attachments = AttachmentsConfig(**config["attachments"])

    if "prompts" in config:
        settings.prompts = PromptsConfig(**config["prompts"])

    if "messages" in config:
        settings.messages = MessagesConfig(**config["messages"])

    return settings
