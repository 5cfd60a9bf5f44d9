"""Tests for configuration loading."""

from pathlib import Path

import pytest

from archive_brain.config import Settings, get_settings, load_config


def test_load_config_missing_file(tmp_path: Path) -> None:
    assert load_config(tmp_path / "absent.yaml") == {}


def test_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)

    settings = get_settings(tmp_path / "absent.yaml")

    assert settings.anthropic_api_key == ""
    assert settings.articles_key == "archive-brain-articles"
    assert settings.attachments.max_size_bytes == 5 * 1024 * 1024
    assert settings.attachments.allowed_mime_types == ["image/png", "image/jpeg", "application/pdf"]


def test_yaml_and_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ANTHROPIC_API_KEY", "env-key")
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "claude:\n"
        "  model: claude-test\n"
        "  max_retries: 1\n"
        "paths:\n"
        f"  data_dir: {tmp_path / 'archive'}\n"
        "attachments:\n"
        "  max_size_bytes: 1024\n"
        "messages:\n"
        "  nothing_to_summarize: Nothing here.\n",
        encoding="utf-8",
    )

    settings = get_settings(config_path)

    assert settings.anthropic_api_key == "env-key"
    assert settings.claude.model == "claude-test"
    assert settings.claude.max_retries == 1
    assert settings.data_dir == tmp_path / "archive"
    assert settings.attachments.max_size_bytes == 1024
    assert settings.attachments.allowed_mime_types == ["image/png", "image/jpeg", "application/pdf"]
    assert settings.messages.nothing_to_summarize == "Nothing here."
    assert settings.messages.summary_failed == Settings().messages.summary_failed
