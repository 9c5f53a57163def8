"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from app.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.LLM_PROVIDER == "gemini"
    assert settings.LLM_MODEL == "gemini-2.0-flash"
    assert settings.LLM_TEMPERATURE == 0.4
    assert settings.LLM_MAX_TOKENS == 4096
    assert settings.LLM_REQUEST_TIMEOUT_SECONDS is None
    assert settings.MAX_UPLOAD_SIZE_BYTES == 5 * 1024 * 1024
    assert settings.GUEST_REVIEWS_ENABLED is True


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", " OpenAI ")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://localhost:3000, https://example.com")

    settings = Settings(_env_file=None)

    assert settings.LLM_PROVIDER == "openai"
    assert settings.provider_api_key == "sk-test"
    assert settings.LOG_LEVEL == "DEBUG"
    assert settings.allowed_origins == ["http://localhost:3000", "https://example.com"]


def test_invalid_log_level():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, LOG_LEVEL="chatty")


def test_unknown_provider_has_no_key():
    assert Settings(_env_file=None, LLM_PROVIDER="mystery").provider_api_key == ""
