"""Tests for the analysis provider clients."""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import requests

from app.config import Settings
from app.llm.fallback import fallback_result
from app.llm.model import (
    AnthropicClient,
    GeminiClient,
    OpenAIClient,
    ProviderError,
    get_analysis_client,
)
from app.observability.errors import ErrorSeverity, setup_error_tracking

from conftest import VALID_ANALYSIS, StubAnalysisClient


def _gemini_envelope(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}, "finishReason": "STOP"}]}


def _gemini_client(settings, response=None, post_error=None):
    session = MagicMock()
    if post_error is not None:
        session.post.side_effect = post_error
    else:
        session.post.return_value = response
    return GeminiClient(settings, session=session), session


def _response(envelope=None, status_error=None, json_error=None, text=""):
    response = MagicMock()
    response.text = text
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = envelope
    return response


class TestGeminiClient:
    def test_successful_analysis(self, settings):
        client, session = _gemini_client(
            settings, _response(_gemini_envelope(json.dumps(VALID_ANALYSIS)))
        )

        result = asyncio.run(client.analyze("fn main() {}", "main.rs", "rust"))

        assert result.to_wire() == VALID_ANALYSIS
        session.post.assert_called_once()

    def test_request_shape(self, settings):
        client, session = _gemini_client(
            settings, _response(_gemini_envelope(json.dumps(VALID_ANALYSIS)))
        )

        asyncio.run(client.analyze("print(1)", "a.py", "python"))

        args, kwargs = session.post.call_args
        assert args[0].endswith("/models/gemini-2.0-flash:generateContent")
        assert kwargs["headers"] == {"x-goog-api-key": "test-gemini-key"}
        assert kwargs["timeout"] is None
        config = kwargs["json"]["generationConfig"]
        assert config["responseMimeType"] == "application/json"
        assert config["maxOutputTokens"] == settings.LLM_MAX_TOKENS
        assert config["temperature"] == settings.LLM_TEMPERATURE
        assert "print(1)" in kwargs["json"]["contents"][0]["parts"][0]["text"]

    def test_network_error_falls_back(self, settings):
        client, session = _gemini_client(settings, post_error=requests.ConnectionError("refused"))

        result = asyncio.run(client.analyze("x", "x.go", "go"))

        assert result == fallback_result()
        assert session.post.call_count == 1  # no retry

    def test_http_error_falls_back(self, settings):
        error = requests.HTTPError("429 Too Many Requests")
        response = _response(status_error=error, text='{"error": "quota"}')
        error.response = response
        client, _ = _gemini_client(settings, response)

        assert asyncio.run(client.analyze("x", "x.go", "go")) == fallback_result()

    def test_empty_candidates_fall_back(self, settings):
        client, _ = _gemini_client(settings, _response({"candidates": []}))
        assert asyncio.run(client.analyze("x", "x.go", "go")) == fallback_result()

    @pytest.mark.parametrize(
        "envelope",
        [
            {"candidates": [{"content": {"parts": [{"text": None}]}}]},
            {"candidates": ["oops"]},
            {"candidates": {"0": 1}},
            {"candidates": [], "promptFeedback": "blocked"},
        ],
    )
    def test_malformed_envelope_falls_back(self, settings, envelope):
        client, _ = _gemini_client(settings, _response(envelope))
        assert asyncio.run(client.analyze("x", "x.go", "go")) == fallback_result()

    def test_non_json_envelope_falls_back(self, settings):
        client, _ = _gemini_client(
            settings, _response(json_error=ValueError("no json"), text="<html>")
        )
        assert asyncio.run(client.analyze("x", "x.go", "go")) == fallback_result()

    def test_garbled_text_falls_back_and_is_captured(self, settings):
        tracker = setup_error_tracking(settings)
        client, _ = _gemini_client(settings, _response(_gemini_envelope("not json at all")))

        assert asyncio.run(client.analyze("x", "x.go", "go")) == fallback_result()

        errors = tracker.get_errors(severity=ErrorSeverity.WARNING)
        assert errors[0].exception_type == "ProviderError"
        assert errors[0].context["raw_text"] == "not json at all"
        assert errors[0].context["filename"] == "x.go"

    def test_configured_timeout_is_passed(self, settings):
        settings = settings.model_copy(update={"LLM_REQUEST_TIMEOUT_SECONDS": 30.0})
        client, session = _gemini_client(
            settings, _response(_gemini_envelope(json.dumps(VALID_ANALYSIS)))
        )

        asyncio.run(client.analyze("x", "x.go", "go"))

        assert session.post.call_args.kwargs["timeout"] == 30.0


class TestOpenAIClient:
    def test_successful_analysis(self, settings):
        settings = settings.model_copy(update={"OPENAI_API_KEY": "sk-test", "LLM_MODEL": "gpt-4o"})
        response = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=json.dumps(VALID_ANALYSIS)))]
        )
        with patch("app.llm.model.AsyncOpenAI") as openai_cls:
            openai_cls.return_value.chat.completions.create = AsyncMock(return_value=response)
            client = OpenAIClient(settings)
            result = asyncio.run(client.analyze("x", "x.ts", "typescript"))

        assert result.to_wire() == VALID_ANALYSIS
        assert openai_cls.call_args.kwargs["max_retries"] == 0
        create_kwargs = openai_cls.return_value.chat.completions.create.call_args.kwargs
        assert create_kwargs["response_format"] == {"type": "json_object"}
        assert create_kwargs["model"] == "gpt-4o"

    def test_api_error_falls_back(self, settings):
        with patch("app.llm.model.AsyncOpenAI") as openai_cls:
            openai_cls.return_value.chat.completions.create = AsyncMock(
                side_effect=RuntimeError("invalid api key")
            )
            client = OpenAIClient(settings)
            assert asyncio.run(client.analyze("x", "x.ts", "typescript")) == fallback_result()

    def test_no_choices_raises_provider_error(self, settings):
        with patch("app.llm.model.AsyncOpenAI") as openai_cls:
            openai_cls.return_value.chat.completions.create = AsyncMock(
                return_value=SimpleNamespace(choices=[])
            )
            client = OpenAIClient(settings)
            with pytest.raises(ProviderError):
                asyncio.run(client.generate_text("prompt"))


class TestAnthropicClient:
    def test_successful_analysis(self, settings):
        response = SimpleNamespace(content=[SimpleNamespace(type="text", text=json.dumps(VALID_ANALYSIS))])
        with patch("app.llm.model.AsyncAnthropic") as anthropic_cls:
            anthropic_cls.return_value.messages.create = AsyncMock(return_value=response)
            client = AnthropicClient(settings)
            result = asyncio.run(client.analyze("x", "x.java", "java"))

        assert result.to_wire() == VALID_ANALYSIS
        assert anthropic_cls.call_args.kwargs["max_retries"] == 0

    def test_no_text_blocks_falls_back(self, settings):
        response = SimpleNamespace(content=[SimpleNamespace(type="tool_use", input={})])
        with patch("app.llm.model.AsyncAnthropic") as anthropic_cls:
            anthropic_cls.return_value.messages.create = AsyncMock(return_value=response)
            client = AnthropicClient(settings)
            assert asyncio.run(client.analyze("x", "x.java", "java")) == fallback_result()


class TestFactory:
    def test_gemini_is_default(self, settings):
        assert isinstance(get_analysis_client(settings), GeminiClient)

    def test_provider_is_case_insensitive(self, settings):
        settings = Settings(_env_file=None, LLM_PROVIDER="Anthropic", ANTHROPIC_API_KEY="sk-ant-test")
        assert settings.LLM_PROVIDER == "anthropic"
        with patch("app.llm.model.AsyncAnthropic"):
            assert isinstance(get_analysis_client(settings), AnthropicClient)

    def test_unsupported_provider(self, settings):
        settings = settings.model_copy(update={"LLM_PROVIDER": "mystery"})
        with pytest.raises(ValueError, match="Unsupported LLM provider"):
            get_analysis_client(settings)


def test_stub_client_records_prompt(settings):
    client = StubAnalysisClient(settings)
    asyncio.run(client.analyze("fn main() {}", "main.rs", "rust"))
    assert "Review this rust code" in client.prompts[0]
