"""
LLM client abstraction for code quality analysis.

Supports Gemini (REST), OpenAI and Anthropic models with structured output
parsing and error handling. Each analysis makes exactly one provider call;
any failure degrades to the neutral fallback result instead of raising.
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, Optional

import requests
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI
from pydantic import ValidationError

from app.config import Settings
from app.llm.fallback import fallback_result
from app.llm.prompts import build_review_prompt
from app.llm.schemas import AnalysisResult
from app.observability.errors import ErrorSeverity, capture_exception

logger = logging.getLogger(__name__)

# Raw provider text kept in error context
RAW_TEXT_LOG_LIMIT = 2000

_FENCED_BLOCK = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)


class ProviderError(Exception):
    """Any failure to obtain a usable analysis from the provider."""

    def __init__(self, message: str, raw_text: Optional[str] = None):
        super().__init__(message)
        self.raw_text = raw_text


def _fenced_regions(text: str) -> Iterator[str]:
    for match in _FENCED_BLOCK.finditer(text):
        yield match.group(1).strip()


def _first_balanced_object(text: str) -> Optional[str]:
    """Return the first balanced {...} span, ignoring braces inside strings."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def parse_analysis(text: Optional[str]) -> AnalysisResult:
    """
    Decode provider text into an AnalysisResult.

    Strict first: the whole text as JSON validated against the schema.
    Then lenient: a fenced code region, or the first balanced {...} span.

    Raises:
        ProviderError: If no candidate decodes into a valid analysis
    """
    if text is None or not text.strip():
        raise ProviderError("Provider returned empty text", raw_text=text)

    try:
        return AnalysisResult.model_validate_json(text)
    except ValidationError as e:
        logger.debug(f"Direct decode failed, trying embedded payload: {e.error_count()} errors")

    candidates = list(_fenced_regions(text))
    balanced = _first_balanced_object(text)
    if balanced is not None:
        candidates.append(balanced)

    for candidate in candidates:
        try:
            return AnalysisResult.model_validate_json(candidate)
        except ValidationError:
            continue

    raise ProviderError("Provider output is not a valid analysis payload", raw_text=text)


def extract_candidate_text(envelope: Any) -> str:
    """
    Pull the generated text out of a Gemini generateContent envelope.

    Raises:
        ProviderError: If the envelope has no candidates or no text
    """
    if not isinstance(envelope, dict):
        raise ProviderError("Gemini response envelope is not an object")

    candidates = envelope.get("candidates")
    if not candidates:
        feedback = envelope.get("promptFeedback")
        block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
        raise ProviderError(f"Gemini returned no candidates (blockReason={block_reason})")
    if not isinstance(candidates, list) or not isinstance(candidates[0], dict):
        raise ProviderError("Gemini candidates are malformed")

    candidate = candidates[0]
    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        parts = []
    text = "".join(
        part["text"] for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    )
    if not text.strip():
        finish_reason = candidate.get("finishReason")
        raise ProviderError(f"Gemini candidate has no text (finishReason={finish_reason})")
    return text


class AnalysisClient(ABC):
    """Abstract base class for analysis provider clients."""

    provider_name = "base"

    def __init__(self, settings: Settings):
        self.settings = settings
        self.model_name = settings.LLM_MODEL
        self.max_tokens = settings.LLM_MAX_TOKENS
        self.temperature = settings.LLM_TEMPERATURE
        self.timeout = settings.LLM_REQUEST_TIMEOUT_SECONDS

    @abstractmethod
    async def generate_text(self, prompt: str) -> str:
        """
        Submit the prompt once and return the model's raw text.

        Raises:
            ProviderError: On transport, API or empty-response failures
        """

    async def analyze(self, code: str, filename: str, language: str) -> AnalysisResult:
        """
        Analyze one source file.

        Never raises: provider failures and unparsable output are logged and
        replaced by the neutral fallback result.

        Args:
            code: Full text of the file
            filename: Declared filename
            language: Language label from the classifier

        Returns:
            Parsed AnalysisResult, or the fallback result on failure
        """
        prompt = build_review_prompt(code, filename, language)

        try:
            text = await self.generate_text(prompt)
            result = parse_analysis(text)
        except ProviderError as e:
            raw = e.raw_text[:RAW_TEXT_LOG_LIMIT] if e.raw_text else None
            capture_exception(
                e,
                severity=ErrorSeverity.WARNING,
                context={
                    "provider": self.provider_name,
                    "model": self.model_name,
                    "filename": filename,
                    "raw_text": raw,
                },
            )
            logger.warning(f"Analysis failed, using fallback result: {e}")
            return fallback_result()

        logger.info(
            f"Analysis completed: overall={result.overall_score} bugs={result.bugs_count}"
        )
        return result


class GeminiClient(AnalysisClient):
    """Google Gemini client over the generateContent REST endpoint."""

    provider_name = "gemini"

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        super().__init__(settings)
        self.api_key = settings.GEMINI_API_KEY
        self.endpoint = (
            f"{settings.GEMINI_API_URL.rstrip('/')}/models/{self.model_name}:generateContent"
        )
        # Plain session: no retry adapter, one attempt per analysis
        self.session = session or requests.Session()

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        """Request body with the fixed generation parameters."""
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_tokens,
                "responseMimeType": "application/json",
            },
        }

    async def generate_text(self, prompt: str) -> str:
        """Generate analysis text using Gemini."""
        return await asyncio.to_thread(self._post, prompt)

    def _post(self, prompt: str) -> str:
        try:
            response = self.session.post(
                self.endpoint,
                json=self.build_payload(prompt),
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            body = e.response.text if e.response is not None else None
            raise ProviderError(f"Gemini request failed: {e}", raw_text=body) from e

        try:
            envelope = response.json()
        except ValueError as e:
            raise ProviderError("Gemini returned a non-JSON envelope", raw_text=response.text) from e

        text = extract_candidate_text(envelope)
        logger.debug(f"Gemini response: {text[:200]}...")
        return text


class OpenAIClient(AnalysisClient):
    """OpenAI client implementation."""

    provider_name = "openai"

    def __init__(self, settings: Settings):
        super().__init__(settings)
        self.client = AsyncOpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=self.timeout,
            max_retries=0,
        )

    async def generate_text(self, prompt: str) -> str:
        """Generate analysis text using OpenAI."""
        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},  # Force JSON mode
            )
        except Exception as e:
            raise ProviderError(f"OpenAI request failed: {e}") from e

        if not response.choices:
            raise ProviderError("OpenAI returned no choices")

        text = response.choices[0].message.content
        if not text:
            raise ProviderError("OpenAI returned empty content")
        logger.debug(f"OpenAI response: {text[:200]}...")
        return text


class AnthropicClient(AnalysisClient):
    """Anthropic (Claude) client implementation."""

    provider_name = "anthropic"

    def __init__(self, settings: Settings):
        super().__init__(settings)
        self.client = AsyncAnthropic(
            api_key=settings.ANTHROPIC_API_KEY,
            timeout=self.timeout,
            max_retries=0,
        )

    async def generate_text(self, prompt: str) -> str:
        """Generate analysis text using Claude."""
        try:
            response = await self.client.messages.create(
                model=self.model_name,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise ProviderError(f"Claude request failed: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            raise ProviderError("Claude returned no text content")
        logger.debug(f"Claude response: {text[:200]}...")
        return text


_CLIENTS = {
    "gemini": GeminiClient,
    "openai": OpenAIClient,
    "anthropic": AnthropicClient,
}


def get_analysis_client(settings: Settings) -> AnalysisClient:
    """
    Factory function to get the configured analysis client.

    Raises:
        ValueError: If provider is not supported
    """
    provider = settings.LLM_PROVIDER.lower()
    client_class = _CLIENTS.get(provider)
    if client_class is None:
        raise ValueError(
            f"Unsupported LLM provider: {provider}. Use one of {sorted(_CLIENTS)}"
        )

    logger.info(f"Initializing {provider} analysis client with model {settings.LLM_MODEL}")
    return client_class(settings)
