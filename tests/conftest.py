"""Shared fixtures for the code review service tests."""

from __future__ import annotations

import copy
import json

import jwt
import pytest

from app.config import Settings
from app.llm.model import AnalysisClient, ProviderError
from app.storage.database import create_db_engine, create_session_factory, init_database
from app.storage.repository import ReviewRepository

JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"

VALID_ANALYSIS = {
    "overallScore": 7,
    "readability": {
        "score": 8,
        "issues": ["Function names are terse"],
        "suggestions": ["Rename f to fetch_user"],
    },
    "modularity": {
        "score": 6,
        "issues": ["main() does everything"],
        "suggestions": ["Split parsing from output"],
    },
    "potentialBugs": [
        {
            "line": 3,
            "severity": "high",
            "description": "Unchecked unwrap on user input",
            "suggestion": "Handle the error case explicitly",
        },
        {
            "severity": "low",
            "description": "Unused variable",
        },
    ],
    "bestPractices": ["Add doc comments to public functions"],
    "summary": "Readable code with one risky unwrap.",
}


def analysis_payload(**overrides) -> dict:
    payload = copy.deepcopy(VALID_ANALYSIS)
    payload.update(overrides)
    return payload


class StubAnalysisClient(AnalysisClient):
    """Analysis client returning canned provider text (or failing) without I/O."""

    provider_name = "stub"

    def __init__(self, settings: Settings, text: str | None = None, error: str | None = None):
        super().__init__(settings)
        self.text = text if text is not None else json.dumps(VALID_ANALYSIS)
        self.error = error
        self.prompts: list[str] = []

    async def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise ProviderError(self.error)
        return self.text


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        DATABASE_URL=f"sqlite:///{tmp_path / 'reviews.db'}",
        JWT_SECRET=JWT_SECRET,
        GEMINI_API_KEY="test-gemini-key",
        ERROR_TRACKING_ENABLED=True,
    )


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings)
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(engine):
    return ReviewRepository(create_session_factory(engine))


def make_token(user_id=1, claim="userId", secret=JWT_SECRET) -> str:
    return jwt.encode({claim: user_id}, secret, algorithm="HS256")


def auth_headers(user_id=1) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}
