"""Pytest configuration and shared fixtures for the tutor backend tests."""

import os

# Keep the app's default engine off the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")

from typing import Any, Dict, List, Optional, Tuple

import pytest
from _pytest.config import Config
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lingua.db import init_db
from lingua.errors import GeminiError
from lingua.gemini_client import GenerateResult, RequestPayload
from lingua.settings import settings


def pytest_configure(config: Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")


class FakeClient:
    """Stands in for GeminiClient; answers from its factory's script."""

    def __init__(self, factory: "FakeGemini", api_key: str) -> None:
        self.factory = factory
        self.api_key = api_key
        self.closed = False

    async def generate_content(self, model: str, payload: RequestPayload) -> GenerateResult:
        self.factory.calls.append((model, payload))
        outcome = self.factory.outcome_for(model, payload)
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, GenerateResult):
            return outcome
        if outcome is None:
            raise GeminiError(f"no scripted response for {model}")
        return GenerateResult(text=outcome)

    async def aclose(self) -> None:
        self.closed = True


class FakeGemini:
    """Client factory for the fallback loop.

    ``responses`` maps a model id to an outcome: response text, a
    GenerateResult, an exception to raise, a callable taking the payload, or
    a list of those consumed one per call. ``default`` covers unlisted models.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None, default: Any = None) -> None:
        self.responses = dict(responses or {})
        self.default = default
        self.calls: List[Tuple[str, RequestPayload]] = []
        self.clients: List[FakeClient] = []

    def __call__(self, api_key: str) -> FakeClient:
        client = FakeClient(self, api_key)
        self.clients.append(client)
        return client

    def outcome_for(self, model: str, payload: RequestPayload) -> Any:
        outcome = self.responses.get(model, self.default)
        if isinstance(outcome, list):
            outcome = outcome.pop(0) if outcome else None
        if callable(outcome) and not isinstance(outcome, BaseException):
            outcome = outcome(payload)
        return outcome

    @property
    def models_called(self) -> List[str]:
        return [model for model, _ in self.calls]


@pytest.fixture
def fake_gemini():
    """Return the FakeGemini factory class."""
    return FakeGemini


@pytest.fixture(autouse=True)
def no_server_key(monkeypatch):
    """Tests never pick up a real key from the environment."""
    monkeypatch.setattr(settings, "gemini_api_key", None)


@pytest.fixture
def session_factory():
    """In-memory database shared across threads for one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    init_db(engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
