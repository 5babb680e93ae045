"""Pytest configuration and shared fixtures."""

import os

# Settings are read at import time by the app module
os.environ.setdefault("DEFAULT_ORGANIZATION_ID", "org-test")
os.environ.setdefault("DATABASE_URL", "postgresql://localhost/founder_discovery_test")

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from founder_discovery.core import Settings, limiter
from founder_discovery.main import app
from founder_discovery.providers import ChatProvider, EmbeddingProvider
from founder_discovery.services.discover.types import CandidateEntity, EvidenceRecord


class FakeEmbedder(EmbeddingProvider):
    """Returns a fixed vector per text; texts listed in `failing` raise the given error."""

    def __init__(self, dimension: int = 512, failing: dict[str, Exception] | None = None):
        self._dimension = dimension
        self.failing = failing or {}
        self.calls: list[list[str]] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        for text in texts:
            if text in self.failing:
                raise self.failing[text]
        return [[0.1, 0.2, 0.3] for _ in texts]


class FakeSessionFactory:
    """Async-context session factory yielding a sentinel session per founder."""

    def __init__(self):
        self.opened = 0

    def __call__(self):
        return self

    async def __aenter__(self):
        self.opened += 1
        return object()

    async def __aexit__(self, exc_type, exc, tb):
        return False


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
def disable_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
def test_client() -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(default_organization_id="org-test", _env_file=None)


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()


@pytest.fixture
def mock_chat() -> AsyncMock:
    chat = AsyncMock(spec=ChatProvider)
    chat.parse_discover_query.return_value = {
        "subject": "founder",
        "subject_variations": ["co-founder", "CEO"],
        "criteria": ["Stanford"],
        "criteria_type": "education",
        "reasoning": "Founder who studied at Stanford",
    }
    return chat


def candidate(cid: str, similarity: float, name: str | None = None, type_: str = "occupation") -> CandidateEntity:
    return CandidateEntity(id=cid, name=name or cid, type=type_, similarity=similarity)


def evidence(
    person_id: str,
    canonical_entity_id: str,
    entity_value: str,
    entity_type: str = "occupation",
    confidence: float = 0.9,
    canonical_name: str | None = None,
    datapoint_id: str | None = None,
) -> EvidenceRecord:
    return EvidenceRecord(
        person_id=person_id,
        entity_type=entity_type,
        entity_value=entity_value,
        canonical_name=canonical_name,
        canonical_entity_id=canonical_entity_id,
        confidence=confidence,
        datapoint_id=datapoint_id,
    )
