"""Pytest configuration and fixtures."""

import json
from collections import deque
from typing import Any, Union

import pytest

from harbourmaster.config.prompts import CLASSIFIER_SYSTEM_PROMPT
from harbourmaster.config.settings import Settings
from harbourmaster.models import Shape
from harbourmaster.pipeline.context import IngestContext
from harbourmaster.pipeline.router import ErrorRouter
from harbourmaster.storage import (
    PersistenceGateway,
    ReviewStore,
    create_db_engine,
    create_session_factory,
    init_db,
)

Reply = Union[str, dict, Exception]


class ScriptedTextGenerator:
    """TextGenerator double: returns queued replies per call kind.

    Classifier calls are told apart by their system instruction. A queued
    Exception is raised instead of returned; a dict is sent as JSON text.
    """

    def __init__(self):
        self.classifier_replies: deque[Reply] = deque()
        self.cleaner_replies: deque[Reply] = deque()
        self.calls: list[dict[str, Any]] = []

    def script_classifier(self, *replies: Reply) -> "ScriptedTextGenerator":
        self.classifier_replies.extend(replies)
        return self

    def script_cleaner(self, *replies: Reply) -> "ScriptedTextGenerator":
        self.cleaner_replies.extend(replies)
        return self

    @property
    def classifier_calls(self) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["kind"] == "classifier"]

    @property
    def cleaner_calls(self) -> list[dict[str, Any]]:
        return [c for c in self.calls if c["kind"] == "cleaner"]

    def complete(self, system: str, user: str, temperature: float) -> str:
        kind = "classifier" if system == CLASSIFIER_SYSTEM_PROMPT else "cleaner"
        self.calls.append({"kind": kind, "system": system, "user": user, "temperature": temperature})

        queue = self.classifier_replies if kind == "classifier" else self.cleaner_replies
        if not queue:
            raise AssertionError(f"Unexpected {kind} call")
        reply = queue.popleft()
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply


class FakeEmbedder:
    """Embedder double that can fail a set number of times first."""

    def __init__(self, vector: list[float] | None = None, failures: int = 0):
        self.vector = vector or [0.1, 0.2, 0.3]
        self.failures = failures
        self.texts: list[str] = []

    def embed_query(self, text: str) -> list[float]:
        self.texts.append(text)
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("embedding service unreachable")
        return list(self.vector)


# =============================================================================
# Core fixtures
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite:///:memory:",
        embedding_max_attempts=2,
        embedding_retry_min_wait=0,
        embedding_retry_max_wait=0,
        internal_api_key=None,
    )


@pytest.fixture
def session_factory(settings):
    engine = create_db_engine(settings.database_url)
    init_db(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def gateway(session_factory) -> PersistenceGateway:
    return PersistenceGateway(session_factory)


@pytest.fixture
def review_store(session_factory) -> ReviewStore:
    return ReviewStore(session_factory)


@pytest.fixture
def router(review_store) -> ErrorRouter:
    return ErrorRouter(review_store)


@pytest.fixture
def fake_llm() -> ScriptedTextGenerator:
    return ScriptedTextGenerator()


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def ctx(fake_llm, fake_embedder, gateway, review_store, router, settings) -> IngestContext:
    return IngestContext(
        llm=fake_llm,
        embedder=fake_embedder,
        gateway=gateway,
        review_store=review_store,
        router=router,
        settings=settings,
    )


# =============================================================================
# Registry data
# =============================================================================

def harbour_columns(name: str, **overrides) -> dict:
    columns = {
        "name": name,
        "region": "Ionian",
        "harbour_type": "harbour",
        "latitude": 38.45,
        "longitude": 20.69,
        "description": None,
        "facilities": [],
        "capacity": None,
        "depth_range": None,
        "notes": None,
    }
    columns.update(overrides)
    return columns


@pytest.fixture
def kioni_id(add_harbour) -> str:
    """Registry harbour 'Kioni'."""
    return add_harbour("Kioni")


@pytest.fixture
def qna_cleaned() -> dict:
    """A valid pro-tier Q&A candidate for Kioni."""
    return {
        "harbour": "Kioni",
        "question": "How should I approach Kioni when the wind is up?",
        "answer": "1. Enter along the north shore. 2. Drop anchor in 6m on sand. 3. Take a long line ashore.",
        "category": "Approach & Entry",
        "tags": ["wind:meltemi", "activity:anchoring"],
        "tier": "pro",
        "notes": None,
    }


@pytest.fixture
def vathi_cleaned() -> dict:
    """A valid harbour master record."""
    return {
        "name": "Vathi",
        "region": "Ithaca",
        "harbour_type": "harbour",
        "coordinates": {"lat": 38.3667, "lng": 20.7167},
        "description": "Deep natural harbour, capital of Ithaca.",
        "facilities": ["water", "fuel"],
        "capacity": 80,
        "depth_range": "3-12m",
        "notes": None,
    }


@pytest.fixture
def add_harbour(gateway):
    """Factory inserting a registry harbour and returning its id."""

    def _add(name: str, **overrides) -> str:
        return gateway.insert(Shape.HARBOUR, harbour_columns(name, **overrides))

    return _add
