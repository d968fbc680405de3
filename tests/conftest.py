"""
Test configuration for KidSkills tests.
"""
# Set test environment variables BEFORE any imports that might use them
import os
os.environ["OPENROUTER_API_KEY"] = ""
os.environ.setdefault("REQUEST_DELAY_SECONDS", "0")
os.environ.setdefault("KV_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from kidskills.models.question_models import GeneratedQuestion, QuestionOption
from kidskills.services.question_engine import QuestionEngine
from kidskills.services.session_service import LearningSession
from kidskills.utils.kv_store import InMemoryKeyValueStore


def make_question(text: str = "Which word means 'very big'?", source: str = "remote") -> GeneratedQuestion:
    """A valid multiple-choice question for stubbing remote replies."""
    return GeneratedQuestion(
        question=text,
        options=[
            QuestionOption(id="A", text="Tiny", is_correct=False),
            QuestionOption(id="B", text="Huge", is_correct=True),
            QuestionOption(id="C", text="Small", is_correct=False),
            QuestionOption(id="D", text="Slow", is_correct=False),
        ],
        tags=["vocabulary"],
        source=source,
    )


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def session(memory_store):
    return LearningSession(memory_store)


@pytest.fixture
def keyed_session(memory_store):
    """Session with a credential and a selected model."""
    session = LearningSession(memory_store)
    session.set_api_key("sk-or-test-key-123456")
    session.select_model("anthropic/claude-3-haiku")
    return session


@pytest.fixture
def mock_remote():
    """Stand-in for RemoteQuestionGenerator."""
    remote = MagicMock()
    remote.request_from_model = AsyncMock(return_value=make_question())
    remote.request_recommendations = AsyncMock()
    remote.client = MagicMock()
    remote.client.list_models = AsyncMock(return_value=[])
    remote.client.close = AsyncMock()
    return remote


@pytest.fixture
def fake_sleep():
    return AsyncMock()


@pytest.fixture
def engine_factory(mock_remote, fake_sleep, rng):
    """Build engines around a given session with no real delays."""
    def build(session, **kwargs):
        kwargs.setdefault("remote", mock_remote)
        return QuestionEngine(
            session,
            request_delay=0,
            dedup_max_retries=2,
            sleep=fake_sleep,
            rng=rng,
            **kwargs
        )
    return build
