"""
Unit tests for the learning session.
"""
import json
import pytest
from unittest.mock import MagicMock

from kidskills.exceptions import StorageError
from kidskills.models.ai_models import DynamicModel, PredefinedModel
from kidskills.services.session_service import (
    CREDENTIAL_KEY,
    MODEL_DETAILS_KEY,
    MODEL_KEY,
    RECENT_QUESTIONS_KEY,
    LearningSession,
    history_key,
    performance_key,
)
from kidskills.utils.kv_store import InMemoryKeyValueStore


class TestLearningSession:
    """Test cases for LearningSession."""

    @pytest.mark.unit
    def test_empty_session_has_no_remote_access(self, session):
        assert session.api_key is None
        assert session.model is None
        assert session.has_remote_access is False

    @pytest.mark.unit
    def test_remote_access_needs_key_and_model(self, memory_store):
        session = LearningSession(memory_store, api_key="sk-or-key")
        assert session.has_remote_access is False
        session.select_model("openai/gpt-3.5-turbo")
        assert session.has_remote_access is True

    @pytest.mark.unit
    def test_set_api_key_persists_and_clears(self, session, memory_store):
        session.set_api_key("  sk-or-key  ")
        assert memory_store.get(CREDENTIAL_KEY) == "sk-or-key"
        session.set_api_key("   ")
        assert session.api_key is None
        assert memory_store.get(CREDENTIAL_KEY) is None

    @pytest.mark.unit
    def test_select_model_persists_variant(self, session, memory_store):
        session.available_models = [DynamicModel(id="mistralai/mistral-7b", display_name="Mistral 7B")]

        model = session.select_model("mistralai/mistral-7b")

        assert model == DynamicModel(id="mistralai/mistral-7b", display_name="Mistral 7B")
        assert memory_store.get(MODEL_KEY) == "mistralai/mistral-7b"
        assert memory_store.get_json(MODEL_DETAILS_KEY)["type"] == "dynamic"

    @pytest.mark.unit
    def test_state_restored_from_store(self, keyed_session, memory_store):
        """A new session over the same store sees the saved state."""
        keyed_session.remember_question("math", "What is 2 + 2?")

        restored = LearningSession(memory_store)

        assert restored.api_key == "sk-or-test-key-123456"
        assert isinstance(restored.model, PredefinedModel)
        assert restored.model.id == "anthropic/claude-3-haiku"
        assert restored.history_for("math").to_list() == ["What is 2 + 2?"]
        assert restored.recent_questions.to_list() == ["What is 2 + 2?"]

    @pytest.mark.unit
    def test_stored_key_wins_over_default(self, memory_store):
        memory_store.set(CREDENTIAL_KEY, "sk-or-stored")
        session = LearningSession(memory_store, api_key="sk-or-env", default_model_id="openai/gpt-3.5-turbo")
        assert session.api_key == "sk-or-stored"
        assert session.model.id == "openai/gpt-3.5-turbo"

    @pytest.mark.unit
    def test_history_is_bounded(self, memory_store):
        session = LearningSession(memory_store, history_size=3)
        for index in range(5):
            session.remember_question("english", f"Question {index}")
        assert session.history_for("english").to_list() == ["Question 2", "Question 3", "Question 4"]
        assert memory_store.get_json(history_key("english")) == ["Question 2", "Question 3", "Question 4"]

    @pytest.mark.unit
    def test_histories_are_per_subject(self, session):
        session.remember_question("math", "What is 1 + 1?")
        assert len(session.history_for("english")) == 0

    @pytest.mark.unit
    def test_reset_progress(self, session, memory_store):
        session.remember_question("math", "What is 1 + 1?")
        session.performance["math"] = MagicMock(to_dict=lambda: {"subject": "math"})
        session.save_performance("math")

        session.reset_progress()

        assert session.performance == {}
        assert len(session.history_for("math")) == 0
        assert memory_store.get(performance_key("math")) is None
        assert memory_store.get(RECENT_QUESTIONS_KEY) is None

    @pytest.mark.unit
    def test_external_credential_change(self, session, memory_store):
        """Changes written by another component are picked up."""
        memory_store.set(CREDENTIAL_KEY, "sk-or-from-settings")
        assert session.api_key == "sk-or-from-settings"
        memory_store.remove(CREDENTIAL_KEY)
        assert session.api_key is None

    @pytest.mark.unit
    def test_external_model_change(self, session, memory_store):
        memory_store.set_json(MODEL_DETAILS_KEY, {"type": "dynamic", "id": "google/gemma-7b", "display_name": "Gemma"})
        assert session.model == DynamicModel(id="google/gemma-7b", display_name="Gemma")

    @pytest.mark.unit
    def test_close_unsubscribes(self, session, memory_store):
        session.close()
        memory_store.set(CREDENTIAL_KEY, "sk-or-late")
        assert session.api_key is None

    @pytest.mark.unit
    def test_storage_failures_are_not_raised(self):
        """A broken store is logged and never interrupts the session."""
        store = InMemoryKeyValueStore()
        store._write = MagicMock(side_effect=StorageError("disk full"))
        session = LearningSession(store)

        session.set_api_key("sk-or-key")
        session.remember_question("math", "What is 5 + 5?")

        assert session.api_key == "sk-or-key"
        assert session.history_for("math").to_list() == ["What is 5 + 5?"]

    @pytest.mark.unit
    def test_unreadable_store_keeps_defaults(self):
        store = MagicMock()
        store.get.side_effect = StorageError("redis down")
        store.get_json.side_effect = StorageError("redis down")
        session = LearningSession(store, api_key="sk-or-env")
        assert session.api_key == "sk-or-env"

    @pytest.mark.unit
    def test_corrupt_values_only_lose_their_own_key(self):
        """Wrong-shaped stored values are skipped without dropping the keys after them."""
        english = {"subject": "english", "attempts": 4, "correct": 3}
        store = InMemoryKeyValueStore({
            CREDENTIAL_KEY: "sk-or-x",
            performance_key("math"): "[1, 2]",
            performance_key("english"): json.dumps(english),
            history_key("math"): '{"a": 1}',
            history_key("english"): '["Pick the noun."]',
            RECENT_QUESTIONS_KEY: '["Q1"]',
        })

        session = LearningSession(store)

        assert session.api_key == "sk-or-x"
        assert "math" not in session.performance
        assert session.performance["english"].correct == 3
        assert session.history_for("math").to_list() == []
        assert session.history_for("english").to_list() == ["Pick the noun."]
        assert session.recent_questions.to_list() == ["Q1"]

    @pytest.mark.unit
    def test_performance_record_without_subject_is_skipped(self):
        store = InMemoryKeyValueStore({
            performance_key("math"): '{"attempts": 2}',
            RECENT_QUESTIONS_KEY: "\"not a list\"",
        })
        session = LearningSession(store)
        assert session.performance == {}
        assert session.recent_questions.to_list() == []
