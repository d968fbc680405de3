"""
Learning session: the single owner of mutable engine state.

Holds the credential, the selected model, per-subject performance records
and question histories, and mirrors them into a key-value store. Store
writes are best effort; a failing store is logged and never interrupts
question generation.
"""

from typing import Callable, Dict, List, Optional

from kidskills.exceptions import StorageError
from kidskills.models.ai_models import (
    DynamicModel,
    Model,
    model_from_dict,
    model_to_dict,
    resolve_model,
)
from kidskills.models.performance_models import HISTORY_CAPACITY, PerformanceRecord, QuestionHistory
from kidskills.models.question_models import Subject
from kidskills.utils.kv_store import InMemoryKeyValueStore, KeyValueStore
from kidskills.utils.logger import get_logger, mask_secret

logger = get_logger(__name__)

CREDENTIAL_KEY = "openrouter_api_key"
MODEL_KEY = "selected_ai_model"
MODEL_DETAILS_KEY = "selected_model_details"
RECENT_QUESTIONS_KEY = "previous_questions"


def performance_key(subject: str) -> str:
    return f"performance:{subject}"


def history_key(subject: str) -> str:
    return f"question_history:{subject}"


class LearningSession:
    """Session-scoped state shared by the engine and the difficulty adapter."""

    def __init__(
        self,
        store: KeyValueStore = None,
        api_key: Optional[str] = None,
        default_model_id: Optional[str] = None,
        history_size: int = HISTORY_CAPACITY
    ):
        self.store = store or InMemoryKeyValueStore()
        self.history_size = history_size
        self.api_key: Optional[str] = None
        self.model: Optional[Model] = None
        self.available_models: List[DynamicModel] = []
        self.performance: Dict[str, PerformanceRecord] = {}
        self.histories: Dict[str, QuestionHistory] = {}
        self.recent_questions = QuestionHistory(capacity=history_size)

        self.load()
        if not self.api_key and api_key and api_key.strip():
            self.api_key = api_key.strip()
        if self.model is None and default_model_id:
            self.model = resolve_model(default_model_id)

        self._unsubscribe = self.store.subscribe(self._on_store_change)

    @property
    def has_remote_access(self) -> bool:
        return bool(self.api_key) and self.model is not None

    def load(self) -> None:
        """Read persisted state, keeping defaults for anything unreadable."""
        self._restore(CREDENTIAL_KEY, self._load_credential)
        self._restore(MODEL_DETAILS_KEY, self._load_model)
        for subject in Subject:
            self._restore(performance_key(subject.value), lambda: self._load_performance(subject.value))
            self._restore(history_key(subject.value), lambda: self._load_history(subject.value))
        self._restore(RECENT_QUESTIONS_KEY, self._load_recent_questions)
        logger.info(
            f"Session loaded (key {mask_secret(self.api_key)}, "
            f"model {self.model.id if self.model else '<none>'}, "
            f"{len(self.performance)} subjects with progress)"
        )

    def _restore(self, key: str, loader: Callable[[], None]) -> None:
        """Run one loader; a bad or unreachable value only loses that key."""
        try:
            loader()
        except (StorageError, KeyError, ValueError, TypeError) as e:
            logger.warning(f"Could not restore {key}: {e}")

    def _load_credential(self) -> None:
        self.api_key = self.store.get(CREDENTIAL_KEY) or None

    def _load_model(self) -> None:
        details = self.store.get_json(MODEL_DETAILS_KEY)
        if isinstance(details, dict) and details.get("id"):
            self.model = model_from_dict(details)
            return
        model_id = self.store.get(MODEL_KEY)
        self.model = resolve_model(model_id) if model_id else None

    def _load_performance(self, subject: str) -> None:
        data = self.store.get_json(performance_key(subject))
        if data is None:
            return
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        self.performance[subject] = PerformanceRecord.from_dict(data)

    def _load_history(self, subject: str) -> None:
        entries = self.store.get_json(history_key(subject), [])
        if not isinstance(entries, list):
            raise TypeError(f"expected a list, got {type(entries).__name__}")
        if entries:
            self.histories[subject] = QuestionHistory([str(e) for e in entries if e], capacity=self.history_size)

    def _load_recent_questions(self) -> None:
        entries = self.store.get_json(RECENT_QUESTIONS_KEY, [])
        if not isinstance(entries, list):
            raise TypeError(f"expected a list, got {type(entries).__name__}")
        self.recent_questions = QuestionHistory([str(e) for e in entries if e], capacity=self.history_size)

    def set_api_key(self, api_key: Optional[str]) -> None:
        api_key = (api_key or "").strip()
        self.api_key = api_key or None
        if self.api_key:
            self._persist(lambda: self.store.set(CREDENTIAL_KEY, self.api_key), "credential")
        else:
            self._persist(lambda: self.store.remove(CREDENTIAL_KEY), "credential")
        logger.info(f"API key updated: {mask_secret(self.api_key)}")

    def select_model(self, model_id: str, display_name: Optional[str] = None) -> Model:
        """Resolve and remember the model used for remote generation."""
        known = next((m for m in self.available_models if m.id == model_id), None)
        model = resolve_model(model_id, display_name or (known.display_name if known else None))
        self.model = model
        self._persist(lambda: self.store.set(MODEL_KEY, model.id), "model selection")
        self._persist(lambda: self.store.set_json(MODEL_DETAILS_KEY, model_to_dict(model)), "model selection")
        logger.info(f"Selected model {model.id} ({type(model).__name__})")
        return model

    def history_for(self, subject: str) -> QuestionHistory:
        if subject not in self.histories:
            self.histories[subject] = QuestionHistory(capacity=self.history_size)
        return self.histories[subject]

    def remember_question(self, subject: str, text: str) -> None:
        history = self.history_for(subject)
        history.add(text)
        self.recent_questions.add(text)
        self._persist(lambda: self.store.set_json(history_key(subject), history.to_list()), "question history")
        self._persist(lambda: self.store.set_json(RECENT_QUESTIONS_KEY, self.recent_questions.to_list()), "recent questions")

    def save_performance(self, subject: str) -> None:
        record = self.performance.get(subject)
        if record is None:
            return
        self._persist(lambda: self.store.set_json(performance_key(subject), record.to_dict()), "performance")

    def reset_progress(self) -> None:
        """Forget performance and history for every subject."""
        for subject in list(self.performance) + list(self.histories):
            self._persist(lambda: self.store.remove(performance_key(subject)), "performance")
            self._persist(lambda: self.store.remove(history_key(subject)), "question history")
        self._persist(lambda: self.store.remove(RECENT_QUESTIONS_KEY), "recent questions")
        self.performance.clear()
        self.histories.clear()
        self.recent_questions = QuestionHistory(capacity=self.history_size)

    def _persist(self, write: Callable[[], None], description: str) -> None:
        try:
            write()
        except StorageError as e:
            logger.warning(f"Failed to persist {description}: {e}")

    def _on_store_change(self, key: str, value: Optional[str]) -> None:
        """Pick up credential/model changes written by someone else."""
        if key == CREDENTIAL_KEY and (value or None) != self.api_key:
            self.api_key = value or None
            logger.info(f"API key changed externally: {mask_secret(self.api_key)}")
        elif key == MODEL_DETAILS_KEY and value:
            details = self.store.get_json(MODEL_DETAILS_KEY)
            if isinstance(details, dict) and details.get("id") and (not self.model or details["id"] != self.model.id):
                self.model = model_from_dict(details)
                logger.info(f"Model changed externally: {self.model.id}")

    def close(self) -> None:
        self._unsubscribe()
