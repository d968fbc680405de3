"""
Question engine: the entry point UI code talks to.

``generate`` picks remote or local generation for a request, deduplicates
remote candidates against recent history and always returns a usable
question unless the requested type only exists remotely. ``record_outcome``
feeds answered questions back into adaptive difficulty.
"""

import asyncio
import random
from collections import defaultdict
from typing import Dict, List, Optional, Union

from kidskills.config import get_settings
from kidskills.exceptions import (
    AIServiceError,
    CredentialError,
    MalformedResponseError,
    QuestionValidationError,
)
from kidskills.models.ai_models import PREDEFINED_MODELS, Model, resolve_model
from kidskills.models.performance_models import DifficultyAdjustment, PerformanceRecord, Recommendations
from kidskills.models.question_models import Difficulty, GeneratedQuestion, QuestionRequest, Subject
from kidskills.services.ai_client import OpenRouterClient
from kidskills.services.arithmetic_generator import ArithmeticGenerator
from kidskills.services.difficulty_adapter import DifficultyAdapter, adjust_for_prior_performance
from kidskills.services.question_bank_service import LocalQuestionBank
from kidskills.services.remote_question_generator import RemoteQuestionGenerator
from kidskills.services.session_service import LearningSession
from kidskills.services.similarity_guard import SimilarityGuard
from kidskills.utils.error_handling import RetryConfig
from kidskills.utils.kv_store import KeyValueStore, create_store
from kidskills.utils.logger import get_logger

logger = get_logger(__name__)
settings = get_settings()

AI_ADJUSTMENTS = {
    "increase": DifficultyAdjustment.ADVANCE,
    "decrease": DifficultyAdjustment.SIMPLIFY,
    "maintain": DifficultyAdjustment.SAME,
}


class QuestionEngine:
    """Orchestrates remote generation, dedup, local fallback and bookkeeping for one session."""

    def __init__(
        self,
        session: LearningSession,
        remote: Optional[RemoteQuestionGenerator] = None,
        arithmetic: Optional[ArithmeticGenerator] = None,
        bank: Optional[LocalQuestionBank] = None,
        guard: Optional[SimilarityGuard] = None,
        request_delay: Optional[float] = None,
        dedup_max_retries: Optional[int] = None,
        backup_model_id: Optional[str] = None,
        retry_config: Optional[RetryConfig] = None,
        sleep=asyncio.sleep,
        rng: random.Random = None
    ):
        self.session = session
        self._rng = rng or random.Random()
        self._sleep = sleep
        self.arithmetic = arithmetic or ArithmeticGenerator(self._rng)
        self.bank = bank or LocalQuestionBank(self._rng)
        self.guard = guard or SimilarityGuard(settings.SIMILARITY_THRESHOLD)
        self.adapter = DifficultyAdapter(session.performance, settings.DIFFICULTY_WINDOW_SIZE)
        self.request_delay = settings.REQUEST_DELAY_SECONDS if request_delay is None else request_delay
        self.dedup_max_retries = settings.DEDUP_MAX_RETRIES if dedup_max_retries is None else dedup_max_retries
        self.backup_model_id = backup_model_id or settings.BACKUP_AI_MODEL
        self.retry_config = retry_config or RetryConfig.from_settings(settings)

        self._remote = remote
        self._remote_key: Optional[str] = None
        self._owns_remote = remote is None

        self._in_flight: Dict[str, asyncio.Future] = {}
        self._in_flight_lock = asyncio.Lock()
        self._request_tokens: Dict[str, int] = defaultdict(int)

    @classmethod
    def from_settings(cls, store: Optional[KeyValueStore] = None) -> "QuestionEngine":
        """Engine with a session backed by the configured store."""
        session = LearningSession(
            store or create_store(settings),
            api_key=settings.OPENROUTER_API_KEY,
            default_model_id=settings.DEFAULT_AI_MODEL,
            history_size=settings.QUESTION_HISTORY_SIZE
        )
        return cls(session)

    async def generate(self, request: QuestionRequest, activity_id: Optional[str] = None) -> GeneratedQuestion:
        """
        Produce the next question for an activity.

        Calls for an activity that already has a generation in flight wait
        for that generation and return its question.

        Raises:
            CredentialError: the type only exists remotely and no usable key is set
            AIServiceError: the type only exists remotely and remote generation failed
        """
        slot = activity_id or f"{request.subject.value}:{request.question_type}"

        async with self._in_flight_lock:
            pending = self._in_flight.get(slot)
            if pending is None:
                future = asyncio.get_running_loop().create_future()
                self._in_flight[slot] = future
                token = self._request_tokens[slot]

        if pending is not None:
            logger.debug(f"Generation already in flight for {slot}, waiting for it")
            return await asyncio.shield(pending)

        try:
            question = await self._generate(request, slot, token)
            future.set_result(question)
            return question
        except Exception as e:
            future.set_exception(e)
            # Mark the exception retrieved when nobody else is waiting
            future.add_done_callback(lambda f: f.exception())
            raise
        finally:
            if not future.done():
                future.cancel()
            async with self._in_flight_lock:
                self._in_flight.pop(slot, None)

    def invalidate(self, activity_id: str) -> None:
        """Mark any in-flight result for the activity as stale so it is not recorded."""
        self._request_tokens[activity_id] += 1

    async def _generate(self, request: QuestionRequest, slot: str, token: int) -> GeneratedQuestion:
        request = self._with_grammar_progression(request)
        has_local = self.bank.has_local_equivalent(request.subject, request.question_type)
        question = None

        if self.session.has_remote_access:
            try:
                question = await self._generate_remote(request)
            except AIServiceError as e:
                if not has_local:
                    logger.error(f"Remote generation failed for {slot} and no local fallback exists: {e}")
                    raise
                logger.warning(f"Remote generation failed for {slot} ({type(e).__name__}: {e}), using local questions")
        elif not has_local:
            raise CredentialError(
                f"{request.subject.value}/{request.question_type} needs an AI model",
                {"subject": request.subject.value, "question_type": request.question_type}
            )

        if question is None:
            question = self._generate_local(request)

        self._commit(request, slot, token, question)
        return question

    async def _generate_remote(self, request: QuestionRequest) -> GeneratedQuestion:
        remote = await self._remote_generator()
        model = self.session.model
        history = self.session.history_for(request.subject.value)

        regenerations = 0
        while True:
            candidate = await self._request_with_backup(remote, self._enrich(request), model)
            if not self.guard.is_too_similar(candidate.question, history):
                return candidate
            if regenerations >= self.dedup_max_retries:
                logger.warning(f"Still too similar after {regenerations} regenerations, accepting candidate")
                return candidate
            regenerations += 1
            logger.info(f"Regenerating similar question ({regenerations}/{self.dedup_max_retries})")

    async def _request_with_backup(
        self,
        remote: RemoteQuestionGenerator,
        request: QuestionRequest,
        model: Model
    ) -> GeneratedQuestion:
        await self._sleep(self.request_delay)
        try:
            return await remote.request_from_model(request, model)
        except (MalformedResponseError, QuestionValidationError) as e:
            backup = resolve_model(self.backup_model_id)
            if backup.id == model.id:
                raise
            logger.warning(f"{model.id} returned unusable output ({e}), trying {backup.id}")
            await self._sleep(self.request_delay)
            return await remote.request_from_model(request, backup)

    def _enrich(self, request: QuestionRequest) -> QuestionRequest:
        hints = dict(request.hints)
        hints["randomSeed"] = self._rng.randint(0, 9999)
        if request.sampling_temperature is None:
            hints["temperature"] = 0.7 + self._rng.random() * 0.3
        return request.model_copy(update={"hints": hints})

    def _with_grammar_progression(self, request: QuestionRequest) -> QuestionRequest:
        """Move English grammar requests to a harder sub-type once the learner is doing well."""
        if request.subject != Subject.ENGLISH or request.question_type != "grammar":
            return request
        current = request.hints.get("grammarType")
        grammar_type = self.adapter.next_grammar_type(current, Subject.ENGLISH.value)
        if grammar_type == current:
            return request
        logger.info(f"Grammar focus {current or '<none>'} -> {grammar_type}")
        return request.model_copy(update={"hints": dict(request.hints, grammarType=grammar_type)})

    def _generate_local(self, request: QuestionRequest) -> GeneratedQuestion:
        difficulty = adjust_for_prior_performance(request.difficulty, request.performance_percentage)
        if request.subject == Subject.MATH:
            return self.arithmetic.generate_arithmetic(
                request.question_type,
                difficulty,
                request.grade_level,
                request.interests
            )
        return self.bank.get_question(request.model_copy(update={"difficulty": difficulty}))

    def _commit(self, request: QuestionRequest, slot: str, token: int, question: GeneratedQuestion) -> None:
        if self._request_tokens[slot] != token:
            logger.info(f"Discarding stale result for {slot}")
            return
        self.session.remember_question(request.subject.value, question.question)

    async def _remote_generator(self) -> RemoteQuestionGenerator:
        if not self._owns_remote:
            return self._remote
        if self._remote is None or self._remote_key != self.session.api_key:
            if self._remote is not None:
                await self._remote.client.close()
            client = OpenRouterClient(self.session.api_key)
            self._remote = RemoteQuestionGenerator(client, self.retry_config, sleep=self._sleep, rng=self._rng)
            self._remote_key = self.session.api_key
        return self._remote

    def record_outcome(
        self,
        subject: Union[Subject, str],
        was_correct: bool,
        response_time_seconds: float,
        mistakes: Optional[List[str]] = None
    ) -> PerformanceRecord:
        """Report an answered question. Updates rolling stats and persists them."""
        subject = subject.value if isinstance(subject, Subject) else subject
        record = self.adapter.record_outcome(subject, was_correct, response_time_seconds, mistakes)
        self.session.save_performance(subject)
        return record

    def next_difficulty(self, subject: Union[Subject, str]) -> Difficulty:
        subject = subject.value if isinstance(subject, Subject) else subject
        return self.adapter.next_difficulty(subject)

    async def recommendations(
        self,
        subject: Optional[str] = None,
        use_ai: bool = False,
        interests: Optional[List[str]] = None
    ) -> Recommendations:
        """Local recommendations, optionally enriched by the remote model."""
        local = self.adapter.recommendations(subject)
        if not (use_ai and self.session.has_remote_access):
            return local

        performance = {
            name: record.to_dict() for name, record in self.session.performance.items()
            if subject is None or name == subject
        }
        try:
            remote = await self._remote_generator()
            data = await remote.request_recommendations(performance, self.session.model, interests)
        except AIServiceError as e:
            logger.warning(f"AI recommendations unavailable, using local ones: {e}")
            return local

        local.strengths = [str(item) for item in data.get("strengths") or []] or local.strengths
        local.improvement_areas = [str(item) for item in data.get("improvementAreas") or []] or local.improvement_areas
        activities = []
        for item in data.get("recommendedActivities") or []:
            if isinstance(item, dict):
                activities.append(f"{item.get('subject', '')}: {item.get('type', '')} ({item.get('difficulty', '')})")
            else:
                activities.append(str(item))
        local.recommended_activities = activities or local.recommended_activities
        if data.get("learningTip"):
            local.learning_tip = str(data["learningTip"])
        local.difficulty_adjustment = AI_ADJUSTMENTS.get(data.get("difficultyAdjustment"), local.difficulty_adjustment)
        return local

    async def list_models(self) -> List[Model]:
        """Predefined models first, then whatever the provider lists."""
        models: List[Model] = list(PREDEFINED_MODELS)
        if not self.session.api_key:
            return models
        try:
            remote = await self._remote_generator()
            self.session.available_models = await remote.client.list_models()
        except AIServiceError as e:
            logger.warning(f"Could not fetch model list: {e}")
            return models
        known = {model.id for model in models}
        models.extend(model for model in self.session.available_models if model.id not in known)
        return models

    async def validate_api_key(self, api_key: Optional[str] = None) -> bool:
        key = api_key or self.session.api_key
        if not key:
            return False
        client = OpenRouterClient(key)
        try:
            return await client.validate_api_key()
        finally:
            await client.close()

    async def close(self) -> None:
        if self._owns_remote and self._remote is not None:
            await self._remote.client.close()
            self._remote = None
        self.session.close()
