"""
Remote question generation: prompt selection, one chat completion per
attempt, reply parsing and bounded retries.
"""

import asyncio
import random
from typing import Any, Dict, List, Optional

from kidskills.models.ai_models import Model
from kidskills.models.question_models import GeneratedQuestion, QuestionRequest
from kidskills.services.ai_client import OpenRouterClient
from kidskills.utils.error_handling import RetryConfig, retry_async
from kidskills.utils.logger import get_logger
from kidskills.utils.prompt_templates import PromptTemplates
from kidskills.utils.response_parser import QuestionResponseParser

logger = get_logger(__name__)


class RemoteQuestionGenerator:
    """Generates questions with a remote model and validates the replies."""

    def __init__(
        self,
        client: OpenRouterClient,
        retry_config: RetryConfig = None,
        parser: QuestionResponseParser = None,
        sleep=asyncio.sleep,
        rng: random.Random = None
    ):
        self.client = client
        self.retry_config = retry_config or RetryConfig()
        self.parser = parser or QuestionResponseParser()
        self._sleep = sleep
        self._rng = rng or random.Random()

    async def request_from_model(self, request: QuestionRequest, model: Model) -> GeneratedQuestion:
        """
        Generate one question with ``model``.

        Transient failures (429, 5xx, network, unparseable or invalid replies)
        repeat the whole request up to ``retry_config.max_retries`` more times.

        Raises:
            AuthError, RateLimitError, TransportError, MalformedResponseError,
            QuestionValidationError: after retries are exhausted
        """
        seed = request.hints.get("randomSeed")
        if seed is None:
            seed = self._rng.randint(0, 9999)
        temperature = request.sampling_temperature
        if temperature is None:
            temperature = 0.7 + self._rng.random() * 0.3

        messages = PromptTemplates.build_question_messages(request, seed)
        response_format = {
            "type": "json_object",
            "schema": PromptTemplates.get_response_schema(request.shape)
        }

        async def attempt() -> GeneratedQuestion:
            content = await self.client.chat_completion(
                messages,
                model.id,
                temperature=temperature,
                response_format=response_format
            )
            return self.parser.parse_question(content, request)

        question = await retry_async(
            attempt,
            self.retry_config,
            sleep=self._sleep,
            description=f"{request.subject.value}/{request.question_type} generation with {model.id}"
        )
        logger.info(f"Generated {request.subject.value}/{request.question_type} question with {model.display_name}")
        return question

    async def request_recommendations(
        self,
        performance_data: Dict[str, Any],
        model: Model,
        interests: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Ask the model for learning recommendations based on performance data."""
        messages = PromptTemplates.build_recommendation_messages(performance_data, interests)
        response_format = {"type": "json_object", "schema": PromptTemplates.RECOMMENDATIONS_SCHEMA}

        async def attempt() -> Dict[str, Any]:
            content = await self.client.chat_completion(
                messages,
                model.id,
                temperature=0.7,
                response_format=response_format
            )
            return self.parser.parse_recommendations(content)

        return await retry_async(
            attempt,
            self.retry_config,
            sleep=self._sleep,
            description=f"recommendations with {model.id}"
        )
