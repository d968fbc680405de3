"""
Parsing and validation of model replies.

A reply is parsed as JSON first. If that fails, one repair pass strips
markdown code fences (and any prose around the outermost object) before
parsing again. Parsed data is then checked against the shape required by
the question type and normalized into a ``GeneratedQuestion``.
"""
import json
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from kidskills.exceptions import MalformedResponseError, QuestionValidationError
from kidskills.models.question_models import (
    GeneratedQuestion,
    OPTION_IDS,
    QuestionRequest,
    QuestionShape,
)
from kidskills.utils.logger import get_logger

logger = get_logger(__name__)

FENCE_OPEN = re.compile(r'^```(?:json)?[ \t]*\n')
FENCE_CLOSE = re.compile(r'\n?```$')
JSON_OBJECT = re.compile(r'\{.*\}', re.DOTALL)

# Field names models use despite being asked not to
QUESTION_ALIASES = ("problem", "prompt")
ANSWER_ALIASES = ("solution", "answer")

RECOMMENDATION_FIELDS = ("strengths", "improvementAreas", "recommendedActivities", "learningTip", "difficultyAdjustment")


class QuestionResponseParser:
    """Turns raw completion text into validated questions."""

    @staticmethod
    def strip_code_fences(content: str) -> str:
        cleaned = FENCE_OPEN.sub('', content.strip())
        cleaned = FENCE_CLOSE.sub('', cleaned)
        return cleaned.strip()

    def parse_json(self, content: Optional[str]) -> Dict[str, Any]:
        if not content or not content.strip():
            raise MalformedResponseError("Model returned an empty response")

        try:
            data = json.loads(content)
        except json.JSONDecodeError as first_error:
            logger.debug("Initial JSON parsing failed, trying to clean response")
            data = self._parse_repaired(content, first_error)

        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected a JSON object, got {type(data).__name__}",
                {"content": content[:200]}
            )
        return data

    def _parse_repaired(self, content: str, first_error: json.JSONDecodeError) -> Any:
        cleaned = self.strip_code_fences(content)
        try:
            return json.loads(cleaned)
        except json.JSONDecodeError:
            match = JSON_OBJECT.search(cleaned)
            if match:
                try:
                    return json.loads(match.group())
                except json.JSONDecodeError:
                    pass
        logger.error(f"Failed to parse JSON response after cleaning: {first_error}")
        raise MalformedResponseError(
            f"Failed to parse AI response: {first_error}",
            {"content": content[:200]}
        )

    def parse_question(self, content: Optional[str], request: QuestionRequest) -> GeneratedQuestion:
        return self.validate_question(self.parse_json(content), request)

    def validate_question(self, data: Dict[str, Any], request: QuestionRequest) -> GeneratedQuestion:
        """Check required fields for the request's question shape and build the question."""
        shape = request.shape
        question = self._first_present(data, ("question",) + QUESTION_ALIASES)
        if not isinstance(question, str) or not question.strip():
            raise MalformedResponseError("Response is missing required field 'question'", {"fields": list(data)})

        reading_passage = data.get("readingPassage")
        if request.question_type == "reading" and not (isinstance(reading_passage, str) and reading_passage.strip()):
            raise MalformedResponseError("Response is missing required field 'readingPassage'", {"fields": list(data)})

        options = None
        correct_answer = None
        if shape == QuestionShape.MULTIPLE_CHOICE:
            raw_options = data.get("options")
            if not isinstance(raw_options, list) or not raw_options:
                raise MalformedResponseError("Response is missing required field 'options'", {"fields": list(data)})
            options = self._normalize_options(raw_options, data.get("correctAnswer"))
            correct_answer = data.get("correctAnswer")
        elif shape == QuestionShape.FREE_RESPONSE:
            correct_answer = self._first_present(data, ("correctAnswer",) + ANSWER_ALIASES)
            if correct_answer is None or (isinstance(correct_answer, str) and not correct_answer.strip()):
                raise MalformedResponseError("Response is missing required field 'correctAnswer'", {"fields": list(data)})
            # Models often send whole numbers as 12.0
            if isinstance(correct_answer, float) and correct_answer.is_integer():
                correct_answer = int(correct_answer)

        tags = data.get("tags")
        if not isinstance(tags, list):
            tags = []

        try:
            return GeneratedQuestion(
                question=question,
                reading_passage=reading_passage if isinstance(reading_passage, str) else None,
                options=options,
                correct_answer=correct_answer if isinstance(correct_answer, (int, float, str)) else None,
                explanation=data.get("explanation"),
                hint=data.get("hint"),
                tags=[str(tag) for tag in tags] + [request.subject.value, request.question_type],
                source="remote",
            )
        except ValidationError as e:
            raise QuestionValidationError(f"Generated question failed validation: {e.errors()[0]['msg']}") from e

    def _normalize_options(self, raw_options: List[Any], correct_answer: Any) -> List[Dict[str, Any]]:
        options = []
        for index, raw in enumerate(raw_options):
            if isinstance(raw, dict):
                text = raw.get("text")
                is_correct = raw.get("isCorrect", raw.get("is_correct", False))
                option_id = raw.get("id")
            else:
                # Bare strings: the correct one is identified by correctAnswer
                text = raw
                is_correct = correct_answer is not None and str(raw).strip() == str(correct_answer).strip()
                option_id = None
            if text is None or not str(text).strip():
                raise QuestionValidationError(f"Option {index + 1} has no text")
            if isinstance(is_correct, str):
                is_correct = is_correct.strip().lower() == "true"
            options.append({
                "id": str(option_id).upper() if option_id else OPTION_IDS[index % len(OPTION_IDS)],
                "text": str(text).strip(),
                "is_correct": bool(is_correct),
            })
        return options

    @staticmethod
    def _first_present(data: Dict[str, Any], keys) -> Any:
        for key in keys:
            if data.get(key) is not None:
                return data[key]
        return None

    def parse_recommendations(self, content: Optional[str]) -> Dict[str, Any]:
        data = self.parse_json(content)
        missing = [name for name in RECOMMENDATION_FIELDS if name not in data]
        if missing:
            raise MalformedResponseError(f"Recommendations missing fields: {', '.join(missing)}")
        return data
