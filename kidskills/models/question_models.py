"""
Question request/response models shared by the generators and the engine.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_EXPLANATION = "No explanation provided."
DEFAULT_HINT = "Think carefully about the question."
OPTION_IDS = ["A", "B", "C", "D", "E", "F"]

# Question types answered with a typed value instead of choosing an option
FREE_RESPONSE_TYPES = {"word-problem"}
# Ungraded prompts that carry neither options nor an answer
FREE_TEXT_TYPES = {"creative-writing"}
ARITHMETIC_TYPES = {"addition", "subtraction", "multiplication", "division", "word-problem", "arithmetic"}
TEMPERATURE_HINTS = ("temperature", "samplingTemperature")


class Subject(str, Enum):
    MATH = "math"
    ENGLISH = "english"
    LEADERSHIP = "leadership"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def normalize(cls, value: Union[str, "Difficulty", None]) -> "Difficulty":
        """Map adaptive (standard/simplified/advanced) and tier names onto easy/medium/hard."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.EASY
        key = str(value).strip().lower()
        if key in _DIFFICULTY_ALIASES:
            return _DIFFICULTY_ALIASES[key]
        raise ValueError(f"Unknown difficulty: {value}")


_DIFFICULTY_ALIASES = {
    "easy": Difficulty.EASY,
    "simplified": Difficulty.EASY,
    "beginner": Difficulty.EASY,
    "medium": Difficulty.MEDIUM,
    "standard": Difficulty.MEDIUM,
    "intermediate": Difficulty.MEDIUM,
    "hard": Difficulty.HARD,
    "advanced": Difficulty.HARD,
    "challenging": Difficulty.HARD,
}


class QuestionShape(Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    FREE_RESPONSE = "free-response"
    FREE_TEXT = "free-text"


def shape_for(question_type: str) -> QuestionShape:
    if question_type in FREE_RESPONSE_TYPES:
        return QuestionShape.FREE_RESPONSE
    if question_type in FREE_TEXT_TYPES:
        return QuestionShape.FREE_TEXT
    return QuestionShape.MULTIPLE_CHOICE


class PriorPerformance(BaseModel):
    correct: int = Field(0, ge=0)
    total: int = Field(0, ge=0)
    mistakes: List[str] = Field(default_factory=list)

    @property
    def percentage(self) -> Optional[float]:
        if self.total == 0:
            return None
        return round(self.correct / self.total * 100, 1)


class QuestionRequest(BaseModel):
    """A single generation request. Built fresh per call and never persisted."""
    subject: Subject = Subject.MATH
    question_type: str = Field("addition", alias="questionType")
    grade_level: int = Field(2, ge=1, le=12, alias="gradeLevel")
    difficulty: Difficulty = Difficulty.EASY
    prior_performance: Optional[Union[PriorPerformance, float]] = Field(None, alias="priorPerformance")
    interests: List[str] = Field(default_factory=list)
    hints: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        populate_by_name = True

    @field_validator('difficulty', mode='before')
    @classmethod
    def normalize_difficulty(cls, v):
        return Difficulty.normalize(v)

    @field_validator('question_type')
    @classmethod
    def normalize_question_type(cls, v):
        v = v.strip().lower()
        if not v:
            raise ValueError('questionType cannot be empty')
        return v

    @field_validator('interests')
    @classmethod
    def strip_interests(cls, v):
        return [interest.strip() for interest in v if interest and interest.strip()]

    @property
    def performance_percentage(self) -> Optional[float]:
        if self.prior_performance is None:
            return None
        if isinstance(self.prior_performance, PriorPerformance):
            return self.prior_performance.percentage
        return float(self.prior_performance)

    @property
    def shape(self) -> QuestionShape:
        return shape_for(self.question_type)

    @property
    def is_arithmetic(self) -> bool:
        return self.subject == Subject.MATH and self.question_type in ARITHMETIC_TYPES

    @property
    def sampling_temperature(self) -> Optional[float]:
        """Caller-chosen temperature from the ``temperature`` or ``samplingTemperature`` hint."""
        for key in TEMPERATURE_HINTS:
            if self.hints.get(key) is not None:
                return float(self.hints[key])
        return None


class QuestionOption(BaseModel):
    id: str
    text: str
    is_correct: bool = Field(False, alias="isCorrect")

    class Config:
        populate_by_name = True


class GeneratedQuestion(BaseModel):
    """Normalized question handed back to the caller."""
    question: str
    reading_passage: Optional[str] = Field(None, alias="readingPassage")
    options: Optional[List[QuestionOption]] = None
    correct_answer: Optional[Union[int, float, str]] = Field(None, alias="correctAnswer")
    explanation: str = DEFAULT_EXPLANATION
    hint: str = DEFAULT_HINT
    tags: List[str] = Field(default_factory=list)
    source: str = "local"

    class Config:
        populate_by_name = True

    @field_validator('question')
    @classmethod
    def validate_question(cls, v):
        if not v or not v.strip():
            raise ValueError('question cannot be empty')
        return v.strip()

    @field_validator('options', mode='before')
    @classmethod
    def empty_options_are_absent(cls, v):
        if v is not None and len(v) == 0:
            return None
        return v

    @field_validator('explanation', 'hint', mode='before')
    @classmethod
    def fill_blank_text(cls, v, info):
        if v is None or not str(v).strip():
            return DEFAULT_EXPLANATION if info.field_name == 'explanation' else DEFAULT_HINT
        return v

    @field_validator('tags')
    @classmethod
    def dedupe_tags(cls, v):
        return list(dict.fromkeys(tag for tag in v if tag))

    @model_validator(mode='after')
    def check_options(self):
        if self.options is not None:
            if len(self.options) < 2:
                raise ValueError('options must contain at least 2 entries')
            correct = sum(1 for option in self.options if option.is_correct)
            if correct != 1:
                raise ValueError(f'options must have exactly one correct entry (found {correct})')
        return self

    @property
    def is_multiple_choice(self) -> bool:
        return self.options is not None

    @property
    def correct_option(self) -> Optional[QuestionOption]:
        if not self.options:
            return None
        return next(option for option in self.options if option.is_correct)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict using the camelCase field names the UI expects."""
        return self.model_dump(by_alias=True, exclude_none=True)
