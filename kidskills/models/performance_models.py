"""
Rolling per-subject state owned by a learning session.
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, Iterator, List, Optional

from kidskills.models.question_models import Difficulty

MISTAKE_BUFFER_SIZE = 10
HISTORY_CAPACITY = 10


class SkillTier(Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    def step_up(self) -> "SkillTier":
        tiers = list(SkillTier)
        return tiers[min(tiers.index(self) + 1, len(tiers) - 1)]

    def step_down(self) -> "SkillTier":
        tiers = list(SkillTier)
        return tiers[max(tiers.index(self) - 1, 0)]

    def to_difficulty(self) -> Difficulty:
        return {
            SkillTier.BEGINNER: Difficulty.EASY,
            SkillTier.INTERMEDIATE: Difficulty.MEDIUM,
            SkillTier.ADVANCED: Difficulty.HARD,
        }[self]


class DifficultyAdjustment(Enum):
    ADVANCE = "advance"
    SAME = "same"
    SIMPLIFY = "simplify"


@dataclass
class PerformanceRecord:
    """Per-subject counters plus the current 5-answer window."""
    subject: str
    attempts: int = 0
    correct: int = 0
    total_response_time: float = 0.0
    recent_mistakes: Deque[str] = field(default_factory=lambda: deque(maxlen=MISTAKE_BUFFER_SIZE))
    tier: SkillTier = SkillTier.BEGINNER
    window_attempts: int = 0
    window_correct: int = 0

    @property
    def accuracy(self) -> float:
        return self.correct / self.attempts if self.attempts else 0.0

    @property
    def percentage(self) -> Optional[float]:
        if not self.attempts:
            return None
        return round(self.accuracy * 100, 1)

    @property
    def average_response_time(self) -> float:
        return self.total_response_time / self.attempts if self.attempts else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "attempts": self.attempts,
            "correct": self.correct,
            "total_response_time": self.total_response_time,
            "recent_mistakes": list(self.recent_mistakes),
            "tier": self.tier.value,
            "window_attempts": self.window_attempts,
            "window_correct": self.window_correct,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PerformanceRecord":
        return cls(
            subject=data["subject"],
            attempts=int(data.get("attempts", 0)),
            correct=int(data.get("correct", 0)),
            total_response_time=float(data.get("total_response_time", 0.0)),
            recent_mistakes=deque(data.get("recent_mistakes", []), maxlen=MISTAKE_BUFFER_SIZE),
            tier=SkillTier(data.get("tier", SkillTier.BEGINNER.value)),
            window_attempts=int(data.get("window_attempts", 0)),
            window_correct=int(data.get("window_correct", 0)),
        )


class QuestionHistory:
    """Recently served question texts for one subject, oldest evicted first."""

    def __init__(self, entries: Optional[List[str]] = None, capacity: int = HISTORY_CAPACITY):
        self.capacity = capacity
        self._entries: Deque[str] = deque(entries or [], maxlen=capacity)

    def add(self, text: str) -> None:
        if text:
            self._entries.append(text)

    def to_list(self) -> List[str]:
        return list(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class Recommendations:
    focus_areas: List[str] = field(default_factory=list)
    tips: List[str] = field(default_factory=list)
    difficulty_adjustment: DifficultyAdjustment = DifficultyAdjustment.SAME
    strengths: List[str] = field(default_factory=list)
    improvement_areas: List[str] = field(default_factory=list)
    recommended_activities: List[str] = field(default_factory=list)
    learning_tip: str = "Keep practicing a little every day!"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "focus_areas": self.focus_areas,
            "tips": self.tips,
            "difficulty_adjustment": self.difficulty_adjustment.value,
            "strengths": self.strengths,
            "improvement_areas": self.improvement_areas,
            "recommended_activities": self.recommended_activities,
            "learning_tip": self.learning_tip,
        }
