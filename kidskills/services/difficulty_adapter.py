"""
Difficulty & Recommendation Adapter

Keeps rolling per-subject statistics and turns them into the next
requested difficulty plus advisory focus areas and tips.
"""
from typing import Dict, Iterable, List, Optional

from kidskills.models.performance_models import (
    DifficultyAdjustment,
    PerformanceRecord,
    Recommendations,
    SkillTier,
)
from kidskills.models.question_models import Difficulty
from kidskills.services.question_bank_data import GRAMMAR_TYPES
from kidskills.utils.logger import get_logger

logger = get_logger(__name__)

ESCALATE_ACCURACY = 0.8
DEESCALATE_ACCURACY = 0.4
SLOW_RESPONSE_SECONDS = 10
FAST_RESPONSE_SECONDS = 3

FOCUS_AREA_TIPS = {
    "math": "Practice visualizing math problems with drawings or objects.",
    "multiplication": "Try creating a multiplication table to help memorize common products.",
    "division": "Remember that division is the inverse of multiplication. Use that to check your work!",
    "english": "Try reading the questions out loud to better understand them.",
    "vocabulary": "Create flashcards for new words you encounter to build your vocabulary.",
    "leadership": "Think about how you would feel in different situations to develop empathy.",
}


def adjust_for_prior_performance(difficulty: Difficulty, percentage: Optional[float]) -> Difficulty:
    """Nudge a requested difficulty using the learner's previous score."""
    if percentage is None:
        return difficulty
    if percentage > 80 and difficulty == Difficulty.EASY:
        return Difficulty.MEDIUM
    if percentage < 50 and difficulty == Difficulty.MEDIUM:
        return Difficulty.EASY
    return difficulty


class DifficultyAdapter:
    """Adaptive difficulty over a shared map of per-subject performance records."""

    def __init__(self, records: Dict[str, PerformanceRecord], window_size: int = 5):
        self.records = records
        self.window_size = window_size
        self.focus_rules = [
            self._repeated_mistakes,
            self._math_operation_mistakes,
            self._vocabulary_mistakes
        ]

    def get_record(self, subject: str) -> PerformanceRecord:
        if subject not in self.records:
            self.records[subject] = PerformanceRecord(subject=subject)
        return self.records[subject]

    def record_outcome(
        self,
        subject: str,
        was_correct: bool,
        response_time_seconds: float,
        mistakes: Optional[List[str]] = None
    ) -> PerformanceRecord:
        """Fold one answered question into the subject's record."""
        record = self.get_record(subject)
        record.attempts += 1
        record.correct += 1 if was_correct else 0
        record.total_response_time += max(response_time_seconds, 0.0)
        for mistake in mistakes or []:
            if mistake:
                record.recent_mistakes.append(mistake)

        record.window_attempts += 1
        record.window_correct += 1 if was_correct else 0
        if record.window_attempts >= self.window_size:
            self._close_window(record)
        return record

    def _close_window(self, record: PerformanceRecord) -> None:
        accuracy = record.window_correct / record.window_attempts
        previous = record.tier
        if accuracy > ESCALATE_ACCURACY:
            record.tier = previous.step_up()
        elif accuracy < DEESCALATE_ACCURACY:
            record.tier = previous.step_down()

        if record.tier != previous:
            logger.info(f"{record.subject}: accuracy {accuracy:.0%}, tier {previous.value} -> {record.tier.value}")
        record.window_attempts = 0
        record.window_correct = 0

    def current_tier(self, subject: str) -> SkillTier:
        record = self.records.get(subject)
        return record.tier if record else SkillTier.BEGINNER

    def next_difficulty(self, subject: str) -> Difficulty:
        return self.current_tier(subject).to_difficulty()

    def next_grammar_type(self, current: Optional[str], subject: str = "english") -> str:
        """Move to the next harder grammar focus once the learner is doing well."""
        if current not in GRAMMAR_TYPES:
            return GRAMMAR_TYPES[0]
        record = self.records.get(subject)
        if record and record.attempts and record.accuracy > ESCALATE_ACCURACY:
            index = GRAMMAR_TYPES.index(current)
            return GRAMMAR_TYPES[min(index + 1, len(GRAMMAR_TYPES) - 1)]
        return current

    def focus_areas(self, subject: Optional[str] = None) -> List[str]:
        areas: List[str] = []
        for record in self._selected(subject):
            for rule in self.focus_rules:
                for area in rule(record):
                    if area not in areas:
                        areas.append(area)
        return areas

    def _repeated_mistakes(self, record: PerformanceRecord) -> List[str]:
        return [record.subject] if len(record.recent_mistakes) > 5 else []

    def _math_operation_mistakes(self, record: PerformanceRecord) -> List[str]:
        if record.subject != "math":
            return []
        return [
            operation for operation in ("multiplication", "division")
            if any(operation in mistake.lower() for mistake in record.recent_mistakes)
        ]

    def _vocabulary_mistakes(self, record: PerformanceRecord) -> List[str]:
        if record.subject == "english" and any("vocabulary" in m.lower() for m in record.recent_mistakes):
            return ["vocabulary"]
        return []

    def average_response_time(self, subject: Optional[str] = None) -> float:
        records = self._selected(subject)
        attempts = sum(record.attempts for record in records)
        if not attempts:
            return 0.0
        return sum(record.total_response_time for record in records) / attempts

    def difficulty_adjustment(self, subject: Optional[str] = None) -> DifficultyAdjustment:
        records = [record for record in self._selected(subject) if record.attempts]
        if not records:
            return DifficultyAdjustment.SAME
        average_score = sum(record.accuracy for record in records) / len(records) * 100
        if average_score > 85:
            return DifficultyAdjustment.ADVANCE
        if average_score < 60:
            return DifficultyAdjustment.SIMPLIFY
        return DifficultyAdjustment.SAME

    def tips(self, subject: Optional[str] = None) -> List[str]:
        tips = []
        has_answers = any(record.attempts for record in self._selected(subject))
        average_time = self.average_response_time(subject)
        if has_answers and average_time > SLOW_RESPONSE_SECONDS:
            tips.append("Try to take your time with each question. It's not a race!")
        elif has_answers and average_time < FAST_RESPONSE_SECONDS:
            tips.append("You're answering quickly! Make sure to read each question carefully.")

        for area in self.focus_areas(subject):
            if area in FOCUS_AREA_TIPS:
                tips.append(FOCUS_AREA_TIPS[area])

        adjustment = self.difficulty_adjustment(subject)
        if adjustment == DifficultyAdjustment.ADVANCE:
            tips.append("You're doing great! We'll give you more challenging questions to keep you engaged.")
        elif adjustment == DifficultyAdjustment.SIMPLIFY:
            tips.append("We'll provide some simpler questions to help build your confidence.")
        return tips

    def recommendations(self, subject: Optional[str] = None) -> Recommendations:
        """Locally derived recommendations. Advisory only."""
        records = [record for record in self._selected(subject) if record.attempts]
        strengths = [record.subject for record in records if record.accuracy >= ESCALATE_ACCURACY]
        improvement = [record.subject for record in records if record.accuracy < 0.6]
        activities = [
            f"{record.subject}: {record.tier.to_difficulty().value} practice"
            for record in sorted(records, key=lambda r: r.accuracy)
        ]
        return Recommendations(
            focus_areas=self.focus_areas(subject),
            tips=self.tips(subject),
            difficulty_adjustment=self.difficulty_adjustment(subject),
            strengths=strengths,
            improvement_areas=improvement,
            recommended_activities=activities[:3],
        )

    def _selected(self, subject: Optional[str]) -> Iterable[PerformanceRecord]:
        if subject is None:
            return list(self.records.values())
        record = self.records.get(subject)
        return [record] if record else []
