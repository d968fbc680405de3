"""
Unit tests for adaptive difficulty and recommendations.
"""
import pytest

from kidskills.models.performance_models import DifficultyAdjustment, PerformanceRecord, SkillTier
from kidskills.models.question_models import Difficulty
from kidskills.services.difficulty_adapter import DifficultyAdapter, adjust_for_prior_performance


@pytest.fixture
def adapter():
    return DifficultyAdapter({}, window_size=5)


def _answer(adapter, subject, results, seconds=5.0):
    for was_correct in results:
        adapter.record_outcome(subject, was_correct, seconds)


class TestDifficultyAdapter:
    """Test cases for DifficultyAdapter."""

    @pytest.mark.unit
    def test_starts_at_beginner(self, adapter):
        assert adapter.current_tier("math") == SkillTier.BEGINNER
        assert adapter.next_difficulty("math") == Difficulty.EASY

    @pytest.mark.unit
    def test_escalates_after_perfect_window(self, adapter):
        """Five correct answers move the subject up one tier."""
        _answer(adapter, "math", [True] * 5)
        assert adapter.current_tier("math") == SkillTier.INTERMEDIATE
        assert adapter.next_difficulty("math") == Difficulty.MEDIUM

    @pytest.mark.unit
    def test_deescalates_after_poor_window(self, adapter):
        """One correct out of five moves the subject down one tier."""
        adapter.records["math"] = PerformanceRecord(subject="math", tier=SkillTier.ADVANCED)
        _answer(adapter, "math", [True, False, False, False, False])
        assert adapter.current_tier("math") == SkillTier.INTERMEDIATE

    @pytest.mark.unit
    def test_holds_on_middling_accuracy(self, adapter):
        _answer(adapter, "math", [True, True, True, False, False])
        assert adapter.current_tier("math") == SkillTier.BEGINNER

    @pytest.mark.unit
    def test_no_change_before_window_closes(self, adapter):
        _answer(adapter, "math", [True] * 4)
        assert adapter.current_tier("math") == SkillTier.BEGINNER
        assert adapter.get_record("math").window_attempts == 4

    @pytest.mark.unit
    def test_tiers_are_capped(self, adapter):
        _answer(adapter, "math", [True] * 20)
        assert adapter.current_tier("math") == SkillTier.ADVANCED
        _answer(adapter, "english", [False] * 20)
        assert adapter.current_tier("english") == SkillTier.BEGINNER

    @pytest.mark.unit
    def test_subjects_are_independent(self, adapter):
        _answer(adapter, "math", [True] * 5)
        assert adapter.current_tier("english") == SkillTier.BEGINNER

    @pytest.mark.unit
    def test_record_accumulates(self, adapter):
        adapter.record_outcome("math", False, 4.0, ["multiplication: 6 × 7", ""])
        adapter.record_outcome("math", True, 2.0)
        record = adapter.get_record("math")
        assert record.attempts == 2
        assert record.correct == 1
        assert record.average_response_time == 3.0
        assert list(record.recent_mistakes) == ["multiplication: 6 × 7"]

    @pytest.mark.unit
    def test_focus_areas(self, adapter):
        """Mistake text drives focus areas."""
        for _ in range(6):
            adapter.record_outcome("math", False, 5.0, ["Division with remainders"])
        adapter.record_outcome("english", False, 5.0, ["vocabulary: enormous"])

        assert adapter.focus_areas("math") == ["math", "division"]
        assert adapter.focus_areas("english") == ["vocabulary"]
        assert set(adapter.focus_areas()) == {"math", "division", "vocabulary"}

    @pytest.mark.unit
    def test_difficulty_adjustment(self, adapter):
        assert adapter.difficulty_adjustment() == DifficultyAdjustment.SAME
        _answer(adapter, "math", [True] * 10)
        assert adapter.difficulty_adjustment("math") == DifficultyAdjustment.ADVANCE
        _answer(adapter, "english", [False] * 10)
        assert adapter.difficulty_adjustment("english") == DifficultyAdjustment.SIMPLIFY

    @pytest.mark.unit
    def test_tips_for_response_time(self, adapter):
        _answer(adapter, "math", [True, False], seconds=15.0)
        assert any("not a race" in tip for tip in adapter.tips("math"))
        _answer(adapter, "english", [True, False], seconds=1.0)
        assert any("answering quickly" in tip for tip in adapter.tips("english"))

    @pytest.mark.unit
    def test_recommendations(self, adapter):
        _answer(adapter, "math", [True] * 5)
        _answer(adapter, "english", [False] * 5)

        recommendations = adapter.recommendations()

        assert recommendations.strengths == ["math"]
        assert recommendations.improvement_areas == ["english"]
        assert recommendations.recommended_activities[0].startswith("english")

    @pytest.mark.unit
    def test_next_grammar_type(self, adapter):
        """Grammar focus moves to a harder type once accuracy is high."""
        assert adapter.next_grammar_type(None) == "general"
        assert adapter.next_grammar_type("articles") == "articles"
        _answer(adapter, "english", [True] * 5)
        assert adapter.next_grammar_type("articles") == "prepositions"
        assert adapter.next_grammar_type("punctuation") == "punctuation"


class TestAdjustForPriorPerformance:
    """Test cases for prior-performance nudging."""

    @pytest.mark.unit
    @pytest.mark.parametrize("difficulty,percentage,expected", [
        (Difficulty.EASY, 90, Difficulty.MEDIUM),
        (Difficulty.EASY, 80, Difficulty.EASY),
        (Difficulty.MEDIUM, 40, Difficulty.EASY),
        (Difficulty.MEDIUM, 70, Difficulty.MEDIUM),
        (Difficulty.HARD, 10, Difficulty.HARD),
        (Difficulty.MEDIUM, None, Difficulty.MEDIUM),
    ])
    def test_adjustment(self, difficulty, percentage, expected):
        assert adjust_for_prior_performance(difficulty, percentage) == expected
