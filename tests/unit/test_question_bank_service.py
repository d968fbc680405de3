"""
Unit tests for the local question bank.
"""
import random
import pytest

from kidskills.models.question_models import QuestionRequest, Subject
from kidskills.services.question_bank_data import GRAMMAR_QUESTIONS, READING_PASSAGES
from kidskills.services.question_bank_service import LocalQuestionBank


@pytest.fixture
def bank():
    return LocalQuestionBank(random.Random(11))


def _assert_valid(question):
    assert [option.id for option in question.options] == ["A", "B", "C", "D"][:len(question.options)]
    assert sum(1 for option in question.options if option.is_correct) == 1
    assert question.correct_answer == question.correct_option.text
    assert question.source == "local"


class TestLocalQuestionBank:
    """Test cases for LocalQuestionBank."""

    @pytest.mark.unit
    def test_creative_writing_has_no_local_equivalent(self, bank):
        assert LocalQuestionBank.has_local_equivalent(Subject.ENGLISH, "creative-writing") is False
        assert LocalQuestionBank.has_local_equivalent(Subject.ENGLISH, "grammar") is True
        with pytest.raises(ValueError):
            bank.get_question(QuestionRequest(subject="english", question_type="creative-writing"))

    @pytest.mark.unit
    def test_math_is_not_served(self, bank):
        with pytest.raises(ValueError):
            bank.get_question(QuestionRequest(subject="math", question_type="addition"))

    @pytest.mark.unit
    @pytest.mark.parametrize("grammar_type", sorted(GRAMMAR_QUESTIONS))
    def test_every_grammar_type_is_valid(self, grammar_type):
        for seed in range(10):
            question = LocalQuestionBank(random.Random(seed)).grammar_question(grammar_type)
            _assert_valid(question)
            assert question.tags[0] == grammar_type

    @pytest.mark.unit
    def test_unknown_grammar_type_uses_general(self, bank):
        request = QuestionRequest(subject="english", question_type="grammar", hints={"grammarType": "haiku"})
        assert bank.get_question(request).tags[0] == "general"

    @pytest.mark.unit
    @pytest.mark.parametrize("difficulty", ["easy", "medium", "hard"])
    def test_vocabulary(self, bank, difficulty):
        request = QuestionRequest(subject="english", question_type="vocabulary", difficulty=difficulty)
        question = bank.get_question(request)
        _assert_valid(question)
        assert difficulty in question.tags

    @pytest.mark.unit
    @pytest.mark.parametrize("topic", sorted(READING_PASSAGES))
    def test_reading_includes_passage(self, bank, topic):
        request = QuestionRequest(subject="english", question_type="reading", hints={"readingTopic": topic})
        question = bank.get_question(request)
        _assert_valid(question)
        assert question.reading_passage
        assert question.tags[0] == topic

    @pytest.mark.unit
    def test_adventure_passage_uses_interest(self, bank):
        question = bank.reading_question("adventure", ["dinosaurs"])
        assert "something related to dinosaurs" in question.reading_passage
        assert "something shiny" not in question.reading_passage

    @pytest.mark.unit
    def test_unknown_topic_picks_any_passage(self, bank):
        question = bank.reading_question("volcanoes")
        assert question.tags[0] in READING_PASSAGES

    @pytest.mark.unit
    def test_leadership_personalized(self):
        """Interests are woven into recess and project scenarios."""
        for seed in range(20):
            question = LocalQuestionBank(random.Random(seed)).leadership_question(["robots"])
            _assert_valid(question)
            if "recess" in question.question:
                assert "a robots activity at recess" in question.question
            if "project" in question.question:
                assert "a robots project" in question.question

    @pytest.mark.unit
    def test_unrecognized_english_type_uses_grammar(self, bank):
        question = bank.get_question(QuestionRequest(subject="english", question_type="spelling"))
        _assert_valid(question)
        assert "grammar" in question.tags
