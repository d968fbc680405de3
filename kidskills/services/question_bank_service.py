"""
Local question bank for English and leadership activities.
"""

import random
from typing import Any, Dict, List, Optional

from kidskills.models.question_models import (
    Difficulty,
    GeneratedQuestion,
    OPTION_IDS,
    QuestionOption,
    QuestionRequest,
    Subject,
)
from kidskills.services.question_bank_data import (
    GRAMMAR_QUESTIONS,
    LEADERSHIP_SCENARIOS,
    READING_PASSAGES,
    VOCABULARY_QUESTIONS,
)
from kidskills.utils.logger import get_logger

logger = get_logger(__name__)

# Question types that can only come from a remote model
REMOTE_ONLY_TYPES = {(Subject.ENGLISH, "creative-writing")}


class LocalQuestionBank:
    """Selects canned questions and personalizes them with the learner's interests."""

    def __init__(self, rng: random.Random = None):
        self._rng = rng or random.Random()

    @staticmethod
    def has_local_equivalent(subject: Subject, question_type: str) -> bool:
        return (subject, question_type) not in REMOTE_ONLY_TYPES

    def get_question(self, request: QuestionRequest) -> GeneratedQuestion:
        """Serve a question for an English or leadership request."""
        if not self.has_local_equivalent(request.subject, request.question_type):
            raise ValueError(f"No local questions for {request.subject.value}/{request.question_type}")

        if request.subject == Subject.LEADERSHIP:
            return self.leadership_question(request.interests)

        if request.subject == Subject.ENGLISH:
            if request.question_type == "vocabulary":
                return self.vocabulary_question(request.difficulty)
            if request.question_type == "reading":
                return self.reading_question(request.hints.get("readingTopic"), request.interests)
            grammar_type = request.hints.get("grammarType") if request.question_type == "grammar" else None
            return self.grammar_question(grammar_type)

        raise ValueError(f"Local question bank does not serve {request.subject.value} questions")

    def grammar_question(self, grammar_type: Optional[str] = None) -> GeneratedQuestion:
        grammar_type = grammar_type if grammar_type in GRAMMAR_QUESTIONS else "general"
        entry = self._rng.choice(GRAMMAR_QUESTIONS[grammar_type])
        return self._build(entry, tags=[grammar_type, "grammar", "english"])

    def vocabulary_question(self, difficulty=Difficulty.MEDIUM) -> GeneratedQuestion:
        level = Difficulty.normalize(difficulty).value
        entry = self._rng.choice(VOCABULARY_QUESTIONS.get(level, VOCABULARY_QUESTIONS["medium"]))
        return self._build(entry, tags=["vocabulary", "english", level])

    def reading_question(self, topic: Optional[str] = None, interests: Optional[List[str]] = None) -> GeneratedQuestion:
        if topic not in READING_PASSAGES:
            topic = self._rng.choice(sorted(READING_PASSAGES))
        passage_entry = self._rng.choice(READING_PASSAGES[topic])
        entry = self._rng.choice(passage_entry["questions"])

        passage = passage_entry["passage"]
        if topic == "adventure" and interests:
            interest = self._rng.choice(interests)
            passage = passage.replace("something shiny", f"something related to {interest}")

        return self._build(entry, tags=[topic, "reading", "comprehension"], reading_passage=passage)

    def leadership_question(self, interests: Optional[List[str]] = None) -> GeneratedQuestion:
        entry = self._rng.choice(LEADERSHIP_SCENARIOS)
        question = entry["question"]
        if interests:
            interest = self._rng.choice(interests)
            if "a game at recess" in question:
                question = question.replace("a game at recess", f"a {interest} activity at recess")
            elif "a project" in question:
                question = question.replace("a project", f"a {interest} project")
        return self._build(dict(entry, question=question), tags=["leadership", "scenario"])

    def _build(self, entry: Dict[str, Any], tags: List[str], reading_passage: str = None) -> GeneratedQuestion:
        raw_options = list(entry["options"])
        self._rng.shuffle(raw_options)
        options = [
            QuestionOption(id=OPTION_IDS[index], text=option["text"], is_correct=option["isCorrect"])
            for index, option in enumerate(raw_options)
        ]
        correct = next(option.text for option in options if option.is_correct)
        return GeneratedQuestion(
            question=entry["question"],
            reading_passage=reading_passage,
            options=options,
            correct_answer=correct,
            explanation=entry.get("explanation"),
            hint=entry.get("hint"),
            tags=tags,
            source="local",
        )
