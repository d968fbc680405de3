"""
Unit tests for the command line interface.
"""
import pytest
from unittest.mock import patch

from kidskills.cli import KidSkillsCLI, _parse_hints
from kidskills.models.question_models import Difficulty


class TestCLI:
    """Test cases for KidSkillsCLI."""

    @pytest.mark.unit
    def test_parse_hints(self):
        assert _parse_hints(["grammarType=punctuation", "readingTopic=space"]) == {
            "grammarType": "punctuation",
            "readingTopic": "space",
        }
        assert _parse_hints(None) == {}
        assert _parse_hints(["flag"]) == {"flag": ""}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_generate_uses_adaptive_difficulty(self, engine_factory, session):
        engine = engine_factory(session)
        for _ in range(5):
            engine.record_outcome("math", True, 2.0)
        cli = KidSkillsCLI(engine)

        payload = await cli.generate("math", "subtraction", 3, None, [], {})

        assert payload["source"] == "procedural"
        assert len(payload["options"]) == 4
        assert engine.next_difficulty("math") == Difficulty.MEDIUM

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_quiz_records_outcomes(self, engine_factory, session):
        engine = engine_factory(session)
        cli = KidSkillsCLI(engine)

        with patch("builtins.input", return_value="Z"), patch("builtins.print"):
            summary = await cli.quiz("math", "addition", 3, 2)

        assert summary == {"correct": 0, "total": 3, "next_difficulty": "easy"}
        record = session.performance["math"]
        assert record.attempts == 3
        assert len(record.recent_mistakes) == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_list_models(self, engine_factory, session):
        models = await KidSkillsCLI(engine_factory(session)).list_models()
        assert models[0] == {"id": "openai/gpt-3.5-turbo", "name": "GPT-3.5 Turbo", "kind": "PredefinedModel"}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_recommendations(self, engine_factory, session):
        result = await KidSkillsCLI(engine_factory(session)).recommendations(None, use_ai=False)
        assert result["difficulty_adjustment"] == "same"
