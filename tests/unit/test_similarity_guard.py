"""
Unit tests for the similarity guard.
"""
import pytest

from kidskills.services.similarity_guard import SimilarityGuard, jaccard_similarity, normalize_words


class TestSimilarityGuard:
    """Test cases for SimilarityGuard."""

    @pytest.mark.unit
    def test_identical_text_is_too_similar(self):
        assert SimilarityGuard().is_too_similar("The cat sat on the mat", "The cat sat on the mat") is True

    @pytest.mark.unit
    def test_unrelated_text_is_not_similar(self):
        assert SimilarityGuard().is_too_similar("apples and oranges", "space rockets fly far") is False

    @pytest.mark.unit
    @pytest.mark.parametrize("candidate,history", [
        (None, ["anything"]),
        ("", ["anything"]),
        ("some text", None),
        ("some text", []),
        ("some text", [None, ""]),
    ])
    def test_missing_text_never_matches(self, candidate, history):
        assert SimilarityGuard().is_too_similar(candidate, history) is False

    @pytest.mark.unit
    def test_checks_every_history_entry(self):
        history = ["How many dogs are there?", "What is 3 + 4?"]
        assert SimilarityGuard().is_too_similar("What is 3 + 4?", history) is True

    @pytest.mark.unit
    def test_threshold_is_exclusive(self):
        """Similarity must exceed the threshold, not just reach it."""
        # 4 shared words out of 5 distinct -> 0.8
        guard = SimilarityGuard(threshold=0.8)
        assert jaccard_similarity("a b c d", "a b c d e") == 0.8
        assert guard.is_too_similar("a b c d", ["a b c d e"]) is False

    @pytest.mark.unit
    def test_normalization_ignores_case_and_punctuation(self):
        assert normalize_words("Hello, World!") == {"hello", "world"}
        assert jaccard_similarity("Hello, World!", "hello world") == 1.0
        assert jaccard_similarity("", "hello") == 0.0
