"""
Rejects generated questions whose wording is too close to recently served ones.
"""

import re
from typing import Iterable, Optional, Set, Union

from kidskills.utils.logger import get_logger

logger = get_logger(__name__)

PUNCTUATION = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()]")
DEFAULT_THRESHOLD = 0.7


def normalize_words(text: Optional[str]) -> Set[str]:
    """Lowercase, drop punctuation and split on whitespace."""
    if not text:
        return set()
    return set(PUNCTUATION.sub("", text.lower()).split())


def jaccard_similarity(first: Optional[str], second: Optional[str]) -> float:
    words_a = normalize_words(first)
    words_b = normalize_words(second)
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / len(words_a | words_b)


class SimilarityGuard:
    """Word-set Jaccard comparison against the recent history of a subject."""

    def __init__(self, threshold: float = DEFAULT_THRESHOLD):
        self.threshold = threshold

    def is_too_similar(self, candidate_text: Optional[str], history: Union[str, Iterable[str], None]) -> bool:
        if not candidate_text or not history:
            return False
        if isinstance(history, str):
            history = [history]

        for previous in history:
            similarity = jaccard_similarity(candidate_text, previous)
            if similarity > self.threshold:
                logger.info(f"Question too similar to a recent one (similarity {similarity:.2f})")
                return True
        return False
