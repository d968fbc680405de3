"""
Answer checking for served questions.
"""

from typing import Any, Optional

from kidskills.models.question_models import GeneratedQuestion


def normalize_answer(value: Any) -> str:
    """Trim whitespace and strip leading zeros so '007' matches 7 and '0' stays '0'."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    stripped = text.lstrip("0")
    if text and not stripped:
        return "0"
    return stripped


def answers_match(user_input: Any, correct_answer: Any) -> bool:
    """Blank input never matches; numeric answers compare by value."""
    given = normalize_answer(user_input)
    expected = normalize_answer(correct_answer)
    if not given:
        return False
    if given == expected:
        return True
    try:
        return float(given) == float(expected)
    except ValueError:
        return False


def check_answer(question: GeneratedQuestion, response: Optional[str]) -> Optional[bool]:
    """
    Grade a learner response.

    Multiple-choice responses may be an option id or the option text;
    free-response answers are compared after normalization. Free-text
    prompts are ungraded and return None.
    """
    if question.options:
        if response is None or not response.strip():
            return False
        correct = question.correct_option
        picked = response.strip()
        return picked.upper() == correct.id.upper() or picked.lower() == correct.text.strip().lower()
    if question.correct_answer is not None:
        return answers_match(response, question.correct_answer)
    return None
