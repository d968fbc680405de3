"""
Procedural arithmetic questions.

Every question is computed locally, so generation never fails. Multiple
choice questions always carry four options: the correct value and three
distinct non-negative distractors close to it.
"""

import random
from typing import Dict, List, Optional, Tuple

from kidskills.models.question_models import (
    Difficulty,
    GeneratedQuestion,
    OPTION_IDS,
    QuestionOption,
)

INTEREST_ITEMS: Dict[str, List[str]] = {
    "animals": ["dogs", "cats", "birds", "fish", "rabbits"],
    "toys": ["blocks", "cars", "dolls", "action figures", "stuffed animals"],
    "food": ["apples", "cookies", "candies", "sandwiches", "pizzas"],
    "sports": ["balls", "bats", "goals", "points", "players"],
    "music": ["songs", "instruments", "notes", "beats", "melodies"],
    "books": ["books", "pages", "stories", "chapters", "characters"],
    "art": ["crayons", "markers", "paintings", "drawings", "colors"],
}
DEFAULT_INTEREST_ITEMS = "toys"
DEFAULT_INTERESTS = ["animals", "toys", "food", "sports"]
CHARACTER_NAMES = ["Sam", "Alex", "Jamie", "Taylor", "Jordan", "Casey", "Riley", "Morgan"]
VISUAL_ITEMS = ["stars", "circles", "squares", "triangles", "hearts"]

ADDITION_SHAPES: Dict[Difficulty, List[str]] = {
    Difficulty.EASY: ["basic", "basic", "visual", "word-problem"],
    Difficulty.MEDIUM: ["word-problem", "multi-number", "missing-number", "basic"],
    Difficulty.HARD: ["word-problem", "multi-number", "missing-number", "missing-number"],
}

# (min, max) for the first and second operand, grade 2 and up
ADDITION_RANGES: Dict[Difficulty, Tuple[Tuple[int, int], Tuple[int, int]]] = {
    Difficulty.EASY: ((1, 20), (1, 10)),
    Difficulty.MEDIUM: ((10, 50), (10, 30)),
    Difficulty.HARD: ((20, 100), (20, 50)),
}
YOUNG_LEARNER_RANGE = ((1, 10), (1, 10))

SUBTRACTION_MINUENDS = {Difficulty.EASY: (5, 20), Difficulty.MEDIUM: (20, 50), Difficulty.HARD: (50, 100)}
MULTIPLICATION_FACTORS = {Difficulty.EASY: (1, 5), Difficulty.MEDIUM: (2, 10), Difficulty.HARD: (5, 12)}


class ArithmeticGenerator:
    """Builds arithmetic questions from randomized operands."""

    def __init__(self, rng: random.Random = None):
        self._rng = rng or random.Random()

    def generate_arithmetic(
        self,
        operation: str,
        difficulty,
        grade_level: int = 2,
        interests: Optional[List[str]] = None
    ) -> GeneratedQuestion:
        difficulty = Difficulty.normalize(difficulty)
        interest = self._pick_interest(interests)
        handlers = {
            "addition": self._addition,
            "subtraction": self._subtraction,
            "multiplication": self._multiplication,
            "division": self._division,
        }
        if operation == "word-problem":
            return self.generate_word_problem(difficulty, grade_level, interests)
        handler = handlers.get(operation, self._mixed)
        return handler(difficulty, grade_level, interest)

    def _addition(self, difficulty: Difficulty, grade_level: int, interest: str) -> GeneratedQuestion:
        shape = self._rng.choice(ADDITION_SHAPES[difficulty])
        (min1, max1), (min2, max2) = ADDITION_RANGES[difficulty] if grade_level >= 2 else YOUNG_LEARNER_RANGE
        num1 = self._rng.randint(min1, max1)
        num2 = self._rng.randint(min2, max2)
        num3 = self._rng.randint(1, 10)

        if shape == "word-problem":
            name = self._rng.choice(CHARACTER_NAMES)
            item = self._rng.choice(INTEREST_ITEMS.get(interest, INTEREST_ITEMS[DEFAULT_INTEREST_ITEMS]))
            answer = num1 + num2
            question = f"{name} has {num1} {item} and gets {num2} more. How many {item} does {name} have now?"
            explanation = f"{name} started with {num1} {item} and got {num2} more. To find the total, we add: {num1} + {num2} = {answer}."
            hint = f"Add the number {name} started with to the number {name} got."
        elif shape == "multi-number":
            answer = num1 + num2 + num3
            question = f"What is {num1} + {num2} + {num3}?"
            explanation = f"To add multiple numbers, add them in any order. First, {num1} + {num2} = {num1 + num2}, then add {num3} to get {answer}."
            hint = "Try adding the first two numbers, then add the third number to that sum."
        elif shape == "missing-number":
            answer = num2
            question = f"What number plus {num1} equals {num1 + num2}?"
            explanation = f"The answer is {num2} because {num1} + {num2} = {num1 + num2}."
            hint = f"Think about what number you need to add to {num1} to get {num1 + num2}."
        elif shape == "visual":
            shape_item = self._rng.choice(VISUAL_ITEMS)
            answer = num1 + num2
            question = f"Imagine {num1} {shape_item} on the left side and {num2} {shape_item} on the right side. How many {shape_item} are there in total?"
            explanation = f"Add the number on the left ({num1}) to the number on the right ({num2}): {num1} + {num2} = {answer}."
            hint = f"Picture the {shape_item} in your mind and count them all together."
        else:
            answer = num1 + num2
            question = f"What is {num1} + {num2}?"
            explanation = f"To add {num1} and {num2}, count up from {num1} by adding {num2} more, which gives you {answer}."
            hint = f"Try counting up from {num1} by adding one at a time, {num2} times."

        return self._multiple_choice(question, answer, explanation, hint, ["math", "addition", shape, interest])

    def _subtraction(self, difficulty: Difficulty, grade_level: int, interest: str) -> GeneratedQuestion:
        low, high = SUBTRACTION_MINUENDS[difficulty] if grade_level >= 2 else (5, 10)
        num1 = self._rng.randint(low, high)
        num2 = self._rng.randint(1, num1)
        answer = num1 - num2
        return self._multiple_choice(
            f"What is {num1} - {num2}?",
            answer,
            f"To subtract {num2} from {num1}, count back {num2} from {num1}, which gives you {answer}.",
            f"Try counting down from {num1}, one at a time, {num2} times.",
            ["math", "subtraction", "basic", interest]
        )

    def _multiplication(self, difficulty: Difficulty, grade_level: int, interest: str) -> GeneratedQuestion:
        low, high = MULTIPLICATION_FACTORS[difficulty] if grade_level >= 2 else (1, 5)
        num1 = self._rng.randint(low, high)
        num2 = self._rng.randint(low, high)
        answer = num1 * num2
        return self._multiple_choice(
            f"What is {num1} × {num2}?",
            answer,
            f"To multiply {num1} by {num2}, add {num1} to itself {num2} times. {num1} × {num2} = {answer}.",
            f"Think of it as {num2} groups of {num1}.",
            ["math", "multiplication", "basic", interest]
        )

    def _division(self, difficulty: Difficulty, grade_level: int, interest: str) -> GeneratedQuestion:
        low, high = MULTIPLICATION_FACTORS[difficulty] if grade_level >= 2 else (1, 5)
        divisor = self._rng.randint(max(low, 1), high)
        answer = self._rng.randint(low, high)
        dividend = divisor * answer
        return self._multiple_choice(
            f"What is {dividend} ÷ {divisor}?",
            answer,
            f"To divide {dividend} by {divisor}, find how many groups of {divisor} make {dividend}. The answer is {answer}.",
            f"Think of how many times {divisor} goes into {dividend}.",
            ["math", "division", "basic", interest]
        )

    def _mixed(self, difficulty: Difficulty, grade_level: int, interest: str) -> GeneratedQuestion:
        """Any other math type: add/subtract when easy, multiply/divide when medium, two steps when hard."""
        if difficulty == Difficulty.EASY:
            operation = self._rng.choice([self._addition, self._subtraction])
            return operation(difficulty, grade_level, interest)
        if difficulty == Difficulty.MEDIUM:
            operation = self._rng.choice([self._multiplication, self._division])
            return operation(difficulty, grade_level, interest)

        start = self._rng.randint(5, 19)
        bought = self._rng.randint(5, 14)
        given = self._rng.randint(2, 6)
        answer = start + bought - given
        item = self._interest_item(interest)
        return self._multiple_choice(
            f"If you have {start} {item} and buy {bought} more, then give {given} to your friend, how many {item} do you have left?",
            answer,
            f"First add the {item} you had ({start}) to the ones you bought ({bought}), which gives you {start + bought}. "
            f"Then subtract the {given} you gave away, leaving {answer}.",
            "Break this into steps: first add, then subtract.",
            ["math", "multi-step", "word-problem", interest]
        )

    def generate_word_problem(self, difficulty, grade_level: int = 2, interests: Optional[List[str]] = None) -> GeneratedQuestion:
        """Free-response story problem; answered by typing the number."""
        difficulty = Difficulty.normalize(difficulty)
        interest = self._pick_interest(interests)
        name = self._rng.choice(CHARACTER_NAMES)
        item = self._interest_item(interest)

        if difficulty == Difficulty.EASY:
            start = self._rng.randint(1, 20 if grade_level >= 2 else 10)
            more = self._rng.randint(1, 10)
            answer = start + more
            question = f"{name} has {start} {item} and gets {more} more. How many {item} does {name} have now?"
            explanation = f"Add what {name} started with to what {name} got: {start} + {more} = {answer}."
            hint = "Are you putting things together or taking them away?"
        elif difficulty == Difficulty.MEDIUM:
            start = self._rng.randint(20, 50)
            given = self._rng.randint(5, start - 1)
            answer = start - given
            question = f"{name} has {start} {item} and gives {given} to a friend. How many {item} does {name} have left?"
            explanation = f"Take away what {name} gave: {start} - {given} = {answer}."
            hint = "Giving something away means subtracting."
        else:
            start = self._rng.randint(15, 60)
            bought = self._rng.randint(10, 40)
            given = self._rng.randint(5, 15)
            answer = start + bought - given
            question = (
                f"{name} has {start} {item}, finds {bought} more, and then shares {given} with a friend. "
                f"How many {item} does {name} have now?"
            )
            explanation = f"First {start} + {bought} = {start + bought}, then {start + bought} - {given} = {answer}."
            hint = "Break this into steps: first add, then subtract."

        return GeneratedQuestion(
            question=question,
            correct_answer=answer,
            explanation=explanation,
            hint=hint,
            tags=["math", "word-problem", difficulty.value, interest],
            source="procedural",
        )

    def build_options(self, correct: int) -> List[QuestionOption]:
        """The correct value plus three distinct non-negative distractors, shuffled, ids A-D."""
        candidates = {
            correct + 1,
            correct - 1,
            correct + self._rng.randint(2, 4),
            correct - self._rng.randint(2, 4),
        }
        if correct > 9:
            candidates.add(int(str(correct)[::-1]))

        distractors = sorted(value for value in candidates if value >= 0 and value != correct)
        self._rng.shuffle(distractors)
        chosen = distractors[:3]
        while len(chosen) < 3:
            value = correct + self._rng.randint(-5, 5)
            if value >= 0 and value != correct and value not in chosen:
                chosen.append(value)

        values = [correct] + chosen
        self._rng.shuffle(values)
        return [
            QuestionOption(id=OPTION_IDS[index], text=str(value), is_correct=value == correct)
            for index, value in enumerate(values)
        ]

    def _multiple_choice(self, question: str, answer: int, explanation: str, hint: str, tags: List[str]) -> GeneratedQuestion:
        return GeneratedQuestion(
            question=question,
            options=self.build_options(answer),
            correct_answer=str(answer),
            explanation=explanation,
            hint=hint,
            tags=tags,
            source="procedural",
        )

    def _pick_interest(self, interests: Optional[List[str]]) -> str:
        return self._rng.choice(interests or DEFAULT_INTERESTS).lower()

    def _interest_item(self, interest: str) -> str:
        return self._rng.choice(INTEREST_ITEMS.get(interest, INTEREST_ITEMS[DEFAULT_INTEREST_ITEMS]))
