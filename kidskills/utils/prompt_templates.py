"""
Prompt templates for remote question and recommendation generation.
"""

import json
from typing import Any, Dict, List, Optional

from kidskills.models.question_models import QuestionRequest, QuestionShape, Subject

OPTION_RULES = """Each option should have:
- id: A unique identifier (A, B, C, or D)
- text: The text of the option
- isCorrect: Boolean indicating if this is the correct answer (exactly one should be true)"""

JSON_ONLY = 'IMPORTANT: Return ONLY a JSON object with no markdown formatting, no backticks, and no "json" tag.'


class PromptTemplates:
    """Prompt templates for every supported subject/question type."""

    MULTIPLE_CHOICE_SCHEMA = {
        "question": "The question text",
        "options": [
            {"id": "A", "text": "First option", "isCorrect": False},
            {"id": "B", "text": "Second option", "isCorrect": False},
            {"id": "C", "text": "Third option", "isCorrect": True},
            {"id": "D", "text": "Fourth option", "isCorrect": False}
        ],
        "explanation": "Explanation of the correct answer",
        "hint": "A helpful hint",
        "tags": ["tag1", "tag2"]
    }

    FREE_RESPONSE_SCHEMA = {
        "question": "The complete word problem text",
        "correctAnswer": 42,
        "explanation": "Step-by-step explanation of how to solve the problem",
        "hint": "A helpful hint",
        "tags": ["tag1", "tag2"]
    }

    FREE_TEXT_SCHEMA = {
        "question": "An engaging creative writing prompt",
        "explanation": "Guidance on how to approach the prompt",
        "hint": "Ideas to help with writer's block",
        "tags": ["tag1", "tag2"]
    }

    RECOMMENDATIONS_SCHEMA = {
        "type": "object",
        "properties": {
            "strengths": {"type": "array", "items": {"type": "string"}},
            "improvementAreas": {"type": "array", "items": {"type": "string"}},
            "recommendedActivities": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "subject": {"type": "string"},
                        "type": {"type": "string"},
                        "difficulty": {"type": "string"}
                    },
                    "required": ["subject", "type", "difficulty"]
                }
            },
            "learningTip": {"type": "string"},
            "difficultyAdjustment": {"type": "string", "enum": ["increase", "decrease", "maintain"]}
        },
        "required": ["strengths", "improvementAreas", "recommendedActivities", "learningTip", "difficultyAdjustment"]
    }

    RECOMMENDATIONS_SYSTEM = f"""You are an educational AI assistant for KidSkills, an app for children.
Analyze the student's performance data and generate personalized learning recommendations.

{JSON_ONLY}"""

    @staticmethod
    def get_response_schema(shape: QuestionShape) -> Dict[str, Any]:
        if shape == QuestionShape.FREE_RESPONSE:
            return PromptTemplates.FREE_RESPONSE_SCHEMA
        if shape == QuestionShape.FREE_TEXT:
            return PromptTemplates.FREE_TEXT_SCHEMA
        return PromptTemplates.MULTIPLE_CHOICE_SCHEMA

    @staticmethod
    def _learner_context(request: QuestionRequest) -> str:
        lines = []
        performance = request.performance_percentage
        if performance is not None:
            lines.append(f"The student's previous performance was {performance:g}%.")
        if request.interests:
            lines.append(f"The student is interested in: {', '.join(request.interests)}.")
        return "\n".join(lines)

    @staticmethod
    def get_grammar_prompt(request: QuestionRequest) -> str:
        grammar_type = request.hints.get("grammarType", "general")
        short = "Keep sentences short and concise." if request.hints.get("keepSentencesShort") else ""
        return f"""You are an expert English teacher creating a grammar question for a grade {request.grade_level} student.
Generate a unique and engaging grammar question focusing on {grammar_type} rules.
{short}
The question should be appropriate for the student's grade level ({request.grade_level}) and difficulty level ({request.difficulty.value}).
{PromptTemplates._learner_context(request)}

Your response must be in JSON format with the following fields:
- question: A clear question about {grammar_type} in English
- options: An array of 4 possible answers, with exactly one correct option
- explanation: A helpful explanation of why the correct answer is right
- hint: A subtle hint that guides without giving away the answer
- tags: An array of relevant tags for categorizing this question

{OPTION_RULES}

Make the question engaging and educational."""

    @staticmethod
    def get_reading_prompt(request: QuestionRequest) -> str:
        topic = request.hints.get("readingTopic", "general")
        return f"""You are an expert English teacher creating a reading comprehension question for a grade {request.grade_level} student.
Generate a short, engaging reading passage about {topic} followed by a comprehension question.
The passage should be appropriate for the student's grade level ({request.grade_level}) and difficulty level ({request.difficulty.value}).
{PromptTemplates._learner_context(request)}

Your response must be in JSON format with the following fields:
- readingPassage: A short, engaging passage about {topic} (3-4 paragraphs)
- question: A clear comprehension question about the passage
- options: An array of 4 possible answers, with exactly one correct option
- explanation: A helpful explanation of why the correct answer is right, referencing the passage
- hint: A subtle hint that guides the student to look at the relevant part of the passage
- tags: An array of relevant tags for categorizing this question

{OPTION_RULES}

Make the passage and question engaging, educational, and appropriate for the grade level."""

    @staticmethod
    def get_vocabulary_prompt(request: QuestionRequest) -> str:
        return f"""You are an expert English teacher creating a vocabulary question for a grade {request.grade_level} student.
Generate a unique and engaging vocabulary question.
The question should be appropriate for the student's grade level ({request.grade_level}) and difficulty level ({request.difficulty.value}).
{PromptTemplates._learner_context(request)}

Your response must be in JSON format with the following fields:
- question: A clear question about English vocabulary
- options: An array of 4 possible answers, with exactly one correct option
- explanation: A helpful explanation of why the correct answer is right
- hint: A subtle hint that guides without giving away the answer
- tags: An array of relevant tags for categorizing this question

{OPTION_RULES}

Make the question engaging and educational."""

    @staticmethod
    def get_creative_writing_prompt(request: QuestionRequest) -> str:
        return f"""You are an expert English teacher creating a creative writing prompt for a grade {request.grade_level} student.
Generate a unique and engaging creative writing prompt.
The prompt should be appropriate for the student's grade level ({request.grade_level}) and difficulty level ({request.difficulty.value}).
{PromptTemplates._learner_context(request)}

Your response must be in JSON format with the following fields:
- question: An engaging creative writing prompt
- explanation: Some guidance on how to approach this writing prompt
- hint: Additional ideas or suggestions to help with writer's block
- tags: An array of relevant tags for categorizing this prompt

Make the prompt engaging, imaginative, and appropriate for the grade level."""

    @staticmethod
    def get_word_problem_prompt(request: QuestionRequest, seed: int) -> str:
        return f"""You are an educational AI assistant for KidSkills, an app for children in grade {request.grade_level}.
Generate a {request.difficulty.value} level math word problem appropriate for grade {request.grade_level} students.
{PromptTemplates._learner_context(request)}

IMPORTANT: Generate a UNIQUE and DIVERSE word problem that is different from previous problems. Use creative scenarios, different number values, and varied problem structures.

The word problem should:
1. Be clear and concise
2. Use simple language appropriate for grade {request.grade_level}
3. Involve real-world scenarios that children can relate to
4. Have a single numerical answer
5. If possible, incorporate the student's interests to make it engaging
6. Include only necessary information to solve the problem

Random seed: {seed} (use this to generate a unique problem)

{JSON_ONLY}
IMPORTANT: Your response MUST use the field name 'question' (not 'problem') for the word problem text, and 'correctAnswer' (not 'solution') for the answer.
IMPORTANT: Do NOT include an options array in your response. This is a free-form answer question, not multiple choice.

Expected JSON format:
{json.dumps(PromptTemplates.FREE_RESPONSE_SCHEMA, indent=2)}"""

    @staticmethod
    def get_leadership_prompt(request: QuestionRequest, seed: int) -> str:
        return f"""You are an educational AI assistant for KidSkills, an app for children in grade {request.grade_level}.
Generate a {request.difficulty.value} level leadership scenario: a short everyday situation at school, at home or with friends, followed by the question "What should you do?".
{PromptTemplates._learner_context(request)}

The scenario should teach kindness, fairness, responsibility or teamwork. Exactly one option shows the best leadership choice; the other options should be believable but less helpful.

Random seed: {seed} (use this to generate a unique scenario)

Your response must be in JSON format with the fields question, options, explanation, hint and tags.

{OPTION_RULES}

{JSON_ONLY}"""

    @staticmethod
    def get_generic_prompt(request: QuestionRequest, seed: int) -> str:
        return f"""You are an educational AI assistant for KidSkills, an app for children in grade {request.grade_level}.
Generate a {request.difficulty.value} level {request.subject.value} question of type {request.question_type}.
{PromptTemplates._learner_context(request)}

IMPORTANT: Generate a UNIQUE and DIVERSE question that is different from previous questions. Use creative scenarios and varied problem structures.

Random seed: {seed} (use this to generate a unique problem)

{OPTION_RULES}

{JSON_ONLY}"""

    @staticmethod
    def get_system_prompt(request: QuestionRequest, seed: int) -> str:
        """Pick the system prompt for the request's subject and question type."""
        question_type = request.question_type
        if request.subject == Subject.ENGLISH:
            if question_type == "grammar":
                return PromptTemplates.get_grammar_prompt(request)
            if question_type == "reading":
                return PromptTemplates.get_reading_prompt(request)
            if question_type == "vocabulary":
                return PromptTemplates.get_vocabulary_prompt(request)
            if question_type == "creative-writing":
                return PromptTemplates.get_creative_writing_prompt(request)
        elif request.subject == Subject.MATH and question_type == "word-problem":
            return PromptTemplates.get_word_problem_prompt(request, seed)
        elif request.subject == Subject.LEADERSHIP:
            return PromptTemplates.get_leadership_prompt(request, seed)
        return PromptTemplates.get_generic_prompt(request, seed)

    @staticmethod
    def get_user_message(request: QuestionRequest, seed: int) -> str:
        return (
            f"Generate a unique {request.subject.value} {request.question_type} for grade "
            f"{request.grade_level} with random seed {seed}. Return ONLY a JSON object with the required fields."
        )

    @staticmethod
    def build_question_messages(request: QuestionRequest, seed: int) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": PromptTemplates.get_system_prompt(request, seed)},
            {"role": "user", "content": PromptTemplates.get_user_message(request, seed)}
        ]

    @staticmethod
    def build_recommendation_messages(performance_data: Dict[str, Any], interests: Optional[List[str]] = None) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": PromptTemplates.RECOMMENDATIONS_SYSTEM},
            {
                "role": "user",
                "content": (
                    f"Generate learning recommendations based on this performance data: "
                    f"{json.dumps(performance_data, default=str)}. "
                    f"The student is interested in: {', '.join(interests or [])}. "
                    f"Return ONLY a JSON object with the required fields."
                )
            }
        ]
