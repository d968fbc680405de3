#!/usr/bin/env python3
"""
KidSkills CLI

Generate questions, record answers and manage the AI model selection from
a terminal using the same session store as the application.
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from kidskills.config import get_settings
from kidskills.exceptions import KidSkillsException
from kidskills.models.question_models import QuestionRequest
from kidskills.services.question_engine import QuestionEngine
from kidskills.utils.answer_checker import check_answer
from kidskills.utils.logger import get_logger

logger = get_logger(__name__)


class KidSkillsCLI:
    """Thin command layer over a QuestionEngine."""

    def __init__(self, engine: QuestionEngine = None):
        self.settings = get_settings()
        self.engine = engine or QuestionEngine.from_settings()

    async def generate(
        self,
        subject: str,
        question_type: str,
        grade_level: int,
        difficulty: Optional[str],
        interests: List[str],
        hints: Dict[str, Any]
    ) -> Dict[str, Any]:
        request = QuestionRequest(
            subject=subject,
            question_type=question_type,
            grade_level=grade_level,
            difficulty=difficulty or self.engine.next_difficulty(subject),
            interests=interests,
            hints=hints
        )
        question = await self.engine.generate(request)
        return question.to_payload()

    async def quiz(self, subject: str, question_type: str, count: int, grade_level: int) -> Dict[str, Any]:
        """Ask questions interactively and feed the answers back into the session."""
        correct = 0
        for number in range(1, count + 1):
            request = QuestionRequest(
                subject=subject,
                question_type=question_type,
                grade_level=grade_level,
                difficulty=self.engine.next_difficulty(subject)
            )
            question = await self.engine.generate(request)
            print(f"\n{number}. {question.question}")
            if question.reading_passage:
                print(f"\n{question.reading_passage}\n")
            for option in question.options or []:
                print(f"   {option.id}) {option.text}")

            loop = asyncio.get_running_loop()
            started = loop.time()
            answer = input("> ")
            elapsed = loop.time() - started

            result = check_answer(question, answer)
            if result is None:
                print("Thanks for writing!")
                continue
            if result:
                correct += 1
                print("✅ Correct!")
            else:
                print(f"❌ Not quite. {question.explanation}")
            self.engine.record_outcome(
                subject,
                result,
                elapsed,
                [] if result else [f"{question_type}: {question.question}"]
            )

        return {
            "correct": correct,
            "total": count,
            "next_difficulty": self.engine.next_difficulty(subject).value
        }

    async def list_models(self) -> List[Dict[str, str]]:
        models = await self.engine.list_models()
        return [{"id": model.id, "name": model.display_name, "kind": type(model).__name__} for model in models]

    async def validate_key(self, api_key: Optional[str]) -> bool:
        valid = await self.engine.validate_api_key(api_key)
        if valid and api_key:
            self.engine.session.set_api_key(api_key)
        return valid

    async def recommendations(self, subject: Optional[str], use_ai: bool) -> Dict[str, Any]:
        recommendations = await self.engine.recommendations(subject, use_ai=use_ai)
        return recommendations.to_dict()


def _parse_hints(values: List[str]) -> Dict[str, Any]:
    hints = {}
    for value in values or []:
        key, _, raw = value.partition("=")
        hints[key] = raw
    return hints


async def _run(args) -> None:
    cli = KidSkillsCLI()
    try:
        if args.command == "generate":
            result = await cli.generate(
                subject=args.subject,
                question_type=args.type,
                grade_level=args.grade,
                difficulty=args.difficulty,
                interests=args.interest or [],
                hints=_parse_hints(args.hint)
            )
            print(json.dumps(result, indent=2))

        elif args.command == "quiz":
            summary = await cli.quiz(args.subject, args.type, args.count, args.grade)
            print(f"📊 Quiz Summary: {json.dumps(summary, indent=2)}")

        elif args.command == "models":
            for model in await cli.list_models():
                print(f"{model['id']:45} {model['name']} ({model['kind']})")

        elif args.command == "select-model":
            model = cli.engine.session.select_model(args.model_id, args.name)
            print(f"✅ Selected {model.id}")

        elif args.command == "validate-key":
            if await cli.validate_key(args.api_key):
                print("✅ API key is valid")
            else:
                print("❌ API key is not valid")
                sys.exit(1)

        elif args.command == "recommend":
            result = await cli.recommendations(args.subject, args.ai)
            print(json.dumps(result, indent=2))
    finally:
        await cli.engine.close()


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="KidSkills question engine CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    generate_parser = subparsers.add_parser("generate", help="Generate one question")
    generate_parser.add_argument("--subject", default="math", choices=["math", "english", "leadership"])
    generate_parser.add_argument("--type", default="addition", help="Question type, e.g. addition, grammar, reading")
    generate_parser.add_argument("--grade", type=int, default=2, help="Grade level")
    generate_parser.add_argument("--difficulty", help="easy, medium or hard (defaults to the adaptive level)")
    generate_parser.add_argument("--interest", action="append", help="Learner interest (repeatable)")
    generate_parser.add_argument("--hint", action="append", help="Extra generation hint as key=value (repeatable)")

    quiz_parser = subparsers.add_parser("quiz", help="Answer questions interactively")
    quiz_parser.add_argument("--subject", default="math", choices=["math", "english", "leadership"])
    quiz_parser.add_argument("--type", default="addition", help="Question type")
    quiz_parser.add_argument("--count", type=int, default=5, help="Number of questions")
    quiz_parser.add_argument("--grade", type=int, default=2, help="Grade level")

    subparsers.add_parser("models", help="List selectable AI models")

    select_parser = subparsers.add_parser("select-model", help="Select the AI model for generation")
    select_parser.add_argument("model_id", help="Model identifier, e.g. openai/gpt-3.5-turbo")
    select_parser.add_argument("--name", help="Display name for models not in the predefined list")

    validate_parser = subparsers.add_parser("validate-key", help="Check an OpenRouter API key and store it if valid")
    validate_parser.add_argument("--api-key", help="Key to check (defaults to the stored key)")

    recommend_parser = subparsers.add_parser("recommend", help="Show learning recommendations")
    recommend_parser.add_argument("--subject", choices=["math", "english", "leadership"])
    recommend_parser.add_argument("--ai", action="store_true", help="Ask the AI model for extra recommendations")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    try:
        asyncio.run(_run(args))
    except KidSkillsException as e:
        message = getattr(e, "user_message", None) or str(e)
        logger.error(f"❌ Command failed: {e}")
        print(f"❌ {message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
