#!/usr/bin/env python3
"""
seed_content.py - Create a topic with lessons and quizzes on the backend.

Reads a YAML or JSON content file, validates it, signs in, and creates the
topic, its lessons (in file order), its quizzes and their questions through
the authoring endpoints.

Content file layout:
  topic:   {name, description}
  lessons: [{title, content}]
  quizzes: [{title, description, questions: [{question, options, correct_answer}]}]

Usage:
  python scripts/seed_content.py scripts/content/intro_to_react.yaml --username admin
  python scripts/seed_content.py content.json --dry-run          # Validate only
"""

import argparse
import asyncio
import getpass
import json
import logging
import os
import sys
from pathlib import Path

# Project root for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv

load_dotenv(PROJECT_ROOT / ".env")

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from learnpath.api import ApiClient, ApiError
from learnpath.config import Settings
from learnpath.storage import TOKEN_KEY, LocalStorage

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Content file schema
# -----------------------------------------------------------------------------

class SeedQuestion(BaseModel):
    question: str
    options: list[str] = Field(..., min_length=2)
    correct_answer: int = Field(..., ge=0)

    @model_validator(mode="after")
    def answer_in_range(self):
        if self.correct_answer >= len(self.options):
            raise ValueError(f"correct_answer out of range for question: {self.question}")
        return self


class SeedQuiz(BaseModel):
    title: str
    description: str = ""
    questions: list[SeedQuestion] = []


class SeedLesson(BaseModel):
    title: str
    content: str = ""


class SeedTopic(BaseModel):
    name: str
    description: str = ""


class SeedFile(BaseModel):
    topic: SeedTopic
    lessons: list[SeedLesson] = []
    quizzes: list[SeedQuiz] = []


def load_content(path: Path) -> SeedFile:
    """Parse and validate a YAML or JSON content file."""
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            raw = json.load(f)
        else:
            raw = yaml.safe_load(f)
    return SeedFile.model_validate(raw)


# -----------------------------------------------------------------------------
# Upload
# -----------------------------------------------------------------------------

async def seed(api: ApiClient, content: SeedFile, username: str, password: str) -> dict:
    """Sign in and create everything in content. Returns created counts."""
    result = await api.auth.login(username, password)
    api.storage.set_item(TOKEN_KEY, result.token)
    logger.info(f"Signed in as {result.user.username}")

    topic = await api.topics.create(content.topic.name, content.topic.description)
    logger.info(f"Created topic {topic.id}: {topic.name}")

    for position, lesson in enumerate(content.lessons):
        created = await api.lessons.create(topic.id, lesson.title, lesson.content, position)
        logger.info(f"  Lesson {created.id}: {created.title}")

    question_total = 0
    for position, quiz in enumerate(content.quizzes):
        created = await api.quizzes.create(topic.id, quiz.title, quiz.description, position)
        logger.info(f"  Quiz {created.id}: {created.title}")
        for q_position, question in enumerate(quiz.questions):
            await api.quizzes.add_question(
                created.id,
                question.question,
                question.options,
                question.correct_answer,
                q_position,
            )
        question_total += len(quiz.questions)

    return {
        "topic_id": topic.id,
        "lessons": len(content.lessons),
        "quizzes": len(content.quizzes),
        "questions": question_total,
    }


def main():
    parser = argparse.ArgumentParser(description="Create a topic with lessons and quizzes")
    parser.add_argument("content", type=Path, help="YAML or JSON content file")
    parser.add_argument("--username", default=os.getenv("LEARNPATH_USERNAME"), help="Account to sign in with")
    parser.add_argument("--password", default=os.getenv("LEARNPATH_PASSWORD"), help="Password (prompted if omitted)")
    parser.add_argument("--api-url", help="Override LEARNPATH_API_URL")
    parser.add_argument("--dry-run", action="store_true", help="Validate the file without uploading")
    args = parser.parse_args()

    if not args.content.exists():
        logger.error(f"Content file not found: {args.content}")
        sys.exit(1)

    try:
        content = load_content(args.content)
    except (ValidationError, yaml.YAMLError, json.JSONDecodeError) as e:
        logger.error(f"Invalid content file: {e}")
        sys.exit(1)

    logger.info(
        f"Loaded '{content.topic.name}': {len(content.lessons)} lessons, "
        f"{len(content.quizzes)} quizzes"
    )
    if args.dry_run:
        return

    if not args.username:
        logger.error("--username (or LEARNPATH_USERNAME) is required")
        sys.exit(1)
    password = args.password or getpass.getpass("Password: ")

    settings = Settings.from_env()
    api = ApiClient(
        args.api_url or settings.api_url,
        LocalStorage(settings.storage_db),
        timeout=settings.timeout,
    )

    try:
        counts = asyncio.run(seed(api, content, args.username, password))
    except ApiError as e:
        logger.error(f"Upload failed: {e}")
        sys.exit(1)

    print("\n" + "=" * 50)
    print("SEED SUMMARY")
    print("=" * 50)
    for key, value in counts.items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
