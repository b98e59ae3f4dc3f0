"""
Content schemas for learnpath.

Defines Pydantic models for the course content served by the backend:
- Topics with ordered lessons and quizzes
- Lessons with completion state
- Quizzes with multiple-choice questions

Backend payloads are not trusted: option lists may arrive JSON-encoded,
question lists may be missing. Both are normalised here so the rest of the
package only ever sees well-formed lists.
"""

import json
import logging
from typing import Any, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)

EntityId = Union[int, str]


def normalize_options(value: Any) -> list[str]:
    """
    Coerce raw option data into a list of strings.

    Accepts a list or a JSON-encoded list. Anything else (bad JSON, a scalar,
    a list containing non-strings) degrades to an empty list.
    """
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            return []
    if not isinstance(value, (list, tuple)):
        return []
    if not all(isinstance(option, str) for option in value):
        return []
    return list(value)


def _by_order_index(items: list) -> list:
    # sorted() is stable: equal order_index keeps backend order
    return sorted(items, key=lambda item: item.order_index)


class ContentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# -----------------------------------------------------------------------------
# Lessons
# -----------------------------------------------------------------------------

class Lesson(ContentModel):
    id: EntityId
    title: str
    content: str = ""
    order_index: int = Field(default=0, validation_alias=AliasChoices("order_index", "orderIndex"))
    completed: bool = Field(default=False, validation_alias=AliasChoices("completed", "is_completed"))

    @field_validator("content", mode="before")
    @classmethod
    def content_not_null(cls, v):
        return v or ""


# -----------------------------------------------------------------------------
# Quizzes
# -----------------------------------------------------------------------------

class Question(ContentModel):
    """
    Multiple-choice question. Option labels (A, B, C...) are implied by position.
    """
    id: EntityId
    question: str
    options: list[str] = []
    correct_answer: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("correct_answer", "correctAnswer"),
    )
    order_index: int = Field(default=0, validation_alias=AliasChoices("order_index", "orderIndex"))

    @field_validator("options", mode="before")
    @classmethod
    def options_as_list(cls, v):
        return normalize_options(v)

    @model_validator(mode="after")
    def correct_answer_in_range(self):
        if self.options and self.correct_answer >= len(self.options):
            raise ValueError(
                f"correct_answer {self.correct_answer} out of range for {len(self.options)} options"
            )
        return self

    @property
    def has_options(self) -> bool:
        return bool(self.options)

    def option_text(self, index: Optional[int]) -> Optional[str]:
        """Option text at index, or None for a missing/invalid index."""
        if index is None or not 0 <= index < len(self.options):
            return None
        return self.options[index]


class Quiz(ContentModel):
    id: EntityId
    title: str
    description: Optional[str] = None
    order_index: int = Field(default=0, validation_alias=AliasChoices("order_index", "orderIndex"))
    questions: list[Question] = []
    question_count: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("question_count", "questionCount", "questions_count"),
    )

    @field_validator("questions", mode="before")
    @classmethod
    def questions_as_list(cls, v):
        if not isinstance(v, (list, tuple)):
            return []
        # bad questions are dropped one by one
        questions = []
        for raw in v:
            if isinstance(raw, Question):
                questions.append(raw)
                continue
            try:
                questions.append(Question.model_validate(raw))
            except ValidationError as e:
                question_id = raw.get("id") if isinstance(raw, dict) else None
                logger.warning(f"Dropping malformed question {question_id}: {e.error_count()} error(s)")
        return questions

    @field_validator("questions")
    @classmethod
    def questions_in_order(cls, v):
        return _by_order_index(v)

    @property
    def total_questions(self) -> int:
        """Question count, falling back to the aggregate count from a summary payload."""
        if self.questions:
            return len(self.questions)
        return self.question_count or 0


# -----------------------------------------------------------------------------
# Topics
# -----------------------------------------------------------------------------

class Topic(ContentModel):
    """
    A course-like grouping of lessons and quizzes.

    Topics listed from ``GET /topics`` carry only aggregate counts; the
    lesson and quiz lists stay empty until the topic detail is fetched.
    """
    id: EntityId
    name: str
    description: str = ""
    lessons: list[Lesson] = []
    quizzes: list[Quiz] = []
    lesson_count: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("lesson_count", "lessonCount", "lessons_count"),
    )
    quiz_count: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("quiz_count", "quizCount", "quizzes_count"),
    )
    completed_count: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("completed_count", "completedCount", "completed_lessons"),
    )

    @field_validator("description", mode="before")
    @classmethod
    def description_not_null(cls, v):
        return v or ""

    @field_validator("lessons", "quizzes", mode="before")
    @classmethod
    def items_as_list(cls, v):
        if not isinstance(v, (list, tuple)):
            return []
        return v

    @field_validator("lessons", "quizzes")
    @classmethod
    def items_in_order(cls, v):
        return _by_order_index(v)

    @computed_field
    @property
    def total_lessons(self) -> int:
        if self.lessons:
            return len(self.lessons)
        return self.lesson_count or 0

    @property
    def total_quizzes(self) -> int:
        if self.quizzes:
            return len(self.quizzes)
        return self.quiz_count or 0

    @property
    def completed_lessons(self) -> int:
        if self.lessons:
            return sum(1 for lesson in self.lessons if lesson.completed)
        return self.completed_count or 0

    def get_lesson(self, lesson_id: EntityId) -> Optional[Lesson]:
        for lesson in self.lessons:
            if str(lesson.id) == str(lesson_id):
                return lesson
        return None

    def get_quiz(self, quiz_id: EntityId) -> Optional[Quiz]:
        for quiz in self.quizzes:
            if str(quiz.id) == str(quiz_id):
                return quiz
        return None
