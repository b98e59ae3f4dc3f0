"""
Quiz attempt schemas for learnpath.

Defines Pydantic models for:
- Individual answers recorded during a quiz run
- Attempts as stored and returned by the backend
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .content import EntityId


class AttemptAnswer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_id: EntityId = Field(validation_alias=AliasChoices("question_id", "questionId"))
    selected_answer: Optional[int] = Field(validation_alias=AliasChoices("selected_answer", "selectedAnswer"))
    is_correct: bool = Field(default=False, validation_alias=AliasChoices("is_correct", "isCorrect"))


class QuizAttemptRecord(BaseModel):
    """Attempt as persisted by the backend (submit response, attempt history)."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[EntityId] = None
    quiz_id: Optional[EntityId] = Field(default=None, validation_alias=AliasChoices("quiz_id", "quizId"))
    score: int = 0
    total_questions: int = Field(
        default=0,
        validation_alias=AliasChoices("total_questions", "totalQuestions", "total"),
    )
    answers: list[AttemptAnswer] = []
    completed_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("completed_at", "completedAt", "created_at", "attempted_at"),
    )

    @property
    def percentage(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return 100 * self.score / self.total_questions
