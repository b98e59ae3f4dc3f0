"""
QuizRunner - Step through a quiz one question at a time.

States:
- answering: a question is on screen, optionally with a provisional choice
- complete: every question answered, score and attempt log final
- no_questions: the quiz has nothing to ask (reported, not an error)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from learnpath.api import ApiError, UnauthorizedError
from learnpath.schemas import AttemptAnswer, EntityId, Question, Quiz, QuizAttemptRecord

logger = logging.getLogger(__name__)

Submitter = Callable[[EntityId, list[AttemptAnswer]], Awaitable[Optional[QuizAttemptRecord]]]


class QuizState(str, Enum):
    ANSWERING = "answering"
    COMPLETE = "complete"
    NO_QUESTIONS = "no_questions"


class QuizStateError(Exception):
    """Raised when an action is not allowed in the runner's current state."""

    pass


@dataclass
class ReviewItem:
    """One question paired with the learner's recorded choice."""
    number: int
    question: Question
    selected_answer: Optional[int]
    is_correct: bool

    @property
    def selected_text(self) -> Optional[str]:
        return self.question.option_text(self.selected_answer)

    @property
    def correct_text(self) -> Optional[str]:
        return self.question.option_text(self.question.correct_answer)


class QuizRunner:
    """
    Sequential state machine over a quiz's questions.

    The attempt log is owned by the runner for one run and discarded on
    retry. When the last question is answered the log is handed to the
    optional submitter; a failed submission never blocks completion.
    """

    def __init__(self, quiz: Quiz, submitter: Optional[Submitter] = None):
        """
        Initialize runner.

        Args:
            quiz: Quiz with its questions loaded
            submitter: Async callable persisting (quiz_id, answers), e.g. QuizAPI.submit
        """
        self.quiz = quiz
        self.submitter = submitter
        self._reset()

    def _reset(self):
        self.question_index = 0
        self.selected_answer: Optional[int] = None
        self.score = 0
        self.answers: list[AttemptAnswer] = []
        self.confirmed: Optional[QuizAttemptRecord] = None
        self.state = QuizState.ANSWERING if self.quiz.questions else QuizState.NO_QUESTIONS

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def total_questions(self) -> int:
        return len(self.quiz.questions)

    @property
    def current_question(self) -> Optional[Question]:
        """Question on screen, or None outside the answering state."""
        if self.state != QuizState.ANSWERING:
            return None
        return self.quiz.questions[self.question_index]

    @property
    def is_last_question(self) -> bool:
        return self.question_index == self.total_questions - 1

    @property
    def can_advance(self) -> bool:
        """Whether the next/finish control is enabled."""
        question = self.current_question
        if question is None:
            return False
        # a question whose options failed to parse can only be skipped
        return self.selected_answer is not None or not question.has_options

    @property
    def percentage(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return 100 * self.score / self.total_questions

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def select_answer(self, option_index: int):
        """Record a provisional choice for the current question (replaces any earlier one)."""
        question = self.current_question
        if question is None:
            raise QuizStateError(f"Cannot select an answer while {self.state.value}")
        if not 0 <= option_index < len(question.options):
            raise QuizStateError(f"Option {option_index} does not exist for question {question.id}")
        self.selected_answer = option_index

    async def advance(self) -> QuizState:
        """
        Commit the provisional choice and move on.

        Returns:
            The new state

        Raises:
            QuizStateError: If no choice is selected or the quiz is not running
        """
        if not self.can_advance:
            if self.state != QuizState.ANSWERING:
                raise QuizStateError(f"Cannot advance while {self.state.value}")
            raise QuizStateError("Select an answer before continuing")

        question = self.current_question
        is_correct = self.selected_answer is not None and self.selected_answer == question.correct_answer
        self.answers.append(AttemptAnswer(
            question_id=question.id,
            selected_answer=self.selected_answer,
            is_correct=is_correct,
        ))
        if is_correct:
            self.score += 1

        if self.is_last_question:
            self.state = QuizState.COMPLETE
            await self._submit()
        else:
            self.question_index += 1
            self.selected_answer = None

        return self.state

    def retry(self):
        """Start over with an empty log and zero score."""
        if self.state != QuizState.COMPLETE:
            raise QuizStateError(f"Cannot retry while {self.state.value}")
        self._reset()

    async def _submit(self):
        if self.submitter is None:
            return
        try:
            self.confirmed = await self.submitter(self.quiz.id, list(self.answers))
        except UnauthorizedError:
            raise
        except (ApiError, ValueError) as e:
            logger.warning(f"Quiz {self.quiz.id}: submission failed, using local results: {e}")
            self.confirmed = None

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    @property
    def attempt_log(self) -> list[AttemptAnswer]:
        """Backend-confirmed answers when they line up with the local log, else the local log."""
        if self.confirmed is not None and len(self.confirmed.answers) == len(self.answers):
            return self.confirmed.answers
        return self.answers

    def review(self) -> list[ReviewItem]:
        """
        Pair each question with the recorded choice and whether it was right.

        Answers are matched on question id; an answer whose id matches no
        question is paired by position instead.
        """
        if self.state != QuizState.COMPLETE:
            return []
        log = self.attempt_log
        by_id = {str(answer.question_id): answer for answer in log}

        items = []
        for number, question in enumerate(self.quiz.questions, start=1):
            answer = by_id.get(str(question.id))
            if answer is None and number <= len(log):
                answer = log[number - 1]
            items.append(ReviewItem(
                number=number,
                question=question,
                selected_answer=answer.selected_answer if answer is not None else None,
                is_correct=answer.is_correct if answer is not None else False,
            ))
        return items
