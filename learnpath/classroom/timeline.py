"""
Timeline - Interleave a topic's lessons and quizzes into a gated learning path.

Provides:
- Lesson/quiz interleaving into groups with a quiz checkpoint after each
- Locked/unlocked status per entry based on lesson completion

Everything here is a pure function of its inputs; rebuild the timeline
whenever lesson completion changes.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from learnpath.schemas import Lesson, Quiz


class TimelineKind(str, Enum):
    LESSON = "lesson"
    QUIZ = "quiz"


@dataclass(frozen=True)
class TimelineItem:
    """Lesson or quiz placed on the timeline."""
    kind: TimelineKind
    payload: Union[Lesson, Quiz]
    index: int  # position within its own lesson or quiz list

    @property
    def is_lesson(self) -> bool:
        return self.kind == TimelineKind.LESSON

    @property
    def blocks_progress(self) -> bool:
        """Only an incomplete lesson gates later items."""
        return self.is_lesson and not self.payload.completed


@dataclass(frozen=True)
class TimelineEntry:
    """Timeline item with its place in the path and its access state."""
    item: TimelineItem
    position: int
    locked: bool

    @property
    def kind(self) -> TimelineKind:
        return self.item.kind

    @property
    def payload(self) -> Union[Lesson, Quiz]:
        return self.item.payload


def lessons_per_quiz(lesson_count: int, quiz_count: int) -> int:
    """Lessons placed before each quiz checkpoint: ceil(L / (Q + 1))."""
    return math.ceil(lesson_count / (quiz_count + 1))


def interleave(lessons: Sequence[Lesson], quizzes: Sequence[Quiz]) -> list[TimelineItem]:
    """
    Merge lessons and quizzes into one ordered sequence.

    Emits up to ``lessons_per_quiz`` lessons, then the next quiz, and repeats
    until both lists are used up. The group size is fixed up front, so the
    final lesson group may be short. With no lessons the quizzes run back to
    back; with no quizzes the result is the lessons in order.
    """
    group_size = lessons_per_quiz(len(lessons), len(quizzes))
    items: list[TimelineItem] = []
    lesson_index = 0
    quiz_index = 0

    while lesson_index < len(lessons) or quiz_index < len(quizzes):
        group_end = min(lesson_index + group_size, len(lessons))
        while lesson_index < group_end:
            items.append(TimelineItem(TimelineKind.LESSON, lessons[lesson_index], lesson_index))
            lesson_index += 1

        if quiz_index < len(quizzes):
            items.append(TimelineItem(TimelineKind.QUIZ, quizzes[quiz_index], quiz_index))
            quiz_index += 1

    return items


def is_item_locked(items: Sequence[TimelineItem], position: int) -> bool:
    """
    Check whether the item at position is locked.

    The first item is always open. Any later item is locked if some lesson
    before it is not completed. Quizzes never lock anything.
    """
    if position == 0:
        return False
    return any(item.blocks_progress for item in items[:position])


def locked_flags(items: Sequence[TimelineItem]) -> list[bool]:
    """Locked state for every item in one pass."""
    flags = []
    blocked = False
    for item in items:
        flags.append(blocked)
        if item.blocks_progress:
            blocked = True
    return flags


def build_timeline(lessons: Sequence[Lesson], quizzes: Sequence[Quiz]) -> list[TimelineEntry]:
    """Interleave lessons and quizzes and mark each entry locked or unlocked."""
    items = interleave(lessons, quizzes)
    return [
        TimelineEntry(item=item, position=position, locked=locked)
        for position, (item, locked) in enumerate(zip(items, locked_flags(items)))
    ]
