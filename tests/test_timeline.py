"""Learning path construction and access-gating tests."""

import pytest

from learnpath.classroom import (
    TimelineKind,
    build_timeline,
    interleave,
    is_item_locked,
    lessons_per_quiz,
    locked_flags,
)
from learnpath.schemas import Lesson, Quiz


def make_lessons(*completed: bool) -> list[Lesson]:
    return [Lesson(id=i + 1, title=f"Lesson {i + 1}", completed=done) for i, done in enumerate(completed)]


def make_quizzes(count: int) -> list[Quiz]:
    return [Quiz(id=100 + i, title=f"Quiz {i + 1}") for i in range(count)]


def layout(items) -> list[str]:
    """Compact form: L0, Q0, ... using each item's index in its own list."""
    return [f"{'L' if item.kind == TimelineKind.LESSON else 'Q'}{item.index}" for item in items]


class TestGroupSize:
    @pytest.mark.parametrize("lessons,quizzes,expected", [
        (5, 2, 2),
        (6, 2, 2),
        (7, 2, 3),
        (3, 0, 3),
        (0, 3, 0),
        (1, 3, 1),
    ])
    def test_lessons_per_quiz(self, lessons, quizzes, expected):
        assert lessons_per_quiz(lessons, quizzes) == expected


class TestInterleave:
    def test_groups_with_quiz_checkpoints(self):
        items = interleave(make_lessons(*[False] * 5), make_quizzes(2))
        assert layout(items) == ["L0", "L1", "Q0", "L2", "L3", "Q1", "L4"]

    def test_final_group_may_be_short(self):
        items = interleave(make_lessons(*[False] * 7), make_quizzes(2))
        assert layout(items) == ["L0", "L1", "L2", "Q0", "L3", "L4", "L5", "Q1", "L6"]

    def test_more_quizzes_than_groups(self):
        items = interleave(make_lessons(False), make_quizzes(3))
        assert layout(items) == ["L0", "Q0", "Q1", "Q2"]

    def test_no_quizzes(self):
        lessons = make_lessons(False, True, False)
        items = interleave(lessons, [])
        assert all(item.kind == TimelineKind.LESSON for item in items)
        assert [item.payload for item in items] == lessons

    def test_no_lessons(self):
        quizzes = make_quizzes(3)
        items = interleave([], quizzes)
        assert all(item.kind == TimelineKind.QUIZ for item in items)
        assert [item.payload for item in items] == quizzes

    def test_empty(self):
        assert interleave([], []) == []

    @pytest.mark.parametrize("lesson_count,quiz_count", [(0, 0), (4, 1), (9, 3), (2, 5), (10, 0)])
    def test_length_and_relative_order(self, lesson_count, quiz_count):
        lessons = make_lessons(*[False] * lesson_count)
        quizzes = make_quizzes(quiz_count)
        items = interleave(lessons, quizzes)

        assert len(items) == lesson_count + quiz_count
        assert [i.payload for i in items if i.kind == TimelineKind.LESSON] == lessons
        assert [i.payload for i in items if i.kind == TimelineKind.QUIZ] == quizzes

    def test_deterministic(self):
        lessons = make_lessons(True, False, False, True)
        quizzes = make_quizzes(2)
        assert interleave(lessons, quizzes) == interleave(lessons, quizzes)


class TestLocking:
    def test_first_item_never_locked(self):
        items = interleave(make_lessons(False, False), [])
        assert is_item_locked(items, 0) is False

    def test_incomplete_lesson_locks_everything_after(self):
        items = interleave(make_lessons(True, False, True), [])
        assert locked_flags(items) == [False, False, True]

    def test_all_completed_unlocks_all(self):
        items = interleave(make_lessons(True, True, True), make_quizzes(1))
        assert locked_flags(items) == [False] * 4

    def test_unattempted_quiz_does_not_lock(self):
        # L0(done) Q0 L1: the quiz is never a gate
        items = interleave(make_lessons(True, False), make_quizzes(1))
        assert layout(items) == ["L0", "Q0", "L1"]
        assert locked_flags(items) == [False, False, False]

    def test_quiz_locked_behind_incomplete_lesson(self):
        items = interleave(make_lessons(False, True), make_quizzes(1))
        assert locked_flags(items) == [False, True, True]

    def test_quizzes_only_all_unlocked(self):
        items = interleave([], make_quizzes(3))
        assert locked_flags(items) == [False, False, False]

    def test_single_pass_matches_per_item_check(self):
        items = interleave(make_lessons(True, False, True, False, True), make_quizzes(2))
        assert locked_flags(items) == [is_item_locked(items, i) for i in range(len(items))]


class TestBuildTimeline:
    def test_entries_carry_position_and_lock(self):
        entries = build_timeline(make_lessons(True, False), make_quizzes(1))
        assert [e.position for e in entries] == [0, 1, 2]
        assert [e.locked for e in entries] == [False, False, False]
        assert entries[1].kind == TimelineKind.QUIZ

    def test_recomputed_after_completion(self):
        lessons = make_lessons(False, False)
        assert [e.locked for e in build_timeline(lessons, [])] == [False, True]

        lessons[0].completed = True
        assert [e.locked for e in build_timeline(lessons, [])] == [False, False]
