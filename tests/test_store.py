"""Content store tests: caching, degraded reads and local-first completion."""

import pytest

from learnpath.api import UnauthorizedError
from learnpath.classroom import ContentStore, TimelineKind

TOPIC_DETAIL = {
    "id": 1,
    "name": "Introduction to React",
    "lessons": [
        {"id": 1, "title": "What is React?", "order_index": 0, "completed": True},
        {"id": 2, "title": "JSX Basics", "order_index": 1},
        {"id": 3, "title": "Components", "order_index": 2},
    ],
    "quizzes": [{"id": 1, "title": "React Fundamentals Quiz", "question_count": 2}],
}


@pytest.fixture
def store(api):
    return ContentStore(api)


class TestTopics:
    @pytest.mark.asyncio
    async def test_refresh_topics(self, store, backend):
        backend.add("GET", "/topics", body={"topics": [
            {"id": 1, "name": "React", "lesson_count": 3, "quiz_count": 1},
            {"id": 2, "name": "JavaScript", "lesson_count": 2, "quiz_count": 1},
        ]})

        topics = await store.refresh_topics()

        assert [t.name for t in topics] == ["React", "JavaScript"]
        assert topics[0].lessons == []
        assert store.is_loaded(1) is False

    @pytest.mark.asyncio
    async def test_refresh_failure_degrades_to_empty(self, store, backend):
        backend.add("GET", "/topics", status=500, body={"error": "down"})
        assert await store.refresh_topics() == []
        assert store.topics == []

    @pytest.mark.asyncio
    async def test_refresh_unauthorized_propagates(self, store, backend):
        backend.add("GET", "/topics", status=401)
        with pytest.raises(UnauthorizedError):
            await store.refresh_topics()

    @pytest.mark.asyncio
    async def test_load_topic_replaces_summary(self, store, backend):
        backend.add("GET", "/topics", body=[{"id": 1, "name": "React", "lesson_count": 3}])
        backend.add("GET", "/topics/1", body=TOPIC_DETAIL)
        await store.refresh_topics()

        topic = await store.load_topic(1)

        assert store.is_loaded(1)
        assert len(store.topics) == 1
        assert store.get_topic(1) is topic
        assert [lesson.id for lesson in topic.lessons] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_load_topic_failure_returns_cached(self, store, backend):
        backend.add("GET", "/topics", body=[{"id": 1, "name": "React"}])
        backend.add("GET", "/topics/1", status=500)
        await store.refresh_topics()

        topic = await store.load_topic(1)

        assert topic.name == "React"
        assert store.is_loaded(1) is False

    @pytest.mark.asyncio
    async def test_add_topic(self, store, backend):
        backend.add("POST", "/topics", status=201, body={"id": 3, "name": "Python", "description": "Basics"})

        topic = await store.add_topic("  Python ", "Basics")

        assert topic.id == 3
        assert backend.last_json() == {"name": "Python", "description": "Basics"}
        assert store.get_topic(3) is topic

    @pytest.mark.asyncio
    async def test_add_topic_blank_name(self, store):
        with pytest.raises(ValueError):
            await store.add_topic("   ")

    @pytest.mark.asyncio
    async def test_add_topic_rejected(self, store, backend):
        backend.add("POST", "/topics", status=400, body={"error": "bad"})
        assert await store.add_topic("Python") is None
        assert store.topics == []

    @pytest.mark.asyncio
    async def test_delete_topic(self, store, backend):
        backend.add("GET", "/topics/1", body=TOPIC_DETAIL)
        backend.add("DELETE", "/topics/1", status=204)
        await store.load_topic(1)

        assert await store.delete_topic(1) is True
        assert store.get_topic(1) is None


class TestLessonCompletion:
    @pytest.mark.asyncio
    async def test_complete_lesson_confirmed(self, store, backend):
        backend.add("GET", "/topics/1", body=TOPIC_DETAIL)
        backend.add("POST", "/lessons/2/complete", body={"success": True})
        await store.load_topic(1)

        assert await store.complete_lesson(1, 2) is True
        assert store.find_lesson(1, 2).completed is True

    @pytest.mark.asyncio
    async def test_complete_lesson_keeps_local_on_failure(self, store, backend):
        backend.add("GET", "/topics/1", body=TOPIC_DETAIL)
        backend.add("POST", "/lessons/2/complete", status=500)
        await store.load_topic(1)

        assert await store.complete_lesson(1, 2) is False
        assert store.find_lesson(1, 2).completed is True

    @pytest.mark.asyncio
    async def test_uncomplete_lesson(self, store, backend):
        backend.add("GET", "/topics/1", body=TOPIC_DETAIL)
        backend.add("POST", "/lessons/1/uncomplete", status=204)
        await store.load_topic(1)

        assert await store.uncomplete_lesson(1, 1) is True
        assert store.find_lesson(1, 1).completed is False

    @pytest.mark.asyncio
    async def test_completion_unlocks_timeline(self, store, backend):
        backend.add("GET", "/topics/1", body=TOPIC_DETAIL)
        backend.add("POST", "/lessons/2/complete", status=204)
        await store.load_topic(1)

        # G = ceil(3 / 2) = 2: L1 L2 Q1 L3
        before = store.timeline(1)
        assert [e.kind for e in before] == [
            TimelineKind.LESSON, TimelineKind.LESSON, TimelineKind.QUIZ, TimelineKind.LESSON,
        ]
        assert [e.locked for e in before] == [False, False, True, True]

        await store.complete_lesson(1, 2)

        assert [e.locked for e in store.timeline(1)] == [False, False, False, False]

    def test_timeline_unknown_topic(self, store):
        assert store.timeline(42) == []


class TestQuizzes:
    @pytest.mark.asyncio
    async def test_load_quiz_updates_topic_copy(self, store, backend):
        backend.add("GET", "/topics/1", body=TOPIC_DETAIL)
        backend.add("GET", "/quiz/1", body={"quiz": {
            "id": 1,
            "title": "React Fundamentals Quiz",
            "questions": [
                {"id": 1, "question": "What is React?", "options": ["A library", "A framework"], "correct_answer": 0},
            ],
        }})
        await store.load_topic(1)

        quiz = await store.load_quiz(1, 1)

        assert len(quiz.questions) == 1
        assert store.find_quiz(1, 1) is quiz

    @pytest.mark.asyncio
    async def test_load_quiz_failure_falls_back_to_cache(self, store, backend):
        backend.add("GET", "/topics/1", body=TOPIC_DETAIL)
        backend.add("GET", "/quiz/1", status=500)
        await store.load_topic(1)

        quiz = await store.load_quiz(1, 1)

        assert quiz.title == "React Fundamentals Quiz"
        assert quiz.questions == []

    @pytest.mark.asyncio
    async def test_quiz_attempts_failure_is_empty(self, store, backend):
        backend.add("GET", "/quiz/1/attempts", status=500)
        assert await store.quiz_attempts(1) == []

    @pytest.mark.asyncio
    async def test_quiz_attempts(self, store, backend):
        backend.add("GET", "/quiz/1/attempts", body={"attempts": [
            {"id": 1, "score": 2, "total_questions": 2, "completed_at": "2024-05-01T10:00:00"},
        ]})
        attempts = await store.quiz_attempts(1)
        assert attempts[0].percentage == 100.0

    @pytest.mark.asyncio
    async def test_load_quiz_keeps_valid_questions(self, store, backend):
        backend.add("GET", "/topics/1", body=TOPIC_DETAIL)
        backend.add("GET", "/quiz/1", body={
            "id": 1,
            "title": "React Fundamentals Quiz",
            "questions": [
                {"id": 1, "question": "What is React?", "options": ["A library", "A framework"], "correct_answer": 0},
                {"id": 2, "question": "Broken", "options": ["a", "b"], "correct_answer": None},
            ],
        })
        await store.load_topic(1)

        quiz = await store.load_quiz(1, 1)

        assert [q.id for q in quiz.questions] == [1]
