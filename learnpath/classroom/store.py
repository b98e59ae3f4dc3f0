"""
ContentStore - Session-local cache of topics, lessons and quizzes.

Provides:
- Topic list refresh and per-topic detail loading
- Lesson completion with local-first updates
- Quiz loading and attempt history
- Timeline construction for a loaded topic

Failed reads degrade to empty results with a logged error. Failed lesson
completion writes keep the local value.
"""

import logging
from typing import Optional

from learnpath.api import ApiClient, ApiError, UnauthorizedError
from learnpath.schemas import EntityId, Lesson, Quiz, QuizAttemptRecord, Topic

from .timeline import TimelineEntry, build_timeline

logger = logging.getLogger(__name__)


def _same_id(a: EntityId, b: EntityId) -> bool:
    return str(a) == str(b)


class ContentStore:
    """
    Owns every Topic, Lesson and Quiz record for one app session.

    Topics from the list endpoint carry counts only; call load_topic() to
    fetch lessons and quizzes before building a timeline.
    """

    def __init__(self, api: ApiClient):
        self.api = api
        self._topics: list[Topic] = []
        self._loaded: set[str] = set()

    # -------------------------------------------------------------------------
    # Topics
    # -------------------------------------------------------------------------

    @property
    def topics(self) -> list[Topic]:
        return list(self._topics)

    def get_topic(self, topic_id: EntityId) -> Optional[Topic]:
        for topic in self._topics:
            if _same_id(topic.id, topic_id):
                return topic
        return None

    def is_loaded(self, topic_id: EntityId) -> bool:
        return str(topic_id) in self._loaded

    async def refresh_topics(self) -> list[Topic]:
        """Replace the cache with the backend's topic list."""
        try:
            topics = await self.api.topics.get_all()
        except UnauthorizedError:
            raise
        except (ApiError, ValueError) as e:
            logger.error(f"Failed to load topics: {e}")
            topics = []
        self._topics = topics
        self._loaded.clear()
        return self.topics

    async def load_topic(self, topic_id: EntityId) -> Optional[Topic]:
        """Fetch full topic detail; returns the cached record if the fetch fails."""
        try:
            topic = await self.api.topics.get(topic_id)
        except UnauthorizedError:
            raise
        except (ApiError, ValueError) as e:
            logger.error(f"Failed to load topic {topic_id}: {e}")
            return self.get_topic(topic_id)

        self._put_topic(topic)
        self._loaded.add(str(topic.id))
        return topic

    async def add_topic(self, name: str, description: str = "") -> Optional[Topic]:
        """
        Create a topic on the backend and cache it.

        Returns:
            The new topic, or None if the backend rejected it

        Raises:
            ValueError: If name is blank
        """
        name = name.strip()
        if not name:
            raise ValueError("Topic name is required")
        try:
            topic = await self.api.topics.create(name, description.strip())
        except UnauthorizedError:
            raise
        except (ApiError, ValueError) as e:
            logger.error(f"Failed to create topic {name!r}: {e}")
            return None
        self._put_topic(topic)
        self._loaded.add(str(topic.id))
        return topic

    async def delete_topic(self, topic_id: EntityId) -> bool:
        try:
            await self.api.topics.delete(topic_id)
        except UnauthorizedError:
            raise
        except ApiError as e:
            logger.error(f"Failed to delete topic {topic_id}: {e}")
            return False
        self._topics = [t for t in self._topics if not _same_id(t.id, topic_id)]
        self._loaded.discard(str(topic_id))
        return True

    def _put_topic(self, topic: Topic):
        for i, existing in enumerate(self._topics):
            if _same_id(existing.id, topic.id):
                self._topics[i] = topic
                return
        self._topics.append(topic)

    # -------------------------------------------------------------------------
    # Lessons
    # -------------------------------------------------------------------------

    def find_lesson(self, topic_id: EntityId, lesson_id: EntityId) -> Optional[Lesson]:
        topic = self.get_topic(topic_id)
        return topic.get_lesson(lesson_id) if topic else None

    async def complete_lesson(self, topic_id: EntityId, lesson_id: EntityId) -> bool:
        """
        Mark a lesson completed, locally first.

        Returns:
            True if the backend confirmed, False if only the local copy changed
        """
        return await self._set_completed(topic_id, lesson_id, True)

    async def uncomplete_lesson(self, topic_id: EntityId, lesson_id: EntityId) -> bool:
        """Mark a lesson not completed, locally first."""
        return await self._set_completed(topic_id, lesson_id, False)

    async def _set_completed(self, topic_id: EntityId, lesson_id: EntityId, completed: bool) -> bool:
        lesson = self.find_lesson(topic_id, lesson_id)
        if lesson is None:
            logger.warning(f"Lesson {lesson_id} not found in topic {topic_id}")
        else:
            lesson.completed = completed

        try:
            if completed:
                await self.api.lessons.complete(lesson_id)
            else:
                await self.api.lessons.uncomplete(lesson_id)
        except UnauthorizedError:
            raise
        except ApiError as e:
            # local value is kept; the next load_topic() reconciles with the backend
            logger.warning(f"Lesson {lesson_id}: completion not saved ({e}), keeping local state")
            return False
        return True

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------

    def find_quiz(self, topic_id: EntityId, quiz_id: EntityId) -> Optional[Quiz]:
        topic = self.get_topic(topic_id)
        return topic.get_quiz(quiz_id) if topic else None

    async def load_quiz(self, topic_id: EntityId, quiz_id: EntityId) -> Optional[Quiz]:
        """
        Fetch a quiz with its questions and update the topic's copy.

        Falls back to the cached quiz when the fetch fails.
        """
        try:
            quiz = await self.api.quizzes.get(quiz_id)
        except UnauthorizedError:
            raise
        except (ApiError, ValueError) as e:
            logger.error(f"Failed to load quiz {quiz_id}: {e}")
            return self.find_quiz(topic_id, quiz_id)

        topic = self.get_topic(topic_id)
        if topic is not None:
            topic.quizzes = [quiz if _same_id(q.id, quiz.id) else q for q in topic.quizzes]
        return quiz

    async def quiz_attempts(self, quiz_id: EntityId) -> list[QuizAttemptRecord]:
        try:
            return await self.api.quizzes.attempts(quiz_id)
        except UnauthorizedError:
            raise
        except (ApiError, ValueError) as e:
            logger.error(f"Failed to load attempts for quiz {quiz_id}: {e}")
            return []

    # -------------------------------------------------------------------------
    # Timeline
    # -------------------------------------------------------------------------

    def timeline(self, topic_id: EntityId) -> list[TimelineEntry]:
        """Current learning path for a topic (empty if the topic is unknown)."""
        topic = self.get_topic(topic_id)
        if topic is None:
            return []
        return build_timeline(topic.lessons, topic.quizzes)
