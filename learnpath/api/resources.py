"""
REST resource groups for the learnpath backend.

One class per URL family. Each method issues a single request through the
shared ApiClient and converts the body into schema objects.
"""

from typing import TYPE_CHECKING, Any, Optional

from learnpath.schemas import (
    AttemptAnswer,
    AuthResult,
    ChatMessage,
    EntityId,
    Lesson,
    Question,
    Quiz,
    QuizAttemptRecord,
    Topic,
    User,
)

if TYPE_CHECKING:
    from .client import ApiClient


def unwrap(payload: Any, *keys: str) -> Any:
    """
    Strip a response envelope.

    The backend answers either with the bare record or with it nested under
    ``data`` or a named key (``{"topics": [...]}``). Only object or list
    values count as an envelope, so a record's own scalar field of the same
    name is left alone.
    """
    if isinstance(payload, dict):
        for key in (*keys, "data"):
            if isinstance(payload.get(key), (dict, list)):
                return payload[key]
    return payload


def _as_list(payload: Any) -> list:
    return payload if isinstance(payload, list) else []


class ResourceAPI:
    def __init__(self, client: "ApiClient"):
        self.client = client


class AuthAPI(ResourceAPI):
    async def register(self, username: str, email: str, password: str) -> AuthResult:
        data = await self.client.post(
            "/auth/register",
            {"username": username, "email": email, "password": password},
        )
        return AuthResult.model_validate(unwrap(data))

    async def login(self, username: str, password: str) -> AuthResult:
        data = await self.client.post("/auth/login", {"username": username, "password": password})
        return AuthResult.model_validate(unwrap(data))

    async def profile(self) -> User:
        data = await self.client.get("/auth/profile")
        return User.model_validate(unwrap(data, "user"))


class TopicsAPI(ResourceAPI):
    async def get_all(self) -> list[Topic]:
        """Topics with aggregate lesson/quiz counts (no lesson or quiz bodies)."""
        data = await self.client.get("/topics")
        return [Topic.model_validate(item) for item in _as_list(unwrap(data, "topics"))]

    async def get(self, topic_id: EntityId) -> Topic:
        """Full topic detail including lessons and quizzes."""
        data = await self.client.get(f"/topics/{topic_id}")
        return Topic.model_validate(unwrap(data, "topic"))

    async def create(self, name: str, description: str = "") -> Topic:
        data = await self.client.post("/topics", {"name": name, "description": description})
        return Topic.model_validate(unwrap(data, "topic"))

    async def update(self, topic_id: EntityId, name: str, description: str = "") -> Topic:
        data = await self.client.put(f"/topics/{topic_id}", {"name": name, "description": description})
        return Topic.model_validate(unwrap(data, "topic"))

    async def delete(self, topic_id: EntityId):
        await self.client.delete(f"/topics/{topic_id}")


class LessonsAPI(ResourceAPI):
    async def list_for_topic(self, topic_id: EntityId) -> list[Lesson]:
        data = await self.client.get(f"/lessons/topic/{topic_id}/lessons")
        return [Lesson.model_validate(item) for item in _as_list(unwrap(data, "lessons"))]

    async def get(self, lesson_id: EntityId) -> Lesson:
        data = await self.client.get(f"/lessons/{lesson_id}")
        return Lesson.model_validate(unwrap(data, "lesson"))

    async def create(self, topic_id: EntityId, title: str, content: str, order_index: int) -> Lesson:
        data = await self.client.post(
            f"/lessons/topic/{topic_id}/lessons",
            {"title": title, "content": content, "order_index": order_index},
        )
        return Lesson.model_validate(unwrap(data, "lesson"))

    async def update(self, lesson_id: EntityId, title: str, content: str, order_index: int) -> Lesson:
        data = await self.client.put(
            f"/lessons/{lesson_id}",
            {"title": title, "content": content, "order_index": order_index},
        )
        return Lesson.model_validate(unwrap(data, "lesson"))

    async def complete(self, lesson_id: EntityId):
        await self.client.post(f"/lessons/{lesson_id}/complete")

    async def uncomplete(self, lesson_id: EntityId):
        await self.client.post(f"/lessons/{lesson_id}/uncomplete")

    async def delete(self, lesson_id: EntityId):
        await self.client.delete(f"/lessons/{lesson_id}")


class QuizAPI(ResourceAPI):
    async def get(self, quiz_id: EntityId) -> Quiz:
        """Quiz with questions; JSON-encoded option strings are decoded by the schema."""
        data = await self.client.get(f"/quiz/{quiz_id}")
        return Quiz.model_validate(unwrap(data, "quiz"))

    async def create(
        self,
        topic_id: EntityId,
        title: str,
        description: str = "",
        order_index: int = 0,
    ) -> Quiz:
        data = await self.client.post(
            f"/quiz/topic/{topic_id}/quiz",
            {"title": title, "description": description, "order_index": order_index},
        )
        return Quiz.model_validate(unwrap(data, "quiz"))

    async def add_question(
        self,
        quiz_id: EntityId,
        question: str,
        options: list[str],
        correct_answer: int,
        order_index: int = 0,
    ) -> Question:
        data = await self.client.post(
            f"/quiz/{quiz_id}/question",
            {
                "question": question,
                "options": options,
                "correct_answer": correct_answer,
                "order_index": order_index,
            },
        )
        return Question.model_validate(unwrap(data, "question"))

    async def submit(self, quiz_id: EntityId, answers: list[AttemptAnswer]) -> QuizAttemptRecord:
        """Store an attempt. Only question id and selection are sent; the backend grades."""
        payload = {
            "answers": [
                {"questionId": a.question_id, "selectedAnswer": a.selected_answer}
                for a in answers
            ]
        }
        data = await self.client.post(f"/quiz/{quiz_id}/submit", payload)
        return QuizAttemptRecord.model_validate(unwrap(data, "attempt"))

    async def attempts(self, quiz_id: EntityId) -> list[QuizAttemptRecord]:
        data = await self.client.get(f"/quiz/{quiz_id}/attempts")
        return [QuizAttemptRecord.model_validate(item) for item in _as_list(unwrap(data, "attempts"))]

    async def delete(self, quiz_id: EntityId):
        await self.client.delete(f"/quiz/{quiz_id}")


class ChatAPI(ResourceAPI):
    async def messages(self, lesson_id: EntityId, limit: int = 50, offset: int = 0) -> list[ChatMessage]:
        data = await self.client.get(
            f"/chat/lesson/{lesson_id}/messages",
            params={"limit": limit, "offset": offset},
        )
        return [ChatMessage.model_validate(item) for item in _as_list(unwrap(data, "messages"))]

    async def create_message(self, lesson_id: EntityId, message: str, is_user: bool = True) -> Optional[ChatMessage]:
        data = await self.client.post(
            f"/chat/lesson/{lesson_id}/messages",
            {"message": message, "is_user": is_user},
        )
        record = unwrap(data)
        if isinstance(record, dict) and ("message" in record or "text" in record):
            return ChatMessage.model_validate(record)
        return None

    async def delete_messages(self, lesson_id: EntityId):
        await self.client.delete(f"/chat/lesson/{lesson_id}/messages")

    async def ai_response(self, message: str, lesson_id: Optional[EntityId] = None) -> str:
        """Tutor reply text (markdown)."""
        payload: dict[str, Any] = {"message": message}
        if lesson_id is not None:
            payload["lesson_id"] = lesson_id
        data = await self.client.post("/chat/ai-response", payload)
        body = unwrap(data)
        if isinstance(body, str):
            return body
        if isinstance(body, dict):
            for key in ("response", "reply", "message"):
                if isinstance(body.get(key), str):
                    return body[key]
        raise ValueError("AI response body has no reply text")
