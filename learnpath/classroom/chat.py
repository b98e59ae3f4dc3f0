"""
Tutor chat - Per-lesson conversation with a remote or mock tutor.

Provides:
- MockTutor: canned markdown replies from the bundled prompt file
- RemoteTutor: replies from the backend, falling back to MockTutor
- ChatSession: append-only message log with a one-shot seeding step
"""

import asyncio
import logging
import random
from enum import Enum
from typing import Optional

from learnpath.api import ApiError, ChatAPI, UnauthorizedError
from learnpath.schemas import ChatMessage, Lesson
from learnpath.utils import format_prompt, load_tutor_prompts

logger = logging.getLogger(__name__)


class ChatState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class ChatStateError(Exception):
    """Raised when a message is sent before the session is ready."""

    pass


# -----------------------------------------------------------------------------
# Responders
# -----------------------------------------------------------------------------

class MockTutor:
    """Offline tutor answering with a random canned reply after a short delay."""

    def __init__(
        self,
        responses: Optional[list[str]] = None,
        greeting_template: Optional[str] = None,
        delay: float = 0.0,
        rng: Optional[random.Random] = None,
    ):
        if responses is None or greeting_template is None:
            prompts = load_tutor_prompts()
            responses = responses if responses is not None else prompts.mock_responses
            greeting_template = greeting_template or prompts.greeting_template
        if not responses:
            raise ValueError("MockTutor needs at least one response")
        self.responses = list(responses)
        self.greeting_template = greeting_template
        self.delay = delay
        self.rng = rng or random.Random()

    async def greet(self, lesson: Lesson) -> str:
        return format_prompt(self.greeting_template, lesson_title=lesson.title)

    async def reply(self, lesson: Lesson, message: str) -> str:
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        return self.rng.choice(self.responses)


class RemoteTutor:
    """Tutor backed by the AI response endpoint."""

    def __init__(self, chat_api: ChatAPI, fallback: MockTutor, seed_template: Optional[str] = None):
        self.chat_api = chat_api
        self.fallback = fallback
        self.seed_template = seed_template or load_tutor_prompts().seed_template

    async def greet(self, lesson: Lesson) -> str:
        request = format_prompt(self.seed_template, lesson_title=lesson.title)
        try:
            return await self.chat_api.ai_response(request, lesson_id=lesson.id)
        except UnauthorizedError:
            raise
        except (ApiError, ValueError) as e:
            logger.warning(f"Lesson {lesson.id}: seed message unavailable, using greeting: {e}")
            return await self.fallback.greet(lesson)

    async def reply(self, lesson: Lesson, message: str) -> str:
        try:
            return await self.chat_api.ai_response(message, lesson_id=lesson.id)
        except UnauthorizedError:
            raise
        except (ApiError, ValueError) as e:
            logger.warning(f"Lesson {lesson.id}: tutor reply failed, using canned reply: {e}")
            return await self.fallback.reply(lesson, message)


# -----------------------------------------------------------------------------
# Session
# -----------------------------------------------------------------------------

class ChatSession:
    """
    Message log for one lesson.

    ``enter()`` loads saved history, or seeds the conversation with a tutor
    message when there is none. Concurrent calls share the first call's
    work, so a lesson is seeded at most once. User messages are appended
    before the backend is asked for a reply; saving to the backend is
    best-effort and never undoes a local append.
    """

    def __init__(self, lesson: Lesson, chat_api: Optional[ChatAPI], responder, history_limit: int = 50):
        """
        Initialize session.

        Args:
            lesson: Lesson the conversation is about
            chat_api: Chat endpoints for history and persistence (None for offline use)
            responder: MockTutor or RemoteTutor
            history_limit: Maximum saved messages loaded on entry
        """
        self.lesson = lesson
        self.chat_api = chat_api
        self.responder = responder
        self.history_limit = history_limit
        self.messages: list[ChatMessage] = []
        self.state = ChatState.UNINITIALIZED
        self.is_typing = False
        self._ready: Optional[asyncio.Event] = None

    async def enter(self) -> list[ChatMessage]:
        """Prepare the conversation for display; safe to call repeatedly."""
        if self.state == ChatState.READY:
            return self.messages
        if self.state == ChatState.INITIALIZING:
            await self._ready.wait()
            if self.state != ChatState.READY:
                # the first caller failed; try again from scratch
                return await self.enter()
            return self.messages

        # no await before this point: the state change is atomic on the event loop
        self.state = ChatState.INITIALIZING
        self._ready = asyncio.Event()
        try:
            history = await self._load_history()
            if history:
                self.messages.extend(history)
            else:
                seed = await self.responder.greet(self.lesson)
                self._append(seed, is_from_user=False)
                await self._save(seed, is_user=False)
            self.state = ChatState.READY
        except BaseException:
            self.state = ChatState.UNINITIALIZED
            raise
        finally:
            self._ready.set()
        return self.messages

    async def send(self, text: str) -> Optional[ChatMessage]:
        """
        Append a user message, then the tutor's reply.

        Returns:
            The tutor message, or None for blank input

        Raises:
            ChatStateError: If called before enter() finished
        """
        text = text.strip()
        if not text:
            return None
        if self.state != ChatState.READY:
            raise ChatStateError(f"Chat for lesson {self.lesson.id} is {self.state.value}")

        self._append(text, is_from_user=True)
        await self._save(text, is_user=True)

        self.is_typing = True
        try:
            reply = await self.responder.reply(self.lesson, text)
        finally:
            self.is_typing = False

        message = self._append(reply, is_from_user=False)
        await self._save(reply, is_user=False)
        return message

    async def reset(self):
        """Clear the conversation locally and on the backend; the next enter() seeds again."""
        if self.chat_api is not None:
            try:
                await self.chat_api.delete_messages(self.lesson.id)
            except UnauthorizedError:
                raise
            except ApiError as e:
                logger.warning(f"Lesson {self.lesson.id}: could not delete saved messages: {e}")
        self.messages = []
        self.state = ChatState.UNINITIALIZED

    def _append(self, text: str, is_from_user: bool) -> ChatMessage:
        message = ChatMessage(text=text, is_from_user=is_from_user)
        self.messages.append(message)
        return message

    async def _load_history(self) -> list[ChatMessage]:
        if self.chat_api is None:
            return []
        try:
            return await self.chat_api.messages(self.lesson.id, limit=self.history_limit)
        except UnauthorizedError:
            raise
        except (ApiError, ValueError) as e:
            logger.error(f"Lesson {self.lesson.id}: failed to load chat history: {e}")
            return []

    async def _save(self, text: str, is_user: bool):
        if self.chat_api is None:
            return
        try:
            await self.chat_api.create_message(self.lesson.id, text, is_user=is_user)
        except UnauthorizedError:
            raise
        except (ApiError, ValueError) as e:
            logger.warning(f"Lesson {self.lesson.id}: message kept locally, save failed: {e}")
