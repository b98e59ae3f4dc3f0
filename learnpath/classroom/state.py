"""
AppState - Everything one signed-in app session needs, wired together.

Replaces ambient shared state with one object holding the storage, API
client, identity, content cache, and the per-lesson chat and per-quiz
runner instances.
"""

import logging
from typing import Optional

import httpx

from learnpath.api import ApiClient
from learnpath.config import Settings
from learnpath.schemas import Lesson, Quiz, User
from learnpath.storage import LocalStorage

from .chat import ChatSession, MockTutor, RemoteTutor
from .quiz_runner import QuizRunner
from .session import AuthSession
from .store import ContentStore

logger = logging.getLogger(__name__)


class AppState:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize application state.

        Args:
            settings: Runtime configuration
            transport: Optional httpx transport passed to the API client
        """
        self.settings = settings
        self.storage = LocalStorage(settings.storage_db)
        self.api = ApiClient(
            settings.api_url,
            self.storage,
            timeout=settings.timeout,
            on_unauthorized=self._on_unauthorized,
            transport=transport,
        )
        self.session = AuthSession(self.api, self.storage)
        self.store = ContentStore(self.api)
        self.mock_tutor = MockTutor(delay=settings.mock_delay)
        self._chats: dict[str, ChatSession] = {}
        self._runners: dict[str, QuizRunner] = {}
        self.session_expired = False
        self.session.restore()

    @property
    def user(self) -> Optional[User]:
        return self.session.user

    @property
    def remote_tutor(self) -> bool:
        return self.settings.tutor_mode == "remote"

    def chat_for(self, lesson: Lesson) -> ChatSession:
        """Chat session for a lesson, created on first use and kept for the app session."""
        key = str(lesson.id)
        if key not in self._chats:
            if self.remote_tutor:
                responder = RemoteTutor(self.api.chat, self.mock_tutor)
                chat_api = self.api.chat
            else:
                responder = self.mock_tutor
                chat_api = None
            self._chats[key] = ChatSession(lesson, chat_api, responder)
        return self._chats[key]

    def runner_for(self, quiz: Quiz) -> QuizRunner:
        """Quiz runner for a quiz, replaced when the quiz content is reloaded."""
        key = str(quiz.id)
        runner = self._runners.get(key)
        if runner is None or runner.quiz is not quiz:
            runner = QuizRunner(quiz, submitter=self.api.quizzes.submit)
            self._runners[key] = runner
        return runner

    def reset_quiz(self, quiz_id):
        """Drop the runner for a quiz so the next visit starts a fresh attempt."""
        self._runners.pop(str(quiz_id), None)

    def logout(self):
        self.session.logout()
        self._clear()

    def _on_unauthorized(self):
        if self.session.user is not None:
            logger.info("Session expired, returning to login")
            self.session_expired = True
        self.session.user = None
        self._clear()

    def _clear(self):
        self.store = ContentStore(self.api)
        self._chats.clear()
        self._runners.clear()
