"""
learnpath Classroom - Runtime components for browsing and studying topics.

This module provides:
- AuthSession: Signed-in user and login/register/logout
- ContentStore: Cached topics, lessons and quizzes
- Timeline: Interleaved, access-gated learning path
- QuizRunner: Question-by-question quiz state machine
- ChatSession: Per-lesson tutor conversation
- AppState: All of the above wired for one app session
"""

from .session import (
    AuthSession,
    AuthError,
)

from .store import ContentStore

from .timeline import (
    TimelineKind,
    TimelineItem,
    TimelineEntry,
    lessons_per_quiz,
    interleave,
    is_item_locked,
    locked_flags,
    build_timeline,
)

from .quiz_runner import (
    QuizRunner,
    QuizState,
    QuizStateError,
    ReviewItem,
)

from .chat import (
    ChatSession,
    ChatState,
    ChatStateError,
    MockTutor,
    RemoteTutor,
)

from .state import AppState

__all__ = [
    # Session
    "AuthSession",
    "AuthError",
    # Store
    "ContentStore",
    # Timeline
    "TimelineKind",
    "TimelineItem",
    "TimelineEntry",
    "lessons_per_quiz",
    "interleave",
    "is_item_locked",
    "locked_flags",
    "build_timeline",
    # Quiz
    "QuizRunner",
    "QuizState",
    "QuizStateError",
    "ReviewItem",
    # Chat
    "ChatSession",
    "ChatState",
    "ChatStateError",
    "MockTutor",
    "RemoteTutor",
    # App
    "AppState",
]
