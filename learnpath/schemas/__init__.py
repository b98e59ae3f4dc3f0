"""
learnpath Schemas - Pydantic models for the learning platform.

This module exports all schema classes for:
- Content: topics, lessons, quizzes, questions
- Progress: quiz answers and stored attempts
- Chat: tutor session messages
- Session: users and auth results
"""

# Content schemas
from .content import (
    EntityId,
    Lesson,
    Question,
    Quiz,
    Topic,
    normalize_options,
)

# Progress schemas
from .progress import (
    AttemptAnswer,
    QuizAttemptRecord,
)

# Chat schemas
from .chat import ChatMessage

# Session schemas
from .session import (
    User,
    AuthResult,
)

__all__ = [
    # Content
    'EntityId',
    'Lesson',
    'Question',
    'Quiz',
    'Topic',
    'normalize_options',
    # Progress
    'AttemptAnswer',
    'QuizAttemptRecord',
    # Chat
    'ChatMessage',
    # Session
    'User',
    'AuthResult',
]
