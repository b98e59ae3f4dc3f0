"""
learnpath API - Async client for the learning platform backend.

This module provides:
- ApiClient: httpx wrapper with bearer auth and 401 handling
- Resource groups: auth, topics, lessons, quizzes, chat
"""

from .client import (
    ApiClient,
    ApiError,
    UnauthorizedError,
    BearerTokenAuth,
)

from .resources import (
    AuthAPI,
    TopicsAPI,
    LessonsAPI,
    QuizAPI,
    ChatAPI,
    unwrap,
)

__all__ = [
    # Client
    "ApiClient",
    "ApiError",
    "UnauthorizedError",
    "BearerTokenAuth",
    # Resources
    "AuthAPI",
    "TopicsAPI",
    "LessonsAPI",
    "QuizAPI",
    "ChatAPI",
    "unwrap",
]
