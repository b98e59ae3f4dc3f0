"""
learnpath Viewer - Rendering helpers for the Streamlit app.

This module provides:
- Learning path markers and topic cards
- Quiz progress, score and answer review display
"""

from .timeline import (
    get_timeline_css,
    get_status_indicator,
    get_locked_hint,
    render_timeline_entry,
    render_topic_card,
    completion_ratio,
)

from .quiz import (
    get_quiz_css,
    option_label,
    progress_text,
    advance_label,
    calculate_quiz_score,
    render_quiz_score,
    render_review_item,
    render_answer_review,
    NO_QUESTIONS_MESSAGE,
    NO_OPTIONS_MESSAGE,
)

__all__ = [
    # Timeline
    "get_timeline_css",
    "get_status_indicator",
    "get_locked_hint",
    "render_timeline_entry",
    "render_topic_card",
    "completion_ratio",
    # Quiz
    "get_quiz_css",
    "option_label",
    "progress_text",
    "advance_label",
    "calculate_quiz_score",
    "render_quiz_score",
    "render_review_item",
    "render_answer_review",
    "NO_QUESTIONS_MESSAGE",
    "NO_OPTIONS_MESSAGE",
]
