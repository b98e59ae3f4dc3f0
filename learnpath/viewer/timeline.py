"""
Timeline renderer - Learning path and topic card display.

Provides:
- Status markers for timeline entries
- Locked-entry hints
- Topic summary cards for the dashboard
"""

import html

from learnpath.classroom import TimelineEntry, TimelineKind
from learnpath.schemas import Topic


def get_timeline_css() -> str:
    """Get CSS styles for the learning path."""
    return """
    <style>
    .timeline-badge {
        display: inline-block;
        font-size: 0.8em;
        font-weight: 600;
        padding: 0.1em 0.6em;
        border-radius: 10px;
        margin-bottom: 0.3em;
    }
    .lesson-badge {
        background: #e3f2fd;
        color: #1565C0;
    }
    .quiz-badge {
        background: #fff3e0;
        color: #e65100;
    }
    .status-text {
        font-size: 0.85em;
        color: #388E3C;
    }
    .locked-text {
        color: #999;
    }
    .topic-card {
        background: #fafafa;
        border: 1px solid #eee;
        border-radius: 12px;
        padding: 1em 1.2em;
        margin-bottom: 0.5em;
    }
    .topic-card-stats {
        color: #666;
        font-size: 0.9em;
    }
    </style>
    """


def get_status_indicator(entry: TimelineEntry) -> str:
    """
    Get marker for an entry.

    Returns:
        ✓ for completed lessons
        🔒 for locked entries
        step number for open lessons
        ? for open quizzes
    """
    if entry.kind == TimelineKind.LESSON and entry.payload.completed:
        return "✓"
    if entry.locked:
        return "🔒"
    if entry.kind == TimelineKind.LESSON:
        return str(entry.position + 1)
    return "?"


def get_locked_hint(entry: TimelineEntry) -> str:
    if entry.kind == TimelineKind.LESSON:
        return "Complete previous items first"
    return "Complete previous lessons first"


def render_timeline_entry(entry: TimelineEntry) -> str:
    """Render the body of a timeline entry (badge, status line, quiz size)."""
    parts = []
    if entry.kind == TimelineKind.LESSON:
        parts.append('<span class="timeline-badge lesson-badge">📚 Lesson</span>')
        if entry.payload.completed:
            parts.append('<div class="status-text">Completed</div>')
    else:
        parts.append('<span class="timeline-badge quiz-badge">🎯 Quiz</span>')
        count = entry.payload.total_questions
        parts.append(f'<div class="topic-card-stats">{count} question{"" if count == 1 else "s"}</div>')

    if entry.locked:
        parts.append(f'<div class="status-text locked-text">{get_locked_hint(entry)}</div>')
    return ''.join(parts)


def render_topic_card(topic: Topic) -> str:
    """Render a dashboard card with lesson/quiz counts and completion."""
    parts = ['<div class="topic-card">']
    parts.append(f'<h3>{html.escape(topic.name)}</h3>')
    if topic.description:
        parts.append(f'<p>{html.escape(topic.description)}</p>')
    parts.append('<div class="topic-card-stats">')
    parts.append(f'{topic.total_lessons} lessons &middot; {topic.total_quizzes} quizzes &middot; ')
    parts.append(f'{topic.completed_lessons} / {topic.total_lessons} completed')
    parts.append('</div></div>')
    return ''.join(parts)


def completion_ratio(topic: Topic) -> float:
    """Share of lessons completed, 0.0 for a topic without lessons."""
    if topic.total_lessons == 0:
        return 0.0
    return topic.completed_lessons / topic.total_lessons
