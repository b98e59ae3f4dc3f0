"""
Quiz renderer - Multiple-choice quiz display helpers.

Provides:
- Option labels and progress text
- Score calculation and score box
- Answer review after completion
"""

import html
import string

from learnpath.classroom import QuizRunner, ReviewItem


NO_QUESTIONS_MESSAGE = "No questions available for this quiz yet."
NO_OPTIONS_MESSAGE = "No options available for this question."


def get_quiz_css() -> str:
    """Get CSS styles for quiz result display."""
    return """
    <style>
    .quiz-score-box {
        background: #e8f5e9;
        border-radius: 12px;
        padding: 1.5em;
        margin: 1em 0;
        text-align: center;
    }
    .quiz-score-value {
        font-size: 2.5em;
        font-weight: 700;
        color: #388E3C;
    }
    .quiz-score-label {
        color: #666;
        font-size: 0.95em;
    }
    .review-item {
        border-radius: 8px;
        padding: 0.8em 1em;
        margin: 0.6em 0;
        border-left: 4px solid;
    }
    .review-item.correct {
        background: #e8f5e9;
        border-color: #388E3C;
    }
    .review-item.incorrect {
        background: #ffebee;
        border-color: #C62828;
    }
    .review-question {
        font-weight: 600;
        margin-bottom: 0.3em;
    }
    .correct-answer {
        color: #388E3C;
    }
    </style>
    """


def option_label(index: int) -> str:
    """Letter label for an option position (0 -> A)."""
    if 0 <= index < len(string.ascii_uppercase):
        return string.ascii_uppercase[index]
    return str(index + 1)


def progress_text(runner: QuizRunner) -> str:
    return f"Question {runner.question_index + 1} of {runner.total_questions}"


def advance_label(runner: QuizRunner) -> str:
    return "Finish Quiz" if runner.is_last_question else "Next Question"


def calculate_quiz_score(correct_count: int, total: int) -> dict:
    """
    Calculate quiz score.

    Args:
        correct_count: Number answered correctly
        total: Number of questions

    Returns:
        Dict with score info
    """
    if total == 0:
        return {"score": 0.0, "percent": 0, "correct": 0, "total": 0}

    score = correct_count / total
    return {
        "score": round(score, 2),
        "percent": round(score * 100),
        "correct": correct_count,
        "total": total,
    }


def render_quiz_score(score_info: dict) -> str:
    """Render quiz score display."""
    return f"""
    <div class="quiz-score-box">
        <div class="quiz-score-value">{score_info['percent']}%</div>
        <div class="quiz-score-label">You got {score_info['correct']} out of {score_info['total']} questions correct</div>
    </div>
    """


def render_review_item(item: ReviewItem) -> str:
    """Render one reviewed question with the learner's answer."""
    status = "correct" if item.is_correct else "incorrect"
    selected = item.selected_text if item.selected_text is not None else "No answer"

    parts = [f'<div class="review-item {status}">']
    parts.append(f'<div class="review-question">{item.number}. {html.escape(item.question.question)}</div>')
    parts.append(f'<div class="review-answer">Your answer: {html.escape(selected)}')
    if not item.is_correct and item.correct_text is not None:
        parts.append(f' <span class="correct-answer">(Correct: {html.escape(item.correct_text)})</span>')
    parts.append('</div></div>')
    return ''.join(parts)


def render_answer_review(items: list[ReviewItem]) -> str:
    """Render the full answer review, or an empty string when there is nothing to show."""
    if not items:
        return ""
    return ''.join(render_review_item(item) for item in items)
