"""
learnpath - Topic-based learning platform

Streamlit application: sign in, browse topics, work through a gated
learning path of lessons and quizzes, chat with the tutor about each
lesson, and take multiple-choice quizzes.

Usage:
    streamlit run app.py
"""

import asyncio
import logging

import streamlit as st

from learnpath.api import UnauthorizedError
from learnpath.classroom import (
    AppState,
    AuthError,
    QuizState,
    QuizStateError,
    TimelineKind,
)
from learnpath.config import Settings
from learnpath.viewer import (
    NO_OPTIONS_MESSAGE,
    NO_QUESTIONS_MESSAGE,
    advance_label,
    calculate_quiz_score,
    completion_ratio,
    get_quiz_css,
    get_status_indicator,
    get_timeline_css,
    option_label,
    progress_text,
    render_answer_review,
    render_quiz_score,
    render_timeline_entry,
    render_topic_card,
)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

SETTINGS = Settings.from_env()

logging.basicConfig(
    level=SETTINGS.log_level,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="Learning Platform",
    page_icon="🎓",
    layout="centered",
)

PROTECTED_VIEWS = ("dashboard", "topic", "lesson", "quiz")


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "app" not in st.session_state:
        st.session_state.app = AppState(SETTINGS)

    if "view" not in st.session_state:
        st.session_state.view = "dashboard" if st.session_state.app.session.is_authenticated else "login"

    for key in ("topic_id", "lesson_id", "quiz_id", "quiz"):
        if key not in st.session_state:
            st.session_state[key] = None

    if "topics_loaded" not in st.session_state:
        st.session_state.topics_loaded = False

    if "register_mode" not in st.session_state:
        st.session_state.register_mode = False


def navigate(view: str, **params):
    """Switch screen and rerun."""
    st.session_state.view = view
    for key, value in params.items():
        st.session_state[key] = value
    st.rerun()


def run(coro):
    """
    Drive a coroutine to completion for this script run.

    A 401 anywhere sends the user back to the login screen.
    """
    try:
        return asyncio.run(coro)
    except UnauthorizedError:
        st.session_state.topics_loaded = False
        navigate("login")


# -----------------------------------------------------------------------------
# Login / Register
# -----------------------------------------------------------------------------

def render_login_view():
    """Render the login/register form."""
    app = st.session_state.app
    registering = st.session_state.register_mode

    st.title("Learning Platform")
    st.subheader("Create Account" if registering else "Welcome Back")

    if app.session_expired:
        st.warning("Your session has expired. Please log in again.")

    with st.form("auth_form"):
        username = st.text_input("Username", placeholder="Enter username")
        email = st.text_input("Email", placeholder="Enter email") if registering else ""
        password = st.text_input("Password", type="password", placeholder="Enter password")
        submitted = st.form_submit_button("Register" if registering else "Login", use_container_width=True)

    if submitted:
        try:
            with st.spinner("Please wait..."):
                if registering:
                    asyncio.run(app.session.register(username, email, password))
                else:
                    asyncio.run(app.session.login(username, password))
        except AuthError as e:
            st.error(str(e))
        else:
            app.session_expired = False
            st.session_state.topics_loaded = False
            navigate("dashboard")

    toggle = "Already have an account? Login" if registering else "Need an account? Register"
    if st.button(toggle):
        st.session_state.register_mode = not registering
        st.rerun()


# -----------------------------------------------------------------------------
# Dashboard
# -----------------------------------------------------------------------------

def render_dashboard_view():
    """Render topic list and topic creation."""
    app = st.session_state.app
    store = app.store

    col1, col2 = st.columns([4, 1])
    with col1:
        st.title(f"Welcome, {app.user.username}!")
    with col2:
        if st.button("Logout", use_container_width=True):
            app.logout()
            st.session_state.topics_loaded = False
            navigate("login")

    if not st.session_state.topics_loaded:
        with st.spinner("Loading topics..."):
            run(store.refresh_topics())
        st.session_state.topics_loaded = True

    render_add_topic()

    topics = store.topics
    if not topics:
        st.info("No topics yet. Create one to get started.")
        return

    st.markdown(get_timeline_css(), unsafe_allow_html=True)
    for topic in topics:
        st.markdown(render_topic_card(topic), unsafe_allow_html=True)
        st.progress(completion_ratio(topic))
        if st.button("Open topic", key=f"topic_{topic.id}", use_container_width=True):
            run(store.load_topic(topic.id))
            navigate("topic", topic_id=topic.id)


def render_add_topic():
    """Render the add-topic form."""
    app = st.session_state.app

    with st.expander("➕ Add new topic"):
        with st.form("add_topic", clear_on_submit=True):
            name = st.text_input("Topic name", placeholder="Enter topic name")
            description = st.text_area("Description", placeholder="What is this topic about?")
            submitted = st.form_submit_button("Create")

        if submitted:
            try:
                topic = run(app.store.add_topic(name, description))
            except ValueError as e:
                st.error(str(e))
                return
            if topic is None:
                st.error("Could not create the topic. Please try again.")
            else:
                st.rerun()


# -----------------------------------------------------------------------------
# Topic: Learning Path
# -----------------------------------------------------------------------------

def render_topic_view():
    """Render the topic timeline."""
    app = st.session_state.app
    store = app.store
    topic_id = st.session_state.topic_id

    if st.button("← Back to Dashboard"):
        st.session_state.topics_loaded = False
        navigate("dashboard")

    if not store.is_loaded(topic_id):
        run(store.load_topic(topic_id))

    topic = store.get_topic(topic_id)
    if topic is None:
        st.error("Topic not found")
        return

    st.title(topic.name)
    st.subheader("Learning Path")
    st.caption("Follow the path below to complete this topic")

    timeline = store.timeline(topic_id)
    if not timeline:
        st.info("This topic has no lessons or quizzes yet.")
        return

    st.markdown(get_timeline_css(), unsafe_allow_html=True)
    for entry in timeline:
        col1, col2, col3 = st.columns([1, 7, 2])
        with col1:
            st.markdown(f"### {get_status_indicator(entry)}")
        with col2:
            st.markdown(f"**{entry.payload.title}**")
            st.markdown(render_timeline_entry(entry), unsafe_allow_html=True)
        with col3:
            if st.button("Open", key=f"{entry.kind.value}_{entry.payload.id}", disabled=entry.locked):
                if entry.kind == TimelineKind.LESSON:
                    navigate("lesson", lesson_id=entry.payload.id)
                else:
                    quiz = run(store.load_quiz(topic_id, entry.payload.id))
                    app.reset_quiz(entry.payload.id)
                    navigate("quiz", quiz_id=entry.payload.id, quiz=quiz)


# -----------------------------------------------------------------------------
# Lesson: Tutor Chat
# -----------------------------------------------------------------------------

def render_lesson_view():
    """Render the lesson chat with the tutor."""
    app = st.session_state.app
    topic_id = st.session_state.topic_id

    if st.button("← Back to Topic"):
        navigate("topic")

    lesson = app.store.find_lesson(topic_id, st.session_state.lesson_id)
    if lesson is None:
        st.error("Lesson not found")
        return

    st.title(lesson.title)
    if lesson.content:
        with st.expander("Lesson notes"):
            st.markdown(lesson.content)

    chat = app.chat_for(lesson)
    with st.spinner("Starting the conversation..."):
        run(chat.enter())

    for message in chat.messages:
        with st.chat_message("user" if message.is_from_user else "assistant", avatar=None if message.is_from_user else "🎓"):
            st.markdown(message.text)

    prompt = st.chat_input("Type your message...")
    if prompt:
        with st.chat_message("user"):
            st.markdown(prompt)
        with st.chat_message("assistant", avatar="🎓"):
            with st.spinner("AI Tutor is typing..."):
                run(chat.send(prompt))
        st.rerun()

    st.divider()
    col1, col2 = st.columns(2)
    with col1:
        if st.button("I have understood everything", type="primary", use_container_width=True):
            run(app.store.complete_lesson(topic_id, lesson.id))
            navigate("topic")
    with col2:
        if st.button("Reset conversation", use_container_width=True):
            run(chat.reset())
            st.rerun()


# -----------------------------------------------------------------------------
# Quiz
# -----------------------------------------------------------------------------

def render_quiz_view():
    """Render the quiz runner."""
    app = st.session_state.app

    if st.button("← Back to Topic"):
        navigate("topic")

    quiz = st.session_state.quiz or app.store.find_quiz(st.session_state.topic_id, st.session_state.quiz_id)
    if quiz is None:
        st.error("Quiz not found")
        return

    st.title(quiz.title)
    runner = app.runner_for(quiz)

    if runner.state == QuizState.NO_QUESTIONS:
        st.info(NO_QUESTIONS_MESSAGE)
    elif runner.state == QuizState.ANSWERING:
        render_quiz_question(runner)
    else:
        render_quiz_result(runner)


def render_quiz_question(runner):
    """Render the current question with its options."""
    question = runner.current_question

    st.caption(progress_text(runner))
    st.subheader(question.question)

    if not question.has_options:
        st.warning(NO_OPTIONS_MESSAGE)

    for index, option in enumerate(question.options):
        selected = runner.selected_answer == index
        if st.button(
            f"{option_label(index)}. {option}",
            key=f"option_{question.id}_{index}",
            type="primary" if selected else "secondary",
            use_container_width=True,
        ):
            runner.select_answer(index)
            st.rerun()

    if st.button(advance_label(runner), disabled=not runner.can_advance, key=f"advance_{question.id}"):
        try:
            run(runner.advance())
        except QuizStateError as e:
            st.warning(str(e))
            return
        st.rerun()


def render_quiz_result(runner):
    """Render score, review and attempt history."""
    app = st.session_state.app

    st.subheader("Quiz Complete!")
    st.markdown(get_quiz_css(), unsafe_allow_html=True)
    st.markdown(render_quiz_score(calculate_quiz_score(runner.score, runner.total_questions)), unsafe_allow_html=True)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Try Again", use_container_width=True):
            runner.retry()
            st.rerun()
    with col2:
        if st.button("Back to Topic", type="primary", use_container_width=True):
            navigate("topic")

    st.subheader("Review Your Answers")
    st.markdown(render_answer_review(runner.review()), unsafe_allow_html=True)

    with st.expander("Past attempts"):
        attempts = run(app.store.quiz_attempts(runner.quiz.id)) or []
        if not attempts:
            st.caption("No saved attempts yet.")
        for attempt in attempts:
            when = attempt.completed_at.strftime("%b %d, %H:%M") if attempt.completed_at else "-"
            st.markdown(f"- {when}: **{attempt.score}/{attempt.total_questions}** ({attempt.percentage:.0f}%)")


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    app = st.session_state.app

    # protected screens need a signed-in user
    if st.session_state.view in PROTECTED_VIEWS and not app.session.is_authenticated:
        st.session_state.view = "login"

    view = st.session_state.view
    if view == "login":
        render_login_view()
    elif view == "dashboard":
        render_dashboard_view()
    elif view == "topic":
        render_topic_view()
    elif view == "lesson":
        render_lesson_view()
    elif view == "quiz":
        render_quiz_view()


if __name__ == "__main__":
    main()
