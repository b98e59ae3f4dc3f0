"""HTTP client tests against a fake backend."""

import httpx
import pytest

from learnpath.api import ApiClient, ApiError, UnauthorizedError, unwrap
from learnpath.schemas import AttemptAnswer
from learnpath.storage import TOKEN_KEY, USER_KEY

from conftest import API_URL


class TestUnwrap:
    def test_bare_payload(self):
        assert unwrap([1, 2], "topics") == [1, 2]

    def test_named_envelope(self):
        assert unwrap({"topics": [1]}, "topics") == [1]

    def test_data_envelope(self):
        assert unwrap({"data": {"id": 1}}, "topic") == {"id": 1}

    def test_record_without_envelope(self):
        assert unwrap({"id": 1, "name": "x"}, "topic") == {"id": 1, "name": "x"}

    def test_scalar_field_is_not_an_envelope(self):
        record = {"id": 8, "question": "Q", "options": ["a"]}
        assert unwrap(record, "question") is record


class TestAuthorization:
    @pytest.mark.asyncio
    async def test_bearer_token_injected(self, api, backend, storage):
        storage.set_item(TOKEN_KEY, "secret-token")
        backend.add("GET", "/topics", body=[])

        await api.topics.get_all()

        assert backend.requests[-1].headers["Authorization"] == "Bearer secret-token"

    @pytest.mark.asyncio
    async def test_no_token_no_header(self, api, backend):
        backend.add("GET", "/topics", body=[])
        await api.topics.get_all()
        assert "Authorization" not in backend.requests[-1].headers

    @pytest.mark.asyncio
    async def test_token_read_at_send_time(self, api, backend, storage):
        backend.add("GET", "/topics", body=[])
        await api.topics.get_all()
        storage.set_item(TOKEN_KEY, "late-token")
        await api.topics.get_all()
        assert backend.requests[-1].headers["Authorization"] == "Bearer late-token"

    @pytest.mark.asyncio
    async def test_401_forces_logout(self, backend, storage):
        calls = []
        api = ApiClient(API_URL, storage, transport=backend.transport, on_unauthorized=lambda: calls.append(1))
        storage.set_item(TOKEN_KEY, "expired")
        storage.set_item(USER_KEY, {"username": "ada"})
        backend.add("GET", "/topics", status=401, body={"error": "Token expired"})

        with pytest.raises(UnauthorizedError) as exc:
            await api.topics.get_all()

        assert exc.value.status_code == 401
        assert storage.get_item(TOKEN_KEY) is None
        assert storage.get_item(USER_KEY) is None
        assert calls == [1]


class TestErrors:
    @pytest.mark.asyncio
    async def test_error_message_from_body(self, api, backend):
        backend.add("POST", "/topics", status=400, body={"error": "Name already taken"})
        with pytest.raises(ApiError) as exc:
            await api.topics.create("React")
        assert exc.value.message == "Name already taken"
        assert exc.value.status_code == 400
        assert not isinstance(exc.value, UnauthorizedError)

    @pytest.mark.asyncio
    async def test_error_without_body(self, api, backend):
        backend.add("GET", "/topics/1", status=500)
        with pytest.raises(ApiError) as exc:
            await api.topics.get(1)
        assert "500" in exc.value.message

    @pytest.mark.asyncio
    async def test_transport_failure(self, api, backend):
        backend.add("GET", "/topics", body=httpx.ConnectError("connection refused"))
        with pytest.raises(ApiError) as exc:
            await api.topics.get_all()
        assert exc.value.status_code is None

    @pytest.mark.asyncio
    async def test_empty_body_returns_none(self, api, backend):
        backend.add("POST", "/lessons/3/complete", status=204)
        assert await api.lessons.complete(3) is None


class TestResources:
    @pytest.mark.asyncio
    async def test_topic_detail_parsed_in_order(self, api, backend):
        backend.add("GET", "/topics/1", body={"topic": {
            "id": 1,
            "name": "React",
            "lessons": [
                {"id": 2, "title": "JSX", "order_index": 1},
                {"id": 1, "title": "Intro", "order_index": 0, "completed": True},
            ],
            "quizzes": [{"id": 9, "title": "Quiz", "questions": []}],
        }})

        topic = await api.topics.get(1)

        assert [lesson.title for lesson in topic.lessons] == ["Intro", "JSX"]
        assert topic.lessons[0].completed is True
        assert topic.quizzes[0].id == 9

    @pytest.mark.asyncio
    async def test_quiz_with_encoded_options(self, api, backend):
        backend.add("GET", "/quiz/4", body={
            "id": 4,
            "title": "JS Quiz",
            "questions": [{
                "id": 1,
                "question": "Which keyword is used to declare a constant?",
                "options": '["var", "let", "const", "static"]',
                "correct_answer": 2,
            }],
        })

        quiz = await api.quizzes.get(4)

        assert quiz.questions[0].options[2] == "const"

    @pytest.mark.asyncio
    async def test_submit_payload(self, api, backend):
        backend.add("POST", "/quiz/4/submit", status=201, body={
            "attempt": {"id": 77, "score": 1, "total_questions": 1,
                        "answers": [{"question_id": 1, "selected_answer": 2, "is_correct": True}]},
        })

        record = await api.quizzes.submit(4, [AttemptAnswer(question_id=1, selected_answer=2, is_correct=True)])

        assert backend.last_json() == {"answers": [{"questionId": 1, "selectedAnswer": 2}]}
        assert record.id == 77
        assert record.answers[0].is_correct is True

    @pytest.mark.asyncio
    async def test_chat_messages_paging_params(self, api, backend):
        backend.add("GET", "/chat/lesson/3/messages", body=[])
        await api.chat.messages(3, limit=20, offset=40)
        params = backend.requests[-1].url.params
        assert params["limit"] == "20"
        assert params["offset"] == "40"

    @pytest.mark.asyncio
    async def test_create_lesson_payload(self, api, backend):
        backend.add("POST", "/lessons/topic/1/lessons", status=201, body={"id": 5, "title": "Hooks"})
        lesson = await api.lessons.create(1, "Hooks", "useState and friends", 3)
        assert backend.last_json() == {"title": "Hooks", "content": "useState and friends", "order_index": 3}
        assert lesson.id == 5

    @pytest.mark.asyncio
    async def test_add_question_payload(self, api, backend):
        backend.add("POST", "/quiz/4/question", status=201, body={
            "id": 8, "question": "Q", "options": ["a", "b"], "correct_answer": 1,
        })
        question = await api.quizzes.add_question(4, "Q", ["a", "b"], 1, 0)
        assert backend.last_json()["correct_answer"] == 1
        assert question.options == ["a", "b"]
