"""
Tests for the question bank loader.
"""

import json

import httpx
import pytest

from trivia_quiz.errors import LoadError
from trivia_quiz.loader import QuestionStore, is_url


URL = "https://quiz.example.com/quiz_questions.json"


def json_transport(payload, status_code: int = 200) -> httpx.MockTransport:
    """Transport that answers every request with a JSON payload."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)
    return httpx.MockTransport(handler)


class TestIsUrl:
    """Tests for source detection."""

    def test_detection(self):
        """HTTP(S) sources are URLs, everything else a path."""
        assert is_url(URL)
        assert is_url("http://localhost:8000/quiz_questions.json")
        assert not is_url("quiz_questions.json")
        assert not is_url("/srv/quiz/questions.json")


class TestFileLoading:
    """Tests for loading from disk."""

    @pytest.mark.asyncio
    async def test_load(self, tmp_path, question_dicts):
        """Test loading a valid file."""
        path = tmp_path / "quiz_questions.json"
        path.write_text(json.dumps(question_dicts))

        store = QuestionStore(str(path))
        questions = await store.load()

        assert len(questions) == 4
        assert store.loaded
        assert store.questions == questions

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        """Missing files are a LoadError."""
        store = QuestionStore(str(tmp_path / "nope.json"))

        with pytest.raises(LoadError) as exc:
            await store.load()

        assert exc.value.source == store.source

    @pytest.mark.asyncio
    async def test_bad_json(self, tmp_path):
        """Unparseable files are a LoadError."""
        path = tmp_path / "bad.json"
        path.write_text("[{")

        with pytest.raises(LoadError):
            await QuestionStore(str(path)).load()

    @pytest.mark.asyncio
    async def test_wrong_shape(self, tmp_path):
        """Objects missing fields are a LoadError."""
        path = tmp_path / "shape.json"
        path.write_text(json.dumps([{"question": "Only a question"}]))

        with pytest.raises(LoadError):
            await QuestionStore(str(path)).load()

    @pytest.mark.asyncio
    async def test_empty_bank(self, tmp_path):
        """An empty array is a LoadError."""
        path = tmp_path / "empty.json"
        path.write_text("[]")

        with pytest.raises(LoadError):
            await QuestionStore(str(path)).load()

    @pytest.mark.asyncio
    async def test_unmatched_answers_still_load(self, tmp_path, question_dicts):
        """Answer mismatches surface at evaluation time, not load time."""
        question_dicts[0]["answer"] = "Nowhere"
        path = tmp_path / "quiz_questions.json"
        path.write_text(json.dumps(question_dicts))

        questions = await QuestionStore(str(path)).load()
        assert questions[0].answer == "Nowhere"

    def test_questions_before_load(self):
        """Reading questions before load() is an error."""
        with pytest.raises(LoadError):
            QuestionStore("quiz_questions.json").questions


class TestHttpLoading:
    """Tests for loading over HTTP."""

    @pytest.mark.asyncio
    async def test_load(self, question_dicts):
        """Test a successful fetch."""
        store = QuestionStore(URL, transport=json_transport(question_dicts))
        questions = await store.load()

        assert [q.question for q in questions] == ["Q1?", "Q2?", "Q3?", "Q4?"]

    @pytest.mark.asyncio
    async def test_loads_once(self, question_dicts):
        """The bank is fetched only once per store."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url)
            return httpx.Response(200, json=question_dicts)

        store = QuestionStore(URL, transport=httpx.MockTransport(handler))
        await store.load()
        await store.load()

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_http_error(self):
        """Error statuses are a LoadError with the status in the message."""
        store = QuestionStore(URL, transport=json_transport({"error": "gone"}, 404))

        with pytest.raises(LoadError) as exc:
            await store.load()

        assert "404" in str(exc.value)

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Connection failures are a LoadError."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        store = QuestionStore(URL, transport=httpx.MockTransport(handler))

        with pytest.raises(LoadError):
            await store.load()

    @pytest.mark.asyncio
    async def test_not_an_array(self):
        """A JSON object body is a LoadError."""
        store = QuestionStore(URL, transport=json_transport({"questions": []}))

        with pytest.raises(LoadError):
            await store.load()
