"""Tests for AI question generation (the LLM itself is always mocked)."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from conftest import make_questions
from quizlink.schemas.question_bank_schema import QuestionGenerationRequest
from quizlink.services import ai_service as ai_service_module
from quizlink.services.ai_service import AIConfigurationError, QuestionGenerationError, ai_service
from quizlink.services.question_generation.graph import generate_questions, validate_questions
from quizlink.services.question_generation.state import GeneratedQuestion, GeneratedQuestionSet, State


def raw(question="What is 2 + 2?", options=None, correct_answer=1, explanation=""):
    return GeneratedQuestion(
        question=question,
        options=options if options is not None else ["3", "4", "5", "22"],
        correct_answer=correct_answer,
        explanation=explanation,
    )


def request(count=2):
    return QuestionGenerationRequest(
        job_role="Backend Developer", category="math", difficulty="easy", count=count)


class TestValidateQuestions:

    def test_keeps_well_formed_questions(self):
        state = State(category="math", difficulty="easy", count=5,
                      raw_questions=[raw(explanation="Basic addition.")])

        result = validate_questions(state)

        assert "error" not in result
        [question] = result["questions"]
        assert question.text == "What is 2 + 2?"
        assert question.correct_answer == 1
        assert question.category == "math"
        assert question.difficulty == "easy"
        assert question.explanation == "Basic addition."

    def test_drops_malformed_questions(self):
        state = State(category="math", difficulty="easy", count=5, raw_questions=[
            raw(),
            raw(options=["a", "b", "c"]),
            raw(options=["a", "b", "", "d"]),
            raw(correct_answer=4),
            raw(correct_answer=-1),
            raw(question="   "),
        ])

        result = validate_questions(state)

        assert len(result["questions"]) == 1

    def test_trims_to_requested_count(self):
        state = State(category="math", difficulty="easy", count=2,
                      raw_questions=[raw(), raw(), raw()])

        assert len(validate_questions(state)["questions"]) == 2

    def test_nothing_usable_is_an_error(self):
        state = State(category="math", difficulty="easy", raw_questions=[raw(correct_answer=7)])

        result = validate_questions(state)

        assert result["questions"] == []
        assert result["error"] == "No valid questions were generated"

    def test_previous_error_passes_through(self):
        state = State(error="rate limited", raw_questions=[raw()])

        assert validate_questions(state) == {"questions": []}


class TestGenerateQuestions:

    def test_structured_output(self):
        llm = MagicMock()
        llm.with_structured_output.return_value.invoke.return_value = GeneratedQuestionSet(
            questions=[raw()])

        with patch("quizlink.services.question_generation.graph.get_llm", return_value=llm):
            result = generate_questions(State(job_role="Backend Developer", category="math",
                                              difficulty="easy", count=1))

        assert result["error"] is None
        assert result["raw_questions"][0].question == "What is 2 + 2?"
        messages = llm.with_structured_output.return_value.invoke.call_args.args[0]
        assert "Backend Developer" in messages[1]["content"]

    def test_llm_failure_recorded(self):
        llm = MagicMock()
        llm.with_structured_output.return_value.invoke.side_effect = RuntimeError("timeout")

        with patch("quizlink.services.question_generation.graph.get_llm", return_value=llm):
            result = generate_questions(State(job_role="x", category="y", difficulty="z"))

        assert result == {"raw_questions": [], "error": "timeout"}


class TestAIService:

    @pytest.mark.asyncio
    async def test_requires_api_key(self, monkeypatch):
        monkeypatch.setattr(ai_service_module.settings, "OPENAI_API_KEY", "")

        with pytest.raises(AIConfigurationError):
            await ai_service.generate_questions(request())

    @pytest.mark.asyncio
    async def test_returns_graph_questions(self, monkeypatch):
        graph = MagicMock()
        graph.ainvoke = AsyncMock(return_value={"questions": make_questions(2), "error": None})
        monkeypatch.setattr(ai_service_module.settings, "OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(ai_service_module, "question_generation_graph", graph)

        questions = await ai_service.generate_questions(request())

        assert [q.id for q in questions] == ["q1", "q2"]
        state = graph.ainvoke.await_args.args[0]
        assert state.job_role == "Backend Developer"
        assert state.count == 2

    @pytest.mark.asyncio
    async def test_graph_error_raised(self, monkeypatch):
        graph = MagicMock()
        graph.ainvoke = AsyncMock(return_value={"questions": [], "error": "No valid questions were generated"})
        monkeypatch.setattr(ai_service_module.settings, "OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(ai_service_module, "question_generation_graph", graph)

        with pytest.raises(QuestionGenerationError):
            await ai_service.generate_questions(request())


class TestGenerateEndpoint:

    @pytest.mark.asyncio
    async def test_unconfigured(self, client, admin_headers, monkeypatch):
        monkeypatch.setattr(ai_service_module.settings, "OPENAI_API_KEY", "")

        response = await client.post(
            "/api/ai/generate-questions",
            json={"job_role": "Backend Developer", "category": "math", "difficulty": "easy", "count": 2},
            headers=admin_headers)

        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_generation_failure(self, client, admin_headers, monkeypatch):
        graph = MagicMock()
        graph.ainvoke = AsyncMock(return_value={"questions": [], "error": "boom"})
        monkeypatch.setattr(ai_service_module.settings, "OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(ai_service_module, "question_generation_graph", graph)

        response = await client.post(
            "/api/ai/generate-questions",
            json={"job_role": "Backend Developer", "category": "math", "difficulty": "easy", "count": 2},
            headers=admin_headers)

        assert response.status_code == 502

    @pytest.mark.asyncio
    async def test_generated(self, client, admin_headers, monkeypatch):
        graph = MagicMock()
        graph.ainvoke = AsyncMock(return_value={"questions": make_questions(2), "error": None})
        monkeypatch.setattr(ai_service_module.settings, "OPENAI_API_KEY", "sk-test")
        monkeypatch.setattr(ai_service_module, "question_generation_graph", graph)

        response = await client.post(
            "/api/ai/generate-questions",
            json={"job_role": "Backend Developer", "category": "math", "difficulty": "easy", "count": 2},
            headers=admin_headers)

        assert response.status_code == 200
        assert [q["correct_answer"] for q in response.json()] == [0, 1]
